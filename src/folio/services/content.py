"""ContentService — the operations the CLI exposes, as ServiceResults.

Wires settings to the loader, parser, transform and like reconciler.
The async core is driven with ``asyncio.run`` so commands stay plain
synchronous functions.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Callable, Sequence
from datetime import date as _date
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from folio.domain.documents import Document, filter_by_tag, find_document, slug_from_name
from folio.domain.frontmatter import HeaderFields, render_frontmatter
from folio.domain.likes import LikeSnapshot, LikeState
from folio.domain.types import CollectionName, Theme
from folio.infrastructure.like_cache import FileLikeCache, LikeCacheStore
from folio.infrastructure.like_client import LikeApiClient
from folio.infrastructure.markdown import MarkdownParser
from folio.infrastructure.sources import (
    SourceRegistry,
    collection_dir,
    discover_sources,
    write_source,
)
from folio.infrastructure.templates import build_template_environment
from folio.services.likes import LikeController, LikeReconciler
from folio.services.loader import DocumentLoader, SourceReadError
from folio.services.result import ServiceResult
from folio.services.transform import StructuralMarkdownTransform

if TYPE_CHECKING:
    from folio.config.settings import FolioSettings

log = structlog.get_logger(__name__)

ClientFactory = Callable[[], LikeApiClient]

_SLUG_UNSAFE = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    """Lowercase, dash-separated slug for a new document.

    Examples:
        >>> slugify("Hello, World!")
        'hello-world'
    """
    return _SLUG_UNSAFE.sub("-", title.lower()).strip("-")


def _summary(doc: Document) -> dict[str, Any]:
    return {
        "slug": doc.slug,
        "title": doc.title,
        "date": doc.date,
        "description": doc.description,
        "tags": list(doc.tags),
    }


class ContentService:
    """Document, rendering and like operations for one site root."""

    def __init__(
        self,
        settings: FolioSettings,
        *,
        registry: SourceRegistry | None = None,
        like_cache: LikeCacheStore | None = None,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._settings = settings
        self._registry = registry
        self._discover = registry is None
        self._like_cache = like_cache
        self._client_factory = client_factory
        self._parser = MarkdownParser(math=settings.render.math, gfm=settings.render.gfm)

    # --- Wiring ---

    @property
    def registry(self) -> SourceRegistry:
        if self._registry is None:
            self._registry = discover_sources(
                self._settings.content_root, self._settings.content.collections
            )
        return self._registry

    @property
    def like_cache(self) -> LikeCacheStore:
        if self._like_cache is None:
            self._like_cache = FileLikeCache(self._settings.like_cache_path)
        return self._like_cache

    def _new_client(self) -> LikeApiClient:
        if self._client_factory is not None:
            return self._client_factory()
        return LikeApiClient(self._settings.likes.base_url, timeout=self._settings.likes.timeout)

    def _transform(self, theme: Theme | None) -> StructuralMarkdownTransform:
        return StructuralMarkdownTransform(
            theme or self._settings.render.theme,
            site_root=self._settings.site_root,
        )

    def _load(self, collection: CollectionName) -> list[Document]:
        return asyncio.run(DocumentLoader(self.registry).load(collection))

    # --- Documents ---

    def list_documents(
        self,
        collection: CollectionName,
        *,
        tag: str | None = None,
        limit: int | None = None,
    ) -> ServiceResult:
        op = "list_documents"
        try:
            documents = self._load(collection)
        except SourceReadError as exc:
            return ServiceResult.failure(op, "LOAD_FAILED", str(exc), source=exc.name)

        if tag:
            documents = filter_by_tag(documents, tag)
        if limit is not None:
            documents = documents[:limit]

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "collection": collection.value,
                "count": len(documents),
                "items": [_summary(doc) for doc in documents],
            },
        )

    def get_document(self, collection: CollectionName, slug: str) -> ServiceResult:
        op = "get_document"
        try:
            doc = find_document(self._load(collection), slug)
        except SourceReadError as exc:
            return ServiceResult.failure(op, "LOAD_FAILED", str(exc), source=exc.name)
        if doc is None:
            return ServiceResult.failure(
                op, "NOT_FOUND", f"No {collection.value} document {slug!r}", slug=slug
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={**_summary(doc), "collection": collection.value, "body": doc.body},
        )

    def render_document(
        self,
        collection: CollectionName,
        slug: str,
        *,
        theme: Theme | None = None,
    ) -> ServiceResult:
        op = "render_document"
        try:
            doc = find_document(self._load(collection), slug)
        except SourceReadError as exc:
            return ServiceResult.failure(op, "LOAD_FAILED", str(exc), source=exc.name)
        if doc is None:
            return ServiceResult.failure(
                op, "NOT_FOUND", f"No {collection.value} document {slug!r}", slug=slug
            )

        html = self._transform(theme).render(self._parser.parse(doc.body))
        return ServiceResult(
            ok=True,
            op=op,
            data={"slug": doc.slug, "title": doc.title, "html": str(html)},
        )

    def new_document(
        self,
        collection: CollectionName,
        title: str,
        *,
        slug: str | None = None,
        date: str | None = None,
        description: str | None = None,
        tags: Sequence[str] = (),
        body: str = "",
    ) -> ServiceResult:
        op = "new_document"
        doc_slug = slug_from_name(slug) if slug else slugify(title)
        if not doc_slug:
            return ServiceResult.failure(op, "INVALID_SLUG", f"Cannot derive a slug from {title!r}")

        path = collection_dir(self._settings.content_root, collection) / f"{doc_slug}.md"
        if path.exists():
            return ServiceResult.failure(
                op, "ALREADY_EXISTS", f"{path} already exists", path=str(path)
            )

        header = HeaderFields(
            title=title,
            date=date or _date.today().isoformat(),
            description=description,
            tags=list(tags),
        )
        try:
            text = render_frontmatter(header, body)
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_HEADER", str(exc))

        write_source(path, text)
        if self._discover:
            self._registry = None
        log.info("document.created", collection=collection.value, slug=doc_slug)
        return ServiceResult(
            ok=True,
            op=op,
            data={"collection": collection.value, "slug": doc_slug, "path": str(path)},
        )

    def build_site(self, out_dir: Path, *, theme: Theme | None = None) -> ServiceResult:
        """Render every collection to ``<out_dir>/<collection>/<slug>.html``."""
        op = "build_site"
        try:
            loaded = asyncio.run(DocumentLoader(self.registry).load_all())
        except SourceReadError as exc:
            return ServiceResult.failure(op, "LOAD_FAILED", str(exc), source=exc.name)

        transform = self._transform(theme)
        env = build_template_environment("site", site_root=self._settings.site_root)
        page_template = env.get_template("page.html.j2")
        index_template = env.get_template("index.html.j2")
        theme_value = transform.theme.value

        counts: dict[str, int] = {}
        for collection, documents in loaded.items():
            target = out_dir / collection.value
            target.mkdir(parents=True, exist_ok=True)
            for doc in documents:
                body = transform.render(self._parser.parse(doc.body))
                page = page_template.render(doc=doc, body=body, theme=theme_value)
                (target / f"{doc.slug}.html").write_text(page, encoding="utf-8")
            index = index_template.render(
                collection=collection, documents=documents, theme=theme_value
            )
            (target / "index.html").write_text(index, encoding="utf-8")
            counts[collection.value] = len(documents)

        return ServiceResult(
            ok=True,
            op=op,
            data={"out_dir": str(out_dir), "pages": sum(counts.values()), "collections": counts},
        )

    # --- Likes ---

    def like_status(self, collection: CollectionName, slugs: Sequence[str]) -> ServiceResult:
        op = "like_status"
        try:
            documents = self._load(collection)
        except SourceReadError as exc:
            return ServiceResult.failure(op, "LOAD_FAILED", str(exc), source=exc.name)

        warnings: list[str] = []
        found: list[Document] = []
        for slug in slugs:
            doc = find_document(documents, slug)
            if doc is None:
                warnings.append(f"No {collection.value} document {slug!r}")
            else:
                found.append(doc)

        snapshots = asyncio.run(self._fetch_snapshots([doc.like_id for doc in found]))
        items = [
            {
                "id": doc.like_id,
                "slug": doc.slug,
                "likes": snapshots[doc.like_id].likes,
                "liked_by_me": snapshots[doc.like_id].liked_by_me,
            }
            for doc in found
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={"count": len(items), "items": items},
            warnings=warnings,
        )

    def toggle_like(
        self,
        collection: CollectionName,
        slug: str,
        *,
        liked: bool | None = None,
    ) -> ServiceResult:
        """Like, unlike, or (``liked=None``) flip the current liked state."""
        op = "toggle_like"
        try:
            doc = find_document(self._load(collection), slug)
        except SourceReadError as exc:
            return ServiceResult.failure(op, "LOAD_FAILED", str(exc), source=exc.name)
        if doc is None:
            return ServiceResult.failure(
                op, "NOT_FOUND", f"No {collection.value} document {slug!r}", slug=slug
            )

        before, after, confirmed = asyncio.run(self._toggle(doc.like_id, liked))
        if not confirmed:
            return ServiceResult.failure(
                op,
                "LIKE_FAILED",
                "Like service unavailable; nothing changed",
                id=doc.like_id,
                likes=before.count,
                liked_by_me=before.liked,
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": doc.like_id, "likes": after.count, "liked_by_me": after.liked},
        )

    async def _fetch_snapshots(self, ids: list[str]) -> dict[str, LikeSnapshot]:
        async with self._new_client() as client:
            return await LikeReconciler(client, self.like_cache).fetch_snapshots(ids)

    async def _toggle(self, like_id: str, liked: bool | None) -> tuple[LikeState, LikeState, bool]:
        async with self._new_client() as client:
            controller = LikeController(LikeReconciler(client, self.like_cache))
            states = await controller.refresh([like_id])
            before = states[like_id]
            if liked is not None and before.liked == liked:
                return before, before, True
            after = await controller.toggle(like_id)
            return before, after, after.liked != before.liked
