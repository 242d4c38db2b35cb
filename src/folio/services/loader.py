"""DocumentLoader — turn a collection's raw sources into sorted Documents.

Every source is read concurrently and parsed independently; nothing is
shared between them. Completion order is irrelevant because the result
is always sorted afterwards (newest first, stable on equal dates).
"""

from __future__ import annotations

import asyncio

import structlog

from folio.domain.documents import Document, document_from_source, sort_documents
from folio.domain.types import CollectionName
from folio.infrastructure.sources import RawSource, SourceRegistry

log = structlog.get_logger(__name__)


class SourceReadError(Exception):
    """A raw source could not be read."""

    def __init__(self, name: str, cause: Exception) -> None:
        super().__init__(f"Could not read source {name!r}: {cause}")
        self.name = name


class DocumentLoader:
    """Load collections from a registry of :class:`RawSource` pairs."""

    def __init__(self, registry: SourceRegistry) -> None:
        self._registry = registry

    async def load(self, collection: CollectionName) -> list[Document]:
        """Load, parse and sort every source registered for *collection*.

        Raises:
            SourceReadError: If any source fails to read.
        """
        sources = self._registry.get(collection, ())
        with structlog.contextvars.bound_contextvars(collection=collection.value):
            documents = await asyncio.gather(
                *(self._load_one(collection, source) for source in sources)
            )
            log.debug("collection.loaded", count=len(documents))
        return sort_documents(documents)

    async def load_all(self) -> dict[CollectionName, list[Document]]:
        """Load every registered collection concurrently."""
        collections = list(self._registry)
        loaded = await asyncio.gather(*(self.load(c) for c in collections))
        return dict(zip(collections, loaded, strict=True))

    @staticmethod
    async def _load_one(collection: CollectionName, source: RawSource) -> Document:
        try:
            raw = await source.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceReadError(source.name, exc) from exc
        return document_from_source(collection, source.name, raw)
