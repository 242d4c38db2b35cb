"""Document model — the typed, frozen result of loading one source.

Defaults applied at construction (and nowhere else):

- ``title`` falls back to the slug when the header has none.
- ``date`` falls back to :data:`EPOCH_DATE` so undated documents sort last.
- ``tags`` is always a list.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from pydantic import BaseModel, Field

from folio.domain.frontmatter import HeaderFields, parse_frontmatter
from folio.domain.types import CollectionName

EPOCH_DATE = "1970-01-01"

_MARKDOWN_SUFFIX = re.compile(r"\.md$", re.IGNORECASE)


class Document(BaseModel):
    """A loaded content item. Immutable once built."""

    model_config = {"frozen": True}

    slug: str
    collection: CollectionName
    title: str
    date: str = EPOCH_DATE
    description: str | None = None
    tags: list[str] = Field(default_factory=list)
    body: str = ""

    @property
    def like_id(self) -> str:
        """Identifier used with the like service: ``<collection>/<slug>``."""
        return f"{self.collection.value}/{self.slug}"


def slug_from_name(name: str) -> str:
    """Derive a slug from a source name.

    Examples:
        >>> slug_from_name("../content/blog/Hello-World.MD")
        'Hello-World'
        >>> slug_from_name("notes.txt")
        'notes.txt'
        >>> slug_from_name(".md")
        '.md'
    """
    last = name.rsplit("/", 1)[-1] or name
    return _MARKDOWN_SUFFIX.sub("", last) or last


def build_document(
    collection: CollectionName,
    slug: str,
    header: HeaderFields,
    body: str,
) -> Document:
    """Build a :class:`Document` from parsed parts, applying defaults."""
    return Document(
        slug=slug,
        collection=collection,
        title=header.title or slug,
        date=header.date or EPOCH_DATE,
        description=header.description,
        tags=list(header.tags or []),
        body=body,
    )


def document_from_source(collection: CollectionName, name: str, raw: str) -> Document:
    """Parse raw source text named *name* into a :class:`Document`."""
    parsed = parse_frontmatter(raw)
    return build_document(collection, slug_from_name(name), parsed.header, parsed.body)


def sort_documents(documents: Iterable[Document]) -> list[Document]:
    """Newest first by plain string comparison of ``date``.

    ``sorted`` is stable, so documents sharing a date keep their input order.
    """
    return sorted(documents, key=lambda doc: doc.date, reverse=True)


def find_document(documents: Iterable[Document], slug: str) -> Document | None:
    """Return the document with *slug*, or None. Absence is not an error."""
    for doc in documents:
        if doc.slug == slug:
            return doc
    return None


def filter_by_tag(documents: Iterable[Document], tag: str) -> list[Document]:
    """Documents carrying *tag* (case-insensitive), order preserved."""
    wanted = tag.casefold()
    return [doc for doc in documents if any(t.casefold() == wanted for t in doc.tags)]
