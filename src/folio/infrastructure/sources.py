"""Raw document sources — ``(name, async reader)`` pairs per collection.

The loader only sees :class:`RawSource` values. How they are found (a
content directory here, anything else in tests) is this module's concern.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from folio.domain.types import CollectionName

ReadText = Callable[[], Awaitable[str]]


@dataclass(frozen=True)
class RawSource:
    """A named text source whose content is fetched on demand."""

    name: str
    read: ReadText


SourceRegistry = Mapping[CollectionName, Sequence[RawSource]]


def file_source(path: Path) -> RawSource:
    """A source reading *path* off the event loop thread."""

    async def read() -> str:
        return await asyncio.to_thread(path.read_text, encoding="utf-8")

    return RawSource(name=path.as_posix(), read=read)


def text_source(name: str, text: str) -> RawSource:
    """A source backed by an in-memory string."""

    async def read() -> str:
        return text

    return RawSource(name=name, read=read)


def collection_dir(content_root: Path, collection: CollectionName) -> Path:
    return content_root / collection.value


def find_markdown_files(directory: Path) -> list[Path]:
    """Markdown files directly inside *directory*, sorted by name."""
    if not directory.is_dir():
        return []
    return sorted(
        path
        for path in directory.iterdir()
        if path.is_file() and path.suffix.lower() == ".md"
    )


def discover_sources(
    content_root: Path,
    collections: Iterable[CollectionName],
) -> dict[CollectionName, list[RawSource]]:
    """Map each collection to ``<content_root>/<collection>/*.md`` sources.

    Missing collection directories yield an empty list.
    """
    return {
        collection: [
            file_source(path)
            for path in find_markdown_files(collection_dir(content_root, collection))
        ]
        for collection in collections
    }


def write_source(path: Path, text: str) -> None:
    """Write source text, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
