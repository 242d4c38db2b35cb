"""Local "liked by me" cache — one boolean per like identifier.

Presence of the ``postLike:<id>`` key means liked; absence means not
liked. Every store is best effort: an unavailable or corrupt medium reads
as "not liked" and writes are dropped, never raised to callers.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

KEY_PREFIX = "postLike:"
_LIKED = "1"


def cache_key(identifier: str) -> str:
    return f"{KEY_PREFIX}{identifier}"


class LikeCacheStore(Protocol):
    """Capability the like reconciler needs from a local cache."""

    def get(self, identifier: str) -> bool: ...

    def set(self, identifier: str, liked: bool) -> None: ...

    def clear(self, identifier: str) -> None: ...


class MemoryLikeCache:
    """In-process cache, lost on exit."""

    def __init__(self, entries: dict[str, str] | None = None) -> None:
        self._entries: dict[str, str] = dict(entries or {})

    def get(self, identifier: str) -> bool:
        return self._entries.get(cache_key(identifier)) == _LIKED

    def set(self, identifier: str, liked: bool) -> None:
        if liked:
            self._entries[cache_key(identifier)] = _LIKED
        else:
            self.clear(identifier)

    def clear(self, identifier: str) -> None:
        self._entries.pop(cache_key(identifier), None)

    def snapshot(self) -> dict[str, str]:
        return dict(self._entries)


class FileLikeCache:
    """JSON-file cache, e.g. ``.folio/likes.json`` under the site root.

    The whole file is re-read on every access so that concurrent CLI runs
    see each other's writes (last write wins).
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError:
            logger.debug("Like cache unreadable at %s", self._path, exc_info=True)
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.debug("Like cache corrupt at %s", self._path, exc_info=True)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _store(self, entries: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(entries, indent=2, sort_keys=True), encoding="utf-8")
        except OSError:
            logger.debug("Like cache not writable at %s", self._path, exc_info=True)

    def get(self, identifier: str) -> bool:
        return self._load().get(cache_key(identifier)) == _LIKED

    def set(self, identifier: str, liked: bool) -> None:
        if not liked:
            self.clear(identifier)
            return
        entries = self._load()
        entries[cache_key(identifier)] = _LIKED
        self._store(entries)

    def clear(self, identifier: str) -> None:
        entries = self._load()
        if entries.pop(cache_key(identifier), None) is not None:
            self._store(entries)
