"""Like reconciliation — remote counts merged with the local liked cache.

:class:`LikeReconciler` is the effect layer: it talks to the like service
and the cache, and never raises. Fetch failures degrade to "zero likes,
liked as far as the cache knows"; toggle failures return None and leave
the cache alone so the caller can revert its optimistic change.

:class:`LikeController` is the call-site layer: it keeps the displayed
:class:`~folio.domain.likes.LikeState` per identifier, applies the
optimistic flip, refuses overlapping toggles for one identifier, and
ignores results that arrive after :meth:`LikeController.close`.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from folio.domain.likes import (
    LikeSnapshot,
    LikeState,
    begin_toggle,
    settle_toggle,
    state_from_snapshot,
)
from folio.infrastructure.like_cache import LikeCacheStore
from folio.infrastructure.like_client import LikeApiClient, LikeApiError

log = structlog.get_logger(__name__)


class LikeReconciler:
    """Combine remote like counts with a local "liked by me" cache."""

    def __init__(self, client: LikeApiClient, cache: LikeCacheStore) -> None:
        self._client = client
        self._cache = cache

    def local_snapshot(self, identifier: str, likes: int = 0) -> LikeSnapshot:
        return LikeSnapshot(
            id=identifier,
            likes=max(0, likes),
            liked_by_me=self._cache.get(identifier),
        )

    async def fetch_snapshots(self, identifiers: Iterable[str]) -> dict[str, LikeSnapshot]:
        """Fetch counts for *identifiers* in one request. Never raises.

        ``liked_by_me`` always comes from the local cache: the batched read
        cannot attribute likes to the current actor.
        """
        ids = list(dict.fromkeys(identifiers))
        if not ids:
            return {}

        try:
            rows = await self._client.fetch_likes(ids)
        except LikeApiError as exc:
            log.warning("likes.fetch_failed", ids=ids, error=str(exc))
            return {identifier: self.local_snapshot(identifier) for identifier in ids}

        snapshots = {row.id: self.local_snapshot(row.id, row.likes or 0) for row in rows}
        for identifier in ids:
            if identifier not in snapshots:
                snapshots[identifier] = self.local_snapshot(identifier)
        return snapshots

    async def toggle(self, identifier: str, next_liked: bool) -> LikeSnapshot | None:
        """Like or unlike *identifier* remotely.

        Returns the confirmed snapshot, or None on any failure. On success
        the cache is updated to *next_liked*, which is also what the
        snapshot reports, whatever the service echoed back.
        """
        try:
            if next_liked:
                row = await self._client.like(identifier)
            else:
                row = await self._client.unlike(identifier)
        except LikeApiError as exc:
            log.warning("likes.toggle_failed", id=identifier, liked=next_liked, error=str(exc))
            return None

        self._cache.set(identifier, next_liked)
        log.debug("likes.toggled", id=identifier, liked=next_liked, likes=row.likes)
        return LikeSnapshot(id=row.id, likes=max(0, row.likes or 0), liked_by_me=next_liked)


class LikeController:
    """Per-identifier like state for one consumer (a page, a CLI run)."""

    def __init__(self, reconciler: LikeReconciler) -> None:
        self._reconciler = reconciler
        self._states: dict[str, LikeState] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def state(self, identifier: str) -> LikeState | None:
        """Current state, or None while the identifier is still unknown."""
        return self._states.get(identifier)

    def close(self) -> None:
        """Stop applying results. In-flight requests still run to completion."""
        self._closed = True

    async def refresh(self, identifiers: Iterable[str]) -> dict[str, LikeState]:
        snapshots = await self._reconciler.fetch_snapshots(identifiers)
        if self._closed:
            return {}
        for identifier, snapshot in snapshots.items():
            current = self._states.get(identifier)
            # Never clobber an optimistic state while its toggle is in flight.
            if current is not None and current.pending:
                continue
            self._states[identifier] = state_from_snapshot(snapshot)
        return dict(self._states)

    async def toggle(self, identifier: str) -> LikeState:
        """Flip the liked state of *identifier*.

        A toggle requested while another one for the same identifier is
        pending is ignored and the pending state is returned.
        """
        previous = self._states.get(identifier, LikeState())
        if previous.pending:
            log.debug("likes.toggle_ignored", id=identifier, reason="pending")
            return previous

        optimistic, next_liked = begin_toggle(previous)
        self._states[identifier] = optimistic

        snapshot = await self._reconciler.toggle(identifier, next_liked)
        settled = settle_toggle(previous, next_liked, snapshot)
        if not self._closed:
            self._states[identifier] = settled
        return settled
