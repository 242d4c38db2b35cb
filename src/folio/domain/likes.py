"""Like state — snapshots and the pure optimistic-toggle state machine.

Per document, as the client sees it::

    Unknown --refresh--> Known(count, liked)
    Known --begin_toggle--> Known'(count +/- 1, liked flipped, pending)
    Known' --settle_toggle(snapshot)--> Known''(server count, liked')
    Known' --settle_toggle(None)--> Known (pre-toggle state restored)

No I/O happens here; :mod:`folio.services.likes` performs the calls and
feeds their results through these functions.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from pydantic import BaseModel, Field


class LikeSnapshot(BaseModel):
    """Point-in-time like count plus the current actor's liked flag."""

    model_config = {"frozen": True}

    id: str
    likes: int = Field(default=0, ge=0)
    liked_by_me: bool = False


@dataclass(frozen=True)
class LikeState:
    """What a like control displays for one document."""

    count: int = 0
    liked: bool = False
    pending: bool = False


def state_from_snapshot(snapshot: LikeSnapshot) -> LikeState:
    return LikeState(count=snapshot.likes, liked=snapshot.liked_by_me)


def begin_toggle(state: LikeState) -> tuple[LikeState, bool]:
    """Apply the optimistic flip.

    Returns the optimistic state and the liked value being requested.
    The count never drops below zero.
    """
    next_liked = not state.liked
    delta = 1 if next_liked else -1
    optimistic = LikeState(
        count=max(0, state.count + delta),
        liked=next_liked,
        pending=True,
    )
    return optimistic, next_liked


def settle_toggle(
    previous: LikeState,
    next_liked: bool,
    snapshot: LikeSnapshot | None,
) -> LikeState:
    """Resolve a toggle from its remote outcome.

    On success the server count wins and ``liked`` is the value the caller
    asked for. On failure (``snapshot is None``) the pre-toggle state comes
    back unchanged.
    """
    if snapshot is None:
        return replace(previous, pending=False)
    return LikeState(count=snapshot.likes, liked=next_liked, pending=False)
