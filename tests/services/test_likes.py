"""Tests for LikeReconciler and LikeController."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import TYPE_CHECKING

import httpx

from folio.domain.likes import LikeSnapshot, LikeState
from folio.infrastructure.like_cache import MemoryLikeCache
from folio.infrastructure.like_client import LikeApiClient, LikeApiError, LikeRow
from folio.services.likes import LikeController, LikeReconciler

if TYPE_CHECKING:
    from tests.conftest import FakeLikeServer

ID = "blog/hello-world"


class GatedClient:
    """Like client whose like/unlike calls wait until ``release`` is set."""

    def __init__(self, likes: int = 1) -> None:
        self.likes = likes
        self.calls: list[tuple[str, str]] = []
        self.release = asyncio.Event()

    async def fetch_likes(self, ids: Sequence[str]) -> list[LikeRow]:
        return [LikeRow(id=i, likes=self.likes) for i in ids]

    async def like(self, identifier: str) -> LikeRow:
        self.calls.append(("like", identifier))
        await self.release.wait()
        return LikeRow(id=identifier, likes=self.likes + 1)

    async def unlike(self, identifier: str) -> LikeRow:
        self.calls.append(("unlike", identifier))
        await self.release.wait()
        return LikeRow(id=identifier, likes=max(0, self.likes - 1))


class FailingClient:
    async def fetch_likes(self, ids: Sequence[str]) -> list[LikeRow]:
        raise LikeApiError("down")

    async def like(self, identifier: str) -> LikeRow:
        raise LikeApiError("down")

    async def unlike(self, identifier: str) -> LikeRow:
        raise LikeApiError("down")


class TestFetchSnapshots:
    def test_counts_from_server_liked_from_cache(self, like_server: FakeLikeServer) -> None:
        cache = MemoryLikeCache()
        cache.set(ID, True)
        reconciler = LikeReconciler(like_server.client(), cache)
        snapshots = asyncio.run(reconciler.fetch_snapshots([ID]))
        assert snapshots == {ID: LikeSnapshot(id=ID, likes=4, liked_by_me=True)}

    def test_single_batched_request_deduped(self, like_server: FakeLikeServer) -> None:
        reconciler = LikeReconciler(like_server.client(), MemoryLikeCache())
        asyncio.run(reconciler.fetch_snapshots([ID, "blog/other", ID]))
        assert len(like_server.requests) == 1
        assert like_server.requests[0].url.params["ids"] == f"{ID},blog/other"

    def test_missing_ids_filled_with_zero(self, like_server: FakeLikeServer) -> None:
        reconciler = LikeReconciler(like_server.client(), MemoryLikeCache())
        snapshots = asyncio.run(reconciler.fetch_snapshots([ID, "blog/unseen"]))
        assert snapshots["blog/unseen"] == LikeSnapshot(id="blog/unseen")

    def test_empty_input_makes_no_request(self, like_server: FakeLikeServer) -> None:
        reconciler = LikeReconciler(like_server.client(), MemoryLikeCache())
        assert asyncio.run(reconciler.fetch_snapshots([])) == {}
        assert like_server.requests == []

    def test_unreachable_endpoint(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        client = LikeApiClient(
            client=httpx.AsyncClient(transport=httpx.MockTransport(refuse), base_url="http://x")
        )
        cache = MemoryLikeCache()
        cache.set("a", True)
        snapshots = asyncio.run(LikeReconciler(client, cache).fetch_snapshots(["a", "b"]))
        assert snapshots == {
            "a": LikeSnapshot(id="a", likes=0, liked_by_me=True),
            "b": LikeSnapshot(id="b", likes=0, liked_by_me=False),
        }

    def test_failure_falls_back_to_cache(self) -> None:
        cache = MemoryLikeCache()
        cache.set("blog/a", True)
        reconciler = LikeReconciler(FailingClient(), cache)  # type: ignore[arg-type]
        snapshots = asyncio.run(reconciler.fetch_snapshots(["blog/a", "blog/b"]))
        assert snapshots == {
            "blog/a": LikeSnapshot(id="blog/a", likes=0, liked_by_me=True),
            "blog/b": LikeSnapshot(id="blog/b", likes=0, liked_by_me=False),
        }


class TestReconcilerToggle:
    def test_like_updates_cache(self, like_server: FakeLikeServer) -> None:
        cache = MemoryLikeCache()
        reconciler = LikeReconciler(like_server.client(), cache)
        snapshot = asyncio.run(reconciler.toggle(ID, True))
        assert snapshot == LikeSnapshot(id=ID, likes=5, liked_by_me=True)
        assert cache.get(ID) is True
        assert like_server.requests[0].method == "POST"

    def test_unlike_clears_cache(self, like_server: FakeLikeServer) -> None:
        cache = MemoryLikeCache()
        cache.set(ID, True)
        reconciler = LikeReconciler(like_server.client(), cache)
        snapshot = asyncio.run(reconciler.toggle(ID, False))
        assert snapshot is not None
        assert snapshot.likes == 3
        assert cache.get(ID) is False
        assert like_server.requests[0].method == "DELETE"

    def test_failure_returns_none_cache_untouched(self) -> None:
        cache = MemoryLikeCache()
        cache.set("blog/a", True)
        reconciler = LikeReconciler(FailingClient(), cache)  # type: ignore[arg-type]
        assert asyncio.run(reconciler.toggle("blog/a", False)) is None
        assert cache.get("blog/a") is True

    def test_negative_server_count_clamped(self) -> None:
        class Negative(GatedClient):
            async def like(self, identifier: str) -> LikeRow:
                return LikeRow(id=identifier, likes=-2)

        reconciler = LikeReconciler(Negative(), MemoryLikeCache())  # type: ignore[arg-type]
        snapshot = asyncio.run(reconciler.toggle("blog/a", True))
        assert snapshot is not None
        assert snapshot.likes == 0


class TestLikeController:
    def test_unknown_before_refresh(self) -> None:
        controller = LikeController(LikeReconciler(GatedClient(), MemoryLikeCache()))  # type: ignore[arg-type]
        assert controller.state("blog/a") is None

    def test_refresh(self, like_server: FakeLikeServer) -> None:
        controller = LikeController(LikeReconciler(like_server.client(), MemoryLikeCache()))
        states = asyncio.run(controller.refresh([ID]))
        assert states == {ID: LikeState(count=4, liked=False)}
        assert controller.state(ID) == LikeState(count=4, liked=False)

    def test_toggle_success(self, like_server: FakeLikeServer) -> None:
        async def run() -> LikeState:
            controller = LikeController(LikeReconciler(like_server.client(), MemoryLikeCache()))
            await controller.refresh([ID])
            return await controller.toggle(ID)

        assert asyncio.run(run()) == LikeState(count=5, liked=True)

    def test_toggle_failure_reverts(self) -> None:
        async def run() -> tuple[LikeState, LikeState | None]:
            cache = MemoryLikeCache()
            cache.set("blog/a", True)
            controller = LikeController(LikeReconciler(FailingClient(), cache))  # type: ignore[arg-type]
            await controller.refresh(["blog/a"])
            settled = await controller.toggle("blog/a")
            return settled, controller.state("blog/a")

        settled, current = asyncio.run(run())
        assert settled == LikeState(count=0, liked=True)
        assert current == settled

    def test_optimistic_state_and_overlap_ignored(self) -> None:
        async def run() -> tuple[LikeState | None, LikeState, LikeState, int]:
            client = GatedClient(likes=1)
            controller = LikeController(LikeReconciler(client, MemoryLikeCache()))  # type: ignore[arg-type]
            await controller.refresh(["blog/a"])
            first = asyncio.create_task(controller.toggle("blog/a"))
            await asyncio.sleep(0)
            during = controller.state("blog/a")
            second = await controller.toggle("blog/a")
            client.release.set()
            settled = await first
            return during, second, settled, len(client.calls)

        during, second, settled, calls = asyncio.run(run())
        assert during == LikeState(count=2, liked=True, pending=True)
        assert second == during
        assert settled == LikeState(count=2, liked=True)
        assert calls == 1

    def test_refresh_does_not_clobber_pending(self) -> None:
        async def run() -> LikeState | None:
            client = GatedClient(likes=1)
            controller = LikeController(LikeReconciler(client, MemoryLikeCache()))  # type: ignore[arg-type]
            await controller.refresh(["blog/a"])
            task = asyncio.create_task(controller.toggle("blog/a"))
            await asyncio.sleep(0)
            client.likes = 50
            await controller.refresh(["blog/a"])
            current = controller.state("blog/a")
            client.release.set()
            await task
            return current

        assert asyncio.run(run()) == LikeState(count=2, liked=True, pending=True)

    def test_close_ignores_late_results(self) -> None:
        async def run() -> tuple[LikeState | None, dict[str, LikeState]]:
            client = GatedClient(likes=1)
            controller = LikeController(LikeReconciler(client, MemoryLikeCache()))  # type: ignore[arg-type]
            await controller.refresh(["blog/a"])
            task = asyncio.create_task(controller.toggle("blog/a"))
            await asyncio.sleep(0)
            controller.close()
            client.release.set()
            await task
            return controller.state("blog/a"), await controller.refresh(["blog/a"])

        state, refreshed = asyncio.run(run())
        assert state == LikeState(count=2, liked=True, pending=True)
        assert refreshed == {}
