"""HTTP client for the remote like-count service.

Endpoints::

    GET    /api/post-likes?ids=a,b  -> [{id, likes, likedByMe?}, ...]
    POST   /api/post-like?id=a      -> {id, likes}
    DELETE /api/post-like?id=a      -> {id, likes}

Every failure mode (transport error, non-2xx status, undecodable or
mis-shaped body) surfaces as :class:`LikeApiError`. Deciding what a
failure means for the user is the reconciler's job, not this module's.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

LIKES_PATH = "/api/post-likes"
LIKE_PATH = "/api/post-like"


class LikeApiError(Exception):
    """Error communicating with the like service."""


class LikeRow(BaseModel):
    """One row as the service reports it."""

    model_config = {"frozen": True, "populate_by_name": True}

    id: str
    likes: int | None = None
    liked_by_me: bool | None = Field(default=None, alias="likedByMe")


class LikeApiClient:
    """Async client for the like endpoints.

    Pass *client* to reuse an existing ``httpx.AsyncClient`` (its base URL
    and cookies apply); otherwise one is created and owned by this object.
    """

    def __init__(
        self,
        base_url: str = "",
        *,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> LikeApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def fetch_likes(self, ids: Sequence[str]) -> list[LikeRow]:
        """GET the counts for *ids* in one batched request."""
        data = await self._request("GET", LIKES_PATH, {"ids": ",".join(ids)})
        if not isinstance(data, list):
            msg = f"Expected a JSON array from {LIKES_PATH}, got {type(data).__name__}"
            raise LikeApiError(msg)

        rows: list[LikeRow] = []
        for item in data:
            if not isinstance(item, dict) or not item.get("id"):
                continue
            rows.append(self._row(item))
        return rows

    async def like(self, identifier: str) -> LikeRow:
        return self._row(await self._request("POST", LIKE_PATH, {"id": identifier}))

    async def unlike(self, identifier: str) -> LikeRow:
        return self._row(await self._request("DELETE", LIKE_PATH, {"id": identifier}))

    async def _request(self, method: str, path: str, params: dict[str, str]) -> Any:
        logger.debug("Like API %s %s %s", method, path, params)
        try:
            resp = await self._client.request(method, path, params=params)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPError as exc:
            msg = f"{method} {path} failed: {exc}"
            raise LikeApiError(msg) from exc
        except ValueError as exc:
            msg = f"{method} {path} returned invalid JSON"
            raise LikeApiError(msg) from exc

    @staticmethod
    def _row(data: Any) -> LikeRow:
        try:
            return LikeRow.model_validate(data)
        except ValidationError as exc:
            msg = f"Unexpected like payload: {data!r}"
            raise LikeApiError(msg) from exc
