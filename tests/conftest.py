"""Shared pytest fixtures and test helpers for folio tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner

from folio.config.settings import FolioSettings
from folio.infrastructure.like_client import LikeApiClient

HELLO = """\
---
title: Hello World
date: 2024-03-01
description: "First post"
tags: [intro, meta]
---

Welcome! See [the docs](https://docs.example.com).

- [Python](https://python.org) — the language
- plain item
"""

SECOND = """\
---
title: Second
date: 2024-05-10
tags: python
---
[Guide](/guide)
"""

UNDATED = "No header here, just text.\n"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's FOLIO_* environment out of every test."""
    monkeypatch.delenv("FOLIO_CONFIG", raising=False)
    monkeypatch.delenv("FOLIO_LIKES__BASE_URL", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Temporary site with three blog posts and an empty research folder."""
    blog = tmp_path / "content" / "blog"
    blog.mkdir(parents=True)
    (blog / "hello-world.md").write_text(HELLO, encoding="utf-8")
    (blog / "second.md").write_text(SECOND, encoding="utf-8")
    (blog / "undated.md").write_text(UNDATED, encoding="utf-8")
    (tmp_path / "content" / "research").mkdir()
    return tmp_path


@pytest.fixture
def settings(site_root: Path) -> FolioSettings:
    return FolioSettings.from_cli(site_root=site_root)


@pytest.fixture
def _isolated_site(site_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp site root so the CLI picks it up."""
    monkeypatch.chdir(site_root)


# ---------------------------------------------------------------------------
# Fake like service
# ---------------------------------------------------------------------------


class FakeLikeServer:
    """In-memory stand-in for the like endpoints, served via MockTransport."""

    def __init__(self, counts: dict[str, int] | None = None) -> None:
        self.counts: dict[str, int] = dict(counts or {})
        self.requests: list[httpx.Request] = []
        self.fail = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail:
            return httpx.Response(503, json={"error": "down"})
        if request.url.path == "/api/post-likes":
            ids = [i for i in request.url.params.get("ids", "").split(",") if i]
            rows = [{"id": i, "likes": self.counts[i]} for i in ids if i in self.counts]
            return httpx.Response(200, json=rows)
        if request.url.path == "/api/post-like":
            identifier = request.url.params["id"]
            delta = 1 if request.method == "POST" else -1
            self.counts[identifier] = max(0, self.counts.get(identifier, 0) + delta)
            return httpx.Response(200, json={"id": identifier, "likes": self.counts[identifier]})
        return httpx.Response(404)

    def client(self) -> LikeApiClient:
        transport = httpx.MockTransport(self.handler)
        return LikeApiClient(
            client=httpx.AsyncClient(transport=transport, base_url="http://likes.test")
        )

    @property
    def factory(self) -> Callable[[], LikeApiClient]:
        return self.client


@pytest.fixture
def like_server() -> FakeLikeServer:
    return FakeLikeServer({"blog/hello-world": 4})
