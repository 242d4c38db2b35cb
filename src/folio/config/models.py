"""Pydantic configuration sections with code-baked defaults.

Sparse TOML contract: defaults live here, folio.toml only holds overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from folio.domain.types import CollectionName, Theme


class ContentConfig(BaseModel):
    """[content] section."""

    model_config = {"frozen": True}

    root: str = "content"
    collections: list[CollectionName] = Field(default_factory=lambda: list(CollectionName))


class RenderConfig(BaseModel):
    """[render] section."""

    model_config = {"frozen": True}

    theme: Theme = Theme.LIGHT
    math: bool = True
    gfm: bool = True


class LikesConfig(BaseModel):
    """[likes] section."""

    model_config = {"frozen": True}

    base_url: str = "http://localhost:3000"
    timeout: float = 10.0
    cache_path: str = ".folio/likes.json"
