"""Collection and theme enums."""

from __future__ import annotations

from enum import StrEnum


class CollectionName(StrEnum):
    """Named buckets of documents sharing a schema and a loading source."""

    BLOG = "blog"
    RESEARCH = "research"
    RESOURCES = "resources"


class Theme(StrEnum):
    """Cosmetic theme flag for rendering. Never affects card decisions."""

    LIGHT = "light"
    DARK = "dark"
