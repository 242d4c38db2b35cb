"""Link-card promotion rules for paragraphs and list items.

Pure functions over :mod:`folio.domain.nodes`. They decide, per node,
whether the author's markdown should render as prose or as a link card.

INVARIANT: Never over-promote. A paragraph whose link sits beside any
other node (text, emphasis, a second link) is prose, because a card
would drop that surrounding content. Missing a card is harmless;
inventing one destroys text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from folio.domain.nodes import Link, ListItem, Node, Paragraph, Text

_EXTERNAL = re.compile(r"^https?://", re.IGNORECASE)
_BARE_URL = re.compile(r"^https?://\S+$", re.IGNORECASE)
_DASH_PREFIX = re.compile(r"^\s*(?:—|–|-)\s*")


@dataclass(frozen=True)
class LinkCard:
    """A link promoted to a standalone card. Lives only while rendering."""

    href: str
    title: str
    description: str | None = None

    @property
    def external(self) -> bool:
        return is_external(self.href)


def is_external(href: str | None) -> bool:
    """True iff *href* starts with ``http://`` or ``https://`` (any case)."""
    if not href:
        return False
    return _EXTERNAL.match(href) is not None


def strip_dash_prefix(value: str) -> str:
    """Drop one leading em dash, en dash or hyphen and trim.

    Examples:
        >>> strip_dash_prefix(" — a description")
        'a description'
        >>> strip_dash_prefix("- - twice")
        '- twice'
    """
    return _DASH_PREFIX.sub("", value, count=1).strip()


def link_title(link: Link) -> str:
    """The link's first text child, or its URL when there is none."""
    match link.children:
        case (Text(value=value), *_) if value:
            return value
        case _:
            return link.url


def classify_paragraph(paragraph: Paragraph) -> LinkCard | None:
    """Return a card for a lone link or a lone bare URL, else None.

    A bare URL must be the whole trimmed text: a sentence that merely
    starts with a URL stays prose.
    """
    match paragraph.children:
        case (Link() as link,):
            return LinkCard(href=link.url, title=link_title(link))
        case (Text(value=value),) if _BARE_URL.match(value.strip()):
            url = value.strip()
            return LinkCard(href=url, title=_EXTERNAL.sub("", url, count=1))
        case _:
            return None


def classify_list_item(item: ListItem) -> LinkCard | None:
    """Return a card for a ``- [Title](url) — description`` item, else None.

    Only the first two children are inspected: a leading link makes the
    card, and a directly following text node becomes its description.
    """
    children: tuple[Node, ...] = item.children
    match children:
        case (Link() as link, Text(value=value), *_):
            description = strip_dash_prefix(value)
            return LinkCard(
                href=link.url,
                title=link_title(link),
                description=description or None,
            )
        case (Link() as link, *_):
            return LinkCard(href=link.url, title=link_title(link))
        case _:
            return None
