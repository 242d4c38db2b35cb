"""Markdown node tree — a closed set of frozen node classes.

The tree is produced by :mod:`folio.infrastructure.markdown` and consumed
by the structural transform. Node kinds are classes rather than a ``type``
string so that promotion guards can be written as structural ``match``
patterns.

List items from *tight* lists carry their inline content directly as
children (no paragraph wrapper), which is the shape an author's
``- [Title](url) — description`` line has once rendered. Loose list items
keep their :class:`Paragraph` children.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class InlineCode:
    value: str


@dataclass(frozen=True)
class Break:
    """Line break inside inline content. ``hard`` breaks render as ``<br>``."""

    hard: bool = False


@dataclass(frozen=True)
class Link:
    url: str
    children: tuple[Node, ...] = ()
    title: str | None = None


@dataclass(frozen=True)
class Image:
    url: str
    alt: str = ""
    title: str | None = None


@dataclass(frozen=True)
class Emphasis:
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Strong:
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Paragraph:
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Heading:
    level: int
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Blockquote:
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class ListItem:
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class ListBlock:
    items: tuple[ListItem, ...] = ()
    ordered: bool = False
    start: int | None = None


@dataclass(frozen=True)
class CodeBlock:
    value: str
    info: str = ""


@dataclass(frozen=True)
class ThematicBreak:
    pass


@dataclass(frozen=True)
class Passthrough:
    """Pre-rendered HTML for extension syntax (math, tables, strikethrough).

    Opaque to the transform: it is emitted verbatim and never promoted.
    """

    html: str
    kind: str = ""


@dataclass(frozen=True)
class Root:
    children: tuple[Node, ...] = field(default_factory=tuple)


Node = (
    Text
    | InlineCode
    | Break
    | Link
    | Image
    | Emphasis
    | Strong
    | Paragraph
    | Heading
    | Blockquote
    | ListItem
    | ListBlock
    | CodeBlock
    | ThematicBreak
    | Passthrough
)
