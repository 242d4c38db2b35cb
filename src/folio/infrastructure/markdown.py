"""markdown-it-py adapter — markdown text to a :mod:`folio.domain.nodes` tree.

Core CommonMark syntax maps onto node classes. Extension syntax (GFM
tables and strikethrough, ``$``/``$$`` math) and anything else without a
node class is rendered by markdown-it itself and wrapped in a
:class:`~folio.domain.nodes.Passthrough`, so the card rules never see it.
"""

from __future__ import annotations

import logging
from typing import Any

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode
from mdit_py_plugins.dollarmath import dollarmath_plugin

from folio.domain.nodes import (
    Blockquote,
    Break,
    CodeBlock,
    Emphasis,
    Heading,
    Image,
    InlineCode,
    Link,
    ListBlock,
    ListItem,
    Node,
    Paragraph,
    Passthrough,
    Root,
    Strong,
    Text,
    ThematicBreak,
)

logger = logging.getLogger(__name__)


def build_markdown(*, math: bool = True, gfm: bool = True) -> MarkdownIt:
    """CommonMark parser with raw HTML disabled and optional extensions."""
    md = MarkdownIt("commonmark", {"html": False})
    if gfm:
        md.enable(["table", "strikethrough"])
    if math:
        md.use(dollarmath_plugin)
    return md


def _attr(node: SyntaxTreeNode, name: str) -> str | None:
    value = node.attrs.get(name)
    return None if value is None else str(value)


class MarkdownParser:
    """Parse markdown text into a :class:`~folio.domain.nodes.Root` tree."""

    def __init__(self, *, math: bool = True, gfm: bool = True) -> None:
        self._md = build_markdown(math=math, gfm=gfm)

    def parse(self, text: str) -> Root:
        tree = SyntaxTreeNode(self._md.parse(text))
        return Root(children=tuple(self._blocks(tree.children)))

    # --- Block level ---

    def _blocks(self, nodes: list[SyntaxTreeNode]) -> list[Node]:
        out: list[Node] = []
        for node in nodes:
            out.extend(self._block(node))
        return out

    def _block(self, node: SyntaxTreeNode) -> list[Node]:
        if node.type == "paragraph":
            inline = self._inline_of(node)
            # Tight list items: the paragraph wrapper is hidden, keep its content only.
            if node.hidden:
                return inline
            return [Paragraph(children=tuple(inline))]
        if node.type == "heading":
            return [Heading(level=int(node.tag[1:]), children=tuple(self._inline_of(node)))]
        if node.type == "blockquote":
            return [Blockquote(children=tuple(self._blocks(node.children)))]
        if node.type in ("bullet_list", "ordered_list"):
            return [self._list(node)]
        if node.type in ("fence", "code_block"):
            return [CodeBlock(value=node.content, info=node.info.strip())]
        if node.type == "hr":
            return [ThematicBreak()]
        if node.type == "inline":
            return self._inlines(node.children)
        return [self._passthrough(node)]

    def _list(self, node: SyntaxTreeNode) -> ListBlock:
        ordered = node.type == "ordered_list"
        start: int | None = None
        if ordered:
            raw_start = _attr(node, "start")
            start = int(raw_start) if raw_start is not None else 1
        items = tuple(
            ListItem(children=tuple(self._blocks(child.children)))
            for child in node.children
            if child.type == "list_item"
        )
        return ListBlock(items=items, ordered=ordered, start=start)

    # --- Inline level ---

    def _inline_of(self, node: SyntaxTreeNode) -> list[Node]:
        out: list[Node] = []
        for child in node.children:
            if child.type == "inline":
                out.extend(self._inlines(child.children))
        return out

    def _inlines(self, nodes: list[SyntaxTreeNode]) -> list[Node]:
        return [self._inline(node) for node in nodes]

    def _inline(self, node: SyntaxTreeNode) -> Node:
        if node.type == "text":
            return Text(value=node.content)
        if node.type == "code_inline":
            return InlineCode(value=node.content)
        if node.type == "softbreak":
            return Break(hard=False)
        if node.type == "hardbreak":
            return Break(hard=True)
        if node.type == "link":
            return Link(
                url=_attr(node, "href") or "",
                title=_attr(node, "title"),
                children=tuple(self._inlines(node.children)),
            )
        if node.type == "image":
            return Image(url=_attr(node, "src") or "", alt=node.content, title=_attr(node, "title"))
        if node.type == "em":
            return Emphasis(children=tuple(self._inlines(node.children)))
        if node.type == "strong":
            return Strong(children=tuple(self._inlines(node.children)))
        return self._passthrough(node)

    def _passthrough(self, node: SyntaxTreeNode) -> Passthrough:
        env: dict[str, Any] = {}
        html = self._md.renderer.render(node.to_tokens(), self._md.options, env)
        logger.debug("Passthrough node %s", node.type)
        return Passthrough(html=html, kind=node.type)
