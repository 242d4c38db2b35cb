"""StructuralMarkdownTransform — node tree to themed HTML with link cards.

Paragraphs and list items go through the promotion rules in
:mod:`folio.domain.cards`; everything else gets theme styling only.
Every anchor, card or inline, is checked for externality: external links
open in a new browsing context with opener and referrer isolation.
"""

from __future__ import annotations

from pathlib import Path
from typing import assert_never

from markupsafe import Markup, escape

from folio.domain.cards import LinkCard, classify_list_item, classify_paragraph, is_external
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
from folio.domain.types import Theme
from folio.infrastructure.markdown import MarkdownParser
from folio.infrastructure.templates import build_template_environment

_EXTERNAL_ATTRS = Markup(' target="_blank" rel="noopener noreferrer"')


def link_target_attrs(href: str | None) -> Markup:
    """Extra anchor attributes for *href* (empty for internal links)."""
    return _EXTERNAL_ATTRS if is_external(href) else Markup("")


class StructuralMarkdownTransform:
    """Render a :class:`~folio.domain.nodes.Root` tree to HTML.

    Usage::

        transform = StructuralMarkdownTransform(Theme.DARK)
        html = transform.render(MarkdownParser().parse(body))
    """

    def __init__(self, theme: Theme = Theme.LIGHT, *, site_root: Path | None = None) -> None:
        self.theme = Theme(theme)
        env = build_template_environment("render", site_root=site_root)
        self._card_template = env.get_template("link_card.html.j2")

    def render(self, root: Root) -> Markup:
        return Markup("\n").join(self._node(child) for child in root.children)

    def render_card(self, card: LinkCard) -> Markup:
        return Markup(self._card_template.render(card=card, theme=self.theme.value).strip())

    # --- Dispatch ---

    def _node(self, node: Node) -> Markup:
        match node:
            case Paragraph():
                return self._paragraph(node)
            case ListItem():
                return self._list_item(node)
            case ListBlock(ordered=True, start=start):
                start_attr = Markup(' start="{}"').format(start) if start not in (None, 1) else ""
                return Markup('<ol class="{}"{}>\n{}\n</ol>').format(
                    self._cls("list"), start_attr, self._blocks(node.items)
                )
            case ListBlock():
                return Markup('<ul class="{}">\n{}\n</ul>').format(
                    self._cls("list"), self._blocks(node.items)
                )
            case Heading(level=level):
                return Markup('<h{0} class="{1}">{2}</h{0}>').format(
                    level, self._cls(f"h{level}"), self._inline(node.children)
                )
            case Blockquote():
                return Markup('<blockquote class="{}">\n{}\n</blockquote>').format(
                    self._cls("quote"), self._blocks(node.children)
                )
            case CodeBlock(value=value, info=info):
                lang = info.split()[0] if info else ""
                lang_attr = Markup(' class="language-{}"').format(lang) if lang else ""
                return Markup("<pre><code{}>{}</code></pre>").format(lang_attr, value)
            case ThematicBreak():
                return Markup("<hr>")
            case Passthrough(html=html):
                return Markup(html)
            case Text(value=value):
                return escape(value)
            case InlineCode(value=value):
                return Markup('<code class="{}">{}</code>').format(self._cls("code"), value)
            case Break(hard=True):
                return Markup("<br>\n")
            case Break():
                return Markup("\n")
            case Link():
                return self._anchor(node)
            case Image(url=url, alt=alt, title=title):
                title_attr = Markup(' title="{}"').format(title) if title else ""
                return Markup('<img src="{}" alt="{}"{}>').format(url, alt, title_attr)
            case Emphasis():
                return Markup("<em>{}</em>").format(self._inline(node.children))
            case Strong():
                return Markup("<strong>{}</strong>").format(self._inline(node.children))
            case _:
                assert_never(node)

    # --- Promotion points ---

    def _paragraph(self, paragraph: Paragraph) -> Markup:
        card = classify_paragraph(paragraph)
        if card is not None:
            return Markup('<div class="link-card-wrap">{}</div>').format(self.render_card(card))
        return Markup('<p class="{}">{}</p>').format(self._cls("p"), self._inline(paragraph.children))

    def _list_item(self, item: ListItem) -> Markup:
        card = classify_list_item(item)
        if card is not None:
            return Markup("<li>{}</li>").format(self.render_card(card))
        return Markup('<li class="{}">{}</li>').format(self._cls("item"), self._inline(item.children))

    def _anchor(self, link: Link) -> Markup:
        title_attr = Markup(' title="{}"').format(link.title) if link.title else ""
        return Markup('<a class="{}" href="{}"{}{}>{}</a>').format(
            self._cls("link"),
            link.url,
            title_attr,
            link_target_attrs(link.url),
            self._inline(link.children),
        )

    # --- Helpers ---

    def _blocks(self, nodes: tuple[Node, ...]) -> Markup:
        return Markup("\n").join(self._node(node) for node in nodes)

    def _inline(self, nodes: tuple[Node, ...]) -> Markup:
        return Markup("").join(self._node(node) for node in nodes)

    def _cls(self, element: str) -> str:
        return f"md-{element} md-{element}--{self.theme.value}"


def render_markdown(
    text: str,
    theme: Theme = Theme.LIGHT,
    *,
    parser: MarkdownParser | None = None,
    site_root: Path | None = None,
) -> Markup:
    """Parse *text* and render it through the structural transform."""
    root = (parser or MarkdownParser()).parse(text)
    return StructuralMarkdownTransform(theme, site_root=site_root).render(root)
