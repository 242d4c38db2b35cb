"""Frontmatter header — split raw source text into header fields and body.

The header format is deliberately tiny: one ``key: value`` per line,
scalar strings only, plus a single flat ``tags`` list written either as
``[a, "b c"]`` or as a bare ``a, b`` list. It is not YAML.

Parsing never raises. A missing or unterminated fence degrades to "no
header" and leaves the raw text untouched; unparseable lines are skipped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from pydantic import BaseModel

_FENCE = "---"
_CLOSING_FENCE = "\n---"

_LINE_PATTERN = re.compile(r"^([A-Za-z0-9_-]+)\s*:\s*(.*)$")
_BRACKETED = re.compile(r"^\[(.*)\]$")
# Rest of the current line, terminator included.
_LINE_END = re.compile(r"\A[ \t]*\r?\n")

_SCALAR_KEYS = ("title", "date", "description")


class HeaderFields(BaseModel):
    """Recognized header keys. Anything else in the block is ignored."""

    model_config = {"frozen": True}

    title: str | None = None
    date: str | None = None
    description: str | None = None
    tags: list[str] | None = None


@dataclass(frozen=True)
class ParsedSource:
    """Result of :func:`parse_frontmatter`."""

    header: HeaderFields
    body: str


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _unquote(value: str) -> str:
    """Strip one layer of matching double or single quotes."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def parse_tags(value: str) -> list[str]:
    """Parse a ``tags`` value in bracketed or bare comma-list form.

    Examples:
        >>> parse_tags("[a, \\"b c\\", 'd']")
        ['a', 'b c', 'd']
        >>> parse_tags("[]")
        []
        >>> parse_tags("a, b")
        ['a', 'b']
    """
    bracketed = _BRACKETED.match(value)
    if bracketed:
        inner = bracketed.group(1).strip()
        if not inner:
            return []
        items = (_unquote(part.strip()) for part in inner.split(","))
        return [item for item in items if item]
    return [part.strip() for part in value.split(",") if part.strip()]


def parse_header_block(block: str) -> HeaderFields:
    """Parse the lines between the fences into :class:`HeaderFields`."""
    fields: dict[str, object] = {}
    for raw_line in block.split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        match = _LINE_PATTERN.match(line)
        if match is None:
            continue

        key = match.group(1)
        value = _unquote(match.group(2).strip())

        if key == "tags":
            fields["tags"] = parse_tags(value)
        elif key in _SCALAR_KEYS:
            fields[key] = value
    return HeaderFields.model_validate(fields)


def parse_frontmatter(raw: str) -> ParsedSource:
    """Split *raw* into a parsed header and the markdown body.

    The opening fence may be preceded by whitespace. The closing fence is
    the next ``---`` that starts a line. At most one blank line after it
    is dropped from the body. Without both fences the result is
    an empty header and *raw* unchanged.
    """
    stripped = raw.lstrip()
    if not stripped.startswith(_FENCE):
        return ParsedSource(header=HeaderFields(), body=raw)

    end = stripped.find(_CLOSING_FENCE, len(_FENCE))
    if end == -1:
        return ParsedSource(header=HeaderFields(), body=raw)

    block = stripped[len(_FENCE) : end].strip()
    after_fence = _LINE_END.sub("", stripped[end + len(_CLOSING_FENCE) :], count=1)
    body = _LINE_END.sub("", after_fence, count=1)
    return ParsedSource(header=parse_header_block(block), body=body)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _needs_quotes(value: str) -> bool:
    if not value or value != value.strip():
        return True
    return len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"')


def _render_scalar(value: str) -> str:
    if "\n" in value:
        msg = f"Header values must be single-line: {value!r}"
        raise ValueError(msg)
    return f'"{value}"' if _needs_quotes(value) else value


def _render_tag(tag: str) -> str:
    if "," in tag or "\n" in tag:
        msg = f"Tags cannot contain commas or newlines: {tag!r}"
        raise ValueError(msg)
    if _needs_quotes(tag) or any(ch.isspace() for ch in tag):
        return f'"{tag}"'
    return tag


def render_frontmatter(header: HeaderFields, body: str) -> str:
    """Serialize *header* and *body* back into fenced source text.

    Output has the form ``---\\n<fields>\\n---\\n\\n<body>`` and parses back
    to the same fields and body.

    Raises:
        ValueError: If a value spans lines or a tag contains a comma.
    """
    lines: list[str] = []
    for key in _SCALAR_KEYS:
        value = getattr(header, key)
        if value is not None:
            lines.append(f"{key}: {_render_scalar(value)}")
    if header.tags is not None:
        rendered = ", ".join(_render_tag(tag) for tag in header.tags if tag)
        lines.append(f"tags: [{rendered}]")

    return "\n".join([_FENCE, *lines, _FENCE, "", body])
