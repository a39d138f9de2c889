"""
Structural node types produced by the Markdown parser.

Blocks and spans are closed unions of frozen dataclasses. The renderer
dispatches on the concrete type; adding a variant means adding a branch to
every render path.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union


# ─── Inline spans ────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Bold:
    children: Tuple["Span", ...]


@dataclass(frozen=True)
class Italic:
    children: Tuple["Span", ...]


@dataclass(frozen=True)
class Code:
    value: str


@dataclass(frozen=True)
class Link:
    children: Tuple["Span", ...]
    url: str


Span = Union[Text, Bold, Italic, Code, Link]
Spans = Tuple[Span, ...]


# ─── Blocks ──────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Paragraph:
    spans: Spans


@dataclass(frozen=True)
class Heading:
    level: int
    spans: Spans


@dataclass(frozen=True)
class UnorderedList:
    items: Tuple[Spans, ...]


@dataclass(frozen=True)
class OrderedList:
    items: Tuple[Spans, ...]
    start_index: int = 1


@dataclass(frozen=True)
class Blockquote:
    blocks: Tuple["Block", ...]


@dataclass(frozen=True)
class Admonition:
    """GitHub-style callout, e.g. ``> [!NOTE] text``."""

    kind: str
    spans: Spans


@dataclass(frozen=True)
class CodeBlock:
    language: Optional[str]
    text: str


Block = Union[
    Paragraph,
    Heading,
    UnorderedList,
    OrderedList,
    Blockquote,
    Admonition,
    CodeBlock,
]


# Deepest quote or span nesting the parser builds and the renderer walks.
MAX_NESTING = 32


def plain_text(spans: Spans) -> str:
    """Concatenate the literal text of a span sequence, dropping all markup."""
    out = []
    for span in spans:
        if isinstance(span, (Text, Code)):
            out.append(span.value)
        else:
            out.append(plain_text(span.children))
    return "".join(out)


__all__ = [
    "Admonition",
    "Block",
    "Blockquote",
    "Bold",
    "Code",
    "CodeBlock",
    "Heading",
    "Italic",
    "Link",
    "MAX_NESTING",
    "OrderedList",
    "Paragraph",
    "Span",
    "Spans",
    "Text",
    "UnorderedList",
    "plain_text",
]
