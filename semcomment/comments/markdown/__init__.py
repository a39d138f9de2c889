"""Markdown subset parser producing block and span nodes."""

from .nodes import (
    Admonition,
    Block,
    Blockquote,
    Bold,
    Code,
    CodeBlock,
    Heading,
    Italic,
    Link,
    OrderedList,
    Paragraph,
    Span,
    Text,
    UnorderedList,
)
from .parser import MarkdownParser, parse, parse_inline

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
    "MarkdownParser",
    "OrderedList",
    "Paragraph",
    "Span",
    "Text",
    "UnorderedList",
    "parse",
    "parse_inline",
]
