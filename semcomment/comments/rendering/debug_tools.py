"""
Debug helpers for inspecting what the parser produced for a note.

These utilities are intended for troubleshooting rendering issues. They do
not perform any I/O and can be safely used in tests.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

from rich.markup import escape
from rich.tree import Tree

from ..markdown.nodes import (
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
    Spans,
    Text,
    UnorderedList,
)


def _describe_span(span: Span) -> Dict[str, object]:
    if isinstance(span, Text):
        return {"type": "text", "value": span.value}
    if isinstance(span, Code):
        return {"type": "code", "value": span.value}
    if isinstance(span, Link):
        return {"type": "link", "url": span.url, "children": _describe_spans(span.children)}
    kind = "bold" if isinstance(span, Bold) else "italic"
    return {"type": kind, "children": _describe_spans(span.children)}


def _describe_spans(spans: Spans) -> List[Dict[str, object]]:
    return [_describe_span(s) for s in spans]


def describe_block(block: Block) -> Dict[str, object]:
    """Return a JSON-friendly dict for one block."""
    if isinstance(block, Paragraph):
        return {"type": "paragraph", "spans": _describe_spans(block.spans)}
    if isinstance(block, Heading):
        return {"type": "heading", "level": block.level, "spans": _describe_spans(block.spans)}
    if isinstance(block, UnorderedList):
        return {"type": "unordered_list", "items": [_describe_spans(i) for i in block.items]}
    if isinstance(block, OrderedList):
        return {
            "type": "ordered_list",
            "start_index": block.start_index,
            "items": [_describe_spans(i) for i in block.items],
        }
    if isinstance(block, Blockquote):
        return {"type": "blockquote", "blocks": describe_blocks(block.blocks)}
    if isinstance(block, Admonition):
        return {"type": "admonition", "kind": block.kind, "spans": _describe_spans(block.spans)}
    if isinstance(block, CodeBlock):
        return {"type": "code_block", "language": block.language, "text": block.text}
    raise TypeError(f"unsupported block {type(block).__name__}")


def describe_blocks(blocks: Sequence[Block]) -> List[Dict[str, object]]:
    return [describe_block(b) for b in blocks]


def _span_label(span: Span) -> str:
    if isinstance(span, Text):
        return f"text {escape(repr(span.value))}"
    if isinstance(span, Code):
        return f"[cyan]code[/cyan] {escape(repr(span.value))}"
    if isinstance(span, Link):
        return f"[blue]link[/blue] {escape(span.url)}"
    return "[bold]bold[/bold]" if isinstance(span, Bold) else "[italic]italic[/italic]"


def _add_spans(node: Tree, spans: Spans) -> None:
    for span in spans:
        child = node.add(_span_label(span), highlight=False)
        if isinstance(span, (Bold, Italic, Link)):
            _add_spans(child, span.children)


def _add_block(node: Tree, block: Block) -> None:
    if isinstance(block, Paragraph):
        _add_spans(node.add("[green]paragraph[/green]"), block.spans)
    elif isinstance(block, Heading):
        _add_spans(node.add(f"[green]heading[/green] h{block.level}"), block.spans)
    elif isinstance(block, (UnorderedList, OrderedList)):
        if isinstance(block, OrderedList):
            branch = node.add(f"[green]ordered_list[/green] start={block.start_index}")
        else:
            branch = node.add("[green]unordered_list[/green]")
        for idx, item in enumerate(block.items):
            _add_spans(branch.add(f"item {idx}"), item)
    elif isinstance(block, Blockquote):
        branch = node.add("[green]blockquote[/green]")
        for inner in block.blocks:
            _add_block(branch, inner)
    elif isinstance(block, Admonition):
        _add_spans(node.add(f"[yellow]admonition[/yellow] {block.kind}"), block.spans)
    elif isinstance(block, CodeBlock):
        branch = node.add(f"[green]code_block[/green] {escape(block.language or '(none)')}")
        branch.add(escape(repr(block.text)), highlight=False)


def block_tree(blocks: Sequence[Block], label: str = "note") -> Tree:
    """Build a rich Tree of the parsed note for console display."""
    tree = Tree(label)
    for block in blocks:
        _add_block(tree, block)
    return tree
