"""
Pure comment renderer.

Serializes a brief and a parsed note into one documentation comment for a
target language described by a ``CommentFormatDescriptor``. No I/O and no
shared state: the same inputs always give the same text.

Documented degradations (markdown output):
  - bold/italic markers are dropped unless ``keep_emphasis`` is set
  - links become ``label (url)`` (or the configured ``link_style``)
  - code spans keep their backticks and are never broken across lines

HTML output (``render_format="html"``) maps the same blocks onto Javadoc
tags instead: ``<p>``, ``<ul>``/``<li>``, ``<a href>``, ``<strong>`` and the
descriptor's code snippet templates.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..domain import AttributeDoc
from ..markdown.nodes import (
    MAX_NESTING,
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
    Spans,
    Text,
    UnorderedList,
)
from ..markdown.parser import parse
from .options import CommentFormatDescriptor
from .wrap import Segment, split_words, wrap_words

LOGGER = logging.getLogger(__name__)

# A bracket preceded by an even number of backslashes is not escaped yet.
_UNESCAPED_BRACKET_RE = re.compile(r"(?<!\\)((?:\\\\)*)([\[\]])")

_LIST_ITEM = "  <li>"


class LineKind(Enum):
    PROSE = "prose"
    CODE = "code"
    MARKER = "marker"
    BLANK = "blank"


@dataclass(frozen=True)
class RenderedLine:
    # Structural prefix (list/quote markers); never escaped.
    prefix: str
    text: str
    kind: LineKind

    def nested(self, marker: str) -> "RenderedLine":
        return RenderedLine(marker + self.prefix, self.text, self.kind)


_BLANK = RenderedLine("", "", LineKind.BLANK)


def _prose(prefix: str, text: str) -> RenderedLine:
    return RenderedLine(prefix, text, LineKind.PROSE)


def _marker(tag: str) -> RenderedLine:
    return RenderedLine(tag, "", LineKind.MARKER)


def _flatten_quotes(blocks: Iterable[Block]) -> List[Block]:
    """Inline the contents of nested blockquotes, depth first."""
    out: List[Block] = []
    stack = [iter(blocks)]
    while stack:
        for block in stack[-1]:
            if isinstance(block, Blockquote):
                stack.append(iter(block.blocks))
                break
            out.append(block)
        else:
            stack.pop()
    return out


def _label_text(segments: List[Segment]) -> str:
    return " ".join(word for words in split_words(segments) for word in words)


class _RenderContext:
    """Per-call state: the descriptor and collected reference links."""

    def __init__(self, fmt: CommentFormatDescriptor):
        self.fmt = fmt
        self.html = fmt.is_html
        # (label, url) -> label segments, in first-use order
        self.references: Dict[Tuple[str, str], List[Segment]] = {}

    def measure(self, word: str) -> int:
        return len(self.fmt.escape(word))

    # ─── Inline flattening ───────────────────────────────────────────────────
    def segments(self, spans: Spans) -> List[Segment]:
        out: List[Segment] = []
        for span in spans:
            if isinstance(span, Text):
                out.append((self._text(span.value), False))
            elif isinstance(span, Code):
                if self.html:
                    out.append((self.fmt.inline_code(span.value), True))
                else:
                    out.append((f"`{span.value}`", True))
            elif isinstance(span, Bold):
                out.extend(self._emphasis(span.children, "**", "strong"))
            elif isinstance(span, Italic):
                out.extend(self._emphasis(span.children, "*", "em"))
            elif isinstance(span, Link):
                out.extend(self._link(span))
            else:
                raise TypeError(f"unsupported span {type(span).__name__}")
        return out

    def _text(self, value: str) -> str:
        if self.html:
            return value
        if self.fmt.escape_backslashes:
            value = value.replace("\\", "\\\\")
        if self.fmt.escape_square_brackets:
            value = _UNESCAPED_BRACKET_RE.sub(r"\1\\\2", value)
        return value

    def _emphasis(self, children: Spans, marker: str, tag: str) -> List[Segment]:
        inner = self.segments(children)
        if self.html:
            return [(f"<{tag}>", True)] + inner + [(f"</{tag}>", True)]
        if not self.fmt.keep_emphasis:
            return inner
        return [(marker, True)] + inner + [(marker, True)]

    def _link(self, link: Link) -> List[Segment]:
        url = link.url
        label_segments = self.segments(link.children)
        label = _label_text(label_segments)
        if not label:
            label_segments = [(url, True)]
            label = url
        if not url:
            return label_segments

        if self.html:
            return [(f'<a href="{url}">', True)] + label_segments + [("</a>", True)]

        style = self.fmt.link_style
        if style == "markdown":
            return [("[", True)] + label_segments + [(f"]({url})", True)]
        if style == "reference":
            self.references.setdefault((label, url), label_segments)
            return [("[", True)] + label_segments + [("]", True)]
        if label == url:
            return [(url, True)]
        if style == "colon":
            return label_segments + [(":", True), (" ", False), (url, True)]
        return label_segments + [(" ", False), (f"({url})", True)]

    def wrap(self, segments: List[Segment], width: int, first_width: Optional[int] = None) -> List[str]:
        groups = split_words(segments, keep_newlines=self.fmt.preserve_newlines)
        lines: List[str] = []
        for words in groups:
            lines.extend(
                wrap_words(
                    words,
                    width,
                    first_width=first_width if not lines else None,
                    measure=self.measure,
                )
            )
        return lines

    def definitions(self, width: int) -> List[RenderedLine]:
        """Reference definitions ``[label]: url``, re-flowed like prose."""
        lines: List[RenderedLine] = []
        for (_, url), label_segments in self.references.items():
            segments = [("[", True)] + label_segments + [("]:", True), (" ", False), (url, True)]
            lines.extend(_prose("", t) for t in self.wrap(segments, width))
        return lines

    # ─── Blocks ──────────────────────────────────────────────────────────────
    def blocks(
        self, blocks: Sequence[Block], width: int, depth: int = 0, *, lead: bool = False
    ) -> List[RenderedLine]:
        """Render a block sequence. ``lead`` marks content already written before it."""
        lines: List[RenderedLine] = []
        for idx, block in enumerate(blocks):
            if self.html:
                if isinstance(block, Paragraph) and self.fmt.old_style_paragraph and (idx or lead):
                    lines.append(_marker("<p>"))
            elif idx and self.fmt.allow_blank_lines:
                lines.append(_BLANK)
            lines.extend(self.block(block, width, depth))
        return lines

    def block(self, block: Block, width: int, depth: int = 0) -> List[RenderedLine]:
        if isinstance(block, Paragraph):
            segments = self.segments(block.spans)
            if self.html and not self.fmt.old_style_paragraph:
                segments = [("<p>", True)] + segments + [("</p>", True)]
            return [_prose("", t) for t in self.wrap(segments, width)]

        if isinstance(block, Heading):
            if self.html:
                tag = f"h{block.level}"
                segments = [(f"<{tag}>", True)] + self.segments(block.spans) + [(f"</{tag}>", True)]
                return [_prose("", t) for t in self.wrap(segments, width)]
            marker = "#" * block.level + " "
            texts = self.wrap(self.segments(block.spans), width, first_width=width - len(marker))
            if not texts:
                return [_marker(marker)]
            return [_prose(marker, texts[0])] + [_prose("", t) for t in texts[1:]]

        if isinstance(block, (UnorderedList, OrderedList)):
            return self._html_list(block, width) if self.html else self._list(block, width)

        if isinstance(block, Blockquote):
            inner: Sequence[Block] = block.blocks
            # Past the nesting cap deeper quotes are merged into this one.
            if depth + 1 >= MAX_NESTING:
                inner = _flatten_quotes(inner)
            if self.html:
                return (
                    [_marker("<blockquote>")]
                    + self.blocks(inner, width, depth + 1)
                    + [_marker("</blockquote>")]
                )
            return [line.nested("> ") for line in self.blocks(inner, width - 2, depth + 1)]

        if isinstance(block, Admonition):
            if self.html:
                segments = [(f"[!{block.kind}]", True), (" ", False)] + self.segments(block.spans)
                texts = self.wrap(segments, width)
                return (
                    [_marker("<blockquote>")]
                    + [_prose("", t) for t in texts]
                    + [_marker("</blockquote>")]
                )
            marker = f"> [!{block.kind}] "
            texts = self.wrap(self.segments(block.spans), width - 2, first_width=width - len(marker))
            if not texts:
                return [_marker(marker)]
            return [_prose(marker, texts[0])] + [_prose("> ", t) for t in texts[1:]]

        if isinstance(block, CodeBlock):
            if self.html:
                rendered = self.fmt.code_block(block.text)
                return [RenderedLine("", t, LineKind.CODE) for t in rendered.split("\n")]
            lang = block.language or self.fmt.default_code_language or ""
            lines = [_marker(f"```{lang}")]
            if block.text:
                lines.extend(RenderedLine("", t, LineKind.CODE) for t in block.text.split("\n"))
            lines.append(_marker("```"))
            return lines

        raise TypeError(f"unsupported block {type(block).__name__}")

    def _list(self, block, width: int) -> List[RenderedLine]:
        indent = " " * self.fmt.list_indent
        ordered = isinstance(block, OrderedList)
        lines: List[RenderedLine] = []
        for pos, item in enumerate(block.items):
            if ordered:
                marker = f"{indent}{block.start_index + pos}. "
            else:
                marker = f"{indent}- "
            texts = self.wrap(self.segments(item), width - len(marker)) or [""]
            lines.append(_prose(marker, texts[0]))
            hang = " " * len(marker)
            lines.extend(_prose(hang, t) for t in texts[1:])
        return lines

    def _html_list(self, block, width: int) -> List[RenderedLine]:
        if isinstance(block, OrderedList):
            tag = "ol"
            opening = "<ol>" if block.start_index == 1 else f'<ol start="{block.start_index}">'
        else:
            tag, opening = "ul", "<ul>"
        lines = [_marker(opening)]
        for item in block.items:
            segments = self.segments(item)
            if not self.fmt.omit_closing_li:
                segments = segments + [("</li>", True)]
            texts = self.wrap(segments, width, first_width=width - len(_LIST_ITEM)) or [""]
            lines.append(_prose(_LIST_ITEM, texts[0]))
            lines.extend(_prose("", t) for t in texts[1:])
        lines.append(_marker(f"</{tag}>"))
        return lines


def _apply_trailing_dots(lines: List[RenderedLine], fmt: CommentFormatDescriptor) -> None:
    if not (fmt.remove_trailing_dots or fmt.enforce_trailing_dots):
        return
    for idx in range(len(lines) - 1, -1, -1):
        line = lines[idx]
        if line.kind == LineKind.BLANK:
            continue
        if line.kind != LineKind.PROSE or not line.text:
            return
        text = line.text.rstrip(".") if fmt.remove_trailing_dots else line.text
        if fmt.enforce_trailing_dots and not text.endswith("."):
            text += "."
        lines[idx] = RenderedLine(line.prefix, text, line.kind)
        return


def _finish(line: RenderedLine, fmt: CommentFormatDescriptor) -> str:
    if line.kind == LineKind.PROSE:
        text = fmt.escape(line.text)
    elif line.kind == LineKind.CODE:
        text = fmt.escape_delimiters(line.text)
    else:
        text = ""
    out = fmt.line_prefix + line.prefix + text
    # Code keeps its trailing whitespace verbatim.
    if line.kind == LineKind.CODE and text:
        return out
    return out.rstrip()


def render(brief: Optional[str], blocks: Sequence[Block], fmt: CommentFormatDescriptor) -> str:
    """Render ``brief`` followed by ``blocks`` as one comment string."""
    ctx = _RenderContext(fmt)
    width = fmt.max_width - len(fmt.line_prefix)
    separate = fmt.allow_blank_lines and not fmt.is_html

    lines: List[RenderedLine] = [
        _prose("", t) for t in ctx.wrap([(brief or "", False)], width)
    ] or [_prose("", "")]

    body = ctx.blocks(blocks, width, lead=True)
    if body:
        if separate:
            lines.append(_BLANK)
        lines.extend(body)
    _apply_trailing_dots(lines, fmt)

    if ctx.references:
        if separate:
            lines.append(_BLANK)
        lines.extend(ctx.definitions(width))

    out: List[str] = []
    if fmt.block_open:
        out.append(fmt.block_open)
    out.extend(_finish(line, fmt) for line in lines)
    if fmt.block_close:
        out.append(fmt.block_close)
    LOGGER.debug(
        "comments.render.done format=%s blocks=%d lines=%d refs=%d",
        fmt.name or "-",
        len(blocks),
        len(out),
        len(ctx.references),
    )
    return "\n".join(out)


class CommentRenderer:
    """Class-based interface for comment rendering."""

    def __init__(self, fmt: CommentFormatDescriptor):
        self.fmt = fmt

    def render(self, brief: Optional[str], note: Optional[str] = None) -> str:
        """Parse ``note`` and render it under ``brief``."""
        return render(brief, parse(note), self.fmt)

    def render_blocks(self, brief: Optional[str], blocks: Sequence[Block]) -> str:
        return render(brief, blocks, self.fmt)

    def render_attribute(self, doc: AttributeDoc) -> str:
        return self.render(doc.brief, doc.note)
