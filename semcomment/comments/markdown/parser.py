"""
Structural Markdown parser for attribute notes.

Supports the subset found in semantic-convention documentation: paragraphs,
headings, ordered/unordered lists, blockquotes, ``> [!KIND]`` callouts,
fenced code blocks and the inline spans code, link, bold and italic.

Parsing never fails. Anything the scanner does not recognize degrades to
literal paragraph text, and so does nesting deeper than ``MAX_NESTING``.
"""

from __future__ import annotations

import logging
import re
import string
from bisect import bisect_left
from typing import Dict, List, Optional, Tuple

from .nodes import (
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
    Span,
    Spans,
    Text,
    UnorderedList,
)

LOGGER = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^(\s*)(`{3,})([^`]*)$")
_HEADING_RE = re.compile(r"^\s{0,3}(#{1,6})(?:\s+(.*?))?\s*$")
_UNORDERED_RE = re.compile(r"^\s*[-*]\s+(.*)$")
_ORDERED_RE = re.compile(r"^\s*(\d{1,9})\.\s+(.*)$")
_QUOTE_RE = re.compile(r"^\s*>\s?(.*)$")
_ADMONITION_RE = re.compile(r"^\[!([A-Za-z]+)\]\s*(.*)$")
_CLOSING_HASHES_RE = re.compile(r"\s+#+$")
_BACKTICKS_RE = re.compile(r"`+")

_ESCAPABLE = frozenset(string.punctuation)


# ─── Block scanning ──────────────────────────────────────────────────────────
def _opens_block(line: str) -> bool:
    return bool(
        _FENCE_RE.match(line)
        or _HEADING_RE.match(line)
        or _QUOTE_RE.match(line)
        or _UNORDERED_RE.match(line)
        or _ORDERED_RE.match(line)
    )


def _match_item(line: str, ordered: bool) -> Optional[re.Match[str]]:
    return _ORDERED_RE.match(line) if ordered else _UNORDERED_RE.match(line)


def _item_text(m: re.Match[str], ordered: bool) -> str:
    return (m.group(2) if ordered else m.group(1)).strip()


def _read_fence(lines: List[str], i: int, m: re.Match[str]) -> Tuple[CodeBlock, int]:
    indent = len(m.group(1))
    marker = m.group(2)
    info = m.group(3).strip()
    language = info.split()[0] if info else None
    body: List[str] = []
    j = i + 1
    closed = False
    while j < len(lines):
        stripped = lines[j].strip()
        if stripped.startswith(marker) and not stripped.strip("`"):
            closed = True
            j += 1
            break
        line = lines[j]
        # Drop at most the fence's own indentation from each content line.
        k = 0
        while k < indent and k < len(line) and line[k] == " ":
            k += 1
        body.append(line[k:])
        j += 1
    if not closed:
        LOGGER.debug("comments.parser.unterminated_fence line=%d", i + 1)
    return CodeBlock(language=language, text="\n".join(body)), j


def _read_quote(lines: List[str], i: int, depth: int) -> Tuple[Block, int]:
    content: List[str] = []
    j = i
    while j < len(lines):
        line = lines[j]
        m = _QUOTE_RE.match(line)
        if m:
            content.append(m.group(1))
            j += 1
            continue
        # Lazy continuation only extends a quoted paragraph.
        if not line.strip() or _opens_block(line) or not content[-1].strip():
            break
        content.append(line.strip())
        j += 1

    callout = _ADMONITION_RE.match(content[0].strip())
    if callout:
        rest = [callout.group(2)] + content[1:]
        text = "\n".join(part.strip() for part in rest if part.strip())
        return Admonition(kind=callout.group(1).upper(), spans=parse_inline(text)), j

    return Blockquote(blocks=tuple(_parse_blocks(content, depth + 1))), j


def _read_list(lines: List[str], i: int) -> Tuple[Block, int]:
    first_ordered = _ORDERED_RE.match(lines[i])
    ordered = first_ordered is not None
    start = int(first_ordered.group(1)) if first_ordered else 1
    items: List[List[str]] = []
    j = i
    while j < len(lines):
        line = lines[j]
        m = _match_item(line, ordered)
        if m:
            items.append([_item_text(m, ordered)])
            j += 1
            continue
        if not line.strip():
            # One line of lookahead: a blank line between two items of the
            # same kind does not end the list.
            if j + 1 < len(lines) and _match_item(lines[j + 1], ordered):
                j += 1
                continue
            break
        if _opens_block(line):
            break
        items[-1].append(line.strip())
        j += 1

    parsed = tuple(parse_inline("\n".join(parts)) for parts in items)
    if ordered:
        return OrderedList(items=parsed, start_index=start), j
    return UnorderedList(items=parsed), j


def _parse_blocks(lines: List[str], depth: int = 0) -> List[Block]:
    blocks: List[Block] = []
    para: List[str] = []

    def flush() -> None:
        if para:
            blocks.append(Paragraph(spans=parse_inline("\n".join(para))))
            para.clear()

    i = 0
    while i < len(lines):
        line = lines[i]
        if not line.strip():
            flush()
            i += 1
            continue

        fence = _FENCE_RE.match(line)
        if fence:
            flush()
            block, i = _read_fence(lines, i, fence)
            blocks.append(block)
            continue

        heading = _HEADING_RE.match(line)
        if heading:
            flush()
            title = _CLOSING_HASHES_RE.sub("", heading.group(2) or "")
            if title.strip("#") == "":
                title = ""
            blocks.append(Heading(level=len(heading.group(1)), spans=parse_inline(title)))
            i += 1
            continue

        # Past the nesting cap the remaining ``>`` markers stay literal text.
        if depth < MAX_NESTING and _QUOTE_RE.match(line):
            flush()
            block, i = _read_quote(lines, i, depth)
            blocks.append(block)
            continue

        if _UNORDERED_RE.match(line) or _ORDERED_RE.match(line):
            flush()
            block, i = _read_list(lines, i)
            blocks.append(block)
            continue

        para.append(line.strip())
        i += 1

    flush()
    return blocks


# ─── Inline scanning ─────────────────────────────────────────────────────────
def _backtick_run(text: str, i: int) -> int:
    j = i
    while j < len(text) and text[j] == "`":
        j += 1
    return j - i


def _code_value(raw: str) -> str:
    value = raw.replace("\n", " ")
    if len(value) >= 2 and value[0] == " " and value[-1] == " " and value.strip():
        value = value[1:-1]
    return value


def _can_open_emphasis(text: str, i: int) -> bool:
    if i + 1 >= len(text) or text[i + 1].isspace():
        return False
    if text[i] == "_" and i > 0 and text[i - 1].isalnum():
        return False
    return True


class _InlineScanner:
    """Inline parser for one run of text.

    Backtick runs, bracket pairs and link destinations are indexed up front
    and closing-delimiter searches remember every position they pass, so
    unmatched openers never trigger a rescan of the rest of the text.
    """

    def __init__(self, text: str, depth: int = 0):
        self.text = text
        self.depth = depth
        # run length -> start offsets of maximal backtick runs
        self._runs: Dict[int, List[int]] = {}
        # "[" offset -> matching "]" offset
        self._brackets: Dict[int, int] = {}
        # "]" offset -> offset just past the "(...)" destination that follows it
        self._destinations: Dict[int, int] = {}
        self._closing: Dict[Tuple[str, bool], Dict[int, Optional[int]]] = {}
        for m in _BACKTICKS_RE.finditer(text):
            self._runs.setdefault(len(m.group(0)), []).append(m.start())
        self._index_links()

    # ─── Indexes ─────────────────────────────────────────────────────────────
    def _index_links(self) -> None:
        text = self.text
        parens: Dict[int, int] = {}
        pending: List[int] = []
        for pos, ch in enumerate(text):
            if ch == "(":
                pending.append(pos)
            elif ch == ")" and pending:
                parens[pending.pop()] = pos
            elif ch == "\n":
                pending.clear()

        opened: List[int] = []
        j = 0
        while j < len(text):
            ch = text[j]
            if ch == "\\":
                j += 2
                continue
            if ch == "`":
                j = self.skip_code(j)
                continue
            if ch == "[":
                opened.append(j)
            elif ch == "]" and opened:
                self._brackets[opened.pop()] = j
                close = parens.get(j + 1)
                if close is not None:
                    # Destinations are never scanned for markup.
                    self._destinations[j] = close + 1
                    j = close + 1
                    continue
            j += 1

    def match_code(self, i: int) -> Tuple[Optional[int], int]:
        """Return (offset of the closing run, run length) for a code span at ``i``."""
        run = _backtick_run(self.text, i)
        starts = self._runs.get(run, [])
        k = bisect_left(starts, i + run)
        return (starts[k] if k < len(starts) else None), run

    def skip_code(self, i: int) -> int:
        end, run = self.match_code(i)
        return end + run if end is not None else i + run

    def match_link(self, i: int) -> Optional[Tuple[str, str, int]]:
        """Match ``[label](url)`` at ``i``; return (label, url, end)."""
        close = self._brackets.get(i)
        if close is None or close not in self._destinations:
            return None
        end = self._destinations[close]
        target = self.text[close + 2 : end - 1].strip()
        url = target.split()[0] if target else ""
        if url.startswith("<") and url.endswith(">"):
            url = url[1:-1]
        return self.text[i + 1 : close], url, end

    # ─── Emphasis ────────────────────────────────────────────────────────────
    def _closes(self, j: int, delim: str, word_end: bool) -> bool:
        text = self.text
        if not text.startswith(delim, j) or text[j - 1].isspace():
            return False
        after = j + len(delim)
        return not word_end or after >= len(text) or not text[after].isalnum()

    def find_closing(self, start: int, delim: str, word_end: bool = False) -> Optional[int]:
        """Locate a closing emphasis delimiter, skipping escapes and code spans."""
        known = self._closing.setdefault((delim, word_end), {})
        if start in known:
            return known[start]
        text = self.text
        single = len(delim) == 1
        visited: List[int] = []
        found: Optional[int] = None
        j = start
        while j < len(text):
            ch = text[j]
            if ch == "\\":
                step = j + 2
            elif ch == "`":
                step = self.skip_code(j)
            elif ch == "[" and self._brackets.get(j) in self._destinations:
                # Links bind tighter than emphasis.
                step = self._destinations[self._brackets[j]]
            elif ch == "]" and j in self._destinations:
                step = self._destinations[j]
            elif single and text.startswith(delim * 2, j):
                # A doubled marker inside single emphasis belongs to nested bold.
                nested = self.find_closing(j + 2, delim * 2)
                step = nested + 2 if nested is not None else j + 2
            elif j > start and self._closes(j, delim, word_end):
                found = j
                break
            else:
                step = j + 1
            # The scan from here on was already done by an earlier search.
            if j != start and j in known:
                found = known[j]
                break
            visited.append(j)
            j = step
        for pos in visited:
            known[pos] = found
        return found

    # ─── Spans ───────────────────────────────────────────────────────────────
    def _children(self, text: str) -> Spans:
        return tuple(_InlineScanner(text, self.depth + 1).spans())

    def spans(self) -> List[Span]:
        text = self.text
        if self.depth >= MAX_NESTING:
            return [Text(text)] if text else []

        spans: List[Span] = []
        buf: List[str] = []

        def flush() -> None:
            if buf:
                spans.append(Text("".join(buf)))
                buf.clear()

        i = 0
        n = len(text)
        while i < n:
            ch = text[i]

            if ch == "\\" and i + 1 < n and text[i + 1] in _ESCAPABLE:
                buf.append(text[i : i + 2])
                i += 2
                continue

            if ch == "`":
                end, run = self.match_code(i)
                if end is None:
                    buf.append(text[i : i + run])
                    i += run
                    continue
                flush()
                spans.append(Code(_code_value(text[i + run : end])))
                i = end + run
                continue

            if ch == "[":
                link = self.match_link(i)
                if link is not None:
                    label, url, i = link
                    flush()
                    spans.append(Link(children=self._children(label), url=url))
                    continue

            if ch == "]" and i in self._destinations:
                end = self._destinations[i]
                buf.append(text[i:end])
                i = end
                continue

            if text.startswith("**", i):
                end = None
                if i + 2 < n and not text[i + 2].isspace():
                    end = self.find_closing(i + 2, "**")
                if end is None:
                    buf.append("**")
                    i += 2
                    continue
                flush()
                spans.append(Bold(children=self._children(text[i + 2 : end])))
                i = end + 2
                continue

            if ch in "*_" and _can_open_emphasis(text, i):
                end = self.find_closing(i + 1, ch, word_end=(ch == "_"))
                if end is not None:
                    flush()
                    spans.append(Italic(children=self._children(text[i + 1 : end])))
                    i = end + 1
                    continue

            buf.append(ch)
            i += 1

        flush()
        return spans


# ─── Public API ──────────────────────────────────────────────────────────────
def parse_inline(text: str) -> Spans:
    """Parse inline Markdown into spans. Unmatched markup stays literal."""
    return tuple(_InlineScanner(text).spans())


def parse(markdown: Optional[str]) -> List[Block]:
    """Parse a Markdown note into an ordered list of blocks.

    Total over all inputs: ``None`` and blank input give ``[]`` and any
    construct the scanner does not recognize becomes paragraph text.
    """
    if not markdown or not markdown.strip():
        return []
    lines = markdown.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    blocks = _parse_blocks(lines)
    LOGGER.debug("comments.parser.blocks n=%d lines=%d", len(blocks), len(lines))
    return blocks


class MarkdownParser:
    """Class-based interface for note parsing."""

    def parse(self, markdown: Optional[str]) -> List[Block]:
        return parse(markdown)

    def parse_inline(self, text: str) -> Spans:
        return parse_inline(text)
