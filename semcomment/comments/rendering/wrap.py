"""
Greedy word re-flow.

Text reaches the wrapper as segments: breakable prose, and atomic pieces
(code spans, link targets, kept emphasis markers) that must stay inside one
word. Widths are counted in Unicode codepoints and words are never split.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, List, Optional, Tuple

Segment = Tuple[str, bool]  # (text, atomic)

_WS_RE = re.compile(r"(\s+)")


def split_words(segments: Iterable[Segment], *, keep_newlines: bool = False) -> List[List[str]]:
    """Turn segments into groups of words.

    Each group is one hard line: a single group unless ``keep_newlines`` is
    set and the prose contains line breaks. Atomic segments are glued to
    whatever non-space text touches them.
    """
    groups: List[List[str]] = [[]]
    current = ""
    for text, atomic in segments:
        if atomic:
            current += text.replace("\n", " ")
            continue
        for part in _WS_RE.split(text):
            if not part:
                continue
            if not part.isspace():
                current += part
                continue
            if current:
                groups[-1].append(current)
                current = ""
            if keep_newlines and "\n" in part:
                groups.append([])
    if current:
        groups[-1].append(current)
    return [words for words in groups if words]


def wrap_words(
    words: List[str],
    width: int,
    *,
    first_width: Optional[int] = None,
    measure: Callable[[str], int] = len,
) -> List[str]:
    """Greedily pack words into lines no longer than ``width``.

    A word wider than the line is placed alone rather than broken.
    """
    lines: List[str] = []
    line = ""
    size = 0
    limit = max(1, first_width if first_width is not None else width)
    for word in words:
        wl = measure(word)
        if not line:
            line, size = word, wl
            continue
        if size + 1 + wl <= limit:
            line += " " + word
            size += 1 + wl
            continue
        lines.append(line)
        limit = max(1, width)
        line, size = word, wl
    if line:
        lines.append(line)
    return lines
