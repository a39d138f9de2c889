"""
Registry of comment formats by target name.

The built-in catalog is plain data; the renderer has no per-language
branches. A registry is read-only once built: ``with_formats`` returns a
new registry instead of mutating the current one.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional

from ...exceptions import CommentFormatNotFound
from .options import CommentFormatDescriptor

LOGGER = logging.getLogger(__name__)

DEFAULT_FORMAT = "python"

BUILTIN_FORMATS = (
    CommentFormatDescriptor(
        name="python",
        block_open='"""',
        block_close='"""',
        max_width=120,
        escape_rules=(("\\", "\\\\"), ('"""', '\\"\\"\\"')),
    ),
    CommentFormatDescriptor(
        name="rust",
        line_prefix="/// ",
        max_width=100,
        default_code_language="text",
    ),
    CommentFormatDescriptor(
        name="go",
        line_prefix="// ",
        max_width=100,
        link_style="reference",
        list_indent=2,
        escape_square_brackets=True,
    ),
    CommentFormatDescriptor(
        name="java",
        block_open="/**",
        line_prefix=" * ",
        block_close=" */",
        max_width=100,
        escape_rules=(("*/", "*&#47;"),),
        render_format="html",
        old_style_paragraph=True,
        omit_closing_li=True,
        inline_code_snippet="{@code {{ code }}}",
        block_code_snippet="<pre>{@code\n{{ code }}\n}</pre>",
    ),
    CommentFormatDescriptor(
        name="c",
        block_open="/*",
        line_prefix=" * ",
        block_close=" */",
        max_width=80,
        escape_rules=(("*/", "* /"),),
    ),
    CommentFormatDescriptor(
        name="shell",
        line_prefix="# ",
        max_width=80,
    ),
    CommentFormatDescriptor(
        name="plain",
        max_width=80,
    ),
)


class FormatRegistry(Mapping[str, CommentFormatDescriptor]):
    """Immutable name -> descriptor table."""

    def __init__(self, formats: Iterable[CommentFormatDescriptor] = ()):
        table: Dict[str, CommentFormatDescriptor] = {}
        for fmt in formats:
            table[fmt.name] = fmt
        self._formats = MappingProxyType(table)

    @classmethod
    def default(cls) -> "FormatRegistry":
        return cls(BUILTIN_FORMATS)

    def __getitem__(self, name: str) -> CommentFormatDescriptor:
        try:
            return self._formats[name]
        except KeyError:
            raise CommentFormatNotFound(name, self._formats.keys()) from None

    def __contains__(self, name: object) -> bool:
        return name in self._formats

    def get(self, name, default=None):
        return self._formats.get(name, default)

    def __iter__(self) -> Iterator[str]:
        return iter(self._formats)

    def __len__(self) -> int:
        return len(self._formats)

    def get_format(
        self, name: Optional[str] = None, *, max_width: Optional[int] = None
    ) -> CommentFormatDescriptor:
        """Look up a format, optionally overriding its width."""
        fmt = self[name or DEFAULT_FORMAT]
        if max_width is not None and max_width != fmt.max_width:
            fmt = fmt.with_overrides(max_width=max_width)
        return fmt

    def with_formats(self, formats: Iterable[CommentFormatDescriptor]) -> "FormatRegistry":
        """Return a new registry with ``formats`` added or replacing entries."""
        added = list(formats)
        for fmt in added:
            if fmt.name in self._formats:
                LOGGER.debug("comments.formats.override name=%s", fmt.name)
        return FormatRegistry(list(self._formats.values()) + added)
