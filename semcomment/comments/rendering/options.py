"""
Comment format descriptors.

A descriptor tells the renderer how one target language spells a
documentation comment: the opening/closing delimiters, the per-line prefix,
the re-flow width and the escape rules that keep note text from terminating
the comment early. Descriptors are validated on construction and immutable
afterwards, so they can be shared freely between threads.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from jinja2 import Template, TemplateSyntaxError

from ...exceptions import InvalidCommentFormat

EscapeRules = Tuple[Tuple[str, str], ...]
EscapeRulesInput = Union[Mapping[str, str], Iterable[Tuple[str, str]], None]

LINK_STYLES: Tuple[str, ...] = ("parenthesized", "colon", "markdown", "reference")
RENDER_FORMATS: Tuple[str, ...] = ("markdown", "html")


def _normalize_rules(rules: EscapeRulesInput) -> EscapeRules:
    if not rules:
        return ()
    pairs = rules.items() if isinstance(rules, Mapping) else rules
    merged: Dict[str, str] = {}
    for key, value in pairs:
        merged[str(key)] = str(value)
    return tuple(merged.items())


def _find_cycle(rules: EscapeRules) -> Optional[List[str]]:
    """Return a chain of distinct keys whose replacements feed each other.

    An edge ``a -> b`` exists when key ``b`` occurs in the replacement of
    ``a``. Self edges (``\\ -> \\\\``) are the ordinary escaping shape and
    are ignored.
    """
    graph = {
        key: [other for other, _ in rules if other != key and other in value]
        for key, value in rules
    }
    visiting: List[str] = []
    done = set()

    def visit(key: str) -> Optional[List[str]]:
        if key in visiting:
            return visiting[visiting.index(key) :] + [key]
        if key in done:
            return None
        visiting.append(key)
        for nxt in graph[key]:
            found = visit(nxt)
            if found:
                return found
        visiting.pop()
        done.add(key)
        return None

    for key in graph:
        found = visit(key)
        if found:
            return found
    return None


@dataclass(frozen=True)
class CommentFormatDescriptor:
    name: str = ""

    # Comment syntax
    line_prefix: str = ""
    block_open: Optional[str] = None
    block_close: Optional[str] = None

    # Re-flow target in Unicode codepoints, prefix included. Soft: a word
    # longer than the line is never split.
    max_width: int = 80

    # Literal text -> escaped form, applied in one pass, longest key first.
    escape_rules: EscapeRules = ()

    # Whether the target tolerates empty lines inside the comment.
    allow_blank_lines: bool = True

    # Inline degradation
    link_style: str = "parenthesized"
    keep_emphasis: bool = False

    # Keep source line breaks inside paragraphs instead of joining them.
    preserve_newlines: bool = False

    # Spaces written before first-level list markers.
    list_indent: int = 0

    # Trailing period policy for the last prose line of the comment.
    remove_trailing_dots: bool = False
    enforce_trailing_dots: bool = False

    # Language written on code fences that carry none.
    default_code_language: Optional[str] = None

    # "markdown" keeps Markdown structure, "html" emits Javadoc-style tags.
    render_format: str = "markdown"

    # Markdown only: escape backslashes and unescaped square brackets in
    # plain text. Link syntax written by the renderer is left alone.
    escape_backslashes: bool = False
    escape_square_brackets: bool = False

    # HTML only
    old_style_paragraph: bool = False
    omit_closing_li: bool = False
    inline_code_snippet: str = "<c>{{code}}</c>"
    block_code_snippet: str = "<pre>\n{{code}}\n</pre>"

    _escape_re: Optional[re.Pattern[str]] = field(
        default=None, init=False, repr=False, compare=False
    )
    _delimiter_re: Optional[re.Pattern[str]] = field(
        default=None, init=False, repr=False, compare=False
    )
    _inline_template: Optional[Template] = field(
        default=None, init=False, repr=False, compare=False
    )
    _block_template: Optional[Template] = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        rules = _normalize_rules(self.escape_rules)
        object.__setattr__(self, "escape_rules", rules)
        self._validate()
        object.__setattr__(self, "_escape_re", self._compile(rules))
        close = self.block_close or ""
        delimiter_rules = tuple((k, v) for k, v in rules if close and k in close)
        object.__setattr__(self, "_delimiter_re", self._compile(delimiter_rules))
        object.__setattr__(
            self, "_inline_template", self._template("inline_code_snippet", self.inline_code_snippet)
        )
        object.__setattr__(
            self, "_block_template", self._template("block_code_snippet", self.block_code_snippet)
        )

    def _validate(self) -> None:
        def fail(reason: str) -> None:
            raise InvalidCommentFormat(self.name, reason)

        if isinstance(self.max_width, bool) or not isinstance(self.max_width, int):
            fail(f"max_width must be an integer, got {self.max_width!r}")
        if self.max_width <= 0:
            fail(f"max_width must be positive, got {self.max_width}")
        if "\n" in self.line_prefix:
            fail("line_prefix must not contain a newline")
        if isinstance(self.list_indent, bool) or not isinstance(self.list_indent, int):
            fail(f"list_indent must be an integer, got {self.list_indent!r}")
        if self.list_indent < 0:
            fail(f"list_indent must not be negative, got {self.list_indent}")
        if self.link_style not in LINK_STYLES:
            fail(
                f"unknown link_style {self.link_style!r}; expected one of {', '.join(LINK_STYLES)}"
            )
        if self.render_format not in RENDER_FORMATS:
            fail(
                f"unknown render_format {self.render_format!r}; "
                f"expected one of {', '.join(RENDER_FORMATS)}"
            )
        if self.remove_trailing_dots and self.enforce_trailing_dots:
            fail("remove_trailing_dots and enforce_trailing_dots are mutually exclusive")
        for key, _ in self.escape_rules:
            if not key:
                fail("escape rule keys must not be empty")
        cycle = _find_cycle(self.escape_rules)
        if cycle:
            fail("escape rules form a cycle: " + " -> ".join(repr(k) for k in cycle))

    @staticmethod
    def _compile(rules: EscapeRules) -> Optional[re.Pattern[str]]:
        if not rules:
            return None
        keys = sorted((k for k, _ in rules), key=len, reverse=True)
        return re.compile("|".join(re.escape(k) for k in keys))

    def _template(self, option: str, source: str) -> Template:
        try:
            return Template(source)
        except TemplateSyntaxError as e:
            raise InvalidCommentFormat(self.name, f"{option} is not a valid template: {e}") from e

    @property
    def is_html(self) -> bool:
        return self.render_format == "html"

    # ─── Code snippets ───────────────────────────────────────────────────────
    def inline_code(self, code: str) -> str:
        """Render a code span through ``inline_code_snippet``."""
        return self._inline_template.render(code=code)

    def code_block(self, code: str) -> str:
        """Render a code block through ``block_code_snippet``."""
        return self._block_template.render(code=code)

    # ─── Escaping ────────────────────────────────────────────────────────────
    def escape(self, text: str) -> str:
        """Apply every escape rule to literal text."""
        return self._apply(self._escape_re, text)

    def escape_delimiters(self, text: str) -> str:
        """Apply only the rules guarding the closing delimiter (verbatim code)."""
        return self._apply(self._delimiter_re, text)

    def _apply(self, pattern: Optional[re.Pattern[str]], text: str) -> str:
        if pattern is None or not text:
            return text
        table = dict(self.escape_rules)
        return pattern.sub(lambda m: table[m.group(0)], text)

    def with_overrides(self, **changes) -> "CommentFormatDescriptor":
        """Return a validated copy with some fields replaced."""
        return replace(self, **changes)
