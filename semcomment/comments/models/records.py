"""
Pydantic models for the JSON files the tooling reads.

Attribute files hold the documentation fields of a resolved registry:

    {"attributes": [{"id": "error.type", "brief": "...", "note": "...", "type": "string"}]}

Format files add or override comment formats:

    {"comment_formats": {"kotlin": {"line_prefix": " * ", "block_open": "/**", ...}}}
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple, Union

from pydantic import Field, field_validator

from ..domain import AttributeDoc
from ..rendering.options import LINK_STYLES, RENDER_FORMATS, CommentFormatDescriptor
from ._base import DocModel


# ─── Attributes ─────────────────────────────────────────────────────────────
class AttributeRecord(DocModel):
    """One attribute's documentation fields."""

    id: str = Field(..., min_length=1)
    brief: str = ""
    note: Optional[str] = None
    type: Optional[Union[str, Dict[str, object]]] = None
    """Attribute type; enum types arrive as a mapping and are reported as ``enum``."""

    def to_doc(self) -> AttributeDoc:
        type_name = self.type if isinstance(self.type, str) or self.type is None else "enum"
        return AttributeDoc(
            id=self.id,
            brief=self.brief.strip(),
            note=self.note,
            type=type_name,
        )


class AttributeRegistryFile(DocModel):
    attributes: List[AttributeRecord] = Field(default_factory=list)

    def to_docs(self) -> List[AttributeDoc]:
        return [record.to_doc() for record in self.attributes]


# ─── Comment formats ────────────────────────────────────────────────────────
class FormatRecord(DocModel):
    """File representation of a ``CommentFormatDescriptor``."""

    line_prefix: str = ""
    block_open: Optional[str] = None
    block_close: Optional[str] = None
    max_width: int = 80
    escape_rules: Dict[str, str] = Field(default_factory=dict)
    allow_blank_lines: bool = True
    link_style: str = "parenthesized"
    keep_emphasis: bool = False
    preserve_newlines: bool = False
    list_indent: int = 0
    remove_trailing_dots: bool = False
    enforce_trailing_dots: bool = False
    default_code_language: Optional[str] = None
    render_format: str = "markdown"
    escape_backslashes: bool = False
    escape_square_brackets: bool = False
    old_style_paragraph: bool = False
    omit_closing_li: bool = False
    inline_code_snippet: str = "<c>{{code}}</c>"
    block_code_snippet: str = "<pre>\n{{code}}\n</pre>"

    @field_validator("link_style")
    @classmethod
    def _known_link_style(cls, value: str) -> str:
        if value not in LINK_STYLES:
            raise ValueError(f"link_style must be one of {', '.join(LINK_STYLES)}")
        return value

    @field_validator("render_format")
    @classmethod
    def _known_render_format(cls, value: str) -> str:
        if value not in RENDER_FORMATS:
            raise ValueError(f"render_format must be one of {', '.join(RENDER_FORMATS)}")
        return value

    def to_descriptor(self, name: str) -> CommentFormatDescriptor:
        """Build the validated descriptor; raises ``InvalidCommentFormat``."""
        rules: Tuple[Tuple[str, str], ...] = tuple(self.escape_rules.items())
        return CommentFormatDescriptor(
            name=name,
            line_prefix=self.line_prefix,
            block_open=self.block_open,
            block_close=self.block_close,
            max_width=self.max_width,
            escape_rules=rules,
            allow_blank_lines=self.allow_blank_lines,
            link_style=self.link_style,
            keep_emphasis=self.keep_emphasis,
            preserve_newlines=self.preserve_newlines,
            list_indent=self.list_indent,
            remove_trailing_dots=self.remove_trailing_dots,
            enforce_trailing_dots=self.enforce_trailing_dots,
            default_code_language=self.default_code_language,
            render_format=self.render_format,
            escape_backslashes=self.escape_backslashes,
            escape_square_brackets=self.escape_square_brackets,
            old_style_paragraph=self.old_style_paragraph,
            omit_closing_li=self.omit_closing_li,
            inline_code_snippet=self.inline_code_snippet,
            block_code_snippet=self.block_code_snippet,
        )


class FormatsFile(DocModel):
    comment_formats: Dict[str, FormatRecord] = Field(default_factory=dict)

    def to_descriptors(self) -> List[CommentFormatDescriptor]:
        return [record.to_descriptor(name) for name, record in self.comment_formats.items()]
