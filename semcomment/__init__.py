"""Render semantic-convention attribute docs as target-language comments."""

from semcomment.comments import (
    AttributeDoc,
    CommentFormatDescriptor,
    CommentRenderer,
    FormatRegistry,
    parse,
    render,
)

__all__ = [
    "AttributeDoc",
    "CommentFormatDescriptor",
    "CommentRenderer",
    "FormatRegistry",
    "parse",
    "render",
]
