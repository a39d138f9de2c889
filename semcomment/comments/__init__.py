"""Public API for attribute documentation comments."""

from .domain import AttributeDoc
from .markdown import parse
from .rendering.exporter import (
    load_attributes,
    load_formats,
    render_attribute,
    render_attributes,
)
from .rendering.formats import FormatRegistry
from .rendering.options import CommentFormatDescriptor
from .rendering.renderer import CommentRenderer, render

__all__ = [
    "AttributeDoc",
    "CommentFormatDescriptor",
    "CommentRenderer",
    "FormatRegistry",
    "load_attributes",
    "load_formats",
    "parse",
    "render",
    "render_attribute",
    "render_attributes",
]
