"""
Exporter helpers for attribute documentation -> comments.

Thin, testable wrappers around parsing, rendering and the JSON loaders used
by the CLI. Rendering stays pure; only the loaders touch the filesystem.
"""

from __future__ import annotations

import json
import logging
from typing import Dict, Iterable, List, Optional

from ..domain import AttributeDoc
from ..markdown.parser import parse
from ..models.records import AttributeRegistryFile, FormatsFile
from .formats import FormatRegistry
from .options import CommentFormatDescriptor
from .renderer import render

LOGGER = logging.getLogger(__name__)


def render_attribute(doc: AttributeDoc, fmt: CommentFormatDescriptor) -> str:
    """Parse the attribute's note and render it under its brief."""
    blocks = parse(doc.note)
    LOGGER.debug("comments.render.attribute id=%s blocks=%d", doc.id, len(blocks))
    return render(doc.brief, blocks, fmt)


def render_attributes(
    docs: Iterable[AttributeDoc], fmt: CommentFormatDescriptor
) -> Dict[str, str]:
    """Render many attributes; the result keeps input order, keyed by id.

    Calls are independent, so callers that need parallelism can fan out
    ``render_attribute`` themselves.
    """
    out: Dict[str, str] = {}
    for doc in docs:
        if doc.id in out:
            LOGGER.warning("comments.render.duplicate_id id=%s", doc.id)
        out[doc.id] = render_attribute(doc, fmt)
    return out


def load_attributes(path: str) -> List[AttributeDoc]:
    """Load attribute docs from a JSON file (object with ``attributes`` or bare list)."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, list):
        data = {"attributes": data}
    registry = AttributeRegistryFile.model_validate(data)
    LOGGER.debug("comments.loader.attributes path=%s n=%d", path, len(registry.attributes))
    return registry.to_docs()


def load_formats(path: str, base: Optional[FormatRegistry] = None) -> FormatRegistry:
    """Merge the formats declared in a JSON file over ``base`` (defaults if None)."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    formats = FormatsFile.model_validate(data).to_descriptors()
    LOGGER.debug("comments.loader.formats path=%s n=%d", path, len(formats))
    return (base or FormatRegistry.default()).with_formats(formats)
