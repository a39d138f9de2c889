"""Public exports for file-backed data models."""

from __future__ import annotations

from .records import AttributeRecord, AttributeRegistryFile, FormatRecord, FormatsFile

__all__ = [
    "AttributeRecord",
    "AttributeRegistryFile",
    "FormatRecord",
    "FormatsFile",
]
