"""Utility functions for resolving the comment format registry in the CLI."""

import os
from typing import Optional

from semcomment.comments import FormatRegistry, load_formats

FORMATS_ENV = "SEMCOMMENT_FORMATS"


def get_registry(formats_file: Optional[str] = None) -> FormatRegistry:
    """Return the default registry, extended by a formats file if one is configured.

    An explicit ``formats_file`` wins over the SEMCOMMENT_FORMATS environment
    variable.
    """
    path = formats_file or os.getenv(FORMATS_ENV) or ""
    if not path:
        return FormatRegistry.default()
    if not os.path.exists(path):
        raise FileNotFoundError(f"Formats file not found: {path}")
    return load_formats(path)
