"""Shared pydantic base for the JSON files semcomment reads."""

from __future__ import annotations

import logging
import os

from pydantic import BaseModel, ConfigDict

LOGGER = logging.getLogger(__name__)

EXTRA_ENV = "SEMCOMMENT_EXTRA"
EXTRA_MODES = ("allow", "forbid", "ignore")

# Spellings people reach for instead of the pydantic mode names.
_EXTRA_ALIASES = {
    "strict": "forbid",
    "true": "forbid",
    "yes": "forbid",
    "on": "forbid",
    "1": "forbid",
    "lenient": "allow",
    "false": "allow",
    "no": "allow",
    "off": "allow",
    "0": "allow",
}


def extra_mode_from_env(default: str = "forbid") -> str:
    """Read how unknown keys in input files are treated from SEMCOMMENT_EXTRA."""
    raw = os.getenv(EXTRA_ENV, "").strip().lower()
    if not raw:
        return default
    mode = _EXTRA_ALIASES.get(raw, raw)
    if mode not in EXTRA_MODES:
        LOGGER.warning("comments.models.extra_mode_unknown value=%s default=%s", raw, default)
        return default
    return mode


class DocModel(BaseModel):
    """
    Base for attribute and format file records.

    Unknown keys are rejected unless SEMCOMMENT_EXTRA is set before import:
      export SEMCOMMENT_EXTRA=ignore   # or allow/forbid
    """

    model_config = ConfigDict(extra=extra_mode_from_env(), frozen=True)


__all__ = ["DocModel", "extra_mode_from_env"]
