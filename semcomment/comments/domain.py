from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AttributeDoc:
    """Documentation fields of one semantic-convention attribute."""

    id: str
    brief: str = ""
    note: Optional[str] = None
    type: Optional[str] = None

    @property
    def has_note(self) -> bool:
        return bool(self.note and self.note.strip())
