"""Library exceptions."""

from typing import Iterable


class SemCommentException(Exception):
    """Semcomment exception."""


class InvalidCommentFormat(SemCommentException, ValueError):
    """A comment format descriptor failed validation."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        label = f"'{name}'" if name else "<unnamed>"
        super().__init__(f"Invalid comment format {label}: {reason}")


class CommentFormatNotFound(SemCommentException, LookupError):
    """No comment format is registered under the requested name."""

    def __init__(self, name: str, known: Iterable[str]):
        self.name = name
        self.known = sorted(known)
        super().__init__(
            f"Comment format '{name}' not found. Known formats: {', '.join(self.known) or '(none)'}"
        )
