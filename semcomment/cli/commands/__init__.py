"""Command modules for the semcomment CLI."""

# Import all command modules here for easy access
from semcomment.cli.commands import comments, formats

__all__ = ["comments", "formats"]
