"""Command line interface for semcomment."""
