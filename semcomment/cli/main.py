#!/usr/bin/env python
"""Command line interface for semcomment."""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from semcomment.cli.commands import comments, formats

app = typer.Typer(help="Render semantic-convention attribute docs as code comments")

# Add command groups
app.add_typer(comments.app, name="comments")
app.add_typer(formats.app, name="formats")


@app.callback()
def callback(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging"
    ),
):
    """Render attribute documentation into target-language comments."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
