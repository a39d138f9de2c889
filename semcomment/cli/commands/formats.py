"""Comment format commands for the semcomment CLI."""

from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from semcomment.cli.utils.registry import get_registry

app = typer.Typer(help="Comment format commands")
console = Console()


def _show(value: Optional[str]) -> str:
    return repr(value) if value else ""


@app.command("list")
def list_formats(
    formats_file: Optional[str] = typer.Option(
        None, "--formats", help="JSON file with extra comment formats"
    ),
):
    """List all known comment formats."""
    try:
        registry = get_registry(formats_file)

        table = Table("Name", "Output", "Open", "Prefix", "Close", "Width", "Links")
        for name in sorted(registry):
            fmt = registry[name]
            table.add_row(
                name,
                fmt.render_format,
                _show(fmt.block_open),
                _show(fmt.line_prefix),
                _show(fmt.block_close),
                str(fmt.max_width),
                fmt.link_style,
            )

        console.print(table)
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command("show")
def show_format(
    name: str,
    formats_file: Optional[str] = typer.Option(
        None, "--formats", help="JSON file with extra comment formats"
    ),
):
    """Show every setting of one comment format."""
    try:
        fmt = get_registry(formats_file)[name]

        console.print(f"[bold]Format:[/bold] {escape(name)}")
        for field_name in (
            "block_open",
            "line_prefix",
            "block_close",
            "max_width",
            "allow_blank_lines",
            "link_style",
            "keep_emphasis",
            "preserve_newlines",
            "list_indent",
            "remove_trailing_dots",
            "enforce_trailing_dots",
            "default_code_language",
            "render_format",
            "escape_backslashes",
            "escape_square_brackets",
            "old_style_paragraph",
            "omit_closing_li",
            "inline_code_snippet",
            "block_code_snippet",
        ):
            console.print(f"{field_name}: {getattr(fmt, field_name)!r}", markup=False)
        rules = ", ".join(f"{k!r} -> {v!r}" for k, v in fmt.escape_rules) or "(none)"
        console.print(f"escape_rules: {rules}", markup=False)
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)
