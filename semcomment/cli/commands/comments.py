"""Comment rendering commands for the semcomment CLI."""

import json
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from semcomment.cli.utils.registry import get_registry
from semcomment.comments import load_attributes, parse, render_attributes
from semcomment.comments.rendering.debug_tools import block_tree, describe_blocks

app = typer.Typer(help="Comment rendering commands")
console = Console()


@app.command("render")
def render_comments(
    attributes_file: str = typer.Argument(..., help="JSON file with attribute docs"),
    format_name: str = typer.Option("python", "--format", "-f", help="Comment format"),
    width: Optional[int] = typer.Option(None, "--width", "-w", help="Override max width"),
    formats_file: Optional[str] = typer.Option(
        None, "--formats", help="JSON file with extra comment formats"
    ),
):
    """Render every attribute in a JSON file as a comment."""
    try:
        fmt = get_registry(formats_file).get_format(format_name, max_width=width)
        docs = load_attributes(attributes_file)

        if not docs:
            console.print("No attributes found")
            return

        rendered = render_attributes(docs, fmt)
        for attr_id, comment in rendered.items():
            console.rule(escape(attr_id))
            console.print(comment, markup=False, highlight=False, soft_wrap=True)
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command("parse")
def parse_note(
    markdown_file: str = typer.Argument(..., help="Markdown file to parse"),
    as_json: bool = typer.Option(False, "--json", help="Print blocks as JSON"),
):
    """Show the block structure the parser finds in a Markdown file."""
    try:
        with open(markdown_file, "r", encoding="utf-8") as f:
            blocks = parse(f.read())

        if as_json:
            console.print_json(json.dumps(describe_blocks(blocks)))
            return

        console.print(block_tree(blocks, label=markdown_file))
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)
