"""
Command-line interface for docx-vars.

Provides a Typer-based wrapper around DocxSession for filling ${NAME}
placeholders in .docx templates from the shell.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

import typer
import yaml
from docx import Document
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..config import get_config_manager, load_config
from ..session.archive_session import DocxSession

# Initialize Typer app
app = typer.Typer(
    name="docx-vars",
    help="Fill ${NAME} placeholders in Word documents",
    add_completion=False,
    rich_markup_mode="rich"
)

# Global console for rich output
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def parse_assignments(assignments: List[str]) -> Dict[str, str]:
    """Turn ``KEY=VALUE`` strings into a mapping."""
    values = {}
    for assignment in assignments:
        key, sep, value = assignment.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got {assignment!r}", param_hint="--set")
        values[key] = value
    return values


def load_values_file(values_file: Path) -> Dict[str, str]:
    """Read a YAML or JSON mapping of placeholder names to values."""
    with open(values_file, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise typer.BadParameter("Values file must contain a mapping", param_hint="--values")

    values = {}
    for key, value in data.items():
        if isinstance(value, (dict, list)):
            raise typer.BadParameter(f"Value for {key!r} must be a scalar", param_hint="--values")
        values[str(key)] = "" if value is None else str(value)
    return values


@app.command()
def fill(
    template: Path = typer.Argument(..., help="The .docx template to fill"),
    output: Path = typer.Option(..., "--output", "-o", help="Where to write the filled document"),
    assignments: Optional[List[str]] = typer.Option(None, "--set", "-s", help="Placeholder value as KEY=VALUE"),
    values_file: Optional[Path] = typer.Option(None, "--values", help="YAML or JSON file of placeholder values"),
    clean: Optional[bool] = typer.Option(None, "--clean/--no-clean", help="Strip unfilled ${ and } markers"),
    show_changes: bool = typer.Option(False, "--changes", help="List every changed text fragment"),
) -> None:
    """
    Fill placeholders in TEMPLATE and write the result to OUTPUT.

    Values from --values are applied first, then --set entries override them.
    """
    if not template.exists():
        console.print(f"[red]Error: File not found: {template}[/red]")
        raise typer.Exit(1)

    if values_file is not None and not values_file.is_file():
        console.print(f"[red]Error: Values file not found: {values_file}[/red]")
        raise typer.Exit(1)

    config = load_config()

    values: Dict[str, str] = {}
    if values_file is not None:
        values.update(load_values_file(values_file))
    values.update(parse_assignments(assignments or []))

    if clean is None:
        clean = config.clean_after_fill

    try:
        with DocxSession(template, config=config) as session:
            changed = session.set_values(values)
            unresolved = session.unresolved_placeholders()
            changes = session.get_changes() if show_changes else []
            if clean:
                session.clean_tag_vars()
            result_path = session.save(output)
    except Exception as e:
        console.print(f"[red]Error filling document: {e}[/red]")
        raise typer.Exit(1)

    if changes:
        for change in changes:
            console.print(f"  • {change.summary()}", markup=False, highlight=False)

    if unresolved:
        console.print(f"[yellow]Unfilled placeholders:[/yellow] {', '.join(unresolved)}")

    console.print(
        f"[green]Filled {len(values)} value(s) in {changed} fragment(s), saved to {result_path}[/green]"
    )


@app.command()
def inspect(
    template: Path = typer.Argument(..., help="The .docx file to inspect"),
    show_text: bool = typer.Option(False, "--text", "-t", help="Show the plain text of each part"),
) -> None:
    """
    List the document, header and footer parts and their placeholders.
    """
    if not template.exists():
        console.print(f"[red]Error: File not found: {template}[/red]")
        raise typer.Exit(1)

    try:
        with DocxSession(template, config=load_config()) as session:
            parts_table = Table(title=f"Parts of {template.name}")
            parts_table.add_column("Role", style="cyan")
            parts_table.add_column("Part", style="green")
            parts_table.add_column("Fragments", justify="right")
            parts_table.add_column("Placeholders", style="yellow")

            for part in session.list_parts():
                placeholders = session.engine.find_placeholders([part])
                parts_table.add_row(
                    part.role.value,
                    part.local_name,
                    str(len(part.fragments)),
                    ", ".join(placeholders) or "-",
                )
            console.print(parts_table)

            if show_text:
                for local_name, text in session.get_text().items():
                    body = Text(text) if text else Text("(empty)", style="dim")
                    console.print(Panel(body, title=local_name, border_style="blue"))
    except Exception as e:
        console.print(f"[red]Error reading document: {e}[/red]")
        raise typer.Exit(1)

    _print_core_properties(template)


def _print_core_properties(template: Path) -> None:
    """Show title and author when the file is a complete Word package."""
    try:
        properties = Document(str(template)).core_properties
    except Exception as e:
        console.print(f"[dim]Core properties unavailable: {e}[/dim]")
        return

    console.print(f"[bold]Title:[/bold] {properties.title or '-'}")
    console.print(f"[bold]Author:[/bold] {properties.author or '-'}")


@app.command()
def config(
    init: bool = typer.Option(False, "--init", help="Create a default config file"),
) -> None:
    """
    Show the docx-vars configuration.
    """
    config_manager = get_config_manager()

    if init:
        path = config_manager.create_default_config()
        console.print(f"[green]Created default configuration at {path}[/green]")

    config_info = config_manager.get_config_info()
    config_display = "\n".join(
        f"• {key.replace('_', ' ').title()}: {value}"
        for key, value in config_info.items()
    )
    console.print(Panel(config_display, title="docx-vars Configuration", border_style="green"))


if __name__ == "__main__":
    app()
