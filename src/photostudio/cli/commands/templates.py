"""Templates command implementation."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.table import Table

from photostudio.core.templates import DEFAULT_CATALOG, TemplateCatalog

console = Console()


def templates_command() -> None:
    """List the available prompt templates."""
    render_templates_table(DEFAULT_CATALOG, console=console)


def render_templates_table(catalog: TemplateCatalog, *, console: Console) -> None:
    table = Table(title="Prompt templates", box=box.ROUNDED, header_style="bold")
    table.add_column("ID", style="bold cyan")
    table.add_column("Name")
    table.add_column("Instruction", overflow="fold")
    for template in catalog.list():
        table.add_row(template.id, template.name, template.prompt)
    console.print(table)
