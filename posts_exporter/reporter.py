from __future__ import annotations

from typing import Dict, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from posts_exporter.exporters.abstract import ExportResult


def print_summary(result: ExportResult, console: Optional[Console] = None) -> None:
    """
    Render an export result as a rich table.
    """
    console = console or Console()

    table = Table(title="Posts Export", box=box.ROUNDED)
    table.add_column("Exporter", style="cyan", no_wrap=True)
    table.add_column("Records", justify="right", style="magenta")
    table.add_column("Destination", style="green")

    table.add_row(
        result.get("exporter", "Unknown"),
        f"{result.get('records', 0):,}",
        result.get("destination", ""),
    )
    if result.get("notes"):
        table.caption = result["notes"]

    console.print(table)


def print_exporters(descriptions: Dict[str, str], console: Optional[Console] = None) -> None:
    """
    List export types with their descriptions.
    """
    console = console or Console()

    if not descriptions:
        console.print("[yellow]No exporters registered.[/yellow]")
        return

    table = Table(title="Available Exporters", box=box.ROUNDED)
    table.add_column("Export Type", style="cyan", no_wrap=True)
    table.add_column("Description")

    names: List[str] = sorted(descriptions)
    for name in names:
        table.add_row(name, descriptions[name])

    console.print(table)
