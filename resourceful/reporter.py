"""Rich console output: route helper tables and helper check results."""

from __future__ import annotations

from typing import List, NamedTuple, Optional

from rich.console import Console
from rich.table import Table

from .route_helpers import RouteSet


class CheckResult(NamedTuple):
    action: str  # index, show, ...
    method: str  # objects_path, ...
    helper_name: str  # person_hats_path
    result: Optional[str]  # generated path, None when the helper is missing
    error: Optional[str] = None


def print_helpers(route_set: RouteSet, console: Optional[Console] = None) -> None:
    """Print every named route with its path template."""
    console = console or Console()

    if not route_set.routes:
        console.print("[yellow]No named routes found.[/yellow]")
        return

    table = Table(title="Route Helpers")
    table.add_column("Helper", style="bold cyan", no_wrap=True)
    table.add_column("Path", style="white")
    table.add_column("Segments", style="dim")

    for name, template in route_set.routes:
        segments = route_set.helpers[f"{name}_path"].segments
        table.add_row(f"{name}_path", template, ", ".join(segments))

    console.print(table)
    console.print(f"[bold]{len(route_set.routes)}[/bold] named routes")


def print_check(controller: str, results: List[CheckResult],
                console: Optional[Console] = None) -> None:
    """Print how each standard URL helper of a controller resolved."""
    console = console or Console()

    table = Table(title=f"URL helpers for {controller}")
    table.add_column("Action", style="bold", width=8)
    table.add_column("Method", style="cyan")
    table.add_column("Route helper")
    table.add_column("Result")

    for result in results:
        if result.result is not None:
            outcome = f"[green]✓ {result.result}[/green]"
        else:
            outcome = f"[bold red]⚠ {result.error}[/bold red]"
        table.add_row(result.action, result.method, result.helper_name, outcome)

    console.print(table)

    missing = sum(1 for r in results if r.result is None)
    if missing:
        console.print(f"[bold red]{missing} helper(s) failed to resolve[/bold red]")
    else:
        console.print("[green]All helpers resolved[/green]")
