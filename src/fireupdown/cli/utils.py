"""
CLI utility helpers: target loading and output formatting.
"""

from __future__ import annotations

import json
import sys
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from fireupdown.core.errors import FireupdownError
from fireupdown.orchestration import Level, load_systems

console = Console()
err_console = Console(stderr=True)

# Exit codes
EXIT_ACTION_FAILED = 1
EXIT_BAD_TARGET = 2


def load_target(target: str, app_dir: str) -> list[Any]:
    """Load systems for ``target``, exiting with code 2 on loader errors."""
    if app_dir not in sys.path:
        sys.path.insert(0, app_dir)
    try:
        return load_systems(target)
    except FireupdownError as exc:
        err_console.print(f"[bold red]Error[/bold red] ({exc.category.value}): {exc.message}")
        raise typer.Exit(code=EXIT_BAD_TARGET) from exc


def parse_state(raw: str | None) -> dict[str, Any] | None:
    """Parse the ``--state`` JSON object, exiting with code 2 when malformed."""
    if raw is None:
        return None
    try:
        state = json.loads(raw)
    except json.JSONDecodeError as exc:
        err_console.print(f"[bold red]Error[/bold red]: --state is not valid JSON ({exc.msg})")
        raise typer.Exit(code=EXIT_BAD_TARGET) from exc
    if not isinstance(state, dict):
        err_console.print("[bold red]Error[/bold red]: --state must be a JSON object")
        raise typer.Exit(code=EXIT_BAD_TARGET)
    return state


def output_plan(levels: list[Level], *, as_json: bool = False, title: str = "") -> None:
    """Render a plan as a Rich table, or as JSON."""
    if as_json:
        console.print_json(json.dumps([level.to_dict() for level in levels]))
        return

    table = Table(title=title or None)
    table.add_column("Step", justify="right")
    table.add_column("RC", justify="right")
    table.add_column("Actions (concurrent)")
    for index, level in enumerate(levels):
        table.add_row(str(index), str(level.rc), ", ".join(level.labels) or "[dim]-[/dim]")
    console.print(table)


def output_state(state: dict[str, Any]) -> None:
    """Print the final state as JSON; values that are not JSON become strings."""
    typer.echo(json.dumps(state, indent=2, default=str))
