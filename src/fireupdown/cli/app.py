"""
Root Typer application for the fireupdown CLI.

    fireupdown plan app.boot:systems --direction down
    fireupdown run app.boot:systems production --state '{"region": "eu"}'
"""

from __future__ import annotations

import asyncio

import typer
from typer import Typer

from fireupdown.cli.utils import (
    EXIT_ACTION_FAILED,
    EXIT_BAD_TARGET,
    err_console,
    load_target,
    output_plan,
    output_state,
    parse_state,
)
from fireupdown.core.errors import ConfigError
from fireupdown.core.logging import LogContext, configure_logging, get_logger
from fireupdown.core.settings import get_settings
from fireupdown.orchestration import Direction, down, plan, up

logger = get_logger(__name__)

app = Typer(
    name="fireupdown",
    help="fireupdown: bring systems up and down in run-level order.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from fireupdown import __version__

        typer.echo(f"fireupdown {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """fireupdown CLI: inspect and run system lifecycles."""
    try:
        settings = get_settings()
    except ConfigError as exc:
        err_console.print(f"[bold red]Error[/bold red] (CONFIG): {exc.message}")
        raise typer.Exit(code=EXIT_BAD_TARGET) from exc
    configure_logging(
        level=settings.log_level,
        json_format=settings.log_json,
        service=settings.service,
    )


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("plan")
def show_plan(
    target: str = typer.Argument(..., help="Systems target, 'package.module:attribute'"),
    direction: Direction = typer.Option(Direction.UP, "--direction", "-d"),
    app_dir: str = typer.Option(".", "--app-dir", help="Directory added to sys.path"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show the levels a lifecycle would run, in order."""
    systems = load_target(target, app_dir)
    output_plan(
        plan(systems, direction),
        as_json=json_out,
        title=f"{target} ({direction.value})",
    )


@app.command("run")
def run_lifecycle(
    target: str = typer.Argument(..., help="Systems target, 'package.module:attribute'"),
    args: list[str] | None = typer.Argument(None, help="Arguments passed to every action"),
    direction: Direction = typer.Option(Direction.UP, "--direction", "-d"),
    state: str | None = typer.Option(None, "--state", help="Seed state as a JSON object"),
    app_dir: str = typer.Option(".", "--app-dir", help="Directory added to sys.path"),
) -> None:
    """Run a lifecycle and print the final state as JSON."""
    systems = load_target(target, app_dir)
    seed = parse_state(state)
    runner = up(systems) if direction is Direction.UP else down(systems)

    with LogContext(target=target, direction=direction.value):
        try:
            final = asyncio.run(runner(*(args or ()), state=seed))
        except Exception as exc:  # noqa: BLE001
            logger.error("cli.run_failed", error=repr(exc))
            err_console.print(f"[bold red]Failed[/bold red]: {type(exc).__name__}: {exc}")
            raise typer.Exit(code=EXIT_ACTION_FAILED) from exc

    output_state(final)
