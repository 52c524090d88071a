"""fireupdown command-line interface (Typer)."""

from fireupdown.cli.app import app

__all__ = ["app"]
