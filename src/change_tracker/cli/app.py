"""
Change tracker CLI: run the increment demo and inspect settings.

The demo mirrors the library's canonical example: a tracker starts at
``{val: N}``, subscribers listen, an event loop timer increments the value
and each subscriber stops after its first change event.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import typer
from rich.console import Console

from change_tracker.cli.formatters import build_events_table, build_settings_table
from change_tracker.cli.load_helpers import load_settings_or_exit
from change_tracker.cli.paths import settings_path
from change_tracker.cli.services import run_increment_demo
from change_tracker.errors import TrackerError
from change_tracker.utils.logging import configure_logging

app = typer.Typer(help="Change tracker CLI: run the increment demo and inspect settings.")
console = Console()


@app.command()
def demo(
    start: int = typer.Option(123, "--start", help="Initial value of val"),
    step: int = typer.Option(1, "--step", help="Amount added to val by the timer"),
    subscribers: int = typer.Option(1, "--subscribers", "-n", min=0, help="Number of listeners"),
    config: Optional[str] = typer.Option(None, "--config", help="Path to a tracker settings YAML file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Increment a tracked value on an event loop timer and print the change events."""
    configure_logging(verbose, console=console)
    settings = load_settings_or_exit(config, console=console, verbose_errors=verbose)

    try:
        result = asyncio.run(run_increment_demo(start, step, subscribers, settings))
    except TrackerError as exc:
        console.print(f"[red]Demo failed:[/red] {exc}")
        raise typer.Exit(code=1)

    if result.events:
        console.print(build_events_table(result.events))
    else:
        console.print("[dim]No subscribers[/dim]")

    if not any(result.events) and subscribers:
        console.print("[yellow]Value unchanged, no events delivered[/yellow]")

    console.print(f"[bold]Final value:[/bold] val={result.final.val}")


@app.command("config")
def show_config(
    path: Optional[str] = typer.Argument(None, help="Settings file (defaults to ./tracker.yaml)"),
    verbose: bool = typer.Option(False, "--verbose-load", help="Display full validation trace on loader errors"),
) -> None:
    """Show the effective tracker settings."""
    settings = load_settings_or_exit(path, console=console, verbose_errors=verbose)
    console.print(build_settings_table(settings, settings_path(path)))


if __name__ == "__main__":
    app()
