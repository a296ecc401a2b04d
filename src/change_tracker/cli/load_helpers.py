from __future__ import annotations

"""Settings loading with CLI-friendly errors."""

from pathlib import Path

import typer
from rich.console import Console

from change_tracker.cli.paths import settings_path
from change_tracker.io import LoaderError, load_settings
from change_tracker.settings import TrackerSettings


def load_settings_or_exit(
    path: str | None,
    *,
    console: Console,
    verbose_errors: bool = False,
) -> TrackerSettings:
    """Load settings, exiting with code 1 on a missing explicit path or a bad file.

    Without an explicit path the default file is optional.
    """
    if path is not None and not Path(path).exists():
        console.print(f"[red]Path not found:[/red] {path}")
        raise typer.Exit(code=1)
    try:
        return load_settings(settings_path(path))
    except LoaderError as err:
        if verbose_errors and err.cause:
            console.print(f"[red]Failed to load settings:[/red] {err.message}\n{err.cause}")
        else:
            console.print(f"[red]Failed to load settings:[/red] {err}")
        raise typer.Exit(code=1)


__all__ = ["load_settings_or_exit"]
