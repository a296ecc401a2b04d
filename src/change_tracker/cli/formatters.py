"""Formatting helpers for CLI presentation."""

from __future__ import annotations

from typing import Optional, Sequence

from rich.table import Table

from change_tracker.core.events import ChangeEvent
from change_tracker.settings import TrackerSettings


def build_events_table(events: Sequence[Optional[ChangeEvent]]) -> Table:
    table = Table(title="Change Events")
    table.add_column("Subscriber")
    table.add_column("Old")
    table.add_column("New")
    for index, event in enumerate(events, start=1):
        if event is None:
            table.add_row(f"#{index}", "[dim]no change[/dim]", "[dim]no change[/dim]")
        else:
            table.add_row(f"#{index}", repr(event.old), repr(event.new))
    return table


def build_settings_table(settings: TrackerSettings, source: str) -> Table:
    table = Table(title=f"Tracker Settings ({source})")
    table.add_column("Setting")
    table.add_column("Value")
    for name, value in settings.model_dump().items():
        table.add_row(name, str(value))
    return table


__all__ = [
    "build_events_table",
    "build_settings_table",
]
