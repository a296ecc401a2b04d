from __future__ import annotations

"""Utilities for resolving the settings file location."""

from pathlib import Path

SETTINGS_FILENAME = "tracker.yaml"


def default_settings_path() -> Path:
    return Path.cwd() / SETTINGS_FILENAME


def settings_path(path: str | None) -> str:
    return path or str(default_settings_path())


__all__ = ["SETTINGS_FILENAME", "default_settings_path", "settings_path"]
