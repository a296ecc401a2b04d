from __future__ import annotations

import logging
import os
from typing import Any, Dict

import yaml
from pydantic import ValidationError

from change_tracker.io.errors import LoaderError
from change_tracker.settings import TrackerSettings
from change_tracker.utils.logging import log_calls

logger = logging.getLogger(__name__)


def _read_yaml_file(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@log_calls()
def load_settings(path: str | None) -> TrackerSettings:
    """Load tracker settings from a YAML file.

    Expected format:
    tracker:
      channel_capacity: 1
      overflow: drop_oldest

    A missing path, or a file without a ``tracker`` section, gives defaults.
    """
    if path is None or not os.path.exists(path):
        return TrackerSettings()
    try:
        data = _read_yaml_file(path)
    except yaml.YAMLError as exc:
        raise LoaderError(path, "Malformed YAML", cause=exc) from exc
    if not isinstance(data, dict):
        raise LoaderError(path, "Expected a mapping at the top level")
    section: Dict[str, Any] = data.get("tracker") or {}
    try:
        settings = TrackerSettings.model_validate(section)
    except ValidationError as exc:
        raise LoaderError(path, "Invalid tracker settings", cause=exc) from exc
    logger.debug("Loaded settings from %s: %s", path, settings)
    return settings
