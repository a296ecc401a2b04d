from __future__ import annotations
import logging
from functools import wraps
from typing import Any, Callable

from rich.console import Console
from rich.logging import RichHandler


def log_calls(logger_name: str | None = None) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator to trace calls at DEBUG level; failures are logged and re-raised."""

    def _decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        name = logger_name or func.__module__
        logger = logging.getLogger(name)

        @wraps(func)
        def _wrapper(*args: Any, **kwargs: Any) -> Any:
            logger.debug("Calling %s args=%s kwargs=%s", func.__qualname__, args, kwargs)
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.exception("Error in %s: %s", func.__qualname__, e)
                raise
            logger.debug("%s returned %r", func.__qualname__, result)
            return result

        return _wrapper

    return _decorator


def configure_logging(verbose: bool = False, *, console: Console | None = None) -> None:
    """Route change_tracker logs through rich, at DEBUG when verbose."""
    handler = RichHandler(console=console, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root = logging.getLogger("change_tracker")
    for existing in list(root.handlers):
        if isinstance(existing, RichHandler):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
