from __future__ import annotations

"""Settings loader error utilities."""

import os
from typing import Iterable

from pydantic import ValidationError


class LoaderError(RuntimeError):
    """Wraps settings loading failures with file path context."""

    def __init__(self, file_path: str, message: str, *, cause: Exception | None = None):
        self.file_path = file_path
        self.message = message
        self.cause = cause
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        path = self._relative_path(self.file_path)
        base = f"{self.message} ({path})"
        if isinstance(self.cause, ValidationError):
            detail = self._format_validation_errors(self.cause.errors())
            return f"{base}: {detail}"
        if self.cause:
            return f"{base}: {self.cause}"
        return base

    @staticmethod
    def _relative_path(path: str) -> str:
        try:
            return os.path.relpath(path)
        except ValueError:  # pragma: no cover - different drive on Windows
            return path

    @staticmethod
    def _format_validation_errors(errors: Iterable[dict]) -> str:
        error_list = list(errors)
        snippets = []
        for err in error_list[:3]:
            loc = ".".join(str(entry) for entry in err.get("loc", [])) or "<root>"
            snippets.append(f"{loc}: {err.get('msg') or err.get('type') or 'invalid'}")
        if len(error_list) > len(snippets):
            snippets.append(f"... ({len(error_list) - len(snippets)} more)")
        return "; ".join(snippets)

    def __str__(self) -> str:
        return self._build_message()
