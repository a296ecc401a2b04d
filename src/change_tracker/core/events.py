from __future__ import annotations

import copy
from typing import Any, NamedTuple


class ChangeEvent(NamedTuple):
    """The value before and after a mutation that changed it."""

    old: Any
    new: Any

    def duplicate(self) -> "ChangeEvent":
        """Return an independent deep copy so subscribers never share state."""
        return ChangeEvent(copy.deepcopy(self.old), copy.deepcopy(self.new))
