"""
Scoped Mutation Guard

Modifier grants exclusive read/write access to a tracked value for the length
of a ``with`` (or ``async with``) block and reports the net change when the
block ends, however it ends.

Key concepts:
- A deep copy of the value is taken when the modifier is acquired
- On release the copy is compared with the live value using ``==``
- Only an unequal result produces a ChangeEvent; a change reverted inside the
  block produces nothing
- Listeners are notified before exclusive access is given up
"""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from change_tracker.core.events import ChangeEvent
from change_tracker.errors import ModifierReleasedError

if TYPE_CHECKING:
    from change_tracker.core.container import TrackedContainer

T = TypeVar("T")

logger = logging.getLogger(__name__)

_MISSING: Any = object()


class Modifier(Generic[T]):
    """
    Temporary exclusive handle to the value owned by a DataTracker.

    Create one with DataTracker.modify(). While active, ``value`` reads and
    writes the live value. Mutable values may be changed in place; assigning
    to ``value`` replaces the value entirely.

    Examples:
        >>> with tracker.modify() as m:
        ...     m.value.val += 1
        >>> with tracker.modify() as m:
        ...     m.value = StoreType(val=0)
    """

    def __init__(self, container: "TrackedContainer[T]"):
        self._container = container
        self._snapshot: Any = _MISSING
        self._active = False
        self._used = False

    @property
    def active(self) -> bool:
        return self._active

    @property
    def snapshot(self) -> T:
        """Copy of the value as it was when the modifier was acquired."""
        self._check_active()
        return self._snapshot

    @property
    def value(self) -> T:
        self._check_active()
        return self._container.value

    @value.setter
    def value(self, new_value: T) -> None:
        self._check_active()
        self._container.value = new_value

    @property
    def changed(self) -> bool:
        """Whether the live value currently differs from the snapshot."""
        self._check_active()
        return self._snapshot != self._container.value

    def acquire(self) -> "Modifier[T]":
        """
        Take exclusive access and snapshot the value.

        Raises:
            ModifierActiveError: If another modifier is active on the tracker
            ModifierReleasedError: If this modifier was already used
        """
        if self._used:
            raise ModifierReleasedError("A modifier can only be acquired once")
        self._container.begin_modify()
        try:
            self._snapshot = copy.deepcopy(self._container.value)
        except BaseException:
            self._container.end_modify()
            raise
        self._used = True
        self._active = True
        return self

    def release(self) -> None:
        """
        Compare, notify on change, and give up exclusive access.

        Calling release() on a modifier that is not active does nothing.

        Raises:
            BackpressureError: If a subscriber using the "error" overflow
                policy could not take the event
        """
        if not self._active:
            return
        try:
            event = self._take_event()
            if event is not None:
                self._container.notify_listeners(event)
        finally:
            self._finish()

    async def release_async(self) -> None:
        """Like release(), but waits for room in full subscriber channels."""
        if not self._active:
            return
        try:
            event = self._take_event()
            if event is not None:
                await self._container.notify_listeners_async(event)
        finally:
            self._finish()

    def _take_event(self) -> ChangeEvent | None:
        snapshot = self._snapshot
        self._snapshot = _MISSING
        if snapshot == self._container.value:
            return None
        logger.debug("Change detected: %r -> %r", snapshot, self._container.value)
        return ChangeEvent(snapshot, copy.deepcopy(self._container.value))

    def _finish(self) -> None:
        self._active = False
        self._snapshot = _MISSING
        self._container.end_modify()

    def _check_active(self) -> None:
        if not self._active:
            raise ModifierReleasedError("Modifier is not active")

    def __enter__(self) -> "Modifier[T]":
        return self.acquire()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    async def __aenter__(self) -> "Modifier[T]":
        return self.acquire()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.release_async()

    def __repr__(self) -> str:
        state = "active" if self._active else "released" if self._used else "idle"
        return f"Modifier({state})"
