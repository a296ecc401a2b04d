"""
DataTracker

The public entry point: takes ownership of a value, hands out change channels
to subscribers, and hands out Modifiers to code that wants to change the value.
"""

from __future__ import annotations

import logging
import weakref
from typing import Generic, Optional, TypeVar

from change_tracker.core.channel import ChangeReceiver, OverflowPolicy, open_channel
from change_tracker.core.container import TrackedContainer
from change_tracker.core.modifier import Modifier
from change_tracker.errors import TrackerClosedError
from change_tracker.settings import TrackerSettings
from change_tracker.utils.logging import log_calls

T = TypeVar("T")

logger = logging.getLogger(__name__)


class DataTracker(Generic[T]):
    """
    Tracks changes to a value and notifies listeners.

    The tracked type must support ``==`` and ``copy.deepcopy``. Equality must
    be reflexive and consistent, otherwise change detection is unreliable.

    A DataTracker is not thread-safe. Code sharing one across threads must
    serialize access itself; the only check performed is that two Modifiers
    are never active at the same time.

    Attributes:
        settings: Channel defaults for new subscriptions

    Examples:
        >>> tracker = DataTracker(StoreType(val=123))
        >>> rx = tracker.subscribe()
        >>> with tracker.modify() as m:
        ...     m.value.val += 1
        >>> rx.try_recv()
        ChangeEvent(old=StoreType(val=123), new=StoreType(val=124))
    """

    def __init__(self, value: T, *, settings: Optional[TrackerSettings] = None):
        self.settings = settings or TrackerSettings()
        self._inner: TrackedContainer[T] = TrackedContainer(value)
        self._closed = False
        # Subscribers see their stream end when the tracker goes away
        self._finalizer = weakref.finalize(self, self._inner.close)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def listener_count(self) -> int:
        """Subscriptions registered and not yet pruned, counted during a fan-out too."""
        return self._inner.listener_count

    def current(self) -> T:
        """Return the live value. Never notifies."""
        return self._inner.value

    @log_calls()
    def subscribe(
        self,
        *,
        capacity: Optional[int] = None,
        overflow: Optional[OverflowPolicy] = None,
    ) -> ChangeReceiver:
        """
        Register a new listener.

        Args:
            capacity: Channel capacity, defaults to settings.channel_capacity
            overflow: Overflow policy, defaults to settings.overflow

        Returns:
            The receiving end of a new change channel. Close it (or drop it)
            to unsubscribe.

        Raises:
            TrackerClosedError: If the tracker has been closed
        """
        self._check_open()
        sender, receiver = open_channel(
            capacity if capacity is not None else self.settings.channel_capacity,
            overflow if overflow is not None else self.settings.overflow,
        )
        self._inner.add_listener(sender)
        return receiver

    def modify(self) -> Modifier[T]:
        """
        Return a Modifier for use in a ``with`` or ``async with`` block.

        Raises:
            TrackerClosedError: If the tracker has been closed
        """
        self._check_open()
        return Modifier(self._inner)

    def close(self) -> None:
        """Close all subscriber channels. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._finalizer()
        logger.debug("Tracker closed")

    def _check_open(self) -> None:
        if self._closed:
            raise TrackerClosedError("Tracker has been closed")

    def __enter__(self) -> "DataTracker[T]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"DataTracker(value={self._inner.value!r}, listeners={self.listener_count})"
