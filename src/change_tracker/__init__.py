"""
Track changes to a value and notify listeners.

DataTracker takes ownership of a value. DataTracker.subscribe() returns a
ChangeReceiver, an async iterator that yields ``(old, new)`` pairs right
after each change. DataTracker.modify() returns a Modifier, a scoped guard
that snapshots the value when entered and, when the block exits, notifies
subscribers if the value no longer equals the snapshot.

Example:
    tracker = DataTracker(StoreType(val=123))
    rx = tracker.subscribe()

    with tracker.modify() as m:
        m.value.val += 1

    old, new = await rx.recv()
"""

from change_tracker.core import (
    ChangeEvent,
    ChangeReceiver,
    ChangeSender,
    DataTracker,
    Modifier,
    OverflowPolicy,
    open_channel,
)
from change_tracker.errors import (
    BackpressureError,
    ChannelClosedError,
    ChannelFullError,
    ModifierActiveError,
    ModifierReleasedError,
    TrackerClosedError,
    TrackerError,
)
from change_tracker.settings import TrackerSettings

__all__ = [
    "BackpressureError",
    "ChangeEvent",
    "ChangeReceiver",
    "ChangeSender",
    "ChannelClosedError",
    "ChannelFullError",
    "DataTracker",
    "Modifier",
    "ModifierActiveError",
    "ModifierReleasedError",
    "OverflowPolicy",
    "TrackerClosedError",
    "TrackerError",
    "TrackerSettings",
    "open_channel",
]
