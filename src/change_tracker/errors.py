"""Exception hierarchy for change tracking."""

from __future__ import annotations


class TrackerError(RuntimeError):
    """Base class for all change tracker failures."""


class ChannelClosedError(TrackerError):
    """The other end of a change channel has gone away."""


class ChannelFullError(TrackerError):
    """A change channel is at capacity and its overflow policy is 'error'."""


class BackpressureError(TrackerError):
    """One or more subscribers could not accept a change event.

    Raised after the fan-out has finished, so every other subscriber
    still received the event and no subscription was lost.
    """

    def __init__(self, missed: int, capacity: int):
        self.missed = missed
        self.capacity = capacity
        super().__init__(
            f"{missed} subscriber(s) missed a change event (channel capacity {capacity})"
        )


class ModifierActiveError(TrackerError):
    """A modifier is already active for this tracker."""


class ModifierReleasedError(TrackerError):
    """The modifier is not active (never acquired or already released)."""


class TrackerClosedError(TrackerError):
    """The tracker has been closed."""


__all__ = [
    "TrackerError",
    "ChannelClosedError",
    "ChannelFullError",
    "BackpressureError",
    "ModifierActiveError",
    "ModifierReleasedError",
    "TrackerClosedError",
]
