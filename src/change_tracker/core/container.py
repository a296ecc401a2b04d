"""
Tracked Container

Holds the current value of a DataTracker together with its listener registry
and fans change events out to subscribers.

Key concepts:
- Listeners are the sending halves of change channels, kept in insertion order
- Subscribers whose receiver has gone away are pruned lazily, during the next
  fan-out, never eagerly
- A non-blocking lock enforces that at most one Modifier is active at a time
"""

from __future__ import annotations

import logging
import threading
from typing import Generic, List, TypeVar

from change_tracker.core.channel import ChangeSender
from change_tracker.core.events import ChangeEvent
from change_tracker.errors import (
    BackpressureError,
    ChannelClosedError,
    ChannelFullError,
    ModifierActiveError,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


class TrackedContainer(Generic[T]):
    """
    Owner of a tracked value and the senders listening to it.

    Attributes:
        value: The live value
        listeners: Sending halves of every subscription not yet pruned
    """

    def __init__(self, value: T):
        self.value: T = value
        self.listeners: List[ChangeSender] = []
        # Senders taken out of `listeners` by a fan-out that has not finished
        self._dispatching: List[ChangeSender] = []
        self._modify_lock = threading.Lock()

    @property
    def listener_count(self) -> int:
        """Registered senders, including any held by a fan-out in progress."""
        return len(self.listeners) + len(self._dispatching)

    @property
    def modifying(self) -> bool:
        """True while a Modifier holds exclusive access."""
        return self._modify_lock.locked()

    def add_listener(self, sender: ChangeSender) -> None:
        if any(existing is sender for existing in self.listeners):
            raise ValueError("Sender is already registered")
        self.listeners.append(sender)

    def begin_modify(self) -> None:
        """
        Claim exclusive access for a Modifier.

        Raises:
            ModifierActiveError: If another Modifier is already active
        """
        if not self._modify_lock.acquire(blocking=False):
            raise ModifierActiveError("Another modifier is already active for this tracker")

    def end_modify(self) -> None:
        self._modify_lock.release()

    def notify_listeners(self, event: ChangeEvent) -> None:
        """
        Deliver an event to every listener without waiting.

        Listeners whose receiver is closed are discarded. Full channels are
        handled by each channel's overflow policy.

        Raises:
            BackpressureError: After the fan-out, if any channel with the
                "error" policy was full
        """
        pending = self._take_listeners()
        survivors: List[ChangeSender] = []
        missed: List[ChangeSender] = []
        delivered = 0
        for sender in pending:
            try:
                if sender.send_nowait(event.duplicate()):
                    delivered += 1
            except ChannelClosedError:
                logger.debug("Pruned stale subscriber %r", sender)
                continue
            except ChannelFullError:
                missed.append(sender)
            survivors.append(sender)
        self._restore_listeners(survivors, delivered=delivered, total=len(pending))
        if missed:
            raise BackpressureError(len(missed), max(s.capacity for s in missed))

    async def notify_listeners_async(self, event: ChangeEvent) -> None:
        """Deliver an event to every listener, waiting for room in full channels."""
        pending = self._take_listeners()
        survivors: List[ChangeSender] = []
        delivered = 0
        self._dispatching = pending
        try:
            for index, sender in enumerate(pending):
                try:
                    await sender.send(event.duplicate())
                except ChannelClosedError:
                    logger.debug("Pruned stale subscriber %r", sender)
                    continue
                delivered += 1
                survivors.append(sender)
        except BaseException:
            # Cancelled mid fan-out: keep the senders not yet visited
            survivors.extend(pending[index:])
            self._restore_listeners(survivors, delivered=delivered, total=len(pending))
            raise
        self._restore_listeners(survivors, delivered=delivered, total=len(pending))

    def close(self) -> None:
        """Close every sender so subscribers see the end of their stream."""
        listeners = self._take_listeners() + self._dispatching
        for sender in listeners:
            sender.close()
        if listeners:
            logger.debug("Closed %d subscriber channel(s)", len(listeners))

    def _take_listeners(self) -> List[ChangeSender]:
        listeners = self.listeners
        self.listeners = []
        return listeners

    def _restore_listeners(self, survivors: List[ChangeSender], *, delivered: int, total: int) -> None:
        # Subscriptions made while the fan-out ran go after the survivors
        self.listeners = survivors + self.listeners
        self._dispatching = []
        logger.debug(
            "Fan-out delivered to %d of %d subscriber(s), %d pruned",
            delivered,
            total,
            total - len(survivors),
        )
