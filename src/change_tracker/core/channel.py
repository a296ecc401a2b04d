"""
Change Channel

A bounded, single-consumer queue carrying ChangeEvent pairs from a tracker to
one subscriber. The sending half lives in the tracker's listener registry, the
receiving half is handed to the subscriber.

Key concepts:
- Sending never blocks on the synchronous path; a full channel is resolved by
  the channel's overflow policy
- Sending on the asynchronous path waits for room instead
- Closing (or garbage collecting) the receiver is how a subscriber
  unsubscribes; the next send through the sender fails with ChannelClosedError
- Closing the sender ends the stream once buffered events are drained
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from collections import deque
from typing import Deque, Literal, Optional, Tuple

from change_tracker.core.events import ChangeEvent
from change_tracker.errors import ChannelClosedError, ChannelFullError

# What a synchronous send does when the channel is already at capacity
OverflowPolicy = Literal["drop_oldest", "drop_newest", "error"]

DEFAULT_CAPACITY = 1

logger = logging.getLogger(__name__)


class _ChannelState:
    """Buffer and lifecycle flags shared by both halves of one channel."""

    def __init__(self, capacity: int, overflow: OverflowPolicy):
        self.capacity = capacity
        self.overflow = overflow
        self.buffer: Deque[ChangeEvent] = deque()
        self.sender_closed = False
        self.receiver_closed = False
        self.readable = asyncio.Event()
        self.writable = asyncio.Event()
        # Loop of the coroutine that last waited on this channel
        self.loop: Optional[asyncio.AbstractEventLoop] = None

    def is_full(self) -> bool:
        return len(self.buffer) >= self.capacity

    def bind_loop(self) -> None:
        # Bound before the buffer is inspected so a send from another thread
        # either lands in the buffer first or wakes this loop
        self.loop = asyncio.get_running_loop()

    def wake(self, event: asyncio.Event) -> None:
        """Set an event from any thread; waiters resume on their own loop."""
        loop = self.loop
        if loop is None:
            event.set()
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            event.set()
            return
        try:
            loop.call_soon_threadsafe(event.set)
        except RuntimeError:
            # Loop already closed, nobody is left waiting on it
            event.set()

    def push(self, event: ChangeEvent) -> None:
        self.buffer.append(event)
        self.wake(self.readable)

    def pop(self) -> ChangeEvent:
        event = self.buffer.popleft()
        self.wake(self.writable)
        return event

    def close_sender(self) -> None:
        self.sender_closed = True
        self.wake(self.readable)
        self.wake(self.writable)

    def close_receiver(self) -> None:
        self.receiver_closed = True
        self.buffer.clear()
        self.wake(self.writable)
        self.wake(self.readable)


class ChangeSender:
    """Sending half of a change channel, owned by a tracker's listener registry."""

    def __init__(self, state: _ChannelState):
        self._state = state

    @property
    def capacity(self) -> int:
        return self._state.capacity

    @property
    def overflow(self) -> OverflowPolicy:
        return self._state.overflow

    @property
    def closed(self) -> bool:
        """True once either half has been closed."""
        return self._state.sender_closed or self._state.receiver_closed

    def _check_open(self) -> None:
        if self._state.receiver_closed:
            raise ChannelClosedError("Receiver has been closed")
        if self._state.sender_closed:
            raise ChannelClosedError("Sender has been closed")

    def send_nowait(self, event: ChangeEvent) -> bool:
        """
        Deliver an event without waiting.

        Returns:
            True if the event was queued, False if the overflow policy
            discarded it ("drop_newest")

        Raises:
            ChannelClosedError: If the receiver is gone
            ChannelFullError: If the channel is full and the policy is "error"
        """
        self._check_open()
        state = self._state
        if state.is_full():
            if state.overflow == "drop_newest":
                logger.debug("Channel full, dropping newest event")
                return False
            if state.overflow == "error":
                raise ChannelFullError(f"Channel full (capacity {state.capacity})")
            state.buffer.popleft()
            logger.debug("Channel full, dropped oldest pending event")
        state.push(event)
        return True

    async def send(self, event: ChangeEvent) -> None:
        """Deliver an event, waiting while the channel is full."""
        state = self._state
        state.bind_loop()
        while True:
            self._check_open()
            if not state.is_full():
                break
            state.writable.clear()
            await state.writable.wait()
        state.push(event)

    def close(self) -> None:
        """End the stream. Events already queued stay readable."""
        self._state.close_sender()

    def __repr__(self) -> str:
        return f"ChangeSender(capacity={self.capacity}, overflow={self.overflow!r}, closed={self.closed})"


class ChangeReceiver:
    """
    Receiving half of a change channel, held by a subscriber.

    Iterate it with ``async for old, new in receiver`` or pull single events
    with ``recv()``/``try_recv()``. Iteration ends when the tracker closes.
    Closing the receiver, or dropping the last reference to it, unsubscribes.

    Examples:
        >>> rx = tracker.subscribe()
        >>> async for old, new in rx:
        ...     print(old, "->", new)
    """

    def __init__(self, state: _ChannelState):
        self._state = state
        self._finalizer = weakref.finalize(self, state.close_receiver)

    @property
    def closed(self) -> bool:
        return self._state.receiver_closed

    @property
    def pending(self) -> int:
        """Number of events buffered and not yet received."""
        return len(self._state.buffer)

    async def recv(self) -> ChangeEvent:
        """
        Wait for the next change event.

        Raises:
            ChannelClosedError: If this receiver was closed, or the sender
                was closed and no events remain
        """
        state = self._state
        state.bind_loop()
        while not state.buffer:
            if state.receiver_closed:
                raise ChannelClosedError("Receiver has been closed")
            if state.sender_closed:
                raise ChannelClosedError("Tracker has been closed")
            state.readable.clear()
            await state.readable.wait()
        return state.pop()

    def try_recv(self) -> Optional[ChangeEvent]:
        """Return the next buffered event, or None if nothing is waiting."""
        if not self._state.buffer:
            return None
        return self._state.pop()

    def close(self) -> None:
        """Unsubscribe. Buffered events are discarded."""
        self._finalizer()

    def __aiter__(self) -> "ChangeReceiver":
        return self

    async def __anext__(self) -> ChangeEvent:
        try:
            return await self.recv()
        except ChannelClosedError:
            raise StopAsyncIteration from None

    def __enter__(self) -> "ChangeReceiver":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ChangeReceiver(pending={self.pending}, closed={self.closed})"


def open_channel(
    capacity: int = DEFAULT_CAPACITY,
    overflow: OverflowPolicy = "drop_oldest",
) -> Tuple[ChangeSender, ChangeReceiver]:
    """
    Create a connected sender/receiver pair.

    Args:
        capacity: Maximum number of undelivered events (at least 1)
        overflow: What a non-waiting send does when the channel is full

    Raises:
        ValueError: If capacity is below 1 or the policy is unknown
    """
    if capacity < 1:
        raise ValueError(f"Channel capacity must be at least 1, got {capacity}")
    if overflow not in ("drop_oldest", "drop_newest", "error"):
        raise ValueError(f"Unknown overflow policy: {overflow!r}")
    state = _ChannelState(capacity, overflow)
    return ChangeSender(state), ChangeReceiver(state)


__all__ = [
    "ChangeReceiver",
    "ChangeSender",
    "DEFAULT_CAPACITY",
    "OverflowPolicy",
    "open_channel",
]
