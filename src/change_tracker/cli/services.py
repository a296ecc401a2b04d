from __future__ import annotations

"""Async demo driving a DataTracker from an event loop timer."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel

from change_tracker.core.channel import ChangeReceiver
from change_tracker.core.events import ChangeEvent
from change_tracker.core.tracker import DataTracker
from change_tracker.settings import TrackerSettings

logger = logging.getLogger(__name__)


class StoreValue(BaseModel):
    """The value tracked by the increment demo."""

    val: int


@dataclass
class DemoResult:
    """Outcome of one demo run: the first event each subscriber saw, and the final value."""

    events: List[Optional[ChangeEvent]] = field(default_factory=list)
    final: Optional[StoreValue] = None


async def _first_change(receiver: ChangeReceiver) -> Optional[ChangeEvent]:
    # Stop after the first event; None if the stream ended without one
    async for event in receiver:
        return event
    return None


async def run_increment_demo(
    start: int,
    step: int = 1,
    subscribers: int = 1,
    settings: TrackerSettings | None = None,
) -> DemoResult:
    """Increment ``val`` on a zero-delay timer and collect what subscribers observe."""
    tracker = DataTracker(StoreValue(val=start), settings=settings)
    receivers = [tracker.subscribe() for _ in range(subscribers)]
    consumers = [asyncio.ensure_future(_first_change(rx)) for rx in receivers]

    loop = asyncio.get_running_loop()
    changed = loop.create_future()

    def cause_change() -> None:
        try:
            with tracker.modify() as modifier:
                logger.info("Initial value %d", modifier.value.val)
                modifier.value.val += step
        except Exception as exc:
            changed.set_exception(exc)
            return
        changed.set_result(None)

    loop.call_later(0, cause_change)
    try:
        await changed
    except BaseException:
        for consumer in consumers:
            consumer.cancel()
        raise
    finally:
        tracker.close()

    events = await asyncio.gather(*consumers)
    return DemoResult(events=list(events), final=tracker.current())


__all__ = [
    "DemoResult",
    "StoreValue",
    "run_increment_demo",
]
