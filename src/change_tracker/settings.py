"""Tracker configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from change_tracker.core.channel import DEFAULT_CAPACITY, OverflowPolicy


class TrackerSettings(BaseModel):
    """
    Defaults applied to each new subscription.

    Attributes:
        channel_capacity: Undelivered events a subscriber channel can hold
        overflow: What a synchronous release does when a channel is full
            ("drop_oldest", "drop_newest" or "error"). Asynchronous
            release always waits for room instead.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    channel_capacity: int = Field(default=DEFAULT_CAPACITY, ge=1)
    overflow: OverflowPolicy = "drop_oldest"
