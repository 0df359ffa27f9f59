"""
Progress events for analysis runs.

``EventBroadcaster`` is an in-process topic: every subscriber owns a bounded
queue, ``publish`` never blocks, and an event that does not fit in a
subscriber's queue is dropped for that subscriber (at-most-once delivery).
Subscribers only see events published after they joined.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any

from utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 100


class WorkflowEvent(str, Enum):
    ANALYSIS_STARTED = "analysis:started"
    STAGE_STARTED = "stage:started"
    AGENT_MESSAGE = "agent:message"
    STAGE_FINISHED = "stage:finished"
    ANALYSIS_COMPLETED = "analysis:completed"
    ANALYSIS_FAILED = "analysis:failed"


@dataclass(frozen=True)
class Event:
    name: str
    payload: Mapping[str, Any]
    published_at: datetime = field(default_factory=utc_now)

    @property
    def analysis_id(self) -> str | None:
        return self.payload.get("analysis_id")


class EventPublisher(ABC):
    """Sink for workflow progress events."""

    @abstractmethod
    def publish(self, event: str, payload: Mapping[str, Any]) -> None:
        """Hand off one event; must return without waiting on consumers."""


class Subscription:
    """A subscriber's view of the topic, optionally limited to one analysis."""

    def __init__(
        self,
        broadcaster: "EventBroadcaster",
        analysis_id: str | None = None,
        maxsize: int = DEFAULT_QUEUE_SIZE,
    ) -> None:
        if maxsize < 1:
            raise ValueError("maxsize must be >= 1")
        self._broadcaster = broadcaster
        self.analysis_id = analysis_id
        self.queue: asyncio.Queue[Event] = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0
        self.closed = False

    def wants(self, event: Event) -> bool:
        return self.analysis_id is None or event.analysis_id == self.analysis_id

    def offer(self, event: Event) -> bool:
        """Queue ``event`` without blocking; return False when it was dropped."""
        try:
            self.queue.put_nowait(event)
            return True
        except asyncio.QueueFull:
            self.dropped += 1
            return False

    async def get(self) -> Event:
        return await self.queue.get()

    def get_nowait(self) -> Event:
        return self.queue.get_nowait()

    def drain(self) -> list[Event]:
        """Return every queued event without waiting."""
        events = []
        while not self.queue.empty():
            events.append(self.queue.get_nowait())
        return events

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._broadcaster.unsubscribe(self)

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> Event:
        return await self.get()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class EventBroadcaster(EventPublisher):
    """Fan-out of workflow events to any number of in-process subscribers."""

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(
        self, analysis_id: str | None = None, maxsize: int = DEFAULT_QUEUE_SIZE
    ) -> Subscription:
        """Join the topic; pass ``analysis_id`` to receive only that run's events."""
        subscription = Subscription(self, analysis_id=analysis_id, maxsize=maxsize)
        self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def publish(self, event: str, payload: Mapping[str, Any]) -> None:
        name = event.value if isinstance(event, WorkflowEvent) else str(event)
        record = Event(name, MappingProxyType(dict(payload)))
        # Copy: a subscriber may unsubscribe while we iterate
        for subscription in list(self._subscriptions):
            if subscription.wants(record) and not subscription.offer(record):
                logger.debug(
                    f"Dropped {name} for a full subscriber ({subscription.dropped} dropped so far)"
                )
