"""
Update Broadcaster

Fan-out publish channel for inquiry updates.  Every subscriber owns a
bounded ``asyncio.Queue``; :meth:`UpdateBroadcaster.publish` serialises
the inquiry once and enqueues it for each subscriber without blocking.

Delivery is best-effort: a subscriber whose queue is full or closed
misses that event and nobody else is affected.  There is no replay, so
a late subscriber must poll the inquiry store for earlier state.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Any

from backend.app.schema.inquiry_schema import Inquiry, InquiryEvent

logger = logging.getLogger(__name__)

INQUIRY_UPDATED = "inquiry_updated"


@dataclass
class Subscription:
    """One connected observer.

    Attributes:
        id: Identifier used in log lines
        queue: Pending events, oldest first
        closed: Set once the subscriber has disconnected
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    queue: asyncio.Queue = field(default_factory=lambda: asyncio.Queue(maxsize=1000))
    closed: bool = False

    async def next_event(self) -> dict[str, Any]:
        return await self.queue.get()


class UpdateBroadcaster:
    """Publish inquiry snapshots to every connected subscriber."""

    def __init__(self, queue_size: int = 1000) -> None:
        self._queue_size = queue_size
        self._subscribers: dict[str, Subscription] = {}
        self._lock = threading.Lock()

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def subscribe(self) -> Subscription:
        sub = Subscription(queue=asyncio.Queue(maxsize=self._queue_size))
        with self._lock:
            self._subscribers[sub.id] = sub
            total = len(self._subscribers)
        logger.info("Subscriber %s connected (%d total).", sub.id, total)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        """Detach *sub*.  Safe to call more than once."""
        sub.closed = True
        with self._lock:
            removed = self._subscribers.pop(sub.id, None) is not None
            total = len(self._subscribers)
        if removed:
            logger.info("Subscriber %s disconnected (%d remaining).", sub.id, total)

    def publish(self, inquiry: Inquiry) -> int:
        """Push the full inquiry record to all current subscribers.

        Returns the number of subscribers the event was queued for.
        """
        event = InquiryEvent(
            event=INQUIRY_UPDATED,
            data=inquiry.model_dump(mode="json", by_alias=True),
        ).model_dump()

        with self._lock:
            targets = list(self._subscribers.values())

        delivered = 0
        for sub in targets:
            if sub.closed:
                continue
            try:
                sub.queue.put_nowait(event)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning(
                    "Event queue full for subscriber %s, dropping update for inquiry %s (%s).",
                    sub.id, inquiry.id, inquiry.phase.value,
                )

        logger.debug(
            "Published %s for inquiry %s (phase=%s) to %d subscriber(s).",
            INQUIRY_UPDATED, inquiry.id, inquiry.phase.value, delivered,
        )
        return delivered
