"""
In-process change feed.

Every successful write through the store publishes a ``ChangeEvent`` on the
entity's topic and bumps that topic's revision. Consumers either subscribe a
callback or hold the last revision they rendered and wait for a newer one,
so screens such as the HMO desk recompute only when something moved.
"""

import asyncio
import logging
from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Deque, Dict, List, Set

logger = logging.getLogger("hospitalflow")

PATIENT = "patient"
APPOINTMENT = "appointment"
BILL = "bill"
CLAIM = "claim"
STAFF = "staff"

TOPICS = (PATIENT, APPOINTMENT, BILL, CLAIM, STAFF)

Subscriber = Callable[["ChangeEvent"], None]


@dataclass(frozen=True)
class ChangeEvent:
    topic: str
    entity_id: str
    version: int
    revision: int
    occurred_at: datetime = field(default_factory=datetime.utcnow)


class ChangeFeed:
    """Per-topic revision counter with subscriber fan-out."""

    def __init__(self, history_size: int = 500) -> None:
        self._revisions: Dict[str, int] = defaultdict(int)
        self._history: Dict[str, Deque[ChangeEvent]] = defaultdict(
            lambda: deque(maxlen=history_size)
        )
        self._subscribers: Dict[str, List[Subscriber]] = defaultdict(list)
        self._waiters: Dict[str, Set[asyncio.Event]] = defaultdict(set)

    def revision(self, topic: str) -> int:
        return self._revisions[topic]

    def publish(self, topic: str, entity_id: str, version: int) -> ChangeEvent:
        self._revisions[topic] += 1
        event = ChangeEvent(
            topic=topic,
            entity_id=entity_id,
            version=version,
            revision=self._revisions[topic],
        )
        self._history[topic].append(event)

        for waiter in list(self._waiters[topic]):
            waiter.set()

        for callback in list(self._subscribers[topic]):
            try:
                callback(event)
            except Exception as e:
                logger.error(
                    f"Change subscriber failed on {topic}/{entity_id}: {e}", exc_info=True
                )
        return event

    def subscribe(self, topic: str, callback: Subscriber) -> Callable[[], None]:
        """Register a callback; returns a function that removes it."""
        self._subscribers[topic].append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers[topic]:
                self._subscribers[topic].remove(callback)

        return unsubscribe

    def changes_since(self, topic: str, revision: int) -> List[ChangeEvent]:
        """Events newer than ``revision`` still held in the bounded history."""
        return [event for event in self._history[topic] if event.revision > revision]

    async def wait_for_change(self, topic: str, since: int, timeout: float) -> int:
        """Return the topic revision once it passes ``since`` or the timeout expires."""
        if self._revisions[topic] > since:
            return self._revisions[topic]

        event = asyncio.Event()
        self._waiters[topic].add(event)
        try:
            await asyncio.wait_for(event.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            pass
        finally:
            self._waiters[topic].discard(event)
        return self._revisions[topic]
