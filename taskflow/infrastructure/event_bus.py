"""In-Process Event Bus — partitioned asyncio transport for domain events.

Invariants:
    - Partition = project_id.int % partitions; one queue and one worker per partition
    - Events in the same partition reach subscribers in publish order
    - publish() only enqueues; it never awaits subscribers
    - A subscriber exception is logged and does not stop the worker or other subscribers
    - publish() while stopped raises TransportUnavailableError

Design Decisions:
    - Unbounded queues: publish happens after commit and must not block the request
    - stop() drains queued events before the workers exit
"""

import asyncio
import logging

from taskflow.core.errors import TransportUnavailableError
from taskflow.core.events import DomainEvent
from taskflow.core.repository_protocols import EventHandler

logger = logging.getLogger(__name__)

_STOP = object()


class InMemoryEventBus:
    def __init__(self, partitions: int = 4):
        if partitions < 1:
            raise ValueError("partitions must be >= 1")
        self._partitions = partitions
        self._subscribers: list[EventHandler] = []
        self._queues: list[asyncio.Queue] = []
        self._workers: list[asyncio.Task] = []
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def subscribe(self, handler: EventHandler) -> None:
        self._subscribers.append(handler)

    def partition_for(self, event: DomainEvent) -> int:
        return event.project_id.int % self._partitions

    async def start(self) -> None:
        if self._running:
            return
        self._queues = [asyncio.Queue() for _ in range(self._partitions)]
        self._workers = [
            asyncio.create_task(self._consume(i), name=f"event-bus-{i}")
            for i in range(self._partitions)
        ]
        self._running = True
        logger.info(f"Event bus started with {self._partitions} partitions")

    async def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        for queue in self._queues:
            queue.put_nowait(_STOP)
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []
        logger.info("Event bus stopped")

    async def publish(self, event: DomainEvent) -> None:
        if not self._running:
            raise TransportUnavailableError()
        self._queues[self.partition_for(event)].put_nowait(event)

    async def drain(self) -> None:
        """Wait until every queued event has been handled."""
        await asyncio.gather(*(q.join() for q in self._queues))

    async def _consume(self, index: int) -> None:
        queue = self._queues[index]
        while True:
            event = await queue.get()
            try:
                if event is _STOP:
                    return
                for handler in list(self._subscribers):
                    try:
                        await handler(event)
                    except Exception:
                        logger.exception(
                            "Event subscriber failed",
                            extra={
                                "event_type": event.event_type,
                                "event_id": str(event.event_id),
                                "partition": index,
                            },
                        )
            finally:
                queue.task_done()
