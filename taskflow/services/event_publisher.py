"""Domain Event Publisher — hands committed events to the transport, never failing the command.

Invariants:
    - publish() returns True when the transport accepted the event, False otherwise
    - Any transport exception is logged at ERROR with event_type and swallowed
    - Called only after the store commit succeeded

Design Decisions:
    - Fire-and-forget: subscribers run on the transport's workers, not on the request
"""

import logging
from collections.abc import Iterable

from taskflow.core.events import DomainEvent
from taskflow.core.repository_protocols import EventTransport

logger = logging.getLogger(__name__)


class DomainEventPublisher:
    def __init__(self, transport: EventTransport | None):
        self._transport = transport

    async def publish(self, event: DomainEvent) -> bool:
        if self._transport is None:
            logger.error(
                f"No event transport configured, dropping {event.event_type}",
                extra={"event_type": event.event_type, "event_id": str(event.event_id)},
            )
            return False
        try:
            await self._transport.publish(event)
        except Exception as e:
            logger.error(
                f"Failed to publish {event.event_type}: {e}",
                extra={
                    "event_type": event.event_type,
                    "event_id": str(event.event_id),
                    "error_code": getattr(e, "code", type(e).__name__),
                },
            )
            return False
        logger.debug(
            f"Published {event.event_type}",
            extra={"event_type": event.event_type, "event_id": str(event.event_id)},
        )
        return True

    async def publish_all(self, events: Iterable[DomainEvent]) -> int:
        """Publish in order; returns how many were accepted."""
        accepted = 0
        for event in events:
            if await self.publish(event):
                accepted += 1
        return accepted
