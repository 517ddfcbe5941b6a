"""Notification Fan-out — transport subscriber that turns events into pushes and emails.

Invariants:
    - Recipients = event.recipient_ids minus the actor
    - Offline recipients miss the push (the channel returns 0, nothing is stored)
    - Email side effects only where core.notifications.build_email returns a message
    - A failing email send is logged and does not prevent the pushes

Design Decisions:
    - Pure decisions live in core/notifications.py; this class only performs IO
"""

import logging

from taskflow.core.events import DomainEvent
from taskflow.core.notifications import (
    build_email, build_notification, notification_recipients,
)
from taskflow.core.repository_protocols import EmailSender, PushChannel

logger = logging.getLogger(__name__)


class NotificationFanout:
    def __init__(
        self, push_channel: PushChannel, email_sender: EmailSender | None = None,
        email_enabled: bool = True,
    ):
        self._push = push_channel
        self._email = email_sender
        self._email_enabled = email_enabled

    async def __call__(self, event: DomainEvent) -> None:
        await self.handle(event)

    async def handle(self, event: DomainEvent) -> None:
        notification = build_notification(event)
        recipients = notification_recipients(event)
        delivered = 0
        if notification is not None:
            for user_id in recipients:
                delivered += await self._push.push(user_id, notification)
        logger.info(
            f"Fan-out {event.event_type}: {delivered} live deliveries",
            extra={
                "event_type": event.event_type,
                "event_id": str(event.event_id),
                "recipients": len(recipients),
            },
        )

        if not (self._email_enabled and self._email):
            return
        message = build_email(event)
        if message is None:
            return
        try:
            await self._email.send(message)
        except Exception as e:
            logger.error(
                f"Email side effect failed for {event.event_type}: {e}",
                extra={"event_type": event.event_type, "event_id": str(event.event_id)},
            )
