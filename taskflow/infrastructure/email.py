"""Email Sender — simulated delivery that records messages in the log.

Invariants:
    - send() never raises for a well-formed message
    - Message bodies are not logged, only recipient and subject
"""

import logging

from taskflow.core.notifications import EmailMessage

logger = logging.getLogger(__name__)


class LoggingEmailSender:
    """EmailSender that logs instead of delivering. Keeps the last messages for inspection."""

    def __init__(self, keep_last: int = 100):
        self._keep_last = keep_last
        self.sent: list[EmailMessage] = []

    async def send(self, message: EmailMessage) -> None:
        logger.info(f"Email queued to {message.to}: {message.subject}")
        self.sent.append(message)
        if len(self.sent) > self._keep_last:
            del self.sent[: len(self.sent) - self._keep_last]
