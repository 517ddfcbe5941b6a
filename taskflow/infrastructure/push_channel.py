"""Push Channel — per-user registry of live notification sessions.

Invariants:
    - A user may hold any number of sessions (tabs, devices); each has its own queue
    - push() to a user with no sessions is a no-op returning 0
    - A full session queue drops the notification with a WARNING; push() never blocks
    - disconnect() is idempotent
"""

import asyncio
import logging
from dataclasses import dataclass, field
from uuid import UUID, uuid4

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class PushSession:
    user_id: UUID
    queue: asyncio.Queue
    session_id: UUID = field(default_factory=uuid4)


class ConnectionRegistry:
    def __init__(self, queue_size: int = 100):
        self._queue_size = queue_size
        self._sessions: dict[UUID, list[PushSession]] = {}

    def connect(self, user_id: UUID) -> PushSession:
        session = PushSession(user_id=user_id, queue=asyncio.Queue(maxsize=self._queue_size))
        self._sessions.setdefault(user_id, []).append(session)
        logger.info("Push session connected", extra={"user_id": str(user_id)})
        return session

    def disconnect(self, session: PushSession) -> None:
        sessions = self._sessions.get(session.user_id)
        if not sessions or session not in sessions:
            return
        sessions.remove(session)
        if not sessions:
            del self._sessions[session.user_id]
        logger.info("Push session disconnected", extra={"user_id": str(session.user_id)})

    def connection_count(self, user_id: UUID) -> int:
        return len(self._sessions.get(user_id, ()))

    async def push(self, user_id: UUID, notification: dict) -> int:
        """Deliver to every session of user_id. Returns the number of sessions reached."""
        delivered = 0
        for session in list(self._sessions.get(user_id, ())):
            try:
                session.queue.put_nowait(notification)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning(
                    "Push queue full, notification dropped",
                    extra={"user_id": str(user_id), "event_type": notification.get("type")},
                )
        return delivered
