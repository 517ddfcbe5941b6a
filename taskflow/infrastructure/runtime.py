"""Application Runtime — process-wide collaborators shared by every request.

Invariants:
    - One token service, event bus, push registry and email sender per process
    - The notification fan-out is subscribed to the bus exactly once, at build time
    - start()/stop() are driven by the FastAPI lifespan

Design Decisions:
    - Held on app.state rather than module globals so tests can build their own
"""

from dataclasses import dataclass

from taskflow.config import Settings
from taskflow.infrastructure.email import LoggingEmailSender
from taskflow.infrastructure.event_bus import InMemoryEventBus
from taskflow.infrastructure.push_channel import ConnectionRegistry
from taskflow.infrastructure.security import JwtTokenService
from taskflow.services.notification_fanout import NotificationFanout


@dataclass
class AppRuntime:
    settings: Settings
    tokens: JwtTokenService
    event_bus: InMemoryEventBus
    push_registry: ConnectionRegistry
    email_sender: LoggingEmailSender

    async def start(self) -> None:
        await self.event_bus.start()

    async def stop(self) -> None:
        await self.event_bus.stop()


def build_runtime(settings: Settings) -> AppRuntime:
    event_bus = InMemoryEventBus(partitions=settings.event_partitions)
    push_registry = ConnectionRegistry(queue_size=settings.push_queue_size)
    email_sender = LoggingEmailSender()
    fanout = NotificationFanout(
        push_registry, email_sender,
        email_enabled=settings.email_notifications_enabled,
    )
    event_bus.subscribe(fanout)
    return AppRuntime(
        settings=settings,
        tokens=JwtTokenService.from_settings(settings),
        event_bus=event_bus,
        push_registry=push_registry,
        email_sender=email_sender,
    )
