"""In-Process Event Bus — ordering per partition, failure isolation, lifecycle."""

import asyncio
from uuid import UUID, uuid4

import pytest

from taskflow.core.errors import TransportUnavailableError
from taskflow.core.events import ProjectUpdated
from taskflow.infrastructure.event_bus import InMemoryEventBus


def _event(project_id: UUID, n: int) -> ProjectUpdated:
    return ProjectUpdated(
        actor_id=uuid4(), actor_name="Olive Owner",
        project_id=project_id, project_name="Apollo",
        changed_fields=(f"field-{n}",),
    )


@pytest.fixture
async def bus():
    b = InMemoryEventBus(partitions=3)
    await b.start()
    yield b
    await b.stop()


async def test_same_project_events_arrive_in_order(bus):
    seen: list[str] = []

    async def handler(event):
        await asyncio.sleep(0)
        seen.append(event.changed_fields[0])

    bus.subscribe(handler)
    project_id = uuid4()
    for n in range(10):
        await bus.publish(_event(project_id, n))
    await bus.drain()

    assert seen == [f"field-{n}" for n in range(10)]


async def test_partition_is_stable_per_project(bus):
    project_id = UUID(int=7)
    assert bus.partition_for(_event(project_id, 1)) == 7 % 3
    assert bus.partition_for(_event(project_id, 2)) == bus.partition_for(_event(project_id, 1))


async def test_failing_subscriber_does_not_stop_others(bus):
    delivered: list = []

    async def broken(event):
        raise RuntimeError("subscriber bug")

    async def healthy(event):
        delivered.append(event)

    bus.subscribe(broken)
    bus.subscribe(healthy)
    await bus.publish(_event(uuid4(), 1))
    await bus.publish(_event(uuid4(), 2))
    await bus.drain()

    assert len(delivered) == 2


async def test_publish_when_stopped_raises():
    bus = InMemoryEventBus()
    with pytest.raises(TransportUnavailableError):
        await bus.publish(_event(uuid4(), 1))


async def test_stop_delivers_queued_events():
    bus = InMemoryEventBus(partitions=1)
    seen: list = []

    async def handler(event):
        seen.append(event)

    bus.subscribe(handler)
    await bus.start()
    await bus.publish(_event(uuid4(), 1))
    await bus.stop()

    assert len(seen) == 1
    assert not bus.is_running


def test_partitions_must_be_positive():
    with pytest.raises(ValueError):
        InMemoryEventBus(partitions=0)
