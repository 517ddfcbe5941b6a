"""Domain Event Publisher — transport failures never fail the command."""

import logging
from uuid import uuid4

from taskflow.core import requests as rq
from taskflow.core.domain_types import TaskStatus
from taskflow.core.events import ProjectDeleted
from taskflow.services.event_publisher import DomainEventPublisher


def _event():
    return ProjectDeleted(
        actor_id=uuid4(), actor_name="Olive Owner",
        project_id=uuid4(), project_name="Apollo",
    )


async def test_publish_without_transport_returns_false():
    assert await DomainEventPublisher(None).publish(_event()) is False


async def test_publish_all_counts_accepted(harness):
    publisher = DomainEventPublisher(harness.transport)
    assert await publisher.publish_all([_event(), _event()]) == 2
    harness.transport.available = False
    assert await publisher.publish_all([_event()]) == 0


async def test_status_change_persists_when_transport_down(harness, caplog):
    owner = await harness.create_user()
    project = await harness.create_project(owner)
    task = await harness.create_task(project.id, owner)
    harness.transport.available = False

    with caplog.at_level(logging.ERROR, logger="taskflow.services.event_publisher"):
        updated = await harness.send(
            rq.UpdateTask(task_id=task.id, status=TaskStatus.IN_PROGRESS), as_user=owner,
        )

    assert updated.status == TaskStatus.IN_PROGRESS
    assert any("Failed to publish TaskUpdated" in r.getMessage() for r in caplog.records)

    harness.transport.available = True
    fetched = await harness.send(rq.GetTask(task_id=task.id), as_user=owner)
    assert fetched.status == TaskStatus.IN_PROGRESS
