"""Task Handlers — creation defaults, partial updates, events, access and paging."""

import asyncio
from datetime import timedelta
from uuid import uuid4

import pytest

from taskflow.core import requests as rq
from taskflow.core.domain_types import TaskPriority, TaskSortKey, TaskStatus, utcnow
from taskflow.core.errors import AccessDenied, NotFound, ValidationFailed
from taskflow.infrastructure.repositories import SqlEntityStore


@pytest.fixture
async def team(harness):
    owner = await harness.create_user()
    member = await harness.create_user("Max", "Member")
    project = await harness.create_project(owner)
    await harness.add_member(project.id, owner, member)
    harness.transport.clear()
    return owner, member, project


async def test_create_task_round_trip(harness, team):
    owner, _, project = team
    created = await harness.create_task(
        project.id, owner, title="Write docs", priority=TaskPriority.CRITICAL,
    )

    fetched = await harness.send(rq.GetTask(task_id=created.id), as_user=owner)

    assert fetched.status == TaskStatus.TODO
    assert fetched.priority == TaskPriority.CRITICAL
    assert fetched.title == "Write docs"
    assert fetched.project_name == "Apollo"
    assert fetched.comment_count == 0
    assert fetched.is_overdue is False


async def test_create_task_defaults_to_medium(harness, team):
    owner, _, project = team
    task = await harness.create_task(project.id, owner)
    assert task.priority == TaskPriority.MEDIUM
    assert harness.transport.types() == ["TaskCreated"]


async def test_create_task_with_assignee_emits_assignment(harness, team):
    owner, member, project = team
    task = await harness.create_task(project.id, owner, assignee_id=member.id)

    assert task.assignee_name == "Max Member"
    assert task.assignee_email == "max@example.com"
    assert harness.transport.types() == ["TaskCreated", "TaskAssigned"]
    assert harness.transport.events[1].recipient_ids == frozenset({member.id})


async def test_create_task_rejects_outside_assignee(harness, team):
    owner, _, project = team
    outsider = await harness.create_user("Ivy", "Outsider")

    with pytest.raises(ValidationFailed) as exc_info:
        await harness.create_task(project.id, owner, assignee_id=outsider.id)
    assert exc_info.value.errors[0].field == "assignee_id"


async def test_stranger_cannot_create_task(harness, team):
    _, _, project = team
    stranger = await harness.create_user("Sam", "Stranger")
    with pytest.raises(AccessDenied):
        await harness.create_task(project.id, stranger)


async def test_partial_update_keeps_other_fields(harness, team):
    owner, member, project = team
    due = utcnow() + timedelta(days=5)
    task = await harness.create_task(
        project.id, owner, description="Original", assignee_id=member.id, due_date=due,
    )
    harness.transport.clear()

    updated = await harness.send(
        rq.UpdateTask(task_id=task.id, title="Renamed"), as_user=owner,
    )

    assert updated.title == "Renamed"
    assert updated.description == "Original"
    assert updated.assignee_id == member.id
    assert updated.due_date is not None
    assert harness.transport.types() == ["TaskUpdated"]
    assert harness.transport.events[0].changed_fields == ("title",)


async def test_status_change_emits_status_event(harness, team):
    owner, member, project = team
    task = await harness.create_task(project.id, owner, assignee_id=member.id)
    harness.transport.clear()

    await harness.send(
        rq.UpdateTask(task_id=task.id, status=TaskStatus.DONE), as_user=member,
    )

    assert harness.transport.types() == ["TaskUpdated", "TaskStatusChanged"]
    changed = harness.transport.events[1]
    assert changed.old_status == TaskStatus.TODO
    assert changed.new_status == TaskStatus.DONE
    assert changed.assignee_id == member.id


async def test_reassign_and_unassign(harness, team):
    owner, member, project = team
    task = await harness.create_task(project.id, owner)
    harness.transport.clear()

    await harness.send(rq.UpdateTask(task_id=task.id, assignee_id=member.id), as_user=owner)
    assert harness.transport.types() == ["TaskUpdated", "TaskAssigned"]
    assert harness.transport.events[1].previous_assignee_id is None
    harness.transport.clear()

    updated = await harness.send(rq.UpdateTask(task_id=task.id, unassign=True), as_user=owner)
    assert updated.assignee_id is None
    assert harness.transport.types() == ["TaskUpdated"]


async def test_clear_due_date(harness, team):
    owner, _, project = team
    task = await harness.create_task(
        project.id, owner, due_date=utcnow() + timedelta(days=2),
    )
    updated = await harness.send(
        rq.UpdateTask(task_id=task.id, clear_due_date=True), as_user=owner,
    )
    assert updated.due_date is None


async def test_member_without_assignment_cannot_read(harness, team):
    owner, member, project = team
    task = await harness.create_task(project.id, owner)

    with pytest.raises(AccessDenied):
        await harness.send(rq.GetTask(task_id=task.id), as_user=member)
    with pytest.raises(NotFound):
        await harness.send(rq.GetTask(task_id=uuid4()), as_user=member)


async def test_member_without_assignment_cannot_update_or_delete(harness, team):
    owner, member, project = team
    task = await harness.create_task(project.id, owner)
    harness.transport.clear()

    with pytest.raises(AccessDenied):
        await harness.send(rq.UpdateTask(task_id=task.id, title="Mine now"), as_user=member)
    with pytest.raises(AccessDenied):
        await harness.send(rq.DeleteTask(task_id=task.id), as_user=member)

    assert harness.transport.events == []
    fetched = await harness.send(rq.GetTask(task_id=task.id), as_user=owner)
    assert fetched.title == "Ship it"


@pytest.mark.parametrize("as_owner", [True, False])
async def test_unknown_task_is_not_found_for_update_and_delete(harness, team, as_owner):
    owner, member, _ = team
    caller = owner if as_owner else member

    with pytest.raises(NotFound):
        await harness.send(rq.UpdateTask(task_id=uuid4(), title="Ghost"), as_user=caller)
    with pytest.raises(NotFound):
        await harness.send(rq.DeleteTask(task_id=uuid4()), as_user=caller)


async def test_cancelled_update_still_commits_before_publishing(harness, team, monkeypatch):
    owner, _, project = team
    task = await harness.create_task(project.id, owner)
    harness.transport.clear()

    commit_started = asyncio.Event()
    real_commit = SqlEntityStore.commit

    async def slow_commit(self):
        commit_started.set()
        await asyncio.sleep(0.05)
        await real_commit(self)

    monkeypatch.setattr(SqlEntityStore, "commit", slow_commit)
    pending = asyncio.create_task(
        harness.send(rq.UpdateTask(task_id=task.id, title="Renamed"), as_user=owner),
    )
    await commit_started.wait()
    pending.cancel()
    with pytest.raises(asyncio.CancelledError):
        await pending

    monkeypatch.undo()
    fetched = await harness.send(rq.GetTask(task_id=task.id), as_user=owner)
    assert fetched.title == "Renamed"
    assert harness.transport.types() == ["TaskUpdated"]


async def test_delete_task(harness, team):
    owner, _, project = team
    task = await harness.create_task(project.id, owner)
    harness.transport.clear()

    await harness.send(rq.DeleteTask(task_id=task.id), as_user=owner)

    assert harness.transport.types() == ["TaskDeleted"]
    with pytest.raises(NotFound):
        await harness.send(rq.GetTask(task_id=task.id), as_user=owner)


async def test_list_tasks_pages_and_clamps(harness, team):
    owner, _, project = team
    for i in range(3):
        await harness.create_task(project.id, owner, title=f"Task {i}")

    page = await harness.send(
        rq.ListTasks(page_size=2, sort_by=TaskSortKey.TITLE, sort_descending=False),
        as_user=owner,
    )
    assert [t.title for t in page.items] == ["Task 0", "Task 1"]
    assert page.total_count == 3
    assert page.total_pages == 2
    assert page.has_next is True
    assert page.has_previous is False

    clamped = await harness.send(rq.ListTasks(page_size=500), as_user=owner)
    assert clamped.page_size == 50
    assert len(clamped.items) == 3


async def test_list_tasks_only_visible_projects(harness, team):
    owner, _, project = team
    await harness.create_task(project.id, owner, title="Hidden")
    stranger = await harness.create_user("Sam", "Stranger")

    page = await harness.send(rq.ListTasks(), as_user=stranger)
    assert page.items == []
    assert page.total_count == 0


async def test_list_tasks_filters(harness, team):
    owner, member, project = team
    await harness.create_task(project.id, owner, title="Alpha", priority=TaskPriority.HIGH)
    await harness.create_task(project.id, owner, title="Beta", assignee_id=member.id)

    high = await harness.send(rq.ListTasks(priority=TaskPriority.HIGH), as_user=owner)
    assert [t.title for t in high.items] == ["Alpha"]

    mine = await harness.send(rq.ListTasks(assignee_id=member.id), as_user=owner)
    assert [t.title for t in mine.items] == ["Beta"]

    searched = await harness.send(rq.ListTasks(search="bet"), as_user=owner)
    assert [t.title for t in searched.items] == ["Beta"]


async def test_list_project_tasks_ordering(harness, team):
    owner, _, project = team
    low = await harness.create_task(project.id, owner, title="Low", priority=TaskPriority.LOW)
    await harness.create_task(project.id, owner, title="Critical", priority=TaskPriority.CRITICAL)
    await harness.send(rq.UpdateTask(task_id=low.id, status=TaskStatus.DONE), as_user=owner)

    tasks = await harness.send(rq.ListProjectTasks(project_id=project.id), as_user=owner)
    assert [t.title for t in tasks] == ["Critical", "Low"]
