"""User Handlers — profile read and partial profile update."""

import pytest

from taskflow.core import requests as rq
from taskflow.core.errors import Conflict, Unauthenticated


async def test_get_current_user(harness):
    user = await harness.create_user()
    me = await harness.send(rq.GetCurrentUser(), as_user=user)
    assert me.email == "olive@example.com"
    assert me.full_name == "Olive Owner"


async def test_anonymous_caller_rejected(harness):
    with pytest.raises(Unauthenticated):
        await harness.send(rq.GetCurrentUser())


async def test_update_profile_partial(harness):
    user = await harness.create_user()
    updated = await harness.send(
        rq.UpdateProfile(first_name="Olivia", email="  OLIVIA@Example.com "), as_user=user,
    )
    assert updated.first_name == "Olivia"
    assert updated.last_name == "Owner"
    assert updated.email == "olivia@example.com"


async def test_update_profile_duplicate_email(harness):
    user = await harness.create_user()
    await harness.create_user("Max", "Member")

    with pytest.raises(Conflict) as exc_info:
        await harness.send(rq.UpdateProfile(email="max@example.com"), as_user=user)
    assert exc_info.value.message == "Email is already in use"


async def test_update_profile_same_email_is_noop(harness):
    user = await harness.create_user()
    updated = await harness.send(rq.UpdateProfile(email="olive@example.com"), as_user=user)
    assert updated.email == "olive@example.com"
