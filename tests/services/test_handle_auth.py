"""Auth Handlers — registration, login, refresh rotation and logout."""

import pytest

from taskflow.core import requests as rq
from taskflow.core.errors import Conflict, Unauthenticated, ValidationFailed


def _register(email="ada@example.com"):
    return rq.RegisterUser(
        email=email, password="Secret#123", confirm_password="Secret#123",
        first_name="Ada", last_name="Lovelace",
    )


async def test_register_returns_tokens(harness, tokens):
    result = await harness.send(_register("Ada@Example.com"))

    assert result.token_type == "Bearer"
    assert result.expires_in == 3600
    assert result.user.email == "ada@example.com"
    assert tokens.read_user_id(result.access_token) == result.user.id
    assert harness.transport.events == []


async def test_register_duplicate_email(harness):
    await harness.send(_register())
    with pytest.raises(Conflict):
        await harness.send(_register("ADA@example.com"))


async def test_register_weak_password(harness):
    with pytest.raises(ValidationFailed):
        await harness.send(rq.RegisterUser(
            email="ada@example.com", password="weak", confirm_password="weak",
            first_name="Ada", last_name="Lovelace",
        ))


async def test_login(harness):
    await harness.send(_register())
    result = await harness.send(rq.Login(email="ada@example.com", password="Secret#123"))
    assert result.user.first_name == "Ada"


@pytest.mark.parametrize("email,password", [
    ("ada@example.com", "Wrong#123"),
    ("nobody@example.com", "Secret#123"),
])
async def test_login_failure_is_uniform(harness, email, password):
    await harness.send(_register())
    with pytest.raises(Unauthenticated) as exc_info:
        await harness.send(rq.Login(email=email, password=password))
    assert exc_info.value.message == "Invalid email or password"


async def test_refresh_rotates_token(harness):
    first = await harness.send(_register())

    second = await harness.send(rq.RefreshSession(
        access_token=first.access_token, refresh_token=first.refresh_token,
    ))
    assert second.refresh_token != first.refresh_token

    with pytest.raises(Unauthenticated):
        await harness.send(rq.RefreshSession(
            access_token=first.access_token, refresh_token=first.refresh_token,
        ))


async def test_refresh_rejects_garbage_access_token(harness):
    first = await harness.send(_register())
    with pytest.raises(Unauthenticated):
        await harness.send(rq.RefreshSession(
            access_token="not-a-jwt", refresh_token=first.refresh_token,
        ))


async def test_logout_revokes_refresh_token(harness):
    first = await harness.send(_register())

    await harness.send(rq.Logout(), as_user=first.user.id)

    with pytest.raises(Unauthenticated):
        await harness.send(rq.RefreshSession(
            access_token=first.access_token, refresh_token=first.refresh_token,
        ))
