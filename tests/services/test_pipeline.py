"""Request Pipeline — behavior order, validation short-circuit and logging outcomes."""

import logging
from dataclasses import dataclass

import pytest

from taskflow.core import requests as rq
from taskflow.core.errors import HandlerNotRegisteredError, NotFound, ValidationFailed
from taskflow.services.pipeline import (
    LoggingBehavior, PerformanceBehavior, RequestPipeline, ValidationBehavior,
    default_behaviors,
)


class RecordingBehavior:
    def __init__(self, name: str, log: list):
        self.name = name
        self.log = log

    async def handle(self, request, call_next):
        self.log.append(f"{self.name}:before")
        result = await call_next()
        self.log.append(f"{self.name}:after")
        return result


@dataclass(frozen=True)
class Ping:
    value: int = 1


async def test_behaviors_run_outermost_first():
    log: list[str] = []

    async def handler(request):
        log.append("handler")
        return request.value * 2

    pipeline = RequestPipeline(
        {Ping: handler},
        [RecordingBehavior("outer", log), RecordingBehavior("inner", log)],
    )

    assert await pipeline.send(Ping(21)) == 42
    assert log == ["outer:before", "inner:before", "handler", "inner:after", "outer:after"]


async def test_unregistered_request_fails_before_behaviors():
    log: list[str] = []
    pipeline = RequestPipeline({}, [RecordingBehavior("outer", log)])

    with pytest.raises(HandlerNotRegisteredError) as exc_info:
        await pipeline.send(Ping())
    assert exc_info.value.request_type == "Ping"
    assert log == []
    assert not pipeline.handles(Ping)


async def test_validation_short_circuits_handler():
    called = False

    async def handler(request):
        nonlocal called
        called = True

    pipeline = RequestPipeline({rq.CreateProject: handler}, [ValidationBehavior()])

    with pytest.raises(ValidationFailed) as exc_info:
        await pipeline.send(rq.CreateProject(name=""))
    assert not called
    assert exc_info.value.to_response()["error"]["details"][0]["field"] == "name"


async def test_slow_request_warning(caplog):
    async def handler(request):
        return "ok"

    pipeline = RequestPipeline({Ping: handler}, [PerformanceBehavior(threshold_ms=-1)])

    with caplog.at_level(logging.WARNING, logger="taskflow.services.pipeline"):
        await pipeline.send(Ping())
    assert any("Long running request: Ping" in r.getMessage() for r in caplog.records)


async def test_logging_levels_follow_outcome(caplog):
    async def missing(request):
        raise NotFound("Task", "abc")

    async def broken(request):
        raise RuntimeError("boom")

    @dataclass(frozen=True)
    class Boom:
        pass

    pipeline = RequestPipeline(
        {Ping: missing, Boom: broken}, [LoggingBehavior(user_id="u-1")],
    )

    with caplog.at_level(logging.INFO, logger="taskflow.services.pipeline"):
        with pytest.raises(NotFound):
            await pipeline.send(Ping())
        with pytest.raises(RuntimeError):
            await pipeline.send(Boom())

    levels = {r.getMessage(): r.levelno for r in caplog.records}
    assert levels["Ping failed: NOT_FOUND"] == logging.WARNING
    assert levels["Boom failed unexpectedly"] == logging.ERROR


async def test_logging_never_includes_request_values(caplog):
    async def handler(request):
        return None

    pipeline = RequestPipeline({rq.Login: handler}, default_behaviors("u-1"))
    with caplog.at_level(logging.INFO, logger="taskflow.services.pipeline"):
        await pipeline.send(rq.Login(email="ada@example.com", password="Hunter#22"))

    text = " ".join(r.getMessage() for r in caplog.records)
    assert "Login handled" in text
    assert "Hunter#22" not in text
