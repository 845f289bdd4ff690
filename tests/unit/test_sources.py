"""History source tests."""

import json

import httpx
import pytest

from flowtrace.config import EngineConfig, FlowtraceConfig
from flowtrace.errors import SourceError
from flowtrace.sources import (
    HttpHistorySource,
    InMemoryHistorySource,
    get_history_source,
    unwrap_list_envelope,
)


def test_get_history_source_backends(monkeypatch):
    monkeypatch.delenv("FLOWTRACE_SOURCE", raising=False)
    config = FlowtraceConfig()
    assert isinstance(get_history_source(config=config), HttpHistorySource)
    assert isinstance(get_history_source("inmemory", config=config), InMemoryHistorySource)

    monkeypatch.setenv("FLOWTRACE_SOURCE", "inmemory")
    assert isinstance(get_history_source(config=config), InMemoryHistorySource)

    with pytest.raises(ValueError):
        get_history_source("kafka", config=config)


def test_unwrap_list_envelope():
    assert unwrap_list_envelope({"data": [1], "total": 1}) == [1]
    assert unwrap_list_envelope([1, 2]) == [1, 2]
    assert unwrap_list_envelope({"error": "x"}) == {"error": "x"}


@pytest.mark.asyncio
async def test_inmemory_source_roundtrip():
    source = InMemoryHistorySource()
    source.add_instance("pi-1", [{"activityId": "s", "processDefinitionId": "d1"}])
    source.add_definition("d1", "<definitions/>")

    assert await source.fetch_activities("pi-1") == [
        {"activityId": "s", "processDefinitionId": "d1"}
    ]
    assert await source.fetch_task_history("pi-1") == []
    assert await source.fetch_definition_xml("d1") == "<definitions/>"
    assert len(await source.fetch_definition_activities("d1")) == 1
    with pytest.raises(SourceError):
        await source.fetch_activities("missing")


def _engine_handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path == "/process-api/history/historic-activity-instances":
        assert request.url.params["processInstanceId"] == "pi-1"
        body = {"data": [{"activityId": "start", "startTime": 0}], "total": 1}
        return httpx.Response(200, json=body)
    if path == "/api/workflow/process/pi-1/history":
        return httpx.Response(200, json=[{"taskId": "t1", "taskName": "A", "startTime": 0}])
    if path == "/process-api/repository/process-definitions/d1/resourcedata":
        return httpx.Response(200, text="<definitions/>")
    return httpx.Response(404, json={"message": "not found"})


@pytest.mark.asyncio
async def test_http_source_fetches_and_unwraps():
    config = EngineConfig(base_url="http://engine.test", username="admin", password="test")
    async with HttpHistorySource(config, transport=httpx.MockTransport(_engine_handler)) as source:
        activities = await source.fetch_activities("pi-1")
        history = await source.fetch_task_history("pi-1")
        xml = await source.fetch_definition_xml("d1")

    assert activities == [{"activityId": "start", "startTime": 0}]
    assert history[0]["taskName"] == "A"
    assert xml == "<definitions/>"


@pytest.mark.asyncio
async def test_http_source_sends_basic_auth():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("authorization")
        return httpx.Response(200, json=[])

    config = EngineConfig(base_url="http://engine.test", username="admin", password="test")
    async with HttpHistorySource(config, transport=httpx.MockTransport(handler)) as source:
        await source.fetch_task_history("pi-1")
    assert seen["auth"].startswith("Basic ")


@pytest.mark.asyncio
async def test_http_status_error_becomes_source_error():
    source = HttpHistorySource(
        EngineConfig(base_url="http://engine.test"),
        transport=httpx.MockTransport(_engine_handler),
    )
    with pytest.raises(SourceError, match="404"):
        await source.fetch_task_history("unknown")
    await source.disconnect()


@pytest.mark.asyncio
async def test_http_source_retries_transport_errors(monkeypatch):
    attempts = []

    async def no_wait(attempt: int, base: float = 0.5) -> None:
        attempts.append(attempt)

    monkeypatch.setattr("flowtrace.sources.http.schedule_retry", no_wait)

    calls = {"count": 0}

    def flaky(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        if calls["count"] < 3:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, content=json.dumps([]).encode())

    config = EngineConfig(base_url="http://engine.test", max_retries=2)
    async with HttpHistorySource(config, transport=httpx.MockTransport(flaky)) as source:
        assert await source.fetch_task_history("pi-1") == []
    assert attempts == [0, 1]


@pytest.mark.asyncio
async def test_http_source_gives_up_after_max_retries(monkeypatch):
    async def no_wait(attempt: int, base: float = 0.5) -> None:
        return None

    monkeypatch.setattr("flowtrace.sources.http.schedule_retry", no_wait)

    def down(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    config = EngineConfig(base_url="http://engine.test", max_retries=1)
    async with HttpHistorySource(config, transport=httpx.MockTransport(down)) as source:
        with pytest.raises(SourceError):
            await source.fetch_activities("pi-1")
