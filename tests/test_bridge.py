"""Tests for the backend bridges."""

from __future__ import annotations

import json

import httpx
import pytest

from tsdbui.bridge import BackendBridge, BridgeError, DemoBridge, HttpBridge


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


def _bridge(handler) -> HttpBridge:
    client = httpx.AsyncClient(base_url="http://bridge.test", transport=httpx.MockTransport(handler))
    return HttpBridge("http://bridge.test/", client=client)


@pytest.mark.anyio
async def test_http_bridge_posts_args_and_returns_result() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"result": ["cpu", "mem"]})

    bridge = _bridge(handler)

    result = await bridge.call("get_measurements", {"connection_id": "c", "database": "telegraf"})

    assert result == ["cpu", "mem"]
    assert seen[0].url.path == "/invoke/get_measurements"
    assert json.loads(seen[0].content) == {"args": {"connection_id": "c", "database": "telegraf"}}
    await bridge.aclose()


@pytest.mark.anyio
async def test_http_bridge_raises_on_error_payload() -> None:
    bridge = _bridge(lambda request: httpx.Response(200, json={"error": "unknown command"}))

    with pytest.raises(BridgeError, match="unknown command"):
        await bridge.call("get_tables", {})


@pytest.mark.anyio
async def test_http_bridge_raises_on_http_status() -> None:
    bridge = _bridge(lambda request: httpx.Response(500, text="boom"))

    with pytest.raises(BridgeError):
        await bridge.call("get_tables", {})


@pytest.mark.anyio
async def test_http_bridge_raises_on_invalid_json() -> None:
    bridge = _bridge(lambda request: httpx.Response(200, text="not json"))

    with pytest.raises(BridgeError):
        await bridge.call("get_tables", {})


def test_bridges_satisfy_protocol() -> None:
    assert isinstance(DemoBridge(), BackendBridge)
    assert isinstance(HttpBridge("http://localhost:1"), BackendBridge)


@pytest.mark.anyio
async def test_demo_bridge_answers_schema_commands() -> None:
    bridge = DemoBridge()

    tables = await bridge.call("get_measurements", {"database": "telegraf"})
    fields = await bridge.call("get_field_keys", {"database": "telegraf", "measurement": "cpu"})
    tags = await bridge.call("get_tag_keys", {"database": "telegraf", "measurement": "cpu"})

    assert tables == ["cpu", "disk", "mem"]
    assert fields == ["usage_idle", "usage_system", "usage_user"]
    assert tags == ["cpu", "host"]
    assert [command for command, _ in bridge.calls] == ["get_measurements", "get_field_keys", "get_tag_keys"]


@pytest.mark.anyio
async def test_demo_bridge_executes_introspection_queries() -> None:
    bridge = DemoBridge()

    measurements = await bridge.call("execute_query", {"database": "telegraf", "query": "SHOW MEASUREMENTS"})
    tag_keys = await bridge.call(
        "execute_query", {"database": "telegraf", "query": 'SHOW TAG KEYS FROM "mem"'}
    )
    devices = await bridge.call(
        "execute_query", {"database": "root.factory", "query": "SHOW DEVICES root.factory.**"}
    )

    assert measurements == {"columns": ["name"], "data": [["cpu"], ["disk"], ["mem"]]}
    assert tag_keys == {"data": [{"tagKey": "host"}]}
    assert devices == {"data": [{"Device": "root.factory.line1"}, {"Device": "root.factory.line2"}]}


@pytest.mark.anyio
async def test_demo_bridge_rejects_unknown_input() -> None:
    bridge = DemoBridge(disabled_commands=("get_tables",))

    with pytest.raises(BridgeError):
        await bridge.call("get_tables", {"database": "telegraf"})
    with pytest.raises(BridgeError):
        await bridge.call("get_measurements", {"database": "missing"})
    with pytest.raises(BridgeError):
        await bridge.call("drop_database", {"database": "telegraf"})
    with pytest.raises(BridgeError):
        await bridge.call("execute_query", {"database": "telegraf", "query": "DROP MEASUREMENT cpu"})
