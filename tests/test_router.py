import json

import pytest
import respx
from conftest import ERROR, LOG, OPS, REQUEST, RESPONSE
from httpx import Response

from slacklog.models.reporters import ReportersConfig
from slacklog.router import EventRouter
from slacklog.sources.good import GoodSource

OPS_URL = "https://hooks.slack.com/services/T000/B000/OPS"
ERRORS_URL = "https://hooks.slack.com/services/T000/B000/ERRORS"


def make_router(**kwargs) -> EventRouter:
    config = ReportersConfig.model_validate(
        {
            "reporters": [
                {"name": "ops", "events": {"ops": "*"}, "slack": {"url": OPS_URL}},
                {
                    "name": "errors",
                    "events": {"error": "*", "request": "error", "log": "*"},
                    "slack": {"url": ERRORS_URL, "slack": {"channel": "#errors"}},
                },
            ]
        }
    )
    return EventRouter(config, **kwargs)


def test_router_builds_one_channel_per_reporter() -> None:
    router = make_router()

    assert [channel.name for channel in router.channels] == ["ops", "errors"]
    assert [reporter.name for reporter in router.reporters] == ["ops", "errors"]


@pytest.mark.asyncio
@respx.mock
async def test_route_event_to_matching_reporters() -> None:
    ops_route = respx.post(OPS_URL).mock(return_value=Response(200))
    errors_route = respx.post(ERRORS_URL).mock(return_value=Response(200))
    router = make_router()
    source = GoodSource()

    assert len(router.route_event(source.parse(OPS))) == 1
    assert len(router.route_event(source.parse(ERROR))) == 1
    assert len(router.route_event(source.parse(RESPONSE))) == 0
    assert len(router.route_event(source.parse(REQUEST))) == 0
    await router.drain()

    assert ops_route.call_count == 1
    assert errors_route.call_count == 1
    payload = json.loads(errors_route.calls.last.request.content)
    assert payload["channel"] == "#errors"
    assert payload["attachments"][0]["color"] == "danger"


@pytest.mark.asyncio
@respx.mock
async def test_consume_sends_one_message_per_event() -> None:
    errors_route = respx.post(ERRORS_URL).mock(return_value=Response(200))
    respx.post(OPS_URL).mock(return_value=Response(200))
    router = make_router()
    records = [dict(LOG, data=f"line {i}") for i in range(5)]

    dispatched = await router.consume(records, GoodSource())
    await router.drain()

    assert dispatched == 5
    fallbacks = [
        json.loads(call.request.content)["attachments"][0]["fallback"]
        for call in errors_route.calls
    ]
    assert sorted(fallbacks) == [f"info line {i}" for i in range(5)]


@pytest.mark.asyncio
@respx.mock
async def test_consume_async_stream_skips_bad_records() -> None:
    errors_route = respx.post(ERRORS_URL).mock(return_value=Response(200))
    ops_route = respx.post(OPS_URL).mock(return_value=Response(200))
    router = make_router()

    async def stream():
        yield OPS
        yield {"timestamp": 1}
        yield dict(RESPONSE, statusCode="not a number")
        yield LOG

    dispatched = await router.consume(stream(), GoodSource())
    await router.drain()

    assert dispatched == 2
    assert ops_route.call_count == 1
    assert errors_route.call_count == 1


@pytest.mark.asyncio
@respx.mock
async def test_delivery_failures_reach_callback() -> None:
    respx.post(OPS_URL).mock(return_value=Response(404, text="no_service"))
    respx.post(ERRORS_URL).mock(return_value=Response(200))
    results = []
    router = make_router(on_complete=results.append)

    await router.consume([OPS, LOG], GoodSource())
    await router.drain()

    assert {(r.channel, r.ok) for r in results} == {("ops", False), ("errors", True)}
