import logging

from video_api.core.config import settings
from video_api.core.logger import TraceContextFilter
from video_api.core.trace import set_trace_id
from video_api.api.v1.debug import include_debug_routes
from video_api.main import app


async def test_health(client):
    r = await client.get("/health")
    assert r.status_code == 200 and r.json() == {"status": "ok"}


async def test_response_carries_trace_id(client):
    r = await client.get("/health")
    assert len(r.headers["X-Trace-Id"]) == 32


def test_trace_filter_stamps_record():
    set_trace_id("abc123")
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg",
                               None, None)
    assert TraceContextFilter().filter(record)
    assert record.trace_id == "abc123"
    assert record.service == settings.app_name
    assert record.env == settings.env


async def test_incoming_trace_id_is_reused(client):
    r = await client.get("/health", headers={"X-Trace-Id": "upstream-42"})
    assert r.headers["X-Trace-Id"] == "upstream-42"


async def test_debug_routes_disabled_by_default(client):
    assert include_debug_routes(app) is False
    r = await client.get("/__sentry-test")
    assert r.status_code == 404
