import time
import logging
from http import HTTPStatus
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from video_api.core.trace import new_trace_id, set_trace_id

alog = logging.getLogger("access")

TRACE_HEADER = "X-Trace-Id"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind a trace id to the request and write one access record.

    An incoming `X-Trace-Id` is reused so callers can correlate logs.
    """

    async def dispatch(self, request: Request, call_next):
        trace_id = request.headers.get(TRACE_HEADER)
        if trace_id:
            set_trace_id(trace_id)
        else:
            trace_id = new_trace_id()
        start = time.perf_counter()
        status = HTTPStatus.INTERNAL_SERVER_ERROR
        try:
            response = await call_next(request)
            status = response.status_code
            response.headers[TRACE_HEADER] = trace_id
            return response
        finally:
            alog.info(
                "access",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "query": request.url.query or "",
                    "status": int(status),
                    "latency_ms": int((time.perf_counter() - start) * 1000),
                    "client_ip": request.client.host
                    if request.client else None,
                },
            )
