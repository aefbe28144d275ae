import logging
import sys
from logging.handlers import QueueHandler, QueueListener
from queue import Queue
from pythonjsonlogger import jsonlogger
from video_api.core.trace import get_trace_id
from video_api.core.config import settings

LOG_FORMAT = (
    "%(asctime)s %(levelname)s %(name)s %(message)s "
    "%(trace_id)s %(service)s %(env)s"
)


class TraceContextFilter(logging.Filter):
    """Stamp trace_id/service/env on every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = (getattr(record, "trace_id", None)
                           or get_trace_id())
        record.service = getattr(record, "service", None) or settings.app_name
        record.env = getattr(record, "env", None) or settings.env
        return True


_listener: QueueListener | None = None


def build_formatter() -> logging.Formatter:
    return jsonlogger.JsonFormatter(LOG_FORMAT)


def setup_json_logging(service: str = "video_service",
                       level: int = logging.INFO) -> None:
    """Route all logging through a queue into a JSON stdout handler."""
    global _listener
    if _listener is not None:
        return

    root = logging.getLogger()
    root.setLevel(level)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(build_formatter())
    stream_handler.addFilter(TraceContextFilter())

    q: Queue = Queue(-1)
    # the filter must run before the record leaves the request context
    queue_handler = QueueHandler(q)
    queue_handler.addFilter(TraceContextFilter())

    _listener = QueueListener(q, stream_handler, respect_handler_level=True)
    _listener.start()
    root.handlers = [queue_handler]

    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True

    logging.getLogger(__name__).info(
        "logger_initialized", extra={"service": service})


def shutdown_logging() -> None:
    """Flush and stop the queue listener."""
    global _listener
    if _listener:
        _listener.stop()
        _listener = None
