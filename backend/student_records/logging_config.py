"""
JSON logging for the student records service and client.

Every record is written to stdout as one JSON object. Loggers are grouped
into channels under the ``student_records`` namespace:

- http: request lifecycle and error responses
- db: writes made by the store adapter
- validation: rejected payloads
- client: API calls and UI state changes on the client side

The id of the HTTP request being served is kept in a ContextVar and added
to every entry logged while that request is in flight.
"""

import json
import logging
import os
import uuid
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Optional, Union

LOGGER_NAMESPACE = "student_records"
CHANNELS = ("http", "db", "validation", "client")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Empty outside of a request
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def _level(name: Union[str, int, None]) -> int:
    if isinstance(name, int):
        return name
    return getattr(logging, (name or LOG_LEVEL).upper(), logging.INFO)


def _channel_name(logger_name: str) -> str:
    prefix = LOGGER_NAMESPACE + "."
    if logger_name.startswith(prefix):
        return logger_name[len(prefix):]
    return "app"


def _channel_of(record: logging.LogRecord) -> str:
    return getattr(record, "channel", None) or _channel_name(record.name)


class StructuredJsonFormatter(logging.Formatter):
    """
    Formats a record as a single JSON line.

    Keys: ``timestamp`` (UTC, millisecond precision, ``Z`` suffix),
    ``level``, ``message``, ``channel``, ``context`` (request id plus
    business keys such as ``student_id``) and ``extra`` (measurements such
    as ``duration_ms``). A traceback is added under ``exception`` when the
    record carries one.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, timezone.utc)
        context = {}
        request_id = request_id_var.get()
        if request_id:
            context["request_id"] = request_id
        context.update(getattr(record, "context", None) or {})

        entry = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "message": record.getMessage(),
            "channel": _channel_of(record),
            "context": context,
            "extra": getattr(record, "extra_data", None) or {},
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Send all logging to stdout as JSON.

    Replaces the root handlers, so calling it again (for example once per
    app built in tests) does not duplicate output. ``level`` overrides the
    LOG_LEVEL environment variable.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredJsonFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(_level(level))

    for channel in CHANNELS:
        get_logger(channel).setLevel(_level(level))
    return root_logger


def get_logger(channel: str) -> logging.Logger:
    return logging.getLogger("{}.{}".format(LOGGER_NAMESPACE, channel))


def log_with_context(logger: logging.Logger, level: Union[str, int], message: str,
                     context: dict = None, extra_data: dict = None,
                     exc_info: bool = False):
    """
    Log ``message`` with business context and extra metadata attached.

    Args:
        logger: A channel logger from get_logger
        level: Level name ("INFO", "WARNING", ...) or logging constant
        message: Human-readable message
        context: Business keys, e.g. ``{"student_id": 7}``
        extra_data: Measurements, e.g. ``{"duration_ms": 1.5}``
        exc_info: Attach the exception currently being handled
    """
    logger.log(
        _level(level),
        message,
        exc_info=exc_info,
        extra={
            "context": context or {},
            "extra_data": extra_data or {},
            "channel": _channel_name(logger.name),
        },
    )


def generate_request_id() -> str:
    return str(uuid.uuid4())


def bind_request_id(request_id: str = None) -> Token:
    """
    Make ``request_id`` (a fresh UUID by default) the current request id.

    Returns the token to hand to ``request_id_var.reset`` once the request
    is finished.
    """
    return request_id_var.set(request_id or generate_request_id())
