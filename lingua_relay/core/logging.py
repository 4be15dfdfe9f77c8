"""
Logging setup

Standard library logging with a request id carried through a context variable.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

REQUEST_ID_HEADER = "X-Request-ID"

request_id_ctx: ContextVar[str] = ContextVar("request_id", default="-")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] [%(request_id)s] %(message)s"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class RequestIDFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get()
        return True


def setup_logging(log_level: Optional[str] = None) -> None:
    """Configure the root logger once; safe to call again on reload."""
    from lingua_relay.core.config import settings

    level = _LEVELS.get((log_level or settings.log_level).upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers:
        if getattr(handler, "_lingua_relay", False):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIDFilter())
    handler._lingua_relay = True
    root.addHandler(handler)

    # uvicorn access logs are noisy for websocket traffic
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_event(
    logger: logging.Logger,
    level: str,
    *,
    domain: str,
    event: str,
    summary: str,
    **kv: Any,
) -> None:
    """Emit a one-line structured event: `summary | event=.. domain=.. k=v`."""
    fields = " ".join(f"{k}={v}" for k, v in kv.items() if v is not None)
    message = f"{summary} | event={event} domain={domain}"
    if fields:
        message = f"{message} {fields}"
    logger.log(_LEVELS.get(level.upper(), logging.INFO), message)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a request id to every HTTP request and its log records."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = request_id_ctx.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
