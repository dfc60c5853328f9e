from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Optional

from request_error.core.errors import RequestError

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")
error_status_var: ContextVar[str] = ContextVar("error_status", default="-")

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    " | request_id=%(request_id)s status=%(error_status)s"
)


class _ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("-")
        record.error_status = error_status_var.get("-")
        return True


def set_log_context(
    *, request_id: Optional[str] = None, error: Optional[RequestError] = None
) -> None:
    """Bind the request id and, once one is handled, the error's status.

    A new request id clears the status left over from a previous error.
    """
    if request_id is not None:
        request_id_var.set(request_id)
        error_status_var.set("-")
    if error is not None:
        error_status_var.set(str(error.status))


def log_request_error(
    logger: logging.Logger,
    error: RequestError,
    *,
    where: str,
    status_code: int,
    client_errors: bool = True,
) -> None:
    """Log a handled error at ERROR for 5xx responses and INFO for the rest."""
    set_log_context(error=error)
    if status_code >= 500:
        logger.error("%s failed | %s", where, error.to_full_string())
    elif client_errors:
        logger.info("%s rejected | %s", where, error.to_full_string())


def setup_logging(level: str = "INFO") -> None:
    lvl = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(lvl)

    # Replace handlers to avoid duplicated logs under reload.
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(_ContextFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root.handlers = [handler]

    logging.getLogger("uvicorn.access").setLevel(max(lvl, logging.INFO))


def get_logger(name: str = "request_error") -> logging.Logger:
    return logging.getLogger(name)
