"""Logging utilities for swedbankjson.

This module provides centralised logging configuration, helpers for
structured, contextual logging and the optional wire log that records every
request/response exchange with the bank API.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator

import requests

from swedbankjson.errors import LoggingUnavailable


# ---------------------------------------------------------------------------
# Context variables for structured logging
# ---------------------------------------------------------------------------

_log_context: ContextVar[dict[str, Any]] = ContextVar(
    "log_context", default={})


class ContextualFormatter(logging.Formatter):
    """Formatter that appends context fields to log messages."""

    def format(self, record: logging.LogRecord) -> str:
        ctx = _log_context.get()
        if ctx:
            ctx_str = " ".join(f"{k}={v}" for k, v in ctx.items())
            record.msg = f"{record.msg} [{ctx_str}]"
        return super().format(record)


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Temporarily add context fields to all log messages.

    Usage::

        with log_context(profile="privateProfile"):
            logger.info("Logging in")  # message includes context

    Fields are merged with any existing context and restored on exit.
    """
    current = _log_context.get()
    merged = {**current, **fields}
    token = _log_context.set(merged)
    try:
        yield
    finally:
        _log_context.reset(token)


# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

_configured = False


def configure_logging(
    level: int = logging.INFO,
    third_party_level: int = logging.WARNING,
) -> None:
    """Configure application-wide logging.

    Applications embedding the client call this once at startup. The library
    itself never configures the root logger on import.

    Args:
        level: Log level for application loggers (default INFO).
        third_party_level: Log level for third-party libraries (default WARNING).
    """
    global _configured
    if _configured:
        return
    _configured = True

    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        ContextualFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    root.addHandler(handler)

    # Quieten noisy third-party loggers
    for name in ("urllib3", "requests"):
        logging.getLogger(name).setLevel(third_party_level)


PACKAGE_LOGGER_NAME = "swedbankjson"


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given name.

    If configure_logging() has not been called, the package logger gets a
    NullHandler so an unconfigured host application sees no output. Records
    still propagate to whatever handlers the application installs later.

    Args:
        name: Name of the logger (typically __name__).

    Returns:
        A logging.Logger instance.
    """
    if not _configured:
        package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
        if not package_logger.handlers:
            package_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


# ---------------------------------------------------------------------------
# Convenience helpers
# ---------------------------------------------------------------------------


def log_exception(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context: Any,
) -> None:
    """Log an exception with context fields.

    Args:
        logger: Logger instance.
        message: Human-readable message describing the error.
        exc: The exception that was raised.
        **context: Additional context fields to include.
    """
    with log_context(**context):
        logger.exception(f"{message}: {exc}")


# ---------------------------------------------------------------------------
# Wire log
# ---------------------------------------------------------------------------

WIRE_LOGGER_NAME = "swedbankjson.wire"
DEFAULT_WIRE_LOG_PATH = "swedbankjson.log"


class WireOwnerFilter(logging.Filter):
    """Pass only the wire records written for one owner."""

    def __init__(self, owner: str) -> None:
        super().__init__()
        self.owner = owner

    def filter(self, record: logging.LogRecord) -> bool:
        return getattr(record, "wire_owner", None) == self.owner


def configure_wire_log(path: str, owner: str) -> logging.FileHandler:
    """Attach a file handler for ``owner`` to the wire logger.

    Each owner gets its own handler, so exchanges logged through
    :func:`write_wire_log` only reach that owner's file.

    Raises:
        LoggingUnavailable: If the log file cannot be opened.
    """
    logger = logging.getLogger(WIRE_LOGGER_NAME)
    try:
        handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    except OSError as exc:
        raise LoggingUnavailable(f"Cannot open wire log {path}: {exc}") from exc
    handler.setFormatter(logging.Formatter("[%(asctime)s]\n\t%(message)s\n"))
    handler.addFilter(WireOwnerFilter(owner))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    return handler


def write_wire_log(owner: str, response: requests.Response) -> None:
    """Record one exchange in ``owner``'s wire log."""
    logging.getLogger(WIRE_LOGGER_NAME).debug(
        format_exchange(response), extra={"wire_owner": owner})


def close_wire_log(handler: logging.Handler | None = None) -> None:
    """Detach and close ``handler``, or every wire log handler if omitted."""
    logger = logging.getLogger(WIRE_LOGGER_NAME)
    handlers = [handler] if handler is not None else logger.handlers[:]
    for item in handlers:
        logger.removeHandler(item)
        item.close()


def format_exchange(response: requests.Response) -> str:
    """Render the request and response headers and bodies of one call."""
    request = response.request
    req_headers = _format_headers(
        f"{request.method} {request.url}", request.headers)
    req_body = _as_text(request.body)
    res_headers = _format_headers(
        f"HTTP {response.status_code} {response.reason or ''}".rstrip(),
        response.headers,
    )
    return f"{req_headers}\n\n{req_body}\n\t{res_headers}\n\n{response.text}\n"


def _format_headers(start_line: str, headers: Any) -> str:
    lines = [start_line]
    lines.extend(f"{key}: {value}" for key, value in headers.items())
    return "\n".join(lines)


def _as_text(body: str | bytes | None) -> str:
    if body is None:
        return ""
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return body


__all__ = [
    "ContextualFormatter",
    "DEFAULT_WIRE_LOG_PATH",
    "PACKAGE_LOGGER_NAME",
    "WIRE_LOGGER_NAME",
    "WireOwnerFilter",
    "close_wire_log",
    "configure_logging",
    "configure_wire_log",
    "format_exchange",
    "get_logger",
    "log_context",
    "log_exception",
    "write_wire_log",
]
