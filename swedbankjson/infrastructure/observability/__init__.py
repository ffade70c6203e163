"""Observability and logging facades."""

from .logging import (
    close_wire_log,
    configure_logging,
    configure_wire_log,
    format_exchange,
    get_logger,
    log_context,
    log_exception,
    write_wire_log,
)

__all__ = [
    "close_wire_log",
    "configure_logging",
    "configure_wire_log",
    "format_exchange",
    "get_logger",
    "log_context",
    "log_exception",
    "write_wire_log",
]
