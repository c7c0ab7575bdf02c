"""
Structured logging configuration using structlog.

Stdlib loggers (``logging.getLogger(__name__)``) are rendered through
structlog's ProcessorFormatter: JSON lines by default, colored console
output at DEBUG or when LOG_FORMAT=console. Output goes to stderr unless
configured otherwise; the stdio MCP transport owns stdout.
"""

import logging
import sys
from typing import Optional, TextIO

import structlog

from .config import settings

HANDLER_NAME = "token-search"

QUIET_LOGGERS = ("httpcore", "httpx", "mcp.server.lowlevel.server")


def _resolve_stream(stream: Optional[str]) -> TextIO:
    return sys.stdout if (stream or settings.log_stream) == "stdout" else sys.stderr


def _renderer(level: int, log_format: Optional[str]) -> structlog.types.Processor:
    fmt = log_format or settings.log_format
    if fmt == "console" or (fmt == "auto" and level == logging.DEBUG):
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def setup_logging(
    log_level: Optional[str] = None,
    stream: Optional[str] = None,
    log_format: Optional[str] = None,
) -> logging.Handler:
    """Configure structlog and route the root logger through it.

    Args:
        log_level: Override log level (default: settings.log_level)
        stream: "stderr" or "stdout" (default: settings.log_stream)
        log_format: "json", "console" or "auto" (default: settings.log_format)

    Returns:
        The handler installed on the root logger. Calling again replaces it.
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    renderer = _renderer(level, log_format)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if isinstance(renderer, structlog.processors.JSONRenderer):
        shared_processors.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(server=settings.server_name)

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(_resolve_stream(stream))
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(formatter)

    # Only replace our own handler; others (pytest's capture) stay attached
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return handler
