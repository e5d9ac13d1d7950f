"""Structured logging for AI Pulse.

structlog renders every entry; stdlib ``logging`` is the transport so that
uvicorn, httpx and SQLAlchemy records come out in the same format.

- JSON lines in production (or when ``LOG_FORMAT=json``)
- Coloured console output in development
- ``request_id`` taken from the request middleware's context variable

Usage:
    from aipulse.core.logging import configure_logging, get_logger

    configure_logging(settings)

    logger = get_logger(__name__)
    logger.warning("github_fetch_failed", page=2, error="HTTP 503")
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from aipulse.config import Settings

SERVICE_NAME = "aipulse"

# Loggers that are too chatty at INFO for a proxy that makes an outbound
# call on most requests.
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "aiosqlite")

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)


def get_request_id() -> str | None:
    """Return the request ID bound to the current context, if any."""
    return request_id_ctx.get()


def set_request_id(request_id: str | None) -> None:
    """Bind a request ID to the current context (``None`` clears it)."""
    request_id_ctx.set(request_id)


def _add_request_id(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    request_id = get_request_id()
    if request_id:
        event_dict.setdefault("request_id", request_id)
    return event_dict


def _add_service(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict["service"] = SERVICE_NAME
    return event_dict


def _renderer(json_logs: bool) -> Processor:
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    Safe to call more than once; the root handler is replaced each time.

    Args:
        settings: Application settings. If None, uses cached settings.
    """
    if settings is None:
        from aipulse.config import get_settings

        settings = get_settings()

    level = getattr(logging, settings.log_level.value, logging.INFO)

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        _add_request_id,
        _add_service,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    render_chain: list[Processor] = [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
    ]
    if settings.use_json_logs:
        # ConsoleRenderer formats tracebacks itself
        render_chain.append(structlog.processors.format_exc_info)
    render_chain.append(_renderer(settings.use_json_logs))

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=render_chain,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.setLevel(level)

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, typically ``get_logger(__name__)``."""
    return structlog.get_logger(name)


def log_context(**kwargs: Any) -> Any:
    """Bind values to every log entry emitted inside the ``with`` block.

    Example:
        with log_context(catalog="github", page=2):
            logger.info("cache_stale")
    """
    return structlog.contextvars.bound_contextvars(**kwargs)
