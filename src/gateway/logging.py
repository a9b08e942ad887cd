"""Structured logging for the gateway, built on structlog.

Every gateway log line is a structlog event routed through the stdlib root
handler, so records emitted by uvicorn, httpx and aiosqlite are rendered
the same way as the gateway's own events. Request-scoped keys bound by
``gateway.api.middleware`` (request_id, method, path) are merged from
contextvars into every line logged while a request is in flight.
"""

import logging
import os

import structlog

# Third-party loggers that would otherwise log each outbound call or query
QUIET_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "aiosqlite")


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(log_level: str = "INFO") -> None:
    """Configure structlog and the stdlib root handler for the gateway.

    LOG_FORMAT selects "json" (deployments, one object per line) or
    "console" (local runs, the default). Loggers in QUIET_LOGGERS are held
    at WARNING because the upstream client and record store log their own
    events with request context attached.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # foreign_pre_chain gives uvicorn/httpx records the same keys as ours
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(os.environ.get("LOG_FORMAT", "console").lower()),
        ],
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a gateway logger; ``name`` is the calling module's __name__."""
    return structlog.get_logger(name)
