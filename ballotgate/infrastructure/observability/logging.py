"""Structured logging setup for ballotgate.

Two renderers: one JSON object per line in production, the colored
console renderer anywhere else. Every entry carries the application name,
the correlation id of the request or scenario step that produced it, and
whatever the ballot service bound (operation, caller_id, variant).

Example production line:
    {"app": "ballotgate", "level": "warning", "event": "ballot_operation_rejected",
     "operation": "vote", "caller_id": "v1", "error_type": "AlreadyVotedError",
     "correlation_id": "4f0c...", "timestamp": "2026-03-01T12:00:00Z"}

Usage:
    from ballotgate.infrastructure.observability import configure_structlog

    configure_structlog("development", log_level="DEBUG")
"""

import logging
import os
from typing import Any, cast

import structlog
from structlog.typing import Processor

from ballotgate.infrastructure.observability.correlation import (
    correlation_id_processor,
)

APP_NAME = "ballotgate"

LOG_LEVEL_ENV = "LOG_LEVEL"
PRODUCTION = "production"


def _resolve_level(log_level: str | None) -> int:
    """Map a level name (argument, else LOG_LEVEL, else INFO) to its number."""
    name = (log_level or os.getenv(LOG_LEVEL_ENV) or "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _add_app_name(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    event_dict.setdefault("app", APP_NAME)
    return event_dict


def configure_structlog(
    environment: str = PRODUCTION,
    log_level: str | None = None,
) -> None:
    """Configure structlog once per process.

    Called by the HTTP app factory and by the scenario runner.

    Args:
        environment: "production" renders JSON; anything else renders for
            a terminal.
        log_level: Minimum level name. Falls back to LOG_LEVEL, then INFO.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        cast(Processor, _add_app_name),
        cast(Processor, correlation_id_processor),
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if environment == PRODUCTION:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level(log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger_for_service(
    service_name: str, component: str = "ballot"
) -> structlog.typing.FilteringBoundLogger:
    """Return a logger bound to service_name and component."""
    return structlog.get_logger().bind(service=service_name, component=component)
