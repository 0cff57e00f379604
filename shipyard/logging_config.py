"""structlog setup for the API process and the pipeline tasks it spawns.

Every event is a snake_case name plus key/value fields. Request handlers bind a
``correlation_id``; the coordinator binds ``project_id``. Pipeline tasks inherit
the request's context because ``asyncio.create_task`` copies contextvars.

Usage:
    from shipyard.logging_config import get_logger, setup_logging

    setup_logging(service_name="shipyard-api", log_format="json")
    logger = get_logger(__name__)
    logger.info("repo_created", full_name="acme/site")
"""

import logging
import sys
from typing import Literal

import structlog
from structlog.types import Processor

LogFormat = Literal["json", "console"]


def _shared_processors() -> list[Processor]:
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        # service, correlation_id, project_id
        structlog.contextvars.merge_contextvars,
        structlog.processors.CallsiteParameterAdder(
            {
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            }
        ),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _renderer(log_format: LogFormat) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(sort_keys=False)
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def setup_logging(
    service_name: str = "shipyard",
    log_format: LogFormat = "console",
    log_level: str = "INFO",
) -> None:
    """Route stdlib logging and structlog through one renderer on stdout.

    Values normally come from :class:`shipyard.config.Settings`; an unknown
    ``log_level`` falls back to INFO.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)

    structlog.configure(
        processors=[*_shared_processors(), _renderer(log_format)],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(service=service_name)

    get_logger(__name__).info(
        "logging_initialized", log_format=log_format, log_level=logging.getLevelName(level)
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def set_correlation_id(correlation_id: str) -> None:
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def get_correlation_id() -> str | None:
    return structlog.contextvars.get_contextvars().get("correlation_id")


def bind_project_context(project_id: str) -> None:
    """Tag every log line of the current task with the project being processed."""
    structlog.contextvars.bind_contextvars(project_id=project_id)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
