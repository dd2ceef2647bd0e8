"""Structured logging setup for the data-access layer.

Every event passes through the same processor chain: request context from
``contextvars``, the service name and environment, the active OpenTelemetry
trace ids, and finally redaction of password hashes and connection strings.
Development renders to the console; every other environment emits JSON.
"""

import logging
import sys
from typing import Any

import structlog
from opentelemetry import trace
from structlog.typing import EventDict, Processor

from src.infrastructure.config import Settings
from src.utils.sanitizer import sanitize_dict


# Statement logging from the engine is controlled by DATABASE_ECHO instead
SQLALCHEMY_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool")


def sanitize_sensitive_data(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Redact sensitive values (``pw``, ``database_url``, ...) from an event.

    Args:
        logger: Logger instance (unused)
        method_name: Method name (unused)
        event_dict: Event dictionary to sanitize

    Returns:
        Sanitized copy of the event dictionary
    """
    return sanitize_dict(event_dict, recursive=True)


def add_trace_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Attach trace_id, span_id and trace_flags when a span is active."""
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        event_dict["trace_id"] = format(span_context.trace_id, "032x")
        event_dict["span_id"] = format(span_context.span_id, "016x")
        event_dict["trace_flags"] = format(span_context.trace_flags, "02x")
    return event_dict


def add_app_context(settings: Settings) -> Processor:
    """Build a processor stamping every event with the service identity."""

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("app", settings.app_name)
        event_dict.setdefault("env", settings.app_env)
        return event_dict

    return processor


def build_processors(settings: Settings) -> list[Processor]:
    """Assemble the processor chain for the configured environment.

    Redaction always runs after every processor that adds fields and before
    the renderer.

    Args:
        settings: Application settings

    Returns:
        Processors ending with a console or JSON renderer
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context(settings),
        add_trace_context,
        sanitize_sensitive_data,
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.is_development:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    return processors


def configure_logging(settings: Settings) -> None:
    """Configure stdlib logging and structlog from settings.

    Args:
        settings: Application settings (``LOG_LEVEL``, ``APP_ENV``,
            ``DATABASE_ECHO``)
    """
    level = getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    engine_level = logging.INFO if settings.database_echo else logging.WARNING
    for name in SQLALCHEMY_LOGGERS:
        logging.getLogger(name).setLevel(engine_level)

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
