"""Structured Logging for fieldcheck

structlog throughout, routed through the stdlib "fieldcheck" logger:
- Colored console output for development, JSON for production
- Sensitive keys (bound values, passwords, leaked lists) never reach a sink
- One named logger per library domain (session, languages)

Importing the library never configures logging. Loggers wrap stdlib loggers
under "fieldcheck", which carries a NullHandler, so nothing is written until
the host configures logging or calls configure_logging() or
configure_from_settings() at startup.
"""
import logging
import sys
from typing import TextIO

import structlog
from structlog.types import EventDict, Processor

SENSITIVE_KEYS = frozenset({"password", "token", "secret", "value", "leaked", "confirmation"})
REDACTED = "[REDACTED]"
_MAX_DEPTH = 5

logging.getLogger("fieldcheck").addHandler(logging.NullHandler())


def _redact(obj, depth: int = 0):
    if depth > _MAX_DEPTH:
        return obj
    if isinstance(obj, dict):
        return {k: REDACTED if isinstance(k, str) and k.lower() in SENSITIVE_KEYS else _redact(v, depth + 1)
                for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_redact(item, depth + 1) for item in obj]
    return obj


def _censor_sensitive_keys(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Processor that replaces sensitive values at any nesting depth."""
    return _redact(event_dict)


def _add_library_info(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("library", "fieldcheck")
    return event_dict


def get_shared_processors() -> list[Processor]:
    """Processors for both structlog events and foreign stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        _add_library_info,
        _censor_sensitive_keys,
    ]


def _renderer(json_logs: bool) -> Processor:
    if json_logs:
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer(colors=True, exception_formatter=structlog.dev.plain_traceback)


def configure_logging(level: str = "INFO", json_logs: bool = False, stream: TextIO | None = None) -> None:
    """Configure structlog and the stdlib "fieldcheck" logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: JSON lines if True, colored console output otherwise
        stream: Destination stream, stdout by default
    """
    shared = get_shared_processors()
    structlog.configure(
        processors=[*shared, structlog.processors.format_exc_info,
                    structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, _renderer(json_logs)],
    ))

    # Library records stay on the library logger; the host's root logger is untouched.
    library_logger = logging.getLogger("fieldcheck")
    library_logger.handlers = [handler]
    library_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    library_logger.propagate = False


def configure_from_settings() -> None:
    """Configure logging from FIELDCHECK_LOG_LEVEL and FIELDCHECK_LOG_JSON."""
    from .config import get_settings

    settings = get_settings()
    configure_logging(level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """structlog logger over the stdlib logger of the same name."""
    return structlog.wrap_logger(logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger)


class LoggerRegistry:
    """One cached logger per library domain, named "fieldcheck.<domain>"."""

    _loggers: dict[str, structlog.stdlib.BoundLogger] = {}

    @classmethod
    def get(cls, domain: str) -> structlog.stdlib.BoundLogger:
        if domain not in cls._loggers:
            cls._loggers[domain] = get_logger(f"fieldcheck.{domain}")
        return cls._loggers[domain]


def session_logger() -> structlog.stdlib.BoundLogger:
    """Rule evaluation and message composition."""
    return LoggerRegistry.get("session")


def language_logger() -> structlog.stdlib.BoundLogger:
    """Table loading and language resolution."""
    return LoggerRegistry.get("languages")
