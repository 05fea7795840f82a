"""Structured Logging for the Registration API

Every log line, ours or a third-party library's, goes through one structlog
pipeline that stamps the service name and version, merges the per-request
context bound by ``RequestLoggingMiddleware`` and masks credentials before
anything is rendered. ``LOG_JSON`` picks the JSON renderer; otherwise lines
are rendered for a terminal.
"""
import logging
import sys
from uuid import uuid4

import structlog
from structlog.types import EventDict, Processor

from core.config import settings

SERVICE_NAME = "user-registration-api"

# Keys whose values never reach a log sink, matched case-insensitively
SENSITIVE_KEYS = frozenset({"password", "token", "secret", "authorization", "cookie"})
REDACTED = "[REDACTED]"
_MAX_REDACT_DEPTH = 5

# Libraries whose chatter stays at WARNING and above
_QUIET_LOGGERS = ("uvicorn.access", "httpcore", "httpx")


def _redact(obj, depth: int = 0):
    if depth > _MAX_REDACT_DEPTH:
        return obj
    if isinstance(obj, dict):
        return {
            k: REDACTED if str(k).lower() in SENSITIVE_KEYS else _redact(v, depth + 1)
            for k, v in obj.items()
        }
    if isinstance(obj, list):
        return [_redact(item, depth + 1) for item in obj]
    return obj


def _censor_sensitive_keys(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Mask sensitive values, including inside logged request payloads."""
    return _redact(event_dict)


def _add_service_info(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("version", settings.APP_VERSION)
    return event_dict


def get_shared_processors() -> list[Processor]:
    """Processors applied to structlog and stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_service_info,
        _censor_sensitive_keys,
    ]


def _renderer(json_logs: bool) -> Processor:
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Route structlog and stdlib logging to a single stdout handler.

    Args:
        level: Root log level name; unknown names fall back to INFO.
        json_logs: Render JSON lines instead of console output.
    """
    shared_processors = get_shared_processors()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(json_logs),
        ],
    )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # uvicorn installs its own handlers; let records propagate to ours
    for name in ("uvicorn", "uvicorn.error"):
        logging.getLogger(name).handlers = []
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def generate_correlation_id() -> str:
    """Short request id, echoed back in ``X-Correlation-ID``."""
    return uuid4().hex[:8]


def bind_context(**kwargs) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def api_logger() -> structlog.stdlib.BoundLogger:
    return get_logger("registration.api")
