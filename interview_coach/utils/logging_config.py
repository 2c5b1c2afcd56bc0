"""
Logging setup for the interview coach.

Text output for local runs, one JSON object per line when LOG_FORMAT=json.
Structured fields travel through the standard `extra=` mechanism; the two
helpers at the bottom give AI calls and practice-session events a fixed shape.
"""

import json
import os
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Every LogRecord has these; other attributes were passed via `extra`.
_STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "context"}

_NOISY_LOGGERS = {
    "uvicorn": logging.INFO,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
}


def _jsonable(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


class JSONFormatter(logging.Formatter):
    """One JSON object per record: time, level, origin, message and extra fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        entry.update(getattr(record, "context", {}))
        entry.update(
            (key, _jsonable(value))
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


class ContextFilter(logging.Filter):
    """Stamps fixed fields (component name, etc.) onto every record of a logger."""

    def __init__(self, **context):
        super().__init__()
        self.context = context

    def filter(self, record: logging.LogRecord) -> bool:
        merged = dict(getattr(record, "context", {}))
        merged.update(self.context)
        record.context = merged
        return True


def _handler(handler: logging.Handler, formatter: logging.Formatter, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str = "INFO",
    json_format: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """
    Replace root handlers with a stdout handler (and an optional JSON file).

    Args:
        level: Level name; unknown names fall back to INFO
        json_format: JSON lines on stdout instead of text
        log_file: Extra file handler, always JSON
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    root = logging.getLogger()
    root.setLevel(numeric_level)
    for existing in list(root.handlers):
        root.removeHandler(existing)

    console_formatter = JSONFormatter() if json_format else logging.Formatter(TEXT_FORMAT)
    root.addHandler(_handler(logging.StreamHandler(sys.stdout), console_formatter, numeric_level))
    if log_file:
        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
        root.addHandler(_handler(logging.FileHandler(log_file), JSONFormatter(), numeric_level))

    for name, noisy_level in _NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(noisy_level)


def get_logger(name: str, **context) -> logging.Logger:
    """
    Module logger, optionally tagged with fixed fields.

    Example:
        logger = get_logger(__name__, component="practice_client")
    """
    logger = logging.getLogger(name)
    if context:
        logger.addFilter(ContextFilter(**context))
    return logger


def log_llm_call(
    logger: logging.Logger,
    purpose: str,
    latency_ms: Optional[float] = None,
    model: Optional[str] = None,
    success: bool = True,
    **extra
) -> None:
    """
    One line per model call; failures log at ERROR.

    Example:
        log_llm_call(logger, purpose="evaluation", latency_ms=812.4, model="gemini-2.0-flash")
    """
    fields: Dict[str, Any] = {"event": "llm_call", "purpose": purpose, "success": success}
    if latency_ms is not None:
        fields["latency_ms"] = round(latency_ms, 1)
    if model is not None:
        fields["model"] = model
    fields.update(extra)

    level = logging.INFO if success else logging.ERROR
    logger.log(level, f"LLM {purpose} call {'completed' if success else 'failed'}", extra=fields)


def log_session_event(logger: logging.Logger, event_type: str, **extra) -> None:
    """question_generated, answer_evaluated, session_saved, session_save_failed, ..."""
    logger.info(
        f"Session event: {event_type}",
        extra={"event": "session_event", "event_type": event_type, **extra}
    )
