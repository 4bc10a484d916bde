"""Logging configuration and formatters for locator.

This module provides a human-readable formatter that appends structured
``extra`` fields and exception attributes to each line, plus the
``setup_logging`` entry point that selects it or a JSON formatter.
"""

import json
import logging
from logging.config import dictConfig
import sys
from typing import Any, Literal

_original_log_record_factory = logging.getLogRecordFactory()

# Attributes every LogRecord carries; anything else came in through `extra`.
_STANDARD_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName", "exc_custom_attrs", "semantic_trace"}


def custom_record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
    """Create a log record carrying the public attributes of its exception chain.

    Attributes such as ``spec`` or ``scheme`` on a `MalformedLocatorError`
    are collected into ``exc_custom_attrs``, and the message of each chained
    exception into ``semantic_trace``.
    """
    record = _original_log_record_factory(*args, **kwargs)
    if not (record.exc_info and record.exc_info[1]):
        return record

    collected: dict[str, Any] = {}
    messages: list[str] = []
    current: BaseException | None = record.exc_info[1]
    while current is not None:
        for name, value in vars(current).items():
            if not name.startswith("_") and value is not None:
                collected.setdefault(name, value)
        messages.append(str(current))
        current = current.__cause__ or current.__context__

    if collected:
        record.exc_custom_attrs = collected
    record.semantic_trace = messages
    return record


_should_include_stacktrace: bool = False


class HumanReadableExtrasFormatter(logging.Formatter):
    """Format records as ``time LEVEL [logger] key:value ... - message``.

    Without stack traces enabled, exceptions are summarized by their semantic
    trace instead of a traceback.
    """

    def _extras(self, record: logging.LogRecord) -> dict[str, Any]:
        extras: dict[str, Any] = dict(getattr(record, "exc_custom_attrs", None) or {})
        for key, value in vars(record).items():
            if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_"):
                extras[key] = value
        return extras

    @staticmethod
    def _format_value(value: Any) -> str:
        if isinstance(value, dict | list | tuple):
            try:
                return json.dumps(value, sort_keys=True, separators=(", ", ":"))
            except TypeError:
                return f"[Unserializable Value: {type(value).__name__}]"
        return str(value)

    def format(self, record: logging.LogRecord) -> str:
        parts = [
            self.formatTime(record, self.datefmt),
            record.levelname,
            f"[{record.name}]",
        ]
        parts.extend(
            f"{key}:{self._format_value(value)}"
            for key, value in self._extras(record).items()
        )
        parts.append(f"- {record.getMessage()}")
        line = " ".join(parts)

        if record.exc_info:
            if _should_include_stacktrace:
                if not record.exc_text:
                    record.exc_text = self.formatException(record.exc_info)
                line += "\n" + record.exc_text
            else:
                trace: list[str] = getattr(record, "semantic_trace", None) or []
                for i, message in enumerate(trace):
                    prefix = "Error" if i == 0 else "  Caused by"
                    line += f"\n{prefix}: {message}"

        if record.stack_info:
            line += "\n" + self.formatStack(record.stack_info)
        return line


LOGGING_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "human_readable_formatter": {
            "()": HumanReadableExtrasFormatter,
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "json_formatter": {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
        },
    },
    "handlers": {
        "console_handler": {
            "class": "logging.StreamHandler",
            "formatter": "human_readable_formatter",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        "locator": {
            "handlers": ["console_handler"],
            "level": "INFO",
            "propagate": False,
        },
    },
    "root": {
        "handlers": ["console_handler"],
        "level": "WARNING",
    },
}


def setup_logging(
    log_format_type: Literal["human", "json"],
    app_log_level_name: str,
    include_stacktrace: bool,
) -> None:
    """Configure logging for the ``locator`` logger hierarchy.

    Args:
        log_format_type: Format for logs ('human' or 'json').
        app_log_level_name: Logging level name (e.g., 'INFO', 'DEBUG').
        include_stacktrace: Whether to include full stack traces in error logs.
    """
    global _should_include_stacktrace
    _should_include_stacktrace = include_stacktrace

    logging.setLogRecordFactory(custom_record_factory)

    level = app_log_level_name.upper()
    if not isinstance(getattr(logging, level, None), int):
        print(
            f"Warning: Invalid LOG_LEVEL '{app_log_level_name}'. Defaulting to INFO.",
            file=sys.stderr,
        )
        level = "INFO"
    LOGGING_CONFIG["loggers"]["locator"]["level"] = level

    match log_format_type.lower():
        case "json":
            formatter = "json_formatter"
        case _:
            formatter = "human_readable_formatter"
    LOGGING_CONFIG["handlers"]["console_handler"]["formatter"] = formatter

    dictConfig(LOGGING_CONFIG)
