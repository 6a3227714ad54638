"""
Formcheck Logger
================

Structured logging with pluggable handlers.

The validation core never logs; callers such as the login
handler log error reports through this module.
"""

from __future__ import annotations

import logging
import sys
import traceback
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import orjson

if TYPE_CHECKING:
    from formcheck.core.config import Config


class LogLevel(IntEnum):
    """Log levels."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def parse(cls, value: Any, default: Optional["LogLevel"] = None) -> "LogLevel":
        """Parse a level name ("info") or number; unknown values give `default`."""
        if isinstance(value, cls):
            return value
        try:
            if isinstance(value, int):
                return cls(value)
            return cls[str(value).upper()]
        except (KeyError, ValueError):
            return default if default is not None else cls.INFO


@dataclass
class LogRecord:
    """
    Structured log record.

    Attributes:
        level: Log level
        message: Log message
        timestamp: Record timestamp
        context: Additional context
        exception: Exception info
    """

    level: LogLevel
    message: str
    timestamp: datetime = field(default_factory=datetime.now)
    context: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[BaseException] = None
    logger_name: str = "formcheck"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.name,
            "message": self.message,
            "logger": self.logger_name,
        }

        if self.context:
            data["context"] = self.context

        if self.exception:
            data["exception"] = {
                "type": type(self.exception).__name__,
                "message": str(self.exception),
                "traceback": traceback.format_exception(
                    type(self.exception),
                    self.exception,
                    self.exception.__traceback__,
                ),
            }

        return data

    def to_json(self, pretty: bool = False) -> str:
        """Convert to JSON string."""
        option = orjson.OPT_INDENT_2 if pretty else 0
        return orjson.dumps(self.to_dict(), default=str, option=option).decode("utf-8")


class LogFormatter:
    """Base log formatter."""

    def format(self, record: LogRecord) -> str:
        """Format log record."""
        raise NotImplementedError


class TextFormatter(LogFormatter):
    """
    Plain text formatter.

    Example output:
        2024-01-15 10:30:45 [INFO] Login rejected field_count=2
    """

    def __init__(
        self,
        format_string: Optional[str] = None,
        date_format: str = "%Y-%m-%d %H:%M:%S",
        colors: bool = True,
    ):
        """Initialize formatter."""
        self.format_string = format_string or "{timestamp} [{level}] {message}"
        self.date_format = date_format
        self.colors = colors and sys.stdout.isatty()

        self._colors = {
            LogLevel.DEBUG: "\033[36m",    # Cyan
            LogLevel.INFO: "\033[32m",     # Green
            LogLevel.WARNING: "\033[33m",  # Yellow
            LogLevel.ERROR: "\033[31m",    # Red
            LogLevel.CRITICAL: "\033[35m", # Magenta
        }
        self._reset = "\033[0m"

    def format(self, record: LogRecord) -> str:
        """Format as text."""
        timestamp = record.timestamp.strftime(self.date_format)
        level = record.level.name

        if self.colors:
            color = self._colors.get(record.level, "")
            level = f"{color}{level}{self._reset}"

        message = record.message

        # Add context as key=value pairs
        if record.context:
            context_str = " ".join(
                f"{k}={v}" for k, v in record.context.items()
            )
            message = f"{message} {context_str}"

        output = self.format_string.format(
            timestamp=timestamp,
            level=level,
            message=message,
            logger=record.logger_name,
        )

        if record.exception:
            output += "\n" + "".join(
                traceback.format_exception(
                    type(record.exception),
                    record.exception,
                    record.exception.__traceback__,
                )
            )

        return output


class JsonFormatter(LogFormatter):
    """
    JSON formatter for structured logging.

    Example output:
        {"timestamp": "2024-01-15T10:30:45", "level": "INFO", "message": "Login rejected"}
    """

    def __init__(self, pretty: bool = False):
        """Initialize formatter."""
        self.pretty = pretty

    def format(self, record: LogRecord) -> str:
        """Format as JSON."""
        return record.to_json(pretty=self.pretty)


class LogHandler:
    """Base log handler."""

    def __init__(
        self,
        formatter: Optional[LogFormatter] = None,
        level: LogLevel = LogLevel.DEBUG,
    ):
        """Initialize handler."""
        self.formatter = formatter or TextFormatter()
        self.level = level

    def handle(self, record: LogRecord) -> None:
        """Handle log record."""
        if record.level >= self.level:
            self.emit(record)

    def emit(self, record: LogRecord) -> None:
        """Emit formatted record."""
        raise NotImplementedError


class StreamHandler(LogHandler):
    """Stream output handler."""

    def __init__(
        self,
        stream: Any = None,
        formatter: Optional[LogFormatter] = None,
        level: LogLevel = LogLevel.DEBUG,
    ):
        """Initialize stream handler."""
        super().__init__(formatter, level)
        self.stream = stream or sys.stderr

    def emit(self, record: LogRecord) -> None:
        """Write to stream."""
        message = self.formatter.format(record)
        self.stream.write(message + "\n")
        self.stream.flush()


class MemoryHandler(LogHandler):
    """Keeps records in a list. Handy for tests."""

    def __init__(self, level: LogLevel = LogLevel.DEBUG):
        super().__init__(JsonFormatter(), level)
        self.records: List[LogRecord] = []

    def emit(self, record: LogRecord) -> None:
        self.records.append(record)


class Logger:
    """
    Structured logger.

    Example:
        logger = Logger("formcheck")

        logger.info("Login rejected", fields=["username"])
        logger.error("Hook crashed", exception=e)

        # With context
        logger = logger.with_context(request_id="abc123")
        logger.info("Validating login")
    """

    def __init__(
        self,
        name: str = "formcheck",
        level: LogLevel = LogLevel.DEBUG,
        handlers: Optional[List[LogHandler]] = None,
    ):
        """
        Initialize logger.

        Args:
            name: Logger name
            level: Minimum log level
            handlers: Log handlers
        """
        self.name = name
        self.level = level
        self._handlers = handlers if handlers is not None else []
        self._context: Dict[str, Any] = {}

    @property
    def handlers(self) -> List[LogHandler]:
        return self._handlers

    def add_handler(self, handler: LogHandler) -> "Logger":
        """Add log handler."""
        self._handlers.append(handler)
        return self

    def remove_handler(self, handler: LogHandler) -> "Logger":
        """Remove log handler."""
        self._handlers.remove(handler)
        return self

    def with_context(self, **context: Any) -> "Logger":
        """
        Create logger with additional context.

        Args:
            **context: Context key-values

        Returns:
            New logger with context
        """
        new_logger = Logger(
            name=self.name,
            level=self.level,
            handlers=self._handlers,
        )
        new_logger._context = {**self._context, **context}
        return new_logger

    def _log(
        self,
        level: LogLevel,
        message: str,
        exception: Optional[BaseException] = None,
        **context: Any,
    ) -> None:
        """Internal log method."""
        if level < self.level:
            return

        record = LogRecord(
            level=level,
            message=message,
            context={**self._context, **context},
            exception=exception,
            logger_name=self.name,
        )

        for handler in self._handlers:
            try:
                handler.handle(record)
            except Exception:
                pass  # Don't let logging errors break the caller

    def debug(self, message: str, **context: Any) -> None:
        """Log debug message."""
        self._log(LogLevel.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        """Log info message."""
        self._log(LogLevel.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        """Log warning message."""
        self._log(LogLevel.WARNING, message, **context)

    def error(
        self,
        message: str,
        exception: Optional[BaseException] = None,
        **context: Any,
    ) -> None:
        """Log error message."""
        self._log(LogLevel.ERROR, message, exception, **context)

    def critical(
        self,
        message: str,
        exception: Optional[BaseException] = None,
        **context: Any,
    ) -> None:
        """Log critical message."""
        self._log(LogLevel.CRITICAL, message, exception, **context)

    def exception(self, message: str, **context: Any) -> None:
        """Log current exception."""
        exc = sys.exc_info()[1]
        self._log(LogLevel.ERROR, message, exc, **context)


# Global logger registry
_loggers: Dict[str, Logger] = {}


def get_logger(
    name: str = "formcheck",
    level: Optional[LogLevel] = None,
) -> Logger:
    """
    Get or create logger.

    Args:
        name: Logger name
        level: Log level

    Returns:
        Logger instance
    """
    if name not in _loggers:
        _loggers[name] = Logger(name=name, level=level or LogLevel.DEBUG)
        _loggers[name].add_handler(StreamHandler())

    return _loggers[name]


def configure_logging(
    config: Optional["Config"] = None,
    stream: Any = None,
) -> Logger:
    """
    Configure the default logger from configuration.

    Reads ``logging.level`` and ``logging.format`` ("text" or "json").

    Args:
        config: Configuration (the global one when omitted)
        stream: Output stream (stderr when omitted)

    Returns:
        Configured logger
    """
    if config is None:
        from formcheck.core.config import get_config
        config = get_config()

    level = LogLevel.parse(config.get("logging.level", "INFO"))
    if config.get_str("logging.format", "text") == "json":
        formatter: LogFormatter = JsonFormatter()
    else:
        formatter = TextFormatter()

    # Updated in place so loggers already handed out follow the config.
    logger = get_logger("formcheck")
    logger.level = level
    logger.handlers[:] = [StreamHandler(stream=stream, formatter=formatter, level=level)]

    return logger
