"""
fieldcheck Logger
=================

Structured logging for the validation engine.

Records carry key=value context (field names, rule types, counts) and are
rendered either as plain text or as JSON lines.
"""

from __future__ import annotations

import sys
import traceback
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO, Union

import orjson


class LogLevel(IntEnum):
    """Log levels (same numeric values as the stdlib logging module)."""

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50

    @classmethod
    def parse(cls, value: Union[str, int, "LogLevel"]) -> "LogLevel":
        """Parse a level given as name or number."""
        if isinstance(value, LogLevel):
            return value
        if isinstance(value, int):
            return cls(value)
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown log level: {value!r}") from None


@dataclass
class LogRecord:
    """
    Structured log record.

    Attributes:
        level: Log level
        message: Log message
        timestamp: Record timestamp
        context: Additional key/value context
        exception: Exception info
        logger_name: Name of the emitting logger
    """

    level: LogLevel
    message: str
    timestamp: datetime = field(default_factory=datetime.now)
    context: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[BaseException] = None
    logger_name: str = "fieldcheck"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data: Dict[str, Any] = {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.name,
            "message": self.message,
            "logger": self.logger_name,
        }

        if self.context:
            data["context"] = self.context

        if self.exception is not None:
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

    def to_json(self) -> str:
        """Convert to a JSON line. Non-JSON context values are stringified."""
        return orjson.dumps(self.to_dict(), default=str).decode("utf-8")


class LogFormatter:
    """Base log formatter."""

    def format(self, record: LogRecord) -> str:
        raise NotImplementedError


class TextFormatter(LogFormatter):
    """
    Plain text formatter.

    Example output:
        2024-01-15 10:30:45 [WARNING] Unknown validation type type=zipcode
    """

    COLORS = {
        LogLevel.DEBUG: "\033[36m",
        LogLevel.INFO: "\033[32m",
        LogLevel.WARNING: "\033[33m",
        LogLevel.ERROR: "\033[31m",
        LogLevel.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(
        self,
        format_string: Optional[str] = None,
        date_format: str = "%Y-%m-%d %H:%M:%S",
        colors: bool = False,
    ):
        self.format_string = format_string or "{timestamp} [{level}] {message}"
        self.date_format = date_format
        self.colors = colors

    def format(self, record: LogRecord) -> str:
        level = record.level.name
        if self.colors:
            level = f"{self.COLORS.get(record.level, '')}{level}{self.RESET}"

        message = record.message
        if record.context:
            pairs = " ".join(f"{k}={v}" for k, v in record.context.items())
            message = f"{message} {pairs}"

        output = self.format_string.format(
            timestamp=record.timestamp.strftime(self.date_format),
            level=level,
            message=message,
            logger=record.logger_name,
        )

        if record.exception is not None:
            output += "\n" + "".join(
                traceback.format_exception(
                    type(record.exception),
                    record.exception,
                    record.exception.__traceback__,
                )
            ).rstrip("\n")

        return output


class JsonFormatter(LogFormatter):
    """
    JSON lines formatter.

    Example output:
        {"timestamp":"2024-01-15T10:30:45","level":"INFO","message":"Submission passed"}
    """

    def __init__(self, pretty: bool = False):
        self.pretty = pretty

    def format(self, record: LogRecord) -> str:
        if self.pretty:
            return orjson.dumps(
                record.to_dict(), default=str, option=orjson.OPT_INDENT_2
            ).decode("utf-8")
        return record.to_json()


class LogHandler:
    """Base log handler."""

    def __init__(
        self,
        formatter: Optional[LogFormatter] = None,
        level: LogLevel = LogLevel.DEBUG,
    ):
        self.formatter = formatter or TextFormatter()
        self.level = level

    def handle(self, record: LogRecord) -> None:
        if record.level >= self.level:
            self.emit(record)

    def emit(self, record: LogRecord) -> None:
        raise NotImplementedError


class StreamHandler(LogHandler):
    """Writes records to a text stream (stderr by default)."""

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        formatter: Optional[LogFormatter] = None,
        level: LogLevel = LogLevel.DEBUG,
    ):
        super().__init__(formatter, level)
        self.stream = stream

    def emit(self, record: LogRecord) -> None:
        # Resolved per write so a replaced sys.stderr is picked up
        stream = self.stream or sys.stderr
        stream.write(self.formatter.format(record) + "\n")
        stream.flush()


class FileHandler(LogHandler):
    """Appends records to a file, JSON lines by default."""

    def __init__(
        self,
        path: Union[str, Path],
        formatter: Optional[LogFormatter] = None,
        level: LogLevel = LogLevel.DEBUG,
    ):
        super().__init__(formatter or JsonFormatter(), level)
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def emit(self, record: LogRecord) -> None:
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(self.formatter.format(record) + "\n")


class MemoryHandler(LogHandler):
    """Keeps records in a list. Useful for tests and for the CLI summary."""

    def __init__(self, level: LogLevel = LogLevel.DEBUG):
        super().__init__(None, level)
        self.records: List[LogRecord] = []

    def emit(self, record: LogRecord) -> None:
        self.records.append(record)

    def messages(self, level: Optional[LogLevel] = None) -> List[str]:
        return [
            r.message for r in self.records
            if level is None or r.level == level
        ]


class Logger:
    """
    Structured logger.

    Example:
        logger = get_logger("fieldcheck")
        logger.warning("Unknown validation type", type="zipcode")

        field_logger = logger.with_context(field="email")
        field_logger.debug("Rule skipped", rule="length")
    """

    def __init__(
        self,
        name: str = "fieldcheck",
        level: LogLevel = LogLevel.WARNING,
        handlers: Optional[List[LogHandler]] = None,
    ):
        self.name = name
        self.level = level
        self._handlers: List[LogHandler] = handlers if handlers is not None else []
        self._context: Dict[str, Any] = {}

    @property
    def handlers(self) -> List[LogHandler]:
        return list(self._handlers)

    def add_handler(self, handler: LogHandler) -> "Logger":
        self._handlers.append(handler)
        return self

    def remove_handler(self, handler: LogHandler) -> "Logger":
        if handler in self._handlers:
            self._handlers.remove(handler)
        return self

    def set_level(self, level: Union[str, int, LogLevel]) -> "Logger":
        self.level = LogLevel.parse(level)
        return self

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level >= self.level

    def with_context(self, **context: Any) -> "Logger":
        """
        Create a logger sharing handlers, with extra bound context.

        The child shares the handler list, so handlers added later to the
        parent are seen by the child too.
        """
        child = Logger(name=self.name, level=self.level, handlers=self._handlers)
        child._context = {**self._context, **context}
        return child

    def _log(
        self,
        level: LogLevel,
        message: str,
        exception: Optional[BaseException] = None,
        **context: Any,
    ) -> None:
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
            except (OSError, ValueError):
                # Broken sinks are skipped
                continue

    def debug(self, message: str, **context: Any) -> None:
        self._log(LogLevel.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        self._log(LogLevel.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self._log(LogLevel.WARNING, message, **context)

    def error(
        self,
        message: str,
        exception: Optional[BaseException] = None,
        **context: Any,
    ) -> None:
        self._log(LogLevel.ERROR, message, exception, **context)

    def critical(
        self,
        message: str,
        exception: Optional[BaseException] = None,
        **context: Any,
    ) -> None:
        self._log(LogLevel.CRITICAL, message, exception, **context)


# Logger registry, keyed by name
_loggers: Dict[str, Logger] = {}


def get_logger(
    name: str = "fieldcheck",
    level: Optional[LogLevel] = None,
) -> Logger:
    """
    Get or create a named logger.

    New loggers write text to stderr at WARNING and above.

    Args:
        name: Logger name
        level: Log level (only applied when the logger is created)

    Returns:
        Logger instance
    """
    if name not in _loggers:
        logger = Logger(name=name, level=level or LogLevel.WARNING)
        logger.add_handler(StreamHandler())
        _loggers[name] = logger

    return _loggers[name]


def configure_logging(
    level: Union[str, int, LogLevel] = LogLevel.INFO,
    format: str = "text",
    log_file: Optional[Union[str, Path]] = None,
    colors: bool = False,
    name: str = "fieldcheck",
) -> Logger:
    """
    Configure the named logger in place.

    The logger object is reused (not replaced) so module-level references
    obtained earlier through get_logger() pick up the new handlers.

    Args:
        level: Log level
        format: Output format ("text" or "json")
        log_file: Optional log file path
        colors: Enable ANSI colors for text output
        name: Logger to configure

    Returns:
        Configured logger
    """
    level = LogLevel.parse(level)
    if format not in ("text", "json"):
        raise ValueError(f"Unknown log format: {format!r}")

    formatter: LogFormatter
    if format == "json":
        formatter = JsonFormatter()
    else:
        formatter = TextFormatter(colors=colors)

    logger = get_logger(name)
    logger.level = level
    logger._handlers.clear()
    logger.add_handler(StreamHandler(formatter=formatter, level=level))

    if log_file:
        logger.add_handler(FileHandler(log_file, level=level))

    return logger
