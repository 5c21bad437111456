"""Logging configuration."""

from __future__ import annotations

import json
import linecache
import logging
import sys
import traceback
from datetime import UTC, datetime
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from structlog.types import EventDict

# Type for exception info tuple (from sys.exc_info())
ExcInfo = tuple[type[BaseException] | None, BaseException | None, TracebackType | None]

TracebackFrame = dict[str, str | int | None]

ExceptionDetails = dict[str, None | str | list[TracebackFrame]]

APP_LOG_FILE = "shortbox.json.log"
HTTP_LOG_FILE = "shortbox.http.json.log"

# Loggers that only ever write to stdout
UVICORN_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error")

# HTTP client loggers routed to their own file
HTTP_CLIENT_LOGGERS = ("httpx", "httpcore", "httpcore.connection", "httpcore.http11")


def format_exception_for_json(exc_info: ExcInfo | None) -> ExceptionDetails:
    """Format exception information for JSON logging.

    Args:
        exc_info: Exception info tuple from sys.exc_info() or None

    Returns:
        Dictionary with exception_type, exception_message, exception_module,
        traceback_frames and traceback_text; empty when there is no exception
    """
    if exc_info is None or exc_info == (None, None, None):
        return {}

    exc_type, exc_value, exc_tb = exc_info

    details: ExceptionDetails = {
        "exception_type": exc_type.__name__ if exc_type else None,
        "exception_message": str(exc_value) if exc_value else None,
        "exception_module": exc_type.__module__ if exc_type else None,
    }

    if exc_tb:
        frames: list[TracebackFrame] = []
        current_tb: TracebackType | None = exc_tb
        while current_tb is not None:
            code = current_tb.tb_frame.f_code
            frame_info: TracebackFrame = {
                "filename": code.co_filename,
                "lineno": current_tb.tb_lineno,
                "function": code.co_name,
            }
            line = linecache.getline(code.co_filename, current_tb.tb_lineno)
            if line:
                frame_info["source_line"] = line.strip()
            frames.append(frame_info)
            current_tb = current_tb.tb_next

        details["traceback_frames"] = frames
        details["traceback_text"] = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))

    return details


def exception_processor(
    logger: structlog.BoundLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Replace ``exc_info`` with structured exception fields.

    Adds ``exception`` (see format_exception_for_json) and a one-line
    ``exception_summary`` for quick scanning.
    """
    exc_info = event_dict.pop("exc_info", None)
    if exc_info is True:
        exc_info = sys.exc_info()
    elif isinstance(exc_info, BaseException):
        exc_info = (type(exc_info), exc_info, exc_info.__traceback__)

    if exc_info and exc_info != (None, None, None):
        details = format_exception_for_json(exc_info)  # type: ignore[arg-type]
        if details:
            event_dict["exception"] = details
            exc_type = details.get("exception_type")
            exc_msg = details.get("exception_message")
            if exc_type and exc_msg:
                event_dict["exception_summary"] = f"{exc_type}: {exc_msg}"

    if "exception" in event_dict and isinstance(event_dict["exception"], BaseException):
        exc = event_dict.pop("exception")
        event_dict["exception"] = format_exception_for_json((type(exc), exc, exc.__traceback__))

    return event_dict


class JSONFormatter(logging.Formatter):
    """JSON formatter for standard library logging (used for HTTP client logs)."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON string."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = format_exception_for_json(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)


def _close_handlers(logger: logging.Logger) -> None:
    """Close and remove all handlers of a logger."""
    for handler in logger.handlers[:]:
        try:
            handler.close()
        except Exception:
            pass  # Closing a broken handler must not stop reconfiguration
    logger.handlers.clear()


def _route_logger(name: str, handler: logging.Handler, level: int | None = None) -> None:
    """Send a logger only to the given handler."""
    target = logging.getLogger(name)
    target.propagate = False
    _close_handlers(target)
    target.addHandler(handler)
    if level is not None:
        target.setLevel(level)


def setup_logging(debug: bool = False, logs_dir: Path | None = None) -> None:
    """Setup structured logging with structlog.

    Configures:
    - Application logs: stdout (pretty in debug, JSON otherwise), or only the
      JSON file when ``logs_dir`` is given
    - HTTP client logs (httpx/httpcore): separate JSON file, WARNING and up
    - Uvicorn logs: always stdout

    Args:
        debug: Enable debug logging
        logs_dir: Optional directory for JSON log files
    """
    log_level = logging.DEBUG if debug else logging.INFO

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(log_level)

    app_file_handler = None
    http_file_handler = None
    if logs_dir:
        try:
            logs_dir.mkdir(parents=True, exist_ok=True)

            app_file_handler = logging.FileHandler(logs_dir / APP_LOG_FILE, encoding="utf-8")
            app_file_handler.setLevel(log_level)

            http_file_handler = logging.FileHandler(logs_dir / HTTP_LOG_FILE, encoding="utf-8")
            http_file_handler.setLevel(logging.DEBUG)
            http_file_handler.setFormatter(JSONFormatter())
        except OSError as e:
            # If file logging fails, log to stderr but don't crash
            sys.stderr.write(f"Warning: Failed to setup file logging: {e}\n")

    logging.basicConfig(
        format="%(message)s",
        level=log_level,
        handlers=[app_file_handler or stdout_handler],
        force=True,
    )

    for name in UVICORN_LOGGERS:
        _route_logger(name, stdout_handler)

    if http_file_handler:
        for name in HTTP_CLIENT_LOGGERS:
            _route_logger(name, http_file_handler, logging.WARNING)

    processors = [
        structlog.contextvars.merge_contextvars,  # Merge trace_id and other context
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        exception_processor,
    ]

    # File logs are always JSON; console is pretty only in debug mode
    if app_file_handler or not debug:
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[*processors, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    logging.getLogger().setLevel(log_level)

    structlog.get_logger("shortbox.logging").info(
        "Logging configured",
        level=logging.getLevelName(log_level),
        debug=debug,
        app_log_file=str(logs_dir / APP_LOG_FILE) if app_file_handler else None,
        http_log_file=str(logs_dir / HTTP_LOG_FILE) if http_file_handler else None,
    )
