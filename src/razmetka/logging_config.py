"""
Logging configuration for Razmetka.

Provides:
- Rotating file handlers (app, error, audit)
- Structured logging with session context
- Per-module log level control

Library modules only call ``logging.getLogger(__name__)``; handlers are
installed by the application (the CLI calls ``setup_logging``).
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
import threading
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

LOG_DIR = Path(os.getenv("RAZMETKA_LOG_DIR", "logs"))
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"

_session_context = threading.local()


class ContextFilter(logging.Filter):
    """Add session ID to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = getattr(_session_context, "session_id", "N/A")
        return True


class FlushingTimedRotatingFileHandler(logging.handlers.TimedRotatingFileHandler):
    """TimedRotatingFileHandler that flushes after every write."""

    def emit(self, record: logging.LogRecord) -> None:
        super().emit(record)
        self.flush()


class ColoredFormatter(logging.Formatter):
    """Colored console output for development."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
        "RESET": "\033[0m",
    }

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if levelname in self.COLORS:
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "line": record.lineno,
            "message": record.getMessage(),
            "session_id": getattr(record, "session_id", None),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, ensure_ascii=False)


def _file_handler(filename: str, level: int, backup_count: int) -> logging.Handler:
    handler = FlushingTimedRotatingFileHandler(
        LOG_DIR / filename,
        when="midnight",
        interval=1,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.suffix = "%Y-%m-%d"
    handler.addFilter(ContextFilter())
    return handler


def setup_logging(
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    *,
    enable_debug_file: bool = False,
    json_format: bool = False,
) -> None:
    """
    Configure application-wide logging.

    Args:
        console_level: Console output level (DEBUG, INFO, WARNING, ERROR)
        file_level: File output level (DEBUG, INFO, WARNING, ERROR)
        enable_debug_file: Whether to create separate debug log file
        json_format: Use JSON format for file logs
    """
    LOG_DIR.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, console_level.upper(), logging.INFO))
    if os.getenv("RAZMETKA_NO_COLOR"):
        console_formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    else:
        console_formatter = ColoredFormatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    console_handler.setFormatter(console_formatter)
    console_handler.addFilter(ContextFilter())
    root_logger.addHandler(console_handler)

    app_handler = _file_handler(
        "razmetka.log", getattr(logging, file_level.upper(), logging.DEBUG), backup_count=30
    )
    if json_format:
        app_handler.setFormatter(JSONFormatter())
    else:
        app_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(app_handler)

    error_handler = _file_handler("razmetka-error.log", logging.ERROR, backup_count=90)
    error_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(error_handler)

    audit_handler = _file_handler("razmetka-audit.log", logging.INFO, backup_count=365)
    audit_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
    )
    audit_logger = logging.getLogger("razmetka.audit")
    audit_logger.handlers.clear()
    audit_logger.addHandler(audit_handler)
    audit_logger.propagate = False

    if enable_debug_file:
        debug_handler = logging.handlers.RotatingFileHandler(
            LOG_DIR / "razmetka-debug.log",
            maxBytes=50 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        debug_handler.setLevel(logging.DEBUG)
        debug_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        debug_handler.addFilter(ContextFilter())
        root_logger.addHandler(debug_handler)

    logging.getLogger("razmetka.dispatcher").setLevel(logging.DEBUG)
    logging.getLogger("razmetka.config_loader").setLevel(logging.INFO)
    logging.getLogger("razmetka.scorers").setLevel(logging.INFO)

    root_logger.info(
        "Logging configured",
        extra={"console_level": console_level, "file_level": file_level},
    )


def set_session_id(session_id: str) -> None:
    """Set session ID for current thread."""
    _session_context.session_id = session_id


def get_session_id() -> str | None:
    """Get session ID for current thread."""
    return getattr(_session_context, "session_id", None)


def generate_session_id() -> str:
    """Generate unique session ID."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    short_uuid = str(uuid.uuid4())[:8]
    return f"sess_{timestamp}_{short_uuid}"


def audit_log(message: str, **context: Any) -> None:
    """
    Write to audit log.

    Example:
        audit_log("Sentence classified", label="demand", confidence="grammar")
    """
    logger = logging.getLogger("razmetka.audit")
    context_str = " | ".join(f"{k}={v}" for k, v in context.items())
    full_message = f"{message} | {context_str}" if context else message
    logger.info(full_message)
