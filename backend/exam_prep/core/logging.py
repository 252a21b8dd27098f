"""Structured logging configuration using structlog."""

import logging
import re
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, override

import structlog

# Log file paths
LOG_DIR = Path(__file__).resolve().parents[3] / "logs"

APP_LOG_FILE = LOG_DIR / "app.log"
ERROR_LOG_FILE = LOG_DIR / "error.log"
REQUEST_LOG_FILE = LOG_DIR / "request.log"

# ANSI escape code pattern for stripping colors
ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")

# Secrets that must never reach a log line
API_KEY_PATTERN = re.compile(r"\b(sk-|sk-proj-)[A-Za-z0-9_-]{20,}\b")

MAX_LOGGED_TEXT = 500


def strip_ansi(text: str) -> str:
    """Remove ANSI escape codes from text."""
    return ANSI_ESCAPE.sub("", text)


def mask_secrets(text: str) -> str:
    """Replace API keys in text with a placeholder."""
    return API_KEY_PATTERN.sub("***", text)


def truncate(text: str, max_len: int = MAX_LOGGED_TEXT) -> str:
    """Shorten long texts (document bodies, replies) for log output."""
    return text[:max_len] + "..." if len(text) > max_len else text


class CleanFileHandler(logging.Handler):
    """File handler that writes clean, readable logs without ANSI codes."""

    def __init__(self, filepath: Path, max_size_mb: int = 10):
        super().__init__()
        self.filepath = filepath
        self.max_size = max_size_mb * 1024 * 1024

    @override
    def emit(self, record: Any) -> None:
        try:
            msg = self.format(record)
            clean_msg = strip_ansi(msg)

            with open(self.filepath, "a", encoding="utf-8") as f:
                f.write(clean_msg + "\n")

            if self.filepath.stat().st_size > self.max_size:
                self._rotate()

        except Exception:
            self.handleError(record)

    def _rotate(self) -> None:
        """Rotate log file with timestamp."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        rotated = self.filepath.with_suffix(f".{timestamp}.log")
        if self.filepath.exists():
            self.filepath.rename(rotated)


def setup_logging(
    log_level: str = "INFO",
    json_format: bool = False,
    log_to_file: bool = False,
) -> None:
    """Configure structured logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_format: If True, output JSON format; otherwise, console-friendly format
        log_to_file: If True, also write logs to files under logs/
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    request_logger = logging.getLogger("request")
    request_logger.setLevel(logging.INFO)

    if log_to_file:
        LOG_DIR.mkdir(exist_ok=True)

        app_handler = CleanFileHandler(APP_LOG_FILE, max_size_mb=10)
        app_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        app_handler.setLevel(logging.DEBUG)
        root_logger.addHandler(app_handler)

        error_handler = CleanFileHandler(ERROR_LOG_FILE, max_size_mb=5)
        error_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        error_handler.setLevel(logging.ERROR)
        root_logger.addHandler(error_handler)

        request_handler = CleanFileHandler(REQUEST_LOG_FILE, max_size_mb=20)
        request_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
        )
        request_logger.addHandler(request_handler)
        request_logger.propagate = False  # Don't duplicate to root logger

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors_list = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors_list = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors_list,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a configured logger instance."""
    return structlog.get_logger(name)


def log_request(
    method: str,
    path: str,
    filename: str | None = None,
    user_message: str | None = None,
    response: str | None = None,
    turns: int | None = None,
    context_chars: int | None = None,
    duration_ms: float | None = None,
    status: str = "success",
    error: str | None = None,
) -> None:
    """Log an upload or chat request in a readable one-line format.

    Args:
        method: HTTP method
        path: Request path
        filename: Uploaded file name
        user_message: Latest user message of a chat turn
        response: Assistant reply or extracted text (truncated)
        turns: Number of history entries sent to the backend
        context_chars: Size of the attached document context
        duration_ms: Request duration in milliseconds
        status: "success", "rejected" or "error"
        error: Error message if failed
    """
    logger = logging.getLogger("request")

    parts = [f"[{method}] {path}"]

    if filename:
        parts.append(f"file={filename}")

    if turns is not None:
        parts.append(f"turns={turns}")

    if context_chars:
        parts.append(f"context={context_chars}ch")

    if user_message:
        parts.append(f"| INPUT: {mask_secrets(truncate(user_message))}")

    if response:
        parts.append(f"| OUTPUT: {mask_secrets(truncate(response))}")

    if duration_ms:
        parts.append(f"| {duration_ms:.0f}ms")

    parts.append(f"| {status.upper()}")

    if error:
        parts.append(f"| ERROR: {mask_secrets(error)}")

    logger.info(" ".join(parts))
