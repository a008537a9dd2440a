"""
Logging Configuration — Structured logging setup.

Provides consistent logging across all modules with:
- JSON output for log shippers (machine-readable)
- Human-readable output for operators
- An optional log file, used as the trace sink for transfer output

Captured transfer output is logged at DEBUG; lines carrying a FATAL
marker are logged at ERROR.

## Environment Variables

- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_FORMAT: json, text (default: text)
- LOG_FILE: also append records to this file (default: unset)

## Usage

    from mirrorgate.logging_config import setup_logging

    setup_logging()  # Call once at startup
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

EXTRA_FIELDS = ("session_id", "repo", "slave")


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Output format:
    {"ts": "...", "level": "...", "logger": "...", "message": "...", "repo": "...", ...}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in EXTRA_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


class HumanFormatter(logging.Formatter):
    """
    Human-readable log formatter.

    Output format:
    12:34:56 INFO    [transfer       ] Message
    """

    COLORS = {
        "DEBUG": "\033[36m",    # Cyan
        "INFO": "\033[32m",     # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",    # Red
        "CRITICAL": "\033[35m", # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, color: bool = False):
        super().__init__()
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        time_str = datetime.now().strftime("%H:%M:%S")

        level = record.levelname
        if self.color:
            color = self.COLORS.get(level, "")
            level = f"{color}{level:7}{self.RESET}"
        else:
            level = f"{level:7}"

        module = record.name.split(".")[-1][:15]
        msg = record.getMessage()

        return f"{time_str} {level} [{module:15}] {msg}"


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    log_file: str | None = None,
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
               Defaults to LOG_LEVEL env var or INFO.
        format_type: Output format (json, text).
                     Defaults to LOG_FORMAT env var or text.
        log_file: Extra file to append records to.
                  Defaults to LOG_FILE env var; unset means stderr only.
    """
    log_level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    log_format = (format_type or os.environ.get("LOG_FORMAT", "text")).lower()
    log_path = log_file or os.environ.get("LOG_FILE")

    numeric_level = getattr(logging, log_level, logging.INFO)

    def make_formatter(tty: bool) -> logging.Formatter:
        if log_format == "json":
            return JSONFormatter()
        return HumanFormatter(color=tty)

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(make_formatter(sys.stderr.isatty()))
    handler.setLevel(numeric_level)
    root.addHandler(handler)

    if log_path:
        path = Path(log_path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(make_formatter(False))
        file_handler.setLevel(numeric_level)
        root.addHandler(file_handler)

    logging.getLogger(__name__).debug(
        f"Logging configured: level={log_level}, format={log_format}, file={log_path or '-'}"
    )

