"""Logging for the recipe generator.

Text output for local runs, one JSON object per line for log shippers.
Configured via environment variables:
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_TYPE: text, json (default: text)

Pipeline code attaches correlation ids with `extra=`, e.g.
`logger.info("...", extra={"session_id": session.session_id})`.
"""

import json
import logging
import os
import sys
from typing import Any, Optional


# Record attributes copied into structured output when present
CONTEXT_FIELDS = ("request_id", "session_id")


def _context(record: logging.LogRecord) -> dict[str, Any]:
    return {field: getattr(record, field) for field in CONTEXT_FIELDS if hasattr(record, field)}


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context(record),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class RichTextFormatter(logging.Formatter):
    """Coloured single-line text with a level icon and a short session tag."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[31m",
        "RESET": "\033[0m",
    }

    ICONS = {
        "DEBUG": "🔍",
        "INFO": "ℹ️",
        "WARNING": "⚠️",
        "ERROR": "❌",
        "CRITICAL": "❌",
    }

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        color = self.COLORS.get(level, self.COLORS["RESET"])
        reset = self.COLORS["RESET"]

        parts = [
            self.ICONS.get(level, ""),
            self.formatTime(record, "%Y-%m-%d %H:%M:%S"),
            f"{level:<8}",
            f"{record.name:<20}",
        ]
        session_id = getattr(record, "session_id", None)
        if session_id:
            # First 8 chars are enough to follow one session in a busy log
            parts.append(f"[{str(session_id)[:8]}]")
        parts.append(record.getMessage())

        line = f"{color}{' '.join(parts)}{reset}"
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


def get_logger(name: str, level: Optional[str] = None, log_type: Optional[str] = None) -> logging.Logger:
    """Return a logger writing to stdout, configuring it on first use.

    Args:
        name: Logger name, usually "recipe_generator" or a child of it.
        level: Overrides LOG_LEVEL. Unknown names fall back to INFO.
        log_type: Overrides LOG_TYPE ("json" or "text").
    """
    log = logging.getLogger(name)
    if log.handlers:
        return log

    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_level = getattr(logging, level_name, logging.INFO)
    fmt = (log_type or os.getenv("LOG_TYPE", "text")).lower()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(JSONFormatter() if fmt == "json" else RichTextFormatter())

    log.setLevel(log_level)
    log.addHandler(handler)
    return log


logger = get_logger("recipe_generator")

logging.getLogger("aiohttp").setLevel(logging.WARNING)
