# Area: Shared
"""
victordle._shared.logging_config — Structured logging setup
===========================================================

Every module logs under the ``victordle`` logger tree. Records go to
stdout with the level name colored, and optionally to a file as one
JSON object per line so a match can be reconstructed afterwards
(``user_id`` and ``session_id`` extras are kept as top-level keys).
"""

from __future__ import annotations
import logging
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..errors import VictordleError

logger = logging.getLogger("victordle")

TERMINAL_FORMAT = "%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s"
TERMINAL_DATEFMT = "%H:%M:%S"

# Record attributes copied into the JSON line when present
CONTEXT_KEYS = ("user_id", "session_id", "error_type")


class TerminalFormatter(logging.Formatter):
    """Wraps the level name in an ANSI color."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # Handlers share the record; color a copy
        colored = logging.makeLogRecord(record.__dict__)
        color = self.LEVEL_COLORS.get(record.levelno, "")
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({
            key: getattr(record, key)
            for key in CONTEXT_KEYS
            if getattr(record, key, None) is not None
        })
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def _terminal_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(TerminalFormatter(fmt=TERMINAL_FORMAT, datefmt=TERMINAL_DATEFMT))
    return handler


def _file_handler(path: Path, level: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(
    log_file_path: Optional[str] = "victordle.log",
    level: int = logging.INFO,
) -> None:
    """
    Install the terminal handler and, when a path is given, the JSON
    file handler on the package logger.

    Calling it again replaces the previous handlers. Records do not
    reach the root logger.

    Parameters
    ----------
    log_file_path : str or None
        JSON log destination. ``None`` keeps terminal output only.
    level : int
        Threshold for the logger and both handlers.
    """
    logger.handlers.clear()
    logger.setLevel(level)
    logger.propagate = False
    logger.addHandler(_terminal_handler(level))

    if not log_file_path:
        return
    try:
        logger.addHandler(_file_handler(Path(log_file_path), level))
    except OSError as e:
        logger.warning(f"JSON log disabled, cannot open {log_file_path}: {e}")


def log_engine_error(error: "VictordleError", level: int = logging.ERROR) -> None:
    """
    Log an engine error as its structured block, tagged with the error
    class so the JSON line can be filtered on ``error_type``.

    Nothing in the engine is fatal to the process; callers log and go on.
    """
    logger.log(
        level,
        error.format_error_log(),
        extra={"error_type": error.__class__.__name__},
    )
