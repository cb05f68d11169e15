"""
Unified output system using Loguru.
File logging for everything, console printing for user-facing messages.
"""

import sys
import threading
from pathlib import Path

from loguru import logger

from .console import safe_print

# Set while the blessed UI owns the terminal
_ui_mode_active = False
_ui_mode_lock = threading.Lock()

_LEVEL_STYLES = {
    "debug": "cyan",
    "info": None,
    "warning": "yellow",
    "error": "bold red",
}


def setup_loguru(
    log_file: Path,
    level: str = "INFO",
    max_file_size_mb: int = 10,
    backup_count: int = 5,
) -> None:
    """
    Configure loguru for file-only logging (the UI handles console display).

    Args:
        log_file: Path to log file
        level: Minimum level for file logging (DEBUG, INFO, WARNING, ERROR)
        max_file_size_mb: Rotate the log file once it reaches this size
        backup_count: Number of rotated files to keep
    """
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(
        log_file,
        rotation=f"{max_file_size_mb} MB",
        retention=backup_count,
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}",
        enqueue=False,
    )

    logger.info(f"Loguru initialized: {log_file} (level={level})")


def setup_stderr_logging(level: str = "WARNING") -> None:
    """Send log records to stderr instead of a file (non-interactive commands)."""
    logger.remove()
    logger.add(sys.stderr, level=level, format="{level}: {message}")


def set_ui_mode(active: bool) -> None:
    """Enable or disable UI mode. While active, log() only writes to the log file."""
    global _ui_mode_active
    with _ui_mode_lock:
        _ui_mode_active = active
    logger.debug(f"UI mode {'enabled' if active else 'disabled'}")


def log(message: str, level: str = "info") -> None:
    """
    Unified logging: writes to the log file AND prints for the user.

    Args:
        message: User-facing message
        level: Log level (debug, info, warning, error)
    """
    log_func = getattr(logger, level)
    log_func(message)

    with _ui_mode_lock:
        if _ui_mode_active:
            return

    if level != "debug":
        safe_print(message, style=_LEVEL_STYLES.get(level))
