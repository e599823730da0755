"""Logger setup utilities for JSONL log files.

Both the system log and the exchange wire log are JSONL files under
<log_dir>/auth-explorer/, in directories readable only by the owner.
"""

from __future__ import annotations

__all__ = [
    "ensure_secure_log_directory",
    "setup_jsonl_logger",
]

import logging
from pathlib import Path

from auth_explorer.utils.file_helpers import set_secure_permissions
from auth_explorer.utils.logging.iso_formatter import ISO8601Formatter


def ensure_secure_log_directory(log_file: Path) -> None:
    """Create the parent directory of a log file with owner-only permissions.

    Raises:
        OSError: If the directory cannot be created.
    """
    directory = log_file.parent
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OSError(f"Cannot create log directory {directory}: {e}") from e
    set_secure_permissions(directory, is_directory=True)


def setup_jsonl_logger(
    logger_name: str,
    log_file: Path,
    log_level: int = logging.INFO,
) -> logging.Logger:
    """Return a non-propagating logger that appends JSONL records to log_file.

    Calling it again for the same name replaces the previous file handler,
    so a new session never writes to a stale file.

    Args:
        logger_name: Logger name (e.g., "auth-explorer.debug.exchange").
        log_file: Destination file.
        log_level: Level for both the logger and its handler.

    Raises:
        OSError: If the log directory cannot be created.
    """
    ensure_secure_log_directory(log_file)

    logger = logging.getLogger(logger_name)
    logger.setLevel(log_level)
    logger.propagate = False

    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    file_handler.setLevel(log_level)
    file_handler.setFormatter(ISO8601Formatter())
    logger.addHandler(file_handler)

    return logger
