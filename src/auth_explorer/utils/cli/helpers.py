"""Shared CLI utility functions.

Provides common helpers for CLI commands to avoid duplication.
"""

from __future__ import annotations

__all__ = [
    "configure_logging",
    "load_config_or_exit",
    "read_resource_file",
]

from pathlib import Path
from typing import Any

import click

from auth_explorer.config import ExplorerConfig, load_config_or_default
from auth_explorer.exceptions import ConfigurationError, MalformedResourceError
from auth_explorer.exchange.interpreter import parse_resource
from auth_explorer.telemetry.system_logger import configure_system_logger_file
from auth_explorer.telemetry.wire_logger import ExchangeWireLogger, create_wire_logger
from auth_explorer.utils.file_helpers import get_config_path


def load_config_or_exit(config_path: Path | None = None) -> ExplorerConfig:
    """Load configuration, falling back to defaults when no file exists.

    Args:
        config_path: Explicit config file. Defaults to the app directory.

    Returns:
        ExplorerConfig instance.

    Raises:
        click.ClickException: If an existing config file is invalid.
    """
    try:
        return load_config_or_default(config_path or get_config_path())
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e


def configure_logging(config: ExplorerConfig) -> ExchangeWireLogger:
    """Attach file logging from config and return the session's wire logger."""
    configure_system_logger_file(config.logging.system_log_path)
    try:
        return create_wire_logger(
            config.logging.base_path,
            debug=config.logging.log_level == "DEBUG",
            include_payloads=config.logging.include_payloads,
        )
    except OSError as e:
        raise click.ClickException(f"Cannot set up wire log: {e}") from e


def read_resource_file(path: Path, *, allow_empty: bool = False) -> dict[str, Any] | None:
    """Read and parse a saved resource.

    Args:
        path: File holding resource JSON.
        allow_empty: Return None for a blank file instead of failing.

    Raises:
        click.ClickException: If the file is unreadable, malformed, or empty.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise click.ClickException(f"Cannot read {path}: {e}") from e

    try:
        body = parse_resource(text)
    except MalformedResourceError as e:
        raise click.ClickException(f"{path}: {e}") from e

    if body is None and not allow_empty:
        raise click.ClickException(f"{path} is empty")
    return body
