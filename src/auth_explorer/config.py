"""Application configuration for auth-explorer.

Defines configuration models for the HTTP client and logging, plus the
default exchange start URL. Config is stored at the OS-appropriate
location (via click.get_app_dir); every field has a default so the
explorer also runs without a config file.

Example usage:
    # Load from config file
    config = ExplorerConfig.load_from_files(config_path)

    # Save new configuration
    config.save_to_file(config_path)
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_LOG_DIR",
    "ExplorerConfig",
    "HttpConfig",
    "LoggingConfig",
    "load_config_or_default",
]

import json
import os
import sys
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from auth_explorer.constants import (
    APP_NAME,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    MAX_HTTP_TIMEOUT_SECONDS,
    MIN_HTTP_TIMEOUT_SECONDS,
)
from auth_explorer.exceptions import ConfigurationError
from auth_explorer.utils.file_helpers import (
    load_validated_json,
    require_file_exists,
    set_secure_permissions,
)


def _get_platform_log_dir() -> str:
    """Get platform-appropriate base log directory following OS conventions.

    Platform conventions:
        - macOS: ~/Library/Logs
        - Linux: $XDG_STATE_HOME, falling back to ~/.local/state
        - Windows: ~/AppData/Local
    """
    if sys.platform == "darwin":
        return "~/Library/Logs"
    elif sys.platform == "win32":
        return "~/AppData/Local"
    else:
        return os.environ.get("XDG_STATE_HOME", "~/.local/state")


DEFAULT_LOG_DIR = _get_platform_log_dir()


class HttpConfig(BaseModel):
    """HTTP client settings for requests to the identity provider.

    Attributes:
        timeout: Request timeout in seconds (1-300).
        verify_tls: Verify the provider's TLS certificate.
    """

    timeout: int = Field(
        default=DEFAULT_HTTP_TIMEOUT_SECONDS,
        ge=MIN_HTTP_TIMEOUT_SECONDS,
        le=MAX_HTTP_TIMEOUT_SECONDS,
    )
    verify_tls: bool = True


class LoggingConfig(BaseModel):
    """Logging configuration settings.

    Logs are stored under <log_dir>/auth-explorer/:
        <log_dir>/
        └── auth-explorer/
            ├── system.jsonl            # WARNING and above
            └── debug/                  # Only created when log_level=DEBUG
                └── exchange_wire.jsonl

    Attributes:
        log_dir: Base directory for logs (platform-specific default).
        log_level: DEBUG enables the exchange wire log.
        include_payloads: Whether resource bodies are written to the wire log.
    """

    log_dir: str = Field(default=DEFAULT_LOG_DIR, min_length=1)
    log_level: Literal["DEBUG", "INFO"] = "INFO"
    include_payloads: bool = True

    @property
    def base_path(self) -> Path:
        return Path(self.log_dir).expanduser()

    @property
    def system_log_path(self) -> Path:
        return self.base_path / APP_NAME / "system.jsonl"


class ExplorerConfig(BaseModel):
    """Main application configuration for auth-explorer.

    Attributes:
        start_url: Resource to GET when an exchange starts without an explicit URL.
        http: HTTP client settings.
        logging: Logging configuration.
    """

    start_url: str | None = Field(default=None, pattern=r"^https?://")
    http: HttpConfig = Field(default_factory=HttpConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"extra": "ignore"}

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to JSON file with owner-only permissions.

        Args:
            config_path: Path where the config JSON file should be saved.
        """
        config_path.parent.mkdir(parents=True, exist_ok=True)
        set_secure_permissions(config_path.parent, is_directory=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(), f, indent=2)
            f.write("\n")

        set_secure_permissions(config_path)

    @classmethod
    def load_from_files(cls, config_path: Path) -> "ExplorerConfig":
        """Load configuration from JSON file.

        Args:
            config_path: Path to the config JSON file.

        Returns:
            ExplorerConfig instance with loaded configuration.

        Raises:
            FileNotFoundError: If config file doesn't exist.
            ValueError: If config file is invalid.
        """
        require_file_exists(config_path, file_type="configuration")
        return load_validated_json(
            config_path,
            cls,
            file_type="config",
            recovery_hint="Run 'auth-explorer config init --force' to reconfigure.",
        )


def load_config_or_default(config_path: Path) -> ExplorerConfig:
    """Load the config file if there is one, otherwise use defaults.

    Raises:
        ConfigurationError: If the file exists but is invalid.
    """
    if not config_path.exists():
        return ExplorerConfig()
    try:
        return ExplorerConfig.load_from_files(config_path)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
