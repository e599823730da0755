"""CLI helper utilities."""

from auth_explorer.utils.cli.helpers import (
    configure_logging,
    load_config_or_exit,
    read_resource_file,
)

__all__ = [
    "configure_logging",
    "load_config_or_exit",
    "read_resource_file",
]
