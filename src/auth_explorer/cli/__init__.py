"""Command-line interface for auth-explorer.

Provides commands for interpreting saved resources, mutating request
bodies offline, and stepping through a live exchange.
"""

from .main import cli, main

__all__ = ["cli", "main"]
