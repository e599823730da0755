"""Shared utilities for auth-explorer."""

__all__: list[str] = []
