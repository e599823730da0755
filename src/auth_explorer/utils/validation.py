"""Validation utilities for auth-explorer."""

from __future__ import annotations

__all__ = ["is_valid_http_url"]


def is_valid_http_url(url: str) -> bool:
    """Check if URL has valid HTTP or HTTPS scheme.

    Args:
        url: URL string to validate.

    Returns:
        True if URL starts with http:// or https://.
    """
    return url.startswith("http://") or url.startswith("https://")
