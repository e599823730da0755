"""Custom exceptions for auth-explorer.

All errors raised by the package are local and recoverable: a failed parse
or a failed round-trip leaves the previous exchange state in place.

Recoverable Errors:
    - MalformedResourceError: Resource text is not a JSON object
    - TransportError: GET/PUT against the identity provider failed
    - ConfigurationError: Config file missing or invalid

Conditions that are deliberately NOT exceptions:
    - An authenticator is present but an expected sub-field is missing:
      the dependent extraction is skipped.
    - A mutator is invoked while its authenticator is absent: the body is
      returned unchanged.

Usage:
    from auth_explorer.exceptions import MalformedResourceError, TransportError
"""

from __future__ import annotations

__all__ = [
    "AuthExplorerError",
    "ConfigurationError",
    "MalformedResourceError",
    "TransportError",
]


class AuthExplorerError(Exception):
    """Base class for all auth-explorer errors."""


class MalformedResourceError(AuthExplorerError):
    """Resource text could not be turned into a JSON object.

    Raised when:
    - The text is not valid JSON
    - The text is valid JSON but the top-level value is not an object

    Attributes:
        raw: The text that failed to parse (for display to the user).
    """

    def __init__(self, message: str, *, raw: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.raw = raw

    def __str__(self) -> str:
        return self.message


class TransportError(AuthExplorerError):
    """A request to the identity provider failed.

    Raised when:
    - The HTTP request cannot be sent or times out
    - The response status is not 2xx
    - The response body is not a JSON object

    Attributes:
        url: Request target.
        status_code: HTTP status if a response was received.
    """

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.url = url
        self.status_code = status_code

    def __repr__(self) -> str:
        parts = [f"TransportError({self.message!r}"]
        if self.url is not None:
            parts.append(f", url={self.url!r}")
        if self.status_code is not None:
            parts.append(f", status_code={self.status_code!r}")
        parts.append(")")
        return "".join(parts)

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class ConfigurationError(AuthExplorerError):
    """Configuration is invalid or incomplete.

    Raised when:
    - Config file does not exist where one is required
    - Config file contains invalid JSON
    - Config file fails Pydantic validation
    """
