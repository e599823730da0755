"""Drive an authentication exchange against an identity provider.

ExchangeSession owns the network round-trips that the exchange core
(auth_explorer.exchange) deliberately leaves out:

1. GET the request target, interpret the resource
2. Show the ExchangeState, let the user apply mutators to the body
3. PUT the mutated body back, interpret the new resource
4. Repeat until the provider returns a continue_redirect_uri

Session credentials are cookies kept by the httpx client, so one
ExchangeSession corresponds to one browser session at the provider.
A failed request leaves url, body and state exactly as they were.
"""

from __future__ import annotations

__all__ = [
    "ExchangeResult",
    "ExchangeSession",
]

import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Literal

import httpx

from auth_explorer.config import ExplorerConfig
from auth_explorer.constants import JSON_MEDIA_TYPE
from auth_explorer.exceptions import MalformedResourceError, TransportError
from auth_explorer.exchange.interpreter import describe_authenticators, interpret, parse_resource
from auth_explorer.exchange.state import AuthenticatorView, ExchangeState
from auth_explorer.telemetry.models import (
    BodyMutationEvent,
    ExchangeErrorEvent,
    ExchangeRequestEvent,
    ExchangeResponseEvent,
)
from auth_explorer.telemetry.system_logger import get_system_logger
from auth_explorer.telemetry.wire_logger import ExchangeWireLogger

Body = dict[str, Any]


@dataclass(frozen=True)
class ExchangeResult:
    """Outcome of one GET or PUT.

    Attributes:
        state: Exchange state after the request.
        status_code: HTTP status, or None when no request was sent.
        redirect_url: Set when the exchange is finished and the user agent
            must navigate to this URL instead of fetching it.
    """

    state: ExchangeState
    status_code: int | None = None
    redirect_url: str | None = None

    @property
    def redirect_required(self) -> bool:
        return self.redirect_url is not None


class ExchangeSession:
    """One interactive exchange with an identity provider.

    Usage:
        with ExchangeSession(config, url="https://idp.example.com/authn") as session:
            session.get()
            session.apply(set_username_password, "alice", "secret")
            result = session.put()
            if result.state.is_terminal:
                print(result.state.continue_redirect_uri)
    """

    def __init__(
        self,
        config: ExplorerConfig | None = None,
        *,
        url: str | None = None,
        http_client: httpx.Client | None = None,
        wire_logger: ExchangeWireLogger | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            config: Explorer configuration (defaults are used when None).
            url: Initial request target. Falls back to config.start_url.
            http_client: Optional httpx client (for testing).
            wire_logger: Optional wire logger; disabled when None.
        """
        self._config = config or ExplorerConfig()
        self._client = http_client or httpx.Client(
            timeout=self._config.http.timeout,
            verify=self._config.http.verify_tls,
            follow_redirects=False,
        )
        self._owns_client = http_client is None
        self._wire = wire_logger or ExchangeWireLogger(None)
        self._logger = get_system_logger()

        self.url: str = url or self._config.start_url or ""
        self.body: Body | None = None
        self.state: ExchangeState = interpret(None, self.url)

    def __enter__(self) -> "ExchangeSession":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close HTTP client if we own it."""
        if self._owns_client:
            self._client.close()

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    @property
    def terminated(self) -> bool:
        return self.state.is_terminal

    def authenticators(self) -> list[AuthenticatorView]:
        return describe_authenticators(self.body)

    def body_text(self) -> str:
        """Current body as pretty-printed JSON (empty string when there is none)."""
        if self.body is None:
            return ""
        return json.dumps(self.body, indent=2)

    # -------------------------------------------------------------------------
    # Body updates (no network)
    # -------------------------------------------------------------------------

    def set_body(self, body: Body | None) -> ExchangeState:
        """Replace the body and re-interpret it against the current target."""
        self.body = body
        self.state = interpret(body, self.url)
        self.url = self.state.request_url
        return self.state

    def edit(self, text: str) -> ExchangeState:
        """Replace the body from raw JSON text typed by the user.

        Malformed text leaves body and state unchanged.
        """
        try:
            body = parse_resource(text)
        except MalformedResourceError as e:
            self._logger.warning(
                {
                    "event": "malformed_resource",
                    "message": f"Body not updated: {e}",
                }
            )
            return self.state
        return self.set_body(body)

    def apply(self, mutator: Callable[..., Body], *args: Any, **kwargs: Any) -> ExchangeState:
        """Apply a body mutator and re-interpret the result.

        Args:
            mutator: One of the functions in auth_explorer.exchange.mutators.
            *args: Values passed to the mutator after the body.
            **kwargs: Keyword values passed to the mutator.

        Returns:
            The refreshed ExchangeState. Unchanged if there is no body.
        """
        if self.body is None:
            return self.state

        new_body = mutator(self.body, *args, **kwargs)
        changed = new_body != self.body
        self.set_body(new_body)

        self._wire.log(
            BodyMutationEvent(
                mutator=getattr(mutator, "__name__", repr(mutator)),
                changed=changed,
                step=self.state.step.value,
                payload=self._wire.payload(new_body) if changed else None,
            )
        )
        return self.state

    # -------------------------------------------------------------------------
    # Network round-trips
    # -------------------------------------------------------------------------

    def get(self) -> ExchangeResult:
        """GET the current target and interpret the returned resource.

        When the target is the known continue_redirect_uri the exchange is
        over: nothing is fetched and the result asks for a redirect.

        Raises:
            TransportError: If the request fails. Previous state is kept.
        """
        redirect_uri = self.state.continue_redirect_uri
        if redirect_uri is not None and self.url == redirect_uri:
            self._logger.info(
                {
                    "event": "exchange_complete",
                    "message": f"Exchange complete, redirecting to {redirect_uri}",
                }
            )
            return ExchangeResult(state=self.state, redirect_url=redirect_uri)
        return self._send("GET")

    def put(self) -> ExchangeResult:
        """PUT the current body to the current target.

        Raises:
            TransportError: If the request fails. Previous state is kept.
        """
        return self._send("PUT")

    def _send(self, method: Literal["GET", "PUT"]) -> ExchangeResult:
        url = self.url
        if not url:
            raise TransportError("No request URL set", url=url)

        headers = {"Accept": JSON_MEDIA_TYPE}
        content: str | None = None
        if method == "PUT":
            headers["Content-Type"] = JSON_MEDIA_TYPE
            content = json.dumps(self.body if self.body is not None else {})

        self._wire.log(
            ExchangeRequestEvent(
                method=method,
                url=url,
                payload=self._wire.payload(self.body) if method == "PUT" else None,
            )
        )

        start = time.monotonic()
        try:
            response = self._client.request(method, url, headers=headers, content=content)
            body = self._decode(response, url)
        except httpx.HTTPError as e:
            error = TransportError(f"HTTP error during {method} {url}: {e}", url=url)
            self._log_failure(method, url, start, error)
            raise error from e
        except TransportError as e:
            self._log_failure(method, url, start, e)
            raise

        state = interpret(body, url)
        self.body = body
        self.state = state
        self.url = state.request_url

        self._wire.log(
            ExchangeResponseEvent(
                method=method,
                url=url,
                status_code=response.status_code,
                duration_ms=(time.monotonic() - start) * 1000,
                step=state.step.value,
                next_url=state.request_url,
                authenticators=sorted(state.authenticators),
                payload=self._wire.payload(body),
            )
        )
        return ExchangeResult(state=state, status_code=response.status_code)

    @staticmethod
    def _decode(response: httpx.Response, url: str) -> Body:
        """Return the response's JSON object or raise TransportError."""
        status_code = response.status_code
        if not 200 <= status_code < 300:
            detail = ""
            try:
                error_data = response.json()
            except ValueError:
                error_data = None
            if isinstance(error_data, dict):
                detail = error_data.get("detail") or error_data.get("error_description") or ""
            message = f"Request failed: {detail}" if detail else "Request failed"
            raise TransportError(message, url=url, status_code=status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise TransportError(
                "Response is not JSON",
                url=url,
                status_code=status_code,
            ) from e

        if not isinstance(body, dict):
            raise TransportError(
                f"Response must be a JSON object, got {type(body).__name__}",
                url=url,
                status_code=status_code,
            )
        return body

    def _log_failure(
        self,
        method: Literal["GET", "PUT"],
        url: str,
        start: float,
        error: TransportError,
    ) -> None:
        self._logger.warning(
            {
                "event": "exchange_request_failed",
                "message": str(error),
                "method": method,
                "url": url,
            }
        )
        self._wire.log(
            ExchangeErrorEvent(
                method=method,
                url=url,
                duration_ms=(time.monotonic() - start) * 1000,
                error=str(error),
                error_type=type(error).__name__,
                status_code=error.status_code,
            )
        )
