"""OAuth 2 request helpers for starting and finishing an exchange.

An exchange begins with an authorization request to the provider and
ends with a redirect carrying the response parameters, either in the
query string (code flow) or in the fragment (implicit flow).
"""

from __future__ import annotations

__all__ = [
    "build_authorization_url",
    "parse_params_from_url",
    "random_guid",
]

import uuid
from urllib.parse import parse_qsl, unquote, urlencode, urlsplit, urlunsplit


def random_guid() -> str:
    """Return a random version 4 UUID string, used for state and nonce."""
    return str(uuid.uuid4())


def build_authorization_url(
    endpoint: str,
    client_id: str,
    redirect_uri: str,
    scopes: list[str],
    *,
    response_type: str = "token",
    state: str | None = None,
    nonce: str | None = None,
    prompt: str | None = None,
) -> str:
    """Build the authorization request that starts an exchange.

    Args:
        endpoint: Provider authorization endpoint.
        client_id: OAuth client identifier.
        redirect_uri: Where the provider sends the user agent at the end.
        scopes: Requested scopes.
        response_type: OAuth response type ("token", "id_token token", "code").
        state: Opaque state value. Generated when omitted.
        nonce: Nonce for ID token requests. Generated when the response
            type includes an ID token and none is given.
        prompt: Optional OIDC prompt value (e.g., "login", "consent").

    Returns:
        Full authorization URL. Existing query parameters on the endpoint are kept.
    """
    params = [
        ("response_type", response_type),
        ("client_id", client_id),
        ("redirect_uri", redirect_uri),
        ("scope", " ".join(scopes)),
        ("state", state or random_guid()),
    ]
    if nonce is None and "id_token" in response_type.split():
        nonce = random_guid()
    if nonce is not None:
        params.append(("nonce", nonce))
    if prompt is not None:
        params.append(("prompt", prompt))

    parts = urlsplit(endpoint)
    query = parse_qsl(parts.query, keep_blank_values=True) + params
    return urlunsplit(parts._replace(query=urlencode(query)))


def parse_params_from_url(url: str) -> dict[str, str]:
    """Extract response parameters from a redirect URL.

    Fragment parameters take precedence over the query string; when a
    fragment is present the query parameters are discarded.

    Args:
        url: Redirect URL received at the end of the exchange.

    Returns:
        Decoded parameter mapping.
    """
    parts = urlsplit(url)
    if parts.fragment:
        return _split_params(parts.fragment)
    return _split_params(parts.query)


def _split_params(text: str) -> dict[str, str]:
    # Percent-decoding only: a literal "+" in a token stays "+"
    params: dict[str, str] = {}
    for pair in text.split("&"):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        params[unquote(key)] = unquote(value)
    return params
