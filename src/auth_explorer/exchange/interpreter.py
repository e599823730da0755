"""Interpret identity provider resources into ExchangeState.

The interpreter is stateless: every call builds a complete ExchangeState
from one resource and the URL the previous request was sent to.

Step classification (later rules override earlier ones):
1. No resource, or an empty one -> INITIAL
2. meta present -> by meta.resourceType:
   "secondFactor" -> SECOND_FACTOR, "approve" -> CONSENT, anything else -> LOGIN
3. flow_uri present -> FLOW_REDIRECT
4. continue_redirect_uri present -> CONTINUE_REDIRECT

Fields that have an unexpected JSON type are treated as absent. A missing
nested field (e.g., an authenticator without usernameRecovery) only means
the dependent link is not offered.
"""

from __future__ import annotations

__all__ = [
    "classify_step",
    "describe_authenticators",
    "extract_auth_urls",
    "extract_authenticators",
    "interpret",
    "parse_resource",
    "refresh",
]

import json
from typing import Any

from auth_explorer.constants import (
    APPROVED_KEY,
    CLIENT_KEY,
    CONSENT_HANDLER_SCHEMA_URN,
    CONTINUE_REDIRECT_URI_KEY,
    FLOW_URI_KEY,
    FOLLOW_UP_KEY,
    META_KEY,
    SCHEMAS_KEY,
    SCOPES_KEY,
    SESSION_IDENTITY_RESOURCE_KEY,
    USERNAME_PASSWORD_AUTHENTICATOR_URN,
)
from auth_explorer.exceptions import MalformedResourceError
from auth_explorer.exchange.state import AuthenticatorView, AuthUrl, ExchangeState
from auth_explorer.exchange.vocabulary import (
    AUTH_URL_DESCRIPTIONS,
    AuthenticatorKind,
    StepKind,
    authenticator_info,
    is_authenticator_key,
)
from auth_explorer.telemetry.system_logger import get_system_logger

# meta.resourceType values with a dedicated step
_STEP_BY_RESOURCE_TYPE: dict[str, StepKind] = {
    "secondFactor": StepKind.SECOND_FACTOR,
    "approve": StepKind.CONSENT,
}


def _as_dict(value: Any) -> dict[str, Any] | None:
    return value if isinstance(value, dict) else None


def _as_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _ref(container: dict[str, Any] | None, key: str) -> str | None:
    """Return container[key]["$ref"] when every level has the expected type."""
    if container is None:
        return None
    return _as_str((_as_dict(container.get(key)) or {}).get("$ref"))


def classify_step(body: dict[str, Any] | None) -> StepKind:
    """Derive the exchange step from the resource shape."""
    if not body:
        return StepKind.INITIAL

    step = StepKind.INITIAL
    if META_KEY in body:
        meta = _as_dict(body[META_KEY]) or {}
        step = _STEP_BY_RESOURCE_TYPE.get(_as_str(meta.get("resourceType")) or "", StepKind.LOGIN)
    if FLOW_URI_KEY in body:
        step = StepKind.FLOW_REDIRECT
    if CONTINUE_REDIRECT_URI_KEY in body:
        step = StepKind.CONTINUE_REDIRECT
    return step


def extract_authenticators(body: dict[str, Any] | None) -> frozenset[str]:
    """Return every top-level key that names an authenticator."""
    if not body:
        return frozenset()
    return frozenset(key for key in body if is_authenticator_key(key))


def _auth_url(url: str | None, name: str) -> AuthUrl | None:
    if not url:
        return None
    return AuthUrl(url=url, name=name, description=AUTH_URL_DESCRIPTIONS[name])


def extract_auth_urls(body: dict[str, Any] | None) -> tuple[AuthUrl, ...]:
    """Collect the auxiliary links offered by a resource.

    Order is fixed: meta.location, Followup, Username Recovery,
    Password Recovery, Flow URI, Continue Redirect URI. Links whose
    source field is absent, empty or of the wrong type are omitted.

    Args:
        body: Parsed resource.

    Returns:
        Tuple of AuthUrl in precedence order.
    """
    if not body:
        return ()

    meta = _as_dict(body.get(META_KEY))
    username_password = _as_dict(body.get(USERNAME_PASSWORD_AUTHENTICATOR_URN))

    candidates = [
        _auth_url(_as_str(meta.get("location")) if meta else None, "meta.location"),
        _auth_url(_as_str((_as_dict(body.get(FOLLOW_UP_KEY)) or {}).get("$ref")), "Followup"),
        _auth_url(_ref(username_password, "usernameRecovery"), "Username Recovery"),
        _auth_url(_ref(username_password, "passwordRecovery"), "Password Recovery"),
        _auth_url(_as_str(body.get(FLOW_URI_KEY)), "Flow URI"),
        _auth_url(_as_str(body.get(CONTINUE_REDIRECT_URI_KEY)), "Continue Redirect URI"),
    ]
    return tuple(url for url in candidates if url is not None)


def _is_consent_request(body: dict[str, Any]) -> bool:
    schemas = body.get(SCHEMAS_KEY)
    return isinstance(schemas, list) and CONSENT_HANDLER_SCHEMA_URN in schemas


def interpret(body: dict[str, Any] | None, previous_url: str) -> ExchangeState:
    """Build the exchange state for a freshly received resource.

    Args:
        body: Parsed resource, or None when nothing has been received yet.
        previous_url: URL the resource was fetched from (or the current
            request target when no request has been made).

    Returns:
        A complete ExchangeState. The resource itself is not modified.
    """
    if not body:
        return ExchangeState(request_url=previous_url)

    meta = _as_dict(body.get(META_KEY))
    request_url = previous_url
    if meta is not None:
        request_url = _as_str(meta.get("location")) or previous_url

    scopes: tuple[Any, ...] = ()
    approved = False
    if _is_consent_request(body):
        raw_scopes = body.get(SCOPES_KEY)
        scopes = tuple(raw_scopes) if isinstance(raw_scopes, list) else ()
        approved = body.get(APPROVED_KEY) is True

    username: str | None = None
    formatted_name: str | None = None
    identity = _as_dict(body.get(SESSION_IDENTITY_RESOURCE_KEY))
    if identity is not None:
        username = _as_str(identity.get("userName"))
        formatted_name = _as_str(identity.get("name.formatted"))

    return ExchangeState(
        request_url=request_url,
        step=classify_step(body),
        authenticators=extract_authenticators(body),
        auth_urls=extract_auth_urls(body),
        scopes=scopes,
        approved=approved,
        username=username,
        formatted_name=formatted_name,
        client=body.get(CLIENT_KEY),
        continue_redirect_uri=_as_str(body.get(CONTINUE_REDIRECT_URI_KEY)),
        meta=meta,
        follow_up=_as_dict(body.get(FOLLOW_UP_KEY)),
    )


def describe_authenticators(body: dict[str, Any] | None) -> list[AuthenticatorView]:
    """Read out every authenticator in the resource, in body order.

    Args:
        body: Parsed resource.

    Returns:
        One AuthenticatorView per authenticator key.
    """
    if not body:
        return []

    views = []
    for urn, value in body.items():
        if not is_authenticator_key(urn):
            continue
        info = authenticator_info(urn)
        fields = _as_dict(value) or {}
        extra: dict[str, Any] = {}

        if info.kind is AuthenticatorKind.USERNAME_PASSWORD:
            extra["username"] = _as_str(fields.get("username"))
        elif info.kind is AuthenticatorKind.ACCOUNT_LOOKUP:
            extra["lookup_parameters"] = _as_dict(fields.get("lookupParameters"))
        elif info.kind is AuthenticatorKind.RECAPTCHA:
            extra["recaptcha_key"] = _as_str(fields.get("recaptchaKey"))
        elif info.kind is AuthenticatorKind.REGISTRATION:
            extra["registrable_attributes"] = fields.get("registrableAttributes")

        views.append(AuthenticatorView(info=info, status=_as_str(fields.get("status")), **extra))
    return views


def parse_resource(text: str | None) -> dict[str, Any] | None:
    """Parse resource text received from the provider or typed by the user.

    Args:
        text: JSON text. Blank text means "no resource".

    Returns:
        The parsed JSON object, or None for blank text.

    Raises:
        MalformedResourceError: If the text is not a JSON object.
    """
    if text is None or not text.strip():
        return None

    try:
        body = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResourceError(f"Resource is not valid JSON: {e}", raw=text) from e

    if not isinstance(body, dict):
        raise MalformedResourceError(
            f"Resource must be a JSON object, got {type(body).__name__}",
            raw=text,
        )
    return body


def refresh(text: str | None, previous: ExchangeState) -> ExchangeState:
    """Re-interpret edited resource text, keeping the previous state on failure.

    The body may fail to parse while the user is still editing it, so a
    parse failure is logged and the previous state is returned untouched.

    Args:
        text: Raw resource text.
        previous: State derived from the last good resource.

    Returns:
        New ExchangeState, or `previous` if the text is malformed.
    """
    try:
        body = parse_resource(text)
    except MalformedResourceError as e:
        get_system_logger().warning(
            {
                "event": "malformed_resource",
                "message": f"Keeping previous exchange state: {e}",
            }
        )
        return previous
    return interpret(body, previous.request_url)
