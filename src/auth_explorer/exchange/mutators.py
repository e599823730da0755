"""Body mutators: turn the current resource into the next request body.

Every mutator is a pure function ``(body, *values) -> new_body``:
- The input body is never modified; a deep copy is returned.
- Authenticator mutators only act when their URN is already a top-level
  key. Otherwise the body is returned unchanged (no error), so callers may
  invoke them speculatively.
- Only keys the provider already uses are written.

Mutators never interpret the result. The caller re-runs the interpreter
on the returned body before sending it (see client.session.ExchangeSession.apply).

Example:
    body = set_username_password(body, "alice", "secret")
    state = interpret(body, state.request_url)
"""

from __future__ import annotations

__all__ = [
    "register",
    "remove_authenticator",
    "request_email_code",
    "request_telephony_code",
    "set_consent_approval",
    "set_lookup_parameters",
    "set_new_password",
    "set_recaptcha_response",
    "set_totp",
    "set_username_password",
    "submit_email_code",
    "submit_telephony_code",
    "toggle_optional_scope",
]

import copy
from typing import Any

from auth_explorer.constants import (
    ACCOUNT_LOOKUP_AUTHENTICATOR_URN,
    APPROVED_KEY,
    EMAIL_DELIVERED_CODE_AUTHENTICATOR_URN,
    OPTIONAL_SCOPES_KEY,
    RECAPTCHA_AUTHENTICATOR_URN,
    REGISTRATION_AUTHENTICATOR_URN,
    TELEPHONY_DELIVERED_CODE_AUTHENTICATOR_URN,
    TOTP_AUTHENTICATOR_URN,
    USERNAME_PASSWORD_AUTHENTICATOR_URN,
)
from auth_explorer.exchange.payloads import (
    DeliverCode,
    EmailCodeRequest,
    TelephonyCodeRequest,
    VerifyCode,
)
from auth_explorer.exchange.vocabulary import is_authenticator_key

Body = dict[str, Any]


def _set_fields(body: Body, urn: str, **fields: Any) -> Body:
    """Set sub-fields under an authenticator, keeping its other fields."""
    if urn not in body:
        return body
    new_body = copy.deepcopy(body)
    current = new_body[urn]
    authenticator = current if isinstance(current, dict) else {}
    authenticator.update(fields)
    new_body[urn] = authenticator
    return new_body


def _replace(body: Body, urn: str, value: dict[str, Any]) -> Body:
    """Replace an authenticator's whole value."""
    if urn not in body:
        return body
    new_body = copy.deepcopy(body)
    new_body[urn] = value
    return new_body


# -----------------------------------------------------------------------------
# Username / password
# -----------------------------------------------------------------------------


def set_username_password(body: Body, username: str, password: str) -> Body:
    return _set_fields(
        body,
        USERNAME_PASSWORD_AUTHENTICATOR_URN,
        username=username,
        password=password,
    )


def set_new_password(body: Body, new_password: str) -> Body:
    """Supply a replacement password when the provider demands a change."""
    return _set_fields(body, USERNAME_PASSWORD_AUTHENTICATOR_URN, newPassword=new_password)


# -----------------------------------------------------------------------------
# Second factors
# -----------------------------------------------------------------------------


def set_totp(body: Body, code: str) -> Body:
    """Supply a one-time password to the TOTP authenticator."""
    return _set_fields(body, TOTP_AUTHENTICATOR_URN, password=code)


def request_email_code(body: Body, message_subject: str, message_text: str) -> Body:
    """Ask the provider to email a verification code.

    Replaces the authenticator's value with {messageSubject, messageText}.
    """
    payload = EmailCodeRequest(message_subject=message_subject, message_text=message_text)
    return _replace(body, EMAIL_DELIVERED_CODE_AUTHENTICATOR_URN, payload.to_wire())


def submit_email_code(body: Body, verify_code: str) -> Body:
    payload = VerifyCode(verify_code=verify_code)
    return _replace(body, EMAIL_DELIVERED_CODE_AUTHENTICATOR_URN, payload.to_wire())


def request_telephony_code(body: Body, message: str, language: str) -> Body:
    """Ask the provider to deliver a verification code by SMS or voice.

    Replaces the authenticator's value with {deliverCode: {message, language}}.
    """
    payload = TelephonyCodeRequest(deliver_code=DeliverCode(message=message, language=language))
    return _replace(body, TELEPHONY_DELIVERED_CODE_AUTHENTICATOR_URN, payload.to_wire())


def submit_telephony_code(body: Body, verify_code: str) -> Body:
    payload = VerifyCode(verify_code=verify_code)
    return _replace(body, TELEPHONY_DELIVERED_CODE_AUTHENTICATOR_URN, payload.to_wire())


# -----------------------------------------------------------------------------
# Other authenticators
# -----------------------------------------------------------------------------


def set_lookup_parameters(body: Body, lookup_parameters: dict[str, Any]) -> Body:
    return _set_fields(
        body,
        ACCOUNT_LOOKUP_AUTHENTICATOR_URN,
        lookupParameters=dict(lookup_parameters),
    )


def set_recaptcha_response(body: Body, recaptcha_response: str) -> Body:
    return _set_fields(body, RECAPTCHA_AUTHENTICATOR_URN, recaptchaResponse=recaptcha_response)


def register(body: Body, attributes: dict[str, Any]) -> Body:
    """Submit values for the registration authenticator's registrable attributes."""
    return _set_fields(
        body,
        REGISTRATION_AUTHENTICATOR_URN,
        registrationAttributes=dict(attributes),
    )


def remove_authenticator(body: Body, urn: str) -> Body:
    """Drop an authenticator the user does not want to use.

    Keys that are not authenticator URNs (meta, flow_uri, ...) are never removed.
    """
    if not is_authenticator_key(urn) or urn not in body:
        return body
    new_body = copy.deepcopy(body)
    del new_body[urn]
    return new_body


# -----------------------------------------------------------------------------
# Consent
# -----------------------------------------------------------------------------


def set_consent_approval(body: Body, approved: bool) -> Body:
    new_body = copy.deepcopy(body)
    new_body[APPROVED_KEY] = approved
    return new_body


def toggle_optional_scope(body: Body, scope: str, approve: bool) -> Body:
    """Add a scope to, or remove it from, the optionalScopes list.

    When the last scope is removed the optionalScopes key is deleted
    instead of being left as an empty list. A body whose optionalScopes
    is not a list is returned unchanged.

    Args:
        body: Current resource.
        scope: Scope name.
        approve: True to grant the optional scope, False to withdraw it.

    Returns:
        New body.
    """
    current = body.get(OPTIONAL_SCOPES_KEY)
    if OPTIONAL_SCOPES_KEY in body and not isinstance(current, list):
        return body
    new_body = copy.deepcopy(body)
    scopes = list(current or [])

    if approve:
        if scope not in scopes:
            scopes.append(scope)
    else:
        scopes = [name for name in scopes if name != scope]

    if scopes:
        new_body[OPTIONAL_SCOPES_KEY] = scopes
    else:
        new_body.pop(OPTIONAL_SCOPES_KEY, None)
    return new_body
