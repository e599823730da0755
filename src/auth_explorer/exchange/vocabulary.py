"""Fixed vocabulary of the authentication API.

Maps authenticator URNs to a closed enumeration and provides the
human-readable copy shown next to steps, authenticators and links.

Authenticator detection is a single prefix test on the top-level key
(is_authenticator_key). Everything after that dispatches on the URN
through classify_authenticator; unknown URNs fall back to THIRD_PARTY.
"""

from __future__ import annotations

__all__ = [
    "AUTH_URL_DESCRIPTIONS",
    "AuthenticatorInfo",
    "AuthenticatorKind",
    "STEP_DESCRIPTIONS",
    "StepKind",
    "authenticator_info",
    "classify_authenticator",
    "is_authenticator_key",
]

from dataclasses import dataclass
from enum import Enum

from auth_explorer.constants import (
    ACCOUNT_LOOKUP_AUTHENTICATOR_URN,
    AUTHENTICATOR_KEY_PREFIX,
    EMAIL_DELIVERED_CODE_AUTHENTICATOR_URN,
    EXTERNAL_IDENTITY_AUTHENTICATOR_URN,
    RECAPTCHA_AUTHENTICATOR_URN,
    REGISTRATION_AUTHENTICATOR_URN,
    TELEPHONY_DELIVERED_CODE_AUTHENTICATOR_URN,
    TOTP_AUTHENTICATOR_URN,
    USERNAME_PASSWORD_AUTHENTICATOR_URN,
)


class StepKind(str, Enum):
    """Stage of the exchange, derived from the shape of the latest resource."""

    INITIAL = "initial"
    LOGIN = "login"
    SECOND_FACTOR = "second_factor"
    CONSENT = "consent"
    FLOW_REDIRECT = "flow_redirect"
    CONTINUE_REDIRECT = "continue_redirect"


STEP_DESCRIPTIONS: dict[StepKind, str] = {
    StepKind.INITIAL: "Make an OAuth 2 request or GET a resource to begin the exchange.",
    StepKind.LOGIN: (
        "Authenticate the user. Supply credentials to one or more authenticators, "
        "then PUT the resource back."
    ),
    StepKind.SECOND_FACTOR: (
        "A second factor is required. Request and verify a code, or supply a one-time password."
    ),
    StepKind.CONSENT: "Authorize the access request by approving or denying the requested scopes.",
    StepKind.FLOW_REDIRECT: "The flow continues elsewhere. Follow the flow URI to proceed.",
    StepKind.CONTINUE_REDIRECT: (
        "The exchange is complete. Follow the continue redirect URI to return to the client."
    ),
}

# Keyed by the label each auxiliary URL is emitted with
AUTH_URL_DESCRIPTIONS: dict[str, str] = {
    "meta.location": "The location of the current resource. GET or PUT requests go here.",
    "Followup": "The resource to request after the current step completes.",
    "Username Recovery": "Starts a flow for recovering a forgotten username.",
    "Password Recovery": "Starts a flow for resetting a forgotten password.",
    "Flow URI": "The next flow resource in the exchange.",
    "Continue Redirect URI": "Where the user agent should be sent once the exchange is finished.",
}


class AuthenticatorKind(str, Enum):
    """Known authenticators plus a fallback for provider extensions."""

    USERNAME_PASSWORD = USERNAME_PASSWORD_AUTHENTICATOR_URN
    TOTP = TOTP_AUTHENTICATOR_URN
    EMAIL_DELIVERED_CODE = EMAIL_DELIVERED_CODE_AUTHENTICATOR_URN
    TELEPHONY_DELIVERED_CODE = TELEPHONY_DELIVERED_CODE_AUTHENTICATOR_URN
    ACCOUNT_LOOKUP = ACCOUNT_LOOKUP_AUTHENTICATOR_URN
    EXTERNAL_IDENTITY = EXTERNAL_IDENTITY_AUTHENTICATOR_URN
    RECAPTCHA = RECAPTCHA_AUTHENTICATOR_URN
    REGISTRATION = REGISTRATION_AUTHENTICATOR_URN
    THIRD_PARTY = "third_party"


@dataclass(frozen=True)
class AuthenticatorInfo:
    """Display metadata for one authenticator key.

    Attributes:
        kind: Enumerated authenticator type.
        urn: The key exactly as it appears in the resource.
        name: Short display name.
        description: One-sentence explanation of the authenticator.
    """

    kind: AuthenticatorKind
    urn: str
    name: str
    description: str


_NAMES_AND_DESCRIPTIONS: dict[AuthenticatorKind, tuple[str, str]] = {
    AuthenticatorKind.USERNAME_PASSWORD: (
        "Username Password",
        "Authenticates a user with a username and password.",
    ),
    AuthenticatorKind.TOTP: (
        "TOTP",
        "Authenticates a user with a time-based one-time password from an authenticator app.",
    ),
    AuthenticatorKind.EMAIL_DELIVERED_CODE: (
        "Email Delivered Code",
        "Sends a verification code to the user's email address and verifies it.",
    ),
    AuthenticatorKind.TELEPHONY_DELIVERED_CODE: (
        "Telephony Delivered Code",
        "Sends a verification code to the user's phone by SMS or voice call and verifies it.",
    ),
    AuthenticatorKind.ACCOUNT_LOOKUP: (
        "Account Lookup",
        "Identifies a user by looking up an account with a set of attribute values.",
    ),
    AuthenticatorKind.EXTERNAL_IDENTITY: (
        "External Identity",
        "Authenticates a user through an external identity provider such as a social login.",
    ),
    AuthenticatorKind.RECAPTCHA: (
        "reCAPTCHA",
        "Verifies that the user is a human by checking a reCAPTCHA response.",
    ),
    AuthenticatorKind.REGISTRATION: (
        "Registration",
        "Creates a new user account from a set of registrable attributes.",
    ),
    AuthenticatorKind.THIRD_PARTY: (
        "Third-party authenticator",
        "An authenticator not known to this explorer. Its fields can be edited in the raw body.",
    ),
}

_KIND_BY_URN: dict[str, AuthenticatorKind] = {
    kind.value: kind for kind in AuthenticatorKind if kind is not AuthenticatorKind.THIRD_PARTY
}


def is_authenticator_key(key: object) -> bool:
    """Return True if a top-level resource key names an authenticator."""
    return isinstance(key, str) and key.startswith(AUTHENTICATOR_KEY_PREFIX)


def classify_authenticator(urn: str) -> AuthenticatorKind:
    """Map an authenticator URN to its kind.

    Args:
        urn: A key for which is_authenticator_key() is True.

    Returns:
        The matching AuthenticatorKind, or THIRD_PARTY for unknown URNs.
    """
    return _KIND_BY_URN.get(urn, AuthenticatorKind.THIRD_PARTY)


def authenticator_info(urn: str) -> AuthenticatorInfo:
    """Build display metadata for an authenticator URN."""
    kind = classify_authenticator(urn)
    name, description = _NAMES_AND_DESCRIPTIONS[kind]
    return AuthenticatorInfo(kind=kind, urn=urn, name=name, description=description)
