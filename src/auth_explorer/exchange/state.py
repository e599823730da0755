"""Exchange state models - WHERE the user is in the exchange.

ExchangeState is a projection of the latest resource. It is rebuilt in
full from every resource the identity provider returns (see interpreter.py)
and is never merged or updated in place.

Structure:
- ExchangeState: Top-level projection
  - step / description: derived classification
  - authenticators: URN keys present in the resource
  - auth_urls: AuthUrl links offered by the resource, in fixed precedence order
  - scopes / approved: consent request, when the resource is one
  - username, formatted_name, client, continue_redirect_uri, meta, follow_up:
    passthrough of specific resource paths
- AuthenticatorView: per-authenticator read-out for display
"""

from __future__ import annotations

__all__ = [
    "AuthUrl",
    "AuthenticatorView",
    "ExchangeState",
]

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from auth_explorer.exchange.vocabulary import (
    STEP_DESCRIPTIONS,
    AuthenticatorInfo,
    StepKind,
)


class AuthUrl(BaseModel):
    """A navigable link discovered in the resource.

    Attributes:
        url: Target URL.
        name: Fixed label (e.g., "Followup", "Password Recovery").
        description: Human-readable explanation for the label.
    """

    url: str
    name: str
    description: str

    model_config = ConfigDict(frozen=True)


class AuthenticatorView(BaseModel):
    """What the explorer can tell about one authenticator in the resource.

    Kind-specific fields are None unless the resource provides them.

    Attributes:
        info: Display metadata derived from the URN.
        status: Authenticator status string reported by the provider.
        username: Pre-filled username (username/password authenticator).
        lookup_parameters: Current lookup attributes (account lookup authenticator).
        recaptcha_key: Site key to render the challenge with (reCAPTCHA authenticator).
        registrable_attributes: Attributes the user may register (registration authenticator).
    """

    info: AuthenticatorInfo
    status: str | None = None
    username: str | None = None
    lookup_parameters: dict[str, Any] | None = None
    recaptcha_key: str | None = None
    registrable_attributes: Any = None

    model_config = ConfigDict(frozen=True)


class ExchangeState(BaseModel):
    """Normalized view of one identity provider resource.

    Attributes:
        request_url: Target for the next GET/PUT.
        step: Derived exchange step. Never set by the user.
        authenticators: Authenticator URNs present as top-level keys.
        auth_urls: Auxiliary links, in fixed precedence order.
        scopes: Scope records of a consent request.
        approved: Current approval flag of a consent request.
        username: sessionIdentityResource.userName.
        formatted_name: sessionIdentityResource["name.formatted"].
        client: Passthrough of the resource's client description.
        continue_redirect_uri: Where the exchange ends.
        meta: Passthrough of the resource's meta object.
        follow_up: Passthrough of the resource's followUp object.
    """

    request_url: str = ""
    step: StepKind = StepKind.INITIAL
    authenticators: frozenset[str] = Field(default_factory=frozenset)
    auth_urls: tuple[AuthUrl, ...] = ()
    scopes: tuple[Any, ...] = ()
    approved: bool = False
    username: str | None = None
    formatted_name: str | None = None
    client: Any = None
    continue_redirect_uri: str | None = None
    meta: dict[str, Any] | None = None
    follow_up: dict[str, Any] | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def description(self) -> str:
        """Human-readable copy for the current step."""
        return STEP_DESCRIPTIONS[self.step]

    @property
    def is_consent_request(self) -> bool:
        return self.step is StepKind.CONSENT

    @property
    def is_terminal(self) -> bool:
        """True once the provider hands the user agent back to the client."""
        return self.step is StepKind.CONTINUE_REDIRECT

    def has_authenticator(self, urn: str) -> bool:
        return urn in self.authenticators
