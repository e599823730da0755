"""Exchange core: resource interpretation and request body construction.

This package holds all of the exchange logic and performs no I/O:
- vocabulary: authenticator URNs, step kinds, display copy
- state: ExchangeState and related projections
- interpreter: resource -> ExchangeState
- mutators: resource -> next request body
- payloads: typed values written under authenticator URNs
- oauth: authorization request construction and redirect parsing

The HTTP round-trips live in client/session.py.
"""

from auth_explorer.exchange.interpreter import (
    describe_authenticators,
    interpret,
    parse_resource,
    refresh,
)
from auth_explorer.exchange.state import (
    AuthenticatorView,
    AuthUrl,
    ExchangeState,
)
from auth_explorer.exchange.vocabulary import (
    AuthenticatorInfo,
    AuthenticatorKind,
    StepKind,
    authenticator_info,
    classify_authenticator,
    is_authenticator_key,
)

__all__ = [
    # State
    "AuthUrl",
    "AuthenticatorView",
    "ExchangeState",
    "StepKind",
    # Interpretation
    "describe_authenticators",
    "interpret",
    "parse_resource",
    "refresh",
    # Vocabulary
    "AuthenticatorInfo",
    "AuthenticatorKind",
    "authenticator_info",
    "classify_authenticator",
    "is_authenticator_key",
]
