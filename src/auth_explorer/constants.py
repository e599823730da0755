"""Application-wide constants for auth-explorer.

Constants that define application behavior and the fixed wire vocabulary
used by the identity provider's authentication API.
For user-configurable settings, see config.py.
"""

__all__ = [
    # Application identity
    "APP_NAME",
    "CONFIG_FILENAME",
    # HTTP
    "DEFAULT_HTTP_TIMEOUT_SECONDS",
    "MIN_HTTP_TIMEOUT_SECONDS",
    "MAX_HTTP_TIMEOUT_SECONDS",
    "JSON_MEDIA_TYPE",
    # Authenticator URNs
    "AUTHENTICATOR_KEY_PREFIX",
    "USERNAME_PASSWORD_AUTHENTICATOR_URN",
    "TOTP_AUTHENTICATOR_URN",
    "EMAIL_DELIVERED_CODE_AUTHENTICATOR_URN",
    "TELEPHONY_DELIVERED_CODE_AUTHENTICATOR_URN",
    "ACCOUNT_LOOKUP_AUTHENTICATOR_URN",
    "EXTERNAL_IDENTITY_AUTHENTICATOR_URN",
    "RECAPTCHA_AUTHENTICATOR_URN",
    "REGISTRATION_AUTHENTICATOR_URN",
    "CONSENT_HANDLER_SCHEMA_URN",
    # Top-level resource keys
    "META_KEY",
    "FOLLOW_UP_KEY",
    "SCHEMAS_KEY",
    "SCOPES_KEY",
    "APPROVED_KEY",
    "OPTIONAL_SCOPES_KEY",
    "FLOW_URI_KEY",
    "CONTINUE_REDIRECT_URI_KEY",
    "SESSION_IDENTITY_RESOURCE_KEY",
    "CLIENT_KEY",
    # Logging
    "REDACTED_PAYLOAD_KEYS",
]

# ============================================================================
# Application Identity
# ============================================================================

APP_NAME: str = "auth-explorer"

CONFIG_FILENAME: str = "config.json"

# ============================================================================
# HTTP
# ============================================================================

DEFAULT_HTTP_TIMEOUT_SECONDS: int = 30
MIN_HTTP_TIMEOUT_SECONDS: int = 1
MAX_HTTP_TIMEOUT_SECONDS: int = 300

# Sent as Accept on every request and as Content-Type on PUT
JSON_MEDIA_TYPE: str = "application/json"

# ============================================================================
# Authenticator URNs
# ============================================================================

# Any top-level resource key starting with this prefix is an authenticator.
AUTHENTICATOR_KEY_PREFIX: str = "urn:"

USERNAME_PASSWORD_AUTHENTICATOR_URN: str = "urn:pingidentity:authenticator:username_password"
TOTP_AUTHENTICATOR_URN: str = "urn:pingidentity:authenticator:totp"
EMAIL_DELIVERED_CODE_AUTHENTICATOR_URN: str = "urn:pingidentity:authenticator:email_delivered_code"
TELEPHONY_DELIVERED_CODE_AUTHENTICATOR_URN: str = (
    "urn:pingidentity:authenticator:telephony_delivered_code"
)
ACCOUNT_LOOKUP_AUTHENTICATOR_URN: str = "urn:pingidentity:authenticator:account_lookup"
EXTERNAL_IDENTITY_AUTHENTICATOR_URN: str = "urn:pingidentity:authenticator:external_identity"
RECAPTCHA_AUTHENTICATOR_URN: str = "urn:pingidentity:authenticator:recaptcha"
REGISTRATION_AUTHENTICATOR_URN: str = "urn:pingidentity:authenticator:registration"

# Listed in "schemas" when the resource is a consent request
CONSENT_HANDLER_SCHEMA_URN: str = "urn:pingidentity:scim:api:messages:2.0:consent"

# ============================================================================
# Top-level resource keys
# ============================================================================

META_KEY: str = "meta"
FOLLOW_UP_KEY: str = "followUp"
SCHEMAS_KEY: str = "schemas"
SCOPES_KEY: str = "scopes"
APPROVED_KEY: str = "approved"
OPTIONAL_SCOPES_KEY: str = "optionalScopes"
FLOW_URI_KEY: str = "flow_uri"
CONTINUE_REDIRECT_URI_KEY: str = "continue_redirect_uri"
SESSION_IDENTITY_RESOURCE_KEY: str = "sessionIdentityResource"
CLIENT_KEY: str = "client"

# ============================================================================
# Logging
# ============================================================================

# Sub-field names whose values never reach the wire log
REDACTED_PAYLOAD_KEYS: frozenset[str] = frozenset({"password", "newPassword", "verifyCode"})
