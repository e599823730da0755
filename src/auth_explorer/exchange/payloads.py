"""Pydantic models for the values mutators write under authenticator URNs.

Field names follow the provider's wire format (camelCase aliases).
Mutators dump these with by_alias=True so only keys the provider
already understands ever reach the body.
"""

from __future__ import annotations

__all__ = [
    "DeliverCode",
    "EmailCodeRequest",
    "TelephonyCodeRequest",
    "VerifyCode",
    "WirePayload",
]

from pydantic import BaseModel, ConfigDict, Field


class WirePayload(BaseModel):
    """Base for payloads serialized into the resource body."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)


class EmailCodeRequest(WirePayload):
    """Ask the email delivered code authenticator to send a code.

    Attributes:
        message_subject: Subject line of the email.
        message_text: Body text; the provider substitutes the code into it.
    """

    message_subject: str = Field(alias="messageSubject")
    message_text: str = Field(alias="messageText")


class VerifyCode(WirePayload):
    """Submit a delivered code (email or telephony) for verification."""

    verify_code: str = Field(alias="verifyCode")


class DeliverCode(WirePayload):
    """Message template and language for telephony delivery."""

    message: str
    language: str


class TelephonyCodeRequest(WirePayload):
    """Ask the telephony delivered code authenticator to send a code."""

    deliver_code: DeliverCode = Field(alias="deliverCode")
