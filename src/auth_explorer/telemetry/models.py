"""Pydantic models for exchange wire log events (debug/exchange_wire.jsonl).

The 'time' field is None when events are created; ISO8601Formatter adds
the timestamp during serialization so there is a single source of truth.
"""

from __future__ import annotations

__all__ = [
    "BodyMutationEvent",
    "ExchangeErrorEvent",
    "ExchangeRequestEvent",
    "ExchangeResponseEvent",
]

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExchangeRequestEvent(BaseModel):
    """Egress event: GET or PUT leaving for the identity provider."""

    time: Optional[str] = Field(
        None,
        description="ISO 8601 timestamp, added by formatter during serialization",
    )
    event: Literal["exchange_request"] = "exchange_request"
    direction: Literal["egress"] = "egress"
    method: Literal["GET", "PUT"]
    url: str

    payload: Optional[str] = None  # Serialized JSON body (PUT only)

    model_config = ConfigDict(extra="allow")


class ExchangeResponseEvent(BaseModel):
    """Ingress event: resource received and interpreted."""

    time: Optional[str] = Field(
        None,
        description="ISO 8601 timestamp, added by formatter during serialization",
    )
    event: Literal["exchange_response"] = "exchange_response"
    direction: Literal["ingress"] = "ingress"
    method: Literal["GET", "PUT"]
    url: str
    status_code: int
    duration_ms: float

    # Interpretation of the received resource
    step: str
    next_url: str
    authenticators: list[str] = Field(default_factory=list)

    payload: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class ExchangeErrorEvent(BaseModel):
    """A GET or PUT failed; the previous state was kept."""

    time: Optional[str] = Field(
        None,
        description="ISO 8601 timestamp, added by formatter during serialization",
    )
    event: Literal["exchange_error"] = "exchange_error"
    method: Literal["GET", "PUT"]
    url: str
    duration_ms: float

    error: str
    error_type: str
    status_code: Optional[int] = None

    model_config = ConfigDict(extra="allow")


class BodyMutationEvent(BaseModel):
    """A mutator was applied to the current body."""

    time: Optional[str] = Field(
        None,
        description="ISO 8601 timestamp, added by formatter during serialization",
    )
    event: Literal["body_mutation"] = "body_mutation"
    mutator: str
    changed: bool
    step: str

    payload: Optional[str] = None

    model_config = ConfigDict(extra="allow")
