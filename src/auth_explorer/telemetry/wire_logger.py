"""Wire-level DEBUG logging for one exchange session.

Records every request sent to the identity provider, every resource
received, every transport failure and every body mutation as a JSONL
event in <log_dir>/auth-explorer/debug/exchange_wire.jsonl.

Secrets typed by the user (password, newPassword, verifyCode) are
replaced with "[REDACTED]" before a payload is written.
"""

from __future__ import annotations

__all__ = [
    "ExchangeWireLogger",
    "create_wire_logger",
    "redact_payload",
    "serialize_payload",
]

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from auth_explorer.constants import APP_NAME, REDACTED_PAYLOAD_KEYS
from auth_explorer.utils.logging.logger_setup import setup_jsonl_logger

REDACTED = "[REDACTED]"


def redact_payload(value: Any) -> Any:
    """Return a copy of a JSON value with secret fields redacted at any depth."""
    if isinstance(value, dict):
        return {
            key: REDACTED if key in REDACTED_PAYLOAD_KEYS else redact_payload(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [redact_payload(item) for item in value]
    return value


def serialize_payload(body: dict[str, Any] | None) -> str | None:
    if body is None:
        return None
    return json.dumps(redact_payload(body))


class ExchangeWireLogger:
    """Writes wire events, or nothing when no logger is configured.

    Args:
        logger: JSONL logger to write to. None disables wire logging.
        include_payloads: Whether request/response bodies are written.
    """

    def __init__(self, logger: logging.Logger | None = None, include_payloads: bool = True) -> None:
        self._logger = logger
        self.include_payloads = include_payloads

    @property
    def enabled(self) -> bool:
        return self._logger is not None

    def payload(self, body: dict[str, Any] | None) -> str | None:
        """Serialize a body for an event, honoring include_payloads."""
        if not self.include_payloads:
            return None
        return serialize_payload(body)

    def log(self, event: BaseModel) -> None:
        if self._logger is None:
            return
        self._logger.debug(event.model_dump(exclude_none=True))


def create_wire_logger(
    log_dir: Path | None,
    *,
    debug: bool,
    include_payloads: bool = True,
) -> ExchangeWireLogger:
    """Create the wire logger for a session.

    Args:
        log_dir: Base log directory (already expanded). None disables logging.
        debug: Wire logs are only written at DEBUG level.
        include_payloads: Whether bodies are included in events.

    Returns:
        ExchangeWireLogger, disabled unless debug is set and log_dir is given.
    """
    if not debug or log_dir is None:
        return ExchangeWireLogger(None, include_payloads=include_payloads)

    log_file = log_dir / APP_NAME / "debug" / "exchange_wire.jsonl"
    logger = setup_jsonl_logger(f"{APP_NAME}.debug.exchange", log_file, logging.DEBUG)
    return ExchangeWireLogger(logger, include_payloads=include_payloads)
