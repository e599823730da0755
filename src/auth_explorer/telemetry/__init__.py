"""Telemetry: system events and exchange wire logs.

Structure:
    system_logger   Operational messages (stderr, optional system.jsonl)
    models          Pydantic models for wire log events
    wire_logger     Request/response/mutation log for one exchange session
                    (debug/exchange_wire.jsonl, DEBUG level only)
"""

__all__: list[str] = []
