"""
Adventure Gate Module - Date-Gated Content Release

This module decides WHEN the adventure of a calendar day may be opened.
An adventure is released only if:
- the caller's time zone is a known IANA zone
- the date is inside the campaign window
- the day has already arrived in the caller's local time
- the day is not over yet in the caller's local time (optional rule)

Support staff can bypass the window, not-appeared and passed rules one by
one with configured override secrets.

Architecture: Hexagonal (Ports & Adapters) inside Django monolith
- domain.py: Pure entities (NO Django dependencies)
- ports.py: Port definitions (Protocol interfaces)
- use_cases.py: Business logic (gate stages, content lookup)
- adapters.py: Concrete implementations (clock, static content calendar)
- hints.py: Friendly per-error-code hints for end users
- wiring.py: Dependency injection
"""

from .domain import (
    Adventure,
    AdventureError,
    CampaignWindow,
    ErrorCode,
    ErrorType,
    GateDecision,
    GateRequest,
    OverrideRule,
    OverrideSecrets,
)

__all__ = [
    "Adventure",
    "AdventureError",
    "CampaignWindow",
    "ErrorCode",
    "ErrorType",
    "GateDecision",
    "GateRequest",
    "OverrideRule",
    "OverrideSecrets",
]
