"""
Domain entities for the Adventure Gate.

NO Django dependencies. Pure Python domain objects.
"""

from __future__ import annotations

import hmac
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional


class ErrorType(Enum):
    """Who can fix the problem: the caller or the operator."""
    INVALID_REQUEST_PARAMETERS = "InvalidRequestParameters"
    INTERNAL_SERVER_ERROR = "InternalServerError"


class ErrorCode(Enum):
    INVALID_SEARCH_DATE = "InvalidSearchDate"
    INVALID_USER_TIME_ZONE = "InvalidUserTimeZone"
    SEARCH_DATE_PASSED = "SearchDatePassed"
    SEARCH_DATE_HAS_NOT_APPEARED = "SearchDateHasNotAppeared"
    INVALID_QUERY_PARAMETER = "InvalidQueryParameter"
    RESOURCE_IS_NOT_CONFIGURED = "ResourceIsNotConfigured"

    @property
    def error_type(self) -> ErrorType:
        return ERROR_TYPES[self]


ERROR_TYPES: Mapping[ErrorCode, ErrorType] = MappingProxyType({
    ErrorCode.INVALID_SEARCH_DATE: ErrorType.INVALID_REQUEST_PARAMETERS,
    ErrorCode.INVALID_USER_TIME_ZONE: ErrorType.INVALID_REQUEST_PARAMETERS,
    ErrorCode.SEARCH_DATE_PASSED: ErrorType.INVALID_REQUEST_PARAMETERS,
    ErrorCode.SEARCH_DATE_HAS_NOT_APPEARED: ErrorType.INVALID_REQUEST_PARAMETERS,
    ErrorCode.INVALID_QUERY_PARAMETER: ErrorType.INVALID_REQUEST_PARAMETERS,
    ErrorCode.RESOURCE_IS_NOT_CONFIGURED: ErrorType.INTERNAL_SERVER_ERROR,
})

_unmapped = set(ErrorCode) - set(ERROR_TYPES)
if _unmapped:
    raise RuntimeError(f"ErrorCode values without ErrorType: {sorted(c.value for c in _unmapped)}")


class AdventureError(Exception):
    """
    Terminal failure of an adventure request.

    Carries the error code and the human-readable message that is
    returned to the caller verbatim.
    """

    def __init__(self, error_code: ErrorCode, message: str):
        super().__init__(message)
        self.error_code = error_code
        self.message = message

    @property
    def error_type(self) -> ErrorType:
        return self.error_code.error_type

    def to_dict(self) -> dict:
        return {
            "errorType": self.error_type.value,
            "errorCode": self.error_code.value,
            "message": self.message,
        }


class AdventureConfigurationError(Exception):
    """Content calendar or campaign window could not be loaded."""


class OverrideRule(Enum):
    """Bypassable gate rules. Values are the public token names."""
    SKIP_IN_RANGE = "skip-in-range"
    SKIP_NOT_APPEARED = "skip-not-appeared"
    SKIP_PASSED = "skip-passed"


@dataclass(frozen=True)
class OverrideSecrets:
    """
    Configured bypass secrets (value object).

    An empty secret disables the corresponding bypass entirely.
    """
    skip_in_range: str = ""
    skip_not_appeared: str = ""
    skip_passed: str = ""

    def secret_for(self, rule: OverrideRule) -> str:
        if rule is OverrideRule.SKIP_IN_RANGE:
            return self.skip_in_range
        if rule is OverrideRule.SKIP_NOT_APPEARED:
            return self.skip_not_appeared
        return self.skip_passed

    def matches(self, rule: OverrideRule, presented: Optional[str]) -> bool:
        """Constant-time comparison; absent and wrong tokens both fail."""
        secret = self.secret_for(rule)
        if not secret or presented is None:
            return False
        return hmac.compare_digest(secret.encode("utf-8"), presented.encode("utf-8"))


@dataclass(frozen=True)
class CampaignWindow:
    """
    Half-open UTC interval [start, end) during which adventures are released.

    Attributes:
        start: Inclusive lower bound (timezone-aware, normalized to UTC)
        end: Exclusive upper bound (timezone-aware, normalized to UTC)
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        for name in ("start", "end"):
            value = getattr(self, name)
            if value.tzinfo is None:
                raise ValueError(f"CampaignWindow.{name} must be timezone-aware")
            object.__setattr__(self, name, value.astimezone(timezone.utc))
        if not self.start < self.end:
            raise ValueError(
                f"CampaignWindow start ({self.start.isoformat()}) must be before end ({self.end.isoformat()})"
            )

    @classmethod
    def from_dates(cls, start: date, end: date) -> "CampaignWindow":
        """Build a window from UTC calendar dates (midnight instants)."""
        return cls(start=utc_midnight(start), end=utc_midnight(end))

    def contains(self, requested_date: date) -> bool:
        return self.start <= utc_midnight(requested_date) < self.end

    def days(self) -> Iterator[date]:
        """Every UTC calendar date whose midnight falls inside the window."""
        current = self.start.date()
        if utc_midnight(current) < self.start:
            current += timedelta(days=1)
        while utc_midnight(current) < self.end:
            yield current
            current += timedelta(days=1)

    def to_dict(self) -> dict:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


def utc_midnight(value: date) -> datetime:
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


@dataclass(frozen=True)
class GateRequest:
    """
    A single adventure request, constructed per call.

    Attributes:
        requested_date: Calendar date the caller wants to open
        time_zone_id: IANA timezone claimed by the caller
        override_tokens: Bypass tokens presented by the caller, per rule
    """
    requested_date: date
    time_zone_id: Optional[str]
    override_tokens: Mapping[OverrideRule, str] = field(default_factory=dict)

    def __post_init__(self):
        tokens = {rule: token for rule, token in self.override_tokens.items() if token}
        object.__setattr__(self, "override_tokens", MappingProxyType(tokens))

    def token_for(self, rule: OverrideRule) -> Optional[str]:
        return self.override_tokens.get(rule)


@dataclass(frozen=True)
class GateCheckResult:
    """
    Result of a single gate stage.

    Attributes:
        gate_name: Name of the stage (e.g., "CampaignWindow")
        passed: True if the stage lets the request through
        message: Human-readable explanation
        skipped: True if the stage was bypassed by an override token
        error_code: Code reported to the caller when the stage fails
    """
    gate_name: str
    passed: bool
    message: str
    skipped: bool = False
    error_code: Optional[ErrorCode] = None

    def to_dict(self) -> dict:
        return {
            "gate_name": self.gate_name,
            "passed": self.passed,
            "message": self.message,
            "skipped": self.skipped,
            "error_code": self.error_code.value if self.error_code else None,
        }


@dataclass(frozen=True)
class GateDecision:
    """
    Outcome of the gate: Allowed, or Rejected with a reason.

    Use `GateDecision.allow()` / `GateDecision.reject()` to build one.
    """
    allowed: bool
    error_code: Optional[ErrorCode] = None
    message: str = ""
    checks: tuple = ()

    @classmethod
    def allow(cls, checks: List[GateCheckResult]) -> "GateDecision":
        return cls(allowed=True, message="Adventure may be opened", checks=tuple(checks))

    @classmethod
    def reject(cls, failed: GateCheckResult, checks: List[GateCheckResult]) -> "GateDecision":
        return cls(
            allowed=False,
            error_code=failed.error_code,
            message=failed.message,
            checks=tuple(checks),
        )

    @property
    def skipped_rules(self) -> List[str]:
        return [check.gate_name for check in self.checks if check.skipped]

    def to_error(self) -> AdventureError:
        if self.allowed:
            raise ValueError("An allowed decision has no error")
        return AdventureError(self.error_code, self.message)

    def to_dict(self) -> dict:
        return {
            "allowed": self.allowed,
            "error_code": self.error_code.value if self.error_code else None,
            "message": self.message,
            "checks": [check.to_dict() for check in self.checks],
        }


@dataclass(frozen=True)
class Adventure:
    """
    Content released for one calendar date.

    Title and message are returned to the caller verbatim.
    """
    date: date
    title: str
    message: str

    def __post_init__(self):
        if not self.title or not self.title.strip():
            raise ValueError(f"Adventure for {self.date.isoformat()} has an empty title")
        if not self.message or not self.message.strip():
            raise ValueError(f"Adventure for {self.date.isoformat()} has an empty message")

    def to_dict(self) -> dict:
        return {"title": self.title, "message": self.message}


@dataclass(frozen=True)
class CampaignDay:
    """One calendar cell, relative to the caller's local date."""
    date: date
    is_today: bool
    is_past: bool
    is_future: bool

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "isToday": self.is_today,
            "isPast": self.is_past,
            "isFuture": self.is_future,
        }
