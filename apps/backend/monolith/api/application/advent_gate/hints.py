"""
End-user hints per error code.

Every ErrorCode must have a hint; a missing entry fails at import time
instead of falling back to a generic message at runtime.
"""

from types import MappingProxyType
from typing import Mapping

from .domain import ErrorCode

USER_HINTS: Mapping[ErrorCode, str] = MappingProxyType({
    ErrorCode.INVALID_SEARCH_DATE: (
        "Invalid date requested. If you are sure everything is right, please contact the organizers."
    ),
    ErrorCode.INVALID_USER_TIME_ZONE: "Invalid time zone. Please contact the organizers.",
    ErrorCode.SEARCH_DATE_PASSED: "This day is over, time to move on to the next adventures!",
    ErrorCode.SEARCH_DATE_HAS_NOT_APPEARED: "Hold on, a new adventure will be available soon!",
    ErrorCode.INVALID_QUERY_PARAMETER: "The request is malformed. Please reload the calendar.",
    ErrorCode.RESOURCE_IS_NOT_CONFIGURED: "This adventure is not configured yet. Please contact the organizers.",
})

_missing = set(ErrorCode) - set(USER_HINTS)
if _missing:
    raise RuntimeError(f"ErrorCode values without a user hint: {sorted(c.value for c in _missing)}")


def hint_for(code: ErrorCode) -> str:
    return USER_HINTS[code]
