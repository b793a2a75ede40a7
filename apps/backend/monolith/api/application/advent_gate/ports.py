"""
Port definitions for the Adventure Gate.

NO Django dependencies. Pure Protocol definitions.
"""

from datetime import date, datetime
from typing import Iterable, Optional, Protocol

from .domain import Adventure


class ClockPort(Protocol):
    """Source of the current instant."""

    def now(self) -> datetime:
        """
        Current instant.

        Returns:
            Timezone-aware datetime
        """
        ...


class AdventureRepository(Protocol):
    """Read-only lookup of adventures by calendar date."""

    def lookup(self, adventure_date: date) -> Optional[Adventure]:
        """
        Find the adventure mapped to a calendar date.

        Args:
            adventure_date: UTC calendar date

        Returns:
            Adventure, or None if nothing is mapped to that date
        """
        ...

    def dates(self) -> Iterable[date]:
        """All dates that have an adventure mapped, in ascending order."""
        ...
