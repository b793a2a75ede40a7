"""
API Serializers Package.

Exports all serializers for the API.
"""

from .adventure_serializers import (
    AdventureQuerySerializer,
    AdventureSerializer,
    CalendarDateField,
    CalendarQuerySerializer,
    CampaignDaySerializer,
)

__all__ = [
    "AdventureQuerySerializer",
    "AdventureSerializer",
    "CalendarDateField",
    "CalendarQuerySerializer",
    "CampaignDaySerializer",
]
