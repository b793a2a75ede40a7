"""
Serializers for the Adventures API.

Input serializers validate query parameters; output serializers render
domain objects. Headers (time zone, override secrets) are read by the views.
"""

from datetime import date, datetime, timezone

from django.utils.dateparse import parse_datetime
from rest_framework import serializers


class CalendarDateField(serializers.Field):
    """
    Calendar date given as YYYY-MM-DD or as an ISO-8601 datetime.

    Datetimes with an offset are normalized to UTC, naive ones are taken as
    UTC. Only the UTC date component is kept.
    """

    default_error_messages = {
        'invalid': 'Date has wrong format. Use YYYY-MM-DD or an ISO-8601 datetime.',
    }

    def to_internal_value(self, data):
        try:
            return self._parse(data)
        except OverflowError:
            # offset pushes the instant past date.min or date.max
            self.fail('invalid')

    def _parse(self, data):
        if isinstance(data, datetime):
            return self._utc_date(data)
        if isinstance(data, date):
            return data

        value = str(data).strip()
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass

        try:
            parsed = parse_datetime(value)
        except ValueError:
            parsed = None
        if parsed is None:
            self.fail('invalid')
        return self._utc_date(parsed)

    def to_representation(self, value):
        return value.isoformat()

    @staticmethod
    def _utc_date(value: datetime) -> date:
        if value.tzinfo is None:
            return value.date()
        return value.astimezone(timezone.utc).date()


class AdventureQuerySerializer(serializers.Serializer):
    """Query parameters of GET /api/adventures/."""

    searchDateTime = CalendarDateField(
        help_text="Calendar date of the adventure (YYYY-MM-DD)"
    )


class CalendarQuerySerializer(serializers.Serializer):
    """Query parameters of GET /api/adventures/calendar/."""

    showPast = serializers.BooleanField(
        required=False,
        default=False,
        help_text="Include days that are already over in the caller's time zone"
    )


class AdventureSerializer(serializers.Serializer):
    """Success payload: title and message, verbatim."""

    title = serializers.CharField()
    message = serializers.CharField()


class CampaignDaySerializer(serializers.Serializer):
    date = serializers.DateField()
    isToday = serializers.BooleanField(source='is_today')
    isPast = serializers.BooleanField(source='is_past')
    isFuture = serializers.BooleanField(source='is_future')
