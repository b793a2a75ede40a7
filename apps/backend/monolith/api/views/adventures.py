"""
REST API views for the adventure calendar.

Endpoints:
- GET /api/adventures/           - Open the adventure of a calendar day
- GET /api/adventures/calendar/  - Campaign days relative to the caller's local date

Headers:
- X-Timezone: IANA time zone of the caller (required)
- Adventy-SkipSearchDateInRangeValidationSecret: bypass the campaign window check
- Adventy-SkipSearchDateHasNotAppearedValidationSecret: bypass the not-yet-appeared check
- Adventy-SkipSearchDatePassedValidationSecret: bypass the already-passed check
"""

import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from api.application.advent_gate import wiring
from api.application.advent_gate.domain import (
    AdventureError,
    ErrorCode,
    ErrorType,
    GateRequest,
    OverrideRule,
)
from api.serializers.adventure_serializers import (
    AdventureQuerySerializer,
    AdventureSerializer,
    CalendarQuerySerializer,
    CampaignDaySerializer,
)

logger = logging.getLogger(__name__)

TIME_ZONE_HEADER = "X-Timezone"

OVERRIDE_HEADERS = {
    OverrideRule.SKIP_IN_RANGE: "Adventy-SkipSearchDateInRangeValidationSecret",
    OverrideRule.SKIP_NOT_APPEARED: "Adventy-SkipSearchDateHasNotAppearedValidationSecret",
    OverrideRule.SKIP_PASSED: "Adventy-SkipSearchDatePassedValidationSecret",
}

HTTP_STATUS_BY_ERROR_TYPE = {
    ErrorType.INVALID_REQUEST_PARAMETERS: status.HTTP_400_BAD_REQUEST,
    ErrorType.INTERNAL_SERVER_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(error: AdventureError) -> Response:
    """Render an AdventureError as {errorType, errorCode, message}."""
    return Response(error.to_dict(), status=HTTP_STATUS_BY_ERROR_TYPE[error.error_type])


@api_view(["GET"])
@permission_classes([AllowAny])
def get_adventure(request):
    """
    Open the adventure of a calendar day.

    GET /api/adventures/?searchDateTime=2025-12-15

    Returns:
        200 OK: {"title": ..., "message": ...}
        400 Bad Request: invalid date/time zone, out of window, not appeared, passed
        500 Internal Server Error: no adventure configured for an allowed date
    """
    serializer = AdventureQuerySerializer(data=request.query_params)
    if not serializer.is_valid():
        logger.info(f"Invalid adventure query: {serializer.errors}")
        return error_response(AdventureError(
            ErrorCode.INVALID_SEARCH_DATE,
            "Search date must be provided as searchDateTime in format YYYY-MM-DD.",
        ))

    gate_request = GateRequest(
        requested_date=serializer.validated_data["searchDateTime"],
        time_zone_id=request.headers.get(TIME_ZONE_HEADER),
        override_tokens={
            rule: request.headers.get(header)
            for rule, header in OVERRIDE_HEADERS.items()
        },
    )

    try:
        adventure = wiring.get_daily_adventure_uc().execute(gate_request)
    except AdventureError as e:
        return error_response(e)

    return Response(AdventureSerializer(adventure).data, status=status.HTTP_200_OK)


@api_view(["GET"])
@permission_classes([AllowAny])
def get_campaign_calendar(request):
    """
    List the campaign days for the caller's time zone.

    GET /api/adventures/calendar/?showPast=true

    Returns:
        200 OK: {"timezone": ..., "days": [{"date", "isToday", "isPast", "isFuture"}, ...]}
        400 Bad Request: invalid showPast, missing or unknown time zone
    """
    serializer = CalendarQuerySerializer(data=request.query_params)
    if not serializer.is_valid():
        logger.info(f"Invalid calendar query: {serializer.errors}")
        return error_response(AdventureError(
            ErrorCode.INVALID_QUERY_PARAMETER,
            "showPast must be a boolean (true or false).",
        ))

    try:
        zone_key, days = wiring.get_campaign_days_uc().execute(
            request.headers.get(TIME_ZONE_HEADER),
            show_past=serializer.validated_data["showPast"],
        )
    except AdventureError as e:
        return error_response(e)

    return Response({
        "timezone": zone_key,
        "days": CampaignDaySerializer(days, many=True).data,
    })
