"""
Use cases (business logic) for the Adventure Gate.

NO Django dependencies. Pure business logic using port abstractions.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .domain import (
    Adventure,
    AdventureError,
    CampaignDay,
    CampaignWindow,
    ErrorCode,
    GateCheckResult,
    GateDecision,
    GateRequest,
    OverrideRule,
    OverrideSecrets,
)
from .ports import AdventureRepository, ClockPort

logger = logging.getLogger(__name__)


class CheckUserTimeZone:
    """
    Gate Check: caller timezone must be a known IANA zone.

    Never bypassable, every later stage depends on the resolved zone.
    """

    GATE_NAME = "UserTimeZone"

    def execute(self, time_zone_id: Optional[str]) -> Tuple[GateCheckResult, Optional[ZoneInfo]]:
        """
        Resolve the caller's timezone.

        Args:
            time_zone_id: IANA identifier claimed by the caller

        Returns:
            Tuple of (GateCheckResult, ZoneInfo or None when the check failed)
        """
        if time_zone_id is None or not time_zone_id.strip():
            return self._fail(
                "No user time zone has been provided. "
                "User time zone must be provided in format of IANA Id."
            ), None

        try:
            zone = ZoneInfo(time_zone_id.strip())
        except (ZoneInfoNotFoundError, ValueError, OSError):
            return self._fail(
                f"User time zone '{time_zone_id}' is unknown. "
                "User time zone must be provided in format of IANA Id."
            ), None

        return GateCheckResult(
            gate_name=self.GATE_NAME,
            passed=True,
            message=f"Time zone resolved: {zone.key}",
        ), zone

    def _fail(self, message: str) -> GateCheckResult:
        return GateCheckResult(
            gate_name=self.GATE_NAME,
            passed=False,
            message=message,
            error_code=ErrorCode.INVALID_USER_TIME_ZONE,
        )


class CheckCampaignWindow:
    """
    Gate Check: requested date must fall inside the campaign window.

    The date is taken as its UTC-midnight instant and compared against the
    half-open interval [start, end). Bypassed by `skip-in-range`.
    """

    GATE_NAME = "CampaignWindow"

    def __init__(self, window: CampaignWindow):
        self._window = window

    def execute(self, requested_date: date, skip: bool = False) -> GateCheckResult:
        if skip:
            return GateCheckResult(
                gate_name=self.GATE_NAME,
                passed=True,
                skipped=True,
                message="Campaign window check skipped by override",
            )

        if self._window.contains(requested_date):
            return GateCheckResult(
                gate_name=self.GATE_NAME,
                passed=True,
                message=f"{requested_date.isoformat()} is inside the campaign window",
            )

        days = list(self._window.days())
        if days:
            bounds = f"from {days[0].isoformat()} up to {days[-1].isoformat()}"
        else:
            bounds = f"from {self._window.start.isoformat()} up to {self._window.end.isoformat()} (exclusive)"
        return GateCheckResult(
            gate_name=self.GATE_NAME,
            passed=False,
            message=f"Search date must be in range {bounds}.",
            error_code=ErrorCode.INVALID_SEARCH_DATE,
        )


class CheckDateHasAppeared:
    """
    Gate Check: the requested day must have arrived in the caller's local time.

    Bypassed by `skip-not-appeared`.
    """

    GATE_NAME = "DateHasAppeared"

    def execute(self, requested_date: date, local_today: date, skip: bool = False) -> GateCheckResult:
        if skip:
            return GateCheckResult(
                gate_name=self.GATE_NAME,
                passed=True,
                skipped=True,
                message="Not-yet-appeared check skipped by override",
            )

        if local_today < requested_date:
            return GateCheckResult(
                gate_name=self.GATE_NAME,
                passed=False,
                message=(
                    f"Requested date {requested_date.isoformat()} has not appeared yet, "
                    "please wait a little bit."
                ),
                error_code=ErrorCode.SEARCH_DATE_HAS_NOT_APPEARED,
            )

        return GateCheckResult(
            gate_name=self.GATE_NAME,
            passed=True,
            message=f"{requested_date.isoformat()} has arrived (local today: {local_today.isoformat()})",
        )


class CheckDatePassed:
    """
    Gate Check: the requested day must not be over in the caller's local time.

    Optional rule (see `enforce_date_passed`). Bypassed by `skip-passed`.
    """

    GATE_NAME = "DatePassed"

    def execute(self, requested_date: date, local_today: date, skip: bool = False) -> GateCheckResult:
        if skip:
            return GateCheckResult(
                gate_name=self.GATE_NAME,
                passed=True,
                skipped=True,
                message="Date-passed check skipped by override",
            )

        if local_today > requested_date:
            return GateCheckResult(
                gate_name=self.GATE_NAME,
                passed=False,
                message=(
                    f"Requested date {requested_date.isoformat()} has already passed "
                    "and is not currently accessible."
                ),
                error_code=ErrorCode.SEARCH_DATE_PASSED,
            )

        return GateCheckResult(
            gate_name=self.GATE_NAME,
            passed=True,
            message=f"{requested_date.isoformat()} is still open",
        )


class EvaluateAdventureGate:
    """
    Orchestrator use case: runs the gate stages in order and decides.

    Decision logic:
    - Stages run in a fixed order: time zone, window, not appeared, passed
    - The FIRST failing stage rejects the request; nothing is accumulated
    - Each override token disables only its own stage
    - Dates are compared as local calendar dates, never as instants
    """

    def __init__(
        self,
        window: CampaignWindow,
        secrets: OverrideSecrets,
        clock: ClockPort,
        enforce_date_passed: bool = True,
    ):
        self._secrets = secrets
        self._clock = clock
        self._enforce_date_passed = enforce_date_passed
        self._check_time_zone = CheckUserTimeZone()
        self._check_window = CheckCampaignWindow(window)
        self._check_appeared = CheckDateHasAppeared()
        self._check_passed = CheckDatePassed()

    def execute(self, request: GateRequest) -> GateDecision:
        """
        Evaluate a request against all enabled gate stages.

        Args:
            request: GateRequest built from caller input

        Returns:
            GateDecision (allowed, or rejected with the first failure)
        """
        checks: List[GateCheckResult] = []

        tz_result, zone = self._check_time_zone.execute(request.time_zone_id)
        checks.append(tz_result)
        if not tz_result.passed:
            return GateDecision.reject(tz_result, checks)

        window_result = self._check_window.execute(
            request.requested_date,
            skip=self._is_skipped(request, OverrideRule.SKIP_IN_RANGE),
        )
        checks.append(window_result)
        if not window_result.passed:
            return GateDecision.reject(window_result, checks)

        local_today = self._clock.now().astimezone(zone).date()

        appeared_result = self._check_appeared.execute(
            request.requested_date,
            local_today,
            skip=self._is_skipped(request, OverrideRule.SKIP_NOT_APPEARED),
        )
        checks.append(appeared_result)
        if not appeared_result.passed:
            return GateDecision.reject(appeared_result, checks)

        if self._enforce_date_passed:
            passed_result = self._check_passed.execute(
                request.requested_date,
                local_today,
                skip=self._is_skipped(request, OverrideRule.SKIP_PASSED),
            )
            checks.append(passed_result)
            if not passed_result.passed:
                return GateDecision.reject(passed_result, checks)

        return GateDecision.allow(checks)

    def _is_skipped(self, request: GateRequest, rule: OverrideRule) -> bool:
        return self._secrets.matches(rule, request.token_for(rule))


class ResolveAdventure:
    """Looks up the adventure for a date that already passed the gate."""

    def __init__(self, repository: AdventureRepository):
        self._adventures = repository

    def execute(self, adventure_date: date) -> Optional[Adventure]:
        return self._adventures.lookup(adventure_date)


class GetDailyAdventure:
    """
    Request use case: gate first, then content.

    Raises AdventureError for every failure. A gate rejection never reaches
    the resolver; an allowed date with no mapped adventure is reported as
    ResourceIsNotConfigured (operator gap, not a bad request).
    """

    def __init__(self, gate: EvaluateAdventureGate, resolver: ResolveAdventure):
        self._gate = gate
        self._resolver = resolver

    def execute(self, request: GateRequest) -> Adventure:
        decision = self._gate.execute(request)
        requested = request.requested_date.isoformat()

        if not decision.allowed:
            logger.info(
                f"Adventure {requested} rejected ({decision.error_code.value}) "
                f"for time zone {request.time_zone_id!r}"
            )
            raise decision.to_error()

        if decision.skipped_rules:
            logger.warning(f"Adventure {requested} opened with overrides: {', '.join(decision.skipped_rules)}")

        adventure = self._resolver.execute(request.requested_date)
        if adventure is None:
            logger.error(f"No adventure configured for {requested} although the gate allowed it")
            raise AdventureError(
                ErrorCode.RESOURCE_IS_NOT_CONFIGURED,
                f"Requested date {requested} does not have mapped adventure, please contact the organizers.",
            )

        return adventure


class ListCampaignDays:
    """
    Lists the campaign calendar relative to the caller's local date.

    Informational only: it never discloses adventure content.
    """

    def __init__(self, window: CampaignWindow, clock: ClockPort):
        self._window = window
        self._clock = clock
        self._check_time_zone = CheckUserTimeZone()

    def execute(self, time_zone_id: Optional[str], show_past: bool = False) -> Tuple[str, List[CampaignDay]]:
        """
        Build calendar cells for every day of the campaign.

        Args:
            time_zone_id: IANA identifier claimed by the caller
            show_past: Include days that are already over locally

        Returns:
            Tuple of (resolved zone key, list of CampaignDay)
        """
        tz_result, zone = self._check_time_zone.execute(time_zone_id)
        if not tz_result.passed:
            raise AdventureError(tz_result.error_code, tz_result.message)

        local_today = self._clock.now().astimezone(zone).date()
        days = []
        for day in self._window.days():
            cell = CampaignDay(
                date=day,
                is_today=day == local_today,
                is_past=day < local_today,
                is_future=day > local_today,
            )
            if cell.is_past and not show_past:
                continue
            days.append(cell)

        return zone.key, days
