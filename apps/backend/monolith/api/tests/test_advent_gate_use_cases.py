"""
Tests for Adventure Gate use cases.

Run with: pytest apps/backend/monolith/api/tests/test_advent_gate_use_cases.py -v
"""

import logging
from datetime import date, datetime, timezone
from typing import List, Optional

import pytest
from django.core.exceptions import ImproperlyConfigured

from api.application.advent_gate import wiring
from api.application.advent_gate.adapters import FixedClock, StaticAdventureRepository
from api.application.advent_gate.domain import (
    Adventure,
    AdventureError,
    CampaignWindow,
    ErrorCode,
    GateRequest,
    OverrideRule,
    OverrideSecrets,
)
from api.application.advent_gate.use_cases import (
    CheckUserTimeZone,
    EvaluateAdventureGate,
    GetDailyAdventure,
    ListCampaignDays,
    ResolveAdventure,
)


# ============================================================================
# Test Doubles
# ============================================================================

class SpyAdventureRepository:
    """Adventure repository recording every lookup."""

    def __init__(self, adventures: List[Adventure]):
        self._inner = StaticAdventureRepository(adventures)
        self.lookups: List[date] = []

    def lookup(self, adventure_date: date) -> Optional[Adventure]:
        self.lookups.append(adventure_date)
        return self._inner.lookup(adventure_date)

    def dates(self) -> List[date]:
        return self._inner.dates()


SECRETS = OverrideSecrets(
    skip_in_range="range-secret",
    skip_not_appeared="appeared-secret",
    skip_passed="passed-secret",
)

WINDOW = CampaignWindow.from_dates(date(2025, 12, 10), date(2026, 1, 1))


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def make_gate(now: datetime, enforce_date_passed: bool = True) -> EvaluateAdventureGate:
    return EvaluateAdventureGate(
        window=WINDOW,
        secrets=SECRETS,
        clock=FixedClock(now),
        enforce_date_passed=enforce_date_passed,
    )


def make_request(requested: date, tz: Optional[str] = "America/New_York", **tokens) -> GateRequest:
    override_tokens = {
        OverrideRule.SKIP_IN_RANGE: tokens.get("skip_in_range"),
        OverrideRule.SKIP_NOT_APPEARED: tokens.get("skip_not_appeared"),
        OverrideRule.SKIP_PASSED: tokens.get("skip_passed"),
    }
    return GateRequest(requested_date=requested, time_zone_id=tz, override_tokens=override_tokens)


# ============================================================================
# Time zone stage
# ============================================================================

class TestCheckUserTimeZone:

    def test_resolves_known_zone(self):
        result, zone = CheckUserTimeZone().execute("Europe/Moscow")
        assert result.passed
        assert zone.key == "Europe/Moscow"

    @pytest.mark.parametrize("tz_id", [None, "", "   ", "Mars/Olympus_Mons", "../../etc/passwd", "Not A Zone"])
    def test_rejects_missing_or_unknown_zone(self, tz_id):
        result, zone = CheckUserTimeZone().execute(tz_id)
        assert not result.passed
        assert zone is None
        assert result.error_code is ErrorCode.INVALID_USER_TIME_ZONE

    def test_time_zone_is_checked_before_window(self):
        decision = make_gate(utc(2025, 12, 15, 12)).execute(make_request(date(2025, 11, 1), tz="Nowhere/City"))
        assert decision.error_code is ErrorCode.INVALID_USER_TIME_ZONE

    def test_time_zone_stage_cannot_be_bypassed(self):
        request = make_request(
            date(2025, 12, 15),
            tz="",
            skip_in_range="range-secret",
            skip_not_appeared="appeared-secret",
            skip_passed="passed-secret",
        )
        decision = make_gate(utc(2025, 12, 15, 12)).execute(request)
        assert decision.error_code is ErrorCode.INVALID_USER_TIME_ZONE


# ============================================================================
# Window stage
# ============================================================================

class TestCampaignWindowStage:

    @pytest.mark.parametrize("requested", [date(2025, 12, 9), date(2026, 1, 1), date(2026, 1, 15), date(2024, 12, 20)])
    def test_out_of_window_dates_are_rejected(self, requested):
        now = datetime.combine(requested, datetime.min.time(), tzinfo=timezone.utc).replace(hour=17)
        decision = make_gate(now).execute(make_request(requested))
        assert not decision.allowed
        assert decision.error_code is ErrorCode.INVALID_SEARCH_DATE

    def test_first_day_passes_window(self):
        decision = make_gate(utc(2025, 12, 10, 17)).execute(make_request(date(2025, 12, 10)))
        assert decision.allowed

    def test_last_day_passes_window(self):
        decision = make_gate(utc(2025, 12, 31, 17)).execute(make_request(date(2025, 12, 31)))
        assert decision.allowed

    def test_window_message_names_bounds(self):
        decision = make_gate(utc(2025, 12, 15, 12)).execute(make_request(date(2026, 1, 1)))
        assert "2025-12-10" in decision.message
        assert "2025-12-31" in decision.message


# ============================================================================
# Local-date stages
# ============================================================================

class TestLocalDateStages:

    def test_not_appeared_in_new_york_while_utc_already_there(self):
        # 2025-12-15T03:00Z is 2025-12-14 22:00 in New York
        decision = make_gate(utc(2025, 12, 15, 3)).execute(make_request(date(2025, 12, 15)))
        assert decision.error_code is ErrorCode.SEARCH_DATE_HAS_NOT_APPEARED
        assert "2025-12-15" in decision.message

    def test_appeared_in_tokyo_before_utc(self):
        # 2025-12-14T16:00Z is 2025-12-15 01:00 in Tokyo
        decision = make_gate(utc(2025, 12, 14, 16)).execute(make_request(date(2025, 12, 15), tz="Asia/Tokyo"))
        assert decision.allowed

    def test_still_open_in_honolulu_after_utc_midnight(self):
        # 2025-12-16T05:00Z is 2025-12-15 19:00 in Honolulu
        gate = make_gate(utc(2025, 12, 16, 5))
        assert gate.execute(make_request(date(2025, 12, 15), tz="Pacific/Honolulu")).allowed

        decision = gate.execute(make_request(date(2025, 12, 14), tz="Pacific/Honolulu"))
        assert decision.error_code is ErrorCode.SEARCH_DATE_PASSED

    def test_passed_in_tokyo_while_utc_still_on_that_day(self):
        # 2025-12-15T20:00Z is 2025-12-16 05:00 in Tokyo
        decision = make_gate(utc(2025, 12, 15, 20)).execute(make_request(date(2025, 12, 15), tz="Asia/Tokyo"))
        assert decision.error_code is ErrorCode.SEARCH_DATE_PASSED

    def test_same_local_day_at_both_edges(self):
        # 00:00 and 23:59 local in New York on 2025-12-20
        early = make_gate(utc(2025, 12, 20, 5, 0)).execute(make_request(date(2025, 12, 20)))
        late = make_gate(utc(2025, 12, 21, 4, 59)).execute(make_request(date(2025, 12, 20)))
        assert early.allowed
        assert late.allowed

    def test_passed_rule_can_be_disabled(self):
        gate = make_gate(utc(2025, 12, 20, 12), enforce_date_passed=False)
        decision = gate.execute(make_request(date(2025, 12, 12)))
        assert decision.allowed
        assert [check.gate_name for check in decision.checks] == ["UserTimeZone", "CampaignWindow", "DateHasAppeared"]


# ============================================================================
# Overrides
# ============================================================================

class TestOverrides:

    def test_skip_in_range_still_runs_later_stages(self):
        # 2025-12-05 is before the window, and already passed on 2025-12-15
        gate = make_gate(utc(2025, 12, 15, 12))
        decision = gate.execute(make_request(date(2025, 12, 5), skip_in_range="range-secret"))
        assert decision.error_code is ErrorCode.SEARCH_DATE_PASSED
        assert decision.checks[1].skipped

    def test_skip_in_range_does_not_bypass_not_appeared(self):
        gate = make_gate(utc(2025, 12, 15, 12))
        decision = gate.execute(make_request(date(2025, 12, 20), skip_in_range="range-secret"))
        assert decision.error_code is ErrorCode.SEARCH_DATE_HAS_NOT_APPEARED

    def test_skip_not_appeared_does_not_bypass_window(self):
        gate = make_gate(utc(2025, 12, 15, 12))
        decision = gate.execute(make_request(date(2026, 1, 5), skip_not_appeared="appeared-secret"))
        assert decision.error_code is ErrorCode.INVALID_SEARCH_DATE

    def test_skip_not_appeared_opens_future_day(self):
        gate = make_gate(utc(2025, 12, 15, 12))
        decision = gate.execute(make_request(date(2025, 12, 24), skip_not_appeared="appeared-secret"))
        assert decision.allowed
        assert decision.skipped_rules == ["DateHasAppeared"]

    def test_skip_passed_does_not_bypass_not_appeared(self):
        gate = make_gate(utc(2025, 12, 15, 12))
        decision = gate.execute(make_request(date(2025, 12, 20), skip_passed="passed-secret"))
        assert decision.error_code is ErrorCode.SEARCH_DATE_HAS_NOT_APPEARED

    def test_skip_passed_opens_past_day(self):
        gate = make_gate(utc(2025, 12, 15, 12))
        decision = gate.execute(make_request(date(2025, 12, 11), skip_passed="passed-secret"))
        assert decision.allowed

    def test_token_of_another_rule_is_not_accepted(self):
        gate = make_gate(utc(2025, 12, 15, 12))
        decision = gate.execute(make_request(date(2025, 12, 11), skip_passed="range-secret"))
        assert decision.error_code is ErrorCode.SEARCH_DATE_PASSED

    def test_wrong_token_is_not_accepted(self):
        gate = make_gate(utc(2025, 12, 15, 12))
        decision = gate.execute(make_request(date(2026, 2, 1), skip_in_range="guess"))
        assert decision.error_code is ErrorCode.INVALID_SEARCH_DATE

    def test_all_overrides_together_reach_allowed(self):
        gate = make_gate(utc(2025, 12, 15, 12))
        request = make_request(
            date(2025, 12, 5),
            skip_in_range="range-secret",
            skip_not_appeared="appeared-secret",
            skip_passed="passed-secret",
        )
        assert gate.execute(request).allowed


# ============================================================================
# Orchestration
# ============================================================================

class TestEvaluateAdventureGate:

    def test_identical_input_gives_identical_decision(self):
        gate = make_gate(utc(2025, 12, 15, 3))
        request = make_request(date(2025, 12, 15))
        assert gate.execute(request) == gate.execute(request)

    def test_fail_fast_stops_at_first_failure(self):
        decision = make_gate(utc(2025, 12, 15, 12)).execute(make_request(date(2026, 3, 1)))
        assert [check.gate_name for check in decision.checks] == ["UserTimeZone", "CampaignWindow"]

    def test_allowed_decision_runs_every_enabled_stage(self):
        decision = make_gate(utc(2025, 12, 15, 17)).execute(make_request(date(2025, 12, 15)))
        assert decision.allowed
        assert [check.gate_name for check in decision.checks] == [
            "UserTimeZone", "CampaignWindow", "DateHasAppeared", "DatePassed",
        ]
        assert decision.skipped_rules == []


class TestGetDailyAdventure:

    @pytest.fixture
    def repository(self):
        return SpyAdventureRepository([
            Adventure(date=date(2025, 12, 10), title="Day 1", message="Build a snowman."),
            Adventure(date=date(2025, 12, 15), title="Day 6", message="Leave a compliment."),
        ])

    def make_use_case(self, repository, now):
        return GetDailyAdventure(gate=make_gate(now), resolver=ResolveAdventure(repository))

    def test_returns_mapped_adventure(self, repository):
        use_case = self.make_use_case(repository, utc(2025, 12, 10, 15))
        adventure = use_case.execute(make_request(date(2025, 12, 10)))
        assert adventure.to_dict() == {"title": "Day 1", "message": "Build a snowman."}

    def test_rejection_never_consults_resolver(self, repository):
        use_case = self.make_use_case(repository, utc(2025, 12, 15, 3))
        with pytest.raises(AdventureError) as exc_info:
            use_case.execute(make_request(date(2025, 12, 15)))
        assert exc_info.value.error_code is ErrorCode.SEARCH_DATE_HAS_NOT_APPEARED
        assert repository.lookups == []

    def test_missing_adventure_is_configuration_gap(self, repository, caplog):
        use_case = self.make_use_case(repository, utc(2025, 12, 12, 15))
        with caplog.at_level(logging.ERROR, logger="api.application.advent_gate.use_cases"):
            with pytest.raises(AdventureError) as exc_info:
                use_case.execute(make_request(date(2025, 12, 12)))

        error = exc_info.value
        assert error.error_code is ErrorCode.RESOURCE_IS_NOT_CONFIGURED
        assert error.to_dict()["errorType"] == "InternalServerError"
        assert repository.lookups == [date(2025, 12, 12)]
        assert any("2025-12-12" in record.getMessage() for record in caplog.records)

    def test_bypassed_window_without_content_is_configuration_gap(self, repository):
        use_case = self.make_use_case(repository, utc(2025, 12, 15, 12))
        request = make_request(date(2025, 12, 5), skip_in_range="range-secret", skip_passed="passed-secret")
        with pytest.raises(AdventureError) as exc_info:
            use_case.execute(request)
        assert exc_info.value.error_code is ErrorCode.RESOURCE_IS_NOT_CONFIGURED

    def test_override_use_is_logged(self, repository, caplog):
        use_case = self.make_use_case(repository, utc(2025, 12, 14, 12))
        with caplog.at_level(logging.WARNING, logger="api.application.advent_gate.use_cases"):
            use_case.execute(make_request(date(2025, 12, 15), skip_not_appeared="appeared-secret"))
        assert any("DateHasAppeared" in record.getMessage() for record in caplog.records)


class TestListCampaignDays:

    def test_hides_past_days_by_default(self):
        # 2025-12-14T16:00Z is 2025-12-15 in Tokyo
        zone_key, days = ListCampaignDays(WINDOW, FixedClock(utc(2025, 12, 14, 16))).execute("Asia/Tokyo")
        assert zone_key == "Asia/Tokyo"
        assert len(days) == 17
        assert days[0].date == date(2025, 12, 15)
        assert days[0].is_today
        assert all(day.is_future for day in days[1:])

    def test_show_past(self):
        _, days = ListCampaignDays(WINDOW, FixedClock(utc(2025, 12, 14, 16))).execute("Asia/Tokyo", show_past=True)
        assert len(days) == 22
        assert days[0].is_past
        assert [day.date for day in days if day.is_today] == [date(2025, 12, 15)]

    def test_today_follows_caller_zone(self):
        clock = FixedClock(utc(2025, 12, 15, 3))
        _, new_york = ListCampaignDays(WINDOW, clock).execute("America/New_York")
        _, utc_days = ListCampaignDays(WINDOW, clock).execute("UTC")
        assert [d.date for d in new_york if d.is_today] == [date(2025, 12, 14)]
        assert [d.date for d in utc_days if d.is_today] == [date(2025, 12, 15)]

    def test_unknown_zone(self):
        with pytest.raises(AdventureError) as exc_info:
            ListCampaignDays(WINDOW, FixedClock(utc(2025, 12, 15))).execute("Moon/Base")
        assert exc_info.value.error_code is ErrorCode.INVALID_USER_TIME_ZONE


class TestWiring:

    def test_window_from_settings(self):
        window = wiring.get_campaign_window()
        assert window.contains(date(2025, 12, 10))
        assert not window.contains(date(2026, 1, 1))

    def test_inverted_window_is_improperly_configured(self, adventy_settings):
        adventy_settings.ADVENTY = dict(
            adventy_settings.ADVENTY,
            CAMPAIGN_START=date(2026, 1, 1),
            CAMPAIGN_END=date(2025, 12, 10),
        )
        with pytest.raises(ImproperlyConfigured):
            wiring.get_campaign_window()

    def test_empty_secret_disables_override(self, adventy_settings):
        adventy_settings.ADVENTY = dict(
            adventy_settings.ADVENTY,
            OVERRIDE_SECRETS={"SKIP_IN_RANGE": "", "SKIP_NOT_APPEARED": "", "SKIP_PASSED": ""},
        )
        secrets = wiring.get_override_secrets()
        assert not secrets.matches(OverrideRule.SKIP_IN_RANGE, "")
        assert not secrets.matches(OverrideRule.SKIP_PASSED, "anything")

    def test_date_passed_check_can_be_disabled(self, adventy_settings):
        adventy_settings.ADVENTY = dict(adventy_settings.ADVENTY, ENFORCE_DATE_PASSED=False)
        gate = wiring.get_adventure_gate(FixedClock(utc(2025, 12, 20, 12)))

        decision = gate.execute(GateRequest(date(2025, 12, 12), "UTC"))

        assert decision.allowed
