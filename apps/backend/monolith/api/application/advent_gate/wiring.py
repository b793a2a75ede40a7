"""
Dependency Injection wiring for the Adventure Gate.

Provides factory functions to construct fully-wired use cases from
Django settings (settings.ADVENTY).
"""

from __future__ import annotations

from datetime import date

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .adapters import RealClock, StaticAdventureRepository, load_adventures
from .domain import CampaignWindow, OverrideSecrets
from .ports import ClockPort
from .use_cases import (
    EvaluateAdventureGate,
    GetDailyAdventure,
    ListCampaignDays,
    ResolveAdventure,
)

# Singleton cache: the content calendar is loaded once per process
_singletons: dict[str, object] = {}


def get_singleton(key: str, factory):
    """Get or create a singleton instance."""
    if key not in _singletons:
        _singletons[key] = factory()
    return _singletons[key]


def get_clock() -> ClockPort:
    return RealClock()


def get_campaign_window() -> CampaignWindow:
    conf = settings.ADVENTY
    start, end = conf["CAMPAIGN_START"], conf["CAMPAIGN_END"]
    if not isinstance(start, date) or not isinstance(end, date):
        raise ImproperlyConfigured("ADVENTY CAMPAIGN_START and CAMPAIGN_END must be dates")
    try:
        return CampaignWindow.from_dates(start, end)
    except ValueError as e:
        raise ImproperlyConfigured(str(e)) from e


def get_override_secrets() -> OverrideSecrets:
    secrets = settings.ADVENTY.get("OVERRIDE_SECRETS", {})
    return OverrideSecrets(
        skip_in_range=secrets.get("SKIP_IN_RANGE", ""),
        skip_not_appeared=secrets.get("SKIP_NOT_APPEARED", ""),
        skip_passed=secrets.get("SKIP_PASSED", ""),
    )


def get_adventure_repository() -> StaticAdventureRepository:
    """Content calendar, loaded once per content file for the process lifetime."""
    path = str(settings.ADVENTY["CONTENT_FILE"])
    return get_singleton(f"adventures:{path}", lambda: load_adventures(path))


def get_adventure_gate(clock: ClockPort | None = None) -> EvaluateAdventureGate:
    return EvaluateAdventureGate(
        window=get_campaign_window(),
        secrets=get_override_secrets(),
        clock=clock or get_clock(),
        enforce_date_passed=settings.ADVENTY.get("ENFORCE_DATE_PASSED", True),
    )


def get_daily_adventure_uc(clock: ClockPort | None = None) -> GetDailyAdventure:
    """
    Factory function to create a fully-wired GetDailyAdventure use case.

    Usage:
        uc = get_daily_adventure_uc()
        adventure = uc.execute(GateRequest(date(2025, 12, 10), "Europe/Moscow"))
    """
    return GetDailyAdventure(
        gate=get_adventure_gate(clock),
        resolver=ResolveAdventure(get_adventure_repository()),
    )


def get_campaign_days_uc(clock: ClockPort | None = None) -> ListCampaignDays:
    return ListCampaignDays(window=get_campaign_window(), clock=clock or get_clock())


def clear_singletons():
    """Clear the singleton cache (useful for testing)."""
    _singletons.clear()
