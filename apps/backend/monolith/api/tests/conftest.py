"""
Shared fixtures for Adventy tests.
"""

import copy
from datetime import datetime, timezone

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from api.application.advent_gate import wiring
from api.application.advent_gate.adapters import FixedClock

SKIP_IN_RANGE_SECRET = "test-skip-in-range-7f3c9a"
SKIP_NOT_APPEARED_SECRET = "test-skip-not-appeared-1b8e4d"
SKIP_PASSED_SECRET = "test-skip-passed-5a2f60"


@pytest.fixture(autouse=True)
def adventy_settings(settings):
    """Known override secrets, plain HTTP, clean throttle cache and content cache."""
    settings.SECURE_SSL_REDIRECT = False
    adventy = copy.deepcopy(settings.ADVENTY)
    adventy["ENFORCE_DATE_PASSED"] = True
    adventy["OVERRIDE_SECRETS"] = {
        "SKIP_IN_RANGE": SKIP_IN_RANGE_SECRET,
        "SKIP_NOT_APPEARED": SKIP_NOT_APPEARED_SECRET,
        "SKIP_PASSED": SKIP_PASSED_SECRET,
    }
    settings.ADVENTY = adventy
    cache.clear()
    wiring.clear_singletons()
    yield settings
    wiring.clear_singletons()


@pytest.fixture
def api_client():
    """Create API client."""
    return APIClient()


@pytest.fixture
def freeze_now(monkeypatch):
    """
    Freeze the clock used by the wiring.

    Usage:
        freeze_now(datetime(2025, 12, 15, 3, 0, tzinfo=timezone.utc))
    """
    def _freeze(instant: datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        monkeypatch.setattr(wiring, "get_clock", lambda: FixedClock(instant))
        return instant

    return _freeze
