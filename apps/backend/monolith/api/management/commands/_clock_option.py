"""Shared --now option for adventure support commands."""

from datetime import timezone

from django.core.management.base import CommandError
from django.utils.dateparse import parse_datetime

from api.application.advent_gate.adapters import FixedClock, RealClock


def add_now_argument(parser):
    parser.add_argument(
        "--now",
        type=str,
        help="Evaluate as if the current instant were this ISO-8601 datetime (naive = UTC)",
    )


def clock_from_options(options):
    value = options.get("now")
    if not value:
        return RealClock()

    try:
        instant = parse_datetime(value)
    except ValueError:
        instant = None
    if instant is None:
        raise CommandError(f"--now must be an ISO-8601 datetime, got {value!r}")
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return FixedClock(instant)
