"""
Campaign calendar overview for a time zone.

Shows which days are past, today and upcoming for the caller's local date,
and flags campaign days that have no adventure configured.

Usage:
    python manage.py adventure_calendar --timezone America/New_York
    python manage.py adventure_calendar --timezone Asia/Tokyo --show-past --now 2025-12-20T00:30:00Z
"""

import json

from django.core.management.base import BaseCommand, CommandError

from api.application.advent_gate import wiring
from api.application.advent_gate.domain import AdventureError

from ._clock_option import add_now_argument, clock_from_options


class Command(BaseCommand):
    help = "Display the campaign calendar for a time zone"

    def add_arguments(self, parser):
        parser.add_argument(
            "--timezone",
            type=str,
            required=True,
            help="IANA time zone of the caller (e.g., Europe/Moscow)",
        )
        parser.add_argument(
            "--show-past",
            action="store_true",
            help="Include days that are already over",
        )
        add_now_argument(parser)
        parser.add_argument("--json", action="store_true", help="Output in JSON format")

    def handle(self, *args, **options):
        use_case = wiring.get_campaign_days_uc(clock=clock_from_options(options))
        repository = wiring.get_adventure_repository()

        try:
            zone_key, days = use_case.execute(options["timezone"], show_past=options["show_past"])
        except AdventureError as e:
            raise CommandError(f"{e.error_code.value}: {e.message}") from e

        rows = [
            dict(day.to_dict(), configured=repository.lookup(day.date) is not None)
            for day in days
        ]

        if options["json"]:
            self.stdout.write(json.dumps({"timezone": zone_key, "days": rows}, indent=2))
            return

        self.stdout.write(f"Campaign calendar for {zone_key}")
        self.stdout.write("-" * 40)
        for row in rows:
            if row["isToday"]:
                marker = "▶ today "
            elif row["isPast"]:
                marker = "  past  "
            else:
                marker = "  soon  "
            line = f"{marker} {row['date']}"
            if row["configured"]:
                self.stdout.write(line)
            else:
                self.stdout.write(self.style.WARNING(f"{line}  (no adventure configured)"))

        missing = sum(1 for row in rows if not row["configured"])
        if missing:
            self.stdout.write(self.style.WARNING(f"{missing} day(s) without adventure"))
