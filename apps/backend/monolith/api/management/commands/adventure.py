"""
Open one adventure from the command line, through the same gate as the API.

Usage:
    python manage.py adventure 2025-12-15 --timezone Europe/Moscow
    python manage.py adventure 2025-12-20 --timezone UTC --now 2025-12-20T08:00:00Z
    python manage.py adventure 2025-12-05 --timezone UTC --skip-in-range <secret> --json
"""

import json
from datetime import date

from django.core.management.base import BaseCommand, CommandError

from api.application.advent_gate import wiring
from api.application.advent_gate.domain import (
    AdventureError,
    ErrorType,
    GateRequest,
    OverrideRule,
)
from api.application.advent_gate.hints import hint_for

from ._clock_option import add_now_argument, clock_from_options

EXIT_CODES = {
    ErrorType.INVALID_REQUEST_PARAMETERS: 1,
    ErrorType.INTERNAL_SERVER_ERROR: 2,
}


class Command(BaseCommand):
    help = "Open the adventure of a calendar day for a time zone"

    def add_arguments(self, parser):
        parser.add_argument("date", type=str, help="Calendar date (YYYY-MM-DD)")
        parser.add_argument(
            "--timezone",
            type=str,
            required=True,
            help="IANA time zone of the caller (e.g., Europe/Moscow)",
        )
        parser.add_argument("--skip-in-range", type=str, help="Override secret for the campaign window check")
        parser.add_argument("--skip-not-appeared", type=str, help="Override secret for the not-yet-appeared check")
        parser.add_argument("--skip-passed", type=str, help="Override secret for the already-passed check")
        add_now_argument(parser)
        parser.add_argument("--json", action="store_true", help="Output in JSON format")

    def handle(self, *args, **options):
        try:
            requested_date = date.fromisoformat(options["date"])
        except ValueError as e:
            raise CommandError(f"Invalid date {options['date']!r}: use YYYY-MM-DD") from e

        request = GateRequest(
            requested_date=requested_date,
            time_zone_id=options["timezone"],
            override_tokens={
                OverrideRule.SKIP_IN_RANGE: options.get("skip_in_range"),
                OverrideRule.SKIP_NOT_APPEARED: options.get("skip_not_appeared"),
                OverrideRule.SKIP_PASSED: options.get("skip_passed"),
            },
        )
        use_case = wiring.get_daily_adventure_uc(clock=clock_from_options(options))

        try:
            adventure = use_case.execute(request)
        except AdventureError as e:
            if options["json"]:
                self.stdout.write(json.dumps(e.to_dict(), indent=2))
            else:
                self.stdout.write(self.style.ERROR(f"{e.error_code.value}: {e.message}"))
                self.stdout.write(hint_for(e.error_code))
            raise CommandError(e.message, returncode=EXIT_CODES[e.error_type]) from e

        if options["json"]:
            self.stdout.write(json.dumps(adventure.to_dict(), indent=2, ensure_ascii=False))
            return

        self.stdout.write(self.style.SUCCESS(f"🎁 {adventure.title}"))
        self.stdout.write(adventure.message)
