import csv
from datetime import date

from django.contrib.auth.models import User
from django.core.management.base import BaseCommand, CommandError

from bidding.models import Venue


def parse_dates(raw):
    """Split a ';'-separated list of ISO dates, skipping blanks."""
    dates = []
    for part in (raw or "").split(";"):
        part = part.strip()
        if not part:
            continue
        try:
            dates.append(date.fromisoformat(part).isoformat())
        except ValueError:
            raise CommandError(f"Bad date '{part}', expected YYYY-MM-DD.")
    return dates


class Command(BaseCommand):
    help = "Seed venues from a CSV file with headers: Name,City,State,Capacity,BlackoutDates,UnavailableDates."

    def add_arguments(self, parser):
        parser.add_argument("--file", required=True, help="Path to the CSV file.")
        parser.add_argument("--default-capacity", type=int, default=200, help="Capacity when the row has none.")
        parser.add_argument("--owner", help="Username that will own the created venues.")

    def handle(self, *args, **options):
        path = options["file"]
        default_capacity = options["default_capacity"]
        owner = None
        if options.get("owner"):
            owner = User.objects.filter(username=options["owner"]).first()
            if owner is None:
                raise CommandError(f"No user named {options['owner']}.")

        created = 0
        updated = 0
        skipped = 0

        with open(path, newline="", encoding="utf-8") as handle:
            reader = csv.DictReader(handle)
            for row in reader:
                name = (row.get("Name") or "").strip()
                city = (row.get("City") or "").strip()
                state = (row.get("State") or "").strip()
                capacity = (row.get("Capacity") or "").strip()
                blackout = parse_dates(row.get("BlackoutDates"))
                unavailable = parse_dates(row.get("UnavailableDates"))

                if not name or not city:
                    skipped += 1
                    continue

                venue, created_flag = Venue.objects.get_or_create(
                    name=name,
                    city=city,
                    defaults={
                        "state": state,
                        "capacity": int(capacity) if capacity else default_capacity,
                        "blackout_dates": blackout,
                        "unavailable_dates": unavailable,
                        "owner": owner,
                    },
                )

                if created_flag:
                    created += 1
                    continue

                # Existing venues only gain dates, never lose them
                merged_blackout = sorted(set(venue.blackout_dates) | set(blackout))
                merged_unavailable = sorted(set(venue.unavailable_dates) | set(unavailable))
                changed = False
                if merged_blackout != sorted(venue.blackout_dates):
                    venue.blackout_dates = merged_blackout
                    changed = True
                if merged_unavailable != sorted(venue.unavailable_dates):
                    venue.unavailable_dates = merged_unavailable
                    changed = True
                if not venue.state and state:
                    venue.state = state
                    changed = True
                if changed:
                    venue.save()
                    updated += 1
                else:
                    skipped += 1

        self.stdout.write(self.style.SUCCESS(f"Seed complete. created={created}, updated={updated}, skipped={skipped}"))
