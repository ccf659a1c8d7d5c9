from django.core.management.base import BaseCommand
from django.utils import timezone

from bidding.engine import NegotiationEngine
from bidding.models import VenueBid


class Command(BaseCommand):
    help = "Expire held bids whose hold period has run out and renumber the remaining holds."

    def add_arguments(self, parser):
        parser.add_argument("--dry-run", action="store_true", help="List the holds that would expire without changing them.")

    def handle(self, *args, **options):
        now = timezone.now()

        if options.get("dry_run"):
            stale = VenueBid.objects.select_related("venue").filter(status=VenueBid.Status.HOLD, held_until__lt=now)
            for bid in stale:
                self.stdout.write(f"Would expire bid {bid.id} ({bid.venue.name}, held until {bid.held_until:%Y-%m-%d %H:%M})")
            self.stdout.write(self.style.SUCCESS(f"{stale.count()} holds would expire."))
            return

        expired = NegotiationEngine().expire_holds(now=now)
        self.stdout.write(self.style.SUCCESS(f"Expired {len(expired)} holds."))
