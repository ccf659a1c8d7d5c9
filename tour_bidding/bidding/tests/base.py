from datetime import date, datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

from django.contrib.auth.models import User

from ..engine import NegotiationEngine
from ..models import Artist, Venue


class FakeClock:
    """Returns a fixed start time and moves forward one second per call."""

    def __init__(self, start=None):
        self.current = start or datetime(2025, 5, 1, 12, 0, tzinfo=dt_timezone.utc)

    def __call__(self):
        now = self.current
        self.current = now + timedelta(seconds=1)
        return now


class BiddingTestData:
    """Users, one artist, two venues and a Seattle request for June 1-7."""

    def setUp(self):
        self.artist_user = User.objects.create_user(
            username='artist_manager',
            email='artist@test.com',
            password='testpass123'
        )
        self.venue_user = User.objects.create_user(
            username='venue_manager',
            email='venue@test.com',
            password='testpass123'
        )
        self.other_user = User.objects.create_user(
            username='someone_else',
            email='else@test.com',
            password='testpass123'
        )

        self.artist = Artist.objects.create(name='Lake Street Dive', genre='Soul', owner=self.artist_user)
        self.v1 = Venue.objects.create(name='The Crocodile', city='Seattle', state='WA', capacity=750, owner=self.venue_user)
        self.v2 = Venue.objects.create(name='Neumos', city='Seattle', state='WA', capacity=650, owner=self.venue_user)

        self.clock = FakeClock()
        self.engine = NegotiationEngine(cascade_retry_wait=0, clock=self.clock)
        self.tour_request = self.engine.create_request(
            self.artist_user, self.artist,
            title='Seattle, early June',
            location='Seattle, WA',
            start_date=date(2025, 6, 1),
            end_date=date(2025, 6, 7),
            guarantee_min=Decimal('200.00'),
            guarantee_max=Decimal('500.00'),
        )

    def make_venue(self, name, capacity=500, **fields):
        return Venue.objects.create(name=name, city='Seattle', state='WA', capacity=capacity,
                                    owner=self.venue_user, **fields)

    def bid(self, venue, day, guarantee='300.00', tour_request=None, **terms):
        tour_request = tour_request or self.tour_request
        data = {'venue': venue, 'proposed_date': date(2025, 6, day), 'guarantee': Decimal(guarantee)}
        data.update(terms)
        return self.engine.submit_bid(self.venue_user, tour_request.pk, data)
