"""
Concurrency Tests
Parallel holds on one tour request from separate threads and connections.
"""
import threading

from django.db import OperationalError, connection
from django.test import TransactionTestCase
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from ..exceptions import HoldLimitExceeded, PersistenceFailure
from ..models import VenueBid
from .base import BiddingTestData


class ConcurrentHoldTests(BiddingTestData, TransactionTestCase):

    def setUp(self):
        super().setUp()
        venues = [self.v1, self.v2] + [self.make_venue(f'Room {n}') for n in range(3)]
        self.bids = [self.bid(venue, day) for day, venue in enumerate(venues, start=1)]

    def hold_in_thread(self, bid, barrier, rejected, failures):
        # SQLite's shared test database can report a busy table while another thread writes
        retrying = Retrying(
            stop=stop_after_attempt(20),
            wait=wait_fixed(0.05),
            retry=retry_if_exception_type((PersistenceFailure, OperationalError)),
            reraise=True,
        )
        try:
            barrier.wait()
            retrying(self.engine.place_on_hold, self.artist_user, bid.pk)
        except HoldLimitExceeded as exc:
            rejected.append(exc)
        except Exception as exc:
            failures.append(exc)
        finally:
            connection.close()

    def test_parallel_holds_respect_the_cap(self):
        barrier = threading.Barrier(len(self.bids))
        rejected, failures = [], []
        threads = [
            threading.Thread(target=self.hold_in_thread, args=(bid, barrier, rejected, failures))
            for bid in self.bids
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(failures, [])
        self.assertEqual(len(rejected), len(self.bids) - self.engine.max_holds)
        held = VenueBid.objects.filter(tour_request=self.tour_request, status=VenueBid.Status.HOLD)
        self.assertEqual(sorted(held.values_list('hold_position', flat=True)),
                         list(range(1, self.engine.max_holds + 1)))
        self.assertEqual(
            VenueBid.objects.filter(tour_request=self.tour_request, status=VenueBid.Status.PENDING).count(),
            len(self.bids) - self.engine.max_holds,
        )
