"""
Accept Cascade Tests
Failures partway through accepting a bid, retries, and resuming.
"""
from django.test import TestCase

from ..engine import NegotiationEngine, SIBLING_CANCELLED_REASON
from ..exceptions import CascadeFailure, PersistenceFailure
from ..models import Show, TourRequest, VenueBid
from ..repositories import BidRepository, ShowRepository, TourRequestRepository
from .base import BiddingTestData


class FlakyShowRepository(ShowRepository):
    """Fails the first `failures` show inserts."""

    def __init__(self, failures):
        self.failures = failures
        self.calls = 0

    def create(self, **fields):
        self.calls += 1
        if self.calls <= self.failures:
            raise PersistenceFailure("show table is locked")
        return super().create(**fields)


class StuckTourRequestRepository(TourRequestRepository):
    """Refuses to mark any request completed."""

    def update(self, tour_request, fields=None):
        if tour_request.status == TourRequest.Status.COMPLETED:
            raise PersistenceFailure("request row is locked")
        return super().update(tour_request, fields)


class FlakyBidRepository(BidRepository):
    """Fails the bid writes whose 1-based call numbers are in `fail_calls`."""

    def __init__(self, fail_calls):
        self.fail_calls = set(fail_calls)
        self.calls = 0

    def update(self, bid, fields=None):
        self.calls += 1
        if self.calls in self.fail_calls:
            raise PersistenceFailure("bid row is locked")
        return super().update(bid, fields)


class AcceptCascadeTests(BiddingTestData, TestCase):

    def setUp(self):
        super().setUp()
        self.winner = self.bid(self.v1, 3)
        self.loser = self.bid(self.v2, 4)
        self.engine.place_on_hold(self.artist_user, self.loser.pk)

    def engine_with(self, **repositories):
        return NegotiationEngine(cascade_attempts=2, cascade_retry_wait=0, clock=self.clock, **repositories)

    def test_transient_failure_is_retried(self):
        shows = FlakyShowRepository(failures=1)

        result = self.engine_with(shows=shows).accept_bid(self.artist_user, self.winner.pk)

        self.assertEqual(shows.calls, 2)
        self.assertEqual(result.show.bid_id, self.winner.pk)

    def test_show_step_failure_reports_progress(self):
        engine = self.engine_with(shows=FlakyShowRepository(failures=10))

        with self.assertRaises(CascadeFailure) as ctx:
            engine.accept_bid(self.artist_user, self.winner.pk)

        self.assertEqual(ctx.exception.completed_steps, ['accept_bid', 'cancel_siblings', 'complete_request'])
        self.assertEqual(ctx.exception.pending_steps, ['create_show'])
        self.assertTrue(ctx.exception.retryable)

        self.winner.refresh_from_db()
        self.loser.refresh_from_db()
        self.tour_request.refresh_from_db()
        self.assertEqual(self.winner.status, VenueBid.Status.ACCEPTED)
        self.assertEqual(self.loser.status, VenueBid.Status.CANCELLED)
        self.assertEqual(self.tour_request.status, TourRequest.Status.COMPLETED)
        self.assertFalse(Show.objects.exists())

    def test_retrying_accept_finishes_the_cascade(self):
        with self.assertRaises(CascadeFailure):
            self.engine_with(shows=FlakyShowRepository(failures=10)).accept_bid(self.artist_user, self.winner.pk)

        result = self.engine.accept_bid(self.artist_user, self.winner.pk)

        self.assertEqual(Show.objects.count(), 1)
        self.assertEqual(result.show.bid_id, self.winner.pk)
        self.assertEqual([bid.pk for bid in result.cancelled_bids], [self.loser.pk])
        self.loser.refresh_from_db()
        self.assertEqual(self.loser.cancelled_reason, SIBLING_CANCELLED_REASON)

        again = self.engine.accept_bid(self.artist_user, self.winner.pk)
        self.assertEqual(again.show.pk, result.show.pk)
        self.assertEqual(Show.objects.count(), 1)

    def test_complete_step_failure_leaves_later_steps_pending(self):
        engine = self.engine_with(tour_requests=StuckTourRequestRepository())

        with self.assertRaises(CascadeFailure) as ctx:
            engine.accept_bid(self.artist_user, self.winner.pk)

        self.assertEqual(ctx.exception.completed_steps, ['accept_bid', 'cancel_siblings'])
        self.assertEqual(ctx.exception.pending_steps, ['complete_request', 'create_show'])
        self.assertFalse(Show.objects.exists())

        result = self.engine.accept_bid(self.artist_user, self.winner.pk)
        self.assertEqual(result.tour_request.status, TourRequest.Status.COMPLETED)
        self.assertEqual(Show.objects.count(), 1)

    def test_cascade_failure_detail_lists_steps(self):
        with self.assertRaises(CascadeFailure) as ctx:
            self.engine_with(shows=FlakyShowRepository(failures=10)).accept_bid(self.artist_user, self.winner.pk)

        detail = ctx.exception.detail
        self.assertEqual(detail['pending_steps'], ['create_show'])
        self.assertEqual(ctx.exception.status_code, 503)

    def test_failed_accept_write_changes_nothing(self):
        engine = self.engine_with(bids=FlakyBidRepository(fail_calls={1, 2}))

        with self.assertRaises(CascadeFailure) as ctx:
            engine.accept_bid(self.artist_user, self.winner.pk)

        self.assertEqual(ctx.exception.completed_steps, [])
        self.assertEqual(ctx.exception.pending_steps,
                         ['accept_bid', 'cancel_siblings', 'complete_request', 'create_show'])
        self.winner.refresh_from_db()
        self.loser.refresh_from_db()
        self.tour_request.refresh_from_db()
        self.assertEqual(self.winner.status, VenueBid.Status.PENDING)
        self.assertIsNone(self.winner.accepted_at)
        self.assertEqual(self.loser.status, VenueBid.Status.HOLD)
        self.assertEqual(self.loser.hold_position, 1)
        self.assertEqual(self.tour_request.status, TourRequest.Status.ACTIVE)
        self.assertFalse(Show.objects.exists())

    def test_resume_after_partial_sibling_cancel(self):
        third = self.bid(self.make_venue('Tractor Tavern'), 5)
        # Write 1 accepts the winner, write 2 cancels the held bid, both tries on the third fail
        engine = self.engine_with(bids=FlakyBidRepository(fail_calls={3, 4}))

        with self.assertRaises(CascadeFailure) as ctx:
            engine.accept_bid(self.artist_user, self.winner.pk)

        self.assertEqual(ctx.exception.completed_steps, ['accept_bid'])
        self.assertEqual(ctx.exception.pending_steps, ['cancel_siblings', 'complete_request', 'create_show'])
        self.loser.refresh_from_db()
        third.refresh_from_db()
        self.assertEqual(self.loser.status, VenueBid.Status.CANCELLED)
        self.assertEqual(third.status, VenueBid.Status.PENDING)
        first_cancelled_at = self.loser.cancelled_at

        result = self.engine.accept_bid(self.artist_user, self.winner.pk)

        self.loser.refresh_from_db()
        third.refresh_from_db()
        self.assertEqual(self.loser.cancelled_at, first_cancelled_at)
        self.assertEqual(third.status, VenueBid.Status.CANCELLED)
        self.assertEqual(third.cancelled_reason, SIBLING_CANCELLED_REASON)
        self.assertEqual(sorted(bid.pk for bid in result.cancelled_bids), sorted([self.loser.pk, third.pk]))
        self.assertEqual(result.tour_request.status, TourRequest.Status.COMPLETED)
        self.assertEqual(Show.objects.count(), 1)
