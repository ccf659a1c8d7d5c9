"""
Negotiation engine for tour requests and venue bids.

Every operation that changes a tour request's bid set runs under that
request's lock (see locks.py) and, except for accepting a bid, inside one
database transaction. Accepting a bid is a cascade of dependent writes:

    accept_bid -> cancel_siblings -> complete_request -> create_show

Each step is written on its own and retried a few times. If a step still
fails, CascadeFailure reports which steps are done; calling accept_bid again
on the same bid picks up from the first unfinished step.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import timedelta
from typing import List, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from tenacity import Retrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_fixed

from . import availability
from .exceptions import (
    CascadeFailure,
    DateOutOfWindow,
    DateUnavailable,
    HoldLimitExceeded,
    InvalidCapacity,
    InvalidTransition,
    PersistenceFailure,
    RequestNotActive,
    Unauthorized,
)
from .locks import request_lock
from .models import Show, TourRequest, Venue, VenueBid
from .repositories import BidRepository, ShowRepository, TourRequestRepository, VenueLookup
from .validators import validate_request_window

logger = logging.getLogger(__name__)

SIBLING_CANCELLED_REASON = "Another venue was selected for this date"
VENUE_CANCELLED_REASON = "Cancelled by venue"
REQUEST_DELETED_REASON = "Show request was deleted"

STEP_ACCEPT_BID = 'accept_bid'
STEP_CANCEL_SIBLINGS = 'cancel_siblings'
STEP_COMPLETE_REQUEST = 'complete_request'
STEP_CREATE_SHOW = 'create_show'
ACCEPT_STEPS = (STEP_ACCEPT_BID, STEP_CANCEL_SIBLINGS, STEP_COMPLETE_REQUEST, STEP_CREATE_SHOW)

# Tour request fields that only the engine may change
PROTECTED_REQUEST_FIELDS = {'id', 'artist', 'artist_id', 'status', 'request_date', 'start_date', 'end_date', 'created_by'}

OPEN = VenueBid.OPEN_STATUSES
HOLD = VenueBid.Status.HOLD


@dataclass
class AcceptResult:
    bid: VenueBid
    tour_request: TourRequest
    show: Show
    cancelled_bids: List[VenueBid] = field(default_factory=list)


def _is_superuser(actor):
    return actor is not None and getattr(actor, 'is_superuser', False)


def _owns(actor, owner_id):
    if _is_superuser(actor):
        return True
    return actor is not None and owner_id is not None and owner_id == actor.pk


class NegotiationEngine:

    def __init__(self, bids=None, tour_requests=None, shows=None, venues=None,
                 hold_duration: Optional[timedelta] = None, max_holds: Optional[int] = None,
                 cascade_attempts: Optional[int] = None, cascade_retry_wait: Optional[float] = None,
                 clock=None):
        config = getattr(settings, 'BIDDING', {})
        self.bids = bids or BidRepository()
        self.tour_requests = tour_requests or TourRequestRepository()
        self.shows = shows or ShowRepository()
        self.venues = venues or VenueLookup()
        self.hold_duration = hold_duration or timedelta(days=config.get('HOLD_DURATION_DAYS', 7))
        self.max_holds = max_holds or config.get('MAX_CONCURRENT_HOLDS', 3)
        self.cascade_attempts = cascade_attempts or config.get('CASCADE_WRITE_ATTEMPTS', 3)
        if cascade_retry_wait is None:
            cascade_retry_wait = config.get('CASCADE_RETRY_WAIT_SECONDS', 0.5)
        self.cascade_retry_wait = cascade_retry_wait
        self.clock = clock or timezone.now

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _mutating(self, tour_request_id, expire_stale=False):
        """Serialize a mutation of one tour request's bid set and run it in a transaction."""
        with request_lock(tour_request_id):
            if expire_stale:
                # Committed on its own so a rejected mutation keeps the expiry
                with transaction.atomic():
                    self._expire_stale_holds(tour_request_id, self.clock())
            with transaction.atomic():
                yield self.tour_requests.get_for_update(tour_request_id)

    def _authorize_artist(self, actor, tour_request):
        if not _owns(actor, tour_request.artist.owner_id):
            raise Unauthorized("Only the artist who posted this show request can do that.")

    def _authorize_venue(self, actor, venue):
        if not _owns(actor, venue.owner_id):
            raise Unauthorized(f"You do not manage {venue.name}.")

    @staticmethod
    def _require_open(bid, action):
        if bid.status not in OPEN:
            raise InvalidTransition(f"Cannot {action} a bid that is {bid.status}.")

    def _ensure_available(self, venue, on_date):
        shows = self.shows.list_by_venue(venue.pk, on_date=on_date)
        reason = availability.blocking_reason(venue, on_date, shows)
        if reason is not None:
            raise DateUnavailable(f"{venue.name} is not available on {on_date} ({reason}).")

    def _renumber_holds(self, tour_request_id):
        """Give held bids positions 1..k in the order they were held."""
        held = self.bids.list_by_tour_request(tour_request_id, statuses=[HOLD])
        held.sort(key=lambda b: (b.held_at, b.pk))
        for position, held_bid in enumerate(held, start=1):
            if held_bid.hold_position != position:
                held_bid.hold_position = position
                self.bids.update(held_bid, ['hold_position'])

    def _expire_stale_holds(self, tour_request_id, now):
        """Expire holds on one request whose held_until has passed; call under its lock."""
        expired = []
        for bid in self.bids.list_by_tour_request(tour_request_id, statuses=[HOLD]):
            if bid.held_until is not None and bid.held_until < now:
                bid.status = VenueBid.Status.EXPIRED
                bid.expired_at = now
                bid.hold_position = None
                self.bids.update(bid, ['status', 'expired_at', 'hold_position'])
                expired.append(bid)
        if expired:
            self._renumber_holds(tour_request_id)
            logger.info("Hold on bids %s expired", [bid.pk for bid in expired])
        return expired

    def _cancel(self, bid, reason):
        bid.status = VenueBid.Status.CANCELLED
        bid.cancelled_at = self.clock()
        bid.cancelled_reason = reason
        bid.hold_position = None
        self.bids.update(bid, ['status', 'cancelled_at', 'cancelled_reason', 'hold_position'])
        logger.info("Bid %s cancelled: %s", bid.pk, reason)
        return bid

    def _cascade_write(self, func, *args):
        def attempt():
            with transaction.atomic():
                return func(*args)

        retrying = Retrying(
            stop=stop_after_attempt(self.cascade_attempts),
            wait=wait_fixed(self.cascade_retry_wait),
            retry=retry_if_exception_type(PersistenceFailure),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        return retrying(attempt)

    # ------------------------------------------------------------------
    # Tour requests
    # ------------------------------------------------------------------

    def create_request(self, actor, artist, **fields):
        if not _owns(actor, artist.owner_id):
            raise Unauthorized(f"You do not manage {artist.name}.")
        validate_request_window(fields.get('request_date'), fields.get('start_date'), fields.get('end_date'))
        fields.pop('status', None)
        tour_request = self.tour_requests.create(
            artist=artist, status=TourRequest.Status.ACTIVE, created_by=actor, **fields
        )
        logger.info("Show request %s created for %s", tour_request.pk, artist.name)
        return tour_request

    def update_request(self, actor, tour_request_id, **changes):
        """Change descriptive fields and terms; the window and status stay put."""
        blocked = PROTECTED_REQUEST_FIELDS.intersection(changes)
        if blocked:
            raise InvalidTransition(f"These fields cannot be changed here: {', '.join(sorted(blocked))}.")
        with self._mutating(tour_request_id) as tour_request:
            self._authorize_artist(actor, tour_request)
            for name, value in changes.items():
                setattr(tour_request, name, value)
            self.tour_requests.update(tour_request)
        return self.tour_requests.get(tour_request_id)

    def pause_request(self, actor, tour_request_id):
        return self._set_request_status(
            actor, tour_request_id, TourRequest.Status.ACTIVE, TourRequest.Status.PAUSED, 'pause'
        )

    def resume_request(self, actor, tour_request_id):
        return self._set_request_status(
            actor, tour_request_id, TourRequest.Status.PAUSED, TourRequest.Status.ACTIVE, 'resume'
        )

    def _set_request_status(self, actor, tour_request_id, expected, target, action):
        with self._mutating(tour_request_id) as tour_request:
            self._authorize_artist(actor, tour_request)
            if tour_request.status != expected:
                raise InvalidTransition(f"Cannot {action} a show request that is {tour_request.status}.")
            tour_request.status = target
            self.tour_requests.update(tour_request, ['status'])
        logger.info("Show request %s is now %s", tour_request_id, target)
        return self.tour_requests.get(tour_request_id)

    def mark_completed(self, tour_request):
        if tour_request.status == TourRequest.Status.COMPLETED:
            return tour_request
        previous = tour_request.status
        tour_request.status = TourRequest.Status.COMPLETED
        try:
            self.tour_requests.update(tour_request, ['status'])
        except PersistenceFailure:
            # Keep the in-memory status honest so a retry writes again
            tour_request.status = previous
            raise
        logger.info("Show request %s completed", tour_request.pk)
        return tour_request

    def delete_tour_request(self, actor, tour_request_id):
        """Cancel every open bid on the request, then delete it. Returns the cancelled bids."""
        with self._mutating(tour_request_id) as tour_request:
            self._authorize_artist(actor, tour_request)
            cancelled = [
                self._cancel(bid, REQUEST_DELETED_REASON)
                for bid in self.bids.list_by_tour_request(tour_request_id, statuses=OPEN)
            ]
            self.tour_requests.delete(tour_request_id)
        logger.info("Show request %s deleted, %d open bids cancelled", tour_request_id, len(cancelled))
        return cancelled

    # ------------------------------------------------------------------
    # Bids
    # ------------------------------------------------------------------

    def submit_bid(self, actor, tour_request_id, data):
        data = dict(data)
        venue = data.pop('venue')
        if not isinstance(venue, Venue):
            venue = self.venues.get(venue)
        self._authorize_venue(actor, venue)

        tour_request = self.tour_requests.get(tour_request_id)
        if tour_request.status != TourRequest.Status.ACTIVE:
            raise RequestNotActive(f"Show request {tour_request.pk} is {tour_request.status}.")

        proposed_date = data.get('proposed_date')
        if proposed_date is None or not tour_request.covers(proposed_date):
            first, last = tour_request.window()
            raise DateOutOfWindow(f"Proposed date {proposed_date} is outside {first} to {last}.")

        if data.get('capacity') is None:
            data['capacity'] = venue.capacity
        if data['capacity'] <= 0:
            raise InvalidCapacity()

        self._ensure_available(venue, proposed_date)

        for name in ('status', 'hold_position', 'held_at', 'held_until', 'tour_request', 'tour_request_id'):
            data.pop(name, None)
        bid = self.bids.create(
            tour_request_id=tour_request.pk,
            venue=venue,
            status=VenueBid.Status.PENDING,
            created_by=actor,
            **data,
        )
        logger.info("Bid %s submitted by %s for show request %s on %s",
                    bid.pk, venue.name, tour_request.pk, proposed_date)
        return bid

    def place_on_hold(self, actor, bid_id):
        bid = self.bids.get(bid_id)
        self._require_open(bid, 'hold')
        with self._mutating(bid.tour_request_id, expire_stale=True) as tour_request:
            bid = self.bids.get(bid_id)
            self._authorize_artist(actor, tour_request)
            self._require_open(bid, 'hold')
            now = self.clock()

            if bid.status == HOLD:
                # Re-holding keeps the bid's rank and only extends the hold
                bid.held_until = now + self.hold_duration
                self.bids.update(bid, ['held_until'])
            else:
                held = self.bids.list_by_tour_request(bid.tour_request_id, statuses=[HOLD])
                if len(held) >= self.max_holds:
                    raise HoldLimitExceeded(f"Show request {bid.tour_request_id} already has {len(held)} holds.")
                bid.status = HOLD
                bid.held_at = now
                bid.held_until = now + self.hold_duration
                self.bids.update(bid, ['status', 'held_at', 'held_until'])
                self._renumber_holds(bid.tour_request_id)

        bid = self.bids.get(bid_id)
        logger.info("Bid %s on hold at position %s until %s", bid.pk, bid.hold_position, bid.held_until)
        return bid

    def decline_bid(self, actor, bid_id, reason=None):
        bid = self.bids.get(bid_id)
        self._require_open(bid, 'decline')
        with self._mutating(bid.tour_request_id) as tour_request:
            bid = self.bids.get(bid_id)
            self._authorize_artist(actor, tour_request)
            self._require_open(bid, 'decline')
            was_held = bid.status == HOLD
            bid.status = VenueBid.Status.DECLINED
            bid.declined_at = self.clock()
            bid.declined_reason = reason or ''
            bid.hold_position = None
            self.bids.update(bid, ['status', 'declined_at', 'declined_reason', 'hold_position'])
            if was_held:
                self._renumber_holds(bid.tour_request_id)
        logger.info("Bid %s declined", bid_id)
        return self.bids.get(bid_id)

    def cancel_bid(self, actor, bid_id):
        bid = self.bids.get(bid_id)
        self._authorize_venue(actor, bid.venue)
        self._require_open(bid, 'cancel')
        with self._mutating(bid.tour_request_id):
            bid = self.bids.get(bid_id)
            self._require_open(bid, 'cancel')
            was_held = bid.status == HOLD
            self._cancel(bid, VENUE_CANCELLED_REASON)
            if was_held:
                self._renumber_holds(bid.tour_request_id)
        return self.bids.get(bid_id)

    def accept_bid(self, actor, bid_id):
        bid = self.bids.get(bid_id)
        with request_lock(bid.tour_request_id):
            with transaction.atomic():
                self._expire_stale_holds(bid.tour_request_id, self.clock())
            return self._accept(actor, bid_id)

    def _accept(self, actor, bid_id):
        completed = []
        with transaction.atomic():
            tour_request = self.tour_requests.get_for_update(self.bids.get(bid_id).tour_request_id)
            bid = self.bids.get(bid_id)
            self._authorize_artist(actor, tour_request)

            resuming = bid.status == VenueBid.Status.ACCEPTED
            if not resuming:
                self._require_open(bid, 'accept')
            others_accepted = self.bids.list_by_tour_request(
                bid.tour_request_id, statuses=[VenueBid.Status.ACCEPTED]
            )
            if any(other.pk != bid.pk for other in others_accepted):
                raise InvalidTransition("Another bid on this show request has already been accepted.")
            if not resuming:
                self._ensure_available(bid.venue, bid.proposed_date)

        try:
            if resuming:
                logger.info("Resuming accept cascade for bid %s", bid.pk)
            else:
                self._cascade_write(self._mark_accepted, bid)
            completed.append(STEP_ACCEPT_BID)

            siblings = [
                other for other in self.bids.list_by_tour_request(bid.tour_request_id)
                if other.pk != bid.pk
            ]
            for sibling in siblings:
                if sibling.status in OPEN:
                    self._cascade_write(self._cancel, sibling, SIBLING_CANCELLED_REASON)
            completed.append(STEP_CANCEL_SIBLINGS)

            self._cascade_write(self.mark_completed, tour_request)
            completed.append(STEP_COMPLETE_REQUEST)

            show = self.shows.get_by_bid(bid.pk)
            if show is None:
                show = self._cascade_write(self._create_show_from_bid, bid, tour_request, actor)
            completed.append(STEP_CREATE_SHOW)
        except PersistenceFailure as exc:
            pending = [step for step in ACCEPT_STEPS if step not in completed]
            logger.error("Accept cascade for bid %s stopped; done=%s pending=%s",
                         bid.pk, completed, pending)
            raise CascadeFailure(completed, pending, cause=exc) from exc

        cancelled = [
            sibling for sibling in siblings
            if sibling.status == VenueBid.Status.CANCELLED and sibling.cancelled_reason == SIBLING_CANCELLED_REASON
        ]
        logger.info("Bid %s accepted; show %s created; %d competing bids cancelled",
                    bid.pk, show.pk, len(cancelled))
        return AcceptResult(bid=bid, tour_request=tour_request, show=show, cancelled_bids=cancelled)

    def _mark_accepted(self, bid):
        bid.status = VenueBid.Status.ACCEPTED
        bid.accepted_at = self.clock()
        bid.hold_position = None
        self.bids.update(bid, ['status', 'accepted_at', 'hold_position'])
        return bid

    def _create_show_from_bid(self, bid, tour_request, actor=None):
        venue = bid.venue
        return self.shows.create(
            artist_id=tour_request.artist_id,
            venue=venue,
            date=bid.proposed_date,
            city=venue.city,
            state=venue.state,
            capacity=bid.capacity,
            age_restriction=bid.age_restriction,
            guarantee=bid.guarantee,
            door_split=bid.door_split,
            door_minimum_guarantee=bid.door_minimum_guarantee,
            ticket_price=bid.ticket_price_advance if bid.ticket_price_advance is not None else bid.ticket_price_door,
            load_in=bid.load_in,
            soundcheck=bid.soundcheck,
            doors_open=bid.doors_open,
            show_time=bid.show_time,
            curfew=bid.curfew,
            notes=bid.additional_terms,
            status=Show.Status.CONFIRMED,
            bid=bid,
            tour_request_id=tour_request.pk,
            created_by=actor,
        )

    def expire_holds(self, now=None):
        """Expire every hold whose held_until has passed. Returns the expired bids."""
        now = now or self.clock()
        stale = self.bids.list_expired_holds(now)
        expired = []
        for tour_request_id in sorted({bid.tour_request_id for bid in stale}):
            with request_lock(tour_request_id), transaction.atomic():
                expired.extend(self._expire_stale_holds(tour_request_id, now))
        if expired:
            logger.info("Expired %d holds", len(expired))
        return expired

    # ------------------------------------------------------------------
    # Direct shows
    # ------------------------------------------------------------------

    def confirm_direct_show(self, actor, artist, venue, date, **terms):
        """Book a show negotiated outside the bidding flow."""
        if not (_owns(actor, artist.owner_id) or _owns(actor, venue.owner_id)):
            raise Unauthorized("Only the artist or the venue can confirm this show.")
        venue = self.venues.get(venue.pk)
        self._ensure_available(venue, date)

        for name in ('status', 'bid', 'bid_id', 'tour_request', 'tour_request_id'):
            terms.pop(name, None)
        terms['city'] = terms.get('city') or venue.city
        terms['state'] = terms.get('state') or venue.state
        terms['capacity'] = terms.get('capacity') or venue.capacity
        show = self.shows.create(
            artist=artist, venue=venue, date=date, status=Show.Status.CONFIRMED, created_by=actor, **terms
        )
        logger.info("Direct show %s confirmed: %s at %s on %s", show.pk, artist.name, venue.name, date)
        return show
