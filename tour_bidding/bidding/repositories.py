"""
Storage access for the negotiation engine.

The engine only talks to these classes, never to the ORM directly, so a
different store (or a test double that fails on purpose) can be swapped in.
Database errors come out as PersistenceFailure and missing rows as NotFound.
"""
import functools
import logging

from django.db import DatabaseError, transaction
from django.db.utils import NotSupportedError

from .exceptions import NotFound, PersistenceFailure
from .models import Show, TourRequest, Venue, VenueBid

logger = logging.getLogger(__name__)


def translate_db_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError as exc:
            logger.warning("Repository call %s failed: %s", func.__qualname__, exc)
            raise PersistenceFailure(f"Storage error in {func.__name__}: {exc}") from exc
    return wrapper


def _lock_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""
    if not transaction.get_connection().in_atomic_block:
        return queryset
    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


class BidRepository:
    model = VenueBid

    @translate_db_errors
    def create(self, **fields):
        return self.model.objects.create(**fields)

    @translate_db_errors
    def get(self, bid_id):
        try:
            return self.model.objects.select_related('venue').get(pk=bid_id)
        except self.model.DoesNotExist:
            raise NotFound(f"Bid {bid_id} not found.")

    @translate_db_errors
    def list_by_tour_request(self, tour_request_id, statuses=None):
        queryset = self.model.objects.select_related('venue').filter(tour_request_id=tour_request_id)
        if statuses:
            queryset = queryset.filter(status__in=statuses)
        return list(queryset.order_by('created_at', 'id'))

    @translate_db_errors
    def list_by_venue(self, venue_id):
        return list(self.model.objects.filter(venue_id=venue_id).order_by('-created_at'))

    @translate_db_errors
    def list_expired_holds(self, now):
        return list(
            self.model.objects.filter(status=VenueBid.Status.HOLD, held_until__lt=now).order_by('tour_request_id')
        )

    @translate_db_errors
    def update(self, bid, fields=None):
        if fields:
            bid.save(update_fields=list(fields) + ['updated_at'])
        else:
            bid.save()
        return bid


class TourRequestRepository:
    model = TourRequest

    @translate_db_errors
    def create(self, **fields):
        return self.model.objects.create(**fields)

    @translate_db_errors
    def get(self, tour_request_id):
        try:
            return self.model.objects.select_related('artist').get(pk=tour_request_id)
        except self.model.DoesNotExist:
            raise NotFound(f"Show request {tour_request_id} not found.")

    @translate_db_errors
    def get_for_update(self, tour_request_id):
        """Fetch and row-lock the request; call inside transaction.atomic()."""
        queryset = _lock_if_possible(self.model.objects.filter(pk=tour_request_id))
        request = queryset.first()
        if request is None:
            raise NotFound(f"Show request {tour_request_id} not found.")
        return request

    @translate_db_errors
    def list_by_artist(self, artist_id):
        return list(self.model.objects.filter(artist_id=artist_id))

    @translate_db_errors
    def list_active(self):
        return list(self.model.objects.filter(status=TourRequest.Status.ACTIVE))

    @translate_db_errors
    def update(self, tour_request, fields=None):
        if fields:
            tour_request.save(update_fields=list(fields) + ['updated_at'])
        else:
            tour_request.save()
        return tour_request

    @translate_db_errors
    def delete(self, tour_request_id):
        deleted, _ = self.model.objects.filter(pk=tour_request_id).delete()
        if not deleted:
            raise NotFound(f"Show request {tour_request_id} not found.")


class ShowRepository:
    model = Show

    @translate_db_errors
    def create(self, **fields):
        return self.model.objects.create(**fields)

    @translate_db_errors
    def get_by_bid(self, bid_id):
        return self.model.objects.filter(bid_id=bid_id).first()

    @translate_db_errors
    def list_by_artist(self, artist_id):
        return list(self.model.objects.filter(artist_id=artist_id))

    @translate_db_errors
    def list_by_venue(self, venue_id, on_date=None):
        queryset = self.model.objects.filter(venue_id=venue_id)
        if on_date is not None:
            queryset = queryset.filter(date=on_date)
        return list(queryset)


class VenueLookup:
    """Read-only venue access for availability checks."""

    @translate_db_errors
    def get(self, venue_id):
        try:
            return Venue.objects.get(pk=venue_id)
        except Venue.DoesNotExist:
            raise NotFound(f"Venue {venue_id} not found.")
