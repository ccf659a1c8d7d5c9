from django.contrib import admin
from django.contrib.auth.models import User
from django.test import RequestFactory, TestCase

from ..engine import REQUEST_DELETED_REASON
from ..models import TourRequest, VenueBid
from .base import BiddingTestData


class TourRequestAdminTests(BiddingTestData, TestCase):
    """Deleting requests from the admin goes through the negotiation engine."""

    def setUp(self):
        super().setUp()
        self.admin_user = User.objects.create_superuser(
            username='admin',
            email='admin@test.com',
            password='adminpass123'
        )
        self.request = RequestFactory().post('/admin/bidding/tourrequest/')
        self.request.user = self.admin_user
        self.model_admin = admin.site._registry[TourRequest]

    def assert_cancelled_by_delete(self, bid):
        bid.refresh_from_db()
        self.assertEqual(bid.status, VenueBid.Status.CANCELLED)
        self.assertEqual(bid.cancelled_reason, REQUEST_DELETED_REASON)

    def test_delete_selected_cancels_open_bids(self):
        pending = self.bid(self.v1, 3)
        held = self.engine.place_on_hold(self.artist_user, self.bid(self.v2, 4).pk)

        self.model_admin.delete_queryset(self.request, TourRequest.objects.filter(pk=self.tour_request.pk))

        self.assertFalse(TourRequest.objects.filter(pk=self.tour_request.pk).exists())
        self.assert_cancelled_by_delete(pending)
        self.assert_cancelled_by_delete(held)

    def test_delete_single_request_cancels_open_bids(self):
        pending = self.bid(self.v1, 3)

        self.model_admin.delete_model(self.request, self.tour_request)

        self.assertFalse(TourRequest.objects.filter(pk=self.tour_request.pk).exists())
        self.assert_cancelled_by_delete(pending)
