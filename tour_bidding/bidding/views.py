from datetime import date

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from .availability import blocking_reason
from .engine import NegotiationEngine
from .filters import ShowFilter, TourRequestFilter, VenueBidFilter
from .models import Artist, Venue, TourRequest, VenueBid, Show
from .permissions import IsOwnerOrReadOnly
from .serializers import (
    AcceptResultSerializer,
    ArtistSerializer,
    BidActionSerializer,
    BidSubmissionSerializer,
    ShowSerializer,
    TourRequestSerializer,
    TourRequestUpdateSerializer,
    VenueBidSerializer,
    VenueSerializer,
)


class ArtistViewSet(viewsets.ModelViewSet):
    queryset = Artist.objects.all()
    serializer_class = ArtistSerializer
    lookup_value_regex = r'\d+'
    permission_classes = [IsAuthenticated, IsOwnerOrReadOnly]

    # Search fields - case-insensitive
    filter_backends = [SearchFilter]
    search_fields = ['name', 'genre', 'city']

    def perform_create(self, serializer):
        serializer.save(owner=self.request.user)


class VenueViewSet(viewsets.ModelViewSet):
    queryset = Venue.objects.all()
    serializer_class = VenueSerializer
    lookup_value_regex = r'\d+'
    permission_classes = [IsAuthenticated, IsOwnerOrReadOnly]

    filter_backends = [SearchFilter]
    search_fields = ['name', 'city', 'state']

    def perform_create(self, serializer):
        serializer.save(owner=self.request.user)

    # GET /api/venues/{id}/availability/?date=2025-06-03
    @action(detail=True, methods=['get'])
    def availability(self, request, pk=None):
        venue = self.get_object()
        raw_date = request.query_params.get('date')
        try:
            on_date = date.fromisoformat(raw_date or '')
        except ValueError:
            return Response({'date': ['Use YYYY-MM-DD.']}, status=status.HTTP_400_BAD_REQUEST)

        shows = Show.objects.filter(venue=venue, date=on_date)
        reason = blocking_reason(venue, on_date, shows)
        return Response({'date': on_date.isoformat(), 'available': reason is None, 'reason': reason})


'''
Filter by:
    artist: /api/tour-requests/?artist=1

    status: /api/tour-requests/?status=active

    date inside the window: /api/tour-requests/?on_date=2025-06-03
'''

class TourRequestViewSet(viewsets.ModelViewSet):
    queryset = TourRequest.objects.select_related('artist')
    serializer_class = TourRequestSerializer
    lookup_value_regex = r'\d+'
    permission_classes = [IsAuthenticated]

    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_class = TourRequestFilter
    search_fields = ['title', 'location', 'artist__name']
    ordering_fields = ['created_at', 'request_date', 'start_date', 'priority']

    def get_serializer_class(self):
        if self.action in ('update', 'partial_update'):
            return TourRequestUpdateSerializer
        return TourRequestSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        artist = data.pop('artist')
        tour_request = NegotiationEngine().create_request(request.user, artist, **data)
        return Response(TourRequestSerializer(tour_request).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        tour_request = NegotiationEngine().update_request(request.user, kwargs['pk'], **serializer.validated_data)
        return Response(TourRequestSerializer(tour_request).data)

    def destroy(self, request, *args, **kwargs):
        cancelled = NegotiationEngine().delete_tour_request(request.user, kwargs['pk'])
        return Response({'cancelled_bids': VenueBidSerializer(cancelled, many=True).data})

    @action(detail=True, methods=['post'])
    def pause(self, request, pk=None):
        tour_request = NegotiationEngine().pause_request(request.user, pk)
        return Response(TourRequestSerializer(tour_request).data)

    @action(detail=True, methods=['post'])
    def resume(self, request, pk=None):
        tour_request = NegotiationEngine().resume_request(request.user, pk)
        return Response(TourRequestSerializer(tour_request).data)

    # Bids on this request, held bids first in hold order
    @action(detail=True, methods=['get'])
    def bids(self, request, pk=None):
        tour_request = self.get_object()
        bids = VenueBid.objects.select_related('venue').filter(tour_request_id=tour_request.pk)
        return Response(VenueBidSerializer(bids, many=True).data)


class VenueBidViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    queryset = VenueBid.objects.select_related('venue')
    serializer_class = VenueBidSerializer
    lookup_value_regex = r'\d+'
    permission_classes = [IsAuthenticated]

    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = VenueBidFilter
    ordering_fields = ['created_at', 'proposed_date', 'hold_position', 'guarantee']

    def create(self, request, *args, **kwargs):
        serializer = BidSubmissionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        tour_request_id = data.pop('tour_request')
        bid = NegotiationEngine().submit_bid(request.user, tour_request_id, data)
        return Response(VenueBidSerializer(bid).data, status=status.HTTP_201_CREATED)

    # PATCH /api/bids/{id}/ {"action": "hold" | "accept" | "decline" | "cancel", "reason": "..."}
    def partial_update(self, request, *args, **kwargs):
        serializer = BidActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        bid_action = serializer.validated_data['action']
        reason = serializer.validated_data.get('reason')
        engine = NegotiationEngine()
        bid_id = kwargs['pk']

        if bid_action == 'accept':
            result = engine.accept_bid(request.user, bid_id)
            return Response(AcceptResultSerializer(result).data)

        if bid_action == 'hold':
            bid = engine.place_on_hold(request.user, bid_id)
        elif bid_action == 'decline':
            bid = engine.decline_bid(request.user, bid_id, reason)
        else:
            bid = engine.cancel_bid(request.user, bid_id)
        return Response(VenueBidSerializer(bid).data)


class ShowViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    queryset = Show.objects.select_related('artist', 'venue')
    serializer_class = ShowSerializer
    lookup_value_regex = r'\d+'
    permission_classes = [IsAuthenticated]

    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = ShowFilter
    ordering_fields = ['date', 'created_at']
    ordering = ['date']

    # Direct booking, no bid involved
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        show = NegotiationEngine().confirm_direct_show(
            request.user, data.pop('artist'), data.pop('venue'), data.pop('date'), **data
        )
        return Response(ShowSerializer(show).data, status=status.HTTP_201_CREATED)
