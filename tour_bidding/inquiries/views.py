from django.db.models import Q
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from bidding.exceptions import Unauthorized
from bidding.models import Artist, Venue

from . import services
from .models import BookingInquiry, PartyType
from .serializers import BookingInquirySerializer, BookingResponseSerializer, InquiryStatusSerializer

'''
Filter by:
    recipient: /api/inquiries/?recipient_type=venue&recipient_id=3

    inquirer: /api/inquiries/?inquirer_type=artist&inquirer_id=1
'''

class BookingInquiryViewSet(mixins.CreateModelMixin,
                            mixins.ListModelMixin,
                            mixins.RetrieveModelMixin,
                            mixins.DestroyModelMixin,
                            viewsets.GenericViewSet):
    serializer_class = BookingInquirySerializer
    lookup_value_regex = r'\d+'
    permission_classes = [IsAuthenticated]

    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['inquirer_type', 'inquirer_id', 'recipient_type', 'recipient_id', 'status']

    # Users only see inquiries sent to or from the artists and venues they manage
    def get_queryset(self):
        queryset = BookingInquiry.objects.prefetch_related('responses')
        user = self.request.user
        if user.is_superuser:
            return queryset
        artist_ids = list(Artist.objects.filter(owner=user).values_list('id', flat=True))
        venue_ids = list(Venue.objects.filter(owner=user).values_list('id', flat=True))
        return queryset.filter(
            Q(inquirer_type=PartyType.ARTIST, inquirer_id__in=artist_ids)
            | Q(inquirer_type=PartyType.VENUE, inquirer_id__in=venue_ids)
            | Q(recipient_type=PartyType.ARTIST, recipient_id__in=artist_ids)
            | Q(recipient_type=PartyType.VENUE, recipient_id__in=venue_ids)
        )

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        inquiry = services.create_inquiry(request.user, **serializer.validated_data)
        return Response(self.get_serializer(inquiry).data, status=status.HTTP_201_CREATED)

    def perform_destroy(self, instance):
        if not services.owns_party(self.request.user, instance.inquirer_type, instance.inquirer_id):
            raise Unauthorized("Only the sender can delete an inquiry.")
        instance.delete()

    @action(detail=True, methods=['post'], url_path='mark-viewed')
    def mark_viewed(self, request, pk=None):
        inquiry = services.mark_viewed(request.user, self.get_object())
        return Response(self.get_serializer(inquiry).data)

    @action(detail=True, methods=['post'], url_path='update-status')
    def update_status(self, request, pk=None):
        serializer = InquiryStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        inquiry = services.update_status(request.user, self.get_object(), serializer.validated_data['status'])
        return Response(self.get_serializer(inquiry).data)

    @action(detail=True, methods=['post'])
    def responses(self, request, pk=None):
        inquiry = self.get_object()
        serializer = BookingResponseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        response = services.add_response(request.user, inquiry, **serializer.validated_data)
        return Response(BookingResponseSerializer(response).data, status=status.HTTP_201_CREATED)
