# Convert bidding models to and from JSON for the API.
# Serializers only check the shape of incoming data; the negotiation rules
# (windows, holds, availability) are enforced by the engine.

from rest_framework import serializers
from .models import Artist, Venue, TourRequest, VenueBid, Show
from .validators import validate_request_window, validate_range


class ArtistSerializer(serializers.ModelSerializer):
    owner = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = Artist
        fields = ['id', 'name', 'genre', 'city', 'state', 'owner']


class VenueSerializer(serializers.ModelSerializer):
    owner = serializers.PrimaryKeyRelatedField(read_only=True)
    unavailable_dates = serializers.ListField(child=serializers.DateField(), required=False)
    blackout_dates = serializers.ListField(child=serializers.DateField(), required=False)

    class Meta:
        model = Venue
        fields = [
            'id', 'name', 'city', 'state', 'capacity', 'age_restriction', 'owner',
            'unavailable_dates', 'blackout_dates',
        ]

    # JSONField stores ISO strings, not date objects
    def validate_unavailable_dates(self, value):
        return sorted({d.isoformat() for d in value})

    def validate_blackout_dates(self, value):
        return sorted({d.isoformat() for d in value})


class TourRequestSerializer(serializers.ModelSerializer):
    artist_id = serializers.PrimaryKeyRelatedField(queryset=Artist.objects.all(), source='artist')
    artist_name = serializers.CharField(read_only=True)
    bid_count = serializers.SerializerMethodField()

    class Meta:
        model = TourRequest
        fields = [
            'id', 'artist_id', 'artist_name', 'title', 'description', 'location', 'genres',
            'request_date', 'start_date', 'end_date', 'flexibility',
            'expected_draw_min', 'expected_draw_max', 'expected_draw_description',
            'equipment', 'guarantee_min', 'guarantee_max', 'accepts_door_deals', 'merchandising',
            'travel_method', 'lodging', 'age_restriction', 'priority',
            'status', 'bid_count', 'created_at', 'updated_at',
        ]
        read_only_fields = ['status', 'created_at', 'updated_at']

    def get_bid_count(self, obj):
        return obj.bids.count()

    def validate(self, data):
        if self.instance is None:
            validate_request_window(data.get('request_date'), data.get('start_date'), data.get('end_date'))
        validate_range(self._current(data, 'guarantee_min'), self._current(data, 'guarantee_max'), 'guarantee')
        validate_range(self._current(data, 'expected_draw_min'), self._current(data, 'expected_draw_max'), 'draw')
        return data

    # A partial update compares against the stored value of the bound it leaves out
    def _current(self, data, name):
        if name in data:
            return data[name]
        return getattr(self.instance, name, None)


class TourRequestUpdateSerializer(TourRequestSerializer):
    """Edits after posting may not move the window or change the owner."""

    artist_id = serializers.PrimaryKeyRelatedField(source='artist', read_only=True)

    class Meta(TourRequestSerializer.Meta):
        read_only_fields = TourRequestSerializer.Meta.read_only_fields + ['request_date', 'start_date', 'end_date']


class VenueBidSerializer(serializers.ModelSerializer):
    tour_request = serializers.IntegerField(source='tour_request_id', read_only=True)
    venue_id = serializers.IntegerField(read_only=True)
    venue_name = serializers.CharField(read_only=True)

    class Meta:
        model = VenueBid
        fields = [
            'id', 'tour_request', 'venue_id', 'venue_name',
            'proposed_date', 'alternative_dates', 'guarantee', 'door_split', 'door_minimum_guarantee',
            'ticket_price_advance', 'ticket_price_door', 'capacity', 'age_restriction', 'equipment_provided',
            'load_in', 'soundcheck', 'doors_open', 'show_time', 'curfew',
            'promotion', 'lodging', 'billing_position', 'lineup_position', 'set_length',
            'other_acts', 'billing_notes', 'message', 'additional_terms',
            'status', 'hold_position', 'held_at', 'held_until',
            'accepted_at', 'declined_at', 'declined_reason', 'cancelled_at', 'cancelled_reason', 'expired_at',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class BidSubmissionSerializer(serializers.ModelSerializer):
    tour_request = serializers.IntegerField()
    venue = serializers.PrimaryKeyRelatedField(queryset=Venue.objects.all())
    alternative_dates = serializers.ListField(child=serializers.DateField(), required=False)
    capacity = serializers.IntegerField(required=False)

    class Meta:
        model = VenueBid
        fields = [
            'tour_request', 'venue',
            'proposed_date', 'alternative_dates', 'guarantee', 'door_split', 'door_minimum_guarantee',
            'ticket_price_advance', 'ticket_price_door', 'capacity', 'age_restriction', 'equipment_provided',
            'load_in', 'soundcheck', 'doors_open', 'show_time', 'curfew',
            'promotion', 'lodging', 'billing_position', 'lineup_position', 'set_length',
            'other_acts', 'billing_notes', 'message', 'additional_terms',
        ]

    def validate_alternative_dates(self, value):
        return [d.isoformat() for d in value]


class BidActionSerializer(serializers.Serializer):
    ACTIONS = ['hold', 'accept', 'decline', 'cancel']

    action = serializers.ChoiceField(choices=ACTIONS)
    reason = serializers.CharField(required=False, allow_blank=True)


class ShowSerializer(serializers.ModelSerializer):
    artist_id = serializers.PrimaryKeyRelatedField(queryset=Artist.objects.all(), source='artist')
    venue_id = serializers.PrimaryKeyRelatedField(queryset=Venue.objects.all(), source='venue')
    artist_name = serializers.CharField(source='artist.name', read_only=True)
    venue_name = serializers.CharField(source='venue.name', read_only=True)
    bid_id = serializers.IntegerField(read_only=True)
    tour_request_id = serializers.IntegerField(read_only=True)
    capacity = serializers.IntegerField(required=False, min_value=1)

    class Meta:
        model = Show
        fields = [
            'id', 'artist_id', 'artist_name', 'venue_id', 'venue_name', 'date', 'city', 'state',
            'capacity', 'age_restriction', 'guarantee', 'door_split', 'door_minimum_guarantee', 'ticket_price',
            'load_in', 'soundcheck', 'doors_open', 'show_time', 'curfew', 'notes',
            'status', 'bid_id', 'tour_request_id', 'created_at',
        ]
        read_only_fields = ['status', 'created_at']


class AcceptResultSerializer(serializers.Serializer):
    bid = VenueBidSerializer()
    tour_request = TourRequestSerializer()
    show = ShowSerializer()
    cancelled_bids = VenueBidSerializer(many=True)
