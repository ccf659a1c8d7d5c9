from django.contrib import admin

from .engine import NegotiationEngine
from .models import Artist, Venue, TourRequest, VenueBid, Show


@admin.register(Artist)
class ArtistAdmin(admin.ModelAdmin):
    list_display = ('name', 'genre', 'city', 'owner')
    search_fields = ('name', 'genre')


@admin.register(Venue)
class VenueAdmin(admin.ModelAdmin):
    list_display = ('name', 'city', 'state', 'capacity', 'owner')
    search_fields = ('name', 'city')


@admin.register(TourRequest)
class TourRequestAdmin(admin.ModelAdmin):
    list_display = ('title', 'artist', 'request_date', 'start_date', 'end_date', 'status')
    list_filter = ('status', 'flexibility', 'priority')
    search_fields = ('title', 'artist__name', 'location')

    # Deleting through the admin cancels open bids the same way the API does
    def delete_model(self, request, obj):
        NegotiationEngine().delete_tour_request(request.user, obj.pk)

    def delete_queryset(self, request, queryset):
        engine = NegotiationEngine()
        for tour_request_id in list(queryset.values_list('pk', flat=True)):
            engine.delete_tour_request(request.user, tour_request_id)


@admin.register(VenueBid)
class VenueBidAdmin(admin.ModelAdmin):
    list_display = ('id', 'venue', 'tour_request_id', 'proposed_date', 'status', 'hold_position')
    list_filter = ('status',)
    # State changes go through the negotiation engine
    readonly_fields = (
        'status', 'hold_position', 'held_at', 'held_until', 'accepted_at',
        'declined_at', 'declined_reason', 'cancelled_at', 'cancelled_reason', 'expired_at',
    )


@admin.register(Show)
class ShowAdmin(admin.ModelAdmin):
    list_display = ('artist', 'venue', 'date', 'status', 'bid')
    list_filter = ('status',)
    date_hierarchy = 'date'
