import django_filters
from django.db.models import Q

from .models import Show, TourRequest, VenueBid


class TourRequestFilter(django_filters.FilterSet):
    artist = django_filters.NumberFilter(field_name='artist_id')
    # Requests whose window touches the given day
    on_date = django_filters.DateFilter(method='filter_on_date')

    class Meta:
        model = TourRequest
        fields = ['artist', 'status', 'flexibility', 'priority', 'age_restriction']

    def filter_on_date(self, queryset, name, value):
        return queryset.filter(
            Q(request_date=value)
            | Q(start_date__lte=value, end_date__gte=value)
        )


class VenueBidFilter(django_filters.FilterSet):
    # Plain id filters: bids keep the id of a deleted request
    tour_request = django_filters.NumberFilter(field_name='tour_request_id')
    venue = django_filters.NumberFilter(field_name='venue_id')

    class Meta:
        model = VenueBid
        fields = ['tour_request', 'venue', 'status']


class ShowFilter(django_filters.FilterSet):
    artist = django_filters.NumberFilter(field_name='artist_id')
    venue = django_filters.NumberFilter(field_name='venue_id')
    date_range = django_filters.DateFromToRangeFilter(field_name='date')

    class Meta:
        model = Show
        fields = ['artist', 'venue', 'date', 'status']
