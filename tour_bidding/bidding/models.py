from django.db import models
from django.db.models import Q
from django.contrib.auth.models import User


class AgeRestriction(models.TextChoices):
    ALL_AGES = 'all-ages', 'All ages'
    EIGHTEEN_PLUS = '18+', '18+'
    TWENTY_ONE_PLUS = '21+', '21+'
    FLEXIBLE = 'flexible', 'Flexible'


class Artist(models.Model):
    name = models.CharField(max_length=100, unique=True)
    genre = models.CharField(max_length=100, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    owner = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='artists')

    def __str__(self):
        return self.name


class Venue(models.Model):
    name = models.CharField(max_length=100)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100, blank=True)
    capacity = models.PositiveIntegerField()
    age_restriction = models.CharField(max_length=10, choices=AgeRestriction.choices, default=AgeRestriction.ALL_AGES)
    owner = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='venues')

    # ISO date strings ("2025-06-01"); blackout dates are standing "never book" days,
    # unavailable dates are one-off closures
    unavailable_dates = models.JSONField(default=list, blank=True)
    blackout_dates = models.JSONField(default=list, blank=True)

    class Meta:
        unique_together = [('name', 'city')]

    def __str__(self):
        return f"{self.name} ({self.city})"


class TourRequest(models.Model):
    """An artist's solicitation for a show on a date or inside a date range."""

    class Status(models.TextChoices):
        ACTIVE = 'active', 'Active'
        COMPLETED = 'completed', 'Completed'
        CANCELLED = 'cancelled', 'Cancelled'
        PAUSED = 'paused', 'Paused'

    class Flexibility(models.TextChoices):
        EXACT_CITIES = 'exact-cities', 'Exact cities'
        REGION_FLEXIBLE = 'region-flexible', 'Region flexible'
        ROUTE_FLEXIBLE = 'route-flexible', 'Route flexible'

    class Priority(models.TextChoices):
        HIGH = 'high', 'High'
        MEDIUM = 'medium', 'Medium'
        LOW = 'low', 'Low'

    artist = models.ForeignKey(Artist, on_delete=models.CASCADE, related_name='tour_requests')
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    location = models.CharField(max_length=200, blank=True)
    genres = models.JSONField(default=list, blank=True)

    # Either request_date, or start_date..end_date
    request_date = models.DateField(null=True, blank=True)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    flexibility = models.CharField(max_length=20, choices=Flexibility.choices, default=Flexibility.EXACT_CITIES)

    expected_draw_min = models.PositiveIntegerField(null=True, blank=True)
    expected_draw_max = models.PositiveIntegerField(null=True, blank=True)
    expected_draw_description = models.CharField(max_length=255, blank=True)

    equipment = models.JSONField(default=dict, blank=True)
    guarantee_min = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    guarantee_max = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    accepts_door_deals = models.BooleanField(default=True)
    merchandising = models.BooleanField(default=True)
    travel_method = models.CharField(max_length=50, blank=True)
    lodging = models.CharField(max_length=50, blank=True)
    age_restriction = models.CharField(max_length=10, choices=AgeRestriction.choices, default=AgeRestriction.FLEXIBLE)
    priority = models.CharField(max_length=10, choices=Priority.choices, default=Priority.MEDIUM)

    status = models.CharField(max_length=10, choices=Status.choices, default=Status.ACTIVE)
    created_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='created_tour_requests')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(request_date__isnull=False, start_date__isnull=True, end_date__isnull=True)
                    | Q(request_date__isnull=True, start_date__isnull=False, end_date__isnull=False)
                ),
                name='tour_request_single_date_or_range',
            ),
            models.CheckConstraint(
                condition=Q(start_date__isnull=True) | Q(start_date__lte=models.F('end_date')),
                name='tour_request_start_before_end',
            ),
        ]

    def __str__(self):
        return f"{self.title} ({self.artist.name})"

    @property
    def artist_name(self):
        return self.artist.name

    def window(self):
        """Return the (first, last) dates a bid may propose."""
        if self.request_date is not None:
            return self.request_date, self.request_date
        return self.start_date, self.end_date

    def covers(self, proposed_date):
        first, last = self.window()
        return first <= proposed_date <= last


class VenueBid(models.Model):
    """A venue's offer against a tour request."""

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        HOLD = 'hold', 'Hold'
        ACCEPTED = 'accepted', 'Accepted'
        DECLINED = 'declined', 'Declined'
        CANCELLED = 'cancelled', 'Cancelled'
        EXPIRED = 'expired', 'Expired'

    OPEN_STATUSES = (Status.PENDING, Status.HOLD)

    class BillingPosition(models.TextChoices):
        HEADLINER = 'headliner', 'Headliner'
        CO_HEADLINER = 'co-headliner', 'Co-headliner'
        DIRECT_SUPPORT = 'direct-support', 'Direct support'
        OPENER = 'opener', 'Opener'
        LOCAL_OPENER = 'local-opener', 'Local opener'

    # Bids outlive a deleted request, so the reference is kept without a DB constraint
    tour_request = models.ForeignKey(
        TourRequest, on_delete=models.DO_NOTHING, db_constraint=False, related_name='bids'
    )
    venue = models.ForeignKey(Venue, on_delete=models.CASCADE, related_name='bids')

    proposed_date = models.DateField()
    alternative_dates = models.JSONField(default=list, blank=True)
    guarantee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    door_split = models.CharField(max_length=50, blank=True)
    door_minimum_guarantee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    ticket_price_advance = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    ticket_price_door = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    capacity = models.IntegerField()
    age_restriction = models.CharField(max_length=10, choices=AgeRestriction.choices, default=AgeRestriction.ALL_AGES)
    equipment_provided = models.JSONField(default=dict, blank=True)

    load_in = models.TimeField(null=True, blank=True)
    soundcheck = models.TimeField(null=True, blank=True)
    doors_open = models.TimeField(null=True, blank=True)
    show_time = models.TimeField(null=True, blank=True)
    curfew = models.TimeField(null=True, blank=True)

    promotion = models.JSONField(default=dict, blank=True)
    lodging = models.JSONField(null=True, blank=True)

    billing_position = models.CharField(max_length=20, choices=BillingPosition.choices, blank=True)
    lineup_position = models.PositiveSmallIntegerField(null=True, blank=True)
    set_length = models.PositiveSmallIntegerField(null=True, blank=True)
    other_acts = models.TextField(blank=True)
    billing_notes = models.TextField(blank=True)
    message = models.TextField(blank=True)
    additional_terms = models.TextField(blank=True)

    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    hold_position = models.PositiveSmallIntegerField(null=True, blank=True)
    held_at = models.DateTimeField(null=True, blank=True)
    held_until = models.DateTimeField(null=True, blank=True)
    accepted_at = models.DateTimeField(null=True, blank=True)
    declined_at = models.DateTimeField(null=True, blank=True)
    declined_reason = models.TextField(blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancelled_reason = models.TextField(blank=True)
    expired_at = models.DateTimeField(null=True, blank=True)

    created_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='submitted_bids')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        # Held bids first in hold order, then the rest newest first
        ordering = [models.F('hold_position').asc(nulls_last=True), '-created_at']

    def __str__(self):
        return f"{self.venue.name} -> request {self.tour_request_id} on {self.proposed_date} ({self.status})"

    @property
    def venue_name(self):
        return self.venue.name

    @property
    def is_open(self):
        return self.status in self.OPEN_STATUSES


class Show(models.Model):
    """A confirmed booking, either the result of an accepted bid or entered directly."""

    class Status(models.TextChoices):
        CONFIRMED = 'confirmed', 'Confirmed'
        ACCEPTED = 'accepted', 'Accepted'
        HOLD = 'hold', 'Hold'
        CANCELLED = 'cancelled', 'Cancelled'

    BLOCKING_STATUSES = (Status.CONFIRMED, Status.ACCEPTED, Status.HOLD)

    artist = models.ForeignKey(Artist, on_delete=models.CASCADE, related_name='shows')
    venue = models.ForeignKey(Venue, on_delete=models.CASCADE, related_name='shows')
    date = models.DateField()
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    capacity = models.PositiveIntegerField()
    age_restriction = models.CharField(max_length=10, choices=AgeRestriction.choices, default=AgeRestriction.ALL_AGES)
    guarantee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    door_split = models.CharField(max_length=50, blank=True)
    door_minimum_guarantee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    ticket_price = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)

    load_in = models.TimeField(null=True, blank=True)
    soundcheck = models.TimeField(null=True, blank=True)
    doors_open = models.TimeField(null=True, blank=True)
    show_time = models.TimeField(null=True, blank=True)
    curfew = models.TimeField(null=True, blank=True)
    notes = models.TextField(blank=True)

    status = models.CharField(max_length=10, choices=Status.choices, default=Status.CONFIRMED)
    bid = models.OneToOneField(VenueBid, null=True, blank=True, on_delete=models.SET_NULL, related_name='show')
    tour_request = models.ForeignKey(
        TourRequest, null=True, blank=True, on_delete=models.DO_NOTHING, db_constraint=False, related_name='shows'
    )

    created_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='created_shows')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['date']

    def __str__(self):
        return f"{self.artist.name} @ {self.venue.name} on {self.date}"
