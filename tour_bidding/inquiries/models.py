from django.db import models
from django.contrib.auth.models import User


class PartyType(models.TextChoices):
    ARTIST = 'artist', 'Artist'
    VENUE = 'venue', 'Venue'


class BookingInquiry(models.Model):
    """A direct message from an artist to a venue, or the other way round."""

    class Direction(models.TextChoices):
        ARTIST_TO_VENUE = 'artist-to-venue', 'Artist to venue'
        VENUE_TO_ARTIST = 'venue-to-artist', 'Venue to artist'

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        VIEWED = 'viewed', 'Viewed'
        RESPONDED = 'responded', 'Responded'
        ACCEPTED = 'accepted', 'Accepted'
        DECLINED = 'declined', 'Declined'
        EXPIRED = 'expired', 'Expired'

    direction = models.CharField(max_length=20, choices=Direction.choices)

    inquirer_type = models.CharField(max_length=10, choices=PartyType.choices)
    inquirer_id = models.PositiveIntegerField()
    inquirer_name = models.CharField(max_length=100)
    inquirer_email = models.EmailField()
    inquirer_phone = models.CharField(max_length=30, blank=True)

    recipient_type = models.CharField(max_length=10, choices=PartyType.choices)
    recipient_id = models.PositiveIntegerField()
    recipient_name = models.CharField(max_length=100)

    proposed_date = models.DateField()
    alternative_dates = models.JSONField(default=list, blank=True)
    event_type = models.CharField(max_length=50, default='concert')
    expected_attendance = models.PositiveIntegerField(null=True, blank=True)

    guarantee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    door_split = models.CharField(max_length=50, blank=True)
    ticket_price = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)

    message = models.TextField()
    riders = models.TextField(blank=True)

    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    viewed_at = models.DateTimeField(null=True, blank=True)
    responded_at = models.DateTimeField(null=True, blank=True)

    created_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='booking_inquiries')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        verbose_name_plural = 'booking inquiries'

    def __str__(self):
        return f"{self.inquirer_name} -> {self.recipient_name} ({self.proposed_date})"


class BookingResponse(models.Model):
    class Status(models.TextChoices):
        COUNTER_OFFER = 'counter-offer', 'Counter offer'
        ACCEPTED = 'accepted', 'Accepted'
        DECLINED = 'declined', 'Declined'
        MORE_INFO_NEEDED = 'more-info-needed', 'More info needed'

    inquiry = models.ForeignKey(BookingInquiry, on_delete=models.CASCADE, related_name='responses')
    responder = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='booking_responses')
    responder_name = models.CharField(max_length=100)
    responder_email = models.EmailField(blank=True)
    message = models.TextField()
    status = models.CharField(max_length=20, choices=Status.choices)

    # Counter-offer terms
    counter_date = models.DateField(null=True, blank=True)
    counter_guarantee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    counter_door_split = models.CharField(max_length=50, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"{self.responder_name}: {self.status}"
