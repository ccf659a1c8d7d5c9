"""Booking inquiry operations. Inquiries never touch tour requests or bids."""
import logging

from django.db import transaction
from django.utils import timezone

from bidding.exceptions import InvalidTransition, NotFound, Unauthorized
from bidding.models import Artist, Venue

from .models import BookingInquiry, BookingResponse, PartyType

logger = logging.getLogger(__name__)

PARTY_MODELS = {
    PartyType.ARTIST.value: Artist,
    PartyType.VENUE.value: Venue,
}


def get_party(party_type, party_id):
    model = PARTY_MODELS[str(party_type)]
    try:
        return model.objects.get(pk=party_id)
    except model.DoesNotExist:
        raise NotFound(f"{str(party_type).capitalize()} {party_id} not found.")


def owns_party(actor, party_type, party_id):
    if actor is None:
        return False
    if actor.is_superuser:
        return True
    return PARTY_MODELS[str(party_type)].objects.filter(pk=party_id, owner=actor).exists()


def is_participant(actor, inquiry):
    return (owns_party(actor, inquiry.inquirer_type, inquiry.inquirer_id)
            or owns_party(actor, inquiry.recipient_type, inquiry.recipient_id))


def _require_recipient(actor, inquiry):
    if not owns_party(actor, inquiry.recipient_type, inquiry.recipient_id):
        raise Unauthorized("Only the recipient of this inquiry can do that.")


def _require_participant(actor, inquiry):
    if not is_participant(actor, inquiry):
        raise Unauthorized("You are not part of this inquiry.")


def create_inquiry(actor, inquirer_type, inquirer_id, recipient_type, recipient_id, **details):
    if inquirer_type == recipient_type:
        raise InvalidTransition("Inquiries go between an artist and a venue.")
    inquirer = get_party(inquirer_type, inquirer_id)
    recipient = get_party(recipient_type, recipient_id)
    if not owns_party(actor, inquirer_type, inquirer_id):
        raise Unauthorized(f"You do not manage {inquirer.name}.")

    inquiry = BookingInquiry.objects.create(
        direction=f"{inquirer_type!s}-to-{recipient_type!s}",
        inquirer_type=str(inquirer_type),
        inquirer_id=inquirer.pk,
        inquirer_name=details.pop('inquirer_name', '') or inquirer.name,
        recipient_type=str(recipient_type),
        recipient_id=recipient.pk,
        recipient_name=recipient.name,
        status=BookingInquiry.Status.PENDING,
        created_by=actor,
        **details,
    )
    logger.info("Booking inquiry %s sent from %s to %s", inquiry.pk, inquiry.inquirer_name, inquiry.recipient_name)
    return inquiry


def mark_viewed(actor, inquiry):
    _require_recipient(actor, inquiry)
    changed = []
    if inquiry.viewed_at is None:
        inquiry.viewed_at = timezone.now()
        changed.append('viewed_at')
    # Only a fresh inquiry moves to viewed; later states stay put
    if inquiry.status == BookingInquiry.Status.PENDING:
        inquiry.status = BookingInquiry.Status.VIEWED
        changed.append('status')
    if changed:
        inquiry.save(update_fields=changed + ['updated_at'])
    return inquiry


def update_status(actor, inquiry, status):
    _require_participant(actor, inquiry)
    if status not in BookingInquiry.Status.values:
        raise InvalidTransition(f"Unknown inquiry status '{status}'.")
    inquiry.status = status
    fields = ['status']
    if status == BookingInquiry.Status.RESPONDED:
        inquiry.responded_at = timezone.now()
        fields.append('responded_at')
    inquiry.save(update_fields=fields + ['updated_at'])
    logger.info("Booking inquiry %s is now %s", inquiry.pk, status)
    return inquiry


@transaction.atomic
def add_response(actor, inquiry, **fields):
    _require_participant(actor, inquiry)
    if not fields.get('responder_name'):
        fields['responder_name'] = actor.get_full_name() or actor.get_username()
    if not fields.get('responder_email'):
        fields['responder_email'] = actor.email or ''
    response = BookingResponse.objects.create(inquiry=inquiry, responder=actor, **fields)

    inquiry.status = BookingInquiry.Status.RESPONDED
    inquiry.responded_at = response.created_at
    inquiry.save(update_fields=['status', 'responded_at', 'updated_at'])
    logger.info("Response %s (%s) added to inquiry %s", response.pk, response.status, inquiry.pk)
    return response
