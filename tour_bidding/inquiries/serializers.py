from rest_framework import serializers

from .models import BookingInquiry, BookingResponse, PartyType


class BookingResponseSerializer(serializers.ModelSerializer):
    class Meta:
        model = BookingResponse
        fields = [
            'id', 'inquiry', 'responder', 'responder_name', 'responder_email', 'message', 'status',
            'counter_date', 'counter_guarantee', 'counter_door_split', 'created_at',
        ]
        read_only_fields = ['inquiry', 'responder', 'created_at']
        extra_kwargs = {'responder_name': {'required': False}}

    def validate(self, data):
        if data.get('status') == BookingResponse.Status.COUNTER_OFFER and not any(
            data.get(name) for name in ('counter_date', 'counter_guarantee', 'counter_door_split')
        ):
            raise serializers.ValidationError("A counter-offer needs a counter date, guarantee or door split.")
        return data


class BookingInquirySerializer(serializers.ModelSerializer):
    responses = BookingResponseSerializer(many=True, read_only=True)
    inquirer_type = serializers.ChoiceField(choices=PartyType.choices)
    recipient_type = serializers.ChoiceField(choices=PartyType.choices)
    alternative_dates = serializers.ListField(child=serializers.DateField(), required=False)

    class Meta:
        model = BookingInquiry
        fields = [
            'id', 'direction', 'inquirer_type', 'inquirer_id', 'inquirer_name', 'inquirer_email', 'inquirer_phone',
            'recipient_type', 'recipient_id', 'recipient_name',
            'proposed_date', 'alternative_dates', 'event_type', 'expected_attendance',
            'guarantee', 'door_split', 'ticket_price', 'message', 'riders',
            'status', 'viewed_at', 'responded_at', 'created_at', 'updated_at', 'responses',
        ]
        read_only_fields = ['direction', 'recipient_name', 'status', 'viewed_at', 'responded_at', 'created_at', 'updated_at']
        extra_kwargs = {'inquirer_name': {'required': False}}

    def validate_alternative_dates(self, value):
        return [d.isoformat() for d in value]

    def validate(self, data):
        if data.get('inquirer_type') == data.get('recipient_type'):
            raise serializers.ValidationError("Inquiries go between an artist and a venue.")
        return data


class InquiryStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=BookingInquiry.Status.choices)
