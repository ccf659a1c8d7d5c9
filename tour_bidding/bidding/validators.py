from rest_framework import serializers


def validate_request_window(request_date=None, start_date=None, end_date=None):
    """A tour request names one date, or a start..end range, never both."""
    has_single = request_date is not None
    has_range = start_date is not None or end_date is not None

    if has_single and has_range:
        raise serializers.ValidationError("Give either a single request date or a date range, not both.")
    if not has_single and not has_range:
        raise serializers.ValidationError("A request date or a start and end date is required.")
    if has_range:
        if start_date is None or end_date is None:
            raise serializers.ValidationError("A date range needs both a start date and an end date.")
        if start_date > end_date:
            raise serializers.ValidationError("The start date must be on or before the end date.")


def validate_range(low, high, label):
    if low is not None and high is not None and low > high:
        raise serializers.ValidationError(f"Minimum {label} cannot be greater than maximum {label}.")
