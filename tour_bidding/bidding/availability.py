"""
Venue date availability.

These functions only look at what they are given: the venue's own blocked
date lists and the shows already booked for it. Callers fetch the shows.
Dates are calendar days; time of day is never considered, so "today" is
available unless the venue has blocked it.
"""
from datetime import date

BLACKOUT = 'blackout'
UNAVAILABLE = 'unavailable'
BOOKED = 'booked'

# Show statuses that occupy a venue's date
BLOCKING_SHOW_STATUSES = ('confirmed', 'accepted', 'hold')


def _as_date(value):
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _date_set(values):
    return {_as_date(v) for v in (values or []) if v}


def blocking_reason(venue, on_date, shows=()):
    """Return why on_date is blocked for venue, or None if the date is free."""
    on_date = _as_date(on_date)

    if on_date in _date_set(venue.blackout_dates):
        return BLACKOUT
    if on_date in _date_set(venue.unavailable_dates):
        return UNAVAILABLE

    for show in shows:
        if show.venue_id != venue.id:
            continue
        if show.status in BLOCKING_SHOW_STATUSES and _as_date(show.date) == on_date:
            return BOOKED
    return None


def is_date_available(venue, on_date, shows=()):
    return blocking_reason(venue, on_date, shows) is None
