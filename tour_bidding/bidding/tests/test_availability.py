from datetime import date
from types import SimpleNamespace

from django.test import SimpleTestCase

from ..availability import BLACKOUT, BOOKED, UNAVAILABLE, blocking_reason, is_date_available


def venue(**fields):
    defaults = {'id': 1, 'blackout_dates': [], 'unavailable_dates': []}
    defaults.update(fields)
    return SimpleNamespace(**defaults)


def show(on_date, status='confirmed', venue_id=1):
    return SimpleNamespace(venue_id=venue_id, date=on_date, status=status)


class BlockingReasonTests(SimpleTestCase):
    """Availability works from the venue's own lists and the shows handed in."""

    def test_open_date(self):
        self.assertIsNone(blocking_reason(venue(), date(2025, 6, 3)))
        self.assertTrue(is_date_available(venue(), date(2025, 6, 3)))

    def test_blackout_date(self):
        self.assertEqual(blocking_reason(venue(blackout_dates=['2025-06-03']), date(2025, 6, 3)), BLACKOUT)

    def test_unavailable_date(self):
        self.assertEqual(blocking_reason(venue(unavailable_dates=['2025-06-03']), date(2025, 6, 3)), UNAVAILABLE)

    def test_blackout_wins_over_unavailable(self):
        both = venue(blackout_dates=['2025-06-03'], unavailable_dates=['2025-06-03'])

        self.assertEqual(blocking_reason(both, date(2025, 6, 3)), BLACKOUT)

    def test_accepts_iso_strings_and_timestamps(self):
        v = venue(unavailable_dates=['2025-06-03T00:00:00Z'])

        self.assertEqual(blocking_reason(v, '2025-06-03'), UNAVAILABLE)
        self.assertIsNone(blocking_reason(v, '2025-06-04'))

    def test_booked_by_blocking_show(self):
        for status in ('confirmed', 'accepted', 'hold'):
            self.assertEqual(blocking_reason(venue(), date(2025, 6, 3), [show(date(2025, 6, 3), status)]), BOOKED)

    def test_cancelled_show_does_not_block(self):
        self.assertIsNone(blocking_reason(venue(), date(2025, 6, 3), [show(date(2025, 6, 3), 'cancelled')]))

    def test_other_venue_show_does_not_block(self):
        self.assertIsNone(blocking_reason(venue(), date(2025, 6, 3), [show(date(2025, 6, 3), venue_id=2)]))

    def test_show_on_other_day_does_not_block(self):
        self.assertTrue(is_date_available(venue(), date(2025, 6, 3), [show(date(2025, 6, 4))]))
