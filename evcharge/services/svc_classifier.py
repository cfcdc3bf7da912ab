from datetime import datetime
from typing import Dict, Iterable, List
from evcharge.configuration.clock import as_utc
from evcharge.models.mod_booking import Booking, BookingCategory, BookingStatus


def classify_booking(booking: Booking, now: datetime) -> BookingCategory:
    """
    Display bucket of a booking at `now`.

    Cancelled bookings are always CANCELLED. Otherwise a booking is UPCOMING
    only while its date is strictly later than `now`; a date equal to `now`
    is already PAST. Completed bookings are PAST. Naive datetimes are local
    wall-clock time, as everywhere else in the service.
    """
    if booking.status == BookingStatus.CANCELLED:
        return BookingCategory.CANCELLED
    if booking.status == BookingStatus.CONFIRMED and as_utc(booking.date) > as_utc(now):
        return BookingCategory.UPCOMING
    return BookingCategory.PAST


def partition_bookings(bookings: Iterable[Booking], now: datetime) -> Dict[BookingCategory, List[Booking]]:
    """Group bookings into the three display buckets, keeping their order."""
    groups = {category: [] for category in BookingCategory}
    for booking in bookings:
        groups[classify_booking(booking, now)].append(booking)
    return groups
