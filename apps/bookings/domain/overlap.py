"""
Overlap Detector

A booking occupies its driver and vehicle for a fixed window of
`TRIP_DURATION` starting at the pickup date/time. Two bookings conflict when
their windows intersect (half-open, so back-to-back trips are fine).

Malformed date/time strings never raise here: a pair with an unparseable
side is reported as "no conflict".
"""

from datetime import datetime, timedelta
from typing import Optional, TYPE_CHECKING

from shared.domain.value_objects import TripWindow

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.bookings.domain.entities import Booking

TRIP_DURATION = timedelta(minutes=90)


def parse_pickup(date: str, time: str) -> Optional[datetime]:
    """Combine ISO date (YYYY-MM-DD) and time (HH:MM[:SS]), None if malformed"""
    if not date or not time:
        return None
    try:
        start = datetime.fromisoformat(f"{date.strip()}T{time.strip()}")
    except (TypeError, ValueError):
        return None
    # Pickup times are wall-clock local times; offsets are not part of the format
    if start.tzinfo is not None:
        return None
    return start


def trip_window(booking: 'Booking', duration: timedelta = TRIP_DURATION) -> Optional[TripWindow]:
    start = parse_pickup(booking.date, booking.time)
    if start is None:
        return None
    return TripWindow(start, start + duration)


def bookings_overlap(
    booking_a: 'Booking',
    booking_b: 'Booking',
    duration: timedelta = TRIP_DURATION,
) -> bool:
    """
    Check if two bookings' trip windows intersect

    Symmetric: bookings_overlap(a, b) == bookings_overlap(b, a).
    """
    window_a = trip_window(booking_a, duration)
    if window_a is None:
        return False

    window_b = trip_window(booking_b, duration)
    if window_b is None:
        return False

    return window_a.overlaps_with(window_b)


def describe_window(booking: 'Booking', duration: timedelta = TRIP_DURATION) -> str:
    """Human-readable occupancy label, e.g. 'Booked 10:00–11:30'"""
    window = trip_window(booking, duration)
    if window is None:
        return f"Booked {booking.time}"
    return f"Booked {window}"
