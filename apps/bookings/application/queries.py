"""
Booking Queries

Read models for the admin desk, the driver app and the guest lookup.
Every query runs inside a unit of work, so it sees one consistent snapshot
and returns detached copies that callers may keep.
"""

from __future__ import annotations

from datetime import date as date_cls
from typing import Callable, List, TYPE_CHECKING

from apps.bookings.domain.entities import Booking, BookingStatus
from shared.domain.exceptions import NotFoundError, ValidationError

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from shared.application.uow import InMemoryUnitOfWork

SCOPE_CURRENT = 'current'
SCOPE_HISTORY = 'history'


def _pickup_sort_key(booking: Booking) -> str:
    # ISO date + HH:MM strings sort chronologically
    return f"{booking.date}T{booking.time}"


class BookingQueries:

    def __init__(self, uow_factory: Callable[[], "InMemoryUnitOfWork"]):
        self.uow_factory = uow_factory

    def get(self, confirmation_number: str) -> Booking:
        with self.uow_factory() as uow:
            booking = uow.bookings.get(confirmation_number)
        if booking is None:
            raise NotFoundError(f"Booking {confirmation_number} not found.")
        return booking

    def list(self, status: str | None = None) -> List[Booking]:
        """All bookings, newest created first, optionally by booking status"""
        wanted = self._parse_status(status)
        with self.uow_factory() as uow:
            bookings = uow.bookings.list()
        if wanted is not None:
            bookings = [b for b in bookings if b.booking_status == wanted]
        return sorted(bookings, key=lambda b: b.created_at, reverse=True)

    def for_guest_phone(self, phone: str) -> List[Booking]:
        """Guest lookup by phone number, newest pickup first"""
        phone = (phone or '').strip()
        if not phone:
            raise ValidationError("Phone number is required.")
        with self.uow_factory() as uow:
            bookings = [b for b in uow.bookings.list() if b.guest_phone == phone]
        return sorted(bookings, key=_pickup_sort_key, reverse=True)

    def for_driver(
        self,
        driver_name: str,
        scope: str = SCOPE_CURRENT,
        on_date: str | None = None,
        status: str | None = None,
        today: date_cls | None = None,
    ) -> List[Booking]:
        """
        Bookings assigned to a driver

        - current: pickup date today or later, not cancelled, earliest first
        - history: every booking of the driver, newest first, optionally
          filtered by pickup date and booking status
        """
        if scope not in (SCOPE_CURRENT, SCOPE_HISTORY):
            raise ValidationError(f"Unknown scope '{scope}'. Use 'current' or 'history'.")
        wanted = self._parse_status(status)

        with self.uow_factory() as uow:
            bookings = [b for b in uow.bookings.list() if b.driver_name == driver_name]

        if scope == SCOPE_CURRENT:
            today_iso = (today or date_cls.today()).isoformat()
            bookings = [b for b in bookings if not b.is_cancelled and b.date >= today_iso]
            return sorted(bookings, key=_pickup_sort_key)

        if on_date:
            bookings = [b for b in bookings if b.date == on_date]
        if wanted is not None:
            bookings = [b for b in bookings if b.booking_status == wanted]
        return sorted(bookings, key=_pickup_sort_key, reverse=True)

    def on_day(self, day: str) -> List[Booking]:
        """Non-cancelled bookings picked up on a calendar day, by time"""
        with self.uow_factory() as uow:
            bookings = [
                b for b in uow.bookings.active()
                if b.date == day
            ]
        return sorted(bookings, key=_pickup_sort_key)

    def _parse_status(self, status: str | None) -> BookingStatus | None:
        if not status:
            return None
        try:
            return BookingStatus(status.lower())
        except ValueError:
            raise ValidationError(
                f"Unknown booking status '{status}'. "
                f"Use one of: {', '.join(s.value for s in BookingStatus)}."
            )
