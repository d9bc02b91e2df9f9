"""
Booking Lifecycle Manager

Use cases that move a booking through its state machine:
- create: guest submission -> CONFIRMED
- cancel: CONFIRMED/ASSIGNED -> CANCELLED (terminal, idempotent)
- mark_paid: PENDING -> PAID (orthogonal to the booking status)

Assignment (-> ASSIGNED) lives in the assignment service.
"""

from __future__ import annotations

import logging
import secrets
import string
from dataclasses import dataclass
from typing import Callable, TYPE_CHECKING

from apps.bookings.confirmation_text import (
    ConfirmationDetails,
    ConfirmationTextService,
    fallback_details,
    is_valid_confirmation_code,
)
from apps.bookings.domain.entities import Booking, ServiceType
from apps.bookings.domain.events import BookingCreated
from apps.bookings.domain.fares import estimate_fare
from shared.domain.exceptions import ConflictError, NotFoundError, ValidationError

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.bookings.application.tracking import TrackingSimulator
    from shared.application.uow import InMemoryUnitOfWork

logger = logging.getLogger(__name__)

CONFIRMATION_ALPHABET = string.ascii_uppercase + string.digits
CONFIRMATION_LENGTH = 6
MAX_NUMBER_ATTEMPTS = 50

REQUIRED_FIELDS = ("guest_name", "guest_phone", "location", "date", "time")


@dataclass
class BookingRequest:
    """Creation request as supplied by the guest form"""
    guest_name: str
    guest_phone: str
    location: str
    date: str
    time: str
    service_type: str = ServiceType.PICKUP.value
    vehicle_type: str = "Standard Sedan"

    def normalized(self) -> "BookingRequest":
        return BookingRequest(
            guest_name=(self.guest_name or "").strip(),
            guest_phone=(self.guest_phone or "").strip(),
            location=(self.location or "").strip(),
            date=(self.date or "").strip(),
            time=(self.time or "").strip(),
            service_type=(self.service_type or ServiceType.PICKUP.value).strip().lower(),
            vehicle_type=(self.vehicle_type or "").strip(),
        )


def generate_confirmation_number() -> str:
    """Random 6-character alphanumeric code, e.g. 'K7Q2ZD'"""
    return "".join(secrets.choice(CONFIRMATION_ALPHABET) for _ in range(CONFIRMATION_LENGTH))


class LifecycleManager:
    """
    Owns the booking state machine

    Every transition is one unit of work; the store is never touched
    directly.
    """

    def __init__(
        self,
        uow_factory: Callable[[], "InMemoryUnitOfWork"],
        tracking: "TrackingSimulator",
        text_service: ConfirmationTextService | None = None,
        number_generator: Callable[[], str] = generate_confirmation_number,
    ):
        self.uow_factory = uow_factory
        self.tracking = tracking
        self.text_service = text_service
        self.number_generator = number_generator

    def create(self, request: BookingRequest) -> Booking:
        """
        Create a booking from a guest request

        Returns: snapshot of the created Booking

        Raises:
            ValidationError: missing fields, unknown vehicle or service type
        """
        request = request.normalized()
        missing = [name for name in REQUIRED_FIELDS if not getattr(request, name)]
        if missing:
            raise ValidationError(
                f"Please fill out all required fields: {', '.join(missing)}."
            )

        try:
            service_type = ServiceType(request.service_type)
        except ValueError:
            raise ValidationError(
                f"Unknown service type '{request.service_type}'. Use 'pickup' or 'dropoff'."
            )

        # Fixed once; never recomputed for this booking
        fare = estimate_fare(request.location, request.vehicle_type)

        # Network call stays outside the store lock
        details = self._confirmation_details(request)

        with self.uow_factory() as uow:
            if not uow.vehicle_types.exists(request.vehicle_type):
                raise ValidationError(f"Unknown vehicle type '{request.vehicle_type}'.")

            confirmation_number = self._issue_number(uow, details.confirmation_number)

            booking = Booking(
                confirmation_number=confirmation_number,
                guest_name=request.guest_name,
                guest_phone=request.guest_phone,
                location=request.location,
                date=request.date,
                time=request.time,
                service_type=service_type,
                vehicle_type=request.vehicle_type,
                estimated_fare=fare,
                confirmation_message=details.confirmation_message,
                estimated_trip_duration=details.estimated_trip_duration,
                estimated_arrival_time=details.estimated_arrival_time,
            )
            booking.add_event(BookingCreated(
                aggregate_id=confirmation_number,
                confirmation_number=confirmation_number,
                guest_name=booking.guest_name,
                vehicle_type=booking.vehicle_type,
                estimated_fare=fare,
            ))
            uow.bookings.add(booking)
            created = uow.bookings.get(confirmation_number)

        logger.info(
            f"Booking created: {created.confirmation_number} for {created.guest_name}, "
            f"{created.date} {created.time}, fare {created.estimated_fare}"
        )
        return created

    def cancel(self, confirmation_number: str) -> Booking:
        """
        Cancel a booking and release its driver/vehicle

        Idempotent: an already cancelled booking is returned unchanged.
        The trip simulation is stopped once the cancellation is committed.

        Raises:
            NotFoundError: unknown confirmation number
        """
        with self.uow_factory() as uow:
            booking = self._get(uow, confirmation_number)
            changed = booking.cancel()
            if changed:
                uow.bookings.save(booking)

        self.tracking.stop(confirmation_number)

        if changed:
            logger.info(f"Booking {confirmation_number} cancelled")
        else:
            logger.debug(f"Booking {confirmation_number} already cancelled")
        return booking

    def mark_paid(self, confirmation_number: str, payment_id: str) -> Booking:
        """
        Record a payment reported by the payment collaborator

        Silently keeps the first payment id if the booking is already paid.

        Raises:
            NotFoundError: unknown confirmation number
            ValidationError: empty payment id
        """
        payment_id = (payment_id or "").strip()
        if not payment_id:
            raise ValidationError("Payment id is required.")

        with self.uow_factory() as uow:
            booking = self._get(uow, confirmation_number)
            if booking.mark_paid(payment_id):
                uow.bookings.save(booking)
                logger.info(f"Booking {confirmation_number} paid ({payment_id})")
            else:
                logger.info(
                    f"Booking {confirmation_number} already paid ({booking.payment_id}), "
                    f"ignoring payment {payment_id}"
                )
        return booking

    def _get(self, uow: "InMemoryUnitOfWork", confirmation_number: str) -> Booking:
        booking = uow.bookings.get(confirmation_number)
        if booking is None:
            raise NotFoundError(f"Booking {confirmation_number} not found.")
        return booking

    def _confirmation_details(self, request: BookingRequest) -> ConfirmationDetails:
        details = None
        if self.text_service is not None:
            details = self.text_service.generate(request)
        if details is None:
            return fallback_details(request)

        fallback = fallback_details(request)
        return ConfirmationDetails(
            confirmation_number=details.confirmation_number,
            confirmation_message=details.confirmation_message,
            estimated_trip_duration=details.estimated_trip_duration or fallback.estimated_trip_duration,
            estimated_arrival_time=details.estimated_arrival_time or fallback.estimated_arrival_time,
        )

    def _issue_number(self, uow: "InMemoryUnitOfWork", proposed: str | None) -> str:
        """Unique among every booking ever created (bookings are never deleted)"""
        if is_valid_confirmation_code(proposed) and not uow.bookings.exists(proposed):
            return proposed

        for _ in range(MAX_NUMBER_ATTEMPTS):
            candidate = self.number_generator()
            if not uow.bookings.exists(candidate):
                return candidate

        raise ConflictError("Could not issue a confirmation number, please retry.")
