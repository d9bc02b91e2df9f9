"""
Assignment Service

Binds one driver and one vehicle to a booking. This is the CRITICAL use case
for preventing double bookings: no driver or vehicle may serve two
non-cancelled bookings whose trip windows overlap.

Strategy:
1. Open a unit of work (holds the store lock for the whole check-then-act)
2. Resolve booking, driver and vehicle
3. Reject offline drivers
4. Check every other non-cancelled booking for driver and vehicle overlaps
5. Commit the assignment (all fields at once) or nothing at all
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Callable, List, TYPE_CHECKING

from apps.bookings.domain.entities import Booking
from apps.bookings.domain.overlap import TRIP_DURATION, bookings_overlap, describe_window
from shared.domain.exceptions import ConflictError, NotFoundError, ValidationError

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.bookings.application.tracking import TrackingSimulator
    from shared.application.uow import InMemoryUnitOfWork

logger = logging.getLogger(__name__)


class AvailabilityState(Enum):
    AVAILABLE = 'available'
    OFFLINE = 'offline'
    CONFLICT = 'conflict'


@dataclass(frozen=True)
class ResourceAvailability:
    """One selectable driver or vehicle, annotated for the assignment UI"""
    key: str
    label: str
    state: AvailabilityState
    reason: str | None = None


@dataclass
class AssignmentOptions:
    confirmation_number: str
    drivers: List[ResourceAvailability] = field(default_factory=list)
    vehicles: List[ResourceAvailability] = field(default_factory=list)


class AssignmentService:
    """
    Validates and commits driver + vehicle assignments

    Re-assignment follows the same path; the booking's own current
    assignment never counts as a conflict.
    """

    def __init__(
        self,
        uow_factory: Callable[[], "InMemoryUnitOfWork"],
        tracking: "TrackingSimulator",
        trip_duration: timedelta = TRIP_DURATION,
    ):
        self.uow_factory = uow_factory
        self.tracking = tracking
        self.trip_duration = trip_duration

    def assign(self, confirmation_number: str, driver_name: str, vehicle_plate: str) -> Booking:
        """
        Assign a driver and vehicle to a booking

        Returns: snapshot of the updated Booking

        Raises:
            NotFoundError: unknown booking
            ValidationError: missing selection, unknown driver/vehicle,
                vehicle of another type
            ConflictError: cancelled booking, offline driver, overlapping
                booking for the driver or the vehicle
        """
        driver_name = (driver_name or '').strip()
        vehicle_plate = (vehicle_plate or '').strip()
        if not driver_name or not vehicle_plate:
            raise ValidationError("Please select both a driver and a vehicle.")

        with self.uow_factory() as uow:
            booking = uow.bookings.get(confirmation_number)
            if booking is None:
                raise NotFoundError(f"Booking {confirmation_number} not found.")

            driver = uow.drivers.get_by_name(driver_name)
            if driver is None:
                raise ValidationError(f"Driver '{driver_name}' does not exist.")

            vehicle_type, vehicle = uow.vehicle_types.find_vehicle(vehicle_plate)
            if vehicle is None:
                raise ValidationError(f"Vehicle '{vehicle_plate}' does not exist.")
            if vehicle_type.name != booking.vehicle_type:
                raise ValidationError(
                    f"Vehicle {vehicle_plate} is a {vehicle_type.name}, "
                    f"but the booking requires a {booking.vehicle_type}."
                )

            if booking.is_cancelled:
                raise ConflictError(
                    f"Booking {confirmation_number} is cancelled and cannot be assigned."
                )

            if not driver.is_online:
                raise ConflictError(
                    f"Driver {driver.name} is currently offline and cannot be assigned.",
                    reason="offline",
                )

            others = self._other_active_bookings(uow, booking)

            clash = self._first_overlap(booking, others, lambda b: b.holds(driver_name=driver.name))
            if clash is not None:
                reason = describe_window(clash, self.trip_duration)
                raise ConflictError(
                    f"Driver {driver.name} has an overlapping booking "
                    f"(#{clash.short_reference}, {reason}).",
                    reason=reason,
                )

            clash = self._first_overlap(booking, others, lambda b: b.holds(plate=vehicle.plate))
            if clash is not None:
                reason = describe_window(clash, self.trip_duration)
                raise ConflictError(
                    f"Vehicle {vehicle.plate} has an overlapping booking "
                    f"(#{clash.short_reference}, {reason}).",
                    reason=reason,
                )

            booking.assign(driver, vehicle)
            uow.bookings.save(booking)
            # New driver or vehicle means a new trip; the old one must not tick past this commit
            previous_trip = self.tracking.retire(confirmation_number)

        logger.info(
            f"Booking {confirmation_number} assigned to {booking.driver_name} "
            f"with vehicle {vehicle_plate}"
        )

        self.tracking.reap(previous_trip)
        if driver.is_online:
            self.tracking.start(confirmation_number)

        return booking

    def availability(self, confirmation_number: str) -> AssignmentOptions:
        """
        Annotate every driver and every vehicle of the booking's type

        Conflict wins over offline so the desk sees why a driver is busy.
        """
        with self.uow_factory() as uow:
            booking = uow.bookings.get(confirmation_number)
            if booking is None:
                raise NotFoundError(f"Booking {confirmation_number} not found.")

            others = [
                other for other in self._other_active_bookings(uow, booking)
                if bookings_overlap(booking, other, self.trip_duration)
            ]

            driver_conflicts: dict[str, str] = {}
            vehicle_conflicts: dict[str, str] = {}
            for other in others:
                if other.driver_name and other.driver_name not in driver_conflicts:
                    driver_conflicts[other.driver_name] = describe_window(other, self.trip_duration)
                if other.assigned_vehicle and other.assigned_vehicle.plate not in vehicle_conflicts:
                    vehicle_conflicts[other.assigned_vehicle.plate] = describe_window(
                        other, self.trip_duration
                    )

            options = AssignmentOptions(confirmation_number=confirmation_number)

            for driver in uow.drivers.list():
                if driver.name in driver_conflicts:
                    state, reason = AvailabilityState.CONFLICT, driver_conflicts[driver.name]
                elif not driver.is_online:
                    state, reason = AvailabilityState.OFFLINE, "Offline"
                else:
                    state, reason = AvailabilityState.AVAILABLE, None
                options.drivers.append(ResourceAvailability(
                    key=driver.name,
                    label=driver.name,
                    state=state,
                    reason=reason,
                ))

            vehicle_type = uow.vehicle_types.get(booking.vehicle_type)
            for vehicle in (vehicle_type.vehicles if vehicle_type else []):
                conflict = vehicle_conflicts.get(vehicle.plate)
                options.vehicles.append(ResourceAvailability(
                    key=vehicle.plate,
                    label=str(vehicle),
                    state=AvailabilityState.CONFLICT if conflict else AvailabilityState.AVAILABLE,
                    reason=conflict,
                ))

        return options

    def _other_active_bookings(self, uow: "InMemoryUnitOfWork", booking: Booking) -> List[Booking]:
        return [
            other for other in uow.bookings.active()
            if other.confirmation_number != booking.confirmation_number
        ]

    def _first_overlap(
        self,
        booking: Booking,
        others: List[Booking],
        holds: Callable[[Booking], bool],
    ) -> Booking | None:
        for other in others:
            if holds(other) and bookings_overlap(booking, other, self.trip_duration):
                return other
        return None
