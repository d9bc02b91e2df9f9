"""
Booking Domain Entities

Core business entities for the car-service booking domain:
- Booking: Main aggregate representing a guest's ride request
- BookingStatus: FSM states for booking lifecycle
- TripStatus: Simulated trip progress of the assigned driver
- PaymentStatus: Payment state tracking
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from apps.bookings.domain.events import (
    BookingAssigned,
    BookingCancelled,
    BookingPaid,
    DriverArrived,
)
from apps.fleet.domain.entities import Driver, Vehicle
from shared.domain.base import Aggregate
from shared.domain.exceptions import ConflictError
from shared.domain.value_objects import MapPoint


class BookingStatus(Enum):
    """
    Booking Status Finite State Machine

    State transitions:
    - CONFIRMED -> ASSIGNED (driver and vehicle assigned)
    - ASSIGNED -> ASSIGNED (re-assignment)
    - CONFIRMED -> CANCELLED
    - ASSIGNED -> CANCELLED
    CANCELLED is terminal.
    """
    CONFIRMED = 'confirmed'     # Created, waiting for a driver
    ASSIGNED = 'assigned'       # Driver and vehicle bound to the booking
    CANCELLED = 'cancelled'     # Terminal


class TripStatus(Enum):
    """Simulated trip progress: OFFLINE -> ONLINE -> ARRIVED within one trip"""
    OFFLINE = 'offline'
    ONLINE = 'online'
    ARRIVED = 'arrived'


class PaymentStatus(Enum):
    """Payment status tracking (PENDING -> PAID, terminal once paid)"""
    PENDING = 'pending'
    PAID = 'paid'


class ServiceType(Enum):
    PICKUP = 'pickup'
    DROPOFF = 'dropoff'


@dataclass(eq=False)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    Represents a guest's request for a hotel car at a given date and time.

    Key invariants:
    - confirmation_number and the request facts never change after creation
    - estimated_fare is fixed at creation
    - driver_name, driver_phone and assigned_vehicle are set and cleared together
    - CANCELLED is terminal and releases the driver/vehicle
    - trip_progress never decreases within one trip
    """

    # Identification
    confirmation_number: str

    # Request facts
    guest_name: str
    guest_phone: str
    location: str
    date: str
    time: str
    service_type: ServiceType
    vehicle_type: str
    estimated_fare: int

    # Decorative text from the confirmation text service (or fallback)
    confirmation_message: str = ''
    estimated_trip_duration: str = ''
    estimated_arrival_time: str = ''

    # Assignment
    driver_name: str | None = None
    driver_phone: str | None = None
    assigned_vehicle: Vehicle | None = None

    # Status tracking
    booking_status: BookingStatus = BookingStatus.CONFIRMED
    driver_status: TripStatus = TripStatus.OFFLINE
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_id: str | None = None

    # Trip simulation
    driver_position: MapPoint | None = None
    trip_progress: float = 0.0
    eta: str | None = None

    # Timestamps
    assigned_at: datetime | None = None
    cancelled_at: datetime | None = None
    paid_at: datetime | None = None
    arrived_at: datetime | None = None

    @property
    def identity(self) -> str:
        return self.confirmation_number

    @property
    def short_reference(self) -> str:
        """Last four characters, as shown in notifications"""
        return self.confirmation_number[-4:]

    @property
    def is_cancelled(self) -> bool:
        return self.booking_status == BookingStatus.CANCELLED

    @property
    def is_assigned(self) -> bool:
        return self.driver_name is not None

    @property
    def has_arrived(self) -> bool:
        return self.driver_status == TripStatus.ARRIVED

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    def holds(self, driver_name: str | None = None, plate: str | None = None) -> bool:
        """Check if this (non-cancelled) booking occupies the driver or vehicle"""
        if self.is_cancelled:
            return False
        if driver_name is not None and self.driver_name == driver_name:
            return True
        if plate is not None and self.assigned_vehicle is not None:
            return self.assigned_vehicle.plate == plate
        return False

    def assign(self, driver: Driver, vehicle: Vehicle):
        """
        Assign driver and vehicle (CONFIRMED/ASSIGNED -> ASSIGNED)

        Schedule conflicts are checked by the assignment service before this
        is called; the aggregate only guards its own state machine.
        Events: BookingAssigned
        """
        if self.is_cancelled:
            raise ConflictError(
                f"Booking {self.confirmation_number} is cancelled and cannot be assigned."
            )

        previous_driver = self.driver_name
        previous_plate = self.assigned_vehicle.plate if self.assigned_vehicle else None

        self.driver_name = driver.name
        self.driver_phone = driver.phone
        self.assigned_vehicle = vehicle
        self.driver_status = TripStatus.ONLINE if driver.is_online else TripStatus.OFFLINE
        self.booking_status = BookingStatus.ASSIGNED
        self.assigned_at = datetime.now()

        # A (re-)assignment starts a fresh trip
        self.driver_position = None
        self.trip_progress = 0.0
        self.eta = None
        self.arrived_at = None
        self.touch()

        self.add_event(BookingAssigned(
            aggregate_id=self.confirmation_number,
            confirmation_number=self.confirmation_number,
            driver_name=driver.name,
            vehicle_plate=vehicle.plate,
            previous_driver_name=previous_driver,
            previous_vehicle_plate=previous_plate,
        ))

    def cancel(self) -> bool:
        """
        Cancel booking (CONFIRMED/ASSIGNED -> CANCELLED)

        Idempotent: cancelling a cancelled booking changes nothing and
        returns False.
        Events: BookingCancelled
        """
        if self.is_cancelled:
            return False

        old_status = self.booking_status
        released_driver = self.driver_name
        released_plate = self.assigned_vehicle.plate if self.assigned_vehicle else None

        self.booking_status = BookingStatus.CANCELLED
        self.driver_name = None
        self.driver_phone = None
        self.assigned_vehicle = None
        self.driver_status = TripStatus.OFFLINE
        self.cancelled_at = datetime.now()
        self.touch()

        self.add_event(BookingCancelled(
            aggregate_id=self.confirmation_number,
            confirmation_number=self.confirmation_number,
            old_status=old_status.value,
            released_driver_name=released_driver,
            released_vehicle_plate=released_plate,
        ))
        return True

    def mark_paid(self, payment_id: str) -> bool:
        """
        Record payment (PENDING -> PAID)

        No-op (returns False) when already paid; the first payment id wins.
        Events: BookingPaid
        """
        if self.is_paid:
            return False

        self.payment_status = PaymentStatus.PAID
        self.payment_id = payment_id
        self.paid_at = datetime.now()
        self.touch()

        self.add_event(BookingPaid(
            aggregate_id=self.confirmation_number,
            confirmation_number=self.confirmation_number,
            payment_id=payment_id,
            amount=self.estimated_fare,
        ))
        return True

    def sync_driver_presence(self, online: bool) -> bool:
        """
        Re-seed trip status from the driver's toggle between trips

        Arrived and cancelled bookings are left alone.
        """
        if self.is_cancelled or self.has_arrived or not self.is_assigned:
            return False
        new_status = TripStatus.ONLINE if online else TripStatus.OFFLINE
        if new_status == self.driver_status:
            return False
        self.driver_status = new_status
        self.touch()
        return True

    def is_trackable(self) -> bool:
        """Check if a trip simulation may run for this booking"""
        return (
            not self.is_cancelled
            and self.is_assigned
            and not self.has_arrived
        )

    def record_progress(self, progress: float, position: MapPoint, eta: str):
        """
        Store one simulation sample

        Progress is clamped so it never moves backwards. Reaching 1.0 moves
        the trip to ARRIVED exactly once.
        Events: DriverArrived
        """
        if not self.is_trackable():
            raise ConflictError(
                f"Booking {self.confirmation_number} is not being tracked."
            )

        progress = max(self.trip_progress, min(progress, 1.0))
        self.trip_progress = progress
        self.driver_position = position
        self.eta = eta
        self.touch()

        if progress >= 1.0:
            self.driver_status = TripStatus.ARRIVED
            self.arrived_at = datetime.now()
            self.add_event(DriverArrived(
                aggregate_id=self.confirmation_number,
                confirmation_number=self.confirmation_number,
                driver_name=self.driver_name,
            ))
        else:
            self.driver_status = TripStatus.ONLINE

    def __str__(self):
        return f"Booking {self.confirmation_number} ({self.booking_status.value})"

    def __repr__(self):
        return (
            f"Booking(confirmation_number={self.confirmation_number}, "
            f"status={self.booking_status.value}, date={self.date}, time={self.time})"
        )
