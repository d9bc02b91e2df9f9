"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful unit-of-work commits.
"""

from dataclasses import dataclass

from shared.domain.base import DomainEvent


@dataclass
class BookingCreated(DomainEvent):
    """
    Event: A guest submitted a booking

    Triggers:
    - Notify the dispatch desk that a booking needs a driver
    """
    confirmation_number: str
    guest_name: str
    vehicle_type: str
    estimated_fare: int


@dataclass
class BookingAssigned(DomainEvent):
    """
    Event: Driver and vehicle bound to a booking (-> ASSIGNED)

    Triggers:
    - Notify the admin desk and the driver
    """
    confirmation_number: str
    driver_name: str
    vehicle_plate: str
    previous_driver_name: str | None = None
    previous_vehicle_plate: str | None = None


@dataclass
class BookingCancelled(DomainEvent):
    """
    Event: Booking was cancelled

    Triggers:
    - Free the driver and vehicle
    - Notify guest and desk
    """
    confirmation_number: str
    old_status: str  # Status before cancellation
    released_driver_name: str | None = None
    released_vehicle_plate: str | None = None


@dataclass
class BookingPaid(DomainEvent):
    """
    Event: Payment collaborator reported a successful payment
    """
    confirmation_number: str
    payment_id: str
    amount: int


@dataclass
class DriverArrived(DomainEvent):
    """
    Event: Trip simulation reached the pickup point (-> ARRIVED)

    Emitted exactly once per trip.
    """
    confirmation_number: str
    driver_name: str | None
