"""Tests for the Booking aggregate state machine."""

import pytest

from apps.bookings.domain.entities import Booking, BookingStatus, ServiceType, TripStatus
from apps.bookings.domain.events import BookingAssigned, DriverArrived
from apps.bookings.domain.tracking import position_at
from apps.fleet.domain.entities import Driver, DriverStatus, Vehicle
from shared.domain.exceptions import ConflictError


@pytest.fixture
def booking() -> Booking:
    return Booking(
        confirmation_number="K7Q2ZD",
        guest_name="Asha Verma",
        guest_phone="9000000001",
        location="Jabalpur Airport",
        date="2030-05-01",
        time="10:00",
        service_type=ServiceType.PICKUP,
        vehicle_type="Standard Sedan",
        estimated_fare=590,
    )


@pytest.fixture
def driver() -> Driver:
    return Driver(name="Ravi Kumar", phone="9876543210", username="ravi")


VEHICLE = Vehicle(plate="MP20TA7001", model="Tata Tigor XM EV")


def test_assign_copies_driver_status(booking, driver):
    driver.status = DriverStatus.OFFLINE
    booking.assign(driver, VEHICLE)

    assert booking.booking_status == BookingStatus.ASSIGNED
    assert booking.driver_status == TripStatus.OFFLINE
    assert isinstance(booking.events[0], BookingAssigned)


def test_record_progress_never_moves_backwards(booking, driver):
    booking.assign(driver, VEHICLE)

    booking.record_progress(0.6, position_at(0.6), "approx. 6 mins")
    booking.record_progress(0.4, position_at(0.4), "approx. 9 mins")

    assert booking.trip_progress == 0.6


def test_arrival_emits_once_and_stops_tracking(booking, driver):
    booking.assign(driver, VEHICLE)
    booking.clear_events()

    booking.record_progress(1.0, position_at(1.0), "Arrived")

    assert booking.has_arrived
    assert [type(e) for e in booking.events] == [DriverArrived]
    assert not booking.is_trackable()
    with pytest.raises(ConflictError):
        booking.record_progress(1.0, position_at(1.0), "Arrived")


def test_cancel_then_assign_is_rejected(booking, driver):
    assert booking.cancel() is True
    assert booking.cancel() is False

    with pytest.raises(ConflictError):
        booking.assign(driver, VEHICLE)


def test_sync_driver_presence(booking, driver):
    assert booking.sync_driver_presence(True) is False  # not assigned yet

    booking.assign(driver, VEHICLE)
    assert booking.sync_driver_presence(False) is True
    assert booking.driver_status == TripStatus.OFFLINE
    assert booking.sync_driver_presence(False) is False


def test_entities_compare_by_identity(booking):
    other = Booking(
        confirmation_number="K7Q2ZD",
        guest_name="Someone Else",
        guest_phone="9",
        location="x",
        date="2030-01-01",
        time="09:00",
        service_type=ServiceType.DROPOFF,
        vehicle_type="SUV",
        estimated_fare=1,
    )
    assert booking == other
    assert hash(booking) == hash(other)
