"""Tests for fleet registry management and driver presence."""

import pytest
from django.contrib.auth.hashers import check_password

from apps.bookings.domain.entities import TripStatus
from apps.fleet.domain.entities import DriverStatus
from apps.fleet.domain.events import DriverWentOffline, DriverWentOnline
from apps.fleet.seed import DRIVERS, VEHICLE_TYPES
from shared.domain.exceptions import ConflictError, NotFoundError, ValidationError
from shared.domain.value_objects import GeoPosition


def test_seed_fleet_is_loaded(services):
    drivers = services.fleet.list_drivers()
    vehicle_types = {vt.name: vt for vt in services.fleet.list_vehicle_types()}

    assert len(drivers) == len(DRIVERS)
    assert all(d.status == DriverStatus.ONLINE for d in drivers)
    assert set(vehicle_types) == {entry["name"] for entry in VEHICLE_TYPES}
    assert vehicle_types["Standard Sedan"].capacity == 4
    assert len(vehicle_types["Standard Sedan"].vehicles) == 5
    assert [v.plate for v in vehicle_types["SUV"].vehicles] == ["MP20TA1969"]


def test_driver_secret_is_hashed(services):
    driver = services.fleet.get_driver("ravi")

    assert driver.credential_secret != "password123"
    assert check_password("password123", driver.credential_secret)
    assert "password123" not in repr(driver)


def test_add_driver_starts_online(services):
    driver = services.fleet.add_driver("Neha Joshi", "9123456780", "Neha", "s3cret-pass")

    assert driver.username == "neha"
    assert driver.is_online
    assert services.fleet.get_driver("NEHA").name == "Neha Joshi"


def test_add_driver_rejects_duplicates(services):
    with pytest.raises(ConflictError):
        services.fleet.add_driver("Someone Else", "9000000000", "ravi", "pw123456")
    with pytest.raises(ConflictError):
        services.fleet.add_driver("Ravi Kumar", "9000000000", "ravi2", "pw123456")
    with pytest.raises(ValidationError):
        services.fleet.add_driver("", "9000000000", "x", "pw123456")


def test_add_vehicle_plate_unique_across_types(services):
    with pytest.raises(ConflictError):
        services.fleet.add_vehicle("SUV", "MP20TA7001", "Toyota Innova")

    vehicle = services.fleet.add_vehicle("SUV", " mp20ta2000 ", "Toyota Innova")

    assert vehicle.plate == "MP20TA2000"
    assert "MP20TA2000" in [v.plate for v in services.fleet.get_vehicle_type("SUV").vehicles]


def test_add_vehicle_unknown_type(services):
    with pytest.raises(NotFoundError):
        services.fleet.add_vehicle("Bus", "MP20BB0001", "Force Traveller")


def test_add_vehicle_type(services):
    services.fleet.add_vehicle_type("Tempo Traveller", 12)

    assert services.fleet.get_vehicle_type("Tempo Traveller").capacity == 12
    with pytest.raises(ConflictError):
        services.fleet.add_vehicle_type("Tempo Traveller", 12)
    with pytest.raises(ValidationError):
        services.fleet.add_vehicle_type("Bike", 0)


def test_remove_vehicle_blocked_while_assigned(services, booking_factory):
    booking = booking_factory()
    services.assignment.assign(booking.confirmation_number, "Ravi Kumar", "MP20TA7001")

    with pytest.raises(ConflictError):
        services.fleet.remove_vehicle("MP20TA7001")

    services.lifecycle.cancel(booking.confirmation_number)
    services.fleet.remove_vehicle("MP20TA7001")

    with pytest.raises(NotFoundError):
        services.fleet.remove_vehicle("MP20TA7001")


def test_remove_driver_blocked_while_assigned(services, booking_factory):
    booking = booking_factory()
    services.assignment.assign(booking.confirmation_number, "Priya Patel", "MP20TA7002")

    with pytest.raises(ConflictError):
        services.fleet.remove_driver("priya")

    services.lifecycle.cancel(booking.confirmation_number)
    services.fleet.remove_driver("priya")

    with pytest.raises(NotFoundError):
        services.fleet.get_driver("priya")


def test_go_offline_clears_position_and_syncs_bookings(services, booking_factory):
    received = []
    services.bus.register_event_handler(DriverWentOffline, received.append)
    services.fleet.go_online("amit", GeoPosition(lat=23.18, lng=79.95))
    booking = booking_factory()
    services.assignment.assign(booking.confirmation_number, "Amit Singh", "MP20TA7003")

    driver = services.fleet.go_offline("amit")

    assert driver.status == DriverStatus.OFFLINE
    assert driver.position is None
    assert services.queries.get(booking.confirmation_number).driver_status == TripStatus.OFFLINE
    assert not services.tracking.is_running(booking.confirmation_number)
    assert [e.username for e in received] == ["amit"]


def test_go_online_stores_position_and_resumes(services, booking_factory):
    received = []
    services.bus.register_event_handler(DriverWentOnline, received.append)
    booking = booking_factory()
    services.assignment.assign(booking.confirmation_number, "Amit Singh", "MP20TA7003")
    services.fleet.go_offline("amit")

    driver = services.fleet.go_online("amit", GeoPosition(lat=23.18, lng=79.95))

    assert driver.position == GeoPosition(lat=23.18, lng=79.95)
    assert services.queries.get(booking.confirmation_number).driver_status == TripStatus.ONLINE
    assert services.tracking.is_running(booking.confirmation_number)
    assert len(received) == 1


def test_going_online_twice_emits_once(services):
    received = []
    services.bus.register_event_handler(DriverWentOnline, received.append)

    services.fleet.go_online("ravi")

    assert received == []


def test_update_position_requires_online(services):
    services.fleet.update_position("sunita", GeoPosition(lat=23.1, lng=79.9))
    assert services.fleet.get_driver("sunita").position == GeoPosition(lat=23.1, lng=79.9)

    services.fleet.go_offline("sunita")
    with pytest.raises(ConflictError):
        services.fleet.update_position("sunita", GeoPosition(lat=23.1, lng=79.9))


def test_arrived_booking_is_not_reseeded(services, clock, booking_factory):
    booking = booking_factory()
    services.assignment.assign(booking.confirmation_number, "Ravi Kumar", "MP20TA7001")
    clock.advance(30)
    services.tracking.advance(booking.confirmation_number)

    services.fleet.go_offline("ravi")
    services.fleet.go_online("ravi")

    assert services.queries.get(booking.confirmation_number).driver_status == TripStatus.ARRIVED
    assert not services.tracking.is_running(booking.confirmation_number)
