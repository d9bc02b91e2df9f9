"""
Fleet Service

Driver and vehicle registry management plus the driver presence toggle.

Driver presence ripples into bookings: going online re-seeds the trip status
of the driver's open bookings and starts their simulations, going offline
does the opposite. Simulations are started/stopped only after the unit of
work has committed.
"""

from __future__ import annotations

import logging
from typing import Callable, List, TYPE_CHECKING

from django.contrib.auth.hashers import make_password  # type: ignore

from apps.fleet.domain.entities import Driver, Vehicle, VehicleType
from shared.domain.exceptions import ConflictError, NotFoundError, ValidationError
from shared.domain.value_objects import GeoPosition

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.bookings.application.tracking import TrackingSimulator
    from shared.application.uow import InMemoryUnitOfWork

logger = logging.getLogger(__name__)


class FleetService:
    """Registry and presence use cases for drivers, vehicles and vehicle types"""

    def __init__(
        self,
        uow_factory: Callable[[], "InMemoryUnitOfWork"],
        tracking: "TrackingSimulator",
    ):
        self.uow_factory = uow_factory
        self.tracking = tracking

    # ----- reads -----

    def list_drivers(self) -> List[Driver]:
        with self.uow_factory() as uow:
            return sorted(uow.drivers.list(), key=lambda d: d.name)

    def get_driver(self, username: str) -> Driver:
        with self.uow_factory() as uow:
            return self._get_driver(uow, username)

    def list_vehicle_types(self) -> List[VehicleType]:
        with self.uow_factory() as uow:
            return uow.vehicle_types.list()

    def get_vehicle_type(self, name: str) -> VehicleType:
        with self.uow_factory() as uow:
            vehicle_type = uow.vehicle_types.get(name)
        if vehicle_type is None:
            raise NotFoundError(f"Vehicle type '{name}' not found.")
        return vehicle_type

    # ----- vehicles -----

    def add_vehicle_type(self, name: str, capacity: int) -> VehicleType:
        name = (name or '').strip()
        if not name:
            raise ValidationError("Vehicle type name is required.")
        try:
            capacity = int(capacity)
        except (TypeError, ValueError):
            raise ValidationError("Capacity must be a whole number.")
        if capacity < 1:
            raise ValidationError("Capacity must be at least 1.")

        with self.uow_factory() as uow:
            if uow.vehicle_types.exists(name):
                raise ConflictError(f"Vehicle type '{name}' already exists.")
            vehicle_type = VehicleType(name=name, capacity=capacity)
            uow.vehicle_types.add(vehicle_type)

        logger.info(f"Vehicle type added: {vehicle_type}")
        return vehicle_type

    def add_vehicle(self, type_name: str, plate: str, model: str) -> Vehicle:
        """
        Add a vehicle to a type bucket

        Raises:
            ValidationError: missing plate/model
            NotFoundError: unknown vehicle type
            ConflictError: plate already registered under any type
        """
        plate = (plate or '').strip().upper()
        model = (model or '').strip()
        if not plate or not model:
            raise ValidationError("Plate and model are required.")

        with self.uow_factory() as uow:
            vehicle_type = uow.vehicle_types.get(type_name)
            if vehicle_type is None:
                raise NotFoundError(f"Vehicle type '{type_name}' not found.")

            owner, _ = uow.vehicle_types.find_vehicle(plate)
            if owner is not None:
                raise ConflictError(f"Vehicle {plate} is already registered under {owner.name}.")

            vehicle = Vehicle(plate=plate, model=model)
            vehicle_type.add_vehicle(vehicle)
            uow.vehicle_types.save(vehicle_type)

        logger.info(f"Vehicle {vehicle} added to {type_name}")
        return vehicle

    def remove_vehicle(self, plate: str) -> Vehicle:
        """
        Remove a vehicle from the fleet

        Raises:
            NotFoundError: unknown plate
            ConflictError: vehicle is assigned to a non-cancelled booking
        """
        with self.uow_factory() as uow:
            vehicle_type, vehicle = uow.vehicle_types.find_vehicle(plate)
            if vehicle is None:
                raise NotFoundError(f"Vehicle {plate} not found.")

            holder = next((b for b in uow.bookings.active() if b.holds(plate=plate)), None)
            if holder is not None:
                raise ConflictError(
                    f"Vehicle {plate} is assigned to booking #{holder.short_reference} "
                    f"and cannot be removed."
                )

            vehicle_type.remove_vehicle(plate)
            uow.vehicle_types.save(vehicle_type)

        logger.info(f"Vehicle {plate} removed from {vehicle_type.name}")
        return vehicle

    # ----- drivers -----

    def add_driver(self, name: str, phone: str, username: str, secret: str) -> Driver:
        """
        Register a driver (starts online)

        The secret is stored as a Django password hash.

        Raises:
            ValidationError: missing fields
            ConflictError: username or name already taken
        """
        name = (name or '').strip()
        phone = (phone or '').strip()
        username = (username or '').strip().lower()
        if not name or not phone or not username or not secret:
            raise ValidationError("Name, phone, username and password are required.")

        with self.uow_factory() as uow:
            if uow.drivers.exists(username):
                raise ConflictError(f"Username '{username}' is already taken.")
            if uow.drivers.get_by_name(name) is not None:
                raise ConflictError(f"A driver named '{name}' already exists.")

            driver = Driver(
                name=name,
                phone=phone,
                username=username,
                credential_secret=make_password(secret),
            )
            uow.drivers.add(driver)

        logger.info(f"Driver added: {driver.name} ({driver.username})")
        return driver

    def remove_driver(self, username: str) -> Driver:
        """
        Remove a driver

        Raises:
            NotFoundError: unknown username
            ConflictError: driver is assigned to a non-cancelled booking
        """
        with self.uow_factory() as uow:
            driver = self._get_driver(uow, username)
            holder = next(
                (b for b in uow.bookings.active() if b.holds(driver_name=driver.name)),
                None,
            )
            if holder is not None:
                raise ConflictError(
                    f"Driver {driver.name} is assigned to booking #{holder.short_reference} "
                    f"and cannot be removed."
                )
            uow.drivers.remove(driver.username)

        self.tracking.stop_for_driver(driver.name)
        logger.info(f"Driver removed: {driver.name} ({driver.username})")
        return driver

    # ----- presence -----

    def go_online(self, username: str, position: GeoPosition | None = None) -> Driver:
        """Switch a driver online and resume their open trips"""
        with self.uow_factory() as uow:
            driver = self._get_driver(uow, username)
            driver.go_online(position)
            uow.drivers.save(driver)
            self._sync_bookings(uow, driver)

        started = self.tracking.start_eligible(driver_name=driver.name)
        logger.info(
            f"Driver {driver.name} is online"
            + (f", resumed trips {', '.join(started)}" if started else "")
        )
        return driver

    def go_offline(self, username: str) -> Driver:
        """Switch a driver offline, clear position and pause their trips"""
        with self.uow_factory() as uow:
            driver = self._get_driver(uow, username)
            driver.go_offline()
            uow.drivers.save(driver)
            self._sync_bookings(uow, driver)

        self.tracking.stop_for_driver(driver.name)
        logger.info(f"Driver {driver.name} is offline")
        return driver

    def update_position(self, username: str, position: GeoPosition) -> Driver:
        """
        Store the latest geolocation sample

        Raises:
            NotFoundError: unknown username
            ConflictError: driver is offline
        """
        with self.uow_factory() as uow:
            driver = self._get_driver(uow, username)
            if not driver.is_online:
                raise ConflictError(
                    f"Driver {driver.name} is offline; position updates are ignored.",
                    reason="offline",
                )
            driver.move_to(position)
            uow.drivers.save(driver)

        logger.debug(f"Driver {driver.username} position {position.lat},{position.lng}")
        return driver

    def _sync_bookings(self, uow: "InMemoryUnitOfWork", driver: Driver):
        for booking in uow.bookings.active():
            if booking.driver_name == driver.name and booking.sync_driver_presence(driver.is_online):
                uow.bookings.save(booking)

    def _get_driver(self, uow: "InMemoryUnitOfWork", username: str) -> Driver:
        driver = uow.drivers.get((username or '').strip().lower())
        if driver is None:
            raise NotFoundError(f"Driver '{username}' not found.")
        return driver
