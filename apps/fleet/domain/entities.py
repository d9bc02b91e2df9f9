"""
Fleet Domain Entities

- Vehicle: A single car identified by its plate
- VehicleType: A bucket of vehicles sharing a capacity (e.g. Standard Sedan, SUV)
- Driver: A chauffeur who can be assigned to bookings
- DriverStatus: Presence toggle controlled from the driver app
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from apps.fleet.domain.events import DriverWentOffline, DriverWentOnline
from shared.domain.base import Aggregate, Entity
from shared.domain.value_objects import GeoPosition


class DriverStatus(Enum):
    """Driver presence as set by the driver app toggle"""
    ONLINE = 'online'
    OFFLINE = 'offline'


@dataclass(frozen=True)
class Vehicle:
    """Vehicle snapshot; also copied onto bookings at assignment time"""
    plate: str
    model: str

    def __str__(self):
        return f"{self.model} ({self.plate})"


@dataclass(eq=False)
class VehicleType(Entity):
    """
    Vehicle type bucket

    Key invariant: a plate appears at most once inside a bucket. Uniqueness
    across buckets is enforced by the fleet service, which sees all of them.
    """
    name: str
    capacity: int
    vehicles: List[Vehicle] = field(default_factory=list)

    def __post_init__(self):
        if not self.name:
            raise ValueError("Vehicle type name is required")
        if self.capacity < 1:
            raise ValueError("Vehicle type capacity must be at least 1")

    @property
    def identity(self) -> str:
        return self.name

    def get_vehicle(self, plate: str) -> Vehicle | None:
        return next((v for v in self.vehicles if v.plate == plate), None)

    def add_vehicle(self, vehicle: Vehicle):
        if self.get_vehicle(vehicle.plate):
            raise ValueError(f"Vehicle {vehicle.plate} already belongs to {self.name}")
        self.vehicles.append(vehicle)
        self.touch()

    def remove_vehicle(self, plate: str) -> Vehicle:
        vehicle = self.get_vehicle(plate)
        if vehicle is None:
            raise ValueError(f"Vehicle {plate} does not belong to {self.name}")
        self.vehicles.remove(vehicle)
        self.touch()
        return vehicle

    def __str__(self):
        return f"{self.name} (Max {self.capacity})"


@dataclass(eq=False)
class Driver(Aggregate):
    """
    Driver Aggregate Root

    Key invariants:
    - position is only present while the driver is online
    - credential_secret is always a password hash, never the raw secret
    """
    name: str
    phone: str
    username: str
    credential_secret: str = field(default='', repr=False)
    status: DriverStatus = DriverStatus.ONLINE
    position: GeoPosition | None = None

    @property
    def identity(self) -> str:
        return self.username

    @property
    def is_online(self) -> bool:
        return self.status == DriverStatus.ONLINE

    def go_online(self, position: GeoPosition | None = None):
        """
        Switch the driver online (OFFLINE -> ONLINE)

        Events: DriverWentOnline (only on an actual transition)
        """
        was_online = self.is_online
        self.status = DriverStatus.ONLINE
        if position is not None:
            self.position = position
        self.touch()

        if not was_online:
            self.add_event(DriverWentOnline(
                aggregate_id=self.username,
                username=self.username,
                driver_name=self.name,
            ))

    def go_offline(self):
        """
        Switch the driver offline (ONLINE -> OFFLINE), clearing the position

        Events: DriverWentOffline (only on an actual transition)
        """
        was_online = self.is_online
        self.status = DriverStatus.OFFLINE
        self.position = None
        self.touch()

        if was_online:
            self.add_event(DriverWentOffline(
                aggregate_id=self.username,
                username=self.username,
                driver_name=self.name,
            ))

    def move_to(self, position: GeoPosition):
        if not self.is_online:
            raise ValueError(f"Driver {self.username} is offline; position is not tracked")
        self.position = position
        self.touch()

    def __str__(self):
        return f"Driver {self.name} ({self.status.value})"
