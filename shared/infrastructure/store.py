"""
Entity Store

In-memory registries for bookings, drivers and vehicle types. This is the
single source of truth of the dispatch core. Nothing outside a unit of work
touches these dictionaries: readers and writers go through
`shared.application.uow.InMemoryUnitOfWork`, which serializes access with the
store lock and hands out detached copies.

The store is volatile by design; a durable backend only has to provide the
same registries and lock semantics.
"""

import threading
from typing import Dict, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.bookings.domain.entities import Booking
    from apps.fleet.domain.entities import Driver, VehicleType


class EntityStore:
    """Registries keyed by natural identity, guarded by one re-entrant lock."""

    def __init__(self):
        self.lock = threading.RLock()
        self.bookings: Dict[str, 'Booking'] = {}
        self.drivers: Dict[str, 'Driver'] = {}
        self.vehicle_types: Dict[str, 'VehicleType'] = {}

    def registry(self, name: str) -> dict:
        return getattr(self, name)

    def __repr__(self):
        return (
            f"EntityStore(bookings={len(self.bookings)}, drivers={len(self.drivers)}, "
            f"vehicle_types={len(self.vehicle_types)})"
        )
