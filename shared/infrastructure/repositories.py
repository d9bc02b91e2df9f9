"""
In-memory repositories

Repositories hand out detached copies of stored entities and stage writes.
Staged entities reach the store only when the owning unit of work commits,
which makes every write path all-or-nothing.
"""

from copy import deepcopy
from typing import Dict, Generic, Iterator, List, Optional, Tuple, TypeVar, TYPE_CHECKING

from shared.infrastructure.store import EntityStore

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.bookings.domain.entities import Booking
    from apps.fleet.domain.entities import Driver, Vehicle, VehicleType

T = TypeVar('T')

_DELETED = object()


class InMemoryRepository(Generic[T]):
    """
    Identity-mapped view over one store registry

    Within a unit of work, `get()` returns the same copy for the same key, so
    an entity can be loaded, mutated and saved without re-reading it.
    """

    registry_name: str = ''

    def __init__(self, store: EntityStore):
        self._store = store
        self._loaded: Dict[str, T] = {}
        self._staged: Dict[str, object] = {}

    @property
    def _registry(self) -> dict:
        return self._store.registry(self.registry_name)

    def get(self, key: str) -> Optional[T]:
        if key in self._staged:
            staged = self._staged[key]
            return None if staged is _DELETED else staged
        if key in self._loaded:
            return self._loaded[key]
        entity = self._registry.get(key)
        if entity is None:
            return None
        copy = deepcopy(entity)
        self._loaded[key] = copy
        return copy

    def exists(self, key: str) -> bool:
        return self.get(key) is not None

    def keys(self) -> List[str]:
        keys = list(self._registry.keys())
        keys.extend(k for k in self._staged if k not in self._registry)
        return [k for k in keys if self._staged.get(k) is not _DELETED]

    def list(self) -> List[T]:
        return [self.get(key) for key in self.keys()]

    def __iter__(self) -> Iterator[T]:
        return iter(self.list())

    def save(self, entity: T):
        """Stage entity for commit (insert or update)"""
        self._staged[entity.identity] = entity

    add = save

    def remove(self, key: str):
        self._staged[key] = _DELETED

    def staged(self) -> List[Tuple[str, object]]:
        return list(self._staged.items())

    def apply(self):
        """Write staged entities into the store. Caller holds the store lock."""
        registry = self._registry
        for key, entity in self._staged.items():
            if entity is _DELETED:
                registry.pop(key, None)
            else:
                registry[key] = deepcopy(entity)
        self.discard()

    def discard(self):
        self._staged.clear()
        self._loaded.clear()


class BookingRepository(InMemoryRepository['Booking']):
    registry_name = 'bookings'

    def active(self) -> List['Booking']:
        """Bookings that still hold their driver/vehicle (not cancelled)"""
        return [b for b in self.list() if not b.is_cancelled]


class DriverRepository(InMemoryRepository['Driver']):
    registry_name = 'drivers'

    def get_by_name(self, name: str) -> Optional['Driver']:
        return next((d for d in self.list() if d.name == name), None)


class VehicleTypeRepository(InMemoryRepository['VehicleType']):
    registry_name = 'vehicle_types'

    def find_vehicle(self, plate: str) -> Tuple[Optional['VehicleType'], Optional['Vehicle']]:
        for vehicle_type in self.list():
            vehicle = vehicle_type.get_vehicle(plate)
            if vehicle is not None:
                return vehicle_type, vehicle
        return None, None
