"""
Unit of Work Pattern

Manages store transactions and ensures that domain events
are published only after successful transaction commit.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
import logging

from shared.application.message_bus import MessageBus
from shared.domain.base import DomainEvent
from shared.infrastructure.repositories import (
    BookingRepository,
    DriverRepository,
    VehicleTypeRepository,
)
from shared.infrastructure.store import EntityStore

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Abstract Unit of Work pattern"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        """Commit the transaction"""
        pass

    @abstractmethod
    def rollback(self):
        """Rollback the transaction"""
        pass

    @abstractmethod
    def collect_events(self, aggregate):
        """Collect events from aggregate root"""
        pass


class InMemoryUnitOfWork(AbstractUnitOfWork):
    """
    In-memory implementation of Unit of Work

    Holds the store lock for the whole `with` block, so a check-then-act
    sequence (validate against every booking, then write) is one critical
    section. Entities are loaded as copies, mutated, saved into the
    repositories and only written to the store on commit. Domain events are
    published after the lock is released.

    Usage:
        with InMemoryUnitOfWork(store, bus) as uow:
            # Load aggregate
            booking = uow.bookings.get(confirmation_number)

            # Execute domain logic
            booking.cancel()

            # Save changes
            uow.bookings.save(booking)

            # Transaction commits here
        # Events are published after commit
    """

    def __init__(self, store: EntityStore, bus: Optional[MessageBus] = None):
        self.store = store
        self.bus = bus
        self._events: List[DomainEvent] = []
        self.bookings = BookingRepository(store)
        self.drivers = DriverRepository(store)
        self.vehicle_types = VehicleTypeRepository(store)

    @property
    def _repositories(self):
        return (self.bookings, self.drivers, self.vehicle_types)

    def __enter__(self):
        """Start transaction"""
        self.store.lock.acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Complete or rollback transaction"""
        events: List[DomainEvent] = []
        try:
            if exc_type is None:
                self.commit()
                events = self._events.copy()
            else:
                self.rollback()
        finally:
            self._events.clear()
            self.store.lock.release()

        if events:
            self._publish_events(events)

    def commit(self):
        """
        Commit staged entities to the store

        Events are collected from every staged aggregate and kept until
        the lock is released.
        """
        for repository in self._repositories:
            for _, entity in repository.staged():
                self.collect_events(entity)

        for repository in self._repositories:
            repository.apply()

        logger.debug(f"Committed unit of work with {len(self._events)} events")

    def rollback(self):
        """Rollback changes and discard events"""
        if self._events or any(repository.staged() for repository in self._repositories):
            logger.warning(f"Rolling back unit of work, discarding {len(self._events)} events")
        for repository in self._repositories:
            repository.discard()
        self._events.clear()

    def collect_events(self, aggregate):
        """
        Collect events from aggregate root

        Extracts all domain events from the aggregate and
        clears them from the aggregate.
        """
        if hasattr(aggregate, 'events'):
            new_events = aggregate.events
            if new_events:
                self._events.extend(new_events)
                aggregate.clear_events()
                logger.debug(
                    f"Collected {len(new_events)} events from "
                    f"{aggregate.__class__.__name__} ({aggregate.identity})"
                )

    def _publish_events(self, events: List[DomainEvent]):
        """
        Publish collected events to message bus

        Called after successful commit, outside the store lock.
        """
        if self.bus is None:
            return

        logger.info(f"Publishing {len(events)} domain events after commit")

        try:
            self.bus.publish_events(events)
        except Exception as e:
            logger.error(f"Error publishing events: {e}", exc_info=True)
            # State is already committed
