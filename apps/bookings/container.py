"""
Service container

Wires the entity store, message bus and use-case services together. The API
uses one process-wide container (`get_services()`); tests build their own
with `build_services()` and a fake clock.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable

from django.conf import settings  # type: ignore

from apps.bookings.application.assignment import AssignmentService
from apps.bookings.application.lifecycle import LifecycleManager
from apps.bookings.application.queries import BookingQueries
from apps.bookings.application.tracking import TrackingSimulator
from apps.bookings.confirmation_text import ConfirmationTextService
from apps.fleet.application.services import FleetService
from apps.notifications.services import NotificationCenter
from shared.application.message_bus import MessageBus
from shared.application.uow import InMemoryUnitOfWork
from shared.infrastructure.store import EntityStore

logger = logging.getLogger(__name__)


@dataclass
class Services:
    store: EntityStore
    bus: MessageBus
    notifications: NotificationCenter
    tracking: TrackingSimulator
    lifecycle: LifecycleManager
    assignment: AssignmentService
    fleet: FleetService
    queries: BookingQueries

    def uow(self) -> InMemoryUnitOfWork:
        return InMemoryUnitOfWork(self.store, self.bus)

    def shutdown(self):
        self.tracking.shutdown()


def build_services(
    clock: Callable[[], float] = time.monotonic,
    text_service: ConfirmationTextService | None = None,
    run_threads: bool = True,
    seed: bool | None = None,
    deliver_notifications: bool = True,
) -> Services:
    store = EntityStore()
    bus = MessageBus()

    def uow_factory() -> InMemoryUnitOfWork:
        return InMemoryUnitOfWork(store, bus)

    notifications = NotificationCenter(
        max_size=settings.NOTIFICATION_FEED_SIZE,
        deliver=deliver_notifications,
    )
    notifications.register_handlers(bus)

    tracking = TrackingSimulator(
        uow_factory,
        clock=clock,
        tick_interval=settings.TRACKING_TICK_SECONDS,
        trip_seconds=settings.TRACKING_TRIP_SECONDS,
        run_threads=run_threads,
    )

    services = Services(
        store=store,
        bus=bus,
        notifications=notifications,
        tracking=tracking,
        lifecycle=LifecycleManager(
            uow_factory,
            tracking,
            text_service=text_service if text_service is not None else ConfirmationTextService(),
        ),
        assignment=AssignmentService(
            uow_factory,
            tracking,
            trip_duration=timedelta(minutes=settings.TRIP_WINDOW_MINUTES),
        ),
        fleet=FleetService(uow_factory, tracking),
        queries=BookingQueries(uow_factory),
    )

    if settings.FLEET_SEED_ENABLED if seed is None else seed:
        from apps.fleet.seed import load_initial_fleet

        load_initial_fleet(services.fleet)

    return services


_services: Services | None = None
_services_lock = threading.Lock()


def get_services() -> Services:
    """Process-wide container, built on first use"""
    global _services
    with _services_lock:
        if _services is None:
            _services = build_services()
            logger.info("Dispatch services initialized")
        return _services


def set_services(services: Services | None):
    """Install a container (tests) or drop the current one"""
    global _services
    with _services_lock:
        previous, _services = _services, services
    if previous is not None and previous is not services:
        previous.shutdown()


def reset_services():
    set_services(None)
