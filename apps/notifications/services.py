"""Notification feed fed by dispatch domain events."""

from __future__ import annotations

import itertools
import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Deque, List, TYPE_CHECKING

from apps.bookings.domain.events import (
    BookingAssigned,
    BookingCancelled,
    BookingCreated,
    BookingPaid,
    DriverArrived,
)
from apps.fleet.domain.events import DriverWentOffline, DriverWentOnline

if TYPE_CHECKING:  # pragma: no cover
    from shared.application.message_bus import MessageBus

logger = logging.getLogger(__name__)


class NotificationKind:
    BOOKING_CREATED = 'booking_created'
    DRIVER_ASSIGNED = 'driver_assigned'
    BOOKING_CANCELLED = 'booking_cancelled'
    PAYMENT_RECEIVED = 'payment_received'
    DRIVER_ARRIVED = 'driver_arrived'
    DRIVER_ONLINE = 'driver_online'
    DRIVER_OFFLINE = 'driver_offline'


@dataclass
class Notification:
    id: int
    kind: str
    message: str
    confirmation_number: str | None = None
    created_at: datetime = field(default_factory=datetime.now)
    is_read: bool = False

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'kind': self.kind,
            'message': self.message,
            'confirmation_number': self.confirmation_number,
            'created_at': self.created_at.isoformat(),
            'is_read': self.is_read,
        }


def _short(confirmation_number: str) -> str:
    return confirmation_number[-4:]


class NotificationCenter:
    """
    Bounded in-memory feed, newest first

    Every pushed notification is also handed to the Celery delivery task.
    Delivery problems are logged and never reach the code that triggered
    the notification.
    """

    def __init__(self, max_size: int = 50, deliver: bool = True):
        self.max_size = max_size
        self.deliver = deliver
        self._items: Deque[Notification] = deque(maxlen=max_size)
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def push(self, kind: str, message: str, confirmation_number: str | None = None) -> Notification:
        with self._lock:
            notification = Notification(
                id=next(self._ids),
                kind=kind,
                message=message,
                confirmation_number=confirmation_number,
            )
            self._items.appendleft(notification)

        logger.info(f"Notification: {message}")
        if self.deliver:
            self._dispatch(notification)
        return notification

    def list(self, unread_only: bool = False) -> List[Notification]:
        with self._lock:
            items = list(self._items)
        if unread_only:
            items = [n for n in items if not n.is_read]
        return items

    def unread_count(self) -> int:
        return len(self.list(unread_only=True))

    def mark_read(self, notification_id: int) -> Notification | None:
        with self._lock:
            for notification in self._items:
                if notification.id == notification_id:
                    notification.is_read = True
                    return notification
        return None

    def mark_all_read(self) -> int:
        with self._lock:
            unread = [n for n in self._items if not n.is_read]
            for notification in unread:
                notification.is_read = True
        return len(unread)

    def clear(self):
        with self._lock:
            self._items.clear()

    def _dispatch(self, notification: Notification):
        from .tasks import deliver_notification

        try:
            deliver_notification.delay(notification.to_dict())
        except Exception as e:
            logger.error(f"Failed to queue notification {notification.id}: {e}", exc_info=True)

    # ----- domain event handlers -----

    def on_booking_created(self, event: BookingCreated):
        self.push(
            NotificationKind.BOOKING_CREATED,
            f"New booking #{_short(event.confirmation_number)} from {event.guest_name}.",
            event.confirmation_number,
        )

    def on_booking_assigned(self, event: BookingAssigned):
        self.push(
            NotificationKind.DRIVER_ASSIGNED,
            f"Driver assigned to booking #{_short(event.confirmation_number)}",
            event.confirmation_number,
        )

    def on_booking_cancelled(self, event: BookingCancelled):
        self.push(
            NotificationKind.BOOKING_CANCELLED,
            f"Booking #{_short(event.confirmation_number)} has been cancelled.",
            event.confirmation_number,
        )

    def on_booking_paid(self, event: BookingPaid):
        self.push(
            NotificationKind.PAYMENT_RECEIVED,
            f"Payment received for booking #{_short(event.confirmation_number)}.",
            event.confirmation_number,
        )

    def on_driver_arrived(self, event: DriverArrived):
        self.push(
            NotificationKind.DRIVER_ARRIVED,
            f"Driver for booking #{_short(event.confirmation_number)} has arrived.",
            event.confirmation_number,
        )

    def on_driver_went_online(self, event: DriverWentOnline):
        self.push(NotificationKind.DRIVER_ONLINE, f"Driver {event.driver_name} is now online.")

    def on_driver_went_offline(self, event: DriverWentOffline):
        self.push(NotificationKind.DRIVER_OFFLINE, f"Driver {event.driver_name} is now offline.")

    def register_handlers(self, bus: "MessageBus"):
        bus.register_event_handler(BookingCreated, self.on_booking_created)
        bus.register_event_handler(BookingAssigned, self.on_booking_assigned)
        bus.register_event_handler(BookingCancelled, self.on_booking_cancelled)
        bus.register_event_handler(BookingPaid, self.on_booking_paid)
        bus.register_event_handler(DriverArrived, self.on_driver_arrived)
        bus.register_event_handler(DriverWentOnline, self.on_driver_went_online)
        bus.register_event_handler(DriverWentOffline, self.on_driver_went_offline)
