"""
Tracking Simulator

Runs one periodic task per trackable booking (driver assigned and online,
booking not cancelled, driver not yet arrived). Each tick advances the
scripted trip (see apps.bookings.domain.tracking) and writes the new
position/ETA through a unit of work. When the trip completes the booking
moves to ARRIVED, a DriverArrived event is published and the task ends.

Tasks are keyed by confirmation number; at most one exists per booking.
Lock order is always store lock -> simulator lock, never the reverse.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict, List, TYPE_CHECKING

from apps.bookings.domain.tracking import (
    SIMULATED_TRIP_SECONDS,
    position_at,
    simulated_eta,
    trip_progress,
)

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.bookings.domain.entities import Booking
    from shared.application.uow import InMemoryUnitOfWork

logger = logging.getLogger(__name__)


class TripSimulation:
    """Handle for one running trip simulation"""

    def __init__(self, confirmation_number: str, driver_name: str, started_at: float):
        self.confirmation_number = confirmation_number
        self.driver_name = driver_name
        self.started_at = started_at
        self.thread: threading.Thread | None = None
        self._stopped = threading.Event()

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    def stop(self):
        self._stopped.set()

    def wait(self, timeout: float) -> bool:
        """Sleep until the next tick; True if stopped meanwhile"""
        return self._stopped.wait(timeout)

    def __repr__(self):
        return f"TripSimulation({self.confirmation_number}, driver={self.driver_name})"


class TrackingSimulator:
    """
    Per-booking periodic trip simulation

    `clock` must be monotonic. With `run_threads=False` no background
    threads are spawned and ticks only happen through `advance()`, which is
    how tests drive the simulation deterministically.
    """

    def __init__(
        self,
        uow_factory: Callable[[], "InMemoryUnitOfWork"],
        clock: Callable[[], float] = time.monotonic,
        tick_interval: float = 1.0,
        trip_seconds: float = SIMULATED_TRIP_SECONDS,
        run_threads: bool = True,
        join_timeout: float = 5.0,
    ):
        self.uow_factory = uow_factory
        self.clock = clock
        self.tick_interval = tick_interval
        self.trip_seconds = trip_seconds
        self.run_threads = run_threads
        self.join_timeout = join_timeout
        self._tasks: Dict[str, TripSimulation] = {}
        self._lock = threading.Lock()

    # ----- queries -----

    def is_running(self, confirmation_number: str) -> bool:
        with self._lock:
            return confirmation_number in self._tasks

    def active(self) -> List[str]:
        with self._lock:
            return sorted(self._tasks)

    # ----- start / stop -----

    def start(self, confirmation_number: str) -> bool:
        """
        Start simulating a booking's trip

        Idempotent: returns False (and does nothing) if a task already runs
        or the booking is not trackable right now.
        """
        with self.uow_factory() as uow:
            booking = uow.bookings.get(confirmation_number)
            if booking is None or not self._is_eligible(uow, booking):
                logger.debug(f"Booking {confirmation_number} is not trackable, not starting")
                return False

            with self._lock:
                if confirmation_number in self._tasks:
                    logger.debug(f"Trip simulation for {confirmation_number} already running")
                    return False
                # Resume from stored progress so a restarted trip never moves backwards
                started_at = self.clock() - booking.trip_progress * self.trip_seconds
                task = TripSimulation(confirmation_number, booking.driver_name, started_at)
                self._tasks[confirmation_number] = task

            progress = booking.trip_progress
            booking.record_progress(progress, position_at(progress), simulated_eta(progress))
            uow.bookings.save(booking)

        if self.run_threads:
            task.thread = threading.Thread(
                target=self._run,
                args=(task,),
                name=f"trip-{confirmation_number}",
                daemon=True,
            )
            task.thread.start()

        logger.info(f"Trip simulation started for booking {confirmation_number}")
        return True

    def start_eligible(self, driver_name: str | None = None) -> List[str]:
        """Start tasks for every trackable booking (optionally of one driver)"""
        with self.uow_factory() as uow:
            candidates = [
                b.confirmation_number for b in uow.bookings.active()
                if b.is_trackable() and (driver_name is None or b.driver_name == driver_name)
            ]
        return [cn for cn in candidates if self.start(cn)]

    def stop(self, confirmation_number: str) -> bool:
        """
        Stop a booking's simulation

        Once this returns, no further tick of that task writes to the store.
        Must not be called while holding the store lock.
        """
        task = self.retire(confirmation_number)
        if task is None:
            return False
        self.reap(task)
        return True

    def retire(self, confirmation_number: str) -> TripSimulation | None:
        """
        Detach a booking's task without waiting for its thread

        Safe under the store lock: ticks check `stopped` under that lock, so
        once the caller's unit of work commits the old task can no longer
        write. Hand the result to `reap` after releasing the store lock.
        """
        with self._lock:
            task = self._tasks.pop(confirmation_number, None)
        if task is not None:
            task.stop()
        return task

    def reap(self, task: TripSimulation | None):
        if task is None:
            return
        self._join(task)
        logger.info(f"Trip simulation stopped for booking {task.confirmation_number}")

    def stop_for_driver(self, driver_name: str) -> List[str]:
        with self._lock:
            numbers = [cn for cn, task in self._tasks.items() if task.driver_name == driver_name]
        return [cn for cn in numbers if self.stop(cn)]

    def shutdown(self):
        for confirmation_number in self.active():
            self.stop(confirmation_number)

    # ----- ticking -----

    def advance(self, confirmation_number: str) -> bool:
        """
        Run one tick synchronously

        Returns True while the trip is still in progress.
        """
        with self._lock:
            task = self._tasks.get(confirmation_number)
        if task is None:
            return False
        return self._tick(task)

    def _run(self, task: TripSimulation):
        while not task.wait(self.tick_interval):
            try:
                if not self._tick(task):
                    break
            except Exception as e:
                logger.error(
                    f"Trip simulation for {task.confirmation_number} failed: {e}",
                    exc_info=True,
                )
                self._discard(task)
                break

    def _tick(self, task: TripSimulation) -> bool:
        arrived = False
        with self.uow_factory() as uow:
            if task.stopped or not self._is_current(task):
                return False

            booking = uow.bookings.get(task.confirmation_number)
            if booking is None or not self._is_eligible(uow, booking):
                self._discard(task)
                return False

            progress = max(
                booking.trip_progress,
                trip_progress(self.clock() - task.started_at, self.trip_seconds),
            )
            booking.record_progress(progress, position_at(progress), simulated_eta(progress))
            uow.bookings.save(booking)

            if booking.has_arrived:
                arrived = True
                self._discard(task)

        if arrived:
            logger.info(f"Driver arrived for booking {task.confirmation_number}")
        return not arrived

    def _is_eligible(self, uow: "InMemoryUnitOfWork", booking: "Booking") -> bool:
        if not booking.is_trackable():
            return False
        driver = uow.drivers.get_by_name(booking.driver_name)
        return driver is not None and driver.is_online

    def _is_current(self, task: TripSimulation) -> bool:
        with self._lock:
            return self._tasks.get(task.confirmation_number) is task

    def _discard(self, task: TripSimulation):
        with self._lock:
            if self._tasks.get(task.confirmation_number) is task:
                del self._tasks[task.confirmation_number]
        task.stop()

    def _join(self, task: TripSimulation):
        thread = task.thread
        if thread is None or thread is threading.current_thread():
            return
        thread.join(self.join_timeout)
        if thread.is_alive():
            logger.warning(f"Trip simulation thread for {task.confirmation_number} did not exit in time")
