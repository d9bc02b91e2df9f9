"""Tests for the in-memory unit of work and repositories."""

import threading

import pytest

from apps.fleet.domain.entities import Driver
from apps.fleet.domain.events import DriverWentOffline
from shared.application.message_bus import MessageBus
from shared.application.uow import InMemoryUnitOfWork
from shared.infrastructure.store import EntityStore


@pytest.fixture
def store():
    return EntityStore()


@pytest.fixture
def bus():
    return MessageBus()


def _driver(username="ravi", name="Ravi Kumar") -> Driver:
    return Driver(name=name, phone="9876543210", username=username)


def test_commit_writes_copies(store, bus):
    driver = _driver()
    with InMemoryUnitOfWork(store, bus) as uow:
        uow.drivers.add(driver)

    assert "ravi" in store.drivers
    assert store.drivers["ravi"] is not driver

    driver.name = "Changed outside"
    assert store.drivers["ravi"].name == "Ravi Kumar"


def test_reads_are_detached(store, bus):
    with InMemoryUnitOfWork(store, bus) as uow:
        uow.drivers.add(_driver())

    with InMemoryUnitOfWork(store, bus) as uow:
        loaded = uow.drivers.get("ravi")
        loaded.name = "Not saved"
        assert uow.drivers.get("ravi") is loaded

    assert store.drivers["ravi"].name == "Ravi Kumar"


def test_exception_rolls_back_everything(store, bus):
    with pytest.raises(RuntimeError):
        with InMemoryUnitOfWork(store, bus) as uow:
            uow.drivers.add(_driver("ravi", "Ravi Kumar"))
            uow.drivers.add(_driver("amit", "Amit Singh"))
            raise RuntimeError("boom")

    assert store.drivers == {}


def test_events_published_after_commit_only(store, bus):
    received = []
    bus.register_event_handler(DriverWentOffline, received.append)
    with InMemoryUnitOfWork(store, bus) as uow:
        uow.drivers.add(_driver())

    with pytest.raises(RuntimeError):
        with InMemoryUnitOfWork(store, bus) as uow:
            driver = uow.drivers.get("ravi")
            driver.go_offline()
            uow.drivers.save(driver)
            raise RuntimeError("boom")
    assert received == []

    with InMemoryUnitOfWork(store, bus) as uow:
        driver = uow.drivers.get("ravi")
        driver.go_offline()
        uow.drivers.save(driver)
        assert received == []

    assert [e.username for e in received] == ["ravi"]
    assert store.drivers["ravi"].events == []


def test_handlers_run_outside_the_lock(store, bus):
    acquired_elsewhere = []

    def handler(event):
        # Another thread must be able to enter a unit of work now
        thread = threading.Thread(
            target=lambda: acquired_elsewhere.append(store.lock.acquire(timeout=1)) or store.lock.release()
        )
        thread.start()
        thread.join()

    bus.register_event_handler(DriverWentOffline, handler)
    with InMemoryUnitOfWork(store, bus) as uow:
        driver = _driver()
        driver.go_offline()
        uow.drivers.add(driver)

    assert acquired_elsewhere == [True]


def test_remove_and_keys(store, bus):
    with InMemoryUnitOfWork(store, bus) as uow:
        uow.drivers.add(_driver("ravi", "Ravi Kumar"))
        uow.drivers.add(_driver("amit", "Amit Singh"))

    with InMemoryUnitOfWork(store, bus) as uow:
        uow.drivers.remove("ravi")
        assert uow.drivers.keys() == ["amit"]
        assert uow.drivers.get("ravi") is None

    assert list(store.drivers) == ["amit"]
