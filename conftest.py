"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from apps.bookings.application.lifecycle import BookingRequest


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class StubTextService:
    """Confirmation text collaborator returning canned details."""

    def __init__(self, details=None):
        self.details = details
        self.requests = []

    def generate(self, request):
        self.requests.append(request)
        return self.details


def make_request(**overrides) -> BookingRequest:
    data = {
        "guest_name": "Asha Verma",
        "guest_phone": "9000000001",
        "location": "Jabalpur Airport",
        "date": "2030-05-01",
        "time": "10:00",
        "service_type": "pickup",
        "vehicle_type": "Standard Sedan",
    }
    data.update(overrides)
    return BookingRequest(**data)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def text_service() -> StubTextService:
    return StubTextService()


@pytest.fixture
def services(clock, text_service):
    """Seeded container without background threads, installed process-wide."""
    from apps.bookings.container import build_services, reset_services, set_services

    container = build_services(
        clock=clock,
        text_service=text_service,
        run_threads=False,
        seed=True,
    )
    set_services(container)
    yield container
    reset_services()


@pytest.fixture
def booking_factory(services):
    def create(**overrides):
        return services.lifecycle.create(make_request(**overrides))

    return create


@pytest.fixture
def booking_request():
    """Factory for guest requests with sensible defaults."""
    return make_request
