"""Tests for the fare estimator."""

import pytest

from apps.bookings.domain.fares import base_fare, estimate_fare


@pytest.mark.parametrize(
    "location, vehicle_type, expected",
    [
        ("Jabalpur Airport", "Standard Sedan", 590),
        ("Jabalpur Airport", "SUV", 885),
        ("Madan Mahal Station", "Standard Sedan", 295),
        ("Madan Mahal Station", "SUV", 443),
        ("Jabalpur Railway Station", "Standard Sedan", 295),
        ("Wright Town, Jabalpur", "Standard Sedan", 590),
    ],
)
def test_estimate_fare(location, vehicle_type, expected):
    assert estimate_fare(location, vehicle_type) == expected


def test_location_is_normalized():
    assert estimate_fare("   DUMNA AIRPORT  ", "SUV") == 885
    assert base_fare("  madan MAHAL station ") == 250


def test_airport_wins_over_station_phrase():
    assert base_fare("Jabalpur Station to Airport") == 500


def test_empty_location_uses_default_tier():
    assert estimate_fare("", "Standard Sedan") == 590


def test_estimate_is_deterministic():
    results = {estimate_fare("Madan Mahal Station", "SUV") for _ in range(20)}
    assert results == {443}
