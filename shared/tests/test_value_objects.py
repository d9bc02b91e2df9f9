"""Tests for shared value objects."""

from datetime import datetime

import pytest

from shared.domain.value_objects import GeoPosition, MapPoint, TripWindow


def test_trip_window_half_open():
    morning = TripWindow(datetime(2030, 5, 1, 10, 0), datetime(2030, 5, 1, 11, 30))
    next_slot = TripWindow(datetime(2030, 5, 1, 11, 30), datetime(2030, 5, 1, 13, 0))
    inside = TripWindow(datetime(2030, 5, 1, 10, 15), datetime(2030, 5, 1, 10, 45))

    assert not morning.overlaps_with(next_slot)
    assert morning.overlaps_with(inside)
    assert inside.overlaps_with(morning)
    assert str(morning) == "10:00–11:30"


def test_trip_window_only_compares_windows():
    window = TripWindow(datetime(2030, 5, 1, 10, 0), datetime(2030, 5, 1, 11, 30))
    with pytest.raises(TypeError):
        window.overlaps_with("10:00")


def test_map_point_interpolation():
    start, end = MapPoint(x=15, y=50), MapPoint(x=85, y=50)

    assert start.towards(end, 0.25) == MapPoint(x=32.5, y=50)


@pytest.mark.parametrize("lat, lng", [(91, 0), (-91, 0), (0, 181), (0, -181)])
def test_geo_position_range(lat, lng):
    with pytest.raises(ValueError):
        GeoPosition(lat=lat, lng=lng)
