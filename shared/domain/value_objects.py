"""
Common Value Objects

Value objects used across multiple domains:
- TripWindow: The time interval a booking occupies its driver and vehicle
- MapPoint: Percentage coordinates on the simulated tracking map
- GeoPosition: Latitude/longitude reported by a driver's device
"""

from dataclasses import dataclass
from datetime import datetime

from shared.domain.base import ValueObject


@dataclass(frozen=True)
class TripWindow(ValueObject):
    """
    Trip window value object

    Represents a range from start (inclusive) to end (exclusive).
    Used for driver/vehicle conflict checks.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Window start ({self.start}) must be before end ({self.end})")

    def overlaps_with(self, other: 'TripWindow') -> bool:
        """
        Check if this window overlaps with another

        Note: end is exclusive, so touching windows don't overlap.

        Examples:
            - 10:00-11:30 overlaps with 10:30-12:00 -> True
            - 10:00-11:30 overlaps with 11:30-13:00 -> False (adjacent)
        """
        if not isinstance(other, TripWindow):
            raise TypeError("Can only check overlap with another TripWindow")

        # Overlap formula: start1 < end2 AND end1 > start2
        return (self.start < other.end and
                self.end > other.start)

    def __str__(self):
        return f"{self.start.strftime('%H:%M')}–{self.end.strftime('%H:%M')}"

    def __repr__(self):
        return f"TripWindow({self.start.isoformat()}, {self.end.isoformat()})"


@dataclass(frozen=True)
class MapPoint(ValueObject):
    """Point on the tracking map, both axes in percent (0-100)"""
    x: float
    y: float

    def towards(self, other: 'MapPoint', fraction: float) -> 'MapPoint':
        """Linear interpolation between self (fraction=0) and other (fraction=1)"""
        return MapPoint(
            x=self.x + (other.x - self.x) * fraction,
            y=self.y + (other.y - self.y) * fraction,
        )


@dataclass(frozen=True)
class GeoPosition(ValueObject):
    """Latitude/longitude pair as supplied by the driver app"""
    lat: float
    lng: float

    def __post_init__(self):
        if not -90 <= self.lat <= 90:
            raise ValueError(f"Latitude out of range: {self.lat}")
        if not -180 <= self.lng <= 180:
            raise ValueError(f"Longitude out of range: {self.lng}")
