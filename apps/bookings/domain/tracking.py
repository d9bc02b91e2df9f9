"""
Trip simulation physics

The tracking signal is scripted, not telemetry: the driver moves in a
straight line from a fixed pickup point to a fixed drop-off point on the
percentage map. A trip lasts `SIMULATED_TRIP_SECONDS` of real time, which is
shown to guests as a `DISPLAY_TRIP_MINUTES` journey.
"""

from shared.domain.value_objects import MapPoint

PICKUP_POINT = MapPoint(x=15, y=50)
DROPOFF_POINT = MapPoint(x=85, y=50)

SIMULATED_TRIP_SECONDS = 20.0
DISPLAY_TRIP_MINUTES = 15


def trip_progress(elapsed_seconds: float, duration_seconds: float = SIMULATED_TRIP_SECONDS) -> float:
    """Fraction of the trip covered, clamped to [0, 1]"""
    if duration_seconds <= 0:
        return 1.0
    return max(0.0, min(elapsed_seconds / duration_seconds, 1.0))


def position_at(progress: float) -> MapPoint:
    return PICKUP_POINT.towards(DROPOFF_POINT, progress)


def simulated_eta(progress: float) -> str:
    """
    ETA label for a trip at `progress`

    Examples:
        - 1.0  -> "Arrived"
        - 0.97 -> "Arriving now"
        - 0.5  -> "approx. 8 mins"
        - 0.94 -> "Less than a minute"
    """
    if progress >= 1:
        return "Arrived"
    if progress > 0.95:
        return "Arriving now"

    remaining_minutes = _round_half_up(DISPLAY_TRIP_MINUTES * (1 - progress))
    if remaining_minutes <= 1:
        return "Less than a minute"
    return f"approx. {remaining_minutes} mins"


def _round_half_up(value: float) -> int:
    return int(value + 0.5)
