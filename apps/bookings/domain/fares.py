"""
Fare Estimator

Pure, deterministic fare calculation from the free-text location and the
selected vehicle type. No state, no side effects: the guest form may call it
on every keystroke without drift.

Tiers (checked in order on the trimmed, lower-cased location):
1. contains "airport"            -> 500
2. contains a railway station    -> 250
3. anything else                 -> 500

The published tariff distinguishes "other, within 5 km" (250) from
"other, above 5 km" (500). There is no distance source for free text, so
every other location is billed at the higher tier.
"""

from decimal import Decimal, ROUND_HALF_UP

FARE_AIRPORT = Decimal('500')
FARE_STATION = Decimal('250')
FARE_OTHER_ABOVE_5KM = Decimal('500')

GST_RATE = Decimal('0.18')
PREMIUM_MULTIPLIER = Decimal('1.5')
PREMIUM_VEHICLE_TYPES = frozenset({'SUV'})

STATION_PHRASES = (
    'jabalpur railway station',
    'madan mahal railway station',
    'jabalpur station',
    'madan mahal station',
)


def base_fare(location: str) -> Decimal:
    """Base fare for the location tier, before vehicle multiplier and tax"""
    normalized = (location or '').strip().lower()

    if 'airport' in normalized:
        return FARE_AIRPORT
    if any(phrase in normalized for phrase in STATION_PHRASES):
        return FARE_STATION
    return FARE_OTHER_ABOVE_5KM


def estimate_fare(location: str, vehicle_type: str) -> int:
    """
    Estimated fare in whole rupees, tax included

    Examples:
        - ("Jabalpur Airport", "Standard Sedan") -> 590
        - ("Jabalpur Airport", "SUV") -> 885
        - ("Madan Mahal Station", "SUV") -> 443
    """
    fare = base_fare(location)
    if vehicle_type in PREMIUM_VEHICLE_TYPES:
        fare *= PREMIUM_MULTIPLIER

    fare *= 1 + GST_RATE
    return int(fare.quantize(Decimal('1'), rounding=ROUND_HALF_UP))
