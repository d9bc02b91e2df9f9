"""
Initial fleet

Loaded into an empty store when FLEET_SEED_ENABLED is set. Seeded drivers
share a demo password and start online.
"""

import logging

from apps.fleet.application.services import FleetService

logger = logging.getLogger(__name__)

DEMO_DRIVER_PASSWORD = 'password123'

VEHICLE_TYPES = [
    {
        'name': 'Standard Sedan',
        'capacity': 4,
        'vehicles': [
            ('MP20TA7001', 'Tata Tigor XM EV'),
            ('MP20TA7002', 'Tata Tigor XM EV'),
            ('MP20TA7003', 'Tata Tigor XM EV'),
            ('MP20ZL9504', 'Tata Tigor XM EV'),
            ('MP20ZL9505', 'Tata Tigor XM EV'),
        ],
    },
    {
        'name': 'SUV',
        'capacity': 6,
        'vehicles': [
            ('MP20TA1969', 'Toyota Innova'),
        ],
    },
]

DRIVERS = [
    ('Ravi Kumar', '9876543210', 'ravi'),
    ('Sunita Sharma', '8765432109', 'sunita'),
    ('Amit Singh', '7654321098', 'amit'),
    ('Priya Patel', '6543210987', 'priya'),
]


def load_initial_fleet(fleet: FleetService, password: str = DEMO_DRIVER_PASSWORD):
    """Register the seed vehicle types, vehicles and drivers"""
    for entry in VEHICLE_TYPES:
        fleet.add_vehicle_type(entry['name'], entry['capacity'])
        for plate, model in entry['vehicles']:
            fleet.add_vehicle(entry['name'], plate, model)

    for name, phone, username in DRIVERS:
        fleet.add_driver(name, phone, username, password)

    logger.info(
        f"Initial fleet loaded: {len(VEHICLE_TYPES)} vehicle types, {len(DRIVERS)} drivers"
    )
