"""
Fleet Domain Events
"""

from dataclasses import dataclass

from shared.domain.base import DomainEvent


@dataclass
class DriverWentOnline(DomainEvent):
    """
    Event: Driver toggled online

    Triggers:
    - Resume trip simulations for the driver's open bookings
    - Notify the driver app
    """
    username: str
    driver_name: str


@dataclass
class DriverWentOffline(DomainEvent):
    """
    Event: Driver toggled offline

    Triggers:
    - Notify the driver app
    """
    username: str
    driver_name: str
