"""Fleet app package.

Drivers, vehicle types and vehicles, plus the driver presence toggle that
starts and pauses trip simulations.
"""
