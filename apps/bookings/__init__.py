"""Bookings app package.

This app encapsulates the booking domain of the hotel car service: the
booking lifecycle, driver/vehicle assignment with double-booking prevention,
fare estimation and the simulated trip tracking. State lives in the
in-memory entity store and is changed only through units of work.
"""
