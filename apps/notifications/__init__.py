"""Notifications app package.

Builds the desk notification feed from domain events and hands every
notification to a Celery task for delivery.
"""
