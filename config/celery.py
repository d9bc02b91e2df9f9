"""
Celery application for the hotel car service.

Reads configuration from Django settings under the `CELERY_` namespace and
autodiscovers tasks from installed apps. There are no periodic tasks: trip
simulation runs in-process (apps/bookings/application/tracking.py).
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("car_service")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
