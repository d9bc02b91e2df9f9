"""Test settings.

Celery runs eagerly and passwords use a fast hasher. Tests install their own
service container (see conftest.py), driven by a fake clock.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

SECRET_KEY = 'test-secret-key'

ALLOWED_HOSTS = ['*']

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = False
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

FLEET_SEED_ENABLED = True

GENAI_API_KEY = ''

TRACKING_TICK_SECONDS = 0.05
