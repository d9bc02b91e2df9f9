"""Development settings for the hotel car service.

This module extends the base settings with development specific
configuration: debug on, all hosts allowed and Celery tasks executed
inline so no broker is needed. Do not use these settings in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Run notification delivery inline
CELERY_TASK_ALWAYS_EAGER = True

LOGGING["loggers"]["apps"]["level"] = "DEBUG"  # noqa: F405
