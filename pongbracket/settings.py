"""
Django settings for the pongbracket project.

Only the tournament apps are installed; the bracket logic keeps no database
tables of its own.
"""

import os
from datetime import timedelta

SECRET_KEY = os.environ.get("PONGBRACKET_SECRET_KEY", "insecure-development-key")

DEBUG = os.environ.get("PONGBRACKET_DEBUG", "1") == "1"

ALLOWED_HOSTS = []

INSTALLED_APPS = [
    "pongbracket.bracket_core",
    "pongbracket.tournament",
]

MIDDLEWARE = []

# No models, so no database
DATABASES = {}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_TZ = True

# Tournament settings
PONGBRACKET_ALLOWED_SIZES = (4, 8)
# Tournaments untouched for longer than this are archived by the stale sweep
PONGBRACKET_STALE_AFTER = timedelta(hours=6)

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "loggers": {
        "pongbracket": {
            "handlers": ["console"],
            "level": os.environ.get("PONGBRACKET_LOG_LEVEL", "INFO"),
        },
    },
}
