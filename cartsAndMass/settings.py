"""Django settings for the carts-and-mass experiment dashboard.

Configuration is driven by environment variables so secrets are not checked
into the repository. The project uses no database; records arrive through the
injected stream contracts in `classroom.contracts`.
"""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, *, default: bool) -> bool:
    """Parse a boolean environment variable.

    Args:
        name: Environment variable name.
        default: Value when the variable is not set.

    Returns:
        Parsed boolean value.
    """

    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _env_int(name: str, *, default: int) -> int:
    """Parse an integer environment variable.

    Args:
        name: Environment variable name.
        default: Value when the variable is not set.

    Returns:
        Parsed integer value.
    """

    raw = os.getenv(name)
    if raw is None:
        return default
    return int(raw.strip())


DEBUG = _env_bool("DJANGO_DEBUG", default=True)

_DEV_SECRET_KEY = "dev-only-insecure-secret-key"
SECRET_KEY = os.getenv("DJANGO_SECRET_KEY") or (_DEV_SECRET_KEY if DEBUG else "")
if not SECRET_KEY:
    raise RuntimeError("DJANGO_SECRET_KEY is required when DJANGO_DEBUG is False.")

INSTALLED_APPS = [
    "classroom.apps.ClassroomConfig",
]

DATABASES: dict[str, dict[str, str]] = {}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "classroom": {
            "handlers": ["console"],
            "level": os.getenv("DJANGO_LOG_LEVEL", "INFO"),
            "propagate": True,
        },
    },
}

CARTS_EXPERIMENT = {
    "DEFAULT_CONDITIONS": [
        ("control", "Control (no added mass)"),
        ("washers3", "3 washers"),
        ("bars5", "5 bars"),
        ("washers3_bars5", "3 washers + 5 bars"),
    ],
    "DEFAULT_CLASSES": [
        ("P2", "Period 2"),
        ("P3", "Period 3"),
        ("P4", "Period 4"),
        ("P6", "Period 6"),
        ("P7", "Period 7"),
        ("P8", "Period 8"),
    ],
    "PRECISION_RANKING_LIMIT": _env_int("CARTS_PRECISION_RANKING_LIMIT", default=10),
    "TRIALS_PER_CONDITION": 3,
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
