"""Settings modules, one per environment. APP_ENV picks which one is loaded."""

import os

_SETTINGS_BY_ENV = {
    "production": "config.production",
    "prod": "config.production",
    "testing": "config.testing",
    "test": "config.testing",
}


def get_settings_module() -> str:
    """Dotted path of the settings module for APP_ENV (development when unset or unknown)."""
    env = os.getenv("APP_ENV", "development").strip().lower()
    return _SETTINGS_BY_ENV.get(env, "config.development")
