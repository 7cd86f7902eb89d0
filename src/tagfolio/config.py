"""Configuration management for tagfolio application.

Values come from environment variables, with Streamlit secrets as fallback.
"""

import os
from pathlib import Path
from typing import Any

try:
    import streamlit as st

    STREAMLIT_AVAILABLE = True
except ImportError:
    STREAMLIT_AVAILABLE = False

from .logging_config import DEVELOPMENT_ENVIRONMENTS, get_logger

logger = get_logger(__name__)


class Config:
    """Centralized configuration management using environment variables."""

    def __init__(self):
        self._cache = {}

    def get(self, key: str, default: Any = None, cast_type: type = str) -> Any:
        """Get configuration value from environment variables or Streamlit secrets.

        Args:
            key: Configuration key
            default: Default value if not found
            cast_type: Type to cast the value to (str, int, bool, float)

        Returns:
            Configuration value cast to the specified type
        """
        cache_key = f"{key}:{cast_type.__name__}"
        if cache_key in self._cache:
            return self._cache[cache_key]

        value = os.getenv(key)

        if value is None and STREAMLIT_AVAILABLE:
            try:
                value = st.secrets.get(key)
            except Exception:  # nosec B110
                # No secrets.toml, or not running inside Streamlit
                pass

        if value is None:
            value = default

        if value is not None:
            try:
                if cast_type is bool:
                    if isinstance(value, str):
                        value = value.lower() in ("true", "1", "yes", "on")  # type: ignore[assignment]
                    else:
                        value = bool(value)  # type: ignore[assignment]
                elif cast_type is not str:
                    value = cast_type(value)
            except (ValueError, TypeError) as e:
                logger.warning("config_cast_failed", key=key, cast_type=cast_type.__name__, error=str(e))
                value = default

        self._cache[cache_key] = value
        return value

    def get_required(self, key: str, cast_type: type = str) -> Any:
        """Get required configuration value.

        Raises:
            ValueError: If the required configuration is not found
        """
        value = self.get(key, cast_type=cast_type)
        if value is None or value == "":
            raise ValueError(f"Required configuration '{key}' not found")
        return value

    def is_development(self) -> bool:
        """Check if running in development mode."""
        environment = self.get("ENVIRONMENT", "development").lower().strip()
        return environment in DEVELOPMENT_ENVIRONMENTS

    def is_production(self) -> bool:
        """Check if running in production mode."""
        environment = self.get("ENVIRONMENT", "development").lower().strip()
        return environment in ["production", "prod"]

    def clear_cache(self):
        """Clear configuration cache."""
        self._cache.clear()


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def get_env(key: str, default: Any = None, cast_type: type = str) -> Any:
    """Get environment variable with type casting."""
    return get_config().get(key, default, cast_type)


def get_required_env(key: str, cast_type: type = str) -> Any:
    """Get required environment variable.

    Raises:
        ValueError: If the required environment variable is not found
    """
    return get_config().get_required(key, cast_type)


def is_development() -> bool:
    """Check if running in development mode."""
    return get_config().is_development()


def is_production() -> bool:
    """Check if running in production mode."""
    return get_config().is_production()


def get_environment() -> str:
    """Get current environment."""
    return str(get_env("ENVIRONMENT", "development"))


def get_debug_mode() -> bool:
    """Get debug mode setting."""
    return bool(get_env("DEBUG", False, bool))


def get_project_id() -> str:
    """Get Google Cloud project ID."""
    return str(get_required_env("GOOGLE_CLOUD_PROJECT"))


def get_firebase_api_key() -> str:
    """Get the Firebase Web API key used for email/password sign-in."""
    return str(get_required_env("FIREBASE_API_KEY"))


def get_owner_email() -> str | None:
    """Get the gallery owner's email, if sign-in is restricted to one account."""
    owner_email = get_env("OWNER_EMAIL")
    return owner_email.strip().lower() if owner_email else None


def get_photo_store_backend() -> str:
    """Get the photo store backend name: 'firestore' or 'duckdb'."""
    default = "duckdb" if is_development() else "firestore"
    return str(get_env("PHOTO_STORE_BACKEND", default)).lower().strip()


def get_photo_collection() -> str:
    """Get the Firestore collection holding photo documents."""
    return str(get_env("PHOTO_COLLECTION", "photos"))


def get_duckdb_path() -> str:
    """Get the DuckDB database path for the local photo store."""
    return str(get_env("DUCKDB_PATH", str(Path.home() / ".tagfolio" / "photos.duckdb")))


def get_preferences_path() -> Path:
    """Get the JSON file holding the profile card and theme."""
    return Path(get_env("PREFERENCES_PATH", str(Path.home() / ".tagfolio" / "preferences.json")))


def get_request_timeout() -> float:
    """Get the timeout in seconds for calls to the auth REST API."""
    return float(get_env("REQUEST_TIMEOUT", 10.0, float))
