"""Configuration objects for the coaching site backend."""
from __future__ import annotations

import os
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Type

from dotenv import load_dotenv

basedir = Path(__file__).resolve().parent

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    """Base configuration shared by all environments."""

    SQLALCHEMY_DATABASE_URI: str = os.getenv("DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "dev-secret-key")
    JWT_ACCESS_TOKEN_EXPIRES: timedelta = timedelta(
        minutes=int(os.getenv("ADMIN_SESSION_MINUTES", "480"))
    )
    BCRYPT_LOG_ROUNDS: int = int(os.getenv("BCRYPT_LOG_ROUNDS", "13"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL", "admin@example.com")
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "admin")
    ADMIN_NAME: str = os.getenv("ADMIN_NAME", "Site Admin")

    CONTENT_BACKEND: str = os.getenv("CONTENT_BACKEND", "database")
    SESSION_STORE: str = os.getenv("SESSION_STORE", "database")
    BOOKMARK_TTL_DAYS: int = int(os.getenv("BOOKMARK_TTL_DAYS", "365"))
    WIZARD_TTL_MINUTES: int = int(os.getenv("WIZARD_TTL_MINUTES", "60"))

    BOOKING_WINDOW_DAYS: int = int(os.getenv("BOOKING_WINDOW_DAYS", "14"))
    BOOKING_TIMEZONE: str = os.getenv("BOOKING_TIMEZONE", "EST")
    BOOKING_PREVENT_DOUBLE_BOOKING: bool = _env_flag("BOOKING_PREVENT_DOUBLE_BOOKING", "true")

    SEED_SETTINGS_ON_STARTUP: bool = _env_flag("SEED_SETTINGS_ON_STARTUP", "true")
    WHATSAPP_NUMBER: str = os.getenv("WHATSAPP_NUMBER", "2348023200539")

    @classmethod
    def as_dict(cls) -> Dict[str, Any]:
        """Expose configuration values for debugging and introspection."""

        return {key: getattr(cls, key) for key in dir(cls) if key.isupper()}


class DevelopmentConfig(Config):
    """Configuration suitable for local development."""

    _db_path = basedir / "dev.db"
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URL", f"sqlite:///{_db_path}")
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class TestingConfig(Config):
    """Isolated in-memory configuration used by the test suite."""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-secret-key-with-enough-length"
    BCRYPT_LOG_ROUNDS = 4
    SEED_SETTINGS_ON_STARTUP = False
    SESSION_STORE = "memory"
    CONTENT_BACKEND = "database"
    BOOKING_PREVENT_DOUBLE_BOOKING = True
    LOG_LEVEL = "WARNING"


class ProductionConfig(Config):
    """Configuration tailored for production deployments."""

    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///coachsite.db")
    DEBUG = False


CONFIG_MAP: Dict[str, Type[Config]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config(name: str | None) -> Type[Config]:
    """Retrieve the configuration class matching the supplied name."""

    if not name:
        return DevelopmentConfig
    return CONFIG_MAP.get(name.lower(), DevelopmentConfig)
