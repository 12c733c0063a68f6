"""
Environment-aware configuration.
Every value can be overridden from the environment (or a local .env file).
The defaults for secrets are for local development only.
"""
from __future__ import annotations

import os
from datetime import timedelta
from typing import Any, Mapping

from dotenv import load_dotenv

from services.auth import AuthSettings

load_dotenv()  # Read .env if present


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///social.db")

    # Token configuration
    JWT_SECRET = os.getenv("JWT_SECRET", "jwt_secret_key")
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "refresh_token_secret_key")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("ACCESS_TOKEN_EXPIRES_SECONDS", "86400")))
    REFRESH_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("REFRESH_TOKEN_EXPIRES_SECONDS", "2592000")))

    # Argon2 work factor
    PASSWORD_TIME_COST = int(os.getenv("PASSWORD_TIME_COST", "3"))
    PASSWORD_MEMORY_COST = int(os.getenv("PASSWORD_MEMORY_COST", "65536"))

    # Profile picture uploads
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", os.path.abspath("uploads"))
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    # In dev, propagate exceptions so our error handler has full context
    PROPAGATE_EXCEPTIONS = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class ProductionConfig(BaseConfig):
    DEBUG = False


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = "sqlite://"
    JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"
    REFRESH_TOKEN_SECRET = "test-refresh-secret"
    # Cheap hashing keeps the suite fast
    PASSWORD_TIME_COST = 1
    PASSWORD_MEMORY_COST = 1024
    LOG_LEVEL = "WARNING"


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/prod/testing).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig


def auth_settings_from_config(config: Mapping[str, Any]) -> AuthSettings:
    """Build the immutable auth settings from a Flask config mapping."""
    return AuthSettings(
        jwt_secret=config["JWT_SECRET"],
        refresh_token_secret=config["REFRESH_TOKEN_SECRET"],
        jwt_algorithm=config.get("JWT_ALGORITHM", "HS256"),
        access_token_ttl=config.get("ACCESS_TOKEN_EXPIRES", timedelta(hours=24)),
        refresh_token_ttl=config.get("REFRESH_TOKEN_EXPIRES", timedelta(days=30)),
        password_time_cost=config.get("PASSWORD_TIME_COST", 3),
        password_memory_cost=config.get("PASSWORD_MEMORY_COST", 65536),
    )
