"""
Environment-aware configuration.
Secrets come from the environment (or a .env file) and are never defaulted;
a missing signing secret surfaces as ConfigError the first time a token is
issued or verified.
"""
import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()  # Read .env if present


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def _env_int(name: str, default: str | None = None) -> int | None:
    value = os.getenv(name, default)
    return int(value) if value not in (None, "") else None


class BaseConfig:
    DEBUG = False
    TESTING = False
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Allowed cross-origin host (credentials are allowed, so "*" is not useful here)
    CORS_ORIGIN = os.getenv("CORS_ORIGIN", "http://localhost:3000")
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///notes.db")
    SQL_ECHO = _env_bool("SQL_ECHO")

    # Token configuration
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET")
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET")
    ACCESS_TOKEN_EXPIRES = timedelta(seconds=_env_int("ACCESS_TOKEN_EXPIRES_SECONDS", "900"))
    REFRESH_TOKEN_EXPIRES = timedelta(seconds=_env_int("REFRESH_TOKEN_EXPIRES_SECONDS", str(7 * 24 * 3600)))
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "notes-api")

    # Auth cookies are SameSite=Strict, Path=/; no Max-Age unless set
    AUTH_COOKIE_SECURE = _env_bool("AUTH_COOKIE_SECURE")
    AUTH_COOKIE_HTTPONLY = _env_bool("AUTH_COOKIE_HTTPONLY", "true")
    AUTH_COOKIE_MAX_AGE = _env_int("AUTH_COOKIE_MAX_AGE")

    # Argon2 cost and how many hashes may run at once
    ARGON2_TIME_COST = _env_int("ARGON2_TIME_COST")
    ARGON2_MEMORY_COST = _env_int("ARGON2_MEMORY_COST")
    ARGON2_PARALLELISM = _env_int("ARGON2_PARALLELISM")
    PASSWORD_HASH_CONCURRENCY = _env_int("PASSWORD_HASH_CONCURRENCY", "4")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class ProductionConfig(BaseConfig):
    DEBUG = False
    AUTH_COOKIE_SECURE = _env_bool("AUTH_COOKIE_SECURE", "true")


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = "sqlite://"
    # cheap hashing keeps the suite fast
    ARGON2_TIME_COST = 1
    ARGON2_MEMORY_COST = 8 * 1024
    ARGON2_PARALLELISM = 1


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/prod/test).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig
