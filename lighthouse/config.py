"""Application configuration for Lighthouse."""

from __future__ import annotations

import os
from typing import Dict, Type

from dotenv import load_dotenv
from sqlalchemy.engine.url import make_url

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


def _engine_options_from_uri(uri: str) -> dict:
    url = make_url(uri)
    if url.get_backend_name() == "sqlite":
        return {"pool_pre_ping": True, "connect_args": {"timeout": 30}}
    if url.get_backend_name() in {"postgresql", "postgres"}:
        timeout = int(os.environ.get("DB_CONNECT_TIMEOUT_SECONDS", "10"))
        return {"pool_pre_ping": True, "connect_args": {"connect_timeout": timeout}}
    return {"pool_pre_ping": True}


class BaseConfig:
    """Base configuration loaded for all environments."""

    SECRET_KEY = os.environ.get("SESSION_SECRET") or os.environ.get("SECRET_KEY", "change-me")
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///instance/lighthouse.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options_from_uri(SQLALCHEMY_DATABASE_URI)

    SESSION_COOKIE_NAME = "lighthouse.sid"
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = _env_flag("SESSION_COOKIE_SECURE")
    PERMANENT_SESSION_LIFETIME = int(os.environ.get("SESSION_TTL_SECONDS", "86400"))
    WTF_CSRF_ENABLED = True

    # Adaptive hash work factor; stored hashes and new hashes share it.
    BCRYPT_LOG_ROUNDS = 10

    APP_URL = os.environ.get("APP_URL", "http://localhost:3000").rstrip("/")
    RESET_TOKEN_TTL_SECONDS = int(os.environ.get("RESET_TOKEN_TTL_SECONDS", "3600"))
    PASSWORD_MIN_LENGTH = 8

    MAIL_SERVER = os.environ.get("EMAIL_HOST", "smtp.gmail.com")
    MAIL_PORT = int(os.environ.get("EMAIL_PORT", "587"))
    MAIL_USE_SSL = _env_flag("EMAIL_SECURE") or MAIL_PORT == 465
    MAIL_USE_TLS = not MAIL_USE_SSL
    MAIL_USERNAME = os.environ.get("EMAIL_USER")
    MAIL_PASSWORD = os.environ.get("EMAIL_PASSWORD")
    MAIL_FROM_NAME = os.environ.get("EMAIL_FROM_NAME", "Lighthouse Restaurant")
    MAIL_DEFAULT_SENDER = (
        MAIL_FROM_NAME,
        os.environ.get("EMAIL_FROM") or MAIL_USERNAME or "no-reply@localhost",
    )
    MAIL_SUPPRESS_SEND = False
    CONTACT_NOTIFY_EMAIL = os.environ.get("CONTACT_NOTIFY_EMAIL", "")

    RATELIMIT_DEFAULT = "200/hour"
    RATELIMIT_STORAGE_URI = os.environ.get("REDIS_URL", "memory://")
    RATELIMIT_ENABLED = _env_flag("RATELIMIT_ENABLED", "true")

    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_CONTENT_LENGTH", str(10 * 1024 * 1024)))
    UPLOAD_ALLOWED_EXTENSIONS = set(
        (os.environ.get("UPLOAD_ALLOWED_EXTENSIONS") or "png,jpg,jpeg,gif,webp").split(",")
    )
    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", "instance/uploads")
    MEDIA_BUCKET = os.environ.get("STORAGE_BUCKET", "lighthouse-assets")

    SCHEMA_CHECK_ON_STARTUP = _env_flag("SCHEMA_CHECK_ON_STARTUP", "true")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    ENV = "development"
    # Schema is usually still being migrated locally.
    SCHEMA_CHECK_ON_STARTUP = _env_flag("SCHEMA_CHECK_ON_STARTUP", "false")


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.environ.get("TEST_DATABASE_URL", "sqlite://")
    SQLALCHEMY_ENGINE_OPTIONS = {}
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    MAIL_SUPPRESS_SEND = True
    SCHEMA_CHECK_ON_STARTUP = False
    APP_URL = "http://testserver"
    CONTACT_NOTIFY_EMAIL = "owner@lighthouse.test"


class ProductionConfig(BaseConfig):
    ENV = "production"
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_SAMESITE = "Lax"


config_by_name: Dict[str, Type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    # CI pipelines set APP_ENV=ci; map to testing defaults.
    "ci": TestingConfig,
}
