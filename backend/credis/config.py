# backend/credis/config.py
from __future__ import annotations
import os
from datetime import timedelta


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/credis.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///credis.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT signing secrets; access and refresh tokens never share a key
    JWT_ACCESS_SECRET = os.environ.get("JWT_SECRET", "changeme")
    JWT_REFRESH_SECRET = os.environ.get("JWT_REFRESH_SECRET", "refresh_secret")

    # Access tokens default to 30 days; ACCESS_TOKEN_EXPIRES_MINUTES overrides
    ACCESS_TOKEN_EXPIRES = timedelta(minutes=_env_int("ACCESS_TOKEN_EXPIRES_MINUTES", 30 * 24 * 60))
    REFRESH_TOKEN_EXPIRES = timedelta(days=_env_int("REFRESH_TOKEN_EXPIRES_DAYS", 180))

    BCRYPT_ROUNDS = _env_int("BCRYPT_ROUNDS", 10)

    CORS_ALLOWED_ORIGINS = {
        origin
        for origin in (
            os.environ.get("FRONTEND_URL"),
            "http://localhost:8081",
            "http://127.0.0.1:8081",
            "http://localhost:8080",
        )
        if origin
    }

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
