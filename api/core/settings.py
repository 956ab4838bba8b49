"""
Environment-sourced settings.

Every value is read lazily through a small helper so tests can tweak the
environment with `monkeypatch.setenv` without reloading modules.
"""

from __future__ import annotations

import os


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def app_env() -> str:
    # NODE_ENV is still honoured so existing deployment configs keep working.
    return (os.environ.get("APP_ENV") or os.environ.get("NODE_ENV") or "development").strip().lower()


def is_development() -> bool:
    return app_env() == "development"


def is_production() -> bool:
    return app_env() == "production"


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return url


def db_connect_timeout_s() -> float:
    return _env_float("DB_CONNECT_TIMEOUT_S", 10.0)


def db_acquire_timeout_s() -> float:
    return _env_float("DB_ACQUIRE_TIMEOUT_S", 10.0)


def db_pool_min_size() -> int:
    return _env_int("DB_POOL_MIN", 1)


def db_pool_max_size() -> int:
    return _env_int("DB_POOL_MAX", 10)


def ai_api_endpoint() -> str:
    return _env_str("AI_API_ENDPOINT", "https://hnd1.aihub.zeabur.ai/")


def ai_api_key() -> str:
    return (os.environ.get("AI_API_KEY") or os.environ.get("GEMINI_API_KEY") or "").strip()


def ai_default_model() -> str:
    return _env_str("AI_DEFAULT_MODEL", "gemini-3-flash-preview")


def ai_fast_model() -> str:
    return _env_str("AI_FAST_MODEL", "gemini-2.0-flash-exp")


def ai_timeout_s() -> float:
    return _env_float("AI_TIMEOUT_S", 120.0)


def cors_origins() -> list[str]:
    raw = _env_str("CORS_ORIGIN", "http://localhost:5173")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()


def log_format() -> str:
    return _env_str("LOG_FORMAT", "text").lower()
