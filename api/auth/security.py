"""
Auth security helpers.
"""

from __future__ import annotations

import os
import re
import time
from typing import Any

import bcrypt
import jwt

# Must match the secret used when tokens were issued by older deployments.
_FALLBACK_SECRET = "my_fallback_secret_key_123456"

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}

GUEST_TOKEN_EXPIRES_IN = "24h"


class AuthSecurityError(RuntimeError):
    pass


def jwt_secret() -> str:
    # Local default keeps development simple.
    # In production, set JWT_SECRET in environment.
    return os.environ.get("JWT_SECRET", "").strip() or _FALLBACK_SECRET


def jwt_algorithm() -> str:
    return os.environ.get("JWT_ALG", "HS256").strip() or "HS256"


def jwt_expires_in() -> str:
    return os.environ.get("JWT_EXPIRES_IN", "").strip() or "7d"


def parse_duration_s(value: str) -> int:
    """
    Parse "7d", "24h", "30m", "45s" or a bare number of seconds.
    """
    match = _DURATION_RE.match(value or "")
    if match is None:
        raise AuthSecurityError(f"Invalid token lifetime: {value!r}")
    amount, unit = match.groups()
    return int(amount) * _DURATION_UNITS[unit]


def now_epoch_s() -> int:
    return int(time.time())


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt(rounds=10)).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def build_access_token(*, user_id: int | str, expires_in: str | None = None) -> str:
    issued_at = now_epoch_s()
    expires_at = issued_at + parse_duration_s(expires_in or jwt_expires_in())

    payload = {
        "userId": str(user_id),
        "iat": issued_at,
        "exp": expires_at,
    }
    return jwt.encode(payload, jwt_secret(), algorithm=jwt_algorithm())


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify the signature and expiry of `token` and return its claims.

    Raises `jwt.InvalidTokenError` (or a subclass) for bad tokens.
    """
    return jwt.decode(token, jwt_secret(), algorithms=[jwt_algorithm()])
