from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from passlib.context import CryptContext


_pwd = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
_JWT_ALG = "HS256"

TOKEN_ACCESS = "access"
TOKEN_REFRESH = "refresh"
TOKEN_TYPES = (TOKEN_ACCESS, TOKEN_REFRESH)

_EXPIRY_UNITS = {"s": 1, "m": 60, "h": 60 * 60, "d": 24 * 60 * 60}
_EXPIRY_RE = re.compile(r"^([0-9]+)([smhd])$", re.IGNORECASE)
# About 100 years. Larger values are treated as misconfiguration.
MAX_EXPIRY_SECONDS = 100 * 365 * 24 * 60 * 60


def hash_password(password: str) -> str:
    """Hash an admin password or a client PIN."""
    if not password:
        raise ValueError("password_blank")
    return _pwd.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        return _pwd.verify(password, password_hash)
    except (ValueError, TypeError):
        # Unknown or corrupt hash format.
        return False


def parse_expiry(value: str | int | None, fallback: int) -> int:
    """Convert "3600", "15m", "24h", "30d" into seconds.

    Anything else (blank, "1w", "abc", non-ASCII digits, more than
    MAX_EXPIRY_SECONDS) returns fallback.
    """
    s = str(value if value is not None else "").strip()
    if s.isascii() and s.isdigit():
        seconds = int(s)
    else:
        m = _EXPIRY_RE.match(s)
        if not m:
            return fallback
        seconds = int(m.group(1)) * _EXPIRY_UNITS[m.group(2).lower()]
    if seconds > MAX_EXPIRY_SECONDS:
        return fallback
    return seconds


def create_token(
    *,
    secret: str,
    user_id: int | str,
    email: str,
    role: str,
    token_type: str,
    expires_seconds: int,
) -> str:
    if not secret:
        raise ValueError("jwt_secret_blank")
    if token_type not in TOKEN_TYPES:
        raise ValueError("invalid_token_type")

    now = datetime.now(timezone.utc)
    exp = now + timedelta(seconds=int(expires_seconds))

    payload: Dict[str, Any] = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "token_type": token_type,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=_JWT_ALG)


def decode_token(*, token: str, secret: str) -> Dict[str, Any]:
    """Decode and verify signature + expiry. Raises jwt.InvalidTokenError subclasses."""
    if not token:
        raise jwt.InvalidTokenError("token_blank")
    if not secret:
        raise ValueError("jwt_secret_blank")
    return jwt.decode(
        token,
        secret,
        algorithms=[_JWT_ALG],
        options={"require": ["sub", "exp", "iat"]},
    )
