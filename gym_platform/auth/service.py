"""Login and refresh flows.

Both logins share one flow (lookup by email -> verify secret -> mint a token pair);
only the credential source and the access-token lifetime depend on the role.

Refresh is stateless: a refresh token stays usable until it expires, even after it
has been exchanged once. There is no revocation store.
"""

from __future__ import annotations

from typing import Any, Dict

import jwt

from gym_platform.config import Config

from .crud import ROLE_ADMIN, ROLE_CLIENT, ROLES, get_credential_by_email
from .errors import Unauthorized
from .security import (
    TOKEN_ACCESS,
    TOKEN_REFRESH,
    create_token,
    decode_token,
    parse_expiry,
    verify_password,
)


ADMIN_ACCESS_EXPIRY_DEFAULT = 24 * 60 * 60
CLIENT_ACCESS_EXPIRY_DEFAULT = 30 * 24 * 60 * 60
REFRESH_EXPIRY_DEFAULT = 30 * 24 * 60 * 60

INVALID_CREDENTIALS = "Invalid credentials"
INVALID_TOKEN = "Invalid token"
INVALID_REFRESH_TOKEN = "Invalid refresh token"


def _debug(msg: str) -> None:
    print(f"[auth] {msg}")


def access_expiry_seconds(cfg: Config, role: str) -> int:
    if role == ROLE_ADMIN:
        return parse_expiry(cfg.JWT_EXPIRY, ADMIN_ACCESS_EXPIRY_DEFAULT)
    return parse_expiry(cfg.CLIENT_JWT_EXPIRY, CLIENT_ACCESS_EXPIRY_DEFAULT)


def refresh_expiry_seconds(cfg: Config) -> int:
    return parse_expiry(cfg.JWT_REFRESH_EXPIRY, REFRESH_EXPIRY_DEFAULT)


def issue_token_pair(cfg: Config, user: Dict[str, Any]) -> Dict[str, str]:
    """Mint an access + refresh pair for {id, email, role}."""
    common = dict(
        secret=cfg.AUTH_JWT_SECRET,
        user_id=user["id"],
        email=user["email"],
        role=user["role"],
    )
    access = create_token(
        token_type=TOKEN_ACCESS,
        expires_seconds=access_expiry_seconds(cfg, user["role"]),
        **common,
    )
    refresh = create_token(
        token_type=TOKEN_REFRESH,
        expires_seconds=refresh_expiry_seconds(cfg),
        **common,
    )
    return {"accessToken": access, "refreshToken": refresh, "tokenType": "Bearer"}


def verify_token(cfg: Config, token: str, expected_type: str, *, detail: str = INVALID_TOKEN) -> Dict[str, Any]:
    """Decode a token and check its kind. Any failure is Unauthorized(detail)."""
    try:
        payload = decode_token(token=token, secret=cfg.AUTH_JWT_SECRET)
    except jwt.InvalidTokenError:
        # Covers expired, bad signature, malformed and missing required claims.
        raise Unauthorized(detail)

    if payload.get("token_type") != expected_type:
        raise Unauthorized(detail)
    if payload.get("role") not in ROLES:
        raise Unauthorized(detail)
    if not payload.get("sub") or not payload.get("email"):
        raise Unauthorized(detail)
    return payload


def user_from_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {"id": str(payload["sub"]), "email": str(payload["email"]), "role": str(payload["role"])}


def login(conn: Any, cfg: Config, *, role: str, email: str, secret: str) -> Dict[str, Any]:
    """Verify a role's credentials and return {user, accessToken, refreshToken, tokenType}.

    Unknown email and wrong secret raise the same Unauthorized, so the response never
    reveals whether an account exists.
    """
    cred = get_credential_by_email(conn, role, email)
    if cred is None or not verify_password(secret, str(cred["secret_hash"] or "")):
        _debug(f"login rejected role={role}")
        raise Unauthorized(INVALID_CREDENTIALS)

    user = {"id": str(cred["id"]), "email": str(cred["email"]), "role": role}
    tokens = issue_token_pair(cfg, user)
    _debug(f"login ok role={role} id={user['id']}")
    return {"user": user, **tokens}


def login_admin(conn: Any, cfg: Config, email: str, password: str) -> Dict[str, Any]:
    return login(conn, cfg, role=ROLE_ADMIN, email=email, secret=password)


def login_client(conn: Any, cfg: Config, email: str, pin: str) -> Dict[str, Any]:
    return login(conn, cfg, role=ROLE_CLIENT, email=email, secret=pin)


def refresh(cfg: Config, refresh_token: str) -> Dict[str, Any]:
    """Exchange a refresh token for a fresh pair, keeping the role-specific access lifetime."""
    payload = verify_token(cfg, refresh_token, TOKEN_REFRESH, detail=INVALID_REFRESH_TOKEN)
    user = user_from_payload(payload)
    return {"user": user, **issue_token_pair(cfg, user)}
