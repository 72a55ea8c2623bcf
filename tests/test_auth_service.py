from __future__ import annotations

import pytest

from gym_platform.auth.crud import create_admin, get_credential_by_email
from gym_platform.auth.errors import Unauthorized
from gym_platform.auth.security import create_token, decode_token
from gym_platform.auth.service import (
    access_expiry_seconds,
    login_admin,
    login_client,
    refresh,
    verify_token,
)
from gym_platform.members.clients import create_client

from .conftest import TEST_SECRET


@pytest.fixture
def admin(conn):
    return create_admin(conn, email="Owner@Gym.Local", password="s3cret-pass", first_name="Ana", last_name="Pop")


@pytest.fixture
def member(conn):
    return create_client(
        conn, first_name="Alex", last_name="Popescu", email="alex@gym.local", phone="+40740000001"
    )


def test_login_admin_returns_verifiable_access_token(conn, cfg, admin):
    res = login_admin(conn, cfg, "  OWNER@gym.local ", "s3cret-pass")

    assert res["tokenType"] == "Bearer"
    assert res["user"] == {"id": str(admin["admin_id"]), "email": "owner@gym.local", "role": "admin"}

    payload = verify_token(cfg, res["accessToken"], "access")
    assert payload["role"] == "admin"
    assert payload["sub"] == str(admin["admin_id"])
    assert payload["email"] == "owner@gym.local"


def test_admin_response_never_contains_hash(conn, cfg, admin):
    assert "password_hash" not in admin
    res = login_admin(conn, cfg, "owner@gym.local", "s3cret-pass")
    assert "password_hash" not in res["user"]


def test_bad_credentials_are_indistinguishable(conn, cfg, admin, member):
    with pytest.raises(Unauthorized) as wrong_secret:
        login_admin(conn, cfg, "owner@gym.local", "wrong-pass")
    with pytest.raises(Unauthorized) as unknown_user:
        login_admin(conn, cfg, "nobody@gym.local", "s3cret-pass")

    assert wrong_secret.value.status_code == unknown_user.value.status_code == 401
    assert wrong_secret.value.detail == unknown_user.value.detail == "Invalid credentials"

    bad_pin = "000000" if member["generated_pin"] != "000000" else "111111"
    with pytest.raises(Unauthorized) as wrong_pin:
        login_client(conn, cfg, "alex@gym.local", bad_pin)
    with pytest.raises(Unauthorized) as unknown_client:
        login_client(conn, cfg, "ghost@gym.local", "123456")
    assert wrong_pin.value.detail == unknown_client.value.detail == "Invalid credentials"


def test_admin_cannot_use_client_login_and_vice_versa(conn, cfg, admin, member):
    with pytest.raises(Unauthorized):
        login_client(conn, cfg, "owner@gym.local", "s3cret-pass")
    with pytest.raises(Unauthorized):
        login_admin(conn, cfg, "alex@gym.local", member["generated_pin"])


def test_login_client_with_generated_pin(conn, cfg, member):
    pin = member["generated_pin"]
    assert len(pin) == 6 and pin.isdigit()

    res = login_client(conn, cfg, "alex@gym.local", pin)
    assert res["user"]["role"] == "client"
    assert res["user"]["id"] == str(member["client"]["client_id"])

    payload = decode_token(token=res["accessToken"], secret=TEST_SECRET)
    assert payload["exp"] - payload["iat"] == 30 * 24 * 3600


def test_credential_lookup_is_keyed_by_role(conn, admin, member):
    a = get_credential_by_email(conn, "admin", "owner@gym.local")
    c = get_credential_by_email(conn, "client", "ALEX@gym.local")
    assert a["role"] == "admin" and a["id"] == admin["admin_id"]
    assert c["role"] == "client" and c["id"] == member["client"]["client_id"]
    assert get_credential_by_email(conn, "client", "owner@gym.local") is None
    with pytest.raises(ValueError):
        get_credential_by_email(conn, "staff", "owner@gym.local")


def test_access_and_refresh_kinds_are_not_interchangeable(conn, cfg, admin):
    res = login_admin(conn, cfg, "owner@gym.local", "s3cret-pass")

    assert verify_token(cfg, res["refreshToken"], "refresh")["token_type"] == "refresh"
    with pytest.raises(Unauthorized):
        verify_token(cfg, res["accessToken"], "refresh")
    with pytest.raises(Unauthorized):
        verify_token(cfg, res["refreshToken"], "access")


@pytest.mark.parametrize("role, expected", [("admin", 24 * 3600), ("client", 30 * 24 * 3600)])
def test_refresh_keeps_role_access_lifetime(cfg, role, expected):
    token = create_token(
        secret=TEST_SECRET,
        user_id=42,
        email="x@gym.local",
        role=role,
        token_type="refresh",
        expires_seconds=3600,
    )
    res = refresh(cfg, token)

    assert res["user"] == {"id": "42", "email": "x@gym.local", "role": role}
    access = decode_token(token=res["accessToken"], secret=TEST_SECRET)
    assert access["token_type"] == "access"
    assert access["exp"] - access["iat"] == expected == access_expiry_seconds(cfg, role)

    new_refresh = decode_token(token=res["refreshToken"], secret=TEST_SECRET)
    assert new_refresh["exp"] - new_refresh["iat"] == 30 * 24 * 3600


def test_refresh_token_is_not_revoked_after_use(cfg):
    token = create_token(
        secret=TEST_SECRET, user_id=1, email="a@gym.local", role="admin", token_type="refresh", expires_seconds=60
    )
    refresh(cfg, token)
    assert refresh(cfg, token)["tokenType"] == "Bearer"


@pytest.mark.parametrize(
    "token",
    [
        "",
        "not-a-jwt",
        "a.b.c",
        create_token(secret="other-secret-0123456789abcdef0123", user_id=1, email="a@b.c",
                     role="admin", token_type="refresh", expires_seconds=60),
        create_token(secret=TEST_SECRET, user_id=1, email="a@b.c",
                     role="admin", token_type="refresh", expires_seconds=-5),
        create_token(secret=TEST_SECRET, user_id=1, email="a@b.c",
                     role="admin", token_type="access", expires_seconds=60),
        create_token(secret=TEST_SECRET, user_id=1, email="a@b.c",
                     role="superuser", token_type="refresh", expires_seconds=60),
    ],
)
def test_refresh_rejects_bad_tokens(cfg, token):
    with pytest.raises(Unauthorized) as exc:
        refresh(cfg, token)
    assert exc.value.status_code == 401
    assert exc.value.detail == "Invalid refresh token"


def test_configured_expiry_strings(cfg):
    from dataclasses import replace

    custom = replace(cfg, JWT_EXPIRY="15m", CLIENT_JWT_EXPIRY="bogus")
    assert access_expiry_seconds(custom, "admin") == 900
    # Unparseable falls back to the hardcoded client default.
    assert access_expiry_seconds(custom, "client") == 30 * 24 * 3600


def test_oversized_expiry_falls_back_instead_of_failing_login(conn, cfg, admin):
    from dataclasses import replace

    huge = replace(cfg, JWT_EXPIRY="99999999999d", JWT_REFRESH_EXPIRY="99999999999d")
    res = login_admin(conn, huge, "owner@gym.local", "s3cret-pass")

    access = decode_token(token=res["accessToken"], secret=TEST_SECRET)
    assert access["exp"] - access["iat"] == 24 * 3600
    new_refresh = decode_token(token=res["refreshToken"], secret=TEST_SECRET)
    assert new_refresh["exp"] - new_refresh["iat"] == 30 * 24 * 3600
