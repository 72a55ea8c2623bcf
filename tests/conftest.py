"""Shared pytest fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add project root to path
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from gym_platform.config import Config  # noqa: E402
from gym_platform.db import connect, init_db  # noqa: E402


TEST_SECRET = "test-secret-for-pytest-0123456789abcdef"
ADMIN_EMAIL = "admin@gym.local"
ADMIN_PASSWORD = "Admin123!"


@pytest.fixture
def cfg(tmp_path) -> Config:
    return Config(
        DB_DSN=str(tmp_path / "gym.sqlite"),
        AUTH_JWT_SECRET=TEST_SECRET,
        JWT_EXPIRY="24h",
        CLIENT_JWT_EXPIRY="30d",
        JWT_REFRESH_EXPIRY="30d",
        AUTH_BOOTSTRAP_ADMIN_EMAIL=ADMIN_EMAIL,
        AUTH_BOOTSTRAP_ADMIN_PASSWORD=ADMIN_PASSWORD,
        CORS_ALLOW_ORIGINS="",
    )


@pytest.fixture
def conn(cfg):
    """An open connection on a freshly created schema."""
    init_db(cfg.DB_DSN)
    with connect(cfg.DB_DSN) as c:
        yield c


@pytest.fixture
def client(cfg) -> TestClient:
    """TestClient with lifespan run (schema + bootstrapped admin)."""
    from gym_platform.api.server import create_app

    with TestClient(create_app(cfg)) as c:
        yield c


@pytest.fixture
def admin_headers(client) -> dict[str, str]:
    resp = client.post("/auth/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['accessToken']}"}
