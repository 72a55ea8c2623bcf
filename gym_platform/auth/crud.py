from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from gym_platform.config import Config
from gym_platform.db import connect
from gym_platform.util.time import utcnow_iso

from .security import hash_password


ROLE_ADMIN = "admin"
ROLE_CLIENT = "client"
ROLES = (ROLE_ADMIN, ROLE_CLIENT)


@dataclass(frozen=True)
class CredentialSource:
    """Where the credentials of one role live.

    Admins and clients only differ in table, id column and which secret is hashed
    (password vs PIN), so login is a single flow parameterized by this.
    """

    role: str
    table: str
    id_column: str
    hash_column: str


CREDENTIAL_SOURCES: Dict[str, CredentialSource] = {
    ROLE_ADMIN: CredentialSource(ROLE_ADMIN, "admins", "admin_id", "password_hash"),
    ROLE_CLIENT: CredentialSource(ROLE_CLIENT, "clients", "client_id", "pin_hash"),
}


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def get_credential_source(role: str) -> CredentialSource:
    src = CREDENTIAL_SOURCES.get(role)
    if src is None:
        raise ValueError("invalid_role")
    return src


def get_credential_by_email(conn: Any, role: str, email: str) -> Optional[Dict[str, Any]]:
    """Return {id, email, role, secret_hash} for the role's account, or None."""
    src = get_credential_source(role)
    e = normalize_email(email)
    if not e:
        return None
    row = conn.execute(
        f"SELECT {src.id_column} AS id, email, {src.hash_column} AS secret_hash "
        f"FROM {src.table} WHERE email=?",
        (e,),
    ).fetchone()
    if row is None:
        return None
    d = dict(row)
    d["role"] = src.role
    return d


def public_admin(row: Any | Dict[str, Any]) -> Dict[str, Any]:
    d = dict(row)
    d.pop("password_hash", None)
    return d


def get_admin_by_email(conn: Any, email: str) -> Optional[Any]:
    e = normalize_email(email)
    if not e:
        return None
    return conn.execute("SELECT * FROM admins WHERE email=?", (e,)).fetchone()


def create_admin(
    conn: Any,
    *,
    email: str,
    password: str,
    first_name: str = "Default",
    last_name: str = "Admin",
) -> Dict[str, Any]:
    e = normalize_email(email)
    if not e:
        raise ValueError("email_blank")
    if len(password or "") < 6:
        raise ValueError("password_too_short")

    if get_admin_by_email(conn, e) is not None:
        raise ValueError("email_exists")

    now = utcnow_iso()
    conn.execute(
        """
        INSERT INTO admins (email, password_hash, first_name, last_name, role, created_at, updated_at)
        VALUES (?,?,?,?,?,?,?)
        """,
        (e, hash_password(password), first_name.strip(), last_name.strip(), ROLE_ADMIN, now, now),
    )
    row = get_admin_by_email(conn, e)
    assert row is not None
    return public_admin(row)


def bootstrap_admin_if_needed(cfg: Config) -> Optional[Dict[str, Any]]:
    """Create the first admin if the admins table is empty.

    - AUTH_BOOTSTRAP_ADMIN_EMAIL (default: admin@gym.local)
    - AUTH_BOOTSTRAP_ADMIN_PASSWORD (default: Admin123!)

    Set either to an empty string to skip.
    """

    with connect(cfg.DB_DSN) as conn:
        n = conn.execute("SELECT COUNT(*) AS n FROM admins").fetchone()["n"]
        if int(n) > 0:
            return None

        email = normalize_email(cfg.AUTH_BOOTSTRAP_ADMIN_EMAIL)
        password = cfg.AUTH_BOOTSTRAP_ADMIN_PASSWORD
        if not email or not password:
            return None

        return create_admin(conn, email=email, password=password)
