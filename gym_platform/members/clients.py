from __future__ import annotations

import secrets
import sqlite3
from typing import Any, Dict, List, Optional

from gym_platform.auth.crud import normalize_email
from gym_platform.auth.security import hash_password
from gym_platform.util.time import utcnow_iso


CLIENT_STATUSES = ("active", "inactive", "suspended", "invited")
_UPDATABLE = ("first_name", "last_name", "email", "phone", "status")


def generate_pin() -> str:
    """Random 6-digit PIN (100000-999999)."""
    return str(100000 + secrets.randbelow(900000))


def public_client(row: Any | Dict[str, Any]) -> Dict[str, Any]:
    d = dict(row)
    d.pop("pin_hash", None)
    return d


def _check_status(status: str) -> str:
    s = (status or "").strip().lower()
    if s not in CLIENT_STATUSES:
        raise ValueError("invalid_status")
    return s


def get_client_row(conn: Any, client_id: int) -> Optional[Any]:
    return conn.execute("SELECT * FROM clients WHERE client_id=?", (int(client_id),)).fetchone()


def get_client(conn: Any, client_id: int) -> Optional[Dict[str, Any]]:
    row = get_client_row(conn, client_id)
    return public_client(row) if row is not None else None


def get_client_by_email(conn: Any, email: str) -> Optional[Any]:
    e = normalize_email(email)
    if not e:
        return None
    return conn.execute("SELECT * FROM clients WHERE email=?", (e,)).fetchone()


def create_client(
    conn: Any,
    *,
    first_name: str,
    last_name: str,
    email: str,
    phone: str,
    status: str = "invited",
) -> Dict[str, Any]:
    """Create a client with a freshly generated PIN.

    Returns {"client": ..., "generated_pin": "123456"}. The plain PIN is only ever
    returned here; only its hash is stored.
    """
    e = normalize_email(email)
    if not e:
        raise ValueError("email_blank")
    st = _check_status(status)

    if get_client_by_email(conn, e) is not None:
        raise ValueError("email_exists")

    pin = generate_pin()
    now = utcnow_iso()
    cur = conn.execute(
        """
        INSERT INTO clients (first_name, last_name, email, phone, pin_hash, status, created_at, updated_at)
        VALUES (?,?,?,?,?,?,?,?)
        """,
        (first_name.strip(), last_name.strip(), e, phone.strip(), hash_password(pin), st, now, now),
    )
    client = get_client(conn, int(cur.lastrowid))
    assert client is not None
    return {"client": client, "generated_pin": pin}


def list_clients(conn: Any) -> List[Dict[str, Any]]:
    rows = conn.execute(
        "SELECT * FROM clients ORDER BY created_at DESC, client_id DESC"
    ).fetchall()
    return [public_client(r) for r in rows]


def update_client(conn: Any, client_id: int, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Apply a partial update. Returns None if the client does not exist."""
    if get_client_row(conn, client_id) is None:
        return None

    # Build dynamic SQL so we only touch provided fields.
    fields: list[tuple[str, Any]] = []
    for col in _UPDATABLE:
        if changes.get(col) is None:
            continue
        value = changes[col]
        if col == "email":
            value = normalize_email(value)
            if not value:
                raise ValueError("email_blank")
            other = get_client_by_email(conn, value)
            if other is not None and int(other["client_id"]) != int(client_id):
                raise ValueError("email_exists")
        elif col == "status":
            value = _check_status(value)
        else:
            value = str(value).strip()
        fields.append((col, value))

    if fields:
        fields.append(("updated_at", utcnow_iso()))
        sets = ", ".join([f"{k}=?" for k, _ in fields])
        params = [v for _, v in fields] + [int(client_id)]
        try:
            conn.execute(f"UPDATE clients SET {sets} WHERE client_id=?", params)
        except sqlite3.IntegrityError as e:
            raise ValueError("email_exists") from e

    return get_client(conn, client_id)


def suspend_client(conn: Any, client_id: int) -> Optional[Dict[str, Any]]:
    return update_client(conn, client_id, {"status": "suspended"})
