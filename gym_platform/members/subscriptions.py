from __future__ import annotations

from typing import Any, Dict, List, Optional

from gym_platform.db import row_to_dict
from gym_platform.util.time import iso_date, utcnow_iso

from .clients import get_client_row


PLAN_TYPES = ("monthly", "quarterly", "semiannual", "annual", "custom")
SUBSCRIPTION_STATUSES = ("active", "cancelled", "expired")
CURRENCIES = ("RON", "EUR")
DEFAULT_CURRENCY = "RON"

_UPDATABLE = ("plan_type", "plan_name", "start_date", "end_date", "status", "price", "currency", "notes")


def _check_range(start_date: str, end_date: str) -> None:
    if end_date < start_date:
        raise ValueError("invalid_date_range")


def _check_choice(value: str, choices: tuple, code: str) -> str:
    if value not in choices:
        raise ValueError(code)
    return value


def get_subscription(conn: Any, subscription_id: int) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        "SELECT * FROM subscriptions WHERE subscription_id=?",
        (int(subscription_id),),
    ).fetchone()
    return row_to_dict(row)


def list_subscriptions_for_client(conn: Any, client_id: int) -> List[Dict[str, Any]]:
    rows = conn.execute(
        """
        SELECT * FROM subscriptions
        WHERE client_id=?
        ORDER BY start_date DESC, created_at DESC, subscription_id DESC
        """,
        (int(client_id),),
    ).fetchall()
    return [dict(r) for r in rows]


def create_subscription(
    conn: Any,
    client_id: int,
    *,
    plan_type: str,
    start_date: Any,
    end_date: Any,
    price: float,
    plan_name: Optional[str] = None,
    currency: Optional[str] = None,
    notes: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """Create an active subscription and mark the client active.

    Returns None if the client does not exist.
    """
    if get_client_row(conn, client_id) is None:
        return None

    start = iso_date(start_date)
    end = iso_date(end_date)
    _check_range(start, end)
    _check_choice(plan_type, PLAN_TYPES, "invalid_plan_type")
    cur_code = _check_choice(currency or DEFAULT_CURRENCY, CURRENCIES, "invalid_currency")
    if float(price) < 0:
        raise ValueError("invalid_price")

    now = utcnow_iso()
    cur = conn.execute(
        """
        INSERT INTO subscriptions (
            client_id, plan_type, plan_name, start_date, end_date,
            status, price, currency, notes, created_at, updated_at
        ) VALUES (?,?,?,?,?,?,?,?,?,?,?)
        """,
        (int(client_id), plan_type, plan_name, start, end, "active", float(price), cur_code, notes, now, now),
    )
    conn.execute(
        "UPDATE clients SET status='active', updated_at=? WHERE client_id=?",
        (now, int(client_id)),
    )
    return get_subscription(conn, int(cur.lastrowid))


def update_subscription(conn: Any, subscription_id: int, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Apply a partial update; the merged start/end range must stay valid."""
    existing = get_subscription(conn, subscription_id)
    if existing is None:
        return None

    provided = {k: changes[k] for k in _UPDATABLE if changes.get(k) is not None}
    if "start_date" in provided:
        provided["start_date"] = iso_date(provided["start_date"])
    if "end_date" in provided:
        provided["end_date"] = iso_date(provided["end_date"])
    _check_range(
        provided.get("start_date", existing["start_date"]),
        provided.get("end_date", existing["end_date"]),
    )
    if "plan_type" in provided:
        _check_choice(provided["plan_type"], PLAN_TYPES, "invalid_plan_type")
    if "status" in provided:
        _check_choice(provided["status"], SUBSCRIPTION_STATUSES, "invalid_status")
    if "currency" in provided:
        _check_choice(provided["currency"], CURRENCIES, "invalid_currency")
    if "price" in provided:
        provided["price"] = float(provided["price"])
        if provided["price"] < 0:
            raise ValueError("invalid_price")

    if provided:
        fields = list(provided.items()) + [("updated_at", utcnow_iso())]
        sets = ", ".join([f"{k}=?" for k, _ in fields])
        params = [v for _, v in fields] + [int(subscription_id)]
        conn.execute(f"UPDATE subscriptions SET {sets} WHERE subscription_id=?", params)

    return get_subscription(conn, subscription_id)
