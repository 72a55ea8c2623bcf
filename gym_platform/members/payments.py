from __future__ import annotations

from typing import Any, Dict, List, Optional

from gym_platform.db import row_to_dict
from gym_platform.util.time import iso_date, utcnow_iso

from .subscriptions import get_subscription


PAYMENT_METHODS = ("cash", "card", "transfer")

_UPDATABLE = ("amount", "payment_date", "method", "notes")


def _check_amount(amount: Any) -> float:
    a = float(amount)
    if a <= 0:
        raise ValueError("invalid_amount")
    return a


def _check_method(method: str) -> str:
    if method not in PAYMENT_METHODS:
        raise ValueError("invalid_method")
    return method


def get_payment(conn: Any, payment_id: int) -> Optional[Dict[str, Any]]:
    row = conn.execute("SELECT * FROM payments WHERE payment_id=?", (int(payment_id),)).fetchone()
    return row_to_dict(row)


def create_payment(
    conn: Any,
    subscription_id: int,
    *,
    amount: float,
    payment_date: Any,
    method: str,
    notes: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """Record a payment against a subscription. Returns None if it does not exist."""
    sub = get_subscription(conn, subscription_id)
    if sub is None:
        return None

    now = utcnow_iso()
    cur = conn.execute(
        """
        INSERT INTO payments (subscription_id, client_id, amount, payment_date, method, notes, created_at, updated_at)
        VALUES (?,?,?,?,?,?,?,?)
        """,
        (
            int(subscription_id),
            int(sub["client_id"]),
            _check_amount(amount),
            iso_date(payment_date),
            _check_method(method),
            notes,
            now,
            now,
        ),
    )
    return get_payment(conn, int(cur.lastrowid))


def list_payments_for_subscription(conn: Any, subscription_id: int) -> List[Dict[str, Any]]:
    rows = conn.execute(
        """
        SELECT * FROM payments
        WHERE subscription_id=?
        ORDER BY payment_date DESC, created_at DESC, payment_id DESC
        """,
        (int(subscription_id),),
    ).fetchall()
    return [dict(r) for r in rows]


def list_payments_for_client(conn: Any, client_id: int) -> List[Dict[str, Any]]:
    rows = conn.execute(
        """
        SELECT * FROM payments
        WHERE client_id=?
        ORDER BY payment_date DESC, created_at DESC, payment_id DESC
        """,
        (int(client_id),),
    ).fetchall()
    return [dict(r) for r in rows]


def update_payment(conn: Any, payment_id: int, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if get_payment(conn, payment_id) is None:
        return None

    fields: list[tuple[str, Any]] = []
    for col in _UPDATABLE:
        if changes.get(col) is None:
            continue
        value = changes[col]
        if col == "amount":
            value = _check_amount(value)
        elif col == "payment_date":
            value = iso_date(value)
        elif col == "method":
            value = _check_method(value)
        fields.append((col, value))

    if fields:
        fields.append(("updated_at", utcnow_iso()))
        sets = ", ".join([f"{k}=?" for k, _ in fields])
        params = [v for _, v in fields] + [int(payment_id)]
        conn.execute(f"UPDATE payments SET {sets} WHERE payment_id=?", params)

    return get_payment(conn, payment_id)


def delete_payment(conn: Any, payment_id: int) -> Optional[Dict[str, Any]]:
    cur = conn.execute("DELETE FROM payments WHERE payment_id=?", (int(payment_id),))
    if int(cur.rowcount or 0) == 0:
        return None
    return {"deleted": True, "id": int(payment_id)}
