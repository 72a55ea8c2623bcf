from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional


def _debug(msg: str) -> None:
    print(f"[outstanding] {msg}")


# Only these subscriptions can still owe money. Cancelled ones are written off.
BILLABLE_STATUSES = ("active", "expired")


@dataclass(frozen=True)
class OutstandingItem:
    subscription_id: int
    client_id: int
    client_name: str
    plan_type: str
    plan_name: Optional[str]
    end_date: str
    total_price: float
    total_paid: float
    outstanding_amount: float
    currency: str
    last_payment_date: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def find_outstanding(conn: Any) -> List[OutstandingItem]:
    """Per-subscription unpaid balances, soonest end date first.

    outstanding_amount = price - sum(payments), kept only when > 0. Subscriptions whose
    client row is gone are skipped. Ties on end_date are ordered by client name.
    """
    placeholders = ",".join("?" for _ in BILLABLE_STATUSES)
    rows = conn.execute(
        f"""
        SELECT
            s.subscription_id,
            s.client_id,
            c.first_name,
            c.last_name,
            s.plan_type,
            s.plan_name,
            s.end_date,
            s.price,
            s.currency,
            COALESCE(SUM(p.amount), 0) AS total_paid,
            MAX(p.payment_date) AS last_payment_date
        FROM subscriptions s
        JOIN clients c ON c.client_id = s.client_id
        LEFT JOIN payments p ON p.subscription_id = s.subscription_id
        WHERE s.status IN ({placeholders})
        GROUP BY s.subscription_id, c.client_id
        """,
        BILLABLE_STATUSES,
    ).fetchall()

    items: List[OutstandingItem] = []
    for r in rows:
        price = float(r["price"] or 0)
        paid = float(r["total_paid"] or 0)
        # Amounts are entered in cents; rounding drops float residue like 1e-14.
        outstanding = round(price - paid, 2)
        if outstanding <= 0:
            continue
        items.append(
            OutstandingItem(
                subscription_id=int(r["subscription_id"]),
                client_id=int(r["client_id"]),
                client_name=f"{r['first_name']} {r['last_name']}",
                plan_type=str(r["plan_type"]),
                plan_name=r["plan_name"],
                end_date=str(r["end_date"]),
                total_price=price,
                total_paid=paid,
                outstanding_amount=outstanding,
                currency=str(r["currency"]),
                last_payment_date=r["last_payment_date"],
            )
        )

    items.sort(key=lambda it: (it.end_date, it.client_name))
    _debug(f"{len(items)} subscriptions with an outstanding balance")
    return items
