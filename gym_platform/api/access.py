"""Route access table consulted by the access guard.

Keys are "METHOD /path-template" exactly as declared on the router. A route that is
not listed here still requires a valid access token but accepts any role.
"""

from __future__ import annotations

from typing import FrozenSet, Optional, Set

from gym_platform.auth.crud import ROLE_ADMIN


ADMIN_ONLY: FrozenSet[str] = frozenset({ROLE_ADMIN})

# Login/refresh must be reachable without a token.
PUBLIC_ROUTES: Set[str] = {
    "GET /health",
    "POST /auth/admin/login",
    "POST /auth/client/login",
    "POST /auth/refresh",
}

ROUTE_ROLES: dict[str, Optional[FrozenSet[str]]] = {
    "GET /auth/me": None,
    # Clients
    "GET /clients": ADMIN_ONLY,
    "POST /clients": ADMIN_ONLY,
    "GET /clients/{client_id}": ADMIN_ONLY,
    "PUT /clients/{client_id}": ADMIN_ONLY,
    "DELETE /clients/{client_id}": ADMIN_ONLY,
    # Subscriptions
    "GET /clients/{client_id}/subscriptions": ADMIN_ONLY,
    "POST /clients/{client_id}/subscriptions": ADMIN_ONLY,
    "GET /subscriptions/{subscription_id}": ADMIN_ONLY,
    "PUT /subscriptions/{subscription_id}": ADMIN_ONLY,
    # Payments
    "GET /payments/outstanding": ADMIN_ONLY,
    "GET /subscriptions/{subscription_id}/payments": ADMIN_ONLY,
    "POST /subscriptions/{subscription_id}/payments": ADMIN_ONLY,
    "GET /clients/{client_id}/payments": ADMIN_ONLY,
    "PUT /payments/{payment_id}": ADMIN_ONLY,
    "DELETE /payments/{payment_id}": ADMIN_ONLY,
}
