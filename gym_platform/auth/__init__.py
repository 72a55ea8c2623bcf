"""Authentication / authorization.

Two kinds of principals share one token format:

- Admins sign in with email + password.
- Clients (gym members) sign in with email + the 6-digit PIN generated for them.

Both get a stateless JWT pair (`access` + `refresh`). Requests carry the access
token as `Authorization: Bearer <token>`; the app-wide access guard verifies it and
checks the caller's role against an explicit route -> roles map.
"""

from .crud import ROLE_ADMIN, ROLE_CLIENT, bootstrap_admin_if_needed, create_admin
from .deps import get_current_user, make_access_guard
from .errors import Forbidden, Unauthorized
from .service import login_admin, login_client, refresh

__all__ = [
    "ROLE_ADMIN",
    "ROLE_CLIENT",
    "bootstrap_admin_if_needed",
    "create_admin",
    "get_current_user",
    "make_access_guard",
    "Forbidden",
    "Unauthorized",
    "login_admin",
    "login_client",
    "refresh",
]
