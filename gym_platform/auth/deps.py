from __future__ import annotations

from typing import AbstractSet, Any, Callable, Dict, Mapping, Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .errors import Forbidden, Unauthorized
from .security import TOKEN_ACCESS
from .service import user_from_payload, verify_token


_bearer = HTTPBearer(auto_error=False)

RouteRoles = Mapping[str, Optional[AbstractSet[str]]]


def route_key(request: Request) -> str:
    """Identify the matched route as "METHOD /path/{template}"."""
    route = request.scope.get("route")
    path = getattr(route, "path", None) or request.url.path
    return f"{request.method.upper()} {path}"


def make_access_guard(
    route_roles: RouteRoles,
    public_routes: AbstractSet[str],
) -> Callable[..., Optional[Dict[str, Any]]]:
    """Build the app-wide dependency that authenticates and authorizes each request.

    route_roles maps a route key to the set of roles allowed on it. Routes missing
    from the map (or mapped to None) accept any authenticated principal. Routes in
    public_routes skip authentication entirely.
    """

    def access_guard(
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    ) -> Optional[Dict[str, Any]]:
        key = route_key(request)
        if key in public_routes:
            return None

        cfg = getattr(request.app.state, "cfg", None)
        if cfg is None:
            raise HTTPException(status_code=500, detail="server_config_missing")

        token = credentials.credentials if credentials is not None else None
        if not token:
            raise Unauthorized("Not authenticated")

        payload = verify_token(cfg, token, TOKEN_ACCESS)
        user = user_from_payload(payload)
        request.state.user = user

        required = route_roles.get(key)
        if required and user["role"] not in required:
            raise Forbidden()
        return user

    return access_guard


def get_current_user(request: Request) -> Dict[str, Any]:
    """The principal attached by the access guard."""
    user = getattr(request.state, "user", None)
    if user is None:
        raise Unauthorized("Not authenticated")
    return user
