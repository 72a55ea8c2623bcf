from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from gym_platform.api.access import PUBLIC_ROUTES, ROUTE_ROLES
from gym_platform.auth import (
    bootstrap_admin_if_needed,
    get_current_user,
    login_admin,
    login_client,
    make_access_guard,
    refresh,
)
from gym_platform.compute.outstanding import find_outstanding
from gym_platform.config import DEV_JWT_SECRET, Config, load_config
from gym_platform.db import connect, init_db
from gym_platform.members import clients as clients_crud
from gym_platform.members import payments as payments_crud
from gym_platform.members import subscriptions as subscriptions_crud


def _debug(msg: str) -> None:
    print(f"[api] {msg}")


router = APIRouter()


def get_config(request: Request) -> Config:
    return request.app.state.cfg


def _bad_request(e: ValueError) -> HTTPException:
    detail = str(e)
    if detail == "email_exists":
        return HTTPException(status_code=409, detail=detail)
    return HTTPException(status_code=400, detail=detail)


def _not_found(what: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{what}_not_found")


# -----------------------------
# Health
# -----------------------------


@router.get("/health")
def health() -> Dict[str, Any]:
    return {"status": "ok"}


# -----------------------------
# Auth
# -----------------------------


class AdminLoginRequest(BaseModel):
    email: str
    password: str = Field(min_length=6)


class ClientLoginRequest(BaseModel):
    email: str
    pin: str = Field(pattern=r"^[0-9]{6}$")


class RefreshRequest(BaseModel):
    refresh_token: str = Field(alias="refreshToken", min_length=1)


@router.post("/auth/admin/login")
def auth_admin_login(payload: AdminLoginRequest, cfg: Config = Depends(get_config)) -> Dict[str, Any]:
    with connect(cfg.DB_DSN) as conn:
        return login_admin(conn, cfg, payload.email, payload.password)


@router.post("/auth/client/login")
def auth_client_login(payload: ClientLoginRequest, cfg: Config = Depends(get_config)) -> Dict[str, Any]:
    with connect(cfg.DB_DSN) as conn:
        return login_client(conn, cfg, payload.email, payload.pin)


@router.post("/auth/refresh")
def auth_refresh(payload: RefreshRequest, cfg: Config = Depends(get_config)) -> Dict[str, Any]:
    return refresh(cfg, payload.refresh_token)


@router.get("/auth/me")
def auth_me(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    return {"user": user}


# -----------------------------
# Clients
# -----------------------------


class CreateClientRequest(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: str
    phone: str = Field(pattern=r"^\+?[0-9]{8,15}$")
    status: Optional[str] = None


class UpdateClientRequest(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = None
    phone: Optional[str] = Field(None, pattern=r"^\+?[0-9]{8,15}$")
    status: Optional[str] = None


@router.get("/clients")
def list_clients(cfg: Config = Depends(get_config)) -> List[Dict[str, Any]]:
    with connect(cfg.DB_DSN) as conn:
        return clients_crud.list_clients(conn)


@router.post("/clients", status_code=201)
def create_client(payload: CreateClientRequest, cfg: Config = Depends(get_config)) -> Dict[str, Any]:
    with connect(cfg.DB_DSN) as conn:
        try:
            return clients_crud.create_client(
                conn,
                first_name=payload.first_name,
                last_name=payload.last_name,
                email=payload.email,
                phone=payload.phone,
                status=payload.status or "invited",
            )
        except ValueError as e:
            raise _bad_request(e)


@router.get("/clients/{client_id}")
def get_client(client_id: int, cfg: Config = Depends(get_config)) -> Dict[str, Any]:
    with connect(cfg.DB_DSN) as conn:
        client = clients_crud.get_client(conn, client_id)
    if client is None:
        raise _not_found("client")
    return client


@router.put("/clients/{client_id}")
def update_client(
    client_id: int,
    payload: UpdateClientRequest,
    cfg: Config = Depends(get_config),
) -> Dict[str, Any]:
    with connect(cfg.DB_DSN) as conn:
        try:
            client = clients_crud.update_client(conn, client_id, payload.model_dump(exclude_none=True))
        except ValueError as e:
            raise _bad_request(e)
    if client is None:
        raise _not_found("client")
    return client


@router.delete("/clients/{client_id}")
def suspend_client(client_id: int, cfg: Config = Depends(get_config)) -> Dict[str, Any]:
    """Clients are never hard-deleted; DELETE suspends them."""
    with connect(cfg.DB_DSN) as conn:
        client = clients_crud.suspend_client(conn, client_id)
    if client is None:
        raise _not_found("client")
    return client


# -----------------------------
# Subscriptions
# -----------------------------


class CreateSubscriptionRequest(BaseModel):
    plan_type: str
    plan_name: Optional[str] = Field(None, min_length=1, max_length=100)
    start_date: date
    end_date: date
    price: float = Field(ge=0)
    currency: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=500)


class UpdateSubscriptionRequest(BaseModel):
    plan_type: Optional[str] = None
    plan_name: Optional[str] = Field(None, min_length=1, max_length=100)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=500)


@router.get("/clients/{client_id}/subscriptions")
def list_client_subscriptions(client_id: int, cfg: Config = Depends(get_config)) -> List[Dict[str, Any]]:
    with connect(cfg.DB_DSN) as conn:
        if clients_crud.get_client_row(conn, client_id) is None:
            raise _not_found("client")
        return subscriptions_crud.list_subscriptions_for_client(conn, client_id)


@router.post("/clients/{client_id}/subscriptions", status_code=201)
def create_client_subscription(
    client_id: int,
    payload: CreateSubscriptionRequest,
    cfg: Config = Depends(get_config),
) -> Dict[str, Any]:
    with connect(cfg.DB_DSN) as conn:
        try:
            sub = subscriptions_crud.create_subscription(conn, client_id, **payload.model_dump())
        except ValueError as e:
            raise _bad_request(e)
    if sub is None:
        raise _not_found("client")
    return sub


@router.get("/subscriptions/{subscription_id}")
def get_subscription(subscription_id: int, cfg: Config = Depends(get_config)) -> Dict[str, Any]:
    with connect(cfg.DB_DSN) as conn:
        sub = subscriptions_crud.get_subscription(conn, subscription_id)
    if sub is None:
        raise _not_found("subscription")
    return sub


@router.put("/subscriptions/{subscription_id}")
def update_subscription(
    subscription_id: int,
    payload: UpdateSubscriptionRequest,
    cfg: Config = Depends(get_config),
) -> Dict[str, Any]:
    with connect(cfg.DB_DSN) as conn:
        try:
            sub = subscriptions_crud.update_subscription(
                conn, subscription_id, payload.model_dump(exclude_none=True)
            )
        except ValueError as e:
            raise _bad_request(e)
    if sub is None:
        raise _not_found("subscription")
    return sub


# -----------------------------
# Payments
# -----------------------------


class CreatePaymentRequest(BaseModel):
    amount: float = Field(ge=0.01)
    payment_date: date
    method: str
    notes: Optional[str] = Field(None, min_length=1, max_length=500)


class UpdatePaymentRequest(BaseModel):
    amount: Optional[float] = Field(None, ge=0.01)
    payment_date: Optional[date] = None
    method: Optional[str] = None
    notes: Optional[str] = Field(None, min_length=1, max_length=500)


@router.get("/payments/outstanding")
def list_outstanding(cfg: Config = Depends(get_config)) -> List[Dict[str, Any]]:
    with connect(cfg.DB_DSN) as conn:
        return [item.to_dict() for item in find_outstanding(conn)]


@router.get("/subscriptions/{subscription_id}/payments")
def list_subscription_payments(subscription_id: int, cfg: Config = Depends(get_config)) -> List[Dict[str, Any]]:
    with connect(cfg.DB_DSN) as conn:
        if subscriptions_crud.get_subscription(conn, subscription_id) is None:
            raise _not_found("subscription")
        return payments_crud.list_payments_for_subscription(conn, subscription_id)


@router.post("/subscriptions/{subscription_id}/payments", status_code=201)
def create_subscription_payment(
    subscription_id: int,
    payload: CreatePaymentRequest,
    cfg: Config = Depends(get_config),
) -> Dict[str, Any]:
    with connect(cfg.DB_DSN) as conn:
        try:
            payment = payments_crud.create_payment(conn, subscription_id, **payload.model_dump())
        except ValueError as e:
            raise _bad_request(e)
    if payment is None:
        raise _not_found("subscription")
    return payment


@router.get("/clients/{client_id}/payments")
def list_client_payments(client_id: int, cfg: Config = Depends(get_config)) -> List[Dict[str, Any]]:
    with connect(cfg.DB_DSN) as conn:
        if clients_crud.get_client_row(conn, client_id) is None:
            raise _not_found("client")
        return payments_crud.list_payments_for_client(conn, client_id)


@router.put("/payments/{payment_id}")
def update_payment(
    payment_id: int,
    payload: UpdatePaymentRequest,
    cfg: Config = Depends(get_config),
) -> Dict[str, Any]:
    with connect(cfg.DB_DSN) as conn:
        try:
            payment = payments_crud.update_payment(conn, payment_id, payload.model_dump(exclude_none=True))
        except ValueError as e:
            raise _bad_request(e)
    if payment is None:
        raise _not_found("payment")
    return payment


@router.delete("/payments/{payment_id}")
def delete_payment(payment_id: int, cfg: Config = Depends(get_config)) -> Dict[str, Any]:
    with connect(cfg.DB_DSN) as conn:
        result = payments_crud.delete_payment(conn, payment_id)
    if result is None:
        raise _not_found("payment")
    return result


# -----------------------------
# App
# -----------------------------


def create_app(cfg: Config | None = None) -> FastAPI:
    cfg = cfg or load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Ensure schema exists.
        init_db(cfg.DB_DSN)

        if cfg.AUTH_JWT_SECRET == DEV_JWT_SECRET:
            _debug("WARNING: using the development JWT secret; set JWT_SECRET in production")

        # Bootstrap first admin if needed (only when admins table is empty)
        boot = bootstrap_admin_if_needed(cfg)
        if boot:
            _debug(f"Bootstrapped initial admin: email={boot.get('email')}")
        yield

    app = FastAPI(
        title="Gym Platform",
        version="0.1.0",
        lifespan=lifespan,
        dependencies=[Depends(make_access_guard(ROUTE_ROLES, PUBLIC_ROUTES))],
    )
    # Make config available to handlers and the access guard.
    app.state.cfg = cfg

    # CORS is mainly needed for local development (Vite on :5173 -> API on :8000).
    cors_origins = [o.strip() for o in (cfg.CORS_ALLOW_ORIGINS or "").split(",") if o.strip()]
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(router)
    return app


app = create_app()
