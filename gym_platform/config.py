import os
from dataclasses import dataclass

# Optional: load a local .env file if present.
try:
    from dotenv import load_dotenv

    load_dotenv()
except Exception:
    # If python-dotenv isn't installed or .env isn't present, that's fine.
    pass


DEV_JWT_SECRET = "dev_change_me"


@dataclass(frozen=True)
class Config:
    """Runtime configuration.

    IMPORTANT: Provide the JWT signing secret via environment variables or a .env file.
    Do not hardcode secrets in source code.
    """

    # -----------------
    # Core
    # -----------------
    # SQLite database file. GYM_DATABASE_URL accepts the sqlite:///path form too.
    DB_DSN: str = (
        os.environ.get("GYM_DATABASE_URL")
        or os.environ.get("GYM_DB_PATH", "./gym_platform.sqlite")
    )

    # -----------------
    # Auth (JWT)
    # -----------------
    # NOTE: In dev, this defaults to a fixed string so you can get started.
    # In production, you MUST set JWT_SECRET to a strong random value.
    AUTH_JWT_SECRET: str = os.environ.get("JWT_SECRET", DEV_JWT_SECRET)

    # Expiry strings: "<seconds>" or "<n>[smhd]" (e.g. 3600, 15m, 24h, 30d).
    # Unparseable values fall back to the defaults below.
    JWT_EXPIRY: str = os.environ.get("JWT_EXPIRY", "24h")  # admin access tokens
    CLIENT_JWT_EXPIRY: str = os.environ.get("CLIENT_JWT_EXPIRY", "30d")  # client access tokens
    JWT_REFRESH_EXPIRY: str = os.environ.get("JWT_REFRESH_EXPIRY", "30d")  # refresh tokens, any role

    # Bootstrap first admin if admins table is empty
    AUTH_BOOTSTRAP_ADMIN_EMAIL: str = os.environ.get("AUTH_BOOTSTRAP_ADMIN_EMAIL", "admin@gym.local")
    AUTH_BOOTSTRAP_ADMIN_PASSWORD: str = os.environ.get("AUTH_BOOTSTRAP_ADMIN_PASSWORD", "Admin123!")

    # -----------------
    # CORS (development)
    # -----------------
    # The admin SPA runs on Vite (:5173) during development.
    CORS_ALLOW_ORIGINS: str = os.environ.get(
        "CORS_ALLOW_ORIGINS",
        "http://localhost:5173,http://localhost:8080",
    )


def load_config() -> Config:
    return Config()
