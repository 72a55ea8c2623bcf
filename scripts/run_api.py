"""Serve the gym back-office API.

Usage:
  python scripts/run_api.py [--host 127.0.0.1] [--port 8000] [--reload]

Schema creation and the first-admin bootstrap happen on app startup, so a fresh
GYM_DB_PATH is usable right away.
"""

import argparse
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import uvicorn

from gym_platform.config import DEV_JWT_SECRET, load_config


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--host", default=os.environ.get("GYM_API_HOST", "0.0.0.0"))
    ap.add_argument("--port", type=int, default=int(os.environ.get("GYM_API_PORT", "8000")))
    ap.add_argument("--reload", action="store_true", help="Auto-reload on code changes (development)")
    args = ap.parse_args()

    cfg = load_config()
    print(f"Database: {cfg.DB_DSN}")
    if cfg.AUTH_JWT_SECRET == DEV_JWT_SECRET:
        print("WARNING: JWT_SECRET is not set; tokens are signed with the development secret")

    # Factory mode so --reload re-reads config from the environment in the worker process.
    uvicorn.run(
        "gym_platform.api.server:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
