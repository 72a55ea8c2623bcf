"""Create an admin account.

Usage:
  python scripts/create_admin.py --email owner@gym.local --password '...' --first-name Ana --last-name Pop

Clients are not created here: admins create them through the API, which
generates their PIN.
"""

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from gym_platform.auth.crud import create_admin
from gym_platform.config import load_config
from gym_platform.db import connect, init_db


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--email", required=True)
    ap.add_argument("--password", required=True)
    ap.add_argument("--first-name", default="Default")
    ap.add_argument("--last-name", default="Admin")
    args = ap.parse_args()

    cfg = load_config()
    init_db(cfg.DB_DSN)

    with connect(cfg.DB_DSN) as conn:
        try:
            a = create_admin(
                conn,
                email=args.email,
                password=args.password,
                first_name=args.first_name,
                last_name=args.last_name,
            )
        except ValueError as e:
            raise SystemExit(f"Could not create admin: {e}")

    print("Created admin:")
    print(a)


if __name__ == "__main__":
    main()
