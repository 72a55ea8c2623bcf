"""Gym Platform - back office API for a gym.

Admins manage clients, their subscriptions and the payments recorded against them.
Clients sign in with the 6-digit PIN generated when an admin creates their account.

Core concepts:
- Two credential sources (admins: password, clients: PIN) behind one login flow.
- Stateless JWT access/refresh pairs; route access is decided from an explicit map.
- Outstanding balances are derived per subscription, never stored.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
