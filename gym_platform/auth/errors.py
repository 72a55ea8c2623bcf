from __future__ import annotations

from fastapi import HTTPException


class Unauthorized(HTTPException):
    """401: bad credentials or an invalid/expired/wrong-kind token.

    The detail is always generic; callers never learn which part failed.
    """

    def __init__(self, detail: str = "Unauthorized") -> None:
        super().__init__(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(HTTPException):
    """403: authenticated, but the role is not allowed on this route."""

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=403, detail=detail)
