from __future__ import annotations
from fastapi import HTTPException, Request, status

from security.tokens import get_subject_from_token


async def get_current_user(request: Request) -> str:
    """
    Dependency for protected routers: requires "Authorization: Bearer <jwt>"
    and returns the token subject.
    """
    auth = request.headers.get("Authorization")
    if not auth or not auth.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = auth.split(" ", 1)[1].strip()
    return get_subject_from_token(access_token)
