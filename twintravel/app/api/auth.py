"""Minimal auth dependency.

Stub implementation: authentication is handled by an upstream gateway. When a
bearer token is present it must name the twin addressed by the path.
"""

from typing import Annotated

from fastapi import Header, HTTPException, Path, status

from twintravel.app.db.context import TwinContext


async def get_twin_context(
    twin_id: Annotated[str, Path(min_length=1)],
    authorization: Annotated[str | None, Header()] = None,
) -> TwinContext:
    """Build the twin context for a request.

    Either:
    - No header: trust the path twin id (gateway already authenticated)
    - "Bearer <twin_id>": the token must match the path twin id

    Args:
        twin_id: Twin id from the URL path
        authorization: Authorization header (e.g., "Bearer <token>")

    Returns:
        TwinContext scoped to the twin's partition

    Raises:
        HTTPException: If authorization is malformed or names another twin
    """
    if not authorization:
        return TwinContext(twin_id=twin_id)

    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization[7:]  # Strip "Bearer "

    if token != twin_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )

    return TwinContext(twin_id=twin_id)
