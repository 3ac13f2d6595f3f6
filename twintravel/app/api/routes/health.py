"""Health check endpoints.

- /health: liveness, always 200 while the process runs
- /healthz: document store connectivity with component details
"""

from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from twintravel.app.config import Settings, get_settings
from twintravel.app.db.engine import get_async_engine

router = APIRouter()


async def check_store(settings: Settings) -> tuple[bool, str]:
    """Check document store connectivity.

    Returns:
        (is_ok, status_message)
    """
    if not settings.database_url:
        return (True, "in_memory")

    try:
        async with get_async_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        return (True, "ok")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz() -> dict[str, Any] | JSONResponse:
    """Health check endpoint.

    Returns:
        200 with component status if the store is reachable
        503 if it is not
    """
    store_ok, store_status = await check_store(get_settings())

    response_body = {
        "status": "ok" if store_ok else "degraded",
        "components": {"store": store_status},
    }

    if not store_ok:
        return JSONResponse(content=response_body, status_code=503)

    return response_body
