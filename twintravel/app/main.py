"""FastAPI application."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from twintravel.app.api.routes.documents import router as documents_router
from twintravel.app.api.routes.health import router as health_router
from twintravel.app.api.routes.itineraries import router as itineraries_router
from twintravel.app.api.routes.metrics import router as metrics_router
from twintravel.app.api.routes.travels import router as travels_router
from twintravel.app.config import get_settings
from twintravel.app.db.engine import create_schema, get_async_engine


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the document table on startup when a database is configured."""
    if get_settings().database_url:
        await create_schema(get_async_engine())
    yield


app = FastAPI(title="Twin Travel API", version="0.1.0", lifespan=lifespan)

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(travels_router)
app.include_router(itineraries_router)
app.include_router(documents_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Twin Travel API", "version": "0.1.0"}
