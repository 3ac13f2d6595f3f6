"""Database engine and schema setup."""

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from twintravel.app.config import Settings, get_settings
from twintravel.app.db.models import Base


def create_async_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Create async SQLAlchemy engine from settings.

    Raises:
        ValueError: If DATABASE_URL is unset or empty.
    """
    database_url = settings.database_url

    if not database_url:
        raise ValueError(
            "DATABASE_URL must be set to a valid connection string. "
            "Please configure the database_url setting."
        )

    # Convert postgresql:// to postgresql+asyncpg://
    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

    return create_async_engine(database_url, pool_pre_ping=True, echo=False)


# Global async engine
_async_engine: AsyncEngine | None = None


def get_async_engine() -> AsyncEngine:
    """Get global async engine instance."""
    global _async_engine
    if _async_engine is None:
        _async_engine = create_async_engine_from_settings(get_settings())
    return _async_engine


async def create_schema(engine: AsyncEngine) -> None:
    """Create the document table if it does not exist.

    Args:
        engine: Async engine to create the table on
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
