"""Search-index replication hook for travels.

Indexing happens outside this service; callers invoke it after a core write
has succeeded, and a failure here never changes that write's outcome.
"""

import logging
from typing import Protocol

from twintravel.app.db.context import TwinContext
from twintravel.app.models.travel import Travel

logger = logging.getLogger(__name__)


class TravelIndexer(Protocol):
    """Replicates travels into an external search index."""

    async def index_travel(self, travel: Travel, ctx: TwinContext) -> None:
        """Add or refresh a travel in the index."""
        ...

    async def remove_travel(self, travel_id: str, ctx: TwinContext) -> None:
        """Remove a travel from the index."""
        ...


class NullTravelIndexer:
    """Indexer used when no search index is configured."""

    async def index_travel(self, travel: Travel, ctx: TwinContext) -> None:
        """No-op."""
        return None

    async def remove_travel(self, travel_id: str, ctx: TwinContext) -> None:
        """No-op."""
        return None


async def replicate_travel(indexer: TravelIndexer, travel: Travel, ctx: TwinContext) -> bool:
    """Index a travel, logging and swallowing any failure.

    Returns:
        True if the indexer succeeded
    """
    try:
        await indexer.index_travel(travel, ctx)
        return True
    except Exception:
        logger.exception(
            "Search index update failed",
            extra={"structured": {"twin_id": ctx.twin_id, "travel_id": travel.id}},
        )
        return False


async def unreplicate_travel(indexer: TravelIndexer, travel_id: str, ctx: TwinContext) -> bool:
    """Remove a travel from the index, logging and swallowing any failure.

    Returns:
        True if the indexer succeeded
    """
    try:
        await indexer.remove_travel(travel_id, ctx)
        return True
    except Exception:
        logger.exception(
            "Search index removal failed",
            extra={"structured": {"twin_id": ctx.twin_id, "travel_id": travel_id}},
        )
        return False
