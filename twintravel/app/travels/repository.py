"""Root-level create, read, update and delete of travel aggregates."""

from collections.abc import Mapping
from typing import Any

from twintravel.app.config import Settings, get_settings
from twintravel.app.db.context import TwinContext
from twintravel.app.db.store import DocumentStore
from twintravel.app.models.common import utcnow
from twintravel.app.models.requests import TravelCreate, TravelUpdate
from twintravel.app.models.results import TravelResult
from twintravel.app.models.travel import Travel
from twintravel.app.travels.aggregate import (
    AggregateWriter,
    apply_changes,
    coerce_request,
    guarded,
)


def refresh_itinerary_snapshots(travel: Travel) -> None:
    """Copy the travel's current title/description/type/status onto every itinerary."""
    snapshot = travel.snapshot()
    for itinerary in travel.itineraries:
        itinerary.travel_info = snapshot.model_copy()


class TravelRepository:
    """Repository for travel aggregate root operations."""

    def __init__(
        self,
        store: DocumentStore,
        writer: AggregateWriter | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._writer = writer or AggregateWriter(
            store, retry_attempts=self._settings.write_retry_attempts
        )

    async def create(
        self, fields: TravelCreate | Mapping[str, Any], ctx: TwinContext
    ) -> TravelResult:
        """Create a new travel with an empty itinerary list.

        Args:
            fields: Travel fields (request model or plain mapping)
            ctx: Twin context (partition)

        Returns:
            Result carrying the created travel, or validation/store failure
        """

        async def action() -> TravelResult:
            request = coerce_request(TravelCreate, fields)
            now = utcnow()
            travel = Travel(
                twin_id=ctx.twin_id,
                created_at=now,
                updated_at=now,
                **request.entity_fields(self._settings.default_currency),
            )
            travel.refresh_duration()

            created = await self._writer.insert(travel, ctx)
            return TravelResult.ok(created, message="Travel created")

        return await guarded(TravelResult, "create_travel", action)

    async def get(self, travel_id: str, ctx: TwinContext) -> TravelResult:
        """Get a travel by id.

        Args:
            travel_id: Travel id
            ctx: Twin context (enforces partition)

        Returns:
            Result carrying the travel, or not_found
        """

        async def action() -> TravelResult:
            travel = await self._writer.load(travel_id, ctx)
            return TravelResult.ok(travel)

        return await guarded(TravelResult, "get_travel", action)

    async def update(
        self, travel_id: str, fields: TravelUpdate | Mapping[str, Any], ctx: TwinContext
    ) -> TravelResult:
        """Merge the fields present in ``fields`` into a stored travel.

        Omitted fields keep their stored value. Duration is recomputed from
        the merged dates, and itinerary snapshots follow root changes.

        Args:
            travel_id: Travel id
            fields: Partial fields (request model or plain mapping)
            ctx: Twin context (enforces partition)

        Returns:
            Result carrying the updated travel, or not_found / failure
        """

        async def action() -> TravelResult:
            request = coerce_request(TravelUpdate, fields)
            changes = request.changed_fields(self._settings.default_currency)

            def merge(travel: Travel) -> None:
                before = travel.snapshot()
                apply_changes(travel, changes)
                if travel.snapshot() != before:
                    refresh_itinerary_snapshots(travel)

            travel, _ = await self._writer.mutate(travel_id, ctx, "update_travel", merge)
            return TravelResult.ok(travel, message="Travel updated")

        return await guarded(TravelResult, "update_travel", action)

    async def delete(self, travel_id: str, ctx: TwinContext) -> TravelResult:
        """Delete a travel together with everything nested inside it.

        Args:
            travel_id: Travel id
            ctx: Twin context (enforces partition)

        Returns:
            Result carrying the deleted snapshot, or not_found
        """

        async def action() -> TravelResult:
            travel = await self._writer.remove(travel_id, ctx)
            return TravelResult.ok(travel, message="Travel deleted")

        return await guarded(TravelResult, "delete_travel", action)
