"""Read-only projection of a single itinerary out of its travel document.

Only the matching itinerary element is fetched from the store. Results are
detached copies and are never used as the basis for a write.
"""

from twintravel.app.db.context import TwinContext
from twintravel.app.db.store import DocumentStore
from twintravel.app.models.results import (
    ActivityListResult,
    ActivityResult,
    BookingListResult,
    BookingResult,
    ItineraryResult,
    ResourceLevel,
)
from twintravel.app.models.travel import ITINERARIES_FIELD, Itinerary
from twintravel.app.travels.aggregate import EntityNotFound, find_activity, find_booking, guarded


class ItineraryReader:
    """Fast read path for itineraries and their bookings and activities."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def _project(self, travel_id: str, itinerary_id: str, ctx: TwinContext) -> Itinerary:
        element = await self._store.read_array_element(
            ctx.twin_id, travel_id, ITINERARIES_FIELD, itinerary_id
        )
        if element is None:
            # Tell a missing travel apart from a missing itinerary
            if not await self._store.item_exists(ctx.twin_id, travel_id):
                raise EntityNotFound(ResourceLevel.travel, travel_id)
            raise EntityNotFound(ResourceLevel.itinerary, itinerary_id)
        return Itinerary.model_validate(element)

    async def get_itinerary(
        self, travel_id: str, itinerary_id: str, ctx: TwinContext
    ) -> ItineraryResult:
        """Get one itinerary with its bookings and activities."""

        async def action() -> ItineraryResult:
            itinerary = await self._project(travel_id, itinerary_id, ctx)
            return ItineraryResult.ok(itinerary)

        return await guarded(ItineraryResult, "get_itinerary", action)

    async def list_bookings(
        self, travel_id: str, itinerary_id: str, ctx: TwinContext
    ) -> BookingListResult:
        """List the bookings of one itinerary in stored order."""

        async def action() -> BookingListResult:
            itinerary = await self._project(travel_id, itinerary_id, ctx)
            return BookingListResult.ok(itinerary.bookings, total=len(itinerary.bookings))

        return await guarded(BookingListResult, "list_bookings", action)

    async def get_booking(
        self, travel_id: str, itinerary_id: str, booking_id: str, ctx: TwinContext
    ) -> BookingResult:
        """Get one booking together with its itinerary."""

        async def action() -> BookingResult:
            itinerary = await self._project(travel_id, itinerary_id, ctx)
            booking = find_booking(itinerary, booking_id)
            return BookingResult.ok(booking, itinerary=itinerary)

        return await guarded(BookingResult, "get_booking", action)

    async def list_activities(
        self, travel_id: str, itinerary_id: str, ctx: TwinContext
    ) -> ActivityListResult:
        """List the daily activities of one itinerary in stored order."""

        async def action() -> ActivityListResult:
            itinerary = await self._project(travel_id, itinerary_id, ctx)
            activities = itinerary.daily_activities
            return ActivityListResult.ok(activities, total=len(activities))

        return await guarded(ActivityListResult, "list_activities", action)

    async def get_activity(
        self, travel_id: str, itinerary_id: str, activity_id: str, ctx: TwinContext
    ) -> ActivityResult:
        """Get one daily activity together with its itinerary."""

        async def action() -> ActivityResult:
            itinerary = await self._project(travel_id, itinerary_id, ctx)
            activity = find_activity(itinerary, activity_id)
            return ActivityResult.ok(activity, itinerary=itinerary)

        return await guarded(ActivityResult, "get_activity", action)
