"""Create, update and delete of itineraries, bookings and daily activities.

Nested entities have no key of their own in the store, so each edit is a
read-modify-write of the whole travel through ``AggregateWriter``. Lookups
walk travel -> itinerary -> booking/activity and report the first missing
level.
"""

from collections.abc import Mapping
from typing import Any

from twintravel.app.config import Settings, get_settings
from twintravel.app.db.context import TwinContext
from twintravel.app.db.store import DocumentStore
from twintravel.app.models.common import next_timestamp, utcnow
from twintravel.app.models.requests import (
    ActivityCreate,
    ActivityUpdate,
    BookingCreate,
    BookingUpdate,
    ItineraryCreate,
    ItineraryUpdate,
)
from twintravel.app.models.results import ActivityResult, BookingResult, ItineraryResult
from twintravel.app.models.travel import Booking, DailyActivity, Itinerary, Travel
from twintravel.app.travels.aggregate import (
    AggregateWriter,
    apply_changes,
    coerce_request,
    find_activity,
    find_booking,
    find_itinerary,
    guarded,
)


def _touch(entity: Itinerary | Booking | DailyActivity) -> None:
    entity.updated_at = next_timestamp(entity.updated_at)


class NestedEditor:
    """Editor for entities nested inside a travel aggregate."""

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

    @property
    def _currency(self) -> str:
        return self._settings.default_currency

    # Itineraries

    async def create_itinerary(
        self,
        travel_id: str,
        fields: ItineraryCreate | Mapping[str, Any],
        ctx: TwinContext,
    ) -> ItineraryResult:
        """Append a new itinerary to a travel.

        The itinerary carries a snapshot of the travel's title, description,
        type and status.

        Returns:
            Result with the new itinerary and the refreshed travel
        """

        async def action() -> ItineraryResult:
            request = coerce_request(ItineraryCreate, fields)
            values = request.entity_fields(self._currency)

            def append(travel: Travel) -> Itinerary:
                now = utcnow()
                itinerary = Itinerary(
                    travel_info=travel.snapshot(), created_at=now, updated_at=now, **values
                )
                travel.itineraries.append(itinerary)
                return itinerary

            travel, itinerary = await self._writer.mutate(
                travel_id, ctx, "create_itinerary", append
            )
            return ItineraryResult.ok(itinerary, message="Itinerary created", travel=travel)

        return await guarded(ItineraryResult, "create_itinerary", action)

    async def update_itinerary(
        self,
        travel_id: str,
        itinerary_id: str,
        fields: ItineraryUpdate | Mapping[str, Any],
        ctx: TwinContext,
    ) -> ItineraryResult:
        """Merge the fields present in ``fields`` into an itinerary.

        Returns:
            Result with the updated itinerary and the refreshed travel
        """

        async def action() -> ItineraryResult:
            request = coerce_request(ItineraryUpdate, fields)
            changes = request.changed_fields(self._currency)

            def merge(travel: Travel) -> Itinerary:
                itinerary = find_itinerary(travel, itinerary_id)
                apply_changes(itinerary, changes)
                _touch(itinerary)
                return itinerary

            travel, itinerary = await self._writer.mutate(
                travel_id, ctx, "update_itinerary", merge
            )
            return ItineraryResult.ok(itinerary, message="Itinerary updated", travel=travel)

        return await guarded(ItineraryResult, "update_itinerary", action)

    async def delete_itinerary(
        self, travel_id: str, itinerary_id: str, ctx: TwinContext
    ) -> ItineraryResult:
        """Remove an itinerary and everything it owns.

        Returns:
            Result with the removed itinerary and the refreshed travel
        """

        async def action() -> ItineraryResult:
            def remove(travel: Travel) -> Itinerary:
                itinerary = find_itinerary(travel, itinerary_id)
                travel.itineraries.remove(itinerary)
                return itinerary

            travel, itinerary = await self._writer.mutate(
                travel_id, ctx, "delete_itinerary", remove
            )
            return ItineraryResult.ok(itinerary, message="Itinerary deleted", travel=travel)

        return await guarded(ItineraryResult, "delete_itinerary", action)

    # Bookings

    async def create_booking(
        self,
        travel_id: str,
        itinerary_id: str,
        fields: BookingCreate | Mapping[str, Any],
        ctx: TwinContext,
    ) -> BookingResult:
        """Append a booking to an itinerary.

        Returns:
            Result with the new booking and its refreshed itinerary
        """

        async def action() -> BookingResult:
            request = coerce_request(BookingCreate, fields)
            values = request.entity_fields(self._currency)

            def append(travel: Travel) -> tuple[Booking, Itinerary]:
                itinerary = find_itinerary(travel, itinerary_id)
                now = utcnow()
                booking = Booking(created_at=now, updated_at=now, **values)
                itinerary.bookings.append(booking)
                _touch(itinerary)
                return booking, itinerary

            _, (booking, itinerary) = await self._writer.mutate(
                travel_id, ctx, "create_booking", append
            )
            return BookingResult.ok(booking, message="Booking created", itinerary=itinerary)

        return await guarded(BookingResult, "create_booking", action)

    async def update_booking(
        self,
        travel_id: str,
        itinerary_id: str,
        booking_id: str,
        fields: BookingUpdate | Mapping[str, Any],
        ctx: TwinContext,
    ) -> BookingResult:
        """Merge the fields present in ``fields`` into a booking.

        Returns:
            Result with the updated booking and its refreshed itinerary
        """

        async def action() -> BookingResult:
            request = coerce_request(BookingUpdate, fields)
            changes = request.changed_fields(self._currency)

            def merge(travel: Travel) -> tuple[Booking, Itinerary]:
                itinerary = find_itinerary(travel, itinerary_id)
                booking = find_booking(itinerary, booking_id)
                apply_changes(booking, changes)
                _touch(booking)
                _touch(itinerary)
                return booking, itinerary

            _, (booking, itinerary) = await self._writer.mutate(
                travel_id, ctx, "update_booking", merge
            )
            return BookingResult.ok(booking, message="Booking updated", itinerary=itinerary)

        return await guarded(BookingResult, "update_booking", action)

    async def delete_booking(
        self, travel_id: str, itinerary_id: str, booking_id: str, ctx: TwinContext
    ) -> BookingResult:
        """Remove a booking from its itinerary.

        Returns:
            Result with the removed booking and its refreshed itinerary
        """

        async def action() -> BookingResult:
            def remove(travel: Travel) -> tuple[Booking, Itinerary]:
                itinerary = find_itinerary(travel, itinerary_id)
                booking = find_booking(itinerary, booking_id)
                itinerary.bookings.remove(booking)
                _touch(itinerary)
                return booking, itinerary

            _, (booking, itinerary) = await self._writer.mutate(
                travel_id, ctx, "delete_booking", remove
            )
            return BookingResult.ok(booking, message="Booking deleted", itinerary=itinerary)

        return await guarded(BookingResult, "delete_booking", action)

    # Daily activities

    async def create_activity(
        self,
        travel_id: str,
        itinerary_id: str,
        fields: ActivityCreate | Mapping[str, Any],
        ctx: TwinContext,
    ) -> ActivityResult:
        """Append a daily activity to an itinerary.

        Returns:
            Result with the new activity and its refreshed itinerary
        """

        async def action() -> ActivityResult:
            request = coerce_request(ActivityCreate, fields)
            values = request.entity_fields(self._currency)

            def append(travel: Travel) -> tuple[DailyActivity, Itinerary]:
                itinerary = find_itinerary(travel, itinerary_id)
                now = utcnow()
                activity = DailyActivity(created_at=now, updated_at=now, **values)
                itinerary.daily_activities.append(activity)
                _touch(itinerary)
                return activity, itinerary

            _, (activity, itinerary) = await self._writer.mutate(
                travel_id, ctx, "create_activity", append
            )
            return ActivityResult.ok(activity, message="Activity created", itinerary=itinerary)

        return await guarded(ActivityResult, "create_activity", action)

    async def update_activity(
        self,
        travel_id: str,
        itinerary_id: str,
        activity_id: str,
        fields: ActivityUpdate | Mapping[str, Any],
        ctx: TwinContext,
    ) -> ActivityResult:
        """Merge the fields present in ``fields`` into a daily activity.

        Returns:
            Result with the updated activity and its refreshed itinerary
        """

        async def action() -> ActivityResult:
            request = coerce_request(ActivityUpdate, fields)
            changes = request.changed_fields(self._currency)

            def merge(travel: Travel) -> tuple[DailyActivity, Itinerary]:
                itinerary = find_itinerary(travel, itinerary_id)
                activity = find_activity(itinerary, activity_id)
                apply_changes(activity, changes)
                _touch(activity)
                _touch(itinerary)
                return activity, itinerary

            _, (activity, itinerary) = await self._writer.mutate(
                travel_id, ctx, "update_activity", merge
            )
            return ActivityResult.ok(activity, message="Activity updated", itinerary=itinerary)

        return await guarded(ActivityResult, "update_activity", action)

    async def delete_activity(
        self, travel_id: str, itinerary_id: str, activity_id: str, ctx: TwinContext
    ) -> ActivityResult:
        """Remove a daily activity from its itinerary.

        Returns:
            Result with the removed activity and its refreshed itinerary
        """

        async def action() -> ActivityResult:
            def remove(travel: Travel) -> tuple[DailyActivity, Itinerary]:
                itinerary = find_itinerary(travel, itinerary_id)
                activity = find_activity(itinerary, activity_id)
                itinerary.daily_activities.remove(activity)
                _touch(itinerary)
                return activity, itinerary

            _, (activity, itinerary) = await self._writer.mutate(
                travel_id, ctx, "delete_activity", remove
            )
            return ActivityResult.ok(activity, message="Activity deleted", itinerary=itinerary)

        return await guarded(ActivityResult, "delete_activity", action)
