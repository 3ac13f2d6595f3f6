"""Integration tests for the read-only itinerary projection."""

import pytest
import pytest_asyncio

from twintravel.app.db.context import TwinContext
from twintravel.app.models.results import ErrorKind, ResourceLevel
from twintravel.app.travels.editor import NestedEditor
from twintravel.app.travels.repository import TravelRepository
from twintravel.app.travels.subquery import ItineraryReader


@pytest_asyncio.fixture
async def seeded(
    repository: TravelRepository, editor: NestedEditor, ctx: TwinContext
) -> dict[str, str]:
    travel = await repository.create({"title": "Iceland"}, ctx)
    assert travel.data is not None
    travel_id = travel.data.id
    await editor.create_itinerary(travel_id, {"title": "Decoy"}, ctx)
    itinerary = await editor.create_itinerary(travel_id, {"title": "Ring Road"}, ctx)
    assert itinerary.data is not None
    itinerary_id = itinerary.data.id

    booking_ids = []
    for title in ["Car", "Guesthouse", "Glacier tour"]:
        booking = await editor.create_booking(
            travel_id, itinerary_id, {"title": title, "start_date": "2025-07-01"}, ctx
        )
        assert booking.data is not None
        booking_ids.append(booking.data.id)

    activity = await editor.create_activity(
        travel_id, itinerary_id, {"activity_date": "2025-07-02", "title": "Blue Lagoon"}, ctx
    )
    assert activity.data is not None

    return {
        "travel_id": travel_id,
        "itinerary_id": itinerary_id,
        "booking_id": booking_ids[1],
        "activity_id": activity.data.id,
    }


@pytest.mark.asyncio
async def test_get_itinerary_projects_one_element(
    reader: ItineraryReader, ctx: TwinContext, seeded: dict[str, str]
) -> None:
    """Only the addressed itinerary comes back, with its children."""
    result = await reader.get_itinerary(seeded["travel_id"], seeded["itinerary_id"], ctx)

    assert result.success is True
    assert result.data is not None
    assert result.data.title == "Ring Road"
    assert len(result.data.bookings) == 3
    assert len(result.data.daily_activities) == 1


@pytest.mark.asyncio
async def test_list_bookings_in_stored_order(
    reader: ItineraryReader, ctx: TwinContext, seeded: dict[str, str]
) -> None:
    """Bookings are listed in insertion order with a total."""
    result = await reader.list_bookings(seeded["travel_id"], seeded["itinerary_id"], ctx)

    assert result.total == 3
    assert result.data is not None
    assert [b.title for b in result.data] == ["Car", "Guesthouse", "Glacier tour"]


@pytest.mark.asyncio
async def test_get_booking_and_activity(
    reader: ItineraryReader, ctx: TwinContext, seeded: dict[str, str]
) -> None:
    """Single booking and activity lookups carry their itinerary."""
    booking = await reader.get_booking(
        seeded["travel_id"], seeded["itinerary_id"], seeded["booking_id"], ctx
    )
    activity = await reader.get_activity(
        seeded["travel_id"], seeded["itinerary_id"], seeded["activity_id"], ctx
    )
    activities = await reader.list_activities(seeded["travel_id"], seeded["itinerary_id"], ctx)

    assert booking.data is not None
    assert booking.data.title == "Guesthouse"
    assert booking.itinerary is not None
    assert booking.itinerary.id == seeded["itinerary_id"]
    assert activity.data is not None
    assert activity.data.title == "Blue Lagoon"
    assert activities.total == 1


@pytest.mark.asyncio
async def test_missing_levels_are_distinguished(
    reader: ItineraryReader, ctx: TwinContext, other_ctx: TwinContext, seeded: dict[str, str]
) -> None:
    """Missing travel, itinerary and booking are reported at their own level."""
    no_travel = await reader.get_itinerary("nope", seeded["itinerary_id"], ctx)
    no_itinerary = await reader.list_bookings(seeded["travel_id"], "nope", ctx)
    no_booking = await reader.get_booking(
        seeded["travel_id"], seeded["itinerary_id"], "nope", ctx
    )
    wrong_twin = await reader.get_itinerary(seeded["travel_id"], seeded["itinerary_id"], other_ctx)

    assert no_travel.error == ErrorKind.not_found
    assert no_travel.missing is not None
    assert no_travel.missing.resource == ResourceLevel.travel
    assert no_itinerary.missing is not None
    assert no_itinerary.missing.resource == ResourceLevel.itinerary
    assert no_booking.missing is not None
    assert no_booking.missing.resource == ResourceLevel.booking
    assert wrong_twin.missing is not None
    assert wrong_twin.missing.resource == ResourceLevel.travel
