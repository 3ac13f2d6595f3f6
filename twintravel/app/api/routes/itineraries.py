"""Itinerary, booking and daily activity endpoints.

Writes go through the nested editor (whole-travel read-modify-write); reads
use the itinerary projection.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from twintravel.app.api.auth import get_twin_context
from twintravel.app.api.deps import (
    get_indexer,
    get_itinerary_reader,
    get_nested_editor,
    raise_for_result,
)
from twintravel.app.db.context import TwinContext
from twintravel.app.models.requests import (
    ActivityCreate,
    ActivityUpdate,
    BookingCreate,
    BookingUpdate,
    ItineraryCreate,
    ItineraryUpdate,
)
from twintravel.app.models.results import (
    ActivityListResult,
    ActivityResult,
    BookingListResult,
    BookingResult,
    ItineraryResult,
)
from twintravel.app.travels.editor import NestedEditor
from twintravel.app.travels.indexing import TravelIndexer, replicate_travel
from twintravel.app.travels.subquery import ItineraryReader

router = APIRouter(
    prefix="/twins/{twin_id}/travels/{travel_id}/itineraries", tags=["itineraries"]
)

Context = Annotated[TwinContext, Depends(get_twin_context)]
Editor = Annotated[NestedEditor, Depends(get_nested_editor)]
Reader = Annotated[ItineraryReader, Depends(get_itinerary_reader)]
Indexer = Annotated[TravelIndexer, Depends(get_indexer)]


async def _replicate(result: ItineraryResult, indexer: TravelIndexer, ctx: TwinContext) -> None:
    if result.travel is not None:
        await replicate_travel(indexer, result.travel, ctx)


# Itineraries


@router.post(
    "",
    response_model=ItineraryResult,
    response_model_by_alias=False,
    status_code=status.HTTP_201_CREATED,
)
async def create_itinerary(
    travel_id: str, request: ItineraryCreate, ctx: Context, editor: Editor, indexer: Indexer
) -> ItineraryResult:
    """Append an itinerary to a travel.

    Args:
        travel_id: Parent travel
        request: Itinerary fields
        ctx: Twin context
        editor: Nested editor
        indexer: Search index replication target

    Returns:
        Result with the new itinerary and the refreshed travel
    """
    result = await editor.create_itinerary(travel_id, request, ctx)
    raise_for_result(result)
    await _replicate(result, indexer, ctx)
    return result


@router.get("/{itinerary_id}", response_model=ItineraryResult, response_model_by_alias=False)
async def get_itinerary(
    travel_id: str, itinerary_id: str, ctx: Context, reader: Reader
) -> ItineraryResult:
    """Get one itinerary with its bookings and activities."""
    result = await reader.get_itinerary(travel_id, itinerary_id, ctx)
    raise_for_result(result)
    return result


@router.patch("/{itinerary_id}", response_model=ItineraryResult, response_model_by_alias=False)
async def update_itinerary(
    travel_id: str,
    itinerary_id: str,
    request: ItineraryUpdate,
    ctx: Context,
    editor: Editor,
    indexer: Indexer,
) -> ItineraryResult:
    """Merge the supplied fields into an itinerary."""
    result = await editor.update_itinerary(travel_id, itinerary_id, request, ctx)
    raise_for_result(result)
    await _replicate(result, indexer, ctx)
    return result


@router.delete(
    "/{itinerary_id}", response_model=ItineraryResult, response_model_by_alias=False
)
async def delete_itinerary(
    travel_id: str, itinerary_id: str, ctx: Context, editor: Editor, indexer: Indexer
) -> ItineraryResult:
    """Remove an itinerary with its bookings and activities."""
    result = await editor.delete_itinerary(travel_id, itinerary_id, ctx)
    raise_for_result(result)
    await _replicate(result, indexer, ctx)
    return result


# Bookings


@router.get(
    "/{itinerary_id}/bookings", response_model=BookingListResult, response_model_by_alias=False
)
async def list_bookings(
    travel_id: str, itinerary_id: str, ctx: Context, reader: Reader
) -> BookingListResult:
    """List the bookings of an itinerary."""
    result = await reader.list_bookings(travel_id, itinerary_id, ctx)
    raise_for_result(result)
    return result


@router.post(
    "/{itinerary_id}/bookings",
    response_model=BookingResult,
    response_model_by_alias=False,
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(
    travel_id: str, itinerary_id: str, request: BookingCreate, ctx: Context, editor: Editor
) -> BookingResult:
    """Append a booking to an itinerary."""
    result = await editor.create_booking(travel_id, itinerary_id, request, ctx)
    raise_for_result(result)
    return result


@router.get(
    "/{itinerary_id}/bookings/{booking_id}",
    response_model=BookingResult,
    response_model_by_alias=False,
)
async def get_booking(
    travel_id: str, itinerary_id: str, booking_id: str, ctx: Context, reader: Reader
) -> BookingResult:
    """Get one booking."""
    result = await reader.get_booking(travel_id, itinerary_id, booking_id, ctx)
    raise_for_result(result)
    return result


@router.patch(
    "/{itinerary_id}/bookings/{booking_id}",
    response_model=BookingResult,
    response_model_by_alias=False,
)
async def update_booking(
    travel_id: str,
    itinerary_id: str,
    booking_id: str,
    request: BookingUpdate,
    ctx: Context,
    editor: Editor,
) -> BookingResult:
    """Merge the supplied fields into a booking."""
    result = await editor.update_booking(travel_id, itinerary_id, booking_id, request, ctx)
    raise_for_result(result)
    return result


@router.delete(
    "/{itinerary_id}/bookings/{booking_id}",
    response_model=BookingResult,
    response_model_by_alias=False,
)
async def delete_booking(
    travel_id: str, itinerary_id: str, booking_id: str, ctx: Context, editor: Editor
) -> BookingResult:
    """Remove a booking."""
    result = await editor.delete_booking(travel_id, itinerary_id, booking_id, ctx)
    raise_for_result(result)
    return result


# Daily activities


@router.get(
    "/{itinerary_id}/activities",
    response_model=ActivityListResult,
    response_model_by_alias=False,
)
async def list_activities(
    travel_id: str, itinerary_id: str, ctx: Context, reader: Reader
) -> ActivityListResult:
    """List the daily activities of an itinerary."""
    result = await reader.list_activities(travel_id, itinerary_id, ctx)
    raise_for_result(result)
    return result


@router.post(
    "/{itinerary_id}/activities",
    response_model=ActivityResult,
    response_model_by_alias=False,
    status_code=status.HTTP_201_CREATED,
)
async def create_activity(
    travel_id: str, itinerary_id: str, request: ActivityCreate, ctx: Context, editor: Editor
) -> ActivityResult:
    """Append a daily activity to an itinerary."""
    result = await editor.create_activity(travel_id, itinerary_id, request, ctx)
    raise_for_result(result)
    return result


@router.get(
    "/{itinerary_id}/activities/{activity_id}",
    response_model=ActivityResult,
    response_model_by_alias=False,
)
async def get_activity(
    travel_id: str, itinerary_id: str, activity_id: str, ctx: Context, reader: Reader
) -> ActivityResult:
    """Get one daily activity."""
    result = await reader.get_activity(travel_id, itinerary_id, activity_id, ctx)
    raise_for_result(result)
    return result


@router.patch(
    "/{itinerary_id}/activities/{activity_id}",
    response_model=ActivityResult,
    response_model_by_alias=False,
)
async def update_activity(
    travel_id: str,
    itinerary_id: str,
    activity_id: str,
    request: ActivityUpdate,
    ctx: Context,
    editor: Editor,
) -> ActivityResult:
    """Merge the supplied fields into a daily activity."""
    result = await editor.update_activity(travel_id, itinerary_id, activity_id, request, ctx)
    raise_for_result(result)
    return result


@router.delete(
    "/{itinerary_id}/activities/{activity_id}",
    response_model=ActivityResult,
    response_model_by_alias=False,
)
async def delete_activity(
    travel_id: str, itinerary_id: str, activity_id: str, ctx: Context, editor: Editor
) -> ActivityResult:
    """Remove a daily activity."""
    result = await editor.delete_activity(travel_id, itinerary_id, activity_id, ctx)
    raise_for_result(result)
    return result
