"""Travel endpoints - root CRUD, listing and statistics."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from twintravel.app.api.auth import get_twin_context
from twintravel.app.api.deps import (
    get_indexer,
    get_query_engine,
    get_travel_repository,
    raise_for_result,
)
from twintravel.app.db.context import TwinContext
from twintravel.app.models.common import TravelStatus, TravelType
from twintravel.app.models.query import SortDirection, TravelQuery
from twintravel.app.models.requests import TravelCreate, TravelUpdate
from twintravel.app.models.results import TravelPageResult, TravelResult, TravelStatsResult
from twintravel.app.travels.indexing import TravelIndexer, replicate_travel, unreplicate_travel
from twintravel.app.travels.query import TravelQueryEngine
from twintravel.app.travels.repository import TravelRepository

router = APIRouter(prefix="/twins/{twin_id}/travels", tags=["travels"])

Context = Annotated[TwinContext, Depends(get_twin_context)]
Repository = Annotated[TravelRepository, Depends(get_travel_repository)]
Indexer = Annotated[TravelIndexer, Depends(get_indexer)]


def travel_query(
    status_filter: Annotated[TravelStatus | None, Query(alias="status")] = None,
    travel_type: Annotated[TravelType | None, Query(alias="travel-type")] = None,
    destination_country: Annotated[str | None, Query(alias="destination-country")] = None,
    destination_city: Annotated[str | None, Query(alias="destination-city")] = None,
    date_from: Annotated[date | None, Query(alias="date-from")] = None,
    date_to: Annotated[date | None, Query(alias="date-to")] = None,
    min_rating: Annotated[int | None, Query(alias="min-rating", ge=1, le=5)] = None,
    max_budget: Annotated[float | None, Query(alias="max-budget", ge=0)] = None,
    search_term: Annotated[str | None, Query(alias="search")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int | None, Query(alias="page-size", ge=1)] = None,
    sort_by: Annotated[str, Query(alias="sort-by")] = "creation-date",
    sort_direction: Annotated[SortDirection, Query(alias="sort-direction")] = SortDirection.desc,
) -> TravelQuery:
    """Collect listing query parameters into a TravelQuery."""
    return TravelQuery(
        status=status_filter,
        travel_type=travel_type,
        destination_country=destination_country,
        destination_city=destination_city,
        date_from=date_from,
        date_to=date_to,
        min_rating=min_rating,
        max_budget=max_budget,
        search_term=search_term,
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        sort_direction=sort_direction,
    )


@router.post(
    "",
    response_model=TravelResult,
    response_model_by_alias=False,
    status_code=status.HTTP_201_CREATED,
)
async def create_travel(
    request: TravelCreate, ctx: Context, repository: Repository, indexer: Indexer
) -> TravelResult:
    """Create a travel.

    Args:
        request: Travel fields
        ctx: Twin context
        repository: Travel repository
        indexer: Search index replication target

    Returns:
        Result carrying the created travel
    """
    result = await repository.create(request, ctx)
    raise_for_result(result)
    if result.data is not None:
        await replicate_travel(indexer, result.data, ctx)
    return result


@router.get("", response_model=TravelPageResult, response_model_by_alias=False)
async def list_travels(
    ctx: Context,
    engine: Annotated[TravelQueryEngine, Depends(get_query_engine)],
    query: Annotated[TravelQuery, Depends(travel_query)],
    include_stats: Annotated[bool, Query(alias="include-stats")] = False,
) -> TravelPageResult:
    """List one page of travels matching the query.

    Returns:
        Page of travels with total count and, on request, statistics
    """
    result = await engine.list_travels(query, ctx, include_stats=include_stats)
    raise_for_result(result)
    return result


@router.get("/stats", response_model=TravelStatsResult, response_model_by_alias=False)
async def travel_stats(
    ctx: Context,
    engine: Annotated[TravelQueryEngine, Depends(get_query_engine)],
    query: Annotated[TravelQuery, Depends(travel_query)],
) -> TravelStatsResult:
    """Statistics over every travel matching the query filters."""
    result = await engine.travel_stats(query, ctx)
    raise_for_result(result)
    return result


@router.get("/{travel_id}", response_model=TravelResult, response_model_by_alias=False)
async def get_travel(travel_id: str, ctx: Context, repository: Repository) -> TravelResult:
    """Get a travel with all of its itineraries.

    Raises:
        HTTPException: 404 if the travel does not exist in this twin's partition
    """
    result = await repository.get(travel_id, ctx)
    raise_for_result(result)
    return result


@router.patch("/{travel_id}", response_model=TravelResult, response_model_by_alias=False)
async def update_travel(
    travel_id: str,
    request: TravelUpdate,
    ctx: Context,
    repository: Repository,
    indexer: Indexer,
) -> TravelResult:
    """Merge the supplied fields into a travel."""
    result = await repository.update(travel_id, request, ctx)
    raise_for_result(result)
    if result.data is not None:
        await replicate_travel(indexer, result.data, ctx)
    return result


@router.delete("/{travel_id}", response_model=TravelResult, response_model_by_alias=False)
async def delete_travel(
    travel_id: str, ctx: Context, repository: Repository, indexer: Indexer
) -> TravelResult:
    """Delete a travel and everything nested inside it."""
    result = await repository.delete(travel_id, ctx)
    raise_for_result(result)
    await unreplicate_travel(indexer, travel_id, ctx)
    return result
