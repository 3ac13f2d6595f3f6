"""Travel document endpoints - receipts, invoices and tickets with analytics."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from twintravel.app.api.auth import get_twin_context
from twintravel.app.api.deps import get_document_repository, raise_for_result
from twintravel.app.db.context import TwinContext
from twintravel.app.models.documents import DocumentType, EstablishmentType
from twintravel.app.models.query import DocumentQuery, SortDirection
from twintravel.app.models.requests import TravelDocumentCreate
from twintravel.app.models.results import (
    DocumentAnalyticsResult,
    DocumentPageResult,
    DocumentResult,
)
from twintravel.app.travels.documents import TravelDocumentRepository

router = APIRouter(prefix="/twins/{twin_id}/travel-documents", tags=["travel-documents"])

Context = Annotated[TwinContext, Depends(get_twin_context)]
Repository = Annotated[TravelDocumentRepository, Depends(get_document_repository)]


@router.post(
    "",
    response_model=DocumentResult,
    response_model_by_alias=False,
    status_code=status.HTTP_201_CREATED,
)
async def save_document(
    request: TravelDocumentCreate, ctx: Context, repository: Repository
) -> DocumentResult:
    """Store an extracted travel document."""
    result = await repository.save(request, ctx)
    raise_for_result(result)
    return result


@router.get("", response_model=DocumentPageResult, response_model_by_alias=False)
async def list_documents(
    ctx: Context,
    repository: Repository,
    travel_id: Annotated[str | None, Query(alias="travel-id")] = None,
    itinerary_id: Annotated[str | None, Query(alias="itinerary-id")] = None,
    activity_id: Annotated[str | None, Query(alias="activity-id")] = None,
    document_type: Annotated[DocumentType | None, Query(alias="document-type")] = None,
    establishment_type: Annotated[
        EstablishmentType | None, Query(alias="establishment-type")
    ] = None,
    date_from: Annotated[date | None, Query(alias="date-from")] = None,
    date_to: Annotated[date | None, Query(alias="date-to")] = None,
    min_amount: Annotated[float | None, Query(alias="min-amount", ge=0)] = None,
    max_amount: Annotated[float | None, Query(alias="max-amount", ge=0)] = None,
    search_term: Annotated[str | None, Query(alias="search")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int | None, Query(alias="page-size", ge=1)] = None,
    sort_by: Annotated[str, Query(alias="sort-by")] = "created",
    sort_direction: Annotated[SortDirection, Query(alias="sort-direction")] = SortDirection.desc,
) -> DocumentPageResult:
    """List one page of travel documents with statistics over the filtered set."""
    query = DocumentQuery(
        travel_id=travel_id,
        itinerary_id=itinerary_id,
        activity_id=activity_id,
        document_type=document_type,
        establishment_type=establishment_type,
        date_from=date_from,
        date_to=date_to,
        min_amount=min_amount,
        max_amount=max_amount,
        search_term=search_term,
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        sort_direction=sort_direction,
    )
    result = await repository.list_documents(query, ctx)
    raise_for_result(result)
    return result


@router.get(
    "/analytics", response_model=DocumentAnalyticsResult, response_model_by_alias=False
)
async def document_analytics(ctx: Context, repository: Repository) -> DocumentAnalyticsResult:
    """Overview, spending breakdown and insights across the twin's documents."""
    result = await repository.analytics(ctx)
    raise_for_result(result)
    return result


@router.get("/{document_id}", response_model=DocumentResult, response_model_by_alias=False)
async def get_document(document_id: str, ctx: Context, repository: Repository) -> DocumentResult:
    """Get a travel document by id."""
    result = await repository.get(document_id, ctx)
    raise_for_result(result)
    return result


@router.delete("/{document_id}", response_model=DocumentResult, response_model_by_alias=False)
async def delete_document(
    document_id: str, ctx: Context, repository: Repository
) -> DocumentResult:
    """Delete a travel document."""
    result = await repository.delete(document_id, ctx)
    raise_for_result(result)
    return result
