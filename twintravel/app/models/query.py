"""Query parameter models for travel and travel-document listings."""

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field

from twintravel.app.models.common import TravelStatus, TravelType
from twintravel.app.models.documents import DocumentType, EstablishmentType


class SortDirection(str, Enum):
    """Ordering direction."""

    asc = "asc"
    desc = "desc"


class TravelQuery(BaseModel):
    """Optional filters, ordering and paging for travel listing.

    Every filter left as None is omitted from the generated predicate.
    """

    status: TravelStatus | None = None
    travel_type: TravelType | None = None
    destination_country: str | None = None
    destination_city: str | None = None
    date_from: date | None = None
    date_to: date | None = None
    min_rating: int | None = Field(None, ge=1, le=5)
    max_budget: float | None = Field(None, ge=0)
    search_term: str | None = None
    page: int = Field(1, ge=1)
    page_size: int | None = Field(None, ge=1)
    sort_by: str = "creation-date"
    sort_direction: SortDirection = SortDirection.desc


class DocumentQuery(BaseModel):
    """Optional filters, ordering and paging for travel-document listing."""

    travel_id: str | None = None
    itinerary_id: str | None = None
    activity_id: str | None = None
    document_type: DocumentType | None = None
    establishment_type: EstablishmentType | None = None
    date_from: date | None = None
    date_to: date | None = None
    min_amount: float | None = Field(None, ge=0)
    max_amount: float | None = Field(None, ge=0)
    search_term: str | None = None
    page: int = Field(1, ge=1)
    page_size: int | None = Field(None, ge=1)
    sort_by: str = "created"
    sort_direction: SortDirection = SortDirection.desc
