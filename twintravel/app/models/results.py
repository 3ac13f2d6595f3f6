"""Result envelopes returned by every public aggregate operation.

Expected conditions (missing entities, invalid input, write conflicts) are
reported through ``OperationResult`` instead of exceptions so callers can map
them to distinct responses.
"""

from enum import Enum
from typing import Any, Generic, Self, TypeVar

from pydantic import BaseModel

from twintravel.app.models.documents import TravelDocument
from twintravel.app.models.stats import DocumentAnalytics, DocumentStats, TravelStats
from twintravel.app.models.travel import Booking, DailyActivity, Itinerary, Travel

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Why an operation did not succeed."""

    not_found = "not_found"
    validation_failure = "validation_failure"
    conflict = "conflict"
    store_failure = "store_failure"


class ResourceLevel(str, Enum):
    """Addressable level of the aggregate, or a standalone document."""

    travel = "travel"
    itinerary = "itinerary"
    booking = "booking"
    activity = "activity"
    document = "document"


class MissingResource(BaseModel):
    """Which addressed entity was absent."""

    resource: ResourceLevel
    id: str


class OperationResult(BaseModel, Generic[T]):
    """Success flag, error classification and payload of an operation."""

    success: bool
    message: str | None = None
    error: ErrorKind | None = None
    missing: MissingResource | None = None
    data: T | None = None

    @classmethod
    def ok(cls, data: T | None = None, message: str | None = None, **extra: Any) -> Self:
        """Successful result carrying ``data``."""
        return cls(success=True, data=data, message=message, **extra)

    @classmethod
    def not_found(cls, resource: ResourceLevel, resource_id: str) -> Self:
        """Result for an absent entity at the given level."""
        return cls(
            success=False,
            error=ErrorKind.not_found,
            message=f"{resource.value} {resource_id} not found",
            missing=MissingResource(resource=resource, id=resource_id),
        )

    @classmethod
    def failure(cls, error: ErrorKind, message: str) -> Self:
        """Result for a validation, conflict or store failure."""
        return cls(success=False, error=error, message=message)


class TravelResult(OperationResult[Travel]):
    """Result of a root travel operation."""


class ItineraryResult(OperationResult[Itinerary]):
    """Result of an itinerary operation, with the refreshed parent travel."""

    travel: Travel | None = None


class BookingResult(OperationResult[Booking]):
    """Result of a booking operation, with the refreshed parent itinerary."""

    itinerary: Itinerary | None = None


class ActivityResult(OperationResult[DailyActivity]):
    """Result of a daily activity operation, with the refreshed parent itinerary."""

    itinerary: Itinerary | None = None


class BookingListResult(OperationResult[list[Booking]]):
    """Bookings of one itinerary."""

    total: int = 0


class ActivityListResult(OperationResult[list[DailyActivity]]):
    """Daily activities of one itinerary."""

    total: int = 0


class TravelPageResult(OperationResult[list[Travel]]):
    """One page of a filtered, sorted travel listing."""

    total_count: int = 0
    page: int = 1
    page_size: int = 0
    total_pages: int = 0
    stats: TravelStats | None = None


class DocumentResult(OperationResult[TravelDocument]):
    """Result of a single travel document operation."""


class DocumentPageResult(OperationResult[list[TravelDocument]]):
    """One page of a filtered, sorted travel-document listing."""

    total_count: int = 0
    page: int = 1
    page_size: int = 0
    total_pages: int = 0
    stats: DocumentStats | None = None


class TravelStatsResult(OperationResult[TravelStats]):
    """Statistics over every travel matching a query."""


class DocumentAnalyticsResult(OperationResult[DocumentAnalytics]):
    """Analytics over every document a twin owns."""
