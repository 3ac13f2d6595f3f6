"""Models package - re-exports for convenience."""

from twintravel.app.models.common import (
    AccommodationType,
    ActivityType,
    BookingContact,
    BookingStatus,
    BookingType,
    Coordinates,
    RecordStatus,
    TransportationType,
    TravelStatus,
    TravelType,
)
from twintravel.app.models.documents import (
    DocumentType,
    EstablishmentType,
    LineItem,
    TravelDocument,
)
from twintravel.app.models.query import DocumentQuery, SortDirection, TravelQuery
from twintravel.app.models.requests import (
    ActivityCreate,
    ActivityUpdate,
    BookingCreate,
    BookingUpdate,
    ItineraryCreate,
    ItineraryUpdate,
    TravelCreate,
    TravelDocumentCreate,
    TravelUpdate,
)
from twintravel.app.models.results import (
    ActivityListResult,
    ActivityResult,
    BookingListResult,
    BookingResult,
    DocumentAnalyticsResult,
    DocumentPageResult,
    DocumentResult,
    ErrorKind,
    ItineraryResult,
    MissingResource,
    OperationResult,
    ResourceLevel,
    TravelPageResult,
    TravelResult,
    TravelStatsResult,
)
from twintravel.app.models.stats import DocumentAnalytics, DocumentStats, TravelStats
from twintravel.app.models.travel import (
    Booking,
    DailyActivity,
    Itinerary,
    Travel,
    TravelContext,
    compute_duration,
)

__all__ = [
    # Common
    "AccommodationType",
    "ActivityType",
    "BookingContact",
    "BookingStatus",
    "BookingType",
    "Coordinates",
    "RecordStatus",
    "TransportationType",
    "TravelStatus",
    "TravelType",
    # Aggregate
    "Booking",
    "DailyActivity",
    "Itinerary",
    "Travel",
    "TravelContext",
    "compute_duration",
    # Documents
    "DocumentType",
    "EstablishmentType",
    "LineItem",
    "TravelDocument",
    # Requests
    "ActivityCreate",
    "ActivityUpdate",
    "BookingCreate",
    "BookingUpdate",
    "ItineraryCreate",
    "ItineraryUpdate",
    "TravelCreate",
    "TravelDocumentCreate",
    "TravelUpdate",
    # Queries
    "DocumentQuery",
    "SortDirection",
    "TravelQuery",
    # Results
    "ActivityListResult",
    "ActivityResult",
    "BookingListResult",
    "BookingResult",
    "DocumentAnalyticsResult",
    "DocumentPageResult",
    "DocumentResult",
    "ErrorKind",
    "ItineraryResult",
    "MissingResource",
    "OperationResult",
    "ResourceLevel",
    "TravelPageResult",
    "TravelResult",
    "TravelStatsResult",
    # Stats
    "DocumentAnalytics",
    "DocumentStats",
    "TravelStats",
]
