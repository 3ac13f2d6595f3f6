"""Create and partial-update request models for the travel aggregate.

Update models distinguish "absent" from "explicitly null" through
``model_fields_set``: only fields the caller actually sent are applied.
"""

from datetime import date
from typing import Any, ClassVar

from pydantic import BaseModel, Field, model_validator

from twintravel.app.models.common import (
    DEFAULT_CURRENCY,
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
from twintravel.app.models.documents import DocumentType, EstablishmentType, LineItem


class EntityRequest(BaseModel):
    """Base for request bodies that map onto aggregate entity fields."""

    # Fields that may be omitted but never explicitly cleared
    required_when_present: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def reject_null_required(self) -> "EntityRequest":
        """Reject explicit nulls for fields that cannot be cleared."""
        cleared = sorted(
            name
            for name in self.required_when_present
            if name in self.model_fields_set and getattr(self, name) is None
        )
        if cleared:
            raise ValueError(f"fields cannot be null: {', '.join(cleared)}")
        return self

    def entity_fields(self, default_currency: str = DEFAULT_CURRENCY) -> dict[str, Any]:
        """All fields, with a null currency replaced by the default."""
        values = {name: getattr(self, name) for name in type(self).model_fields}
        return _with_currency(values, default_currency)

    def changed_fields(self, default_currency: str = DEFAULT_CURRENCY) -> dict[str, Any]:
        """Only the fields explicitly present in the request."""
        values = {name: getattr(self, name) for name in self.model_fields_set}
        return _with_currency(values, default_currency)


def _with_currency(values: dict[str, Any], default_currency: str) -> dict[str, Any]:
    if "currency" in values and values["currency"] is None:
        values["currency"] = default_currency
    return values


class TravelCreate(EntityRequest):
    """Fields accepted when creating a travel."""

    required_when_present = frozenset({"description", "travel_type", "status", "record_status"})

    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    destination_country: str | None = None
    destination_city: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    budget: float | None = Field(None, ge=0)
    currency: str | None = None
    travel_type: TravelType = TravelType.vacation
    status: TravelStatus = TravelStatus.planning
    record_status: RecordStatus = RecordStatus.active
    transportation: str | None = None
    lodging: str | None = None
    companions: str | None = None
    activities: str | None = None
    notes: str | None = None
    rating: int | None = Field(None, ge=1, le=5)
    highlights: str | None = None


class TravelUpdate(EntityRequest):
    """Partial update of a travel's root fields."""

    required_when_present = frozenset(
        {"title", "description", "travel_type", "status", "record_status"}
    )

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    destination_country: str | None = None
    destination_city: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    budget: float | None = Field(None, ge=0)
    currency: str | None = None
    travel_type: TravelType | None = None
    status: TravelStatus | None = None
    record_status: RecordStatus | None = None
    transportation: str | None = None
    lodging: str | None = None
    companions: str | None = None
    activities: str | None = None
    notes: str | None = None
    rating: int | None = Field(None, ge=1, le=5)
    highlights: str | None = None


class ItineraryCreate(EntityRequest):
    """Fields accepted when appending an itinerary."""

    required_when_present = frozenset({"title", "transportation", "accommodation"})

    title: str = ""
    description: str | None = None
    origin_city: str | None = None
    origin_country: str | None = None
    destination_city: str | None = None
    destination_country: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    transportation: TransportationType = TransportationType.plane
    accommodation: AccommodationType = AccommodationType.hotel
    estimated_budget: float | None = Field(None, ge=0)
    currency: str | None = None
    notes: str | None = None


class ItineraryUpdate(EntityRequest):
    """Partial update of an itinerary."""

    required_when_present = frozenset({"title", "transportation", "accommodation"})

    title: str | None = None
    description: str | None = None
    origin_city: str | None = None
    origin_country: str | None = None
    destination_city: str | None = None
    destination_country: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    transportation: TransportationType | None = None
    accommodation: AccommodationType | None = None
    estimated_budget: float | None = Field(None, ge=0)
    currency: str | None = None
    notes: str | None = None


class BookingCreate(EntityRequest):
    """Fields accepted when adding a booking to an itinerary."""

    required_when_present = frozenset({"title", "booking_type", "status"})

    booking_type: BookingType = BookingType.flight
    title: str = ""
    description: str | None = None
    start_date: date
    end_date: date | None = None
    start_time: str | None = None
    end_time: str | None = None
    provider: str | None = None
    contact: BookingContact | None = None
    price: float | None = Field(None, ge=0)
    currency: str | None = None
    confirmation_number: str | None = None
    status: BookingStatus = BookingStatus.pending
    notes: str | None = None


class BookingUpdate(EntityRequest):
    """Partial update of a booking."""

    required_when_present = frozenset({"title", "booking_type", "status", "start_date"})

    booking_type: BookingType | None = None
    title: str | None = None
    description: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    start_time: str | None = None
    end_time: str | None = None
    provider: str | None = None
    contact: BookingContact | None = None
    price: float | None = Field(None, ge=0)
    currency: str | None = None
    confirmation_number: str | None = None
    status: BookingStatus | None = None
    notes: str | None = None


class ActivityCreate(EntityRequest):
    """Fields accepted when adding a daily activity to an itinerary."""

    required_when_present = frozenset({"title", "activity_type", "participants"})

    activity_date: date
    start_time: str | None = None
    end_time: str | None = None
    activity_type: ActivityType = ActivityType.museum
    title: str = ""
    description: str | None = None
    location: str | None = None
    participants: list[str] = Field(default_factory=list)
    rating: int | None = Field(None, ge=1, le=5)
    notes: str | None = None
    cost: float | None = Field(None, ge=0)
    currency: str | None = None
    coordinates: Coordinates | None = None


class ActivityUpdate(EntityRequest):
    """Partial update of a daily activity."""

    required_when_present = frozenset(
        {"title", "activity_type", "participants", "activity_date"}
    )

    activity_date: date | None = None
    start_time: str | None = None
    end_time: str | None = None
    activity_type: ActivityType | None = None
    title: str | None = None
    description: str | None = None
    location: str | None = None
    participants: list[str] | None = None
    rating: int | None = Field(None, ge=1, le=5)
    notes: str | None = None
    cost: float | None = Field(None, ge=0)
    currency: str | None = None
    coordinates: Coordinates | None = None


class TravelDocumentCreate(EntityRequest):
    """Extracted travel document submitted for storage."""

    required_when_present = frozenset({"document_type", "establishment_type"})

    title: str = ""
    description: str | None = None
    file_name: str = ""
    mime_type: str = ""
    file_size: int = Field(0, ge=0)
    document_type: DocumentType = DocumentType.receipt
    establishment_type: EstablishmentType = EstablishmentType.restaurant
    vendor_name: str | None = None
    vendor_address: str | None = None
    document_date: date | None = None
    total_amount: float | None = Field(None, ge=0)
    currency: str | None = None
    tax_amount: float | None = Field(None, ge=0)
    items: list[LineItem] = Field(default_factory=list)
    extracted_text: str | None = None
    ai_summary: str | None = None
    travel_id: str | None = None
    itinerary_id: str | None = None
    activity_id: str | None = None
