"""Travel documents: receipts, invoices and tickets linked to a travel.

Documents arrive already extracted; OCR and summary generation happen
elsewhere and only their output is stored here.
"""

import uuid
from datetime import date
from enum import Enum
from typing import Any, Literal

from pydantic import Field, field_validator

from twintravel.app.models.common import DEFAULT_CURRENCY, StoredModel, Timestamp, utcnow

TRAVEL_DOC_TYPE = "travelDocument"


class DocumentType(str, Enum):
    """Kind of financial document."""

    receipt = "receipt"
    invoice = "invoice"
    ticket = "ticket"
    booking_confirmation = "booking_confirmation"
    voucher = "voucher"
    contract = "contract"
    other = "other"


class EstablishmentType(str, Enum):
    """Kind of vendor that issued the document."""

    restaurant = "restaurant"
    museum = "museum"
    hotel = "hotel"
    transportation = "transportation"
    entertainment = "entertainment"
    shopping = "shopping"
    gas_station = "gas_station"
    pharmacy = "pharmacy"
    supermarket = "supermarket"
    tour_operator = "tour_operator"
    airline = "airline"
    car_rental = "car_rental"
    other = "other"


class LineItem(StoredModel):
    """Single line of a receipt or invoice."""

    description: str = ""
    quantity: float = 1
    unit_price: float | None = Field(None, alias="unitPrice")
    total_amount: float | None = Field(None, alias="totalAmount")
    category: str | None = None


class TravelDocument(StoredModel):
    """Extracted financial document, stored in the owning twin's partition."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    twin_id: str = Field(..., alias="twinId")
    doc_type: Literal["travelDocument"] = Field(TRAVEL_DOC_TYPE, alias="docType")
    title: str = Field("", alias="titulo")
    description: str | None = Field(None, alias="descripcion")
    file_name: str = Field("", alias="fileName")
    mime_type: str = Field("", alias="mimeType")
    file_size: int = Field(0, ge=0, alias="fileSize")
    document_type: DocumentType = Field(DocumentType.receipt, alias="documentType")
    establishment_type: EstablishmentType = Field(
        EstablishmentType.restaurant, alias="establishmentType"
    )
    vendor_name: str | None = Field(None, alias="vendorName")
    vendor_address: str | None = Field(None, alias="vendorAddress")
    document_date: date | None = Field(None, alias="documentDate")
    total_amount: float | None = Field(None, ge=0, alias="totalAmount")
    currency: str = DEFAULT_CURRENCY
    tax_amount: float | None = Field(None, ge=0, alias="taxAmount")
    items: list[LineItem] = Field(default_factory=list)
    extracted_text: str | None = Field(None, alias="extractedText")
    ai_summary: str | None = Field(None, alias="aiSummary")
    travel_id: str | None = Field(None, alias="travelId")
    itinerary_id: str | None = Field(None, alias="itineraryId")
    activity_id: str | None = Field(None, alias="activityId")
    created_at: Timestamp = Field(default_factory=utcnow, alias="createdAt")
    updated_at: Timestamp = Field(default_factory=utcnow, alias="updatedAt")
    revision: int | None = None

    @field_validator("currency", mode="before")
    @classmethod
    def currency_default(cls, v: str | None) -> str:
        """Missing or null currency falls back to the default."""
        return v or DEFAULT_CURRENCY

    @field_validator("items", mode="before")
    @classmethod
    def items_default(cls, v: list[Any] | None) -> list[Any]:
        """Stored documents may carry null for an empty list."""
        return v or []

    def to_document(self) -> dict[str, Any]:
        """Serialize to the persisted JSON shape."""
        return self.model_dump(mode="json", by_alias=True, exclude={"revision"})

    @classmethod
    def from_document(cls, body: dict[str, Any], revision: int | None = None) -> "TravelDocument":
        """Parse a persisted document."""
        document = cls.model_validate(body)
        document.revision = revision
        return document
