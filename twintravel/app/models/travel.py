"""Travel aggregate models - root document and its nested entities.

Field names are English; aliases carry the persisted document keys, so
``to_document`` / ``from_document`` convert between the external
representation and the stored JSON shape.
"""

import uuid
from datetime import date
from typing import Any, Literal

from pydantic import Field, field_validator

from twintravel.app.models.common import (
    DEFAULT_CURRENCY,
    AccommodationType,
    ActivityType,
    BookingContact,
    BookingStatus,
    BookingType,
    Coordinates,
    RecordStatus,
    StoredModel,
    Timestamp,
    TransportationType,
    TravelStatus,
    TravelType,
    utcnow,
)

TRAVEL_DOCUMENT_TYPE = "travel"
ITINERARIES_FIELD = "itinerarios"


def new_entity_id() -> str:
    """Collision-resistant id for nested entities."""
    return uuid.uuid4().hex


def compute_duration(start: date | None, end: date | None) -> int | None:
    """Inclusive day count between two dates, or None if undefined."""
    if start is None or end is None or end < start:
        return None
    return (end - start).days + 1


class Booking(StoredModel):
    """Reservation owned by an itinerary."""

    id: str = Field(default_factory=new_entity_id)
    booking_type: BookingType = Field(BookingType.flight, alias="tipo")
    title: str = Field("", alias="titulo")
    description: str | None = Field(None, alias="descripcion")
    start_date: date = Field(..., alias="fechaInicio")
    end_date: date | None = Field(None, alias="fechaFin")
    start_time: str | None = Field(None, alias="horaInicio")
    end_time: str | None = Field(None, alias="horaFin")
    provider: str | None = Field(None, alias="proveedor")
    contact: BookingContact | None = Field(None, alias="contacto")
    price: float | None = Field(None, ge=0, alias="precio")
    currency: str = Field(DEFAULT_CURRENCY, alias="moneda")
    confirmation_number: str | None = Field(None, alias="numeroConfirmacion")
    status: BookingStatus = Field(BookingStatus.pending, alias="estado")
    notes: str | None = Field(None, alias="notas")
    created_at: Timestamp = Field(default_factory=utcnow, alias="fechaCreacion")
    updated_at: Timestamp = Field(default_factory=utcnow, alias="fechaActualizacion")

    @field_validator("currency", mode="before")
    @classmethod
    def currency_default(cls, v: str | None) -> str:
        """Missing or null currency falls back to the default."""
        return v or DEFAULT_CURRENCY


class DailyActivity(StoredModel):
    """Planned or completed activity on a given day of an itinerary."""

    id: str = Field(default_factory=new_entity_id)
    activity_date: date = Field(..., alias="fecha")
    start_time: str | None = Field(None, alias="horaInicio")
    end_time: str | None = Field(None, alias="horaFin")
    activity_type: ActivityType = Field(ActivityType.museum, alias="tipoActividad")
    title: str = Field("", alias="titulo")
    description: str | None = Field(None, alias="descripcion")
    location: str | None = Field(None, alias="ubicacion")
    participants: list[str] = Field(default_factory=list, alias="participantes")
    rating: int | None = Field(None, ge=1, le=5, alias="calificacion")
    notes: str | None = Field(None, alias="notas")
    cost: float | None = Field(None, ge=0, alias="costo")
    currency: str = Field(DEFAULT_CURRENCY, alias="moneda")
    coordinates: Coordinates | None = Field(None, alias="coordenadas")
    created_at: Timestamp = Field(default_factory=utcnow, alias="fechaCreacion")
    updated_at: Timestamp = Field(default_factory=utcnow, alias="fechaActualizacion")

    @field_validator("currency", mode="before")
    @classmethod
    def currency_default(cls, v: str | None) -> str:
        """Missing or null currency falls back to the default."""
        return v or DEFAULT_CURRENCY

    @field_validator("participants", mode="before")
    @classmethod
    def participants_default(cls, v: list[str] | None) -> list[str]:
        """Stored documents may carry null for an empty list."""
        return v or []


class TravelContext(StoredModel):
    """Snapshot of the parent travel carried by each itinerary."""

    title: str | None = Field(None, alias="titulo")
    description: str | None = Field(None, alias="descripcion")
    travel_type: TravelType | None = Field(None, alias="tipoViaje")
    status: TravelStatus | None = Field(None, alias="estado")


class Itinerary(StoredModel):
    """Leg of a travel, owning bookings and daily activities."""

    id: str = Field(default_factory=new_entity_id)
    title: str = Field("", alias="titulo")
    description: str | None = Field(None, alias="descripcion")
    origin_city: str | None = Field(None, alias="ciudadOrigen")
    origin_country: str | None = Field(None, alias="paisOrigen")
    destination_city: str | None = Field(None, alias="ciudadDestino")
    destination_country: str | None = Field(None, alias="paisDestino")
    start_date: date | None = Field(None, alias="fechaInicio")
    end_date: date | None = Field(None, alias="fechaFin")
    transportation: TransportationType = Field(TransportationType.plane, alias="medioTransporte")
    accommodation: AccommodationType = Field(AccommodationType.hotel, alias="tipoAlojamiento")
    estimated_budget: float | None = Field(None, ge=0, alias="presupuestoEstimado")
    currency: str = Field(DEFAULT_CURRENCY, alias="moneda")
    notes: str | None = Field(None, alias="notas")
    travel_info: TravelContext | None = Field(None, alias="viajeInfo")
    bookings: list[Booking] = Field(default_factory=list)
    daily_activities: list[DailyActivity] = Field(default_factory=list, alias="actividadesDiarias")
    created_at: Timestamp = Field(default_factory=utcnow, alias="fechaCreacion")
    updated_at: Timestamp = Field(default_factory=utcnow, alias="fechaActualizacion")

    @field_validator("currency", mode="before")
    @classmethod
    def currency_default(cls, v: str | None) -> str:
        """Missing or null currency falls back to the default."""
        return v or DEFAULT_CURRENCY

    @field_validator("bookings", "daily_activities", mode="before")
    @classmethod
    def children_default(cls, v: list[Any] | None) -> list[Any]:
        """Stored documents may carry null for an empty list."""
        return v or []


class Travel(StoredModel):
    """Root aggregate: one document per travel, partitioned by twin id."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    twin_id: str = Field(..., alias="TwinID")
    document_type: Literal["travel"] = Field(TRAVEL_DOCUMENT_TYPE, alias="documentType")
    title: str = Field(..., alias="titulo")
    description: str = Field("", alias="descripcion")
    destination_country: str | None = Field(None, alias="paisDestino")
    destination_city: str | None = Field(None, alias="ciudadDestino")
    start_date: date | None = Field(None, alias="fechaInicio")
    end_date: date | None = Field(None, alias="fechaFin")
    duration_days: int | None = Field(None, alias="duracionDias")
    budget: float | None = Field(None, ge=0, alias="presupuesto")
    currency: str = Field(DEFAULT_CURRENCY, alias="moneda")
    travel_type: TravelType = Field(TravelType.vacation, alias="tipoViaje")
    status: TravelStatus = Field(TravelStatus.planning, alias="estado")
    record_status: RecordStatus = Field(RecordStatus.active, alias="status")
    transportation: str | None = Field(None, alias="transporte")
    lodging: str | None = Field(None, alias="alojamiento")
    companions: str | None = Field(None, alias="companeros")
    activities: str | None = Field(None, alias="actividades")
    notes: str | None = Field(None, alias="notas")
    rating: int | None = Field(None, ge=1, le=5, alias="calificacion")
    highlights: str | None = None
    created_at: Timestamp = Field(default_factory=utcnow, alias="fechaCreacion")
    updated_at: Timestamp = Field(default_factory=utcnow, alias="fechaActualizacion")
    itineraries: list[Itinerary] = Field(default_factory=list, alias="itinerarios")
    # Store-managed compare-and-swap token, never part of the stored body
    revision: int | None = None

    @field_validator("currency", mode="before")
    @classmethod
    def currency_default(cls, v: str | None) -> str:
        """Missing or null currency falls back to the default."""
        return v or DEFAULT_CURRENCY

    @field_validator("itineraries", mode="before")
    @classmethod
    def itineraries_default(cls, v: list[Any] | None) -> list[Any]:
        """Stored documents may carry null for an empty list."""
        return v or []

    def refresh_duration(self) -> None:
        """Recompute the derived duration from the current dates."""
        self.duration_days = compute_duration(self.start_date, self.end_date)

    def snapshot(self) -> TravelContext:
        """Denormalized view of this travel for its itineraries."""
        return TravelContext(
            title=self.title,
            description=self.description,
            travel_type=self.travel_type,
            status=self.status,
        )

    def to_document(self) -> dict[str, Any]:
        """Serialize to the persisted JSON shape."""
        return self.model_dump(mode="json", by_alias=True, exclude={"revision"})

    @classmethod
    def from_document(cls, body: dict[str, Any], revision: int | None = None) -> "Travel":
        """Parse a persisted document."""
        travel = cls.model_validate(body)
        travel.revision = revision
        return travel
