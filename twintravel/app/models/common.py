"""Common types and enums shared across all models."""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

DEFAULT_CURRENCY = "USD"

# Fixed-width ISO strings keep stored timestamps ordered when compared as text.
Timestamp = Annotated[
    datetime,
    PlainSerializer(lambda v: v.isoformat(timespec="microseconds"), return_type=str, when_used="json"),
]


def utcnow() -> datetime:
    """Current UTC time."""
    return datetime.now(timezone.utc)


def next_timestamp(previous: datetime | None) -> datetime:
    """Return a timestamp strictly after ``previous``."""
    now = utcnow()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


class StoredModel(BaseModel):
    """Base for models persisted with the document store's field names."""

    model_config = ConfigDict(populate_by_name=True)


class TravelType(str, Enum):
    """Kind of trip."""

    vacation = "vacation"
    business = "business"
    family = "family"
    adventure = "adventure"
    cultural = "cultural"
    other = "other"


class TravelStatus(str, Enum):
    """Planning lifecycle of a trip."""

    planning = "planning"
    confirmed = "confirmed"
    in_progress = "in-progress"
    completed = "completed"
    cancelled = "cancelled"


class RecordStatus(str, Enum):
    """Overall status of the travel record itself."""

    active = "active"
    planning = "planning"
    inactive = "inactive"
    suspended = "suspended"
    archived = "archived"


class TransportationType(str, Enum):
    """Means of transport between itinerary endpoints."""

    plane = "plane"
    car = "car"
    train = "train"
    bus = "bus"
    boat = "boat"
    bicycle = "bicycle"
    walking = "walking"
    other = "other"


class AccommodationType(str, Enum):
    """Lodging kind for an itinerary."""

    hotel = "hotel"
    hostel = "hostel"
    apartment = "apartment"
    house = "house"
    camping = "camping"
    resort = "resort"
    other = "other"


class BookingType(str, Enum):
    """Kind of reservation."""

    flight = "flight"
    hotel = "hotel"
    car = "car"
    activity = "activity"
    transport = "transport"
    restaurant = "restaurant"
    other = "other"


class BookingStatus(str, Enum):
    """Reservation status."""

    pending = "pending"
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"


class ActivityType(str, Enum):
    """Kind of daily activity."""

    museum = "museum"
    restaurant = "restaurant"
    tour = "tour"
    shopping = "shopping"
    nature = "nature"
    entertainment = "entertainment"
    sports = "sports"
    culture = "culture"
    gastronomy = "gastronomy"
    relax = "relax"
    adventure = "adventure"
    other = "other"


class Coordinates(StoredModel):
    """Geographic coordinates (WGS84)."""

    latitude: float = Field(..., ge=-90, le=90, alias="latitud")
    longitude: float = Field(..., ge=-180, le=180, alias="longitud")


class BookingContact(StoredModel):
    """Provider contact details for a booking."""

    phone: str | None = Field(None, alias="telefono")
    email: str | None = None
    address: str | None = Field(None, alias="direccion")
