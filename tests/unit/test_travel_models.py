"""Unit tests for travel aggregate models and request validation."""

from datetime import date

import pytest
from pydantic import ValidationError

from twintravel.app.models.common import TravelStatus, TravelType
from twintravel.app.models.requests import (
    ActivityCreate,
    BookingCreate,
    BookingUpdate,
    TravelCreate,
    TravelUpdate,
)
from twintravel.app.models.travel import (
    Booking,
    Itinerary,
    Travel,
    compute_duration,
)


class TestComputeDuration:
    """Inclusive day count between start and end."""

    def test_week_long_trip(self) -> None:
        assert compute_duration(date(2025, 6, 15), date(2025, 6, 22)) == 8

    def test_same_day_trip_is_one_day(self) -> None:
        assert compute_duration(date(2025, 6, 15), date(2025, 6, 15)) == 1

    def test_end_before_start_is_undefined(self) -> None:
        assert compute_duration(date(2025, 6, 22), date(2025, 6, 15)) is None

    @pytest.mark.parametrize(
        ("start", "end"),
        [(None, date(2025, 6, 22)), (date(2025, 6, 15), None), (None, None)],
    )
    def test_missing_date_is_undefined(self, start: date | None, end: date | None) -> None:
        assert compute_duration(start, end) is None

    def test_crosses_month_and_leap_day(self) -> None:
        assert compute_duration(date(2024, 2, 27), date(2024, 3, 2)) == 5


class TestTravelDocumentShape:
    """Persisted field names and round-trip through the stored body."""

    def test_to_document_uses_persisted_names(self) -> None:
        travel = Travel(twin_id="twin-a", title="Lisbon", budget=900.0)

        body = travel.to_document()

        assert body["TwinID"] == "twin-a"
        assert body["titulo"] == "Lisbon"
        assert body["presupuesto"] == 900.0
        assert body["documentType"] == "travel"
        assert body["itinerarios"] == []
        assert body["estado"] == "planning"
        assert body["status"] == "active"
        assert "revision" not in body

    def test_from_document_round_trip(self) -> None:
        travel = Travel(
            twin_id="twin-a",
            title="Kyoto",
            start_date=date(2025, 4, 1),
            end_date=date(2025, 4, 5),
            travel_type=TravelType.cultural,
        )
        travel.refresh_duration()
        travel.itineraries.append(
            Itinerary(
                title="Osaka leg",
                bookings=[Booking(start_date=date(2025, 4, 2), price=120.0)],
            )
        )

        restored = Travel.from_document(travel.to_document(), revision=4)

        assert restored.revision == 4
        assert restored.duration_days == 5
        assert restored.travel_type == TravelType.cultural
        assert restored.itineraries[0].bookings[0].price == 120.0
        assert restored.model_dump(exclude={"revision"}) == travel.model_dump(
            exclude={"revision"}
        )

    def test_null_currency_and_lists_fall_back_to_defaults(self) -> None:
        body = Travel(twin_id="twin-a", title="Rome").to_document()
        body["moneda"] = None
        body["itinerarios"] = None

        restored = Travel.from_document(body)

        assert restored.currency == "USD"
        assert restored.itineraries == []

    def test_unknown_status_fails_loudly(self) -> None:
        body = Travel(twin_id="twin-a", title="Rome").to_document()
        body["estado"] = "daydreaming"

        with pytest.raises(ValidationError):
            Travel.from_document(body)

    def test_snapshot_copies_root_fields(self) -> None:
        travel = Travel(twin_id="twin-a", title="Oslo", status=TravelStatus.confirmed)

        snapshot = travel.snapshot()

        assert snapshot.title == "Oslo"
        assert snapshot.status == TravelStatus.confirmed
        assert snapshot.travel_type == TravelType.vacation

    def test_nested_ids_are_unique(self) -> None:
        ids = {Booking(start_date=date(2025, 1, 1)).id for _ in range(200)}
        assert len(ids) == 200


class TestRequests:
    """Create and partial-update request validation."""

    def test_create_requires_non_empty_title(self) -> None:
        with pytest.raises(ValidationError):
            TravelCreate(title="")

    def test_create_rejects_out_of_range_rating(self) -> None:
        with pytest.raises(ValidationError):
            TravelCreate(title="Trip", rating=6)

    def test_create_fills_default_currency(self) -> None:
        fields = TravelCreate(title="Trip").entity_fields("EUR")
        assert fields["currency"] == "EUR"

    def test_update_only_reports_sent_fields(self) -> None:
        update = TravelUpdate(notes="bring adapters", budget=None)

        assert update.changed_fields() == {"notes": "bring adapters", "budget": None}

    def test_update_rejects_null_title(self) -> None:
        with pytest.raises(ValidationError, match="fields cannot be null: title"):
            TravelUpdate(title=None)

    def test_update_rejects_unknown_enum_value(self) -> None:
        with pytest.raises(ValidationError):
            TravelUpdate.model_validate({"status": "unknown"})

    def test_booking_requires_start_date(self) -> None:
        with pytest.raises(ValidationError):
            BookingCreate.model_validate({"title": "Flight"})

    def test_booking_update_cannot_clear_start_date(self) -> None:
        with pytest.raises(ValidationError):
            BookingUpdate(start_date=None)

    def test_activity_requires_date(self) -> None:
        with pytest.raises(ValidationError):
            ActivityCreate.model_validate({"title": "Louvre"})

    def test_update_currency_null_means_default(self) -> None:
        assert BookingUpdate(currency=None).changed_fields("GBP") == {"currency": "GBP"}
