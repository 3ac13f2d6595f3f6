"""Unit tests for travel and travel-document statistics."""

from datetime import date, datetime, timezone

from twintravel.app.models.common import TravelStatus, TravelType
from twintravel.app.models.documents import DocumentType, EstablishmentType, TravelDocument
from twintravel.app.models.travel import Travel
from twintravel.app.travels.stats import (
    build_document_analytics,
    compute_document_stats,
    compute_travel_stats,
)


def _travel(
    country: str | None = None,
    budget: float | None = None,
    currency: str = "USD",
    status: TravelStatus = TravelStatus.planning,
    travel_type: TravelType = TravelType.vacation,
) -> Travel:
    return Travel(
        twin_id="twin-a",
        title="Trip",
        destination_country=country,
        budget=budget,
        currency=currency,
        status=status,
        travel_type=travel_type,
    )


def _document(
    amount: float | None,
    vendor: str | None = None,
    document_date: date | None = None,
    created_day: int = 1,
    **fields: object,
) -> TravelDocument:
    return TravelDocument(
        twin_id="twin-a",
        total_amount=amount,
        vendor_name=vendor,
        document_date=document_date,
        created_at=datetime(2025, 5, created_day, tzinfo=timezone.utc),
        **fields,
    )


class TestTravelStats:
    """Counts, budgets and destination ranking."""

    def test_empty_set_has_every_status_at_zero(self) -> None:
        stats = compute_travel_stats([])

        assert stats.total_travels == 0
        assert stats.by_status == {status.value: 0 for status in TravelStatus}
        assert stats.top_countries == []

    def test_counts_and_budgets(self) -> None:
        travels = [
            _travel("France", 1000.0, "EUR", TravelStatus.completed),
            _travel("France", 500.0, "EUR", TravelStatus.completed, TravelType.business),
            _travel("Japan", 2000.0, "USD"),
            _travel(None, None),
        ]

        stats = compute_travel_stats(travels)

        assert stats.total_travels == 4
        assert stats.by_status["completed"] == 2
        assert stats.by_status["planning"] == 2
        assert stats.by_status["cancelled"] == 0
        assert stats.by_type == {"vacation": 3, "business": 1}
        assert stats.total_budget == 3500.0
        assert stats.budget_by_currency == {"EUR": 1500.0, "USD": 2000.0}

    def test_country_ranking_breaks_ties_by_name_and_limits(self) -> None:
        travels = [_travel(c) for c in ["Peru", "Chile", "Peru", "Chile", "Brazil", "Argentina"]]

        stats = compute_travel_stats(travels, top_countries_limit=3)

        assert [(c.country, c.count) for c in stats.top_countries] == [
            ("Chile", 2),
            ("Peru", 2),
            ("Argentina", 1),
        ]


class TestDocumentStats:
    """Spending aggregates over travel documents."""

    def test_average_only_counts_documents_with_amount(self) -> None:
        stats = compute_document_stats([_document(30.0), _document(10.0), _document(None)])

        assert stats.total_documents == 3
        assert stats.total_amount == 40.0
        assert stats.average_amount == 20.0

    def test_monthly_spending_sorted_by_month(self) -> None:
        docs = [
            _document(20.0, document_date=date(2025, 6, 3)),
            _document(5.0, document_date=date(2025, 5, 30)),
            _document(7.5, document_date=date(2025, 6, 20)),
            _document(99.0),
        ]

        stats = compute_document_stats(docs)

        assert list(stats.monthly_spending.items()) == [("2025-05", 5.0), ("2025-06", 27.5)]

    def test_vendor_ranking_and_currency_breakdown(self) -> None:
        docs = [
            _document(12.0, "Cafe Central", currency="EUR"),
            _document(40.0, "Hotel Sacher", currency="EUR"),
            _document(30.0, "Cafe Central", currency="EUR"),
            _document(8.0, "Taxi", currency="USD"),
        ]

        stats = compute_document_stats(docs, top_vendors_limit=2)

        assert [(v.vendor, v.count, v.total_amount) for v in stats.top_vendors] == [
            ("Cafe Central", 2, 42.0),
            ("Hotel Sacher", 1, 40.0),
        ]
        assert stats.currency_breakdown["EUR"].count == 3
        assert stats.currency_breakdown["EUR"].total == 82.0
        assert stats.currency_breakdown["USD"].total == 8.0

    def test_type_counts_and_date_range(self) -> None:
        docs = [
            _document(1.0, created_day=2, document_type=DocumentType.invoice),
            _document(
                1.0,
                created_day=12,
                establishment_type=EstablishmentType.hotel,
            ),
        ]

        stats = compute_document_stats(docs)

        assert stats.by_document_type == {"invoice": 1, "receipt": 1}
        assert stats.by_establishment_type == {"restaurant": 1, "hotel": 1}
        assert stats.date_range is not None
        assert stats.date_range.span_days == 10


class TestDocumentAnalytics:
    """Overview and insights."""

    def test_no_documents(self) -> None:
        analytics = build_document_analytics([])

        assert analytics.overview.total_documents == 0
        assert analytics.insights == ["No travel documents found for analysis"]

    def test_overview_counts_links_and_vendors(self) -> None:
        docs = [
            _document(10.0, "A", travel_id="t1", itinerary_id="i1", activity_id="a1"),
            _document(20.0, " A ", travel_id="t1"),
            _document(30.0, "B"),
        ]

        analytics = build_document_analytics(docs)

        assert analytics.overview.unique_vendors == 2
        assert analytics.overview.with_travel == 2
        assert analytics.overview.with_itinerary == 1
        assert analytics.overview.with_activity == 1
        assert analytics.overview.total_spent == 60.0
        assert analytics.insights[0] == "33.3% of documents are associated with specific activities"
