"""Single-pass statistics over travel and travel-document result sets.

Nothing is cached: every call recomputes from the records it is given,
which are always an already-filtered set.
"""

from collections import Counter, defaultdict
from collections.abc import Iterable

from twintravel.app.models.common import TravelStatus
from twintravel.app.models.documents import TravelDocument
from twintravel.app.models.stats import (
    AnalyticsOverview,
    CountryCount,
    CurrencyTotal,
    DateRange,
    DocumentAnalytics,
    DocumentStats,
    TravelStats,
    VendorTotal,
)
from twintravel.app.models.travel import Travel


def compute_travel_stats(travels: Iterable[Travel], top_countries_limit: int = 10) -> TravelStats:
    """Counts per status and type, budget totals and a country ranking.

    Args:
        travels: Filtered travels
        top_countries_limit: Length of the destination ranking

    Returns:
        TravelStats with every status present (zero when unused)
    """
    total = 0
    by_status: dict[str, int] = {status.value: 0 for status in TravelStatus}
    by_type: Counter[str] = Counter()
    total_budget = 0.0
    budget_by_currency: defaultdict[str, float] = defaultdict(float)
    countries: Counter[str] = Counter()

    for travel in travels:
        total += 1
        by_status[travel.status.value] += 1
        by_type[travel.travel_type.value] += 1

        if travel.budget is not None:
            total_budget += travel.budget
            budget_by_currency[travel.currency] += travel.budget

        country = (travel.destination_country or "").strip()
        if country:
            countries[country] += 1

    ranking = sorted(countries.items(), key=lambda item: (-item[1], item[0]))
    return TravelStats(
        total_travels=total,
        by_status=by_status,
        by_type=dict(by_type),
        total_budget=total_budget,
        budget_by_currency=dict(budget_by_currency),
        top_countries=[
            CountryCount(country=name, count=count)
            for name, count in ranking[:top_countries_limit]
        ],
    )


def compute_document_stats(
    documents: Iterable[TravelDocument], top_vendors_limit: int = 10
) -> DocumentStats:
    """Spending statistics over travel documents.

    Monthly buckets are keyed ``YYYY-MM`` of the document date; documents
    without a date or amount are left out of them. The date range spans
    creation timestamps.

    Args:
        documents: Filtered travel documents
        top_vendors_limit: Length of the vendor ranking

    Returns:
        DocumentStats
    """
    total = 0
    amounts: list[float] = []
    by_document_type: Counter[str] = Counter()
    by_establishment_type: Counter[str] = Counter()
    monthly: defaultdict[str, float] = defaultdict(float)
    currencies: dict[str, CurrencyTotal] = {}
    vendor_counts: Counter[str] = Counter()
    vendor_totals: defaultdict[str, float] = defaultdict(float)
    earliest = latest = None

    for doc in documents:
        total += 1
        amount = doc.total_amount
        by_document_type[doc.document_type.value] += 1
        by_establishment_type[doc.establishment_type.value] += 1

        if amount is not None:
            amounts.append(amount)
            if doc.document_date is not None:
                monthly[f"{doc.document_date.year:04d}-{doc.document_date.month:02d}"] += amount

        bucket = currencies.setdefault(doc.currency, CurrencyTotal())
        bucket.count += 1
        bucket.total += amount or 0.0

        vendor = (doc.vendor_name or "").strip()
        if vendor:
            vendor_counts[vendor] += 1
            vendor_totals[vendor] += amount or 0.0

        if earliest is None or doc.created_at < earliest:
            earliest = doc.created_at
        if latest is None or doc.created_at > latest:
            latest = doc.created_at

    total_amount = sum(amounts)
    vendors = sorted(vendor_totals, key=lambda name: (-vendor_totals[name], name))

    date_range = None
    if earliest is not None and latest is not None:
        date_range = DateRange(
            earliest=earliest, latest=latest, span_days=(latest - earliest).days
        )

    return DocumentStats(
        total_documents=total,
        total_amount=total_amount,
        average_amount=total_amount / len(amounts) if amounts else 0.0,
        by_document_type=dict(by_document_type),
        by_establishment_type=dict(by_establishment_type),
        monthly_spending=dict(sorted(monthly.items())),
        currency_breakdown=currencies,
        top_vendors=[
            VendorTotal(vendor=name, count=vendor_counts[name], total_amount=vendor_totals[name])
            for name in vendors[:top_vendors_limit]
        ],
        date_range=date_range,
    )


def _insights(documents: list[TravelDocument], stats: DocumentStats) -> list[str]:
    if not documents:
        return ["No travel documents found for analysis"]

    with_activity = sum(1 for d in documents if d.activity_id)
    insights = [
        f"{with_activity / len(documents) * 100:.1f}% of documents are associated "
        "with specific activities"
    ]

    if stats.total_amount > 0:
        insights.append(f"Total documented spending: {stats.total_amount:.2f}")
        insights.append(f"Average spending per document: {stats.average_amount:.2f}")

    if stats.by_establishment_type:
        top_type, count = max(stats.by_establishment_type.items(), key=lambda item: item[1])
        insights.append(f"Most common establishment type: {top_type} ({count} documents)")

    if len(documents) > 1 and stats.date_range is not None:
        span = stats.date_range.span_days
        per_day = len(documents) / max(span, 1)
        insights.append(
            f"Document upload frequency: {per_day:.2f} documents per day over {span} days"
        )

    return insights


def build_document_analytics(
    documents: Iterable[TravelDocument], top_vendors_limit: int = 10
) -> DocumentAnalytics:
    """Overview, breakdown and insights over every document of a twin."""
    docs = list(documents)
    stats = compute_document_stats(docs, top_vendors_limit)
    vendors = {d.vendor_name.strip() for d in docs if d.vendor_name and d.vendor_name.strip()}

    overview = AnalyticsOverview(
        total_documents=stats.total_documents,
        total_spent=stats.total_amount,
        average_per_document=stats.average_amount,
        unique_vendors=len(vendors),
        with_travel=sum(1 for d in docs if d.travel_id),
        with_itinerary=sum(1 for d in docs if d.itinerary_id),
        with_activity=sum(1 for d in docs if d.activity_id),
    )

    return DocumentAnalytics(overview=overview, stats=stats, insights=_insights(docs, stats))
