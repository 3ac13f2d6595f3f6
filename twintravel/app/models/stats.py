"""Aggregate statistics over travel and travel-document result sets."""

from datetime import datetime

from pydantic import BaseModel, Field


class CountryCount(BaseModel):
    """Destination country with its number of travels."""

    country: str
    count: int


class TravelStats(BaseModel):
    """Counts and sums over a filtered set of travels."""

    total_travels: int = 0
    by_status: dict[str, int] = Field(default_factory=dict)
    by_type: dict[str, int] = Field(default_factory=dict)
    total_budget: float = 0.0
    budget_by_currency: dict[str, float] = Field(default_factory=dict)
    top_countries: list[CountryCount] = Field(default_factory=list)


class CurrencyTotal(BaseModel):
    """Number of documents and summed amount in one currency."""

    count: int = 0
    total: float = 0.0


class VendorTotal(BaseModel):
    """Vendor ranked by total amount spent."""

    vendor: str
    count: int
    total_amount: float


class DateRange(BaseModel):
    """Span of creation timestamps across a document set."""

    earliest: datetime
    latest: datetime
    span_days: int


class DocumentStats(BaseModel):
    """Spending statistics over a filtered set of travel documents."""

    total_documents: int = 0
    total_amount: float = 0.0
    average_amount: float = 0.0
    by_document_type: dict[str, int] = Field(default_factory=dict)
    by_establishment_type: dict[str, int] = Field(default_factory=dict)
    monthly_spending: dict[str, float] = Field(default_factory=dict)
    currency_breakdown: dict[str, CurrencyTotal] = Field(default_factory=dict)
    top_vendors: list[VendorTotal] = Field(default_factory=list)
    date_range: DateRange | None = None


class AnalyticsOverview(BaseModel):
    """How documents relate to vendors and to the travel hierarchy."""

    total_documents: int = 0
    total_spent: float = 0.0
    average_per_document: float = 0.0
    unique_vendors: int = 0
    with_travel: int = 0
    with_itinerary: int = 0
    with_activity: int = 0


class DocumentAnalytics(BaseModel):
    """Full analytics over every document a twin owns."""

    overview: AnalyticsOverview = Field(default_factory=AnalyticsOverview)
    stats: DocumentStats = Field(default_factory=DocumentStats)
    insights: list[str] = Field(default_factory=list)
