"""Filtered, sorted and paginated listing of travels."""

import math

from twintravel.app.config import Settings, get_settings
from twintravel.app.db.context import TwinContext
from twintravel.app.db.store import AnyOf, DocumentStore, FieldPredicate, Predicate, SortSpec
from twintravel.app.models.query import SortDirection, TravelQuery
from twintravel.app.models.results import TravelPageResult, TravelStatsResult
from twintravel.app.models.travel import TRAVEL_DOCUMENT_TYPE, Travel
from twintravel.app.travels.aggregate import guarded
from twintravel.app.travels.stats import compute_travel_stats

# Persisted field and numeric flag per sort key
SORT_FIELDS: dict[str, tuple[str, bool]] = {
    "start-date": ("fechaInicio", False),
    "creation-date": ("fechaCreacion", False),
    "title": ("titulo", False),
    "budget": ("presupuesto", True),
    "rating": ("calificacion", True),
}

_SORT_ALIASES: dict[str, str] = {
    "startdate": "start-date",
    "fechainicio": "start-date",
    "creationdate": "creation-date",
    "createdat": "creation-date",
    "fechacreacion": "creation-date",
    "title": "title",
    "titulo": "title",
    "budget": "budget",
    "presupuesto": "budget",
    "rating": "rating",
    "calificacion": "rating",
}

SEARCH_FIELDS = ("titulo", "descripcion", "notas", "actividades")


def _text(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value.strip()


def build_filter(query: TravelQuery) -> tuple[Predicate, ...]:
    """Predicates for every filter present in the query, combined with AND.

    Absent or blank filters produce no predicate at all.
    """
    where: list[Predicate] = []

    if query.status is not None:
        where.append(FieldPredicate("estado", "eq", query.status.value))
    if query.travel_type is not None:
        where.append(FieldPredicate("tipoViaje", "eq", query.travel_type.value))
    if country := _text(query.destination_country):
        where.append(FieldPredicate("paisDestino", "contains_ci", country))
    if city := _text(query.destination_city):
        where.append(FieldPredicate("ciudadDestino", "contains_ci", city))
    if query.date_from is not None:
        where.append(FieldPredicate("fechaInicio", "gte", query.date_from.isoformat()))
    if query.date_to is not None:
        where.append(FieldPredicate("fechaInicio", "lte", query.date_to.isoformat()))
    if query.min_rating is not None:
        where.append(FieldPredicate("calificacion", "gte", query.min_rating))
    if query.max_budget is not None:
        where.append(FieldPredicate("presupuesto", "lte", float(query.max_budget)))
    if term := _text(query.search_term):
        where.append(
            AnyOf(tuple(FieldPredicate(field, "contains_ci", term) for field in SEARCH_FIELDS))
        )

    return tuple(where)


def normalize_sort_key(sort_by: str | None) -> str | None:
    """Canonical sort key for dashed, underscored or camelCase spellings."""
    if not sort_by:
        return None
    compact = sort_by.strip().lower().replace("-", "").replace("_", "")
    return _SORT_ALIASES.get(compact)


def resolve_sort(sort_by: str | None, direction: SortDirection) -> tuple[SortSpec, ...]:
    """Ordering for a sort key, with id as the final tie-breaker.

    Unrecognized keys fall back to creation date descending.
    """
    key = normalize_sort_key(sort_by)
    if key is None:
        primary = SortSpec("fechaCreacion", descending=True)
    else:
        field, numeric = SORT_FIELDS[key]
        primary = SortSpec(field, descending=direction == SortDirection.desc, numeric=numeric)
    return (primary, SortSpec("id"))


def page_bounds(page: int, page_size: int | None, settings: Settings) -> tuple[int, int]:
    """Offset and capped limit for a 1-indexed page.

    Returns:
        (offset, limit)
    """
    size = min(page_size or settings.default_page_size, settings.max_page_size)
    return (page - 1) * size, size


class TravelQueryEngine:
    """Listing and statistics over a twin's travels."""

    def __init__(self, store: DocumentStore, settings: Settings | None = None) -> None:
        self._store = store
        self._settings = settings or get_settings()

    async def _matching(self, where: tuple[Predicate, ...], ctx: TwinContext) -> list[Travel]:
        stored = await self._store.query_items(ctx.twin_id, TRAVEL_DOCUMENT_TYPE, where=where)
        return [Travel.from_document(doc.body, doc.revision) for doc in stored]

    async def list_travels(
        self, query: TravelQuery, ctx: TwinContext, *, include_stats: bool = False
    ) -> TravelPageResult:
        """Return one page of travels matching the query.

        Args:
            query: Filters, ordering and paging
            ctx: Twin context (partition)
            include_stats: Also aggregate statistics over the full filtered set

        Returns:
            Page of travels with total count and page metadata
        """

        async def action() -> TravelPageResult:
            where = build_filter(query)
            order_by = resolve_sort(query.sort_by, query.sort_direction)
            offset, limit = page_bounds(query.page, query.page_size, self._settings)

            total = await self._store.count_items(ctx.twin_id, TRAVEL_DOCUMENT_TYPE, where=where)
            stored = await self._store.query_items(
                ctx.twin_id,
                TRAVEL_DOCUMENT_TYPE,
                where=where,
                order_by=order_by,
                offset=offset,
                limit=limit,
            )
            travels = [Travel.from_document(doc.body, doc.revision) for doc in stored]

            stats = None
            if include_stats:
                stats = compute_travel_stats(
                    await self._matching(where, ctx), self._settings.top_countries_limit
                )

            return TravelPageResult.ok(
                travels,
                total_count=total,
                page=query.page,
                page_size=limit,
                total_pages=math.ceil(total / limit) if total else 0,
                stats=stats,
            )

        return await guarded(TravelPageResult, "list_travels", action)

    async def travel_stats(self, query: TravelQuery, ctx: TwinContext) -> TravelStatsResult:
        """Statistics over every travel matching the query's filters.

        Paging and ordering in the query are ignored.
        """

        async def action() -> TravelStatsResult:
            travels = await self._matching(build_filter(query), ctx)
            return TravelStatsResult.ok(
                compute_travel_stats(travels, self._settings.top_countries_limit)
            )

        return await guarded(TravelStatsResult, "travel_stats", action)
