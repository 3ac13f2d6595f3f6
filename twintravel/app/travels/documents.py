"""Storage, listing and analytics of travel documents (receipts, invoices, tickets)."""

import math
from collections.abc import Mapping
from datetime import timedelta
from typing import Any

from twintravel.app.config import Settings, get_settings
from twintravel.app.db.context import TwinContext
from twintravel.app.db.errors import DocumentNotFoundError
from twintravel.app.db.store import AnyOf, DocumentStore, FieldPredicate, Predicate, SortSpec
from twintravel.app.models.common import utcnow
from twintravel.app.models.documents import TRAVEL_DOC_TYPE, TravelDocument
from twintravel.app.models.query import DocumentQuery, SortDirection
from twintravel.app.models.requests import TravelDocumentCreate
from twintravel.app.models.results import (
    DocumentAnalyticsResult,
    DocumentPageResult,
    DocumentResult,
    ResourceLevel,
)
from twintravel.app.travels.aggregate import EntityNotFound, coerce_request, guarded
from twintravel.app.travels.query import page_bounds
from twintravel.app.travels.stats import build_document_analytics, compute_document_stats

SEARCH_FIELDS = ("titulo", "vendorName", "descripcion", "aiSummary")

SORT_FIELDS: dict[str, SortSpec] = {
    "date": SortSpec("documentDate", fallback="createdAt"),
    "amount": SortSpec("totalAmount", numeric=True),
    "vendor": SortSpec("vendorName"),
}


def build_document_filter(query: DocumentQuery) -> tuple[Predicate, ...]:
    """Predicates for every filter present in the query.

    Date bounds match on the document date or, failing that, on the creation
    timestamp.
    """
    where: list[Predicate] = []

    for field, value in (
        ("travelId", query.travel_id),
        ("itineraryId", query.itinerary_id),
        ("activityId", query.activity_id),
    ):
        if value:
            where.append(FieldPredicate(field, "eq", value))

    if query.document_type is not None:
        where.append(FieldPredicate("documentType", "eq", query.document_type.value))
    if query.establishment_type is not None:
        where.append(FieldPredicate("establishmentType", "eq", query.establishment_type.value))

    if query.date_from is not None:
        start = query.date_from.isoformat()
        where.append(
            AnyOf(
                (
                    FieldPredicate("documentDate", "gte", start),
                    FieldPredicate("createdAt", "gte", start),
                )
            )
        )
    if query.date_to is not None:
        next_day = (query.date_to + timedelta(days=1)).isoformat()
        where.append(
            AnyOf(
                (
                    FieldPredicate("documentDate", "lte", query.date_to.isoformat()),
                    FieldPredicate("createdAt", "lt", next_day),
                )
            )
        )

    if query.min_amount is not None:
        where.append(FieldPredicate("totalAmount", "gte", float(query.min_amount)))
    if query.max_amount is not None:
        where.append(FieldPredicate("totalAmount", "lte", float(query.max_amount)))

    if query.search_term and query.search_term.strip():
        term = query.search_term.strip()
        where.append(
            AnyOf(tuple(FieldPredicate(field, "contains_ci", term) for field in SEARCH_FIELDS))
        )

    return tuple(where)


def resolve_document_sort(sort_by: str | None, direction: SortDirection) -> tuple[SortSpec, ...]:
    """Ordering for a document sort key; unknown keys sort newest first."""
    spec = SORT_FIELDS.get((sort_by or "").strip().lower())
    if spec is None:
        primary = SortSpec("createdAt", descending=True)
    else:
        primary = SortSpec(
            spec.field,
            descending=direction == SortDirection.desc,
            numeric=spec.numeric,
            fallback=spec.fallback,
        )
    return (primary, SortSpec("id"))


class TravelDocumentRepository:
    """Repository for travel documents stored in the twin's partition."""

    def __init__(self, store: DocumentStore, settings: Settings | None = None) -> None:
        self._store = store
        self._settings = settings or get_settings()

    async def _load(self, document_id: str, ctx: TwinContext) -> TravelDocument:
        try:
            stored = await self._store.read_item(ctx.twin_id, document_id)
        except DocumentNotFoundError as e:
            raise EntityNotFound(ResourceLevel.document, document_id) from e

        if stored.body.get("docType") != TRAVEL_DOC_TYPE:
            raise EntityNotFound(ResourceLevel.document, document_id)

        return TravelDocument.from_document(stored.body, stored.revision)

    async def _matching(
        self, where: tuple[Predicate, ...], ctx: TwinContext
    ) -> list[TravelDocument]:
        stored = await self._store.query_items(ctx.twin_id, TRAVEL_DOC_TYPE, where=where)
        return [TravelDocument.from_document(doc.body, doc.revision) for doc in stored]

    async def save(
        self, fields: TravelDocumentCreate | Mapping[str, Any], ctx: TwinContext
    ) -> DocumentResult:
        """Store an extracted travel document.

        Args:
            fields: Document fields (request model or plain mapping)
            ctx: Twin context (partition)

        Returns:
            Result carrying the stored document
        """

        async def action() -> DocumentResult:
            request = coerce_request(TravelDocumentCreate, fields)
            now = utcnow()
            document = TravelDocument(
                twin_id=ctx.twin_id,
                created_at=now,
                updated_at=now,
                **request.entity_fields(self._settings.default_currency),
            )
            stored = await self._store.create_item(
                ctx.twin_id, TRAVEL_DOC_TYPE, document.id, document.to_document()
            )
            document.revision = stored.revision
            return DocumentResult.ok(document, message="Document saved")

        return await guarded(DocumentResult, "save_document", action)

    async def get(self, document_id: str, ctx: TwinContext) -> DocumentResult:
        """Get a travel document by id."""

        async def action() -> DocumentResult:
            return DocumentResult.ok(await self._load(document_id, ctx))

        return await guarded(DocumentResult, "get_document", action)

    async def delete(self, document_id: str, ctx: TwinContext) -> DocumentResult:
        """Delete a travel document and return the deleted snapshot."""

        async def action() -> DocumentResult:
            document = await self._load(document_id, ctx)
            try:
                await self._store.delete_item(ctx.twin_id, document_id, if_match=document.revision)
            except DocumentNotFoundError as e:
                raise EntityNotFound(ResourceLevel.document, document_id) from e
            return DocumentResult.ok(document, message="Document deleted")

        return await guarded(DocumentResult, "delete_document", action)

    async def list_documents(
        self, query: DocumentQuery, ctx: TwinContext, *, include_stats: bool = True
    ) -> DocumentPageResult:
        """Return one page of documents matching the query.

        Statistics, when requested, cover the full filtered set.
        """

        async def action() -> DocumentPageResult:
            where = build_document_filter(query)
            order_by = resolve_document_sort(query.sort_by, query.sort_direction)
            offset, limit = page_bounds(query.page, query.page_size, self._settings)

            total = await self._store.count_items(ctx.twin_id, TRAVEL_DOC_TYPE, where=where)
            stored = await self._store.query_items(
                ctx.twin_id,
                TRAVEL_DOC_TYPE,
                where=where,
                order_by=order_by,
                offset=offset,
                limit=limit,
            )
            documents = [TravelDocument.from_document(doc.body, doc.revision) for doc in stored]

            stats = None
            if include_stats:
                stats = compute_document_stats(
                    await self._matching(where, ctx), self._settings.top_vendors_limit
                )

            return DocumentPageResult.ok(
                documents,
                total_count=total,
                page=query.page,
                page_size=limit,
                total_pages=math.ceil(total / limit) if total else 0,
                stats=stats,
            )

        return await guarded(DocumentPageResult, "list_documents", action)

    async def analytics(self, ctx: TwinContext) -> DocumentAnalyticsResult:
        """Overview, spending breakdown and insights over all of a twin's documents."""

        async def action() -> DocumentAnalyticsResult:
            documents = await self._matching((), ctx)
            return DocumentAnalyticsResult.ok(
                build_document_analytics(documents, self._settings.top_vendors_limit)
            )

        return await guarded(DocumentAnalyticsResult, "document_analytics", action)
