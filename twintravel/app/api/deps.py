"""FastAPI dependencies wiring the document store and services."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status

from twintravel.app.config import get_settings
from twintravel.app.db.engine import get_async_engine
from twintravel.app.db.inmemory import InMemoryDocumentStore
from twintravel.app.db.sql_store import SqlDocumentStore
from twintravel.app.db.store import DocumentStore
from twintravel.app.models.results import ErrorKind, OperationResult
from twintravel.app.travels.aggregate import AggregateWriter
from twintravel.app.travels.documents import TravelDocumentRepository
from twintravel.app.travels.editor import NestedEditor
from twintravel.app.travels.indexing import NullTravelIndexer, TravelIndexer
from twintravel.app.travels.query import TravelQueryEngine
from twintravel.app.travels.repository import TravelRepository
from twintravel.app.travels.subquery import ItineraryReader
from twintravel.app.utils.logging import StructuredWriteLogger
from twintravel.app.utils.metrics import PrometheusWriteMetrics

_STATUS_BY_ERROR = {
    ErrorKind.not_found: status.HTTP_404_NOT_FOUND,
    ErrorKind.validation_failure: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.conflict: status.HTTP_409_CONFLICT,
    ErrorKind.store_failure: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@lru_cache
def get_store() -> DocumentStore:
    """Process-wide document store: SQL when DATABASE_URL is set, else in-memory."""
    if get_settings().database_url:
        return SqlDocumentStore(get_async_engine())
    return InMemoryDocumentStore()


def get_indexer() -> TravelIndexer:
    """Search-index replication target."""
    return NullTravelIndexer()


Store = Annotated[DocumentStore, Depends(get_store)]


def get_writer(store: Store) -> AggregateWriter:
    """Aggregate writer with Prometheus metrics and structured logging."""
    return AggregateWriter(
        store,
        retry_attempts=get_settings().write_retry_attempts,
        metrics=PrometheusWriteMetrics(),
        write_logger=StructuredWriteLogger(),
    )


Writer = Annotated[AggregateWriter, Depends(get_writer)]


def get_travel_repository(store: Store, writer: Writer) -> TravelRepository:
    """Root travel repository."""
    return TravelRepository(store, writer=writer)


def get_nested_editor(store: Store, writer: Writer) -> NestedEditor:
    """Nested sub-resource editor."""
    return NestedEditor(store, writer=writer)


def get_itinerary_reader(store: Store) -> ItineraryReader:
    """Read-only itinerary projection."""
    return ItineraryReader(store)


def get_query_engine(store: Store) -> TravelQueryEngine:
    """Travel listing and statistics."""
    return TravelQueryEngine(store)


def get_document_repository(store: Store) -> TravelDocumentRepository:
    """Travel document repository."""
    return TravelDocumentRepository(store)


def raise_for_result(result: OperationResult) -> None:
    """Map an unsuccessful result onto an HTTP error.

    Raises:
        HTTPException: 404 not_found, 422 validation_failure, 409 conflict,
            500 store_failure
    """
    if result.success:
        return

    error = result.error or ErrorKind.store_failure
    detail: dict[str, object] = {"error": error.value, "message": result.message}
    if result.missing is not None:
        detail["missing"] = result.missing.model_dump(mode="json")

    raise HTTPException(status_code=_STATUS_BY_ERROR[error], detail=detail)
