"""Read-modify-write of whole travel documents under optimistic concurrency.

Every write to a travel, root fields or nested entities alike, goes through
``AggregateWriter``: read the document with its revision, apply an in-memory
mutation, stamp ``updated_at`` and replace the document only if the revision
is unchanged. A revision mismatch restarts the cycle from a fresh read.
"""

import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from twintravel.app.db.context import TwinContext
from twintravel.app.db.errors import (
    DocumentConflictError,
    DocumentNotFoundError,
    PreconditionFailedError,
)
from twintravel.app.db.store import DocumentStore
from twintravel.app.models.common import next_timestamp
from twintravel.app.models.results import ErrorKind, OperationResult, ResourceLevel
from twintravel.app.models.travel import (
    TRAVEL_DOCUMENT_TYPE,
    Booking,
    DailyActivity,
    Itinerary,
    Travel,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)
R = TypeVar("R", bound=OperationResult)


class EntityNotFound(Exception):
    """An addressed entity is absent at a specific level of the aggregate."""

    def __init__(self, resource: ResourceLevel, entity_id: str) -> None:
        super().__init__(f"{resource.value} {entity_id} not found")
        self.resource = resource
        self.entity_id = entity_id


class WriteConflictError(Exception):
    """Concurrent writers kept changing the document for every attempt."""


# Metrics interface (to be implemented by actual metrics system)
class WriteMetrics:
    """Interface for store write metrics."""

    def record_latency(self, operation: str, outcome: str, latency_ms: float) -> None:
        """Record write latency."""
        pass

    def inc_conflict(self, operation: str) -> None:
        """Increment conflict counter."""
        pass

    def inc_error(self, operation: str, reason: str) -> None:
        """Increment error counter."""
        pass


# Logging interface
class WriteLogger:
    """Interface for structured write logging."""

    def log_attempt(
        self,
        ctx: TwinContext,
        operation: str,
        travel_id: str,
        attempt: int,
        outcome: str,
        latency_ms: float,
        error_reason: str | None = None,
    ) -> None:
        """Log one write attempt."""
        pass


def find_itinerary(travel: Travel, itinerary_id: str) -> Itinerary:
    """Locate an itinerary by id or raise EntityNotFound."""
    for itinerary in travel.itineraries:
        if itinerary.id == itinerary_id:
            return itinerary
    raise EntityNotFound(ResourceLevel.itinerary, itinerary_id)


def find_booking(itinerary: Itinerary, booking_id: str) -> Booking:
    """Locate a booking by id or raise EntityNotFound."""
    for booking in itinerary.bookings:
        if booking.id == booking_id:
            return booking
    raise EntityNotFound(ResourceLevel.booking, booking_id)


def find_activity(itinerary: Itinerary, activity_id: str) -> DailyActivity:
    """Locate a daily activity by id or raise EntityNotFound."""
    for activity in itinerary.daily_activities:
        if activity.id == activity_id:
            return activity
    raise EntityNotFound(ResourceLevel.activity, activity_id)


def apply_changes(entity: BaseModel, changes: Mapping[str, Any]) -> None:
    """Overwrite only the given fields of an entity."""
    for name, value in changes.items():
        setattr(entity, name, value)


def coerce_request(model: type[M], fields: M | Mapping[str, Any]) -> M:
    """Accept a validated request model or validate a plain mapping.

    Raises:
        ValidationError: If the mapping does not satisfy the model
    """
    if isinstance(fields, model):
        return fields
    return model.model_validate(fields)


async def guarded(
    result_type: type[R], operation: str, action: Callable[[], Awaitable[R]]
) -> R:
    """Run an operation, converting every failure into a typed result.

    Args:
        result_type: Result class to build failures with
        operation: Operation name for logging
        action: Coroutine factory performing the operation

    Returns:
        The action's result, or a not_found / validation_failure / conflict /
        store_failure result
    """
    try:
        return await action()
    except EntityNotFound as e:
        logger.warning(f"{operation}: {e}")
        return result_type.not_found(e.resource, e.entity_id)
    except ValidationError as e:
        logger.warning(f"{operation}: invalid input ({e.error_count()} errors)")
        return result_type.failure(ErrorKind.validation_failure, str(e))
    except (WriteConflictError, DocumentConflictError, PreconditionFailedError) as e:
        logger.warning(f"{operation}: {e}")
        return result_type.failure(ErrorKind.conflict, str(e))
    except Exception as e:
        logger.exception(f"{operation} failed")
        return result_type.failure(ErrorKind.store_failure, str(e))


class AggregateWriter:
    """Revision-checked reads and writes of whole travel documents."""

    def __init__(
        self,
        store: DocumentStore,
        *,
        retry_attempts: int = 3,
        metrics: WriteMetrics | None = None,
        write_logger: WriteLogger | None = None,
    ) -> None:
        """Initialize writer.

        Args:
            store: Document store holding travel documents
            retry_attempts: Read-modify-write cycles before reporting a conflict
            metrics: Metrics recorder (optional, defaults to no-op)
            write_logger: Structured logger (optional, defaults to no-op)
        """
        self._store = store
        self._retry_attempts = max(1, retry_attempts)
        self._metrics = metrics or WriteMetrics()
        self._logger = write_logger or WriteLogger()

    async def load(self, travel_id: str, ctx: TwinContext) -> Travel:
        """Read a travel with its current revision.

        Raises:
            EntityNotFound: If no travel with this id exists in the partition
        """
        try:
            stored = await self._store.read_item(ctx.twin_id, travel_id)
        except DocumentNotFoundError as e:
            raise EntityNotFound(ResourceLevel.travel, travel_id) from e

        if stored.body.get("documentType") != TRAVEL_DOCUMENT_TYPE:
            raise EntityNotFound(ResourceLevel.travel, travel_id)

        return Travel.from_document(stored.body, stored.revision)

    async def insert(self, travel: Travel, ctx: TwinContext) -> Travel:
        """Insert a new travel document."""
        attempt_start = time.monotonic()
        stored = await self._store.create_item(
            ctx.twin_id, TRAVEL_DOCUMENT_TYPE, travel.id, travel.to_document()
        )
        elapsed_ms = (time.monotonic() - attempt_start) * 1000
        self._metrics.record_latency("create_travel", "success", elapsed_ms)
        self._logger.log_attempt(ctx, "create_travel", travel.id, 1, "success", elapsed_ms)

        travel.revision = stored.revision
        return travel

    async def mutate(
        self,
        travel_id: str,
        ctx: TwinContext,
        operation: str,
        mutation: Callable[[Travel], T],
    ) -> tuple[Travel, T]:
        """Apply ``mutation`` to the stored travel and persist it.

        The mutation runs against a fresh read on every attempt, so it must
        only depend on the travel it is given.

        Args:
            travel_id: Travel to mutate
            ctx: Twin context (partition)
            operation: Operation name for logs and metrics
            mutation: Function that edits the travel in place and returns a value

        Returns:
            Persisted travel and the mutation's return value

        Raises:
            EntityNotFound: If the travel or a nested entity is missing
            WriteConflictError: If every attempt hit a revision mismatch
        """
        for attempt in range(1, self._retry_attempts + 1):
            travel = await self.load(travel_id, ctx)
            value = mutation(travel)
            travel.updated_at = next_timestamp(travel.updated_at)
            travel.refresh_duration()

            attempt_start = time.monotonic()
            try:
                stored = await self._store.replace_item(
                    ctx.twin_id, travel_id, travel.to_document(), if_match=travel.revision or 0
                )
            except PreconditionFailedError as e:
                elapsed_ms = (time.monotonic() - attempt_start) * 1000
                self._metrics.inc_conflict(operation)
                self._metrics.record_latency(operation, "conflict", elapsed_ms)
                self._logger.log_attempt(
                    ctx, operation, travel_id, attempt, "conflict", elapsed_ms, error_reason=str(e)
                )
                continue
            except DocumentNotFoundError as e:
                # Deleted between read and write
                raise EntityNotFound(ResourceLevel.travel, travel_id) from e

            elapsed_ms = (time.monotonic() - attempt_start) * 1000
            self._metrics.record_latency(operation, "success", elapsed_ms)
            self._logger.log_attempt(ctx, operation, travel_id, attempt, "success", elapsed_ms)

            travel.revision = stored.revision
            return travel, value

        self._metrics.inc_error(operation, "conflict")
        raise WriteConflictError(
            f"travel {travel_id} changed concurrently on all {self._retry_attempts} attempts"
        )

    async def remove(self, travel_id: str, ctx: TwinContext) -> Travel:
        """Delete a travel and return the snapshot that was deleted.

        Raises:
            EntityNotFound: If the travel does not exist
            WriteConflictError: If every attempt hit a revision mismatch
        """
        for attempt in range(1, self._retry_attempts + 1):
            travel = await self.load(travel_id, ctx)

            attempt_start = time.monotonic()
            try:
                await self._store.delete_item(ctx.twin_id, travel_id, if_match=travel.revision)
            except PreconditionFailedError as e:
                elapsed_ms = (time.monotonic() - attempt_start) * 1000
                self._metrics.inc_conflict("delete_travel")
                self._logger.log_attempt(
                    ctx, "delete_travel", travel_id, attempt, "conflict", elapsed_ms,
                    error_reason=str(e),
                )
                continue
            except DocumentNotFoundError as e:
                raise EntityNotFound(ResourceLevel.travel, travel_id) from e

            elapsed_ms = (time.monotonic() - attempt_start) * 1000
            self._metrics.record_latency("delete_travel", "success", elapsed_ms)
            self._logger.log_attempt(ctx, "delete_travel", travel_id, attempt, "success", elapsed_ms)
            return travel

        self._metrics.inc_error("delete_travel", "conflict")
        raise WriteConflictError(
            f"travel {travel_id} changed concurrently on all {self._retry_attempts} attempts"
        )
