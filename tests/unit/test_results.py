"""Unit tests for operation results and their HTTP mapping."""

import pytest
from fastapi import HTTPException
from pydantic import BaseModel

from twintravel.app.api.deps import raise_for_result
from twintravel.app.db.errors import DocumentConflictError, PreconditionFailedError
from twintravel.app.models.results import ErrorKind, ResourceLevel, TravelResult
from twintravel.app.travels.aggregate import EntityNotFound, WriteConflictError, guarded


class _Strict(BaseModel):
    count: int


class TestConstructors:
    """Classmethod constructors build the subclass they are called on."""

    def test_constructors_return_subclass(self) -> None:
        built = [
            TravelResult.ok(None),
            TravelResult.not_found(ResourceLevel.travel, "t1"),
            TravelResult.failure(ErrorKind.conflict, "busy"),
        ]

        assert all(type(result) is TravelResult for result in built)
        assert [result.success for result in built] == [True, False, False]


class TestGuarded:
    """Exception to result classification."""

    @pytest.mark.asyncio
    async def test_success_passes_through(self) -> None:
        async def action() -> TravelResult:
            return TravelResult.ok(None, message="done")

        result = await guarded(TravelResult, "op", action)

        assert result.success is True
        assert result.message == "done"

    @pytest.mark.asyncio
    async def test_entity_not_found_names_level(self) -> None:
        async def action() -> TravelResult:
            raise EntityNotFound(ResourceLevel.booking, "b1")

        result = await guarded(TravelResult, "op", action)

        assert result.success is False
        assert result.error == ErrorKind.not_found
        assert result.missing is not None
        assert result.missing.resource == ResourceLevel.booking
        assert result.missing.id == "b1"

    @pytest.mark.asyncio
    async def test_validation_error(self) -> None:
        async def action() -> TravelResult:
            _Strict.model_validate({"count": "many"})
            return TravelResult.ok()

        result = await guarded(TravelResult, "op", action)

        assert result.error == ErrorKind.validation_failure

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            WriteConflictError("busy"),
            DocumentConflictError("twin-a", "t1"),
            PreconditionFailedError("t1", expected=1, actual=2),
        ],
    )
    async def test_conflicts(self, error: Exception) -> None:
        async def action() -> TravelResult:
            raise error

        result = await guarded(TravelResult, "op", action)

        assert result.error == ErrorKind.conflict

    @pytest.mark.asyncio
    async def test_unexpected_error_is_store_failure(self) -> None:
        async def action() -> TravelResult:
            raise RuntimeError("disk on fire")

        result = await guarded(TravelResult, "op", action)

        assert result.error == ErrorKind.store_failure
        assert result.message == "disk on fire"


class TestRaiseForResult:
    """Result to HTTP status mapping."""

    def test_success_does_not_raise(self) -> None:
        raise_for_result(TravelResult.ok(None))

    @pytest.mark.parametrize(
        ("error", "status_code"),
        [
            (ErrorKind.validation_failure, 422),
            (ErrorKind.conflict, 409),
            (ErrorKind.store_failure, 500),
        ],
    )
    def test_failure_status(self, error: ErrorKind, status_code: int) -> None:
        with pytest.raises(HTTPException) as exc_info:
            raise_for_result(TravelResult.failure(error, "nope"))

        assert exc_info.value.status_code == status_code
        assert exc_info.value.detail["error"] == error.value

    def test_not_found_carries_missing_level(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            raise_for_result(TravelResult.not_found(ResourceLevel.itinerary, "i1"))

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail["missing"] == {"resource": "itinerary", "id": "i1"}