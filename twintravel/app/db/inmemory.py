"""In-memory implementation of the document store."""

import copy
from dataclasses import dataclass
from typing import Any

from twintravel.app.db.errors import (
    DocumentConflictError,
    DocumentNotFoundError,
    PreconditionFailedError,
)
from twintravel.app.db.store import AnyOf, FieldPredicate, Predicate, SortSpec, StoredDocument


@dataclass
class _Entry:
    document_type: str
    body: dict[str, Any]
    revision: int


def matches(body: dict[str, Any], predicate: Predicate) -> bool:
    """Evaluate a predicate against a document body."""
    if isinstance(predicate, AnyOf):
        return any(matches(body, p) for p in predicate.predicates)
    return _compare(body.get(predicate.field), predicate)


def _compare(actual: Any, predicate: FieldPredicate) -> bool:
    if actual is None:
        return False

    expected = predicate.value
    if predicate.op == "contains_ci":
        return isinstance(actual, str) and str(expected).upper() in actual.upper()
    if predicate.op == "eq":
        return bool(actual == expected)

    try:
        if predicate.op == "gte":
            return bool(actual >= expected)
        if predicate.op == "lte":
            return bool(actual <= expected)
        if predicate.op == "lt":
            return bool(actual < expected)
    except TypeError:
        # Incomparable stored value (e.g. text where a number is expected)
        return False

    raise ValueError(f"Unsupported operator: {predicate.op}")


def _sort_value(body: dict[str, Any], spec: SortSpec) -> Any:
    value = body.get(spec.field)
    if value is None and spec.fallback:
        value = body.get(spec.fallback)
    if value is not None and spec.numeric:
        value = float(value)
    return value


def _sort_key(body: dict[str, Any], spec: SortSpec) -> tuple[bool, Any]:
    value = _sort_value(body, spec)
    if value is None:
        return (False, 0)
    return (True, value)


def sort_documents(documents: list[StoredDocument], order_by: tuple[SortSpec, ...]) -> None:
    """Sort in place, least significant key first so earlier keys dominate."""
    for spec in reversed(order_by):
        documents.sort(key=lambda d, s=spec: _sort_key(d.body, s), reverse=spec.descending)


class InMemoryDocumentStore:
    """In-memory implementation of DocumentStore.

    Bodies are deep-copied on the way in and out, so callers never share
    state with the stored document.
    """

    def __init__(self) -> None:
        self._items: dict[tuple[str, str], _Entry] = {}

    async def create_item(
        self, partition_key: str, document_type: str, item_id: str, body: dict[str, Any]
    ) -> StoredDocument:
        """Insert a new document."""
        key = (partition_key, item_id)
        if key in self._items:
            raise DocumentConflictError(partition_key, item_id)

        self._items[key] = _Entry(document_type=document_type, body=copy.deepcopy(body), revision=1)
        return StoredDocument(id=item_id, body=copy.deepcopy(body), revision=1)

    async def read_item(self, partition_key: str, item_id: str) -> StoredDocument:
        """Read a document by id."""
        entry = self._get(partition_key, item_id)
        return StoredDocument(id=item_id, body=copy.deepcopy(entry.body), revision=entry.revision)

    async def item_exists(self, partition_key: str, item_id: str) -> bool:
        """Whether a document exists."""
        return (partition_key, item_id) in self._items

    async def replace_item(
        self, partition_key: str, item_id: str, body: dict[str, Any], *, if_match: int
    ) -> StoredDocument:
        """Overwrite a document if its revision is unchanged."""
        entry = self._get(partition_key, item_id)
        if entry.revision != if_match:
            raise PreconditionFailedError(item_id, expected=if_match, actual=entry.revision)

        entry.body = copy.deepcopy(body)
        entry.revision += 1
        return StoredDocument(id=item_id, body=copy.deepcopy(body), revision=entry.revision)

    async def delete_item(
        self, partition_key: str, item_id: str, *, if_match: int | None = None
    ) -> None:
        """Delete a document."""
        entry = self._get(partition_key, item_id)
        if if_match is not None and entry.revision != if_match:
            raise PreconditionFailedError(item_id, expected=if_match, actual=entry.revision)

        del self._items[(partition_key, item_id)]

    async def query_items(
        self,
        partition_key: str,
        document_type: str,
        *,
        where: tuple[Predicate, ...] = (),
        order_by: tuple[SortSpec, ...] = (),
        offset: int = 0,
        limit: int | None = None,
    ) -> list[StoredDocument]:
        """Filter, sort and window documents of one type."""
        results = [
            StoredDocument(id=item_id, body=copy.deepcopy(entry.body), revision=entry.revision)
            for item_id, entry in self._select(partition_key, document_type, where)
        ]
        sort_documents(results, order_by)

        end = None if limit is None else offset + limit
        return results[offset:end]

    async def count_items(
        self, partition_key: str, document_type: str, *, where: tuple[Predicate, ...] = ()
    ) -> int:
        """Count matching documents of one type."""
        return len(self._select(partition_key, document_type, where))

    async def read_array_element(
        self, partition_key: str, item_id: str, array_field: str, element_id: str
    ) -> dict[str, Any] | None:
        """Project one element of an array field by id."""
        entry = self._items.get((partition_key, item_id))
        if entry is None:
            return None

        for element in entry.body.get(array_field) or []:
            if element.get("id") == element_id:
                return copy.deepcopy(element)

        return None

    def _get(self, partition_key: str, item_id: str) -> _Entry:
        entry = self._items.get((partition_key, item_id))
        if entry is None:
            raise DocumentNotFoundError(partition_key, item_id)
        return entry

    def _select(
        self, partition_key: str, document_type: str, where: tuple[Predicate, ...]
    ) -> list[tuple[str, _Entry]]:
        return [
            (item_id, entry)
            for (pk, item_id), entry in self._items.items()
            if pk == partition_key
            and entry.document_type == document_type
            and all(matches(entry.body, p) for p in where)
        ]
