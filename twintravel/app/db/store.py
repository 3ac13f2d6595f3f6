"""Document store protocol and the query vocabulary it understands."""

from dataclasses import dataclass
from typing import Any, Literal, Protocol

Operator = Literal["eq", "gte", "lte", "lt", "contains_ci"]


@dataclass(frozen=True)
class FieldPredicate:
    """Comparison of one top-level document field against a value.

    Documents whose field is missing or null never match.
    """

    field: str
    op: Operator
    value: Any


@dataclass(frozen=True)
class AnyOf:
    """Disjunction of field predicates."""

    predicates: tuple[FieldPredicate, ...]


Predicate = FieldPredicate | AnyOf


@dataclass(frozen=True)
class SortSpec:
    """One ordering key.

    Nulls come first ascending and last descending. ``fallback`` names a
    field used when ``field`` is null.
    """

    field: str
    descending: bool = False
    numeric: bool = False
    fallback: str | None = None


@dataclass
class StoredDocument:
    """Document body together with its store-managed revision."""

    id: str
    body: dict[str, Any]
    revision: int


class DocumentStore(Protocol):
    """Partitioned JSON document store with single-document atomic writes."""

    async def create_item(
        self, partition_key: str, document_type: str, item_id: str, body: dict[str, Any]
    ) -> StoredDocument:
        """Insert a new document.

        Args:
            partition_key: Owning twin id
            document_type: Logical document type (e.g. "travel")
            item_id: Document id, unique within the partition
            body: JSON body

        Returns:
            Stored document at revision 1

        Raises:
            DocumentConflictError: If the id already exists in the partition
        """
        ...

    async def read_item(self, partition_key: str, item_id: str) -> StoredDocument:
        """Read a document by id.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        ...

    async def item_exists(self, partition_key: str, item_id: str) -> bool:
        """Whether a document exists, without reading its body."""
        ...

    async def replace_item(
        self, partition_key: str, item_id: str, body: dict[str, Any], *, if_match: int
    ) -> StoredDocument:
        """Overwrite a document if its revision still equals ``if_match``.

        Returns:
            Stored document at the incremented revision

        Raises:
            DocumentNotFoundError: If the document does not exist
            PreconditionFailedError: If the stored revision differs
        """
        ...

    async def delete_item(
        self, partition_key: str, item_id: str, *, if_match: int | None = None
    ) -> None:
        """Delete a document, optionally conditioned on its revision.

        Raises:
            DocumentNotFoundError: If the document does not exist
            PreconditionFailedError: If ``if_match`` is given and differs
        """
        ...

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
        """Query documents of one type within a partition.

        Args:
            partition_key: Owning twin id
            document_type: Logical document type
            where: Predicates combined with AND
            order_by: Ordering keys, most significant first
            offset: Number of matching documents to skip
            limit: Maximum number of documents to return

        Returns:
            Matching documents in order
        """
        ...

    async def count_items(
        self, partition_key: str, document_type: str, *, where: tuple[Predicate, ...] = ()
    ) -> int:
        """Count documents of one type matching every predicate."""
        ...

    async def read_array_element(
        self, partition_key: str, item_id: str, array_field: str, element_id: str
    ) -> dict[str, Any] | None:
        """Project one element of a top-level array field, matched by its id.

        Only the element is transferred; the result is a detached copy.

        Returns:
            Element body, or None if the document or element does not exist
        """
        ...
