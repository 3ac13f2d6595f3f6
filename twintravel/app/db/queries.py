"""Partition-safe query helpers and predicate compilation for the SQL store."""

from typing import Any

from sqlalchemy import ColumnElement, Select, and_, false, func, or_, select

from twintravel.app.db.models import DocumentRow
from twintravel.app.db.store import AnyOf, FieldPredicate, Predicate, SortSpec


def select_documents(partition_key: str, document_type: str) -> Select[tuple[DocumentRow]]:
    """Select documents of one type with partition scoping enforced.

    Args:
        partition_key: Owning twin id
        document_type: Logical document type

    Returns:
        Select filtered by partition key and document type
    """
    return select(DocumentRow).where(
        DocumentRow.partition_key == partition_key,
        DocumentRow.document_type == document_type,
    )


def _field_value(field: str, sample: Any) -> ColumnElement[Any]:
    element = DocumentRow.body[field]
    if isinstance(sample, bool):
        return element.as_boolean()
    if isinstance(sample, int | float):
        return element.as_float()
    return element.as_string()


def compile_predicate(predicate: Predicate) -> ColumnElement[bool]:
    """Translate a store predicate into a SQL boolean expression.

    JSON nulls and missing keys extract as SQL NULL, so they never match.
    """
    if isinstance(predicate, AnyOf):
        if not predicate.predicates:
            return false()
        return or_(*(compile_predicate(p) for p in predicate.predicates))
    return _compile_field(predicate)


def _compile_field(predicate: FieldPredicate) -> ColumnElement[bool]:
    value = predicate.value

    if predicate.op == "contains_ci":
        # both sides folded by the database, so they agree on non-ASCII letters
        return DocumentRow.body[predicate.field].as_string().icontains(
            str(value), autoescape=True
        )

    column = _field_value(predicate.field, value)
    if predicate.op == "eq":
        return column == value
    if predicate.op == "gte":
        return column >= value
    if predicate.op == "lte":
        return column <= value
    if predicate.op == "lt":
        return column < value

    raise ValueError(f"Unsupported operator: {predicate.op}")


def compile_where(where: tuple[Predicate, ...]) -> ColumnElement[bool] | None:
    """AND of all predicates, or None when there are none."""
    if not where:
        return None
    return and_(*(compile_predicate(p) for p in where))


def _sort_value(field: str, numeric: bool) -> ColumnElement[Any]:
    element = DocumentRow.body[field]
    return element.as_float() if numeric else element.as_string()


def compile_order(order_by: tuple[SortSpec, ...]) -> list[ColumnElement[Any]]:
    """Translate sort specs into ORDER BY clauses.

    Nulls sort first ascending and last descending.
    """
    clauses: list[ColumnElement[Any]] = []
    for spec in order_by:
        value = _sort_value(spec.field, spec.numeric)
        if spec.fallback:
            value = func.coalesce(value, _sort_value(spec.fallback, spec.numeric))
        if spec.descending:
            clauses.append(value.desc().nulls_last())
        else:
            clauses.append(value.asc().nulls_first())
    return clauses
