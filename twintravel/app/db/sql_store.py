"""SQL implementation of the document store."""

import json
from typing import Any

from sqlalchemy import delete, func, select, text, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from twintravel.app.db.errors import (
    DocumentConflictError,
    DocumentNotFoundError,
    PreconditionFailedError,
)
from twintravel.app.db.models import DocumentRow
from twintravel.app.db.queries import compile_order, compile_where, select_documents
from twintravel.app.db.store import Predicate, SortSpec, StoredDocument

_SQLITE_ELEMENT = text(
    "SELECT je.value FROM twin_document AS d, json_each(d.body, :path) AS je "
    "WHERE d.partition_key = :partition_key AND d.id = :item_id "
    "AND json_extract(je.value, '$.id') = :element_id"
)

_POSTGRES_ELEMENT = text(
    "SELECT elem FROM twin_document AS d, jsonb_array_elements(d.body -> :field) AS elem "
    "WHERE d.partition_key = :partition_key AND d.id = :item_id "
    "AND elem ->> 'id' = :element_id"
)


class SqlDocumentStore:
    """SQL implementation of DocumentStore.

    Each call runs in its own session; conditional writes compare the
    ``revision`` column inside the UPDATE/DELETE statement itself.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._sessions = async_sessionmaker(engine, expire_on_commit=False)

    async def create_item(
        self, partition_key: str, document_type: str, item_id: str, body: dict[str, Any]
    ) -> StoredDocument:
        """Insert a new document."""
        async with self._sessions() as session:
            session.add(
                DocumentRow(
                    partition_key=partition_key,
                    id=item_id,
                    document_type=document_type,
                    body=body,
                    revision=1,
                )
            )
            try:
                await session.commit()
            except IntegrityError as e:
                raise DocumentConflictError(partition_key, item_id) from e

        return StoredDocument(id=item_id, body=body, revision=1)

    async def read_item(self, partition_key: str, item_id: str) -> StoredDocument:
        """Read a document by id."""
        async with self._sessions() as session:
            row = await session.scalar(
                select(DocumentRow).where(
                    DocumentRow.partition_key == partition_key, DocumentRow.id == item_id
                )
            )

        if row is None:
            raise DocumentNotFoundError(partition_key, item_id)

        return StoredDocument(id=row.id, body=dict(row.body), revision=row.revision)

    async def item_exists(self, partition_key: str, item_id: str) -> bool:
        """Whether a document exists."""
        async with self._sessions() as session:
            found = await session.scalar(
                select(DocumentRow.id).where(
                    DocumentRow.partition_key == partition_key, DocumentRow.id == item_id
                )
            )
        return found is not None

    async def replace_item(
        self, partition_key: str, item_id: str, body: dict[str, Any], *, if_match: int
    ) -> StoredDocument:
        """Overwrite a document if its revision is unchanged."""
        stmt = (
            update(DocumentRow)
            .where(
                DocumentRow.partition_key == partition_key,
                DocumentRow.id == item_id,
                DocumentRow.revision == if_match,
            )
            .values(body=body, revision=DocumentRow.revision + 1, updated_at=func.now())
            .returning(DocumentRow.revision)
            .execution_options(synchronize_session=False)
        )

        async with self._sessions() as session:
            revision = (await session.execute(stmt)).scalar_one_or_none()
            if revision is None:
                await self._raise_write_miss(session, partition_key, item_id, if_match)
            await session.commit()

        return StoredDocument(id=item_id, body=body, revision=revision)

    async def delete_item(
        self, partition_key: str, item_id: str, *, if_match: int | None = None
    ) -> None:
        """Delete a document."""
        stmt = delete(DocumentRow).where(
            DocumentRow.partition_key == partition_key, DocumentRow.id == item_id
        )
        if if_match is not None:
            stmt = stmt.where(DocumentRow.revision == if_match)
        stmt = stmt.returning(DocumentRow.id).execution_options(synchronize_session=False)

        async with self._sessions() as session:
            deleted = (await session.execute(stmt)).scalar_one_or_none()
            if deleted is None:
                await self._raise_write_miss(session, partition_key, item_id, if_match)
            await session.commit()

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
        stmt = select_documents(partition_key, document_type)

        condition = compile_where(where)
        if condition is not None:
            stmt = stmt.where(condition)
        if order_by:
            stmt = stmt.order_by(*compile_order(order_by))
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        async with self._sessions() as session:
            rows = (await session.scalars(stmt)).all()

        return [StoredDocument(id=row.id, body=dict(row.body), revision=row.revision) for row in rows]

    async def count_items(
        self, partition_key: str, document_type: str, *, where: tuple[Predicate, ...] = ()
    ) -> int:
        """Count matching documents of one type."""
        stmt = (
            select(func.count())
            .select_from(DocumentRow)
            .where(
                DocumentRow.partition_key == partition_key,
                DocumentRow.document_type == document_type,
            )
        )

        condition = compile_where(where)
        if condition is not None:
            stmt = stmt.where(condition)

        async with self._sessions() as session:
            return int(await session.scalar(stmt) or 0)

    async def read_array_element(
        self, partition_key: str, item_id: str, array_field: str, element_id: str
    ) -> dict[str, Any] | None:
        """Project one element of an array field by id.

        SQLite and PostgreSQL expand the array inside the database; other
        dialects fall back to reading the whole document.
        """
        dialect = self._engine.dialect.name
        params = {"partition_key": partition_key, "item_id": item_id, "element_id": element_id}

        if dialect == "sqlite":
            stmt = _SQLITE_ELEMENT.bindparams(path=f"$.{array_field}", **params)
        elif dialect == "postgresql":
            stmt = _POSTGRES_ELEMENT.bindparams(field=array_field, **params)
        else:
            return await self._scan_array_element(partition_key, item_id, array_field, element_id)

        async with self._sessions() as session:
            value = (await session.execute(stmt)).scalar_one_or_none()

        if value is None:
            return None
        if isinstance(value, str | bytes):
            return json.loads(value)
        return dict(value)

    async def _scan_array_element(
        self, partition_key: str, item_id: str, array_field: str, element_id: str
    ) -> dict[str, Any] | None:
        try:
            stored = await self.read_item(partition_key, item_id)
        except DocumentNotFoundError:
            return None

        for element in stored.body.get(array_field) or []:
            if element.get("id") == element_id:
                return element

        return None

    async def _raise_write_miss(
        self, session: AsyncSession, partition_key: str, item_id: str, if_match: int | None
    ) -> None:
        current = await session.scalar(
            select(DocumentRow.revision).where(
                DocumentRow.partition_key == partition_key, DocumentRow.id == item_id
            )
        )
        await session.rollback()

        if current is None:
            raise DocumentNotFoundError(partition_key, item_id)
        raise PreconditionFailedError(item_id, expected=if_match or 0, actual=current)
