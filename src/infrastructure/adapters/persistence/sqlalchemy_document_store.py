"""PostgreSQL document store (SQLAlchemy async).

All collections share one ``documents`` table keyed by (collection, doc_id)
with a JSONB body. Single-document atomicity comes from the statements
themselves:

- create: ``INSERT ... ON CONFLICT DO NOTHING RETURNING version``
- update: ``UPDATE ... WHERE version = :expected RETURNING version``
- delete: ``DELETE ... WHERE version = :expected``

No statement spans more than one document, matching the store contract the
services are written against.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from src.application.ports.document_store import Document, DocumentStoreProtocol
from src.domain.errors.concurrent_modification import ConcurrentModificationError
from src.domain.errors.document_store import (
    DocumentExistsError,
    DocumentNotFoundError,
)

logger = get_logger(__name__)

DOCUMENTS_DDL = (
    """
    CREATE TABLE IF NOT EXISTS documents (
        seq BIGSERIAL UNIQUE,
        collection TEXT NOT NULL,
        doc_id TEXT NOT NULL,
        version INTEGER NOT NULL,
        data JSONB NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        PRIMARY KEY (collection, doc_id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_documents_data ON documents USING GIN (data)",
)


class SqlAlchemyDocumentStore(DocumentStoreProtocol):
    """Document store backed by a PostgreSQL ``documents`` table.

    Attributes:
        _session_factory: SQLAlchemy async session factory for DB access.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create_schema(self) -> None:
        """Create the documents table if it does not exist."""
        async with self._session_factory() as session, session.begin():
            for statement in DOCUMENTS_DDL:
                await session.execute(text(statement))
        logger.info("document_store_schema_ready")

    async def get(self, collection: str, doc_id: str) -> Document | None:
        async with self._session_factory() as session:
            result = await session.execute(
                text("""
                    SELECT version, data
                    FROM documents
                    WHERE collection = :collection AND doc_id = :doc_id
                """),
                {"collection": collection, "doc_id": doc_id},
            )
            row = result.fetchone()
        if row is None:
            return None
        return Document(id=doc_id, version=row[0], data=_load(row[1]))

    async def create(
        self, collection: str, doc_id: str, data: dict[str, Any]
    ) -> Document:
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                text("""
                    INSERT INTO documents (collection, doc_id, version, data)
                    VALUES (:collection, :doc_id, 1, CAST(:data AS JSONB))
                    ON CONFLICT (collection, doc_id) DO NOTHING
                    RETURNING version
                """),
                {"collection": collection, "doc_id": doc_id, "data": json.dumps(data)},
            )
            row = result.fetchone()
        if row is None:
            raise DocumentExistsError(collection, doc_id)
        return Document(id=doc_id, version=row[0], data=dict(data))

    async def update(
        self,
        collection: str,
        doc_id: str,
        data: dict[str, Any],
        expected_version: int,
    ) -> Document:
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                text("""
                    UPDATE documents
                    SET data = CAST(:data AS JSONB),
                        version = version + 1,
                        updated_at = now()
                    WHERE collection = :collection
                      AND doc_id = :doc_id
                      AND version = :expected_version
                    RETURNING version
                """),
                {
                    "collection": collection,
                    "doc_id": doc_id,
                    "data": json.dumps(data),
                    "expected_version": expected_version,
                },
            )
            row = result.fetchone()
        if row is None:
            await self._raise_for_missed_write(collection, doc_id, expected_version)
        assert row is not None
        return Document(id=doc_id, version=row[0], data=dict(data))

    async def delete(
        self,
        collection: str,
        doc_id: str,
        expected_version: int | None = None,
    ) -> None:
        statement = """
            DELETE FROM documents
            WHERE collection = :collection AND doc_id = :doc_id
        """
        params: dict[str, Any] = {"collection": collection, "doc_id": doc_id}
        if expected_version is not None:
            statement += " AND version = :expected_version"
            params["expected_version"] = expected_version

        async with self._session_factory() as session, session.begin():
            result = await session.execute(text(statement + " RETURNING version"), params)
            row = result.fetchone()
        if row is None:
            await self._raise_for_missed_write(collection, doc_id, expected_version)

    async def query(
        self,
        collection: str,
        where: Mapping[str, Any] | None = None,
    ) -> list[Document]:
        clauses = ["collection = :collection"]
        params: dict[str, Any] = {"collection": collection}
        for index, (name, expected) in enumerate((where or {}).items()):
            params[f"field_{index}"] = name
            if isinstance(expected, Sequence) and not isinstance(expected, str):
                options = []
                for option_index, option in enumerate(expected):
                    key = f"value_{index}_{option_index}"
                    params[key] = json.dumps(option)
                    options.append(
                        f"data -> CAST(:field_{index} AS TEXT) = CAST(:{key} AS JSONB)"
                    )
                clauses.append("(" + (" OR ".join(options) or "FALSE") + ")")
            else:
                params[f"value_{index}"] = json.dumps(expected)
                clauses.append(
                    f"COALESCE(data -> CAST(:field_{index} AS TEXT), CAST('null' AS JSONB))"
                    f" = CAST(:value_{index} AS JSONB)"
                )

        sql = (
            "SELECT doc_id, version, data FROM documents WHERE "
            + " AND ".join(clauses)
            + " ORDER BY seq"
        )
        async with self._session_factory() as session:
            result = await session.execute(text(sql), params)
            rows = result.fetchall()
        return [Document(id=row[0], version=row[1], data=_load(row[2])) for row in rows]

    async def _raise_for_missed_write(
        self, collection: str, doc_id: str, expected_version: int | None
    ) -> None:
        current = await self.get(collection, doc_id)
        if current is None:
            raise DocumentNotFoundError(collection, doc_id)
        logger.warning(
            "document_version_conflict",
            collection=collection,
            doc_id=doc_id,
            expected_version=expected_version,
            actual_version=current.version,
        )
        raise ConcurrentModificationError(
            collection, doc_id, expected_version, current.version
        )


def _load(raw: Any) -> dict[str, Any]:
    # asyncpg hands JSONB back as str unless a codec is registered
    if isinstance(raw, str):
        return json.loads(raw)
    return dict(raw)
