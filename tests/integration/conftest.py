"""
Integration test configuration with testcontainers.

Provides a session-scoped PostgreSQL 16 container and a per-test
SqlAlchemyDocumentStore on top of it. The ``documents`` table is truncated
after every test.

Usage:
    @pytest.mark.integration
    async def test_example(pg_store: SqlAlchemyDocumentStore) -> None:
        ...

Note: Docker must be running for the PostgreSQL fixtures; without it the
tests that use them are skipped.
"""

from collections.abc import AsyncGenerator, Generator

import pytest
from sqlalchemy import text
from testcontainers.postgres import PostgresContainer

from src.bootstrap.database import create_session_factory, to_async_url
from src.infrastructure.adapters.persistence import SqlAlchemyDocumentStore


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    """Session-scoped PostgreSQL 16 container, started once per run."""
    container = PostgresContainer("postgres:16-alpine")
    try:
        container.start()
    except Exception as exc:  # docker missing or not running
        pytest.skip(f"PostgreSQL container unavailable: {exc}")
    try:
        yield container
    finally:
        container.stop()


@pytest.fixture(scope="session")
def postgres_async_url(postgres_container: PostgresContainer) -> str:
    """asyncpg URL for the container (testcontainers hands out psycopg2)."""
    return to_async_url(postgres_container.get_connection_url())


@pytest.fixture
async def pg_store(
    postgres_async_url: str,
) -> AsyncGenerator[SqlAlchemyDocumentStore, None]:
    """Per-test document store with a clean ``documents`` table."""
    engine, session_factory = create_session_factory(postgres_async_url)
    store = SqlAlchemyDocumentStore(session_factory)
    await store.create_schema()

    yield store

    async with session_factory() as session, session.begin():
        await session.execute(text("TRUNCATE documents"))
    await engine.dispose()
