"""
Smoke tests to verify the runtime dependencies are installed correctly.

Run with: pytest tests/unit/test_smoke.py -v
"""

import sys

import pytest


class TestPythonVersion:
    def test_python_311_or_higher(self) -> None:
        """Python 3.11+ is required for asyncio.TaskGroup support."""
        assert sys.version_info >= (3, 11), (
            f"Python 3.11+ required, "
            f"got {sys.version_info.major}.{sys.version_info.minor}"
        )


class TestWebStack:
    """FastAPI on pydantic v2, served by uvicorn."""

    def test_fastapi_import(self) -> None:
        from fastapi import FastAPI

        assert FastAPI() is not None

    def test_pydantic_v2(self) -> None:
        import pydantic

        major_version = int(pydantic.VERSION.split(".")[0])
        assert major_version >= 2, f"Pydantic v2 required, got {pydantic.VERSION}"

    def test_uvicorn_import(self) -> None:
        import uvicorn

        assert uvicorn is not None


class TestPersistence:
    def test_sqlalchemy_async(self) -> None:
        """SQLAlchemy 2.0+ async mode backs the PostgreSQL document store."""
        from sqlalchemy import __version__ as sa_version
        from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

        assert int(sa_version.split(".")[0]) >= 2
        assert AsyncSession is not None
        assert create_async_engine is not None

    def test_asyncpg_import(self) -> None:
        import asyncpg

        assert asyncpg is not None

    def test_uuid7_is_time_ordered(self) -> None:
        from uuid6 import uuid7

        first, second = uuid7(), uuid7()
        assert first.version == 7
        assert first < second


class TestStructuredLogging:
    def test_structlog_bind(self) -> None:
        import structlog

        logger = structlog.get_logger()
        assert logger.bind(chest_id="c-1", operation="test") is not None


class TestProjectVersion:
    def test_version_format(self) -> None:
        """Version must be in semver format."""
        from src import __version__

        parts = __version__.split(".")
        assert len(parts) >= 2, f"Version must be semver format, got {__version__}"


class TestAsyncCapabilities:
    @pytest.mark.asyncio
    async def test_taskgroup_execution(self) -> None:
        import asyncio

        results: list[int] = []

        async def add_result(value: int) -> None:
            await asyncio.sleep(0)
            results.append(value)

        async with asyncio.TaskGroup() as tg:
            tg.create_task(add_result(1))
            tg.create_task(add_result(2))

        assert sorted(results) == [1, 2]
