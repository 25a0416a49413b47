"""Unit tests for correlation id management."""

import asyncio
import re

import pytest

from src.infrastructure.observability.correlation import (
    correlation_id_processor,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)


@pytest.fixture(autouse=True)
def clear_correlation_id():
    set_correlation_id("")
    yield
    set_correlation_id("")


class TestGenerateCorrelationId:
    def test_uuid4_format(self) -> None:
        pattern = re.compile(
            r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$"
        )
        assert pattern.match(generate_correlation_id())

    def test_unique(self) -> None:
        assert len({generate_correlation_id() for _ in range(50)}) == 50


class TestCorrelationIdContext:
    def test_empty_outside_request(self) -> None:
        assert get_correlation_id() == ""

    def test_set_and_get(self) -> None:
        set_correlation_id("req-1")
        assert get_correlation_id() == "req-1"

    async def test_isolated_between_tasks(self) -> None:
        seen: dict[str, str] = {}

        async def handle(name: str) -> None:
            set_correlation_id(f"id-{name}")
            await asyncio.sleep(0)
            seen[name] = get_correlation_id()

        await asyncio.gather(handle("a"), handle("b"), handle("c"))

        assert seen == {"a": "id-a", "b": "id-b", "c": "id-c"}


class TestCorrelationIdProcessor:
    def test_adds_id_when_set(self) -> None:
        set_correlation_id("proc-1")

        result = correlation_id_processor(None, "info", {"event": "chest_created"})

        assert result == {"event": "chest_created", "correlation_id": "proc-1"}

    def test_keeps_explicit_id(self) -> None:
        set_correlation_id("ambient")

        result = correlation_id_processor(
            None, "info", {"event": "x", "correlation_id": "explicit"}
        )

        assert result["correlation_id"] == "explicit"

    def test_skips_when_unset(self) -> None:
        result = correlation_id_processor(None, "info", {"event": "x"})

        assert "correlation_id" not in result
