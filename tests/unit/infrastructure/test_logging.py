"""Unit tests for structlog configuration."""

import json
import os
from unittest.mock import patch

import pytest
import structlog

from src.infrastructure.observability.correlation import set_correlation_id
from src.infrastructure.observability.logging import configure_structlog


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    set_correlation_id("")
    structlog.reset_defaults()


def _renderer() -> object:
    return structlog.get_config()["processors"][-1]


class TestConfigureStructlog:
    def test_production_renders_json(self) -> None:
        configure_structlog(environment="production")

        assert isinstance(_renderer(), structlog.processors.JSONRenderer)

    def test_development_renders_console(self) -> None:
        configure_structlog(environment="development")

        assert isinstance(_renderer(), structlog.dev.ConsoleRenderer)

    def test_defaults_to_production(self) -> None:
        configure_structlog()

        assert isinstance(_renderer(), structlog.processors.JSONRenderer)


class TestLogOutput:
    def test_json_entry_fields(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_structlog(environment="production")
        set_correlation_id("corr-42")

        structlog.get_logger().info("chit_added", chest_id="c-1")

        entry = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert entry["event"] == "chit_added"
        assert entry["level"] == "info"
        assert entry["chest_id"] == "c-1"
        assert entry["correlation_id"] == "corr-42"
        assert entry["timestamp"].endswith("Z")

    def test_level_threshold_from_environment(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with patch.dict(os.environ, {"LOG_LEVEL": "WARNING"}):
            configure_structlog(environment="production")

        logger = structlog.get_logger()
        logger.info("hidden")
        logger.warning("shown")

        lines = capsys.readouterr().out.strip().splitlines()
        assert [json.loads(line)["event"] for line in lines] == ["shown"]
