"""Unit tests for structured logging configuration.

Tests the structlog configuration and logging output format.
"""

import json
import os
from unittest.mock import patch

import pytest
import structlog

from student_affairs.bootstrap.logging import (
    configure_structlog as bootstrap_configure_structlog,
)
from student_affairs.infrastructure.observability.correlation import (
    correlation_scope,
)
from student_affairs.infrastructure.observability.logging import (
    DEVELOPMENT,
    PRODUCTION,
    build_processors,
    configure_structlog,
    get_logger_for_service,
)


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


def _has_renderer(processors: list, renderer_type: type) -> bool:
    return any(isinstance(p, renderer_type) for p in processors)


class TestBuildProcessors:
    """Tests for build_processors function."""

    def test_production_ends_in_json(self) -> None:
        processors = build_processors(PRODUCTION)

        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_development_ends_in_console(self) -> None:
        processors = build_processors(DEVELOPMENT)

        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)


class TestConfigureStructlog:
    """Tests for configure_structlog function."""

    def test_configure_production_mode(self) -> None:
        configure_structlog(environment="production")

        processors = structlog.get_config()["processors"]
        assert _has_renderer(processors, structlog.processors.JSONRenderer)

    def test_configure_defaults_to_production(self) -> None:
        configure_structlog()

        processors = structlog.get_config()["processors"]
        assert _has_renderer(processors, structlog.processors.JSONRenderer)

    def test_bootstrap_reads_environment(self) -> None:
        with patch.dict(os.environ, {"STUDENT_AFFAIRS_ENV": "development"}):
            bootstrap_configure_structlog()

        processors = structlog.get_config()["processors"]
        assert _has_renderer(processors, structlog.dev.ConsoleRenderer)

    def test_json_output_carries_correlation_id(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A production log line is JSON with level, event and correlation_id."""
        configure_structlog(environment="production")
        logger = structlog.get_logger("test")

        with correlation_scope("corr-123"):
            logger.info("Referral action committed", action="receive")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "Referral action committed"
        assert payload["level"] == "info"
        assert payload["action"] == "receive"
        assert payload["correlation_id"] == "corr-123"
        assert "timestamp" in payload


class TestGetLoggerForService:
    """Tests for get_logger_for_service."""

    def test_binds_service_and_component(self) -> None:
        with structlog.testing.capture_logs() as logs:
            get_logger_for_service("ReferralWorkflowService").info("hello")

        assert logs[0]["service"] == "ReferralWorkflowService"
        assert logs[0]["component"] == "workflow"
