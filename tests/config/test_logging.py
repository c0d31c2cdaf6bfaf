"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from pagetrail.config.logging import configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pt = logging.getLogger("pagetrail")
    pt_level = pt.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pt.setLevel(pt_level)
    structlog.contextvars.clear_contextvars()


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("pagetrail").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False)
        assert logging.getLogger("pagetrail").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("pagetrail.test")
        log.warning("json test", answer=42)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "pagetrail.test"
        assert "timestamp" in parsed

    def test_stdlib_records_get_structured_fields(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("pagetrail.services.resolver").debug("Giving up on %s", "/a/b")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Giving up on /a/b"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "pagetrail.services.resolver"

    def test_site_name_bound(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True, site_name="docs")
        logging.getLogger("pagetrail.site").warning("hello")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["site"] == "docs"

    def test_third_party_debug_is_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("alembic").info("migration noise")
        logging.getLogger("sqlalchemy.engine").info("SELECT 1")
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        """Multiple configure_logging calls don't stack handlers."""
        configure_logging(verbose=True)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1
