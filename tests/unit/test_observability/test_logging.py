"""Unit tests for structured logging setup."""

import io
import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from sheet_export.observability.logging import (
    bind_export_context,
    clear_export_context,
    configure_logging,
    get_logger,
)


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Restore structlog defaults after each test."""
    yield
    clear_export_context()
    structlog.reset_defaults()


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.mark.unit
    def test_json_output_includes_context(self) -> None:
        """Test that JSON lines carry bound export context."""
        output = io.StringIO()
        configure_logging(level=logging.INFO, output=output, json_format=True)
        bind_export_context("doc-123")

        get_logger().info("export_completed", artifact="Report.pdf")

        record = json.loads(output.getvalue().strip().splitlines()[-1])
        assert record["event"] == "export_completed"
        assert record["document_id"] == "doc-123"
        assert record["artifact"] == "Report.pdf"
        assert record["level"] == "info"

    @pytest.mark.unit
    def test_level_filters_debug(self) -> None:
        """Test that debug events are dropped at INFO level."""
        output = io.StringIO()
        configure_logging(level=logging.INFO, output=output, json_format=True)

        get_logger().debug("export_url_built")

        assert output.getvalue() == ""
