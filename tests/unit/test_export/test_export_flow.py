"""Tests for the builder's end-to-end export call."""

from urllib.parse import parse_qsl, urlsplit

import httpx
import pytest

from sheet_export.export.auth import StaticTokenSupplier
from sheet_export.export.errors import ConfigurationError, ExportFailedError
from sheet_export.export.executor import ExportExecutor
from sheet_export.export.state_machine import ExportState
from tests.helpers.documents import make_builder


class TestBuilderExport:
    """Tests for SheetExportBuilder.export."""

    @pytest.mark.integration
    def test_export_fetches_built_url(self) -> None:
        """Test that export() requests exactly the URL build_url() returns."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, content=b"%PDF")

        executor = ExportExecutor(
            StaticTokenSupplier("tok"),
            client=httpx.Client(transport=httpx.MockTransport(handler)),
        )
        builder = (
            make_builder(executor=executor)
            .apply_preset("pdfReport")
            .set_sheet_by_name("Data")
            .set_range("A1:C10")
            .set_print_date(True)
            .set_file_name("Quarterly")
        )

        artifact = builder.export()

        assert artifact.name == "Quarterly.pdf"
        assert builder.export_state is ExportState.COMPLETED
        assert str(requests[0].url) == builder.build_url()
        query = dict(parse_qsl(urlsplit(str(requests[0].url)).query))
        assert query["gid"] == "1874"
        assert (query["r1"], query["r2"], query["c1"], query["c2"]) == (
            "0",
            "10",
            "0",
            "3",
        )
        assert "timestamp" in query

    @pytest.mark.integration
    def test_validation_failure_stops_before_fetch(self) -> None:
        """Test that inconsistent configuration never reaches the network."""
        calls: list[httpx.Request] = []
        transport = httpx.MockTransport(
            lambda request: calls.append(request) or httpx.Response(200)
        )
        executor = ExportExecutor(
            StaticTokenSupplier("tok"), client=httpx.Client(transport=transport)
        )
        builder = make_builder(executor=executor).set_margins(left=1)

        with pytest.raises(ConfigurationError):
            builder.export()

        assert calls == []
        assert builder.export_state is ExportState.FAILED

    @pytest.mark.integration
    def test_fetch_failure_marks_failed(self) -> None:
        """Test that a non-200 response leaves the export FAILED."""
        transport = httpx.MockTransport(lambda _: httpx.Response(404, text="nope"))
        executor = ExportExecutor(
            StaticTokenSupplier("tok"), client=httpx.Client(transport=transport)
        )
        builder = make_builder(executor=executor).set_format("csv")

        with pytest.raises(ExportFailedError):
            builder.export()

        assert builder.export_state is ExportState.FAILED
        assert builder.metrics.export_failures_total == {"HTTP_404": 1}

    @pytest.mark.unit
    def test_export_state_none_before_export(self) -> None:
        """Test that no state is reported before export() is called."""
        assert make_builder().export_state is None
