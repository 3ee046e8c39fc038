"""Unit tests for the export executor."""

import httpx
import pytest

from sheet_export.export.auth import StaticTokenSupplier
from sheet_export.export.errors import ExportFailedError
from sheet_export.export.executor import (
    MAX_ERROR_BODY_CHARS,
    ExportExecutor,
    artifact_file_name,
)
from sheet_export.export.models import ExportFormat


EXPORT_URL = "https://docs.google.com/spreadsheets/d/doc-123/export?format=pdf"


def _executor(handler: httpx.MockTransport) -> ExportExecutor:
    return ExportExecutor(
        StaticTokenSupplier("ya29.test-token"),
        client=httpx.Client(transport=handler),
    )


class FailingSupplier:
    """Token supplier that always raises."""

    def get_token(self) -> str:
        msg = "keychain locked"
        raise RuntimeError(msg)


class TestArtifactFileName:
    """Tests for artifact_file_name."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("base", "fmt", "expected"),
        [
            ("Report", ExportFormat.XLSX, "Report.xlsx"),
            ("Report.xlsx", ExportFormat.XLSX, "Report.xlsx"),
            ("Report.XLSX", ExportFormat.XLSX, "Report.XLSX"),
            ("Report", None, "Report.xlsx"),
            ("Report.csv", ExportFormat.PDF, "Report.csv.pdf"),
            ("archive", ExportFormat.ZIP, "archive.zip"),
        ],
    )
    def test_names(self, base: str, fmt: ExportFormat | None, expected: str) -> None:
        """Test extension handling for artifact names."""
        assert artifact_file_name(base, fmt) == expected


class TestExportExecutor:
    """Tests for ExportExecutor.execute."""

    @pytest.mark.unit
    def test_success_returns_named_artifact(self) -> None:
        """Test that a 200 response becomes a named artifact."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"%PDF-1.7")

        with _executor(httpx.MockTransport(handler)) as executor:
            artifact = executor.execute(
                EXPORT_URL, file_name="Report", export_format=ExportFormat.PDF
            )

        assert artifact.name == "Report.pdf"
        assert artifact.content == b"%PDF-1.7"
        assert artifact.content_type == "application/pdf"
        assert artifact.size == 8
        assert len(seen) == 1
        assert seen[0].method == "GET"
        assert str(seen[0].url) == EXPORT_URL
        assert seen[0].headers["Authorization"] == "Bearer ya29.test-token"

    @pytest.mark.unit
    def test_default_format_is_xlsx(self) -> None:
        """Test that an unset format names the artifact .xlsx."""
        transport = httpx.MockTransport(lambda _: httpx.Response(200, content=b"PK"))

        artifact = _executor(transport).execute(
            EXPORT_URL, file_name="export", export_format=None
        )

        assert artifact.name == "export.xlsx"
        assert artifact.content_type.endswith("spreadsheetml.sheet")

    @pytest.mark.unit
    @pytest.mark.parametrize("status", [201, 302, 403, 404, 500])
    def test_non_200_raises(self, status: int) -> None:
        """Test that any status other than 200 fails with the body."""
        transport = httpx.MockTransport(
            lambda _: httpx.Response(status, text="Access denied")
        )

        executor = _executor(transport)

        with pytest.raises(ExportFailedError) as exc_info:
            executor.execute(EXPORT_URL, file_name="x", export_format=ExportFormat.PDF)

        assert exc_info.value.status_code == status
        assert exc_info.value.body == "Access denied"
        assert executor.metrics.export_failures_total == {f"HTTP_{status}": 1}

    @pytest.mark.unit
    def test_full_body_kept_on_error(self) -> None:
        """Test that a long error body is kept whole and only the message is cut."""
        body = "x" * (MAX_ERROR_BODY_CHARS + 500)
        transport = httpx.MockTransport(lambda _: httpx.Response(500, text=body))

        with pytest.raises(ExportFailedError) as exc_info:
            _executor(transport).execute(EXPORT_URL, file_name="x", export_format=None)

        assert exc_info.value.body == body
        assert len(exc_info.value.message) < len(body)

    @pytest.mark.unit
    def test_transport_error_wrapped(self) -> None:
        """Test that transport faults are reported as ExportFailedError."""

        def handler(request: httpx.Request) -> httpx.Response:
            msg = "Connection refused"
            raise httpx.ConnectError(msg, request=request)

        with pytest.raises(ExportFailedError, match="Connection refused") as exc_info:
            _executor(httpx.MockTransport(handler)).execute(
                EXPORT_URL, file_name="x", export_format=None
            )

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.cause, httpx.ConnectError)

    @pytest.mark.unit
    def test_single_attempt_only(self) -> None:
        """Test that failures are not retried."""
        calls: list[int] = []

        def handler(_: httpx.Request) -> httpx.Response:
            calls.append(1)
            return httpx.Response(503, text="busy")

        with pytest.raises(ExportFailedError):
            _executor(httpx.MockTransport(handler)).execute(
                EXPORT_URL, file_name="x", export_format=None
            )

        assert len(calls) == 1

    @pytest.mark.unit
    def test_token_failure_wrapped(self) -> None:
        """Test that token supplier errors become ExportFailedError."""
        transport = httpx.MockTransport(lambda _: httpx.Response(200))
        executor = ExportExecutor(
            FailingSupplier(), client=httpx.Client(transport=transport)
        )

        with pytest.raises(ExportFailedError, match="keychain locked"):
            executor.execute(EXPORT_URL, file_name="x", export_format=None)

        assert executor.metrics.export_failures_total == {"AUTH": 1}

    @pytest.mark.unit
    def test_success_recorded_in_metrics(self) -> None:
        """Test that successful exports update the metrics."""
        transport = httpx.MockTransport(lambda _: httpx.Response(200, content=b"abc"))

        executor = _executor(transport)

        executor.execute(EXPORT_URL, file_name="x", export_format=None)

        metrics = executor.metrics
        assert metrics.exports_total == 1
        assert metrics.exports_succeeded == 1
        assert metrics.export_bytes_total == 3

    @pytest.mark.unit
    def test_injected_client_not_closed(self) -> None:
        """Test that the executor leaves an injected client open."""
        transport = httpx.MockTransport(lambda _: httpx.Response(200))
        client = httpx.Client(transport=transport)

        with ExportExecutor(StaticTokenSupplier("t"), client=client):
            pass

        assert not client.is_closed
