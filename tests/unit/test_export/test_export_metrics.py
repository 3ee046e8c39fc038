"""Unit tests for export metrics."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from sheet_export.export.auth import StaticTokenSupplier
from sheet_export.export.executor import ExportExecutor
from sheet_export.export.metrics import ExportMetrics
from tests.helpers.documents import make_builder


class TestExportMetrics:
    """Tests for ExportMetrics."""

    @pytest.mark.unit
    def test_starts_empty(self) -> None:
        """Test that a new instance has no recorded values."""
        assert ExportMetrics().to_dict() == {
            "exports_total": 0,
            "exports_succeeded": 0,
            "export_failures_total": {},
            "export_bytes_total": 0,
            "export_duration_ms_total": 0.0,
        }

    @pytest.mark.unit
    def test_to_dict(self) -> None:
        """Test the dictionary form of recorded metrics."""
        metrics = ExportMetrics()
        metrics.record_attempt()
        metrics.record_success(10, 5.0)
        metrics.record_attempt()
        metrics.record_failure("HTTP_500")

        assert metrics.to_dict() == {
            "exports_total": 2,
            "exports_succeeded": 1,
            "export_failures_total": {"HTTP_500": 1},
            "export_bytes_total": 10,
            "export_duration_ms_total": 5.0,
        }

    @pytest.mark.unit
    def test_to_dict_copies_failures(self) -> None:
        """Test that the returned failure map is detached from the metrics."""
        metrics = ExportMetrics()
        metrics.record_failure("AUTH")

        metrics.to_dict()["export_failures_total"]["AUTH"] = 99  # type: ignore[index]

        assert metrics.export_failures_total == {"AUTH": 1}

    @pytest.mark.unit
    def test_concurrent_recording_is_not_lost(self) -> None:
        """Test that counters stay exact under concurrent updates."""
        metrics = ExportMetrics()

        def record(_: int) -> None:
            for _ in range(500):
                metrics.record_attempt()
                metrics.record_failure("TRANSPORT")

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(record, range(8)))

        assert metrics.exports_total == 4000
        assert metrics.export_failures_total == {"TRANSPORT": 4000}


class TestMetricsOwnership:
    """Tests for which component owns a metrics instance."""

    @pytest.mark.unit
    def test_executors_do_not_share_metrics(self) -> None:
        """Test that separately created executors keep separate metrics."""
        first = ExportExecutor(StaticTokenSupplier("t"))
        second = ExportExecutor(StaticTokenSupplier("t"))

        assert first.metrics is not second.metrics

        first.close()
        second.close()

    @pytest.mark.unit
    def test_injected_metrics_used(self) -> None:
        """Test that an executor records into injected metrics."""
        metrics = ExportMetrics()

        with ExportExecutor(StaticTokenSupplier("t"), metrics=metrics) as executor:
            assert executor.metrics is metrics

    @pytest.mark.unit
    def test_builders_do_not_share_metrics(self) -> None:
        """Test that separate builders keep separate metrics."""
        assert make_builder().metrics is not make_builder().metrics

    @pytest.mark.unit
    def test_builder_reports_executor_metrics(self) -> None:
        """Test that a builder exposes the metrics of its executor."""
        with ExportExecutor(StaticTokenSupplier("t")) as executor:
            assert make_builder(executor=executor).metrics is executor.metrics
