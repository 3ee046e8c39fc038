"""Metrics collection for export execution."""

import threading
from dataclasses import dataclass, field


@dataclass
class ExportMetrics:
    """Metrics for export operations.

    Tracks request counts, failures by error type, bytes received and
    time spent. Each executor owns its own instance; counters are
    guarded so one executor may still be shared between threads.
    """

    exports_total: int = 0
    exports_succeeded: int = 0
    export_failures_total: dict[str, int] = field(default_factory=dict)
    export_bytes_total: int = 0
    export_duration_ms_total: float = 0.0

    _lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    def record_attempt(self) -> None:
        """Record an export request being issued."""
        with self._lock:
            self.exports_total += 1

    def record_success(self, bytes_received: int, duration_ms: float) -> None:
        """Record a completed export.

        Args:
            bytes_received: Size of the artifact in bytes.
            duration_ms: Request duration in milliseconds.
        """
        with self._lock:
            self.exports_succeeded += 1
            self.export_bytes_total += bytes_received
            self.export_duration_ms_total += duration_ms

    def record_failure(self, reason: str) -> None:
        """Record a failed export.

        Args:
            reason: Failure classification, e.g. "HTTP_403" or "TRANSPORT".
        """
        with self._lock:
            self.export_failures_total[reason] = (
                self.export_failures_total.get(reason, 0) + 1
            )

    def to_dict(self) -> dict[str, int | float | dict[str, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        with self._lock:
            return {
                "exports_total": self.exports_total,
                "exports_succeeded": self.exports_succeeded,
                "export_failures_total": dict(self.export_failures_total),
                "export_bytes_total": self.export_bytes_total,
                "export_duration_ms_total": self.export_duration_ms_total,
            }
