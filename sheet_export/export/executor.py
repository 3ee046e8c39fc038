"""Export retrieval against a built export URL."""

import time
from http import HTTPStatus

import httpx
import structlog

from sheet_export.export.constants import COMPONENT_EXPORT, DEFAULT_EXTENSION
from sheet_export.export.errors import ExportFailedError
from sheet_export.export.metrics import ExportMetrics
from sheet_export.export.models import ExportArtifact, ExportFormat
from sheet_export.export.protocols import TokenSupplier
from sheet_export.fetch.redact import redact_headers, redact_url_credentials
from sheet_export.settings import AppSettings, get_settings


logger = structlog.get_logger()

# Response body excerpt length in error messages and logs
MAX_ERROR_BODY_CHARS = 2000


def artifact_file_name(base_name: str, export_format: ExportFormat | None) -> str:
    """Compute the artifact file name for a format.

    Args:
        base_name: Caller-supplied base name, with or without extension.
        export_format: Configured format; None means xlsx.

    Returns:
        File name ending in exactly one matching extension.
    """
    extension = export_format.value if export_format else DEFAULT_EXTENSION
    suffix = f".{extension}"
    if base_name.lower().endswith(suffix):
        return base_name
    return f"{base_name}{suffix}"


class ExportExecutor:
    """Performs a single authenticated GET for an export URL.

    No retries are attempted. The request timeout comes from settings
    unless an already-configured client is injected.
    """

    def __init__(
        self,
        token_supplier: TokenSupplier,
        *,
        client: httpx.Client | None = None,
        settings: AppSettings | None = None,
        metrics: ExportMetrics | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            token_supplier: Source of bearer tokens.
            client: HTTP client to use; created from settings if omitted.
            settings: Application settings.
            metrics: Metrics to record into; a fresh instance if omitted.
        """
        self._settings = settings or get_settings()
        self._token_supplier = token_supplier
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=self._settings.request_timeout_seconds,
            follow_redirects=True,
        )
        self._metrics = metrics if metrics is not None else ExportMetrics()
        self._log = logger.bind(component=COMPONENT_EXPORT, subcomponent="executor")

    @property
    def metrics(self) -> ExportMetrics:
        """Get the metrics recorded by this executor."""
        return self._metrics

    def __enter__(self) -> "ExportExecutor":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if this executor created it."""
        if self._owns_client:
            self._client.close()

    def execute(
        self,
        url: str,
        *,
        file_name: str,
        export_format: ExportFormat | None,
    ) -> ExportArtifact:
        """Fetch an export URL and name the resulting artifact.

        Args:
            url: Fully built export URL.
            file_name: Base name of the artifact.
            export_format: Configured format, used for the extension.

        Returns:
            ExportArtifact with the response bytes.

        Raises:
            ExportFailedError: On token, transport or non-200 failures.
        """
        log = self._log.bind(url=redact_url_credentials(url))
        self._metrics.record_attempt()

        headers = {
            "Authorization": f"Bearer {self._get_token()}",
            "User-Agent": self._settings.user_agent,
        }
        log.info("export_request_started", headers=redact_headers(headers))

        start_time_ns = time.perf_counter_ns()
        try:
            response = self._client.get(url, headers=headers)
        except httpx.HTTPError as exc:
            self._metrics.record_failure("TRANSPORT")
            log.warning("export_failed", error=str(exc), error_type=type(exc).__name__)
            msg = f"Export request failed: {exc}"
            raise ExportFailedError(msg, cause=exc) from exc
        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000

        if response.status_code != HTTPStatus.OK:
            body = response.text
            excerpt = body[:MAX_ERROR_BODY_CHARS]
            self._metrics.record_failure(f"HTTP_{response.status_code}")
            log.warning(
                "export_failed",
                status_code=response.status_code,
                body=excerpt,
                duration_ms=round(duration_ms, 2),
            )
            msg = f"Export returned status {response.status_code}: {excerpt}"
            raise ExportFailedError(msg, status_code=response.status_code, body=body)

        content = response.content
        name = artifact_file_name(file_name, export_format)
        content_type = (
            export_format.content_type
            if export_format
            else ExportFormat.XLSX.content_type
        )
        self._metrics.record_success(len(content), duration_ms)
        log.info(
            "export_completed",
            artifact=name,
            bytes=len(content),
            duration_ms=round(duration_ms, 2),
        )
        return ExportArtifact(name=name, content=content, content_type=content_type)

    def _get_token(self) -> str:
        try:
            return self._token_supplier.get_token()
        except ExportFailedError:
            self._metrics.record_failure("AUTH")
            raise
        except Exception as exc:
            self._metrics.record_failure("AUTH")
            msg = f"Token acquisition failed: {exc}"
            raise ExportFailedError(msg, cause=exc) from exc
