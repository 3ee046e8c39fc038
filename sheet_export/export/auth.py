"""Bearer token suppliers for the export endpoint."""

from http import HTTPStatus

import httpx
import structlog

from sheet_export.export.constants import COMPONENT_EXPORT
from sheet_export.export.errors import ExportFailedError
from sheet_export.export.protocols import TokenSupplier
from sheet_export.settings import AppSettings


logger = structlog.get_logger()

_TOKEN_ENDPOINT = "https://oauth2.googleapis.com/token"  # noqa: S105


class StaticTokenSupplier:
    """Supplies a fixed, already-issued access token."""

    def __init__(self, token: str) -> None:
        if not token:
            msg = "Access token must not be empty"
            raise ValueError(msg)
        self._token = token

    def get_token(self) -> str:
        """Return the configured token."""
        return self._token


class RefreshTokenSupplier:
    """Exchanges an OAuth refresh token for an access token on every call.

    Tokens are not cached; each export performs one exchange.
    """

    def __init__(
        self,
        refresh_token: str,
        client_id: str,
        client_secret: str,
        timeout: float = 15.0,
    ) -> None:
        """Initialize the supplier.

        Args:
            refresh_token: Long-lived OAuth refresh token.
            client_id: OAuth client ID.
            client_secret: OAuth client secret.
            timeout: Request timeout in seconds.
        """
        self._refresh_token = refresh_token
        self._client_id = client_id
        self._client_secret = client_secret
        self._timeout = timeout

    def get_token(self) -> str:
        """Exchange the refresh token for a new access token.

        Returns:
            Fresh access token string.

        Raises:
            ExportFailedError: If the token exchange fails.
        """
        log = logger.bind(component=COMPONENT_EXPORT, subcomponent="auth")

        try:
            response = httpx.post(
                _TOKEN_ENDPOINT,
                data={
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                    "refresh_token": self._refresh_token,
                    "grant_type": "refresh_token",
                },
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            log.warning("oauth_token_refresh_network_error", error=str(exc))
            msg = f"Network error during token refresh: {exc}"
            raise ExportFailedError(msg, cause=exc) from exc

        if response.status_code != HTTPStatus.OK:
            log.warning(
                "oauth_token_refresh_failed",
                status_code=response.status_code,
            )
            msg = f"Token refresh failed with status {response.status_code}"
            raise ExportFailedError(
                msg, status_code=response.status_code, body=response.text
            )

        access_token: str | None = response.json().get("access_token")
        if not access_token:
            msg = "No access_token in refresh response"
            raise ExportFailedError(msg)

        log.info("oauth_token_refreshed")
        return access_token


def create_token_supplier(settings: AppSettings) -> TokenSupplier:
    """Create a token supplier from the best available credentials.

    Priority: static access token > OAuth refresh token.

    Args:
        settings: Application settings.

    Returns:
        A TokenSupplier implementation.

    Raises:
        ExportFailedError: If no usable credentials are configured.
    """
    log = logger.bind(component=COMPONENT_EXPORT, subcomponent="auth")

    if settings.access_token:
        log.info("token_supplier_created", auth_method="access_token")
        return StaticTokenSupplier(settings.access_token)

    if (
        settings.refresh_token
        and settings.oauth_client_id
        and settings.oauth_client_secret
    ):
        log.info("token_supplier_created", auth_method="refresh_token")
        return RefreshTokenSupplier(
            settings.refresh_token,
            client_id=settings.oauth_client_id,
            client_secret=settings.oauth_client_secret,
        )

    msg = (
        "No credentials configured: set SHEETS_ACCESS_TOKEN or "
        "GOOGLE_REFRESH_TOKEN with GOOGLE_OAUTH_CLIENT_ID/SECRET"
    )
    raise ExportFailedError(msg)
