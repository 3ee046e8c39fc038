"""Application settings powered by Pydantic BaseSettings."""

import zoneinfo

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sheet_export.constants import DEFAULT_EXPORT_BASE_URL, DEFAULT_TIMEZONE


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    default_timezone: str = Field(
        default=DEFAULT_TIMEZONE, validation_alias="EXPORT_DEFAULT_TIMEZONE"
    )
    export_base_url: str = Field(
        default=DEFAULT_EXPORT_BASE_URL, validation_alias="EXPORT_BASE_URL"
    )
    request_timeout_seconds: float = Field(
        default=60.0,
        ge=1.0,
        le=600.0,
        validation_alias="EXPORT_REQUEST_TIMEOUT_SECONDS",
    )
    user_agent: str = Field(
        default="sheet-export/1.0", min_length=1, validation_alias="EXPORT_USER_AGENT"
    )
    access_token: str | None = Field(
        default=None, validation_alias="SHEETS_ACCESS_TOKEN"
    )
    refresh_token: str | None = Field(
        default=None, validation_alias="GOOGLE_REFRESH_TOKEN"
    )
    oauth_client_id: str | None = Field(
        default=None, validation_alias="GOOGLE_OAUTH_CLIENT_ID"
    )
    oauth_client_secret: str | None = Field(
        default=None, validation_alias="GOOGLE_OAUTH_CLIENT_SECRET"
    )

    @field_validator("default_timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate that the default timezone is a known IANA name."""
        try:
            zoneinfo.ZoneInfo(v)
        except (KeyError, ValueError, zoneinfo.ZoneInfoNotFoundError) as e:
            msg = f"Unknown timezone: {v}"
            raise ValueError(msg) from e
        return v

    @field_validator("export_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure the base URL carries the document id placeholder."""
        if "{document_id}" not in v:
            msg = "Export base URL must contain '{document_id}'"
            raise ValueError(msg)
        return v


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
