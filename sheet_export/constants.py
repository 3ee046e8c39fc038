"""Defaults shared by the settings and export packages.

This module must not import from the rest of the package.
"""

# Endpoint template; {document_id} is substituted per builder
DEFAULT_EXPORT_BASE_URL = "https://docs.google.com/spreadsheets/d/{document_id}/export"

# Zone used for printed dates when none is configured
DEFAULT_TIMEZONE = "UTC"
