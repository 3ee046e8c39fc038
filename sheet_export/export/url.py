"""Export URL construction.

Values are serialized to their wire literals only here. The parameter
domain is limited to numbers, enum values and "true"/"false", so no
percent-encoding is applied.
"""

from collections.abc import Mapping
from enum import Enum

from sheet_export.constants import DEFAULT_EXPORT_BASE_URL
from sheet_export.export.models import ParamValue


def serialize_value(value: ParamValue) -> str:
    """Serialize a native parameter value to its query-string literal.

    Args:
        value: Native parameter value.

    Returns:
        The literal expected by the export endpoint.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def build_query(params: Mapping[str, ParamValue]) -> str:
    """Join parameters as key=value pairs in iteration order."""
    return "&".join(f"{key}={serialize_value(value)}" for key, value in params.items())


def build_export_url(
    document_id: str,
    params: Mapping[str, ParamValue],
    base_url: str = DEFAULT_EXPORT_BASE_URL,
) -> str:
    """Build the export URL for a document.

    Args:
        document_id: Identifier substituted into the base URL.
        params: Validated, timestamp-resolved parameters.
        base_url: Endpoint template containing ``{document_id}``.

    Returns:
        Absolute export URL.
    """
    endpoint = base_url.format(document_id=document_id)
    query = build_query(params)
    if not query:
        return endpoint
    return f"{endpoint}?{query}"
