"""
app/connectors package marker.
"""

from app.connectors.stats_api import (
    StatsAPIClient,
    StatsRequestError,
    extract_error_message,
    normalize_endpoint,
)

__all__ = [
    "StatsAPIClient",
    "StatsRequestError",
    "extract_error_message",
    "normalize_endpoint",
]
