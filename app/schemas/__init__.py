"""
app/schemas package marker.
"""

from app.schemas.stats import (
    GroupedResponse,
    GroupedRowResponse,
    HealthResponse,
    KeyCountResponse,
    OverviewResponse,
    PaginatedResponse,
    TopsResponse,
)

__all__ = [
    "GroupedResponse",
    "GroupedRowResponse",
    "HealthResponse",
    "KeyCountResponse",
    "OverviewResponse",
    "PaginatedResponse",
    "TopsResponse",
]
