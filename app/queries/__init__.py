"""
app/queries package marker.
"""

from app.queries.base import QueryState, StatsQuery, default_executor
from app.queries.stats_queries import (
    GroupedQuery,
    LatestQuery,
    OverviewQuery,
    TopsQuery,
    use_grouped,
    use_latest,
    use_overview,
    use_tops,
)

__all__ = [
    "QueryState",
    "StatsQuery",
    "default_executor",
    "GroupedQuery",
    "LatestQuery",
    "OverviewQuery",
    "TopsQuery",
    "use_grouped",
    "use_latest",
    "use_overview",
    "use_tops",
]
