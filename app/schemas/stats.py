"""
app/schemas/stats.py

Response schemas for statistics endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from app.services.stats_service import GroupedTable
from stats.overview import OverviewResult
from stats.pagination import PaginatedResult
from stats.rows import GroupedRow


class KeyCountResponse(BaseModel):
    key: str | None = None
    count: float = Field(..., ge=0)
    label: str | None = None


class OverviewResponse(BaseModel):
    """
    API response model for a domain overview.
    """

    domain: str
    kpis: dict[str, float] = Field(default_factory=dict)
    sections: dict[str, dict[str, float]] = Field(default_factory=dict)
    repartition: dict[str, list[KeyCountResponse]] = Field(default_factory=dict)
    filters_echo: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_result(cls, domain: str, result: OverviewResult) -> "OverviewResponse":
        return cls(
            domain=domain,
            kpis=result.kpis,
            sections=result.sections,
            repartition={
                name: [
                    KeyCountResponse(key=item.key, count=item.count, label=item.label)
                    for item in items
                ]
                for name, items in result.repartition.items()
            },
            filters_echo=result.filters_echo,
        )


class GroupedRowResponse(BaseModel):
    group_key: str | int | float | None = None
    label: str
    attributes: dict[str, Any] = Field(default_factory=dict)
    metrics: dict[str, float] = Field(default_factory=dict)

    @classmethod
    def from_row(cls, row: GroupedRow, label: str) -> "GroupedRowResponse":
        return cls(
            group_key=row.group_key,
            label=label,
            attributes=row.attributes,
            metrics=row.metrics,
        )


class GroupedResponse(BaseModel):
    """
    API response model for grouped statistics with a totals row.
    """

    domain: str
    group_by: str
    results: list[GroupedRowResponse] = Field(default_factory=list)
    totals: GroupedRowResponse | None = None

    @classmethod
    def from_table(cls, table: GroupedTable) -> "GroupedResponse":
        totals = None
        if table.totals is not None:
            totals = GroupedRowResponse.from_row(table.totals, table.totals.group_label or "Total")
        return cls(
            domain=table.domain,
            group_by=table.group_by,
            results=[GroupedRowResponse.from_row(item.row, item.label) for item in table.rows],
            totals=totals,
        )


class PaginatedResponse(BaseModel):
    count: int = Field(..., ge=0)
    next: str | None = None
    previous: str | None = None
    results: list[Any] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: PaginatedResult) -> "PaginatedResponse":
        return cls(
            count=result.count,
            next=result.next,
            previous=result.previous,
            results=result.results,
        )


class TopsResponse(BaseModel):
    domain: str
    tops: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    status: str
    domains: list[str] = Field(default_factory=list)
