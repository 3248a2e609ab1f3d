"""
app/api/routers/stats_router.py

Read-only statistics endpoints, one family per domain:

    GET /stats/{domain}/overview
    GET /stats/{domain}/grouped?by=<dimension>
    GET /stats/{domain}/latest?limit=<n>
    GET /stats/{domain}/tops

Any other query parameter is forwarded to the backend as a filter.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from app.connectors.stats_api import StatsRequestError
from app.schemas.stats import GroupedResponse, OverviewResponse, PaginatedResponse, TopsResponse
from app.services.stats_service import (
    StatsService,
    UnsupportedEndpointError,
    get_stats_service,
    require_grouping,
)
from stats.registry import UnknownDimensionError, UnknownDomainError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stats", tags=["stats"])

# query parameters consumed by the routes themselves
_RESERVED_PARAMS = frozenset({"by", "limit", "dictionaries"})


def _request_filters(request: Request) -> dict[str, Any]:
    filters: dict[str, Any] = {}
    for key in request.query_params.keys():
        if key in _RESERVED_PARAMS or key in filters:
            continue
        values = request.query_params.getlist(key)
        filters[key] = values if len(values) > 1 else values[0]
    return filters


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, (UnknownDomainError, UnsupportedEndpointError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, UnknownDimensionError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, StatsRequestError):
        logger.warning("Statistics backend failed status=%s: %s", exc.status, exc.message)
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


_HANDLED_ERRORS = (UnknownDomainError, UnknownDimensionError, UnsupportedEndpointError, StatsRequestError)


@router.get("/{domain}/overview", response_model=OverviewResponse)
def get_overview(
    domain: str,
    request: Request,
    service: StatsService = Depends(get_stats_service),
) -> OverviewResponse:
    try:
        result = service.overview(domain, _request_filters(request))
    except _HANDLED_ERRORS as exc:
        raise _http_error(exc) from exc
    return OverviewResponse.from_result(domain, result)


@router.get("/{domain}/grouped", response_model=GroupedResponse)
def get_grouped(
    domain: str,
    request: Request,
    by: str = Query(..., min_length=1),
    dictionaries: bool = Query(False),
    service: StatsService = Depends(get_stats_service),
) -> GroupedResponse:
    """
    Grouped rows with resolved labels and a trailing totals row.

    With ``dictionaries=true`` the formation filter options are fetched
    first and used as a label source.
    """

    try:
        require_grouping(domain, by)
        label_dictionaries = service.label_dictionaries() if dictionaries else None
        table = service.grouped_table(
            domain,
            by,
            _request_filters(request),
            dictionaries=label_dictionaries,
        )
    except _HANDLED_ERRORS as exc:
        raise _http_error(exc) from exc
    return GroupedResponse.from_table(table)


@router.get("/{domain}/latest", response_model=PaginatedResponse)
def get_latest(
    domain: str,
    request: Request,
    limit: int | None = Query(None, ge=1, le=100),
    service: StatsService = Depends(get_stats_service),
) -> PaginatedResponse:
    try:
        result = service.latest(domain, _request_filters(request), limit=limit)
    except _HANDLED_ERRORS as exc:
        raise _http_error(exc) from exc
    return PaginatedResponse.from_result(result)


@router.get("/{domain}/tops", response_model=TopsResponse)
def get_tops(
    domain: str,
    request: Request,
    service: StatsService = Depends(get_stats_service),
) -> TopsResponse:
    try:
        tops = service.tops(domain, _request_filters(request))
    except _HANDLED_ERRORS as exc:
        raise _http_error(exc) from exc
    return TopsResponse(domain=domain, tops=tops)
