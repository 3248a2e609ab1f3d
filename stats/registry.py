"""
stats/registry.py

Lookup of domain descriptors by name.
"""

from __future__ import annotations

from stats.appairage import APPAIRAGE_STATS
from stats.atelier_tre import ATELIER_TRE_STATS
from stats.base import DomainDescriptor
from stats.candidat import CANDIDAT_STATS
from stats.formation import FORMATION_STATS
from stats.prospection import PROSPECTION_STATS

DOMAIN_REGISTRY: dict[str, DomainDescriptor] = {
    descriptor.name: descriptor
    for descriptor in (
        FORMATION_STATS,
        CANDIDAT_STATS,
        PROSPECTION_STATS,
        APPAIRAGE_STATS,
        ATELIER_TRE_STATS,
    )
}


class UnknownDomainError(ValueError):
    """
    Raised when a statistics domain name is not registered.
    """


class UnknownDimensionError(ValueError):
    """
    Raised when a domain cannot be grouped by the requested dimension.
    """


def get_domain(name: str) -> DomainDescriptor:
    """
    Return the descriptor registered under *name*.

    Raises
    ------
    UnknownDomainError
        If *name* is not a known domain.
    """

    try:
        return DOMAIN_REGISTRY[name]
    except KeyError as exc:
        raise UnknownDomainError(
            f"Unknown statistics domain '{name}'. Expected one of {sorted(DOMAIN_REGISTRY)}."
        ) from exc


def require_dimension(descriptor: DomainDescriptor, dimension: str) -> str:
    if not descriptor.supports_dimension(dimension):
        raise UnknownDimensionError(
            f"Domain '{descriptor.name}' cannot be grouped by '{dimension}'. "
            f"Expected one of {list(descriptor.dimensions)}."
        )
    return dimension
