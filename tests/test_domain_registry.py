"""
tests/test_domain_registry.py

Consistency checks over every registered domain descriptor.
"""

from __future__ import annotations

import pytest

from stats.base import DomainDescriptor
from stats.registry import (
    DOMAIN_REGISTRY,
    UnknownDimensionError,
    UnknownDomainError,
    get_domain,
    require_dimension,
)

DESCRIPTORS = list(DOMAIN_REGISTRY.values())


def test_all_domains_are_registered() -> None:
    assert set(DOMAIN_REGISTRY) == {"formation", "candidat", "prospection", "appairage", "atelier_tre"}


@pytest.mark.parametrize("descriptor", DESCRIPTORS, ids=lambda d: d.name)
class TestDescriptorConsistency:
    def test_rate_inputs_are_declared_metrics(self, descriptor: DomainDescriptor) -> None:
        for rate in descriptor.rates:
            assert set(rate.fields()) <= set(descriptor.metrics)

    def test_label_rules_cover_only_known_dimensions(self, descriptor: DomainDescriptor) -> None:
        assert set(descriptor.labels) <= set(descriptor.dimensions)

    def test_endpoints_are_slash_terminated(self, descriptor: DomainDescriptor) -> None:
        assert descriptor.endpoint.startswith("/") and descriptor.endpoint.endswith("/")
        assert descriptor.grouped_endpoint == f"{descriptor.endpoint}grouped/"


class TestLookup:
    def test_get_domain(self) -> None:
        assert get_domain("formation").endpoint == "/formation-stats/"

    def test_unknown_domain_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            get_domain("inconnu")
        with pytest.raises(UnknownDomainError):
            get_domain("")

    def test_require_dimension(self) -> None:
        descriptor = get_domain("prospection")
        assert require_dimension(descriptor, "owner") == "owner"
        with pytest.raises(UnknownDimensionError):
            require_dimension(descriptor, "type_atelier")

    def test_tops_endpoint_only_when_declared(self) -> None:
        assert get_domain("formation").tops_endpoint == "/formation-stats/tops/"
        assert get_domain("candidat").tops_endpoint is None
