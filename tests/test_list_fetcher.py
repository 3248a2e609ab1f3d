"""
tests/test_list_fetcher.py

Unit tests for paginated list retrieval.
"""

from __future__ import annotations

import pytest

from app.services.list_fetcher import ListQuery, ListResult, fetch_list, total_pages
from tests.fakes import FakeStatsClient


class TestListQuery:
    def test_defaults(self) -> None:
        assert ListQuery().to_params() == {"page": 1, "page_size": 20}

    def test_search_is_stripped_and_blank_dropped(self) -> None:
        assert ListQuery(search="  dupont ").to_params()["search"] == "dupont"
        assert "search" not in ListQuery(search="   ").to_params()

    def test_descending_ordering(self) -> None:
        assert ListQuery(sort_key="date", sort_descending=True).to_params()["ordering"] == "-date"
        assert ListQuery(sort_key="date").to_params()["ordering"] == "date"
        assert "ordering" not in ListQuery(sort_key=" ").to_params()

    def test_filters_are_pruned_and_encoded(self) -> None:
        params = ListQuery(filters={"centre": [1, 2], "statut": None, "actif": True}).to_params()
        assert params == {"centre__in": "1,2", "actif": "true", "page": 1, "page_size": 20}

    def test_page_values_are_clamped(self) -> None:
        params = ListQuery(page=0, page_size=-5).to_params()
        assert params["page"] == 1
        assert params["page_size"] == 1


class TestTotalPages:
    @pytest.mark.parametrize(
        ("total", "page_size", "expected"),
        [(0, 20, 1), (1, 20, 1), (20, 20, 1), (21, 20, 2), (100, 10, 10)],
    )
    def test_total_pages(self, total: int, page_size: int, expected: int) -> None:
        assert total_pages(total, page_size) == expected


class TestFetchList:
    def test_results_envelope(self) -> None:
        client = FakeStatsClient({"/candidats/": {"count": 45, "results": [{"id": 1}]}})
        result = fetch_list(client, "/candidats/", ListQuery(page=2, page_size=20, search="a"))

        assert result == ListResult(items=[{"id": 1}], total=45, page=2, page_size=20)
        assert result.total_pages == 3
        assert client.calls == [("/candidats/", {"page": 2, "page_size": 20, "search": "a"})]

    def test_bare_array(self) -> None:
        client = FakeStatsClient({"/centres/": [{"id": 1}, {"id": 2}]})
        result = fetch_list(client, "/centres/")
        assert result.total == 2
        assert result.total_pages == 1

    def test_unrecognised_payload_gives_empty_page(self) -> None:
        client = FakeStatsClient({"/centres/": {"detail": "?"}})
        result = fetch_list(client, "/centres/")
        assert result.items == []
        assert result.total == 0
        assert result.total_pages == 1
