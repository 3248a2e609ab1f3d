"""
tests/test_list_normalizer.py

Unit tests for list-payload normalization.

Coverage
--------
- Bare arrays, ``results`` and ``data`` envelopes
- One-level nested ``data`` envelopes (and nothing deeper)
- Count derivation and clamping
- Cursor handling
- Unrecognised payloads never raise
"""

from __future__ import annotations

import pytest

from stats.pagination import PaginatedResult, normalize_list


class TestEnvelopeShapes:
    def test_bare_array(self) -> None:
        result = normalize_list([{"id": 1}, {"id": 2}])
        assert result == PaginatedResult(
            count=2,
            next=None,
            previous=None,
            results=[{"id": 1}, {"id": 2}],
        )

    def test_results_envelope(self) -> None:
        result = normalize_list(
            {"count": 40, "next": "http://api/x?page=2", "previous": None, "results": [{"id": 1}]}
        )
        assert result.count == 40
        assert result.next == "http://api/x?page=2"
        assert result.previous is None
        assert result.results == [{"id": 1}]

    def test_data_envelope(self) -> None:
        result = normalize_list({"data": [{"id": 1}, {"id": 2}, {"id": 3}]})
        assert result.count == 3
        assert len(result.results) == 3

    def test_results_take_precedence_over_data(self) -> None:
        result = normalize_list({"results": [{"id": "r"}], "data": [{"id": "d"}]})
        assert result.results == [{"id": "r"}]

    def test_nested_empty_envelope(self) -> None:
        result = normalize_list({"data": {"results": [], "count": 0}})
        assert result.count == 0
        assert result.results == []

    def test_nested_data_list(self) -> None:
        result = normalize_list({"data": {"data": [{"id": 9}], "count": 5, "next": "n"}})
        assert result.count == 5
        assert result.next == "n"
        assert result.results == [{"id": 9}]

    def test_two_levels_of_nesting_are_not_unwrapped(self) -> None:
        result = normalize_list({"data": {"data": {"results": [{"id": 1}]}}})
        assert result == PaginatedResult()


class TestCount:
    def test_numeric_string_count_is_parsed(self) -> None:
        assert normalize_list({"count": "12", "results": []}).count == 12

    def test_count_never_below_result_length(self) -> None:
        assert normalize_list({"count": 1, "results": [1, 2, 3]}).count == 3

    @pytest.mark.parametrize("count", [None, "abc", -4, True])
    def test_unusable_count_falls_back_to_length(self, count: object) -> None:
        assert normalize_list({"count": count, "results": [1, 2]}).count == 2


class TestCursors:
    def test_non_string_cursors_become_none(self) -> None:
        result = normalize_list({"results": [], "next": 2, "previous": {"page": 1}})
        assert result.next is None
        assert result.previous is None


class TestFallback:
    @pytest.mark.parametrize(
        "payload",
        [None, 42, "text", {}, {"results": "nope"}, {"data": None}, {"items": [1]}],
    )
    def test_unrecognised_payload_is_empty(self, payload: object) -> None:
        assert normalize_list(payload) == PaginatedResult()

    def test_results_are_a_fresh_copy(self) -> None:
        items = [{"id": 1}]
        result = normalize_list({"results": items})
        result.results.append({"id": 2})
        assert items == [{"id": 1}]
