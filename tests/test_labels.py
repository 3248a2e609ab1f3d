"""
tests/test_labels.py

Unit tests for display-label resolution.

Coverage
--------
- Fallback order: group_label, name fields, dictionary, placeholder, dash
- Composite owner names and coded value labels
- Totals rows
- build_label_map option parsing
"""

from __future__ import annotations

from stats.atelier_tre import ATELIER_TRE_STATS
from stats.base import EM_DASH
from stats.candidat import CANDIDAT_STATS
from stats.formation import FORMATION_STATS
from stats.labels import build_label_map, resolve_label
from stats.prospection import PROSPECTION_STATS
from stats.rows import GroupedRow, normalize_row


def _row(raw: dict, descriptor=FORMATION_STATS) -> GroupedRow:
    return normalize_row(raw, descriptor)


# ---------------------------------------------------------------------------
# Fallback order
# ---------------------------------------------------------------------------


class TestFallbackOrder:
    def test_group_label_wins(self) -> None:
        row = _row({"group_key": 1, "group_label": "Centre Nord", "centre__nom": "Autre"})
        assert resolve_label(row, "centre", FORMATION_STATS) == "Centre Nord"

    def test_blank_group_label_falls_through_to_name(self) -> None:
        row = _row({"group_key": 1, "group_label": "  ", "centre__nom": "Lyon"})
        assert resolve_label(row, "centre", FORMATION_STATS) == "Lyon"

    def test_dictionary_lookup_before_placeholder(self) -> None:
        row = _row({"group_key": 3, "centre_id": 3})
        dictionaries = {"centre": {3: "Paris"}}
        assert resolve_label(row, "centre", FORMATION_STATS, dictionaries) == "Paris"

    def test_dictionary_lookup_accepts_string_keys(self) -> None:
        row = _row({"group_key": 3})
        dictionaries = {"centre": {"3": "Paris"}}
        assert resolve_label(row, "centre", FORMATION_STATS, dictionaries) == "Paris"

    def test_string_row_id_matches_integer_option_id(self) -> None:
        row = _row({"group_key": "7", "centre_id": "7"})
        dictionaries = {"centre": {7: "Marseille"}}
        assert resolve_label(row, "centre", FORMATION_STATS, dictionaries) == "Marseille"

    def test_row_id_matches_label_map_built_from_options(self) -> None:
        dictionaries = {"centre": build_label_map([{"id": 7, "nom": "Marseille"}])}
        for raw_id in (7, "7", " 7 "):
            row = _row({"group_key": raw_id, "centre_id": raw_id})
            assert resolve_label(row, "centre", FORMATION_STATS, dictionaries) == "Marseille"

    def test_placeholder_uses_id_field(self) -> None:
        row = _row({"group_key": "x", "type_offre__id": 5})
        assert resolve_label(row, "type_offre", FORMATION_STATS) == "Type #5"

    def test_placeholder_falls_back_to_group_key(self) -> None:
        row = _row({"group_key": 1, "total": "4", "acceptees": "2"}, PROSPECTION_STATS)
        assert resolve_label(row, "centre", PROSPECTION_STATS) == "Centre #1"

    def test_em_dash_when_nothing_is_known(self) -> None:
        assert resolve_label(_row({}), "centre", FORMATION_STATS) == EM_DASH

    def test_em_dash_for_dimension_without_placeholder(self) -> None:
        assert resolve_label(_row({"group_key": 4}), "departement", FORMATION_STATS) == EM_DASH

    def test_unknown_dimension_gives_em_dash(self) -> None:
        assert resolve_label(_row({"group_key": 4}), "inconnue", FORMATION_STATS) == EM_DASH

    def test_totals_row_is_labelled_total(self) -> None:
        assert resolve_label(GroupedRow(group_key="total"), "centre", FORMATION_STATS) == "Total"


# ---------------------------------------------------------------------------
# Domain-specific rules
# ---------------------------------------------------------------------------


class TestDomainRules:
    def test_owner_full_name(self) -> None:
        row = _row(
            {"group_key": 9, "owner__first_name": "Ana", "owner__last_name": "Diaz"},
            PROSPECTION_STATS,
        )
        assert resolve_label(row, "owner", PROSPECTION_STATS) == "Ana Diaz"

    def test_owner_partial_name(self) -> None:
        row = _row({"group_key": 9, "owner__last_name": "Diaz"}, PROSPECTION_STATS)
        assert resolve_label(row, "owner", PROSPECTION_STATS) == "Diaz"

    def test_owner_email_then_placeholder(self) -> None:
        with_email = _row({"group_key": 9, "owner__email": "a@b.fr"}, PROSPECTION_STATS)
        bare = _row({"group_key": 9}, PROSPECTION_STATS)
        assert resolve_label(with_email, "owner", PROSPECTION_STATS) == "a@b.fr"
        assert resolve_label(bare, "owner", PROSPECTION_STATS) == "Utilisateur #9"

    def test_atelier_type_code_is_translated(self) -> None:
        row = _row({"group_key": "atelier_3", "type_atelier": "atelier_3"}, ATELIER_TRE_STATS)
        assert resolve_label(row, "type_atelier", ATELIER_TRE_STATS) == "Atelier 3 - Simulation entretien"

    def test_unknown_atelier_code_is_shown_raw(self) -> None:
        row = _row({"type_atelier": "atelier_99"}, ATELIER_TRE_STATS)
        assert resolve_label(row, "type_atelier", ATELIER_TRE_STATS) == "atelier_99"

    def test_atelier_departement_from_centre(self) -> None:
        row = _row({"centre__departement": "92"}, ATELIER_TRE_STATS)
        assert resolve_label(row, "departement", ATELIER_TRE_STATS) == "92"

    def test_candidat_responsable_placeholder(self) -> None:
        row = _row({"group_key": 4, "responsable_placement_id": 12}, CANDIDAT_STATS)
        assert resolve_label(row, "responsable", CANDIDAT_STATS) == "User #12"


# ---------------------------------------------------------------------------
# build_label_map
# ---------------------------------------------------------------------------


class TestBuildLabelMap:
    def test_options_are_mapped_by_id(self) -> None:
        options = [
            {"id": 1, "nom": "Paris"},
            {"id": 2, "label": "Lyon"},
            {"id": 3, "libelle": "Lille"},
        ]
        assert build_label_map(options) == {"1": "Paris", "2": "Lyon", "3": "Lille"}

    def test_options_without_label_map_to_their_id(self) -> None:
        assert build_label_map([{"id": 5}]) == {"5": "5"}

    def test_invalid_options_are_skipped(self) -> None:
        assert build_label_map([None, "x", {"nom": "sans id"}]) == {}
        assert build_label_map(None) == {}
