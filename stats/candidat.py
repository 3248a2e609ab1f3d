"""
stats/candidat.py

Candidate statistics (``/candidat-stats/``).

Counts only; candidate tables carry no derived rate.  Contract types are
reported with POEI and POEC merged into ``contrat_poei_poec``.
"""

from __future__ import annotations

from stats.base import DomainDescriptor, LabelRule

CANDIDAT_METRICS: tuple[str, ...] = (
    "total",
    "entretien_ok",
    "test_ok",
    "gespers",
    "admissibles",
    "en_formation",
    "en_appairage",
    "osia_count",
    "rqth_count",
    "cv_renseigne",
    "courrier_rentree_count",
    "ateliers_tre_total",
    "contrat_apprentissage",
    "contrat_professionnalisation",
    "contrat_poei_poec",
    "contrat_sans",
    "contrat_crif",
    "contrat_autre",
    "appairages_total",
    "app_transmis",
    "app_en_attente",
    "app_accepte",
    "app_refuse",
    "app_annule",
    "app_a_faire",
    "app_contrat_a_signer",
    "app_contrat_en_attente",
    "app_appairage_ok",
)


def _value_rule(field_name: str) -> LabelRule:
    return LabelRule(name_fields=(field_name,))


CANDIDAT_STATS = DomainDescriptor(
    name="candidat",
    endpoint="/candidat-stats/",
    dimensions=(
        "centre",
        "departement",
        "formation",
        "statut",
        "type_contrat",
        "cv_statut",
        "resultat_placement",
        "contrat_signe",
        "responsable",
        "entreprise",
    ),
    metrics=CANDIDAT_METRICS,
    labels={
        "centre": LabelRule(
            name_fields=("formation__centre__nom",),
            id_fields=("formation__centre_id",),
            placeholder="Centre #{id}",
        ),
        "formation": LabelRule(
            name_fields=("formation__nom",),
            id_fields=("formation_id",),
            placeholder="Formation #{id}",
        ),
        "departement": _value_rule("departement"),
        "entreprise": LabelRule(
            name_fields=("entreprise_placement__nom",),
            id_fields=("entreprise_placement_id",),
            placeholder="Entreprise #{id}",
        ),
        "responsable": LabelRule(
            id_fields=("responsable_placement_id",),
            placeholder="User #{id}",
        ),
        "statut": _value_rule("statut"),
        "type_contrat": _value_rule("type_contrat"),
        "cv_statut": _value_rule("cv_statut"),
        "resultat_placement": _value_rule("resultat_placement"),
        "contrat_signe": _value_rule("contrat_signe"),
    },
    overview_metrics=(
        "total",
        "entretien_ok",
        "test_ok",
        "gespers",
        "admissibles",
        "en_formation",
        "en_appairage",
        "en_accompagnement",
        "rqth_count",
        "osia_count",
        "cv_renseigne",
        "courrier_rentree_count",
        "ateliers_tre_total",
        "contrat_apprentissage",
        "contrat_professionnalisation",
        "contrat_poei_poec",
        "contrat_crif",
        "contrat_sans",
        "contrat_autre",
    ),
    overview_sections=("appairages",),
    repartition_keys={
        "par_statut": "statut",
        "par_type_contrat": "type_contrat",
        "par_cv": "cv_statut",
        "par_resultat": "resultat_placement",
    },
)
