"""
stats/atelier_tre.py

TRE workshop (atelier) statistics (``/ateliertre-stats/``).

Attendance
----------
taux_presence = present / max(present + absent + excuse, 1) * 100

Unknown attendance (``inconnu``) is not part of the denominator.
"""

from __future__ import annotations

from stats.base import DomainDescriptor, FilterRules, LabelRule, RateSpec

ATELIER_TYPE_LABELS: dict[str, str] = {
    "atelier_1": "Atelier 1 - Exploration et positionnement",
    "atelier_2": "Atelier 2 - CV et lettre de motivation",
    "atelier_3": "Atelier 3 - Simulation entretien",
    "atelier_4": "Atelier 4 - Prospection entreprise",
    "atelier_5": "Atelier 5 - Réseaux sociaux pro",
    "atelier_6": "Atelier 6 - Posture professionnelle",
    "atelier_7": "Atelier 7 - Bilan et plan d’action",
    "autre": "Autre",
}

ATTENDANCE = RateSpec(
    output="taux_presence",
    numerator="present",
    denominator=("present", "absent", "excuse"),
)

ATELIER_TRE_STATS = DomainDescriptor(
    name="atelier_tre",
    endpoint="/ateliertre-stats/",
    dimensions=("centre", "departement", "type_atelier"),
    metrics=(
        "nb_ateliers",
        "candidats_uniques",
        "presences_total",
        "inconnu",
        "present",
        "absent",
        "excuse",
    ),
    rates=(ATTENDANCE,),
    labels={
        "centre": LabelRule(
            name_fields=("centre__nom",),
            id_fields=("centre_id",),
            placeholder="Centre #{id}",
        ),
        # older backends only exposed the centre's departement
        "departement": LabelRule(name_fields=("departement", "centre__departement")),
        "type_atelier": LabelRule(
            name_fields=("type_atelier",),
            value_labels=ATELIER_TYPE_LABELS,
        ),
    },
    overview_metrics=(
        "nb_ateliers",
        "nb_candidats_uniques",
        "inscrits_total",
        "presences_total",
    ),
    overview_sections=("ateliers", "presences"),
    overview_rates=(
        RateSpec(
            output="taux_presence",
            numerator="presences.present",
            denominator=("presences.present", "presences.absent", "presences.excuse"),
        ),
    ),
    tops_keys=("top_types", "top_centres"),
    filter_rules=FilterRules(integer_fields=("centre",), departement_width=2),
)
