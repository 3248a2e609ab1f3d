"""
stats/prospection.py

Prospection statistics (``/prospection-stats/``).

Conversion
----------
taux_acceptation = acceptees / max(total, 1) * 100
"""

from __future__ import annotations

from stats.base import DomainDescriptor, LabelRule, RateSpec

ACCEPTANCE = RateSpec(
    output="taux_acceptation",
    numerator="acceptees",
    denominator=("total",),
)

PROSPECTION_METRICS: tuple[str, ...] = (
    "total",
    "actives",
    "a_relancer",
    "acceptees",
    "refusees",
    "annulees",
    "en_cours",
    "a_faire",
    "a_relancer_statut",
    "non_renseigne",
)

PROSPECTION_STATS = DomainDescriptor(
    name="prospection",
    endpoint="/prospection-stats/",
    dimensions=(
        "centre",
        "departement",
        "owner",
        "formation",
        "partenaire",
        "statut",
        "objectif",
        "motif",
        "type",
    ),
    metrics=PROSPECTION_METRICS,
    rates=(ACCEPTANCE,),
    labels={
        "centre": LabelRule(
            name_fields=("centre__nom",),
            id_fields=("centre_id",),
            placeholder="Centre #{id}",
        ),
        "departement": LabelRule(name_fields=("departement",)),
        "owner": LabelRule(
            name_fields=(
                ("owner__first_name", "owner__last_name"),
                "owner__email",
                "owner__username",
            ),
            id_fields=("owner_id",),
            placeholder="Utilisateur #{id}",
        ),
        "formation": LabelRule(
            name_fields=("formation__nom",),
            id_fields=("formation_id",),
            placeholder="Formation #{id}",
        ),
        "partenaire": LabelRule(
            name_fields=("partenaire__nom",),
            id_fields=("partenaire_id",),
            placeholder="Partenaire #{id}",
        ),
        "statut": LabelRule(name_fields=("statut",)),
        "objectif": LabelRule(name_fields=("objectif",)),
        "motif": LabelRule(name_fields=("motif",)),
        "type": LabelRule(name_fields=("type_prospection",)),
    },
    attributes=("formation__num_offre", "formation__centre__nom"),
    overview_metrics=PROSPECTION_METRICS,
    overview_rates=(ACCEPTANCE,),
    repartition_keys={
        "par_statut": "code",
        "par_objectif": "objectif",
        "par_motif": "motif",
        "par_type": "type_prospection",
        "par_moyen_contact": "moyen_contact",
    },
    latest_endpoint="/prospection-comment-stats/latest/",
)
