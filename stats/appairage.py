"""
stats/appairage.py

Pairing (appairage) statistics (``/appairage-stats/``).

Grouped rows carry one count per pairing status.  The known statuses are
declared so they always exist; any other numeric status the backend adds
is collected as an extra metric and summed into the totals row too.

Transformation
--------------
taux_transformation = appairage_ok / max(appairages_total, 1) * 100
"""

from __future__ import annotations

from stats.base import DomainDescriptor, LabelRule, RateSpec

APPAIRAGE_STATUSES: tuple[str, ...] = (
    "transmis",
    "en_attente",
    "accepte",
    "refuse",
    "annule",
    "a_faire",
    "contrat_a_signer",
    "contrat_en_attente",
    "appairage_ok",
)

TRANSFORMATION = RateSpec(
    output="taux_transformation",
    numerator="appairage_ok",
    denominator=("appairages_total",),
)

APPAIRAGE_STATS = DomainDescriptor(
    name="appairage",
    endpoint="/appairage-stats/",
    dimensions=("centre", "departement", "statut", "formation", "partenaire"),
    metrics=(
        "appairages_total",
        "nb_candidats",
        "nb_partenaires",
        "nb_formations",
        *APPAIRAGE_STATUSES,
    ),
    rates=(TRANSFORMATION,),
    labels={
        "centre": LabelRule(
            name_fields=("formation__centre__nom",),
            id_fields=("formation__centre_id",),
            placeholder="Centre #{id}",
        ),
        "departement": LabelRule(name_fields=("departement",)),
        "statut": LabelRule(name_fields=("statut",)),
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
    },
    collect_extra_metrics=True,
    overview_metrics=(
        "appairages_total",
        "nb_candidats_distincts",
        "nb_partenaires_distincts",
        "nb_formations_distinctes",
    ),
    overview_sections=("statuts",),
    overview_rates=(
        RateSpec(
            output="taux_transformation",
            numerator="statuts.appairage_ok",
            denominator=("appairages_total",),
        ),
    ),
    tops_keys=("top_partenaires", "top_formations"),
    latest_endpoint="/appairage-comment-stats/latest/",
)
