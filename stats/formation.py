"""
stats/formation.py

Formation statistics (``/formation-stats/``).

Saturation
----------
taux_saturation = total_inscrits / max(total_places, 1) * 100

The backend value is kept per row when supplied; the totals row always
re-derives it from summed places and enrolments.
"""

from __future__ import annotations

from stats.base import DomainDescriptor, LabelRule, RateSpec

SATURATION = RateSpec(
    output="taux_saturation",
    numerator="total_inscrits",
    denominator=("total_places",),
)

FORMATION_METRICS: tuple[str, ...] = (
    "nb_formations",
    "nb_actives",
    "nb_a_venir",
    "nb_terminees",
    "total_places",
    "total_places_crif",
    "total_places_mp",
    "total_inscrits",
    "total_inscrits_crif",
    "total_inscrits_mp",
    "total_dispo_crif",
    "total_dispo_mp",
    "total_disponibles",
    "entrees_formation",
    # candidats
    "nb_candidats",
    "nb_entretien_ok",
    "nb_test_ok",
    "nb_inscrits_gespers",
    "nb_entrees_formation",
    "nb_contrats_apprentissage",
    "nb_contrats_professionnalisation",
    "nb_contrats_poei_poec",
    "nb_contrats_autres",
    "nb_admissibles",
    # appairages, flattened per status
    "app_total",
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

FORMATION_STATS = DomainDescriptor(
    name="formation",
    endpoint="/formation-stats/",
    dimensions=("formation", "centre", "departement", "type_offre", "statut"),
    metrics=FORMATION_METRICS,
    rates=(SATURATION,),
    labels={
        "formation": LabelRule(
            name_fields=("nom",),
            id_fields=("id",),
            placeholder="Formation #{id}",
        ),
        "centre": LabelRule(
            name_fields=("centre__nom",),
            id_fields=("centre_id",),
            placeholder="Centre #{id}",
        ),
        "departement": LabelRule(name_fields=("departement",)),
        "type_offre": LabelRule(
            id_fields=("type_offre__id", "type_offre_id"),
            placeholder="Type #{id}",
        ),
        "statut": LabelRule(
            id_fields=("statut__id", "statut_id"),
            placeholder="Statut #{id}",
        ),
    },
    attributes=("num_offre",),
    overview_metrics=(
        "nb_formations",
        "nb_actives",
        "nb_a_venir",
        "nb_terminees",
        "total_places_crif",
        "total_places_mp",
        "total_inscrits_crif",
        "total_inscrits_mp",
        "total_places",
        "total_inscrits",
        "total_dispo_crif",
        "total_dispo_mp",
        "total_disponibles",
        "entrees_formation",
    ),
    overview_sections=(
        "repartition_financeur",
        "candidats",
        "appairages",
        "appairages.par_statut",
    ),
    overview_rates=(SATURATION,),
    tops_keys=("a_recruter", "top_saturees", "en_tension"),
    latest_endpoint="/commentaire-stats/latest/",
)
