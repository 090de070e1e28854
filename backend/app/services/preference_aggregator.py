"""
Preference aggregation: partition guests into pizza clusters.

Two guests share a cluster iff their effective signature matches exactly:
  (sorted dietary restrictions,
   sorted liked toppings that the party actually offers,
   sorted disliked toppings)

This is a partition, not a similarity match, so every guest lands in exactly
one cluster and the result is fully determined by the input order.
"""

import logging
from typing import Sequence

from ..models.catalog import Guest, Topping
from ..models.recommendation import PreferenceCluster

logger = logging.getLogger(__name__)

ClusterKey = tuple[tuple[str, ...], tuple[str, ...], tuple[str, ...]]


def cluster_key(guest: Guest, available_ids: set[str]) -> ClusterKey:
    # A topping both liked and disliked counts as disliked.
    disliked = set(guest.disliked_toppings)
    liked = {t for t in guest.liked_toppings if t in available_ids and t not in disliked}
    return (
        tuple(sorted(set(guest.dietary_restrictions))),
        tuple(sorted(liked)),
        tuple(sorted(disliked)),
    )


def aggregate(guests: Sequence[Guest], available_toppings: Sequence[Topping]) -> list[PreferenceCluster]:
    """
    Group guests into preference clusters, largest first.

    Ties keep first-seen order (sorted() is stable), which the half-and-half
    pairing relies on for deterministic output.
    """
    toppings_by_id = {t.id: t for t in available_toppings}
    available_ids = set(toppings_by_id)
    # Catalog order, not guest order, decides how a cluster's toppings are listed.
    topping_order = {t.id: i for i, t in enumerate(available_toppings)}

    grouped: dict[ClusterKey, list[Guest]] = {}
    for guest in guests:
        key = cluster_key(guest, available_ids)
        grouped.setdefault(key, []).append(guest.model_copy(deep=True))

    clusters = []
    for (restrictions, liked, disliked), members in grouped.items():
        clusters.append(
            PreferenceCluster(
                guests=members,
                dietary_restrictions=list(restrictions),
                liked_toppings=[toppings_by_id[t] for t in sorted(liked, key=topping_order.__getitem__)],
                disliked_toppings=list(disliked),
            )
        )

    clusters.sort(key=lambda c: -c.guest_count)
    logger.info("[PIZZAS] %d guests aggregated into %d clusters", len(guests), len(clusters))
    return clusters
