"""
Beverage allocation: the drinks counterpart of the pizza pipeline.

Guests are clustered by (liked, disliked) beverages restricted to what the
host offers. Each cluster is served ONE beverage type, the most popular one it
likes, so the order collapses into a few lines. Quantities come from the
per-guest ratio (per event, not per wave), always rounded up.

There is no half-and-half for drinks: a beverage line is just a count.
"""

import logging
from typing import Optional, Sequence

from ..models.catalog import Beverage, Guest
from ..models.recommendation import BeverageCluster, BeverageRecommendation
from .portion_table import DEFAULT_BEVERAGES_PER_GUEST, beverages_needed

logger = logging.getLogger(__name__)


def _effective_likes(guest: Guest, available_ids: set[str]) -> set[str]:
    disliked = set(guest.disliked_beverages)
    return {b for b in guest.liked_beverages if b in available_ids and b not in disliked}


def beverage_popularity(guests: Sequence[Guest], available_beverages: Sequence[Beverage]) -> dict[str, int]:
    """Number of guests liking each available beverage."""
    available_ids = {b.id for b in available_beverages}
    counts = {b.id: 0 for b in available_beverages}
    for guest in guests:
        for beverage_id in _effective_likes(guest, available_ids):
            counts[beverage_id] += 1
    return counts


def aggregate_beverages(guests: Sequence[Guest], available_beverages: Sequence[Beverage]) -> list[BeverageCluster]:
    available_ids = {b.id for b in available_beverages}
    grouped: dict[tuple[tuple[str, ...], tuple[str, ...]], list[Guest]] = {}
    for guest in guests:
        liked = _effective_likes(guest, available_ids)
        disliked = {b for b in guest.disliked_beverages if b in available_ids}
        key = (tuple(sorted(liked)), tuple(sorted(disliked)))
        grouped.setdefault(key, []).append(guest.model_copy(deep=True))

    clusters = [
        BeverageCluster(guests=members, liked_beverages=list(liked), disliked_beverages=list(disliked))
        for (liked, disliked), members in grouped.items()
    ]
    clusters.sort(key=lambda c: -c.guest_count)
    return clusters


def _ranked(available_beverages: Sequence[Beverage], popularity: dict[str, int]) -> list[Beverage]:
    # sorted() is stable, so ties keep the host's availability order
    return sorted(available_beverages, key=lambda b: -popularity.get(b.id, 0))


def choose_beverage(
    cluster: BeverageCluster,
    available_beverages: Sequence[Beverage],
    popularity: dict[str, int],
) -> Beverage:
    """The single beverage a cluster is served."""
    ranked = _ranked(available_beverages, popularity)
    if cluster.liked_beverages:
        liked = set(cluster.liked_beverages)
        return next(b for b in ranked if b.id in liked)
    disliked = set(cluster.disliked_beverages)
    acceptable = [b for b in ranked if b.id not in disliked]
    if acceptable:
        return acceptable[0]
    # Dislikes everything on offer: still give them something to drink.
    return available_beverages[0]


def allocate_beverages(
    guests: Sequence[Guest],
    available_beverages: Sequence[Beverage],
    beverages_per_guest: float = DEFAULT_BEVERAGES_PER_GUEST,
) -> list[BeverageRecommendation]:
    """Beverage lines for respondents, sorted by quantity descending."""
    if not available_beverages or not guests:
        return []

    popularity = beverage_popularity(guests, available_beverages)
    served: dict[str, int] = {}
    beverages_by_id: dict[str, Beverage] = {}
    for cluster in aggregate_beverages(guests, available_beverages):
        beverage = choose_beverage(cluster, available_beverages, popularity)
        beverages_by_id[beverage.id] = beverage
        served[beverage.id] = served.get(beverage.id, 0) + cluster.guest_count

    recommendations = []
    for beverage_id, guest_count in served.items():
        quantity = beverages_needed(guest_count, beverages_per_guest)
        if quantity == 0:
            continue
        beverage = beverages_by_id[beverage_id]
        recommendations.append(
            BeverageRecommendation(
                id=f"bev-{beverage_id}",
                beverage=beverage,
                quantity=quantity,
                guest_count=guest_count,
                label=beverage.name,
            )
        )

    recommendations.sort(key=lambda r: -r.quantity)
    logger.info("[BEVERAGES] %d guests -> %d beverage lines", len(guests), len(recommendations))
    return recommendations


def beverage_buffer(
    expected_guest_count: Optional[int],
    guests: Sequence[Guest],
    available_beverages: Sequence[Beverage],
    beverages_per_guest: float = DEFAULT_BEVERAGES_PER_GUEST,
) -> Optional[BeverageRecommendation]:
    """
    Drinks for non-respondents: the most commonly liked beverage, or the first
    available one when nobody expressed a preference.
    """
    respondent_count = len(guests)
    if not available_beverages or expected_guest_count is None or expected_guest_count <= respondent_count:
        return None

    gap = expected_guest_count - respondent_count
    quantity = beverages_needed(gap, beverages_per_guest)
    if quantity == 0:
        return None

    popularity = beverage_popularity(guests, available_beverages)
    beverage = _ranked(available_beverages, popularity)[0]
    logger.info("[BEVERAGES] %d non-respondents -> %d x %s", gap, quantity, beverage.name)
    return BeverageRecommendation(
        id=f"bev-default-{beverage.id}",
        beverage=beverage,
        quantity=quantity,
        guest_count=gap,
        is_for_non_respondents=True,
        label=beverage.name,
    )
