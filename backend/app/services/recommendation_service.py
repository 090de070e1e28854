"""
Recommendation service: guests + party config -> pizza/beverage/wave order.

Pipeline:
  1. aggregate guests into preference clusters
  2. allocate full pizzas, pair leftovers into half-and-halves
  3. add a cheese buffer for non-respondents
  4. allocate beverages (+ non-respondent buffer)
  5. split across delivery waves

Pure and synchronous: no I/O, no shared state, identical input gives
identical output. The caller decides when to recompute.
"""

import logging
from typing import Optional, Sequence

from ..models.catalog import Guest, PizzaSize, PizzaStyle, Topping
from ..models.party import PartyConfig
from ..models.recommendation import RecommendationResult
from . import catalog
from .beverage_allocator import allocate_beverages, beverage_buffer
from .half_split_optimizer import optimize_halves
from .non_respondent_buffer import buffer
from .portion_table import effective_size
from .preference_aggregator import aggregate
from .wave_allocator import Pizza, allocate, allocate_by_guest_assignment, guests_assigned_to_waves

logger = logging.getLogger(__name__)


def build_pizzas(
    guests: Sequence[Guest],
    size: PizzaSize,
    style: Optional[PizzaStyle],
    available_toppings: Sequence[Topping],
    expected_guest_count: Optional[int],
) -> list[Pizza]:
    """Cluster, optimise halves and append the non-respondent buffer."""
    clusters = aggregate(guests, available_toppings)
    pizzas = optimize_halves(clusters, size, style)

    extra = buffer(expected_guest_count, len(guests), size, style)
    if extra is not None:
        pizzas.append(extra)

    for position, pizza in enumerate(pizzas, 1):
        pizza.id = f"pizza-{position}"
    return pizzas


class RecommendationService:
    """Orchestrates the allocation engine. Holds no state between calls."""

    def generate_recommendations(self, guests: Sequence[Guest], config: PartyConfig) -> RecommendationResult:
        size = effective_size(config.size, config.style)
        style = config.style
        available_toppings = (
            config.available_toppings if config.available_toppings is not None else catalog.TOPPINGS
        )

        logger.info(
            "[RECOMMEND] %d guests, expected=%s, size=%s (%.2f servings), style=%s, %d waves",
            len(guests),
            config.expected_guest_count,
            size.name,
            size.servings_per_pizza,
            style.id if style else None,
            len(config.waves),
        )

        pizzas = build_pizzas(guests, size, style, available_toppings, config.expected_guest_count)

        beverages = allocate_beverages(guests, config.available_beverages, config.beverages_per_guest)
        extra_drinks = beverage_buffer(
            config.expected_guest_count, guests, config.available_beverages, config.beverages_per_guest
        )
        if extra_drinks is not None:
            beverages.append(extra_drinks)

        if guests_assigned_to_waves(guests, config.waves):

            def _build_for_wave(subset: list[Guest], expected: Optional[int]) -> list[Pizza]:
                return build_pizzas(subset, size, style, available_toppings, expected)

            waves = allocate_by_guest_assignment(pizzas, beverages, config.waves, guests, _build_for_wave)
        else:
            guest_allocation = max(config.expected_guest_count or 0, len(guests))
            waves = allocate(pizzas, beverages, config.waves, guest_allocation)

        result = RecommendationResult(pizzas=pizzas, beverages=beverages, waves=waves)
        logger.info(
            "[RECOMMEND] %d pizzas, %d beverages across %d waves",
            result.total_pizzas,
            result.total_beverages,
            len(waves),
        )
        return result


recommendation_service = RecommendationService()


def generate_recommendations(guests: Sequence[Guest], config: PartyConfig) -> RecommendationResult:
    return recommendation_service.generate_recommendations(guests, config)
