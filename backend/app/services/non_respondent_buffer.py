"""
Extra pizza for invited guests who have not RSVP'd.

Unknown preferences get plain cheese: a stranger is far more likely to be
fine with cheese than with a guessed topping. The buffer is its own line so
the host can see (and drop) it.
"""

import logging
from typing import Optional

from ..models.catalog import PizzaSize, PizzaStyle
from ..models.recommendation import PlainPizza
from .half_split_optimizer import CHEESE_LABEL
from .portion_table import pizzas_needed

logger = logging.getLogger(__name__)


def buffer(
    expected_guest_count: Optional[int],
    respondent_count: int,
    size: PizzaSize,
    style: Optional[PizzaStyle] = None,
) -> Optional[PlainPizza]:
    """Cheese pizzas for the expected-minus-responded gap, or None."""
    if expected_guest_count is None or expected_guest_count <= respondent_count:
        return None

    gap = expected_guest_count - respondent_count
    quantity = pizzas_needed(gap, size)
    logger.info("[PIZZAS] %d non-respondents -> %d cheese pizzas", gap, quantity)
    return PlainPizza(
        id="pizza-default-cheese",
        toppings=[],
        guest_count=gap,
        guests=[],
        dietary_restrictions=[],
        size=size,
        style=style,
        quantity=quantity,
        label=CHEESE_LABEL,
        is_for_non_respondents=True,
    )
