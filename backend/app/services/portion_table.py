"""
Portion table: how many pizzas / beverages a number of guests needs.

Responsibility: turn a guest count into an order quantity for one pizza size
or one beverage line.

Design:
- Quantities are always rounded UP. Running short at a party is a bug;
  one extra pizza is not.
- Servings per pizza come from the host-selected PizzaSize. Neapolitan is the
  one style whose servings do not depend on diameter (personal-sized pies).
"""

import math
from typing import Optional

from ..models.catalog import PizzaSize, PizzaStyle

NEAPOLITAN_STYLE_ID = "neapolitan"
NEAPOLITAN_SERVINGS_PER_PIZZA = 1.5

DEFAULT_BEVERAGES_PER_GUEST = 1.0

# Guards ceil() against float noise, e.g. 6 / 1.2 == 5.000000000000001.
_PRECISION = 9


class ConfigurationError(ValueError):
    """The host's party configuration cannot produce an order."""


def servings_per_pizza(size: Optional[PizzaSize]) -> float:
    """Return the size's servings, raising ConfigurationError if unusable."""
    if size is None:
        raise ConfigurationError("No pizza size configured")
    servings = size.servings_per_pizza
    if servings is None or servings <= 0:
        raise ConfigurationError(
            f"Pizza size {size.name!r} has invalid servings_per_pizza={servings!r}"
        )
    return servings


def effective_size(size: Optional[PizzaSize], style: Optional[PizzaStyle]) -> PizzaSize:
    """
    The size actually used for portioning.

    Neapolitan pies are personal-sized and feed 1.5 guests whatever the
    configured diameter; every other style uses the size's own servings.
    """
    servings_per_pizza(size)
    if style is not None and style.id == NEAPOLITAN_STYLE_ID:
        return size.model_copy(update={"servings_per_pizza": NEAPOLITAN_SERVINGS_PER_PIZZA})
    return size


def pizzas_needed(guest_count: int, size: Optional[PizzaSize]) -> int:
    """ceil(guest_count / servings). Zero guests never produce a pizza."""
    servings = servings_per_pizza(size)
    if guest_count <= 0:
        return 0
    return math.ceil(round(guest_count / servings, _PRECISION))


def full_pizzas(guest_count: int, size: Optional[PizzaSize]) -> int:
    """Pizzas that are completely eaten by guest_count guests (floor)."""
    servings = servings_per_pizza(size)
    if guest_count <= 0:
        return 0
    return math.floor(round(guest_count / servings, _PRECISION))


def guests_served(pizza_count: int, size: Optional[PizzaSize]) -> int:
    """Whole guests fully fed by pizza_count pizzas."""
    servings = servings_per_pizza(size)
    return math.floor(round(pizza_count * servings, _PRECISION))


def beverages_needed(guest_count: int, beverages_per_guest: float = DEFAULT_BEVERAGES_PER_GUEST) -> int:
    """ceil(guest_count * ratio). The ratio is per guest per event, not per wave."""
    if beverages_per_guest < 0:
        raise ConfigurationError(f"beverages_per_guest must be >= 0, got {beverages_per_guest!r}")
    if guest_count <= 0:
        return 0
    return math.ceil(round(guest_count * beverages_per_guest, _PRECISION))
