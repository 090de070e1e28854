"""
Default catalog: toppings, beverage categories, pizza styles and sizes.

Parties pick subsets of these. Ids that are not in the catalog (a topping
removed after guests already RSVP'd, a typo in an API call) resolve to an
opaque entry named after the raw id instead of failing.
"""

import logging
from typing import Iterable, Optional

from ..models.catalog import (
    Beverage,
    BeverageCategory,
    PizzaSize,
    PizzaStyle,
    Topping,
    ToppingCategory,
)

logger = logging.getLogger(__name__)

DIETARY_OPTIONS: list[str] = ["Vegetarian", "Vegan", "Gluten-Free", "Dairy-Free"]

TOPPINGS: list[Topping] = [
    Topping(id="pepperoni", name="Pepperoni", category=ToppingCategory.MEAT),
    Topping(id="sausage", name="Sausage", category=ToppingCategory.MEAT),
    Topping(id="bacon", name="Bacon", category=ToppingCategory.MEAT),
    Topping(id="ham", name="Ham", category=ToppingCategory.MEAT),
    Topping(id="chicken", name="Chicken", category=ToppingCategory.MEAT),
    Topping(id="mushrooms", name="Mushrooms", category=ToppingCategory.VEGETABLE),
    Topping(id="onions", name="Onions", category=ToppingCategory.VEGETABLE),
    Topping(id="bell-peppers", name="Bell Peppers", category=ToppingCategory.VEGETABLE),
    Topping(id="olives", name="Olives", category=ToppingCategory.VEGETABLE),
    Topping(id="spinach", name="Spinach", category=ToppingCategory.VEGETABLE),
    Topping(id="jalapenos", name="Jalapeños", category=ToppingCategory.VEGETABLE),
    Topping(id="tomatoes", name="Tomatoes", category=ToppingCategory.VEGETABLE),
    Topping(id="pineapple", name="Pineapple", category=ToppingCategory.FRUIT),
    Topping(id="extra-cheese", name="Extra Cheese", category=ToppingCategory.CHEESE),
    Topping(id="feta", name="Feta", category=ToppingCategory.CHEESE),
    Topping(id="anchovies", name="Anchovies", category=ToppingCategory.MEAT),
]

BEVERAGES: list[Beverage] = [
    Beverage(id="water", name="Water", category=BeverageCategory.WATER),
    Beverage(id="beer", name="Beer", category=BeverageCategory.ALCOHOL),
    Beverage(id="soda", name="Soda", category=BeverageCategory.SODA),
    Beverage(id="wine", name="Wine", category=BeverageCategory.ALCOHOL),
    Beverage(id="cocktail", name="Cocktail", category=BeverageCategory.ALCOHOL),
    Beverage(id="juice", name="Juice", category=BeverageCategory.JUICE),
]

PIZZA_STYLES: list[PizzaStyle] = [
    PizzaStyle(id="neapolitan", name="Neapolitan", description="Thin crust, wood-fired, authentic Italian style"),
    PizzaStyle(id="new-york", name="New York", description="Large, thin crust, foldable slices"),
    PizzaStyle(id="detroit", name="Detroit", description="Square, thick crust, crispy edges"),
]

# Servings scale with surface area: an 18" pie feeds 4, i.e. (diameter / 18)^2 * 4.
PIZZA_SIZES: list[PizzaSize] = [
    PizzaSize(diameter_inches=10, name="Personal", servings_per_pizza=1.2),
    PizzaSize(diameter_inches=12, name="Small", servings_per_pizza=1.8),
    PizzaSize(diameter_inches=14, name="Medium", servings_per_pizza=2.4),
    PizzaSize(diameter_inches=16, name="Large", servings_per_pizza=3.2),
    PizzaSize(diameter_inches=18, name="Extra Large", servings_per_pizza=4.0),
    PizzaSize(diameter_inches=20, name="Family", servings_per_pizza=4.9),
]

_TOPPINGS_BY_ID = {t.id: t for t in TOPPINGS}
_BEVERAGES_BY_ID = {b.id: b for b in BEVERAGES}


def resolve_toppings(topping_ids: Iterable[str]) -> list[Topping]:
    """Map ids to catalog toppings, keeping order and dropping duplicates."""
    resolved = []
    for topping_id in dict.fromkeys(topping_ids):
        topping = _TOPPINGS_BY_ID.get(topping_id)
        if topping is None:
            logger.warning("Unknown topping id %r, using it as an opaque label", topping_id)
            topping = Topping(id=topping_id, name=topping_id, category=ToppingCategory.OTHER)
        resolved.append(topping)
    return resolved


def resolve_beverages(beverage_ids: Iterable[str]) -> list[Beverage]:
    """Map ids to catalog beverages, keeping order and dropping duplicates."""
    resolved = []
    for beverage_id in dict.fromkeys(beverage_ids):
        beverage = _BEVERAGES_BY_ID.get(beverage_id)
        if beverage is None:
            logger.warning("Unknown beverage id %r, using it as an opaque label", beverage_id)
            beverage = Beverage(id=beverage_id, name=beverage_id, category=BeverageCategory.OTHER)
        resolved.append(beverage)
    return resolved


def find_style(style_id: Optional[str]) -> Optional[PizzaStyle]:
    if style_id is None:
        return None
    return next((s for s in PIZZA_STYLES if s.id == style_id), None)


def find_size(diameter_inches: Optional[int]) -> Optional[PizzaSize]:
    if diameter_inches is None:
        return None
    return next((s for s in PIZZA_SIZES if s.diameter_inches == diameter_inches), None)
