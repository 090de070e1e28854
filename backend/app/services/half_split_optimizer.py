"""
Half-and-half optimisation.

Clusters are allocated full pizzas first. A cluster whose leftover guests
would eat less than half a pizza defers that leftover into a half pool; the
pool is then paired two at a time into half-and-half pizzas, in cluster
order. Pairing ignores topping compatibility: that is the point of a
half-and-half. Each half keeps its own dietary restrictions.

An odd entry left at the end gets a whole pizza, so nobody is dropped.

Different clusters can still end up with the same pizza (they differ only in
dislikes, or a restriction strips every liked topping). Two pool entries
that would make the same pizza share a plain pizza instead of a
half-and-half, and identical plain lines are merged into one.
"""

import logging
from typing import Optional, Sequence, Union

from ..models.catalog import Guest, PizzaSize, PizzaStyle, Topping, ToppingCategory
from ..models.recommendation import HalfAndHalfPizza, PizzaHalf, PlainPizza, PreferenceCluster
from .portion_table import full_pizzas, guests_served, pizzas_needed, servings_per_pizza

logger = logging.getLogger(__name__)

MAX_TOPPINGS_PER_PIZZA = 3

# Topping categories a restriction rules out. Gluten-free is a crust option.
DIETARY_EXCLUSIONS: dict[str, frozenset[ToppingCategory]] = {
    "vegetarian": frozenset({ToppingCategory.MEAT}),
    "vegan": frozenset({ToppingCategory.MEAT, ToppingCategory.CHEESE}),
    "dairy-free": frozenset({ToppingCategory.CHEESE}),
    "gluten-free": frozenset(),
}

CHEESE_LABEL = "Cheese"


def pizza_toppings(liked: Sequence[Topping], dietary_restrictions: Sequence[str]) -> list[Topping]:
    """Liked toppings that every restriction allows, at most three."""
    excluded: set[ToppingCategory] = set()
    for restriction in dietary_restrictions:
        excluded |= DIETARY_EXCLUSIONS.get(restriction.lower(), frozenset())
    allowed = [t for t in liked if t.category not in excluded]
    return allowed[:MAX_TOPPINGS_PER_PIZZA]


def pizza_label(toppings: Sequence[Topping]) -> str:
    if not toppings:
        return CHEESE_LABEL
    return ", ".join(t.name for t in toppings)


def _union_toppings(*groups: Sequence[Topping]) -> list[Topping]:
    merged: dict[str, Topping] = {}
    for group in groups:
        for topping in group:
            merged.setdefault(topping.id, topping)
    return list(merged.values())


def _pair(left: PizzaHalf, right: PizzaHalf, size: PizzaSize, style: Optional[PizzaStyle]) -> HalfAndHalfPizza:
    return HalfAndHalfPizza(
        id="",
        toppings=_union_toppings(left.toppings, right.toppings),
        guest_count=len(left.guests) + len(right.guests),
        guests=[*left.guests, *right.guests],
        dietary_restrictions=sorted(set(left.dietary_restrictions) | set(right.dietary_restrictions)),
        size=size,
        style=style,
        quantity=1,
        label=f"{pizza_label(left.toppings)} / {pizza_label(right.toppings)}",
        left_half=left,
        right_half=right,
    )


PizzaSignature = tuple[tuple[str, ...], tuple[str, ...], int]


def pizza_signature(toppings: Sequence[Topping], dietary_restrictions: Sequence[str], size: PizzaSize) -> PizzaSignature:
    return (
        tuple(sorted(t.id for t in toppings)),
        tuple(sorted(set(dietary_restrictions))),
        size.diameter_inches,
    )


def _plain(
    toppings: Sequence[Topping],
    guests: list[Guest],
    dietary_restrictions: Sequence[str],
    size: PizzaSize,
    style: Optional[PizzaStyle],
    quantity: int,
) -> PlainPizza:
    return PlainPizza(
        id="",
        toppings=list(toppings),
        guest_count=len(guests),
        guests=guests,
        dietary_restrictions=list(dietary_restrictions),
        size=size,
        style=style,
        quantity=quantity,
        label=pizza_label(toppings),
    )


def group_identical(pizzas: Sequence[PlainPizza]) -> list[PlainPizza]:
    """Merge plain lines with the same toppings, restrictions and size, keeping first-seen order."""
    grouped: dict[PizzaSignature, PlainPizza] = {}
    for pizza in pizzas:
        key = pizza_signature(pizza.toppings, pizza.dietary_restrictions, pizza.size)
        existing = grouped.get(key)
        if existing is None:
            grouped[key] = pizza
            continue
        existing.quantity += pizza.quantity
        existing.guest_count += pizza.guest_count
        existing.guests.extend(pizza.guests)
    return list(grouped.values())


def optimize_halves(
    clusters: Sequence[PreferenceCluster],
    size: PizzaSize,
    style: Optional[PizzaStyle] = None,
) -> list[Union[PlainPizza, HalfAndHalfPizza]]:
    """
    Turn clusters into pizzas.

    Returns plain pizzas sorted by quantity descending (stable on cluster
    order), followed by the half-and-half pizzas.
    """
    servings = servings_per_pizza(size)

    plain_by_cluster: dict[int, PlainPizza] = {}
    half_pool: list[tuple[int, PizzaHalf]] = []

    for index, cluster in enumerate(clusters):
        guest_count = cluster.guest_count
        if guest_count == 0:
            continue
        toppings = pizza_toppings(cluster.liked_toppings, cluster.dietary_restrictions)

        whole = full_pizzas(guest_count, size)
        covered = min(guest_count, guests_served(whole, size))
        remainder = guest_count - covered

        if remainder > 0 and pizzas_needed(remainder, size) == 1 and remainder < servings / 2:
            quantity = whole
            members = cluster.guests[:covered]
            half_pool.append(
                (
                    index,
                    PizzaHalf(
                        toppings=toppings,
                        guests=cluster.guests[covered:],
                        dietary_restrictions=list(cluster.dietary_restrictions),
                    ),
                )
            )
        else:
            quantity = pizzas_needed(guest_count, size)
            members = list(cluster.guests)

        if quantity > 0:
            plain_by_cluster[index] = _plain(
                toppings, members, cluster.dietary_restrictions, size, style, quantity
            )

    halves: list[HalfAndHalfPizza] = []
    shared: list[tuple[int, PlainPizza]] = []
    for i in range(0, len(half_pool) - 1, 2):
        (index, left), (_, right) = half_pool[i], half_pool[i + 1]
        if pizza_signature(left.toppings, left.dietary_restrictions, size) == pizza_signature(
            right.toppings, right.dietary_restrictions, size
        ):
            shared.append(
                (index, _plain(left.toppings, [*left.guests, *right.guests], left.dietary_restrictions, size, style, 1))
            )
        else:
            halves.append(_pair(left, right, size, style))

    if len(half_pool) % 2 == 1:
        index, leftover = half_pool[-1]
        existing = plain_by_cluster.get(index)
        if existing is not None:
            existing.quantity += 1
            existing.guests.extend(leftover.guests)
            existing.guest_count += len(leftover.guests)
        else:
            plain_by_cluster[index] = _plain(
                leftover.toppings, leftover.guests, leftover.dietary_restrictions, size, style, 1
            )

    candidates = sorted([*plain_by_cluster.items(), *shared], key=lambda item: item[0])
    plain = group_identical([pizza for _, pizza in candidates])
    plain.sort(key=lambda p: -p.quantity)

    pizzas: list[Union[PlainPizza, HalfAndHalfPizza]] = [*plain, *halves]
    for position, pizza in enumerate(pizzas, 1):
        pizza.id = f"pizza-{position}"

    logger.info(
        "[PIZZAS] %d plain pizza lines, %d half-and-half pizzas (%d halves pooled)",
        len(plain),
        len(halves),
        len(half_pool),
    )
    return pizzas
