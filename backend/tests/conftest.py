"""
Shared fixtures for all test modules.
"""

from datetime import datetime

import pytest

from app.models.catalog import Guest, PizzaSize, PizzaStyle
from app.models.party import PartyConfig
from app.models.recommendation import Wave
from app.services import catalog


# ---------------------------------------------------------------------------
# Catalog fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def xl_size() -> PizzaSize:
    """The 18" pizza: 4 servings, the round number most scenarios use."""
    return catalog.find_size(18)


@pytest.fixture
def new_york() -> PizzaStyle:
    return catalog.find_style("new-york")


@pytest.fixture
def toppings():
    return list(catalog.TOPPINGS)


@pytest.fixture
def beverages():
    return list(catalog.BEVERAGES)


# ---------------------------------------------------------------------------
# Guest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_guest():
    """Factory: make_guest("Ann", liked=["mushrooms"], diet=["Vegetarian"])."""
    counter = {"n": 0}

    def _make(
        name: str = "",
        liked=None,
        disliked=None,
        diet=None,
        drinks=None,
        no_drinks=None,
        **kwargs,
    ) -> Guest:
        counter["n"] += 1
        return Guest(
            id=kwargs.pop("id", f"guest-{counter['n']}"),
            name=name or f"Guest {counter['n']}",
            liked_toppings=liked or [],
            disliked_toppings=disliked or [],
            dietary_restrictions=diet or [],
            liked_beverages=drinks or [],
            disliked_beverages=no_drinks or [],
            **kwargs,
        )

    return _make


@pytest.fixture
def vegetarian_mushroom_guests(make_guest) -> list[Guest]:
    """Five vegetarians who all like mushrooms."""
    return [make_guest(liked=["mushrooms"], diet=["Vegetarian"]) for _ in range(5)]


# ---------------------------------------------------------------------------
# Party config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def party_config(xl_size, new_york) -> PartyConfig:
    return PartyConfig(size=xl_size, style=new_york)


@pytest.fixture
def two_waves() -> list[Wave]:
    return [
        Wave(id="wave-2", arrival_time=datetime(2026, 6, 1, 19, 0), guest_allocation=10, label="Wave 2"),
        Wave(id="wave-1", arrival_time=datetime(2026, 6, 1, 18, 0), guest_allocation=10, label="Wave 1"),
    ]
