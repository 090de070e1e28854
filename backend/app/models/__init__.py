from .catalog import Beverage, Guest, PizzaSize, PizzaStyle, Topping
from .party import PartyConfig
from .recommendation import (
    BeverageRecommendation,
    HalfAndHalfPizza,
    PlainPizza,
    RecommendationResult,
    Wave,
    WaveRecommendation,
)

__all__ = [
    "Topping",
    "Beverage",
    "Guest",
    "PizzaSize",
    "PizzaStyle",
    "PartyConfig",
    "PlainPizza",
    "HalfAndHalfPizza",
    "BeverageRecommendation",
    "Wave",
    "WaveRecommendation",
    "RecommendationResult",
]
