from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ToppingCategory(str, Enum):
    MEAT = "meat"
    VEGETABLE = "vegetable"
    CHEESE = "cheese"
    FRUIT = "fruit"
    OTHER = "other"


class BeverageCategory(str, Enum):
    SODA = "soda"
    JUICE = "juice"
    WATER = "water"
    ALCOHOL = "alcohol"
    OTHER = "other"


class Topping(BaseModel):
    """A catalog topping. Immutable."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: ToppingCategory = ToppingCategory.OTHER


class Beverage(BaseModel):
    """A catalog beverage. Immutable."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: BeverageCategory = BeverageCategory.OTHER


class PizzaSize(BaseModel):
    model_config = ConfigDict(frozen=True)

    diameter_inches: int
    name: str
    servings_per_pizza: float


class PizzaStyle(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""


# Placeholder values the RSVP form submits when a guest has no restriction.
_NO_RESTRICTION = {"", "none"}


def _dedupe(values: List[str]) -> List[str]:
    cleaned = (str(v).strip() for v in values if v is not None)
    return list(dict.fromkeys(v for v in cleaned if v))


class Guest(BaseModel):
    """
    A respondent's preference record.

    The list fields have set semantics: duplicates are dropped on validation,
    first-seen order is kept for display.
    """

    id: Optional[str] = None
    name: str = ""
    dietary_restrictions: List[str] = Field(default_factory=list)
    liked_toppings: List[str] = Field(default_factory=list)
    disliked_toppings: List[str] = Field(default_factory=list)
    liked_beverages: List[str] = Field(default_factory=list)
    disliked_beverages: List[str] = Field(default_factory=list)
    approved: Optional[bool] = None
    wave_id: Optional[str] = Field(None, description="Optional pre-assignment to a delivery wave")

    @field_validator("dietary_restrictions", mode="before")
    @classmethod
    def _drop_placeholder_restrictions(cls, value):
        if value is None:
            return []
        return [r for r in _dedupe(list(value)) if r.lower() not in _NO_RESTRICTION]

    @field_validator(
        "liked_toppings",
        "disliked_toppings",
        "liked_beverages",
        "disliked_beverages",
        mode="before",
    )
    @classmethod
    def _dedupe_ids(cls, value):
        if value is None:
            return []
        return _dedupe(list(value))
