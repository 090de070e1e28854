from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, computed_field, model_validator

from .catalog import Beverage, Guest, PizzaSize, PizzaStyle, Topping


class PreferenceCluster(BaseModel):
    """Guests sharing an identical effective preference signature."""

    guests: List[Guest] = Field(default_factory=list)
    dietary_restrictions: List[str] = Field(default_factory=list)
    liked_toppings: List[Topping] = Field(default_factory=list)
    disliked_toppings: List[str] = Field(default_factory=list)

    @property
    def guest_count(self) -> int:
        return len(self.guests)


class BeverageCluster(BaseModel):
    guests: List[Guest] = Field(default_factory=list)
    liked_beverages: List[str] = Field(default_factory=list)
    disliked_beverages: List[str] = Field(default_factory=list)

    @property
    def guest_count(self) -> int:
        return len(self.guests)


class PizzaHalf(BaseModel):
    toppings: List[Topping] = Field(default_factory=list)
    guests: List[Guest] = Field(default_factory=list)
    dietary_restrictions: List[str] = Field(default_factory=list)


class _PizzaBase(BaseModel):
    id: str
    toppings: List[Topping] = Field(default_factory=list)
    guest_count: int = Field(0, ge=0)
    guests: List[Guest] = Field(default_factory=list)
    dietary_restrictions: List[str] = Field(default_factory=list)
    size: PizzaSize
    style: Optional[PizzaStyle] = None
    quantity: int = Field(1, ge=0)
    label: str = ""
    is_for_non_respondents: bool = False


class PlainPizza(_PizzaBase):
    """One topping combination ordered `quantity` times."""

    kind: Literal["plain"] = "plain"

    @computed_field
    @property
    def is_half_and_half(self) -> bool:
        return False


class HalfAndHalfPizza(_PizzaBase):
    """
    A single pizza split between two preference groups.

    Top-level toppings and dietary restrictions are the union of both halves
    so a dietary badge is never lost when the halves are rendered together.
    """

    kind: Literal["half_and_half"] = "half_and_half"
    left_half: PizzaHalf
    right_half: PizzaHalf

    @computed_field
    @property
    def is_half_and_half(self) -> bool:
        return True

    @model_validator(mode="after")
    def _check_halves(self) -> "HalfAndHalfPizza":
        left_members = {id(g) for g in self.left_half.guests}
        if any(id(g) in left_members for g in self.right_half.guests):
            raise ValueError("half-and-half halves must not share guests")

        half_toppings = {t.id for t in self.left_half.toppings} | {t.id for t in self.right_half.toppings}
        if {t.id for t in self.toppings} != half_toppings:
            raise ValueError("toppings must be the union of both halves")

        half_restrictions = set(self.left_half.dietary_restrictions) | set(self.right_half.dietary_restrictions)
        if set(self.dietary_restrictions) != half_restrictions:
            raise ValueError("dietary_restrictions must be the union of both halves")
        return self


PizzaRecommendation = Annotated[Union[PlainPizza, HalfAndHalfPizza], Field(discriminator="kind")]


class BeverageRecommendation(BaseModel):
    id: str
    beverage: Beverage
    quantity: int = Field(0, ge=0)
    guest_count: int = Field(0, ge=0)
    is_for_non_respondents: bool = False
    label: Optional[str] = None


class Wave(BaseModel):
    """A host-configured delivery time slot."""

    id: str
    arrival_time: Optional[datetime] = None
    guest_allocation: int = 0
    weight: float = 1.0
    label: str = ""


class WaveRecommendation(BaseModel):
    wave: Wave
    pizzas: List[PizzaRecommendation] = Field(default_factory=list)
    beverages: List[BeverageRecommendation] = Field(default_factory=list)
    total_pizzas: int = 0
    total_beverages: int = 0

    @classmethod
    def build(
        cls,
        wave: Wave,
        pizzas: List[Union[PlainPizza, HalfAndHalfPizza]],
        beverages: List[BeverageRecommendation],
    ) -> "WaveRecommendation":
        return cls(
            wave=wave,
            pizzas=pizzas,
            beverages=beverages,
            total_pizzas=sum(p.quantity for p in pizzas),
            total_beverages=sum(b.quantity for b in beverages),
        )


class RecommendationResult(BaseModel):
    """Everything one generate_recommendations call produces."""

    pizzas: List[PizzaRecommendation] = Field(default_factory=list)
    beverages: List[BeverageRecommendation] = Field(default_factory=list)
    waves: List[WaveRecommendation] = Field(default_factory=list)

    @property
    def total_pizzas(self) -> int:
        return sum(p.quantity for p in self.pizzas)

    @property
    def total_beverages(self) -> int:
        return sum(b.quantity for b in self.beverages)
