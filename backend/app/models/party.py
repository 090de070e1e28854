from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .catalog import Beverage, Guest, PizzaSize, PizzaStyle, Topping
from .recommendation import BeverageRecommendation, PizzaRecommendation, Wave, WaveRecommendation


class PartyConfig(BaseModel):
    """
    Host-configured snapshot the recommendation engine runs against.

    available_toppings=None means the whole topping catalog is on offer.
    An empty available_beverages list means the host is not ordering drinks.
    """

    size: Optional[PizzaSize] = None
    style: Optional[PizzaStyle] = None
    available_toppings: Optional[List[Topping]] = None
    available_beverages: List[Beverage] = Field(default_factory=list)
    expected_guest_count: Optional[int] = Field(None, ge=0, description="The party's max_guests")
    waves: List[Wave] = Field(default_factory=list)
    beverages_per_guest: float = Field(1.0, ge=0)


# ---------------------------------------------------------------------------
# HTTP request / response bodies
# ---------------------------------------------------------------------------


class RecommendationRequest(BaseModel):
    """Request body for POST /api/recommendations"""

    guests: List[Guest] = Field(default_factory=list)
    pizza_size: Optional[PizzaSize] = None
    pizza_size_diameter: Optional[int] = Field(None, description="Pick a catalog size by diameter")
    pizza_style: Optional[str] = Field(None, description="Catalog style id, e.g. 'new-york'")
    available_toppings: Optional[List[str]] = None
    available_beverages: List[str] = Field(default_factory=list)
    max_guests: Optional[int] = Field(None, ge=0)
    require_approval: bool = False
    waves: List[Wave] = Field(default_factory=list)
    party_start: Optional[datetime] = None
    duration_hours: Optional[float] = Field(None, gt=0)
    beverages_per_guest: Optional[float] = Field(None, ge=0)

    class Config:
        json_schema_extra = {
            "example": {
                "guests": [
                    {"name": "Alice", "dietary_restrictions": ["Vegetarian"], "liked_toppings": ["mushrooms"]},
                    {"name": "Bob", "liked_toppings": ["pepperoni"], "liked_beverages": ["soda"]},
                ],
                "pizza_size_diameter": 18,
                "pizza_style": "new-york",
                "available_beverages": ["water", "soda"],
                "max_guests": 12,
            }
        }


class RecommendationResponse(BaseModel):
    pizzas: List[PizzaRecommendation]
    beverages: List[BeverageRecommendation]
    waves: List[WaveRecommendation]
    total_pizzas: int
    total_beverages: int
    order_summary: str


class WavePlanRequest(BaseModel):
    party_start: datetime
    duration_hours: float = Field(..., gt=0)
    total_guests: int = Field(..., ge=0)
