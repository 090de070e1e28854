from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from app import config
from app.models.catalog import Guest
from app.models.party import (
    PartyConfig,
    RecommendationRequest,
    RecommendationResponse,
    WavePlanRequest,
)
from app.models.recommendation import Wave
from app.services import catalog
from app.services.order_summary import format_order_summary
from app.services.portion_table import ConfigurationError
from app.services.recommendation_service import recommendation_service
from app.services.wave_planner import calculate_waves

# Configure logging
logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle context manager"""
    logger.info("Application starting up")
    yield
    logger.info("Application shutting down")


# Create FastAPI app
app = FastAPI(
    title="Pizza Party Planner",
    description="Turns guest RSVPs into a pizza and drinks order",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.FRONTEND_URL, "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _respondents(request: RecommendationRequest) -> list[Guest]:
    """
    Guests the engine should plan for.

    When the party requires host approval, pending (None) and rejected
    guests are left out.
    """
    if not request.require_approval:
        return list(request.guests)
    return [g for g in request.guests if g.approved is True]


def _build_party_config(request: RecommendationRequest, guests: list[Guest]) -> PartyConfig:
    size = request.pizza_size
    if size is None:
        diameter = request.pizza_size_diameter or config.DEFAULT_PIZZA_SIZE_DIAMETER
        size = catalog.find_size(diameter)
        if size is None:
            raise HTTPException(status_code=400, detail=f"Unknown pizza size: {diameter} inches")

    style_id = request.pizza_style or config.DEFAULT_PIZZA_STYLE
    style = catalog.find_style(style_id)
    if style is None:
        logger.warning("Unknown pizza style %r, portioning by size only", style_id)

    waves: list[Wave] = list(request.waves)
    if not waves and request.party_start is not None and request.duration_hours:
        waves = calculate_waves(
            request.party_start,
            request.duration_hours,
            request.max_guests or len(guests),
        )

    return PartyConfig(
        size=size,
        style=style,
        available_toppings=(
            catalog.resolve_toppings(request.available_toppings)
            if request.available_toppings is not None
            else None
        ),
        available_beverages=catalog.resolve_beverages(request.available_beverages),
        expected_guest_count=request.max_guests,
        waves=waves,
        beverages_per_guest=(
            request.beverages_per_guest
            if request.beverages_per_guest is not None
            else config.BEVERAGES_PER_GUEST
        ),
    )


# ============================================================================
# Endpoints
# ============================================================================


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "pizza-party-planner"}


@app.get("/api/catalog")
async def get_catalog():
    """Toppings, beverages, styles, sizes and dietary options hosts choose from."""
    return {
        "toppings": [t.model_dump(mode="json") for t in catalog.TOPPINGS],
        "beverages": [b.model_dump(mode="json") for b in catalog.BEVERAGES],
        "pizza_styles": [s.model_dump(mode="json") for s in catalog.PIZZA_STYLES],
        "pizza_sizes": [s.model_dump(mode="json") for s in catalog.PIZZA_SIZES],
        "dietary_options": catalog.DIETARY_OPTIONS,
    }


@app.post("/api/recommendations")
async def create_recommendations(request: RecommendationRequest) -> RecommendationResponse:
    """Generate the pizza/beverage order for a party's current guest list."""
    guests = _respondents(request)
    party_config = _build_party_config(request, guests)

    try:
        result = recommendation_service.generate_recommendations(guests, party_config)
    except ConfigurationError as e:
        logger.error("Recommendation failed on party configuration: %s", e)
        raise HTTPException(status_code=400, detail=str(e))

    return RecommendationResponse(
        pizzas=result.pizzas,
        beverages=result.beverages,
        waves=result.waves,
        total_pizzas=result.total_pizzas,
        total_beverages=result.total_beverages,
        order_summary=format_order_summary(result.waves),
    )


@app.post("/api/waves/plan")
async def plan_waves(request: WavePlanRequest) -> dict:
    """Suggest delivery waves for the host to review."""
    waves = calculate_waves(request.party_start, request.duration_hours, request.total_guests)
    return {"waves": [w.model_dump(mode="json") for w in waves]}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
