"""
Scenario harness for the recommendation engine.

Generates seeded random parties (mixed dietary restrictions, likes/dislikes,
non-respondents, delivery waves) and checks the engine's invariants on each.
NOT part of the pytest test suite. Run manually after changing the allocation
heuristics.

Usage:
    cd backend
    uv run python -m evals.run_scenarios
    uv run python -m evals.run_scenarios --parties 200 --seed 7
"""

import argparse
import logging
import math
import random
import sys
from dataclasses import dataclass, field
from datetime import datetime

from app.models.catalog import Guest
from app.models.party import PartyConfig
from app.models.recommendation import HalfAndHalfPizza, RecommendationResult
from app.services import catalog
from app.services.recommendation_service import generate_recommendations
from app.services.wave_planner import calculate_waves

logging.basicConfig(level=logging.WARNING)
logger = logging.getLogger(__name__)

NAMES = [
    "Alice", "Bob", "Charlie", "Diana", "Eve", "Frank", "Grace", "Henry", "Ivy",
    "Jack", "Kate", "Leo", "Mia", "Noah", "Olivia", "Pete", "Quinn", "Rose",
]
MEATS = {"pepperoni", "sausage", "bacon", "ham", "chicken", "anchovies"}
DAIRY = {"extra-cheese", "feta"}


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass
class ScenarioResult:
    case_id: str
    passed: bool
    details: str
    errors: list[str] = field(default_factory=list)


@dataclass
class ScenarioSummary:
    results: list[ScenarioResult]

    @property
    def pass_rate(self) -> float:
        if not self.results:
            return 0.0
        return sum(1 for r in self.results if r.passed) / len(self.results)


# ---------------------------------------------------------------------------
# Party generation
# ---------------------------------------------------------------------------


def generate_guest(rng: random.Random, index: int, dietary_chance: float = 0.15) -> Guest:
    dietary = [rng.choice(catalog.DIETARY_OPTIONS)] if rng.random() < dietary_chance else []

    toppings = [t.id for t in catalog.TOPPINGS]
    if "Vegetarian" in dietary or "Vegan" in dietary:
        toppings = [t for t in toppings if t not in MEATS]
    if "Vegan" in dietary or "Dairy-Free" in dietary:
        toppings = [t for t in toppings if t not in DAIRY]

    liked = rng.sample(toppings, rng.randint(1, 4))
    remaining = [t for t in toppings if t not in liked]
    disliked = rng.sample(remaining, rng.randint(0, 2))
    beverages = [b.id for b in catalog.BEVERAGES]

    return Guest(
        id=f"guest-{index}",
        name=NAMES[index % len(NAMES)],
        dietary_restrictions=dietary,
        liked_toppings=liked,
        disliked_toppings=disliked,
        liked_beverages=rng.sample(beverages, rng.randint(0, 2)),
    )


def generate_party(rng: random.Random) -> tuple[list[Guest], PartyConfig]:
    expected = rng.randint(0, 40)
    responding = rng.randint(0, max(expected, 5))
    guests = [generate_guest(rng, i) for i in range(responding)]

    waves = []
    if rng.random() < 0.5:
        waves = calculate_waves(datetime(2026, 6, 1, 18, 0), rng.choice([1.0, 2.0, 3.0, 4.0]), expected)

    return guests, PartyConfig(
        size=rng.choice(catalog.PIZZA_SIZES),
        style=rng.choice(catalog.PIZZA_STYLES),
        available_beverages=rng.sample(catalog.BEVERAGES, rng.randint(0, 3)),
        expected_guest_count=expected,
        waves=waves,
    )


# ---------------------------------------------------------------------------
# Invariant checks
# ---------------------------------------------------------------------------


def check_invariants(guests: list[Guest], party: PartyConfig, result: RecommendationResult) -> list[str]:
    errors = []
    buffered = max(0, (party.expected_guest_count or 0) - len(guests))

    accounted = sum(p.guest_count for p in result.pizzas)
    if accounted != len(guests) + buffered:
        errors.append(f"conservation: {accounted} != {len(guests)} + {buffered}")

    for pizza in result.pizzas:
        servings = pizza.size.servings_per_pizza
        needed = math.ceil(round(pizza.guest_count / servings, 9))
        if isinstance(pizza, HalfAndHalfPizza):
            left = {id(g) for g in pizza.left_half.guests}
            if any(id(g) in left for g in pizza.right_half.guests):
                errors.append(f"{pizza.id}: halves share guests")
            if len(pizza.left_half.guests) + len(pizza.right_half.guests) != pizza.guest_count:
                errors.append(f"{pizza.id}: halves do not add up to guest_count")
        elif pizza.quantity < needed:
            errors.append(f"{pizza.id}: quantity {pizza.quantity} < {needed}")

    if sum(w.total_pizzas for w in result.waves) < result.total_pizzas:
        errors.append("waves under-deliver the single-wave order")

    if len(result.waves) > 1:
        total_allocation = sum(w.wave.guest_allocation for w in result.waves)
        for rec in result.waves:
            share = rec.wave.guest_allocation / total_allocation
            if rec.total_pizzas < result.total_pizzas * share:
                errors.append(f"{rec.wave.id}: {rec.total_pizzas} pizzas < its share of {result.total_pizzas}")

    again = generate_recommendations(guests, party)
    if again.model_dump(mode="json") != result.model_dump(mode="json"):
        errors.append("non-deterministic output")
    return errors


def run_scenarios(parties: int, seed: int) -> ScenarioSummary:
    rng = random.Random(seed)
    results = []
    for i in range(parties):
        case_id = f"party-{i + 1}"
        guests, party = generate_party(rng)
        try:
            result = generate_recommendations(guests, party)
            errors = check_invariants(guests, party, result)
            details = (
                f"{len(guests)}/{party.expected_guest_count} guests, "
                f"{result.total_pizzas} pizzas, {len(result.waves)} waves"
            )
            results.append(ScenarioResult(case_id, not errors, details, errors))
        except Exception as e:
            results.append(ScenarioResult(case_id, False, "Exception during scenario", [str(e)]))
    return ScenarioSummary(results)


# ---------------------------------------------------------------------------
# Output formatting
# ---------------------------------------------------------------------------


def print_summary(summary: ScenarioSummary, verbose: bool = False) -> None:
    print(f"\n{'=' * 60}")
    print("  RECOMMENDATION ENGINE SCENARIOS")
    print(f"{'=' * 60}")
    print(f"  Pass rate: {summary.pass_rate:.0%}  ({len(summary.results)} parties)")
    print()
    for r in summary.results:
        if r.passed and not verbose:
            continue
        icon = "✓" if r.passed else "✗"
        print(f"  {icon} [{r.case_id}]  {r.details}")
        for err in r.errors:
            print(f"      → {err}")
    print()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> int:
    parser = argparse.ArgumentParser(description="Check engine invariants on random parties")
    parser.add_argument("--parties", type=int, default=100, help="Number of parties to generate")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--verbose", action="store_true", help="Also list passing parties")
    args = parser.parse_args()

    summary = run_scenarios(args.parties, args.seed)
    print_summary(summary, verbose=args.verbose)
    return 0 if summary.pass_rate == 1.0 else 1


if __name__ == "__main__":
    sys.exit(main())
