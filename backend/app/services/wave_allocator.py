"""
Wave allocation: split a finished order across staggered deliveries.

Default (proportional) mode: each wave's share is its guest_allocation over
the total. A wave's pizza target is its share of the whole order, rounded up.
Whole pizzas are then dealt from the order lines, in order, earliest wave
first; a line is only split when its quantity is above one. Because every
target is rounded up the waves together may need a few more pizzas than the
single-wave order. Those extra units repeat the order from the top (the most
ordered lines) and carry no guests.

Beverages are ordered once: the whole list rides with the earliest wave.

Guest-assignment mode (only when every respondent carries a wave_id that
matches a configured wave): the pizza pipeline is re-run per wave subset.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence, Union

from ..models.catalog import Guest
from ..models.recommendation import (
    BeverageRecommendation,
    HalfAndHalfPizza,
    PlainPizza,
    Wave,
    WaveRecommendation,
)

logger = logging.getLogger(__name__)

Pizza = Union[PlainPizza, HalfAndHalfPizza]
PizzaBuilder = Callable[[list[Guest], Optional[int]], list[Pizza]]

SINGLE_WAVE_ID = "wave-1"
SINGLE_WAVE_LABEL = "All Pizzas"

_PRECISION = 9


def _arrival_key(arrival: datetime) -> datetime:
    # Naive times are read as UTC so they can be ordered next to aware ones.
    return arrival if arrival.tzinfo is not None else arrival.replace(tzinfo=timezone.utc)


def _mixes_timezones(arrivals: Sequence[datetime]) -> bool:
    return len({a.tzinfo is None for a in arrivals}) > 1


def synthetic_wave(guest_allocation: int, waves: Sequence[Wave] = ()) -> Wave:
    arrivals = [w.arrival_time for w in waves if w.arrival_time is not None]
    return Wave(
        id=SINGLE_WAVE_ID,
        arrival_time=min(arrivals, key=_arrival_key) if arrivals else None,
        guest_allocation=guest_allocation,
        weight=1.0,
        label=SINGLE_WAVE_LABEL,
    )


def is_multi_wave(waves: Sequence[Wave]) -> bool:
    """True when waves describe a usable staggered delivery."""
    if len(waves) < 2:
        return False
    if any(w.arrival_time is None for w in waves):
        logger.warning("Wave configuration has waves without arrival times, using a single wave")
        return False
    if _mixes_timezones([w.arrival_time for w in waves]):
        logger.warning("Wave arrival times mix timezone-aware and naive values, using a single wave")
        return False
    if any(w.guest_allocation < 0 for w in waves):
        logger.warning("Wave configuration has negative guest allocations, using a single wave")
        return False
    if sum(w.guest_allocation for w in waves) <= 0:
        logger.warning("Wave guest allocations sum to zero, using a single wave")
        return False
    return True


def sort_waves(waves: Sequence[Wave]) -> list[Wave]:
    return sorted(waves, key=lambda w: _arrival_key(w.arrival_time))


def apportion(total: int, shares: Sequence[float]) -> list[int]:
    """
    Split an integer across shares (summing to 1).

    Every slot but the first one with a positive share is floored; that slot
    takes the remainder.
    """
    counts = [math.floor(round(total * share, _PRECISION)) for share in shares]
    first = next((i for i, share in enumerate(shares) if share > 0), 0)
    counts[first] = total - sum(c for i, c in enumerate(counts) if i != first)
    return counts


def wave_targets(total: int, shares: Sequence[float]) -> list[int]:
    """Pizzas each wave receives: its share of the whole order, rounded up."""
    return [math.ceil(round(total * share, _PRECISION)) for share in shares]


def deal_units(quantities: Sequence[int], targets: Sequence[int]) -> tuple[list[list[int]], list[list[int]]]:
    """
    Hand out pizza units line by line until every wave target is met.

    Returns (ordered, extra): per wave, how many units of each line it gets
    from the order itself and how many on top of it.
    """
    units = [line for line, quantity in enumerate(quantities) for _ in range(quantity)]
    ordered = [[0] * len(quantities) for _ in targets]
    extra = [[0] * len(quantities) for _ in targets]

    position = 0
    repeat = 0
    for wave_index, target in enumerate(targets):
        for _ in range(target):
            if position < len(units):
                ordered[wave_index][units[position]] += 1
                position += 1
            elif units:
                extra[wave_index][units[repeat % len(units)]] += 1
                repeat += 1
    return ordered, extra


def _without_guests(pizza: Pizza, quantity: int) -> Pizza:
    update = {"quantity": quantity, "guest_count": 0, "guests": []}
    if isinstance(pizza, HalfAndHalfPizza):
        update["left_half"] = pizza.left_half.model_copy(update={"guests": []}, deep=True)
        update["right_half"] = pizza.right_half.model_copy(update={"guests": []}, deep=True)
    return pizza.model_copy(update=update, deep=True)


def _split_line(pizza: Pizza, ordered: Sequence[int], extra: Sequence[int]) -> list[Optional[Pizza]]:
    """One part per wave (None where the wave gets nothing of this line)."""
    if pizza.quantity > 0:
        guest_shares = [count / pizza.quantity for count in ordered]
    else:
        guest_shares = [0.0 for _ in ordered]
    guest_counts = apportion(pizza.guest_count, guest_shares) if any(guest_shares) else [0] * len(ordered)

    parts: list[Optional[Pizza]] = []
    offset = 0
    for count, added, guest_count in zip(ordered, extra, guest_counts):
        if count + added == 0:
            parts.append(None)
        elif count == 0:
            parts.append(_without_guests(pizza, added))
        elif count == pizza.quantity:
            parts.append(pizza.model_copy(update={"quantity": count + added}, deep=True))
        else:
            members = pizza.guests[offset:offset + guest_count]
            offset += guest_count
            parts.append(
                pizza.model_copy(
                    update={"quantity": count + added, "guest_count": guest_count, "guests": members},
                    deep=True,
                )
            )
    return parts


def allocate(
    pizzas: Sequence[Pizza],
    beverages: Sequence[BeverageRecommendation],
    waves: Sequence[Wave],
    guest_allocation: Optional[int] = None,
) -> list[WaveRecommendation]:
    """
    Distribute pizzas across waves, earliest first.

    With fewer than two usable waves the unmodified lists come back as a
    single synthetic wave.
    """
    if not is_multi_wave(waves):
        if guest_allocation is None:
            guest_allocation = sum(p.guest_count for p in pizzas)
        wave = synthetic_wave(guest_allocation, waves)
        return [WaveRecommendation.build(wave, list(pizzas), list(beverages))]

    ordered_waves = sort_waves(waves)
    total_allocation = sum(w.guest_allocation for w in ordered_waves)
    shares = [w.guest_allocation / total_allocation for w in ordered_waves]

    targets = wave_targets(sum(p.quantity for p in pizzas), shares)
    ordered, extra = deal_units([p.quantity for p in pizzas], targets)

    per_wave: list[list[Pizza]] = [[] for _ in ordered_waves]
    for line, pizza in enumerate(pizzas):
        parts = _split_line(pizza, [o[line] for o in ordered], [e[line] for e in extra])
        for wave_pizzas, part in zip(per_wave, parts):
            if part is not None:
                wave_pizzas.append(part)

    results = []
    for position, (wave, wave_pizzas) in enumerate(zip(ordered_waves, per_wave)):
        wave_beverages = list(beverages) if position == 0 else []
        results.append(WaveRecommendation.build(wave, wave_pizzas, wave_beverages))

    logger.info(
        "[WAVES] %d pizzas split across %d waves: %s",
        sum(p.quantity for p in pizzas),
        len(results),
        [r.total_pizzas for r in results],
    )
    return results


def guests_assigned_to_waves(guests: Sequence[Guest], waves: Sequence[Wave]) -> bool:
    wave_ids = {w.id for w in waves}
    return bool(guests) and all(g.wave_id in wave_ids for g in guests)


def allocate_by_guest_assignment(
    pizzas: Sequence[Pizza],
    beverages: Sequence[BeverageRecommendation],
    waves: Sequence[Wave],
    guests: Sequence[Guest],
    build: PizzaBuilder,
) -> list[WaveRecommendation]:
    """
    Re-cluster each wave's own guests, using the wave's guest_allocation as
    its expected head count.

    Falls back to the proportional split if per-wave clustering would order
    fewer pizzas than the single-wave computation.
    """
    if not is_multi_wave(waves) or not guests_assigned_to_waves(guests, waves):
        return allocate(pizzas, beverages, waves)

    results = []
    for position, wave in enumerate(sort_waves(waves)):
        subset = [g for g in guests if g.wave_id == wave.id]
        wave_pizzas = build(subset, wave.guest_allocation)
        for pizza in wave_pizzas:
            pizza.id = f"{wave.id}-{pizza.id}"
        wave_beverages = list(beverages) if position == 0 else []
        results.append(WaveRecommendation.build(wave, wave_pizzas, wave_beverages))

    single_total = sum(p.quantity for p in pizzas)
    if sum(r.total_pizzas for r in results) < single_total:
        logger.warning("[WAVES] Per-wave clustering under-delivers, using proportional split")
        return allocate(pizzas, beverages, waves)
    return results
