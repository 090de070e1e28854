"""
Tests for wave_allocator.py.
"""

import math
from datetime import datetime, timezone

import pytest

from app.models.recommendation import (
    BeverageRecommendation,
    HalfAndHalfPizza,
    PizzaHalf,
    PlainPizza,
    Wave,
)
from app.services import catalog
from app.services.wave_allocator import (
    SINGLE_WAVE_ID,
    SINGLE_WAVE_LABEL,
    allocate,
    apportion,
    deal_units,
    guests_assigned_to_waves,
    is_multi_wave,
    synthetic_wave,
    wave_targets,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _plain(make_guest, size, quantity, guest_count, pizza_id="pizza-1", with_guests=True):
    guests = [make_guest() for _ in range(guest_count)] if with_guests else []
    return PlainPizza(
        id=pizza_id,
        guest_count=guest_count,
        guests=guests,
        size=size,
        quantity=quantity,
        label="Cheese",
    )


def _half(make_guest, size, pizza_id="pizza-9"):
    left = PizzaHalf(guests=[make_guest()])
    right = PizzaHalf(guests=[make_guest()])
    return HalfAndHalfPizza(
        id=pizza_id,
        guest_count=2,
        guests=[*left.guests, *right.guests],
        size=size,
        quantity=1,
        left_half=left,
        right_half=right,
    )


def _drinks():
    water = catalog.resolve_beverages(["water"])[0]
    return [BeverageRecommendation(id="bev-water", beverage=water, quantity=20, guest_count=20)]


def _waves(*allocations):
    return [
        Wave(id=f"wave-{i}", arrival_time=datetime(2026, 6, 1, 18 + i), guest_allocation=allocation)
        for i, allocation in enumerate(allocations, 1)
    ]


class TestApportion:
    def test_earliest_takes_remainder(self):
        assert apportion(7, [0.25, 0.75]) == [2, 5]

    def test_even_split(self):
        assert apportion(4, [0.5, 0.5]) == [2, 2]

    def test_zero_share_first_wave(self):
        assert apportion(3, [0.0, 1.0]) == [0, 3]

    @pytest.mark.parametrize("total", [0, 1, 2, 5, 13])
    def test_sum_preserved(self, total):
        assert sum(apportion(total, [0.4, 0.35, 0.25])) == total


class TestWaveTargets:
    def test_rounded_up_per_wave(self):
        assert wave_targets(3, [0.5, 0.25, 0.25]) == [2, 1, 1]

    def test_exact_shares(self):
        assert wave_targets(4, [0.5, 0.5]) == [2, 2]

    def test_zero_share_gets_nothing(self):
        assert wave_targets(5, [0.5, 0.0, 0.5]) == [3, 0, 3]

    def test_empty_order(self):
        assert wave_targets(0, [0.5, 0.5]) == [0, 0]


class TestDealUnits:
    def test_lines_dealt_in_order(self):
        ordered, extra = deal_units([2, 1, 1], [2, 2])
        assert ordered == [[2, 0, 0], [0, 1, 1]]
        assert extra == [[0, 0, 0], [0, 0, 0]]

    def test_line_split_only_when_needed(self):
        ordered, _ = deal_units([3, 1], [2, 2])
        assert ordered == [[2, 0], [1, 1]]

    def test_extra_units_repeat_from_the_top(self):
        ordered, extra = deal_units([1, 1, 1], [2, 1, 1])
        assert ordered == [[1, 1, 0], [0, 0, 1], [0, 0, 0]]
        assert extra == [[0, 0, 0], [0, 0, 0], [1, 0, 0]]


class TestIsMultiWave:
    def test_two_valid_waves(self, two_waves):
        assert is_multi_wave(two_waves) is True

    def test_single_wave(self, two_waves):
        assert is_multi_wave(two_waves[:1]) is False

    def test_zero_allocation(self, two_waves):
        waves = [w.model_copy(update={"guest_allocation": 0}) for w in two_waves]
        assert is_multi_wave(waves) is False

    def test_missing_arrival_time(self, two_waves):
        waves = [two_waves[0], two_waves[1].model_copy(update={"arrival_time": None})]
        assert is_multi_wave(waves) is False

    def test_negative_allocation(self, two_waves):
        waves = [two_waves[0], two_waves[1].model_copy(update={"guest_allocation": -5})]
        assert is_multi_wave(waves) is False

    def test_mixed_timezones(self, two_waves):
        aware = datetime(2026, 6, 1, 18, 0, tzinfo=timezone.utc)
        waves = [two_waves[0], two_waves[1].model_copy(update={"arrival_time": aware})]
        assert is_multi_wave(waves) is False

    def test_all_aware(self, two_waves):
        waves = [w.model_copy(update={"arrival_time": w.arrival_time.replace(tzinfo=timezone.utc)}) for w in two_waves]
        assert is_multi_wave(waves) is True


class TestSingleWave:
    def test_no_waves_gives_synthetic_wave(self, make_guest, xl_size):
        pizzas = [_plain(make_guest, xl_size, 2, 8)]
        result = allocate(pizzas, _drinks(), [], guest_allocation=8)
        assert len(result) == 1
        assert result[0].wave.id == SINGLE_WAVE_ID
        assert result[0].wave.label == SINGLE_WAVE_LABEL
        assert result[0].wave.guest_allocation == 8
        assert result[0].pizzas == pizzas
        assert result[0].total_pizzas == 2
        assert result[0].total_beverages == 20

    def test_one_configured_wave_becomes_synthetic(self, make_guest, xl_size, two_waves):
        pizzas = [_plain(make_guest, xl_size, 2, 8)]
        result = allocate(pizzas, [], two_waves[:1])
        assert len(result) == 1
        assert result[0].wave.id == SINGLE_WAVE_ID
        assert result[0].wave.label == SINGLE_WAVE_LABEL
        assert result[0].wave.arrival_time == two_waves[0].arrival_time
        assert result[0].wave.guest_allocation == 8
        assert result[0].pizzas == pizzas

    def test_malformed_waves_fall_back(self, make_guest, xl_size, two_waves):
        waves = [w.model_copy(update={"guest_allocation": 0}) for w in two_waves]
        result = allocate([_plain(make_guest, xl_size, 3, 12)], _drinks(), waves)
        assert len(result) == 1
        assert result[0].total_pizzas == 3
        assert result[0].wave.arrival_time == datetime(2026, 6, 1, 18, 0)

    def test_mixed_timezones_fall_back(self, make_guest, xl_size, two_waves):
        aware = datetime(2026, 6, 1, 17, 0, tzinfo=timezone.utc)
        waves = [two_waves[0], two_waves[1].model_copy(update={"arrival_time": aware})]
        result = allocate([_plain(make_guest, xl_size, 3, 12)], [], waves)
        assert len(result) == 1
        assert result[0].total_pizzas == 3
        assert result[0].wave.arrival_time == aware

    def test_synthetic_wave_earliest_arrival_across_timezones(self):
        naive = Wave(id="a", arrival_time=datetime(2026, 6, 1, 19, 0))
        aware = Wave(id="b", arrival_time=datetime(2026, 6, 1, 18, 0, tzinfo=timezone.utc))
        assert synthetic_wave(10, [naive, aware]).arrival_time == aware.arrival_time


class TestProportionalSplit:
    def test_sorted_by_arrival(self, make_guest, xl_size, two_waves):
        result = allocate([_plain(make_guest, xl_size, 4, 16)], [], two_waves)
        assert [r.wave.id for r in result] == ["wave-1", "wave-2"]

    def test_odd_quantity_rounds_each_wave_up(self, make_guest, xl_size, two_waves):
        result = allocate([_plain(make_guest, xl_size, 5, 20)], [], two_waves)
        assert [r.total_pizzas for r in result] == [3, 3]
        assert [r.pizzas[0].guest_count for r in result] == [12, 8]
        assert [len(r.pizzas[0].guests) for r in result] == [12, 8]

    def test_guests_not_duplicated_across_waves(self, make_guest, xl_size, two_waves):
        result = allocate([_plain(make_guest, xl_size, 4, 16)], [], two_waves)
        first = {g.id for g in result[0].pizzas[0].guests}
        second = {g.id for g in result[1].pizzas[0].guests}
        assert not first & second
        assert len(first | second) == 16

    def test_single_pizza_lines_spread_across_waves(self, make_guest, xl_size, two_waves):
        pizzas = [_half(make_guest, xl_size, pizza_id=f"pizza-{i}") for i in range(1, 5)]
        result = allocate(pizzas, [], two_waves)
        assert [r.total_pizzas for r in result] == [2, 2]
        assert [p.id for p in result[0].pizzas] == ["pizza-1", "pizza-2"]
        assert [p.id for p in result[1].pizzas] == ["pizza-3", "pizza-4"]

    def test_lone_half_and_half_repeated_without_guests(self, make_guest, xl_size, two_waves):
        result = allocate([_half(make_guest, xl_size)], [], two_waves)
        first, second = (r.pizzas[0] for r in result)
        assert isinstance(second, HalfAndHalfPizza)
        assert first.guest_count == 2
        assert second.quantity == 1
        assert second.guest_count == 0
        assert second.left_half.guests == []
        assert second.right_half.guests == []

    def test_non_respondent_line_split(self, make_guest, xl_size, two_waves):
        buffer = _plain(make_guest, xl_size, 2, 8, with_guests=False)
        buffer.is_for_non_respondents = True
        result = allocate([buffer], [], two_waves)
        assert [r.pizzas[0].guest_count for r in result] == [4, 4]
        assert all(r.pizzas[0].is_for_non_respondents for r in result)

    def test_beverages_ordered_once_with_first_wave(self, make_guest, xl_size, two_waves):
        result = allocate([_plain(make_guest, xl_size, 4, 16)], _drinks(), two_waves)
        assert result[0].total_beverages == 20
        assert result[1].beverages == []

    def test_uneven_allocation(self, make_guest, xl_size):
        result = allocate([_plain(make_guest, xl_size, 3, 12)], [], _waves(6, 3, 3))
        assert [r.total_pizzas for r in result] == [2, 1, 1]
        assert all(r.total_pizzas > 0 for r in result)
        assert sum(r.pizzas[0].guest_count for r in result) == 12

    def test_input_not_mutated(self, make_guest, xl_size, two_waves):
        pizza = _plain(make_guest, xl_size, 5, 20)
        allocate([pizza], [], two_waves)
        assert pizza.quantity == 5
        assert len(pizza.guests) == 20

    @pytest.mark.parametrize(
        "allocations",
        [(10, 10), (6, 3, 3), (1, 1, 1, 1), (5, 0, 5), (9, 1), (2, 7, 4)],
    )
    @pytest.mark.parametrize(
        "quantities, halves",
        [([1, 1, 1], 0), ([3, 1, 1, 2], 2), ([], 5), ([7], 1), ([2, 2], 0)],
    )
    def test_every_wave_gets_its_share(self, make_guest, xl_size, allocations, quantities, halves):
        pizzas = [
            _plain(make_guest, xl_size, q, q * 4, pizza_id=f"pizza-{i}")
            for i, q in enumerate(quantities, 1)
        ]
        pizzas += [_half(make_guest, xl_size, pizza_id=f"half-{i}") for i in range(halves)]
        total = sum(p.quantity for p in pizzas)
        waves = _waves(*allocations)

        result = allocate(pizzas, [], waves)

        assert sum(r.total_pizzas for r in result) >= total
        assert sum(p.guest_count for r in result for p in r.pizzas) == sum(p.guest_count for p in pizzas)
        for rec in result:
            share = rec.wave.guest_allocation / sum(allocations)
            assert rec.total_pizzas >= total * share
            assert rec.total_pizzas == math.ceil(round(total * share, 9))
            if rec.wave.guest_allocation > 0:
                assert rec.total_pizzas > 0


class TestGuestsAssignedToWaves:
    def test_all_assigned(self, make_guest, two_waves):
        guests = [make_guest(wave_id="wave-1"), make_guest(wave_id="wave-2")]
        assert guests_assigned_to_waves(guests, two_waves) is True

    def test_partially_assigned(self, make_guest, two_waves):
        guests = [make_guest(wave_id="wave-1"), make_guest()]
        assert guests_assigned_to_waves(guests, two_waves) is False

    def test_unknown_wave(self, make_guest, two_waves):
        assert guests_assigned_to_waves([make_guest(wave_id="wave-7")], two_waves) is False

    def test_no_guests(self, two_waves):
        assert guests_assigned_to_waves([], two_waves) is False
