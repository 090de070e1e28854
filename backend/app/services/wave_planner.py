"""
Suggest delivery waves for a party from its start time and duration.

This runs on the party-configuration side: the host reviews (and may edit)
the suggested waves, which are then handed to the recommendation engine as
input like any other configuration.
"""

import math
from datetime import datetime, timedelta

from ..models.recommendation import Wave

FIRST_WAVE_OFFSET_MINUTES = -5  # first delivery lands 5 min before the party starts
FIRST_WAVE_WEIGHT = 1.25  # people arrive hungry
MIN_TIME_BEFORE_END_MINUTES = 45
WAVE_SPACING_MIN = 45
WAVE_SPACING_MAX = 60
SHORT_PARTY_THRESHOLD_HOURS = 1.5


def calculate_waves(party_start: datetime, duration_hours: float, total_guests: int) -> list[Wave]:
    """
    Evenly spaced waves between just-before-start and 45 min before the end.

    Spacing aims for the middle of the 45-60 min range. The first wave is
    overweighted; allocations are proportional to weight and the rounding
    residue goes to the last wave so they sum to total_guests.
    """
    first_wave_time = party_start + timedelta(minutes=FIRST_WAVE_OFFSET_MINUTES)

    if duration_hours < SHORT_PARTY_THRESHOLD_HOURS:
        return [
            Wave(
                id="wave-1",
                arrival_time=first_wave_time,
                guest_allocation=total_guests,
                weight=1.0,
                label="Single Wave",
            )
        ]

    party_end = party_start + timedelta(hours=duration_hours)
    last_possible = party_end - timedelta(minutes=MIN_TIME_BEFORE_END_MINUTES)
    window_minutes = (last_possible - first_wave_time).total_seconds() / 60

    optimal_spacing = (WAVE_SPACING_MIN + WAVE_SPACING_MAX) / 2
    max_waves = math.floor(window_minutes / WAVE_SPACING_MIN) + 1
    # round half up
    optimal_waves = math.floor(window_minutes / optimal_spacing + 0.5) + 1
    wave_count = min(max_waves, max(2, optimal_waves))
    spacing = window_minutes / (wave_count - 1)

    total_weight = FIRST_WAVE_WEIGHT + (wave_count - 1) * 1.0
    waves = []
    for i in range(wave_count):
        weight = FIRST_WAVE_WEIGHT if i == 0 else 1.0
        waves.append(
            Wave(
                id=f"wave-{i + 1}",
                arrival_time=first_wave_time + timedelta(minutes=i * spacing),
                guest_allocation=math.floor(weight / total_weight * total_guests + 0.5),
                weight=weight,
                label="Wave 1 (Party Start)" if i == 0 else f"Wave {i + 1}",
            )
        )

    waves[-1].guest_allocation += total_guests - sum(w.guest_allocation for w in waves)
    return waves
