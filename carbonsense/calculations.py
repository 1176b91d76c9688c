# carbonsense/calculations.py
"""Emission calculator: breakdown per category, display formatting and levels."""
import math
import random
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP

from .factors import (
    TRAVEL_EMISSION_FACTORS,
    ELECTRICITY_EMISSION_FACTOR,
    FOOD_EMISSION_FACTORS,
    DEFAULT_FOOD_TYPE,
    MOCK_TRAVEL_MODES,
    FOOD_TYPES,
)
from .schemas import LifestyleEntry, EmissionBreakdown


def to_fixed(value, places=2):
    """Round the exact binary value half up, as Number.toFixed does: 1.005 -> 1.00."""
    quantum = Decimal(1).scaleb(-places)
    return Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)


def round2(value):
    return float(to_fixed(value, 2))


def calculate_emissions(entry: LifestyleEntry) -> EmissionBreakdown:
    travel = entry.travel_distance_km * TRAVEL_EMISSION_FACTORS.get(entry.travel_mode, 0.0)
    electricity = entry.electricity_kwh * ELECTRICITY_EMISSION_FACTOR
    food = FOOD_EMISSION_FACTORS.get(entry.food_type, FOOD_EMISSION_FACTORS[DEFAULT_FOOD_TYPE])
    total = travel + electricity + food

    # each term is rounded on its own, so the parts may not add up to the total
    return EmissionBreakdown(
        travel=round2(travel),
        electricity=round2(electricity),
        food=round2(food),
        total=round2(total),
    )


def format_emissions(kg) -> str:
    if kg >= 1000:
        return f"{to_fixed(kg / 1000)}t"
    if kg >= 1:
        return f"{to_fixed(kg)}kg"
    return f"{math.floor(kg * 1000 + 0.5)}g"


def get_emission_level(total_kg) -> str:
    if total_kg < 3:
        return "excellent"
    if total_kg < 6:
        return "good"
    if total_kg < 10:
        return "average"
    return "high"


def generate_mock_week_data(today=None, rng=None):
    """Seven days of random entries ending today, oldest first."""
    today = today or date.today()
    rng = rng or random.Random()
    data = []
    for offset in range(6, -1, -1):
        travel_mode = rng.choice(MOCK_TRAVEL_MODES)
        food_type = rng.choice(FOOD_TYPES)
        distance = rng.randint(5, 44)
        kwh = rng.randint(2, 9)
        breakdown = calculate_emissions(LifestyleEntry(
            travel_distance_km=distance,
            travel_mode=travel_mode,
            electricity_kwh=kwh,
            food_type=food_type,
        ))
        data.append({
            "date": today - timedelta(days=offset),
            "travel_mode": travel_mode,
            "food_type": food_type,
            "travel_distance_km": distance,
            "electricity_kwh": kwh,
            **breakdown.model_dump(),
        })
    return data
