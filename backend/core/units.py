"""
Liquor quantity helpers.

A liquor amount is kept two ways: whole bottles plus leftover millilitres,
and a single total in millilitres. These helpers move between the two.
"""

from typing import Tuple

BOTTLE_ML = 750

# Common partial-bottle readings, in millilitres of a standard bottle
STANDARD_FRACTIONS = {
    "0.25": 187.5,
    "0.5": 375,
    "0.75": 562.5,
    "1": 750,
}


def calculate_total_ml(bottles: float, milliliters: float, capacity: int = BOTTLE_ML) -> float:
    """Converts bottles and milliliters to total milliliters"""
    return (bottles * capacity) + milliliters


def ml_to_bottles_and_ml(total_ml: float, capacity: int = BOTTLE_ML) -> Tuple[int, float]:
    """Converts total milliliters to whole bottles and the leftover milliliters"""
    bottles, milliliters = divmod(total_ml, capacity)
    return int(bottles), milliliters


def format_liquor_quantity(bottles: float, milliliters: float) -> str:
    if bottles == 0 and milliliters == 0:
        return "0"

    parts = []
    if bottles > 0:
        parts.append(f"{format_number(bottles)} bottle{'s' if bottles != 1 else ''}")
    if milliliters > 0:
        parts.append(f"{format_number(milliliters)}ML")
    return " and ".join(parts)


def fraction_to_ml(fraction: float, capacity: int = BOTTLE_ML) -> float:
    return fraction * capacity


def format_number(x: float):
    # 3.0 -> 3, keep real fractions as-is
    return int(x) if float(x).is_integer() else x
