# File: utils/math_utils.py
"""Math and calculation utilities for Pet Care.

Pure Python math functions with ZERO Home Assistant dependencies.

Functions:
    - round_amount: Consistent rounding of money and weight values
    - calculate_percentage: Percentage calculations with rounding
"""

from __future__ import annotations

# Default float precision for amounts and weights
DATA_FLOAT_PRECISION = 2


def round_amount(value: float, precision: int = DATA_FLOAT_PRECISION) -> float:
    """Round a money or weight value to the configured precision.

    Examples:
        round_amount(10.456) → 10.46
        round_amount(10.0) → 10.0
    """
    return round(value, precision)


def calculate_percentage(
    current: float,
    target: float,
    precision: int = DATA_FLOAT_PRECISION,
) -> float:
    """Calculate a percentage with proper rounding.

    Returns:
        Percentage with proper rounding, or 0.0 if target is 0

    Examples:
        calculate_percentage(1, 3) → 33.33
        calculate_percentage(5, 0) → 0.0
    """
    if target <= 0:
        return 0.0
    return round_amount((current / target) * 100, precision)
