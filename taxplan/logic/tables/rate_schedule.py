"""Marginal income tax rate lookup (Malaysian individual brackets, 2024)."""
import math
from typing import Final

# (exclusive upper bound, rate) in ascending order; incomes past the last bound use TOP_RATE
RATE_BRACKETS: Final[tuple[tuple[float, float], ...]] = (
    (5_000, 0.0),
    (20_000, 0.01),
    (35_000, 0.03),
    (50_000, 0.08),
    (70_000, 0.13),
    (100_000, 0.21),
    (250_000, 0.24),
    (400_000, 0.245),
    (600_000, 0.25),
    (1_000_000, 0.26),
)
TOP_RATE: Final[float] = 0.30


def rate_for(income: float) -> float:
    """Return the marginal rate for an annual income.

    Negative and non-finite incomes are treated as zero income.
    """
    try:
        income = float(income)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(income) or income < 0:
        return 0.0
    for upper_bound, rate in RATE_BRACKETS:
        if income < upper_bound:
            return rate
    return TOP_RATE


__all__ = ["RATE_BRACKETS", "TOP_RATE", "rate_for"]
