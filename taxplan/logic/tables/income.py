"""Income parsing helpers shared by the pipeline and the fallback synthesizer."""
import logging
import math
import re

from taxplan.utilities.constants import DEFAULT_FALLBACK_INCOME, MAX_INCOME, MIN_USABLE_INCOME

logger = logging.getLogger(__name__)


def parse_income(value) -> float:
    """Parse income permissively ("RM 60,000", "60000.5", 60000); anything unusable is 0.0.

    Amounts above MAX_INCOME are unusable too: savings summed over such an
    income would overflow a float.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        clean = re.sub(r"(?i)rm|myr|[$,\s]", "", str(value))
        try:
            number = float(clean)
        except ValueError:
            return 0.0
    if not math.isfinite(number) or number < 0 or number > MAX_INCOME:
        return 0.0
    return number


def is_usable_income(number: float) -> bool:
    return MIN_USABLE_INCOME <= number <= MAX_INCOME


def effective_income(income) -> float:
    """Income used for estimates: unusable incomes (below RM 1, unparseable) use DEFAULT_FALLBACK_INCOME."""
    number = parse_income(income)
    if not is_usable_income(number):
        logger.warning("Income %r is not usable, defaulting to %.2f", income, DEFAULT_FALLBACK_INCOME)
        return DEFAULT_FALLBACK_INCOME
    return number
