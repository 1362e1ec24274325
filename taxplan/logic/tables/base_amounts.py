"""Relief category base amounts.

One table maps a normalized category name to the canonical relief ceiling used
to estimate a saving: ``estimate = base(category) x rate_for(income)``.
Category names coming from AI text vary a lot ("EPF", "EPF/KWSP Contribution",
"Maximize KWSP"), so lookup goes through two steps:

  1. exact synonym match on the normalized name;
  2. keyword match on the words of the name (first rule wins).

Unknown categories fall back to 1% of income.
"""
import math
import re
from types import MappingProxyType
from typing import Callable, Optional

from taxplan.logic.tables.rate_schedule import rate_for
from taxplan.utilities.constants import MAX_SAVING_RATIO, MIN_ESTIMATE_RATE, SELF_EMPLOYED

BaseRule = Callable[[float, str], float]

_BASE_RULES: "MappingProxyType[str, BaseRule]" = MappingProxyType({
    "Lifestyle Relief": lambda income, employment: 2500.0,
    "Education Relief": lambda income, employment: 7000.0,
    "Medical Relief": lambda income, employment: 5000.0,
    "EPF Contribution": lambda income, employment: min(income * 0.11, 4000.0),
    "Insurance Premium": lambda income, employment: 3000.0,
    "Donation": lambda income, employment: 1000.0,
    "SSPN Savings": lambda income, employment: 3000.0,
    "SOCSO Contribution": lambda income, employment: 350.0,
    "Business Expenses": lambda income, employment: income * 0.15 if employment == SELF_EMPLOYED else 1000.0,
    "Home Office": lambda income, employment: 2400.0 if employment == SELF_EMPLOYED else 800.0,
    "Housing Loan Interest": lambda income, employment: 3000.0,
    "Long-term Investment": lambda income, employment: income * 0.02,
    "Retirement Planning (PRS)": lambda income, employment: 3000.0,
    "Capital Investment": lambda income, employment: income * 0.04,
    "Business Structure": lambda income, employment: income * 0.035,
})

_SYNONYMS: "MappingProxyType[str, str]" = MappingProxyType({
    "lifestyle": "Lifestyle Relief",
    "lifestyle relief": "Lifestyle Relief",
    "tech & entertainment relief": "Lifestyle Relief",
    "lifestyle optimization": "Lifestyle Relief",
    "personal expenses relief": "Lifestyle Relief",
    "education": "Education Relief",
    "education relief": "Education Relief",
    "education fees": "Education Relief",
    "professional development": "Education Relief",
    "skills enhancement": "Education Relief",
    "education investment": "Education Relief",
    "medical": "Medical Relief",
    "medical relief": "Medical Relief",
    "medical expenses": "Medical Relief",
    "healthcare optimization": "Medical Relief",
    "wellness benefits": "Medical Relief",
    "medical tax planning": "Medical Relief",
    "epf": "EPF Contribution",
    "epf contribution": "EPF Contribution",
    "epf contributions": "EPF Contribution",
    "kwsp": "EPF Contribution",
    "epf kwsp": "EPF Contribution",
    "epf kwsp contribution": "EPF Contribution",
    "insurance": "Insurance Premium",
    "insurance premium": "Insurance Premium",
    "insurance premiums": "Insurance Premium",
    "life insurance": "Insurance Premium",
    "donation": "Donation",
    "donations": "Donation",
    "charitable giving": "Donation",
    "social impact relief": "Donation",
    "philanthropy": "Donation",
    "zakat": "Donation",
    "sspn": "SSPN Savings",
    "sspn savings": "SSPN Savings",
    "education savings": "SSPN Savings",
    "socso": "SOCSO Contribution",
    "socso contribution": "SOCSO Contribution",
    "perkeso": "SOCSO Contribution",
    "business expenses": "Business Expenses",
    "operating expenses": "Business Expenses",
    "home office": "Home Office",
    "workspace": "Home Office",
    "housing loan": "Housing Loan Interest",
    "housing loan interest": "Housing Loan Interest",
    "mortgage interest": "Housing Loan Interest",
    "investment": "Long-term Investment",
    "investments": "Long-term Investment",
    "investment planning": "Long-term Investment",
    "long term investment": "Long-term Investment",
    "retirement": "Retirement Planning (PRS)",
    "retirement planning": "Retirement Planning (PRS)",
    "prs": "Retirement Planning (PRS)",
    "capital investment": "Capital Investment",
    "capital allowance": "Capital Investment",
    "business structure": "Business Structure",
    "business structure optimization": "Business Structure",
    "business registration": "Business Structure",
})

# Word-level rules for names no synonym covers; order matters ("education insurance" is insurance)
_KEYWORD_RULES: tuple[tuple[frozenset, str], ...] = (
    (frozenset({"sspn"}), "SSPN Savings"),
    (frozenset({"epf", "kwsp"}), "EPF Contribution"),
    (frozenset({"socso", "perkeso"}), "SOCSO Contribution"),
    (frozenset({"insurance", "takaful"}), "Insurance Premium"),
    (frozenset({"lifestyle"}), "Lifestyle Relief"),
    (frozenset({"housing", "mortgage"}), "Housing Loan Interest"),
    (frozenset({"donation", "donations", "charity", "charitable", "zakat"}), "Donation"),
    (frozenset({"office", "workspace"}), "Home Office"),
    (frozenset({"expense", "expenses"}), "Business Expenses"),
    (frozenset({"capital"}), "Capital Investment"),
    (frozenset({"structure", "registration"}), "Business Structure"),
    (frozenset({"retirement", "prs", "pension"}), "Retirement Planning (PRS)"),
    (frozenset({"investment", "investments"}), "Long-term Investment"),
    (frozenset({"medical", "healthcare", "health", "wellness"}), "Medical Relief"),
    (frozenset({"education", "course", "courses", "skills"}), "Education Relief"),
)


def normalize_category(name: str) -> str:
    """Lower-case a category label and strip punctuation and parenthesised suffixes."""
    if not isinstance(name, str):
        return ""
    n = name.strip().lower()
    n = re.sub(r"\([^)]*\)", " ", n)
    n = re.sub(r"[/\-_:]", " ", n)
    n = re.sub(r"[^a-z0-9& ]", "", n)
    return re.sub(r"\s+", " ", n).strip()


def canonical_category(name: str) -> Optional[str]:
    """Resolve a free-text category to its canonical table entry, or None if unknown."""
    key = normalize_category(name)
    if not key:
        return None
    if key in _SYNONYMS:
        return _SYNONYMS[key]
    words = set(key.split())
    for keywords, canonical in _KEYWORD_RULES:
        if words & keywords:
            return canonical
    return None


def base_amount(category: str, income: float, employment_type: str) -> float:
    """Base deductible amount for a category; unknown categories use 1% of income."""
    canonical = canonical_category(category)
    if canonical is None:
        return income * 0.01
    return _BASE_RULES[canonical](income, employment_type)


def estimate_saving(category: str, income: float, employment_type: str) -> float:
    """Bounded saving estimate: base x marginal rate, capped at MAX_SAVING_RATIO of income.

    The 0% bracket is lifted to MIN_ESTIMATE_RATE so a positive income always
    yields a positive estimate.
    """
    if not income or income <= 0:
        return 0.0
    rate = max(rate_for(income), MIN_ESTIMATE_RATE)
    cap = income * MAX_SAVING_RATIO
    value = min(base_amount(category, income, employment_type) * rate, cap)
    rounded = round(value, 2)
    if rounded > cap or rounded <= 0 or not math.isfinite(rounded):
        return value
    return rounded


def known_categories() -> tuple[str, ...]:
    return tuple(_BASE_RULES.keys())


__all__ = ["normalize_category", "canonical_category", "base_amount", "estimate_saving", "known_categories"]
