"""Bound checks, amount repair and breadth top-up for extracted suggestions.

Order of work for one list:

  1. nothing extracted -> fallback synthesis for the whole list
  2. per-candidate bound check ``0 < saving <= income * MAX_SAVING_RATIO``,
     violators get ``estimate_saving(category)``; category and text are kept
  3. a non-positive working total -> discard everything, fallback synthesis
  4. fewer than MIN_SUGGESTIONS -> append categories from TOP_UP_PRIORITY
     that are not already present (compared on canonical category)

The AI's own total is never trusted; a disagreement is only reported.
"""
import logging
import math
from typing import Iterable, List, NamedTuple, Optional

from taxplan.domain.Suggestion import Suggestion
from taxplan.logic.fallback.synthesizer import build_suggestion, synthesize_fallback
from taxplan.logic.tables.base_amounts import canonical_category, estimate_saving
from taxplan.utilities.constants import (
    MAX_SAVING_RATIO,
    MIN_SUGGESTIONS,
    SAVINGS_TOLERANCE,
    TOP_UP_PRIORITY,
)

logger = logging.getLogger(__name__)

EXTRACTION_EMPTY = "extraction_empty"
AMOUNT_REPAIRED = "amount_repaired"
TOTAL_NON_POSITIVE = "total_non_positive"
BREADTH_TOP_UP = "breadth_top_up"
REPORTED_TOTAL_MISMATCH = "reported_total_mismatch"
INCOME_DEFAULTED = "income_defaulted"

# Relative difference tolerated between the AI's total and the computed one
_REPORTED_TOTAL_TOLERANCE = 0.01


class Anomaly(NamedTuple):
    code: str
    detail: str = ""


class RepairResult(NamedTuple):
    suggestions: List[Suggestion]
    anomalies: List[Anomaly]
    used_fallback: bool

    @property
    def total(self) -> float:
        return math.fsum(s.potential_saving for s in self.suggestions)

    def has(self, code: str) -> bool:
        return any(a.code == code for a in self.anomalies)


def is_within_bounds(amount, income: float) -> bool:
    try:
        amount = float(amount)
    except (TypeError, ValueError):
        return False
    if not math.isfinite(amount):
        return False
    return 0 < amount <= income * MAX_SAVING_RATIO + SAVINGS_TOLERANCE


def _as_suggestion(item) -> Suggestion:
    if isinstance(item, Suggestion):
        return item
    # extraction Candidate (category, suggestion_text, potential_saving)
    return Suggestion(item.category, item.suggestion_text, item.potential_saving)


def _record(anomalies: List[Anomaly], code: str, detail: str = ""):
    anomalies.append(Anomaly(code, detail))
    logger.warning("Tax plan anomaly %s: %s", code, detail)


def _fallback(income, employment_type, plan_type, variant, anomalies) -> RepairResult:
    suggestions = synthesize_fallback(income, employment_type, plan_type, variant)
    logger.info("Using %d rule-based suggestions for %s/%s", len(suggestions), employment_type, plan_type)
    return RepairResult(suggestions, anomalies, True)


def top_up(suggestions: List[Suggestion], income: float, employment_type: str,
           variant: int = 0) -> List[Suggestion]:
    """Extra suggestions needed to reach MIN_SUGGESTIONS, in priority order."""
    present = {canonical_category(s.category) or s.category for s in suggestions}
    extra = []
    for category in TOP_UP_PRIORITY:
        if len(suggestions) + len(extra) >= MIN_SUGGESTIONS:
            break
        if category in present:
            continue
        extra.append(build_suggestion(category, income, employment_type, variant))
        present.add(category)
    return extra


def validate_and_repair(candidates: Optional[Iterable], income: float, employment_type: str, plan_type: str,
                        reported_total: Optional[float] = None, variant: int = 0) -> RepairResult:
    """Make a candidate list satisfy the plan invariants.

    ``candidates`` may hold extraction candidates or Suggestion objects.
    ``income`` must already be usable (see ``effective_income``).
    A list that is already valid comes back unchanged: same objects, same order.
    """
    anomalies: List[Anomaly] = []
    items = [_as_suggestion(c) for c in (candidates or [])]

    if not items:
        _record(anomalies, EXTRACTION_EMPTY, "no suggestions extracted")
        return _fallback(income, employment_type, plan_type, variant, anomalies)

    suggestions = []
    for item in items:
        if is_within_bounds(item.potential_saving, income):
            suggestions.append(item)
            continue
        repaired = estimate_saving(item.category, income, employment_type)
        _record(anomalies, AMOUNT_REPAIRED,
                f"{item.category}: {item.potential_saving!r} -> {repaired:.2f}")
        suggestions.append(item.with_saving(repaired))

    working_total = math.fsum(s.potential_saving for s in suggestions)
    if not working_total > 0:
        _record(anomalies, TOTAL_NON_POSITIVE, f"working total {working_total!r}")
        return _fallback(income, employment_type, plan_type, variant, anomalies)

    extra = top_up(suggestions, income, employment_type, variant)
    if extra:
        _record(anomalies, BREADTH_TOP_UP, ", ".join(s.category for s in extra))
        suggestions.extend(extra)

    if reported_total is not None:
        total = math.fsum(s.potential_saving for s in suggestions)
        if abs(reported_total - total) > max(total * _REPORTED_TOTAL_TOLERANCE, SAVINGS_TOLERANCE):
            _record(anomalies, REPORTED_TOTAL_MISMATCH, f"reported {reported_total:.2f}, computed {total:.2f}")

    return RepairResult(suggestions, anomalies, False)


__all__ = [
    "Anomaly", "RepairResult", "validate_and_repair", "top_up", "is_within_bounds",
    "EXTRACTION_EMPTY", "AMOUNT_REPAIRED", "TOTAL_NON_POSITIVE", "BREADTH_TOP_UP",
    "REPORTED_TOTAL_MISMATCH", "INCOME_DEFAULTED",
]
