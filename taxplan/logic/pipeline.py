"""Plan synthesis pipeline: raw AI text in, validated Plan out.

    Start -> Extracting -> Validating -> (RepairingOrFallback)* -> Assembled

Everything here is synchronous and never raises for bad input: empty, None or
garbage text, unknown profile values and unusable incomes all end in a Plan
that satisfies the total, bound and breadth invariants.
"""
import logging
from datetime import datetime
from typing import List, NamedTuple, Optional

from taxplan.domain.Plan import Plan
from taxplan.logic.assembly.plan_assembler import assemble_plan
from taxplan.logic.extraction.response_extractor import ExtractionResult, extract_response
from taxplan.logic.tables.income import is_usable_income, parse_income
from taxplan.logic.validation.repairer import INCOME_DEFAULTED, Anomaly, validate_and_repair
from taxplan.utilities.constants import (
    DEFAULT_FALLBACK_INCOME,
    EMPLOYEE,
    EMPLOYMENT_TYPES,
    PLAN_STANDARD,
    PLAN_TYPES,
)

logger = logging.getLogger(__name__)


class SynthesisOutcome(NamedTuple):
    plan: Plan
    anomalies: List[Anomaly]
    strategy: Optional[str]
    used_fallback: bool
    income: float


def normalize_employment_type(value) -> str:
    value = str(value or "").strip().lower()
    return value if value in EMPLOYMENT_TYPES else EMPLOYEE


def normalize_plan_type(value) -> str:
    value = str(value or "").strip().lower()
    return value if value in PLAN_TYPES else PLAN_STANDARD


def _safe_extract(raw_text) -> ExtractionResult:
    try:
        return extract_response(raw_text)
    except Exception:  # any extraction failure degrades to "nothing extracted"
        logger.exception("Extraction failed; falling back to rule-based suggestions")
        return ExtractionResult([], None, None, None)


def run_pipeline(raw_text, income, employment_type, plan_type, name: Optional[str] = None,
                 description: Optional[str] = None, user_id: str = "", variant: int = 0,
                 now: Optional[datetime] = None) -> SynthesisOutcome:
    """Turn one AI answer into a Plan plus the diagnostics gathered on the way."""
    anomalies: List[Anomaly] = []
    employment_type = normalize_employment_type(employment_type)
    plan_type = normalize_plan_type(plan_type)

    amount = parse_income(income)
    if not is_usable_income(amount):
        amount = DEFAULT_FALLBACK_INCOME
        anomalies.append(Anomaly(INCOME_DEFAULTED, f"{income!r} -> {DEFAULT_FALLBACK_INCOME:.2f}"))
        logger.warning("Income %r not usable, using default %.2f", income, DEFAULT_FALLBACK_INCOME)

    extraction = _safe_extract(raw_text)
    result = validate_and_repair(extraction.candidates, amount, employment_type, plan_type,
                                 reported_total=extraction.reported_total, variant=variant)
    anomalies.extend(result.anomalies)

    # The AI's own analysis paragraph only describes plans built from its suggestions
    if not description and not result.used_fallback:
        description = extraction.summary

    plan = assemble_plan(result.suggestions, plan_type, name=name, description=description,
                         user_id=user_id, now=now)
    logger.info("Assembled plan %s: %d suggestions, RM %.2f (strategy=%s, fallback=%s)",
                plan.id, len(plan.suggestions), plan.potential_savings, extraction.strategy,
                result.used_fallback)
    return SynthesisOutcome(plan, anomalies, extraction.strategy, result.used_fallback, amount)


def synthesize_plan(raw_text, income, employment_type, plan_type, name: Optional[str] = None,
                    user_id: str = "", variant: int = 0) -> Plan:
    return run_pipeline(raw_text, income, employment_type, plan_type, name=name,
                        user_id=user_id, variant=variant).plan


__all__ = ["SynthesisOutcome", "run_pipeline", "synthesize_plan", "normalize_employment_type",
           "normalize_plan_type"]
