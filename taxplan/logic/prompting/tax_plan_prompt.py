"""Prompt construction for AI tax plan generation.

Each new plan for a user gets a different "specialized focus" and, once the
user already has plans, a uniqueness section naming the categories that keep
coming back and a "variation focus" so the AI steers away from them.
"""
from collections import Counter
from typing import Iterable, List, NamedTuple, Optional

from taxplan.utilities.constants import (
    PLAN_BUSINESS,
    PLAN_FUTURE,
    PLAN_STANDARD,
    PLAN_TYPE_LABELS,
    PLAN_TYPES,
    RESPONSE_FORMAT,
    SELF_EMPLOYED,
    TAX_REFERENCE_TEXT,
)


class ExistingPlanData(NamedTuple):
    """What the prompt needs to know about one of the user's earlier plans."""
    plan_type: str
    categories: List[str]
    suggestion_texts: List[str]


SPECIALIZED_FOCUS = {
    PLAN_FUTURE: (
        "Focus on long-term tax efficiency strategies and investments that minimize future tax burden.",
        "Emphasize education and skill development investments for future income growth.",
        "Concentrate on retirement planning and tax-efficient wealth accumulation.",
        "Highlight property investment strategies and associated tax benefits.",
        "Focus on career advancement expenses that qualify for tax relief.",
    ),
    PLAN_BUSINESS: (
        "Emphasize business expense optimization and record-keeping strategies.",
        "Focus on tax-efficient business structure and registration options.",
        "Concentrate on capital investment strategies and associated tax incentives.",
        "Highlight employee benefits and compensation structures that optimize tax position.",
        "Focus on digital transformation expenses that qualify for tax incentives.",
    ),
    PLAN_STANDARD: (
        "Focus on maximizing personal and family-related tax reliefs.",
        "Emphasize healthcare and medical expense optimization for tax purposes.",
        "Concentrate on education and continuous learning tax benefits.",
        "Highlight lifestyle and technology-related tax reliefs.",
        "Focus on charity and donation strategies for tax optimization.",
    ),
}

VARIATION_FOCUS = (
    "Optimization based on TIMING of expenses and contributions",
    "Focus on DOCUMENTATION and record-keeping for maximum deductions",
    "Emphasis on AUTOMATION of tax-saving strategies",
    "Concentration on FAMILY-BASED tax optimization strategies",
    "Focus on DIGITAL TRANSFORMATION tax incentives",
    "Emphasis on GREEN/SUSTAINABLE initiatives with tax benefits",
    "Focus on EDUCATION and PROFESSIONAL DEVELOPMENT",
    "Concentration on RETIREMENT and LONG-TERM planning",
    "Emphasis on HEALTHCARE and WELLNESS expense optimization",
)

PLAN_TYPE_GUIDELINES = {
    PLAN_FUTURE: "Focus on strategies for future income growth and tax efficiency with long-term planning.",
    PLAN_BUSINESS: ("Focus on business tax optimization strategies, capital investments, "
                    "and business expansion tax considerations."),
}


def get_specialized_focus(plan_type: str, existing_plan_count: int) -> str:
    options = SPECIALIZED_FOCUS.get(plan_type, SPECIALIZED_FOCUS[PLAN_STANDARD])
    return options[existing_plan_count % len(options)]


def get_variation_focus(plan_type: str, existing_plan_count: int) -> str:
    offset = PLAN_TYPES.index(plan_type) if plan_type in PLAN_TYPES else 0
    return VARIATION_FOCUS[(existing_plan_count + offset) % len(VARIATION_FOCUS)]


def common_categories(existing_plans: Iterable[ExistingPlanData], limit: int = 5) -> List[str]:
    """Categories that appear in more than one earlier plan, most frequent first."""
    counts = Counter(c for plan in existing_plans for c in plan.categories)
    return [category for category, count in counts.most_common() if count > 1][:limit]


def build_uniqueness_section(plan_type: str, existing_plans: List[ExistingPlanData]) -> str:
    if not existing_plans:
        return ""
    same_type = sum(1 for p in existing_plans if p.plan_type == plan_type)
    if same_type:
        type_line = f"They already have {same_type} plans of this type."
    else:
        type_line = "This is their first plan of this type."
    common = ", ".join(common_categories(existing_plans)) or "None"
    return (
        "UNIQUENESS REQUIREMENT:\n"
        f"- The user already has {len(existing_plans)} tax plans.\n"
        f"- {type_line}\n"
        f"- Common categories in existing plans: {common}\n"
        "- YOU MUST GENERATE A UNIQUE PLAN with different approaches and suggestions from existing plans.\n"
        "- Focus on DIFFERENT TAX STRATEGIES that weren't emphasized in previous plans.\n"
        f"- The VARIATION FOCUS for this specific plan should be: "
        f"{get_variation_focus(plan_type, len(existing_plans))}\n"
    )


def build_tax_plan_prompt(income: float, employment_type: str, plan_type: str = PLAN_STANDARD,
                          name: Optional[str] = None,
                          existing_plans: Optional[List[ExistingPlanData]] = None) -> str:
    """Full prompt text; ``income`` is the already projected income for future plans."""
    existing_plans = existing_plans or []
    plan_label = PLAN_TYPE_LABELS.get(plan_type, PLAN_TYPE_LABELS[PLAN_STANDARD])
    greeting = f" for {name.strip()}" if name and name.strip() else ""
    focus_on = "business deductions" if employment_type == SELF_EMPLOYED else "tax reliefs"

    parts = [
        "You are a Malaysian Tax Planning Expert AI for a tax app. Generate a detailed, personalized "
        f"tax plan for {plan_label}{greeting} with the following information:\n",
        f"User's Annual Income: RM {income:,.2f}",
        f"Employment Type: {employment_type}\n",
        "TASK:\nCreate a comprehensive tax plan with:\n"
        "1. A brief analysis of the user's tax situation based on their income level and employment type\n"
        "2. 5-7 actionable tax-saving suggestions organized by specific categories\n"
        "3. Realistic estimated potential savings for each suggestion in Malaysian Ringgit (RM)\n",
    ]
    uniqueness = build_uniqueness_section(plan_type, existing_plans)
    if uniqueness:
        parts.append(uniqueness)
    parts.append("SPECIALIZED FOCUS FOR THIS PLAN:\n" + get_specialized_focus(plan_type, len(existing_plans)))
    parts.append(TAX_REFERENCE_TEXT.strip() + "\n")
    parts.append(RESPONSE_FORMAT.strip() + "\n")

    guidelines = [
        "MAKE ALL SUGGESTIONS SPECIFIC AND ACTIONABLE.",
        "ENSURE EACH SUGGESTION HAS A REALISTIC SAVINGS AMOUNT IN RM.",
        "Savings amounts must be proportional to income and tax bracket.",
        f"As a{'' if employment_type == SELF_EMPLOYED else 'n'} {employment_type}, focus on {focus_on}.",
    ]
    if plan_type in PLAN_TYPE_GUIDELINES:
        guidelines.append(PLAN_TYPE_GUIDELINES[plan_type])
    guidelines.append("ALWAYS CALCULATE TOTAL POTENTIAL SAVINGS AT THE END; it must never be zero.")
    parts.append("IMPORTANT GUIDELINES:\n" + "\n".join(f"- {g}" for g in guidelines))
    return "\n".join(parts)


__all__ = ["ExistingPlanData", "build_tax_plan_prompt", "get_specialized_focus", "get_variation_focus",
           "common_categories", "build_uniqueness_section"]
