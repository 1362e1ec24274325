"""Rule-based suggestion synthesis.

Used when nothing usable can be extracted from the AI answer, and by the
repairer to top up short suggestion lists. Everything here is a pure function
of (income, employment type, plan type, variant): the same inputs always give
the same suggestions, amounts included.

``variant`` picks one of several phrasings per category; callers pass the
number of plans the user already has so consecutive plans read differently.
"""
from types import MappingProxyType
from typing import List, Tuple

from taxplan.domain.Suggestion import Suggestion
from taxplan.logic.tables.base_amounts import canonical_category, estimate_saving
from taxplan.logic.tables.income import effective_income
from taxplan.utilities.constants import (
    PLAN_BUSINESS,
    PLAN_FUTURE,
    SELF_EMPLOYED,
)

CORE_CATEGORIES: Tuple[str, ...] = ("Lifestyle Relief", "Medical Relief", "EPF Contribution", "Insurance Premium")
SELF_EMPLOYED_CATEGORIES: Tuple[str, ...] = ("Business Expenses", "Home Office")
EMPLOYEE_CATEGORIES: Tuple[str, ...] = ("SSPN Savings", "SOCSO Contribution")
PLAN_TYPE_CATEGORIES = MappingProxyType({
    PLAN_FUTURE: ("Long-term Investment", "Retirement Planning (PRS)"),
    PLAN_BUSINESS: ("Capital Investment", "Business Structure"),
})
STANDARD_CATEGORIES: Tuple[str, ...] = ("Donation",)

SUGGESTION_TEMPLATES = MappingProxyType({
    "Lifestyle Relief": (
        "Maximize your RM2,500 lifestyle relief by keeping digital receipts for books, electronics, "
        "sports equipment, and internet subscriptions.",
        "Create a spreadsheet to track lifestyle expenses up to RM2,500 including smartphones, tablets, "
        "books, and sports equipment.",
        "Strategically time larger lifestyle purchases (electronics, gym memberships) to fully utilize "
        "the RM2,500 annual relief.",
    ),
    "Medical Relief": (
        "Maintain digital records of all medical expenses for yourself and dependents to easily claim "
        "relief up to RM8,000 annually.",
        "Schedule preventive healthcare check-ups strategically to maximize the RM8,000 medical relief "
        "each tax year.",
        "Include often-forgotten medical expenses like specialized treatments, preventive screenings, "
        "and mobility aids toward your RM8,000 relief.",
    ),
    "EPF Contribution (employee)": (
        "Keep your full 11% EPF contribution (about RM{epf_amount:,} a year at your income) to claim "
        "the maximum RM4,000 relief.",
        "Check your EPF contribution statement quarterly to verify you're on track for the maximum "
        "RM4,000 tax relief.",
        "If your statutory EPF contribution falls short, top up voluntarily to reach the RM4,000 relief.",
    ),
    "EPF Contribution (self-employed)": (
        "Set up a voluntary EPF contribution of about RM333 monthly to reach the maximum RM4,000 tax relief.",
        "Create a quarterly schedule for voluntary EPF contributions to reach the RM4,000 maximum while "
        "managing business cash flow.",
        "Allocate a percentage of each client payment to voluntary EPF contributions to systematically "
        "reach the RM4,000 relief.",
    ),
    "Insurance Premium": (
        "Review life, medical and education insurance policies so premiums use the RM3,000 reliefs.",
        "Consolidate your insurance premium receipts before filing to claim life and medical insurance relief.",
        "Consider a medical or education insurance policy for your family that qualifies for tax relief.",
    ),
    "Business Expenses": (
        "Implement a digital receipt system to track all business expenses, which could represent about "
        "RM{expense_amount:,} in deductions.",
        "Schedule quarterly expense reviews with your accountant to identify overlooked business deductions.",
        "Use dedicated business accounts and cards to separate personal and business expenses for cleaner filing.",
    ),
    "Home Office": (
        "If you work from home, allocate a portion of rent, utilities and internet as business expenses.",
        "Measure your dedicated workspace and claim the matching share of household running costs.",
        "Keep utility and internet bills for the home office to support the deduction if audited.",
    ),
    "SSPN Savings": (
        "Consider SSPN savings for your children's education to claim relief of up to RM8,000.",
        "Set up a monthly SSPN deposit so education savings also reduce your chargeable income.",
        "Deposit into SSPN before the tax year ends to count the savings towards this year's relief.",
    ),
    "SOCSO Contribution": (
        "Make sure your SOCSO/PERKESO contributions are claimed, up to the RM350 relief.",
        "Check your payslips for SOCSO deductions and claim them as relief when filing.",
        "Keep your annual SOCSO statement so the RM350 relief is claimed in full.",
    ),
    "Donation": (
        "Make donations to approved organizations and keep official receipts for tax deductions.",
        "Plan charitable giving to approved institutions before year end so it reduces this year's tax.",
        "Consider zakat or donations to approved bodies, which are deductible with proper receipts.",
    ),
    "Education Relief": (
        "Claim education relief of up to RM7,000 for skills development courses or further education.",
        "Enroll in certified professional courses whose fees qualify for the RM7,000 education relief.",
        "Plan part-time courses across tax years to use the RM7,000 education relief every year.",
    ),
    "Housing Loan Interest": (
        "If you bought your first home recently, claim housing loan interest relief for the first three years.",
        "Keep your bank's annual interest statement to claim housing loan interest relief.",
        "Check whether your home purchase qualifies for the housing loan interest relief before filing.",
    ),
    "Long-term Investment": (
        "Develop a tax-efficient investment strategy targeting long-term growth, reviewed as your income increases.",
        "Consider tax-advantaged investment vehicles like unit trusts with preferential tax treatment.",
        "Build a 5-year investment roadmap that adapts to projected income increases and tax brackets.",
    ),
    "Retirement Planning (PRS)": (
        "Contribute to a Private Retirement Scheme (PRS) to claim relief of up to RM3,000.",
        "Set up a monthly PRS contribution so retirement savings also reduce your chargeable income.",
        "Combine PRS contributions with voluntary EPF top-ups for tax-efficient retirement planning.",
    ),
    "Capital Investment": (
        "Plan equipment and software purchases to claim capital allowances on business assets.",
        "Build a capital expenditure schedule that times purchases to maximise available allowances.",
        "Review which business assets qualify for accelerated capital allowances before buying.",
    ),
    "Business Structure": (
        "Review your business structure (sole proprietorship vs. Sdn Bhd) to optimize tax treatment "
        "as your business grows.",
        "Consider formal business registration to access additional tax benefits and deductions.",
        "Compare personal and company tax rates at your profit level before restructuring.",
    ),
})

GENERIC_TEMPLATES: Tuple[str, ...] = (
    "Create a simple system to track all potential tax relief categories throughout the year.",
    "Establish a monthly routine to organize and digitize receipts for all potential tax-deductible expenses.",
    "Develop a basic tax planning calendar with reminders for key actions and deadlines.",
)


def suggestion_text_for(category: str, income: float, employment_type: str, variant: int = 0) -> str:
    canonical = canonical_category(category) or category
    if canonical == "EPF Contribution":
        key = "EPF Contribution (self-employed)" if employment_type == SELF_EMPLOYED else "EPF Contribution (employee)"
    else:
        key = canonical
    templates = SUGGESTION_TEMPLATES.get(key, GENERIC_TEMPLATES)
    template = templates[abs(int(variant)) % len(templates)]
    return template.format(epf_amount=int(income * 0.11), expense_amount=int(income * 0.15))


def build_suggestion(category: str, income: float, employment_type: str, variant: int = 0) -> Suggestion:
    """One rule-based suggestion; the saving comes from the base amount table."""
    return Suggestion(
        category=category,
        suggestion_text=suggestion_text_for(category, income, employment_type, variant),
        potential_saving=estimate_saving(category, income, employment_type),
    )


def fallback_categories(employment_type: str, plan_type: str) -> List[str]:
    categories = list(CORE_CATEGORIES)
    if employment_type == SELF_EMPLOYED:
        categories.extend(SELF_EMPLOYED_CATEGORIES)
    else:
        categories.extend(EMPLOYEE_CATEGORIES)
    categories.extend(PLAN_TYPE_CATEGORIES.get(plan_type, STANDARD_CATEGORIES))
    return categories


def synthesize_fallback(income, employment_type: str, plan_type: str, variant: int = 0) -> List[Suggestion]:
    """Deterministic suggestion list for a profile; always at least five entries."""
    income = effective_income(income)
    return [
        build_suggestion(category, income, employment_type, variant)
        for category in fallback_categories(employment_type, plan_type)
    ]


__all__ = ["synthesize_fallback", "fallback_categories", "build_suggestion", "suggestion_text_for"]
