from typing import Final

EMPLOYEE: Final[str] = "employee"
SELF_EMPLOYED: Final[str] = "self-employed"
EMPLOYMENT_TYPES: Final[tuple[str, ...]] = (EMPLOYEE, SELF_EMPLOYED)

PLAN_STANDARD: Final[str] = "standard"
PLAN_FUTURE: Final[str] = "future"
PLAN_BUSINESS: Final[str] = "business"
PLAN_TYPES: Final[tuple[str, ...]] = (PLAN_STANDARD, PLAN_FUTURE, PLAN_BUSINESS)

MIN_SUGGESTIONS: Final[int] = 5
MAX_SAVING_RATIO: Final[float] = 0.3
MIN_ESTIMATE_RATE: Final[float] = 0.01
DEFAULT_FALLBACK_INCOME: Final[float] = 50000.0
# Incomes outside [MIN_USABLE_INCOME, MAX_INCOME] are not usable for estimates
MIN_USABLE_INCOME: Final[float] = 1.0
MAX_INCOME: Final[float] = 1e12
FUTURE_INCOME_GROWTH: Final[float] = 1.2
SAVINGS_TOLERANCE: Final[float] = 1e-6
MAX_DESCRIPTION_LENGTH: Final[int] = 200

# Categories used to reach MIN_SUGGESTIONS, most relevant first
TOP_UP_PRIORITY: Final[tuple[str, ...]] = (
    "Education Relief",
    "Medical Relief",
    "SSPN Savings",
    "Donation",
    "Insurance Premium",
    "EPF Contribution",
    "Lifestyle Relief",
    "SOCSO Contribution",
    "Housing Loan Interest",
)

PLAN_NAME_TEMPLATES: Final[dict[str, str]] = {
    PLAN_STANDARD: "Tax Plan ({month})",
    PLAN_FUTURE: "Future Income Tax Plan ({month})",
    PLAN_BUSINESS: "Business Tax Plan ({month})",
}
PLAN_DESCRIPTIONS: Final[dict[str, str]] = {
    PLAN_STANDARD: "AI-generated tax plan based on your current income",
    PLAN_FUTURE: "AI-generated tax plan based on projected future income",
    PLAN_BUSINESS: "AI-generated tax plan for business ventures",
}
PLAN_TYPE_LABELS: Final[dict[str, str]] = {
    PLAN_STANDARD: "standard tax planning",
    PLAN_FUTURE: "future income planning (assuming 20% income growth)",
    PLAN_BUSINESS: "business venture planning",
}

TAX_REFERENCE_TEXT: Final[str] = (
    """
DETAILED MALAYSIAN TAX CONTEXT:
- Individual income tax rates (2024):
  * First RM5,000: 0%
  * RM5,001-RM20,000: 1%
  * RM20,001-RM35,000: 3%
  * RM35,001-RM50,000: 8%
  * RM50,001-RM70,000: 13%
  * RM70,001-RM100,000: 21%
  * RM100,001-RM250,000: 24%
  * RM250,001-RM400,000: 24.5%
  * RM400,001-RM600,000: 25%
  * RM600,001-RM1,000,000: 26%
  * Above RM1,000,000: 30%

- Important tax relief categories include:
  * Personal relief: RM9,000
  * EPF/KWSP contributions: Up to RM4,000
  * Life insurance premiums: Up to RM3,000
  * Medical and education insurance: Up to RM3,000
  * Lifestyle relief: Up to RM2,500
  * Medical expenses for self, spouse, or children: Up to RM8,000
  * Education fees (self): Up to RM7,000
  * SOCSO/PERKESO contributions: Up to RM350
  * SSPN education savings: Up to RM8,000
  * Housing loan interest: Up to RM10,000 (for first 3 years)
  * Donations to approved institutions: Varies

- For self-employed:
  * Business expenses are deductible
  * Home office deductions are available
  * Voluntary EPF and SOCSO contributions are tax-deductible
"""
)

RESPONSE_FORMAT: Final[str] = (
    """
YOUR RESPONSE FORMAT:
1. First, provide a 2-3 sentence personal tax analysis.
2. Then provide tax-saving suggestions in this precise format:
   - Category: [specific category name]
   - Suggestion: [detailed actionable advice with specific amounts and steps]
   - Potential Savings: RM [realistic amount]
3. After all suggestions, provide a total potential savings amount.
"""
)
