"""
Input validation schemas using Pydantic for request payloads.
"""
import math
import re
from pydantic import BaseModel, Field, field_validator
from typing import Optional, Union

from taxplan.logic.tables.income import parse_income
from taxplan.utilities.constants import MAX_INCOME


class PlanRequestInput(BaseModel):
    """Schema for tax plan generation requests."""
    income: Union[float, str] = Field(...)
    employment_type: str = Field("employee", pattern=r'^(employee|self-employed)$')
    plan_type: str = Field("standard", pattern=r'^(standard|future|business)$')
    name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=500)

    @field_validator('employment_type', 'plan_type', mode='before')
    @classmethod
    def normalize_choice(cls, v):
        """Accept any casing and surrounding whitespace."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator('income')
    @classmethod
    def validate_income(cls, v):
        """Permissive income: "RM 60,000", "60000", 60000. Negative or non-numeric values are rejected."""
        try:
            number = float(re.sub(r"(?i)rm|myr|[$,\s]", "", v) if isinstance(v, str) else v)
        except ValueError:
            raise ValueError('Income must be a number, e.g. "RM 60,000"')
        if not math.isfinite(number) or number < 0:
            raise ValueError('Income must be a non-negative amount')
        if number > MAX_INCOME:
            raise ValueError(f'Income must not exceed RM {MAX_INCOME:,.0f}')
        return parse_income(v)

    @field_validator('name', 'description')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace; blank becomes None."""
        if isinstance(v, str):
            return v.strip() or None
        return v


class SuggestionUpdateInput(BaseModel):
    """Schema for toggling a suggestion's implemented flag."""
    is_implemented: bool = Field(..., alias='isImplemented')

    model_config = {'populate_by_name': True}
