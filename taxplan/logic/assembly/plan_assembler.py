"""Builds the final Plan record from validated suggestions."""
import math
from datetime import datetime, timezone
from typing import List, Optional

from taxplan.domain.Plan import Plan
from taxplan.domain.Suggestion import Suggestion
from taxplan.utilities.constants import PLAN_DESCRIPTIONS, PLAN_NAME_TEMPLATES, PLAN_STANDARD


def default_plan_name(plan_type: str, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    template = PLAN_NAME_TEMPLATES.get(plan_type, PLAN_NAME_TEMPLATES[PLAN_STANDARD])
    return template.format(month=now.strftime("%b %Y"))


def default_plan_description(plan_type: str) -> str:
    return PLAN_DESCRIPTIONS.get(plan_type, PLAN_DESCRIPTIONS[PLAN_STANDARD])


def assemble_plan(suggestions: List[Suggestion], plan_type: str, name: Optional[str] = None,
                  description: Optional[str] = None, user_id: str = "",
                  now: Optional[datetime] = None) -> Plan:
    """Create the Plan; potential savings is always the sum of the suggestion savings."""
    now = now or datetime.now(timezone.utc)
    name = (name or "").strip() or default_plan_name(plan_type, now)
    description = (description or "").strip() or default_plan_description(plan_type)
    total = math.fsum(s.potential_saving for s in suggestions)
    return Plan(
        name=name,
        description=description,
        suggestions=suggestions,
        potential_savings=total,
        plan_type=plan_type,
        user_id=user_id,
        created_at=now,
        updated_at=now,
    )


__all__ = ["assemble_plan", "default_plan_name", "default_plan_description"]
