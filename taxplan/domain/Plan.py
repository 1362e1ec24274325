"""Plan domain entity: one synthesized tax plan (suggestions, total savings, plan type, owner)."""
import math
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from taxplan.domain.Suggestion import Suggestion
from taxplan.utilities.constants import PLAN_STANDARD


def _parse_timestamp(value) -> datetime:
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except (TypeError, ValueError):
        return datetime.now(timezone.utc)


class Plan:
    def __init__(self, name: str = "", description: str = "", suggestions: Optional[List[Suggestion]] = None,
                 potential_savings: Optional[float] = None, plan_type: str = PLAN_STANDARD, user_id: str = "",
                 created_at: Optional[datetime] = None, updated_at: Optional[datetime] = None,
                 id: Optional[str] = None):
        self.id = id or str(uuid.uuid4())
        self.user_id = user_id
        self.name = name
        self.description = description
        self.suggestions = suggestions[:] if suggestions else []
        # The total is always derivable from the items
        if potential_savings is None:
            potential_savings = math.fsum(s.potential_saving for s in self.suggestions)
        self.potential_savings = potential_savings
        self.plan_type = plan_type
        now = datetime.now(timezone.utc)
        self.created_at = created_at or now
        self.updated_at = updated_at or self.created_at

    def __str__(self) -> str:
        return (f"{self.name} [{self.plan_type}] - {len(self.suggestions)} suggestions - "
                f"Potential savings: RM {self.potential_savings:,.2f}")

    __repr__ = __str__

    def get_suggestion(self, suggestion_id: str) -> Optional[Suggestion]:
        for suggestion in self.suggestions:
            if suggestion.id == suggestion_id:
                return suggestion
        return None

    def categories(self) -> List[str]:
        return [s.category for s in self.suggestions]

    @staticmethod
    def from_dict(data):
        '''Creates a Plan from a dictionary (camelCase keys). Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        suggestions = [Suggestion.from_dict(s) for s in d.get("suggestions", []) or []]
        total = d.get("potentialSavings")
        try:
            total = float(total) if total is not None else None
        except (TypeError, ValueError):
            total = None
        return Plan(
            name=d.get("name", "") or "",
            description=d.get("description", "") or "",
            suggestions=suggestions,
            potential_savings=total,
            plan_type=d.get("planType", PLAN_STANDARD) or PLAN_STANDARD,
            user_id=d.get("userId", "") or "",
            created_at=_parse_timestamp(d["createdAt"]) if d.get("createdAt") else None,
            updated_at=_parse_timestamp(d["updatedAt"]) if d.get("updatedAt") else None,
            id=d.get("id") or None,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "description": self.description,
            "suggestions": [s.to_dict() for s in self.suggestions],
            "potentialSavings": self.potential_savings,
            "planType": self.plan_type,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
