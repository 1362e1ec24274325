"""Suggestion domain entity: one actionable tax-saving recommendation inside a plan."""
import uuid
from typing import Optional


class Suggestion:
    def __init__(self, category: str = "", suggestion_text: str = "", potential_saving: float = 0.0,
                 is_implemented: bool = False, id: Optional[str] = None):
        self.id = id or str(uuid.uuid4())
        self.category = category
        self.suggestion_text = suggestion_text
        self.potential_saving = potential_saving
        self.is_implemented = is_implemented

    def __str__(self) -> str:
        return f"{self.category} - RM {self.potential_saving:,.2f} - {self.suggestion_text}"

    __repr__ = __str__

    def __eq__(self, other):
        if not isinstance(other, Suggestion):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def with_saving(self, potential_saving: float) -> "Suggestion":
        '''Return a copy carrying a different saving amount (same id, category and text).'''
        return Suggestion(self.category, self.suggestion_text, potential_saving,
                          is_implemented=self.is_implemented, id=self.id)

    @staticmethod
    def from_dict(data):
        '''Creates a Suggestion from a dictionary. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        try:
            saving = float(d.get("potentialSaving", 0.0) or 0.0)
        except (TypeError, ValueError):
            saving = 0.0
        return Suggestion(
            category=str(d.get("category", "") or ""),
            suggestion_text=str(d.get("suggestionText", "") or ""),
            potential_saving=saving,
            is_implemented=bool(d.get("isImplemented", False)),
            id=d.get("id") or None,
        )

    def to_dict(self):
        '''Converts the Suggestion to a dictionary for JSON persistence.'''
        return {
            "id": self.id,
            "category": self.category,
            "suggestionText": self.suggestion_text,
            "potentialSaving": self.potential_saving,
            "isImplemented": self.is_implemented,
        }
