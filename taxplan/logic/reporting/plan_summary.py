"""Plan progress reporting.

Summarizes how much of a plan the user has acted on: implemented suggestions,
savings already secured and savings still open, overall and per category.
"""
from collections import defaultdict
from typing import Any, Dict

from taxplan.utilities.constants import PLAN_TYPE_LABELS


def format_currency(amount) -> str:
    try:
        return f"RM {float(amount):,.2f}"
    except (TypeError, ValueError):
        return "RM 0.00"


def compute_plan_summary(plan) -> Dict[str, Any]:
    """Aggregate implementation progress for one plan.

    Returns structure:
    {
      'plan_id': str, 'name': str, 'plan_type': str, 'plan_type_label': str,
      'suggestion_count': int, 'implemented_count': int,
      'potential_savings': float, 'implemented_savings': float, 'remaining_savings': float,
      'progress': float (0..1),
      'categories': { 'Lifestyle Relief': {'count': int, 'implemented': int, 'savings': float}, ... }
    }
    """
    suggestions = list(getattr(plan, 'suggestions', None) or [])
    categories = defaultdict(lambda: {'count': 0, 'implemented': 0, 'savings': 0.0})
    implemented_savings = 0.0
    implemented_count = 0

    for s in suggestions:
        entry = categories[s.category]
        entry['count'] += 1
        entry['savings'] = round(entry['savings'] + s.potential_saving, 2)
        if s.is_implemented:
            entry['implemented'] += 1
            implemented_count += 1
            implemented_savings += s.potential_saving

    total = getattr(plan, 'potential_savings', 0.0) or 0.0
    return {
        'plan_id': getattr(plan, 'id', None),
        'name': getattr(plan, 'name', ''),
        'plan_type': getattr(plan, 'plan_type', ''),
        'plan_type_label': PLAN_TYPE_LABELS.get(getattr(plan, 'plan_type', ''), ''),
        'suggestion_count': len(suggestions),
        'implemented_count': implemented_count,
        'potential_savings': round(total, 2),
        'implemented_savings': round(implemented_savings, 2),
        'remaining_savings': round(max(total - implemented_savings, 0.0), 2),
        'progress': round(implemented_count / len(suggestions), 4) if suggestions else 0.0,
        'categories': dict(categories),
    }


__all__ = ["compute_plan_summary", "format_currency"]
