"""Event helper utilities.

Helpers that publish tax plan diagnostics on the global event bus.

Quick import:
    from taxplan.events.event_helpers import (
        publish_plan_generated, publish_fallback_used, publish_suggestion_repaired,
        publish_synthesis_outcome, subscribe_logging_listener
    )
"""
from __future__ import annotations
from typing import Any

from taxplan.logic.validation.repairer import AMOUNT_REPAIRED, EXTRACTION_EMPTY, TOTAL_NON_POSITIVE
from .Event_Bus import (
    create_event,
    logging_listener,
    ALL_EVENTS,
    GLOBAL_EVENT_BUS,
    TAXPLAN_GENERATED, TAXPLAN_FALLBACK_USED, TAXPLAN_SUGGESTION_REPAIRED,
)

__all__ = [
    'publish_plan_generated', 'publish_fallback_used', 'publish_suggestion_repaired',
    'publish_synthesis_outcome', 'subscribe_logging_listener',
    'TAXPLAN_GENERATED', 'TAXPLAN_FALLBACK_USED', 'TAXPLAN_SUGGESTION_REPAIRED',
]

def publish_plan_generated(plan: Any, strategy, used_fallback: bool, anomalies):
    """Publish a taxplan.generated event."""
    create_event(TAXPLAN_GENERATED, {
        'plan_id': plan.id,
        'user_id': plan.user_id,
        'suggestions': len(plan.suggestions),
        'potential_savings': plan.potential_savings,
        'strategy': strategy,
        'used_fallback': used_fallback,
        'anomalies': [a.code for a in anomalies],
    })

def publish_fallback_used(plan_id: str, reason: str):
    """Publish a taxplan.fallback_used event."""
    create_event(TAXPLAN_FALLBACK_USED, {'plan_id': plan_id, 'reason': reason})

def publish_suggestion_repaired(plan_id: str, detail: str):
    """Publish a taxplan.suggestion_repaired event."""
    create_event(TAXPLAN_SUGGESTION_REPAIRED, {'plan_id': plan_id, 'detail': detail})

def publish_synthesis_outcome(outcome):
    """Publish every event a pipeline outcome calls for.

    One suggestion_repaired per repaired amount, fallback_used when rule-based
    suggestions replaced the AI's, and always one generated.
    """
    plan = outcome.plan
    for anomaly in outcome.anomalies:
        if anomaly.code == AMOUNT_REPAIRED:
            publish_suggestion_repaired(plan.id, anomaly.detail)
    if outcome.used_fallback:
        reasons = [a.code for a in outcome.anomalies if a.code in (EXTRACTION_EMPTY, TOTAL_NON_POSITIVE)]
        publish_fallback_used(plan.id, ', '.join(reasons) or 'fallback')
    publish_plan_generated(plan, outcome.strategy, outcome.used_fallback, outcome.anomalies)

def subscribe_logging_listener(bus=GLOBAL_EVENT_BUS):
    """Log every tax plan event on the given bus."""
    for event_name in ALL_EVENTS:
        bus.subscribe(event_name, logging_listener)
