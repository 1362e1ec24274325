"""Simple Event Bus / Observer implementation for tax plan diagnostics.

Event names used so far:
  taxplan.generated -> payload {"plan_id": str, "user_id": str, "suggestions": int, "potential_savings": float,
                                "strategy": str | None, "used_fallback": bool, "anomalies": [str, ...]}
  taxplan.fallback_used -> payload {"plan_id": str, "reason": str}
  taxplan.suggestion_repaired -> payload {"plan_id": str, "detail": str}

Subscribers can be callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
TAXPLAN_GENERATED = "taxplan.generated"
TAXPLAN_FALLBACK_USED = "taxplan.fallback_used"
TAXPLAN_SUGGESTION_REPAIRED = "taxplan.suggestion_repaired"
ALL_EVENTS = (TAXPLAN_GENERATED, TAXPLAN_FALLBACK_USED, TAXPLAN_SUGGESTION_REPAIRED)


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def publish(self, event_name: str, payload: Any):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception("Error delivering %s to %r", event_name, cb)


# A singleton-like instance (can be imported)
GLOBAL_EVENT_BUS = EventBus()


def logging_listener(event_name: str, payload: Any):
	logger.info("[EVENT] %s: %s", event_name, payload)


def create_event(event_name: str, payload: Any = None) -> None:
	"""Publish an event on the global bus (sugar function)."""
	GLOBAL_EVENT_BUS.publish(event_name, payload)


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS', 'create_event', 'logging_listener',
	'TAXPLAN_GENERATED', 'TAXPLAN_FALLBACK_USED', 'TAXPLAN_SUGGESTION_REPAIRED', 'ALL_EVENTS'
]
