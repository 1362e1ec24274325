import json
import logging
import os
import shutil
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from taxplan.domain.Plan import Plan
from taxplan.infra.paths import TAX_PLANS_FILE
from taxplan.logic.prompting.tax_plan_prompt import ExistingPlanData

logger = logging.getLogger(__name__)


class PlanRepositoryError(Exception):
    pass


class PlanNotFound(PlanRepositoryError):
    pass


class UnauthorizedPlanAccess(PlanRepositoryError):
    pass


class PlanRepository:
    """Tax plans stored in one JSON file keyed by plan id.

    Every read goes to disk; writes replace the file atomically under a
    process-local lock.
    """

    _lock = threading.Lock()

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else TAX_PLANS_FILE

    # --- storage ---
    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                store = json.load(f) or {}
        except (OSError, json.JSONDecodeError):
            logger.exception("Could not read %s, treating as empty", self.path)
            return {}
        return store if isinstance(store, dict) else {}

    def _atomic_write(self, store: dict):
        os.makedirs(self.path.parent, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".tax_plans_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(store, tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, self.path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def _owned(self, store: dict, plan_id: str, user_id: str) -> Plan:
        data = store.get(plan_id)
        if data is None:
            raise PlanNotFound(f"Tax plan {plan_id} not found")
        plan = Plan.from_dict(data)
        if plan.user_id != user_id:
            raise UnauthorizedPlanAccess(f"Tax plan {plan_id} belongs to another user")
        return plan

    # --- CRUD ---
    def create_plan(self, plan: Plan) -> Plan:
        with self._lock:
            store = self._load()
            store[plan.id] = plan.to_dict()
            self._atomic_write(store)
        logger.info("Saved tax plan %s for user %s", plan.id, plan.user_id)
        return plan

    def get_user_plans(self, user_id: str) -> List[Plan]:
        """Plans of one user, newest first."""
        plans = [Plan.from_dict(d) for d in self._load().values() if d.get("userId") == user_id]
        return sorted(plans, key=lambda p: p.created_at, reverse=True)

    def get_plan_by_id(self, plan_id: str, user_id: str) -> Plan:
        return self._owned(self._load(), plan_id, user_id)

    def update_plan(self, plan: Plan, user_id: str) -> Plan:
        with self._lock:
            store = self._load()
            self._owned(store, plan.id, user_id)
            plan.updated_at = datetime.now(timezone.utc)
            store[plan.id] = plan.to_dict()
            self._atomic_write(store)
        return plan

    def delete_plan(self, plan_id: str, user_id: str) -> None:
        with self._lock:
            store = self._load()
            self._owned(store, plan_id, user_id)
            del store[plan_id]
            self._atomic_write(store)
        logger.info("Deleted tax plan %s", plan_id)

    def set_suggestion_implemented(self, plan_id: str, suggestion_id: str, implemented: bool,
                                   user_id: str) -> Plan:
        with self._lock:
            store = self._load()
            plan = self._owned(store, plan_id, user_id)
            suggestion = plan.get_suggestion(suggestion_id)
            if suggestion is None:
                raise PlanNotFound(f"Suggestion {suggestion_id} not found in plan {plan_id}")
            suggestion.is_implemented = bool(implemented)
            plan.updated_at = datetime.now(timezone.utc)
            store[plan.id] = plan.to_dict()
            self._atomic_write(store)
        return plan

    def existing_plan_digests(self, user_id: str) -> List[ExistingPlanData]:
        """What prompt building needs to know about the user's earlier plans."""
        return [
            ExistingPlanData(
                plan_type=p.plan_type,
                categories=p.categories(),
                suggestion_texts=[s.suggestion_text[:100] for s in p.suggestions],
            )
            for p in self.get_user_plans(user_id)
        ]


__all__ = ["PlanRepository", "PlanRepositoryError", "PlanNotFound", "UnauthorizedPlanAccess"]
