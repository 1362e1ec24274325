"""Shared FastAPI dependencies; override them in tests with app.dependency_overrides."""
from typing import Optional

from fastapi import Header, HTTPException

from taxplan.infra.Plan_Repository import PlanRepository


def get_plan_repository() -> PlanRepository:
    return PlanRepository()


def get_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Owning user id from the X-User-Id header; authentication happens upstream."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()
