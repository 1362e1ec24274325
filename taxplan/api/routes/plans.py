from fastapi import APIRouter, Depends, HTTPException, Response

from taxplan.api.dependencies import get_plan_repository, get_user_id
from taxplan.infra.Plan_Repository import PlanNotFound, PlanRepository, UnauthorizedPlanAccess
from taxplan.infra.pdf_utils import generate_pdf_for_plan
from taxplan.logic.reporting.plan_summary import compute_plan_summary
from taxplan.utilities.validators import SuggestionUpdateInput

router = APIRouter(prefix="/api/tax-plans")


def _load_plan(repo: PlanRepository, plan_id: str, user_id: str):
    try:
        return repo.get_plan_by_id(plan_id, user_id)
    except PlanNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UnauthorizedPlanAccess as e:
        raise HTTPException(status_code=403, detail=str(e))


@router.get("")
def list_plans(user_id: str = Depends(get_user_id), repo: PlanRepository = Depends(get_plan_repository)):
    """All plans of the calling user, newest first."""
    return [p.to_dict() for p in repo.get_user_plans(user_id)]


@router.get("/{plan_id}")
def get_plan(plan_id: str, user_id: str = Depends(get_user_id),
             repo: PlanRepository = Depends(get_plan_repository)):
    return _load_plan(repo, plan_id, user_id).to_dict()


@router.delete("/{plan_id}", status_code=204)
def delete_plan(plan_id: str, user_id: str = Depends(get_user_id),
                repo: PlanRepository = Depends(get_plan_repository)):
    try:
        repo.delete_plan(plan_id, user_id)
    except PlanNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UnauthorizedPlanAccess as e:
        raise HTTPException(status_code=403, detail=str(e))
    return Response(status_code=204)


@router.patch("/{plan_id}/suggestions/{suggestion_id}")
def update_suggestion(plan_id: str, suggestion_id: str, payload: SuggestionUpdateInput,
                      user_id: str = Depends(get_user_id),
                      repo: PlanRepository = Depends(get_plan_repository)):
    """Mark a suggestion as implemented (or not)."""
    try:
        plan = repo.set_suggestion_implemented(plan_id, suggestion_id, payload.is_implemented, user_id)
    except PlanNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UnauthorizedPlanAccess as e:
        raise HTTPException(status_code=403, detail=str(e))
    return plan.to_dict()


@router.get("/{plan_id}/summary")
def plan_summary(plan_id: str, user_id: str = Depends(get_user_id),
                 repo: PlanRepository = Depends(get_plan_repository)):
    return compute_plan_summary(_load_plan(repo, plan_id, user_id))


@router.get("/{plan_id}/pdf")
def plan_pdf(plan_id: str, user_id: str = Depends(get_user_id),
             repo: PlanRepository = Depends(get_plan_repository)):
    plan = _load_plan(repo, plan_id, user_id)
    pdf_bytes = generate_pdf_for_plan(plan)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="tax_plan_{plan.id}.pdf"'},
    )
