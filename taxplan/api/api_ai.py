import logging
from typing import List, Optional, Protocol

from openai import AsyncOpenAI, OpenAIError
from fastapi import APIRouter, Depends, HTTPException

from taxplan.api.dependencies import get_plan_repository, get_user_id
from taxplan.domain.Plan import Plan
from taxplan.events.event_helpers import publish_synthesis_outcome
from taxplan.infra.Plan_Repository import PlanRepository
from taxplan.logic.pipeline import normalize_employment_type, normalize_plan_type, run_pipeline
from taxplan.logic.prompting.tax_plan_prompt import ExistingPlanData, build_tax_plan_prompt
from taxplan.logic.tables.income import is_usable_income, parse_income
from taxplan.utilities import config
from taxplan.utilities.constants import DEFAULT_FALLBACK_INCOME, FUTURE_INCOME_GROWTH, MAX_INCOME, PLAN_FUTURE
from taxplan.utilities.validators import PlanRequestInput

logger = logging.getLogger(__name__)


class ServiceUnavailable(Exception):
    """The AI service could not produce an answer (no credentials, network or API error)."""


class TaxPlanAIClient(Protocol):
    async def generate(self, prompt: str) -> str: ...


# === Helper: Get OpenAI Client ===
def _get_openai_client() -> Optional[AsyncOpenAI]:
    """Return an AsyncOpenAI client if OPENAI_API_KEY is set, otherwise None."""
    if not config.OPENAI_API_KEY:
        return None
    if config.OPENAI_TIMEOUT is not None:
        return AsyncOpenAI(api_key=config.OPENAI_API_KEY, timeout=config.OPENAI_TIMEOUT)
    return AsyncOpenAI(api_key=config.OPENAI_API_KEY)


class OpenAITaxPlanClient:
    """LLM client backed by the OpenAI Responses API."""

    def __init__(self, client: Optional[AsyncOpenAI] = None, model: str = config.OPENAI_MODEL):
        self._client = client
        self.model = model

    async def generate(self, prompt: str) -> str:
        client = self._client or _get_openai_client()
        if client is None:
            logger.warning("OPENAI_API_KEY not set, cannot generate tax plan.")
            raise ServiceUnavailable("AI service unavailable")
        try:
            response = await client.responses.create(model=self.model, input=prompt)
        except OpenAIError as e:
            logger.exception("Error generating tax plan content from OpenAI")
            raise ServiceUnavailable(str(e)) from e
        return response.output_text or ""


def get_ai_client() -> TaxPlanAIClient:
    return OpenAITaxPlanClient()


# === Tax Plan Generation ===
def project_income(income: float, plan_type: str) -> float:
    """Future plans are built on income grown by FUTURE_INCOME_GROWTH, never past MAX_INCOME."""
    if plan_type == PLAN_FUTURE:
        return min(income * FUTURE_INCOME_GROWTH, MAX_INCOME)
    return income


async def generate_tax_plan(client: TaxPlanAIClient, income, employment_type: str, plan_type: str,
                            name: Optional[str] = None, user_id: str = "",
                            existing_plans: Optional[List[ExistingPlanData]] = None,
                            description: Optional[str] = None) -> Plan:
    """Ask the AI for a plan and turn its answer into a validated Plan.

    Only ServiceUnavailable escapes; whatever text comes back (or none at all)
    still produces a Plan.
    """
    existing_plans = existing_plans or []
    employment_type = normalize_employment_type(employment_type)
    plan_type = normalize_plan_type(plan_type)
    adjusted_income = project_income(parse_income(income), plan_type)

    # The prompt must describe the same income the plan is estimated on
    prompt_income = adjusted_income if is_usable_income(adjusted_income) else DEFAULT_FALLBACK_INCOME
    prompt = build_tax_plan_prompt(prompt_income, employment_type, plan_type, name, existing_plans)
    logger.debug("Tax plan prompt: %s", prompt)

    raw_text = await client.generate(prompt)
    logger.debug("Raw AI response: %s...", (raw_text or "")[:500])

    outcome = run_pipeline(raw_text, adjusted_income, employment_type, plan_type, name=name,
                           description=description, user_id=user_id, variant=len(existing_plans))
    publish_synthesis_outcome(outcome)
    return outcome.plan


# === FastAPI Endpoint ===
router = APIRouter()


@router.post("/api/tax-plans/generate", status_code=201)
async def generate_tax_plan_endpoint(payload: PlanRequestInput,
                                     user_id: str = Depends(get_user_id),
                                     client: TaxPlanAIClient = Depends(get_ai_client),
                                     repo: PlanRepository = Depends(get_plan_repository)):
    existing = repo.existing_plan_digests(user_id)
    try:
        plan = await generate_tax_plan(client, payload.income, payload.employment_type, payload.plan_type,
                                       name=payload.name, user_id=user_id, existing_plans=existing,
                                       description=payload.description)
    except ServiceUnavailable as e:
        raise HTTPException(status_code=503, detail=f"AI service unavailable: {e}")
    repo.create_plan(plan)
    return plan.to_dict()
