from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

from taxplan.events.event_helpers import subscribe_logging_listener

# Routers
from taxplan.api.routes import plans
from taxplan.api.api_ai import router as ai_router

# Logging
logger = logging.getLogger("taxplan_app")

# Initialize FastAPI app
app = FastAPI(title="Tax Plan Synthesis API")

# Include routers
app.include_router(ai_router)
app.include_router(plans.router)


@app.exception_handler(RequestValidationError)
async def _validation_error_handler(request: Request, exc: RequestValidationError):
    """Invalid request payloads are client errors: 400 with pydantic's error list."""
    logger.warning("Invalid request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.on_event("startup")
def _startup_event_logging():
    """Log tax plan events published on the global bus."""
    subscribe_logging_listener()
    logger.info("Tax plan event logging started")


@app.get("/health")
def health():
    return {"status": "ok"}
