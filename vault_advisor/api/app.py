# PURPOSE: FastAPI backend exposing the DeFindex vault advisor: vault universe,
#          recommendations, recommend-and-project with fallback, and projections.
# CONTEXT: Local/container counterpart of the Lambda handler; both delegate to
#          vault_advisor.pipeline so responses are identical.
# Run: pip install ".[serve]" && uvicorn vault_advisor.api.app:app --port 8000

from __future__ import annotations

import time
import traceback
import uuid
from typing import Any, Callable, Dict, List, Literal, Optional

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError as FastAPIValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from vault_advisor import pipeline
from vault_advisor.errors import VaultAdvisorError
from vault_advisor.logging_setup import bind_request, configure_logging
from vault_advisor.router import failure_body

APP_VERSION = "0.1.0"
_app_start = time.time()

log = configure_logging()

app = FastAPI(title="Stellar vault advisor API", version=APP_VERSION)

RiskLiteral = Literal["Conservative", "Balanced", "Aggressive"]
LiquidityLiteral = Literal["Low", "Medium", "High"]
ExperienceLiteral = Literal["Beginner", "Intermediate", "Advanced"]
NetworkLiteral = Literal["testnet", "mainnet"]


# Pydantic models document the request bodies in OpenAPI; the pipeline still
# validates against the JSON schemas so Lambda and API reject the same inputs.
class RecommendAndProjectIn(BaseModel):
    amountBase: str = Field(..., pattern=r"^[0-9]+$", description="Deposit in stroops")
    risk: RiskLiteral
    horizonMonths: Literal[6, 12, 18, 24]
    network: NetworkLiteral
    liquidityNeeds: Optional[LiquidityLiteral] = None
    experienceLevel: Optional[ExperienceLiteral] = None


class RecommendIn(BaseModel):
    amount: float = Field(..., gt=0)
    riskTolerance: RiskLiteral
    timeHorizon: int = Field(..., ge=1, description="Months")
    liquidityNeeds: Optional[LiquidityLiteral] = None
    experienceLevel: Optional[ExperienceLiteral] = None
    network: Optional[NetworkLiteral] = None


class ProjectIn(BaseModel):
    principal: float = Field(..., gt=0)
    apy: float = Field(..., ge=0, le=1000)
    timeHorizons: Optional[List[int]] = Field(None, min_length=1)
    monthlyContribution: Optional[float] = Field(None, ge=0)
    compoundingFrequency: Optional[Literal["monthly", "quarterly", "annually"]] = None


@app.middleware("http")
async def bind_request_ids(request: Request, call_next):
    """Bind request/correlation ids for every log line and time the request."""
    t0 = time.time()
    bind_request(
        request.headers.get("x-request-id") or uuid.uuid4().hex,
        request.headers.get("x-correlation-id") or uuid.uuid4().hex,
    )
    log.info("request.received", method=request.method, path=request.url.path)
    response = await call_next(request)
    log.info("response.sent", status=response.status_code, latency_ms=round((time.time() - t0) * 1000, 1))
    return response


@app.exception_handler(FastAPIValidationError)
async def validation_error_to_400(request: Request, exc: FastAPIValidationError):
    """Report body validation errors as 400 with the API's error shape (not FastAPI's 422)."""
    first = exc.errors()[0] if exc.errors() else {}
    loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{first.get('msg', 'Invalid request')} at $.{loc}" if loc else first.get("msg", "Invalid request")
    return JSONResponse(status_code=400, content={"error": message, "success": False})


def _dispatch(path: str, fn: Callable[..., Dict[str, Any]], *args) -> JSONResponse:
    """
    Call a pipeline function and turn its outcome into a JSONResponse.

    notes:
    - VaultAdvisorError keeps its status and body (400/404).
    - Any other exception is logged and answered with the route's generic 500 body.
    """
    try:
        return JSONResponse(status_code=200, content=fn(*args))
    except VaultAdvisorError as e:
        log.warning("response.rejected", status=e.status_code, error=e.message)
        return JSONResponse(status_code=e.status_code, content=e.to_body())
    except Exception as e:
        log.error("response.error", error=f"{type(e).__name__}: {e}", traceback=traceback.format_exc(limit=2))
        return JSONResponse(status_code=500, content=failure_body(path))


@app.get("/health")
def health():
    """Readiness probe: status, version and uptime."""
    return {"status": "ok", "version": APP_VERSION, "uptime_s": int(time.time() - _app_start)}


@app.get("/api/defindex/vaults")
def vaults(network: Optional[NetworkLiteral] = Query(None)):
    return _dispatch("/api/defindex/vaults", pipeline.list_vaults, network)


@app.post("/api/defindex/recommend-and-project")
def recommend_and_project(body: RecommendAndProjectIn):
    """
    Recommend one vault for the profile (with fallback cascade) and project the deposit.

    returns:
    - 200 with vault, projection, apiCalls, success, optional fallbackUsed
    - 404 with fallbackOptions when no vault fits
    - 500 with success=false on unexpected errors
    """
    return _dispatch(
        "/api/defindex/recommend-and-project",
        pipeline.run_recommend_and_project,
        body.model_dump(exclude_none=True),
    )


@app.post("/api/defindex/recommend")
def recommend(body: RecommendIn):
    return _dispatch("/api/defindex/recommend", pipeline.run_recommend, body.model_dump(exclude_none=True))


@app.post("/api/defindex/project")
def project(body: ProjectIn):
    return _dispatch("/api/defindex/project", pipeline.run_projection, body.model_dump(exclude_none=True))


@app.get("/api/defindex/project")
def project_scenarios():
    return _dispatch("/api/defindex/project", pipeline.projection_scenarios)
