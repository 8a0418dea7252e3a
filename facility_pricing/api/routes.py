"""
API routes — thin HTTP layer that delegates to the PricingEngine.

Routes:
  GET  /health                                      → API health check
  GET  /api/pricing-plans                           → List pricing plans
  POST /api/pricing-plans                           → Create or update a pricing plan
  GET  /api/pricing-plans/{plan_id}                 → Get one pricing plan
  POST /api/pricing-plans/{plan_id}/default         → Make a plan the default
  GET  /api/pricing-strategies                      → Registered pricing strategies
  GET  /api/facilities                              → List stored facility ids
  PUT  /api/facilities/{facility_id}                → Store a facility snapshot
  GET  /api/facilities/{facility_id}/readiness      → Can the facility be priced?
  POST /api/facilities/{facility_id}/pricing        → Full pricing result
  POST /api/facilities/{facility_id}/pricing/compare → Monthly totals per frequency
  POST /api/facilities/{facility_id}/proposal-services → Proposal line items
  GET  /api/facilities/{facility_id}/task-time      → Task time breakdown
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from facility_pricing.config import get_settings
from facility_pricing.errors import (
    InvalidConfigurationError,
    NotFoundError,
    NotReadyError,
    PricingError,
)
from facility_pricing.models.results import (
    FacilityPricingResult,
    FacilityReadiness,
    FacilityTaskTimeBreakdown,
    FrequencyComparison,
    ProposalServiceLine,
)
from facility_pricing.models.schemas import Facility, PricingPlan
from facility_pricing.pricing.engine import PricingEngine

logger = logging.getLogger(__name__)

# ── Routers ──────────────────────────────────────────────
health_router = APIRouter()
plans_router = APIRouter()
strategies_router = APIRouter()
facilities_router = APIRouter()


@lru_cache()
def get_engine() -> PricingEngine:
    """Process-wide engine; tests replace it through dependency_overrides."""
    return PricingEngine.from_settings()


def _to_http_error(e: PricingError) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, NotReadyError):
        return HTTPException(status_code=422, detail={"reason": e.reason, "message": e.message})
    if isinstance(e, InvalidConfigurationError):
        return HTTPException(status_code=422, detail={"message": str(e), "errors": e.errors})
    logger.error(f"Unhandled pricing error: {e}")
    return HTTPException(status_code=500, detail=str(e))


# ── Request schemas ──────────────────────────────────────
class PricingRequest(BaseModel):
    service_frequency: Optional[str] = None
    task_complexity: Optional[str] = None
    pricing_plan_id: Optional[str] = None


class CompareRequest(BaseModel):
    frequencies: Optional[list[str]] = None
    pricing_plan_id: Optional[str] = None


# ── Health ───────────────────────────────────────────────

@health_router.get("/health")
async def health_check():
    settings = get_settings()
    return {
        "status": "ok",
        "app": settings.app_name,
        "mock_mode": settings.mock_mode,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ── Pricing plans ────────────────────────────────────────

@plans_router.get("", response_model=list[PricingPlan])
def list_pricing_plans(include_archived: bool = False, engine: PricingEngine = Depends(get_engine)):
    return engine.plans.list_plans(include_archived=include_archived)


@plans_router.post("", response_model=PricingPlan, status_code=201)
def save_pricing_plan(body: dict[str, Any], engine: PricingEngine = Depends(get_engine)):
    # Raw body so range violations surface as InvalidConfigurationError details
    try:
        return engine.plans.save_plan(body)
    except PricingError as e:
        raise _to_http_error(e)


@plans_router.get("/{plan_id}", response_model=PricingPlan)
def get_pricing_plan(plan_id: str, engine: PricingEngine = Depends(get_engine)):
    plan = engine.plans.get_plan(plan_id)
    if plan is None:
        raise HTTPException(status_code=404, detail=f"pricing plan not found: {plan_id}")
    return plan


@plans_router.post("/{plan_id}/default", response_model=PricingPlan)
def set_default_pricing_plan(plan_id: str, engine: PricingEngine = Depends(get_engine)):
    try:
        return engine.plans.set_default_plan(plan_id)
    except PricingError as e:
        raise _to_http_error(e)


# ── Pricing strategies ───────────────────────────────────

@strategies_router.get("")
def list_pricing_strategies(engine: PricingEngine = Depends(get_engine)):
    return engine.registry.list_all()


# ── Facilities ───────────────────────────────────────────

@facilities_router.get("", response_model=list[str])
def list_facilities(engine: PricingEngine = Depends(get_engine)):
    return engine.facilities.list_facilities()


@facilities_router.put("/{facility_id}", response_model=Facility)
def save_facility(facility_id: str, body: Facility, engine: PricingEngine = Depends(get_engine)):
    if body.id != facility_id:
        raise HTTPException(status_code=400, detail="Facility id in path and body must match")
    return engine.facilities.save_facility(body)


@facilities_router.get("/{facility_id}/readiness", response_model=FacilityReadiness)
def facility_readiness(facility_id: str, engine: PricingEngine = Depends(get_engine)):
    return engine.is_facility_ready_for_pricing(facility_id)


@facilities_router.post("/{facility_id}/pricing", response_model=FacilityPricingResult)
def calculate_facility_pricing(
    facility_id: str,
    body: PricingRequest,
    engine: PricingEngine = Depends(get_engine),
):
    settings = engine.settings
    try:
        return engine.calculate_pricing(
            facility_id,
            body.service_frequency or settings.default_service_frequency,
            task_complexity=body.task_complexity or settings.default_task_complexity,
            pricing_plan_id=body.pricing_plan_id,
            captured_at=datetime.now(timezone.utc).isoformat(),
        )
    except PricingError as e:
        raise _to_http_error(e)


@facilities_router.post("/{facility_id}/pricing/compare", response_model=list[FrequencyComparison])
def compare_facility_pricing(
    facility_id: str,
    body: CompareRequest,
    engine: PricingEngine = Depends(get_engine),
):
    try:
        return engine.compare_pricing_across_frequencies(
            facility_id,
            frequencies=body.frequencies,
            pricing_plan_id=body.pricing_plan_id,
        )
    except PricingError as e:
        raise _to_http_error(e)


@facilities_router.post("/{facility_id}/proposal-services", response_model=list[ProposalServiceLine])
def facility_proposal_services(
    facility_id: str,
    body: PricingRequest,
    engine: PricingEngine = Depends(get_engine),
):
    settings = engine.settings
    try:
        return engine.generate_proposal_services(
            facility_id,
            body.service_frequency or settings.default_service_frequency,
            task_complexity=body.task_complexity or settings.default_task_complexity,
            pricing_plan_id=body.pricing_plan_id,
        )
    except PricingError as e:
        raise _to_http_error(e)


@facilities_router.get("/{facility_id}/task-time", response_model=FacilityTaskTimeBreakdown)
def facility_task_time(facility_id: str, engine: PricingEngine = Depends(get_engine)):
    try:
        return engine.estimate_task_time(facility_id)
    except PricingError as e:
        raise _to_http_error(e)
