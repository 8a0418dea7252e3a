"""
Computed, non-persisted results produced by the pricing engine.
Monetary fields are rounded to 2 decimals; they are presentation values,
the engine accumulates unrounded figures internally.
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field


# ── Pricing ──────────────────────────────────────────────


class AreaCostBreakdown(BaseModel):
    """Per-area cost buildup for one service visit plus its monthly share."""
    area_id: str
    area_name: str
    area_type_name: str = ""
    square_feet: float = 0.0  # square_feet * quantity
    floor_type: str = ""
    condition_level: str = ""
    quantity: int = 1
    floor_multiplier: float = 1.0
    condition_multiplier: float = 1.0

    # cost-based strategy
    labor_hours: float = 0.0
    labor_cost_base: float = 0.0
    labor_burden: float = 0.0
    total_labor_cost: float = 0.0
    insurance_cost: float = 0.0
    admin_overhead_cost: float = 0.0
    equipment_cost: float = 0.0
    supply_cost: float = 0.0
    total_cost_per_visit: float = 0.0

    # flat-rate strategy
    base_price: float = 0.0
    frequency_multiplier: float = 1.0
    price_before_frequency: float = 0.0

    monthly_visits: float = 0.0
    monthly_price: float = 0.0  # grossed for profit, before facility-level adjustments


class CostBreakdown(BaseModel):
    """Facility-level per-visit cost totals."""
    total_labor_hours: float = 0.0
    total_labor_cost: float = 0.0
    total_insurance_cost: float = 0.0
    total_admin_overhead_cost: float = 0.0
    total_equipment_cost: float = 0.0
    total_travel_cost: float = 0.0
    total_supply_cost: float = 0.0
    total_cost_per_visit: float = 0.0


class PricingPlanSnapshot(BaseModel):
    """Copy of the plan values a result was computed from (audit trail)."""
    pricing_plan_id: str
    pricing_plan_name: str
    pricing_type: str
    plan_version: int = 1
    rates: dict[str, Optional[float]] = {}
    floor_type_multipliers: dict[str, float] = {}
    condition_multipliers: dict[str, float] = {}
    building_type_multipliers: dict[str, float] = {}
    task_complexity_add_ons: dict[str, float] = {}
    frequency_multipliers: dict[str, float] = {}
    fingerprint: str = ""
    captured_at: Optional[str] = None


class FacilityPricingResult(BaseModel):
    facility_id: str
    facility_name: str
    building_type: str
    service_frequency: str
    total_square_feet: float = 0.0
    areas: list[AreaCostBreakdown] = []
    cost_breakdown: CostBreakdown = Field(default_factory=CostBreakdown)
    monthly_visits: float = 0.0
    monthly_cost_before_profit: float = 0.0
    profit_amount: float = 0.0
    profit_margin_applied: float = 0.0
    building_multiplier: float = 1.0
    building_adjustment: float = 0.0
    task_complexity_add_on: float = 0.0
    task_complexity_amount: float = 0.0
    subtotal: float = 0.0
    monthly_total: float = 0.0
    minimum_applied: bool = False
    pricing_plan_id: str = ""
    pricing_plan_name: str = ""
    strategy_key: str = ""
    strategy_version: str = ""
    settings_snapshot: Optional[PricingPlanSnapshot] = None


class FrequencyComparison(BaseModel):
    frequency: str
    monthly_total: float
    monthly_visits: float


class ProposalServiceLine(BaseModel):
    """One priced line item of a proposal/quotation."""
    service_name: str
    service_type: str
    frequency: str
    monthly_price: float
    description: str = ""
    included_tasks: list[str] = []
    area_id: Optional[str] = None


class FacilityReadiness(BaseModel):
    is_ready: bool
    reason: Optional[str] = None  # ReadinessReason value
    message: Optional[str] = None
    area_count: int = 0
    total_square_feet: float = 0.0


# ── Task time ────────────────────────────────────────────


class TaskTimeEstimate(BaseModel):
    task_id: str
    task_name: str
    cleaning_frequency: str = ""
    calculated_minutes: float = 0.0


class AreaTimeBreakdown(BaseModel):
    area_id: str
    name: str
    square_feet: float = 0.0
    floor_type: str = ""
    total_minutes: float = 0.0
    tasks: list[TaskTimeEstimate] = []


class FacilityTaskTimeBreakdown(BaseModel):
    facility_id: str
    areas: list[AreaTimeBreakdown] = []
    total_minutes: float = 0.0
    total_hours: float = 0.0
