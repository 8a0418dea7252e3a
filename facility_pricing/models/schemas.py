"""
Input snapshots consumed by the pricing engine.

A PricingPlan is the tenant's cost/margin model; a Facility is the physical
description being priced.  Both are loaded by the persistence collaborators
and handed to the engine as immutable-by-convention pydantic models.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Optional
from pydantic import BaseModel, Field

from .enums import (
    PricingType,
    FloorType,
    ConditionLevel,
    BuildingType,
    TaskComplexity,
    ServiceFrequency,
)


# ── Multiplier value ranges ──────────────────────────────

SurfaceFactor = Annotated[float, Field(ge=0, le=5)]
FrequencyFactor = Annotated[float, Field(ge=0, le=10)]
AddOnFraction = Annotated[float, Field(ge=0, le=2)]


# ── Default tables ───────────────────────────────────────

DEFAULT_FLOOR_TYPE_MULTIPLIERS: dict[FloorType, float] = {
    FloorType.VCT: 1.0,
    FloorType.CARPET: 1.15,
    FloorType.TILE: 1.1,
    FloorType.HARDWOOD: 1.2,
    FloorType.CONCRETE: 0.9,
    FloorType.OTHER: 1.0,
}

DEFAULT_CONDITION_MULTIPLIERS: dict[ConditionLevel, float] = {
    ConditionLevel.STANDARD: 1.0,
    ConditionLevel.MEDIUM: 1.25,
    ConditionLevel.HARD: 1.33,
}

DEFAULT_BUILDING_TYPE_MULTIPLIERS: dict[BuildingType, float] = {
    BuildingType.OFFICE: 1.0,
    BuildingType.MEDICAL: 1.3,
    BuildingType.INDUSTRIAL: 1.15,
    BuildingType.RETAIL: 1.05,
    BuildingType.EDUCATIONAL: 1.1,
    BuildingType.WAREHOUSE: 0.9,
    BuildingType.RESIDENTIAL: 1.0,
    BuildingType.MIXED: 1.05,
    BuildingType.OTHER: 1.0,
}

DEFAULT_TASK_COMPLEXITY_ADD_ONS: dict[TaskComplexity, float] = {
    TaskComplexity.STANDARD: 0.0,
    TaskComplexity.SANITIZATION: 0.15,
    TaskComplexity.BIOHAZARD: 0.5,
    TaskComplexity.HIGH_SECURITY: 0.2,
}

# Flat-rate strategy only: weekly-equivalent factor per service frequency
DEFAULT_FREQUENCY_MULTIPLIERS: dict[ServiceFrequency, float] = {
    ServiceFrequency.ONE_X_WEEK: 1.0,
    ServiceFrequency.TWO_X_WEEK: 1.8,
    ServiceFrequency.THREE_X_WEEK: 2.5,
    ServiceFrequency.FOUR_X_WEEK: 3.2,
    ServiceFrequency.FIVE_X_WEEK: 4.0,
    ServiceFrequency.DAILY: 4.33,
    ServiceFrequency.WEEKLY: 1.0,
    ServiceFrequency.BIWEEKLY: 0.5,
    ServiceFrequency.MONTHLY: 0.25,
    ServiceFrequency.QUARTERLY: 0.083,
}


# ── Pricing plan ─────────────────────────────────────────


class PricingPlan(BaseModel):
    """Versioned, tenant-level configuration of cost rates and multiplier tables."""
    id: str = ""
    name: str = Field(default="Default Plan", min_length=1, max_length=100)
    pricing_type: PricingType = PricingType.COST_BASED
    version: int = 1
    is_active: bool = True
    is_default: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    archived_at: Optional[datetime] = None

    # Labor
    labor_cost_per_hour: float = Field(default=18.0, ge=0)
    labor_burden_percentage: float = Field(default=0.25, ge=0, le=1)
    sqft_per_labor_hour: float = Field(default=2500.0, ge=100)

    # Overhead
    insurance_percentage: float = Field(default=0.08, ge=0, le=1)
    admin_overhead_percentage: float = Field(default=0.12, ge=0, le=1)
    travel_cost_per_visit: float = Field(default=15.0, ge=0)
    equipment_percentage: float = Field(default=0.05, ge=0, le=1)

    # Supplies (per-sqft rate wins over the percentage when set)
    supply_cost_percentage: float = Field(default=0.04, ge=0, le=1)
    supply_cost_per_sqft: Optional[float] = Field(default=None, ge=0)

    # Profit margin must stay below 1, grossing divides by (1 - margin)
    target_profit_margin: float = Field(default=0.25, ge=0, lt=1)
    minimum_monthly_charge: float = Field(default=250.0, ge=0)

    # Flat-rate strategy
    base_rate_per_sqft: float = Field(default=0.10, ge=0)

    # Per-hour strategy
    hourly_rate: float = Field(default=35.0, ge=0)

    floor_type_multipliers: dict[FloorType, SurfaceFactor] = Field(
        default_factory=lambda: dict(DEFAULT_FLOOR_TYPE_MULTIPLIERS)
    )
    condition_multipliers: dict[ConditionLevel, SurfaceFactor] = Field(
        default_factory=lambda: dict(DEFAULT_CONDITION_MULTIPLIERS)
    )
    building_type_multipliers: dict[BuildingType, SurfaceFactor] = Field(
        default_factory=lambda: dict(DEFAULT_BUILDING_TYPE_MULTIPLIERS)
    )
    task_complexity_add_ons: dict[TaskComplexity, AddOnFraction] = Field(
        default_factory=lambda: dict(DEFAULT_TASK_COMPLEXITY_ADD_ONS)
    )
    frequency_multipliers: dict[ServiceFrequency, FrequencyFactor] = Field(
        default_factory=lambda: dict(DEFAULT_FREQUENCY_MULTIPLIERS)
    )


# ── Facility structure ───────────────────────────────────


class AreaFixture(BaseModel):
    """A countable fixture inside an area (toilets, sinks, desks...)."""
    fixture_type_id: str
    name: str = ""
    count: int = Field(default=0, ge=0)


class Area(BaseModel):
    """A discrete physical space within a facility."""
    id: str
    name: Optional[str] = None
    area_type: str = ""
    square_feet: float = Field(default=0.0, ge=0)
    quantity: int = Field(default=1, ge=1)
    floor_type: str = FloorType.VCT.value
    condition_level: str = ConditionLevel.STANDARD.value
    room_count: int = Field(default=0, ge=0)
    unit_count: int = Field(default=0, ge=0)
    fixtures: list[AreaFixture] = []

    @property
    def display_name(self) -> str:
        return self.name or self.area_type or "Area"

    @property
    def total_square_feet(self) -> float:
        return self.square_feet * self.quantity


class TaskTemplate(BaseModel):
    """Reusable timing definition a facility task derives from."""
    id: str
    name: str
    base_minutes: float = 0.0
    per_sqft_minutes: float = 0.0
    per_unit_minutes: float = 0.0
    per_room_minutes: float = 0.0
    fixture_minutes: dict[str, float] = {}  # fixture_type_id -> minutes per fixture


class FacilityTask(BaseModel):
    """A cleaning task assigned to one area, or facility-wide when area_id is None."""
    id: str
    area_id: Optional[str] = None
    custom_name: Optional[str] = None
    cleaning_frequency: str = "daily"
    priority: int = 0
    template: Optional[TaskTemplate] = None

    base_minutes_override: Optional[float] = None
    per_sqft_minutes_override: Optional[float] = None
    per_unit_minutes_override: Optional[float] = None
    per_room_minutes_override: Optional[float] = None
    fixture_minutes_override: dict[str, float] = {}

    @property
    def display_name(self) -> str:
        if self.custom_name:
            return self.custom_name
        if self.template is not None and self.template.name:
            return self.template.name
        return "Unnamed Task"


class Facility(BaseModel):
    """A priced site: building type plus its ordered areas and tasks."""
    id: str
    name: str = ""
    building_type: str = BuildingType.OTHER.value
    areas: list[Area] = []
    tasks: list[FacilityTask] = []

    @property
    def total_square_feet(self) -> float:
        return sum(area.total_square_feet for area in self.areas)
