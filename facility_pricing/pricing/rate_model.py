"""
Rate Model — typed view over a pricing plan.

This is the single place the multiplier fallback policy lives:
  • multiplicative tables (floor, condition, building, frequency) → 1.0
  • additive add-on tables (task complexity)                       → 0.0
for any key that is unknown or missing from the plan's table.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Mapping, Optional, TypeVar

from facility_pricing.models.enums import (
    FloorType,
    ConditionLevel,
    BuildingType,
    TaskComplexity,
    ServiceFrequency,
)
from facility_pricing.models.schemas import PricingPlan

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

MULTIPLIER_FALLBACK = 1.0
ADD_ON_FALLBACK = 0.0


def _coerce_key(enum_cls: type[E], key: Any) -> Optional[E]:
    if isinstance(key, enum_cls):
        return key
    if key is None:
        return None
    try:
        return enum_cls(str(key))
    except ValueError:
        return None


def resolve_factor(
    table: Mapping[Any, float],
    enum_cls: type[E],
    key: Any,
    fallback: float,
) -> float:
    """Look up *key* in an enum-keyed table, returning *fallback* when absent."""
    member = _coerce_key(enum_cls, key)
    if member is None or member not in table:
        logger.debug(f"{enum_cls.__name__} key {key!r} not in table, using {fallback}")
        return fallback
    return float(table[member])


class RateModel:
    """Scalar rates and table lookups of one pricing plan."""

    def __init__(self, plan: PricingPlan):
        self.plan = plan

    # ── Table lookups ────────────────────────────────────

    def floor_multiplier(self, floor_type: Any) -> float:
        return resolve_factor(self.plan.floor_type_multipliers, FloorType, floor_type, MULTIPLIER_FALLBACK)

    def condition_multiplier(self, condition_level: Any) -> float:
        return resolve_factor(self.plan.condition_multipliers, ConditionLevel, condition_level, MULTIPLIER_FALLBACK)

    def building_multiplier(self, building_type: Any) -> float:
        return resolve_factor(self.plan.building_type_multipliers, BuildingType, building_type, MULTIPLIER_FALLBACK)

    def frequency_multiplier(self, frequency: Any) -> float:
        return resolve_factor(self.plan.frequency_multipliers, ServiceFrequency, frequency, MULTIPLIER_FALLBACK)

    def task_complexity_add_on(self, complexity: Any) -> float:
        return resolve_factor(self.plan.task_complexity_add_ons, TaskComplexity, complexity, ADD_ON_FALLBACK)

    # ── Scalar rates ─────────────────────────────────────

    @property
    def labor_cost_per_hour(self) -> float:
        return float(self.plan.labor_cost_per_hour)

    @property
    def labor_burden_percentage(self) -> float:
        return float(self.plan.labor_burden_percentage)

    @property
    def sqft_per_labor_hour(self) -> float:
        return float(self.plan.sqft_per_labor_hour)

    @property
    def insurance_percentage(self) -> float:
        return float(self.plan.insurance_percentage)

    @property
    def admin_overhead_percentage(self) -> float:
        return float(self.plan.admin_overhead_percentage)

    @property
    def equipment_percentage(self) -> float:
        return float(self.plan.equipment_percentage)

    @property
    def supply_cost_percentage(self) -> float:
        return float(self.plan.supply_cost_percentage)

    @property
    def supply_cost_per_sqft(self) -> Optional[float]:
        if self.plan.supply_cost_per_sqft is None:
            return None
        return float(self.plan.supply_cost_per_sqft)

    @property
    def travel_cost_per_visit(self) -> float:
        return float(self.plan.travel_cost_per_visit)

    @property
    def target_profit_margin(self) -> float:
        return float(self.plan.target_profit_margin)

    @property
    def minimum_monthly_charge(self) -> float:
        return float(self.plan.minimum_monthly_charge)

    @property
    def base_rate_per_sqft(self) -> float:
        return float(self.plan.base_rate_per_sqft)

    @property
    def hourly_rate(self) -> float:
        return float(self.plan.hourly_rate)
