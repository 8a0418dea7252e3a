"""
Facility Pricing Aggregator — rolls per-area visit costs up to a monthly price.

Order of operations:
  1. Σ area cost + travel (once per facility)   → cost per visit
  2. × monthly visits                           → monthly cost before profit
  3. ÷ (1 - target margin)                      → subtotal (grossing, not markup)
  4. × building multiplier                      → subtotal incl. building adjustment
  5. + task complexity add-on fraction          → monthly total
  6. floor at the plan's minimum monthly charge
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from facility_pricing.errors import InvalidConfigurationError
from facility_pricing.models.results import CostBreakdown
from facility_pricing.pricing.area_cost import AreaCost
from facility_pricing.utils.money import round_money

logger = logging.getLogger(__name__)


def gross_up(cost: float, target_profit_margin: float) -> float:
    """Sell price that realizes *target_profit_margin* on *cost*."""
    if not 0 <= target_profit_margin < 1:
        raise InvalidConfigurationError(
            f"target_profit_margin must be in [0, 1), got {target_profit_margin}",
            errors=[{"field": "target_profit_margin", "value": target_profit_margin}],
        )
    return cost / (1 - target_profit_margin)


@dataclass(frozen=True)
class FacilityTotals:
    """Unrounded facility-level figures."""
    total_labor_hours: float
    total_labor_cost: float
    total_insurance_cost: float
    total_admin_overhead_cost: float
    total_equipment_cost: float
    total_supply_cost: float
    travel_cost_per_visit: float
    total_cost_per_visit: float
    monthly_visits: float
    monthly_cost_before_profit: float
    profit_amount: float
    profit_margin_applied: float
    building_multiplier: float
    building_adjustment: float
    task_complexity_add_on: float
    task_complexity_amount: float
    subtotal: float
    monthly_total: float
    minimum_applied: bool

    def cost_breakdown(self) -> CostBreakdown:
        return CostBreakdown(
            total_labor_hours=round_money(self.total_labor_hours),
            total_labor_cost=round_money(self.total_labor_cost),
            total_insurance_cost=round_money(self.total_insurance_cost),
            total_admin_overhead_cost=round_money(self.total_admin_overhead_cost),
            total_equipment_cost=round_money(self.total_equipment_cost),
            total_travel_cost=round_money(self.travel_cost_per_visit),
            total_supply_cost=round_money(self.total_supply_cost),
            total_cost_per_visit=round_money(self.total_cost_per_visit),
        )


def aggregate_facility_pricing(
    area_costs: Sequence[AreaCost],
    *,
    travel_cost_per_visit: float,
    monthly_visits: float,
    target_profit_margin: float,
    building_multiplier: float,
    task_complexity_add_on: float,
    minimum_monthly_charge: float,
) -> FacilityTotals:
    """Apply the facility-level steps to already computed area costs."""
    area_cost_total = sum(cost.total_cost_per_visit for cost in area_costs)
    total_cost_per_visit = area_cost_total + travel_cost_per_visit

    monthly_cost_before_profit = total_cost_per_visit * monthly_visits

    subtotal = gross_up(monthly_cost_before_profit, target_profit_margin)
    profit_amount = subtotal - monthly_cost_before_profit

    building_adjustment = subtotal * (building_multiplier - 1)
    subtotal += building_adjustment

    task_complexity_amount = subtotal * task_complexity_add_on
    monthly_total = subtotal + task_complexity_amount

    minimum_applied = monthly_total < minimum_monthly_charge
    if minimum_applied:
        logger.info(
            f"Monthly total {monthly_total:,.2f} below minimum "
            f"{minimum_monthly_charge:,.2f}; applying minimum charge"
        )
        monthly_total = minimum_monthly_charge

    return FacilityTotals(
        total_labor_hours=sum(cost.labor_hours for cost in area_costs),
        total_labor_cost=sum(cost.area_labor_cost for cost in area_costs),
        total_insurance_cost=sum(cost.insurance_cost for cost in area_costs),
        total_admin_overhead_cost=sum(cost.admin_overhead_cost for cost in area_costs),
        total_equipment_cost=sum(cost.equipment_cost for cost in area_costs),
        total_supply_cost=sum(cost.supply_cost for cost in area_costs),
        travel_cost_per_visit=travel_cost_per_visit,
        total_cost_per_visit=total_cost_per_visit,
        monthly_visits=monthly_visits,
        monthly_cost_before_profit=monthly_cost_before_profit,
        profit_amount=profit_amount,
        profit_margin_applied=target_profit_margin,
        building_multiplier=building_multiplier,
        building_adjustment=building_adjustment,
        task_complexity_add_on=task_complexity_add_on,
        task_complexity_amount=task_complexity_amount,
        subtotal=subtotal,
        monthly_total=monthly_total,
        minimum_applied=minimum_applied,
    )
