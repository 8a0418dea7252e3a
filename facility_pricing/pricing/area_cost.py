"""
Area Cost Calculator — labor, overhead and supply cost of one area per visit.
"""

from __future__ import annotations

from dataclasses import dataclass

from facility_pricing.models.results import AreaCostBreakdown
from facility_pricing.models.schemas import Area
from facility_pricing.pricing.rate_model import RateModel
from facility_pricing.utils.money import round_money


@dataclass(frozen=True)
class AreaCost:
    """Unrounded per-visit costs; the aggregator sums these."""
    total_area_sqft: float
    labor_hours: float
    labor_cost_base: float
    labor_burden: float
    area_labor_cost: float
    insurance_cost: float
    admin_overhead_cost: float
    equipment_cost: float
    supply_cost: float

    @property
    def total_cost_per_visit(self) -> float:
        return (
            self.area_labor_cost
            + self.insurance_cost
            + self.admin_overhead_cost
            + self.equipment_cost
            + self.supply_cost
        )


def calculate_area_cost(
    area: Area,
    rates: RateModel,
    floor_multiplier: float,
    condition_multiplier: float,
) -> AreaCost:
    """Per-visit cost buildup for one area. Zero square feet gives all-zero costs."""
    total_area_sqft = float(area.square_feet) * area.quantity

    labor_hours = (total_area_sqft / rates.sqft_per_labor_hour) * floor_multiplier * condition_multiplier
    labor_cost_base = labor_hours * rates.labor_cost_per_hour
    labor_burden = labor_cost_base * rates.labor_burden_percentage
    area_labor_cost = labor_cost_base + labor_burden

    insurance_cost = area_labor_cost * rates.insurance_percentage
    admin_overhead_cost = area_labor_cost * rates.admin_overhead_percentage
    equipment_cost = area_labor_cost * rates.equipment_percentage

    # Flat per-sqft supply rate applies only when the plan sets it explicitly
    if rates.supply_cost_per_sqft is not None:
        supply_cost = total_area_sqft * rates.supply_cost_per_sqft
    else:
        supply_cost = (
            area_labor_cost + insurance_cost + admin_overhead_cost + equipment_cost
        ) * rates.supply_cost_percentage

    return AreaCost(
        total_area_sqft=total_area_sqft,
        labor_hours=labor_hours,
        labor_cost_base=labor_cost_base,
        labor_burden=labor_burden,
        area_labor_cost=area_labor_cost,
        insurance_cost=insurance_cost,
        admin_overhead_cost=admin_overhead_cost,
        equipment_cost=equipment_cost,
        supply_cost=supply_cost,
    )


def build_area_breakdown(
    area: Area,
    cost: AreaCost,
    floor_multiplier: float,
    condition_multiplier: float,
    monthly_visits: float,
    monthly_price: float,
) -> AreaCostBreakdown:
    """Display view of an AreaCost; every money field rounded to cents."""
    return AreaCostBreakdown(
        area_id=area.id,
        area_name=area.display_name,
        area_type_name=area.area_type or area.display_name,
        square_feet=cost.total_area_sqft,
        floor_type=area.floor_type,
        condition_level=area.condition_level,
        quantity=area.quantity,
        floor_multiplier=floor_multiplier,
        condition_multiplier=condition_multiplier,
        labor_hours=round_money(cost.labor_hours),
        labor_cost_base=round_money(cost.labor_cost_base),
        labor_burden=round_money(cost.labor_burden),
        total_labor_cost=round_money(cost.area_labor_cost),
        insurance_cost=round_money(cost.insurance_cost),
        admin_overhead_cost=round_money(cost.admin_overhead_cost),
        equipment_cost=round_money(cost.equipment_cost),
        supply_cost=round_money(cost.supply_cost),
        total_cost_per_visit=round_money(cost.total_cost_per_visit),
        monthly_visits=monthly_visits,
        monthly_price=round_money(monthly_price),
    )
