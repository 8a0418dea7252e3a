"""
Pricing strategies — the calculators a plan can select via pricing_type.

  • CostBasedStrategy  (pricing_type = cost_based)
      labor hours → burden → overheads → supplies → profit grossing
  • FlatRateStrategy   (pricing_type = flat_rate)
      square feet × base rate × surface multipliers × frequency factor
  • PerHourStrategy    (pricing_type = per_hour)
      task minutes → hours × hourly rate × surface multipliers × visits

All share the same area walk and hand the proposal generator the same
StrategyQuote shape, so line-item rescaling is strategy independent.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterator, Optional

from facility_pricing.errors import NotFoundError
from facility_pricing.models.enums import BuildingType, ConditionLevel, FloorType, PricingType
from facility_pricing.models.results import (
    AreaCostBreakdown,
    CostBreakdown,
    FacilityPricingResult,
    PricingPlanSnapshot,
)
from facility_pricing.models.schemas import Area, Facility, FacilityTask, PricingPlan
from facility_pricing.pricing.aggregator import aggregate_facility_pricing, gross_up
from facility_pricing.pricing.area_cost import build_area_breakdown, calculate_area_cost
from facility_pricing.pricing.frequency import monthly_visits_for
from facility_pricing.pricing.rate_model import RateModel
from facility_pricing.pricing.task_time import AreaQuantities, calculate_task_minutes
from facility_pricing.utils.hashing import fingerprint
from facility_pricing.utils.money import round_money

logger = logging.getLogger(__name__)


# ── Shared shapes ────────────────────────────────────────


@dataclass(frozen=True)
class AreaWalkItem:
    area: Area
    floor_multiplier: float
    condition_multiplier: float


@dataclass
class StrategyQuote:
    """A pricing result plus the unrounded figures line items are built from."""
    result: FacilityPricingResult
    area_prices: list[tuple[Area, float]] = field(default_factory=list)  # unscaled monthly price per area
    facility_level_price: float = 0.0  # unscaled monthly price of facility-level costs (travel)


_SNAPSHOT_RATE_FIELDS = (
    "labor_cost_per_hour",
    "labor_burden_percentage",
    "sqft_per_labor_hour",
    "insurance_percentage",
    "admin_overhead_percentage",
    "travel_cost_per_visit",
    "equipment_percentage",
    "supply_cost_percentage",
    "supply_cost_per_sqft",
    "target_profit_margin",
    "minimum_monthly_charge",
    "base_rate_per_sqft",
    "hourly_rate",
)


def _table(values: dict) -> dict[str, float]:
    return {getattr(key, "value", str(key)): float(value) for key, value in values.items()}


def build_plan_snapshot(plan: PricingPlan, captured_at: Optional[str] = None) -> PricingPlanSnapshot:
    """Copy the plan values used for a calculation; the fingerprint ignores captured_at."""
    rates = {name: getattr(plan, name) for name in _SNAPSHOT_RATE_FIELDS}
    tables = {
        "floor_type_multipliers": _table(plan.floor_type_multipliers),
        "condition_multipliers": _table(plan.condition_multipliers),
        "building_type_multipliers": _table(plan.building_type_multipliers),
        "task_complexity_add_ons": _table(plan.task_complexity_add_ons),
        "frequency_multipliers": _table(plan.frequency_multipliers),
    }
    digest = fingerprint({
        "pricing_type": plan.pricing_type.value,
        "version": plan.version,
        "rates": rates,
        **tables,
    })
    return PricingPlanSnapshot(
        pricing_plan_id=plan.id,
        pricing_plan_name=plan.name,
        pricing_type=plan.pricing_type.value,
        plan_version=plan.version,
        rates=rates,
        fingerprint=digest,
        captured_at=captured_at,
        **tables,
    )


# ── Base strategy ────────────────────────────────────────


class PricingStrategy(ABC):
    """Abstract base for all pricing strategies."""

    key: str
    name: str
    description: str
    version: str
    pricing_type: PricingType

    def walk_areas(self, facility: Facility, rates: RateModel) -> Iterator[AreaWalkItem]:
        """Yield each area with its resolved surface multipliers, in facility order."""
        for area in facility.areas:
            yield AreaWalkItem(
                area=area,
                floor_multiplier=rates.floor_multiplier(area.floor_type),
                condition_multiplier=rates.condition_multiplier(area.condition_level),
            )

    @staticmethod
    def building_type_of(facility: Facility) -> str:
        return facility.building_type or BuildingType.OTHER.value

    @abstractmethod
    def quote(
        self,
        facility: Facility,
        plan: PricingPlan,
        service_frequency: str,
        task_complexity: str = "standard",
        captured_at: Optional[str] = None,
    ) -> StrategyQuote:
        """Price *facility* under *plan* for one service frequency."""
        ...


# ── Cost-based ───────────────────────────────────────────


class CostBasedStrategy(PricingStrategy):
    key = "cost_based_v1"
    name = "Cost Based (Labor + Overhead V1)"
    description = (
        "Estimates labor hours from square footage and productivity, layers burden, "
        "insurance, admin, equipment and supply costs, then grosses up for profit."
    )
    version = "1.0.0"
    pricing_type = PricingType.COST_BASED

    def quote(
        self,
        facility: Facility,
        plan: PricingPlan,
        service_frequency: str,
        task_complexity: str = "standard",
        captured_at: Optional[str] = None,
    ) -> StrategyQuote:
        rates = RateModel(plan)
        monthly_visits = monthly_visits_for(service_frequency)
        margin = rates.target_profit_margin
        building_type = self.building_type_of(facility)

        area_costs = []
        breakdowns: list[AreaCostBreakdown] = []
        area_prices: list[tuple[Area, float]] = []

        for item in self.walk_areas(facility, rates):
            cost = calculate_area_cost(item.area, rates, item.floor_multiplier, item.condition_multiplier)
            monthly_price = gross_up(cost.total_cost_per_visit * monthly_visits, margin)
            area_costs.append(cost)
            area_prices.append((item.area, monthly_price))
            breakdowns.append(build_area_breakdown(
                item.area,
                cost,
                item.floor_multiplier,
                item.condition_multiplier,
                monthly_visits,
                monthly_price,
            ))
            logger.debug(
                f"Area {item.area.id}: {cost.total_area_sqft} sqft, "
                f"{cost.labor_hours:.4f} h, {cost.total_cost_per_visit:.4f}/visit"
            )

        totals = aggregate_facility_pricing(
            area_costs,
            travel_cost_per_visit=rates.travel_cost_per_visit,
            monthly_visits=monthly_visits,
            target_profit_margin=margin,
            building_multiplier=rates.building_multiplier(building_type),
            task_complexity_add_on=rates.task_complexity_add_on(task_complexity),
            minimum_monthly_charge=rates.minimum_monthly_charge,
        )

        result = FacilityPricingResult(
            facility_id=facility.id,
            facility_name=facility.name,
            building_type=building_type,
            service_frequency=service_frequency,
            total_square_feet=sum(cost.total_area_sqft for cost in area_costs),
            areas=breakdowns,
            cost_breakdown=totals.cost_breakdown(),
            monthly_visits=monthly_visits,
            monthly_cost_before_profit=round_money(totals.monthly_cost_before_profit),
            profit_amount=round_money(totals.profit_amount),
            profit_margin_applied=totals.profit_margin_applied,
            building_multiplier=totals.building_multiplier,
            building_adjustment=round_money(totals.building_adjustment),
            task_complexity_add_on=totals.task_complexity_add_on,
            task_complexity_amount=round_money(totals.task_complexity_amount),
            subtotal=round_money(totals.subtotal),
            monthly_total=round_money(totals.monthly_total),
            minimum_applied=totals.minimum_applied,
            pricing_plan_id=plan.id,
            pricing_plan_name=plan.name,
            strategy_key=self.key,
            strategy_version=self.version,
            settings_snapshot=build_plan_snapshot(plan, captured_at),
        )

        return StrategyQuote(
            result=result,
            area_prices=area_prices,
            facility_level_price=gross_up(rates.travel_cost_per_visit * monthly_visits, margin),
        )


# ── Flat rate ────────────────────────────────────────────


class FlatRateStrategy(PricingStrategy):
    key = "flat_rate_v1"
    name = "Square Footage (Flat Rate V1)"
    description = (
        "Prices square footage at the plan's base rate with multipliers for floor type, "
        "condition, service frequency and building type."
    )
    version = "1.0.0"
    pricing_type = PricingType.FLAT_RATE

    def quote(
        self,
        facility: Facility,
        plan: PricingPlan,
        service_frequency: str,
        task_complexity: str = "standard",
        captured_at: Optional[str] = None,
    ) -> StrategyQuote:
        rates = RateModel(plan)
        monthly_visits = monthly_visits_for(service_frequency)
        building_type = self.building_type_of(facility)
        building_multiplier = rates.building_multiplier(building_type)
        frequency_multiplier = rates.frequency_multiplier(service_frequency)
        task_add_on = rates.task_complexity_add_on(task_complexity)

        breakdowns: list[AreaCostBreakdown] = []
        area_prices: list[tuple[Area, float]] = []
        total_square_feet = 0.0
        subtotal = 0.0
        task_complexity_amount = 0.0

        for item in self.walk_areas(facility, rates):
            area = item.area
            total_area_sqft = area.total_square_feet
            total_square_feet += total_area_sqft

            base_price = total_area_sqft * rates.base_rate_per_sqft
            price_before_frequency = base_price * item.floor_multiplier * item.condition_multiplier
            frequency_price = price_before_frequency * frequency_multiplier
            monthly_price = frequency_price * (1 + task_add_on)

            subtotal += monthly_price
            task_complexity_amount += frequency_price * task_add_on
            area_prices.append((area, monthly_price))
            breakdowns.append(AreaCostBreakdown(
                area_id=area.id,
                area_name=area.display_name,
                area_type_name=area.area_type or area.display_name,
                square_feet=total_area_sqft,
                floor_type=area.floor_type,
                condition_level=area.condition_level,
                quantity=area.quantity,
                floor_multiplier=item.floor_multiplier,
                condition_multiplier=item.condition_multiplier,
                base_price=round_money(base_price),
                frequency_multiplier=frequency_multiplier,
                price_before_frequency=round_money(price_before_frequency),
                monthly_visits=monthly_visits,
                monthly_price=round_money(monthly_price),
            ))

        building_adjustment = subtotal * (building_multiplier - 1)
        monthly_total = subtotal + building_adjustment

        minimum_applied = monthly_total < rates.minimum_monthly_charge
        if minimum_applied:
            monthly_total = rates.minimum_monthly_charge

        result = FacilityPricingResult(
            facility_id=facility.id,
            facility_name=facility.name,
            building_type=building_type,
            service_frequency=service_frequency,
            total_square_feet=total_square_feet,
            areas=breakdowns,
            cost_breakdown=CostBreakdown(),
            monthly_visits=monthly_visits,
            building_multiplier=building_multiplier,
            building_adjustment=round_money(building_adjustment),
            task_complexity_add_on=task_add_on,
            task_complexity_amount=round_money(task_complexity_amount),
            subtotal=round_money(subtotal),
            monthly_total=round_money(monthly_total),
            minimum_applied=minimum_applied,
            pricing_plan_id=plan.id,
            pricing_plan_name=plan.name,
            strategy_key=self.key,
            strategy_version=self.version,
            settings_snapshot=build_plan_snapshot(plan, captured_at),
        )

        return StrategyQuote(result=result, area_prices=area_prices, facility_level_price=0.0)


# ── Per hour ─────────────────────────────────────────────


class PerHourStrategy(PricingStrategy):
    key = "per_hour_v1"
    name = "Per Hour (Task Time V1)"
    description = (
        "Prices the estimated task minutes of every area at the plan's hourly rate, "
        "with multipliers for floor type, condition and building type."
    )
    version = "1.0.0"
    pricing_type = PricingType.PER_HOUR

    def quote(
        self,
        facility: Facility,
        plan: PricingPlan,
        service_frequency: str,
        task_complexity: str = "standard",
        captured_at: Optional[str] = None,
    ) -> StrategyQuote:
        rates = RateModel(plan)
        monthly_visits = monthly_visits_for(service_frequency)
        building_type = self.building_type_of(facility)
        building_multiplier = rates.building_multiplier(building_type)
        task_add_on = rates.task_complexity_add_on(task_complexity)

        area_tasks: dict[str, list[FacilityTask]] = {}
        facility_wide_tasks: list[FacilityTask] = []
        known_areas = {area.id for area in facility.areas}
        for task in facility.tasks:
            if task.area_id and task.area_id in known_areas:
                area_tasks.setdefault(task.area_id, []).append(task)
            else:
                facility_wide_tasks.append(task)

        breakdowns: list[AreaCostBreakdown] = []
        area_prices: list[tuple[Area, float]] = []
        total_square_feet = 0.0
        total_hours = 0.0
        total_labor_cost = 0.0

        for item in self.walk_areas(facility, rates):
            area = item.area
            total_square_feet += area.total_square_feet

            quantities = AreaQuantities.for_area(area)
            minutes = sum(calculate_task_minutes(task, quantities) for task in area_tasks.get(area.id, []))
            hours = minutes / 60
            labor_cost_base = hours * rates.hourly_rate
            labor_cost = labor_cost_base * item.floor_multiplier * item.condition_multiplier

            total_hours += hours
            total_labor_cost += labor_cost
            area_prices.append((area, labor_cost * monthly_visits))
            breakdowns.append(AreaCostBreakdown(
                area_id=area.id,
                area_name=area.display_name,
                area_type_name=area.area_type or area.display_name,
                square_feet=area.total_square_feet,
                floor_type=area.floor_type,
                condition_level=area.condition_level,
                quantity=area.quantity,
                floor_multiplier=item.floor_multiplier,
                condition_multiplier=item.condition_multiplier,
                labor_hours=round_money(hours),
                labor_cost_base=round_money(labor_cost_base),
                total_labor_cost=round_money(labor_cost),
                total_cost_per_visit=round_money(labor_cost),
                monthly_visits=monthly_visits,
                monthly_price=round_money(labor_cost * monthly_visits),
            ))

        # Whole-building tasks scale with total square footage on a standard surface
        facility_wide_cost = 0.0
        if facility_wide_tasks:
            quantities = AreaQuantities(square_feet=total_square_feet)
            minutes = sum(calculate_task_minutes(task, quantities) for task in facility_wide_tasks)
            hours = minutes / 60
            facility_wide_cost = (
                hours
                * rates.hourly_rate
                * rates.floor_multiplier(FloorType.VCT)
                * rates.condition_multiplier(ConditionLevel.STANDARD)
            )
            total_hours += hours
            total_labor_cost += facility_wide_cost
            logger.debug(f"Facility-wide tasks: {minutes:.2f} min, {facility_wide_cost:.4f}/visit")

        monthly_labor_cost = total_labor_cost * monthly_visits
        building_adjustment = monthly_labor_cost * (building_multiplier - 1)
        subtotal = monthly_labor_cost + building_adjustment
        task_complexity_amount = subtotal * task_add_on
        monthly_total = subtotal + task_complexity_amount

        minimum_applied = monthly_total < rates.minimum_monthly_charge
        if minimum_applied:
            monthly_total = rates.minimum_monthly_charge

        per_visit_total = total_labor_cost * building_multiplier * (1 + task_add_on)

        result = FacilityPricingResult(
            facility_id=facility.id,
            facility_name=facility.name,
            building_type=building_type,
            service_frequency=service_frequency,
            total_square_feet=total_square_feet,
            areas=breakdowns,
            cost_breakdown=CostBreakdown(
                total_labor_hours=round_money(total_hours),
                total_labor_cost=round_money(total_labor_cost),
                total_cost_per_visit=round_money(per_visit_total),
            ),
            monthly_visits=monthly_visits,
            monthly_cost_before_profit=round_money(monthly_labor_cost),
            building_multiplier=building_multiplier,
            building_adjustment=round_money(building_adjustment),
            task_complexity_add_on=task_add_on,
            task_complexity_amount=round_money(task_complexity_amount),
            subtotal=round_money(subtotal),
            monthly_total=round_money(monthly_total),
            minimum_applied=minimum_applied,
            pricing_plan_id=plan.id,
            pricing_plan_name=plan.name,
            strategy_key=self.key,
            strategy_version=self.version,
            settings_snapshot=build_plan_snapshot(plan, captured_at),
        )

        return StrategyQuote(
            result=result,
            area_prices=area_prices,
            facility_level_price=facility_wide_cost * monthly_visits,
        )


# ── Registry ─────────────────────────────────────────────


class PricingStrategyRegistry:
    """Holds the available strategies and resolves one per pricing type."""

    def __init__(self):
        self._strategies: dict[str, PricingStrategy] = {}
        self._by_pricing_type: dict[PricingType, str] = {}

    def register(self, strategy: PricingStrategy) -> None:
        if strategy.key in self._strategies:
            logger.warning(f"Strategy {strategy.key} is already registered. Overwriting.")
        self._strategies[strategy.key] = strategy
        self._by_pricing_type[strategy.pricing_type] = strategy.key

    def get(self, key: str) -> PricingStrategy:
        strategy = self._strategies.get(key)
        if strategy is None:
            raise NotFoundError("pricing strategy", key)
        return strategy

    def list_keys(self) -> list[str]:
        return list(self._strategies.keys())

    def list_all(self) -> list[dict[str, str]]:
        return [
            {
                "key": strategy.key,
                "name": strategy.name,
                "description": strategy.description,
                "version": strategy.version,
                "pricing_type": strategy.pricing_type.value,
            }
            for strategy in self._strategies.values()
        ]

    def for_plan(self, plan: PricingPlan) -> PricingStrategy:
        key = self._by_pricing_type.get(plan.pricing_type)
        if key is None:
            raise NotFoundError("pricing strategy", plan.pricing_type.value)
        return self._strategies[key]


def default_registry() -> PricingStrategyRegistry:
    registry = PricingStrategyRegistry()
    registry.register(CostBasedStrategy())
    registry.register(FlatRateStrategy())
    registry.register(PerHourStrategy())
    return registry
