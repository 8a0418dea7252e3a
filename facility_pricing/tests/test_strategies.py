"""
Tests: Pricing strategies, registry, plan snapshot and frequency tables.

Run with:
    pytest facility_pricing/tests/test_strategies.py -v
"""

import pytest

from facility_pricing.errors import NotFoundError
from facility_pricing.models.enums import PricingType
from facility_pricing.models.schemas import Area, Facility, FacilityTask, PricingPlan
from facility_pricing.pricing.frequency import (
    compare_frequencies,
    frequency_label,
    monthly_visits_for,
    proposal_frequency_for,
    service_type_for,
)
from facility_pricing.pricing.strategies import (
    CostBasedStrategy,
    FlatRateStrategy,
    PerHourStrategy,
    PricingStrategyRegistry,
    build_plan_snapshot,
    default_registry,
)


def _facility(**overrides) -> Facility:
    data = {
        "id": "fac-1",
        "name": "Harbor Office",
        "building_type": "office",
        "areas": [Area(id="area-1", name="Open Office", square_feet=1000)],
    }
    data.update(overrides)
    return Facility(**data)


def _plan(**overrides) -> PricingPlan:
    data = {"id": "plan-1", "name": "Standard"}
    data.update(overrides)
    return PricingPlan(**data)


class TestFrequencyTables:
    def test_monthly_visits(self):
        assert monthly_visits_for("5x_week") == 21.67
        assert monthly_visits_for("daily") == 30
        assert monthly_visits_for("quarterly") == 0.33

    def test_unknown_frequency_counts_as_weekly(self):
        assert monthly_visits_for("every_other_tuesday") == 4.33

    def test_labels_and_mappings(self):
        assert frequency_label("2x_week") == "Bi-Weekly (2x)"
        assert frequency_label("custom") == "custom"
        assert service_type_for("5x_week") == "daily"
        assert proposal_frequency_for("5x_week") == "weekly"
        assert service_type_for("custom") == "monthly"
        assert proposal_frequency_for("custom") == "monthly"


class TestCostBasedStrategy:
    def test_reference_result(self):
        quote = CostBasedStrategy().quote(_facility(), _plan(), "5x_week", captured_at="2026-01-01T00:00:00+00:00")
        result = quote.result

        assert result.monthly_total == 771.45
        assert result.monthly_cost_before_profit == 578.59
        assert result.profit_amount == 192.86
        assert result.subtotal == 771.45
        assert result.monthly_visits == 21.67
        assert result.total_square_feet == 1000
        assert result.strategy_key == "cost_based_v1"
        assert result.pricing_plan_id == "plan-1"
        assert result.areas[0].monthly_price == 338.05
        assert result.cost_breakdown.total_labor_hours == 0.4
        assert result.settings_snapshot.captured_at == "2026-01-01T00:00:00+00:00"

    def test_quote_exposes_unscaled_prices(self):
        quote = CostBasedStrategy().quote(_facility(), _plan(), "5x_week")
        (area, price), = quote.area_prices
        assert area.id == "area-1"
        assert price == pytest.approx(11.7 * 21.67 / 0.75)
        assert quote.facility_level_price == pytest.approx(15.0 * 21.67 / 0.75)

    def test_total_never_below_minimum(self):
        facility = _facility(areas=[Area(id="a", square_feet=50)])
        for frequency in ("1x_week", "monthly", "quarterly", "5x_week"):
            result = CostBasedStrategy().quote(facility, _plan(), frequency).result
            assert result.monthly_total >= 250.0

    def test_missing_building_type_uses_other(self):
        result = CostBasedStrategy().quote(_facility(building_type=""), _plan(), "5x_week").result
        assert result.building_type == "other"
        assert result.building_multiplier == 1.0


class TestFlatRateStrategy:
    def test_flat_rate_price(self):
        plan = _plan(pricing_type=PricingType.FLAT_RATE)
        result = FlatRateStrategy().quote(_facility(), plan, "5x_week").result

        assert result.areas[0].base_price == 100.0
        assert result.areas[0].price_before_frequency == 100.0
        assert result.areas[0].frequency_multiplier == 4.0
        assert result.monthly_total == 400.0
        assert result.strategy_key == "flat_rate_v1"

    def test_surface_and_task_multipliers(self):
        plan = _plan(pricing_type=PricingType.FLAT_RATE)
        facility = _facility(areas=[Area(id="a", square_feet=1000, floor_type="carpet")])
        result = FlatRateStrategy().quote(facility, plan, "5x_week", task_complexity="sanitization").result

        # 1000 * 0.10 * 1.15 * 4.0 = 460, plus 15% task add-on
        assert result.task_complexity_amount == 69.0
        assert result.monthly_total == 529.0

    def test_flat_rate_minimum(self):
        plan = _plan(pricing_type=PricingType.FLAT_RATE)
        result = FlatRateStrategy().quote(_facility(), plan, "1x_week").result
        assert result.subtotal == 100.0
        assert result.monthly_total == 250.0
        assert result.minimum_applied is True

    def test_no_facility_level_price(self):
        plan = _plan(pricing_type=PricingType.FLAT_RATE)
        assert FlatRateStrategy().quote(_facility(), plan, "5x_week").facility_level_price == 0.0


class TestPerHourStrategy:
    def _hourly(self, **overrides) -> PricingPlan:
        return _plan(pricing_type=PricingType.PER_HOUR, **overrides)

    def test_task_hours_at_hourly_rate(self):
        facility = _facility(tasks=[FacilityTask(id="t1", area_id="area-1", base_minutes_override=60)])
        result = PerHourStrategy().quote(facility, self._hourly(), "5x_week").result

        area = result.areas[0]
        assert area.labor_hours == 1.0
        assert area.labor_cost_base == 35.0
        assert area.total_cost_per_visit == 35.0
        assert result.cost_breakdown.total_labor_hours == 1.0
        assert result.profit_amount == 0.0
        assert result.monthly_total == 758.45
        assert result.strategy_key == "per_hour_v1"

    def test_surface_and_building_multipliers(self):
        facility = _facility(
            building_type="medical",
            areas=[Area(id="a", square_feet=1000, floor_type="carpet")],
            tasks=[FacilityTask(id="t1", area_id="a", base_minutes_override=60)],
        )
        result = PerHourStrategy().quote(facility, self._hourly(), "5x_week").result

        # 35 * 1.15 per visit, 21.67 visits, 1.3 building multiplier
        assert result.areas[0].total_cost_per_visit == 40.25
        assert result.building_adjustment == pytest.approx(261.67)
        assert result.subtotal == pytest.approx(1133.88)
        assert result.monthly_total == pytest.approx(1133.88)

    def test_facility_wide_tasks_use_total_square_feet(self):
        facility = _facility(
            areas=[Area(id="a", square_feet=1000), Area(id="b", square_feet=500)],
            tasks=[
                FacilityTask(id="t1", area_id="a", base_minutes_override=60),
                FacilityTask(id="t2", per_sqft_minutes_override=0.02),
            ],
        )
        quote = PerHourStrategy().quote(facility, self._hourly(hourly_rate=40), "5x_week")

        assert [price for _, price in quote.area_prices] == [pytest.approx(40 * 21.67), 0.0]
        assert quote.facility_level_price == pytest.approx(20 * 21.67)
        assert quote.result.cost_breakdown.total_labor_hours == 1.5
        assert quote.result.monthly_total == pytest.approx(60 * 21.67)

    def test_no_task_minutes_falls_to_minimum(self):
        result = PerHourStrategy().quote(_facility(), self._hourly(), "5x_week").result
        assert result.subtotal == 0.0
        assert result.monthly_total == 250.0
        assert result.minimum_applied is True

    def test_hourly_rate_in_snapshot(self):
        snapshot = build_plan_snapshot(self._hourly(hourly_rate=42.5))
        assert snapshot.rates["hourly_rate"] == 42.5
        assert snapshot.pricing_type == "per_hour"


class TestRegistry:
    def test_default_registry_resolves_by_pricing_type(self):
        registry = default_registry()
        assert registry.for_plan(_plan()).key == "cost_based_v1"
        assert registry.for_plan(_plan(pricing_type="flat_rate")).key == "flat_rate_v1"
        assert registry.for_plan(_plan(pricing_type="per_hour")).key == "per_hour_v1"
        assert sorted(registry.list_keys()) == ["cost_based_v1", "flat_rate_v1", "per_hour_v1"]

    def test_list_all_metadata(self):
        entries = default_registry().list_all()
        assert {entry["key"] for entry in entries} == {"cost_based_v1", "flat_rate_v1", "per_hour_v1"}
        assert all(entry["version"] and entry["description"] for entry in entries)

    def test_unknown_key_raises(self):
        with pytest.raises(NotFoundError):
            default_registry().get("per_visit_v1")

    def test_empty_registry_has_no_strategy_for_plan(self):
        with pytest.raises(NotFoundError):
            PricingStrategyRegistry().for_plan(_plan())


class TestPlanSnapshot:
    def test_fingerprint_ignores_capture_time(self):
        first = build_plan_snapshot(_plan(), captured_at="2026-01-01T00:00:00+00:00")
        second = build_plan_snapshot(_plan(), captured_at="2026-02-01T00:00:00+00:00")
        assert first.fingerprint == second.fingerprint
        assert len(first.fingerprint) == 64

    def test_fingerprint_tracks_rates(self):
        base = build_plan_snapshot(_plan())
        changed = build_plan_snapshot(_plan(labor_cost_per_hour=19.0))
        assert base.fingerprint != changed.fingerprint
        assert changed.rates["labor_cost_per_hour"] == 19.0
        assert base.floor_type_multipliers["carpet"] == 1.15


class TestCompareFrequencies:
    def test_monthly_total_non_decreasing_with_visits(self):
        facility, plan = _facility(), _plan()
        frequencies = ["quarterly", "monthly", "biweekly", "1x_week", "2x_week", "3x_week", "5x_week", "daily"]
        comparisons = compare_frequencies(
            lambda frequency: CostBasedStrategy().quote(facility, plan, frequency).result,
            frequencies,
        )

        assert [c.frequency for c in comparisons] == frequencies
        totals = [c.monthly_total for c in comparisons]
        assert totals == sorted(totals)

    def test_reference_totals(self):
        facility, plan = _facility(), _plan()
        comparisons = compare_frequencies(
            lambda frequency: CostBasedStrategy().quote(facility, plan, frequency).result,
            ["1x_week", "2x_week", "3x_week", "5x_week"],
        )
        assert [c.monthly_total for c in comparisons] == [250.0, 308.65, 462.8, 771.45]
