"""
Tests: PricingEngine facade, plan repository and settings.

Run with:
    pytest facility_pricing/tests/test_engine.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest

from facility_pricing.config import Settings
from facility_pricing.errors import InvalidConfigurationError, NotFoundError, NotReadyError
from facility_pricing.models.schemas import Area, Facility, FacilityTask, PricingPlan
from facility_pricing.persistence import FacilityRepository, PricingPlanRepository
from facility_pricing.pricing.engine import PricingEngine

CAPTURED_AT = "2026-03-01T12:00:00+00:00"


@pytest.fixture
def engine() -> PricingEngine:
    engine = PricingEngine(PricingPlanRepository(), FacilityRepository(), settings=Settings())
    engine.plans.save_plan({"id": "plan-1", "name": "Standard", "is_default": True})
    engine.facilities.save_facility(Facility(
        id="fac-1",
        name="Harbor Office",
        building_type="office",
        areas=[Area(id="area-1", name="Open Office", square_feet=1000)],
        tasks=[FacilityTask(id="t1", area_id="area-1", custom_name="Vacuum", per_sqft_minutes_override=0.03)],
    ))
    return engine


class TestCalculatePricing:
    def test_reference_scenario(self, engine):
        result = engine.calculate_pricing("fac-1", "5x_week", captured_at=CAPTURED_AT)
        assert result.monthly_total == 771.45
        assert result.pricing_plan_name == "Standard"
        assert result.settings_snapshot.pricing_plan_id == "plan-1"

    def test_pure_for_identical_inputs(self, engine):
        first = engine.calculate_pricing("fac-1", "5x_week", captured_at=CAPTURED_AT)
        second = engine.calculate_pricing("fac-1", "5x_week", captured_at=CAPTURED_AT)
        assert first == second

    def test_explicit_plan_overrides_default(self, engine):
        engine.plans.save_plan({"id": "plan-2", "name": "Premium", "target_profit_margin": 0.4})
        result = engine.calculate_pricing("fac-1", "5x_week", pricing_plan_id="plan-2")
        assert result.pricing_plan_id == "plan-2"
        assert result.monthly_total > 771.45

    def test_flat_rate_plan_selects_flat_rate_strategy(self, engine):
        engine.plans.save_plan({"id": "flat", "name": "Flat", "pricing_type": "flat_rate"})
        result = engine.calculate_pricing("fac-1", "5x_week", pricing_plan_id="flat")
        assert result.strategy_key == "flat_rate_v1"
        assert result.monthly_total == 400.0

    def test_per_hour_plan_selects_per_hour_strategy(self, engine):
        engine.plans.save_plan({"id": "hourly", "name": "Hourly", "pricing_type": "per_hour", "hourly_rate": 40})
        result = engine.calculate_pricing("fac-1", "5x_week", pricing_plan_id="hourly")
        assert result.strategy_key == "per_hour_v1"
        # 30 task minutes at 40/h per visit
        assert result.monthly_total == pytest.approx(20 * 21.67)

    def test_unknown_facility(self, engine):
        with pytest.raises(NotFoundError, match="facility"):
            engine.calculate_pricing("missing", "5x_week")

    def test_unknown_plan(self, engine):
        with pytest.raises(NotFoundError, match="pricing plan"):
            engine.calculate_pricing("fac-1", "5x_week", pricing_plan_id="nope")

    def test_no_plans_at_all(self):
        engine = PricingEngine(PricingPlanRepository(), FacilityRepository(), settings=Settings())
        engine.facilities.save_facility(Facility(id="f", areas=[Area(id="a", square_feet=100)]))
        with pytest.raises(NotFoundError):
            engine.calculate_pricing("f", "5x_week")

    def test_no_areas_not_ready(self, engine):
        engine.facilities.save_facility(Facility(id="empty"))
        with pytest.raises(NotReadyError) as exc:
            engine.calculate_pricing("empty", "5x_week")
        assert exc.value.reason == "no_areas"

    def test_zero_square_feet_not_ready(self, engine):
        engine.facilities.save_facility(Facility(id="zero", areas=[Area(id="a"), Area(id="b")]))
        with pytest.raises(NotReadyError) as exc:
            engine.generate_proposal_services("zero", "5x_week")
        assert exc.value.reason == "no_square_footage"


class TestReadiness:
    def test_ready(self, engine):
        readiness = engine.is_facility_ready_for_pricing("fac-1")
        assert readiness.is_ready is True
        assert readiness.area_count == 1
        assert readiness.total_square_feet == 1000

    def test_messages(self, engine):
        engine.facilities.save_facility(Facility(id="empty"))
        engine.facilities.save_facility(Facility(id="zero", areas=[Area(id="a")]))

        no_areas = engine.is_facility_ready_for_pricing("empty")
        assert no_areas.message == "Facility has no areas defined. Please add areas first."
        no_sqft = engine.is_facility_ready_for_pricing("zero")
        assert no_sqft.reason == "no_square_footage"
        assert no_sqft.message == "Areas have no square footage defined. Please add square footage to areas."

    def test_missing_facility_is_not_ready(self, engine):
        readiness = engine.is_facility_ready_for_pricing("missing")
        assert readiness.is_ready is False
        assert readiness.reason == "facility_not_found"


class TestOtherOperations:
    def test_compare_uses_configured_frequencies(self, engine):
        comparisons = engine.compare_pricing_across_frequencies("fac-1")
        assert [c.frequency for c in comparisons] == ["1x_week", "2x_week", "3x_week", "5x_week"]
        assert comparisons[-1].monthly_total == 771.45

    def test_compare_custom_frequencies(self, engine):
        comparisons = engine.compare_pricing_across_frequencies("fac-1", ["daily", "monthly"])
        assert [c.monthly_visits for c in comparisons] == [30, 1]

    def test_proposal_services(self, engine):
        lines = engine.generate_proposal_services("fac-1", "5x_week")
        assert len(lines) == 1
        assert lines[0].monthly_price == 771.45

    def test_task_time(self, engine):
        breakdown = engine.estimate_task_time("fac-1")
        assert breakdown.total_minutes == 30.0
        assert breakdown.total_hours == 0.5

    def test_task_time_unknown_facility(self, engine):
        with pytest.raises(NotFoundError):
            engine.estimate_task_time("missing")


class TestPlanRepository:
    def _repo_with_two_plans(self) -> PricingPlanRepository:
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        repo = PricingPlanRepository()
        repo.save_plan({"id": "old", "name": "Old", "created_at": now})
        repo.save_plan({"id": "new", "name": "New", "created_at": now + timedelta(days=1)})
        return repo

    def test_newest_active_plan_when_no_default(self):
        assert self._repo_with_two_plans().get_default_plan().id == "new"

    def test_set_default_keeps_a_single_default(self):
        repo = self._repo_with_two_plans()
        repo.set_default_plan("new")
        repo.set_default_plan("old")

        defaults = [plan.id for plan in repo.list_plans() if plan.is_default]
        assert defaults == ["old"]
        assert repo.get_default_plan().id == "old"

    def test_saving_default_plan_clears_previous(self):
        repo = self._repo_with_two_plans()
        repo.set_default_plan("old")
        repo.save_plan({"id": "third", "name": "Third", "is_default": True})
        assert [plan.id for plan in repo.list_plans() if plan.is_default] == ["third"]

    def test_archived_plan_cannot_be_default(self):
        repo = self._repo_with_two_plans()
        repo.archive_plan("new")
        assert repo.get_default_plan().id == "old"
        assert [plan.id for plan in repo.list_plans()] == ["old"]
        with pytest.raises(InvalidConfigurationError):
            repo.set_default_plan("new")

    def test_set_default_unknown_plan(self):
        with pytest.raises(NotFoundError):
            PricingPlanRepository().set_default_plan("ghost")

    def test_resave_bumps_version(self):
        repo = PricingPlanRepository()
        repo.save_plan({"id": "p", "name": "Plan"})
        updated = repo.save_plan({"id": "p", "name": "Plan", "labor_cost_per_hour": 20})
        assert updated.version == 2
        assert repo.get_plan("p").labor_cost_per_hour == 20

    def test_resave_keeps_default_flag(self):
        repo = PricingPlanRepository()
        repo.save_plan({"id": "p", "name": "Plan", "is_default": True})
        repo.save_plan({"id": "p", "name": "Plan", "labor_cost_per_hour": 20})

        plan = repo.get_plan("p")
        assert plan.is_default is True
        assert plan.labor_cost_per_hour == 20
        assert repo.get_default_plan().id == "p"

    def test_resave_keeps_archive_and_creation_time(self):
        repo = self._repo_with_two_plans()
        created_at = repo.get_plan("old").created_at
        archived = repo.archive_plan("old")
        repo.save_plan({"id": "old", "name": "Old renamed"})

        plan = repo.get_plan("old")
        assert plan.name == "Old renamed"
        assert plan.archived_at == archived.archived_at
        assert plan.is_active is False
        assert plan.created_at == created_at
        assert repo.get_default_plan().id == "new"

    def test_resave_keeps_unsupplied_rates(self):
        repo = PricingPlanRepository()
        repo.save_plan({"id": "p", "name": "Plan", "travel_cost_per_visit": 22})
        repo.save_plan(PricingPlan(id="p", name="Plan", labor_cost_per_hour=21))

        plan = repo.get_plan("p")
        assert plan.travel_cost_per_visit == 22
        assert plan.labor_cost_per_hour == 21

    def test_invalid_resave_rejected_and_stored_plan_unchanged(self):
        repo = PricingPlanRepository()
        repo.save_plan({"id": "p", "name": "Plan"})
        with pytest.raises(InvalidConfigurationError):
            repo.save_plan({"id": "p", "target_profit_margin": 1.5})
        assert repo.get_plan("p").target_profit_margin == 0.25

    def test_invalid_plan_rejected(self):
        with pytest.raises(InvalidConfigurationError) as exc:
            PricingPlanRepository().save_plan({"name": "Bad", "target_profit_margin": 1.0})
        assert exc.value.errors[0]["field"] == "target_profit_margin"

    def test_generated_id(self):
        plan = PricingPlanRepository().save_plan(PricingPlan(name="No id"))
        assert plan.id

    def test_stored_copy_is_isolated(self):
        repo = PricingPlanRepository()
        repo.save_plan({"id": "p", "name": "Plan"})
        loaded = repo.get_plan("p")
        loaded.labor_cost_per_hour = 99
        assert repo.get_plan("p").labor_cost_per_hour == 18.0


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.default_service_frequency == "5x_week"
        assert settings.comparison_frequencies == ["1x_week", "2x_week", "3x_week", "5x_week"]

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("COMPARISON_FREQUENCIES", '["daily", "weekly"]')
        monkeypatch.setenv("MOCK_MODE", "false")
        settings = Settings()
        assert settings.comparison_frequencies == ["daily", "weekly"]
        assert settings.mock_mode is False
