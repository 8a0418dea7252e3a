"""
Pricing Engine — the facade every caller (API, CLI, tests) goes through.

Loads the facility and pricing plan snapshots, checks readiness, picks the
strategy for the plan's pricing type and runs it.  Calculations are pure:
the same facility, plan and arguments always produce the same result.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from facility_pricing.config import Settings, get_settings
from facility_pricing.errors import NotFoundError, NotReadyError
from facility_pricing.models.enums import ReadinessReason
from facility_pricing.models.results import (
    FacilityPricingResult,
    FacilityReadiness,
    FacilityTaskTimeBreakdown,
    FrequencyComparison,
    ProposalServiceLine,
)
from facility_pricing.models.schemas import Facility, PricingPlan
from facility_pricing.persistence import (
    FacilityRepository,
    MongoClient,
    MongoFacilityRepository,
    MongoPricingPlanRepository,
    PricingPlanRepository,
)
from facility_pricing.pricing.frequency import compare_frequencies
from facility_pricing.pricing.proposal_services import generate_proposal_services
from facility_pricing.pricing.strategies import (
    PricingStrategyRegistry,
    StrategyQuote,
    default_registry,
)
from facility_pricing.pricing.task_time import estimate_task_time

logger = logging.getLogger(__name__)

NO_AREAS_MESSAGE = "Facility has no areas defined. Please add areas first."
NO_SQUARE_FOOTAGE_MESSAGE = "Areas have no square footage defined. Please add square footage to areas."


def check_readiness(facility: Facility) -> FacilityReadiness:
    """Whether *facility* has anything that can be priced."""
    total_square_feet = facility.total_square_feet
    if not facility.areas:
        return FacilityReadiness(
            is_ready=False,
            reason=ReadinessReason.NO_AREAS.value,
            message=NO_AREAS_MESSAGE,
        )
    if total_square_feet <= 0:
        return FacilityReadiness(
            is_ready=False,
            reason=ReadinessReason.NO_SQUARE_FOOTAGE.value,
            message=NO_SQUARE_FOOTAGE_MESSAGE,
            area_count=len(facility.areas),
        )
    return FacilityReadiness(
        is_ready=True,
        area_count=len(facility.areas),
        total_square_feet=total_square_feet,
    )


class PricingEngine:
    """
    Facility pricing facade.

    Usage:
        engine = PricingEngine(plan_repository, facility_repository)
        result = engine.calculate_pricing("fac-1", "5x_week")
    """

    def __init__(
        self,
        plan_repository: PricingPlanRepository,
        facility_repository: FacilityRepository,
        registry: Optional[PricingStrategyRegistry] = None,
        settings: Optional[Settings] = None,
    ):
        self.plans = plan_repository
        self.facilities = facility_repository
        self.registry = registry or default_registry()
        self.settings = settings or get_settings()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "PricingEngine":
        """Wire in-memory repositories in mock mode, Mongo-backed ones otherwise."""
        settings = settings or get_settings()
        if settings.mock_mode:
            logger.info("[MOCK] Using in-memory repositories")
            return cls(PricingPlanRepository(), FacilityRepository(), settings=settings)

        client = MongoClient(settings)
        client.connect()
        return cls(
            MongoPricingPlanRepository(client),
            MongoFacilityRepository(client),
            settings=settings,
        )

    # ── Snapshot loading ─────────────────────────────────

    def _load_facility(self, facility_id: str) -> Facility:
        facility = self.facilities.get_facility(facility_id)
        if facility is None:
            raise NotFoundError("facility", facility_id)
        return facility

    def _resolve_plan(self, pricing_plan_id: Optional[str]) -> PricingPlan:
        if pricing_plan_id:
            plan = self.plans.get_plan(pricing_plan_id)
            if plan is None:
                raise NotFoundError("pricing plan", pricing_plan_id)
            return plan

        plan = self.plans.get_default_plan()
        if plan is None:
            raise NotFoundError("pricing plan")
        return plan

    def _load_ready_facility(self, facility_id: str) -> Facility:
        facility = self._load_facility(facility_id)
        readiness = check_readiness(facility)
        if not readiness.is_ready:
            raise NotReadyError(readiness.reason, readiness.message)
        return facility

    def _quote(
        self,
        facility: Facility,
        plan: PricingPlan,
        service_frequency: str,
        task_complexity: str,
        captured_at: Optional[str] = None,
    ) -> StrategyQuote:
        strategy = self.registry.for_plan(plan)
        quote = strategy.quote(facility, plan, service_frequency, task_complexity, captured_at)
        logger.info(
            f"Priced facility {facility.id} at {service_frequency} with {strategy.key} "
            f"(plan {plan.id}): {quote.result.monthly_total:,.2f}/month"
            + (" [minimum applied]" if quote.result.minimum_applied else "")
        )
        return quote

    # ── Operations ───────────────────────────────────────

    def calculate_pricing(
        self,
        facility_id: str,
        service_frequency: str,
        task_complexity: str = "standard",
        pricing_plan_id: Optional[str] = None,
        captured_at: Optional[str] = None,
    ) -> FacilityPricingResult:
        facility = self._load_ready_facility(facility_id)
        plan = self._resolve_plan(pricing_plan_id)
        return self._quote(facility, plan, service_frequency, task_complexity, captured_at).result

    def compare_pricing_across_frequencies(
        self,
        facility_id: str,
        frequencies: Optional[Iterable[str]] = None,
        pricing_plan_id: Optional[str] = None,
    ) -> list[FrequencyComparison]:
        facility = self._load_ready_facility(facility_id)
        plan = self._resolve_plan(pricing_plan_id)
        if frequencies is None:
            frequencies = self.settings.comparison_frequencies
        task_complexity = self.settings.default_task_complexity
        return compare_frequencies(
            lambda frequency: self._quote(facility, plan, frequency, task_complexity).result,
            frequencies,
        )

    def generate_proposal_services(
        self,
        facility_id: str,
        service_frequency: str,
        task_complexity: str = "standard",
        pricing_plan_id: Optional[str] = None,
    ) -> list[ProposalServiceLine]:
        facility = self._load_ready_facility(facility_id)
        plan = self._resolve_plan(pricing_plan_id)
        quote = self._quote(facility, plan, service_frequency, task_complexity)
        return generate_proposal_services(quote, facility, service_frequency)

    def is_facility_ready_for_pricing(self, facility_id: str) -> FacilityReadiness:
        facility = self.facilities.get_facility(facility_id)
        if facility is None:
            return FacilityReadiness(
                is_ready=False,
                reason=ReadinessReason.FACILITY_NOT_FOUND.value,
                message=f"Facility not found: {facility_id}",
            )
        return check_readiness(facility)

    def estimate_task_time(self, facility_id: str) -> FacilityTaskTimeBreakdown:
        return estimate_task_time(self._load_facility(facility_id))
