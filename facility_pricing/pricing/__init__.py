"""Pricing — rate model, cost calculators, strategies, proposal lines, engine facade."""

from facility_pricing.pricing.engine import PricingEngine, check_readiness
from facility_pricing.pricing.proposal_services import get_facility_tasks_grouped
from facility_pricing.pricing.strategies import (
    CostBasedStrategy,
    FlatRateStrategy,
    PricingStrategyRegistry,
    default_registry,
)

__all__ = [
    "PricingEngine",
    "check_readiness",
    "get_facility_tasks_grouped",
    "CostBasedStrategy",
    "FlatRateStrategy",
    "PricingStrategyRegistry",
    "default_registry",
]
