"""Persistence — MongoClient, PricingPlanRepository, FacilityRepository."""

from facility_pricing.persistence.mongo_client import MongoClient
from facility_pricing.persistence.plan_repository import (
    PricingPlanRepository,
    MongoPricingPlanRepository,
    validate_plan,
)
from facility_pricing.persistence.facility_repository import (
    FacilityRepository,
    MongoFacilityRepository,
)

__all__ = [
    "MongoClient",
    "PricingPlanRepository",
    "MongoPricingPlanRepository",
    "FacilityRepository",
    "MongoFacilityRepository",
    "validate_plan",
]
