"""
Pricing Plan Repository — save, load, default resolution and archiving.

The in-memory repository is used in mock mode and by the tests; the Mongo
variant reuses all plan rules and only swaps the storage hooks.
"""

from __future__ import annotations

import logging
import threading
import uuid
from copy import deepcopy
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError

from facility_pricing.errors import InvalidConfigurationError, NotFoundError
from facility_pricing.models.schemas import PricingPlan
from facility_pricing.persistence.mongo_client import MongoClient

logger = logging.getLogger(__name__)


def validate_plan(data: PricingPlan | dict[str, Any]) -> PricingPlan:
    """Validate plan values, re-raising pydantic errors as InvalidConfigurationError."""
    if isinstance(data, PricingPlan):
        data = data.model_dump()
    try:
        return PricingPlan.model_validate(data)
    except ValidationError as e:
        errors = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        fields = ", ".join(err["field"] for err in errors)
        raise InvalidConfigurationError(f"Invalid pricing plan ({fields})", errors=errors) from e


def _is_usable(plan: PricingPlan) -> bool:
    return plan.is_active and plan.archived_at is None


class PricingPlanRepository:
    """
    In-memory pricing plan store.
    Subclasses override the _load/_store hooks to change the backend.
    """

    def __init__(self):
        self._memory_store: dict[str, PricingPlan] = {}
        self._lock = threading.RLock()

    # ── Storage hooks ────────────────────────────────────

    def _load(self, plan_id: str) -> Optional[PricingPlan]:
        plan = self._memory_store.get(plan_id)
        return deepcopy(plan) if plan else None

    def _load_all(self) -> list[PricingPlan]:
        return [deepcopy(plan) for plan in self._memory_store.values()]

    def _store(self, plan: PricingPlan) -> None:
        self._memory_store[plan.id] = deepcopy(plan)

    # ── Public API ───────────────────────────────────────

    def save_plan(self, plan: PricingPlan | dict[str, Any]) -> PricingPlan:
        """
        Validate and store a plan. Re-saving an existing id updates only the
        supplied fields and bumps its version; saving a default plan clears
        the flag on every other plan.
        """
        if isinstance(plan, PricingPlan):
            data = plan.model_dump(exclude_unset=True)
        else:
            data = dict(plan)

        with self._lock:
            existing = self._load(data["id"]) if data.get("id") else None
            if existing is not None:
                data = {**existing.model_dump(), **data, "version": existing.version + 1}

            validated = validate_plan(data)
            if not validated.id:
                validated = validated.model_copy(update={"id": uuid.uuid4().hex})
            if validated.is_default:
                validated = validated.model_copy(update={"is_active": True})
                self._clear_default(except_id=validated.id)
            self._store(validated)

        logger.info(f"Saved pricing plan {validated.id} v{validated.version} ({validated.pricing_type.value})")
        return validated

    def get_plan(self, plan_id: str) -> Optional[PricingPlan]:
        return self._load(plan_id)

    def list_plans(self, include_archived: bool = False) -> list[PricingPlan]:
        plans = self._load_all()
        if not include_archived:
            plans = [plan for plan in plans if plan.archived_at is None]
        return sorted(plans, key=lambda plan: plan.created_at, reverse=True)

    def get_default_plan(self) -> Optional[PricingPlan]:
        """The active default plan, else the most recently created active plan."""
        usable = [plan for plan in self._load_all() if _is_usable(plan)]
        for plan in usable:
            if plan.is_default:
                return plan
        if not usable:
            return None
        return max(usable, key=lambda plan: plan.created_at)

    def set_default_plan(self, plan_id: str) -> PricingPlan:
        with self._lock:
            plan = self._load(plan_id)
            if plan is None:
                raise NotFoundError("pricing plan", plan_id)
            if plan.archived_at is not None:
                raise InvalidConfigurationError(f"Cannot set archived pricing plan {plan_id} as default")

            self._clear_default(except_id=plan_id)
            plan = plan.model_copy(update={"is_default": True, "is_active": True})
            self._store(plan)

        logger.info(f"Pricing plan {plan_id} set as default")
        return plan

    def archive_plan(self, plan_id: str) -> PricingPlan:
        with self._lock:
            plan = self._load(plan_id)
            if plan is None:
                raise NotFoundError("pricing plan", plan_id)
            plan = plan.model_copy(update={
                "archived_at": datetime.now(timezone.utc),
                "is_active": False,
                "is_default": False,
            })
            self._store(plan)

        logger.info(f"Archived pricing plan {plan_id}")
        return plan

    def _clear_default(self, except_id: str) -> None:
        for other in self._load_all():
            if other.is_default and other.id != except_id:
                self._store(other.model_copy(update={"is_default": False}))


class MongoPricingPlanRepository(PricingPlanRepository):
    """Pricing plans stored in the `pricing_plans` collection, keyed by plan id."""

    collection_name = "pricing_plans"

    def __init__(self, client: MongoClient):
        super().__init__()
        self._collection = client.get_collection(self.collection_name)

    def _load(self, plan_id: str) -> Optional[PricingPlan]:
        doc = self._collection.find_one({"_id": plan_id})
        return self._from_document(doc) if doc else None

    def _load_all(self) -> list[PricingPlan]:
        return [self._from_document(doc) for doc in self._collection.find({})]

    def _store(self, plan: PricingPlan) -> None:
        doc = plan.model_dump(mode="json")
        doc["_id"] = plan.id
        self._collection.replace_one({"_id": plan.id}, doc, upsert=True)

    @staticmethod
    def _from_document(doc: dict[str, Any]) -> PricingPlan:
        data = {key: value for key, value in doc.items() if key != "_id"}
        return PricingPlan.model_validate(data)
