"""
Facility Repository — facility snapshots (areas, fixtures, tasks) by id.
"""

from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any, Optional

from facility_pricing.models.schemas import Facility
from facility_pricing.persistence.mongo_client import MongoClient

logger = logging.getLogger(__name__)


class FacilityRepository:
    """In-memory facility store."""

    def __init__(self):
        self._memory_store: dict[str, Facility] = {}

    def save_facility(self, facility: Facility | dict[str, Any]) -> Facility:
        if not isinstance(facility, Facility):
            facility = Facility.model_validate(facility)
        self._memory_store[facility.id] = deepcopy(facility)
        logger.info(f"Saved facility {facility.id} ({len(facility.areas)} areas, {len(facility.tasks)} tasks)")
        return facility

    def get_facility(self, facility_id: str) -> Optional[Facility]:
        facility = self._memory_store.get(facility_id)
        return deepcopy(facility) if facility else None

    def list_facilities(self) -> list[str]:
        return list(self._memory_store.keys())


class MongoFacilityRepository(FacilityRepository):
    """Facilities stored in the `facilities` collection, keyed by facility id."""

    collection_name = "facilities"

    def __init__(self, client: MongoClient):
        super().__init__()
        self._collection = client.get_collection(self.collection_name)

    def save_facility(self, facility: Facility | dict[str, Any]) -> Facility:
        if not isinstance(facility, Facility):
            facility = Facility.model_validate(facility)
        doc = facility.model_dump(mode="json")
        doc["_id"] = facility.id
        self._collection.replace_one({"_id": facility.id}, doc, upsert=True)
        logger.info(f"Saved facility {facility.id} to MongoDB")
        return facility

    def get_facility(self, facility_id: str) -> Optional[Facility]:
        doc = self._collection.find_one({"_id": facility_id})
        if not doc:
            return None
        return Facility.model_validate({key: value for key, value in doc.items() if key != "_id"})

    def list_facilities(self) -> list[str]:
        return [doc["_id"] for doc in self._collection.find({}, {"_id": 1})]
