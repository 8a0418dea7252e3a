"""
Task Time Estimator — minutes per task, per area and per facility.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from facility_pricing.models.enums import FloorType
from facility_pricing.models.results import (
    AreaTimeBreakdown,
    FacilityTaskTimeBreakdown,
    TaskTimeEstimate,
)
from facility_pricing.models.schemas import Area, Facility, FacilityTask
from facility_pricing.utils.money import round_money

logger = logging.getLogger(__name__)

FACILITY_WIDE_ID = "facility-wide"
FACILITY_WIDE_NAME = "Facility-Wide"


@dataclass(frozen=True)
class AreaQuantities:
    """Quantity-adjusted measurements a task's minutes are computed from."""
    square_feet: float = 0.0
    units: float = 0.0
    rooms: float = 0.0
    fixtures: dict[str, float] = field(default_factory=dict)

    @classmethod
    def for_area(cls, area: Area) -> "AreaQuantities":
        fixtures: dict[str, float] = {}
        for fixture in area.fixtures:
            fixtures[fixture.fixture_type_id] = fixtures.get(fixture.fixture_type_id, 0) + fixture.count * area.quantity
        return cls(
            square_feet=area.total_square_feet,
            units=area.unit_count * area.quantity,
            rooms=area.room_count * area.quantity,
            fixtures=fixtures,
        )


def _pick(override: Optional[float], template_value: Optional[float]) -> float:
    if override is not None:
        return float(override)
    if template_value is not None:
        return float(template_value)
    return 0.0


def calculate_task_minutes(task: FacilityTask, quantities: AreaQuantities) -> float:
    """Minutes for one task; overrides win over template values field by field."""
    template = task.template
    base = _pick(task.base_minutes_override, template.base_minutes if template else None)
    per_sqft = _pick(task.per_sqft_minutes_override, template.per_sqft_minutes if template else None)
    per_unit = _pick(task.per_unit_minutes_override, template.per_unit_minutes if template else None)
    per_room = _pick(task.per_room_minutes_override, template.per_room_minutes if template else None)

    fixture_minutes = dict(template.fixture_minutes) if template else {}
    fixture_minutes.update(task.fixture_minutes_override)

    minutes = (
        base
        + per_sqft * quantities.square_feet
        + per_unit * quantities.units
        + per_room * quantities.rooms
    )
    for fixture_type_id, per_fixture in fixture_minutes.items():
        minutes += float(per_fixture) * quantities.fixtures.get(fixture_type_id, 0)
    return minutes


def estimate_task_time(facility: Facility) -> FacilityTaskTimeBreakdown:
    """Time breakdown over every area with tasks, plus a facility-wide bucket."""
    area_tasks: dict[str, list[FacilityTask]] = {}
    facility_wide_tasks: list[FacilityTask] = []
    known_areas = {area.id for area in facility.areas}

    for task in facility.tasks:
        if task.area_id and task.area_id in known_areas:
            area_tasks.setdefault(task.area_id, []).append(task)
        else:
            facility_wide_tasks.append(task)

    breakdowns: list[AreaTimeBreakdown] = []
    facility_minutes = 0.0

    def _breakdown(area_id: str, name: str, square_feet: float, floor_type: str,
                   quantities: AreaQuantities, tasks: list[FacilityTask]) -> tuple[AreaTimeBreakdown, float]:
        estimates = []
        total = 0.0
        for task in tasks:
            minutes = calculate_task_minutes(task, quantities)
            total += minutes
            estimates.append(TaskTimeEstimate(
                task_id=task.id,
                task_name=task.display_name,
                cleaning_frequency=task.cleaning_frequency,
                calculated_minutes=round_money(minutes),
            ))
        return AreaTimeBreakdown(
            area_id=area_id,
            name=name,
            square_feet=square_feet,
            floor_type=floor_type,
            total_minutes=round_money(total),
            tasks=estimates,
        ), total

    for area in facility.areas:
        tasks = area_tasks.get(area.id)
        if not tasks:
            continue
        breakdown, total = _breakdown(
            area.id,
            area.display_name,
            area.total_square_feet,
            area.floor_type,
            AreaQuantities.for_area(area),
            tasks,
        )
        breakdowns.append(breakdown)
        facility_minutes += total

    if facility_wide_tasks:
        # Whole-building tasks scale with total square footage only
        breakdown, total = _breakdown(
            FACILITY_WIDE_ID,
            FACILITY_WIDE_NAME,
            facility.total_square_feet,
            FloorType.OTHER.value,
            AreaQuantities(square_feet=facility.total_square_feet),
            facility_wide_tasks,
        )
        breakdowns.append(breakdown)
        facility_minutes += total

    logger.debug(f"Facility {facility.id}: {facility_minutes:.2f} task minutes across {len(breakdowns)} areas")

    return FacilityTaskTimeBreakdown(
        facility_id=facility.id,
        areas=breakdowns,
        total_minutes=round_money(facility_minutes),
        total_hours=round_money(facility_minutes / 60),
    )
