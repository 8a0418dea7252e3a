"""
Proposal Service Generator — turns a pricing quote into proposal line items.

One line per area (facility order), plus a trailing "Facility-Wide" line when
tasks exist that are not bound to an area and the strategy prices
facility-level costs; otherwise those tasks are listed on the first area
line.  Unscaled area prices are rescaled so the lines carry the
facility-level adjustments, rounded to cents, and the last line that can
absorb the rounding residual does: Σ line prices == monthly_total.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from facility_pricing.models.enums import TaskFrequency
from facility_pricing.models.results import ProposalServiceLine
from facility_pricing.models.schemas import Facility
from facility_pricing.pricing.frequency import (
    frequency_label,
    proposal_frequency_for,
    service_type_for,
)
from facility_pricing.pricing.strategies import StrategyQuote
from facility_pricing.pricing.task_time import FACILITY_WIDE_ID, FACILITY_WIDE_NAME
from facility_pricing.utils.money import round_cents, to_decimal

logger = logging.getLogger(__name__)

# Description order; as_needed tasks are listed in included_tasks only
DESCRIPTION_FREQUENCY_ORDER = [
    TaskFrequency.DAILY.value,
    TaskFrequency.WEEKLY.value,
    TaskFrequency.BIWEEKLY.value,
    TaskFrequency.MONTHLY.value,
    TaskFrequency.QUARTERLY.value,
    TaskFrequency.ANNUAL.value,
]

TASK_FREQUENCY_LABELS = {
    "daily": "Daily",
    "weekly": "Weekly",
    "biweekly": "Bi-Weekly",
    "monthly": "Monthly",
    "quarterly": "Quarterly",
    "annual": "Yearly",
    "as_needed": "As Needed",
}

GENERIC_INCLUDED_TASKS = [
    "Vacuum/mop all floors",
    "Empty trash receptacles",
    "Clean and sanitize restrooms",
    "Dust surfaces",
    "Wipe down high-touch areas",
]

_TASK_SORT_ORDER = {freq.value: index for index, freq in enumerate(TaskFrequency)}


def _format_sqft(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


# ── Task grouping ────────────────────────────────────────


def get_facility_tasks_grouped(facility: Facility) -> tuple[dict[str, dict], dict[str, list[dict]]]:
    """
    Group a facility's tasks two ways.

    Returns (by_area, by_frequency):
      by_area       area_id → {"area_name": str, "tasks": [{"name", "frequency"}]}
                    (tasks without an area live under "facility-wide")
      by_frequency  frequency → [{"name", "area_name"}]

    Tasks are ordered by cleaning frequency, then priority.
    """
    areas = {area.id: area for area in facility.areas}
    ordered = sorted(
        facility.tasks,
        key=lambda task: (_TASK_SORT_ORDER.get(task.cleaning_frequency, len(_TASK_SORT_ORDER)), task.priority),
    )

    by_area: dict[str, dict] = {}
    by_frequency: dict[str, list[dict]] = {}

    for task in ordered:
        area = areas.get(task.area_id) if task.area_id else None
        if task.area_id and area is None:
            logger.warning(f"Task {task.id} references unknown area {task.area_id}; treating as facility-wide")

        area_id = area.id if area else FACILITY_WIDE_ID
        area_name = area.display_name if area else FACILITY_WIDE_NAME
        name = task.display_name
        frequency = task.cleaning_frequency

        by_area.setdefault(area_id, {"area_name": area_name, "tasks": []})
        by_area[area_id]["tasks"].append({"name": name, "frequency": frequency})

        by_frequency.setdefault(frequency, []).append({"name": name, "area_name": area_name})

    return by_area, by_frequency


def build_task_description(first_line: str, fixtures_line: Optional[str], tasks: list[dict]) -> str:
    tasks_by_frequency: dict[str, list[str]] = {}
    for task in tasks:
        tasks_by_frequency.setdefault(task["frequency"], []).append(task["name"])

    parts = [first_line]
    if fixtures_line:
        parts.append(fixtures_line)
    for frequency in DESCRIPTION_FREQUENCY_ORDER:
        names = tasks_by_frequency.get(frequency)
        if names:
            parts.append(f"{TASK_FREQUENCY_LABELS[frequency]}: {', '.join(names)}")
    return "\n".join(parts)


# ── Line generation ──────────────────────────────────────


@dataclass
class _DraftLine:
    area_id: Optional[str]
    service_name: str
    description: str
    included_tasks: list[str] = field(default_factory=list)
    unscaled_price: float = 0.0


def reconcile_prices(unscaled: list[float], monthly_total: float) -> list[Decimal]:
    """
    Scale *unscaled* so it sums to *monthly_total*, round each to cents and
    add the residual to the last entry. A negative residual goes to the last
    entry that stays non-negative after absorbing it.
    """
    if not unscaled:
        return []

    total = to_decimal(monthly_total)
    area_price_total = sum((to_decimal(price) for price in unscaled), Decimal("0"))

    if area_price_total > 0 and total > 0:
        factor = total / area_price_total
        scaled = [to_decimal(price) * factor for price in unscaled]
    else:
        scaled = [to_decimal(price) for price in unscaled]

    rounded = [round_cents(price) for price in scaled]
    residual = round_cents(total) - sum(rounded, Decimal("0"))
    if residual:
        index = len(rounded) - 1
        if residual < 0:
            while index > 0 and rounded[index] + residual < 0:
                index -= 1
        logger.debug(f"Rounding residual {residual} applied to line {index}")
        rounded[index] += residual
    return rounded


def generate_proposal_services(
    quote: StrategyQuote,
    facility: Facility,
    service_frequency: str,
) -> list[ProposalServiceLine]:
    result = quote.result
    label = frequency_label(service_frequency)
    service_type = service_type_for(service_frequency)
    proposal_frequency = proposal_frequency_for(service_frequency)

    by_area, _ = get_facility_tasks_grouped(facility)

    if not by_area:
        area_descriptions = [
            f"{breakdown.area_name} ({_format_sqft(breakdown.square_feet)} sq ft)"
            for breakdown in result.areas
        ]
        return [
            ProposalServiceLine(
                service_name=f"{label} Cleaning Service",
                service_type=service_type,
                frequency=proposal_frequency,
                monthly_price=result.monthly_total,
                description=f"Includes: {', '.join(area_descriptions)}",
                included_tasks=list(GENERIC_INCLUDED_TASKS),
            )
        ]

    drafts: list[_DraftLine] = []
    for (area, price), breakdown in zip(quote.area_prices, result.areas):
        group = by_area.get(area.id, {"tasks": []})
        fixtures_line = None
        if area.fixtures:
            items = ", ".join(f"{fixture.name or fixture.fixture_type_id} x{fixture.count}" for fixture in area.fixtures)
            fixtures_line = f"Items: {items}"
        drafts.append(_DraftLine(
            area_id=area.id,
            service_name=breakdown.area_name,
            description=build_task_description(
                f"{_format_sqft(breakdown.square_feet)} sq ft {breakdown.floor_type} flooring",
                fixtures_line,
                group["tasks"],
            ),
            included_tasks=[task["name"] for task in group["tasks"]],
            unscaled_price=price,
        ))

    facility_wide = by_area.get(FACILITY_WIDE_ID)
    if facility_wide is not None and quote.facility_level_price <= 0 and drafts:
        # Nothing to price separately; list the tasks on the first area line
        names = [task["name"] for task in facility_wide["tasks"]]
        drafts[0].description += f"\n{FACILITY_WIDE_NAME}: {', '.join(names)}"
        drafts[0].included_tasks.extend(names)
    elif facility_wide is not None:
        drafts.append(_DraftLine(
            area_id=None,
            service_name=FACILITY_WIDE_NAME,
            description=build_task_description(
                f"Facility-wide tasks across {_format_sqft(result.total_square_feet)} sq ft",
                None,
                facility_wide["tasks"],
            ),
            included_tasks=[task["name"] for task in facility_wide["tasks"]],
            unscaled_price=quote.facility_level_price,
        ))

    prices = reconcile_prices([draft.unscaled_price for draft in drafts], result.monthly_total)

    lines = [
        ProposalServiceLine(
            service_name=draft.service_name,
            service_type=service_type,
            frequency=proposal_frequency,
            monthly_price=float(price),
            description=draft.description,
            included_tasks=draft.included_tasks,
            area_id=draft.area_id,
        )
        for draft, price in zip(drafts, prices)
    ]

    logger.info(f"Generated {len(lines)} proposal lines for facility {facility.id} ({label})")
    return lines
