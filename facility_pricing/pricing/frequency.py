"""
Service frequency tables and the frequency comparator.

Frequency only changes the number of monthly visits; the per-visit cost shape
is identical for every frequency, so a comparison is a plain re-run of the
full calculation per candidate.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from facility_pricing.models.results import FacilityPricingResult, FrequencyComparison

logger = logging.getLogger(__name__)

DEFAULT_MONTHLY_VISITS = 4.33  # weekly

MONTHLY_VISITS: dict[str, float] = {
    "1x_week": 4.33,
    "2x_week": 8.67,
    "3x_week": 13.0,
    "4x_week": 17.33,
    "5x_week": 21.67,
    "daily": 30.0,
    "weekly": 4.33,
    "biweekly": 2.17,
    "monthly": 1.0,
    "quarterly": 0.33,
}

FREQUENCY_LABELS: dict[str, str] = {
    "1x_week": "Weekly (1x)",
    "2x_week": "Bi-Weekly (2x)",
    "3x_week": "3x Weekly",
    "4x_week": "4x Weekly",
    "5x_week": "5x Weekly",
    "daily": "Daily",
    "weekly": "Weekly",
    "biweekly": "Bi-Weekly",
    "monthly": "Monthly",
    "quarterly": "Quarterly",
}

_SERVICE_TYPES: dict[str, str] = {
    "1x_week": "weekly",
    "2x_week": "weekly",
    "3x_week": "weekly",
    "4x_week": "weekly",
    "5x_week": "daily",
    "daily": "daily",
    "weekly": "weekly",
    "biweekly": "biweekly",
    "monthly": "monthly",
    "quarterly": "quarterly",
}

_PROPOSAL_FREQUENCIES: dict[str, str] = {
    "1x_week": "weekly",
    "2x_week": "weekly",
    "3x_week": "weekly",
    "4x_week": "weekly",
    "5x_week": "weekly",
    "daily": "daily",
    "weekly": "weekly",
    "biweekly": "biweekly",
    "monthly": "monthly",
    "quarterly": "quarterly",
}


def monthly_visits_for(frequency: str) -> float:
    """Expected visits per month; unknown keys count as weekly service."""
    return MONTHLY_VISITS.get(frequency, DEFAULT_MONTHLY_VISITS)


def frequency_label(frequency: str) -> str:
    return FREQUENCY_LABELS.get(frequency, frequency)


def service_type_for(frequency: str) -> str:
    return _SERVICE_TYPES.get(frequency, "monthly")


def proposal_frequency_for(frequency: str) -> str:
    return _PROPOSAL_FREQUENCIES.get(frequency, "monthly")


def compare_frequencies(
    price_for: Callable[[str], FacilityPricingResult],
    frequencies: Iterable[str],
) -> list[FrequencyComparison]:
    """Run *price_for* once per frequency, preserving request order."""
    comparisons: list[FrequencyComparison] = []
    for frequency in frequencies:
        result = price_for(frequency)
        comparisons.append(FrequencyComparison(
            frequency=frequency,
            monthly_total=result.monthly_total,
            monthly_visits=result.monthly_visits,
        ))
    logger.debug(f"Compared {len(comparisons)} frequencies")
    return comparisons
