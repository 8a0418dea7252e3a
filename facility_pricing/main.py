"""
Facility Pricing Engine — Main Entry Point

Price a facility snapshot file (CLI):
    python -m facility_pricing.main path/to/snapshot.json

The snapshot is a JSON object:
    {
      "facility": {...},            # Facility with areas and tasks
      "pricing_plan": {...},        # optional, defaults apply when omitted
      "service_frequency": "5x_week",
      "task_complexity": "standard"
    }

Run as an API server:
    python -m facility_pricing.main --serve
    # or: uvicorn facility_pricing.api:app --reload --port 8000

Or import and run programmatically:
    from facility_pricing.main import run
    result = run("path/to/snapshot.json")
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from facility_pricing.config import get_settings
from facility_pricing.models.results import FacilityPricingResult, ProposalServiceLine
from facility_pricing.persistence import FacilityRepository, PricingPlanRepository
from facility_pricing.pricing.engine import PricingEngine
from facility_pricing.utils.logger import setup_logging


def run(snapshot_path: str) -> FacilityPricingResult:
    """Price the facility in *snapshot_path* and log a summary."""
    settings = get_settings()
    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)

    snapshot = json.loads(Path(snapshot_path).read_text(encoding="utf-8"))
    plan_data = dict(snapshot.get("pricing_plan") or {})
    plan_data["is_default"] = True

    engine = PricingEngine(PricingPlanRepository(), FacilityRepository(), settings=settings)
    plan = engine.plans.save_plan(plan_data)
    facility = engine.facilities.save_facility(snapshot["facility"])

    frequency = snapshot.get("service_frequency") or settings.default_service_frequency
    complexity = snapshot.get("task_complexity") or settings.default_task_complexity

    logger.info("=" * 60)
    logger.info("  FACILITY PRICING ENGINE")
    logger.info(f"  Snapshot: {snapshot_path} | Started: {datetime.now(timezone.utc).isoformat()}")
    logger.info("=" * 60)

    result = engine.calculate_pricing(
        facility.id,
        frequency,
        task_complexity=complexity,
        pricing_plan_id=plan.id,
        captured_at=datetime.now(timezone.utc).isoformat(),
    )
    lines = engine.generate_proposal_services(
        facility.id,
        frequency,
        task_complexity=complexity,
        pricing_plan_id=plan.id,
    )

    _print_summary(result, lines)
    return result


def _print_summary(result: FacilityPricingResult, lines: list[ProposalServiceLine]) -> None:
    """Log a human-readable summary of the pricing result."""
    logger = logging.getLogger(__name__)

    logger.info("")
    logger.info("-" * 60)
    logger.info("  PRICING SUMMARY")
    logger.info("-" * 60)
    logger.info(f"  Facility:       {result.facility_name or result.facility_id}")
    logger.info(f"  Building Type:  {result.building_type}")
    logger.info(f"  Frequency:      {result.service_frequency} ({result.monthly_visits} visits/month)")
    logger.info(f"  Square Feet:    {result.total_square_feet:,.0f}")
    logger.info(f"  Strategy:       {result.strategy_key} v{result.strategy_version}")
    logger.info(f"  Plan:           {result.pricing_plan_name} ({result.pricing_plan_id})")
    logger.info(f"  Cost / Visit:   ${result.cost_breakdown.total_cost_per_visit:,.2f}")
    logger.info(f"  Subtotal:       ${result.subtotal:,.2f}")
    logger.info(f"  Monthly Total:  ${result.monthly_total:,.2f}"
                + ("  (minimum charge)" if result.minimum_applied else ""))
    logger.info("-" * 60)

    logger.info(f"\n  Proposal Lines: {len(lines)}")
    for line in lines:
        logger.info(f"    {line.service_name:<30} ${line.monthly_price:>10,.2f}")
    logger.info("")


def serve(host: str = "0.0.0.0", port: int = 8000) -> None:
    """Start the FastAPI server."""
    import uvicorn

    setup_logging(get_settings().log_level)
    logger = logging.getLogger(__name__)
    logger.info(f"Starting API server on {host}:{port}")
    uvicorn.run("facility_pricing.api:app", host=host, port=port, reload=get_settings().debug)


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if "--serve" in args:
        serve()
        return 0
    if not args:
        print("usage: python -m facility_pricing <snapshot.json> | --serve", file=sys.stderr)
        return 2
    run(args[0])
    return 0


if __name__ == "__main__":
    sys.exit(main())
