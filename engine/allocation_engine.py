"""Priority-weighted resource allocation — the core business engine."""

import logging
import math
import uuid
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from models.county import CountyRecord
from models.resource import ResourceRecord
from models.allocation import Allocation, CountyPriority, ResourceTracker
from models.scenario import Scenario
from data.validator import ensure_valid_records
from config.defaults import (
    RISK_WEIGHT, VULNERABILITY_WEIGHT, DENSITY_WEIGHT,
    AGE65_WEIGHT, MINORITY_WEIGHT, UNEMPLOYMENT_WEIGHT, NO_HS_DIPLOMA_WEIGHT,
    DENSITY_SATURATION,
    HEAT_RISK_THRESHOLD, HEAT_ROLLING_TEMP_THRESHOLD,
    POWER_OUTAGE_TEMP_THRESHOLD, POWER_OUTAGE_TEMP_BASE, POWER_OUTAGE_TEMP_SPAN,
    POPULATION_PER_UNIT, MAX_COUNTY_SHARE,
    TAG_EXTREME_HEAT, TAG_AIR_QUALITY, TAG_GENERAL_EMERGENCY, TAG_POWER_OUTAGE,
    AQI_NEED_INTENSITY, OPTIMIZATION_OBJECTIVE,
)

logger = logging.getLogger(__name__)


def compute_priority(
    county: CountyRecord,
    rule_config: Optional[dict] = None,
) -> CountyPriority:
    """Score a county from its risk, vulnerability and population density."""
    cfg = rule_config or {}
    risk_weight = cfg.get("risk_weight", RISK_WEIGHT)
    vulnerability_weight = cfg.get("vulnerability_weight", VULNERABILITY_WEIGHT)
    density_weight = cfg.get("density_weight", DENSITY_WEIGHT)
    saturation = cfg.get("density_saturation", DENSITY_SATURATION)

    # Weights are normalised to sum to 1 so the score stays in [0, 1]
    weights = [max(w, 0.0) for w in (risk_weight, vulnerability_weight, density_weight)]
    total_weight = sum(weights)
    if total_weight > 0:
        risk_weight, vulnerability_weight, density_weight = [w / total_weight for w in weights]
    else:
        risk_weight, vulnerability_weight, density_weight = RISK_WEIGHT, VULNERABILITY_WEIGHT, DENSITY_WEIGHT

    # Step 1: Normalized risk
    risk_factor = county.risk_score / 100

    # Step 2: Social vulnerability
    vulnerability_factor = (
        AGE65_WEIGHT * (county.age65_pct / 100)
        + MINORITY_WEIGHT * (county.minority_pct / 100)
        + UNEMPLOYMENT_WEIGHT * (county.unemployment_pct / 100)
        + NO_HS_DIPLOMA_WEIGHT * (county.no_hs_diploma_pct / 100)
    )

    # Step 3: Population density, saturating at 1.0
    density_factor = min(county.population_density / saturation, 1.0)

    priority_score = (
        risk_weight * risk_factor
        + vulnerability_weight * vulnerability_factor
        + density_weight * density_factor
    )

    return CountyPriority(
        county=county,
        risk_factor=risk_factor,
        vulnerability_factor=vulnerability_factor,
        density_factor=density_factor,
        priority_score=priority_score,
    )


def rank_counties(
    counties: Sequence[CountyRecord],
    rule_config: Optional[dict] = None,
) -> List[CountyPriority]:
    """Score all counties and sort by priority, highest first.

    sorted() is stable, so tied counties keep their input order.
    """
    priorities = [compute_priority(c, rule_config) for c in counties]
    return sorted(priorities, key=lambda p: p.priority_score, reverse=True)


def classify_need(
    priority: CountyPriority,
    resource: ResourceRecord,
    rule_config: Optional[dict] = None,
) -> Tuple[bool, float]:
    """Decide whether a county needs a resource and how intensely (0-1).

    Rules are checked in order; when several tags match, the intensity of the
    last matching rule wins.
    """
    cfg = rule_config or {}
    heat_risk = cfg.get("heat_risk_threshold", HEAT_RISK_THRESHOLD)
    heat_temp = cfg.get("heat_rolling_temp_threshold", HEAT_ROLLING_TEMP_THRESHOLD)
    outage_temp = cfg.get("power_outage_temp_threshold", POWER_OUTAGE_TEMP_THRESHOLD)

    county = priority.county
    needed = False
    intensity = 0.0

    if resource.has_tag(TAG_EXTREME_HEAT):
        if county.risk_score >= heat_risk or county.rolling_avg_ta_max >= heat_temp:
            needed = True
            intensity = min(county.risk_score / 100, 1.0)

    if resource.has_tag(TAG_AIR_QUALITY):
        if county.aqi_category in AQI_NEED_INTENSITY:
            needed = True
            intensity = AQI_NEED_INTENSITY[county.aqi_category]

    if resource.has_tag(TAG_GENERAL_EMERGENCY):
        needed = True
        intensity = priority.priority_score

    if resource.has_tag(TAG_POWER_OUTAGE):
        if county.ta_max >= outage_temp:
            needed = True
            intensity = min((county.ta_max - POWER_OUTAGE_TEMP_BASE) / POWER_OUTAGE_TEMP_SPAN, 1.0)

    return needed, intensity


def compute_base_need(county: CountyRecord, rule_config: Optional[dict] = None) -> int:
    """Units of need before weighting: one per POPULATION_PER_UNIT residents."""
    cfg = rule_config or {}
    per_unit = cfg.get("population_per_unit", POPULATION_PER_UNIT)
    return math.ceil(county.total_population / per_unit)


def compute_adjusted_need(base_need: int, intensity: float, priority_score: float) -> int:
    return math.ceil(base_need * intensity * priority_score)


def county_share_cap(resource: ResourceRecord, rule_config: Optional[dict] = None) -> int:
    """Most any single county may receive of a resource.

    A configured share may tighten the cap but never loosen it past
    MAX_COUNTY_SHARE.
    """
    cfg = rule_config or {}
    share = min(max(cfg.get("max_county_share", MAX_COUNTY_SHARE), 0.0), MAX_COUNTY_SHARE)
    return math.floor(resource.available_qty * share)


def compute_need_met_pct(allocated: int, base_need: int) -> float:
    return min(allocated / max(base_need, 1) * 100, 100.0)


def allocate_resources(
    ranked: List[CountyPriority],
    resources: Sequence[ResourceRecord],
    rule_config: Optional[dict] = None,
) -> Tuple[List[Allocation], Dict[str, ResourceTracker]]:
    """Greedy single pass: counties in priority order, resources in input order."""
    trackers = {
        r.resource_id: ResourceTracker(starting_qty=r.available_qty, available=r.available_qty)
        for r in resources
    }

    allocations = []
    for priority in ranked:
        county = priority.county
        base_need = compute_base_need(county, rule_config)
        for resource in resources:
            tracker = trackers[resource.resource_id]
            if tracker.available <= 0:
                logger.debug("Skipping exhausted resource %s for county %s",
                             resource.resource_id, county.county_id)
                continue

            needed, intensity = classify_need(priority, resource, rule_config)
            if not needed:
                continue

            adjusted_need = compute_adjusted_need(base_need, intensity, priority.priority_score)
            allocation_cap = min(
                adjusted_need,
                tracker.available,
                county_share_cap(resource, rule_config),
            )
            if allocation_cap <= 0:
                continue

            allocations.append(Allocation(
                county_id=county.county_id,
                resource_id=resource.resource_id,
                allocated_quantity=allocation_cap,
                need_met_pct=compute_need_met_pct(allocation_cap, base_need),
            ))
            tracker.take(allocation_cap)

    return allocations, trackers


def build_scenario(
    allocations: List[Allocation],
    trackers: Dict[str, ResourceTracker],
    objective: str,
    name: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Scenario:
    """Aggregate a run's allocations into an immutable Scenario."""
    created_at = now or datetime.now()
    kept = tuple(a for a in allocations if a.allocated_quantity > 0)
    total_resources = sum(t.allocated for t in trackers.values())
    counties_served = len({a.county_id for a in kept})

    return Scenario(
        scenario_id=f"scenario-{uuid.uuid4().hex[:12]}",
        name=name or f"Optimization Run {created_at.strftime('%H:%M:%S')}",
        created_at=created_at,
        total_resources=total_resources,
        counties_served=counties_served,
        optimization_objective=objective,
        allocations=kept,
    )


def run_allocation(
    counties: Sequence[CountyRecord],
    resources: Sequence[ResourceRecord],
    rule_config: Optional[dict] = None,
    name: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Scenario:
    """Full allocation pipeline: validate, rank counties, allocate, aggregate.

    Empty county or resource lists yield an empty Scenario. Invalid records
    raise InvalidRecordError before any scoring happens.
    """
    ensure_valid_records(counties, resources)

    ranked = rank_counties(counties, rule_config)
    allocations, trackers = allocate_resources(ranked, resources, rule_config)
    scenario = build_scenario(allocations, trackers, OPTIMIZATION_OBJECTIVE, name, now)

    logger.info(
        "Allocation run %s: %d allocations, %d resources to %d counties",
        scenario.scenario_id, len(scenario.allocations),
        scenario.total_resources, scenario.counties_served,
    )
    return scenario


def compute_resource_utilization(
    scenario: Scenario,
    resources: Sequence[ResourceRecord],
) -> List[dict]:
    """Per-resource allocated quantity and utilization % of starting stock.

    Returns list of dicts with: resource_id, resource_name, available_qty,
    allocated_qty, utilization_pct
    """
    rows = []
    for r in resources:
        allocated = scenario.allocated_for_resource(r.resource_id)
        utilization = (allocated / r.available_qty * 100) if r.available_qty > 0 else 0.0
        rows.append({
            "resource_id": r.resource_id,
            "resource_name": r.resource_name,
            "available_qty": r.available_qty,
            "allocated_qty": allocated,
            "utilization_pct": utilization,
        })
    return rows


def summarize_by_county(
    scenario: Scenario,
    counties: Sequence[CountyRecord],
) -> List[dict]:
    """Per-county totals for a scenario, largest total first.

    Returns list of dicts with: county_id, county_name, risk_score,
    total_allocated, avg_need_met_pct, allocation_count
    """
    county_map = {c.county_id: c for c in counties}
    grouped: Dict[str, List[Allocation]] = {}
    for a in scenario.allocations:
        grouped.setdefault(a.county_id, []).append(a)

    rows = []
    for county_id, allocs in grouped.items():
        county = county_map.get(county_id)
        rows.append({
            "county_id": county_id,
            "county_name": county.county_name if county else "Unknown",
            "risk_score": county.risk_score if county else 0.0,
            "total_allocated": sum(a.allocated_quantity for a in allocs),
            "avg_need_met_pct": sum(a.need_met_pct for a in allocs) / len(allocs),
            "allocation_count": len(allocs),
        })
    return sorted(rows, key=lambda r: r["total_allocated"], reverse=True)
