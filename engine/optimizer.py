"""PuLP LP-based resource allocation optimizer."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

import pulp

from models.county import CountyRecord
from models.resource import ResourceRecord
from models.allocation import Allocation, ResourceTracker
from models.scenario import Scenario
from data.validator import ensure_valid_records
from engine.allocation_engine import (
    rank_counties, classify_need, compute_base_need, compute_adjusted_need,
    county_share_cap, compute_need_met_pct, build_scenario, run_allocation,
)
from config.defaults import LP_OPTIMIZATION_OBJECTIVE, LP_TIME_LIMIT_S

logger = logging.getLogger(__name__)


@dataclass
class OptimizationResult:
    status: str  # "Optimal", "Infeasible", "Not Solved"
    objective_value: float
    scenario: Optional[Scenario]
    before_after: List[dict] = field(default_factory=list)  # greedy vs LP per county
    message: str = ""


def optimize_allocation(
    counties: Sequence[CountyRecord],
    resources: Sequence[ResourceRecord],
    rule_config: Optional[dict] = None,
    name: Optional[str] = None,
    now: Optional[datetime] = None,
    greedy_baseline: Optional[Scenario] = None,
) -> OptimizationResult:
    """
    Solve the allocation as an integer program instead of a greedy pass.

    Uses the same need classification as the greedy engine. For every
    (county, resource) pair with a need:
    - x[c, r] <= min(adjusted need, per-county share cap)
    - sum over counties of x[c, r] <= starting stock of r
    Objective: maximize sum of priority x intensity x (x / base need), i.e.
    fraction of need met weighted by urgency.
    """
    ensure_valid_records(counties, resources)
    ranked = rank_counties(counties, rule_config)

    # Candidate pairs with their bounds and weights
    upper: Dict[Tuple[str, str], int] = {}
    weight: Dict[Tuple[str, str], float] = {}
    base_needs: Dict[str, int] = {}
    for priority in ranked:
        county = priority.county
        base_need = compute_base_need(county, rule_config)
        base_needs[county.county_id] = base_need
        for resource in resources:
            if resource.available_qty <= 0:
                continue
            needed, intensity = classify_need(priority, resource, rule_config)
            if not needed:
                continue
            adjusted = compute_adjusted_need(base_need, intensity, priority.priority_score)
            bound = min(adjusted, county_share_cap(resource, rule_config))
            if bound <= 0:
                continue
            key = (county.county_id, resource.resource_id)
            upper[key] = bound
            weight[key] = priority.priority_score * intensity / max(base_need, 1)

    prob = pulp.LpProblem("ResourceAllocation", pulp.LpMaximize)

    # Decision variables: x[county][resource] = quantity allocated
    x = {}
    for (cid, rid), bound in upper.items():
        x[(cid, rid)] = pulp.LpVariable(
            f"x_{len(x)}", lowBound=0, upBound=bound, cat="Integer",
        )

    prob += pulp.lpSum(weight[k] * x[k] for k in x), "weighted_need_met"

    # C1: Resource stock
    for idx, resource in enumerate(resources):
        pair_vars = [x[k] for k in x if k[1] == resource.resource_id]
        if pair_vars:
            prob += pulp.lpSum(pair_vars) <= resource.available_qty, f"stock_{idx}"

    if x:
        prob.solve(pulp.PULP_CBC_CMD(msg=0, timeLimit=LP_TIME_LIMIT_S))
        status = pulp.LpStatus[prob.status]
    else:
        status = "Optimal"

    if status != "Optimal":
        logger.warning("LP allocation did not solve: %s", status)
        return OptimizationResult(
            status=status,
            objective_value=0,
            scenario=None,
            message=f"Optimization could not find a solution. Status: {status}",
        )

    # --- Extract results, in county-priority then resource-input order ---
    trackers = {
        r.resource_id: ResourceTracker(starting_qty=r.available_qty, available=r.available_qty)
        for r in resources
    }
    allocations = []
    for priority in ranked:
        cid = priority.county.county_id
        for resource in resources:
            var = x.get((cid, resource.resource_id))
            if var is None:
                continue
            qty = int(round(var.varValue or 0))
            if qty <= 0:
                continue
            allocations.append(Allocation(
                county_id=cid,
                resource_id=resource.resource_id,
                allocated_quantity=qty,
                need_met_pct=compute_need_met_pct(qty, base_needs[cid]),
            ))
            trackers[resource.resource_id].take(qty)

    scenario = build_scenario(
        allocations, trackers, LP_OPTIMIZATION_OBJECTIVE,
        name=name or f"LP Optimization {(now or datetime.now()).strftime('%H:%M:%S')}",
        now=now,
    )

    # Before/After comparison against the greedy heuristic
    baseline = greedy_baseline or run_allocation(counties, resources, rule_config, now=now)
    before_after = []
    for priority in ranked:
        cid = priority.county.county_id
        before = sum(a.allocated_quantity for a in baseline.allocations_for_county(cid))
        after = sum(a.allocated_quantity for a in scenario.allocations_for_county(cid))
        before_after.append({
            "County": priority.county.county_name,
            "Priority": round(priority.priority_score, 3),
            "Greedy Allocated": before,
            "LP Allocated": after,
            "Change": after - before,
        })

    objective_value = pulp.value(prob.objective) if x else 0
    msg = (
        f"Optimization complete (LP). {scenario.total_resources:,} resources "
        f"to {scenario.counties_served} counties."
    )
    logger.info("LP allocation %s: %s", scenario.scenario_id, msg)

    return OptimizationResult(
        status=status,
        objective_value=objective_value or 0,
        scenario=scenario,
        before_after=before_after,
        message=msg,
    )
