"""Generates human-readable explanations for county priorities and allocations."""

from typing import List

from models.allocation import CountyPriority
from models.resource import ResourceRecord
from config.defaults import (
    RISK_WEIGHT, VULNERABILITY_WEIGHT, DENSITY_WEIGHT,
    AGE65_WEIGHT, MINORITY_WEIGHT, UNEMPLOYMENT_WEIGHT, NO_HS_DIPLOMA_WEIGHT,
    DENSITY_SATURATION, RISK_LEVELS,
)


def risk_level(score: float) -> str:
    """Badge label for a 0-100 risk score: Critical, High, Medium or Low."""
    for lower_bound, label in RISK_LEVELS:
        if score >= lower_bound:
            return label
    return RISK_LEVELS[-1][1]


def explain_priority(priority: CountyPriority) -> List[str]:
    """Produce step-by-step explanation for a county's priority score."""
    county = priority.county
    steps = []

    steps.append(
        f"Step 1 - Risk: score {county.risk_score:.1f} ({risk_level(county.risk_score)}) "
        f"=> risk factor {priority.risk_factor:.3f}"
    )

    steps.append(
        f"Step 2 - Vulnerability: age 65+ {county.age65_pct:.1f}% x {AGE65_WEIGHT}, "
        f"minority {county.minority_pct:.1f}% x {MINORITY_WEIGHT}, "
        f"unemployment {county.unemployment_pct:.1f}% x {UNEMPLOYMENT_WEIGHT}, "
        f"no HS diploma {county.no_hs_diploma_pct:.1f}% x {NO_HS_DIPLOMA_WEIGHT} "
        f"=> vulnerability factor {priority.vulnerability_factor:.3f}"
    )

    steps.append(
        f"Step 3 - Density: {county.total_population:,} people / {county.area_sqmi:,.0f} sq mi "
        f"= {county.population_density:,.0f}/sq mi, capped at {DENSITY_SATURATION:,.0f} "
        f"=> density factor {priority.density_factor:.3f}"
    )

    steps.append(
        f"Step 4 - Priority: {RISK_WEIGHT} x {priority.risk_factor:.3f} "
        f"+ {VULNERABILITY_WEIGHT} x {priority.vulnerability_factor:.3f} "
        f"+ {DENSITY_WEIGHT} x {priority.density_factor:.3f} "
        f"= {priority.priority_score:.3f}"
    )

    return steps


def explain_need(
    priority: CountyPriority,
    resource: ResourceRecord,
    needed: bool,
    intensity: float,
    base_need: int,
    adjusted_need: int,
) -> str:
    """One-line explanation of a county's need for a resource."""
    county = priority.county
    if not needed:
        return (
            f"{county.county_name} has no matching need for {resource.resource_name} "
            f"(tags: {', '.join(resource.disaster_tags) or 'none'})"
        )
    return (
        f"{county.county_name} needs {resource.resource_name}: intensity {intensity:.2f}, "
        f"base need {base_need} => adjusted need {base_need} x {intensity:.2f} "
        f"x {priority.priority_score:.3f} = {adjusted_need} {resource.unit}"
    )
