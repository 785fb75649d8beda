from dataclasses import dataclass, field
from datetime import datetime
from typing import Tuple

from models.allocation import Allocation


@dataclass(frozen=True)
class Scenario:
    scenario_id: str
    name: str
    created_at: datetime
    total_resources: int
    counties_served: int
    optimization_objective: str   # "minimize_risk_exposure", "lp_weighted_need"
    allocations: Tuple[Allocation, ...] = field(default_factory=tuple)

    def allocations_for_county(self, county_id: str) -> Tuple[Allocation, ...]:
        return tuple(a for a in self.allocations if a.county_id == county_id)

    def allocated_for_resource(self, resource_id: str) -> int:
        return sum(a.allocated_quantity for a in self.allocations if a.resource_id == resource_id)

    @property
    def avg_need_met_pct(self) -> float:
        if not self.allocations:
            return 0.0
        return sum(a.need_met_pct for a in self.allocations) / len(self.allocations)
