from dataclasses import dataclass

from models.county import CountyRecord


@dataclass(frozen=True)
class Allocation:
    county_id: str
    resource_id: str
    allocated_quantity: int
    need_met_pct: float           # 0-100


@dataclass(frozen=True)
class CountyPriority:
    """Step 1 scoring result for one county."""
    county: CountyRecord
    risk_factor: float            # 0-1
    vulnerability_factor: float   # 0-1
    density_factor: float         # 0-1
    priority_score: float         # 0-1


@dataclass
class ResourceTracker:
    """Per-run working counter for one resource's stock."""
    starting_qty: int
    available: int
    allocated: int = 0

    def take(self, qty: int):
        self.available -= qty
        self.allocated += qty
