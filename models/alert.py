from dataclasses import dataclass, field
from datetime import date
from typing import Tuple


@dataclass(frozen=True)
class PredictiveAlert:
    alert_id: str
    county_id: str
    alert_type: str               # "extreme_heat", "air_quality", "resource_gap"
    severity: str                 # "low", "medium", "high", "critical"
    predicted_date: date
    confidence: float             # 0-1
    message: str
    recommendations: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def type_label(self) -> str:
        """Alert type with the first underscore replaced, e.g. 'extreme heat'."""
        return self.alert_type.replace("_", " ", 1)
