from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CountyRecord:
    county_id: str
    county_name: str
    ta_min: float                 # degrees F
    ta_avg: float
    ta_max: float
    aqi_category: str             # one of config.defaults.AQI_CATEGORIES
    risk_score: float             # 0-100, precomputed
    unemployment_pct: float       # 0-100
    no_hs_diploma_pct: float      # 0-100
    minority_pct: float           # 0-100
    age65_pct: float              # 0-100
    total_population: int
    area_sqmi: float
    rolling_avg_ta_max: float
    zip_code: str = ""
    parameter_name: str = ""      # dominant pollutant, e.g. "PM2.5"
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def population_density(self) -> float:
        """Residents per square mile."""
        return self.total_population / self.area_sqmi
