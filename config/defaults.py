"""Default configuration constants for the Emergency Resource Allocation Dashboard."""

# Optimization objective labels
OPTIMIZATION_OBJECTIVE = "minimize_risk_exposure"
LP_OPTIMIZATION_OBJECTIVE = "lp_weighted_need"

# Priority score weights (must sum to 1.0)
RISK_WEIGHT = 0.5
VULNERABILITY_WEIGHT = 0.3
DENSITY_WEIGHT = 0.2

# Vulnerability factor weights
AGE65_WEIGHT = 0.3
MINORITY_WEIGHT = 0.2
UNEMPLOYMENT_WEIGHT = 0.2
NO_HS_DIPLOMA_WEIGHT = 0.3

# Population density (people / sq mi) that saturates the density factor
DENSITY_SATURATION = 1000.0

# Need classification thresholds
HEAT_RISK_THRESHOLD = 70.0          # riskScore at or above this triggers heat need
HEAT_ROLLING_TEMP_THRESHOLD = 85.0  # rolling avg max temp (F) that triggers heat need
POWER_OUTAGE_TEMP_THRESHOLD = 80.0  # ta_max (F) that triggers power outage need
POWER_OUTAGE_TEMP_BASE = 70.0
POWER_OUTAGE_TEMP_SPAN = 30.0

# Allocation sizing
POPULATION_PER_UNIT = 50000         # one unit of base need per this many residents
MAX_COUNTY_SHARE = 0.40             # no county gets more than 40% of a resource's stock

# Disaster tags
TAG_EXTREME_HEAT = "extreme_heat"
TAG_AIR_QUALITY = "air_quality"
TAG_GENERAL_EMERGENCY = "general_emergency"
TAG_POWER_OUTAGE = "power_outage"
DEFAULT_DISASTER_TAGS = [TAG_GENERAL_EMERGENCY]

# AQI categories, best to worst
AQI_CATEGORIES = [
    "Good",
    "Moderate",
    "Unhealthy for Sensitive Groups",
    "Unhealthy",
    "Very Unhealthy",
]

# Need intensity for AQI categories that trigger air quality need
AQI_NEED_INTENSITY = {
    "Unhealthy for Sensitive Groups": 0.6,
    "Unhealthy": 0.8,
    "Very Unhealthy": 1.0,
}

# Risk badge bands (lower bound inclusive), checked top down
RISK_LEVELS = [
    (90.0, "Critical"),
    (75.0, "High"),
    (50.0, "Medium"),
    (0.0, "Low"),
]

# Need-met / utilization colouring thresholds (percent)
NEED_MET_GOOD = 80.0
NEED_MET_FAIR = 60.0
AVG_NEED_MET_POSITIVE = 70.0
AVG_NEED_MET_NEUTRAL = 50.0
UTILIZATION_HIGH = 80.0
UTILIZATION_MEDIUM = 60.0

# Predictive alerts
ALERT_TYPES = ["extreme_heat", "air_quality", "resource_gap"]
ALERT_SEVERITIES = ["low", "medium", "high", "critical"]
ACTIVE_ALERT_SEVERITIES = ["high", "critical"]
ALERT_SELECTION_PROBABILITY = 0.3   # chance a county gets a new predicted alert
ALERT_HORIZON_DAYS = 7
ALERT_MIN_CONFIDENCE = 0.70
ALERT_MAX_CONFIDENCE = 0.99
ALERT_RECOMMENDATIONS = [
    "Increase water supply reserves by 40%",
    "Pre-position firefighting equipment",
    "Issue evacuation readiness alerts",
]

# Alert drafting
SMS_CHAR_LIMIT = 160
EMAIL_REVEAL_DELAY_S = 0.005
SMS_REVEAL_DELAY_S = 0.008
REVEAL_CHARS_PER_FRAME = 8          # prefixes emitted per redraw in the UI

# LP solver
LP_TIME_LIMIT_S = 30

# Map view options
MAP_VIEWS = ["risk_score", "need_met"]
DEFAULT_MAP_VIEW = "risk_score"

# Logging
DEFAULT_LOG_LEVEL = "INFO"
