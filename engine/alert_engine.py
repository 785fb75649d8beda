"""Predictive alert generation and alert list management."""

import logging
import random
from datetime import date, timedelta
from typing import List, Optional, Sequence

from models.alert import PredictiveAlert
from models.county import CountyRecord
from config.defaults import (
    ACTIVE_ALERT_SEVERITIES, ALERT_SELECTION_PROBABILITY, ALERT_HORIZON_DAYS,
    ALERT_MIN_CONFIDENCE, ALERT_MAX_CONFIDENCE, ALERT_RECOMMENDATIONS,
)

logger = logging.getLogger(__name__)


def generate_predictive_alerts(
    counties: Sequence[CountyRecord],
    rng: random.Random,
    today: Optional[date] = None,
    horizon_days: int = ALERT_HORIZON_DAYS,
) -> List[PredictiveAlert]:
    """Simulate a prediction run: pick some counties and raise an alert for each.

    All randomness comes from ``rng``; the same seed and inputs give the same
    alerts, ids included.
    """
    predicted_date = (today or date.today()) + timedelta(days=horizon_days)
    min_pct = round(ALERT_MIN_CONFIDENCE * 100)
    max_pct = round(ALERT_MAX_CONFIDENCE * 100)

    alerts = []
    for county in counties:
        if rng.random() >= ALERT_SELECTION_PROBABILITY:
            continue
        alert_type = "extreme_heat" if rng.random() < 0.5 else "air_quality"
        severity = "critical" if rng.random() < 0.5 else "high"
        confidence = rng.randint(min_pct, max_pct) / 100
        event = "extreme heat event" if alert_type == "extreme_heat" else "unhealthy air quality"
        alerts.append(PredictiveAlert(
            alert_id=f"alert-{rng.getrandbits(32):08x}",
            county_id=county.county_id,
            alert_type=alert_type,
            severity=severity,
            predicted_date=predicted_date,
            confidence=confidence,
            message=f"Predicted {event} for {county.county_name} based on current trends",
            recommendations=tuple(ALERT_RECOMMENDATIONS),
        ))

    logger.info("Predictive run raised %d alerts across %d counties", len(alerts), len(counties))
    return alerts


def active_alerts(alerts: Sequence[PredictiveAlert]) -> List[PredictiveAlert]:
    """Alerts that need attention (high or critical severity)."""
    return [a for a in alerts if a.severity in ACTIVE_ALERT_SEVERITIES]


def acknowledge_alert(alerts: Sequence[PredictiveAlert], alert_id: str) -> List[PredictiveAlert]:
    """Return the alert list without the acknowledged alert."""
    remaining = [a for a in alerts if a.alert_id != alert_id]
    if len(remaining) == len(alerts):
        logger.warning("Acknowledged unknown alert %s", alert_id)
    return remaining


def count_critical(alerts: Sequence[PredictiveAlert]) -> int:
    return sum(1 for a in alerts if a.severity == "critical")
