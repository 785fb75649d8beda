"""Email and SMS alert drafts, with a prefix stream for the typewriter reveal."""

from typing import Iterator

from models.alert import PredictiveAlert

EMAIL_TEMPLATE = """Subject: URGENT: {type_upper} Alert - {county}

Dear Emergency Response Team,

Our AI monitoring system has detected a HIGH RISK {type_label} event predicted for {county} on {date}.

⚠️ ALERT DETAILS:
• Location: {county}
• Risk Type: {type_upper}
• Severity: {severity}
• Predicted Date: {date}
• Confidence Level: {confidence}%

IMMEDIATE ACTIONS REQUIRED:
• Activate emergency response protocols
• Pre-position resources and equipment
• Issue public safety warnings
• Coordinate with local emergency services

This alert was generated using advanced AI analysis of environmental data, weather patterns, and historical risk factors.

Please confirm receipt and action status.

Best regards,
AidVantage AI Alert System"""

SMS_TEMPLATE = """🚨 URGENT ALERT - {county}

{type_upper} risk detected for {date}

Severity: {severity}
Confidence: {confidence}%

Activate emergency protocols immediately.

- AidVantage AI"""


def _template_fields(alert: PredictiveAlert, county_name: str) -> dict:
    return {
        "county": county_name,
        "type_label": alert.type_label,
        "type_upper": alert.type_label.upper(),
        "severity": alert.severity.upper(),
        "date": f"{alert.predicted_date.month}/{alert.predicted_date.day}/{alert.predicted_date.year}",
        "confidence": round(alert.confidence * 100),
    }


def draft_email(alert: PredictiveAlert, county_name: str) -> str:
    return EMAIL_TEMPLATE.format(**_template_fields(alert, county_name))


def draft_sms(alert: PredictiveAlert, county_name: str) -> str:
    return SMS_TEMPLATE.format(**_template_fields(alert, county_name))


def stream_prefixes(text: str, step: int = 1) -> Iterator[str]:
    """Yield growing prefixes of ``text``, from "" to the full string.

    The last prefix is always the full text. Each call returns a fresh
    generator, so a reveal can be restarted by calling again.
    """
    if step < 1:
        raise ValueError(f"step must be >= 1, got {step}")
    for end in range(0, len(text), step):
        yield text[:end]
    yield text
