"""Schema validation for county and resource data."""

import math
from dataclasses import dataclass, field
from typing import Iterable, List

import pandas as pd

from config.defaults import AQI_CATEGORIES
from models.county import CountyRecord
from models.resource import ResourceRecord


class InvalidRecordError(ValueError):
    """Raised when a county or resource record violates its invariants."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


@dataclass
class ValidationResult:
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


COUNTY_REQUIRED_COLUMNS = [
    "County ID",
    "County Name",
    "Min Temp (F)",
    "Avg Temp (F)",
    "Max Temp (F)",
    "AQI Category",
    "Risk Score",
    "Unemployment (%)",
    "No HS Diploma (%)",
    "Minority (%)",
    "Age 65+ (%)",
    "Total Population",
    "Area (sq mi)",
    "Rolling Avg Max Temp (F)",
]

RESOURCE_REQUIRED_COLUMNS = [
    "Resource ID",
    "Resource Name",
    "Category",
    "Unit",
    "Available Qty",
    "Disaster Tags",
]

PERCENT_COLUMNS = [
    "Risk Score",
    "Unemployment (%)",
    "No HS Diploma (%)",
    "Minority (%)",
    "Age 65+ (%)",
]


def _check_required_columns(df: pd.DataFrame, required: List[str], file_label: str) -> ValidationResult:
    result = ValidationResult()
    missing = [col for col in required if col not in df.columns]
    if missing:
        result.is_valid = False
        result.errors.append(f"{file_label}: Missing required columns: {', '.join(missing)}")
    if df.empty:
        result.is_valid = False
        result.errors.append(f"{file_label}: File contains no data rows.")
    return result


def validate_counties_df(df: pd.DataFrame) -> ValidationResult:
    result = _check_required_columns(df, COUNTY_REQUIRED_COLUMNS, "County Risk Data")
    if not result.is_valid:
        return result

    for col in PERCENT_COLUMNS:
        if ((df[col] < 0) | (df[col] > 100)).any():
            result.is_valid = False
            result.errors.append(f"County Risk Data: {col} must be between 0 and 100.")

    if (df["Total Population"] <= 0).any():
        result.is_valid = False
        result.errors.append("County Risk Data: Total Population must be positive.")

    if (df["Area (sq mi)"] <= 0).any():
        result.is_valid = False
        result.errors.append("County Risk Data: Area (sq mi) must be positive.")

    unknown_aqi = set(df["AQI Category"].astype(str).str.strip()) - set(AQI_CATEGORIES)
    if unknown_aqi:
        result.is_valid = False
        result.errors.append(f"County Risk Data: Unknown AQI categories: {sorted(unknown_aqi)}")

    dupes = df.duplicated(subset=["County ID"], keep=False)
    if dupes.any():
        result.is_valid = False
        result.errors.append(
            f"County Risk Data: Duplicate county IDs: {df[dupes]['County ID'].astype(str).unique().tolist()}"
        )

    if "Latitude" not in df.columns or "Longitude" not in df.columns:
        result.warnings.append("County Risk Data: No Latitude/Longitude columns. The risk map will be empty.")

    return result


def validate_resources_df(df: pd.DataFrame) -> ValidationResult:
    result = _check_required_columns(df, RESOURCE_REQUIRED_COLUMNS, "Resource Inventory")
    if not result.is_valid:
        return result

    if (df["Available Qty"] < 0).any():
        result.is_valid = False
        result.errors.append("Resource Inventory: Available Qty cannot be negative.")

    dupes = df.duplicated(subset=["Resource ID"], keep=False)
    if dupes.any():
        result.is_valid = False
        result.errors.append(
            f"Resource Inventory: Duplicate resource IDs: {df[dupes]['Resource ID'].astype(str).unique().tolist()}"
        )

    if (df["Available Qty"] == 0).any():
        result.warnings.append("Resource Inventory: Some resources have zero stock and will never be allocated.")

    return result


# --- Record-level checks ---

def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not math.isnan(value)


def validate_county(county: CountyRecord) -> List[str]:
    """Return a list of invariant violations for a county (empty when valid)."""
    errors = []
    label = f"County {county.county_id} ({county.county_name})"

    percent_fields = {
        "risk_score": county.risk_score,
        "unemployment_pct": county.unemployment_pct,
        "no_hs_diploma_pct": county.no_hs_diploma_pct,
        "minority_pct": county.minority_pct,
        "age65_pct": county.age65_pct,
    }
    for name, value in percent_fields.items():
        if not _is_number(value) or value < 0 or value > 100:
            errors.append(f"{label}: {name} must be between 0 and 100, got {value}")

    if not _is_number(county.total_population) or county.total_population <= 0:
        errors.append(f"{label}: total_population must be positive, got {county.total_population}")
    if not _is_number(county.area_sqmi) or county.area_sqmi <= 0:
        errors.append(f"{label}: area_sqmi must be positive, got {county.area_sqmi}")
    if county.aqi_category not in AQI_CATEGORIES:
        errors.append(f"{label}: unknown AQI category '{county.aqi_category}'")

    return errors


def validate_resource(resource: ResourceRecord) -> List[str]:
    """Return a list of invariant violations for a resource (empty when valid)."""
    errors = []
    if not isinstance(resource.available_qty, int) or resource.available_qty < 0:
        errors.append(
            f"Resource {resource.resource_id} ({resource.resource_name}): "
            f"available_qty must be a non-negative integer, got {resource.available_qty}"
        )
    return errors


def _duplicate_id_errors(kind: str, ids: List[str]) -> List[str]:
    seen = set()
    dupes = []
    for record_id in ids:
        if record_id in seen and record_id not in dupes:
            dupes.append(record_id)
        seen.add(record_id)
    return [f"Duplicate {kind} ID '{d}'" for d in dupes]


def ensure_valid_records(
    counties: Iterable[CountyRecord],
    resources: Iterable[ResourceRecord],
):
    """Raise InvalidRecordError listing every invalid county and resource.

    IDs must be unique within each list; the engine keys its stock trackers
    by resource ID.
    """
    counties = list(counties)
    resources = list(resources)
    errors = []
    for county in counties:
        errors.extend(validate_county(county))
    for resource in resources:
        errors.extend(validate_resource(resource))
    errors.extend(_duplicate_id_errors("county", [c.county_id for c in counties]))
    errors.extend(_duplicate_id_errors("resource", [r.resource_id for r in resources]))
    if errors:
        raise InvalidRecordError(errors)
