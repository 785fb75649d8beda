"""File upload and inventory text parsing into typed record lists."""

import io
import logging
import time
from datetime import date
from typing import List, Optional, Tuple

import pandas as pd

from models.county import CountyRecord
from models.resource import ResourceRecord
from models.alert import PredictiveAlert
from data.validator import ensure_valid_records
from config.defaults import DEFAULT_DISASTER_TAGS

logger = logging.getLogger(__name__)


def _split_tags(raw) -> Tuple[str, ...]:
    if raw is None or (isinstance(raw, float) and pd.isna(raw)):
        return ()
    return tuple(t.strip() for t in str(raw).split(";") if t.strip())


def _optional_float(row, column: str) -> Optional[float]:
    if column in row.index and pd.notna(row.get(column)):
        return float(row[column])
    return None


def _optional_str(row, column: str) -> str:
    if column in row.index and pd.notna(row.get(column)):
        return str(row[column]).strip()
    return ""


def parse_counties(df: pd.DataFrame) -> List[CountyRecord]:
    """Convert a county risk DataFrame into CountyRecord objects.

    Raises InvalidRecordError if any county breaks its invariants.
    """
    counties = []
    for _, row in df.iterrows():
        counties.append(CountyRecord(
            county_id=str(row["County ID"]).strip(),
            county_name=str(row["County Name"]).strip(),
            ta_min=float(row["Min Temp (F)"]),
            ta_avg=float(row["Avg Temp (F)"]),
            ta_max=float(row["Max Temp (F)"]),
            aqi_category=str(row["AQI Category"]).strip(),
            risk_score=float(row["Risk Score"]),
            unemployment_pct=float(row["Unemployment (%)"]),
            no_hs_diploma_pct=float(row["No HS Diploma (%)"]),
            minority_pct=float(row["Minority (%)"]),
            age65_pct=float(row["Age 65+ (%)"]),
            total_population=int(row["Total Population"]),
            area_sqmi=float(row["Area (sq mi)"]),
            rolling_avg_ta_max=float(row["Rolling Avg Max Temp (F)"]),
            zip_code=_optional_str(row, "Zip Code"),
            parameter_name=_optional_str(row, "Pollutant"),
            latitude=_optional_float(row, "Latitude"),
            longitude=_optional_float(row, "Longitude"),
        ))
    ensure_valid_records(counties, [])
    logger.info("Loaded %d counties", len(counties))
    return counties


def parse_resources(df: pd.DataFrame) -> List[ResourceRecord]:
    """Convert a resource inventory DataFrame into ResourceRecord objects."""
    resources = []
    for _, row in df.iterrows():
        resources.append(ResourceRecord(
            resource_id=str(row["Resource ID"]).strip(),
            resource_name=str(row["Resource Name"]).strip(),
            category=str(row["Category"]).strip(),
            unit=str(row["Unit"]).strip(),
            available_qty=int(row["Available Qty"]),
            disaster_tags=_split_tags(row["Disaster Tags"]),
        ))
    ensure_valid_records([], resources)
    logger.info("Loaded %d resources", len(resources))
    return resources


def parse_alerts(df: pd.DataFrame) -> List[PredictiveAlert]:
    """Convert an alerts DataFrame into PredictiveAlert objects."""
    alerts = []
    for _, row in df.iterrows():
        alerts.append(PredictiveAlert(
            alert_id=str(row["Alert ID"]).strip(),
            county_id=str(row["County ID"]).strip(),
            alert_type=str(row["Alert Type"]).strip(),
            severity=str(row["Severity"]).strip(),
            predicted_date=date.fromisoformat(str(row["Predicted Date"]).strip()),
            confidence=float(row["Confidence"]),
            message=str(row["Message"]).strip(),
            recommendations=_split_tags(row.get("Recommendations")),
        ))
    return alerts


def parse_inventory_text(text: str, id_prefix: Optional[str] = None) -> List[ResourceRecord]:
    """Parse pasted inventory, one resource per line.

    Line format: ``name, category, unit, quantity, tag1;tag2``. Missing or
    unparsable fields fall back to ``Resource N``, ``General``, ``units``,
    ``1`` and ``general_emergency``.
    """
    prefix = id_prefix or f"parsed-{int(time.time() * 1000)}"
    lines = [line for line in text.splitlines() if line.strip()]

    resources = []
    for index, line in enumerate(lines):
        parts = [p.strip() for p in line.split(",")]
        while len(parts) < 5:
            parts.append("")

        try:
            qty = int(parts[3])
        except ValueError:
            qty = 0
        tags = _split_tags(parts[4]) or tuple(DEFAULT_DISASTER_TAGS)

        resources.append(ResourceRecord(
            resource_id=f"{prefix}-{index}",
            resource_name=parts[0] or f"Resource {index + 1}",
            category=parts[1] or "General",
            unit=parts[2] or "units",
            available_qty=qty if qty > 0 else 1,
            disaster_tags=tags,
        ))
    logger.info("Parsed %d resources from inventory text", len(resources))
    return resources


def resources_to_df(resources: List[ResourceRecord]) -> pd.DataFrame:
    """Inverse of parse_resources."""
    return pd.DataFrame([{
        "Resource ID": r.resource_id,
        "Resource Name": r.resource_name,
        "Category": r.category,
        "Unit": r.unit,
        "Available Qty": r.available_qty,
        "Disaster Tags": ";".join(r.disaster_tags),
    } for r in resources])


def export_resources_csv(resources: List[ResourceRecord]) -> str:
    """Headerless ``name,category,unit,qty,tags`` lines, re-importable as inventory text."""
    buf = io.StringIO()
    for r in resources:
        buf.write(f"{r.resource_name},{r.category},{r.unit},{r.available_qty},{';'.join(r.disaster_tags)}\n")
    return buf.getvalue()


def load_file(uploaded_file) -> pd.DataFrame:
    """Load an uploaded file (CSV or XLSX) into a DataFrame."""
    name = uploaded_file.name.lower()
    if name.endswith(".csv"):
        return pd.read_csv(uploaded_file)
    elif name.endswith(".xlsx") or name.endswith(".xls"):
        return pd.read_excel(uploaded_file, engine="openpyxl")
    else:
        raise ValueError(f"Unsupported file format: {name}. Use CSV or XLSX.")


# Expected sheet names for multi-tab Excel (case-insensitive matching)
SHEET_ALIASES = {
    "counties": ["counties", "county", "county risk", "county risk data", "risk"],
    "resources": ["resources", "resource", "inventory", "resource inventory", "stock"],
}


def _match_sheet(sheet_names: List[str], category: str) -> str:
    """Find a sheet name matching the given category. Returns the matched name or raises."""
    aliases = SHEET_ALIASES[category]
    lower_map = {s.lower().strip(): s for s in sheet_names}
    for alias in aliases:
        if alias in lower_map:
            return lower_map[alias]
    raise ValueError(
        f"Could not find a sheet for '{category}'. "
        f"Expected one of: {aliases}. "
        f"Found sheets: {sheet_names}"
    )


def load_multi_sheet_excel(uploaded_file) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Load a single Excel file with 2 tabs: Counties, Resources.

    Returns (counties_df, resources_df).
    """
    xl = pd.ExcelFile(uploaded_file, engine="openpyxl")
    sheet_names = xl.sheet_names

    counties_df = pd.read_excel(xl, sheet_name=_match_sheet(sheet_names, "counties"))
    resources_df = pd.read_excel(xl, sheet_name=_match_sheet(sheet_names, "resources"))

    return counties_df, resources_df
