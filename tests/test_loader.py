"""Tests for data validation, file parsing and inventory text handling."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import io

import pandas as pd
import pytest

from data.validator import (
    validate_counties_df, validate_resources_df, validate_county, validate_resource,
    ensure_valid_records, InvalidRecordError,
)
from data.loader import (
    parse_counties, parse_resources, parse_alerts, parse_inventory_text,
    resources_to_df, export_resources_csv, load_multi_sheet_excel, _match_sheet,
)
from data.sample_data import (
    generate_counties_df, generate_resources_df, generate_alerts_df, generate_historical_scenario,
)
from models.county import CountyRecord
from models.resource import ResourceRecord


class TestValidateDataFrames:
    def test_sample_data_valid(self):
        assert validate_counties_df(generate_counties_df()).is_valid
        assert validate_resources_df(generate_resources_df()).is_valid

    def test_missing_columns(self):
        df = generate_counties_df().drop(columns=["Risk Score"])
        result = validate_counties_df(df)
        assert not result.is_valid
        assert "Risk Score" in result.errors[0]

    def test_empty_file(self):
        result = validate_resources_df(generate_resources_df().iloc[0:0])
        assert not result.is_valid

    def test_percent_out_of_range(self):
        df = generate_counties_df()
        df.loc[0, "Minority (%)"] = 140.0
        result = validate_counties_df(df)
        assert not result.is_valid
        assert any("Minority" in e for e in result.errors)

    def test_unknown_aqi(self):
        df = generate_counties_df()
        df.loc[1, "AQI Category"] = "Hazardous"
        assert not validate_counties_df(df).is_valid

    def test_duplicate_county_ids(self):
        df = generate_counties_df()
        df.loc[1, "County ID"] = "1"
        result = validate_counties_df(df)
        assert any("Duplicate" in e for e in result.errors)

    def test_missing_coordinates_is_warning(self):
        df = generate_counties_df().drop(columns=["Latitude", "Longitude"])
        result = validate_counties_df(df)
        assert result.is_valid
        assert result.warnings

    def test_negative_quantity_error_zero_quantity_warning(self):
        df = generate_resources_df()
        df.loc[0, "Available Qty"] = -1
        assert not validate_resources_df(df).is_valid

        df.loc[0, "Available Qty"] = 0
        result = validate_resources_df(df)
        assert result.is_valid
        assert result.warnings


class TestRecordValidation:
    def test_bad_county_collects_all_errors(self):
        county = CountyRecord("9", "Bad", 50, 60, 70, "Smoky", 101.0, -1.0, 10, 10, 10, 0, 0.0, 70)
        errors = validate_county(county)
        assert len(errors) == 5  # risk, unemployment, population, area, AQI

    def test_bad_resource(self):
        assert validate_resource(ResourceRecord("r", "R", "c", "u", -3)) != []
        assert validate_resource(ResourceRecord("r", "R", "c", "u", 0)) == []

    def test_ensure_valid_records_raises_with_all_errors(self):
        county = CountyRecord("9", "Bad", 50, 60, 70, "Good", 150.0, 5, 10, 10, 10, 1000, 10.0, 70)
        resource = ResourceRecord("r", "R", "c", "u", -3)
        with pytest.raises(InvalidRecordError) as exc:
            ensure_valid_records([county], [resource])
        assert len(exc.value.errors) == 2

    def test_duplicate_ids_rejected(self):
        counties = parse_counties(generate_counties_df())
        resources = [ResourceRecord("x", "A", "c", "u", 10), ResourceRecord("x", "B", "c", "u", 100)]
        with pytest.raises(InvalidRecordError) as exc:
            ensure_valid_records(counties + counties[:1], resources)
        assert exc.value.errors == ["Duplicate county ID '1'", "Duplicate resource ID 'x'"]


class TestParsing:
    def test_parse_counties(self):
        counties = parse_counties(generate_counties_df())
        assert len(counties) == 5
        maricopa = next(c for c in counties if c.county_name == "Maricopa")
        assert maricopa.county_id == "2"
        assert maricopa.total_population == 4485414
        assert maricopa.parameter_name == "PM2.5"
        assert maricopa.latitude == pytest.approx(33.4484)

    def test_parse_resources_splits_tags(self):
        resources = parse_resources(generate_resources_df())
        cooling = resources[0]
        assert cooling.resource_name == "Cooling Centers"
        assert cooling.disaster_tags == ("extreme_heat", "power_outage")
        assert cooling.available_qty == 5000

    def test_parse_counties_rejects_invalid(self):
        df = generate_counties_df()
        df.loc[0, "Total Population"] = 0
        with pytest.raises(InvalidRecordError):
            parse_counties(df)

    def test_parse_alerts(self):
        alerts = parse_alerts(generate_alerts_df())
        assert [a.severity for a in alerts] == ["critical", "high", "medium"]
        assert alerts[0].predicted_date.isoformat() == "2024-09-22"
        assert len(alerts[0].recommendations) == 3

    def test_resources_round_trip_through_dataframe(self):
        resources = parse_resources(generate_resources_df())
        assert parse_resources(resources_to_df(resources)) == resources

    def test_historical_scenario_totals(self):
        scenario = generate_historical_scenario()
        assert scenario.total_resources == 4615
        assert scenario.counties_served == 3


class TestInventoryText:
    def test_full_line(self):
        resources = parse_inventory_text("Sandbags, Flood, bags, 300, flood;general_emergency", id_prefix="p")
        assert len(resources) == 1
        r = resources[0]
        assert r.resource_id == "p-0"
        assert (r.resource_name, r.category, r.unit, r.available_qty) == ("Sandbags", "Flood", "bags", 300)
        assert r.disaster_tags == ("flood", "general_emergency")

    def test_defaults_for_missing_fields(self):
        resources = parse_inventory_text("Generators\n\n, , , abc", id_prefix="p")
        assert len(resources) == 2  # blank line skipped
        first, second = resources
        assert first.category == "General"
        assert first.unit == "units"
        assert first.available_qty == 1
        assert first.disaster_tags == ("general_emergency",)
        assert second.resource_name == "Resource 2"
        assert second.resource_id == "p-1"

    def test_non_positive_quantity_becomes_one(self):
        r = parse_inventory_text("Water, Relief, cases, 0", id_prefix="p")[0]
        assert r.available_qty == 1

    def test_generated_prefix_is_unique_per_line(self):
        resources = parse_inventory_text("A, x, y, 1\nB, x, y, 2")
        assert len({r.resource_id for r in resources}) == 2

    def test_empty_text(self):
        assert parse_inventory_text("   \n") == []

    def test_export_reimports(self):
        resources = parse_resources(generate_resources_df())
        text = export_resources_csv(resources)
        assert len(text.strip().splitlines()) == len(resources)
        reparsed = parse_inventory_text(text, id_prefix="x")
        assert [r.resource_name for r in reparsed] == [r.resource_name for r in resources]
        assert [r.disaster_tags for r in reparsed] == [r.disaster_tags for r in resources]


class TestExcel:
    def test_match_sheet_aliases(self):
        assert _match_sheet(["Inventory", "County Risk"], "counties") == "County Risk"
        assert _match_sheet(["Inventory", "County Risk"], "resources") == "Inventory"
        with pytest.raises(ValueError):
            _match_sheet(["Sheet1"], "counties")

    def test_multi_sheet_excel(self):
        buf = io.BytesIO()
        with pd.ExcelWriter(buf, engine="openpyxl") as writer:
            generate_counties_df().to_excel(writer, sheet_name="Counties", index=False)
            generate_resources_df().to_excel(writer, sheet_name="Resources", index=False)
        buf.seek(0)
        counties_df, resources_df = load_multi_sheet_excel(buf)
        assert len(parse_counties(counties_df)) == 5
        assert len(parse_resources(resources_df)) == 6
