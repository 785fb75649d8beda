"""Sample county, resource and alert datasets for the Emergency Resource Dashboard."""

import os
from datetime import datetime

import pandas as pd

from models.allocation import Allocation
from models.scenario import Scenario


def generate_counties_df() -> pd.DataFrame:
    """County risk profiles for five large US counties."""
    rows = [
        {"County ID": "1", "County Name": "Miami-Dade", "Zip Code": "33101",
         "Min Temp (F)": 75.2, "Avg Temp (F)": 82.3, "Max Temp (F)": 89.4,
         "Pollutant": "PM2.5", "AQI Category": "Moderate", "Risk Score": 78.5,
         "Unemployment (%)": 8.5, "No HS Diploma (%)": 15.2, "Minority (%)": 68.9, "Age 65+ (%)": 18.7,
         "Total Population": 2716940, "Area (sq mi)": 1946.0, "Rolling Avg Max Temp (F)": 91.2,
         "Latitude": 25.7617, "Longitude": -80.1918},
        {"County ID": "2", "County Name": "Maricopa", "Zip Code": "85001",
         "Min Temp (F)": 68.5, "Avg Temp (F)": 86.7, "Max Temp (F)": 104.8,
         "Pollutant": "PM2.5", "AQI Category": "Unhealthy for Sensitive Groups", "Risk Score": 92.1,
         "Unemployment (%)": 7.2, "No HS Diploma (%)": 12.8, "Minority (%)": 55.4, "Age 65+ (%)": 15.3,
         "Total Population": 4485414, "Area (sq mi)": 9203.0, "Rolling Avg Max Temp (F)": 107.3,
         "Latitude": 33.4484, "Longitude": -112.0740},
        {"County ID": "3", "County Name": "Harris", "Zip Code": "77001",
         "Min Temp (F)": 72.1, "Avg Temp (F)": 83.9, "Max Temp (F)": 95.6,
         "Pollutant": "Ozone", "AQI Category": "Unhealthy", "Risk Score": 88.3,
         "Unemployment (%)": 6.8, "No HS Diploma (%)": 18.5, "Minority (%)": 72.3, "Age 65+ (%)": 12.4,
         "Total Population": 4731145, "Area (sq mi)": 1703.0, "Rolling Avg Max Temp (F)": 98.2,
         "Latitude": 29.7604, "Longitude": -95.3698},
        {"County ID": "4", "County Name": "Los Angeles", "Zip Code": "90001",
         "Min Temp (F)": 58.3, "Avg Temp (F)": 70.5, "Max Temp (F)": 82.7,
         "Pollutant": "PM2.5", "AQI Category": "Moderate", "Risk Score": 76.8,
         "Unemployment (%)": 9.1, "No HS Diploma (%)": 22.4, "Minority (%)": 81.2, "Age 65+ (%)": 14.8,
         "Total Population": 10014009, "Area (sq mi)": 4751.0, "Rolling Avg Max Temp (F)": 85.1,
         "Latitude": 34.0522, "Longitude": -118.2437},
        {"County ID": "5", "County Name": "Cook", "Zip Code": "60601",
         "Min Temp (F)": 42.8, "Avg Temp (F)": 60.5, "Max Temp (F)": 78.2,
         "Pollutant": "PM2.5", "AQI Category": "Good", "Risk Score": 65.4,
         "Unemployment (%)": 8.9, "No HS Diploma (%)": 16.7, "Minority (%)": 58.9, "Age 65+ (%)": 13.7,
         "Total Population": 5150233, "Area (sq mi)": 945.0, "Rolling Avg Max Temp (F)": 81.5,
         "Latitude": 41.8781, "Longitude": -87.6298},
    ]
    return pd.DataFrame(rows)


def generate_resources_df() -> pd.DataFrame:
    """Relief stockpiles with the disaster tags that make them relevant."""
    rows = [
        {"Resource ID": "1", "Resource Name": "Cooling Centers", "Category": "Shelter",
         "Unit": "capacity", "Available Qty": 5000, "Disaster Tags": "extreme_heat;power_outage"},
        {"Resource ID": "2", "Resource Name": "Portable Air Conditioners", "Category": "Equipment",
         "Unit": "units", "Available Qty": 150, "Disaster Tags": "extreme_heat"},
        {"Resource ID": "3", "Resource Name": "Air Quality Monitors", "Category": "Monitoring",
         "Unit": "devices", "Available Qty": 75, "Disaster Tags": "air_quality;wildfire"},
        {"Resource ID": "4", "Resource Name": "Emergency Medical Kits", "Category": "Medical",
         "Unit": "kits", "Available Qty": 200, "Disaster Tags": "extreme_heat;air_quality;general_emergency"},
        {"Resource ID": "5", "Resource Name": "Water Distribution Stations", "Category": "Relief",
         "Unit": "stations", "Available Qty": 25, "Disaster Tags": "extreme_heat;drought"},
        {"Resource ID": "6", "Resource Name": "N95 Respirator Masks", "Category": "Protection",
         "Unit": "boxes", "Available Qty": 500, "Disaster Tags": "air_quality;wildfire"},
    ]
    return pd.DataFrame(rows)


def generate_alerts_df() -> pd.DataFrame:
    """Seed predictive alerts shown before any prediction run."""
    rows = [
        {"Alert ID": "1", "County ID": "2", "Alert Type": "extreme_heat", "Severity": "critical",
         "Predicted Date": "2024-09-22", "Confidence": 0.92,
         "Message": "Critical heat wave predicted for Maricopa County with temperatures exceeding 110°F",
         "Recommendations": "Deploy additional cooling centers immediately;"
                            "Activate extreme heat emergency protocols;"
                            "Increase outreach to vulnerable populations"},
        {"Alert ID": "2", "County ID": "3", "Alert Type": "air_quality", "Severity": "high",
         "Predicted Date": "2024-09-20", "Confidence": 0.87,
         "Message": "Air quality expected to reach unhealthy levels due to industrial emissions",
         "Recommendations": "Distribute N95 masks to high-risk populations;"
                            "Issue public health advisory;"
                            "Monitor vulnerable community centers"},
        {"Alert ID": "3", "County ID": "1", "Alert Type": "resource_gap", "Severity": "medium",
         "Predicted Date": "2024-09-25", "Confidence": 0.75,
         "Message": "Projected cooling center capacity shortfall during peak demand period",
         "Recommendations": "Coordinate with neighboring counties for resource sharing;"
                            "Identify additional temporary cooling locations;"
                            "Pre-position mobile cooling units"},
    ]
    return pd.DataFrame(rows)


def generate_historical_scenario() -> Scenario:
    """A past heat-wave response shown until the first optimization run."""
    allocations = (
        Allocation("2", "1", 2000, 78.5),
        Allocation("3", "1", 1500, 65.2),
        Allocation("1", "1", 1000, 55.8),
        Allocation("2", "2", 60, 85.0),
        Allocation("3", "2", 40, 72.3),
        Allocation("1", "5", 15, 90.0),
    )
    return Scenario(
        scenario_id="1",
        name="Summer Heat Wave Response",
        created_at=datetime(2024, 9, 15, 10, 30),
        total_resources=sum(a.allocated_quantity for a in allocations),
        counties_served=len({a.county_id for a in allocations}),
        optimization_objective="minimize_risk_exposure",
        allocations=allocations,
    )


def generate_sample_csvs(output_dir: str):
    """Write sample CSV files to the given directory."""
    os.makedirs(output_dir, exist_ok=True)
    generate_counties_df().to_csv(os.path.join(output_dir, "counties.csv"), index=False)
    generate_resources_df().to_csv(os.path.join(output_dir, "resources.csv"), index=False)


def generate_sample_excel(output_dir: str):
    """Write a single multi-tab Excel file with both datasets."""
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, "sample_data.xlsx")
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        generate_counties_df().to_excel(writer, sheet_name="Counties", index=False)
        generate_resources_df().to_excel(writer, sheet_name="Resources", index=False)


if __name__ == "__main__":
    out = os.path.join(os.path.dirname(__file__), "..", "sample_files")
    generate_sample_csvs(out)
    generate_sample_excel(out)
    print("Sample CSV and Excel files generated in sample_files/")
