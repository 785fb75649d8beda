"""Tab 1: Operations Dashboard — inventory management and risk overview."""

import streamlit as st
import pandas as pd

from data.session_store import (
    get_counties, get_resources, get_alerts, add_resources, is_data_loaded,
)
from data.loader import parse_inventory_text, export_resources_csv
from engine.alert_engine import count_critical
from engine.explainer import risk_level
from components.metrics_cards import render_metric_row
from components.charts import risk_score_bar
from components.tables import render_risk_table, render_styled_table


def render(sidebar_state):
    """Render the Operations Dashboard tab."""
    st.header("Emergency Operations Dashboard")
    st.caption("Resource inventory management and risk monitoring")

    if not is_data_loaded():
        st.info("No data loaded. Please load data in the Data & Settings tab.")
        return

    counties = get_counties()
    resources = get_resources()
    alerts = get_alerts()

    # --- KPI Metrics ---
    total_stock = sum(r.available_qty for r in resources)
    avg_risk = sum(c.risk_score for c in counties) / len(counties) if counties else 0.0
    render_metric_row([
        {"label": "Total Resources", "value": f"{total_stock:,}",
         "help": "Sum of available quantity across all resources"},
        {"label": "Counties Monitored", "value": len(counties)},
        {"label": "Critical Alerts", "value": count_critical(alerts),
         "delta": "Requires attention" if count_critical(alerts) else None,
         "delta_color": "inverse"},
        {"label": "Avg Risk Score", "value": f"{avg_risk:.1f}",
         "delta": risk_level(avg_risk), "delta_color": "off"},
    ])

    st.divider()

    col_left, col_right = st.columns([3, 2])

    # --- Inventory input ---
    with col_right:
        st.subheader("Add Inventory")
        st.caption("One resource per line: `name, category, unit, quantity, tag1;tag2`")
        inventory_text = st.text_area(
            "Inventory",
            placeholder="Generators, Equipment, units, 40, power_outage;general_emergency",
            height=160,
            key="inventory_text",
            label_visibility="collapsed",
        )
        if st.button("Parse Inventory", type="primary", key="btn_parse_inventory"):
            if not inventory_text.strip():
                st.error("Please enter inventory data")
            else:
                parsed = parse_inventory_text(inventory_text)
                add_resources(parsed)
                st.success(f"Parsed {len(parsed)} resources successfully")
                st.rerun()

        st.download_button(
            "Export Inventory CSV",
            data=export_resources_csv(resources),
            file_name="resource-inventory.csv",
            mime="text/csv",
            key="btn_export_inventory",
        )

    # --- Inventory table ---
    with col_left:
        st.subheader("Resource Inventory")
        inventory_df = pd.DataFrame([{
            "Resource": r.resource_name,
            "Category": r.category,
            "Available": r.available_qty,
            "Unit": r.unit,
            "Disaster Tags": ", ".join(r.disaster_tags),
        } for r in resources])
        render_styled_table(inventory_df)

    st.divider()

    # --- County risk overview ---
    st.subheader("County Risk Overview")
    county_rows = [{
        "County": c.county_name,
        "Risk Score": round(c.risk_score, 1),
        "Risk Level": risk_level(c.risk_score),
        "AQI": c.aqi_category,
        "Max Temp (F)": c.ta_max,
        "Rolling Max (F)": c.rolling_avg_ta_max,
        "Population": f"{c.total_population:,}",
    } for c in sorted(counties, key=lambda c: c.risk_score, reverse=True)]
    render_risk_table(pd.DataFrame(county_rows))

    st.plotly_chart(
        risk_score_bar([{
            "county_name": c.county_name,
            "risk_score": c.risk_score,
            "risk_level": risk_level(c.risk_score),
        } for c in counties]),
        use_container_width=True,
    )
