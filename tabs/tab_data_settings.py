"""Tab 5: Data & Settings — data upload, rule configuration, scenario history."""

import logging

import streamlit as st
import pandas as pd

from data.loader import (
    load_file, load_multi_sheet_excel, parse_counties, parse_resources, parse_alerts,
)
from data.validator import validate_counties_df, validate_resources_df, InvalidRecordError
from data.sample_data import (
    generate_counties_df, generate_resources_df, generate_alerts_df, generate_historical_scenario,
)
from data.session_store import (
    set_counties, set_resources, set_alerts, set_data_loaded, get_scenarios, add_scenario,
    get_rule_config, set_rule_config, get_counties, get_resources,
)
from config.defaults import (
    RISK_WEIGHT, VULNERABILITY_WEIGHT, DENSITY_WEIGHT,
    HEAT_RISK_THRESHOLD, HEAT_ROLLING_TEMP_THRESHOLD, POWER_OUTAGE_TEMP_THRESHOLD,
    POPULATION_PER_UNIT, MAX_COUNTY_SHARE,
)

logger = logging.getLogger(__name__)


def _load_and_validate(counties_df, resources_df, show_messages: bool = True) -> bool:
    """Validate and store county and resource data."""
    errors = []
    warnings = []

    for r in [validate_counties_df(counties_df), validate_resources_df(resources_df)]:
        errors.extend(r.errors)
        warnings.extend(r.warnings)

    if errors:
        for e in errors:
            st.error(e)
        return False

    try:
        counties = parse_counties(counties_df)
        resources = parse_resources(resources_df)
    except InvalidRecordError as e:
        for err in e.errors:
            st.error(err)
        return False

    set_counties(counties)
    set_resources(resources)
    set_data_loaded(True)

    if show_messages:
        for w in warnings:
            st.warning(w)
        st.success(f"Data loaded: {len(counties)} counties, {len(resources)} resources")
    return True


def load_sample_data():
    """Load the bundled sample counties, resources, alerts and past scenario."""
    loaded = _load_and_validate(generate_counties_df(), generate_resources_df(), show_messages=False)
    if loaded:
        set_alerts(parse_alerts(generate_alerts_df()))
        if not get_scenarios():
            add_scenario(generate_historical_scenario())
        logger.info("Sample data loaded")
    return loaded


def render(sidebar_state):
    """Render the Data & Settings tab."""
    st.header("Data & Settings")

    # --- Data Upload Section ---
    st.subheader("Data Upload")

    upload_mode = st.radio(
        "Upload mode",
        ["Single Excel file (2 tabs)", "Two separate files"],
        horizontal=True,
        key="upload_mode",
    )

    if upload_mode == "Single Excel file (2 tabs)":
        st.caption("Upload one `.xlsx` file with two sheets named **Counties** and **Resources**.")
        single_file = st.file_uploader("Excel workbook with 2 tabs", type=["xlsx"], key="upload_single")
        if st.button("Upload & Validate", type="primary", key="btn_upload_single"):
            if single_file:
                try:
                    c_df, r_df = load_multi_sheet_excel(single_file)
                    _load_and_validate(c_df, r_df)
                except Exception as e:
                    logger.exception("Excel upload failed")
                    st.error(f"Error loading file: {e}")
            else:
                st.warning("Please upload an Excel file.")
    else:
        col1, col2 = st.columns(2)
        with col1:
            counties_file = st.file_uploader("County Risk Data", type=["csv", "xlsx"], key="upload_counties")
        with col2:
            resources_file = st.file_uploader("Resource Inventory", type=["csv", "xlsx"], key="upload_resources")
        if st.button("Upload & Validate", type="primary", key="btn_upload_multi"):
            if counties_file and resources_file:
                try:
                    _load_and_validate(load_file(counties_file), load_file(resources_file))
                except Exception as e:
                    logger.exception("File upload failed")
                    st.error(f"Error loading files: {e}")
            else:
                st.warning("Please upload both files.")

    if st.button("Reload Sample Data", key="btn_sample"):
        if load_sample_data():
            st.success(f"Sample data loaded: {len(get_counties())} counties, {len(get_resources())} resources")

    st.divider()

    # --- Rule Configuration ---
    st.subheader("Rule Configuration")
    config = get_rule_config()

    with st.expander("Priority Weights", expanded=False):
        col1, col2, col3 = st.columns(3)
        with col1:
            risk_w = st.slider("Risk Weight", 0.0, 1.0, config.get("risk_weight", RISK_WEIGHT),
                               step=0.05, key="cfg_risk_weight")
        with col2:
            vuln_w = st.slider("Vulnerability Weight", 0.0, 1.0,
                               config.get("vulnerability_weight", VULNERABILITY_WEIGHT),
                               step=0.05, key="cfg_vuln_weight")
        with col3:
            dens_w = st.slider("Density Weight", 0.0, 1.0, config.get("density_weight", DENSITY_WEIGHT),
                               step=0.05, key="cfg_density_weight")
        if abs(risk_w + vuln_w + dens_w - 1.0) > 0.001:
            st.info(f"Weights sum to {risk_w + vuln_w + dens_w:.2f}; they are rescaled to sum to 1.")

    with st.expander("Need Thresholds", expanded=False):
        col1, col2, col3 = st.columns(3)
        with col1:
            heat_risk = st.slider("Heat Need: Risk Score >=", 0.0, 100.0,
                                  config.get("heat_risk_threshold", HEAT_RISK_THRESHOLD),
                                  step=1.0, key="cfg_heat_risk")
        with col2:
            heat_temp = st.slider("Heat Need: Rolling Max Temp (F) >=", 60.0, 120.0,
                                  config.get("heat_rolling_temp_threshold", HEAT_ROLLING_TEMP_THRESHOLD),
                                  step=1.0, key="cfg_heat_temp")
        with col3:
            outage_temp = st.slider("Power Outage: Max Temp (F) >=", 60.0, 120.0,
                                    config.get("power_outage_temp_threshold", POWER_OUTAGE_TEMP_THRESHOLD),
                                    step=1.0, key="cfg_outage_temp")

    with st.expander("Allocation Sizing", expanded=False):
        col1, col2 = st.columns(2)
        with col1:
            per_unit = st.number_input("Residents per unit of need", min_value=1000, max_value=1000000,
                                       value=int(config.get("population_per_unit", POPULATION_PER_UNIT)),
                                       step=5000, key="cfg_per_unit")
        with col2:
            max_share = st.slider("Max share of a resource per county", 0.05, MAX_COUNTY_SHARE,
                                  min(config.get("max_county_share", MAX_COUNTY_SHARE), MAX_COUNTY_SHARE),
                                  step=0.05, key="cfg_max_share")

    col_save, col_reset = st.columns(2)
    with col_save:
        if st.button("Save Rule Configuration", key="btn_save_config"):
            set_rule_config({
                "risk_weight": risk_w,
                "vulnerability_weight": vuln_w,
                "density_weight": dens_w,
                "heat_risk_threshold": heat_risk,
                "heat_rolling_temp_threshold": heat_temp,
                "power_outage_temp_threshold": outage_temp,
                "population_per_unit": int(per_unit),
                "max_county_share": max_share,
            })
            logger.info("Rule configuration updated")
            st.success("Rule configuration saved.")
    with col_reset:
        if st.button("Reset to Defaults", key="btn_reset_config"):
            set_rule_config({})
            st.success("Rule configuration reset.")
            st.rerun()

    st.divider()

    # --- Scenario History ---
    st.subheader("Scenario History")
    scenarios = get_scenarios()
    if scenarios:
        st.dataframe(pd.DataFrame([{
            "ID": s.scenario_id,
            "Name": s.name,
            "Objective": s.optimization_objective,
            "Resources": s.total_resources,
            "Counties": s.counties_served,
            "Allocations": len(s.allocations),
            "Created": s.created_at.strftime("%Y-%m-%d %H:%M:%S"),
        } for s in reversed(scenarios)]), use_container_width=True, hide_index=True)
    else:
        st.caption("No scenarios yet. Run an optimization from the Allocation tab.")
