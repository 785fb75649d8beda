"""Typed wrapper around st.session_state for application data.

Every browser session gets its own store; nothing is shared across sessions.
"""

import streamlit as st
from typing import List, Optional
from models.county import CountyRecord
from models.resource import ResourceRecord
from models.scenario import Scenario
from models.alert import PredictiveAlert
from config.defaults import DEFAULT_MAP_VIEW


def initialize_session_state():
    """Initialize all session state keys with defaults."""
    defaults = {
        "counties": [],
        "resources": [],
        "scenarios": [],
        "alerts": [],
        "selected_scenario_id": None,
        "selected_county_id": None,
        "map_view": DEFAULT_MAP_VIEW,
        "data_loaded": False,
        "rule_config": {},
        "prediction_runs": 0,
    }
    for key, default in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = default


# --- Getters ---

def get_counties() -> List[CountyRecord]:
    return st.session_state.get("counties", [])


def get_resources() -> List[ResourceRecord]:
    return st.session_state.get("resources", [])


def get_scenarios() -> List[Scenario]:
    return st.session_state.get("scenarios", [])


def get_alerts() -> List[PredictiveAlert]:
    return st.session_state.get("alerts", [])


def get_selected_scenario() -> Optional[Scenario]:
    """The selected scenario, falling back to the most recent one."""
    scenarios = get_scenarios()
    selected_id = st.session_state.get("selected_scenario_id")
    for s in scenarios:
        if s.scenario_id == selected_id:
            return s
    return scenarios[-1] if scenarios else None


def get_selected_county() -> Optional[CountyRecord]:
    selected_id = st.session_state.get("selected_county_id")
    return next((c for c in get_counties() if c.county_id == selected_id), None)


def get_county_name(county_id: str) -> str:
    county = next((c for c in get_counties() if c.county_id == county_id), None)
    return county.county_name if county else "Unknown County"


def get_map_view() -> str:
    return st.session_state.get("map_view", DEFAULT_MAP_VIEW)


def get_rule_config() -> dict:
    return st.session_state.get("rule_config", {})


def is_data_loaded() -> bool:
    return st.session_state.get("data_loaded", False)


def next_prediction_seed() -> int:
    """Monotonic per-session counter used to seed prediction runs."""
    st.session_state["prediction_runs"] = st.session_state.get("prediction_runs", 0) + 1
    return st.session_state["prediction_runs"]


# --- Setters ---

def set_counties(counties: List[CountyRecord]):
    st.session_state["counties"] = list(counties)


def set_resources(resources: List[ResourceRecord]):
    st.session_state["resources"] = list(resources)


def add_resources(resources: List[ResourceRecord]):
    st.session_state["resources"] = get_resources() + list(resources)


def set_alerts(alerts: List[PredictiveAlert]):
    st.session_state["alerts"] = list(alerts)


def add_alerts(alerts: List[PredictiveAlert]):
    st.session_state["alerts"] = get_alerts() + list(alerts)


def set_selected_scenario_id(scenario_id: Optional[str]):
    st.session_state["selected_scenario_id"] = scenario_id


def set_selected_county_id(county_id: Optional[str]):
    st.session_state["selected_county_id"] = county_id


def set_map_view(view: str):
    st.session_state["map_view"] = view


def set_data_loaded(loaded: bool):
    st.session_state["data_loaded"] = loaded


def set_rule_config(config: dict):
    st.session_state["rule_config"] = config


# --- Scenario history (append-only) ---

def add_scenario(scenario: Scenario):
    st.session_state["scenarios"] = get_scenarios() + [scenario]
