"""Global sidebar controls for scenario selection and data status."""

import streamlit as st
from dataclasses import dataclass
from typing import Optional

from data.session_store import (
    get_scenarios, get_selected_scenario, set_selected_scenario_id,
    get_counties, get_resources, get_alerts, is_data_loaded,
)
from engine.alert_engine import count_critical


@dataclass
class SidebarState:
    scenario_id: Optional[str]


def render_sidebar() -> SidebarState:
    """Render the global sidebar controls and return current state."""
    with st.sidebar:
        st.title("AidVantage")
        st.caption("Emergency Resource Allocation")
        st.divider()

        scenarios = get_scenarios()
        selected_id = None
        if scenarios:
            names = {s.scenario_id: s.name for s in scenarios}
            ids = list(reversed(list(names.keys())))  # newest first
            current = get_selected_scenario()
            # A run elsewhere may have selected a newer scenario; keep the widget in step
            st.session_state["sidebar_scenario"] = current.scenario_id if current else ids[0]
            selected_id = st.selectbox(
                "Active Scenario",
                options=ids,
                format_func=lambda x: names.get(x, x),
                key="sidebar_scenario",
                on_change=lambda: set_selected_scenario_id(st.session_state["sidebar_scenario"]),
            )
        else:
            st.caption("No scenarios yet")

        st.divider()

        if is_data_loaded():
            st.success("Data loaded")
            st.caption(f"Counties: {len(get_counties())}")
            st.caption(f"Resources: {len(get_resources())}")
            critical = count_critical(get_alerts())
            if critical:
                st.error(f"{critical} critical alert(s)")
        else:
            st.warning("No data loaded — go to Data & Settings tab")

        active = get_selected_scenario()
        if active:
            st.caption(f"Objective: {active.optimization_objective}")
            st.caption(f"Created: {active.created_at:%Y-%m-%d %H:%M}")

    return SidebarState(scenario_id=selected_id)
