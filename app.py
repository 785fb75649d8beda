"""AidVantage Emergency Resource Allocation Dashboard — Streamlit entry point."""

import logging
import os
import sys

import streamlit as st

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config.defaults import DEFAULT_LOG_LEVEL
from components.sidebar import render_sidebar
from data.session_store import initialize_session_state, is_data_loaded
from tabs import (
    tab_dashboard,
    tab_risk_map,
    tab_allocation,
    tab_predictive,
    tab_data_settings,
)

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


def main():
    st.set_page_config(
        page_title="AidVantage Emergency Operations",
        page_icon="🚨",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    initialize_session_state()
    if not is_data_loaded():
        tab_data_settings.load_sample_data()

    sidebar_state = render_sidebar()

    tab1, tab2, tab3, tab4, tab5 = st.tabs([
        "📊 Dashboard",
        "🗺️ Risk Map",
        "🎯 Allocation",
        "🔔 Predictive Alerts",
        "⚙️ Data & Settings",
    ])

    with tab1:
        tab_dashboard.render(sidebar_state)
    with tab2:
        tab_risk_map.render(sidebar_state)
    with tab3:
        tab_allocation.render(sidebar_state)
    with tab4:
        tab_predictive.render(sidebar_state)
    with tab5:
        tab_data_settings.render(sidebar_state)


if __name__ == "__main__":
    main()
