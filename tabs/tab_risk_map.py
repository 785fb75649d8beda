"""Tab 2: Risk Map — county markers by risk score or need met."""

import streamlit as st

from data.session_store import (
    get_counties, get_selected_scenario, get_selected_county, set_selected_county_id,
    get_map_view, set_map_view, get_rule_config, is_data_loaded,
)
from engine.allocation_engine import compute_priority
from engine.explainer import explain_priority, risk_level
from components.charts import county_map
from components.metrics_cards import render_metric_row
from config.defaults import MAP_VIEWS

MAP_VIEW_LABELS = {
    "risk_score": "Risk Score",
    "need_met": "Need Met %",
}


def render(sidebar_state):
    """Render the Risk Map tab."""
    st.header("County Risk Map")

    if not is_data_loaded():
        st.info("No data loaded. Please load data in the Data & Settings tab.")
        return

    counties = get_counties()
    if not counties:
        st.info("No counties loaded.")
        return
    scenario = get_selected_scenario()

    view = st.radio(
        "Map layer",
        MAP_VIEWS,
        index=MAP_VIEWS.index(get_map_view()),
        format_func=lambda v: MAP_VIEW_LABELS[v],
        horizontal=True,
        key="map_view_radio",
    )
    if view != get_map_view():
        set_map_view(view)

    # Need met per county from the selected scenario
    need_met = {}
    if scenario:
        for c in counties:
            allocs = scenario.allocations_for_county(c.county_id)
            if allocs:
                need_met[c.county_id] = sum(a.need_met_pct for a in allocs) / len(allocs)

    markers = [{
        "county_id": c.county_id,
        "county_name": c.county_name,
        "latitude": c.latitude,
        "longitude": c.longitude,
        "risk_score": c.risk_score,
        "need_met": need_met.get(c.county_id, 0.0),
    } for c in counties if c.latitude is not None and c.longitude is not None]

    selected = get_selected_county()

    col_map, col_detail = st.columns([3, 2])
    with col_map:
        if markers:
            st.plotly_chart(
                county_map(
                    markers, view, MAP_VIEW_LABELS[view],
                    selected_county_id=selected.county_id if selected else None,
                ),
                use_container_width=True,
            )
        else:
            st.info("No county coordinates available to plot.")

    with col_detail:
        st.subheader("County Details")
        names = {c.county_id: c.county_name for c in counties}
        ids = list(names.keys())
        current = selected.county_id if selected else ids[0]
        chosen = st.selectbox(
            "County",
            ids,
            index=ids.index(current) if current in ids else 0,
            format_func=lambda x: names[x],
            key="map_county_select",
        )
        if chosen != (selected.county_id if selected else None):
            set_selected_county_id(chosen)

        county = next(c for c in counties if c.county_id == chosen)
        render_metric_row([
            {"label": "Risk", "value": f"{county.risk_score:.1f}",
             "delta": risk_level(county.risk_score), "delta_color": "off"},
            {"label": "Need Met", "value": f"{need_met.get(county.county_id, 0.0):.1f}%"},
        ])
        st.caption(
            f"AQI: {county.aqi_category}"
            + (f" ({county.parameter_name})" if county.parameter_name else "")
            + f" | Temp {county.ta_min:.0f}-{county.ta_max:.0f}F (avg {county.ta_avg:.0f}F)"
        )
        st.caption(
            f"Population {county.total_population:,} | {county.area_sqmi:,.0f} sq mi"
            + (f" | ZIP {county.zip_code}" if county.zip_code else "")
        )

        with st.expander("How is this county prioritized?", expanded=True):
            for step in explain_priority(compute_priority(county, get_rule_config())):
                st.markdown(f"- {step}")
