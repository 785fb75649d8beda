"""Tab 3: Resource Allocation — run the optimizer and review scenarios."""

import logging

import streamlit as st
import pandas as pd

from data.session_store import (
    get_counties, get_resources, get_selected_scenario, get_rule_config,
    add_scenario, set_selected_scenario_id, is_data_loaded,
)
from data.validator import InvalidRecordError
from engine.allocation_engine import (
    run_allocation, rank_counties, compute_resource_utilization, summarize_by_county,
    classify_need, compute_base_need, compute_adjusted_need,
)
from engine.optimizer import optimize_allocation
from engine.explainer import risk_level, explain_need
from components.metrics_cards import render_metric_row
from components.charts import (
    resource_utilization_bar, allocation_heatmap, priority_breakdown_bar, need_met_donut,
)
from components.tables import render_need_met_table, render_comparison_table, color_utilization
from config.defaults import (
    RISK_WEIGHT, VULNERABILITY_WEIGHT, DENSITY_WEIGHT,
    AVG_NEED_MET_POSITIVE, AVG_NEED_MET_NEUTRAL, LP_OPTIMIZATION_OBJECTIVE,
)

logger = logging.getLogger(__name__)

ALGORITHMS = {
    "greedy": "Priority-weighted greedy",
    "lp": "Integer program (PuLP)",
}


def _run(algorithm: str):
    counties = get_counties()
    resources = get_resources()
    config = get_rule_config()
    try:
        with st.spinner("Optimizing allocation..."):
            if algorithm == "lp":
                result = optimize_allocation(counties, resources, config)
                if result.scenario is None:
                    st.error(result.message)
                    return
                scenario = result.scenario
                st.session_state["last_lp_comparison"] = result.before_after
            else:
                scenario = run_allocation(counties, resources, config)
    except InvalidRecordError as e:
        logger.error("Allocation rejected invalid records: %s", e)
        st.error("Optimization failed. Invalid input data:")
        for err in e.errors:
            st.markdown(f"- {err}")
        return

    add_scenario(scenario)
    set_selected_scenario_id(scenario.scenario_id)
    st.success(
        f"Allocation completed! {scenario.counties_served} counties served with "
        f"{scenario.total_resources:,} resources allocated."
    )


def render(sidebar_state):
    """Render the Resource Allocation tab."""
    st.header("Resource Allocation Optimizer")
    st.caption("Distribute resources across counties based on risk scores and population needs")

    with st.expander("How does the allocation work?", expanded=False):
        st.markdown(f"""
**Priority** = {RISK_WEIGHT} x risk + {VULNERABILITY_WEIGHT} x vulnerability + {DENSITY_WEIGHT} x density

Counties are served highest priority first. A resource is offered to a county only when
its disaster tags match the county's conditions (heat, air quality, power outage,
general emergency). Each county receives at most its weighted need, whatever stock
remains, and never more than 40% of a resource's total stock.

The integer-program option uses the same need rules but maximizes urgency-weighted need met
across all counties at once instead of serving them one at a time.
        """)

    if not is_data_loaded():
        st.info("No data loaded. Please load data in the Data & Settings tab.")
        return

    counties = get_counties()
    resources = get_resources()

    col_algo, col_run = st.columns([3, 1])
    with col_algo:
        algorithm = st.radio(
            "Algorithm",
            list(ALGORITHMS.keys()),
            format_func=lambda a: ALGORITHMS[a],
            horizontal=True,
            key="alloc_algorithm",
        )
    with col_run:
        if st.button("▶ Run Optimization", type="primary", key="btn_run_allocation"):
            _run(algorithm)

    scenario = get_selected_scenario()
    if not scenario:
        st.info("No allocations available. Run optimization to generate a resource allocation plan.")
        return

    # --- KPI Metrics ---
    avg_need_met = scenario.avg_need_met_pct
    if avg_need_met >= AVG_NEED_MET_POSITIVE:
        need_delta_color = "normal"
    elif avg_need_met >= AVG_NEED_MET_NEUTRAL:
        need_delta_color = "off"
    else:
        need_delta_color = "inverse"
    render_metric_row([
        {"label": "Total Resources Allocated", "value": f"{scenario.total_resources:,}"},
        {"label": "Counties Served", "value": scenario.counties_served,
         "delta": f"{scenario.counties_served}/{len(counties)} counties", "delta_color": "off"},
        {"label": "Average Need Met", "value": f"{avg_need_met:.1f}%",
         "delta": "of estimated need", "delta_color": need_delta_color},
        {"label": "Objective", "value": scenario.optimization_objective.replace("_", " ").title()},
    ])

    st.caption(f"Scenario: **{scenario.name}** | created {scenario.created_at:%Y-%m-%d %H:%M:%S}")

    if not scenario.allocations:
        st.warning("This scenario has no allocations. Check resource stock and county conditions.")
        return

    county_map = {c.county_id: c for c in counties}
    resource_map = {r.resource_id: r for r in resources}

    # --- Allocation matrix by county ---
    st.subheader("Allocation Matrix by County")
    config = get_rule_config()
    ranked = rank_counties(counties, config)
    ranked_by_id = {p.county.county_id: p for p in ranked}
    summaries = summarize_by_county(scenario, counties)
    county_tabs = st.tabs([s["county_name"] for s in summaries])
    for tab, summary in zip(county_tabs, summaries):
        with tab:
            render_metric_row([
                {"label": "Risk Score", "value": f"{summary['risk_score']:.1f}",
                 "delta": risk_level(summary["risk_score"]), "delta_color": "off"},
                {"label": "Total Allocated", "value": f"{summary['total_allocated']:,}"},
                {"label": "Avg Need Met", "value": f"{summary['avg_need_met_pct']:.1f}%"},
            ])
            rows = []
            for a in scenario.allocations_for_county(summary["county_id"]):
                r = resource_map.get(a.resource_id)
                rows.append({
                    "Resource": r.resource_name if r else "Unknown Resource",
                    "Category": r.category if r else "",
                    "Allocated": f"{a.allocated_quantity:,} {r.unit if r else ''}".strip(),
                    "Need Met %": a.need_met_pct,
                })
            render_need_met_table(pd.DataFrame(rows))

            priority = ranked_by_id.get(summary["county_id"])
            if priority:
                with st.expander("Why these quantities?", expanded=False):
                    base_need = compute_base_need(priority.county, config)
                    for r in resources:
                        needed, intensity = classify_need(priority, r, config)
                        adjusted = compute_adjusted_need(base_need, intensity, priority.priority_score)
                        st.markdown(f"- {explain_need(priority, r, needed, intensity, base_need, adjusted)}")

    col_heat, col_donut = st.columns([3, 1])
    with col_heat:
        heat_rows = [{
            "county_name": county_map[a.county_id].county_name if a.county_id in county_map else a.county_id,
            "resource_name": resource_map[a.resource_id].resource_name if a.resource_id in resource_map else a.resource_id,
            "allocated_quantity": a.allocated_quantity,
        } for a in scenario.allocations]
        st.plotly_chart(
            allocation_heatmap(
                heat_rows,
                [s["county_name"] for s in summaries],
                [r.resource_name for r in resources],
            ),
            use_container_width=True,
        )
    with col_donut:
        st.plotly_chart(need_met_donut(avg_need_met), use_container_width=True)

    # --- Resource utilization ---
    st.subheader("Resource Utilization")
    utilization = compute_resource_utilization(scenario, resources)
    st.plotly_chart(resource_utilization_bar(utilization), use_container_width=True)
    util_df = pd.DataFrame([{
        "Resource": u["resource_name"],
        "Stock": u["available_qty"],
        "Allocated": u["allocated_qty"],
        "Utilization %": round(u["utilization_pct"], 1),
    } for u in utilization])
    st.dataframe(
        util_df.style.map(color_utilization, subset=["Utilization %"]),
        use_container_width=True, hide_index=True,
    )

    # --- Priority ranking ---
    with st.expander("County priority ranking", expanded=False):
        st.plotly_chart(priority_breakdown_bar([{
            "county_name": p.county.county_name,
            "risk_component": RISK_WEIGHT * p.risk_factor,
            "vulnerability_component": VULNERABILITY_WEIGHT * p.vulnerability_factor,
            "density_component": DENSITY_WEIGHT * p.density_factor,
        } for p in ranked]), use_container_width=True)

    # --- LP vs greedy comparison ---
    comparison = st.session_state.get("last_lp_comparison")
    if scenario.optimization_objective == LP_OPTIMIZATION_OBJECTIVE and comparison:
        st.subheader("Integer Program vs Greedy")
        render_comparison_table(pd.DataFrame(comparison))
