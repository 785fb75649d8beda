"""Plotly chart builders for the Emergency Resource Dashboard."""

import plotly.express as px
import plotly.graph_objects as go
import pandas as pd
from typing import Dict, List, Optional

RISK_COLORS = {
    "Critical": "#B91C1C",
    "High": "#EA580C",
    "Medium": "#EAB308",
    "Low": "#16A34A",
}


def risk_score_bar(counties: List[dict], title: str = "Risk Score by County") -> go.Figure:
    """Horizontal bar of county risk scores coloured by risk level."""
    df = pd.DataFrame(counties).sort_values("risk_score")
    fig = px.bar(
        df, x="risk_score", y="county_name",
        orientation="h",
        color="risk_level",
        color_discrete_map=RISK_COLORS,
        labels={"risk_score": "Risk Score", "county_name": "County", "risk_level": "Risk"},
        title=title,
        range_x=[0, 100],
    )
    fig.update_layout(height=max(300, len(df) * 45), yaxis_type="category")
    return fig


def priority_breakdown_bar(priorities: List[dict]) -> go.Figure:
    """Stacked bar of weighted priority components per county."""
    df = pd.DataFrame(priorities)
    fig = go.Figure()
    components = [
        ("risk_component", "Risk", "#B91C1C"),
        ("vulnerability_component", "Vulnerability", "#4A90D9"),
        ("density_component", "Density", "#F5C542"),
    ]
    for col, name, color in components:
        fig.add_trace(go.Bar(name=name, x=df["county_name"], y=df[col], marker_color=color))
    fig.update_layout(
        barmode="stack",
        title="Priority Score Breakdown",
        xaxis_title="County",
        yaxis_title="Weighted Score",
        height=400,
    )
    return fig


def resource_utilization_bar(utilization: List[dict]) -> go.Figure:
    """Bar chart of allocated share of each resource's stock."""
    df = pd.DataFrame(utilization)
    fig = px.bar(
        df, x="resource_name", y="utilization_pct",
        labels={"utilization_pct": "Utilization %", "resource_name": "Resource"},
        title="Resource Utilization",
        color="utilization_pct",
        color_continuous_scale=["#4A90D9", "#F5C542", "#E8734A"],
        range_color=[0, 100],
    )
    fig.update_layout(height=380, yaxis_range=[0, 100])
    fig.update_traces(texttemplate="%{y:.1f}%", textposition="auto")
    return fig


def allocation_heatmap(
    allocations: List[dict],
    county_names: List[str],
    resource_names: List[str],
) -> go.Figure:
    """Heatmap showing quantity per county per resource."""
    data: Dict[str, Dict[str, int]] = {}
    for a in allocations:
        data.setdefault(a["county_name"], {})
        data[a["county_name"]][a["resource_name"]] = (
            data[a["county_name"]].get(a["resource_name"], 0) + a["allocated_quantity"]
        )

    matrix = [[data.get(c, {}).get(r, 0) for r in resource_names] for c in county_names]

    fig = go.Figure(data=go.Heatmap(
        z=matrix,
        x=resource_names,
        y=county_names,
        colorscale="YlOrRd",
        text=matrix,
        texttemplate="%{text}",
        hovertemplate="County: %{y}<br>Resource: %{x}<br>Allocated: %{z}<extra></extra>",
    ))
    fig.update_layout(
        title="Allocation Matrix",
        xaxis_title="Resource",
        yaxis_title="County",
        height=max(350, len(county_names) * 50),
    )
    return fig


def county_map(
    markers: List[dict],
    color_column: str,
    color_label: str,
    selected_county_id: Optional[str] = None,
) -> go.Figure:
    """US scatter map of county markers coloured by risk score or need met %."""
    df = pd.DataFrame(markers)
    df["marker_size"] = [22 if cid == selected_county_id else 14 for cid in df["county_id"]]
    fig = px.scatter_geo(
        df, lat="latitude", lon="longitude",
        color=color_column,
        size="marker_size",
        size_max=22,
        hover_name="county_name",
        hover_data={color_column: ":.1f", "latitude": False, "longitude": False, "marker_size": False},
        color_continuous_scale=["#16A34A", "#EAB308", "#EA580C", "#B91C1C"],
        range_color=[0, 100],
        scope="usa",
        labels={color_column: color_label},
    )
    fig.update_layout(height=520, margin=dict(l=0, r=0, t=30, b=0))
    return fig


def need_met_donut(avg_need_met: float, title: str = "Average Need Met") -> go.Figure:
    """Donut chart showing average need met across allocations."""
    met = max(0.0, min(avg_need_met, 100.0))
    fig = go.Figure(data=[go.Pie(
        labels=["Met", "Unmet"],
        values=[met, 100 - met],
        hole=0.6,
        marker_colors=["#16A34A", "#E5E7EB"],
        textinfo="none",
        sort=False,
    )])
    fig.update_layout(
        title=title,
        height=320,
        showlegend=False,
        annotations=[dict(text=f"{met:.1f}%", x=0.5, y=0.5, font_size=18, showarrow=False)],
    )
    return fig
