"""Styled dataframe display helpers."""

import streamlit as st
import pandas as pd
from typing import Optional

from config.defaults import NEED_MET_GOOD, NEED_MET_FAIR, UTILIZATION_HIGH, UTILIZATION_MEDIUM


def render_styled_table(
    df: pd.DataFrame,
    title: Optional[str] = None,
    height: Optional[int] = None,
    use_container_width: bool = True,
):
    """Render a styled, non-editable dataframe."""
    if title:
        st.subheader(title)
    st.dataframe(df, height=height, use_container_width=use_container_width, hide_index=True)


def color_risk(val):
    if val == "Critical":
        return "background-color: #ffcccc; color: #cc0000; font-weight: bold"
    elif val == "High":
        return "background-color: #ffe5cc; color: #b35900; font-weight: bold"
    elif val == "Medium":
        return "background-color: #fff3cd; color: #856404; font-weight: bold"
    elif val == "Low":
        return "background-color: #d4edda; color: #155724; font-weight: bold"
    return ""


def color_need_met(val):
    try:
        v = float(val)
    except (ValueError, TypeError):
        return ""
    if v >= NEED_MET_GOOD:
        return "color: #155724; font-weight: bold"
    elif v >= NEED_MET_FAIR:
        return "color: #856404; font-weight: bold"
    return "color: #cc0000; font-weight: bold"


def color_utilization(val):
    try:
        v = float(val)
    except (ValueError, TypeError):
        return ""
    if v >= UTILIZATION_HIGH:
        return "color: #cc0000; font-weight: bold"
    elif v >= UTILIZATION_MEDIUM:
        return "color: #856404; font-weight: bold"
    return ""


def render_risk_table(df: pd.DataFrame, risk_column: str = "Risk Level"):
    """Render a table with color-coded risk levels."""
    if risk_column in df.columns:
        styled = df.style.map(color_risk, subset=[risk_column])
        st.dataframe(styled, use_container_width=True, hide_index=True)
    else:
        st.dataframe(df, use_container_width=True, hide_index=True)


def render_need_met_table(df: pd.DataFrame, need_column: str = "Need Met %"):
    """Render an allocation table with need-met highlighting."""
    if need_column in df.columns:
        styled = df.style.map(color_need_met, subset=[need_column]).format({need_column: "{:.1f}%"})
        st.dataframe(styled, use_container_width=True, hide_index=True)
    else:
        st.dataframe(df, use_container_width=True, hide_index=True)


def render_comparison_table(df: pd.DataFrame, change_column: str = "Change"):
    """Render a comparison table with positive/negative highlighting."""
    def color_change(val):
        try:
            v = float(val)
            if v > 0:
                return "color: #155724; font-weight: bold"
            elif v < 0:
                return "color: #cc0000; font-weight: bold"
        except (ValueError, TypeError):
            pass
        return ""

    if change_column in df.columns:
        styled = df.style.map(color_change, subset=[change_column])
        st.dataframe(styled, use_container_width=True, hide_index=True)
    else:
        st.dataframe(df, use_container_width=True, hide_index=True)
