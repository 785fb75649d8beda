"""Tab 4: Predictive Alerts — early warnings and AI-style alert drafting."""

import random
import time

import streamlit as st

from data.session_store import (
    get_counties, get_alerts, add_alerts, set_alerts, get_county_name,
    next_prediction_seed, is_data_loaded,
)
from engine.alert_engine import generate_predictive_alerts, active_alerts, acknowledge_alert
from engine.alert_drafter import draft_email, draft_sms, stream_prefixes
from components.metrics_cards import render_alert_card
from config.defaults import (
    SMS_CHAR_LIMIT, EMAIL_REVEAL_DELAY_S, SMS_REVEAL_DELAY_S, REVEAL_CHARS_PER_FRAME,
)


def _reveal(text: str, delay_s: float):
    """Typewriter-style reveal of a finished draft."""
    placeholder = st.empty()
    for prefix in stream_prefixes(text, step=REVEAL_CHARS_PER_FRAME):
        placeholder.code(prefix or " ", language=None)
        time.sleep(delay_s * REVEAL_CHARS_PER_FRAME)
    placeholder.empty()


def _render_drafter(alert):
    county_name = get_county_name(alert.county_id)
    email_key = f"email_draft_{alert.alert_id}"
    sms_key = f"sms_draft_{alert.alert_id}"

    col_email, col_sms = st.columns(2)
    with col_email:
        st.markdown("**📧 Email Alert Draft**")
        if st.button("Generate Email", key=f"btn_email_{alert.alert_id}"):
            text = draft_email(alert, county_name)
            _reveal(text, EMAIL_REVEAL_DELAY_S)
            st.session_state[email_key] = text
        st.text_area(
            "Email draft",
            key=email_key,
            height=320,
            placeholder="Click 'Generate Email' to create an AI-drafted email alert...",
            label_visibility="collapsed",
        )
    with col_sms:
        st.markdown("**💬 SMS Alert Draft**")
        if st.button("Generate SMS", key=f"btn_sms_{alert.alert_id}"):
            text = draft_sms(alert, county_name)
            _reveal(text, SMS_REVEAL_DELAY_S)
            st.session_state[sms_key] = text
        sms_text = st.text_area(
            "SMS draft",
            key=sms_key,
            height=200,
            placeholder="Click 'Generate SMS' to create an AI-drafted SMS alert...",
            label_visibility="collapsed",
        )
        st.caption(f"Character count: {len(sms_text or '')}/{SMS_CHAR_LIMIT}")


def render(sidebar_state):
    """Render the Predictive Alerts tab."""
    st.header("Predictive Alert System")
    st.caption("Early warnings from environmental data and risk factors")

    if not is_data_loaded():
        st.info("No data loaded. Please load data in the Data & Settings tab.")
        return

    counties = get_counties()
    alerts = get_alerts()
    current = active_alerts(alerts)

    col_btn, col_stats = st.columns([1, 3])
    with col_btn:
        if st.button("Run Predictive Analysis", type="primary", key="btn_run_prediction"):
            with st.spinner("Running analysis..."):
                rng = random.Random(next_prediction_seed())
                new_alerts = generate_predictive_alerts(counties, rng)
            add_alerts(new_alerts)
            st.success(f"Generated {len(new_alerts)} new predictive alerts")
            st.rerun()
    with col_stats:
        st.markdown(f"**{len(current)} Active Alerts** | {len(alerts)} total")

    if not current:
        st.info("No active alerts. Run predictive analysis to generate alerts.")
        return

    st.subheader("Active Predictive Alerts")
    for alert in current:
        county_name = get_county_name(alert.county_id)
        with st.container(border=True):
            render_alert_card(
                f"**{alert.type_label.title()}** | {county_name} | "
                f"Predicted {alert.predicted_date.month}/{alert.predicted_date.day}/{alert.predicted_date.year} | "
                f"Confidence {round(alert.confidence * 100)}%",
                level=alert.severity,
            )
            st.write(alert.message)
            if alert.recommendations:
                st.markdown("**Recommended Actions:**")
                for rec in alert.recommendations:
                    st.markdown(f"- {rec}")

            col_ack, col_draft = st.columns([1, 4])
            with col_ack:
                if st.button("Acknowledge", key=f"btn_ack_{alert.alert_id}"):
                    set_alerts(acknowledge_alert(get_alerts(), alert.alert_id))
                    st.success("Alert acknowledged")
                    st.rerun()
            with col_draft:
                with st.expander("AI Alert Drafting", expanded=False):
                    _render_drafter(alert)
