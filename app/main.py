"""
Streamlit Frontend for Vola Auditor

Paste or upload a CSV of transactions, run the audit, and browse
past audits.

The page only renders state; all flow and state changes go through
AuditSession so the same rules apply with or without a UI:
- A failed audit never replaces the current result
- Clearing history always asks for confirmation first
"""

import asyncio
import html

import streamlit as st

from vola.config import get_settings, validate_all_settings
from vola.orchestrator import AuditSession, create_app_components
from vola.presentation import (
    build_category_donut,
    build_trend_chart,
    burn_rate_label,
    format_score,
    history_label,
    system_status,
    transaction_rows,
    verdict_band,
)


# Page configuration
st.set_page_config(
    page_title="Vola Auditor",
    page_icon="📉",
    layout="wide",
    initial_sidebar_state="collapsed",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .vola-card {
        padding: 24px;
        background-color: #0f1115;
        border: 1px solid rgba(255,255,255,0.06);
        border-radius: 16px;
        margin: 8px 0;
    }
    .vola-label {
        color: rgba(255,255,255,0.4);
        font-size: 0.75em;
        font-weight: 700;
        letter-spacing: 0.15em;
        text-transform: uppercase;
    }
    .big-number {
        font-size: 4em;
        font-weight: 900;
        letter-spacing: -0.05em;
    }
    .leak-box {
        padding: 14px;
        background-color: rgba(255,255,255,0.04);
        border-left: 3px solid #f43f5e;
        border-radius: 0 12px 12px 0;
        margin: 8px 0;
    }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def get_session() -> AuditSession:
    """Get or create this browser session's AuditSession."""
    if "vola_session" not in st.session_state:
        st.session_state.vola_session = create_app_components()
        st.session_state.csv_input = st.session_state.vola_session.csv_text
    return st.session_state.vola_session


def main():
    """Main application entry point."""
    session = get_session()

    if "show_history" not in st.session_state:
        st.session_state.show_history = False
    if "confirm_clear" not in st.session_state:
        st.session_state.confirm_clear = False

    header_left, header_status, header_right = st.columns([3, 1, 1])
    with header_left:
        st.title("VOLA AUDITOR")
        st.caption("Strategic Financial Intelligence")
    with header_status:
        render_system_status()
    with header_right:
        if st.button(f"🕒 History ({len(session.history)})"):
            st.session_state.show_history = not st.session_state.show_history
            st.rerun()

    if st.session_state.show_history:
        render_history_panel(session)

    left, right = st.columns([1, 3])
    with left:
        render_input_column(session)
    with right:
        render_results(session)

    if get_settings().app.debug_mode:
        render_event_log(session)


def render_system_status():
    """Settings health badge, as reported by validate_all_settings()."""
    status = system_status(validate_all_settings())
    environment = get_settings().app.app_environment.upper()
    st.markdown(f"""
    <div style="text-align:right;">
        <div class="vola-label">System Status · {html.escape(environment)}</div>
        <div style="color:{status.color}; font-weight:700;">{status.label}</div>
    </div>
    """, unsafe_allow_html=True)
    for problem in status.problems:
        st.caption(problem)


def render_event_log(session: AuditSession):
    """Recent structured events for this session (debug mode only)."""
    if session.event_logger is None:
        return
    with st.expander("Event Log"):
        rows = [
            {
                "Time": event.timestamp.isoformat(),
                "Event": event.event_type.value,
                "Severity": event.severity.value,
                "Description": event.description,
                "Error": event.error_message or "",
            }
            for event in reversed(session.event_logger.recent_events)
        ]
        st.dataframe(
            rows,
            use_container_width=True,
            hide_index=True,
        )


def render_history_panel(session: AuditSession):
    """Browsable list of past audits with a confirmed clear."""
    with st.container(border=True):
        title_col, clear_col = st.columns([4, 1])
        title_col.markdown('<div class="vola-label">Audit History</div>', unsafe_allow_html=True)

        if clear_col.button("Clear Records", disabled=len(session.history) == 0):
            st.session_state.confirm_clear = True

        if st.session_state.confirm_clear:
            st.warning("Clear all historical audit data?")
            yes_col, no_col = st.columns(2)
            if yes_col.button("Yes, clear everything", type="primary"):
                session.clear_history()
                st.session_state.confirm_clear = False
                st.rerun()
            if no_col.button("Cancel"):
                st.session_state.confirm_clear = False
                st.rerun()

        if len(session.history) == 0:
            st.caption("No historical data found.")
            return

        columns = st.columns(4)
        for index, entry in enumerate(session.history.entries):
            with columns[index % 4]:
                if st.button(history_label(entry), key=f"history-{entry.id}"):
                    session.load_historical(entry)
                    st.session_state.csv_input = session.csv_text
                    st.session_state.show_history = False
                    st.rerun()


def render_input_column(session: AuditSession):
    """CSV buffer, file upload, audit trigger, error slot and trend chart."""
    uploaded_file = st.file_uploader("Upload CSV", type=["csv"])
    if uploaded_file is not None and st.session_state.get("last_upload") != uploaded_file.file_id:
        st.session_state.last_upload = uploaded_file.file_id
        if session.load_file(uploaded_file.getvalue(), filename=uploaded_file.name):
            st.session_state.csv_input = session.csv_text

    csv_text = st.text_area(
        "Raw CSV Feed",
        key="csv_input",
        height=320,
        placeholder="Paste CSV data here...",
    )
    session.set_csv_text(csv_text)

    if st.button(
        "Processing Protocol..." if session.loading else "Run Audit Sequence",
        type="primary",
        disabled=session.loading,
    ):
        with st.spinner("Running audit..."):
            run_async(session.run_audit())

    if session.error:
        st.error(session.error)

    trend = build_trend_chart(session.history.trend())
    if trend is not None:
        with st.container(border=True):
            st.markdown('<div class="vola-label">Health Trends</div>', unsafe_allow_html=True)
            st.plotly_chart(trend, use_container_width=True)


def render_results(session: AuditSession):
    """Verdict, burn rate, narrative, leakage, category chart and transactions."""
    audit = session.current_result
    if audit is None:
        st.markdown("""
        <div class="vola-card" style="text-align:center; min-height:400px; padding-top:140px;">
            <h3>Awaiting Telemetry Data</h3>
            <p>Upload a CSV file or paste your transaction logs to begin the audit.</p>
        </div>
        """, unsafe_allow_html=True)
        return

    verdict_col, burn_col = st.columns(2)
    with verdict_col:
        band = verdict_band(audit.vola_verdict_score)
        st.markdown(f"""
        <div class="vola-card" style="text-align:center;">
            <div class="vola-label">Vola Verdict</div>
            <div class="big-number" style="color:{band.color};">{format_score(audit.vola_verdict_score)}</div>
            <div>Health Rating · {band.label}</div>
        </div>
        """, unsafe_allow_html=True)
        st.progress(min(max(audit.vola_verdict_score, 0.0), 100.0) / 100.0)

    with burn_col:
        label = burn_rate_label(audit.burn_rate_percentage)
        color = "#f43f5e" if label == "CRITICAL" else "#34d399"
        st.markdown(f"""
        <div class="vola-card">
            <div class="vola-label">Burn Rate Intensity</div>
            <div class="big-number">{audit.burn_rate_percentage:.1f}%</div>
            <div style="color:{color}; font-weight:700;">{label}</div>
            <p>Percentage of liquid capital depleted against immediate income baseline.</p>
        </div>
        """, unsafe_allow_html=True)

    analysis_col, leakage_col = st.columns(2)
    with analysis_col:
        with st.container(border=True):
            st.markdown('<div class="vola-label">Executive Analysis</div>', unsafe_allow_html=True)
            st.markdown(audit.detailed_reasoning)
            st.markdown("---")
            st.markdown('<div class="vola-label">Capital Deployment (Assets)</div>', unsafe_allow_html=True)
            st.success(audit.asset_accumulation_summary)

    with leakage_col:
        with st.container(border=True):
            st.markdown('<div class="vola-label">Efficiency Leakage</div>', unsafe_allow_html=True)
            if not audit.leakage_items:
                st.caption("No leakage detected. Maximum efficiency achieved.")
            for leak in audit.leakage_items:
                st.markdown(f"""
                <div class="leak-box">
                    <strong>{html.escape(leak.item)}</strong><br/>
                    <small>{html.escape(leak.reason)}</small><br/>
                    <small style="color:#34d399;">ACTIONABLE ALTERNATIVE</small><br/>
                    {html.escape(leak.alternative)}
                </div>
                """, unsafe_allow_html=True)

            donut = build_category_donut(audit)
            if donut is not None:
                st.plotly_chart(donut, use_container_width=True)

    st.markdown('<div class="vola-label">Source Log Verification</div>', unsafe_allow_html=True)
    st.dataframe(transaction_rows(session.transactions), use_container_width=True, hide_index=True)


if __name__ == "__main__":
    main()
