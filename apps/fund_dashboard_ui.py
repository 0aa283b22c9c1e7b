"""ETF NAV tracker dashboard (Streamlit).

Shows one summary card per tracked fund and a cumulative-growth comparison
chart, all read from the published fund-data JSON.
"""

from __future__ import annotations

from pathlib import Path
import sys

import altair as alt
import streamlit as st

# Allow running directly from repo root without package installation.
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from config.settings import settings  # noqa: E402
from services.dashboard_state import DashboardState  # noqa: E402
from services.fund_data_service import FundDataService  # noqa: E402
from services.presentation import FundCard, build_cards, card_html, chart_frame  # noqa: E402
from utils.logging_setup import configure_logging  # noqa: E402


def _inject_css() -> None:
    st.markdown(
        """
        <style>
          .stApp { background: #f8fafc; }
          .fund-card {
            background: #ffffff;
            border-radius: 10px;
            padding: 16px 18px;
            margin-bottom: 14px;
            box-shadow: 0 6px 18px rgba(15, 23, 42, 0.06);
          }
          .fund-card .name { font-size: 1.1rem; font-weight: 700; color: #1f2937; }
          .fund-card .code {
            font-family: monospace; font-size: 0.8rem; color: #6b7280;
            background: #f3f4f6; padding: 1px 6px; border-radius: 4px;
          }
          .fund-card .nav { font-size: 1.6rem; font-weight: 700; color: #0f172a; margin-top: 8px; }
          .fund-card .growth { font-size: 1.05rem; font-weight: 600; }
          .fund-card .date { color: #94a3b8; font-size: 0.8rem; margin-top: 4px; }
          .small-note { color: #94a3b8; font-size: 0.8rem; text-align: center; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def _state() -> DashboardState:
    if "dashboard_state" not in st.session_state:
        service = FundDataService(
            urls=settings.data_urls,
            registry=settings.tracked_funds,
            policy=settings.fetch_policy,
            baseline_date=settings.baseline_date,
            timeout=settings.http_timeout_seconds,
        )
        state = DashboardState(service.load)
        state.refresh()
        st.session_state["dashboard_state"] = state
    return st.session_state["dashboard_state"]


def _render_card(card: FundCard) -> None:
    st.markdown(card_html(card), unsafe_allow_html=True)


def _render_header(state: DashboardState) -> None:
    left, right = st.columns([3, 1])
    with left:
        st.title("Fund Tracker Pro")
        st.caption(f"Cumulative change of tracked ETFs since the baseline date {settings.baseline_date}.")
    with right:
        if st.button("Refresh data", disabled=state.loading, use_container_width=True):
            if state.refresh():
                st.rerun()

    badges = ["Data source: Eastmoney"]
    if state.data_date:
        badges.append(f"Data as of: {state.data_date}")
    st.markdown(" · ".join(badges))


def _render_chart(state: DashboardState) -> None:
    frame = chart_frame(state.snapshot.funds)
    if frame.empty:
        st.info("No history to chart.")
        return
    chart = (
        alt.Chart(frame)
        .mark_line(point=False)
        .encode(
            x=alt.X("date:T", title="Date"),
            y=alt.Y("cumulativeGrowth:Q", title="Cumulative growth (%)"),
            color=alt.Color("fund:N", title="Fund"),
            tooltip=["date:T", "fund:N", alt.Tooltip("cumulativeGrowth:Q", format="+.2f")],
        )
        .properties(height=400)
    )
    st.altair_chart(chart, use_container_width=True)


def main() -> None:
    st.set_page_config(page_title="Fund Tracker Pro", layout="wide")
    configure_logging(settings.log_level)
    _inject_css()

    state = _state()
    _render_header(state)

    if state.error:
        st.error(f"Failed to load fund data: {state.error}")
        if st.button("Retry"):
            state.refresh()
            st.rerun()
        if state.snapshot is None:
            st.stop()

    snapshot = state.snapshot
    if snapshot is None:
        st.info("Loading latest data...")
        st.stop()

    if snapshot.metadata.is_synthetic:
        st.warning("Showing SIMULATED data: no published data source could be reached.")

    cards = build_cards(snapshot.funds)
    columns = st.columns(3)
    for index, card in enumerate(cards):
        with columns[index % 3]:
            _render_card(card)

    st.subheader("Cumulative growth comparison")
    _render_chart(state)

    if snapshot.metadata.validation_errors:
        with st.expander(f"Data warnings ({len(snapshot.metadata.validation_errors)})"):
            for message in snapshot.metadata.validation_errors:
                st.text(f"- {message}")

    st.markdown(
        "<div class='small-note'>Data is fetched automatically after each market close.<br>"
        "Growth figures are based on forward-adjusted prices.<br>"
        f"Fetched at {snapshot.metadata.timestamp:%Y-%m-%d %H:%M:%S} UTC.</div>",
        unsafe_allow_html=True,
    )


if __name__ == "__main__":
    main()
