"""
BookGX Plus — Interactive Dashboard

Run with:  streamlit run app.py
"""

from datetime import date

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from bookgx_dashboard.config import (
    CARD_CONNECTION_STATUS,
    CARD_PERFORMANCE,
    CARD_REVENUE_CHART,
    CARD_STATS_OVERVIEW,
    CURRENCY,
    DATA_SOURCE_SHEETS,
    SHEET_GID,
    SPREADSHEET_ID,
    STATE_DIR,
    STRICT_PARSING,
    USERS_PASSCODE,
    USERS_SPREADSHEET_ID,
)
from bookgx_dashboard.dashboard import get_header_summary, load_dashboard
from bookgx_dashboard.exceptions import AuthenticationError
from bookgx_dashboard.loaders import CsvExportSource, fetch_users
from bookgx_dashboard.session import AccessGate, AppState, JsonFileSessionStore
from bookgx_dashboard.transforms import resolve_time_period

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="BookGX Plus",
    page_icon="📚",
    layout="wide",
    initial_sidebar_state="expanded",
)

HEALTH_COLORS = {True: "#10b981", False: "#ef4444"}

PERIODS = {
    "All data": "all",
    "Today": "today",
    "This month": "this-month",
    "Last month": "last-month",
    "This year": "this-year",
    "Last 90 days": "default",
}


# ---------------------------------------------------------------------------
# Data loading (cached)
# ---------------------------------------------------------------------------
@st.cache_data(ttl=300)
def load_users():
    if not USERS_SPREADSHEET_ID:
        return []
    return fetch_users(CsvExportSource(USERS_SPREADSHEET_ID))


def load_data(start: str, end: str) -> dict:
    source = CsvExportSource(SPREADSHEET_ID, gid=SHEET_GID or None) if SPREADSHEET_ID else None
    return load_dashboard(source, start, end, strict=STRICT_PARSING)


if "app_state" not in st.session_state:
    st.session_state.app_state = AppState()
state: AppState = st.session_state.app_state

gate = AccessGate(
    users=load_users(),
    store=JsonFileSessionStore(STATE_DIR / "session.json"),
    users_passcode=USERS_PASSCODE,
)
if state.user is None:
    state.user = gate.restore()


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------
if not state.is_authenticated:
    st.title("BookGX Plus")
    st.caption("Welcome to the dashboard")
    with st.form("login"):
        name = st.text_input("Name")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login to Dashboard")
    if submitted:
        try:
            state.user = gate.login(name, password)
            st.rerun()
        except AuthenticationError as exc:
            st.error(str(exc))
    st.stop()


# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
st.sidebar.title("BookGX Plus")
st.sidebar.markdown(f"**{state.user.name}** · {state.user.role}")
st.sidebar.divider()

period_label = st.sidebar.selectbox("Time period", list(PERIODS), index=0)
with st.sidebar.expander("Custom date range"):
    custom_start = st.date_input("From", value=None)
    custom_end = st.date_input("To", value=None)
    use_custom = st.checkbox("Apply custom range")

if use_custom and custom_start and custom_end:
    state.set_range(custom_start.isoformat(), custom_end.isoformat(), period="custom")
else:
    start, end = resolve_time_period(PERIODS[period_label], date.today())
    state.set_range(start, end, period=PERIODS[period_label])

refresh = st.sidebar.button("Refresh")
if refresh or state.needs_reload():
    state.record_load(load_data(state.start_date, state.end_date))

if st.sidebar.button("Logout"):
    gate.logout()
    state.user = None
    state.users_unlocked = False
    st.rerun()

data = state.dashboard
header = get_header_summary(data, state.last_updated)
cards = state.allowed_cards()

# ---------------------------------------------------------------------------
# Header strip
# ---------------------------------------------------------------------------
if CARD_CONNECTION_STATUS in cards:
    color = HEALTH_COLORS[header["isHealthy"]]
    source_label = "Google Sheets" if header["dataSource"] == DATA_SOURCE_SHEETS else "Sample data"
    st.markdown(
        f"""
    <div style="display:flex; gap:24px; align-items:center; padding:8px 0;">
        <div><b>Source:</b> {source_label}</div>
        <div><b>Records:</b> {header['recordCount']:,}</div>
        <div><b>Updated:</b> {header['lastUpdated']:%H:%M:%S}</div>
        <div style="color:{color}; font-weight:700;">Health {header['businessHealth']}%</div>
    </div>
    """,
        unsafe_allow_html=True,
    )
if header["dataSource"] != DATA_SOURCE_SHEETS:
    st.warning("Google Sheets is unreachable; showing built-in sample data.")


def pie_chart(slices: list[dict], title: str):
    if not slices:
        st.info(f"No data for {title.lower()}.")
        return
    fig = go.Figure(go.Pie(
        labels=[s["name"] for s in slices],
        values=[s["value"] for s in slices],
        marker=dict(colors=[s["color"] for s in slices]),
        hole=0.45,
        sort=False,
    ))
    fig.update_layout(title=title, height=340, margin=dict(l=10, r=10, t=40, b=10))
    st.plotly_chart(fig, use_container_width=True)


# ===========================================================================
# Stats overview
# ===========================================================================
if CARD_STATS_OVERVIEW in cards:
    stats = data["stats"]
    st.title("Key Performance Indicators")

    cols = st.columns(4)
    cols[0].metric("Total Revenue", f"{stats['totalRevenue']:,} {CURRENCY}")
    cols[1].metric("Clients", f"{stats['totalUsers']:,}")
    cols[2].metric("Conversion", f"{stats['conversionRate']:.2f}%")
    cols[3].metric("Avg Order Value", f"{stats['avgOrderValue']:,.2f} {CURRENCY}")

    col1, col2 = st.columns(2)
    with col1:
        pie_chart(stats["locationData"], "Turnover by Location")
        pie_chart(stats["acquisitionPieData"], "How Did You Know Us")
    with col2:
        pie_chart(stats["statusPieData"], "Revenue by Booking Status")
        pie_chart(stats["naturePieData"], "Booking Types")

    st.subheader("Reviews by Booking Status")
    reviews = pd.DataFrame(
        list(stats["reviewsByStatus"].items()), columns=["status", "reviews"]
    )
    st.dataframe(reviews, use_container_width=True, hide_index=True)


# ===========================================================================
# Revenue chart
# ===========================================================================
if CARD_REVENUE_CHART in cards:
    st.subheader("Monthly Revenue")
    revenue = pd.DataFrame(data["revenue"])
    if revenue.empty:
        st.info("No dated bookings in this range.")
    else:
        fig = go.Figure()
        fig.add_trace(go.Bar(x=revenue["month"], y=revenue["value"], name="Revenue", marker_color="#8b5cf6"))
        fig.add_trace(go.Scatter(
            x=revenue["month"], y=revenue["growth"], name="Growth %",
            mode="lines+markers", yaxis="y2", line=dict(color="#10b981", width=2),
        ))
        fig.update_layout(
            height=380,
            yaxis_title=CURRENCY,
            yaxis2=dict(title="Growth %", overlaying="y", side="right"),
            plot_bgcolor="rgba(0,0,0,0)",
        )
        st.plotly_chart(fig, use_container_width=True)

    st.subheader("Location Performance")
    locations = pd.DataFrame(data["users"])
    if not locations.empty:
        locations = locations.rename(columns={
            "date": "location", "active": "revenue", "new": "bookings", "retention": "avg_order_value",
        })
        st.dataframe(locations, use_container_width=True, hide_index=True)


# ===========================================================================
# Performance indicators
# ===========================================================================
if CARD_PERFORMANCE in cards:
    st.subheader("Conversion Funnel")
    funnel = data["conversion"]
    fig = go.Figure(go.Funnel(
        y=[s["stage"] for s in funnel],
        x=[s["users"] for s in funnel],
        text=[f"{s['rate']}%" for s in funnel],
        textinfo="value+text",
    ))
    fig.update_layout(height=340, margin=dict(l=10, r=10, t=10, b=10))
    st.plotly_chart(fig, use_container_width=True)

    perf = data["performance"]
    cols = st.columns(4)
    cols[0].metric("Payment Completion", f"{perf['serverUptime']:.1f}%")
    cols[1].metric("Avg Order Value", f"{perf['responseTime']:,} {CURRENCY}")
    cols[2].metric("Cancellation Rate", f"{perf['errorRate']:.2f}%")
    cols[3].metric("Up-selling Rate", f"{perf['throughput']:.1f}%")

    st.subheader("Payment Methods")
    payments = pd.DataFrame(list(data["paymentMethods"].items()), columns=["method", CURRENCY])
    st.dataframe(payments, use_container_width=True, hide_index=True)


# ===========================================================================
# Users (passcode protected)
# ===========================================================================
with st.sidebar.expander("Users"):
    if not state.users_unlocked:
        passcode = st.text_input("Passcode", type="password", key="users_passcode")
        if st.button("Unlock"):
            try:
                state.users_unlocked = gate.unlock_users_page(passcode)
                st.rerun()
            except AuthenticationError as exc:
                st.error(str(exc))

if state.users_unlocked:
    st.subheader("Dashboard Users")
    directory = pd.DataFrame(
        [{"name": u.name, "role": u.role, "cards": ", ".join(u.cards)} for u in gate.users]
    )
    st.dataframe(directory, use_container_width=True, hide_index=True)
    if st.button("Lock users page"):
        state.users_unlocked = False
        st.rerun()
