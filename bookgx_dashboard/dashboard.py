"""
Dashboard-ready output functions.

These are the entry points for the Streamlit front end and the CLI. Each
returns plain dicts whose camelCase keys are the contract with the view
layer: amounts in SAR, percentages as 0-100 floats.
"""

import logging
from datetime import datetime
from typing import Iterable

from .config import (
    DATA_SOURCE_SAMPLE,
    DATA_SOURCE_SHEETS,
    HEALTHY_THRESHOLD,
    PAYMENT_COLUMNS,
    STATUS_COMPLETED,
)
from .exceptions import FetchError
from .kpis import (
    breakdown,
    breakdown_percentages,
    build_conversion_funnel,
    build_location_performance,
    build_monthly_revenue,
    build_pie_slices,
    calc_business_health,
    calc_performance,
    reviews_by_status,
    safe_divide,
)
from .loaders.sheets import fetch_rows
from .simulator import generate_sample_bookings
from .transforms import build_bookings_frame, filter_by_date_range

logger = logging.getLogger(__name__)


def build_dashboard_stats(
    records: Iterable[dict],
    start_date: str = "",
    end_date: str = "",
    data_source: str = DATA_SOURCE_SHEETS,
    strict: bool = False,
) -> dict:
    """Aggregate booking records into the dashboard statistics object.

    Parameters
    ----------
    records : Header-keyed booking records (live or sample).
    start_date, end_date : Inclusive booking-date bounds; "" means open.
    data_source : "google_sheets" or "mock_data", passed through for the header.
    strict : Raise on malformed numbers instead of counting them as 0.

    Returns
    -------
    Dict with keys revenue, users, conversion, performance, stats,
    recordCount, dataSource, locationBreakdown, paymentMethods,
    acquisitionChannels, bookingStatuses, businessHealth.
    """
    bookings = build_bookings_frame(records, strict=strict)
    df = filter_by_date_range(bookings, start_date, end_date)

    total_bookings = len(df)
    total_revenue = float(df["total_book"].sum()) if total_bookings else 0.0
    completed = int((df["status"] == STATUS_COMPLETED).sum())
    unique_clients = int(df.loc[df["client_name"] != "", "client_name"].nunique())

    revenue_by_location = breakdown(df, "location", "total_book")
    revenue_by_status = breakdown(df, "status", "total_book")
    channel_counts = breakdown(df, "channel")
    nature_counts = breakdown(df, "nature")
    status_counts = breakdown(df, "status")
    reviewed = reviews_by_status(df)

    performance = calc_performance(df, total_revenue)
    health = calc_business_health(performance)

    payment_methods = {
        key: float(df[key].sum()) if total_bookings else 0.0
        for key in PAYMENT_COLUMNS
    }

    stats = {
        "totalRevenue": int(round(total_revenue)),
        "totalUsers": unique_clients,
        "conversionRate": round(safe_divide(completed, total_bookings) * 100, 2),
        "avgOrderValue": round(performance["avg_order_value"], 2),
        "totalReviews": sum(reviewed.values()),
        "reviewsByStatus": reviewed,
        "revenueByStatus": revenue_by_status,
        "acquisitionChannels": breakdown_percentages(channel_counts, decimals=1),
        "natureBooking": breakdown_percentages(nature_counts, decimals=1),
        "locationData": build_pie_slices(revenue_by_location),
        "acquisitionPieData": build_pie_slices(channel_counts),
        "naturePieData": build_pie_slices(nature_counts),
        "statusPieData": build_pie_slices(revenue_by_status),
    }

    result = {
        "revenue": build_monthly_revenue(df),
        "users": build_location_performance(df),
        "conversion": build_conversion_funnel(df),
        # Performance card keys: uptime = payment completion, response
        # time = order value, error rate = cancellations, throughput = up-sells.
        "performance": {
            "serverUptime": performance["payment_completion_rate"],
            "responseTime": int(round(performance["avg_order_value"])),
            "errorRate": round(performance["cancellation_rate"], 2),
            "throughput": performance["upsell_rate"],
        },
        "stats": stats,
        "recordCount": total_bookings,
        "dataSource": data_source,
        "locationBreakdown": revenue_by_location,
        "paymentMethods": payment_methods,
        "acquisitionChannels": channel_counts,
        "bookingStatuses": status_counts,
        "businessHealth": health,
    }

    logger.info(
        "Dashboard stats: %d bookings, revenue %.2f, source=%s",
        total_bookings, total_revenue, data_source,
    )
    return result


def load_dashboard(
    source,
    start_date: str = "",
    end_date: str = "",
    strict: bool = False,
) -> dict:
    """Fetch live records and aggregate them, falling back to sample data.

    Any FetchError (or an empty sheet) is logged and answered with the
    built-in sample bookings, tagged dataSource="mock_data". There is no
    retry.
    """
    data_source = DATA_SOURCE_SHEETS
    try:
        if source is None:
            raise FetchError("No booking source configured")
        records = fetch_rows(source)
        if not records:
            raise FetchError("Booking sheet returned no rows")
    except FetchError as exc:
        logger.warning("Failed to fetch from Google Sheets, using sample data: %s", exc)
        records = generate_sample_bookings()
        data_source = DATA_SOURCE_SAMPLE

    return build_dashboard_stats(
        records,
        start_date=start_date,
        end_date=end_date,
        data_source=data_source,
        strict=strict,
    )


def get_header_summary(dashboard: dict, last_updated: datetime | None = None) -> dict:
    """Connection-status strip: source, row count, freshness, health."""
    health = dashboard.get("businessHealth", 0)
    return {
        "dataSource": dashboard.get("dataSource", DATA_SOURCE_SAMPLE),
        "recordCount": dashboard.get("recordCount", 0),
        "lastUpdated": last_updated or datetime.now(),
        "businessHealth": health,
        "isHealthy": health >= HEALTHY_THRESHOLD,
    }
