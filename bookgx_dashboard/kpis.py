"""
KPI computation functions — pure functions with no side effects.

Provides guarded division, categorical breakdowns and their pie slices,
the booking conversion funnel, performance ratios, the monthly revenue
trend and the business-health score.

All functions take the bookings table from transforms.build_bookings_frame()
and never raise on empty input: a zero denominator yields 0.
"""

import logging

import pandas as pd

from .config import (
    FUNNEL_STAGES,
    PIE_PALETTE,
    REVENUE_TREND_MONTHS,
    STATUS_CANCELED,
    STATUS_COMPLETED,
    STATUS_CONFIRMED,
    TOP_LOCATIONS,
)

logger = logging.getLogger(__name__)


def safe_divide(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0.0 when the denominator is 0."""
    if not denominator:
        return 0.0
    return numerator / denominator


def breakdown(
    df: pd.DataFrame,
    column: str,
    value_column: str | None = None,
) -> dict[str, float]:
    """Group bookings by a categorical column.

    Sums ``value_column`` per group, or counts bookings when it is None.
    Groups come back ordered by value, largest first; ties keep the order in
    which the group first appears in the data.
    """
    if df.empty:
        return {}

    if value_column is None:
        grouped = df.groupby(column, sort=False).size()
        values = {str(k): int(v) for k, v in grouped.items()}
    else:
        grouped = df.groupby(column, sort=False)[value_column].sum()
        values = {str(k): float(v) for k, v in grouped.items()}

    return dict(sorted(values.items(), key=lambda kv: kv[1], reverse=True))


def breakdown_percentages(
    values: dict[str, float],
    decimals: int = 2,
) -> dict[str, float]:
    """Share of each group in the breakdown's own total, in percent.

    Every share is 0 when the total is 0.
    """
    total = sum(values.values())
    return {
        name: round(safe_divide(value, total) * 100, decimals)
        for name, value in values.items()
    }


def build_pie_slices(values: dict[str, float]) -> list[dict]:
    """Display-ready slices: sorted by value, colored by rank.

    Returns
    -------
    List of {"name", "value", "percentage", "color"} dicts. The palette is
    cycled by position after sorting, so the same category can change color
    when the ranking changes.
    """
    percentages = breakdown_percentages(values, decimals=2)
    ranked = sorted(values.items(), key=lambda kv: kv[1], reverse=True)

    return [
        {
            "name": name,
            "value": value,
            "percentage": percentages[name],
            "color": PIE_PALETTE[rank % len(PIE_PALETTE)],
        }
        for rank, (name, value) in enumerate(ranked)
    ]


def build_conversion_funnel(df: pd.DataFrame) -> list[dict]:
    """Booking lifecycle funnel.

    Stages
    ------
    - Inquiries: every booking
    - Confirmed: status Confirmed or Completed
    - Completed: status Completed
    - Paid:      completed with a positive Total Paid
    - Rated:     paid with a Manager Rating

    Each stage is drawn from the previous one, so counts never increase.
    ``rate`` is the stage count as a whole-number percentage of the previous
    stage (100 for Inquiries).
    """
    stage_frames = [df]
    stage_frames.append(df[df["status"].isin([STATUS_CONFIRMED, STATUS_COMPLETED])])
    stage_frames.append(stage_frames[-1][stage_frames[-1]["status"] == STATUS_COMPLETED])
    stage_frames.append(stage_frames[-1][stage_frames[-1]["total_paid"] > 0])
    stage_frames.append(stage_frames[-1][stage_frames[-1]["has_manager_rating"]])

    funnel = []
    previous = None
    for stage, frame in zip(FUNNEL_STAGES, stage_frames):
        count = len(frame)
        rate = 100 if previous is None else round(safe_divide(count, previous) * 100)
        funnel.append({"stage": stage, "users": count, "rate": rate})
        previous = count
    return funnel


def calc_performance(df: pd.DataFrame, total_revenue: float) -> dict[str, float]:
    """Performance ratios over all bookings.

    Returns
    -------
    {
        "payment_completion_rate": % of bookings with Total Paid > 0,
        "avg_order_value":         total revenue / bookings (SAR),
        "cancellation_rate":       % of bookings with status Canceled,
        "upsell_rate":             % of bookings with Total Book Plus > 0,
    }
    """
    total = len(df)
    if total == 0:
        return {
            "payment_completion_rate": 0.0,
            "avg_order_value": 0.0,
            "cancellation_rate": 0.0,
            "upsell_rate": 0.0,
        }

    paid = int((df["total_paid"] > 0).sum())
    canceled = int((df["status"] == STATUS_CANCELED).sum())
    upsold = int((df["total_book_plus"] > 0).sum())

    return {
        "payment_completion_rate": safe_divide(paid, total) * 100,
        "avg_order_value": safe_divide(total_revenue, total),
        "cancellation_rate": safe_divide(canceled, total) * 100,
        "upsell_rate": safe_divide(upsold, total) * 100,
    }


def calc_business_health(performance: dict[str, float]) -> int:
    """Blend the four performance ratios into one 0-100-ish score.

    An average order value of 500 SAR counts as 100 points; cancellations
    and up-sells are weighted double.
    """
    score = (
        performance["payment_completion_rate"]
        + performance["avg_order_value"] / 500 * 100
        + (100 - performance["cancellation_rate"] * 2)
        + performance["upsell_rate"] * 2
    ) / 4
    return int(round(score))


def build_monthly_revenue(
    df: pd.DataFrame,
    months: int = REVENUE_TREND_MONTHS,
) -> list[dict]:
    """Monthly revenue trend over the most recent ``months`` months with data.

    Bookings without a parseable date are left out. ``growth`` is the
    month-over-month change in percent (1 decimal), 0 for the first month
    shown or when the previous month had no revenue.
    """
    dated = df.dropna(subset=["booking_date"])
    if dated.empty:
        return []

    monthly = (
        dated.assign(month=dated["booking_date"].dt.to_period("M"))
        .groupby("month")
        .agg(total=("total_book", "sum"), bookings=("total_book", "size"))
        .sort_index()
        .tail(months)
    )

    trend = []
    prev_total = None
    for period, row in monthly.iterrows():
        total = float(row["total"])
        growth = 0.0
        if prev_total is not None and prev_total > 0:
            growth = round((total - prev_total) / prev_total * 100, 1)
        trend.append({
            "month": period.strftime("%b"),
            "value": int(round(total)),
            "growth": growth,
            "bookings": int(row["bookings"]),
        })
        prev_total = total
    return trend


def build_location_performance(
    df: pd.DataFrame,
    top_n: int = TOP_LOCATIONS,
) -> list[dict]:
    """Top locations by revenue with booking count and average order value.

    Returns
    -------
    List of {"date": location, "active": revenue, "new": bookings,
    "retention": average order value} dicts, keyed the way the engagement
    chart expects.
    """
    if df.empty:
        return []

    grouped = (
        df.groupby("location", sort=False)
        .agg(revenue=("total_book", "sum"), bookings=("total_book", "size"))
        .sort_values("revenue", ascending=False, kind="stable")
        .head(top_n)
    )

    return [
        {
            "date": str(location),
            "active": int(round(row["revenue"])),
            "new": int(row["bookings"]),
            "retention": round(safe_divide(row["revenue"], row["bookings"]), 2),
        }
        for location, row in grouped.iterrows()
    ]


def reviews_by_status(df: pd.DataFrame) -> dict[str, int]:
    """Count of reviewed bookings per booking status."""
    reviewed = df[df["has_review"]] if not df.empty else df
    return breakdown(reviewed, "status")
