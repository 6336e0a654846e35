"""
Data transforms: turn raw sheet records into a typed bookings table and
narrow it to the selected date range.
"""

import logging
from datetime import date, timedelta
from typing import Iterable

import pandas as pd

from .config import (
    COL_BOOKING_DATE,
    COL_CHANNEL,
    COL_CLIENT_NAME,
    COL_LOCATION,
    COL_MANAGER_RATING,
    COL_NATURE,
    COL_STATUS,
    COL_TOTAL_BOOK,
    COL_TOTAL_BOOK_PLUS,
    COL_TOTAL_PAID,
    PAYMENT_COLUMNS,
    REVIEW_COLUMNS,
)
from .loaders.utils import clean_amount, clean_text, has_value, parse_booking_date

logger = logging.getLogger(__name__)

BOOKINGS_SCHEMA = [
    "booking_date",
    "location",
    "client_name",
    "status",
    "channel",
    "nature",
    "total_book",
    "total_paid",
    "total_book_plus",
    *PAYMENT_COLUMNS.keys(),
    "has_manager_rating",
    "has_review",
]

# Default window for the "default" time-period preset
DEFAULT_PERIOD_DAYS = 90


def empty_bookings_frame() -> pd.DataFrame:
    """Zero-row bookings table with the column dtypes of a populated one."""
    dtypes = {col: "float64" for col in ["total_book", "total_paid", "total_book_plus", *PAYMENT_COLUMNS]}
    dtypes.update({
        "booking_date": "datetime64[ns]",
        "location": "object",
        "client_name": "object",
        "status": "object",
        "channel": "object",
        "nature": "object",
        "has_manager_rating": "bool",
        "has_review": "bool",
    })
    return pd.DataFrame({col: pd.Series(dtype=dtypes[col]) for col in BOOKINGS_SCHEMA})


def build_bookings_frame(
    records: Iterable[dict],
    strict: bool = False,
) -> pd.DataFrame:
    """Build the bookings table from header-keyed sheet records.

    Every currency-like column goes through clean_amount, so negative
    amounts count as 0. Categorical columns default to "Unknown" and
    booking_date is NaT when unparseable.

    Parameters
    ----------
    records : Records as produced by the loaders (column name -> string).
    strict : Raise DataQualityError on malformed numbers instead of zeroing.

    Returns
    -------
    DataFrame with columns BOOKINGS_SCHEMA, one row per record.
    """
    rows = []
    for record in records:
        row = {
            "booking_date": parse_booking_date(record.get(COL_BOOKING_DATE)),
            "location": clean_text(record.get(COL_LOCATION)),
            "client_name": clean_text(record.get(COL_CLIENT_NAME), default=""),
            "status": clean_text(record.get(COL_STATUS)),
            "channel": clean_text(record.get(COL_CHANNEL)),
            "nature": clean_text(record.get(COL_NATURE)),
            "total_book": clean_amount(record.get(COL_TOTAL_BOOK), strict),
            "total_paid": clean_amount(record.get(COL_TOTAL_PAID), strict),
            "total_book_plus": clean_amount(record.get(COL_TOTAL_BOOK_PLUS), strict),
            "has_manager_rating": has_value(record.get(COL_MANAGER_RATING)),
            "has_review": any(has_value(record.get(col)) for col in REVIEW_COLUMNS),
        }
        for key, column in PAYMENT_COLUMNS.items():
            row[key] = clean_amount(record.get(column), strict)
        rows.append(row)

    if not rows:
        logger.warning("No booking records. Returning empty bookings table with schema.")
        return empty_bookings_frame()

    df = pd.DataFrame(rows, columns=BOOKINGS_SCHEMA)
    df["booking_date"] = pd.to_datetime(df["booking_date"])

    undated = int(df["booking_date"].isna().sum())
    if undated:
        logger.info("%d bookings have no parseable booking date", undated)
    logger.info("Built bookings table with %d rows", len(df))
    return df


def _parse_bound(value: str | date | None, label: str) -> pd.Timestamp | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    ts = parse_booking_date(value if isinstance(value, str) else pd.Timestamp(value))
    if ts is None:
        logger.warning("Ignoring unparseable %s date: %r", label, value)
        return None
    return ts.normalize()


def filter_by_date_range(
    df: pd.DataFrame,
    start_date: str | date | None = "",
    end_date: str | date | None = "",
) -> pd.DataFrame:
    """Keep bookings whose booking date falls in [start_date, end_date].

    Both bounds are inclusive calendar days. An empty (or None) bound is
    open-ended; with both empty the table is returned unfiltered, including
    rows without a parseable date. Once any bound applies, undated rows are
    dropped.
    """
    start = _parse_bound(start_date, "start")
    end = _parse_bound(end_date, "end")
    if start is None and end is None:
        return df

    days = df["booking_date"].dt.normalize()
    mask = days.notna()
    if start is not None:
        mask &= days >= start
    if end is not None:
        mask &= days <= end

    result = df[mask]
    logger.info(
        "Date filter %s..%s kept %d of %d bookings",
        start_date or "*", end_date or "*", len(result), len(df),
    )
    return result


def resolve_time_period(period: str, today: date | None = None) -> tuple[str, str]:
    """Translate a quick-select period into (start_date, end_date) ISO strings.

    Periods: today, this-month, last-month, this-year, all (no filter).
    Anything else selects the last DEFAULT_PERIOD_DAYS days.
    """
    today = today or date.today()

    if period == "all":
        return "", ""
    if period == "today":
        start, end = today, today
    elif period == "this-month":
        start, end = today.replace(day=1), today
    elif period == "last-month":
        end = today.replace(day=1) - timedelta(days=1)
        start = end.replace(day=1)
    elif period == "this-year":
        start, end = today.replace(month=1, day=1), today
    else:
        start, end = today - timedelta(days=DEFAULT_PERIOD_DAYS), today

    return start.isoformat(), end.isoformat()
