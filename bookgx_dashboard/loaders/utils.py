"""
Shared utilities for data ingestion: numeric cleaning, date normalisation,
text defaults, header detection.
"""

import logging
import math
from typing import Any

import pandas as pd

from ..config import UNKNOWN_LABEL
from ..exceptions import DataQualityError

logger = logging.getLogger(__name__)

# Characters the sheet leaves around display-formatted numbers ("1,234", '500')
_NUMERIC_NOISE = str.maketrans("", "", ",'\"")


def clean_numeric(val: Any, strict: bool = False) -> float:
    """Coerce a currency-like cell to float.

    Commas and quote characters are stripped before parsing. Anything that
    still fails to parse (or parses to NaN/inf) becomes 0.0, unless
    ``strict`` is set, in which case a non-blank unparseable value raises
    DataQualityError. Blank cells are 0.0 in both modes.
    """
    if val is None:
        return 0.0
    if isinstance(val, bool):
        return float(val)
    if isinstance(val, (int, float)):
        number = float(val)
    else:
        text = str(val).translate(_NUMERIC_NOISE).strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            if strict:
                raise DataQualityError(f"Cannot parse numeric value: {val!r}")
            return 0.0

    if math.isnan(number) or math.isinf(number):
        if strict:
            raise DataQualityError(f"Non-finite numeric value: {val!r}")
        return 0.0
    return number


def clean_amount(val: Any, strict: bool = False) -> float:
    """clean_numeric for currency cells, which are never negative.

    A negative amount becomes 0.0, or raises DataQualityError when
    ``strict`` is set.
    """
    number = clean_numeric(val, strict)
    if number < 0:
        if strict:
            raise DataQualityError(f"Negative amount: {val!r}")
        logger.debug("Negative amount %r counted as 0", val)
        return 0.0
    return number


def clean_text(val: Any, default: str = UNKNOWN_LABEL) -> str:
    """Trim a categorical cell; blank or missing values become ``default``."""
    if val is None:
        return default
    if isinstance(val, float) and math.isnan(val):
        return default
    text = str(val).strip()
    return text or default


def has_value(val: Any) -> bool:
    """True when a cell holds anything other than whitespace."""
    if val is None:
        return False
    if isinstance(val, float) and math.isnan(val):
        return False
    return bool(str(val).strip())


def parse_booking_date(val: Any) -> pd.Timestamp | None:
    """Convert a booking-date cell to a pd.Timestamp.

    Accepts ISO strings, month-first ``m/d/Y`` strings, ``d-Mon-Y`` strings,
    datetime objects and Excel serial numbers (1899-12-30 epoch). Returns None
    for blank or unparseable values.
    """
    if val is None:
        return None
    if isinstance(val, pd.Timestamp):
        return None if pd.isna(val) else val
    if isinstance(val, (int, float)) and not isinstance(val, bool):
        if math.isnan(val):
            return None
        try:
            return pd.Timestamp("1899-12-30") + pd.Timedelta(days=int(val))
        except (ValueError, OverflowError):
            logger.warning("Could not convert serial number %s to date", val)
            return None

    text = str(val).strip()
    if not text:
        return None
    try:
        ts = pd.Timestamp(text)
    except (ValueError, TypeError, OverflowError):
        logger.debug("Could not parse date value: %s", val)
        return None
    if pd.isna(ts):
        return None
    # Timezone-aware exports are compared as local calendar dates
    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    return ts


def find_header_row(
    sheet,
    signature: set[str],
    max_rows: int = 20,
) -> int | None:
    """Scan an openpyxl sheet for the row containing signature strings.

    Returns the 1-based row index where at least two cells match values
    in `signature`, or None if not found within `max_rows`.
    """
    for row_idx in range(1, max_rows + 1):
        matches = 0
        for cell in sheet[row_idx]:
            if cell.value is not None and str(cell.value).strip() in signature:
                matches += 1
        if matches >= 2:
            return row_idx
    return None
