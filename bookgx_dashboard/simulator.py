"""
Built-in sample booking data for the BookGX dashboard.

Used when the live sheet cannot be fetched. Records are shaped exactly like
the CSV export (string cells, display-formatted amounts) so they travel
through the same parser-to-aggregator path as live data. All values are
synthetic. Dates fall in a window ending today; a fixed seed keeps every
other value identical from call to call.
"""

from datetime import date, timedelta

import numpy as np
import pandas as pd

from .config import (
    COL_BOOKING_DATE,
    COL_CHANNEL,
    COL_CLIENT_NAME,
    COL_CLIENT_REVIEW,
    COL_LOCATION,
    COL_MANAGER_RATING,
    COL_NATURE,
    COL_STATUS,
    COL_TOTAL_BOOK,
    COL_TOTAL_BOOK_PLUS,
    COL_TOTAL_PAID,
    PAYMENT_COLUMNS,
    STATUS_CANCELED,
    STATUS_COMPLETED,
    STATUS_CONFIRMED,
    STATUS_RESCHEDULED,
)

_SEED = 42

# Sample bookings cover this many days up to and including today
SAMPLE_WINDOW_DAYS = 240

# ---------------------------------------------------------------------------
# Typical business parameters
# ---------------------------------------------------------------------------
_LOCATIONS = ["Riyadh", "Jeddah", "Dammam", "Khobar", "Makkah"]
_LOCATION_WEIGHTS = [0.35, 0.25, 0.15, 0.15, 0.10]

_STATUSES = [STATUS_COMPLETED, STATUS_CONFIRMED, STATUS_CANCELED, STATUS_RESCHEDULED]
_STATUS_WEIGHTS = [0.60, 0.22, 0.10, 0.08]

_CHANNELS = ["Instagram", "Snapchat", "Google", "Friend Referral", "TikTok", "Walk-in"]
_CHANNEL_WEIGHTS = [0.30, 0.20, 0.18, 0.15, 0.12, 0.05]

_NATURES = ["New", "Returning"]
_NATURE_WEIGHTS = [0.55, 0.45]

_SERVICE_PRICES = [350, 450, 600, 850, 1200, 1500, 2300]

_REVIEWS = [
    "Excellent service",
    "Very professional team",
    "Will book again",
    "Good but waited a bit",
]


def _money(amount: float) -> str:
    """Format like the sheet's display value: thousands separators, no decimals."""
    return f"{amount:,.0f}"


def generate_sample_bookings(
    n_bookings: int = 240,
    start_date: str | date | None = None,
    end_date: str | date | None = None,
) -> list[dict[str, str]]:
    """Generate the sample booking records.

    The window defaults to the SAMPLE_WINDOW_DAYS days ending today, so the
    quick-select periods (this month, last 90 days, ...) find bookings.
    Amounts, statuses and day offsets are seeded and repeat on every call.

    Statuses drive the downstream fields so the lifecycle stays consistent:
    only completed bookings are fully paid and rated, confirmed ones may hold
    a deposit, cancellations carry no payment.
    """
    end_date = end_date or date.today()
    start_date = start_date or pd.Timestamp(end_date) - timedelta(days=SAMPLE_WINDOW_DAYS - 1)

    rng = np.random.default_rng(_SEED)
    days = pd.date_range(start_date, end_date, freq="D")
    clients = [f"Client {i:03d}" for i in range(1, n_bookings // 2 + 1)]

    records = []
    for _ in range(n_bookings):
        status = str(rng.choice(_STATUSES, p=_STATUS_WEIGHTS))
        total_book = float(rng.choice(_SERVICE_PRICES))
        plus = float(rng.choice([0, 0, 0, 150, 300])) if status != STATUS_CANCELED else 0.0

        if status == STATUS_COMPLETED:
            paid = total_book + plus
        elif status == STATUS_CONFIRMED and rng.random() < 0.5:
            paid = round(total_book * 0.3)
        else:
            paid = 0.0

        rated = status == STATUS_COMPLETED and rng.random() < 0.7
        booking_day = days[int(rng.integers(0, len(days)))]

        record = {
            COL_BOOKING_DATE: f"{booking_day.month}/{booking_day.day}/{booking_day.year}",
            COL_LOCATION: str(rng.choice(_LOCATIONS, p=_LOCATION_WEIGHTS)),
            COL_CLIENT_NAME: str(rng.choice(clients)),
            COL_STATUS: status,
            COL_TOTAL_BOOK: _money(total_book),
            COL_TOTAL_PAID: _money(paid),
            COL_TOTAL_BOOK_PLUS: _money(plus) if plus else "",
            COL_MANAGER_RATING: str(int(rng.integers(3, 6))) if rated else "",
            COL_CLIENT_REVIEW: str(rng.choice(_REVIEWS)) if rated and rng.random() < 0.5 else "",
            COL_CHANNEL: str(rng.choice(_CHANNELS, p=_CHANNEL_WEIGHTS)),
            COL_NATURE: str(rng.choice(_NATURES, p=_NATURE_WEIGHTS)),
        }

        # Paid amount lands on a single payment method
        method = str(rng.choice(list(PAYMENT_COLUMNS.values())))
        for column in PAYMENT_COLUMNS.values():
            record[column] = _money(paid) if column == method and paid else ""

        records.append(record)

    return records
