"""
Configuration: source columns, chart palette, sheet endpoints, role cards.

Static tables live here as module constants. Anything deployment specific
(spreadsheet ids, passcode, state directory) is read from the environment,
optionally via a local .env file.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# ---------------------------------------------------------------------------
# Source columns (booking sheet headers)
# ---------------------------------------------------------------------------
COL_BOOKING_DATE = "Booking Date"
COL_LOCATION = "Location"
COL_CLIENT_NAME = "Client Name"
COL_STATUS = "Booking Status"
COL_TOTAL_BOOK = "Total Book"
COL_TOTAL_PAID = "Total Paid"
COL_TOTAL_BOOK_PLUS = "Total Book Plus"
COL_MANAGER_RATING = "Manager Rating"
COL_CLIENT_REVIEW = "Client Review"
COL_RATING = "Rating"
COL_CHANNEL = "How did you know us ?"
COL_NATURE = "Nature Booking"

# Payment method key (output) -> source column
PAYMENT_COLUMNS: dict[str, str] = {
    "cash": "Cash",
    "mada": "Mada",
    "tabby": "Tabby",
    "tamara": "Tamara",
    "bankTransfer": "Bank Transfer",
}

# Columns cleaned with clean_amount wherever they are consumed
CURRENCY_COLUMNS = [
    COL_TOTAL_BOOK,
    COL_TOTAL_PAID,
    COL_TOTAL_BOOK_PLUS,
    *PAYMENT_COLUMNS.values(),
]

REVIEW_COLUMNS = [COL_MANAGER_RATING, COL_CLIENT_REVIEW, COL_RATING]

UNKNOWN_LABEL = "Unknown"

# ---------------------------------------------------------------------------
# Booking lifecycle
# ---------------------------------------------------------------------------
STATUS_CONFIRMED = "Confirmed"
STATUS_COMPLETED = "Completed"
STATUS_CANCELED = "Canceled"
STATUS_RESCHEDULED = "Rescheduled"

FUNNEL_STAGES = ["Inquiries", "Confirmed", "Completed", "Paid", "Rated"]

# ---------------------------------------------------------------------------
# Chart presentation
# ---------------------------------------------------------------------------
# Colors are handed out by rank, so a category's color follows its position
# in the sorted breakdown rather than its name.
PIE_PALETTE = ["#8b5cf6", "#06b6d4", "#10b981", "#f59e0b", "#ef4444", "#6366f1"]

CURRENCY = "SAR"
REVENUE_TREND_MONTHS = 12
TOP_LOCATIONS = 7
HEALTHY_THRESHOLD = 80

DATA_SOURCE_SHEETS = "google_sheets"
DATA_SOURCE_SAMPLE = "mock_data"

# ---------------------------------------------------------------------------
# Google endpoints
# ---------------------------------------------------------------------------
CSV_EXPORT_URL = "https://docs.google.com/spreadsheets/d/{spreadsheet_id}/export"
SPREADSHEET_URL = "https://docs.google.com/spreadsheets/d/{spreadsheet_id}/edit"
SHEETS_SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets.readonly",
    "https://www.googleapis.com/auth/drive.readonly",
]
HTTP_TIMEOUT = 30
USER_AGENT = "BookGXDashboard/1.0"

# ---------------------------------------------------------------------------
# Roles and dashboard cards
# ---------------------------------------------------------------------------
CARD_CONNECTION_STATUS = "ConnectionStatus"
CARD_STATS_OVERVIEW = "StatsOverview"
CARD_REVENUE_CHART = "RevenueChart"
CARD_PERFORMANCE = "PerformanceIndicators"

BASE_CARDS = [CARD_CONNECTION_STATUS, CARD_STATS_OVERVIEW]

ROLE_CARDS: dict[str, list[str]] = {
    "admin": [*BASE_CARDS, CARD_REVENUE_CHART, CARD_PERFORMANCE],
    "branch manager": [*BASE_CARDS, CARD_REVENUE_CHART],
    "sales officer": [*BASE_CARDS, CARD_REVENUE_CHART],
    "artist manager": [*BASE_CARDS, CARD_REVENUE_CHART],
    "receiptionist": BASE_CARDS,
    "customer service": BASE_CARDS,
    "artist": BASE_CARDS,
}

SESSION_TTL_HOURS = 24

COUNTRIES = ("saudi", "egypt")
DEFAULT_SHEET_CONNECTIONS = [
    "Users",
    "Bookings",
    "Products",
    "Product Sales",
    "Gift Card Sales",
    "Coming Soon 1",
    "Coming Soon 2",
    "Coming Soon 3",
    "Coming Soon 4",
    "Coming Soon 5",
]

# ---------------------------------------------------------------------------
# Environment settings
# ---------------------------------------------------------------------------
SPREADSHEET_ID = os.getenv("BOOKGX_SPREADSHEET_ID", "")
SHEET_GID = os.getenv("BOOKGX_SHEET_GID", "")
USERS_SPREADSHEET_ID = os.getenv("BOOKGX_USERS_SPREADSHEET_ID", "")
USERS_PASSCODE = os.getenv("BOOKGX_USERS_PASSCODE", "")
STATE_DIR = Path(os.getenv("BOOKGX_STATE_DIR", Path.home() / ".bookgx"))
STRICT_PARSING = os.getenv("BOOKGX_STRICT_PARSING", "false").lower() == "true"
