"""Data ingestion loaders for BookGX booking sources."""

from .csv_parser import parse_csv, parse_csv_line, rows_from_values
from .sheets import CsvExportSource, GoogleConnection, SheetsApiSource, SheetsV4Client
from .sheets import fetch_rows
from .users import User, fetch_users, users_from_rows
from .utils import clean_amount, clean_numeric, clean_text, parse_booking_date
from .workbook import load_bookings_workbook

__all__ = [
    "parse_csv",
    "parse_csv_line",
    "rows_from_values",
    "CsvExportSource",
    "GoogleConnection",
    "SheetsApiSource",
    "SheetsV4Client",
    "fetch_rows",
    "User",
    "fetch_users",
    "users_from_rows",
    "clean_amount",
    "clean_numeric",
    "clean_text",
    "parse_booking_date",
    "load_bookings_workbook",
]
