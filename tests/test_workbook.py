from datetime import datetime

import openpyxl

from bookgx_dashboard.dashboard import build_dashboard_stats
from bookgx_dashboard.loaders.workbook import load_bookings_workbook


def _write_workbook(path, with_title=False):
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Bookings"
    if with_title:
        ws.append(["BookGX booking export"])
        ws.append([])
    ws.append(["Booking Date", "Location", "Client Name", "Booking Status", "Total Book"])
    ws.append([datetime(2025, 3, 5), "Riyadh", "Client A", "Confirmed", 1000.0])
    ws.append([None, None, None, None, None])
    ws.append([datetime(2025, 3, 6, 14, 30), "Jeddah", "Client B", "Canceled", 250.5])
    wb.save(path)


def test_load_bookings_workbook(tmp_path):
    path = tmp_path / "bookings.xlsx"
    _write_workbook(path)

    records = load_bookings_workbook(str(path))

    assert records == [
        {"Booking Date": "2025-03-05", "Location": "Riyadh", "Client Name": "Client A",
         "Booking Status": "Confirmed", "Total Book": "1000"},
        {"Booking Date": "2025-03-06 14:30:00", "Location": "Jeddah", "Client Name": "Client B",
         "Booking Status": "Canceled", "Total Book": "250.5"},
    ]


def test_header_row_found_below_title(tmp_path):
    path = tmp_path / "bookings.xlsx"
    _write_workbook(path, with_title=True)

    records = load_bookings_workbook(str(path), sheet_name="Missing")

    assert len(records) == 2
    assert records[0]["Location"] == "Riyadh"


def test_workbook_records_feed_dashboard(tmp_path):
    path = tmp_path / "bookings.xlsx"
    _write_workbook(path)

    stats = build_dashboard_stats(load_bookings_workbook(str(path)), "2025-03-06", "2025-03-06")

    assert stats["recordCount"] == 1
    assert stats["stats"]["revenueByStatus"] == {"Canceled": 250.5}
