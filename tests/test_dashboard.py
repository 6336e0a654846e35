from datetime import datetime
from unittest import mock

import pytest

from bookgx_dashboard.dashboard import build_dashboard_stats, get_header_summary, load_dashboard
from bookgx_dashboard.exceptions import DataQualityError, FetchError

STATS_KEYS = {
    "totalRevenue", "totalUsers", "conversionRate", "avgOrderValue",
    "totalReviews", "reviewsByStatus", "revenueByStatus",
    "acquisitionChannels", "natureBooking", "locationData",
    "acquisitionPieData", "naturePieData", "statusPieData",
}
TOP_KEYS = {
    "revenue", "users", "conversion", "performance", "stats", "recordCount",
    "dataSource", "locationBreakdown", "paymentMethods", "acquisitionChannels",
    "bookingStatuses", "businessHealth",
}


def test_revenue_by_status_example():
    records = [
        {"Booking Status": "Confirmed", "Total Book": "1,000"},
        {"Booking Status": "Confirmed", "Total Book": "500"},
        {"Booking Status": "Canceled", "Total Book": "200"},
    ]
    result = build_dashboard_stats(records)
    assert result["stats"]["revenueByStatus"] == {"Confirmed": 1500, "Canceled": 200}
    assert result["stats"]["totalRevenue"] == 1700


def test_output_shape(booking_records):
    result = build_dashboard_stats(booking_records)
    assert set(result) == TOP_KEYS
    assert set(result["stats"]) == STATS_KEYS
    assert set(result["performance"]) == {"serverUptime", "responseTime", "errorRate", "throughput"}
    assert result["dataSource"] == "google_sheets"
    assert result["recordCount"] == 4


def test_derived_scalars(booking_records):
    stats = build_dashboard_stats(booking_records)["stats"]
    assert stats["totalRevenue"] == 2000
    # Blank client names are not counted
    assert stats["totalUsers"] == 2
    assert stats["conversionRate"] == 50.0
    assert stats["avgOrderValue"] == 500.0
    assert stats["totalReviews"] == 2
    assert stats["acquisitionChannels"] == {"Instagram": 50.0, "Google": 25.0, "Unknown": 25.0}
    assert stats["natureBooking"] == {"New": 50.0, "Returning": 50.0}


def test_payment_methods(booking_records):
    payments = build_dashboard_stats(booking_records)["paymentMethods"]
    assert payments == {"cash": 1000.0, "mada": 150.0, "tabby": 300.0, "tamara": 0.0, "bankTransfer": 0.0}


def test_breakdown_percentages_sum_to_100(sample_records):
    stats = build_dashboard_stats(sample_records)["stats"]
    for key in ("locationData", "acquisitionPieData", "naturePieData", "statusPieData"):
        total = sum(s["percentage"] for s in stats[key])
        assert total == pytest.approx(100, abs=0.5), key
    for key in ("acquisitionChannels", "natureBooking"):
        assert sum(stats[key].values()) == pytest.approx(100, abs=0.5), key


def test_date_range_applied(booking_records):
    result = build_dashboard_stats(booking_records, "2025-03-01", "2025-03-31")
    assert result["recordCount"] == 2
    assert result["stats"]["totalRevenue"] == 1500


def test_empty_input_is_zeroed():
    result = build_dashboard_stats([])
    stats = result["stats"]
    assert result["recordCount"] == 0
    assert stats["totalRevenue"] == 0
    assert stats["totalUsers"] == 0
    assert stats["conversionRate"] == 0
    assert stats["locationData"] == []
    assert result["revenue"] == []
    assert result["performance"] == {
        "serverUptime": 0.0, "responseTime": 0, "errorRate": 0.0, "throughput": 0.0,
    }
    assert set(result["paymentMethods"].values()) == {0.0}


def test_strict_mode_propagates():
    with pytest.raises(DataQualityError):
        build_dashboard_stats([{"Total Book": "n/a"}], strict=True)


def test_lenient_mode_zeroes_bad_values():
    result = build_dashboard_stats([{"Booking Status": "Confirmed", "Total Book": "n/a"}])
    assert result["stats"]["totalRevenue"] == 0
    assert result["recordCount"] == 1


def test_load_dashboard_live(booking_records):
    source = mock.Mock()
    source.fetch_rows.return_value = booking_records
    result = load_dashboard(source)
    assert result["dataSource"] == "google_sheets"
    assert result["recordCount"] == 4


def test_load_dashboard_falls_back_on_fetch_error(sample_records):
    source = mock.Mock()
    source.fetch_rows.side_effect = FetchError("boom")
    result = load_dashboard(source)
    assert result["dataSource"] == "mock_data"
    assert result["recordCount"] == len(sample_records)


def test_load_dashboard_falls_back_on_empty_sheet():
    source = mock.Mock()
    source.fetch_rows.return_value = []
    assert load_dashboard(source)["dataSource"] == "mock_data"


def test_load_dashboard_without_source():
    assert load_dashboard(None)["dataSource"] == "mock_data"


def test_sample_fallback_is_stable():
    first = load_dashboard(None)
    second = load_dashboard(None)
    assert first == second


def test_header_summary():
    when = datetime(2025, 5, 1, 9, 30)
    summary = get_header_summary({"dataSource": "google_sheets", "recordCount": 3, "businessHealth": 85}, when)
    assert summary == {
        "dataSource": "google_sheets",
        "recordCount": 3,
        "lastUpdated": when,
        "businessHealth": 85,
        "isHealthy": True,
    }
    assert not get_header_summary({"businessHealth": 79})["isHealthy"]


def test_negative_amounts_count_as_zero():
    records = [
        {"Location": "Riyadh", "Total Book": "1,000", "Cash": "-50"},
        {"Location": "Jeddah", "Total Book": "-200"},
    ]
    result = build_dashboard_stats(records)

    assert result["stats"]["totalRevenue"] == 1000
    assert result["locationBreakdown"] == {"Riyadh": 1000.0, "Jeddah": 0.0}
    assert result["paymentMethods"]["cash"] == 0.0
    for item in result["stats"]["locationData"]:
        assert item["value"] >= 0
        assert 0 <= item["percentage"] <= 100


def test_negative_amounts_rejected_in_strict_mode():
    with pytest.raises(DataQualityError):
        build_dashboard_stats([{"Total Book": "-200"}], strict=True)
