from datetime import date, timedelta

from bookgx_dashboard.dashboard import build_dashboard_stats
from bookgx_dashboard.simulator import SAMPLE_WINDOW_DAYS, generate_sample_bookings
from bookgx_dashboard.transforms import build_bookings_frame, resolve_time_period


def test_default_window_ends_today():
    df = build_bookings_frame(generate_sample_bookings())
    today = date.today()
    assert df["booking_date"].max().date() <= today
    assert df["booking_date"].min().date() >= today - timedelta(days=SAMPLE_WINDOW_DAYS - 1)


def test_last_90_days_preset_finds_sample_bookings():
    start, end = resolve_time_period("default")
    assert build_dashboard_stats(generate_sample_bookings(), start, end)["recordCount"] > 0


def test_explicit_window():
    records = generate_sample_bookings(n_bookings=50, start_date="2025-01-01", end_date="2025-01-31")
    df = build_bookings_frame(records)
    assert len(df) == 50
    assert set(df["booking_date"].dt.strftime("%Y-%m")) == {"2025-01"}


def test_same_values_on_every_call():
    assert generate_sample_bookings() == generate_sample_bookings()
