"""
BookGX Plus — Booking Analytics Dashboard

Analytics backend that turns the bookings Google Sheet into a single,
dashboard-ready statistics object (revenue, breakdowns, funnel, ratios).

To swap the sheet for another feed:
    Provide any object with a fetch_rows() method returning header-keyed
    string records (see loaders.sheets) and pass it to
    dashboard.load_dashboard(). The aggregation is unchanged.

To connect to Streamlit:
    Call dashboard.load_dashboard(source, start, end) and render the
    returned dict; app.py does exactly this.

To add a breakdown:
    Add the source column to config, normalise it in
    transforms.build_bookings_frame, then call kpis.breakdown() and
    kpis.build_pie_slices() for it in dashboard.build_dashboard_stats.
"""
