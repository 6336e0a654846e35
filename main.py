"""
BookGX Plus — End-to-end analytics pipeline.

Fetches the bookings sheet (or an .xlsx export), builds the dashboard
statistics and prints smoke-test summaries.

Usage:
    python main.py [--start YYYY-MM-DD] [--end YYYY-MM-DD] [--period PERIOD]
                   [--workbook PATH] [--json]
"""

import argparse
import json
import logging

from bookgx_dashboard.config import (
    CURRENCY,
    SHEET_GID,
    SPREADSHEET_ID,
    STRICT_PARSING,
)
from bookgx_dashboard.dashboard import (
    build_dashboard_stats,
    get_header_summary,
    load_dashboard,
)
from bookgx_dashboard.kpis import breakdown_percentages
from bookgx_dashboard.loaders import CsvExportSource, load_bookings_workbook
from bookgx_dashboard.transforms import resolve_time_period

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="BookGX Plus analytics pipeline")
    parser.add_argument("--start", default="", help="Inclusive start date (YYYY-MM-DD)")
    parser.add_argument("--end", default="", help="Inclusive end date (YYYY-MM-DD)")
    parser.add_argument(
        "--period",
        choices=["today", "this-month", "last-month", "this-year", "all", "default"],
        help="Quick-select period; overrides --start/--end",
    )
    parser.add_argument("--workbook", help="Read bookings from an .xlsx export instead of the sheet")
    parser.add_argument("--json", action="store_true", help="Print the stats object as JSON")
    return parser.parse_args(argv)


def _print_breakdown(title: str, values: dict) -> None:
    print(f"\n{title}:")
    shares = breakdown_percentages(values)
    for name, value in values.items():
        print(f"  {name:24s} {value:>14,.2f}  {shares[name]:6.2f}%")


def main(argv=None) -> None:
    """Run the full analytics pipeline and print smoke-test outputs."""
    args = parse_args(argv)
    start, end = args.start, args.end
    if args.period:
        start, end = resolve_time_period(args.period)

    if args.workbook:
        records = load_bookings_workbook(args.workbook)
        dashboard = build_dashboard_stats(records, start, end, strict=STRICT_PARSING)
    else:
        source = CsvExportSource(SPREADSHEET_ID, gid=SHEET_GID or None) if SPREADSHEET_ID else None
        dashboard = load_dashboard(source, start, end, strict=STRICT_PARSING)

    if args.json:
        print(json.dumps(dashboard, ensure_ascii=False, indent=2, default=str))
        return

    stats = dashboard["stats"]
    header = get_header_summary(dashboard)

    print("=" * 70)
    print("  BOOKGX PLUS — Business Analytics Dashboard")
    print("  Analytics Pipeline Smoke Test")
    print("=" * 70)
    print(f"\nSource: {header['dataSource']} | records: {header['recordCount']}"
          f" | range: {start or '*'} .. {end or '*'}")
    print(f"Business health: {header['businessHealth']}%"
          f" ({'healthy' if header['isHealthy'] else 'needs attention'})")

    print("\n[ 1 ] KEY FIGURES")
    print("-" * 40)
    print(f"  Total revenue      {stats['totalRevenue']:>12,} {CURRENCY}")
    print(f"  Unique clients     {stats['totalUsers']:>12,}")
    print(f"  Conversion rate    {stats['conversionRate']:>12.2f}%")
    print(f"  Avg order value    {stats['avgOrderValue']:>12,.2f} {CURRENCY}")
    print(f"  Reviews            {stats['totalReviews']:>12,}")

    print("\n[ 2 ] BREAKDOWNS")
    print("-" * 40)
    _print_breakdown("Revenue by status", stats["revenueByStatus"])
    _print_breakdown("Revenue by location", dashboard["locationBreakdown"])
    _print_breakdown("Acquisition channels", dashboard["acquisitionChannels"])
    _print_breakdown("Booking nature", {s["name"]: s["value"] for s in stats["naturePieData"]})

    print("\n[ 3 ] CONVERSION FUNNEL")
    print("-" * 40)
    for stage in dashboard["conversion"]:
        print(f"  {stage['stage']:12s} {stage['users']:>8,}  {stage['rate']:>4}%")

    print("\n[ 4 ] PERFORMANCE")
    print("-" * 40)
    perf = dashboard["performance"]
    print(f"  Payment completion {perf['serverUptime']:>10.2f}%")
    print(f"  Avg order value    {perf['responseTime']:>10,} {CURRENCY}")
    print(f"  Cancellation rate  {perf['errorRate']:>10.2f}%")
    print(f"  Up-sell rate       {perf['throughput']:>10.2f}%")

    print("\n[ 5 ] MONTHLY REVENUE")
    print("-" * 40)
    for month in dashboard["revenue"]:
        print(f"  {month['month']:4s} {month['value']:>12,}  {month['growth']:+6.1f}%"
              f"  ({month['bookings']} bookings)")

    print("\n" + "=" * 70)
    print("  Pipeline complete.")
    print("=" * 70)


if __name__ == "__main__":
    main()
