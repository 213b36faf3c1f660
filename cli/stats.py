#!/usr/bin/env python3

from datetime import datetime, timezone

from cli.common import format_timestamp, parse_date
from logger import get_logger
from models.money import format_cents
from tools.periods import get_monthly_totals, get_period_total

logger = get_logger(__name__)


def _report(stat):
    if len(stat) == 0:
        logger.info("No spending in this period.")
        return
    for line in str(stat).splitlines():
        logger.info(line)


def cmd_month(args, services):
    """Show per-category statistics for a month (default: this month)."""
    now = datetime.now(timezone.utc)
    year = args.year or now.year
    month = args.month or now.month

    logger.info(f"Spending in {year:04d}-{month:02d}")
    _report(services.aggregator.stat_for_month(args.conversation_id, year, month))


def cmd_period(args, services):
    """Show per-category statistics for [FROM, TO)."""
    logger.info(
        f"Spending from {format_timestamp(args.date_from)} "
        f"to {format_timestamp(args.date_to)}"
    )
    _report(services.aggregator.stat(args.conversation_id, args.date_from, args.date_to))


def cmd_monthly(args, services):
    """Show the total of each month between FROM and TO (inclusive)."""
    start = datetime.fromtimestamp(args.date_from, tz=timezone.utc).date()
    end = datetime.fromtimestamp(args.date_to, tz=timezone.utc).date()

    totals = get_monthly_totals(services, args.conversation_id, start, end)
    for month_key, amount_cents in totals.items():
        logger.info(f"{month_key}: {format_cents(amount_cents)}")
    logger.info(f"Total: {format_cents(get_period_total(totals))}")


def setup_parser(subparsers):
    """Setup stats subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "stats",
        help="Spending statistics",
        description="Aggregate spending by category and period",
    )

    stats_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available statistics commands",
        dest="subcommand",
        required=True,
    )

    # stats month
    month_parser = stats_subparsers.add_parser(
        "month", help="Statistics for a month (default: this month)"
    )
    month_parser.add_argument("--year", type=int, help="Year, e.g. 2025")
    month_parser.add_argument(
        "--month", type=int, choices=range(1, 13), help="Month (1-12)"
    )
    month_parser.set_defaults(func=cmd_month)

    # stats period
    period_parser = stats_subparsers.add_parser(
        "period", help="Statistics between two dates"
    )
    period_parser.add_argument("date_from", type=parse_date, help="Start date (inclusive)")
    period_parser.add_argument("date_to", type=parse_date, help="End date (exclusive)")
    period_parser.set_defaults(func=cmd_period)

    # stats monthly
    monthly_parser = stats_subparsers.add_parser(
        "monthly", help="Monthly totals between two months"
    )
    monthly_parser.add_argument("date_from", type=parse_date, help="Start month (YYYY-MM-DD)")
    monthly_parser.add_argument("date_to", type=parse_date, help="End month, inclusive (YYYY-MM-DD)")
    monthly_parser.set_defaults(func=cmd_monthly)
