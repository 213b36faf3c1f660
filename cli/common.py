"""Argument helpers shared by CLI commands."""

import argparse
from datetime import date, datetime, timezone


def parse_date(text: str) -> int:
    """Parse YYYY-MM-DD into seconds since epoch at UTC midnight.

    Raises:
        argparse.ArgumentTypeError: If the text is not a valid date.
    """
    try:
        day = date.fromisoformat(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Provide date in YYYY-MM-DD format: {text!r}")
    return int(datetime(day.year, day.month, day.day, tzinfo=timezone.utc).timestamp())


def format_timestamp(timestamp: int) -> str:
    """Format seconds since epoch as a UTC date."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).date().isoformat()
