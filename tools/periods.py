"""Spending analysis over calendar periods."""

from datetime import date
from typing import Dict

from services.aggregator import checked_sum, month_window


def get_monthly_totals(
    services,
    conversation_id: int,
    start_month: date,
    end_month: date,
) -> Dict[str, int]:
    """Get the total spent in each month of a period.

    Args:
        services: Services container with the aggregator.
        conversation_id: Conversation to aggregate.
        start_month: Start of period (date object, day component ignored).
        end_month: End of period, inclusive (day component ignored).

    Returns:
        Dictionary mapping month keys (format: "YYYY/MM") to cents, including
        months without spending as 0.

    Example:
        {
            "2025/01": 125000,
            "2025/02": 0,
            "2025/03": 98050,
        }
    """
    result = {}

    current_year = start_month.year
    current_month = start_month.month

    while (current_year, current_month) <= (end_month.year, end_month.month):
        month_key = f"{current_year:04d}/{current_month:02d}"
        start, end = month_window(current_year, current_month)
        result[month_key] = services.aggregator.total(conversation_id, start, end)

        if current_month == 12:
            current_year += 1
            current_month = 1
        else:
            current_month += 1

    return result


def get_period_total(monthly_totals: Dict[str, int]) -> int:
    """Sum the monthly totals of a period with overflow checks."""
    return checked_sum(monthly_totals.values())
