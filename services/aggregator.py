"""Aggregation of spending entries into totals and per-category breakdowns."""

import sqlite3
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from db.retry import DEFAULT_READ_RETRIES, retry_on_unavailable
from errors import AggregationOverflow
from models.category import Category
from models.stat import CategoryStat, Stat
from services.ledger import ENTRY_FROM, window_clause

# Largest total an SQLite INTEGER can represent
MAX_TOTAL_CENTS = 2**63 - 1


def checked_sum(amounts: Iterable[int]) -> int:
    """Add integer amounts, failing instead of exceeding MAX_TOTAL_CENTS.

    Raises:
        AggregationOverflow: If the running total leaves the safe range.
    """
    total = 0
    for amount in amounts:
        total += amount
        if total > MAX_TOTAL_CENTS:
            raise AggregationOverflow(
                f"Total exceeds the maximum of {MAX_TOTAL_CENTS} cents"
            )
    return total


def month_window(year: int, month: int) -> Tuple[int, int]:
    """Get the UTC half-open window [first of month, first of next month).

    Returns:
        (start, end) as seconds since epoch.
    """
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    end = start + relativedelta(months=1)
    return int(start.timestamp()), int(end.timestamp())


class Aggregator:
    """Sums over non-deleted entries, scoped to a conversation."""

    def __init__(self, db_manager, read_retries: int = DEFAULT_READ_RETRIES):
        """Initialize the aggregator.

        Args:
            db_manager: Database manager instance for database operations.
            read_retries: Retries for reads that hit StoreUnavailable.
        """
        self.db_manager = db_manager
        self.read_retries = read_retries

    def total(
        self,
        conversation_id: int,
        start: Optional[int] = None,
        end: Optional[int] = None,
    ) -> int:
        """Sum all non-deleted entries in the window [start, end).

        Returns:
            Total in cents, 0 when nothing matches.

        Raises:
            AggregationOverflow: If the total exceeds the safe integer range.
        """
        return self.stat(conversation_id, start, end).amount_cents

    def breakdown_by_category(
        self,
        conversation_id: int,
        start: Optional[int] = None,
        end: Optional[int] = None,
    ) -> Dict[Category, int]:
        """Sum non-deleted entries per category.

        Categories without matching entries are left out.

        Returns:
            Mapping of Category to cents, ordered by category id.
        """
        stat = self.stat(conversation_id, start, end)
        return {item.category: item.amount_cents for item in stat.items}

    def stat(
        self,
        conversation_id: int,
        start: Optional[int] = None,
        end: Optional[int] = None,
    ) -> Stat:
        """Get per-category entry counts and amounts for the window [start, end)."""
        items = [
            CategoryStat(
                category=Category(
                    id=row[0], conversation_id=row[1], alias=row[2], name=row[3]
                ),
                n_items=row[4],
                amount_cents=row[5],
            )
            for row in self._grouped_rows(conversation_id, start, end)
        ]
        return Stat(items=items, amount_cents=checked_sum(i.amount_cents for i in items))

    def stat_for_month(self, conversation_id: int, year: int, month: int) -> Stat:
        """Get statistics for one calendar month (UTC)."""
        start, end = month_window(year, month)
        return self.stat(conversation_id, start, end)

    def stat_this_month(self, conversation_id: int, now: Optional[datetime] = None) -> Stat:
        """Get statistics for the current calendar month (UTC).

        Args:
            conversation_id: Conversation to aggregate.
            now: Reference time, defaults to the current time.
        """
        now = now or datetime.now(timezone.utc)
        return self.stat_for_month(conversation_id, now.year, now.month)

    @retry_on_unavailable()
    def _grouped_rows(self, conversation_id, start, end) -> List[tuple]:
        clause, params = window_clause(start, end)
        sql = f"""
            SELECT c.id, c.conversation_id, c.alias, c.name,
                   COUNT(e.id), SUM(e.amount_cents)
            {ENTRY_FROM}
            WHERE c.conversation_id = ? AND e.is_deleted = 0 {clause}
            GROUP BY c.id
            ORDER BY c.id
        """

        with self.db_manager.connect() as conn:
            try:
                return conn.execute(sql, [conversation_id, *params]).fetchall()
            except sqlite3.OperationalError as e:
                # SQLite's SUM() raises instead of wrapping
                if "integer overflow" in str(e):
                    raise AggregationOverflow(
                        f"Category total exceeds the maximum of {MAX_TOTAL_CENTS} cents"
                    ) from e
                raise
