"""Ledger store for spending entries."""

from typing import Iterator, List, Optional

from db.retry import DEFAULT_READ_RETRIES, retry_on_unavailable
from errors import InvalidAmount, InvalidCategory, NotFound
from logger import get_logger
from models.spending_entry import SpendingEntry

logger = get_logger(__name__)

# Largest value an SQLite INTEGER column can hold
MAX_AMOUNT_CENTS = 2**63 - 1

_ENTRY_SELECT_FIELDS = "e.id, e.occurred_at, e.category_id, e.amount_cents, e.is_deleted"

ENTRY_FROM = """
    FROM spending_entries e
    JOIN categories c ON c.id = e.category_id
"""


def window_clause(start: Optional[int], end: Optional[int]):
    """Build the SQL filter for the half-open window [start, end).

    Returns:
        Tuple of (SQL fragment starting with " AND" or empty, parameter list).
    """
    clause = ""
    params = []
    if start is not None:
        clause += " AND e.occurred_at >= ?"
        params.append(start)
    if end is not None:
        clause += " AND e.occurred_at < ?"
        params.append(end)
    return clause, params


class EntryQuery:
    """Lazy, restartable view over non-deleted entries of a conversation.

    Every iteration runs the query again, one page at a time, ordered by
    (occurred_at, id). Iterating twice never has side effects.
    """

    def __init__(
        self,
        ledger: "LedgerStore",
        conversation_id: int,
        category_id: Optional[int] = None,
        start: Optional[int] = None,
        end: Optional[int] = None,
        page_size: int = 500,
    ):
        self.ledger = ledger
        self.conversation_id = conversation_id
        self.category_id = category_id
        self.start = start
        self.end = end
        self.page_size = page_size

    def __iter__(self) -> Iterator[SpendingEntry]:
        after = None
        while True:
            page = self.ledger._fetch_page(self, after)
            yield from page
            if len(page) < self.page_size:
                return
            after = (page[-1].occurred_at, page[-1].id)


class LedgerStore:
    """Service for recording, deleting and listing spending entries."""

    def __init__(self, db_manager, read_retries: int = DEFAULT_READ_RETRIES):
        """Initialize the ledger store.

        Args:
            db_manager: Database manager instance for database operations.
            read_retries: Retries for reads that hit StoreUnavailable.
        """
        self.db_manager = db_manager
        self.read_retries = read_retries

    def record(
        self,
        conversation_id: int,
        category_id: int,
        occurred_at: int,
        amount_cents: int,
    ) -> SpendingEntry:
        """Record a new spending entry.

        Args:
            conversation_id: Conversation the entry is recorded under.
            category_id: Category of the entry, owned by the same conversation.
            occurred_at: When the expense happened, seconds since epoch.
            amount_cents: Non-negative amount in cents.

        Returns:
            The created SpendingEntry with its id populated.

        Raises:
            InvalidAmount: If amount_cents is not a non-negative integer.
            InvalidCategory: If the category does not belong to the conversation.
            StoreUnavailable: If the write fails. Writes are never retried.
        """
        if isinstance(amount_cents, bool) or not isinstance(amount_cents, int):
            raise InvalidAmount(f"Amount must be an integer number of cents: {amount_cents!r}")
        if amount_cents < 0:
            raise InvalidAmount(f"Amount cannot be negative: {amount_cents}")
        if amount_cents > MAX_AMOUNT_CENTS:
            raise InvalidAmount(f"Amount is too large: {amount_cents}")
        if isinstance(occurred_at, bool) or not isinstance(occurred_at, int):
            raise ValueError(f"occurred_at must be an integer timestamp: {occurred_at!r}")

        with self.db_manager.connect() as conn:
            row = conn.execute(
                "SELECT conversation_id FROM categories WHERE id = ?",
                (category_id,),
            ).fetchone()
            if row is None or row[0] != conversation_id:
                raise InvalidCategory(
                    f"Category {category_id} does not belong to conversation {conversation_id}"
                )

            cursor = conn.execute(
                """
                INSERT INTO spending_entries (occurred_at, category_id, amount_cents, is_deleted)
                VALUES (?, ?, ?, 0)
                """,
                (occurred_at, category_id, amount_cents),
            )
            conn.commit()

        entry = SpendingEntry(
            id=cursor.lastrowid,
            occurred_at=occurred_at,
            category_id=category_id,
            amount_cents=amount_cents,
        )
        logger.info(f"Recorded entry {entry} in conversation {conversation_id}")
        return entry

    def soft_delete(self, entry_id: int, conversation_id: int) -> bool:
        """Mark an entry as deleted.

        Deleting an already deleted entry succeeds without effect.

        Returns:
            True if this call deleted the entry, False if it was already deleted.

        Raises:
            NotFound: If the entry does not exist in this conversation.
        """
        with self.db_manager.connect() as conn:
            row = conn.execute(
                f"SELECT e.is_deleted {ENTRY_FROM} WHERE e.id = ? AND c.conversation_id = ?",
                (entry_id, conversation_id),
            ).fetchone()
            if row is None:
                raise NotFound(f"No entry with ID {entry_id}")
            if row[0]:
                return False

            cursor = conn.execute(
                "UPDATE spending_entries SET is_deleted = 1 WHERE id = ? AND is_deleted = 0",
                (entry_id,),
            )
            conn.commit()

        deleted = cursor.rowcount > 0
        if deleted:
            logger.info(f"Deleted entry #{entry_id} in conversation {conversation_id}")
        return deleted

    def remove_last(self, conversation_id: int) -> Optional[SpendingEntry]:
        """Soft delete the most recently recorded entry of a conversation.

        Returns:
            The deleted entry, or None if there is nothing left to remove or
            a concurrent caller removed the same entry first.
        """
        with self.db_manager.connect() as conn:
            row = conn.execute(
                f"""
                SELECT {_ENTRY_SELECT_FIELDS}
                {ENTRY_FROM}
                WHERE c.conversation_id = ? AND e.is_deleted = 0
                ORDER BY e.id DESC
                LIMIT 1
                """,
                (conversation_id,),
            ).fetchone()
            if row is None:
                return None

            cursor = conn.execute(
                "UPDATE spending_entries SET is_deleted = 1 WHERE id = ? AND is_deleted = 0",
                (row[0],),
            )
            conn.commit()

        # Another caller removed the same entry first
        if cursor.rowcount == 0:
            return None

        entry = _row_to_entry(row)
        entry.is_deleted = True
        logger.info(f"Removed last entry {entry} in conversation {conversation_id}")
        return entry

    @retry_on_unavailable()
    def get(self, entry_id: int, conversation_id: int) -> SpendingEntry:
        """Get a single entry, deleted or not.

        Raises:
            NotFound: If the entry does not exist in this conversation.
        """
        with self.db_manager.connect() as conn:
            row = conn.execute(
                f"SELECT {_ENTRY_SELECT_FIELDS} {ENTRY_FROM} "
                "WHERE e.id = ? AND c.conversation_id = ?",
                (entry_id, conversation_id),
            ).fetchone()

        if row is None:
            raise NotFound(f"No entry with ID {entry_id}")
        return _row_to_entry(row)

    def list(
        self,
        conversation_id: int,
        category_id: Optional[int] = None,
        start: Optional[int] = None,
        end: Optional[int] = None,
    ) -> EntryQuery:
        """List non-deleted entries.

        Args:
            conversation_id: Conversation to list.
            category_id: Optional category filter.
            start: Optional inclusive lower bound on occurred_at.
            end: Optional exclusive upper bound on occurred_at.

        Returns:
            EntryQuery yielding entries ordered by occurred_at, then id.
        """
        return EntryQuery(self, conversation_id, category_id, start, end)

    @retry_on_unavailable()
    def _fetch_page(self, query: EntryQuery, after=None) -> List[SpendingEntry]:
        sql = f"""
            SELECT {_ENTRY_SELECT_FIELDS}
            {ENTRY_FROM}
            WHERE c.conversation_id = ? AND e.is_deleted = 0
        """
        params = [query.conversation_id]

        if query.category_id is not None:
            sql += " AND e.category_id = ?"
            params.append(query.category_id)

        clause, window_params = window_clause(query.start, query.end)
        sql += clause
        params.extend(window_params)

        if after is not None:
            sql += " AND (e.occurred_at > ? OR (e.occurred_at = ? AND e.id > ?))"
            params.extend([after[0], after[0], after[1]])

        sql += " ORDER BY e.occurred_at, e.id LIMIT ?"
        params.append(query.page_size)

        with self.db_manager.connect() as conn:
            rows = conn.execute(sql, params).fetchall()

        return [_row_to_entry(row) for row in rows]


def _row_to_entry(row: tuple) -> SpendingEntry:
    return SpendingEntry(
        id=row[0],
        occurred_at=row[1],
        category_id=row[2],
        amount_cents=row[3],
        is_deleted=bool(row[4]),
    )
