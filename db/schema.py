"""Schema manager: applies SQL migrations and verifies the resulting structure."""

import re
import sqlite3
from typing import List, Tuple

from errors import SchemaError
from logger import get_logger

logger = get_logger(__name__)

# table -> {column: declared type}
EXPECTED_COLUMNS = {
    "categories": {
        "id": "INTEGER",
        "conversation_id": "INTEGER",
        "alias": "TEXT",
        "name": "TEXT",
    },
    "spending_entries": {
        "id": "INTEGER",
        "occurred_at": "INTEGER",
        "category_id": "INTEGER",
        "amount_cents": "INTEGER",
        "is_deleted": "INTEGER",
    },
}

CATEGORY_UNIQUE_KEY = {"conversation_id", "alias"}

# SQLite has no ADD COLUMN IF NOT EXISTS form
ADD_COLUMN_PATTERN = re.compile(r"ALTER\s+TABLE\s+(\w+)\s+ADD\s+(?:COLUMN\s+)?(\w+)", re.IGNORECASE)


class SchemaManager:
    """Applies pending migrations from the migrations directory.

    Applied migrations are recorded in ``schema_migrations`` so that running
    ``apply()`` on every process start is a no-op once the store is current.
    Each file runs in its own transaction. Column additions are skipped when
    the column already exists, so a store built outside this manager is
    judged by ``verify()`` alone.

    Args:
        db_manager: Database manager instance for database operations.
    """

    def __init__(self, db_manager):
        self.db_manager = db_manager

    def apply(self) -> List[str]:
        """Apply all pending migrations, then verify the schema.

        Returns:
            Names of the migrations applied by this call, in order.

        Raises:
            SchemaError: If a migration fails or the schema is incompatible.
            StoreUnavailable: If the database cannot be reached.
        """
        with self.db_manager.connect() as conn:
            self._init_schema_migrations_table(conn)
            applied = self._get_applied_migrations(conn)
            pending = [m for m in self.get_available_migrations() if m not in applied]

            if pending:
                logger.info(f"Applying {len(pending)} migration(s)...")
            for migration in pending:
                self._apply_migration(conn, migration)

            self._verify(conn)

        return pending

    def status(self) -> List[Tuple[str, bool]]:
        """List available migrations with their applied state.

        Returns:
            (migration file name, applied) pairs in application order.
        """
        with self.db_manager.connect() as conn:
            self._init_schema_migrations_table(conn)
            applied = self._get_applied_migrations(conn)

        return [(m, m in applied) for m in self.get_available_migrations()]

    def verify(self) -> None:
        """Check that tables, columns and the alias uniqueness constraint exist.

        Raises:
            SchemaError: On any structural mismatch.
        """
        with self.db_manager.connect() as conn:
            self._verify(conn)

    def get_available_migrations(self) -> List[str]:
        migrations_dir = self.db_manager.get_migrations_dir()
        if not migrations_dir.exists():
            return []
        return sorted(path.name for path in migrations_dir.glob("*.sql"))

    def _init_schema_migrations_table(self, conn):
        conn.execute("""
            CREATE TABLE IF NOT EXISTS schema_migrations (
                migration_file TEXT PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        conn.commit()

    def _get_applied_migrations(self, conn):
        cursor = conn.execute(
            "SELECT migration_file FROM schema_migrations ORDER BY migration_file"
        )
        return {row[0] for row in cursor.fetchall()}

    def _apply_migration(self, conn, migration_file):
        migration_path = self.db_manager.get_migrations_dir() / migration_file
        with open(migration_path, "r") as f:
            sql = f.read()

        try:
            # One transaction per file so a failing statement leaves nothing behind
            conn.execute("BEGIN")
            for statement in split_statements(sql):
                if self._column_exists_for(conn, statement):
                    logger.info(f"{migration_file}: column already present, skipping")
                    continue
                conn.execute(statement)
            conn.execute(
                "INSERT INTO schema_migrations (migration_file) VALUES (?)",
                (migration_file,),
            )
            conn.commit()
            logger.info(f"Applied migration: {migration_file}")
        except sqlite3.DatabaseError as e:
            conn.rollback()
            logger.error(f"Error applying migration {migration_file}: {e}")
            raise SchemaError(f"Migration {migration_file} failed: {e}") from e

    def _column_exists_for(self, conn, statement):
        """True if ``statement`` adds a column that the table already has."""
        match = ADD_COLUMN_PATTERN.search(statement)
        if match is None:
            return False
        table, column = match.groups()
        rows = conn.execute(f"PRAGMA table_info({table})").fetchall()
        return any(row[1] == column for row in rows)

    def _verify(self, conn):
        for table, expected in EXPECTED_COLUMNS.items():
            rows = conn.execute(f"PRAGMA table_info({table})").fetchall()
            if not rows:
                raise SchemaError(f"Missing table: {table}")

            actual = {row[1]: row[2].upper() for row in rows}
            for column, column_type in expected.items():
                if column not in actual:
                    raise SchemaError(f"Missing column {table}.{column}")
                if actual[column] != column_type:
                    raise SchemaError(
                        f"Column {table}.{column} has type {actual[column]}, "
                        f"expected {column_type}"
                    )

        if not self._has_unique_index(conn, "categories", CATEGORY_UNIQUE_KEY):
            raise SchemaError(
                "categories is missing a unique constraint on (conversation_id, alias)"
            )

    def _has_unique_index(self, conn, table, columns):
        for index in conn.execute(f"PRAGMA index_list({table})").fetchall():
            name, unique = index[1], index[2]
            if not unique:
                continue
            indexed = {row[2] for row in conn.execute(f"PRAGMA index_info('{name}')")}
            if indexed == columns:
                return True
        return False


def split_statements(sql: str) -> List[str]:
    """Split a migration script into single statements.

    Trailing text made only of comments is dropped.
    """
    statements = []
    buffer = ""
    for line in sql.splitlines(keepends=True):
        buffer += line
        if sqlite3.complete_statement(buffer):
            statements.append(buffer.strip())
            buffer = ""

    leftover = [
        line for line in buffer.splitlines() if line.strip() and not line.strip().startswith("--")
    ]
    if leftover:
        statements.append(buffer.strip())
    return statements
