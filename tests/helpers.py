"""Helper utilities for tests."""

from pathlib import Path
import sqlite3

from config import get_migrations_dir
from errors import StoreUnavailable


class TestDatabaseManager:
    """Test database manager that uses an in-memory connection."""

    __test__ = False

    def __init__(self, conn):
        self.conn = conn

    def connect(self):
        """Return a context manager for the test connection."""
        return _TestConnectionContext(self.conn)

    def get_db_path(self):
        """Return a fake path for the test database."""
        return Path(":memory:")

    def get_migrations_dir(self):
        """Get the migrations directory path."""
        return get_migrations_dir()


class _TestConnectionContext:
    """Context manager for test database connections."""

    def __init__(self, conn):
        self.conn = conn

    def __enter__(self):
        return self.conn

    def __exit__(self, exc_type, exc_val, exc_tb):
        # Don't close the connection - let the fixture handle it
        pass


class FlakyDatabaseManager:
    """Wraps a database manager and fails the first ``failures`` connects."""

    def __init__(self, inner, failures):
        self.inner = inner
        self.failures = failures
        self.attempts = 0

    def connect(self):
        self.attempts += 1
        if self.attempts <= self.failures:
            raise StoreUnavailable("database is locked")
        return self.inner.connect()

    def get_db_path(self):
        return self.inner.get_db_path()

    def get_migrations_dir(self):
        return self.inner.get_migrations_dir()


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path, up_to: str) -> None:
    """Run SQL migrations in order, stopping after ``up_to``.

    Applied files are recorded in schema_migrations the same way the
    SchemaManager records them, so a later ``apply()`` picks up the rest.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
        up_to: File name of the last migration to run.
    """
    conn.execute("""
        CREATE TABLE IF NOT EXISTS schema_migrations (
            migration_file TEXT PRIMARY KEY,
            applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)

    for migration_file in sorted(migrations_dir.glob("*.sql")):
        with open(migration_file, "r") as f:
            conn.executescript(f.read())
        conn.execute(
            "INSERT INTO schema_migrations (migration_file) VALUES (?)",
            (migration_file.name,),
        )
        if migration_file.name == up_to:
            break

    conn.commit()


def record_entries(services, conversation_id, category, entries):
    """Record (occurred_at, amount_cents) pairs for a category.

    Returns:
        List of created SpendingEntry objects.
    """
    return [
        services.ledger.record(conversation_id, category.id, occurred_at, amount_cents)
        for occurred_at, amount_cents in entries
    ]
