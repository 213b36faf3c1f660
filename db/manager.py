"""Database manager for SQLite connections and path management."""

import sqlite3
from contextlib import contextmanager
from config import Config, get_migrations_dir
from errors import StoreUnavailable


class DatabaseManager:
    """Manages database connections and paths.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: Config):
        """Initialize the database manager.

        Args:
            config: Config object containing database configuration.
        """
        self.config = config

    @contextmanager
    def connect(self):
        """Get a database connection with automatic cleanup.

        Storage failures (unreachable file, locked database, a file that is
        not a database, I/O errors) are raised as StoreUnavailable. Integrity
        errors pass through untouched.

        Yields:
            sqlite3.Connection: Database connection.
        """
        db_path = self.config.db_path
        try:
            db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(db_path, timeout=self.config.busy_timeout)
            conn.execute("PRAGMA foreign_keys = ON")
        except (OSError, sqlite3.DatabaseError) as e:
            raise StoreUnavailable(f"Cannot open database at {db_path}: {e}") from e

        try:
            yield conn
        except sqlite3.IntegrityError:
            conn.rollback()
            raise
        except sqlite3.DatabaseError as e:
            conn.rollback()
            raise StoreUnavailable(f"Database operation failed: {e}") from e
        finally:
            conn.close()

    def get_db_path(self):
        """Get the current database path.

        Returns:
            Path: Path to the database file.
        """
        return self.config.db_path

    def get_migrations_dir(self):
        """Get the migrations directory path.

        Returns:
            Path: Path to the migrations directory.
        """
        return get_migrations_dir()
