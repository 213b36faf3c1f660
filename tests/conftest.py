"""Shared pytest fixtures for all tests."""

import logging
import sqlite3
import pytest

from config import Config
from db.manager import DatabaseManager
from db.schema import SchemaManager
from services.base import Services
from tests.helpers import TestDatabaseManager


@pytest.fixture
def test_db():
    """Create an in-memory SQLite database for testing.

    Yields:
        sqlite3.Connection: Connection to in-memory database.
    """
    conn = sqlite3.connect(":memory:")
    conn.execute("PRAGMA foreign_keys = ON")
    yield conn
    conn.close()


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration pointing to a temporary database.

    Args:
        tmp_path: pytest tmp_path fixture for temporary directory.

    Returns:
        Config: Test configuration object.
    """
    return Config(
        base_dir=tmp_path / "spendlog",
        db_data_dir=tmp_path / "spendlog" / "db",
        db_filename="test.db",
        log_level="DEBUG",
        log_dir=tmp_path / "spendlog" / "logs",
        busy_timeout=5.0,
        default_conversation_id=100,
        read_retries=2,
    )


@pytest.fixture
def db_manager(test_db):
    """DatabaseManager over the in-memory connection, without any schema."""
    return TestDatabaseManager(test_db)


@pytest.fixture
def db_manager_with_schema(db_manager):
    """Create a DatabaseManager with schema already set up.

    This fixture provides a DatabaseManager that uses an in-memory database
    with all migrations applied by the SchemaManager.

    Returns:
        TestDatabaseManager: Database manager with schema ready.
    """
    SchemaManager(db_manager).apply()
    return db_manager


@pytest.fixture
def services(test_config, db_manager_with_schema):
    """Create a Services container with test database.

    Returns:
        Services: Services container for testing.
    """
    return Services(test_config, db_manager=db_manager_with_schema)


@pytest.fixture
def file_services(test_config):
    """Services container backed by a real SQLite file in tmp_path.

    Every operation opens its own connection, as in production.
    """
    services = Services(test_config, db_manager=DatabaseManager(test_config))
    services.schema.apply()
    return services


@pytest.fixture
def food(services):
    """The food category of conversation 100."""
    return services.categories.resolve_or_create(100, "food", "Food")


@pytest.fixture
def spendlog_logs(caplog):
    """Capture INFO and above from the spendlog logger."""
    caplog.set_level(logging.INFO, logger="spendlog")
    return caplog
