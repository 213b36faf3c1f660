import sqlite3
import time

import pytest

from db.manager import DatabaseManager
from db.schema import SchemaManager
from errors import StoreUnavailable
from services.aggregator import Aggregator
from services.categories import CategoryRegistry
from services.ledger import LedgerStore
from tests.helpers import FlakyDatabaseManager


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda seconds: None)


class TestReadRetries:
    """Reads retry StoreUnavailable, writes surface it immediately."""

    def test_read_recovers(self, db_manager_with_schema):
        flaky = FlakyDatabaseManager(db_manager_with_schema, failures=2)
        registry = CategoryRegistry(flaky, read_retries=2)

        assert registry.list(100) == []
        assert flaky.attempts == 3

    def test_read_gives_up(self, db_manager_with_schema):
        flaky = FlakyDatabaseManager(db_manager_with_schema, failures=10)
        registry = CategoryRegistry(flaky, read_retries=2)

        with pytest.raises(StoreUnavailable):
            registry.find(100, "food")
        assert flaky.attempts == 3

    def test_aggregation_read_retried(self, db_manager_with_schema):
        flaky = FlakyDatabaseManager(db_manager_with_schema, failures=1)
        aggregator = Aggregator(flaky, read_retries=1)

        assert aggregator.total(100) == 0
        assert flaky.attempts == 2

    def test_listing_retried_per_page(self, db_manager_with_schema):
        flaky = FlakyDatabaseManager(db_manager_with_schema, failures=1)
        ledger = LedgerStore(flaky, read_retries=1)

        assert list(ledger.list(100)) == []
        assert flaky.attempts == 2

    def test_category_write_not_retried(self, db_manager_with_schema):
        flaky = FlakyDatabaseManager(db_manager_with_schema, failures=1)
        registry = CategoryRegistry(flaky, read_retries=3)

        with pytest.raises(StoreUnavailable):
            registry.resolve_or_create(100, "food", "Food")
        assert flaky.attempts == 1

    def test_entry_write_not_retried(self, db_manager_with_schema):
        category = CategoryRegistry(db_manager_with_schema).resolve_or_create(
            100, "food", "Food"
        )
        flaky = FlakyDatabaseManager(db_manager_with_schema, failures=1)
        ledger = LedgerStore(flaky, read_retries=3)

        with pytest.raises(StoreUnavailable):
            ledger.record(100, category.id, 10, 500)
        assert flaky.attempts == 1
        assert list(LedgerStore(db_manager_with_schema).list(100)) == []


class TestDatabaseManager:
    """Tests for DatabaseManager error translation."""

    def test_operational_error_becomes_store_unavailable(self, test_config):
        with pytest.raises(StoreUnavailable):
            with DatabaseManager(test_config).connect() as conn:
                conn.execute("SELECT * FROM missing_table")

    def test_integrity_error_passes_through(self, file_services):
        file_services.categories.resolve_or_create(100, "food", "Food")

        with pytest.raises(sqlite3.IntegrityError):
            with file_services.db_manager.connect() as conn:
                conn.execute(
                    "INSERT INTO categories (conversation_id, alias, name) "
                    "VALUES (100, 'food', 'Food')"
                )

    def test_foreign_keys_enforced(self, file_services):
        with pytest.raises(sqlite3.IntegrityError):
            with file_services.db_manager.connect() as conn:
                conn.execute(
                    "INSERT INTO spending_entries (occurred_at, category_id, amount_cents) "
                    "VALUES (10, 9999, 100)"
                )

    def test_creates_data_directory(self, test_config):
        with DatabaseManager(test_config).connect() as conn:
            conn.execute("SELECT 1")

        assert test_config.db_path.parent.exists()

    def test_not_a_database_becomes_store_unavailable(self, test_config):
        test_config.db_path.parent.mkdir(parents=True)
        test_config.db_path.write_bytes(b"this is not an sqlite file" * 100)

        with pytest.raises(StoreUnavailable, match="not a database"):
            SchemaManager(DatabaseManager(test_config)).apply()

    def test_not_a_database_read_is_retried(self, test_config):
        test_config.db_path.parent.mkdir(parents=True)
        test_config.db_path.write_bytes(b"this is not an sqlite file" * 100)
        counting = FlakyDatabaseManager(DatabaseManager(test_config), failures=0)

        with pytest.raises(StoreUnavailable):
            CategoryRegistry(counting, read_retries=2).list(100)
        assert counting.attempts == 3
