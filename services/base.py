"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager
from db.schema import SchemaManager


class Services:
    """Container for all application services.

    This class provides a centralized way to access all services and makes
    it easy to inject mock services for testing.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If provided, config is ignored.
    """

    def __init__(self, config: Config, db_manager=None):
        """Initialize services with configuration.

        Args:
            config: Config object containing application configuration.
            db_manager: Optional database manager for dependency injection (testing).
                       If None, creates DatabaseManager from config.
        """
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        # Lazy import to avoid circular dependencies
        from services.categories import CategoryRegistry
        from services.ledger import LedgerStore
        from services.aggregator import Aggregator

        read_retries = config.read_retries
        self.schema = SchemaManager(self.db_manager)
        self.categories = CategoryRegistry(self.db_manager, read_retries)
        self.ledger = LedgerStore(self.db_manager, read_retries)
        self.aggregator = Aggregator(self.db_manager, read_retries)
