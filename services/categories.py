"""Category registry for database operations."""

import sqlite3
from typing import List, Optional

from db.retry import DEFAULT_READ_RETRIES, retry_on_unavailable
from errors import InvalidCategory, NotFound
from logger import get_logger
from models.category import Category

logger = get_logger(__name__)

_CATEGORY_SELECT_FIELDS = "id, conversation_id, alias, name"


class CategoryRegistry:
    """Registry of categories, each unique per (conversation_id, alias)."""

    def __init__(self, db_manager, read_retries: int = DEFAULT_READ_RETRIES):
        """Initialize the category registry.

        Args:
            db_manager: Database manager instance for database operations.
            read_retries: Retries for reads that hit StoreUnavailable.
        """
        self.db_manager = db_manager
        self.read_retries = read_retries

    def resolve_or_create(self, conversation_id: int, alias: str, name: str) -> Category:
        """Get the category for an alias, creating it if it does not exist.

        A concurrent creator may insert the same alias between our read and
        our insert. The unique constraint rejects the second insert, and the
        row that won is read back and returned.

        Args:
            conversation_id: Conversation that owns the category.
            alias: Category alias (no whitespace).
            name: Display name used only when the category is created.

        Returns:
            The existing or newly created Category.

        Raises:
            InvalidCategory: If alias or name is malformed.
        """
        alias = _clean_alias(alias)
        name = _clean_name(name)

        with self.db_manager.connect() as conn:
            existing = self._fetch_by_alias(conn, conversation_id, alias)
            if existing:
                return existing

            try:
                cursor = conn.execute(
                    "INSERT INTO categories (conversation_id, alias, name) VALUES (?, ?, ?)",
                    (conversation_id, alias, name),
                )
                conn.commit()
            except sqlite3.IntegrityError:
                conn.rollback()
                logger.warning(
                    f"Category '{alias}' in conversation {conversation_id} "
                    "was created concurrently, using existing row"
                )
                existing = self._fetch_by_alias(conn, conversation_id, alias)
                if existing is None:
                    raise
                return existing

            category = Category(
                id=cursor.lastrowid,
                conversation_id=conversation_id,
                alias=alias,
                name=name,
            )
            logger.info(f"Created category {category} in conversation {conversation_id}")
            return category

    @retry_on_unavailable()
    def list(self, conversation_id: int) -> List[Category]:
        """Get all categories of a conversation.

        Returns:
            List of Category objects, ordered by id.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_CATEGORY_SELECT_FIELDS} FROM categories "
                "WHERE conversation_id = ? ORDER BY id",
                (conversation_id,),
            )
            return [_row_to_category(row) for row in cursor.fetchall()]

    @retry_on_unavailable()
    def find(self, conversation_id: int, alias: str) -> Category:
        """Get a category by alias.

        Raises:
            NotFound: If the conversation has no category with this alias.
        """
        with self.db_manager.connect() as conn:
            category = self._fetch_by_alias(conn, conversation_id, alias.strip())

        if category is None:
            raise NotFound(f"No category with alias '{alias}'")
        return category

    @retry_on_unavailable()
    def get(self, conversation_id: int, category_id: int) -> Category:
        """Get a category by id, scoped to a conversation.

        Raises:
            NotFound: If the id is unknown or owned by another conversation.
        """
        with self.db_manager.connect() as conn:
            row = conn.execute(
                f"SELECT {_CATEGORY_SELECT_FIELDS} FROM categories "
                "WHERE id = ? AND conversation_id = ?",
                (category_id, conversation_id),
            ).fetchone()

        if row is None:
            raise NotFound(f"No category with ID {category_id}")
        return _row_to_category(row)

    def rename(self, conversation_id: int, alias: str, name: str) -> Category:
        """Change the display name of a category. The alias never changes.

        Raises:
            NotFound: If the conversation has no category with this alias.
            InvalidCategory: If the new name is empty.
        """
        alias = alias.strip()
        name = _clean_name(name)

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "UPDATE categories SET name = ? WHERE conversation_id = ? AND alias = ?",
                (name, conversation_id, alias),
            )
            conn.commit()

            if cursor.rowcount == 0:
                raise NotFound(f"No category with alias '{alias}'")

            category = self._fetch_by_alias(conn, conversation_id, alias)

        logger.info(f"Renamed category '{alias}' to '{name}' in conversation {conversation_id}")
        return category

    def _fetch_by_alias(self, conn, conversation_id: int, alias: str) -> Optional[Category]:
        row = conn.execute(
            f"SELECT {_CATEGORY_SELECT_FIELDS} FROM categories "
            "WHERE conversation_id = ? AND alias = ?",
            (conversation_id, alias),
        ).fetchone()
        return _row_to_category(row) if row else None


def _row_to_category(row: tuple) -> Category:
    return Category(id=row[0], conversation_id=row[1], alias=row[2], name=row[3])


def _clean_alias(alias: str) -> str:
    alias = alias.strip()
    if not alias or any(ch.isspace() for ch in alias):
        raise InvalidCategory(f"Invalid category alias: {alias!r}")
    return alias


def _clean_name(name: str) -> str:
    name = name.strip()
    if not name:
        raise InvalidCategory("Category name cannot be empty")
    return name
