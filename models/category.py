"""Category model for spending entries."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Category:
    """Represents a spending category owned by one conversation.

    Attributes:
        id: Unique identifier (auto-generated, never reused).
        conversation_id: Chat that owns the category.
        alias: Short handle, unique within the conversation and immutable.
        name: Human-readable display label.
    """

    id: int
    conversation_id: int
    alias: str
    name: str

    def __str__(self) -> str:
        return f"{self.name} ({self.alias})"
