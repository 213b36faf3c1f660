"""Aggregated spending statistics."""

from dataclasses import dataclass, field
from typing import List

from models.category import Category
from models.money import format_cents


@dataclass
class CategoryStat:
    """Spending of one category within an aggregation window."""

    category: Category
    n_items: int
    amount_cents: int

    def __str__(self) -> str:
        return (
            f"-> {self.category.name}: n={self.n_items}, "
            f"amount={format_cents(self.amount_cents)}"
        )


@dataclass
class Stat:
    """Per-category statistics for a conversation.

    Attributes:
        items: One entry per category with at least one matching entry,
            ordered by category id.
        amount_cents: Total over all items, computed with overflow checks
            by the aggregator.
    """

    items: List[CategoryStat] = field(default_factory=list)
    amount_cents: int = 0

    @property
    def n_items(self) -> int:
        return sum(item.n_items for item in self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __str__(self) -> str:
        lines = [str(item) for item in self.items]
        lines.append("=" * 23)
        lines.append(f"Items: {self.n_items}\tAmount: {format_cents(self.amount_cents)}")
        return "\n".join(lines)
