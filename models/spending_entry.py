from dataclasses import dataclass
from datetime import datetime, timezone

from models.money import format_cents


@dataclass
class SpendingEntry:
    id: int
    occurred_at: int  # seconds since epoch, UTC
    category_id: int
    amount_cents: int  # never negative
    is_deleted: bool = False

    @property
    def occurred_date(self) -> datetime:
        """Get occurred_at as an aware UTC datetime."""
        return datetime.fromtimestamp(self.occurred_at, tz=timezone.utc)

    def __str__(self) -> str:
        return (
            f"#{self.id} {self.occurred_date.date().isoformat()} "
            f"{format_cents(self.amount_cents)}"
        )
