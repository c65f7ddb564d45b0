"""Payment value model."""

from typing import Any
from uuid import UUID

from pydantic import BaseModel

from core.money import Money
from utils.timezone import DateLike


class Payment(BaseModel):
    """A payment received against exactly one invoice, at its gross amount."""

    id: UUID | str
    date: DateLike
    amount: Money
    method: str | None = None

    model_config = {"frozen": True}

    @classmethod
    def from_record(cls, row: dict[str, Any]) -> "Payment":
        """Build from a payments row. Falls back to created_at when payment_date is empty."""
        return cls(
            id=row["id"],
            date=row.get("payment_date") or row["created_at"],
            amount=row["amount"],
            method=row.get("method"),
        )
