"""
Credit note value models.

Stored credit notes come in two shapes: a net amount with a VAT rate, or a
pre-computed gross amount with no rate. The amount is carried as a tagged
union so the aggregator matches on `kind` instead of guessing from which
fields happen to be filled in.
"""

from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field

from core.exceptions import AmbiguousCreditNoteRepresentation
from core.money import Money, normalize_vat_rate
from utils.timezone import DateLike


class NetPlusVatAmount(BaseModel):
    """Net amount plus the VAT rate it was issued at."""

    kind: Literal["net_plus_vat"] = "net_plus_vat"
    net: Money
    vat_rate: Money

    model_config = {"frozen": True}


class GrossAmount(BaseModel):
    """Gross amount, VAT already included."""

    kind: Literal["gross"] = "gross"
    gross: Money

    model_config = {"frozen": True}


CreditNoteAmount = Annotated[NetPlusVatAmount | GrossAmount, Field(discriminator="kind")]


class CreditNote(BaseModel):
    """A credit note applied against an invoice."""

    id: UUID | str
    date: DateLike
    amount: CreditNoteAmount
    reason: str = ""
    number: str | None = None

    model_config = {"frozen": True}

    @classmethod
    def from_record(cls, row: dict[str, Any]) -> "CreditNote":
        """
        Build from a credit_notes row.

        A row marked amount_kind='gross' stores a gross amount. Any other row
        must carry a vat_rate for its net amount.

        Raises:
            AmbiguousCreditNoteRepresentation: Row has neither marker nor VAT rate
        """
        if row.get("amount_kind") == "gross":
            amount = GrossAmount(gross=row["amount"])
        elif row.get("vat_rate") is not None:
            amount = NetPlusVatAmount(
                net=row["amount"],
                vat_rate=normalize_vat_rate(row["vat_rate"]),
            )
        else:
            raise AmbiguousCreditNoteRepresentation(row.get("id"))

        return cls(
            id=row["id"],
            date=row.get("credit_note_date") or row["created_at"],
            amount=amount,
            reason=row.get("reason") or "",
            number=row.get("credit_note_number"),
        )
