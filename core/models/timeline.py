"""Activity timeline models."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import AwareDatetime, BaseModel


class TimelineEventType(str, Enum):
    """Kinds of events shown on a document's activity timeline."""

    CREATED = "created"
    ISSUED = "issued"
    CREDIT_NOTE = "credit_note"
    PAYMENT = "payment"
    PAID = "paid"


class TimelineDocument(BaseModel):
    """The document fields the timeline needs."""

    id: UUID | str
    created_at: AwareDatetime | None = None
    is_issued: bool = False
    issued_at: AwareDatetime | None = None
    invoice_date: date | None = None

    model_config = {"frozen": True}


class TimelineEvent(BaseModel):
    """
    One entry on the timeline.

    Credit note amounts are positive; the reduction is implied by the type.
    """

    id: str
    type: TimelineEventType
    timestamp: datetime
    title: str
    amount: Decimal | None = None

    model_config = {"frozen": True}
