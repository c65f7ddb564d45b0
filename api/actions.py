"""POST /api/actions: unified calculation endpoint."""

from datetime import date
from decimal import Decimal
from typing import Annotated, Any
from uuid import uuid4

from fastapi import APIRouter, Request
from pydantic import BaseModel, BeforeValidator, Field

from api.base import success_response
from core.formatting import vat_label
from core.models import CreditNote, Discount, LineItem, Payment
from core.money import normalize_vat_rate


def _float_to_decimal(value: Any) -> Any:
    # JSON numbers arrive as floats; go through their shortest repr, not the binary value
    if isinstance(value, float):
        return Decimal(str(value))
    return value


JsonDecimal = Annotated[Decimal, BeforeValidator(_float_to_decimal)]


class ActionRequest(BaseModel):
    domain: str
    action: str
    data: dict


# =============================================================================
# REQUEST MODELS
# =============================================================================


class LineItemInput(BaseModel):
    description: str = ""
    quantity: JsonDecimal
    unit_price: JsonDecimal
    vat_rate: JsonDecimal | None = None  # fraction (0.18) or percentage (18)
    unit: str | None = None

    def to_line_item(self) -> LineItem:
        return LineItem(
            description=self.description,
            quantity=self.quantity,
            unit_price=self.unit_price,
            vat_rate=normalize_vat_rate(self.vat_rate),
            unit=self.unit,
        )


class DiscountInput(BaseModel):
    type: str | None = None
    value: JsonDecimal | None = None

    def to_discount(self) -> Discount | None:
        return Discount.from_record(self.type, self.value)


class CreditNoteInput(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    date: date
    amount: JsonDecimal
    vat_rate: JsonDecimal | None = None
    amount_kind: str | None = None  # "gross" when amount already includes VAT
    reason: str = ""
    number: str | None = None

    def to_credit_note(self) -> CreditNote:
        return CreditNote.from_record({
            "id": self.id,
            "credit_note_date": self.date,
            "amount": self.amount,
            "vat_rate": self.vat_rate,
            "amount_kind": self.amount_kind,
            "reason": self.reason,
            "credit_note_number": self.number,
        })


class PaymentInput(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    date: date
    amount: JsonDecimal
    method: str | None = None

    def to_payment(self) -> Payment:
        return Payment(id=self.id, date=self.date, amount=self.amount, method=self.method)


class TotalsPreviewRequest(BaseModel):
    items: list[LineItemInput]
    discount: DiscountInput | None = None


class SettlementPreviewRequest(BaseModel):
    grand_total: JsonDecimal
    credit_notes: list[CreditNoteInput] = Field(default_factory=list)
    payments: list[PaymentInput] = Field(default_factory=list)


def create_actions_router(services: dict) -> APIRouter:
    router = APIRouter()

    handlers = {
        "totals": TotalsHandler(services["invoice"]),
        "settlement": SettlementHandler(services["invoice"]),
    }

    @router.post("/actions")
    async def perform_action(request: Request, body: ActionRequest):
        handler = handlers.get(body.domain)
        if handler is None:
            raise ValueError(
                f"Unknown domain '{body.domain}'. "
                f"Valid domains: {', '.join(sorted(handlers.keys()))}"
            )

        if body.action not in handler.ALLOWED_ACTIONS:
            raise ValueError(
                f"Action '{body.action}' not allowed on '{body.domain}'. "
                f"Allowed: {', '.join(sorted(handler.ALLOWED_ACTIONS))}"
            )

        method = getattr(handler, f"_handle_{body.action}")
        result = method(body.data)
        return success_response(result, request).model_dump(mode="json")

    return router


# =============================================================================
# HANDLER CLASSES
# =============================================================================


class TotalsHandler:
    """Live totals for unsaved invoice, quotation and credit note forms."""

    ALLOWED_ACTIONS = {"preview"}

    def __init__(self, service):
        self.service = service

    def _handle_preview(self, data: dict):
        req = TotalsPreviewRequest(**data)
        items = [item.to_line_item() for item in req.items]
        discount = req.discount.to_discount() if req.discount else None

        totals = self.service.preview_totals(items, discount)
        result = totals.model_dump(mode="json")
        result["vat_label"] = vat_label(items)
        return result


class SettlementHandler:
    ALLOWED_ACTIONS = {"preview"}

    def __init__(self, service):
        self.service = service

    def _handle_preview(self, data: dict):
        req = SettlementPreviewRequest(**data)
        settlement = self.service.preview_settlement(
            req.grand_total,
            [cn.to_credit_note() for cn in req.credit_notes],
            [p.to_payment() for p in req.payments],
        )
        return settlement.model_dump(mode="json")
