"""GET /api/data: unified read endpoint."""

from uuid import UUID

from fastapi import APIRouter, Query, Request

from api.base import success_response


VALID_TYPES = {"invoices", "aging"}
VALID_INCLUDES = {"items", "totals", "settlement", "timeline", "status"}


def create_data_router(services: dict) -> APIRouter:
    router = APIRouter()

    invoice_svc = services["invoice"]

    # -------------------------------------------------------------------------
    # Convenience routes (must be registered before the generic /data route)
    # -------------------------------------------------------------------------

    @router.get("/data/invoices/{invoice_id}/document")
    async def invoice_document(request: Request, invoice_id: UUID):
        payload = invoice_svc.document_payload(invoice_id)
        return success_response(payload, request).model_dump(mode="json")

    # -------------------------------------------------------------------------
    # Generic data endpoint
    # -------------------------------------------------------------------------

    @router.get("/data")
    async def get_data(
        request: Request,
        type: str | None = Query(None),
        id: str | None = Query(None),
        include: str | None = Query(None),
        filter: str | None = Query(None),
        limit: int | None = Query(None, ge=1),
    ):
        if type is None:
            raise ValueError("'type' query parameter is required")

        if type not in VALID_TYPES:
            raise ValueError(f"Unknown type '{type}'. Valid types: {', '.join(sorted(VALID_TYPES))}")

        includes = set(include.split(",")) if include else set()
        unknown = includes - VALID_INCLUDES
        if unknown:
            raise ValueError(
                f"Unknown include '{', '.join(sorted(unknown))}'. "
                f"Valid includes: {', '.join(sorted(VALID_INCLUDES))}"
            )

        if type == "invoices":
            data = _handle_invoices(invoice_svc, id, includes, filter, limit)
        else:
            data = _handle_aging(invoice_svc)

        return success_response(data, request).model_dump(mode="json")

    return router


def _handle_invoices(invoice_svc, id, includes, filter, limit):
    if id:
        snapshot = invoice_svc.load_snapshot(UUID(id))
        if snapshot is None:
            raise ValueError(f"Invoice {id} not found")

        # Evaluated even without includes, so a broken invoice never reads as fine
        result = invoice_svc.evaluate(snapshot)

        data = snapshot.invoice.model_dump(mode="json")
        if "items" in includes:
            data["items"] = [item.model_dump(mode="json") for item in snapshot.items]
        if "totals" in includes:
            data["totals"] = result.totals.model_dump(mode="json")
        if "settlement" in includes:
            data["settlement"] = result.settlement.model_dump(mode="json")
        if "timeline" in includes:
            data["timeline"] = [event.model_dump(mode="json") for event in result.timeline]
        if "status" in includes:
            data["status"] = invoice_svc.status(snapshot, result).model_dump(mode="json")
        return data

    if filter == "unpaid":
        return [
            {
                **invoice.model_dump(mode="json"),
                "grand_total": f"{result.totals.grand_total:.2f}",
                "remaining_balance": f"{result.settlement.remaining_balance:.2f}",
            }
            for invoice, result in invoice_svc.list_unpaid(limit)
        ]

    raise ValueError("'invoices' type requires 'id' or filter=unpaid")


def _handle_aging(invoice_svc):
    report = invoice_svc.aging_report()
    data = report.model_dump(mode="json")
    data["active_buckets"] = [b.label for b in report.active_buckets()]
    return data
