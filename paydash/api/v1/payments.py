"""GET /v1/payments - Filtered, sorted, paged payment list and CSV export"""

import asyncio
import logging
from datetime import date
from typing import Literal
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from starlette.responses import Response

from paydash.api.v1.schemas import PaymentListResponse, PaymentSchema
from paydash.api.dependencies import get_payment_filter, get_payments_client, get_request_id
from paydash.config import settings
from paydash.infrastructure.clients.payments import PaymentsClient
from paydash.domain.exceptions import PaymentsAPIError
from paydash.domain.labels import build_label_map
from paydash.domain.listing import filter_payments, paginate, sort_payments
from paydash.domain.models import Payment, PaymentFilter
from paydash.utils.csv_export import payments_to_csv

router = APIRouter()


def _sorted(payments: list[Payment], sort: str, order: str) -> list[Payment]:
    try:
        return sort_payments(payments, sort, descending=order == "desc")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/payments", response_model=PaymentListResponse)
async def list_payments(
    request: Request,
    criteria: PaymentFilter = Depends(get_payment_filter),
    sort: str = Query("payment_at", description="payment_at | amount | status | pay_type | mcht_code"),
    order: Literal["asc", "desc"] = Query("desc"),
    page: int = Query(0, ge=0),
    client: PaymentsClient = Depends(get_payments_client),
):
    """Payments matching the filters, sorted, one page at a time"""
    try:
        payments = await client.get_payments()
    except PaymentsAPIError as e:
        logging.error(f"Payments API error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Payments service unavailable")

    ordered = _sorted(filter_payments(payments, criteria), sort, order)
    result = paginate(ordered, page, settings.list_page_size)

    return PaymentListResponse(
        payments=[PaymentSchema.model_validate(p, from_attributes=True) for p in result.items],
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
        total_items=result.total_items,
    )


@router.get("/payments/export")
async def export_payments(
    request: Request,
    criteria: PaymentFilter = Depends(get_payment_filter),
    sort: str = Query("payment_at"),
    order: Literal["asc", "desc"] = Query("desc"),
    client: PaymentsClient = Depends(get_payments_client),
):
    """Download every payment matching the filters as CSV"""
    try:
        payments, statuses, pay_types = await asyncio.gather(
            client.get_payments(),
            client.get_payment_status_codes(),
            client.get_pay_type_codes(),
        )
    except PaymentsAPIError as e:
        logging.error(f"Payments API error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Payments service unavailable")

    ordered = _sorted(filter_payments(payments, criteria), sort, order)
    content = payments_to_csv(ordered, build_label_map(statuses), build_label_map(pay_types))

    filename = f"payments_{date.today().isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
