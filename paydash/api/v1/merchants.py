"""GET /v1/merchants - Merchant list with payment activity, and merchant detail"""

import asyncio
import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from paydash.api.v1.schemas import (
    MerchantDetailResponse,
    MerchantListResponse,
    MerchantProfileSchema,
    MerchantSchema,
    MerchantTotalsSchema,
    MonthBucketSchema,
    PaymentSchema,
)
from paydash.api.dependencies import get_payments_client, get_request_id
from paydash.config import settings
from paydash.infrastructure.clients.payments import PaymentsClient
from paydash.domain.aggregation import enrich_merchants, summarize_merchant
from paydash.domain.exceptions import MerchantNotFoundError, PaymentsAPIError
from paydash.domain.listing import paginate, recent_payments, search_merchants

router = APIRouter()


@router.get("/merchants", response_model=MerchantListResponse)
async def list_merchants(
    request: Request,
    keyword: str = Query("", description="Matches name, code or business type"),
    page: int = Query(0, ge=0),
    client: PaymentsClient = Depends(get_payments_client),
):
    """
    Merchants enriched with transaction_count and total_amount.

    total_amount sums all of a merchant's payments, whatever their status.
    """
    try:
        merchants, payments = await asyncio.gather(client.get_merchants(), client.get_payments())
    except PaymentsAPIError as e:
        logging.error(f"Payments API error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Payments service unavailable")

    matched = search_merchants(enrich_merchants(merchants, payments), keyword)
    result = paginate(matched, page, settings.list_page_size)

    return MerchantListResponse(
        merchants=[
            MerchantSchema(
                mcht_code=m.mcht_code,
                mcht_name=m.mcht_name,
                status=m.status,
                biz_type=m.biz_type,
                transaction_count=m.transaction_count,
                total_amount=float(m.total_amount),
            )
            for m in result.items
        ],
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
        total_items=result.total_items,
    )


@router.get("/merchants/{mcht_code}", response_model=MerchantDetailResponse)
async def get_merchant(
    mcht_code: str,
    request: Request,
    client: PaymentsClient = Depends(get_payments_client),
):
    """
    Merchant profile with recent-window totals and a monthly series.

    Returns:
        Totals over the last merchant_window_days and one bucket per month
        for the last merchant_monthly_months months
    """
    request_id = get_request_id(request)

    try:
        merchant, payments = await asyncio.gather(client.get_merchant_detail(mcht_code), client.get_payments())
    except MerchantNotFoundError:
        raise HTTPException(status_code=404, detail="Merchant not found")
    except PaymentsAPIError as e:
        logging.error(f"Payments API error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Payments service unavailable")

    as_of = datetime.now(timezone.utc).replace(tzinfo=None)
    summary = summarize_merchant(
        payments,
        mcht_code,
        as_of,
        window_days=settings.merchant_window_days,
        months=settings.merchant_monthly_months,
    )
    own_payments = [p for p in payments if p.mcht_code == mcht_code]

    return MerchantDetailResponse(
        merchant=MerchantProfileSchema.model_validate(merchant, from_attributes=True),
        totals=MerchantTotalsSchema(
            total_amount=float(summary.totals.total_amount),
            total_count=summary.totals.total_count,
            success_rate=summary.totals.success_rate,
        ),
        monthly=[
            MonthBucketSchema(month=b.month, label=b.label, amount=float(b.amount), count=b.count)
            for b in summary.monthly
        ],
        recent_payments=[
            PaymentSchema.model_validate(p, from_attributes=True)
            for p in recent_payments(own_payments, settings.recent_payment_limit)
        ],
    )
