"""GET /v1/dashboard - Aggregated payment statistics for the dashboard page"""

import asyncio
import time
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from paydash.api.v1.schemas import (
    DashboardResponse,
    DateBucketSchema,
    MethodBucketSchema,
    PaymentSchema,
    StatsSchema,
    StatusBucketSchema,
    TopMerchantSchema,
)
from paydash.api.dependencies import get_payments_client, get_request_id
from paydash.config import settings
from paydash.infrastructure.clients.payments import PaymentsClient
from paydash.domain.aggregation import build_dashboard
from paydash.domain.exceptions import PaymentsAPIError
from paydash.infrastructure.observability.metrics import record_dashboard
from paydash.infrastructure.observability.logging import log_dashboard_computed

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    request: Request,
    period: Optional[int] = Query(None, ge=0, description="Trend period index, defaults to the most recent"),
    client: PaymentsClient = Depends(get_payments_client),
):
    """
    Compute every dashboard aggregate from the full payment feed.

    Flow:
    1. Fetch all payments and merchants from the payments API
    2. Aggregate totals, trends, distributions, rankings and the date series
    3. Return the requested trend period (clamped into range)
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        payments, merchants = await asyncio.gather(client.get_payments(), client.get_merchants())
    except PaymentsAPIError as e:
        logging.error(f"Payments API error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Payments service unavailable")

    dashboard = build_dashboard(
        payments,
        merchants,
        period_index=period,
        page_size=settings.trend_period_size,
        top_limit=settings.top_merchant_limit,
        recent_limit=settings.recent_payment_limit,
    )

    duration_ms = (time.time() - start_time) * 1000
    record_dashboard(len(payments))
    log_dashboard_computed(request_id, len(payments), len(merchants), dashboard.period_index, duration_ms)

    stats = dashboard.stats
    return DashboardResponse(
        stats=StatsSchema(
            total_amount=float(stats.total_amount),
            total_count=stats.total_count,
            success_rate=stats.success_rate,
            active_merchant_count=stats.active_merchant_count,
            amount_trend=stats.amount_trend,
            count_trend=stats.count_trend,
            success_rate_trend=stats.success_rate_trend,
        ),
        status_distribution=[
            StatusBucketSchema(status=b.key, count=b.count, amount=float(b.amount)) for b in dashboard.status_buckets
        ],
        method_distribution=[
            MethodBucketSchema(pay_type=b.key, count=b.count, amount=float(b.amount)) for b in dashboard.method_buckets
        ],
        top_merchants=[
            TopMerchantSchema(
                mcht_code=m.mcht_code,
                mcht_name=m.mcht_name,
                total_amount=float(m.total_amount),
                transaction_count=m.transaction_count,
                percent=m.percent,
            )
            for m in dashboard.top_merchants
        ],
        trend=[
            DateBucketSchema(date=d.date, full_date=d.full_date, amount=float(d.amount), count=d.count)
            for d in dashboard.series
        ],
        period_index=dashboard.period_index,
        period_count=dashboard.period_count,
        period_start=dashboard.period_start,
        period_end=dashboard.period_end,
        recent_payments=[PaymentSchema.model_validate(p, from_attributes=True) for p in dashboard.recent_payments],
    )
