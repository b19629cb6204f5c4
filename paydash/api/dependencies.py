"""Dependency injection for FastAPI endpoints"""

from decimal import Decimal
from typing import Optional

from fastapi import Query, Request
from paydash.domain.models import PaymentFilter
from paydash.infrastructure.clients.payments import PaymentsClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_payments_client() -> PaymentsClient:
    """Provide Payments API client instance"""
    return PaymentsClient()


def get_payment_filter(
    start_date: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
    end_date: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
    mcht_code: Optional[str] = Query(None),
    pay_type: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    min_amount: Optional[Decimal] = Query(None, ge=0),
    max_amount: Optional[Decimal] = Query(None, ge=0),
) -> PaymentFilter:
    """Collect payment list filters from query parameters"""
    return PaymentFilter(
        start_date=start_date,
        end_date=end_date,
        mcht_code=mcht_code,
        pay_type=pay_type,
        status=status,
        min_amount=min_amount,
        max_amount=max_amount,
    )
