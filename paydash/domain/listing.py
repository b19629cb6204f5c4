"""Filtering, sorting and page slicing for payment and merchant lists"""

import math
from datetime import datetime
from typing import Callable, Dict, List, Sequence, TypeVar

from paydash.domain.amounts import parse_amount
from paydash.domain.models import Page, Payment, PaymentFilter
from paydash.utils.date_utils import parse_timestamp

T = TypeVar("T")


def _payment_time(payment: Payment) -> datetime:
    # Unparseable timestamps sort as the oldest
    return parse_timestamp(payment.payment_at) or datetime.min


SORT_KEYS: Dict[str, Callable[[Payment], object]] = {
    "payment_at": _payment_time,
    "amount": lambda p: parse_amount(p.amount),
    "status": lambda p: p.status,
    "pay_type": lambda p: p.pay_type,
    "mcht_code": lambda p: p.mcht_name or p.mcht_code,
}


def filter_payments(payments: Sequence[Payment], criteria: PaymentFilter) -> List[Payment]:
    """
    Apply every criterion that is set; unset criteria match everything.

    Date bounds compare against the raw ISO timestamp string, with end_date
    covering the whole day. Amount bounds are inclusive.
    """
    result = list(payments)

    if criteria.start_date:
        result = [p for p in result if p.payment_at >= criteria.start_date]
    if criteria.end_date:
        end = f"{criteria.end_date}T23:59:59"
        result = [p for p in result if p.payment_at <= end]
    if criteria.mcht_code:
        result = [p for p in result if p.mcht_code == criteria.mcht_code]
    if criteria.pay_type:
        result = [p for p in result if p.pay_type == criteria.pay_type]
    if criteria.status:
        result = [p for p in result if p.status == criteria.status]
    if criteria.min_amount is not None:
        result = [p for p in result if parse_amount(p.amount) >= criteria.min_amount]
    if criteria.max_amount is not None:
        result = [p for p in result if parse_amount(p.amount) <= criteria.max_amount]

    return result


def sort_payments(payments: Sequence[Payment], field: str = "payment_at", descending: bool = True) -> List[Payment]:
    """Sort by payment_at, amount, status, pay_type or mcht_code (merchant display name)"""
    key = SORT_KEYS.get(field)
    if key is None:
        raise ValueError(f"Cannot sort payments by {field!r}")
    return sorted(payments, key=key, reverse=descending)


def recent_payments(payments: Sequence[Payment], limit: int = 5) -> List[Payment]:
    """Most recent payments first"""
    return sort_payments(payments, "payment_at", descending=True)[: max(limit, 0)]


def paginate(items: Sequence[T], page: int, page_size: int = 20) -> Page:
    """Slice a zero-based page out of items"""
    if page_size <= 0:
        raise ValueError("page_size must be positive")

    start = page * page_size
    return Page(
        items=list(items[start : start + page_size]) if page >= 0 else [],
        page=page,
        page_size=page_size,
        total_pages=math.ceil(len(items) / page_size),
        total_items=len(items),
    )


def search_merchants(merchants: Sequence[T], keyword: str) -> List[T]:
    """Case-insensitive substring match on merchant name, code or business type"""
    if not keyword:
        return list(merchants)

    needle = keyword.lower()
    return [
        m
        for m in merchants
        if needle in m.mcht_name.lower() or needle in m.mcht_code.lower() or needle in m.biz_type.lower()
    ]
