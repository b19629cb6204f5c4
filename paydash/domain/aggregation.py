"""Aggregation engine - turns the raw payment feed into dashboard statistics

Every function here is pure: inputs are never mutated and each call returns
fresh objects. Callers pass the complete payment set; grouping and trend
logic assume nothing has been paged away upstream.
"""

import math
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from paydash.domain.amounts import ZERO, parse_amount
from paydash.domain.listing import recent_payments
from paydash.domain.models import (
    Bucket,
    Dashboard,
    DashboardStats,
    DateBucket,
    EnrichedMerchant,
    Merchant,
    MERCHANT_ACTIVE,
    MonthBucket,
    MerchantSummary,
    Payment,
    PAYMENT_SUCCESS,
    TopMerchantEntry,
    Totals,
    Trend,
)
from paydash.utils.date_utils import date_key, month_key, parse_timestamp, trailing_month_keys

BUCKET_FIELDS = ("status", "pay_type")


def _percent_change(before, after) -> float:
    # Zero baseline reports no change rather than an infinite one
    if before == 0:
        return 0.0
    return float((after - before) / before * 100)


def _success_amount(payments: Sequence[Payment]) -> Decimal:
    return sum((parse_amount(p.amount) for p in payments if p.status == PAYMENT_SUCCESS), ZERO)


def compute_totals(payments: Sequence[Payment]) -> Totals:
    """
    Headline totals for a payment set.

    - total_amount: sum of SUCCESS payments only
    - total_count: every payment, regardless of status
    - success_rate: SUCCESS share in percent, 0 for an empty set
    """
    total_count = len(payments)
    success_count = sum(1 for p in payments if p.status == PAYMENT_SUCCESS)
    success_rate = (success_count / total_count) * 100 if total_count > 0 else 0.0

    return Totals(
        total_amount=_success_amount(payments),
        total_count=total_count,
        success_rate=success_rate,
    )


def compute_trend(payments: Sequence[Payment]) -> Trend:
    """
    Compare the first half of the payment list with the second half.

    The list is split at len // 2 in the order given; the caller decides the
    ordering. Each trend is (second - first) / first * 100, or 0 when the
    first half value is 0.
    """
    payments = list(payments)
    midpoint = len(payments) // 2
    first = compute_totals(payments[:midpoint])
    second = compute_totals(payments[midpoint:])

    return Trend(
        amount_trend=_percent_change(first.total_amount, second.total_amount),
        count_trend=_percent_change(first.total_count, second.total_count),
        success_rate_trend=_percent_change(first.success_rate, second.success_rate),
    )


def bucket_by_field(payments: Sequence[Payment], field: str) -> List[Bucket]:
    """
    Group payments by exact value of `status` or `pay_type`.

    Buckets come out in order of first occurrence. Amounts include every
    status, unlike compute_totals. Unknown codes are kept as opaque keys.
    """
    if field not in BUCKET_FIELDS:
        raise ValueError(f"Cannot bucket payments by {field!r}")

    buckets: Dict[str, Bucket] = {}
    for payment in payments:
        key = getattr(payment, field)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = Bucket(key=key, count=0, amount=ZERO)
        bucket.count += 1
        bucket.amount += parse_amount(payment.amount)

    return list(buckets.values())


def rank_top_merchants(payments: Sequence[Payment], limit: int = 5) -> List[TopMerchantEntry]:
    """
    Rank merchants by the summed amount of all their payments.

    Requirements:
    - Amounts are not filtered by status
    - Display name falls back to the merchant code; the latest name seen wins
    - Ties keep first-seen order (sorted() is stable under reverse=True)
    - percent is the share of the revenue across all merchants, not only the top N
    """
    grouped: Dict[str, TopMerchantEntry] = {}
    for payment in payments:
        entry = grouped.get(payment.mcht_code)
        if entry is None:
            entry = grouped[payment.mcht_code] = TopMerchantEntry(
                mcht_code=payment.mcht_code,
                mcht_name=payment.mcht_code,
                total_amount=ZERO,
                transaction_count=0,
                percent=0.0,
            )
        entry.mcht_name = payment.mcht_name or payment.mcht_code
        entry.total_amount += parse_amount(payment.amount)
        entry.transaction_count += 1

    total_revenue = sum((e.total_amount for e in grouped.values()), ZERO)
    ranked = sorted(grouped.values(), key=lambda e: e.total_amount, reverse=True)[: max(limit, 0)]

    for entry in ranked:
        entry.percent = float(entry.total_amount / total_revenue * 100) if total_revenue != 0 else 0.0

    return ranked


def build_date_series(payments: Sequence[Payment]) -> List[DateBucket]:
    """
    Bucket payments by calendar date, oldest first.

    amount sums SUCCESS payments only; count includes every status.
    """
    by_date: Dict[str, DateBucket] = {}
    for payment in payments:
        full_date = date_key(payment.payment_at)
        bucket = by_date.get(full_date)
        if bucket is None:
            bucket = by_date[full_date] = DateBucket(
                date=full_date[-5:],
                full_date=full_date,
                amount=ZERO,
                count=0,
            )
        if payment.status == PAYMENT_SUCCESS:
            bucket.amount += parse_amount(payment.amount)
        bucket.count += 1

    # YYYY-MM-DD sorts lexicographically in chronological order
    return [by_date[key] for key in sorted(by_date)]


def period_count(series: Sequence, page_size: int = 30) -> int:
    """Number of fixed-size periods needed to cover the series"""
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    return math.ceil(len(series) / page_size)


def default_period_index(series: Sequence, page_size: int = 30) -> int:
    """Index of the most recent period (0 for an empty series)"""
    return max(period_count(series, page_size) - 1, 0)


def paginate_series(series: Sequence, period_index: int, page_size: int = 30) -> list:
    """Slice one period out of the series; out-of-range indices give an empty list"""
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    if period_index < 0:
        return []
    start = period_index * page_size
    return list(series[start : start + page_size])


def enrich_merchants(merchants: Sequence[Merchant], payments: Sequence[Payment]) -> List[EnrichedMerchant]:
    """
    Attach transaction_count and total_amount to each merchant.

    total_amount sums every matching payment regardless of status. This
    differs from the SUCCESS-only dashboard total and is kept that way.
    """
    activity: Dict[str, List[Decimal]] = {}
    for payment in payments:
        activity.setdefault(payment.mcht_code, []).append(parse_amount(payment.amount))

    enriched = []
    for merchant in merchants:
        amounts = activity.get(merchant.mcht_code, [])
        enriched.append(
            EnrichedMerchant(
                mcht_code=merchant.mcht_code,
                mcht_name=merchant.mcht_name,
                status=merchant.status,
                biz_type=merchant.biz_type,
                transaction_count=len(amounts),
                total_amount=sum(amounts, ZERO),
            )
        )
    return enriched


def count_active_merchants(merchants: Sequence[Merchant]) -> int:
    return sum(1 for m in merchants if m.status == MERCHANT_ACTIVE)


def compute_dashboard_stats(payments: Sequence[Payment], merchants: Sequence[Merchant]) -> DashboardStats:
    totals = compute_totals(payments)
    trend = compute_trend(payments)

    return DashboardStats(
        total_amount=totals.total_amount,
        total_count=totals.total_count,
        success_rate=totals.success_rate,
        active_merchant_count=count_active_merchants(merchants),
        amount_trend=trend.amount_trend,
        count_trend=trend.count_trend,
        success_rate_trend=trend.success_rate_trend,
    )


def build_dashboard(
    payments: Sequence[Payment],
    merchants: Sequence[Merchant],
    period_index: Optional[int] = None,
    page_size: int = 30,
    top_limit: int = 5,
    recent_limit: int = 5,
) -> Dashboard:
    """
    Main entry point: compute every aggregate the dashboard page shows.

    period_index defaults to the most recent period and is clamped into
    [0, period_count - 1] when given.
    """
    series = build_date_series(payments)
    periods = period_count(series, page_size)
    last_index = max(periods - 1, 0)

    if period_index is None:
        period_index = last_index
    period_index = min(max(period_index, 0), last_index)
    window = paginate_series(series, period_index, page_size)

    return Dashboard(
        stats=compute_dashboard_stats(payments, merchants),
        status_buckets=bucket_by_field(payments, "status"),
        method_buckets=bucket_by_field(payments, "pay_type"),
        top_merchants=rank_top_merchants(payments, top_limit),
        series=window,
        period_index=period_index,
        period_count=periods,
        recent_payments=recent_payments(payments, recent_limit),
        period_start=window[0].full_date if window else None,
        period_end=window[-1].full_date if window else None,
    )


def summarize_merchant(
    payments: Sequence[Payment],
    mcht_code: str,
    as_of: datetime,
    window_days: int = 30,
    months: int = 6,
) -> MerchantSummary:
    """
    Per-merchant statistics for the merchant detail view.

    - totals: compute_totals over the merchant's payments since as_of - window_days
    - monthly: exactly `months` buckets ending at the month of as_of; amount
      is SUCCESS-only, count includes every status

    as_of is a naive UTC datetime; payments with unparseable timestamps are
    left out of both.
    """
    cutoff = as_of - timedelta(days=window_days)
    keys = trailing_month_keys(as_of.date(), months)
    monthly = {key: MonthBucket(month=key, label=key[5:], amount=ZERO, count=0) for key in keys}

    recent = []
    for payment in payments:
        if payment.mcht_code != mcht_code:
            continue
        paid_at = parse_timestamp(payment.payment_at)
        if paid_at is None:
            continue
        if paid_at >= cutoff:
            recent.append(payment)

        bucket = monthly.get(month_key(paid_at))
        if bucket is not None:
            if payment.status == PAYMENT_SUCCESS:
                bucket.amount += parse_amount(payment.amount)
            bucket.count += 1

    return MerchantSummary(
        totals=compute_totals(recent),
        monthly=[monthly[key] for key in keys],
    )
