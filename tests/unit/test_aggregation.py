"""Unit tests for the aggregation engine"""

import pytest
from datetime import date, datetime, timedelta
from decimal import Decimal
from paydash.domain.amounts import parse_amount
from paydash.domain.aggregation import (
    bucket_by_field,
    build_dashboard,
    build_date_series,
    compute_dashboard_stats,
    compute_totals,
    compute_trend,
    count_active_merchants,
    default_period_index,
    enrich_merchants,
    paginate_series,
    period_count,
    rank_top_merchants,
    summarize_merchant,
)


@pytest.fixture
def two_payments(payment_factory):
    """One success and one failure on consecutive days"""
    return [
        payment_factory("P1", amount="100", status="SUCCESS", payment_at="2024-01-01T10:00:00"),
        payment_factory("P2", amount="50", status="FAILED", payment_at="2024-01-02T09:00:00"),
    ]


def test_parse_amount_valid_and_malformed():
    """Test malformed and non-finite amounts fall back to zero"""
    assert parse_amount("1234.56") == Decimal("1234.56")
    assert parse_amount(" 10 ") == Decimal("10")
    assert parse_amount("abc") == 0
    assert parse_amount("") == 0
    assert parse_amount(None) == 0
    assert parse_amount("NaN") == 0
    assert parse_amount("Infinity") == 0


def test_parse_amount_keeps_decimal_precision():
    """Test summing decimal strings does not drift like binary floats"""
    assert parse_amount("0.1") + parse_amount("0.2") == Decimal("0.3")


def test_compute_totals_scenario(two_payments):
    """Test totals only count SUCCESS amounts but every payment"""
    totals = compute_totals(two_payments)

    assert totals.total_amount == 100
    assert totals.total_count == 2
    assert totals.success_rate == 50.0


def test_compute_totals_no_success(payment_factory):
    """Test no SUCCESS payments gives zero amount and rate"""
    payments = [
        payment_factory("P1", status="FAILED"),
        payment_factory("P2", status="PENDING"),
    ]
    totals = compute_totals(payments)

    assert totals.total_amount == 0
    assert totals.success_rate == 0
    assert totals.total_count == 2


def test_compute_totals_malformed_amount_counts_as_zero(payment_factory):
    """Test one bad amount does not poison the total"""
    payments = [
        payment_factory("P1", amount="100"),
        payment_factory("P2", amount="not-a-number"),
    ]
    assert compute_totals(payments).total_amount == 100


def test_compute_trend(sample_payments):
    """Test first half vs second half comparison"""
    trend = compute_trend(sample_payments)

    # First half: 4000 success amount, 3 payments, 2/3 success
    # Second half: 700 success amount, 3 payments, 1/3 success
    assert trend.amount_trend == pytest.approx(-82.5)
    assert trend.count_trend == 0.0
    assert trend.success_rate_trend == pytest.approx(-50.0)


def test_compute_trend_odd_length_split(payment_factory):
    """Test midpoint is floor(n/2) so the second half gets the extra payment"""
    payments = [
        payment_factory("P1", amount="100"),
        payment_factory("P2", amount="100"),
        payment_factory("P3", amount="100"),
    ]
    trend = compute_trend(payments)

    assert trend.amount_trend == pytest.approx(100.0)  # 100 -> 200
    assert trend.count_trend == pytest.approx(100.0)  # 1 -> 2
    assert trend.success_rate_trend == 0.0


def test_compute_trend_zero_baseline(payment_factory):
    """Test zero first-half values report 0 instead of dividing by zero"""
    payments = [
        payment_factory("P1", amount="100", status="FAILED"),
        payment_factory("P2", amount="100", status="SUCCESS"),
    ]
    trend = compute_trend(payments)

    assert trend.amount_trend == 0.0
    assert trend.success_rate_trend == 0.0
    assert trend.count_trend == 0.0

    single = compute_trend([payment_factory("P1")])
    assert single.count_trend == 0.0


def test_compute_trend_preserves_input_order(payment_factory):
    """Test no sorting happens before the split"""
    late = payment_factory("P1", amount="300", payment_at="2024-02-01T00:00:00")
    early = payment_factory("P2", amount="100", payment_at="2024-01-01T00:00:00")

    assert compute_trend([late, early]).amount_trend == pytest.approx(-200 / 3)
    assert compute_trend([early, late]).amount_trend == pytest.approx(200.0)


def test_bucket_by_status_scenario(two_payments):
    """Test status buckets in first-occurrence order"""
    buckets = bucket_by_field(two_payments, "status")

    assert [(b.key, b.count, b.amount) for b in buckets] == [
        ("SUCCESS", 1, 100),
        ("FAILED", 1, 50),
    ]


def test_bucket_by_pay_type_includes_all_statuses(sample_payments):
    """Test method buckets sum amounts regardless of status"""
    buckets = bucket_by_field(sample_payments, "pay_type")

    assert [(b.key, b.count, b.amount) for b in buckets] == [
        ("ONLINE", 3, 1900),
        ("DEVICE", 1, 500),
        ("MOBILE", 1, 3000),
        ("VACT", 1, 50),
    ]


def test_bucket_by_field_unknown_codes_pass_through(payment_factory):
    """Test unrecognized status codes still form their own bucket"""
    buckets = bucket_by_field([payment_factory(status="CHARGEBACK")], "status")
    assert buckets[0].key == "CHARGEBACK"


def test_bucket_by_field_rejects_other_fields(sample_payments):
    with pytest.raises(ValueError):
        bucket_by_field(sample_payments, "currency")


def test_rank_top_merchants_scenario(payment_factory):
    """Test A=300, B=700 ranks B first with 70 percent"""
    payments = [
        payment_factory("P1", mcht_code="A", amount="300"),
        payment_factory("P2", mcht_code="B", amount="700"),
    ]
    ranked = rank_top_merchants(payments)

    assert [(m.mcht_code, m.percent) for m in ranked] == [("B", 70.0), ("A", 30.0)]


def test_rank_top_merchants_unfiltered_and_name_fallback(sample_payments):
    """Test ranking sums every status and falls back to the code for a missing name"""
    ranked = rank_top_merchants(sample_payments)

    assert [m.mcht_code for m in ranked] == ["M2", "M1", "M3"]
    assert ranked[0].total_amount == 3200
    assert ranked[1].total_amount == 2200
    assert ranked[1].transaction_count == 3
    assert ranked[2].mcht_name == "M3"
    assert sum(m.percent for m in ranked) == pytest.approx(100.0)


def test_rank_top_merchants_limit_and_order(payment_factory):
    """Test output respects the limit, sorts descending and percents stay at most 100"""
    payments = [payment_factory(f"P{i}", mcht_code=f"M{i}", amount=str(i * 10)) for i in range(1, 9)]
    ranked = rank_top_merchants(payments, limit=5)

    assert len(ranked) == 5
    amounts = [m.total_amount for m in ranked]
    assert amounts == sorted(amounts, reverse=True)
    assert sum(m.percent for m in ranked) < 100


def test_rank_top_merchants_ties_keep_first_seen_order(payment_factory):
    payments = [
        payment_factory("P1", mcht_code="X", amount="100"),
        payment_factory("P2", mcht_code="Y", amount="100"),
        payment_factory("P3", mcht_code="Z", amount="100"),
    ]
    assert [m.mcht_code for m in rank_top_merchants(payments)] == ["X", "Y", "Z"]


def test_rank_top_merchants_zero_revenue(payment_factory):
    """Test percent is 0 when every amount is 0"""
    ranked = rank_top_merchants([payment_factory(amount="0")])
    assert ranked[0].percent == 0.0


def test_build_date_series(sample_payments):
    """Test date buckets sorted ascending with SUCCESS-only amounts"""
    series = build_date_series(list(reversed(sample_payments)))

    assert [(d.date, d.full_date, d.amount, d.count) for d in series] == [
        ("03-01", "2024-03-01", 1000, 2),
        ("03-02", "2024-03-02", 3000, 2),
        ("03-03", "2024-03-03", 700, 2),
    ]
    for bucket in series:
        date.fromisoformat(bucket.full_date)


def test_build_date_series_drops_time_and_offset(payment_factory):
    payments = [
        payment_factory("P1", payment_at="2024-05-10T23:59:59+09:00"),
        payment_factory("P2", payment_at="2024-05-10"),
    ]
    series = build_date_series(payments)

    assert len(series) == 1
    assert series[0].full_date == "2024-05-10"
    assert series[0].count == 2


def test_paginate_series_reconstructs_series():
    """Test concatenating all periods gives back the series"""
    series = list(range(75))
    periods = period_count(series, 30)

    assert periods == 3
    rebuilt = []
    for index in range(periods):
        rebuilt.extend(paginate_series(series, index, 30))
    assert rebuilt == series


def test_paginate_series_out_of_range():
    series = list(range(10))
    assert paginate_series(series, 1, 30) == []
    assert paginate_series(series, -1, 30) == []


def test_default_period_index():
    """Test default period is the most recent one"""
    assert default_period_index(list(range(61)), 30) == 2
    assert default_period_index(list(range(60)), 30) == 1
    assert default_period_index([], 30) == 0


def test_enrich_merchants(sample_merchants, sample_payments):
    """Test enrichment sums every status, unlike dashboard totals"""
    enriched = {m.mcht_code: m for m in enrich_merchants(sample_merchants, sample_payments)}

    assert enriched["M1"].transaction_count == 3
    assert enriched["M1"].total_amount == 2200
    assert enriched["M2"].total_amount == 3200
    assert enriched["M3"].total_amount == 50
    assert enriched["M4"].transaction_count == 0
    assert enriched["M4"].total_amount == 0


def test_enrich_merchants_does_not_mutate_input(sample_merchants, sample_payments):
    enrich_merchants(sample_merchants, sample_payments)
    assert not hasattr(sample_merchants[0], "transaction_count")


def test_count_active_merchants(sample_merchants):
    assert count_active_merchants(sample_merchants) == 2


def test_compute_dashboard_stats(sample_payments, sample_merchants):
    stats = compute_dashboard_stats(sample_payments, sample_merchants)

    assert stats.total_amount == 4700
    assert stats.total_count == 6
    assert stats.success_rate == 50.0
    assert stats.active_merchant_count == 2
    assert stats.amount_trend == pytest.approx(-82.5)


def test_empty_input_everywhere():
    """Test empty payment list yields zeros and empty lists without raising"""
    totals = compute_totals([])
    trend = compute_trend([])

    assert (totals.total_amount, totals.total_count, totals.success_rate) == (0, 0, 0)
    assert (trend.amount_trend, trend.count_trend, trend.success_rate_trend) == (0, 0, 0)
    assert bucket_by_field([], "status") == []
    assert bucket_by_field([], "pay_type") == []
    assert rank_top_merchants([]) == []
    assert build_date_series([]) == []
    assert paginate_series([], 0) == []
    assert enrich_merchants([], []) == []

    dashboard = build_dashboard([], [])
    assert dashboard.period_index == 0
    assert dashboard.period_count == 0
    assert dashboard.series == []
    assert dashboard.period_start is None
    assert dashboard.recent_payments == []


def test_build_dashboard_defaults_to_latest_period(payment_factory):
    """Test 45 distinct days split into two periods, latest shown by default"""
    payments = [
        payment_factory(f"P{day}", payment_at=f"{date(2024, 1, 1) + timedelta(days=day)}T00:00:00")
        for day in range(45)
    ]
    dashboard = build_dashboard(payments, [], page_size=30)

    assert dashboard.period_count == 2
    assert dashboard.period_index == 1
    assert len(dashboard.series) == 15
    assert dashboard.period_end == dashboard.series[-1].full_date


def test_build_dashboard_clamps_period(sample_payments, sample_merchants):
    dashboard = build_dashboard(sample_payments, sample_merchants, period_index=7, page_size=2)

    assert dashboard.period_count == 2
    assert dashboard.period_index == 1
    assert [d.full_date for d in dashboard.series] == ["2024-03-03"]


def test_build_dashboard_full(sample_payments, sample_merchants):
    dashboard = build_dashboard(sample_payments, sample_merchants, top_limit=2, recent_limit=2)

    assert [b.key for b in dashboard.status_buckets] == ["SUCCESS", "FAILED", "CANCELLED", "PENDING"]
    assert [m.mcht_code for m in dashboard.top_merchants] == ["M2", "M1"]
    assert [p.payment_code for p in dashboard.recent_payments] == ["P6", "P5"]
    assert dashboard.period_start == "2024-03-01"
    assert dashboard.period_end == "2024-03-03"


def test_summarize_merchant(payment_factory):
    """Test recent-window totals and fixed-length monthly series"""
    as_of = datetime(2024, 6, 15, 12, 0, 0)
    payments = [
        payment_factory("P1", mcht_code="M1", amount="100", status="SUCCESS", payment_at="2024-06-10T10:00:00"),
        payment_factory("P2", mcht_code="M1", amount="40", status="FAILED", payment_at="2024-06-01T10:00:00"),
        payment_factory("P3", mcht_code="M1", amount="300", status="SUCCESS", payment_at="2024-04-20T10:00:00"),
        payment_factory("P4", mcht_code="M1", amount="999", status="SUCCESS", payment_at="2023-11-30T10:00:00"),
        payment_factory("P5", mcht_code="M2", amount="500", status="SUCCESS", payment_at="2024-06-12T10:00:00"),
        payment_factory("P6", mcht_code="M1", amount="10", status="SUCCESS", payment_at="garbage"),
    ]
    summary = summarize_merchant(payments, "M1", as_of, window_days=30, months=6)

    assert summary.totals.total_count == 2
    assert summary.totals.total_amount == 100
    assert summary.totals.success_rate == 50.0

    assert [b.month for b in summary.monthly] == ["2024-01", "2024-02", "2024-03", "2024-04", "2024-05", "2024-06"]
    assert summary.monthly[-1].label == "06"
    assert (summary.monthly[-1].amount, summary.monthly[-1].count) == (100, 2)
    assert (summary.monthly[3].amount, summary.monthly[3].count) == (300, 1)


def test_summarize_merchant_unknown_merchant(sample_payments):
    summary = summarize_merchant(sample_payments, "NOPE", datetime(2024, 3, 5), months=3)

    assert summary.totals.total_count == 0
    assert len(summary.monthly) == 3
    assert all(b.count == 0 for b in summary.monthly)
