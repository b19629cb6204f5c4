"""Pydantic schemas for API responses"""

from pydantic import BaseModel
from typing import List, Optional


class PaymentSchema(BaseModel):
    """Single payment as received from upstream"""

    payment_code: str
    mcht_code: str
    mcht_name: Optional[str] = None
    amount: str
    currency: str
    pay_type: str
    status: str
    payment_at: str


class StatsSchema(BaseModel):
    """Stats cards: totals plus first-half vs second-half trends (percent)"""

    total_amount: float
    total_count: int
    success_rate: float
    active_merchant_count: int
    amount_trend: float
    count_trend: float
    success_rate_trend: float


class StatusBucketSchema(BaseModel):
    status: str
    count: int
    amount: float


class MethodBucketSchema(BaseModel):
    pay_type: str
    count: int
    amount: float


class TopMerchantSchema(BaseModel):
    mcht_code: str
    mcht_name: str
    total_amount: float
    transaction_count: int
    percent: float


class DateBucketSchema(BaseModel):
    date: str
    full_date: str
    amount: float
    count: int


class DashboardResponse(BaseModel):
    """Response for GET /v1/dashboard"""

    stats: StatsSchema
    status_distribution: List[StatusBucketSchema]
    method_distribution: List[MethodBucketSchema]
    top_merchants: List[TopMerchantSchema]
    trend: List[DateBucketSchema]
    period_index: int
    period_count: int
    period_start: Optional[str] = None
    period_end: Optional[str] = None
    recent_payments: List[PaymentSchema]


class PaymentListResponse(BaseModel):
    """Response for GET /v1/payments"""

    payments: List[PaymentSchema]
    page: int
    page_size: int
    total_pages: int
    total_items: int


class MerchantSchema(BaseModel):
    """Merchant with activity derived from the payment feed"""

    mcht_code: str
    mcht_name: str
    status: str
    biz_type: str
    transaction_count: int
    total_amount: float


class MerchantListResponse(BaseModel):
    """Response for GET /v1/merchants"""

    merchants: List[MerchantSchema]
    page: int
    page_size: int
    total_pages: int
    total_items: int


class MerchantProfileSchema(BaseModel):
    mcht_code: str
    mcht_name: str
    status: str
    biz_type: str
    biz_no: str
    address: str
    phone: str
    email: str
    registered_at: str
    updated_at: str


class MerchantTotalsSchema(BaseModel):
    """Totals over the merchant's recent window"""

    total_amount: float
    total_count: int
    success_rate: float


class MonthBucketSchema(BaseModel):
    month: str
    label: str
    amount: float
    count: int


class MerchantDetailResponse(BaseModel):
    """Response for GET /v1/merchants/{mcht_code}"""

    merchant: MerchantProfileSchema
    totals: MerchantTotalsSchema
    monthly: List[MonthBucketSchema]
    recent_payments: List[PaymentSchema]


class CodeLabelSchema(BaseModel):
    code: str
    description: str


class CodesResponse(BaseModel):
    """Response for GET /v1/codes"""

    payment_statuses: List[CodeLabelSchema]
    pay_types: List[CodeLabelSchema]
    merchant_statuses: List[CodeLabelSchema]
