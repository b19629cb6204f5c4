"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

# Payment lifecycle codes
PAYMENT_PENDING = "PENDING"
PAYMENT_SUCCESS = "SUCCESS"
PAYMENT_FAILED = "FAILED"
PAYMENT_CANCELLED = "CANCELLED"
PAYMENT_REFUNDED = "REFUNDED"

# Merchant lifecycle codes
MERCHANT_ACTIVE = "ACTIVE"
MERCHANT_INACTIVE = "INACTIVE"
MERCHANT_READY = "READY"
MERCHANT_CLOSED = "CLOSED"


@dataclass(frozen=True)
class Payment:
    """Payment record from the upstream payments API"""

    payment_code: str
    mcht_code: str
    amount: str  # Decimal encoded as string, parsed by the engine
    currency: str
    pay_type: str  # ONLINE, DEVICE, MOBILE, VACT, BILLING, ...
    status: str  # PENDING, SUCCESS, FAILED, CANCELLED, REFUNDED
    payment_at: str  # ISO 8601 timestamp
    mcht_name: Optional[str] = None


@dataclass(frozen=True)
class Merchant:
    """Merchant list entry"""

    mcht_code: str
    mcht_name: str
    status: str  # ACTIVE, INACTIVE, READY, CLOSED
    biz_type: str


@dataclass(frozen=True)
class MerchantDetail:
    """Full merchant profile"""

    mcht_code: str
    mcht_name: str
    status: str
    biz_type: str
    biz_no: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    registered_at: str = ""
    updated_at: str = ""


@dataclass
class EnrichedMerchant:
    """Merchant with activity derived from the payment feed (not persisted upstream)"""

    mcht_code: str
    mcht_name: str
    status: str
    biz_type: str
    transaction_count: int
    total_amount: Decimal


@dataclass
class CodeLabel:
    """Human-readable description for a status or method code"""

    code: str
    description: str


@dataclass
class Bucket:
    """Group of payments sharing a status or pay type"""

    key: str
    count: int
    amount: Decimal


@dataclass
class DateBucket:
    """Payments on one calendar date"""

    date: str  # MM-DD
    full_date: str  # YYYY-MM-DD
    amount: Decimal  # SUCCESS payments only
    count: int  # All statuses


@dataclass
class MonthBucket:
    """Payments in one calendar month"""

    month: str  # YYYY-MM
    label: str  # MM
    amount: Decimal
    count: int


@dataclass
class TopMerchantEntry:
    """One row of the top-merchant ranking"""

    mcht_code: str
    mcht_name: str
    total_amount: Decimal
    transaction_count: int
    percent: float


@dataclass
class Totals:
    """Headline totals over a payment set"""

    total_amount: Decimal
    total_count: int
    success_rate: float


@dataclass
class Trend:
    """Percentage change from the first half of a payment set to the second"""

    amount_trend: float
    count_trend: float
    success_rate_trend: float


@dataclass
class DashboardStats:
    """Stats card values shown at the top of the dashboard"""

    total_amount: Decimal
    total_count: int
    success_rate: float
    active_merchant_count: int
    amount_trend: float
    count_trend: float
    success_rate_trend: float


@dataclass
class MerchantSummary:
    """Recent totals and monthly series for a single merchant"""

    totals: Totals
    monthly: List[MonthBucket]


@dataclass
class Dashboard:
    """Everything the dashboard page renders"""

    stats: DashboardStats
    status_buckets: List[Bucket]
    method_buckets: List[Bucket]
    top_merchants: List[TopMerchantEntry]
    series: List[DateBucket]
    period_index: int
    period_count: int
    recent_payments: List[Payment]
    period_start: Optional[str] = None
    period_end: Optional[str] = None


@dataclass
class PaymentFilter:
    """Optional criteria for narrowing a payment list"""

    start_date: Optional[str] = None  # YYYY-MM-DD
    end_date: Optional[str] = None  # YYYY-MM-DD, inclusive
    mcht_code: Optional[str] = None
    pay_type: Optional[str] = None
    status: Optional[str] = None
    min_amount: Optional[Decimal] = None
    max_amount: Optional[Decimal] = None


@dataclass
class Page:
    """One page of a list"""

    items: list
    page: int
    page_size: int
    total_pages: int
    total_items: int
