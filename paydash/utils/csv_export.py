"""CSV export of payment lists"""

import csv
import io
from typing import Dict, Sequence

from paydash.domain.labels import resolve_label
from paydash.domain.models import Payment
from paydash.utils.date_utils import parse_timestamp

CSV_HEADERS = [
    "Payment Code",
    "Payment Time",
    "Merchant Code",
    "Merchant Name",
    "Amount",
    "Currency",
    "Pay Type",
    "Status",
]

# Lets spreadsheet tools detect UTF-8
UTF8_BOM = "\ufeff"


def format_payment_time(timestamp: str) -> str:
    """YYYY-MM-DD HH:MM:SS, or the raw value when it cannot be parsed"""
    parsed = parse_timestamp(timestamp)
    if parsed is None:
        return timestamp
    return parsed.strftime("%Y-%m-%d %H:%M:%S")


def payments_to_csv(
    payments: Sequence[Payment],
    status_labels: Dict[str, str] | None = None,
    pay_type_labels: Dict[str, str] | None = None,
) -> str:
    """
    Serialize payments to CSV with every cell quoted.

    Amounts are written exactly as received. Status and pay type codes are
    replaced with their labels where a label is known.
    """
    status_labels = status_labels or {}
    pay_type_labels = pay_type_labels or {}

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for p in payments:
        writer.writerow(
            [
                p.payment_code,
                format_payment_time(p.payment_at),
                p.mcht_code,
                p.mcht_name or "",
                p.amount,
                p.currency,
                resolve_label(p.pay_type, pay_type_labels),
                resolve_label(p.status, status_labels),
            ]
        )
    return UTF8_BOM + buffer.getvalue()
