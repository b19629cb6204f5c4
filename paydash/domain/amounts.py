"""Payment amount parsing"""

from decimal import Decimal, InvalidOperation

ZERO = Decimal(0)


def parse_amount(raw: object) -> Decimal:
    """
    Parse a payment amount string into a Decimal.

    Malformed or non-finite values (including "NaN" and "Infinity") fall back
    to zero so one bad record cannot poison every downstream sum. The client
    layer records a warning for each such record when it is fetched.
    """
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
    if not value.is_finite():
        return ZERO
    return value


def is_valid_amount(raw: object) -> bool:
    """True when raw parses to a finite decimal"""
    try:
        return Decimal(str(raw).strip()).is_finite()
    except (InvalidOperation, ValueError, TypeError):
        return False
