"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class PaymentsAPIError(DomainException):
    """Payments API returned an error, is unavailable, or sent malformed records"""

    pass


class MerchantNotFoundError(DomainException):
    """Requested merchant does not exist upstream"""

    pass
