"""Payments API HTTP client for fetching payments, merchants and code tables"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from paydash.config import settings
from paydash.domain.amounts import is_valid_amount
from paydash.domain.exceptions import MerchantNotFoundError, PaymentsAPIError
from paydash.domain.models import CodeLabel, Merchant, MerchantDetail, Payment
from paydash.infrastructure.observability.metrics import malformed_amount_counter, payments_fetch_failures_counter

logger = logging.getLogger(__name__)


def parse_payment(raw: Dict[str, Any]) -> Payment:
    """Build a Payment from an upstream record, warning once if its amount is malformed"""
    payment = Payment(
        payment_code=raw["paymentCode"],
        mcht_code=raw["mchtCode"],
        amount=str(raw["amount"]),
        currency=raw.get("currency") or "",
        pay_type=raw["payType"],
        status=raw["status"],
        payment_at=raw["paymentAt"],
        mcht_name=raw.get("mchtName"),
    )
    if not is_valid_amount(payment.amount):
        malformed_amount_counter.inc()
        logger.warning(
            "Malformed payment amount counted as zero",
            extra={"payment_code": payment.payment_code, "amount": payment.amount},
        )
    return payment


def parse_merchant(raw: Dict[str, Any]) -> Merchant:
    return Merchant(
        mcht_code=raw["mchtCode"],
        mcht_name=raw.get("mchtName") or raw["mchtCode"],
        status=raw["status"],
        biz_type=raw.get("bizType") or "",
    )


def parse_merchant_detail(raw: Dict[str, Any]) -> MerchantDetail:
    return MerchantDetail(
        mcht_code=raw["mchtCode"],
        mcht_name=raw.get("mchtName") or raw["mchtCode"],
        status=raw["status"],
        biz_type=raw.get("bizType") or "",
        biz_no=raw.get("bizNo") or "",
        address=raw.get("address") or "",
        phone=raw.get("phone") or "",
        email=raw.get("email") or "",
        registered_at=raw.get("registeredAt") or "",
        updated_at=raw.get("updatedAt") or "",
    )


class PaymentsClient:
    """Client for the external payments REST API"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.payments_api_base).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def _get_data(self, path: str, resource: str, not_found_message: Optional[str] = None) -> Any:
        """
        GET an endpoint and unwrap the {status, message, data} envelope.

        Raises:
            PaymentsAPIError: On timeout, network or HTTP errors, or a non-JSON body
            MerchantNotFoundError: On 404 when not_found_message is given
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(f"{self.base_url}{path}")
                response.raise_for_status()
                body = response.json()

            except httpx.TimeoutException as e:
                payments_fetch_failures_counter.labels(resource=resource).inc()
                raise PaymentsAPIError(f"Payments API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                if e.response.status_code == 404 and not_found_message:
                    raise MerchantNotFoundError(not_found_message) from e
                payments_fetch_failures_counter.labels(resource=resource).inc()
                raise PaymentsAPIError(f"Payments API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                payments_fetch_failures_counter.labels(resource=resource).inc()
                raise PaymentsAPIError(f"Payments API unreachable: {e}") from e
            except ValueError as e:
                payments_fetch_failures_counter.labels(resource=resource).inc()
                raise PaymentsAPIError(f"Invalid JSON from payments API: {e}") from e

        if not isinstance(body, dict):
            payments_fetch_failures_counter.labels(resource=resource).inc()
            raise PaymentsAPIError("Unexpected response envelope from payments API")
        return body.get("data")

    async def _get_records(self, path: str, resource: str, parse) -> list:
        data = await self._get_data(path, resource)
        try:
            return [parse(item) for item in data or []]
        except (KeyError, ValueError, TypeError) as e:
            payments_fetch_failures_counter.labels(resource=resource).inc()
            raise PaymentsAPIError(f"Invalid {resource} data from payments API: {e}") from e

    async def get_payments(self) -> List[Payment]:
        """Fetch the complete, unpaginated payment feed"""
        return await self._get_records("/payments/list", "payments", parse_payment)

    async def get_merchants(self) -> List[Merchant]:
        return await self._get_records("/merchants/list", "merchants", parse_merchant)

    async def get_merchant_detail(self, mcht_code: str) -> MerchantDetail:
        """
        Fetch one merchant profile.

        Raises:
            MerchantNotFoundError: Upstream has no merchant with this code
        """
        message = f"Merchant {mcht_code} not found"
        data = await self._get_data(f"/merchants/details/{mcht_code}", "merchants", not_found_message=message)
        if not data:
            raise MerchantNotFoundError(message)
        try:
            return parse_merchant_detail(data)
        except (KeyError, ValueError, TypeError) as e:
            payments_fetch_failures_counter.labels(resource="merchants").inc()
            raise PaymentsAPIError(f"Invalid merchant data from payments API: {e}") from e

    async def get_payment_status_codes(self) -> List[CodeLabel]:
        return await self._get_records(
            "/common/payment-status/all",
            "codes",
            lambda c: CodeLabel(code=c["code"], description=c["description"]),
        )

    async def get_pay_type_codes(self) -> List[CodeLabel]:
        # Upstream path is spelled "paymemt-type"
        return await self._get_records(
            "/common/paymemt-type/all",
            "codes",
            lambda c: CodeLabel(code=c["type"], description=c["description"]),
        )

    async def get_merchant_status_codes(self) -> List[CodeLabel]:
        return await self._get_records(
            "/common/mcht-status/all",
            "codes",
            lambda c: CodeLabel(code=c["code"], description=c["description"]),
        )
