"""GET /v1/codes - Label tables for status and payment method codes"""

import asyncio
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from paydash.api.v1.schemas import CodeLabelSchema, CodesResponse
from paydash.api.dependencies import get_payments_client, get_request_id
from paydash.infrastructure.clients.payments import PaymentsClient
from paydash.domain.exceptions import PaymentsAPIError

router = APIRouter()


@router.get("/codes", response_model=CodesResponse)
async def get_codes(request: Request, client: PaymentsClient = Depends(get_payments_client)):
    """Pass-through of the upstream code tables, used by the front end for labels"""
    try:
        statuses, pay_types, merchant_statuses = await asyncio.gather(
            client.get_payment_status_codes(),
            client.get_pay_type_codes(),
            client.get_merchant_status_codes(),
        )
    except PaymentsAPIError as e:
        logging.error(f"Payments API error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Payments service unavailable")

    return CodesResponse(
        payment_statuses=[CodeLabelSchema(code=c.code, description=c.description) for c in statuses],
        pay_types=[CodeLabelSchema(code=c.code, description=c.description) for c in pay_types],
        merchant_statuses=[CodeLabelSchema(code=c.code, description=c.description) for c in merchant_statuses],
    )
