"""HTTP view for tokenizing a customer's credit card.

On success the token is stored for the customer and the response (without
empty fields) is returned with 201 and the new ``id_credit_card``. A card the
gateway rejects is answered with 422 and the gateway's error description.
"""

import logging

import httpx
from fastapi import APIRouter, Body, HTTPException
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from onboarding.errors import CustomerNotFound, UpstreamUnavailable
from onboarding.payments.providers import get_tokenization_service
from onboarding.payments.repository import CustomerRepository
from .schemas import CreditCardIn

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/tokenization", tags=["tokenization"])


@router.post("")
def tokenize_credit_card(payload: dict = Body(...)):
    try:
        dto = CreditCardIn.model_validate(payload)
    except ValidationError as e:
        # card number stays out of the error detail
        raise HTTPException(status_code=400, detail=[err["msg"] for err in e.errors()])

    customers = CustomerRepository()
    customer = customers.get(dto.id_customer)
    if customer is None:
        raise HTTPException(status_code=CustomerNotFound.status_code, detail=CustomerNotFound.code)

    service = get_tokenization_service()
    try:
        response = service.tokenize(customer, dto)
    except (httpx.HTTPError, UpstreamUnavailable):
        log.exception("tokenization gateway unavailable", extra={"customer_id": customer.id})
        raise HTTPException(status_code=503, detail="UPSTREAM_UNAVAILABLE")

    if not service.succeeded(response):
        return JSONResponse(response.model_dump(mode="json"), status_code=422)

    card = customers.add_credit_card(
        customer.id,
        token=response.credit_card_token_id,
        payment_method=response.payment_method or dto.payment_method,
        masked_number=response.masked_number,
    )
    body = response.model_dump(mode="json")
    body["id_credit_card"] = card.id
    return JSONResponse(body, status_code=201)
