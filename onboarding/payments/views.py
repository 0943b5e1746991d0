"""HTTP view for paying purchase orders with a tokenized card.

The view validates the payload, loads the order and customer, claims the
order (``PENDING``) with a conditional update so only one payment can be in
flight, delegates to the ``PaymentService`` from ``get_payment_service()``
and records the outcome: a payment row is stored and the order status
follows the gateway transaction state.

When the request certainly never reached the gateway (card check, signing,
connection refused, open circuit) or the gateway refused it outright, the
order goes back to the status it had. Any other transport failure leaves it
``PENDING`` because the charge may have gone through.

Responses carry the payment body with:
    - 200 when the gateway approved the payment or left it pending.
    - 402 when the gateway declined it.
    - 502 when the gateway answered without a transaction (``code`` ERROR).
Errors are ``{"detail": CODE}``: 400 validation, 404 unknown order or
customer, 409 ``ORDER_ALREADY_PAID`` or ``PAYMENT_IN_PROGRESS``, 422
``CREDIT_CARD_INVALID`` or ``PURCHASE_ORDER_INVALID``, 503
``UPSTREAM_UNAVAILABLE`` and 500 ``CRYPTO_UNAVAILABLE``.
"""

import logging

import httpx
from fastapi import APIRouter, Body, HTTPException
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from onboarding.errors import BusinessError, CryptoUnavailable, CustomerNotFound, OrderAlreadyPaid, \
    PaymentInProgress, PurchaseOrderInvalid, PurchaseOrderNotFound, UpstreamUnavailable
from onboarding.orders.domain import OrderStatus
from onboarding.orders.repository import PurchaseOrderRepository
from .providers import get_payment_service
from .repository import CustomerRepository, PaymentRepository
from .schemas import PaymentTransactionIn

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/payments", tags=["payments"])


def _raise_http(e: BusinessError):
    raise HTTPException(status_code=e.status_code, detail=e.code) from e


@router.post("")
def pay_purchase_order(payload: dict = Body(...)):
    try:
        dto = PaymentTransactionIn.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    orders = PurchaseOrderRepository()
    order = orders.get(dto.id_purchase_order)
    if order is None:
        _raise_http(PurchaseOrderNotFound())
    customer = CustomerRepository().get(dto.id_customer)
    if customer is None:
        _raise_http(CustomerNotFound())
    if order.customer_id != customer.id:
        _raise_http(PurchaseOrderInvalid())
    if order.status == OrderStatus.PAID:
        _raise_http(OrderAlreadyPaid())

    service = get_payment_service()
    if not orders.claim_for_payment(order.id):
        _raise_http(PaymentInProgress())

    try:
        response = service.pay(order, customer, dto)
    except BusinessError as e:
        orders.update_status(order.id, order.status)
        _raise_http(e)
    except CryptoUnavailable as e:
        orders.update_status(order.id, order.status)
        raise HTTPException(status_code=500, detail=e.code)
    except (httpx.ConnectError, UpstreamUnavailable):
        orders.update_status(order.id, order.status)
        log.exception("payment gateway unavailable", extra={"order_id": order.id})
        raise HTTPException(status_code=503, detail="UPSTREAM_UNAVAILABLE")
    except httpx.HTTPError:
        log.exception("payment outcome unknown, order left PENDING", extra={"order_id": order.id})
        raise HTTPException(status_code=503, detail="UPSTREAM_UNAVAILABLE")
    except Exception:
        orders.update_status(order.id, order.status)
        raise

    PaymentRepository().create(order.id, dto.id_credit_card, response)
    if response.status is None:
        orders.update_status(order.id, order.status)
        return JSONResponse(response.model_dump(mode="json"), status_code=502)

    status = service.order_status(response)
    orders.update_status(order.id, status)
    code = 402 if status == OrderStatus.DECLINED else 200
    return JSONResponse(response.model_dump(mode="json"), status_code=code)
