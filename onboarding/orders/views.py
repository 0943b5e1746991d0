"""HTTP views for purchase orders.

Views are kept intentionally small: they validate requests (via Pydantic),
load what the mapper needs from the repositories, delegate pricing to the
mapper and return the rendered order. Business errors are answered as
``{"detail": CODE}`` with the status carried by the error.
"""

from fastapi import APIRouter, Body, HTTPException
from pydantic import ValidationError

from onboarding.errors import BusinessError, CustomerNotFound, EmptyOrder, OrderNotEditable, PurchaseOrderInvalid, \
    PurchaseOrderNotFound
from onboarding.payments.repository import CustomerRepository
from .domain import OrderStatus
from .mapper import refresh_purchase_order, to_purchase_order, to_purchase_order_response
from .repository import ProductRepository, PurchaseOrderRepository
from .schemas import PurchaseOrderRequest

router = APIRouter(prefix="/api/v1/purchase-orders", tags=["purchase-orders"])


def _validate(payload: dict) -> PurchaseOrderRequest:
    try:
        dto = PurchaseOrderRequest.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not dto.products:
        raise HTTPException(status_code=EmptyOrder.status_code, detail=EmptyOrder.code)
    return dto


def _catalog_for(dto: PurchaseOrderRequest):
    return ProductRepository().find_by_ids(p.id_product for p in dto.products)


def _raise_http(e: BusinessError):
    raise HTTPException(status_code=e.status_code, detail=e.code) from e


@router.post("", status_code=201)
def create_purchase_order(payload: dict = Body(...)):
    """Create a purchase order for a customer.

    Returns:
        201 with the order and the catalog products it was priced from.
        400 for validation errors, 404 ``CUSTOMER_NOT_FOUND``, 422
        ``EMPTY_ORDER`` or ``PRODUCT_NOT_FOUND``.
    """
    dto = _validate(payload)
    customer = CustomerRepository().get(dto.id_customer)
    if customer is None:
        _raise_http(CustomerNotFound())

    catalog = _catalog_for(dto)
    try:
        order = to_purchase_order(customer.id, catalog, dto)
    except BusinessError as e:
        _raise_http(e)

    saved = PurchaseOrderRepository().create(order)
    return to_purchase_order_response(saved, catalog).model_dump(mode="json", exclude_none=True)


@router.put("/{oid}")
def update_purchase_order(oid: int, payload: dict = Body(...)):
    """Replace the product list of a ``SAVED`` order and re-price it.

    Returns:
        200 with the updated order, 404 ``PURCHASE_ORDER_NOT_FOUND``, 409
        ``ORDER_NOT_EDITABLE`` once a payment was submitted, 422
        ``PURCHASE_ORDER_INVALID`` when the order belongs to another customer.
    """
    dto = _validate(payload)
    repo = PurchaseOrderRepository()
    order = repo.get(oid)
    if order is None:
        _raise_http(PurchaseOrderNotFound())
    if order.customer_id != dto.id_customer:
        _raise_http(PurchaseOrderInvalid())
    if order.status != OrderStatus.SAVED:
        _raise_http(OrderNotEditable())

    catalog = _catalog_for(dto)
    try:
        refreshed = refresh_purchase_order(order, catalog, dto)
    except BusinessError as e:
        _raise_http(e)

    saved = repo.replace(refreshed)
    return to_purchase_order_response(saved, catalog).model_dump(mode="json", exclude_none=True)


@router.get("/{oid}")
def retrieve_purchase_order(oid: int):
    order = PurchaseOrderRepository().get(oid)
    if order is None:
        _raise_http(PurchaseOrderNotFound())
    return to_purchase_order_response(order).model_dump(mode="json", exclude_none=True)
