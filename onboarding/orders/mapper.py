"""Translation between purchase order requests, domain orders and responses."""

import datetime
import logging
import uuid
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from onboarding.errors import ProductNotFound, PurchaseOrderInvalid
from .domain import (
    OrderLine,
    OrderStatus,
    Product,
    PurchaseOrder,
    RequestedLine,
    compute_total,
    index_catalog,
)
from .schemas import ProductPurchaseResponse, PurchaseOrderRequest, PurchaseOrderResponse

log = logging.getLogger(__name__)

# largest value a Numeric(14, 2) column holds
MAX_ORDER_VALUE = Decimal("999999999999.99")


def requested_lines(request: PurchaseOrderRequest) -> List[RequestedLine]:
    return [RequestedLine(id=p.id_product, quantity=p.quantity) for p in request.products]


def _priced(catalog: Sequence[Product], request: PurchaseOrderRequest):
    lines = requested_lines(request)
    try:
        total = compute_total(catalog, lines)
    except ProductNotFound:
        log.debug("Invalid product in list %s", lines, exc_info=True)
        raise
    if total > MAX_ORDER_VALUE:
        log.info("order total %s exceeds %s", total, MAX_ORDER_VALUE)
        raise PurchaseOrderInvalid()
    index = index_catalog(catalog)
    order_lines = [
        OrderLine(product=index[line.id], quantity=line.quantity, unit_value=index[line.id].price)
        for line in lines
    ]
    return total, order_lines


def to_purchase_order(customer_id: int, catalog: Sequence[Product],
                      request: PurchaseOrderRequest) -> PurchaseOrder:
    """Build a new purchase order ready to be persisted.

    The order is ``SAVED``, dated today, valued with ``compute_total`` and
    given a fresh random reference code.

    Raises:
        ProductNotFound: If the request references a product not in ``catalog``.
        PurchaseOrderInvalid: If the total exceeds ``MAX_ORDER_VALUE``.
    """
    total, order_lines = _priced(catalog, request)
    return PurchaseOrder(
        id=None,
        customer_id=customer_id,
        status=OrderStatus.SAVED,
        date=datetime.date.today(),
        value=total,
        reference_code=str(uuid.uuid4()),
        lines=order_lines,
    )


def refresh_purchase_order(order: PurchaseOrder, catalog: Sequence[Product],
                           request: PurchaseOrderRequest) -> PurchaseOrder:
    """Re-price an existing order with a new product list.

    Keeps the order id and customer; everything else is rebuilt as in
    ``to_purchase_order``, including a new reference code.
    """
    total, order_lines = _priced(catalog, request)
    return PurchaseOrder(
        id=order.id,
        customer_id=order.customer_id,
        status=OrderStatus.SAVED,
        date=datetime.date.today(),
        value=total,
        reference_code=str(uuid.uuid4()),
        lines=order_lines,
    )


def _product_response(product: Product) -> ProductPurchaseResponse:
    return ProductPurchaseResponse(
        id_product=product.id,
        name=product.name,
        code=product.code,
        description=product.description,
        price=product.price,
    )


def _line_response(line: OrderLine) -> ProductPurchaseResponse:
    return ProductPurchaseResponse(
        id_product=line.product.id,
        code=line.product.code,
        description=line.product.description,
        price=line.unit_value,
        quantity=line.quantity,
    )


def to_purchase_order_response(order: PurchaseOrder,
                               products: Optional[Iterable[Product]] = None) -> PurchaseOrderResponse:
    """Render an order for the API.

    Args:
        order: The order to render.
        products: Catalog products to list. When omitted, the order's own
            lines are listed with their quantity and unit value.
    """
    if products is not None:
        rendered = [_product_response(p) for p in products] or None
    else:
        rendered = [_line_response(line) for line in order.lines] or None
    return PurchaseOrderResponse(
        id=order.id,
        status=order.status.value,
        reference_code=order.reference_code,
        date=order.date,
        value=order.value,
        products=rendered,
    )
