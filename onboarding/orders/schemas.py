"""Pydantic schemas for purchase orders.

This module exposes the request/validation schemas used by the purchase
order API and the response shapes it returns.
"""

import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

# order_products.quantity is a 32-bit INTEGER column
MAX_QUANTITY = 2**31 - 1


class ProductLineIn(BaseModel):
    """Input schema for a single requested product.

    Attributes:
        id_product: Catalog identifier of the product.
        quantity: Units requested, between 1 and ``MAX_QUANTITY``.
    """

    id_product: int = Field(gt=0)
    quantity: int = Field(gt=0, le=MAX_QUANTITY)


class PurchaseOrderRequest(BaseModel):
    """Schema for creating or updating a purchase order.

    Attributes:
        id_customer: Customer placing the order.
        products: Requested products, in the order they were submitted.
    """

    id_customer: int = Field(gt=0)
    products: list[ProductLineIn]


class ProductPurchaseResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id_product: int
    name: str | None = None
    code: str | None = None
    description: str | None = None
    price: Decimal
    quantity: int | None = None


class PurchaseOrderResponse(BaseModel):
    """Purchase order as returned by the API.

    ``products`` lists either the catalog entries an order was priced from or
    the persisted lines (with quantity and unit value), depending on the
    endpoint.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None
    status: str
    reference_code: str
    date: datetime.date
    value: Decimal
    products: list[ProductPurchaseResponse] | None = None
