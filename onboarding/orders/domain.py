"""Domain models and the order total calculation.

This module contains simple dataclasses used as DTOs for purchase orders and
the catalog they are priced from, plus ``compute_total``, the pure function
that prices a list of requested lines against a catalog. Nothing here touches
persistence or the network.
"""

import datetime
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Iterable, List, Sequence

from onboarding.errors import DuplicateProduct, ProductNotFound


# ---- Enums ----
class OrderStatus(str, Enum):
    """Lifecycle of a purchase order.

    Orders are ``SAVED`` until a payment is submitted; the gateway outcome then
    moves them to ``PAID``, ``PENDING``, ``DECLINED`` or ``ERROR``.
    """

    SAVED = "SAVED"
    PENDING = "PENDING"
    PAID = "PAID"
    DECLINED = "DECLINED"
    ERROR = "ERROR"


# ---- Entities / DTOs ----
@dataclass(frozen=True)
class PricedItem:
    """A purchasable item and its unit price.

    Attributes:
        id: Identifier, unique within a catalog.
        price: Non-negative unit price with currency precision.
    """

    id: int
    price: Decimal


@dataclass(frozen=True)
class Product(PricedItem):
    """Catalog product as stored by the product repository."""

    name: str = ""
    code: str = ""
    description: str = ""


@dataclass(frozen=True)
class RequestedLine:
    """A product id and the number of units requested."""

    id: int
    quantity: int


@dataclass(frozen=True)
class OrderLine:
    """A persisted order line: the product, quantity and the unit value paid."""

    product: Product
    quantity: int
    unit_value: Decimal


@dataclass(frozen=True)
class PurchaseOrder:
    """Container for purchase order data.

    Attributes:
        id: Persistent identifier, or None if not yet saved.
        customer_id: Owner of the order.
        status: Current OrderStatus.
        date: Day the order was (re)priced.
        value: Order total, see ``compute_total``.
        reference_code: Unique reference sent to the gateway.
        lines: Priced lines making up the order.
    """

    id: int | None
    customer_id: int
    status: OrderStatus
    date: datetime.date
    value: Decimal
    reference_code: str
    lines: List[OrderLine] = field(default_factory=list)


# ---- Pricing ----
def index_catalog(catalog: Iterable[PricedItem]) -> dict:
    """Key a catalog by item id.

    Raises:
        DuplicateProduct: If two items share an id.
    """
    index = {}
    for item in catalog:
        if item.id in index:
            raise DuplicateProduct(item.id)
        index[item.id] = item
    return index


def compute_total(catalog: Iterable[PricedItem], lines: Sequence[RequestedLine]) -> Decimal:
    """Price the requested lines against the catalog.

    Lines are processed in order so the first missing product is the one
    reported. Arithmetic is exact ``Decimal``; an empty list totals zero.

    Args:
        catalog: Items available for purchase.
        lines: Requested (product id, quantity) pairs.

    Returns:
        Decimal: Sum of ``quantity * price`` over all lines.

    Raises:
        ProductNotFound: If a line references an id absent from the catalog.
            No partial total is returned.
        DuplicateProduct: If the catalog lists an id more than once.
    """
    index = index_catalog(catalog)
    total = Decimal("0")
    for line in lines:
        item = index.get(line.id)
        if item is None:
            raise ProductNotFound(line.id)
        total += Decimal(line.quantity) * item.price
    return total
