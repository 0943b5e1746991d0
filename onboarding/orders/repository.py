"""Repository layer for products and purchase orders.

Repositories map between SQLAlchemy rows and the frozen domain dataclasses
so the domain and mapper code is never coupled to ORM types.
"""

from typing import Iterable, List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import selectinload

from onboarding import models
from onboarding.database import get_session
from .domain import OrderLine, OrderStatus, Product, PurchaseOrder

# states a payment may be submitted from
PAYABLE_STATUSES = (OrderStatus.SAVED, OrderStatus.DECLINED, OrderStatus.ERROR)


def _to_product(row: models.Product) -> Product:
    return Product(id=row.id, price=row.price, name=row.name, code=row.code, description=row.description or "")


def _to_order(row: models.PurchaseOrder) -> PurchaseOrder:
    return PurchaseOrder(
        id=row.id,
        customer_id=row.customer_id,
        status=OrderStatus(row.status),
        date=row.date,
        value=row.value,
        reference_code=row.reference_code,
        lines=[
            OrderLine(product=_to_product(op.product), quantity=op.quantity, unit_value=op.unit_value)
            for op in row.products
        ],
    )


def _order_products(order: PurchaseOrder) -> List[models.OrderProduct]:
    return [
        models.OrderProduct(product_id=line.product.id, quantity=line.quantity, unit_value=line.unit_value)
        for line in order.lines
    ]


def _load_order(s, order_id: int) -> Optional[models.PurchaseOrder]:
    return s.execute(
        select(models.PurchaseOrder)
        .options(selectinload(models.PurchaseOrder.products).selectinload(models.OrderProduct.product))
        .where(models.PurchaseOrder.id == order_id)
    ).scalars().first()


class ProductRepository:
    """Read access to the product catalog."""

    def find_by_ids(self, ids: Iterable[int]) -> List[Product]:
        """Return the catalog products among ``ids``; unknown ids are skipped."""
        wanted = sorted(set(ids))
        if not wanted:
            return []
        with get_session() as s:
            rows = s.execute(
                select(models.Product).where(models.Product.id.in_(wanted)).order_by(models.Product.id)
            ).scalars().all()
            return [_to_product(r) for r in rows]


class PurchaseOrderRepository:
    """Repository that persists PurchaseOrder domain objects."""

    def create(self, order: PurchaseOrder) -> PurchaseOrder:
        """Persist a new order with its lines and return it with its id."""
        with get_session() as s:
            row = models.PurchaseOrder(
                customer_id=order.customer_id,
                status=order.status.value,
                date=order.date,
                value=order.value,
                reference_code=order.reference_code,
                products=_order_products(order),
            )
            s.add(row)
            s.commit()
            return _to_order(_load_order(s, row.id))

    def replace(self, order: PurchaseOrder) -> PurchaseOrder:
        """Overwrite an existing order, replacing all of its lines."""
        with get_session() as s:
            row = _load_order(s, order.id)
            row.status = order.status.value
            row.date = order.date
            row.value = order.value
            row.reference_code = order.reference_code
            row.products = _order_products(order)
            s.commit()
            return _to_order(_load_order(s, row.id))

    def get(self, order_id: int) -> Optional[PurchaseOrder]:
        with get_session() as s:
            row = _load_order(s, order_id)
            return _to_order(row) if row else None

    def update_status(self, order_id: int, status: OrderStatus) -> None:
        with get_session() as s:
            row = s.get(models.PurchaseOrder, order_id)
            row.status = status.value
            s.commit()

    def claim_for_payment(self, order_id: int) -> bool:
        """Move a payable order to ``PENDING`` in a single conditional UPDATE.

        Returns False when the order is not payable any more, e.g. because a
        concurrent request claimed it first.
        """
        with get_session() as s:
            result = s.execute(
                update(models.PurchaseOrder)
                .where(models.PurchaseOrder.id == order_id,
                       models.PurchaseOrder.status.in_([st.value for st in PAYABLE_STATUSES]))
                .values(status=OrderStatus.PENDING.value)
            )
            s.commit()
            return result.rowcount == 1
