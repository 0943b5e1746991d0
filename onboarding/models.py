"""SQLAlchemy models for customers, catalog, purchase orders and payments.

Money columns are ``Numeric(14, 2)`` and come back as ``Decimal``. Only the
gateway token and a masked number are kept for credit cards.
"""

import datetime
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from onboarding.database import Base


class Customer(Base):
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    full_name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(120), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(30))
    dni_number: Mapped[str | None] = mapped_column(String(30))

    credit_cards: Mapped[list["CreditCard"]] = relationship(back_populates="customer", order_by="CreditCard.id")


class CreditCard(Base):
    """A tokenized card.

    Attributes:
        token: ``creditCardTokenId`` returned by the gateway.
        payment_method: Franchise reported by the gateway (VISA, MASTERCARD...).
        masked_number: Masked card number reported by the gateway.
    """

    __tablename__ = "credit_cards"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), nullable=False)
    token: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    payment_method: Mapped[str] = mapped_column(String(32), nullable=False)
    masked_number: Mapped[str | None] = mapped_column(String(32))

    customer: Mapped[Customer] = relationship(back_populates="credit_cards")


class Product(Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    code: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(String(255), default="")
    price: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)


class PurchaseOrder(Base):
    __tablename__ = "purchase_orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    value: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    reference_code: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    products: Mapped[list["OrderProduct"]] = relationship(
        back_populates="purchase_order", cascade="all, delete-orphan", order_by="OrderProduct.id"
    )


class OrderProduct(Base):
    __tablename__ = "order_products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    purchase_order_id: Mapped[int] = mapped_column(ForeignKey("purchase_orders.id"), nullable=False)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_value: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)

    purchase_order: Mapped[PurchaseOrder] = relationship(back_populates="products")
    product: Mapped[Product] = relationship()


class Payment(Base):
    """Outcome of a payment submitted for a purchase order."""

    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    purchase_order_id: Mapped[int] = mapped_column(ForeignKey("purchase_orders.id"), nullable=False)
    credit_card_id: Mapped[int] = mapped_column(ForeignKey("credit_cards.id"), nullable=False)
    code: Mapped[str | None] = mapped_column(String(32))
    status: Mapped[str | None] = mapped_column(String(32))
    transaction_response: Mapped[str | None] = mapped_column(Text)
