"""Repository layer for customers, their cards and payment records."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from onboarding import models
from onboarding.database import get_session
from .domain import CreditCard, Customer
from .schemas import PaymentWithTokenResponse


def _to_card(row: models.CreditCard) -> CreditCard:
    return CreditCard(id=row.id, token=row.token, payment_method=row.payment_method, masked_number=row.masked_number)


def _to_customer(row: models.Customer) -> Customer:
    return Customer(
        id=row.id,
        full_name=row.full_name,
        email=row.email,
        phone=row.phone,
        dni_number=row.dni_number,
        credit_cards=[_to_card(c) for c in row.credit_cards],
    )


class CustomerRepository:
    """Repository returning Customer domain objects with their cards."""

    def get(self, customer_id: int) -> Optional[Customer]:
        with get_session() as s:
            row = s.execute(
                select(models.Customer)
                .options(selectinload(models.Customer.credit_cards))
                .where(models.Customer.id == customer_id)
            ).scalars().first()
            return _to_customer(row) if row else None

    def add_credit_card(self, customer_id: int, token: str, payment_method: str,
                        masked_number: str | None = None) -> CreditCard:
        """Store a tokenized card for the customer and return it."""
        with get_session() as s:
            row = models.CreditCard(
                customer_id=customer_id,
                token=token,
                payment_method=payment_method,
                masked_number=masked_number,
            )
            s.add(row)
            s.commit()
            return _to_card(row)


class PaymentRepository:
    def create(self, purchase_order_id: int, credit_card_id: int, response: PaymentWithTokenResponse) -> int:
        """Persist the gateway outcome of a payment and return the record id."""
        with get_session() as s:
            row = models.Payment(
                purchase_order_id=purchase_order_id,
                credit_card_id=credit_card_id,
                code=response.code,
                status=response.status,
                transaction_response=response.transaction_response,
            )
            s.add(row)
            s.commit()
            return row.id
