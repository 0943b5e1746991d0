"""Domain models, ports and service for payments.

This module contains the customer and credit card DTOs the payment flow
needs, the protocol describing the payment gateway (port), and the domain
service that turns a purchase order into a gateway payment.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from onboarding.orders.domain import OrderStatus, PurchaseOrder
from . import mapper
from .schemas import (
    Merchant,
    PaymentTransactionIn,
    PaymentWithTokenPayuRequest,
    PaymentWithTokenPayuResponse,
    PaymentWithTokenResponse,
)

log = logging.getLogger(__name__)


# ---- Entities / DTOs ----
@dataclass(frozen=True)
class CreditCard:
    """A tokenized credit card.

    Attributes:
        id: Persistent identifier.
        token: ``creditCardTokenId`` issued by the gateway.
        payment_method: Card franchise, e.g. ``VISA``.
        masked_number: Masked number as reported by the gateway.
    """

    id: int
    token: str
    payment_method: str
    masked_number: Optional[str] = None


@dataclass(frozen=True)
class Customer:
    id: int
    full_name: str
    email: str
    phone: Optional[str] = None
    dni_number: Optional[str] = None
    credit_cards: List[CreditCard] = field(default_factory=list)


# ---- Ports (DIP) ----
class PaymentGatewayPort(Protocol):
    """Port describing the payment gateway commands used by the domain."""

    def submit_transaction(self, request: PaymentWithTokenPayuRequest) -> PaymentWithTokenPayuResponse:
        """Submit a token payment.

        Raises:
            NotImplementedError: If the method is not implemented by the
                concrete class.
        """
        raise NotImplementedError()

    def create_token(self, request):
        """Tokenize a credit card (see ``onboarding.tokenization``).

        Raises:
            NotImplementedError: If the method is not implemented by the
                concrete class.
        """
        raise NotImplementedError()


# gateway transaction state -> order status
ORDER_STATUS_BY_STATE = {
    "APPROVED": OrderStatus.PAID,
    "DECLINED": OrderStatus.DECLINED,
    "PENDING": OrderStatus.PENDING,
}


# ---- Domain service ----
class PaymentService:
    """Domain service responsible for paying purchase orders.

    It builds the signed gateway request, submits it through the gateway port
    and translates the answer. It does not handle persistence.
    """

    def __init__(self, gateway: PaymentGatewayPort, merchant: Merchant, account_id: str, *,
                 currency: str = "COP", country: str = "CO", language: str = "en", test: bool = False):
        self.gateway = gateway
        self.merchant = merchant
        self.account_id = account_id
        self.currency = currency
        self.country = country
        self.language = language
        self.test = test

    def pay(self, order: PurchaseOrder, customer: Customer,
            request: PaymentTransactionIn) -> PaymentWithTokenResponse:
        """Pay ``order`` with one of ``customer``'s stored cards.

        Returns:
            PaymentWithTokenResponse: Gateway code, error and transaction state.

        Raises:
            CreditCardInvalid: If ``request.id_credit_card`` is not one of the
                customer's cards.
            CryptoUnavailable: If the request cannot be signed.
        """
        payu_request = mapper.build_payment_with_token_request(
            self.merchant,
            request,
            order,
            customer,
            self.account_id,
            currency=self.currency,
            country=self.country,
            language=self.language,
            test=self.test,
        )
        log.info("submitting payment", extra={"reference_code": order.reference_code, "order_id": order.id})
        payu_response = self.gateway.submit_transaction(payu_request)
        response = mapper.to_payment_with_token_response(payu_response)
        log.info(
            "payment answered",
            extra={"reference_code": order.reference_code, "code": response.code, "status": response.status},
        )
        return response

    @staticmethod
    def order_status(response: PaymentWithTokenResponse) -> OrderStatus:
        """Order status implied by a gateway answer; unknown states are ``ERROR``."""
        return ORDER_STATUS_BY_STATE.get(response.status or "", OrderStatus.ERROR)
