"""Unit tests for the PaymentService and TokenizationService.

Stubbed gateways are used to deterministically drive outcomes and to
capture what the services send.
"""

import datetime
from decimal import Decimal

import pytest

from onboarding.errors import CreditCardInvalid
from onboarding.orders.domain import OrderStatus, PurchaseOrder
from onboarding.payments.adapters import GatewayStub, luhn_valid
from onboarding.payments.domain import CreditCard, Customer, PaymentService
from onboarding.payments.schemas import (
    Merchant,
    PaymentTransactionIn,
    PaymentWithTokenPayuResponse,
    PaymentWithTokenResponse,
)
from onboarding.tokenization.domain import TokenizationService
from onboarding.tokenization.schemas import CreditCardIn

MERCHANT = Merchant(api_login="login", api_key="key")
ORDER = PurchaseOrder(id=1, customer_id=1, status=OrderStatus.SAVED, date=datetime.date(2024, 5, 1),
                      value=Decimal("20.00"), reference_code="ref-1")


def _customer(name="Ana Gomez"):
    return Customer(id=1, full_name=name, email="ana@example.com",
                    credit_cards=[CreditCard(id=1, token="tok-1", payment_method="VISA")])


def _request(card=1):
    return PaymentTransactionIn(id_purchase_order=1, id_customer=1, id_credit_card=card, device_session_id="d",
                                ip_address="127.0.0.1", cookie="c", user_agent="ua")


class RecordingGateway:
    """Gateway stub that records the submitted request and approves it."""

    def __init__(self):
        self.requests = []

    def submit_transaction(self, request):
        self.requests.append(request)
        return PaymentWithTokenPayuResponse.model_validate(
            {"code": "SUCCESS", "transactionResponse": {"state": "APPROVED"}}
        )


def test_pay_submits_signed_request():
    gateway = RecordingGateway()
    service = PaymentService(gateway, MERCHANT, "512321")
    out = service.pay(ORDER, _customer(), _request())
    assert out.status == "APPROVED"
    assert service.order_status(out) == OrderStatus.PAID

    sent = gateway.requests[0]
    assert sent.merchant == MERCHANT
    assert sent.transaction.order.account_id == "512321"
    assert len(sent.transaction.order.signature) == 32


def test_pay_with_unknown_card_does_not_reach_gateway():
    gateway = RecordingGateway()
    with pytest.raises(CreditCardInvalid):
        PaymentService(gateway, MERCHANT, "512321").pay(ORDER, _customer(), _request(card=5))
    assert gateway.requests == []


def test_stub_declines_rejected_payer():
    service = PaymentService(GatewayStub(), MERCHANT, "512321")
    out = service.pay(ORDER, _customer("REJECTED"), _request())
    assert out.status == "DECLINED"
    assert service.order_status(out) == OrderStatus.DECLINED


@pytest.mark.parametrize(
    "state, expected",
    [("APPROVED", OrderStatus.PAID), ("PENDING", OrderStatus.PENDING), ("DECLINED", OrderStatus.DECLINED),
     ("EXPIRED", OrderStatus.ERROR), (None, OrderStatus.ERROR)],
)
def test_order_status_from_gateway_state(state, expected):
    assert PaymentService.order_status(PaymentWithTokenResponse(code="SUCCESS", status=state)) == expected


def test_tokenize_with_stub():
    card = CreditCardIn(id_customer=1, name="Ana Gomez", identification_number="1020304050",
                        payment_method="visa", number="4111 1111 1111 1111", expiration_date="2030/01")
    service = TokenizationService(GatewayStub(), MERCHANT)
    out = service.tokenize(_customer(), card)
    assert service.succeeded(out)
    assert out.payer_id == "1"
    assert out.payment_method == "VISA"
    assert out.masked_number == "411111*****1111"


def test_tokenize_rejected_card():
    card = CreditCardIn(id_customer=1, name="Ana Gomez", identification_number="1020304050",
                        payment_method="VISA", number="4111111111111112", expiration_date="2030/01")
    service = TokenizationService(GatewayStub(), MERCHANT)
    out = service.tokenize(_customer(), card)
    assert not service.succeeded(out)
    assert out.error_description == "Invalid credit card number"


def test_luhn():
    assert luhn_valid("4111111111111111")
    assert luhn_valid("5500000000000004")
    assert not luhn_valid("4111111111111112")
    assert not luhn_valid("")
