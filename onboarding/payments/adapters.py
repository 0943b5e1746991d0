"""In-process stub for the payment gateway port.

``GatewayStub`` answers both gateway commands without any network call. It
is used by the tests and for local development where deterministic
behavior is useful and the PayU sandbox is not required.
"""

import datetime
import uuid

from onboarding.tokenization.schemas import CreateTokenPayuRequest, CreateTokenPayuResponse, CreditCardTokenPayu
from .domain import PaymentGatewayPort
from .schemas import PaymentWithTokenPayuRequest, PaymentWithTokenPayuResponse, TransactionResponsePayu

# Cardholder name PayU's sandbox uses to force outcomes
DECLINE_NAME = "REJECTED"
PENDING_NAME = "PENDING"


def _mask(number: str) -> str:
    return f"{number[:6]}*****{number[-4:]}"


class GatewayStub(PaymentGatewayPort):
    """Stub implementation of ``PaymentGatewayPort``.

    Payments are approved unless the payer's full name is ``REJECTED``
    (declined) or ``PENDING`` (pending review). Tokenization succeeds for
    any card whose number passes the Luhn check.
    """

    def submit_transaction(self, request: PaymentWithTokenPayuRequest) -> PaymentWithTokenPayuResponse:
        payer_name = request.transaction.payer.full_name.upper() if request.transaction.payer else ""
        state = {DECLINE_NAME: "DECLINED", PENDING_NAME: "PENDING"}.get(payer_name, "APPROVED")
        return PaymentWithTokenPayuResponse(
            code="SUCCESS",
            error=None,
            transaction_response=TransactionResponsePayu(
                order_id=abs(hash(request.transaction.order.reference_code)) % 10**9,
                transaction_id=str(uuid.uuid4()),
                state=state,
                response_code="APPROVED" if state == "APPROVED" else f"{state}_TRANSACTION",
            ),
        )

    def create_token(self, request: CreateTokenPayuRequest) -> CreateTokenPayuResponse:
        card = request.credit_card_token
        if not luhn_valid(card.number or ""):
            return CreateTokenPayuResponse(code="ERROR", error="Invalid credit card number")
        return CreateTokenPayuResponse(
            code="SUCCESS",
            credit_card_token=CreditCardTokenPayu(
                credit_card_token_id=str(uuid.uuid4()),
                name=card.name,
                payer_id=card.payer_id,
                identification_number=card.identification_number,
                payment_method=card.payment_method,
                creation_date=datetime.datetime.now(datetime.timezone.utc).isoformat(),
                masked_number=_mask(card.number),
            ),
        )


def luhn_valid(number: str) -> bool:
    if not number.isdigit():
        return False
    total = 0
    for i, ch in enumerate(reversed(number)):
        d = int(ch)
        if i % 2 == 1:
            d = d * 2 - 9 if d > 4 else d * 2
        total += d
    return total % 10 == 0
