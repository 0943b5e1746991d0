"""Mapping between payment DTOs and the PayU ``SUBMIT_TRANSACTION`` format."""

from typing import TYPE_CHECKING, Optional

from onboarding.errors import CreditCardInvalid
from onboarding.orders.domain import PurchaseOrder
from .schemas import (
    AdditionalValues,
    ExtraParameters,
    Merchant,
    Payer,
    PaymentTransactionIn,
    PaymentWithTokenPayuRequest,
    PaymentWithTokenPayuResponse,
    PaymentWithTokenResponse,
    PayuOrder,
    TransactionPayu,
    TxValue,
)
from .signature import compute_signature

if TYPE_CHECKING:
    from .domain import CreditCard, Customer


def get_credit_card_by_id(customer: "Customer", id_credit_card: int) -> "CreditCard":
    """Find one of the customer's cards.

    Raises:
        CreditCardInvalid: If the customer has no card with that id.
    """
    for card in customer.credit_cards:
        if card.id == id_credit_card:
            return card
    raise CreditCardInvalid()


def to_payer(customer: Optional["Customer"]) -> Optional[Payer]:
    if customer is None:
        return None
    return Payer(
        merchant_payer_id="1",
        full_name=customer.full_name,
        email_address=customer.email,
        contact_phone=customer.phone,
        dni_number=customer.dni_number,
    )


def to_order(order: PurchaseOrder, signature: str, account_id: str, currency: str, language: str) -> PayuOrder:
    return PayuOrder(
        account_id=account_id,
        reference_code=order.reference_code,
        description=f"Purchase Order id {order.id}",
        language=language,
        signature=signature,
        additional_values=AdditionalValues(tx_value=TxValue(value=order.value, currency=currency)),
    )


def build_payment_with_token_request(merchant: Merchant, request: PaymentTransactionIn, order: PurchaseOrder,
                                     customer: "Customer", account_id: str, *, currency: str = "COP",
                                     country: str = "CO", language: str = "en",
                                     test: bool = False) -> PaymentWithTokenPayuRequest:
    """Build the signed gateway request paying ``order`` with a stored card.

    The signature covers the merchant API key, ``account_id``, the order
    reference code, the order value and ``currency``.

    Raises:
        CreditCardInvalid: If the requested card does not belong to the customer.
    """
    card = get_credit_card_by_id(customer, request.id_credit_card)
    signature = compute_signature(merchant.api_key, account_id, order.reference_code, order.value, currency)
    transaction = TransactionPayu(
        order=to_order(order, signature, account_id, currency, language),
        payer=to_payer(customer),
        credit_card_token_id=card.token,
        extra_parameters=ExtraParameters(installments_number=1),
        type="AUTHORIZATION_AND_CAPTURE",
        payment_method=card.payment_method,
        payment_country=country,
        device_session_id=request.device_session_id,
        ip_address=request.ip_address,
        cookie=request.cookie,
        user_agent=request.user_agent,
    )
    return PaymentWithTokenPayuRequest(
        language=language,
        command="SUBMIT_TRANSACTION",
        merchant=merchant,
        transaction=transaction,
        test=test,
    )


def to_payment_with_token_response(payu_response: PaymentWithTokenPayuResponse) -> PaymentWithTokenResponse:
    """Reduce a gateway answer to the API response.

    ``status`` and ``transaction_response`` (the full gateway answer as JSON
    text) are only set when the gateway returned a transaction response.
    """
    status = None
    transaction_response = None
    if payu_response.transaction_response is not None:
        status = payu_response.transaction_response.state
        transaction_response = payu_response.model_dump_json(by_alias=True)
    return PaymentWithTokenResponse(
        code=payu_response.code,
        error=payu_response.error,
        status=status,
        transaction_response=transaction_response,
    )
