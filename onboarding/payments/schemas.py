"""Pydantic schemas for payments.

Two families live here: the API input/output (snake_case) and the PayU
``SUBMIT_TRANSACTION`` wire format (camelCase, with the gateway's upper-case
map keys such as ``TX_VALUE``). Gateway models are frozen and built with
keyword arguments; dump them with ``by_alias=True``.
"""

from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel


# ---- API ----
class PaymentTransactionIn(BaseModel):
    """Input schema for paying a purchase order with a stored card token.

    Attributes:
        id_purchase_order: Order to pay.
        id_customer: Owner of both the order and the card.
        id_credit_card: One of the customer's tokenized cards.
        device_session_id: Anti-fraud device fingerprint session.
        ip_address: Payer IP address.
        cookie: Payer browser cookie.
        user_agent: Payer browser user agent.
    """

    id_purchase_order: int = Field(gt=0)
    id_customer: int = Field(gt=0)
    id_credit_card: int = Field(gt=0)
    device_session_id: str = Field(min_length=1, max_length=255)
    ip_address: str = Field(min_length=1, max_length=39)
    cookie: str = Field(min_length=1, max_length=255)
    user_agent: str = Field(min_length=1, max_length=1024)


class PaymentWithTokenResponse(BaseModel):
    """Payment outcome returned by the API."""

    model_config = ConfigDict(frozen=True)

    code: Optional[str] = None
    error: Optional[str] = None
    status: Optional[str] = None
    transaction_response: Optional[str] = None


# ---- PayU wire format ----
class PayuModel(BaseModel):
    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True
    )


class Merchant(PayuModel):
    api_login: str
    api_key: str


class TxValue(PayuModel):
    value: Decimal
    currency: str

    @field_serializer("value", when_used="json")
    def _value_as_number(self, value: Decimal) -> float:
        return float(value)


class AdditionalValues(PayuModel):
    tx_value: TxValue = Field(alias="TX_VALUE")


class ExtraParameters(PayuModel):
    installments_number: int = Field(1, alias="INSTALLMENTS_NUMBER")


class PayuOrder(PayuModel):
    account_id: str
    reference_code: str
    description: str
    language: str
    signature: str
    additional_values: AdditionalValues


class Payer(PayuModel):
    merchant_payer_id: str = "1"
    full_name: str
    email_address: str
    contact_phone: Optional[str] = None
    dni_number: Optional[str] = None


class TransactionPayu(PayuModel):
    order: PayuOrder
    payer: Optional[Payer] = None
    credit_card_token_id: str
    extra_parameters: ExtraParameters = ExtraParameters()
    type: str = "AUTHORIZATION_AND_CAPTURE"
    payment_method: str
    payment_country: str
    device_session_id: str
    ip_address: str
    cookie: str
    user_agent: str


class PaymentWithTokenPayuRequest(PayuModel):
    language: str
    command: str = "SUBMIT_TRANSACTION"
    merchant: Merchant
    transaction: TransactionPayu
    test: bool = False


class TransactionResponsePayu(PayuModel):
    """``transactionResponse`` block of a gateway answer.

    Only ``state`` is interpreted; unknown gateway fields are kept so the
    full response can be stored.
    """

    model_config = ConfigDict(extra="allow")

    order_id: Optional[int] = None
    transaction_id: Optional[str] = None
    state: Optional[str] = None
    payment_network_response_code: Optional[str] = None
    payment_network_response_error_message: Optional[str] = None
    trazability_code: Optional[str] = None
    authorization_code: Optional[str] = None
    response_code: Optional[str] = None
    response_message: Optional[str] = None
    operation_date: Optional[Any] = None


class PaymentWithTokenPayuResponse(PayuModel):
    code: Optional[str] = None
    error: Optional[str] = None
    transaction_response: Optional[TransactionResponsePayu] = None
