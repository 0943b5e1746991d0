"""Pydantic schemas for credit card tokenization.

API input/output plus the PayU ``CREATE_TOKEN`` wire format.
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer

from onboarding.payments.schemas import Merchant, PayuModel

CARD_NUMBER_RE = re.compile(r"^\d{13,19}$")
EXPIRATION_RE = re.compile(r"^\d{4}/(0[1-9]|1[0-2])$")


class CreditCardIn(BaseModel):
    """Input schema for tokenizing a card.

    Attributes:
        id_customer: Customer the card is stored for.
        name: Cardholder name.
        identification_number: Cardholder identification document.
        payment_method: Franchise, normalized to uppercase (VISA, MASTERCARD...).
        number: Card number, digits only.
        expiration_date: ``YYYY/MM``.
    """

    id_customer: int = Field(gt=0)
    name: str = Field(min_length=1, max_length=120)
    identification_number: str = Field(min_length=1, max_length=30)
    payment_method: str = Field(min_length=2, max_length=32)
    number: str
    expiration_date: str

    @field_validator("payment_method")
    @classmethod
    def validate_payment_method(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("number")
    @classmethod
    def validate_number(cls, v: str) -> str:
        """Strip spaces and dashes and require 13 to 19 digits."""
        v2 = v.replace(" ", "").replace("-", "")
        if not CARD_NUMBER_RE.match(v2):
            raise ValueError("Invalid card number")
        return v2

    @field_validator("expiration_date")
    @classmethod
    def validate_expiration_date(cls, v: str) -> str:
        if not EXPIRATION_RE.match(v):
            raise ValueError("Expiration date must be YYYY/MM")
        return v


class CreditCardTokenResponse(BaseModel):
    """Credit card token as returned by the API.

    Empty fields are left out when serialized.
    """

    model_config = ConfigDict(frozen=True)

    credit_card_token_id: Optional[str] = None
    name: Optional[str] = None
    payer_id: Optional[str] = None
    identification_number: Optional[str] = None
    payment_method: Optional[str] = None
    number: Optional[str] = None
    expiration_date: Optional[str] = None
    creation_date: Optional[str] = None
    masked_number: Optional[str] = None
    error_description: Optional[str] = None

    @model_serializer(mode="wrap")
    def _non_empty(self, handler):
        return {k: v for k, v in handler(self).items() if v not in (None, "")}


# ---- PayU wire format ----
class CreditCardTokenPayu(PayuModel):
    model_config = ConfigDict(extra="allow")

    credit_card_token_id: Optional[str] = None
    payer_id: Optional[str] = None
    name: Optional[str] = None
    identification_number: Optional[str] = None
    payment_method: Optional[str] = None
    number: Optional[str] = None
    expiration_date: Optional[str] = None
    creation_date: Optional[str] = None
    masked_number: Optional[str] = None
    error_description: Optional[str] = None


class CreateTokenPayuRequest(PayuModel):
    language: str
    command: str = "CREATE_TOKEN"
    merchant: Merchant
    credit_card_token: CreditCardTokenPayu


class CreateTokenPayuResponse(PayuModel):
    code: Optional[str] = None
    error: Optional[str] = None
    credit_card_token: Optional[CreditCardTokenPayu] = None
