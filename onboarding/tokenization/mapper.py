"""Mapping between tokenization DTOs and the PayU ``CREATE_TOKEN`` format."""

from onboarding.payments.schemas import Merchant
from .schemas import (
    CreateTokenPayuRequest,
    CreateTokenPayuResponse,
    CreditCardIn,
    CreditCardTokenPayu,
    CreditCardTokenResponse,
)


def build_create_token_request(merchant: Merchant, customer_id: int, card: CreditCardIn, *,
                               language: str = "en") -> CreateTokenPayuRequest:
    """Build the gateway request tokenizing ``card`` for a customer.

    The customer id is sent as the gateway ``payerId``.
    """
    return CreateTokenPayuRequest(
        language=language,
        command="CREATE_TOKEN",
        merchant=merchant,
        credit_card_token=CreditCardTokenPayu(
            payer_id=str(customer_id),
            name=card.name,
            identification_number=card.identification_number,
            payment_method=card.payment_method,
            number=card.number,
            expiration_date=card.expiration_date,
        ),
    )


def to_credit_card_token_response(payu_response: CreateTokenPayuResponse) -> CreditCardTokenResponse:
    """Reduce a gateway answer to the API response.

    A gateway ``code`` other than ``SUCCESS`` is reported through
    ``error_description`` (the gateway ``error`` text when present).
    """
    token = payu_response.credit_card_token
    error_description = token.error_description if token else None
    if payu_response.code != "SUCCESS":
        error_description = payu_response.error or error_description or payu_response.code or "TOKENIZATION_FAILED"
    if token is None:
        return CreditCardTokenResponse(error_description=error_description)
    return CreditCardTokenResponse(
        credit_card_token_id=token.credit_card_token_id,
        name=token.name,
        payer_id=token.payer_id,
        identification_number=token.identification_number,
        payment_method=token.payment_method,
        number=token.number,
        expiration_date=token.expiration_date,
        creation_date=token.creation_date,
        masked_number=token.masked_number,
        error_description=error_description,
    )
