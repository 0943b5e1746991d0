"""Domain service for tokenizing credit cards through the gateway port."""

import logging

from onboarding.payments.domain import Customer, PaymentGatewayPort
from onboarding.payments.schemas import Merchant
from . import mapper
from .schemas import CreditCardIn, CreditCardTokenResponse

log = logging.getLogger(__name__)


class TokenizationService:
    """Exchange a card number for a reusable gateway token.

    The full card number only travels to the gateway; it is never logged.
    """

    def __init__(self, gateway: PaymentGatewayPort, merchant: Merchant, *, language: str = "en"):
        self.gateway = gateway
        self.merchant = merchant
        self.language = language

    def tokenize(self, customer: Customer, card: CreditCardIn) -> CreditCardTokenResponse:
        request = mapper.build_create_token_request(self.merchant, customer.id, card, language=self.language)
        response = mapper.to_credit_card_token_response(self.gateway.create_token(request))
        if self.succeeded(response):
            log.info("card tokenized", extra={"customer_id": customer.id, "payment_method": response.payment_method})
        else:
            log.warning("card rejected by gateway",
                        extra={"customer_id": customer.id, "error_description": response.error_description})
        return response

    @staticmethod
    def succeeded(response: CreditCardTokenResponse) -> bool:
        return bool(response.credit_card_token_id) and not response.error_description
