"""Service provider helpers for wiring the domain services with the gateway.

``get_payment_service`` and ``get_tokenization_service`` return services
bound to the PayU HTTP client when ``settings.USE_HTTP_ADAPTERS`` is truthy,
and to the in-process ``GatewayStub`` otherwise (tests, local development).
Merchant credentials and the account id are read from settings here, once
per call, and handed to the services explicitly.
"""

from onboarding import settings
from onboarding.tokenization.domain import TokenizationService
from .adapters import GatewayStub
from .domain import PaymentGatewayPort, PaymentService
from .http_adapters import PayuClient
from .schemas import Merchant


def get_gateway() -> PaymentGatewayPort:
    if getattr(settings, "USE_HTTP_ADAPTERS", True):
        return PayuClient()
    return GatewayStub()


def get_merchant() -> Merchant:
    return Merchant(api_login=settings.PAYU_API_LOGIN, api_key=settings.PAYU_API_KEY)


def get_payment_service() -> PaymentService:
    """Return a configured PaymentService instance."""
    return PaymentService(
        gateway=get_gateway(),
        merchant=get_merchant(),
        account_id=settings.PAYU_ACCOUNT_ID,
        currency=settings.PAYU_CURRENCY,
        country=settings.PAYU_COUNTRY,
        language=settings.PAYU_LANGUAGE,
        test=settings.PAYU_TEST,
    )


def get_tokenization_service() -> TokenizationService:
    """Return a configured TokenizationService instance."""
    return TokenizationService(gateway=get_gateway(), merchant=get_merchant(), language=settings.PAYU_LANGUAGE)
