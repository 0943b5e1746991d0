"""PayU request signature.

The gateway authenticates payment requests with the MD5 hex digest of
``apiKey~accountId~referenceCode~value~currency``. MD5 is required by the
gateway contract; do not use ``compute_signature`` for anything else.
"""

import hashlib
import logging
from decimal import Decimal

from onboarding import settings
from onboarding.errors import CryptoUnavailable

log = logging.getLogger(__name__)

SEPARATOR = "~"
VALUE_FORMATS = ("plain", "fixed2", "one_decimal")


def format_value(value: Decimal, style: str = "plain") -> str:
    """Render an order value the way the gateway expects it in the signature.

    Styles:
        plain: no exponent, no thousands separator, trailing fractional zeros
            dropped (``10000.00`` -> ``10000``, ``36.50`` -> ``36.5``).
        fixed2: always two decimals (``10000`` -> ``10000.00``).
        one_decimal: two decimals unless the second one is zero, then one
            (``150.00`` -> ``150.0``, ``150.26`` -> ``150.26``).

    Raises:
        ValueError: For an unknown style.
    """
    value = Decimal(value)
    if style == "plain":
        text = format(value.normalize(), "f")
        return "0" if text in ("-0", "") else text
    if style == "fixed2":
        return format(value.quantize(Decimal("0.01")), "f")
    if style == "one_decimal":
        two = value.quantize(Decimal("0.01"))
        if two == two.quantize(Decimal("0.1")):
            return format(two.quantize(Decimal("0.1")), "f")
        return format(two, "f")
    raise ValueError(f"Unknown signature value format: {style}")


def canonical_string(api_key: str, account_id: str, reference_code: str, value: Decimal,
                     currency: str, value_format: str | None = None) -> str:
    style = value_format or settings.SIGNATURE_VALUE_FORMAT
    return SEPARATOR.join(
        [str(api_key), str(account_id), str(reference_code), format_value(value, style), str(currency)]
    )


def compute_signature(api_key: str, account_id: str, reference_code: str, value: Decimal,
                      currency: str, value_format: str | None = None) -> str:
    """Compute the gateway signature for a payment request.

    Args:
        api_key: Merchant API key.
        account_id: Merchant account the payment is booked on.
        reference_code: Purchase order reference code.
        value: Order total.
        currency: ISO currency code.
        value_format: One of ``VALUE_FORMATS``; defaults to
            ``settings.SIGNATURE_VALUE_FORMAT``.

    Returns:
        str: 32-character lowercase hexadecimal MD5 digest.

    Raises:
        CryptoUnavailable: If MD5 cannot be instantiated in this runtime.
    """
    signature_string = canonical_string(api_key, account_id, reference_code, value, currency, value_format)
    try:
        digest = hashlib.md5(signature_string.encode("utf-8"), usedforsecurity=False).digest()
    except ValueError as e:
        # FIPS builds refuse md5
        log.error("Error generating signature for reference %s", reference_code, exc_info=True)
        raise CryptoUnavailable() from e
    return format(int.from_bytes(digest, "big"), "032x")
