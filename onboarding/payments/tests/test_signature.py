"""Tests for the gateway signature.

Golden digests were taken from the PayU documentation sample and from
``md5sum`` over the canonical strings.
"""

import re
from decimal import Decimal

import pytest

from onboarding import settings
from onboarding.errors import CryptoUnavailable
from onboarding.payments import signature
from onboarding.payments.signature import canonical_string, compute_signature, format_value

API_KEY = "4Vj8eK4rloUd272L48hsrarnUA"
HEX32 = re.compile(r"^[0-9a-f]{32}$")


def test_golden_value():
    sig = compute_signature(API_KEY, "512321", "TestPayU", Decimal("10000.00"), "COP")
    assert sig == "e7ab707454b16e349aec68137fa333a8"


def test_payu_documentation_sample():
    assert compute_signature(API_KEY, "508029", "TestPayU", Decimal("3"), "USD") == "ba9ffa71559580175585e45ce70b6c37"


def test_canonical_string_order_and_separator():
    assert canonical_string(API_KEY, "512321", "TestPayU", Decimal("10000.00"), "COP") == (
        "4Vj8eK4rloUd272L48hsrarnUA~512321~TestPayU~10000~COP"
    )


def test_leading_zero_digest_keeps_32_chars():
    sig = compute_signature(API_KEY, "512321", "ref-118", Decimal("10000"), "COP")
    assert sig == "00deeb723307c6c11501243b5cda191e"


def test_empty_inputs_still_give_32_hex_chars():
    sig = compute_signature("", "", "", Decimal("0"), "")
    assert HEX32.match(sig)
    assert sig == "d2dbfe4da6653a2044117ed014188191"


def test_signature_is_deterministic():
    args = (API_KEY, "512321", "ref-abc", Decimal("36.50"), "COP")
    assert compute_signature(*args) == compute_signature(*args)


def test_value_format_comes_from_settings(monkeypatch):
    monkeypatch.setattr(settings, "SIGNATURE_VALUE_FORMAT", "fixed2")
    sig = compute_signature(API_KEY, "512321", "TestPayU", Decimal("10000"), "COP")
    assert sig == "5f37640684a50d12f85725d67596790d"


@pytest.mark.parametrize(
    "value, style, expected",
    [
        (Decimal("10000.00"), "plain", "10000"),
        (Decimal("36.50"), "plain", "36.5"),
        (Decimal("0.00"), "plain", "0"),
        (Decimal("1234567.8"), "plain", "1234567.8"),
        (Decimal("10000"), "fixed2", "10000.00"),
        (Decimal("36.5"), "fixed2", "36.50"),
        (Decimal("150.00"), "one_decimal", "150.0"),
        (Decimal("150.26"), "one_decimal", "150.26"),
    ],
)
def test_format_value(value, style, expected):
    assert format_value(value, style) == expected


def test_unknown_value_format():
    with pytest.raises(ValueError):
        format_value(Decimal("1"), "locale")


def test_missing_md5_is_fatal(monkeypatch):
    def refuse(*args, **kwargs):
        raise ValueError("unsupported hash type md5")

    monkeypatch.setattr(signature.hashlib, "md5", refuse)
    with pytest.raises(CryptoUnavailable) as e:
        compute_signature(API_KEY, "512321", "TestPayU", Decimal("1"), "COP")
    assert str(e.value) == "CRYPTO_UNAVAILABLE"
    assert not isinstance(e.value, ValueError)
