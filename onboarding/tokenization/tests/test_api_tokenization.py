"""API tests for card tokenization, using the in-process gateway stub."""

import pytest

from onboarding.payments.repository import CustomerRepository

URL = "/api/v1/tokenization"
CARD = {
    "id_customer": 1,
    "name": "Ana Gomez",
    "identification_number": "1020304050",
    "payment_method": "mastercard",
    "number": "5500 0000 0000 0004",
    "expiration_date": "2030/01",
}


def test_tokenize_card(client):
    r = client.post(URL, json=CARD)
    assert r.status_code == 201
    body = r.json()
    assert body["credit_card_token_id"]
    assert body["masked_number"] == "550000*****0004"
    assert body["payment_method"] == "MASTERCARD"
    assert "error_description" not in body

    cards = CustomerRepository().get(1).credit_cards
    stored = [c for c in cards if c.id == body["id_credit_card"]]
    assert stored[0].token == body["credit_card_token_id"]
    assert stored[0].masked_number == "550000*****0004"


def test_tokenized_card_can_pay(client):
    card_id = client.post(URL, json=CARD).json()["id_credit_card"]
    oid = client.post("/api/v1/purchase-orders",
                      json={"id_customer": 1, "products": [{"id_product": 2, "quantity": 1}]}).json()["id"]
    r = client.post("/api/v1/payments", json={
        "id_purchase_order": oid, "id_customer": 1, "id_credit_card": card_id,
        "device_session_id": "d", "ip_address": "127.0.0.1", "cookie": "c", "user_agent": "ua",
    })
    assert r.status_code == 200
    assert r.json()["status"] == "APPROVED"


def test_card_rejected_by_gateway(client):
    r = client.post(URL, json={**CARD, "number": "5500000000000005"})
    assert r.status_code == 422
    assert r.json()["error_description"] == "Invalid credit card number"
    assert len(CustomerRepository().get(1).credit_cards) == 1


def test_invalid_card_does_not_echo_number(client):
    r = client.post(URL, json={**CARD, "number": "5500-0000-00x0-0004"})
    assert r.status_code == 400
    assert "5500" not in r.text


def test_unknown_customer(client):
    r = client.post(URL, json={**CARD, "id_customer": 77})
    assert r.status_code == 404
    assert r.json()["detail"] == "CUSTOMER_NOT_FOUND"


def test_programming_errors_are_not_reported_as_upstream(client, monkeypatch):
    class BrokenGateway:
        def create_token(self, request):
            raise RuntimeError("unexpected")

    monkeypatch.setattr("onboarding.payments.providers.get_gateway", lambda: BrokenGateway(), raising=True)
    with pytest.raises(RuntimeError, match="unexpected"):
        client.post(URL, json=CARD)
