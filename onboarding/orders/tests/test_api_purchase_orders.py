"""API tests for the purchase order endpoints.

They run against an in-memory SQLite database seeded by the ``seed``
fixture: customer 1, products 1 (10.00) and 2 (5.50).
"""

import uuid
from decimal import Decimal

from onboarding import settings
from onboarding.orders.domain import OrderStatus
from onboarding.orders.repository import PurchaseOrderRepository

URL = "/api/v1/purchase-orders"


def _create(client, *lines, customer=1):
    payload = {"id_customer": customer, "products": [{"id_product": p, "quantity": q} for p, q in lines]}
    return client.post(URL, json=payload)


def test_create_purchase_order(client):
    r = _create(client, (1, 2), (2, 3))
    assert r.status_code == 201
    body = r.json()
    assert body["status"] == "SAVED"
    assert Decimal(body["value"]) == Decimal("36.50")
    uuid.UUID(body["reference_code"])
    assert [p["id_product"] for p in body["products"]] == [1, 2]


def test_create_with_unknown_product(client):
    r = _create(client, (1, 1), (99, 1))
    assert r.status_code == 422
    assert r.json()["detail"] == "PRODUCT_NOT_FOUND"


def test_create_for_unknown_customer(client):
    r = _create(client, (1, 1), customer=42)
    assert r.status_code == 404
    assert r.json()["detail"] == "CUSTOMER_NOT_FOUND"


def test_create_empty_order(client):
    r = client.post(URL, json={"id_customer": 1, "products": []})
    assert r.status_code == 422
    assert r.json()["detail"] == "EMPTY_ORDER"


def test_create_validation_error(client):
    r = client.post(URL, json={"id_customer": 1, "products": [{"id_product": 1, "quantity": 0}]})
    assert r.status_code == 400


def test_retrieve_lists_order_lines(client):
    oid = _create(client, (2, 3)).json()["id"]
    r = client.get(f"{URL}/{oid}")
    assert r.status_code == 200
    body = r.json()
    assert body["id"] == oid
    assert Decimal(body["value"]) == Decimal("16.50")
    assert body["products"][0]["quantity"] == 3
    assert Decimal(body["products"][0]["price"]) == Decimal("5.50")


def test_retrieve_unknown_order(client):
    r = client.get(f"{URL}/12345")
    assert r.status_code == 404
    assert r.json()["detail"] == "PURCHASE_ORDER_NOT_FOUND"


def test_update_replaces_products_and_reference(client):
    created = _create(client, (1, 1)).json()
    r = client.put(f"{URL}/{created['id']}", json={"id_customer": 1, "products": [{"id_product": 2, "quantity": 2}]})
    assert r.status_code == 200
    body = r.json()
    assert body["id"] == created["id"]
    assert Decimal(body["value"]) == Decimal("11.00")
    assert body["reference_code"] != created["reference_code"]

    lines = client.get(f"{URL}/{created['id']}").json()["products"]
    assert [(p["id_product"], p["quantity"]) for p in lines] == [(2, 2)]


def test_update_order_of_other_customer(client):
    oid = _create(client, (1, 1)).json()["id"]
    r = client.put(f"{URL}/{oid}", json={"id_customer": 2, "products": [{"id_product": 1, "quantity": 1}]})
    assert r.status_code == 422
    assert r.json()["detail"] == "PURCHASE_ORDER_INVALID"


def test_update_paid_order_is_rejected(client):
    oid = _create(client, (1, 1)).json()["id"]
    PurchaseOrderRepository().update_status(oid, OrderStatus.PAID)
    r = client.put(f"{URL}/{oid}", json={"id_customer": 1, "products": [{"id_product": 1, "quantity": 2}]})
    assert r.status_code == 409
    assert r.json()["detail"] == "ORDER_NOT_EDITABLE"


def test_request_id_is_echoed(client):
    r = client.get(f"{URL}/1", headers={"X-Request-ID": "req-123"})
    assert r.headers["X-Request-ID"] == "req-123"
    assert client.get(f"{URL}/1").headers["X-Request-ID"]


def test_oversized_payload_is_rejected(client, monkeypatch):
    monkeypatch.setattr(settings, "API_MAX_BYTES", 10)
    r = _create(client, (1, 1))
    assert r.status_code == 413
    assert r.json()["detail"] == "PAYLOAD_TOO_LARGE"


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "components": {"db": {"ok": True}}}


def test_quantity_above_integer_column_is_rejected(client):
    r = _create(client, (1, 2**31))
    assert r.status_code == 400


def test_total_above_value_column_is_rejected(client):
    # 50 lines of 2**31 - 1 keyboards at 10.00 is about 1.07e12
    r = _create(client, *[(1, 2**31 - 1)] * 50)
    assert r.status_code == 422
    assert r.json()["detail"] == "PURCHASE_ORDER_INVALID"


def test_largest_quantity_is_accepted(client):
    r = _create(client, (2, 2**31 - 1))
    assert r.status_code == 201
    assert Decimal(r.json()["value"]) == Decimal("11811160058.50")
