"""Shared fixtures: in-memory database, seeded catalog and API client."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from onboarding import database, models, settings


@pytest.fixture(autouse=True)
def use_stubs_for_tests(monkeypatch):
    monkeypatch.setattr(settings, "USE_HTTP_ADAPTERS", False)
    monkeypatch.setattr(settings, "SIGNATURE_VALUE_FORMAT", "plain")


@pytest.fixture
def db():
    engine = database.configure_engine("sqlite://")
    database.Base.metadata.create_all(engine)
    yield engine
    database.Base.metadata.drop_all(engine)


@pytest.fixture
def seed(db):
    """Two customers (the second one is declined by the gateway stub), two
    products priced 10.00 and 5.50 and one stored card per customer."""
    with database.get_session() as s:
        s.add_all([
            models.Customer(id=1, full_name="Ana Gomez", email="ana@example.com",
                            phone="3001234567", dni_number="1020304050"),
            models.Customer(id=2, full_name="REJECTED", email="rejected@example.com"),
            models.Product(id=1, name="Keyboard", code="KB-1", description="Mechanical keyboard",
                           price=Decimal("10.00")),
            models.Product(id=2, name="Mouse", code="MS-1", description="Wireless mouse",
                           price=Decimal("5.50")),
        ])
        s.flush()
        s.add_all([
            models.CreditCard(id=1, customer_id=1, token="tok-visa-1", payment_method="VISA",
                              masked_number="411111*****1111"),
            models.CreditCard(id=2, customer_id=2, token="tok-visa-2", payment_method="VISA"),
        ])
        s.commit()


@pytest.fixture
def client(seed):
    from onboarding.main import app

    return TestClient(app)
