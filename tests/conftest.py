import json
from datetime import datetime

import pytest
import requests

from orderdesk import messages
from orderdesk.api import ApiClient
from orderdesk.models import Customer, Order, OrderItem, Product
from orderdesk.session import AuthSession

BASE_URL = "http://api.test"


def make_response(status_code=200, body=None):
    response = requests.Response()
    response.status_code = status_code
    response._content = b"" if body is None else json.dumps(body).encode("utf-8")
    return response


class FakeHttp:
    """Stands in for requests.Session; answers from a (method, path) routing table."""

    def __init__(self):
        self.calls = []
        self.routes = {}

    def route(self, method, path, status_code=200, body=None, error=None):
        self.routes[(method, path)] = (status_code, body, error)

    def request(self, method, url, json=None, headers=None, timeout=None):
        path = url[len(BASE_URL):]
        self.calls.append({"method": method, "path": path, "json": json, "headers": headers or {}})
        status_code, body, error = self.routes.get((method, path), (404, {"message": "Not found"}, None))
        if error is not None:
            raise error
        return make_response(status_code, body)


@pytest.fixture(autouse=True)
def fresh_messages():
    messages.set_catalog(None)
    yield
    messages.set_catalog(None)


@pytest.fixture
def http():
    return FakeHttp()


@pytest.fixture
def session():
    auth = AuthSession()
    auth.start("admin", "token-123", "refresh-456")
    return auth


@pytest.fixture
def client(session, http):
    return ApiClient(session, base_url=BASE_URL, timeout=1, http=http)


@pytest.fixture
def catalog():
    return [
        Product(id=1, name="Croissant", price=9.5, description="Butter croissant"),
        Product(id=2, name="Baguette", price=2.25, is_active=False),
        Product(id=3, name="Espresso", price=1.75, description="Single shot"),
    ]


@pytest.fixture
def customers():
    return [
        Customer(id=1, name="Alice Martin", phone_number="0612345678", address="12 Rue de Lyon"),
        Customer(id=2, phone_number="0798765432", notes="Prefers delivery after 6pm"),
        Customer(id=3, name="Bob Stone", phone_number="555123", address="Harbour Street"),
    ]


@pytest.fixture
def orders():
    return [
        Order(id=10, customer_id=1, order_type="pickup", payment_status="paid",
              delivery_status="delivered", datetime=datetime(2025, 3, 14, 12, 0),
              items=[OrderItem(product_id=1, quantity=2)], total_amount=19.0),
        Order(id=11, customer_id=2, order_type="delivery", payment_status="not_paid",
              delivery_status="not_delivered", datetime=datetime(2025, 3, 12, 18, 30),
              items=[OrderItem(product_id=3, quantity=4)]),
        Order(id=25, customer_id=3, order_type="delivery", payment_status="paid",
              delivery_status="not_delivered",
              items=[OrderItem(product_id=2, quantity=1), OrderItem(product_id=99, quantity=3)]),
    ]
