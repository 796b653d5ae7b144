import pytest

from orderdesk.models import Order, OrderStatus
from orderdesk.status import (
    DELIVERY_STATUSES, ORDER_TYPES, PAYMENT_STATUSES, InvalidStatus, changed_fields,
    set_delivery_status, set_order_type, set_payment_status, toggle,
)


@pytest.fixture
def order():
    return Order(id=7, customer_id=1, order_type="delivery", payment_status="not_paid", delivery_status="not_delivered")


def test_marking_paid_leaves_other_fields_alone(order):
    paid = set_payment_status(order, "paid")

    assert paid.payment_status == "paid"
    assert paid.delivery_status == "not_delivered"
    assert paid.order_type == "delivery"
    assert order.payment_status == "not_paid"


def test_any_transition_is_allowed(order):
    delivered = set_delivery_status(order, "delivered")
    assert set_delivery_status(delivered, "not_delivered").delivery_status == "not_delivered"
    assert set_order_type(order, "pickup").order_type == "pickup"
    assert set_payment_status(order, "not_paid") == order


def test_unknown_value_is_rejected(order):
    with pytest.raises(InvalidStatus) as excinfo:
        set_payment_status(order, "refunded")
    assert excinfo.value.field == "payment_status"
    assert isinstance(excinfo.value, ValueError)


def test_toggle():
    assert toggle("payment_status", "paid") == "not_paid"
    assert toggle("order_type", "pickup") == "delivery"
    with pytest.raises(InvalidStatus):
        toggle("delivery_status", "lost")


def test_changed_fields_only_reports_differences(order):
    edited = OrderStatus(order_type="delivery", payment_status="paid", delivery_status="delivered")
    assert changed_fields(order, edited) == {"payment_status": "paid", "delivery_status": "delivered"}
    assert changed_fields(order, OrderStatus.of(order)) == {}


def test_allowed_values_follow_model_literals():
    assert ORDER_TYPES == ("pickup", "delivery")
    assert PAYMENT_STATUSES == ("not_paid", "paid")
    assert DELIVERY_STATUSES == ("not_delivered", "delivered")
