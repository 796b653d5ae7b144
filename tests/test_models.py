import pytest
from pydantic import ValidationError

from orderdesk.models import (
    Customer, CustomerForm, Order, OrderFilters, OrderForm, OrderItem, Product, ProductForm, to_wire,
)


def test_customer_form_round_trip_blanks_become_absent():
    form = CustomerForm(name="", phone_number="0612345678", address="1 Main St", notes="")
    customer = form.to_entity(id=4)

    assert customer.id == 4
    assert customer.name is None
    assert customer.notes is None
    assert customer.address == "1 Main St"
    assert CustomerForm.from_entity(customer) == form


def test_product_form_defaults():
    form = ProductForm()
    assert form.name == ""
    assert form.price == 0
    assert form.is_active is True


def test_product_form_from_entity_fills_optional_text():
    form = ProductForm.from_entity(Product(id=1, name="Tea", price=3))
    assert form.description == ""
    assert form.picture_url == ""
    assert form.to_entity(id=1) == Product(id=1, name="Tea", price=3)


def test_order_form_defaults():
    form = OrderForm()
    assert form.customer_id == 0
    assert form.order_type == "pickup"
    assert form.payment_status == "not_paid"
    assert form.delivery_status == "not_delivered"
    assert form.items == []
    assert len(form.datetime) == len("2025-01-01T12:00")


def test_order_form_items_are_added_and_removed_without_mutation():
    form = OrderForm(customer_id=1)
    with_items = form.with_item(OrderItem(product_id=1, quantity=2)).with_item(OrderItem(product_id=3, quantity=1))

    assert form.items == []
    assert [item.product_id for item in with_items.items] == [1, 3]
    assert [item.product_id for item in with_items.without_item(0).items] == [3]


def test_order_form_to_entity_parses_datetime():
    order = OrderForm(customer_id=2, datetime="2025-03-14T12:30",
                      items=[OrderItem(product_id=1, quantity=1)]).to_entity()
    assert order.datetime.hour == 12
    assert order.datetime.minute == 30
    assert order.total_amount is None


def test_order_accepts_wire_spelling_of_statuses():
    order = Order(customer_id=1, payment_status="notPaid", delivery_status="notDelivered")
    assert order.payment_status == "not_paid"
    assert order.delivery_status == "not_delivered"
    assert to_wire(order.payment_status) == "notPaid"
    assert to_wire("paid") == "paid"


def test_order_rejects_unknown_status():
    with pytest.raises(ValidationError):
        Order(customer_id=1, payment_status="refunded")
    with pytest.raises(ValidationError):
        Order(customer_id=1, order_type="dine_in")


def test_order_item_quantity_must_be_positive():
    with pytest.raises(ValidationError):
        OrderItem(product_id=1, quantity=0)


def test_customer_requires_phone_number():
    with pytest.raises(ValidationError):
        Customer(name="No Phone")


def test_order_filters_default_to_wildcards():
    filters = OrderFilters()
    assert filters.search == ""
    assert filters.payment_status is None
    assert OrderFilters(payment_status="notPaid").payment_status == "not_paid"


def test_blank_order_datetime_means_unscheduled():
    assert Order(customer_id=1, datetime="").datetime is None
    assert OrderForm(customer_id=1, datetime="", items=[OrderItem(product_id=1, quantity=1)]).to_entity().datetime is None
