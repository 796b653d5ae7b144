from typing import Dict, get_args

from orderdesk.models import DeliveryStatus, Order, OrderStatus, OrderType, PaymentStatus

ORDER_TYPES = get_args(OrderType)
PAYMENT_STATUSES = get_args(PaymentStatus)
DELIVERY_STATUSES = get_args(DeliveryStatus)

ALLOWED_VALUES = {
    "order_type": ORDER_TYPES,
    "payment_status": PAYMENT_STATUSES,
    "delivery_status": DELIVERY_STATUSES,
}


class InvalidStatus(ValueError):
    def __init__(self, field: str, value):
        self.field = field
        self.value = value
        super().__init__(f"'{value}' is not a valid {field}, expected one of {', '.join(ALLOWED_VALUES[field])}")


def check_value(field: str, value: str) -> str:
    if value not in ALLOWED_VALUES[field]:
        raise InvalidStatus(field, value)
    return value


def _set(order: Order, field: str, value: str) -> Order:
    # Every transition between the two values is allowed; only the field changes
    return order.model_copy(update={field: check_value(field, value)})


def set_order_type(order: Order, value: str) -> Order:
    return _set(order, "order_type", value)


def set_payment_status(order: Order, value: str) -> Order:
    return _set(order, "payment_status", value)


def set_delivery_status(order: Order, value: str) -> Order:
    return _set(order, "delivery_status", value)


def toggle(field: str, value: str) -> str:
    first, second = ALLOWED_VALUES[field]
    return second if check_value(field, value) == first else first


def changed_fields(original: Order, edited: OrderStatus) -> Dict[str, str]:
    """Status fields whose edited value differs from the stored order."""
    changes = {}
    for field in ALLOWED_VALUES:
        value = check_value(field, getattr(edited, field))
        if getattr(original, field) != value:
            changes[field] = value
    return changes
