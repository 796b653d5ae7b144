import logging
from typing import Iterable, List, Optional, Sequence, Union

from pydantic import BaseModel

from orderdesk.models import Order, OrderForm, OrderItem, Product

UNKNOWN_PRODUCT = "Unknown Product"

ItemSource = Union[Order, OrderForm, Iterable[OrderItem]]


class OrderLine(BaseModel):
    product_id: int
    product_name: str
    unit_price: float
    quantity: int
    subtotal: float


def _items(source: ItemSource) -> List[OrderItem]:
    if isinstance(source, (Order, OrderForm)):
        return list(source.items)
    return list(source)


def find_product(catalog: Sequence[Product], product_id: int) -> Optional[Product]:
    for product in catalog:
        if product.id == product_id:
            return product
    return None


def subtotal(item: OrderItem, catalog: Sequence[Product]) -> float:
    """Line price, or 0 when the product is no longer in the catalog."""
    product = find_product(catalog, item.product_id)
    if product is None:
        return 0
    return product.price * item.quantity


def order_total(source: ItemSource, catalog: Sequence[Product]) -> float:
    return sum((subtotal(item, catalog) for item in _items(source)), 0)


def order_lines(source: ItemSource, catalog: Sequence[Product]) -> List[OrderLine]:
    lines = []
    for item in _items(source):
        product = find_product(catalog, item.product_id)
        if product is None:
            logging.warning(f"Product {item.product_id} not found in catalog, pricing line at 0")
        lines.append(OrderLine(
            product_id=item.product_id,
            product_name=product.name if product else UNKNOWN_PRODUCT,
            unit_price=product.price if product else 0.0,
            quantity=item.quantity,
            subtotal=subtotal(item, catalog),
        ))
    return lines


def order_amount(order: Order, catalog: Sequence[Product]) -> float:
    """Server-computed total when the order carries one, catalog total otherwise."""
    if order.total_amount is not None:
        return order.total_amount
    return order_total(order, catalog)
