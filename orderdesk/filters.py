from typing import List, Optional, Sequence

from orderdesk.models import Customer, CustomerFilters, Order, OrderFilters, Product, ProductFilters


def _contains(value: Optional[str], term: str) -> bool:
    return bool(value) and term in value.lower()


def search_customers(customers: Sequence[Customer], term: str = "") -> List[Customer]:
    """Customers whose name, phone, address or notes contain the term, ignoring case."""
    if not term:
        return list(customers)
    term = term.lower()
    return [
        customer for customer in customers
        if _contains(customer.name, term)
        or _contains(customer.phone_number, term)
        or _contains(customer.address, term)
        or _contains(customer.notes, term)
    ]


def search_products(products: Sequence[Product], term: str = "", active_only: bool = False) -> List[Product]:
    term = term.lower()
    return [
        product for product in products
        if (not term or _contains(product.name, term) or _contains(product.description, term))
        and (not active_only or product.is_active)
    ]


def filter_customers(customers: Sequence[Customer], filters: Optional[CustomerFilters] = None) -> List[Customer]:
    filters = filters or CustomerFilters()
    return search_customers(customers, filters.search)


def filter_products(products: Sequence[Product], filters: Optional[ProductFilters] = None) -> List[Product]:
    filters = filters or ProductFilters()
    return search_products(products, filters.search, filters.active_only)


def active_products(products: Sequence[Product]) -> List[Product]:
    """Products that can be picked for a new order."""
    return [product for product in products if product.is_active]


def filter_orders(orders: Sequence[Order], filters: Optional[OrderFilters] = None) -> List[Order]:
    filters = filters or OrderFilters()
    term = filters.search

    def matches(order: Order) -> bool:
        if term and not (
            (order.id is not None and term in str(order.id))
            or term in str(order.customer_id)
        ):
            return False
        if filters.payment_status and order.payment_status != filters.payment_status:
            return False
        if filters.delivery_status and order.delivery_status != filters.delivery_status:
            return False
        if filters.order_type and order.order_type != filters.order_type:
            return False
        return True

    return [order for order in orders if matches(order)]
