"""
Back-office operations on top of the API client.

Lists are fetched lazily and cached until a confirmed mutation invalidates
them. Forms are validated before any request is built; a form with errors
never reaches the network. Remote failures become a single operator-facing
message and leave the cached lists untouched.
"""
import logging
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel

from orderdesk.api import ApiClient, ApiError, AuthenticationError
from orderdesk.messages import message
from orderdesk.models import (
    Customer, CustomerForm, Order, OrderForm, OrderStatus, Product, ProductForm,
)
from orderdesk.status import changed_fields
from orderdesk.validation import validate_customer, validate_order, validate_product

CUSTOMERS = "customers"
PRODUCTS = "products"
ORDERS = "orders"


class MutationResult(BaseModel):
    entity: Optional[BaseModel] = None
    errors: Dict[str, str] = {}
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not self.errors and self.message is None


class Backoffice:
    def __init__(self, client: ApiClient):
        self.client = client
        self._lists: Dict[str, list] = {}
        self._loaders: Dict[str, Callable[[], list]] = {
            CUSTOMERS: client.list_customers,
            PRODUCTS: client.list_products,
            ORDERS: client.list_orders,
        }

    def _list(self, name: str) -> list:
        if name not in self._lists:
            self._lists[name] = self._loaders[name]()
        return self._lists[name]

    def customers(self) -> List[Customer]:
        return self._list(CUSTOMERS)

    def products(self) -> List[Product]:
        return self._list(PRODUCTS)

    def orders(self) -> List[Order]:
        return self._list(ORDERS)

    def invalidate(self, *names: str):
        for name in names or tuple(self._loaders):
            self._lists.pop(name, None)

    def check_session(self) -> bool:
        """Confirm the stored token with the API; False once it has been rejected."""
        try:
            username = self.client.current_user()
        except AuthenticationError:
            logging.info("Stored session was rejected, login required")
            return False
        self.client.session.username = username
        return True

    def _mutate(self, call: Callable, failure_key: str, refresh: str) -> MutationResult:
        try:
            entity = call()
        except AuthenticationError:
            raise
        except ApiError as e:
            logging.warning(f"{failure_key}: {e}")
            return MutationResult(message=e.server_message or message(failure_key))
        self.invalidate(refresh)
        return MutationResult(entity=entity)

    # ---------- Customers ----------

    def save_customer(self, form: CustomerForm, customer_id: Optional[int] = None) -> MutationResult:
        errors = validate_customer(form)
        if errors:
            return MutationResult(errors=errors)
        if customer_id is None:
            return self._mutate(lambda: self.client.create_customer(form), "customers.errors.createFailed", CUSTOMERS)
        return self._mutate(lambda: self.client.update_customer(customer_id, form), "customers.errors.updateFailed", CUSTOMERS)

    def delete_customer(self, customer_id: int) -> MutationResult:
        return self._mutate(lambda: self.client.delete_customer(customer_id), "customers.errors.deleteFailed", CUSTOMERS)

    # ---------- Products ----------

    def save_product(self, form: ProductForm, product_id: Optional[int] = None) -> MutationResult:
        errors = validate_product(form)
        if errors:
            return MutationResult(errors=errors)
        if product_id is None:
            return self._mutate(lambda: self.client.create_product(form), "products.errors.createFailed", PRODUCTS)
        return self._mutate(lambda: self.client.update_product(product_id, form), "products.errors.updateFailed", PRODUCTS)

    def delete_product(self, product_id: int) -> MutationResult:
        return self._mutate(lambda: self.client.delete_product(product_id), "products.errors.deleteFailed", PRODUCTS)

    # ---------- Orders ----------

    def create_order(self, form: OrderForm) -> MutationResult:
        errors = validate_order(form)
        if errors:
            return MutationResult(errors=errors)
        return self._mutate(lambda: self.client.create_order(form), "orders.errors.createFailed", ORDERS)

    def update_order_status(self, original: Order, edited: OrderStatus) -> MutationResult:
        """Send one single-field update per status that actually changed."""
        updates = {
            "order_type": self.client.update_order_type,
            "payment_status": self.client.update_order_payment_status,
            "delivery_status": self.client.update_order_delivery_status,
        }
        result = MutationResult()
        for field, value in changed_fields(original, edited).items():
            # Each field is its own request; earlier successes still need a refresh
            result = self._mutate(lambda: updates[field](original.id, value), "orders.errors.updateFailed", ORDERS)
            if not result.ok:
                break
            logging.info(f"Order {original.id}: {field} -> {value}")
        return result

    def delete_order(self, order_id: int) -> MutationResult:
        return self._mutate(lambda: self.client.delete_order(order_id), "orders.errors.deleteFailed", ORDERS)
