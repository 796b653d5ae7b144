import logging
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from orderdesk.config import api_url, request_timeout
from orderdesk.models import (
    Customer, CustomerForm, Order, OrderForm, Product, ProductForm, to_wire,
)
from orderdesk.session import AuthSession


class ApiError(Exception):
    def __init__(self, description: str, status_code: Optional[int] = None, server_message: Optional[str] = None):
        super().__init__(description)
        self.status_code = status_code
        # Message supplied by the API itself, if any
        self.server_message = server_message


class AuthenticationError(ApiError):
    """Missing, invalid or expired credentials (HTTP 401)."""


def _error_message(response: requests.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("message") or body.get("error")
    return None


def _wire_payload(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: to_wire(value) for key, value in data.items()}


class ApiClient:
    """CRUD access to the order-management REST API."""

    def __init__(self, session: AuthSession, base_url: Optional[str] = None,
                 timeout: Optional[float] = None, retries: int = 1,
                 http: Optional[requests.Session] = None):
        self.session = session
        self.base_url = (base_url or api_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else request_timeout()
        self.http = http or requests.Session()
        if http is None:
            adapter = HTTPAdapter(max_retries=Retry(
                total=retries,
                backoff_factor=0.3,
                status_forcelist=(502, 503, 504),
                raise_on_status=False,
            ))
            self.http.mount("http://", adapter)
            self.http.mount("https://", adapter)

    def _request(self, method: str, path: str, payload: Optional[dict] = None, missing_ok: bool = False):
        url = f"{self.base_url}{path}"
        try:
            response = self.http.request(
                method, url,
                json=payload,
                headers=self.session.bearer_header(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ApiError(f"Could not reach {url}: {e}") from e

        if response.status_code == 401:
            self.session.clear()
            server_message = _error_message(response)
            raise AuthenticationError(server_message or "Authentication required", 401, server_message)
        if missing_ok and response.status_code == 404:
            logging.info(f"{method} {path}: already gone")
            return None
        if response.status_code >= 400:
            server_message = _error_message(response)
            description = f"{method} {path} failed with status {response.status_code}"
            if server_message:
                description = f"{description}: {server_message}"
            raise ApiError(description, response.status_code, server_message)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"{method} {path} returned a malformed response", response.status_code) from e

    # ---------- Auth ----------

    def login(self, username: str, password: str):
        data = self._request("POST", "/api/login", {"username": username, "password": password})
        self.session.start(username, data["access_token"], data.get("refresh_token"))
        logging.info(f"Logged in as {username}")

    def logout(self):
        try:
            self._request("POST", "/api/logout")
        finally:
            self.session.clear()

    def register(self, username: str, password: str):
        self._request("POST", "/api/register", {"username": username, "password": password})

    def current_user(self) -> str:
        data = self._request("GET", "/api/protected")
        return data["username"]

    # ---------- Customers ----------

    def list_customers(self) -> List[Customer]:
        return [Customer(**row) for row in self._request("GET", "/api/customers") or []]

    def get_customer(self, customer_id: int) -> Customer:
        return Customer(**self._request("GET", f"/api/customers/{customer_id}"))

    def create_customer(self, form: CustomerForm) -> Customer:
        return Customer(**self._request("POST", "/api/customers", form.model_dump()))

    def update_customer(self, customer_id: int, form: CustomerForm) -> Customer:
        return Customer(**self._request("PUT", f"/api/customers/{customer_id}", form.model_dump()))

    def delete_customer(self, customer_id: int):
        self._request("DELETE", f"/api/customers/{customer_id}", missing_ok=True)

    # ---------- Products ----------

    def list_products(self) -> List[Product]:
        return [Product(**row) for row in self._request("GET", "/api/products") or []]

    def get_product(self, product_id: int) -> Product:
        return Product(**self._request("GET", f"/api/products/{product_id}"))

    def create_product(self, form: ProductForm) -> Product:
        return Product(**self._request("POST", "/api/products", form.model_dump()))

    def update_product(self, product_id: int, form: ProductForm) -> Product:
        return Product(**self._request("PUT", f"/api/products/{product_id}", form.model_dump()))

    def delete_product(self, product_id: int):
        self._request("DELETE", f"/api/products/{product_id}", missing_ok=True)

    # ---------- Orders ----------

    def list_orders(self) -> List[Order]:
        return [Order(**row) for row in self._request("GET", "/api/orders") or []]

    def get_order(self, order_id: int) -> Order:
        return Order(**self._request("GET", f"/api/orders/{order_id}"))

    def create_order(self, form: OrderForm) -> Order:
        payload = _wire_payload(form.model_dump(mode="json"))
        # A blank date means the order is unscheduled
        payload["datetime"] = form.datetime.strip() or None
        return Order(**self._request("POST", "/api/orders", payload))

    def update_order_payment_status(self, order_id: int, payment_status: str):
        self._request("PUT", f"/api/orders/{order_id}/payment_status", _wire_payload({"payment_status": payment_status}))

    def update_order_delivery_status(self, order_id: int, delivery_status: str):
        self._request("PUT", f"/api/orders/{order_id}/delivery_status", _wire_payload({"delivery_status": delivery_status}))

    def update_order_type(self, order_id: int, order_type: str):
        self._request("PUT", f"/api/orders/{order_id}/order_type", {"order_type": order_type})

    def delete_order(self, order_id: int):
        self._request("DELETE", f"/api/orders/{order_id}", missing_ok=True)
