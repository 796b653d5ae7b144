from datetime import datetime as dt
from typing import Optional, List, Literal

from pydantic import BaseModel, Field, field_validator

OrderType = Literal["pickup", "delivery"]
PaymentStatus = Literal["not_paid", "paid"]
DeliveryStatus = Literal["not_delivered", "delivered"]

# The API spells the two-word status values in camelCase
WIRE_ALIASES = {
    "notPaid": "not_paid",
    "notDelivered": "not_delivered",
}
TO_WIRE = {value: key for key, value in WIRE_ALIASES.items()}


def from_wire(value):
    if isinstance(value, str):
        return WIRE_ALIASES.get(value, value)
    return value


def to_wire(value):
    if isinstance(value, str):
        return TO_WIRE.get(value, value)
    return value


def _blank_to_none(value: str) -> Optional[str]:
    return value if value else None


def _default_datetime() -> str:
    return dt.now().strftime("%Y-%m-%dT%H:%M")


class Customer(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    phone_number: str
    address: Optional[str] = None
    notes: Optional[str] = None


class Product(BaseModel):
    id: Optional[int] = None
    name: str
    price: float = Field(ge=0)
    description: Optional[str] = None
    picture_url: Optional[str] = None
    is_active: bool = True


class OrderItem(BaseModel):
    product_id: int
    quantity: int = Field(ge=1)


class _StatusFields(BaseModel):
    """Normalises wire spellings of the status literals on input."""

    @field_validator("payment_status", "delivery_status", mode="before", check_fields=False)
    @classmethod
    def _normalise_status(cls, value):
        return from_wire(value)


class Order(_StatusFields):
    id: Optional[int] = None
    customer_id: int
    order_type: OrderType = "pickup"
    payment_status: PaymentStatus = "not_paid"
    delivery_status: DeliveryStatus = "not_delivered"
    datetime: Optional[dt] = None
    items: List[OrderItem] = Field(default_factory=list)
    total_amount: Optional[float] = None

    @field_validator("datetime", mode="before")
    @classmethod
    def _blank_datetime_is_unscheduled(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class OrderStatus(_StatusFields):
    order_type: OrderType
    payment_status: PaymentStatus
    delivery_status: DeliveryStatus

    @classmethod
    def of(cls, order: Order) -> "OrderStatus":
        return cls(
            order_type=order.order_type,
            payment_status=order.payment_status,
            delivery_status=order.delivery_status,
        )


# ---------- Forms (drafts edited before submission) ----------

class CustomerForm(BaseModel):
    name: str = ""
    phone_number: str = ""
    address: str = ""
    notes: str = ""

    @classmethod
    def from_entity(cls, customer: Customer) -> "CustomerForm":
        return cls(
            name=customer.name or "",
            phone_number=customer.phone_number,
            address=customer.address or "",
            notes=customer.notes or "",
        )

    def to_entity(self, id: Optional[int] = None) -> Customer:
        return Customer(
            id=id,
            name=_blank_to_none(self.name),
            phone_number=self.phone_number,
            address=_blank_to_none(self.address),
            notes=_blank_to_none(self.notes),
        )


class ProductForm(BaseModel):
    # Unconstrained so that a negative price reaches validation
    name: str = ""
    price: float = 0
    description: str = ""
    picture_url: str = ""
    is_active: bool = True

    @classmethod
    def from_entity(cls, product: Product) -> "ProductForm":
        return cls(
            name=product.name,
            price=product.price or 0,
            description=product.description or "",
            picture_url=product.picture_url or "",
            is_active=product.is_active,
        )

    def to_entity(self, id: Optional[int] = None) -> Product:
        return Product(
            id=id,
            name=self.name,
            price=self.price,
            description=_blank_to_none(self.description),
            picture_url=_blank_to_none(self.picture_url),
            is_active=self.is_active,
        )


class OrderForm(_StatusFields):
    customer_id: int = 0
    order_type: OrderType = "pickup"
    payment_status: PaymentStatus = "not_paid"
    delivery_status: DeliveryStatus = "not_delivered"
    datetime: str = Field(default_factory=_default_datetime)
    items: List[OrderItem] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, order: Order) -> "OrderForm":
        data = {
            "customer_id": order.customer_id,
            "order_type": order.order_type,
            "payment_status": order.payment_status,
            "delivery_status": order.delivery_status,
            "items": [item.model_copy() for item in order.items],
        }
        if order.datetime is not None:
            data["datetime"] = order.datetime.strftime("%Y-%m-%dT%H:%M")
        return cls(**data)

    def to_entity(self, id: Optional[int] = None) -> Order:
        return Order(
            id=id,
            customer_id=self.customer_id,
            order_type=self.order_type,
            payment_status=self.payment_status,
            delivery_status=self.delivery_status,
            datetime=self.datetime.strip() or None,
            items=[item.model_copy() for item in self.items],
        )

    def with_item(self, item: OrderItem) -> "OrderForm":
        return self.model_copy(update={"items": self.items + [item]})

    def without_item(self, index: int) -> "OrderForm":
        items = [item for i, item in enumerate(self.items) if i != index]
        return self.model_copy(update={"items": items})


# ---------- Filters ----------

class CustomerFilters(BaseModel):
    search: str = ""


class ProductFilters(BaseModel):
    search: str = ""
    active_only: bool = False


class OrderFilters(_StatusFields):
    search: str = ""
    payment_status: Optional[PaymentStatus] = None
    delivery_status: Optional[DeliveryStatus] = None
    order_type: Optional[OrderType] = None
