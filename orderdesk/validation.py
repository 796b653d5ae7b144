"""
Submit-time field validation for the three entity forms.

Each validator returns a mapping of field name to message. An empty mapping
means the form may be submitted; anything else must block the request.
"""
import math
from typing import Dict

from orderdesk.messages import message
from orderdesk.models import CustomerForm, OrderForm, ProductForm

PHONE_MIN_LENGTH = 6
PHONE_MAX_LENGTH = 20
NAME_MAX_LENGTH = 80
TEXT_MAX_LENGTH = 255


def validate_customer(form: CustomerForm) -> Dict[str, str]:
    errors = {}

    if not form.phone_number.strip():
        errors["phone_number"] = message("customers.errors.phoneRequired")
    elif not PHONE_MIN_LENGTH <= len(form.phone_number) <= PHONE_MAX_LENGTH:
        errors["phone_number"] = message("customers.errors.phoneInvalid")

    if form.name and len(form.name) > NAME_MAX_LENGTH:
        errors["name"] = message("customers.errors.nameTooLong")

    if form.address and len(form.address) > TEXT_MAX_LENGTH:
        errors["address"] = message("customers.errors.addressTooLong")

    return errors


def validate_product(form: ProductForm) -> Dict[str, str]:
    errors = {}

    if not form.name.strip():
        errors["name"] = message("products.errors.nameRequired")
    elif len(form.name) > NAME_MAX_LENGTH:
        errors["name"] = message("products.errors.nameTooLong")

    if not (math.isfinite(form.price) and form.price >= 0):
        errors["price"] = message("products.errors.priceInvalid")

    if form.description and len(form.description) > TEXT_MAX_LENGTH:
        errors["description"] = message("products.errors.descriptionTooLong")

    if form.picture_url and len(form.picture_url) > TEXT_MAX_LENGTH:
        errors["picture_url"] = message("products.errors.pictureUrlTooLong")

    return errors


def validate_order(form: OrderForm) -> Dict[str, str]:
    errors = {}

    if not form.customer_id:
        errors["customer_id"] = message("orders.errors.customerRequired")

    if not form.items:
        errors["items"] = message("orders.errors.itemsRequired")

    return errors
