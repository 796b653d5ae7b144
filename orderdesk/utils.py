from datetime import datetime
from typing import Optional, Sequence, Union

from orderdesk.config import currency_symbol
from orderdesk.models import Customer

UNKNOWN_CUSTOMER = "Unknown Customer"


def format_currency(amount: Optional[float], symbol: Optional[str] = None) -> str:
	symbol = currency_symbol() if symbol is None else symbol
	amount = amount or 0.0
	sign = "-" if amount < 0 else ""
	return f"{sign}{symbol}{abs(amount):,.2f}"


def format_datetime(value: Union[datetime, str, None]) -> str:
	if not value:
		return "-"
	if isinstance(value, str):
		try:
			value = datetime.fromisoformat(value)
		except ValueError:
			return value
	return value.strftime("%b %d, %Y %H:%M")


def customer_label(customer: Optional[Customer]) -> str:
	"""Name when set, the phone number otherwise."""
	if customer is None:
		return UNKNOWN_CUSTOMER
	return customer.name or customer.phone_number or UNKNOWN_CUSTOMER


def customer_name(customers: Sequence[Customer], customer_id: int) -> str:
	for customer in customers:
		if customer.id == customer_id:
			return customer_label(customer)
	return UNKNOWN_CUSTOMER


def truncate(text: Optional[str], length: int = 50) -> str:
	# Notes are unbounded; lists only show the start
	if not text:
		return ""
	return text if len(text) <= length else text[:length].rstrip() + "..."
