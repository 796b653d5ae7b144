from datetime import datetime

from orderdesk.models import Customer
from orderdesk.utils import customer_label, customer_name, format_currency, format_datetime, truncate


def test_format_currency():
    assert format_currency(1234.5, "$") == "$1,234.50"
    assert format_currency(None, "$") == "$0.00"
    assert format_currency(-3, "€") == "-€3.00"


def test_format_currency_uses_configured_symbol(monkeypatch):
    monkeypatch.setenv("ORDERDESK_CURRENCY", "£")
    assert format_currency(2) == "£2.00"


def test_format_datetime():
    assert format_datetime(datetime(2025, 1, 5, 14, 30)) == "Jan 05, 2025 14:30"
    assert format_datetime("2025-01-05T14:30") == "Jan 05, 2025 14:30"
    assert format_datetime(None) == "-"
    assert format_datetime("soon") == "soon"


def test_customer_label_falls_back_to_phone(customers):
    assert customer_label(customers[0]) == "Alice Martin"
    assert customer_label(Customer(phone_number="555000")) == "555000"
    assert customer_label(None) == "Unknown Customer"


def test_customer_name_lookup(customers):
    assert customer_name(customers, 3) == "Bob Stone"
    assert customer_name(customers, 99) == "Unknown Customer"


def test_truncate():
    assert truncate(None) == ""
    assert truncate("short") == "short"
    assert truncate("x" * 60, 10) == "x" * 10 + "..."
