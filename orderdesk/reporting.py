from datetime import datetime
from typing import Any, Dict, Optional, Sequence

import pandas as pd

from orderdesk.models import Customer, Order, Product
from orderdesk.pricing import order_amount
from orderdesk.utils import customer_name


def _timestamp(value: Optional[datetime]) -> pd.Timestamp:
    """Naive timestamps are read as UTC so they compare with aware ones."""
    return pd.to_datetime(value, utc=True, errors="coerce")


def _orders_df(orders: Sequence[Order], catalog: Sequence[Product]) -> pd.DataFrame:
    rows = [
        {
            "id": order.id,
            "customer_id": order.customer_id,
            "order_type": order.order_type,
            "payment_status": order.payment_status,
            "delivery_status": order.delivery_status,
            "datetime": order.datetime,
            "amount": float(order_amount(order, catalog)),
        }
        for order in orders
    ]
    df = pd.DataFrame(rows, columns=[
        "id", "customer_id", "order_type", "payment_status", "delivery_status", "datetime", "amount",
    ])
    df["datetime"] = pd.to_datetime(df["datetime"], utc=True, errors="coerce")
    return df


def summary(orders: Sequence[Order], customers: Sequence[Customer], products: Sequence[Product]) -> Dict[str, Any]:
    df = _orders_df(orders, products)
    return {
        "total_sales": float(df["amount"].sum()) if not df.empty else 0.0,
        "total_orders": len(orders),
        "total_customers": len(customers),
        "total_products": len(products),
    }


def sales_by_month(orders: Sequence[Order], catalog: Sequence[Product],
                   now: Optional[datetime] = None, months: int = 6) -> pd.DataFrame:
    """Sales per calendar month for the last `months` months, oldest first."""
    now = _timestamp(now or datetime.now())
    periods = pd.period_range(end=now.tz_localize(None).to_period("M"), periods=months, freq="M")

    df = _orders_df(orders, catalog).dropna(subset=["datetime"])
    if df.empty:
        totals = {}
    else:
        df["period"] = df["datetime"].dt.tz_localize(None).dt.to_period("M")
        totals = df.groupby("period")["amount"].sum().to_dict()

    return pd.DataFrame({
        "name": [period.strftime("%b") for period in periods],
        "sales": [float(totals.get(period, 0.0)) for period in periods],
    })


def orders_by_day(orders: Sequence[Order], now: Optional[datetime] = None, days: int = 7) -> pd.DataFrame:
    """Number of orders per calendar day over the last `days` days, ending today."""
    now = _timestamp(now or datetime.now())
    dates = pd.date_range(end=now.normalize(), periods=days, freq="D")

    df = _orders_df(orders, []).dropna(subset=["datetime"])
    df = df[df["datetime"] <= now]
    counts = df.groupby(df["datetime"].dt.normalize()).size().to_dict() if not df.empty else {}

    return pd.DataFrame({
        "name": [date.strftime("%a") for date in dates],
        "orders": [int(counts.get(date, 0)) for date in dates],
    })


def status_distribution(orders: Sequence[Order]) -> Dict[str, int]:
    counts = {"not_paid": 0, "paid": 0, "not_delivered": 0, "delivered": 0}
    for order in orders:
        counts[order.payment_status] += 1
        counts[order.delivery_status] += 1
    return counts


def orders_frame(orders: Sequence[Order], customers: Sequence[Customer], catalog: Sequence[Product]) -> pd.DataFrame:
    """Order table for display and CSV export."""
    df = _orders_df(orders, catalog)
    df.insert(2, "customer", [customer_name(customers, customer_id) for customer_id in df["customer_id"]])
    df["items"] = [len(order.items) for order in orders]
    return df.rename(columns={"amount": "total"})
