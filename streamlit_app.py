import logging

import pandas as pd
import streamlit as st

from orderdesk.api import ApiClient, ApiError, AuthenticationError
from orderdesk.config import log_level
from orderdesk.filters import active_products, filter_customers, filter_orders, filter_products
from orderdesk.messages import message
from orderdesk.models import (
    CustomerFilters, CustomerForm, OrderFilters, OrderForm, OrderItem, OrderStatus, ProductFilters, ProductForm,
)
from orderdesk.pricing import order_amount, order_lines, order_total
from orderdesk.reporting import orders_by_day, orders_frame, sales_by_month, status_distribution, summary
from orderdesk.services import Backoffice, MutationResult
from orderdesk.session import AuthSession
from orderdesk.status import DELIVERY_STATUSES, ORDER_TYPES, PAYMENT_STATUSES
from orderdesk.utils import customer_label, customer_name, format_currency, format_datetime, truncate

logging.basicConfig(level=log_level(), format="%(asctime)s %(levelname)s %(message)s")

# Configuration of the page
st.set_page_config(
    page_title="Order Desk",
    layout="wide"
)


def get_session() -> AuthSession:
    if "auth" not in st.session_state:
        st.session_state.auth = AuthSession()
    return st.session_state.auth


def get_backoffice() -> Backoffice:
    if "backoffice" not in st.session_state:
        st.session_state.backoffice = Backoffice(ApiClient(get_session()))
    return st.session_state.backoffice


def label(value: str) -> str:
    return message(f"orders.{value}")


def show_result(result: MutationResult, success: str) -> bool:
    """Render the outcome of a mutation; True when the page should refresh."""
    for field, error in result.errors.items():
        st.error(f"{field}: {error}")
    if result.message:
        st.error(f"❌ {result.message}")
    if result.ok:
        st.success(f"✅ {success}")
    return result.ok


def confirm_delete(key: str, prompt: str) -> bool:
    confirmed = st.checkbox(prompt, key=f"confirm_{key}")
    return st.button("Delete", key=f"delete_{key}", disabled=not confirmed, type="primary")


# ---------- Login ----------

def login_page():
    st.title("Order Desk")
    client = get_backoffice().client
    login_tab, register_tab = st.tabs(["Log in", "Register"])

    with login_tab:
        with st.form("login"):
            username = st.text_input("Username")
            password = st.text_input("Password", type="password")
            if st.form_submit_button("Log in"):
                try:
                    client.login(username, password)
                    st.rerun()
                except AuthenticationError:
                    st.error(message("auth.errors.loginFailed"))
                except ApiError as e:
                    st.error(e.server_message or message("auth.errors.loginFailed"))

    with register_tab:
        with st.form("register"):
            username = st.text_input("Username", key="register_username")
            password = st.text_input("Password", type="password", key="register_password")
            if st.form_submit_button("Register"):
                try:
                    client.register(username, password)
                    st.success("✅ Account created, you can now log in")
                except ApiError as e:
                    st.error(e.server_message or message("auth.errors.registerFailed"))


# ---------- Dashboard ----------

def dashboard_page(backoffice: Backoffice):
    st.header("Dashboard")
    try:
        with st.spinner("Loading data..."):
            orders = backoffice.orders()
            customers = backoffice.customers()
            products = backoffice.products()
    except AuthenticationError:
        raise
    except ApiError as e:
        logging.error(f"Dashboard load failed: {e}")
        st.error(message("dashboard.errorLoadingData"))
        return

    stats = summary(orders, customers, products)
    cols = st.columns(4)
    cols[0].metric("💰 Total sales", format_currency(stats["total_sales"]))
    cols[1].metric("📦 Orders", stats["total_orders"])
    cols[2].metric("👥 Customers", stats["total_customers"])
    cols[3].metric("🏷️ Products", stats["total_products"])

    status_col, sales_col = st.columns([1, 2])
    with status_col:
        st.subheader("Order status")
        for status, count in status_distribution(orders).items():
            st.write(f"{label(status)}: **{count}**")
    with sales_col:
        st.subheader("Sales overview")
        st.bar_chart(sales_by_month(orders, products), x="name", y="sales")

    st.subheader("Orders this week")
    st.line_chart(orders_by_day(orders), x="name", y="orders")


# ---------- Customers ----------

def customers_page(backoffice: Backoffice):
    st.header("Customers")
    customers = backoffice.customers()

    filters = CustomerFilters(search=st.text_input("🔍 Search by name, phone, address or notes"))
    shown = filter_customers(customers, filters)
    st.dataframe(pd.DataFrame([
        {
            "id": c.id,
            "name": c.name or "",
            "phone_number": c.phone_number,
            "address": c.address or "",
            "notes": truncate(c.notes),
        }
        for c in shown
    ]), use_container_width=True, hide_index=True)

    by_id = {c.id: c for c in customers}
    selected = st.selectbox(
        "Customer", [None] + list(by_id),
        format_func=lambda cid: "➕ New customer" if cid is None else customer_label(by_id[cid]),
    )
    current = CustomerForm.from_entity(by_id[selected]) if selected is not None else CustomerForm()

    with st.form(f"customer_{selected}"):
        form = CustomerForm(
            name=st.text_input("Name", current.name, max_chars=80),
            phone_number=st.text_input("Phone number", current.phone_number, max_chars=20),
            address=st.text_input("Address", current.address, max_chars=255),
            notes=st.text_area("Notes", current.notes),
        )
        if st.form_submit_button("Save"):
            if show_result(backoffice.save_customer(form, selected), "Customer saved"):
                st.rerun()

    if selected is not None:
        customer = by_id[selected]
        prompt = message("customers.confirmDelete", name=customer_label(customer))
        if confirm_delete(f"customer_{selected}", prompt):
            if show_result(backoffice.delete_customer(selected), "Customer deleted"):
                st.rerun()


# ---------- Products ----------

def products_page(backoffice: Backoffice):
    st.header("Products")
    products = backoffice.products()

    search_col, active_col = st.columns([3, 1])
    filters = ProductFilters(
        search=search_col.text_input("🔍 Search by name or description"),
        active_only=active_col.checkbox("Active only"),
    )
    shown = filter_products(products, filters)
    st.dataframe(pd.DataFrame([
        {
            "id": p.id,
            "name": p.name,
            "price": format_currency(p.price),
            "description": truncate(p.description),
            "active": p.is_active,
        }
        for p in shown
    ]), use_container_width=True, hide_index=True)

    by_id = {p.id: p for p in products}
    selected = st.selectbox(
        "Product", [None] + list(by_id),
        format_func=lambda pid: "➕ New product" if pid is None else by_id[pid].name,
    )
    current = ProductForm.from_entity(by_id[selected]) if selected is not None else ProductForm()

    with st.form(f"product_{selected}"):
        form = ProductForm(
            name=st.text_input("Name", current.name, max_chars=80),
            price=st.number_input("Price", value=float(current.price), step=0.5, format="%.2f"),
            description=st.text_area("Description", current.description, max_chars=255),
            picture_url=st.text_input("Picture URL", current.picture_url, max_chars=255),
            is_active=st.checkbox("Active", current.is_active),
        )
        if form.picture_url:
            st.image(form.picture_url, width=160)
        if st.form_submit_button("Save"):
            if show_result(backoffice.save_product(form, selected), "Product saved"):
                st.rerun()

    if selected is not None:
        prompt = message("products.confirmDelete", name=by_id[selected].name)
        if confirm_delete(f"product_{selected}", prompt):
            if show_result(backoffice.delete_product(selected), "Product deleted"):
                st.rerun()


# ---------- Orders ----------

def order_draft() -> OrderForm:
    if "order_draft" not in st.session_state:
        st.session_state.order_draft = OrderForm()
    return st.session_state.order_draft


def new_order_section(backoffice: Backoffice, customers, products):
    draft = order_draft()
    by_id = {c.id: c for c in customers}
    selectable = {p.id: p for p in active_products(products)}

    customer_id = st.selectbox(
        "Customer", [0] + list(by_id),
        index=([0] + list(by_id)).index(draft.customer_id) if draft.customer_id in by_id else 0,
        format_func=lambda cid: "Select a customer" if not cid else customer_label(by_id[cid]),
    )
    type_col, pay_col, delivery_col, date_col = st.columns(4)
    draft = draft.model_copy(update={
        "customer_id": customer_id,
        "order_type": type_col.selectbox("Type", ORDER_TYPES, format_func=label, key="draft_type"),
        "payment_status": pay_col.selectbox("Payment", PAYMENT_STATUSES, format_func=label, key="draft_pay"),
        "delivery_status": delivery_col.selectbox("Delivery", DELIVERY_STATUSES, format_func=label, key="draft_delivery"),
        "datetime": date_col.text_input("Date & time", draft.datetime),
    })

    product_col, quantity_col, add_col = st.columns([3, 1, 1])
    product_id = product_col.selectbox(
        "Product", list(selectable),
        format_func=lambda pid: f"{selectable[pid].name} ({format_currency(selectable[pid].price)})",
    )
    quantity = quantity_col.number_input("Quantity", min_value=1, value=1, step=1)
    if add_col.button("Add item") and product_id is not None:
        draft = draft.with_item(OrderItem(product_id=product_id, quantity=int(quantity)))

    for index, line in enumerate(order_lines(draft, products)):
        line_col, remove_col = st.columns([5, 1])
        line_col.write(f"{line.product_name} × {line.quantity} = {format_currency(line.subtotal)}")
        if remove_col.button("Remove", key=f"remove_item_{index}"):
            draft = draft.without_item(index)
            st.session_state.order_draft = draft
            st.rerun()
    st.write(f"**Total: {format_currency(order_total(draft, products))}**")
    st.session_state.order_draft = draft

    if st.button("Create order", type="primary"):
        if show_result(backoffice.create_order(draft), "Order created"):
            del st.session_state.order_draft
            st.rerun()


def order_detail_section(backoffice: Backoffice, order, customers, products):
    st.write(f"**Customer:** {customer_name(customers, order.customer_id)}")
    st.write(f"**Date:** {format_datetime(order.datetime) if order.datetime else message('orders.noDate')}")
    st.dataframe(pd.DataFrame([
        {
            "product": line.product_name,
            "unit price": format_currency(line.unit_price),
            "quantity": line.quantity,
            "subtotal": format_currency(line.subtotal),
        }
        for line in order_lines(order, products)
    ]), use_container_width=True, hide_index=True)
    st.write(f"**Total: {format_currency(order_amount(order, products))}**")

    type_col, pay_col, delivery_col = st.columns(3)
    edited = OrderStatus(
        order_type=type_col.selectbox("Type", ORDER_TYPES, ORDER_TYPES.index(order.order_type),
                                      format_func=label, key=f"type_{order.id}"),
        payment_status=pay_col.selectbox("Payment", PAYMENT_STATUSES, PAYMENT_STATUSES.index(order.payment_status),
                                         format_func=label, key=f"pay_{order.id}"),
        delivery_status=delivery_col.selectbox("Delivery", DELIVERY_STATUSES, DELIVERY_STATUSES.index(order.delivery_status),
                                               format_func=label, key=f"delivery_{order.id}"),
    )
    if st.button("Save status", key=f"save_{order.id}"):
        if show_result(backoffice.update_order_status(order, edited), "Order updated"):
            st.rerun()

    if confirm_delete(f"order_{order.id}", message("orders.confirmDelete", id=order.id)):
        if show_result(backoffice.delete_order(order.id), "Order deleted"):
            st.rerun()


def orders_page(backoffice: Backoffice):
    st.header("Orders")
    orders = backoffice.orders()
    customers = backoffice.customers()
    products = backoffice.products()

    with st.expander("➕ New order"):
        new_order_section(backoffice, customers, products)

    search_col, pay_col, delivery_col, type_col = st.columns(4)
    filters = OrderFilters(
        search=search_col.text_input("🔍 Order or customer id"),
        payment_status=pay_col.selectbox("Payment", (None,) + PAYMENT_STATUSES, format_func=lambda v: "All" if v is None else label(v), key="filter_pay"),
        delivery_status=delivery_col.selectbox("Delivery", (None,) + DELIVERY_STATUSES, format_func=lambda v: "All" if v is None else label(v), key="filter_delivery"),
        order_type=type_col.selectbox("Type", (None,) + ORDER_TYPES, format_func=lambda v: "All" if v is None else label(v), key="filter_type"),
    )
    shown = filter_orders(orders, filters)

    table = orders_frame(shown, customers, products)
    display = table.assign(
        datetime=[format_datetime(order.datetime) for order in shown],
        total=[format_currency(value) for value in table["total"]],
    )
    st.dataframe(display, use_container_width=True, hide_index=True)
    st.download_button(
        "Download CSV",
        table.to_csv(index=False).encode("utf-8"),
        file_name="orders.csv",
        mime="text/csv",
    )

    by_id = {order.id: order for order in shown}
    selected = st.selectbox("Order details", [None] + list(by_id),
                            format_func=lambda oid: "Select an order" if oid is None else f"#{oid}")
    if selected is not None:
        order_detail_section(backoffice, by_id[selected], customers, products)


# ---------- Main ----------

PAGES = {
    "Dashboard": dashboard_page,
    "Orders": orders_page,
    "Customers": customers_page,
    "Products": products_page,
}

session = get_session()

if session.is_authenticated and not st.session_state.get("session_checked"):
    try:
        st.session_state.session_checked = get_backoffice().check_session()
    except ApiError as e:
        # API unreachable; pages report their own load errors
        logging.warning(f"Session check failed: {e}")

if not session.is_authenticated:
    st.session_state.pop("session_checked", None)
    login_page()
else:
    backoffice = get_backoffice()
    st.sidebar.title("Order Desk")
    st.sidebar.write(f"👤 {session.username}")
    page = st.sidebar.radio("Go to", list(PAGES))
    if st.sidebar.button("Refresh data"):
        backoffice.invalidate()
    if st.sidebar.button("Log out"):
        try:
            backoffice.client.logout()
        except ApiError as e:
            logging.warning(f"Logout request failed: {e}")
        st.session_state.pop("backoffice", None)
        st.rerun()

    try:
        PAGES[page](backoffice)
    except AuthenticationError:
        # The client already cleared the session
        st.session_state.pop("backoffice", None)
        st.warning(message("auth.errors.sessionExpired"))
        login_page()
    except ApiError as e:
        logging.error(f"{page} page failed: {e}")
        st.error(f"❌ {e.server_message or message('dashboard.errorLoadingData')}")
