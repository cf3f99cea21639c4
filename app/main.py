import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dataclasses import replace
from datetime import date

import pandas as pd
import plotly.express as px
import streamlit as st

from tracker import aggregate
from tracker.budget import is_running_low, progress_percentage
from tracker.config import get_settings
from tracker.currency import CURRENCIES, DEFAULT_RATES, convert, currency_info, format_amount
from tracker.domain import CATEGORY_INFO, Category, Classification, category_info
from tracker.events import BUDGET_ALERT, EXPENSE_ADDED, make_event_bus, needs_daily_reminder
from tracker.export import to_csv, to_html_report
from tracker.filters import apply_filters, by_category
from tracker.functional import find_budget, validate_budget_limit, validate_expense, validate_project_name
from tracker.log import get_logger
from tracker.services import default_report_service
from tracker.transforms import (
    add_expense,
    add_project,
    delete_budget,
    delete_expense,
    delete_project,
    display_currency,
    for_project,
    load_seed,
    new_expense,
    new_project,
    set_budget,
    set_preferred_currency,
    update_expense,
    update_project,
)

settings = get_settings()
logger = get_logger("tracker.app", settings.log_level)

st.set_page_config(page_title="Expense Tracker", layout="wide")


def remember_alert(event, payload: dict) -> dict:
    st.session_state.notifications.append(payload["alert"])
    return {}


if "expenses" not in st.session_state:
    projects, expenses, budgets, preferences = load_seed(settings.seed_path)
    st.session_state.projects = projects
    st.session_state.expenses = expenses
    st.session_state.budgets = budgets
    st.session_state.preferences = preferences
    st.session_state.notifications = []
    st.session_state.bus = make_event_bus()
    st.session_state.bus.subscribe(BUDGET_ALERT, remember_alert)

projects = st.session_state.projects
bus = st.session_state.bus
base = settings.base_currency

CATEGORY_OPTIONS = list(CATEGORY_INFO)


def category_label(c: Category) -> str:
    info = category_info(c)
    return f"{info.emoji} {info.label}"


# --- sidebar: project, currency, notifications
st.sidebar.markdown("### 📁 Project")
project = st.sidebar.selectbox(
    "Project",
    options=projects,
    format_func=lambda p: f"{p.icon} {p.name}",
    label_visibility="collapsed",
)
project_id = project.id if project else None

with st.sidebar.expander("➕ New project"):
    with st.form("project_form", clear_on_submit=True):
        p_name = st.text_input("Name")
        p_description = st.text_input("Description (optional)")
        p_icon = st.text_input("Icon", value="📊")
        created = st.form_submit_button("Create")
    if created:
        checked = validate_project_name(p_name)
        if checked.is_left():
            st.error(checked.get_error()["message"])
        else:
            p = new_project(checked.get_or_else(p_name), p_description, p_icon)
            st.session_state.projects = add_project(st.session_state.projects, p)
            st.rerun()

if project:
    with st.sidebar.expander("✏️ Manage project"):
        with st.form(f"project_edit_{project.id}"):
            e_name = st.text_input("Name", value=project.name)
            e_description = st.text_input("Description", value=project.description or "")
            e_icon = st.text_input("Icon", value=project.icon)
            saved = st.form_submit_button("Save")
        if saved:
            checked = validate_project_name(e_name)
            if checked.is_left():
                st.error(checked.get_error()["message"])
            else:
                st.session_state.projects = update_project(
                    st.session_state.projects,
                    project.id,
                    name=checked.get_or_else(e_name),
                    description=e_description.strip() or None,
                    icon=e_icon or project.icon,
                )
                st.rerun()
        if st.button("🗑️ Delete project and its records", key=f"project_del_{project.id}"):
            (
                st.session_state.projects,
                st.session_state.expenses,
                st.session_state.budgets,
            ) = delete_project(
                st.session_state.projects,
                st.session_state.expenses,
                st.session_state.budgets,
                project.id,
            )
            st.rerun()

codes = [c.code for c in CURRENCIES]
preferred = display_currency(st.session_state.preferences, settings.display_currency)
currency = st.sidebar.selectbox(
    "Display currency",
    options=codes,
    index=codes.index(preferred) if preferred in codes else 0,
    format_func=lambda code: f"{currency_info(code).symbol} {code} - {currency_info(code).name}",
)
if currency != st.session_state.preferences.preferred_currency:
    st.session_state.preferences = set_preferred_currency(st.session_state.preferences, currency)

expenses = for_project(st.session_state.expenses, project_id)
budgets = for_project(st.session_state.budgets, project_id)

report = default_report_service(
    DEFAULT_RATES,
    base_currency=base,
    display_currency=currency,
    week_window=settings.week_window,
    trend_months=settings.trend_months,
).build(expenses, budgets)
result = report["result"]
summary = result["summary"]


def money(amount: float) -> str:
    return format_amount(amount, currency)


st.sidebar.markdown("### 🔔 Notifications")
if result["alerts"]:
    st.sidebar.error(f"⚠️ {len(result['alerts'])} category budget(s) exceeded!")
    for status in result["alerts"]:
        st.sidebar.caption(
            f"{category_label(status.category)}: over by {money(abs(status.remaining))}"
        )
for note in st.session_state.notifications[-3:]:
    st.sidebar.warning(note)
if needs_daily_reminder(st.session_state.preferences):
    st.sidebar.info("📝 Don't forget to log today's expenses!")

reminders = st.sidebar.checkbox(
    "Daily reminders", value=st.session_state.preferences.daily_reminder_enabled
)
if reminders != st.session_state.preferences.daily_reminder_enabled:
    st.session_state.preferences = replace(st.session_state.preferences, daily_reminder_enabled=reminders)
    st.rerun()

for messages in report["validation"]:
    for msg in messages["messages"]:
        st.sidebar.caption(f"⚠ {msg}")

menu = st.sidebar.radio(
    "Menu",
    ["🏠 Overview", "🧾 Expenses", "🎯 Budgets", "📊 Analytics", "💱 Converter"],
)

if menu == "🏠 Overview":
    st.title(f"{project.icon} {project.name}" if project else "Expense Tracker")

    k1, k2, k3 = st.columns(3)
    with k1:
        st.metric("Total Expenses", money(summary.total_amount))
        st.caption(f"{summary.transaction_count} transaction{'s' if summary.transaction_count != 1 else ''}")
    with k2:
        this_month = aggregate.month_key(date.today())
        st.metric("This Month", money(summary.amount_by_month.get(this_month, 0.0)))
    with k3:
        st.metric("Budgets", len(budgets), delta=f"{len(result['alerts'])} exceeded", delta_color="inverse")

    st.subheader("Top Categories")
    if result["top_categories"]:
        shares = aggregate.category_shares(result["expenses"])
        for c, amount in result["top_categories"][:4]:
            st.markdown(f"{category_label(c)} - **{money(amount)}**")
            st.progress(min(shares.get(c, 0.0), 1.0))
    else:
        st.info("Add your first expense to get started!")

elif menu == "🧾 Expenses":
    st.title("🧾 Expenses")

    st.subheader("➕ Add Expense")
    with st.form("expense_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            spent_on = st.date_input("Date", value=date.today())
            amount = st.number_input(f"Amount ({currency_info(base).symbol})", min_value=0.0, step=1.0, format="%.2f")
        with col2:
            category = st.selectbox("Category", CATEGORY_OPTIONS, format_func=category_label)
            description = st.text_input("Description (optional)")
        submitted = st.form_submit_button("Add Expense")

    if submitted:
        candidate = new_expense(spent_on, category, amount, description, project_id)
        checked = validate_expense(candidate)
        if checked.is_left():
            st.error(checked.get_error()["message"])
        else:
            e = checked.get_or_else(candidate)
            limit = find_budget(budgets, e.category).map(lambda b: b.limit_amount).get_or_else(None)
            results = bus.publish(EXPENSE_ADDED, {
                "category": e.category,
                "amount": e.amount,
                "spent_before": aggregate.by_category(expenses).get(e.category, 0.0),
                "limit": limit,
                "date": e.date,
            })
            st.session_state.expenses = add_expense(st.session_state.expenses, e)
            for out in results:
                if "alert" in out:
                    bus.publish(BUDGET_ALERT, out)
                if out.get("last_expense_date"):
                    st.session_state.preferences = replace(
                        st.session_state.preferences, last_expense_date=out["last_expense_date"]
                    )
            st.success(f"{format_amount(e.amount, base)} added to {category_info(e.category).label}")
            st.rerun()

    st.subheader("Recent Expenses")
    filter_choice = st.selectbox(
        "Filter by category",
        ["all"] + CATEGORY_OPTIONS,
        format_func=lambda c: "All Categories" if c == "all" else category_label(c),
    )
    shown = expenses if filter_choice == "all" else apply_filters(expenses, by_category(filter_choice))

    if not shown:
        st.info("No expenses yet")
    for e in shown:
        c1, c2, c3, c4 = st.columns([3, 2, 1, 1])
        c1.markdown(f"{category_label(e.category)}  \n{e.description or '-'}")
        c2.markdown(f"**{money(convert(e.amount, base, currency))}**  \n{e.date:%b %d, %Y}")
        if c3.button("✏️", key=f"edit_{e.id}"):
            st.session_state.editing = e.id
        if c4.button("🗑️", key=f"del_{e.id}"):
            st.session_state.expenses = delete_expense(st.session_state.expenses, e.id)
            st.rerun()

        if st.session_state.get("editing") == e.id:
            with st.form(f"edit_form_{e.id}"):
                new_date = st.date_input("Date", value=e.date)
                new_amount = st.number_input("Amount", value=float(e.amount), min_value=0.0, format="%.2f")
                new_category = st.selectbox(
                    "Category", CATEGORY_OPTIONS, index=CATEGORY_OPTIONS.index(e.category), format_func=category_label
                )
                new_description = st.text_input("Description", value=e.description)
                if st.form_submit_button("Save Changes"):
                    edited = replace(
                        e,
                        date=new_date,
                        amount=new_amount,
                        category=new_category,
                        description=new_description.strip(),
                    )
                    checked = validate_expense(edited)
                    if checked.is_left():
                        st.error(checked.get_error()["message"])
                    else:
                        st.session_state.expenses = update_expense(
                            st.session_state.expenses,
                            e.id,
                            date=edited.date,
                            amount=edited.amount,
                            category=edited.category,
                            description=edited.description,
                        )
                        st.session_state.editing = None
                        st.rerun()

    if expenses:
        d1, d2 = st.columns(2)
        d1.download_button(
            "⬇ Export CSV",
            to_csv(expenses),
            file_name=f"expenses_{date.today():%Y-%m-%d}.csv",
            mime="text/csv",
        )
        d2.download_button(
            "⬇ Export Report",
            to_html_report(result["expenses"], currency),
            file_name=f"expense_report_{date.today():%Y-%m}.html",
            mime="text/html",
        )

elif menu == "🎯 Budgets":
    st.title("🎯 Budget Limits")

    with st.form("budget_form", clear_on_submit=True):
        b_category = st.selectbox("Category", CATEGORY_OPTIONS, format_func=category_label)
        b_amount = st.number_input(f"Monthly limit ({currency_info(base).symbol})", min_value=0.0, step=10.0, format="%.2f")
        if st.form_submit_button("Save Budget"):
            checked = validate_budget_limit(b_amount)
            if checked.is_left():
                st.error(checked.get_error()["message"])
            else:
                st.session_state.budgets = set_budget(
                    st.session_state.budgets, b_category, checked.get_or_else(b_amount), project_id
                )
                st.success(f"Budget for {category_info(b_category).label} set to {format_amount(b_amount, base)}")
                st.rerun()

    if not result["budgets"]:
        st.info("Set spending limits for your categories to track your budget")
    for status in result["budgets"]:
        icon = {
            Classification.EXCEEDED: "🔴",
            Classification.APPROACHING: "🟠",
            Classification.OK: "🟢",
        }[status.classification]
        c1, c2 = st.columns([5, 1])
        c1.markdown(
            f"{icon} {category_label(status.category)} - {money(status.spent)} / {money(status.limit)}"
        )
        if c2.button("🗑️", key=f"budget_del_{status.category.value}"):
            st.session_state.budgets = delete_budget(st.session_state.budgets, status.category, project_id)
            st.rerun()
        st.progress(progress_percentage(status) / 100)
        if status.remaining < 0:
            st.caption(f"Over budget by {money(abs(status.remaining))}")
        elif is_running_low(status):
            st.caption(f"Only {money(status.remaining)} remaining")

elif menu == "📊 Analytics":
    st.title("📊 Analytics")
    if not expenses:
        st.info("Add some expenses to see charts and analytics")
    else:
        trend = pd.DataFrame(result["monthly_trend"], columns=["month", "amount"])
        fig_trend = px.area(trend, x="month", y="amount", title="Spending Trend", markers=True)
        fig_trend.update_layout(template="plotly_dark", yaxis_title=currency, xaxis_title="")
        st.plotly_chart(fig_trend, use_container_width=True)

        col1, col2 = st.columns(2)
        with col1:
            pie = pd.DataFrame(
                [
                    {"category": category_info(c).label, "amount": amount}
                    for c, amount in result["top_categories"]
                ]
            )
            fig_pie = px.pie(
                pie,
                values="amount",
                names="category",
                title="By Category",
                color="category",
                color_discrete_map={info.label: info.color for info in CATEGORY_INFO.values()},
            )
            st.plotly_chart(fig_pie, use_container_width=True)
        with col2:
            weekly = pd.DataFrame(result["weekly"], columns=["week", "amount"])
            fig_week = px.bar(weekly, x="week", y="amount", title="Weekly Comparison")
            fig_week.update_layout(template="plotly_dark", yaxis_title=currency, xaxis_title="")
            st.plotly_chart(fig_week, use_container_width=True)

elif menu == "💱 Converter":
    st.title("💱 Currency Converter")
    amount = st.number_input("Amount", min_value=0.0, value=100.0, step=1.0)
    c1, c2 = st.columns(2)
    from_code = c1.selectbox("From", codes, index=codes.index("USD"))
    to_code = c2.selectbox("To", codes, index=codes.index("EUR"))
    if amount > 0:
        converted = convert(amount, from_code, to_code)
        st.metric(f"{from_code} → {to_code}", format_amount(converted, to_code))
        st.caption(
            f"1 {from_code} = {convert(1, from_code, to_code):.4f} {to_code} · Rates are fixed, not live market data"
        )
