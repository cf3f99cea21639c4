from datetime import date
from html import escape
from typing import Optional, Sequence

import pandas as pd

from tracker import aggregate
from tracker.currency import format_amount
from tracker.domain import Expense, category_info
from tracker.log import get_logger

logger = get_logger("tracker.export")

CSV_COLUMNS = ["Date", "Category", "Amount", "Description", "Created At"]


class EmptyExportError(ValueError):
    pass


def expenses_frame(expenses: Sequence[Expense]) -> pd.DataFrame:
    rows = [
        {
            "Date": e.date.strftime("%Y-%m-%d"),
            "Category": category_info(e.category).label,
            "Amount": float(e.amount),
            "Description": e.description,
            "Created At": e.created_at,
        }
        for e in expenses
    ]
    df = pd.DataFrame(rows, columns=CSV_COLUMNS)
    created = pd.to_datetime(df["Created At"], errors="coerce", utc=True, format="ISO8601")
    df["Created At"] = created.dt.strftime("%Y-%m-%d %H:%M:%S").fillna("")
    return df


def to_csv(expenses: Sequence[Expense]) -> str:
    if not expenses:
        raise EmptyExportError("No expenses to export")
    logger.info("Exporting %d expenses to CSV", len(expenses))
    return expenses_frame(expenses).to_csv(index=False, float_format="%.2f")


def to_html_report(
    expenses: Sequence[Expense], currency: str = "USD", today: Optional[date] = None
) -> str:
    """Printable HTML expense report with totals and a per-category breakdown."""
    if not expenses:
        raise EmptyExportError("No expenses to export")
    today = today or date.today()
    logger.info("Rendering HTML report for %d expenses", len(expenses))

    overall = aggregate.total(expenses)
    shares = aggregate.category_shares(expenses)
    by_cat = pd.DataFrame(
        [
            {
                "Category": f"{category_info(c).emoji} {category_info(c).label}",
                "Amount": format_amount(amount, currency),
                "Share": f"{shares.get(c, 0.0) * 100:.1f}%",
            }
            for c, amount in aggregate.top_categories(expenses)
        ]
    )
    detail = expenses_frame(expenses).drop(columns=["Created At"])
    detail["Amount"] = detail["Amount"].map(lambda v: format_amount(v, currency))

    title = f"Expense Report - {today.strftime('%B %Y')}"
    return "\n".join([
        "<!DOCTYPE html>",
        f"<html><head><meta charset=\"utf-8\"><title>{escape(title)}</title></head><body>",
        f"<h1>{escape(title)}</h1>",
        "<div class=\"summary\">",
        f"<p>Total Expenses: <strong>{escape(format_amount(overall, currency))}</strong></p>",
        f"<p>Transactions: <strong>{len(expenses)}</strong></p>",
        "</div>",
        "<h2>By Category</h2>",
        by_cat.to_html(index=False),
        "<h2>All Expenses</h2>",
        detail.to_html(index=False),
        "</body></html>",
    ])
