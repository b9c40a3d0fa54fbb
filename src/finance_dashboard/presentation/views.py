"""
Stateless renderers for the dashboard.

Each function takes display-ready values and returns a rich renderable;
none of them fetch data or compute totals.
"""
from decimal import Decimal
from typing import List, Optional, Sequence

from rich.align import Align
from rich.console import Group, RenderableType
from rich.columns import Columns
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from finance_dashboard.aggregation import DashboardSummary, Trend
from finance_dashboard.aggregation.formatting import format_currency, format_date, format_signed_amount
from finance_dashboard.domain.enums import TransactionType
from finance_dashboard.domain.models import SpendingSlice, Transaction

CHART_WIDTH = 30
EMPTY_TRANSACTIONS_MESSAGE = "No transactions yet. Add your first one!"
EMPTY_CHART_MESSAGE = "No expenses recorded yet"

def stat_card(
    title: str,
    value: str,
    icon: str,
    trend: Optional[Trend] = None,
    border_style: str = "cyan",
) -> Panel:
    """A single headline figure with an optional trend line"""
    body = Text()
    body.append(f"{title}\n", style="dim")
    body.append(value, style="bold")

    if trend is not None:
        style = "green" if trend.is_positive else "red"
        body.append(f"\n{trend.value}", style=style)

    return Panel(body, title=icon, title_align="right", border_style=border_style)

def stat_cards(summary: DashboardSummary) -> Columns:
    totals = summary.totals
    return Columns([
        stat_card("Total Balance", format_currency(totals.balance), "👛", trend=summary.trend),
        stat_card("Total Income", format_currency(totals.total_income), "📈", border_style="green"),
        stat_card("Total Expenses", format_currency(totals.total_expenses), "📉", border_style="red"),
    ], expand=True)

def transaction_list(transactions: Sequence[Transaction]) -> Panel:
    """Recent transactions, newest first as given"""
    if not transactions:
        return Panel(
            Align.center(Text(EMPTY_TRANSACTIONS_MESSAGE, style="dim")),
            title="📅 Recent Transactions",
            border_style="cyan",
        )

    table = Table(show_header=True, box=None, padding=(0, 1), expand=True)
    table.add_column("", width=2)
    table.add_column("Description", style="white", max_width=40)
    table.add_column("Category", style="magenta")
    table.add_column("Date", style="cyan")
    table.add_column("Amount", justify="right")

    for txn in transactions:
        is_income = txn.type == TransactionType.INCOME
        color = "green" if is_income else "red"
        category = ""
        if txn.category is not None:
            category = f"{txn.category.icon or ''} {txn.category.name}".strip()

        table.add_row(
            "⬆" if is_income else "⬇",
            txn.description,
            category,
            format_date(txn.transaction_date),
            f"[bold {color}]{format_signed_amount(txn)}[/bold {color}]",
        )

    return Panel(table, title="📅 Recent Transactions", border_style="cyan")

def _bar(value: Decimal, largest: Decimal) -> str:
    if largest <= 0:
        return ""
    length = int((value / largest) * CHART_WIDTH)
    return "█" * max(length, 1)

def spending_chart(spending: Sequence[SpendingSlice]) -> Panel:
    """Horizontal bar chart of spending per category"""
    if not spending:
        return Panel(
            Align.center(Text(EMPTY_CHART_MESSAGE, style="dim")),
            title="Spending by Category",
            border_style="magenta",
        )

    total = sum((s.value for s in spending), Decimal("0"))
    largest = max(s.value for s in spending)

    table = Table(show_header=False, box=None, padding=(0, 1), expand=True)
    table.add_column("Category", style="cyan", no_wrap=True)
    table.add_column("Bar")
    table.add_column("Amount", justify="right")
    table.add_column("Share", justify="right", style="dim")

    for spending_slice in spending:
        share = spending_slice.value / total * 100
        table.add_row(
            spending_slice.name,
            Text(_bar(spending_slice.value, largest), style=spending_slice.color),
            format_currency(spending_slice.value),
            f"{share:.1f}%",
        )

    return Panel(table, title="Spending by Category", border_style="magenta")

def loading_view() -> RenderableType:
    return Align.center(Text("Loading...", style="bold cyan"))

def dashboard_view(
    summary: DashboardSummary,
    transactions: Sequence[Transaction],
) -> Group:
    """The full dashboard: header, stat cards, chart and recent activity"""
    header = Text.assemble(
        ("Dashboard\n", "bold cyan"),
        ("Track your finances at a glance", "dim"),
    )
    return Group(
        header,
        stat_cards(summary),
        spending_chart(summary.spending),
        transaction_list(transactions),
    )

def auth_view() -> Panel:
    return Panel(
        Text.assemble(
            ("You are signed out.\n", "bold"),
            ("Run ", "dim"),
            ("finance-dashboard sign-in EMAIL", "bold cyan"),
            (" to continue.", "dim"),
        ),
        title="Sign in",
        border_style="cyan",
    )

def not_found_view(path: str) -> Panel:
    """404 page with a link back to the dashboard"""
    lines: List[Text] = [
        Text("404", style="bold red"),
        Text("Page Not Found", style="bold"),
        Text(f"Oops! The page '{path}' doesn't exist or has been moved.", style="dim"),
        Text.assemble(("Return to Dashboard: ", "dim"), ("finance-dashboard open /", "bold cyan")),
    ]
    return Panel(Align.center(Group(*lines)), border_style="red")
