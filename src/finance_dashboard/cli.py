import asyncio
import typer
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from finance_dashboard.auth.session import SessionFileAuth
from finance_dashboard.config.settings import ConfigLoader, Settings
from finance_dashboard.dashboard.controller import DashboardController
from finance_dashboard.database.connection import DatabaseConfig, DatabaseManager, execute_schema
from finance_dashboard.domain.enums import TransactionType
from finance_dashboard.domain.models import NewTransaction
from finance_dashboard.logging_config import configure_logging
from finance_dashboard.presentation import views
from finance_dashboard.presentation.notifications import Notifier
from finance_dashboard.repositories.sqlite_store import SQLiteTransactionStore
from finance_dashboard.routing import Router, View

app = typer.Typer(
    name="finance-dashboard",
    help="Track your income, expenses and balance at a glance",
    add_completion=False,
)

console = Console()

class State:
    verbose: bool = False
    settings: Optional[Settings] = None
    db_manager: Optional[DatabaseManager] = None
    store: Optional[SQLiteTransactionStore] = None
    auth: Optional[SessionFileAuth] = None


state = State()

@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose output",
    )
):
    """
    Finance Dashboard - See your balance, spending and recent transactions.
    """
    if state.db_manager is not None:
        state.db_manager.close()

    state.settings = ConfigLoader.load_settings()
    configure_logging(state.settings.log_level, verbose=verbose)

    state.db_manager = DatabaseManager(DatabaseConfig(state.settings.db_path))
    execute_schema(state.db_manager.get_connection())
    state.store = SQLiteTransactionStore(state.db_manager)
    state.auth = SessionFileAuth(state.store, state.settings.session_path)
    state.verbose = verbose

def _controller() -> DashboardController:
    return DashboardController(
        store=state.store,
        auth=state.auth,
        notifier=Notifier(console),
        recent_limit=state.settings.recent_limit,
        fallback_color=state.settings.fallback_color,
        trend_policy=state.settings.trend_zero_income_policy,
    )

def _fail(e: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {e}")
    if state.verbose:
        console.print_exception()
    raise typer.Exit(code=1)

def _render_dashboard(controller: DashboardController) -> None:
    console.print(views.dashboard_view(controller.summary, controller.state.transactions))

@app.command(name="init-db")
def init_db():
    """
    Create the schema and seed the default categories.
    """
    try:
        inserted = state.store.seed_categories(ConfigLoader.load_default_categories())
        console.print(f"[green]✓[/green] Database ready at {state.settings.db_path}")
        console.print(f"[green]✓[/green] Seeded {inserted} new categories")
    except Exception as e:
        _fail(e)

@app.command(name="sign-in")
def sign_in(
    email: str = typer.Argument(..., help="Email address to sign in with"),
):
    """
    Sign in, creating the account on first use.
    """
    try:
        user = state.auth.sign_in(email)
        console.print(f"[bold green]✓ Signed in as {user.email}[/bold green]")
    except Exception as e:
        _fail(e)

@app.command(name="sign-out")
def sign_out():
    """
    Sign out and show the sign-in page.
    """
    try:
        state.auth.sign_out()
        route = Router().resolve("/auth", None)
        console.print(f"[yellow]Signed out[/yellow] → {route.path}")
        console.print(views.auth_view())
    except Exception as e:
        _fail(e)

@app.command(name="whoami")
def whoami():
    """
    Show the signed-in user.
    """
    user = state.auth.get_current_user()
    if user is None:
        console.print("[yellow]Not signed in[/yellow]")
        raise typer.Exit(code=1)
    console.print(user.email)

@app.command(name="open")
def open_route(
    path: str = typer.Argument("/", help="Route to open, e.g. / or /auth"),
):
    """
    Render the view for a route.

    Examples:
        finance-dashboard open /
        finance-dashboard open /auth
    """
    try:
        user = state.auth.get_current_user()
        route = Router().resolve(path, user)

        if route.view == View.NOT_FOUND:
            console.print(views.not_found_view(route.path))
            return
        if route.view == View.AUTH:
            console.print(views.auth_view())
            return

        _show_dashboard()
    except Exception as e:
        _fail(e)

@app.command(name="dashboard")
def dashboard():
    """
    Show balance, income, expenses, spending by category and recent transactions.
    """
    try:
        _show_dashboard()
    except Exception as e:
        _fail(e)

def _show_dashboard() -> None:
    controller = _controller()
    with console.status(views.loading_view()):
        result = asyncio.run(controller.load())

    if not result.ok and state.verbose:
        console.print(f"\n[dim]→ {type(result.error).__name__}: {result.message}[/dim]")
    _render_dashboard(controller)

@app.command(name="add")
def add_transaction(
    amount: str = typer.Argument(..., help="Amount, e.g. 12.50"),
    description: str = typer.Argument(..., help="What the transaction was for"),
    transaction_type: TransactionType = typer.Option(
        TransactionType.EXPENSE,
        "--type", "-t",
        help="income or expense",
    ),
    category: Optional[str] = typer.Option(
        None,
        "--category", "-c",
        help="Category name (case-sensitive)",
    ),
    on: Optional[datetime] = typer.Option(
        None,
        "--date", "-d",
        help="Transaction date, defaults to now",
    ),
):
    """
    Add a transaction and refresh the dashboard.

    Examples:
        finance-dashboard add 12.50 "Lunch" --category Food
        finance-dashboard add 3000 "Salary" --type income --category Salary
    """
    try:
        try:
            value = Decimal(amount)
        except InvalidOperation:
            raise ValueError(f"Invalid amount: '{amount}'")

        controller = _controller()

        async def run():
            await controller.load()
            category_id = None
            if category is not None:
                matches = [c for c in controller.state.categories if c.name == category]
                if not matches:
                    raise ValueError(f"Unknown category: '{category}'")
                category_id = matches[0].id

            return await controller.add_transaction(NewTransaction(
                amount=value,
                description=description,
                type=transaction_type,
                transaction_date=on or datetime.now(),
                category_id=category_id,
            ))

        asyncio.run(run())
        _render_dashboard(controller)
    except Exception as e:
        _fail(e)

@app.command(name="categories")
def list_categories():
    """
    List all categories.
    """
    try:
        categories = asyncio.run(state.store.list_categories())

        if not categories:
            console.print(Panel(
                "[yellow]No categories yet, run init-db[/yellow]",
                title="Categories",
                border_style="yellow"
            ))
            return

        table = Table(title="Categories")
        table.add_column("Icon")
        table.add_column("Name", style="cyan")
        table.add_column("Type")
        table.add_column("Color", style="dim")

        for cat in categories:
            type_color = "green" if cat.type == TransactionType.INCOME else "red"
            table.add_row(
                cat.icon or "",
                cat.name,
                f"[{type_color}]{cat.type.value}[/{type_color}]",
                cat.color or "",
            )

        console.print(table)
    except Exception as e:
        _fail(e)


def cli_main():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    cli_main()
