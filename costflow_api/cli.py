"""
CostFlow CLI.

Command-line access to the costing engine and server for operators.
"""

import sys
import time

import httpx
import typer
from rich.console import Console
from rich.table import Table

from costflow_shared.config.settings import settings
from costflow_shared.utils.exceptions import AppException

app = typer.Typer(
    name="costflow",
    help="CostFlow food cost accounting CLI",
    add_completion=False,
)
console = Console()


def _fail(error: AppException) -> None:
    console.print(f"[red]✗ {error.detail}[/red]")
    raise typer.Exit(1)


# =============================================================================
# Server & Database Commands
# =============================================================================


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind address"),
    port: int = typer.Option(settings.rest_api_port, help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the REST API with uvicorn."""
    import uvicorn

    console.print(f"[blue]Starting CostFlow API on {host}:{port}[/blue]")
    uvicorn.run("costflow_api.main:app", host=host, port=port, reload=reload)


@app.command()
def init_db():
    """Create all database tables."""
    from costflow_api.core.lifespan import create_tables
    from costflow_shared.config.logging import setup_logging

    setup_logging()
    create_tables()
    console.print("[green]✓ Database tables created[/green]")


# =============================================================================
# Costing Commands
# =============================================================================


@app.command()
def calc_cost(menu_item_id: int = typer.Argument(..., help="Menu item to cost")):
    """Calculate and store a new cost standard for a menu item."""
    from costflow_api.services.domain import CostStandardService
    from costflow_shared.infrastructure.db import get_db_context

    with get_db_context() as db:
        try:
            standard, breakdown = CostStandardService(db).calculate(menu_item_id)
        except AppException as e:
            _fail(e)

        result = breakdown.rounded()
        table = Table(title=f"Cost standard #{standard.id} for menu item {menu_item_id}")
        table.add_column("Material", style="cyan")
        table.add_column("Quantity", justify="right")
        table.add_column("Yield %", justify="right")
        table.add_column("Cost", style="green", justify="right")
        for line in result["lines"]:
            table.add_row(
                line["material_name"] or "-",
                f"{line['quantity']} {line['unit'] or ''}",
                f"{line['yield_percentage']:.2f}",
                f"{line['item_cost']:,.2f}",
            )
        console.print(table)

        totals = Table(show_header=False)
        totals.add_column("Component", style="cyan")
        totals.add_column("Amount", style="green", justify="right")
        totals.add_row("Material", f"{result['material_cost']:,.2f}")
        totals.add_row("Labor", f"{result['labor_cost']:,.2f}")
        totals.add_row(f"Overhead ({result['allocation_method'] or 'none'})", f"{result['overhead_cost']:,.2f}")
        totals.add_row("Total", f"{result['total_cost']:,.2f}")
        totals.add_row(
            f"Per portion (x{result['standard_portion']})", f"{result['cost_per_portion']:,.2f}"
        )
        console.print(totals)


@app.command()
def calc_variance(production_log_id: int = typer.Argument(..., help="Production run to analyze")):
    """Compare a production run with the current cost standard."""
    from costflow_api.services.domain import VarianceService
    from costflow_shared.infrastructure.db import get_db_context

    with get_db_context() as db:
        try:
            _, breakdown = VarianceService(db).calculate(production_log_id)
        except AppException as e:
            _fail(e)

        result = breakdown.rounded()
        table = Table(
            title=f"Variance for production log {production_log_id} "
            f"({result['portions_produced']} portions)"
        )
        table.add_column("Category", style="cyan")
        table.add_column("Standard", justify="right")
        table.add_column("Actual", justify="right")
        table.add_column("Variance", justify="right")
        table.add_column("Result")
        for name, category in result["breakdown"].items():
            table.add_row(
                name.capitalize(),
                f"{category['standard']:,.2f}",
                f"{category['actual']:,.2f}",
                f"{category['variance']:,.2f}",
                category["classification"],
            )
        table.add_row(
            "Total",
            f"{result['standard_cost']:,.2f}",
            f"{result['actual_cost']:,.2f}",
            f"{result['variance']:,.2f} ({result['variance_percentage']:.2f}%)",
            result["classification"],
            style="bold",
        )
        console.print(table)


@app.command()
def monthly_summary(
    month: int = typer.Argument(..., help="Month (1-12)"),
    year: int = typer.Argument(..., help="Year"),
):
    """Show revenue, costs and profit for one month."""
    from costflow_api.services.domain import ReportService
    from costflow_shared.infrastructure.db import get_db_context

    with get_db_context() as db:
        try:
            summary = ReportService(db).monthly_summary(month, year)
        except AppException as e:
            _fail(e)

    result = summary.rounded()
    table = Table(title=f"Monthly summary {result['period']}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Production runs", str(result["production_count"]))
    table.add_row("Revenue", f"{result['total_revenue']:,.2f}")
    table.add_row(
        "Material cost", f"{result['total_material_cost']:,.2f} ({result['food_cost_percentage']:.2f}%)"
    )
    table.add_row(
        "Labor cost", f"{result['total_labor_cost']:,.2f} ({result['labor_cost_percentage']:.2f}%)"
    )
    table.add_row(
        "Overhead cost",
        f"{result['total_overhead_cost']:,.2f} ({result['overhead_cost_percentage']:.2f}%)",
    )
    table.add_row("Total cost", f"{result['total_cost']:,.2f}")
    table.add_row("Net profit", f"{result['net_profit']:,.2f}")
    table.add_row("Profit margin", f"{result['profit_margin']:.2f}%")
    console.print(table)


# =============================================================================
# Health Commands
# =============================================================================


@app.command()
def health(
    url: str = typer.Option(
        f"http://localhost:{settings.rest_api_port}/api/health/detailed",
        help="Detailed health endpoint",
    ),
):
    """Check a running API and its database."""
    table = Table(title="Service Health")
    table.add_column("Service", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Response Time", style="yellow")

    try:
        start = time.time()
        response = httpx.get(url, timeout=5.0)
        elapsed = (time.time() - start) * 1000
    except httpx.HTTPError as e:
        table.add_row("REST API", f"✗ {type(e).__name__}", "-")
        console.print(table)
        raise typer.Exit(1)

    if response.status_code == 200:
        table.add_row("REST API", "✓ Healthy", f"{elapsed:.0f}ms")
    else:
        table.add_row("REST API", f"✗ Status {response.status_code}", f"{elapsed:.0f}ms")
    for name, check in response.json().get("checks", {}).items():
        table.add_row(name.capitalize(), check.get("status", "?"), "-")
    console.print(table)


@app.command()
def version():
    """Show version information."""
    from importlib.metadata import PackageNotFoundError, version as package_version

    try:
        installed = package_version("costflow")
    except PackageNotFoundError:
        installed = "not installed"

    table = Table(title="CostFlow Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")
    table.add_row("CostFlow", installed)
    table.add_row("Python", sys.version.split()[0])
    console.print(table)


if __name__ == "__main__":
    app()
