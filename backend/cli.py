"""
Resto Bar CLI.

Command-line interface for database setup and floor checks.

Usage:
    python cli.py db-init
    python cli.py db-seed
    python cli.py low-stock
    python cli.py kitchen --category food
    python cli.py token mesero1
"""

import sys
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import typer
from rich.console import Console
from rich.table import Table

from shared.config.constants import KitchenFilter, Urgency

app = typer.Typer(
    name="restobar",
    help="Resto Bar floor management CLI",
    add_completion=False,
)
console = Console()

URGENCY_STYLES = {
    Urgency.NORMAL: "green",
    Urgency.WARNING: "yellow",
    Urgency.DANGER: "bold red",
}


def _money(cents: int) -> str:
    return f"${cents / 100:,.2f}"


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def db_init():
    """Create all database tables."""
    from shared.infrastructure.db import engine
    from rest_api.models import Base

    console.print(f"[blue]Creating tables on: {engine.url.render_as_string(hide_password=True)}[/blue]")
    try:
        Base.metadata.create_all(bind=engine)
        console.print("[green]✓ Tables created[/green]")
    except Exception as e:
        console.print(f"[red]✗ Table creation failed: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def db_seed(
    force: bool = typer.Option(False, "--force", "-f", help="Allow seeding in production"),
):
    """Seed database with staff, tables and a starter catalog."""
    from shared.config.settings import settings
    from shared.infrastructure.db import get_db_context
    from rest_api.seed import seed

    console.print(f"[blue]Seeding database for: {settings.environment}[/blue]")

    if settings.environment == "production" and not force:
        console.print("[red]Cannot seed production without --force[/red]")
        raise typer.Exit(1)

    try:
        with get_db_context() as db:
            seed(db)
        console.print("[green]✓ Seed complete[/green]")
    except Exception as e:
        console.print(f"[red]✗ Seeding failed: {e}[/red]")
        raise typer.Exit(1)


# =============================================================================
# Floor Commands
# =============================================================================

@app.command()
def low_stock():
    """List products at or below their minimum stock."""
    from shared.infrastructure.db import get_db_context
    from rest_api.services.domain import StockLedger

    with get_db_context() as db:
        alerts = StockLedger(db).low_stock_alerts()

    if not alerts:
        console.print("[green]✓ No products below minimum stock[/green]")
        return

    table = Table(title="Low Stock")
    table.add_column("Product", style="cyan")
    table.add_column("Category")
    table.add_column("Stock", justify="right", style="red")
    table.add_column("Minimum", justify="right")
    table.add_column("Ratio", justify="right", style="yellow")

    for alert in alerts:
        table.add_row(
            alert.name,
            alert.category,
            f"{alert.stock_actual} {alert.unit}",
            str(alert.stock_minimo),
            f"{alert.ratio:.2f}",
        )

    console.print(table)


@app.command()
def kitchen(
    category: KitchenFilter = typer.Option(KitchenFilter.ALL, help="all, food or drink"),
):
    """Show outstanding kitchen/bar work, oldest order first."""
    from shared.infrastructure.db import get_db_context
    from rest_api.services.domain import KitchenQueueProjection

    with get_db_context() as db:
        projection = KitchenQueueProjection(db)
        entries = projection.pending_work(category)
        counts = projection.counts_by_status(entries)

        if not entries:
            console.print("[green]✓ Nothing pending[/green]")
            return

        table = Table(title=f"Kitchen queue ({category.value})")
        table.add_column("Order", style="cyan")
        table.add_column("Table", justify="right")
        table.add_column("Waiter")
        table.add_column("Minutes", justify="right")
        table.add_column("Items")

        for entry in entries:
            style = URGENCY_STYLES[entry.urgency]
            items = ", ".join(
                f"{item.quantity}x {item.product.name} [{item.status.value}]"
                for item in entry.items
            )
            table.add_row(
                str(entry.order_id),
                str(entry.table_number),
                entry.staff_name,
                f"[{style}]{entry.elapsed_minutes}[/{style}]",
                items,
            )

    console.print(table)
    summary = ", ".join(f"{status.value}: {count}" for status, count in sorted(
        counts.items(), key=lambda kv: kv[0].value
    ))
    console.print(f"[blue]{summary}[/blue]")


@app.command()
def orders(
    status: str = typer.Option(None, help="Filter by order status"),
):
    """List orders, newest first."""
    from shared.config.constants import OrderStatus
    from shared.infrastructure.db import get_db_context
    from rest_api.services.domain import OrderLedger, derive_order_status

    try:
        status_filter = OrderStatus(status) if status else None
    except ValueError:
        console.print(f"[red]Unknown status: {status}[/red]")
        raise typer.Exit(1)

    with get_db_context() as db:
        table = Table(title="Orders")
        table.add_column("Order", style="cyan")
        table.add_column("Table", justify="right")
        table.add_column("Status", style="green")
        table.add_column("Preparation")
        table.add_column("Total", justify="right", style="yellow")

        for order in OrderLedger(db).list_orders(status_filter):
            preparation = derive_order_status(item.status for item in order.items)
            table.add_row(
                str(order.id),
                str(order.table.number),
                order.status.value,
                preparation.value if preparation else "-",
                _money(order.total_cents),
            )

    console.print(table)


@app.command()
def token(
    username: str = typer.Argument(..., help="Staff username"),
    ttl_minutes: int = typer.Option(None, "--ttl", help="Lifetime in minutes"),
):
    """Issue a staff access token for local testing (not available in production)."""
    from sqlalchemy import select

    from shared.config.settings import settings
    from shared.infrastructure.db import get_db_context
    from shared.security.auth import sign_jwt
    from rest_api.models import User

    if settings.environment == "production":
        console.print("[red]Tokens are issued by the identity provider in production[/red]")
        raise typer.Exit(1)

    with get_db_context() as db:
        user = db.scalar(select(User).where(User.username == username, User.is_active.is_(True)))
        if user is None:
            console.print(f"[red]✗ Unknown staff user: {username}[/red]")
            raise typer.Exit(1)
        claims = {"sub": str(user.id), "roles": [user.role.value]}

    ttl_seconds = ttl_minutes * 60 if ttl_minutes else None
    console.print(f"[dim]{username} ({claims['roles'][0]})[/dim]")
    typer.echo(sign_jwt(claims, ttl_seconds=ttl_seconds))


# =============================================================================
# Health Commands
# =============================================================================

@app.command()
def health(
    url: str = typer.Option("http://localhost:8000/api/health", help="REST API health URL"),
):
    """Check system health."""
    import asyncio
    import time

    import httpx

    async def _health():
        table = Table(title="Service Health")
        table.add_column("Service", style="cyan")
        table.add_column("Status", style="green")
        table.add_column("Response Time", style="yellow")

        async with httpx.AsyncClient(timeout=5.0) as client:
            try:
                start = time.time()
                response = await client.get(url)
                elapsed = (time.time() - start) * 1000
                if response.status_code == 200:
                    table.add_row("REST API", "✓ Healthy", f"{elapsed:.0f}ms")
                else:
                    table.add_row("REST API", f"✗ Status {response.status_code}", f"{elapsed:.0f}ms")
            except Exception as e:
                table.add_row("REST API", f"✗ {type(e).__name__}", "-")

        try:
            from shared.infrastructure.events import close_redis_pool, get_redis_pool

            start = time.time()
            redis = await get_redis_pool()
            await redis.ping()
            elapsed = (time.time() - start) * 1000
            table.add_row("Redis", "✓ Healthy", f"{elapsed:.0f}ms")
            await close_redis_pool()
        except Exception as e:
            table.add_row("Redis", f"✗ {type(e).__name__}", "-")

        console.print(table)

    asyncio.run(_health())


@app.command()
def version():
    """Show version information."""
    table = Table(title="Resto Bar Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("API", "0.1.0")
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


if __name__ == "__main__":
    app()
