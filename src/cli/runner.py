# src/cli/runner.py

"""Headless CLI search runner, reusing the async orchestrator."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from src.config.settings import Settings
from src.models.errors import SearchError
from src.models.product import Product
from src.services.health_checker import HealthChecker
from src.services.search_orchestrator import SearchOrchestrator

logger = logging.getLogger("shopping_ai.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)

CLI_SOURCES: tuple[str, ...] = ("combined", "amazon", "walmart", "ebay")


def _print_table(products: list[Product]) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title="Search Results",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", max_width=60)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Stars", justify="center")
    table.add_column("Source", style="magenta")
    table.add_column("URL", overflow="fold", style="dim")

    for idx, p in enumerate(products, 1):
        price_str = (
            f"{p.price_currency} {p.price:,.2f}"
            if p.price is not None
            else "N/A"
        )
        table.add_row(
            str(idx),
            (p.title or "")[:60],
            price_str,
            f"{p.stars:g}" if p.stars is not None else "—",
            p.source,
            p.url or "",
        )

    Console().print(table)


async def cli_search(
    query: str,
    source: str,
    output_format: str,
    settings: Settings,
    orchestrator: SearchOrchestrator | None = None,
) -> int:
    """Run a headless search and return an exit code (0=ok, 1=fail)."""
    orchestrator = orchestrator or SearchOrchestrator(settings)
    _err.print(
        f"[bold]Searching:[/bold] {query}  [dim]source={source}[/dim]"
    )

    try:
        if source == "combined":
            result = await orchestrator.combined_search(query)
            products = result.products
            envelope = result.to_dict()
            for failed in result.failed_sources:
                _err.print(f"[red]Error: {failed} search failed[/red]")
        else:
            products = await orchestrator.search_source(source, query)
            envelope = {
                "source": source,
                "query": query,
                "total": len(products),
                "products": [p.to_dict() for p in products],
            }
    except SearchError as exc:
        logger.error("CLI search failed: %s", exc)
        _err.print(f"[red]Error: {exc.public_message}[/red]")
        return 1

    if not products:
        _err.print("[yellow]No products found.[/yellow]")
        return 1

    _err.print(f"[green]✓ {len(products)} products[/green]")

    if output_format == "table":
        _print_table(products)
    else:
        json.dump(envelope, sys.stdout, ensure_ascii=False, indent=2)
        sys.stdout.write("\n")

    return 0


def run_health_check(settings: Settings) -> int:
    """Print provider readiness; non-zero if a required one is unset."""
    _err.print("[bold]Checking provider configuration...[/bold]")
    results = HealthChecker(settings).check_all()

    table = Table(
        title="Provider Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Source", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Required", justify="center")
    table.add_column("Missing", style="dim")

    any_required_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        else:
            status = "[red]❌ UNCONFIGURED[/red]"
            any_required_down = any_required_down or r.required
        table.add_row(
            r.source_id,
            status,
            "yes" if r.required else "no",
            ", ".join(r.missing) or "—",
        )

    Console().print(table)
    return 1 if any_required_down else 0
