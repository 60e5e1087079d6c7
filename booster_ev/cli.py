"""CLI interface for Booster EV."""

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from booster_ev.analysis.service import ValuationService
from booster_ev.config import DEFAULT_CONFIG_PATH, ValuationConfig
from booster_ev.data.cache import ValuationCache
from booster_ev.errors import DataUnavailableError
from booster_ev.models.price import parse_preference
from booster_ev.models.valuation import RankingRow
from booster_ev.report.json_export import export_ranking_json, export_valuations_json

app = typer.Typer(
    name="booster-ev",
    help="Booster EV - expected value and bargain ranking for MTG booster packs",
)
console = Console()


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_service(config_path: str) -> ValuationService:
    return ValuationService(config=ValuationConfig.from_config(config_path))


def _money(value: Optional[float], currency: str = "") -> str:
    if value is None:
        return "-"
    return f"{value:.2f} {currency}".strip()


def _ranking_table(title: str, rows: list[RankingRow]) -> Table:
    table = Table(title=title)
    table.add_column("Set", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Type")
    table.add_column("EV", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Diff", justify="right")
    table.add_column("Ratio", justify="right")

    for row in rows:
        diff_style = "green" if row.is_bargain else "red"
        table.add_row(
            row.code,
            row.name,
            row.product_type,
            _money(row.expected_value, row.currency),
            _money(row.reference_price),
            f"[{diff_style}]{_money(row.diff)}[/{diff_style}]" if row.diff is not None else "-",
            f"{row.ratio:.2f}x" if row.ratio is not None else "-",
        )
    return table


@app.command()
def value(
    code: str = typer.Argument(..., help="Set code (e.g., MH3, DSK, BLB)"),
    min_price: Optional[float] = typer.Option(
        None,
        "--min-price", "-m",
        help="Cards priced below this count as 0",
    ),
    output_dir: Optional[str] = typer.Option(
        None,
        "--output", "-o",
        help="Also export valuations as JSON to this directory",
    ),
    config_path: str = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """
    Value every booster type of a set.

    Example:
        booster-ev value MH3 --min-price 0.5
    """
    setup_logging(verbose)
    service = build_service(config_path)

    with console.status(f"Valuing {code.upper()}..."):
        valuations = service.value_set(code, min_price)

    if service.last_error:
        console.print(f"[red]Error:[/red] {service.last_error}")
        raise typer.Exit(1)

    if not valuations:
        console.print(f"[yellow]No booster data for {code.upper()}[/yellow]")
        return

    table = Table(title=f"{code.upper()} Booster EV")
    table.add_column("Type", style="cyan")
    table.add_column("EV", justify="right")
    table.add_column("Layouts", justify="right")
    table.add_column("Sheets", justify="right")
    table.add_column("Market", justify="right")

    for v in valuations:
        table.add_row(
            v.product_type,
            _money(v.expected_value, v.currency),
            str(v.layout_count),
            str(len(v.sheet_breakdown)),
            _money(v.observed_price),
        )
    console.print(table)

    if output_dir:
        threshold = service.config.min_price if min_price is None else min_price
        path = export_valuations_json(code, valuations, output_dir, threshold)
        console.print(f"  📊 JSON: [cyan]{path}[/cyan]")


@app.command()
def rank(
    years_back: Optional[int] = typer.Option(None, "--years", "-y", help="Sets released in the last N years"),
    min_price: Optional[float] = typer.Option(None, "--min-price", "-m"),
    output_dir: Optional[str] = typer.Option(None, "--output", "-o"),
    config_path: str = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """
    Rank recent boosters: best bargains and most overpriced.

    Example:
        booster-ev rank --years 3
    """
    setup_logging(verbose)
    service = build_service(config_path)

    with console.status("Ranking boosters..."):
        result = service.rank(years_back=years_back, min_price=min_price)

    if service.last_error:
        console.print(f"[red]Error:[/red] {service.last_error}")
        raise typer.Exit(1)

    console.print(_ranking_table("Best Bargains", result.top))
    console.print()
    console.print(_ranking_table("Most Overpriced", result.bottom))

    if output_dir:
        path = export_ranking_json(result, output_dir)
        console.print(f"  📊 JSON: [cyan]{path}[/cyan]")


@app.command()
def price(
    card_id: str = typer.Argument(..., help="Card uuid"),
    finish: Optional[str] = typer.Option(
        None,
        "--finish", "-f",
        help="foil, nonfoil, a finish name, or any",
    ),
    config_path: str = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Resolve a single card's price."""
    setup_logging(verbose)
    service = build_service(config_path)

    try:
        quote = service.resolve_price(card_id, parse_preference(finish))
    except DataUnavailableError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if quote is None:
        console.print(f"[yellow]No price for {card_id}[/yellow]")
        raise typer.Exit(1)

    console.print(
        f"[bold]{quote.value:.2f} {quote.currency}[/bold] "
        f"({quote.vendor}, {quote.finish}, {quote.source}, {quote.medium}, {quote.date})"
    )


@app.command()
def prices(
    code: str = typer.Argument(..., help="Set code"),
    limit: int = typer.Option(20, "--limit", "-n"),
    config_path: str = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Show the most valuable cards of a set."""
    setup_logging(verbose)
    service = build_service(config_path)

    with console.status("Loading prices..."):
        rows = service.price_table(code)

    if service.last_error:
        console.print(f"[red]Error:[/red] {service.last_error}")
        raise typer.Exit(1)

    table = Table(title=f"{code.upper()} Card Prices")
    table.add_column("Card", style="green")
    table.add_column("Rarity")
    table.add_column("Price", justify="right")
    table.add_column("Details", style="dim")

    for row in rows[:limit]:
        table.add_row(
            row.name,
            row.card.rarity.value,
            _money(row.price, row.currency),
            row.variant_summary,
        )
    console.print(table)


@app.command()
def cache_stats(
    config_path: str = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c"),
):
    """Show cache statistics."""
    config = ValuationConfig.from_config(config_path)
    stats = ValuationCache(config.cache_dir, config.max_entry_size).get_stats()

    console.print("\n[bold]Cache Statistics[/bold]\n")
    console.print(f"Location: {stats['cache_dir']}")
    console.print(f"Total entries: {stats['total_entries']}")
    console.print(f"Valid entries: {stats['valid_entries']}")
    console.print(f"Expired entries: {stats['expired_entries']}")
    console.print(f"Total size: {stats['total_size_mb']:.2f} MB")


@app.command()
def cache_clear(
    prefix: Optional[str] = typer.Option(None, "--prefix", "-p", help="Only keys with this prefix"),
    config_path: str = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c"),
):
    """Clear cached data."""
    config = ValuationConfig.from_config(config_path)
    count = ValuationCache(config.cache_dir, config.max_entry_size).clear(prefix)
    console.print(f"Cleared {count} cache entries.")


@app.command()
def version():
    """Show version information."""
    from booster_ev import __version__
    console.print(f"Booster EV v{__version__}")


if __name__ == "__main__":
    app()
