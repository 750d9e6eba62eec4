"""Main CLI interface for the Boundary Insights ingestion system."""

from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from sqlalchemy import inspect, select, func

from ..config import settings
from ..database import create_tables, drop_tables, dispose_engine, get_database_engine, get_session
from ..etl import DataQualityChecker, run_import
from ..exceptions import ImportSetupError
from ..models import Base, Delivery, Match, Player, Season, Team

# Initialize rich console
console = Console()


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """Route loguru output to a Rich console handler and an optional file."""
    log_level = level.upper()
    logger.remove()
    logger.add(
        RichHandler(console=console, show_time=True, show_path=False),
        level=log_level,
        format="{message}",
    )
    if log_file:
        logger.add(
            log_file,
            level=log_level,
            format="{time:YYYY-MM-DD HH:mm:ss} - {name} - {level} - {message}",
        )


app = typer.Typer(
    name="boundary-insights",
    help="Boundary Insights - cricket match data ingestion",
    no_args_is_help=True
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Log file path"),
):
    """Boundary Insights - cricket match data ingestion."""
    log_level = "DEBUG" if verbose else settings.logging.level
    setup_logging(log_level, log_file or settings.logging.file)


@app.command("import-data")
def import_data(
    data_root: Optional[str] = typer.Option(None, "--data-root", help="Dataset root (defaults to IMPORT_DATA_ROOT)"),
):
    """Import match_info and innings commentary JSON into the database."""
    console.print("[bold]Importing match data...[/bold]")
    try:
        stats = run_import(data_root)
    except ImportSetupError as e:
        console.print(f"[red]❌ Import aborted: {e}[/red]")
        raise typer.Exit(1)
    display_import_results(stats)


@app.command("setup-db")
def setup_db(force: bool = typer.Option(False, "--force", help="Force recreation of tables")):
    """Initialize database schema."""
    console.print("[bold]Setting up database schema...[/bold]")

    try:
        if force:
            console.print("Dropping existing tables...")
            drop_tables()

        console.print("Creating database tables...")
        create_tables()

        console.print("[green]✅ Database schema initialized successfully![/green]")

    except Exception as e:
        console.print(f"[red]❌ Database setup failed: {e}[/red]")
        raise typer.Exit(1)
    finally:
        dispose_engine()


@app.command("check-tables")
def check_tables():
    """Check that every model's table exists in the connected database."""
    try:
        table_names = inspect(get_database_engine()).get_table_names()
    except Exception as e:
        console.print(f"[red]❌ Cannot inspect database: {e}[/red]")
        raise typer.Exit(1)
    finally:
        dispose_engine()

    by_lower = {name.lower(): name for name in table_names}
    table = Table(title="Table Mapping")
    table.add_column("Table", style="cyan")
    table.add_column("Status")
    table.add_column("Found As", style="blue")

    missing = 0
    for expected in Base.metadata.sorted_tables:
        found = by_lower.get(expected.name.lower())
        if found is None:
            missing += 1
            table.add_row(expected.name, "[red]missing[/red]", "")
        elif found != expected.name:
            table.add_row(expected.name, "[yellow]case mismatch[/yellow]", found)
        else:
            table.add_row(expected.name, "[green]ok[/green]", found)

    console.print(table)
    console.print(f"Total tables in database: {len(table_names)}")
    if missing:
        console.print(f"[red]{missing} expected tables not found; run setup-db[/red]")
        raise typer.Exit(1)


@app.command()
def stats():
    """Show row counts for the imported tables."""
    table = Table(title="Row Counts")
    table.add_column("Table", style="cyan")
    table.add_column("Rows", style="green", justify="right")

    try:
        with get_session() as session:
            for model in (Season, Team, Player, Match, Delivery):
                count = session.execute(select(func.count(model.id))).scalar_one()
                table.add_row(model.__tablename__, str(count))
    except Exception as e:
        console.print(f"[red]❌ Cannot read row counts: {e}[/red]")
        raise typer.Exit(1)
    finally:
        dispose_engine()

    console.print(table)


@app.command("quality-check")
def quality_check():
    """Run data quality checks."""
    console.print("[bold]Running data quality checks...[/bold]")
    try:
        results = DataQualityChecker().check_data_quality()
    except Exception as e:
        console.print(f"[red]Quality checks failed: {e}[/red]")
        raise typer.Exit(1)
    finally:
        dispose_engine()
    display_quality_results(results)


def run_default_import():
    """Entry point for ``import-ipl``: run the import with configured settings, no arguments."""
    setup_logging(settings.logging.level, settings.logging.file)
    try:
        stats = run_import()
    except ImportSetupError as e:
        logger.error(f"Fatal error during import: {e}")
        raise SystemExit(1)
    display_import_results(stats)


def display_import_results(results):
    """Display import counts in a formatted table."""
    table = Table(title="Import Results")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="green", justify="right")

    for key in (
        "match_info_indexed", "files_found", "imported", "skipped_existing",
        "skipped_no_join", "failed", "deliveries_written", "deliveries_skipped",
    ):
        table.add_row(key.replace("_", " ").title(), str(results.get(key, 0)))

    console.print(table)

    if "duration_seconds" in results:
        console.print(f"[blue]⏱️ Total duration: {results['duration_seconds']:.2f} seconds[/blue]")
    if results.get("failed"):
        console.print(f"[yellow]⚠️ {results['failed']} files failed; see the log for details[/yellow]")


def display_quality_results(results):
    """Display quality check results."""
    console.print(f"[bold]Overall Quality Score: {results.get('overall_score', 0)}/100[/bold]")

    table = Table(title="Quality Check Results")
    table.add_column("Data Type", style="cyan")
    table.add_column("Total Records", style="blue")
    table.add_column("Issues", style="red")
    table.add_column("Quality Score", style="green")

    for check_name, check_result in results.get("checks", {}).items():
        total_records = next((v for k, v in check_result.items() if k.startswith("total_")), 0)
        issues = check_result.get("issues", [])
        table.add_row(
            check_name.title(),
            str(total_records),
            ", ".join(f"{i['type']} ({i['count']})" for i in issues) or "-",
            f"{check_result.get('quality_score', 0)}/100"
        )

    console.print(table)


if __name__ == '__main__':
    app()
