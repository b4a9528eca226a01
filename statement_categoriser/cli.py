"""Command-line interface for the statement categoriser."""
import json
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from .categorization import CATEGORY_TAXONOMY, CategorizationEngine
from .config.mapping_loader import MappingStore
from .config.settings import ANTHROPIC_API_KEY, CATEGORISATION_MODEL, MAPPINGS_FILE
from .utils import format_currency
from .utils.logger import setup_logger

console = Console()
logger = setup_logger()


def _build_pipeline(mappings_path: str):
    from .pipeline import CategorisationPipeline

    return CategorisationPipeline(
        engine=CategorizationEngine.from_settings(),
        mapping_store=MappingStore(Path(mappings_path)),
    )


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """Statement Categoriser - Categorise UK bank statement CSV exports."""
    pass


@cli.command()
@click.argument('file_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--mappings', '-m', type=click.Path(), default=str(MAPPINGS_FILE), show_default=True,
              help='YAML file of learned merchant mappings')
@click.option('--output', '-o', type=click.Path(), help='Output file path')
@click.option('--format', '-f', type=click.Choice(['xlsx', 'csv']), default='xlsx', help='Output format')
@click.option('--json', 'json_path', type=click.Path(), help='Optional path to write result JSON')
def categorise(file_path, mappings, output, format, json_path):
    """
    Parse and categorise a bank statement export.

    FILE_PATH: Path to the CSV statement
    """
    console.print(f"\n[bold blue]Statement Categoriser[/bold blue]\n")

    file_path = Path(file_path)
    console.print(f"[cyan]Processing:[/cyan] {file_path.name}")

    pipeline = _build_pipeline(mappings)

    with console.status("Categorising transactions..."):
        run = pipeline.process(file_path)

    if json_path:
        Path(json_path).write_text(json.dumps(run.to_dict(), indent=2), encoding='utf-8')
        console.print(f"[green]JSON result saved to {json_path}[/green]")

    if not run.success:
        console.print(f"\n[red]✗ Could not parse statement[/red]")
        console.print(f"  Error: {run.error_message}")
        sys.exit(1)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Date", style="cyan")
    table.add_column("Description")
    table.add_column("Amount", justify="right")
    table.add_column("Category", style="green")
    table.add_column("Confidence", justify="right")

    for row in run.rows():
        confidence = row['confidence']
        style = "yellow" if row['needsHomework'] else None
        table.add_row(
            row['date'],
            row['description'],
            format_currency(row['amount']),
            f"{row['category']}/{row['subcategory']}" if row['category'] else "-",
            f"{confidence:.2f}" if confidence is not None else "-",
            style=style,
        )

    console.print(table)

    totals = run.totals
    console.print(f"\n[green]✓ Categorisation complete[/green]")
    console.print(f"  Transactions: {totals['transactions']} ({run.parse_result.skipped_rows} rows skipped)")
    console.print(f"  Money in: {format_currency(totals['total_in'])}")
    console.print(f"  Money out: {format_currency(totals['total_out'])}")
    console.print(f"  Needs homework: {totals['needs_homework']}")

    from .exporters import ResultExporter

    # Default output path
    output_path = Path(output) if output else file_path.with_name(f"{file_path.stem}_categorised.{format}")
    ResultExporter().export(run, output_path)
    console.print(f"  Output: {output_path}")


@cli.command()
@click.argument('description')
@click.argument('category')
@click.option('--subcategory', '-s', help='Subcategory (derived from CATEGORY when it is one)')
@click.option('--mappings', '-m', type=click.Path(), default=str(MAPPINGS_FILE), show_default=True,
              help='YAML file of learned merchant mappings')
def learn(description, category, subcategory, mappings):
    """
    Remember a category for a merchant.

    DESCRIPTION: Transaction description as it appears on the statement
    CATEGORY: Parent category or subcategory to assign
    """
    store = MappingStore(Path(mappings))

    from .pipeline import CategorisationPipeline

    pipeline = CategorisationPipeline(engine=CategorizationEngine(), mapping_store=store)
    mapping = pipeline.learn(description, category, subcategory)

    console.print(
        f"[green]✓[/green] '{mapping.merchant_pattern}' → "
        f"{mapping.category}/{mapping.subcategory or mapping.category}"
    )
    console.print(f"  Saved to {store.path} ({len(store)} mappings)")


@cli.command()
def categories():
    """List the category taxonomy."""
    console.print("\n[bold blue]Category Taxonomy[/bold blue]\n")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Category", style="cyan")
    table.add_column("Subcategories", style="green")

    for parent in CATEGORY_TAXONOMY:
        table.add_row(
            f"[{parent.colour}]{parent.value}[/]",
            ", ".join(sub.value for sub in parent.subcategories),
        )

    console.print(table)


@cli.command()
def check():
    """Check dependencies and AI configuration."""
    console.print("\n[bold blue]System Check[/bold blue]\n")

    console.print("[cyan]Checking Python version...[/cyan]")
    version = sys.version_info
    if version >= (3, 10):
        console.print(f"  [green]✓[/green] Python {version.major}.{version.minor}.{version.micro}")
    else:
        console.print(f"  [red]✗[/red] Python {version.major}.{version.minor} (3.10+ required)")

    console.print("[cyan]Checking dependencies...[/cyan]")

    deps = [
        ("anthropic", "anthropic"),
        ("pandas", "pandas"),
        ("openpyxl", "openpyxl"),
        ("PyYAML", "yaml"),
    ]

    for name, import_name in deps:
        try:
            __import__(import_name)
            console.print(f"  [green]✓[/green] {name}")
        except ImportError:
            console.print(f"  [red]✗[/red] {name} (not installed)")

    console.print("[cyan]Checking AI categorisation...[/cyan]")
    if ANTHROPIC_API_KEY:
        console.print(f"  [green]✓[/green] Enabled ({CATEGORISATION_MODEL})")
    else:
        console.print("  [yellow]![/yellow] ANTHROPIC_API_KEY not set (unmatched transactions get low confidence)")

    console.print("[cyan]Checking learned mappings...[/cyan]")
    store = MappingStore(MAPPINGS_FILE)
    console.print(f"  [green]✓[/green] {len(store)} mappings in {store.path}")

    console.print("\n[green]System check complete[/green]\n")


def main():
    """Main entry point."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"\n[red]Error: {e}[/red]")
        logger.exception("Unhandled exception")
        sys.exit(1)


if __name__ == '__main__':
    main()
