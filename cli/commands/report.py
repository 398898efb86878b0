"""Report commands over a stored platform run."""

from pathlib import Path
from typing import Iterable, Optional

import typer

from tosarchive.config import settings
from tosarchive.pipeline.summary import error_report, word_count_table
from tosarchive.scraper.models import TermRecord
from tosarchive.storage import ResultStore

report_app = typer.Typer(help="Inspect the results of a stored run.", no_args_is_help=True)


def print_errors(records: Iterable[TermRecord]) -> None:
    rows = error_report(records)
    if not rows:
        typer.echo("No errors.")
        return
    for row in rows:
        typer.echo(
            f" ✗ {row['target_date']}  [{row['type']}] {row['policy_name']}  "
            f"{row['target_url']}\n     {row['error']}"
        )


def _load(platform: str, output: Optional[Path]) -> list:
    store = ResultStore(platform, root=output or settings.output_dir)
    records = store.load_summary()
    if not records:
        typer.echo(f"❌ No stored results at {store.summary_path}")
        raise typer.Exit(code=1)
    return records


@report_app.command("errors")
def report_errors(
    platform: str = typer.Argument(..., help="Platform name used for the run."),
    output: Optional[Path] = typer.Option(None, help="Output directory of the run."),
) -> None:
    """List the rows of a run that failed, with their error messages."""
    print_errors(_load(platform, output))


@report_app.command("words")
def report_words(
    platform: str = typer.Argument(..., help="Platform name used for the run."),
    output: Optional[Path] = typer.Option(None, help="Output directory of the run."),
) -> None:
    """Print total word counts per target month."""
    rows = word_count_table(_load(platform, output))
    typer.echo(f"{'month':<10} {'primary':>9} {'secondary':>10} {'total':>9}")
    for row in rows:
        typer.echo(
            f"{row['target_date']:%Y-%m}    {row['primary_words']:>9} "
            f"{row['secondary_words']:>10} {row['total_words']:>9}"
        )
