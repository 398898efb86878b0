"""tos-archive CLI — entry-point for all pipeline operations.

Usage:
    python cli/main.py --help

Commands:
    platforms → list the built-in platform presets
    locate    → closest archived snapshot of one URL
    extract   → selector-fallback extraction of one snapshot
    run       → full two-round batch for a platform
    report    → error / word-count views over a stored run
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from tosarchive.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from dataclasses import replace
from datetime import datetime
from typing import List, Optional

import typer

from cli.commands.report import print_errors, report_app
from tosarchive.config import settings
from tosarchive.pipeline import BatchRunner
from tosarchive.platforms import PLATFORMS, get_platform
from tosarchive.scraper.errors import ScrapeError
from tosarchive.scraper.extractor import extract_document
from tosarchive.scraper.links import filter_links
from tosarchive.scraper.locator import locate
from tosarchive.scraper.tokenizer import tokenize
from tosarchive.storage import ResultStore

app = typer.Typer(
    name="tos-archive",
    help="Terms-of-service growth from Wayback Machine snapshots.",
    no_args_is_help=True,
)
app.add_typer(report_app, name="report")

_DATE_FORMATS = ["%Y-%m-%d"]


@app.command("platforms")
def platforms() -> None:
    """List the built-in platform presets."""
    for name, config in sorted(PLATFORMS.items()):
        typer.echo(
            f"  {name:<10} {config.start:%Y-%m} → {config.end:%Y-%m}  "
            f"{', '.join(config.primary_urls)}"
        )


@app.command("locate")
def locate_cmd(
    url: str = typer.Option(..., help="Original (live) URL to look up."),
    date: Optional[datetime] = typer.Option(None, formats=_DATE_FORMATS, help="Target date."),
) -> None:
    """Print the archived snapshot closest to a date."""
    try:
        snapshot = locate(url, date.date() if date else None)
    except ScrapeError as exc:
        typer.echo(f"[locate] ✗ {exc}")
        raise typer.Exit(code=1)
    typer.echo(f"[locate] Timestamp : {snapshot.snapshot_timestamp.isoformat()}")
    typer.echo(f"[locate] URL       : {snapshot.snapshot_url}")


@app.command("extract")
def extract_cmd(
    url: str = typer.Option(..., help="Snapshot (replay) URL."),
    selector: List[str] = typer.Option(..., "--selector", "-s", help="CSS selector; repeat in priority order."),
    show_text: bool = typer.Option(False, "--text", help="Print the extracted paragraphs."),
) -> None:
    """Extract one snapshot and print its word count and policy links."""
    try:
        document = extract_document(url, selector)
    except ScrapeError as exc:
        typer.echo(f"[extract] ✗ {exc}")
        raise typer.Exit(code=1)

    links = filter_links(document.links, document.url or url)
    typer.echo(f"[extract] Selector   : {document.selector}")
    typer.echo(f"[extract] Paragraphs : {len(document.paragraphs)}")
    typer.echo(f"[extract] Words      : {len(tokenize(document.paragraphs))}")
    typer.echo(f"[extract] Links      : {len(links)}")
    for link in links:
        typer.echo(f"  {link.display_label!r:<30} {link.absolute_url}")
    if show_text:
        typer.echo("")
        typer.echo("\n\n".join(document.paragraphs))


@app.command("run")
def run(
    platform: str = typer.Option(..., help="Platform preset name."),
    start: Optional[datetime] = typer.Option(None, formats=_DATE_FORMATS, help="Override first month."),
    end: Optional[datetime] = typer.Option(None, formats=_DATE_FORMATS, help="Override last month."),
    follow: bool = typer.Option(True, "--follow/--no-follow", help="Scrape linked agreements (round 2)."),
    workers: Optional[int] = typer.Option(None, help="Concurrent scrapes."),
    output: Optional[Path] = typer.Option(None, help="Output directory."),
) -> None:
    """Scrape a platform's terms (and linked agreements) month by month."""
    try:
        config = get_platform(platform)
    except KeyError as exc:
        typer.echo(f"[run] ✗ {exc.args[0]}")
        raise typer.Exit(code=1)

    config = config.with_range(start.date() if start else None, end.date() if end else None)
    if not follow:
        config = replace(config, follow_links=False)

    store = ResultStore(config.platform, root=output or settings.output_dir)
    store.initialise()
    typer.echo(f"[run] Writing results to {store.platform_dir}")

    result = BatchRunner(config, store=store, max_workers=workers).run()

    typer.echo(
        f"[run] {len(result.primary())} primary, {len(result.secondary())} secondary row(s); "
        f"{len(result.errors())} error(s)."
    )
    print_errors(result.records)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
