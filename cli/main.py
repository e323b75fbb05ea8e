"""Catalog locator CLI — entry-point for lookups.

Usage:
    python cli/main.py --help
    python cli/main.py lookup notepad.exe
    python cli/main.py page notepad.exe --page 8

Exit codes for ``lookup``: 0 found, 1 not found, 2 error.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from catalog.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
from typing import Optional

import typer

from catalog.config import settings
from catalog.errors import CatalogError, InvalidTargetError
from catalog.runner import run_lookup
from catalog.scraper.fetcher import CatalogSession
from catalog.scraper.listing import CatalogPageSource
from cli.rendering import render_page, render_records, render_summary

app = typer.Typer(
    name="catalog",
    help="Locate entries in an alphabetically paginated catalog.",
    no_args_is_help=True,
)

_EXIT_CODES = {"found": 0, "not_found": 1, "error": 2}


@app.command("lookup")
def lookup(
    name: str = typer.Argument(..., help="Catalog entry to find, e.g. notepad.exe."),
    max_exponent: Optional[int] = typer.Option(
        None, "--max-exponent", min=0, help="Probe at most page 2^N (default from settings)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
) -> None:
    """Find NAME in the catalog and print its detail records."""
    try:
        result = run_lookup(name, max_page_exponent=max_exponent)
    except InvalidTargetError as exc:
        typer.echo(f"[lookup] {exc}", err=True)
        raise typer.Exit(2)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        typer.echo("")
        typer.echo(render_summary(result))
        if result.found:
            typer.echo("")
            typer.echo(render_records(result.records))

    raise typer.Exit(_EXIT_CODES[result.status])


@app.command("page")
def page(
    name: str = typer.Argument(..., help="Name whose first letter selects the listing."),
    page_number: int = typer.Option(1, "--page", min=1, help="1-based listing page."),
) -> None:
    """Fetch one listing page and print its alphabetical range."""
    if not name.strip():
        typer.echo("[page] name must not be blank", err=True)
        raise typer.Exit(2)

    with CatalogSession() as session:
        source = CatalogPageSource(session, name)
        typer.echo(f"[page] {source.url_for(page_number)}")
        try:
            info = source.fetch_page(page_number)
        except CatalogError as exc:
            typer.echo(f"[page] ✗ {exc}", err=True)
            raise typer.Exit(2)
    typer.echo(render_page(info))


@app.command("config")
def show_config() -> None:
    """Print the effective settings."""
    for key, value in vars(settings).items():
        typer.echo(f"  {key:<20} {value}")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
