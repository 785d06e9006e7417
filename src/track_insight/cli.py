"""Command-line interface for Track Insight"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import DEFAULT_CONFIG, AnalysisConfig, load_config
from .exceptions import TrackInsightError
from .formatters import get_formatter
from .loader import load_csv
from .logging_config import setup_logging
from .queries import QUERIES, get_query, run_all, run_query

app = typer.Typer(
    name="track-insight",
    help="Track Insight - analytical queries over music track data",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)

DATA_OPTION = typer.Option(
    ...,
    "--data",
    "-d",
    help="CSV export of the track table",
    exists=True,
    file_okay=True,
    dir_okay=False,
    readable=True,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"track-insight {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable DEBUG logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a track-insight.toml config file",
        exists=True,
        dir_okay=False,
    ),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """
    Track Insight - analytical queries over music track data.

    [bold cyan]Examples:[/bold cyan]

      track-insight list

      track-insight run top5_artists_by_stream --data Spotify_Youtube.csv

      track-insight run-all --data Spotify_Youtube.csv --workers 4 --format json
    """
    setup_logging(verbose=verbose, quiet=quiet)
    try:
        settings = load_config(config_file=config, verbose=verbose, quiet=quiet)
    except TrackInsightError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    ctx.obj = {"config": settings}


def _config(ctx: typer.Context) -> AnalysisConfig:
    obj = ctx.obj or {}
    return obj.get("config") or DEFAULT_CONFIG


@app.command("list")
def list_queries():
    """List the available queries."""
    table = Table(show_header=True, title="[bold cyan]Queries[/bold cyan]", title_justify="left")
    table.add_column("#", justify="right")
    table.add_column("Name", no_wrap=True)
    table.add_column("Description")
    table.add_column("Album", justify="center")

    for i, spec in enumerate(QUERIES.values(), start=1):
        table.add_row(str(i), spec.name, spec.description, "yes" if spec.needs_album else "")

    console.print(table)


@app.command()
def run(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Query name (see `track-insight list`)"),
    data: Path = DATA_OPTION,
    album: Optional[str] = typer.Option(None, "--album", "-a", help="Album for album queries"),
    output_format: Optional[str] = typer.Option(
        None, "--format", "-f", help="Output format: rich, json or csv"
    ),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-n", help="Cap the result size of top-N queries", min=1
    ),
):
    """Run one query against a CSV export."""
    settings = _config(ctx)
    try:
        get_query(name)
        formatter = get_formatter(output_format or settings.output_format)
        store = load_csv(data, strict=settings.strict_validation)
        result = run_query(name, store, settings, album=album, limit=limit)
    except TrackInsightError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    formatter.render(name, result)


@app.command("run-all")
def run_all_command(
    ctx: typer.Context,
    data: Path = DATA_OPTION,
    album: Optional[str] = typer.Option(None, "--album", "-a", help="Album for album queries"),
    output_format: Optional[str] = typer.Option(
        None, "--format", "-f", help="Output format: rich, json or csv"
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", help="Threads to run queries on", min=1, max=64
    ),
):
    """Run every query against a CSV export."""
    settings = _config(ctx)
    fmt = output_format or settings.output_format
    try:
        formatter = get_formatter(fmt)
        store = load_csv(data, strict=settings.strict_validation)
        results = run_all(store, settings, workers=workers, album=album)
    except TrackInsightError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if album is None and fmt == "rich":
        err_console.print("[dim]Album queries skipped; pass --album to include them.[/dim]")
    formatter.render_many(results)


@app.command()
def summary(ctx: typer.Context, data: Path = DATA_OPTION):
    """Show a short overview of a CSV export."""
    settings = _config(ctx)
    try:
        store = load_csv(data, strict=settings.strict_validation)
    except TrackInsightError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    records = store.all()
    album_types = sorted(str(t) for t in run_query("distinct_album_types", store, settings))

    console.print()
    console.print(f"[bold cyan]TRACK DATA[/bold cyan] -- {data.name}")
    console.print()
    console.print(f"Tracks:      [yellow]{len(records):,}[/yellow]")
    console.print(f"Artists:     [yellow]{len({r.artist for r in records}):,}[/yellow]")
    console.print(f"Albums:      [yellow]{len({r.album for r in records if r.album is not None}):,}[/yellow]")
    console.print(f"Album types: [blue]{', '.join(album_types) or '-'}[/blue]")
