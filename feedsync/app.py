"""Typer CLI entrypoint for feedsync."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import typer
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .config import DEFAULT_CONFIG_PATH, SyncConfig, load_config
from .engine import FeedFetcher
from .exceptions import ConfigError, StoreError
from .logging_conf import configure_logging
from .orchestrator import FeedRunResult, Orchestrator
from .store import NotionStore

app = typer.Typer(
    help="Mirror RSS/Atom feeds into a Notion database.",
    no_args_is_help=True,
    rich_markup_mode=None,
)

console = Console()

PULL_COLUMNS = ("created", "updated", "skipped", "failed")
CLEAN_COLUMNS = ("archived", "skipped", "failed")


@dataclass
class AppState:
    config: SyncConfig
    orchestrator: Orchestrator


def build_state(config_path: str, verbose: bool) -> AppState:
    configure_logging(verbose=verbose)
    config = load_config(config_path)
    store = NotionStore(config.store)
    fetcher = FeedFetcher(config.fetch)
    orchestrator = Orchestrator(config, fetcher, store)
    return AppState(config=config, orchestrator=orchestrator)


@dataclass
class CliOptions:
    config_path: str
    verbose: bool


def _get_state(ctx: typer.Context) -> AppState:
    options: CliOptions = ctx.obj
    try:
        return build_state(options.config_path, options.verbose)
    except (ConfigError, StoreError) as exc:
        console.print(str(exc), style="red")
        raise typer.Exit(code=2)


def _render_results(title: str, results: Sequence[FeedRunResult], columns: Sequence[str]) -> Table:
    table = Table(title=f"{title} · {len(results)} feeds", box=box.SIMPLE_HEAD)
    table.add_column("Feed", style="cyan", overflow="fold")
    for column in columns:
        table.add_column(column.capitalize(), justify="right")
    table.add_column("Result", overflow="fold")
    totals = dict.fromkeys(columns, 0)
    for result in results:
        for column in columns:
            totals[column] += result.summary.get(column, 0)
        if result.error:
            status = Text(f"error: {result.error}", style="red")
        elif result.summary.get("failed"):
            status = Text("partial", style="yellow")
        else:
            status = Text("ok", style="green")
        table.add_row(result.title, *(str(result.summary.get(c, 0)) for c in columns), status)
    table.add_section()
    table.add_row("Total", *(str(totals[c]) for c in columns), "")
    return table


def _finish(results: Sequence[FeedRunResult], strict: bool) -> None:
    if strict and not all(result.clean for result in results):
        raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    config: str = typer.Option(
        DEFAULT_CONFIG_PATH,
        "--config",
        "-c",
        help="Path to the YAML configuration; environment variables are expanded.",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging.", is_flag=True),
) -> None:
    ctx.obj = CliOptions(config_path=config, verbose=verbose)


@app.command("pull", help="Create or update records for fresh items of every feed.")
def pull(
    ctx: typer.Context,
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Exit with status 1 when any feed or record write failed.",
        is_flag=True,
    ),
) -> None:
    state = _get_state(ctx)
    try:
        results = state.orchestrator.pull_all()
    finally:
        state.orchestrator.close()
    console.print(_render_results("Pull results", results, PULL_COLUMNS))
    _finish(results, strict)


@app.command("clean", help="Archive stale records whose status is in the cleanup set.")
def clean(
    ctx: typer.Context,
    status: Optional[list[str]] = typer.Option(
        None,
        "--status",
        "-s",
        help="Status to archive (repeatable); defaults to clean.status from the config.",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Exit with status 1 when any feed or archive call failed.",
        is_flag=True,
    ),
) -> None:
    state = _get_state(ctx)
    statuses = status or state.config.clean.status
    if not statuses:
        console.print("No cleanup status configured; nothing will be archived.", style="yellow")
    try:
        results = state.orchestrator.clean_all(statuses)
    finally:
        state.orchestrator.close()
    console.print(_render_results("Clean results", results, CLEAN_COLUMNS))
    _finish(results, strict)


__all__ = ["AppState", "app", "build_state"]
