"""Typer CLI entrypoint for news-relay."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

import typer
import yaml
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .config import ConfigRepository, RelayConfig
from .engine import SentLog
from .errors import RelayError
from .logging_conf import available_logs, configure_logging, default_log_dir, tail_log
from .orchestrator import Orchestrator, RunSummary
from .scheduler import APSchedulerAdapter

app = typer.Typer(
    help="Relay popular news stories to a Telegram channel.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
log_app = typer.Typer(
    name="log",
    help="Inspect log files.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
config_app = typer.Typer(
    name="config",
    help="Inspect configuration.",
    no_args_is_help=True,
    rich_markup_mode=None,
)

console = Console()


@dataclass
class AppState:
    repository: ConfigRepository
    config: RelayConfig
    log_path: Path


def build_state(verbose: bool) -> AppState:
    configure_logging(verbose=verbose)
    repository = ConfigRepository()
    try:
        config = repository.load_config()
    except RelayError as exc:
        console.print(f"Configuration error: {exc}", style="red")
        raise typer.Exit(code=2) from exc
    return AppState(repository=repository, config=config, log_path=repository.log_path(config))


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if state is None:
        state = build_state(verbose=False)
        ctx.obj = state
    return state


def _build_orchestrator(state: AppState) -> Orchestrator:
    return Orchestrator(state.config, log_path=state.log_path)


def _render_summary(summary: RunSummary) -> Table:
    table = Table(title="Run summary", box=box.SIMPLE_HEAD)
    table.add_column("Fetched", justify="right")
    table.add_column("Selected", justify="right")
    table.add_column("Sent", justify="right", style="green")
    table.add_column("Pruned", justify="right")
    table.add_column("Status", overflow="fold")
    status = Text("ok", style="green") if summary.ok else Text(str(summary.error), style="red")
    table.add_row(
        str(summary.fetched),
        str(summary.selected),
        str(summary.sent),
        str(summary.pruned),
        status,
    )
    return table


def _format_stamp(stamp_ms: int) -> str:
    moment = datetime.fromtimestamp(stamp_ms / 1000, tz=timezone.utc)
    return moment.strftime("%Y-%m-%d %H:%M:%S UTC")


app.add_typer(log_app, name="log")
app.add_typer(config_app, name="config")


@app.callback()
def main(
    ctx: typer.Context, verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging.", is_flag=True)
) -> None:
    ctx.obj = build_state(verbose)


@app.command("run", help="Run the pipeline once (for cron or another external timer).")
def run(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    orchestrator = _build_orchestrator(state)
    try:
        summary = orchestrator.run()
    finally:
        orchestrator.close()
    console.print(_render_summary(summary))
    if not summary.ok:
        raise typer.Exit(code=1)


@app.command("serve", help="Run the pipeline on the configured schedule until interrupted.")
def serve(
    ctx: typer.Context,
    now: bool = typer.Option(False, "--now", help="Also run once immediately.", is_flag=True),
) -> None:
    state = _get_state(ctx)
    orchestrator = _build_orchestrator(state)
    scheduler = APSchedulerAdapter()
    scheduler.schedule_job(state.config, orchestrator.run, run_now=now)
    scheduler.start()
    console.print(f"Scheduled `{state.config.job_name}`; press Ctrl+C to stop.", style="cyan")
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        console.print("Stopping.", style="yellow")
    finally:
        scheduler.shutdown()
        orchestrator.close()


@app.command("sent", help="Show stories recorded in the sent log.")
def sent(
    ctx: typer.Context,
    limit: int = typer.Option(20, "--limit", min=1, help="Show the N most recent entries."),
) -> None:
    state = _get_state(ctx)
    try:
        sent_log = SentLog.load(state.log_path)
    except RelayError as exc:
        console.print(str(exc), style="red")
        raise typer.Exit(code=1) from exc
    if not len(sent_log):
        console.print("The sent log is empty.", style="dim")
        return
    rows = sorted(sent_log.entries.items(), key=lambda pair: pair[1], reverse=True)[:limit]
    table = Table(title=f"{len(rows)} of {len(sent_log)} sent stories", box=box.SIMPLE_HEAD)
    table.add_column("Sent at", style="green", no_wrap=True)
    table.add_column("URL", overflow="fold")
    for url, stamp in rows:
        table.add_row(_format_stamp(stamp), url)
    console.print(table)


@log_app.command("list", help="List available log files.")
def log_list() -> None:
    logs = list(available_logs())
    if not logs:
        console.print("No log files yet.", style="dim")
        return
    table = Table(box=box.SIMPLE_HEAD)
    table.add_column("File", style="green")
    for path in logs:
        table.add_row(path.name)
    console.print(table)


@log_app.command("show", help="Show the tail of a log file.")
def log_show(
    name: str = typer.Argument("relay", help="Log name without extension (relay, error)."),
    lines: int = typer.Option(100, "--lines", "-n", min=1, help="Number of lines to show."),
) -> None:
    path = default_log_dir() / f"{name}.log"
    content = tail_log(path, lines)
    if not content:
        console.print("No log entries yet.", style="dim")
        return
    console.print(f"{path.name} · last {len(content)} lines", style="cyan")
    console.print("".join(content), markup=False, highlight=False)


@config_app.command("show", help="Print the effective configuration.")
def config_show(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    payload = state.config.model_dump(mode="json")
    if payload["telegram"]["bot_token"]:
        payload["telegram"]["bot_token"] = "***"
    payload["sent_log"] = str(state.log_path)
    console.print(yaml.safe_dump(payload, sort_keys=False, allow_unicode=True), markup=False, highlight=False)


def cli() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    cli()
