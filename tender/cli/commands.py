"""tender CLI — Typer-based command-line interface."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from tender import __version__
from tender.core.config import TenderConfig, load_config
from tender.core.errors import TenderError
from tender.core.external import discover_primary_agents, dispatch_now, require_custom_agent
from tender.core.logging import configure_logging
from tender.core.tenders import TenderRecord, TenderStore
from tender.core.tenders.types import DEFAULT_TIMEOUT_MINUTES

app = typer.Typer(
    name="tender",
    help="tender - interactive CLI for autonomous OpenCode schedules",
    no_args_is_help=False,
    invoke_without_command=True,
)

console = Console()
err_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"tender v{__version__}")
        raise typer.Exit()


def _fail(err: Exception | str) -> NoReturn:
    err_console.print(f"[red]error:[/red] {escape(str(err))}", soft_wrap=True)
    raise typer.Exit(code=1)


def _store(ctx: typer.Context) -> TenderStore:
    config: TenderConfig = ctx.obj
    return TenderStore(Path.cwd(), config.storage.workflow_dir)


def _check_timeout(value: int) -> int:
    if value <= 0:
        _fail("timeout-minutes must be greater than 0")
    return value


def _require_agent(ctx: typer.Context, store: TenderStore, agent: str) -> None:
    tools = ctx.obj.tools
    require_custom_agent(store.root, agent, binary=tools.agent_cli, timeout=tools.timeout_s)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None, "--version", "-v", callback=_version_callback, is_eager=True
    ),
    config_path: str | None = typer.Option(
        None, "--config", "-c", help="Config file (default: ./tender.yaml)"
    ),
) -> None:
    """tender - interactive CLI for autonomous OpenCode schedules."""
    try:
        config = load_config(config_path)
    except (TenderError, ValidationError) as e:
        _fail(e)
    configure_logging(config.logging.level)
    ctx.obj = config
    if ctx.invoked_subcommand is None:
        # Default: open the interactive dashboard
        _start_dashboard(ctx)


# ════════════════════════════════════════════════════════════
# dashboard — bare `tender`
# ════════════════════════════════════════════════════════════


def _start_dashboard(ctx: typer.Context) -> None:
    from tender_cli.dashboard import Dashboard
    from tender_cli.keyboard import open_keyboard
    from tender_cli.prompts import Prompter

    config: TenderConfig = ctx.obj
    store = _store(ctx)
    tools = config.tools

    def discover() -> list[str]:
        return discover_primary_agents(store.root, binary=tools.agent_cli, timeout=tools.timeout_s)

    prompter = Prompter(
        sys.stdin,
        console,
        keyboard=open_keyboard(sys.stdin),
        poll_interval_s=config.menu.raw_poll_interval_s,
        idle_timeout_s=config.menu.raw_idle_timeout_s,
        panel_width=config.menu.panel_width,
    )
    try:
        store.ensure_workflow_dir()
        Dashboard(store, prompter, discover).run()
    except KeyboardInterrupt:
        console.print("\nBye!")
    except (TenderError, OSError) as e:
        _fail(e)


# ════════════════════════════════════════════════════════════
# init / ls — directory setup and listing
# ════════════════════════════════════════════════════════════


@app.command()
def init(ctx: typer.Context) -> None:
    """Ensure the workflow directory exists."""
    try:
        path = _store(ctx).ensure_workflow_dir()
    except OSError as e:
        _fail(e)
    typer.echo(f"initialized {path}")


@app.command("ls")
def list_tenders(
    ctx: typer.Context,
    table: bool = typer.Option(False, "--table", "-t", help="Render a table instead of TSV"),
) -> None:
    """List managed tender workflows."""
    from tender_cli.output import EMPTY_MESSAGE, render_tenders_table, tender_rows

    try:
        tenders = _store(ctx).load_tenders()
    except (TenderError, OSError) as e:
        _fail(e)

    if table:
        render_tenders_table(console, tenders)
        return
    if not tenders:
        typer.echo(EMPTY_MESSAGE)
        return
    for line in tender_rows(tenders):
        typer.echo(line)


# ════════════════════════════════════════════════════════════
# add / update — non-interactive edits
# ════════════════════════════════════════════════════════════


@app.command()
def add(
    ctx: typer.Context,
    name_arg: str | None = typer.Argument(None, metavar="NAME", help="Tender name"),
    name: str | None = typer.Option(None, "--name", "-n", help="Tender name (instead of NAME)"),
    agent: str = typer.Option("", "--agent", "-a", help="OpenCode agent name"),
    prompt: str = typer.Option("", "--prompt", "-p", help="Optional default prompt"),
    cron: str = typer.Option("", "--cron", help="Optional cron schedule (5 fields, UTC)"),
    manual: bool = typer.Option(True, "--manual/--no-manual", help="workflow_dispatch trigger"),
    push: bool = typer.Option(False, "--push/--no-push", help="Push-to-main trigger"),
    timeout_minutes: int = typer.Option(
        DEFAULT_TIMEOUT_MINUTES, "--timeout-minutes", "--timeout", help="Job timeout in minutes"
    ),
) -> None:
    """Add a tender non-interactively."""
    if name_arg and name:
        _fail("use either positional <name> or --name, not both")
    final_name = (name_arg or name or "").strip()
    if not final_name:
        raise typer.BadParameter("a tender name is required", param_hint="NAME")
    _check_timeout(timeout_minutes)

    store = _store(ctx)
    try:
        _require_agent(ctx, store, agent)
        saved = store.save_new_tender(
            TenderRecord(
                name=final_name,
                agent=agent,
                prompt=prompt,
                cron=cron,
                manual=manual,
                push=push,
                timeout_minutes=timeout_minutes,
            )
        )
    except (TenderError, OSError) as e:
        _fail(e)
    typer.echo(f"saved {saved.workflow_file}")


@app.command()
def update(
    ctx: typer.Context,
    target: str = typer.Argument(..., metavar="NAME", help="Tender to update"),
    name: str | None = typer.Option(None, "--name", "-n", help="New tender name"),
    agent: str | None = typer.Option(None, "--agent", "-a", help="OpenCode agent name"),
    prompt: str | None = typer.Option(None, "--prompt", "-p", help="Default prompt (empty clears)"),
    cron: str | None = typer.Option(None, "--cron", help="Cron schedule (5 fields, UTC)"),
    clear_cron: bool = typer.Option(False, "--clear-cron", help="Remove the schedule"),
    manual: bool | None = typer.Option(None, "--manual/--no-manual", help="workflow_dispatch trigger"),
    push: bool | None = typer.Option(None, "--push/--no-push", help="Push-to-main trigger"),
    timeout_minutes: int | None = typer.Option(
        None, "--timeout-minutes", "--timeout", help="Job timeout in minutes"
    ),
) -> None:
    """Update a tender non-interactively."""
    if cron is not None and clear_cron:
        _fail("use either --cron or --clear-cron, not both")

    changes: dict[str, object] = {}
    if name is not None:
        changes["name"] = name
    if agent is not None:
        changes["agent"] = agent
    if prompt is not None:
        changes["prompt"] = prompt
    if cron is not None:
        changes["cron"] = cron
    if clear_cron:
        changes["cron"] = ""
    if manual is not None:
        changes["manual"] = manual
    if push is not None:
        changes["push"] = push
    if timeout_minutes is not None:
        changes["timeout_minutes"] = _check_timeout(timeout_minutes)

    store = _store(ctx)
    try:
        existing = store.get_tender(target)
        if not changes:
            _fail("no update flags were provided")
        # model_validate re-applies whitespace stripping to the new values
        updated = TenderRecord.model_validate({**existing.model_dump(), **changes})
        _require_agent(ctx, store, updated.agent)
        saved = store.update_tender(target, updated)
    except (TenderError, OSError) as e:
        _fail(e)
    typer.echo(f"updated {saved.workflow_file}")


# ════════════════════════════════════════════════════════════
# rm / run — delete and dispatch
# ════════════════════════════════════════════════════════════


@app.command()
def rm(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Tender to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Delete without confirmation"),
) -> None:
    """Remove a tender workflow."""
    store = _store(ctx)
    try:
        if not yes:
            path = store.managed_workflow_path(name)
            if not typer.confirm(f'Delete tender "{name}" ({path})?', default=False):
                typer.echo("cancelled")
                return
        store.remove_tender(name)
    except (TenderError, OSError) as e:
        _fail(e)
    typer.echo(f"deleted {name}")


@app.command()
def run(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Tender to trigger"),
    prompt: str = typer.Option("", "--prompt", "-p", help="Prompt override for this run"),
) -> None:
    """Trigger an on-demand tender now via GitHub CLI."""
    tools = ctx.obj.tools
    try:
        _, output = dispatch_now(
            _store(ctx), name, prompt, binary=tools.dispatch_cli, timeout=tools.timeout_s
        )
    except (TenderError, OSError) as e:
        _fail(e)
    if output.strip():
        typer.echo(output.rstrip())
    typer.echo(f"triggered {name}")
