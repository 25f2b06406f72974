"""Rich output formatters for the CLI."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tender.core.schedule.presets import summarize_triggers
from tender.core.tenders.types import TenderRecord, normalize_timeout_minutes

TSV_HEADER = "NAME\tAGENT\tTRIGGER\tWORKFLOW"
EMPTY_MESSAGE = "No managed tender workflows found."


def tender_rows(tenders: list[TenderRecord]) -> list[str]:
    """Tab-separated listing: header plus one line per tender."""
    lines = [TSV_HEADER]
    for t in tenders:
        trigger = summarize_triggers(t.cron, t.manual, t.push)
        lines.append(f"{t.name}\t{t.agent}\t{trigger}\t{t.workflow_file}")
    return lines


def render_tenders_table(console: Console, tenders: list[TenderRecord]) -> None:
    """Render tenders as a Rich table."""
    if not tenders:
        console.print(f"[dim]{EMPTY_MESSAGE}[/dim]")
        return
    table = Table(title="Tenders")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Agent", style="blue")
    table.add_column("Trigger", style="green")
    table.add_column("Timeout", justify="right")
    table.add_column("Workflow", style="dim")
    for t in tenders:
        table.add_row(
            escape(t.name),
            escape(t.agent),
            summarize_triggers(t.cron, t.manual, t.push),
            f"{normalize_timeout_minutes(t.timeout_minutes)}m",
            t.workflow_file,
        )
    console.print(table)
