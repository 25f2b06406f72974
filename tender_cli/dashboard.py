"""Interactive dashboard — home listing, tender detail, create/edit/delete."""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger
from rich.markup import escape

from tender.core.errors import TenderError
from tender.core.schedule.presets import summarize_triggers
from tender.core.tenders.store import TenderStore
from tender.core.tenders.types import TenderRecord, normalize_timeout_minutes
from tender_cli import screen
from tender_cli.form import TenderForm
from tender_cli.paging import clamp_offset, page_footer, page_window
from tender_cli.prompts import QUIT_KEY, Prompter
from tender_cli.result import Err, Ok, PromptResult

CREATE_KEY = "1"
FIRST_SLOT_KEY = 2
LAST_SLOT_KEY = 7
SCROLL_UP_KEY = "9"
SCROLL_DOWN_KEY = "0"
SLOTS = LAST_SLOT_KEY - FIRST_SLOT_KEY + 1

_SCREEN_HEIGHT = 21 + SLOTS


class Dashboard:
    """Full-screen menu loop over the tenders in one repository."""

    def __init__(
        self,
        store: TenderStore,
        prompter: Prompter,
        discover_agents: Callable[[], list[str]],
    ):
        self.store = store
        self.prompter = prompter
        self.form = TenderForm(prompter, store, discover_agents)
        self.offset = 0

    def run(self) -> None:
        """Run until quit or end of input. Other failures propagate."""
        result = self._home_loop()
        if isinstance(result, Err):
            if result.is_eof:
                logger.debug(f"Dashboard input ended: {result.reason}")
                return
            if result.error is not None:
                raise result.error
            raise TenderError(result.reason)

    # ── Home ─────────────────────────────────────────────────

    def draw_home(self, tenders: list[TenderRecord]) -> None:
        console = self.prompter.begin_screen(_SCREEN_HEIGHT)
        screen.draw_hero(console)
        console.print()
        screen.draw_meta(console, len(tenders), self.store.workflow_dir_name)
        console.print()

        screen.heading(console, "Select Tender")
        screen.rule(console)
        console.print(f"  {screen.number_chip(1)}  Create tender")
        for slot, tender in enumerate(page_window(tenders, self.offset, SLOTS)):
            if tender is None:
                console.print()
                continue
            summary = summarize_triggers(tender.cron, tender.manual, tender.push)
            painted = screen.paint_trigger(summary, tender.cron, tender.manual, tender.push)
            chip = screen.number_chip(FIRST_SLOT_KEY + slot)
            console.print(f"  {chip}  {escape(f'{tender.name:<20}')} {painted}")
        console.print(f"  {screen.number_chip(int(SCROLL_UP_KEY))}  Scroll up")
        console.print(f"  {screen.number_chip(int(SCROLL_DOWN_KEY))}  Scroll down")
        console.print(f"  {screen.key_chip(QUIT_KEY)}  Exit")
        screen.rule(console)
        if tenders:
            console.print(page_footer(self.offset, len(tenders), SLOTS), style="dim")
        else:
            console.print("Showing 0 tenders", style="dim")

    def _home_loop(self) -> PromptResult[None]:
        while True:
            tenders = self.store.load_tenders()
            # slot keys map through the offset, so both are re-derived every render
            self.offset = clamp_offset(self.offset, len(tenders), SLOTS)
            self.draw_home(tenders)

            choice = self.prompter.prompt_menu_choice("")
            if not isinstance(choice, Ok):
                return _finish(choice)
            action = choice.value

            if action == CREATE_KEY:
                result = self._create()
            elif action == SCROLL_UP_KEY:
                if self.offset > 0:
                    self.offset -= SLOTS
                continue
            elif action == SCROLL_DOWN_KEY:
                if self.offset + SLOTS < len(tenders):
                    self.offset += SLOTS
                continue
            elif action.isascii() and action.isdigit() and FIRST_SLOT_KEY <= int(action) <= LAST_SLOT_KEY:
                idx = self.offset + int(action) - FIRST_SLOT_KEY
                if idx >= len(tenders):
                    self.prompter.error("Invalid selection.")
                    continue
                result = self._tender_menu(tenders[idx].name)
            else:
                self.prompter.error("Invalid selection.")
                continue

            if not isinstance(result, Ok):
                return _finish(result)

    def _create(self) -> PromptResult[None]:
        base = TenderRecord(manual=True, push=False)
        drafted = self.form.input_tender(base, is_new=True)
        if not isinstance(drafted, Ok) or drafted.value is None:
            return drafted

        try:
            saved = self.store.save_new_tender(drafted.value)
        except (TenderError, OSError) as e:
            return self._report(str(e))
        self.prompter.ok(f"Saved {saved.workflow_file}")
        return Ok(None)

    def _report(self, msg: str) -> PromptResult[None]:
        self.prompter.error(msg)
        ack = self.prompter.acknowledge()
        if not isinstance(ack, Ok):
            return ack
        return Ok(None)

    # ── Detail ───────────────────────────────────────────────

    def draw_detail(self, tender: TenderRecord) -> None:
        console = self.prompter.begin_screen(_SCREEN_HEIGHT)
        screen.draw_hero(console)
        console.print()
        console.print(f"[bold {screen.PINK}]Tender[/] [bold]{escape(tender.name)}[/]")
        summary = summarize_triggers(tender.cron, tender.manual, tender.push)
        rows = [
            ("Agent:", escape(tender.agent)),
            ("Trigger:", screen.paint_trigger(summary, tender.cron, tender.manual, tender.push)),
            ("Timeout:", f"{normalize_timeout_minutes(tender.timeout_minutes)} min"),
            ("Workflow:", escape(tender.workflow_file)),
        ]
        for label, value in rows:
            console.print(f"[dim]{label:<9}[/] {value}")
        console.print()
        screen.rule(console)
        console.print(f"  {screen.number_chip(1)}  Back")
        console.print(f"  {screen.number_chip(2)}  Edit")
        console.print(f"  {screen.number_chip(3)}  Delete")
        for _ in range(3, SLOTS):
            console.print()
        screen.rule(console)

    def _tender_menu(self, name: str) -> PromptResult[None]:
        current = name
        while True:
            selected = self.store.find_tender(current)
            if selected is None:
                self.prompter.error("Tender no longer exists.")
                return Ok(None)
            self.draw_detail(selected)

            choice = self.prompter.prompt_menu_choice("")
            if not isinstance(choice, Ok):
                return choice
            action = choice.value

            if action == "1":
                return Ok(None)
            if action == "2":
                drafted = self.form.input_tender(selected, is_new=False)
                if not isinstance(drafted, Ok):
                    return drafted
                if drafted.value is None:
                    continue
                try:
                    self.store.update_tender(selected.name, drafted.value)
                except (TenderError, OSError) as e:
                    reported = self._report(str(e))
                    if not isinstance(reported, Ok):
                        return reported
                    continue
                current = drafted.value.name
                self.prompter.ok(f"Updated {selected.workflow_file}")
            elif action == "3":
                confirm = self.prompter.prompt_binary_choice(f'Delete "{selected.name}"?', False)
                if not isinstance(confirm, Ok):
                    return confirm
                if not confirm.value:
                    self.prompter.error("Delete cancelled")
                    continue
                try:
                    self.store.remove_tender(selected.name)
                except (TenderError, OSError) as e:
                    return self._report(str(e))
                self.prompter.ok(f"Deleted {selected.workflow_file}")
                return Ok(None)
            else:
                self.prompter.error("Invalid selection.")


def _finish(result: PromptResult) -> PromptResult[None]:
    """Quit ends the session normally; anything else is passed through."""
    return result if isinstance(result, Err) else Ok(None)
