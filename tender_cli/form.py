"""Create/edit form — a fixed sequence of prompts that yields one draft record.

Nothing is written here. A failed step shows its message, waits for an
acknowledgement and discards the draft (``Ok(None)``). The quit key
returns ``Cancelled`` all the way out.
"""

from __future__ import annotations

from collections.abc import Callable

from tender.core.errors import TenderError
from tender.core.schedule.presets import (
    DAILY_TIME_PRESETS,
    DEFAULT_TIME_PRESET_INDEX,
    HOURLY_MINUTES,
    WEEKDAY_PRESETS,
    build_daily_cron,
    build_hourly_cron,
    build_weekly_cron,
    decode_preset,
    default_time_preset_index,
    default_weekday_preset_index,
    format_time,
    hourly_minute_labels,
    nearest_quarter_index,
    time_preset_labels,
    weekday_preset_labels,
)
from tender.core.schedule.types import ScheduleMode, ScheduleSpec
from tender.core.tenders.store import TenderStore
from tender.core.tenders.types import TenderRecord, normalize_timeout_minutes, validate_tender
from tender_cli import screen
from tender_cli.prompts import Prompter
from tender_cli.result import Ok, PromptResult

UNSUPPORTED_SCHEDULE_NOTICE = "Existing schedule is unsupported in presets; choose a new one."

_MODES = (ScheduleMode.HOURLY, ScheduleMode.DAILY, ScheduleMode.WEEKLY)
_MODE_LABELS = ("Hourly", "Daily", "Weekly")

FormResult = PromptResult[TenderRecord | None]


class TenderForm:
    """Prompts for the fields of a new tender, or new values for an existing one."""

    def __init__(
        self,
        prompter: Prompter,
        store: TenderStore,
        discover_agents: Callable[[], list[str]],
    ):
        self.prompter = prompter
        self.store = store
        self.discover_agents = discover_agents

    # ── Screen ───────────────────────────────────────────────

    def draw_form_screen(
        self,
        is_new: bool,
        draft: TenderRecord,
        notice: str = "",
        show_agent: bool = True,
    ) -> None:
        console = self.prompter.begin_screen()
        screen.draw_hero(console)
        console.print()
        screen.draw_meta(console, len(self.store.load_tenders()), self.store.workflow_dir_name)
        console.print()

        screen.heading(console, "Create Tender" if is_new else "Edit Tender")
        screen.rule(console, "-")
        context = f"Current: name={draft.name or '(pending)'}"
        if show_agent:
            context += f" | agent={draft.agent or '(pending)'}"
        console.print(context, markup=False)
        if notice:
            screen.print_note(console, notice)
        console.print()

    def _fail(self, is_new: bool, draft: TenderRecord, msg: str) -> FormResult:
        """Show ``msg`` on a fresh form screen, then drop the draft."""
        self.draw_form_screen(is_new, draft, show_agent=bool(draft.agent))
        self.prompter.error(msg)
        result = self.prompter.acknowledge()
        if isinstance(result, Ok):
            return Ok(None)
        return result

    # ── Steps ────────────────────────────────────────────────

    def input_tender(self, base: TenderRecord, is_new: bool) -> FormResult:
        """Run every step against ``base``; Ok(record) only if all of them pass."""
        p = self.prompter
        draft = base.model_copy(update={"agent": ""}) if is_new else base

        # name
        self.draw_form_screen(is_new, draft, show_agent=False)
        label = f"Name (default: {base.name}): " if base.name else "Name: "
        answer = p.prompt_text(label)
        if not isinstance(answer, Ok):
            return answer
        name = answer.value or base.name
        if not name:
            return self._fail(is_new, draft, "Name is required.")
        draft = draft.model_copy(update={"name": name})

        # agent
        agent = self._choose_agent(is_new, draft, base.agent)
        if not isinstance(agent, Ok) or agent.value is None:
            return agent
        draft = draft.model_copy(update={"agent": agent.value})

        # push
        self.draw_form_screen(is_new, draft)
        push = p.prompt_binary_choice("Run on every push to main?", base.push)
        if not isinstance(push, Ok):
            return push
        draft = draft.model_copy(update={"push": push.value})

        # timeout
        self.draw_form_screen(is_new, draft)
        timeout = p.prompt_timeout_minutes(normalize_timeout_minutes(base.timeout_minutes))
        if not isinstance(timeout, Ok):
            return timeout
        draft = draft.model_copy(update={"timeout_minutes": timeout.value})

        # schedule
        self.draw_form_screen(is_new, draft)
        enabled = p.prompt_binary_choice("Enable recurring schedule?", is_new or bool(base.cron))
        if not isinstance(enabled, Ok):
            return enabled
        cron = ""
        if enabled.value:
            built = self._choose_schedule(is_new, draft, base.cron)
            if not isinstance(built, Ok) or built.value is None:
                return built
            cron = built.value

        record = TenderRecord(
            name=name,
            agent=draft.agent,
            prompt=base.prompt,
            cron=cron,
            manual=base.manual,
            push=draft.push,
            timeout_minutes=draft.timeout_minutes,
            workflow_file=base.workflow_file,
        )
        try:
            validate_tender(record)
        except TenderError as e:
            return self._fail(is_new, draft, str(e))
        return Ok(record)

    def _choose_agent(self, is_new: bool, draft: TenderRecord, current: str) -> PromptResult[str | None]:
        try:
            agents = self.discover_agents()
        except TenderError as e:
            return self._fail(is_new, draft, f"unable to discover OpenCode agents: {e}")
        if not agents:
            return self._fail(is_new, draft, "no custom OpenCode agents found")

        default = next(
            (i for i, a in enumerate(agents) if a.lower() == current.strip().lower()), 0
        )
        self.draw_form_screen(is_new, draft, show_agent=False)
        picked = self.prompter.select_numbered_option("Agent", agents, default)
        if not isinstance(picked, Ok):
            return picked
        return Ok(agents[picked.value])

    def _choose_schedule(self, is_new: bool, draft: TenderRecord, current: str) -> PromptResult[str | None]:
        p = self.prompter
        spec = decode_preset(current) if current else None
        notice = UNSUPPORTED_SCHEDULE_NOTICE if current and spec is None else ""

        self.draw_form_screen(is_new, draft, notice)
        default_mode = _MODES.index(spec.mode) if spec else _MODES.index(ScheduleMode.DAILY)
        mode = p.select_numbered_option("Schedule", _MODE_LABELS, default_mode)
        if not isinstance(mode, Ok):
            return mode

        try:
            if _MODES[mode.value] is ScheduleMode.HOURLY:
                return self._hourly(is_new, draft, spec)
            if _MODES[mode.value] is ScheduleMode.DAILY:
                return self._daily(is_new, draft, spec)
            return self._weekly(is_new, draft, spec)
        except TenderError as e:
            return self._fail(is_new, draft, str(e))

    def _hourly(self, is_new: bool, draft: TenderRecord, spec: ScheduleSpec | None) -> PromptResult[str]:
        default = nearest_quarter_index(spec.minute) if spec else 0
        self.draw_form_screen(is_new, draft)
        picked = self.prompter.select_numbered_option("Hourly minute", hourly_minute_labels(), default)
        if not isinstance(picked, Ok):
            return picked
        return Ok(build_hourly_cron(HOURLY_MINUTES[picked.value]))

    def _daily(self, is_new: bool, draft: TenderRecord, spec: ScheduleSpec | None) -> PromptResult[str]:
        picked = self._pick_time(is_new, draft, spec, "Daily time (UTC)")
        if not isinstance(picked, Ok):
            return picked
        return Ok(build_daily_cron(picked.value))

    def _weekly(self, is_new: bool, draft: TenderRecord, spec: ScheduleSpec | None) -> PromptResult[str]:
        default = default_weekday_preset_index(spec.days) if spec else 0
        self.draw_form_screen(is_new, draft)
        days = self.prompter.select_numbered_option("Weekly days", weekday_preset_labels(), default)
        if not isinstance(days, Ok):
            return days

        picked = self._pick_time(is_new, draft, spec, "Weekly time (UTC)")
        if not isinstance(picked, Ok):
            return picked
        return Ok(build_weekly_cron(WEEKDAY_PRESETS[days.value].days, picked.value))

    def _pick_time(
        self, is_new: bool, draft: TenderRecord, spec: ScheduleSpec | None, title: str
    ) -> PromptResult[str]:
        default = DEFAULT_TIME_PRESET_INDEX
        if spec is not None:
            default = default_time_preset_index(spec.hour, spec.minute)
        self.draw_form_screen(is_new, draft)
        picked = self.prompter.select_numbered_option(title, time_preset_labels(), default)
        if not isinstance(picked, Ok):
            return picked
        preset = DAILY_TIME_PRESETS[picked.value]
        return Ok(format_time(preset.hour, preset.minute))

