"""Menu prompts — single-key choices, numbered option lists, free-text lines.

Two input modes share one contract. Line mode reads a whole line from
stdin. Single-key mode reads one key through a Keyboard and is used for
menu prompts only; when no Keyboard is available (or raw mode cannot be
engaged) menu prompts fall back to line mode.

The quit key is honoured by menu prompts only. Free-text prompts return
whatever was typed, ``q`` included.
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from typing import TextIO

from loguru import logger
from rich.console import Console
from rich.markup import escape

from tender.core.tenders.types import normalize_timeout_minutes
from tender_cli import screen
from tender_cli.keyboard import Keyboard
from tender_cli.paging import clamp_offset, page_footer, page_window, scroll_down, scroll_up
from tender_cli.result import CANCELLED, Err, Ok, PromptResult

QUIT_KEY = "q"
PAGE_SIZE = 8
PAGE_UP_KEY = "9"
PAGE_DOWN_KEY = "0"
MAX_DIRECT_OPTIONS = 9

_CTRL_C = "\x03"
_CTRL_D = "\x04"
# blank, title, rule, PAGE_SIZE slots, up, down, rule, footer, status
_PAGE_LINES = PAGE_SIZE + 8


def is_quit(choice: str) -> bool:
    return choice.strip().lower() == QUIT_KEY


class Prompter:
    """Reads answers from stdin (or a Keyboard) and draws on the current screen."""

    def __init__(
        self,
        stdin: TextIO,
        console: Console,
        keyboard: Keyboard | None = None,
        poll_interval_s: float = 0.01,
        idle_timeout_s: float = 6.0,
        panel_width: int = screen.PANEL_WIDTH,
    ):
        self.stdin = stdin
        self.base = console
        self.console = console
        self.keyboard = keyboard
        self.poll_interval_s = poll_interval_s
        self.idle_timeout_s = idle_timeout_s
        self.panel_width = panel_width
        self._raw_warned = False

    # ── Screen ───────────────────────────────────────────────

    def begin_screen(self, content_height: int = screen.DEFAULT_CONTENT_HEIGHT) -> Console:
        """Clear the terminal and make the new panel console current."""
        size = self.keyboard.size() if self.keyboard else None
        self.console = screen.begin_screen(
            self.base, content_height, size=size, panel_width=self.panel_width
        )
        return self.console

    def error(self, msg: str) -> None:
        screen.print_err(self.console, msg)

    def info(self, msg: str) -> None:
        screen.print_info(self.console, msg)

    def ok(self, msg: str) -> None:
        screen.print_ok(self.console, msg)

    # ── Line input ───────────────────────────────────────────

    def prompt_text(self, label: str) -> PromptResult[str]:
        """Free-text line, trimmed. The quit key is ordinary data here."""
        line = self.console.input(label, markup=False, stream=self.stdin)
        if line == "":
            return Err("end of input", EOFError("stdin closed"))
        return Ok(line.strip())

    def prompt_line(self, label: str) -> PromptResult[str]:
        """Line answer to a menu-style question; the quit key cancels."""
        result = self.prompt_text(label)
        if isinstance(result, Ok) and is_quit(result.value):
            return CANCELLED
        return result

    # ── Single key ───────────────────────────────────────────

    def prompt_menu_choice(self, label: str) -> PromptResult[str]:
        """One keypress (Enter = blank). Falls back to a line without a Keyboard."""
        if self.keyboard is None:
            return self.prompt_line(label)

        try:
            self.keyboard.enter_raw_mode()
        except (OSError, ValueError) as e:
            if not self._raw_warned:
                logger.warning(f"Raw terminal mode unavailable, using line input: {e}")
                self._raw_warned = True
            return self.prompt_line(label)

        self.console.print(label, end="", markup=False)
        try:
            key = self._wait_for_key()
        finally:
            self.keyboard.restore()

        if key is None:
            self.console.print()
            return Err("no input received", EOFError("timed out waiting for a key"))
        if key in ("\r", "\n"):
            self.console.print()
            return Ok("")
        if key == _CTRL_D:
            self.console.print()
            return Err("end of input", EOFError("stdin closed"))

        choice = key.strip()
        self.console.print(choice, markup=False)
        if key == _CTRL_C or is_quit(choice):
            return CANCELLED
        return Ok(choice)

    def _wait_for_key(self) -> str | None:
        deadline = time.monotonic() + self.idle_timeout_s
        while True:
            key = self.keyboard.read_byte()
            if key is not None:
                # drop the rest of a pasted or multi-byte sequence
                while self.keyboard.read_byte() is not None:
                    pass
                return key
            if time.monotonic() >= deadline:
                return None
            time.sleep(self.poll_interval_s)

    # ── Option lists ─────────────────────────────────────────

    def select_numbered_option(
        self,
        title: str,
        options: Sequence[str],
        default_index: int = 0,
        allow_default: bool = True,
    ) -> PromptResult[int]:
        """Pick one option by number; returns its index.

        Up to nine options are listed in full. Longer lists are paged eight
        at a time with 9/0 scrolling; Enter still picks the default.
        """
        if not options:
            return Err("no options to choose from", ValueError("empty option list"))
        has_default = allow_default and default_index >= 0
        if not 0 <= default_index < len(options):
            default_index = 0

        if len(options) <= MAX_DIRECT_OPTIONS:
            return self._select_direct(title, options, default_index, has_default)
        return self._select_paged(title, options, default_index, has_default)

    def _option_line(self, text: str, is_default: bool) -> str:
        line = escape(text)
        return f"{line} [dim](default)[/]" if is_default else line

    def _select_direct(
        self, title: str, options: Sequence[str], default_index: int, has_default: bool
    ) -> PromptResult[int]:
        console = self.console
        console.print()
        screen.heading(console, title)
        screen.rule(console)
        for i, option in enumerate(options):
            line = self._option_line(option, has_default and i == default_index)
            console.print(f"  {screen.number_chip(i + 1)}  {line}")
        screen.rule(console)

        label = f"Choose 1-{len(options)}: "
        if has_default:
            label = f"Choose 1-{len(options)} (default: {default_index + 1}): "
        while True:
            result = self.prompt_menu_choice(label)
            if not isinstance(result, Ok):
                return result
            choice = result.value
            if not choice:
                if has_default:
                    return Ok(default_index)
                self.error("Selection required.")
                continue
            if choice.isascii() and choice.isdigit() and 1 <= int(choice) <= len(options):
                return Ok(int(choice) - 1)
            self.error("Invalid selection.")

    def _select_paged(
        self, title: str, options: Sequence[str], default_index: int, has_default: bool
    ) -> PromptResult[int]:
        total = len(options)
        offset = clamp_offset((default_index // PAGE_SIZE) * PAGE_SIZE, total, PAGE_SIZE)
        label = "Choose 1-8, 9(up), 0(down): "
        if has_default:
            label = "Choose 1-8, 9(up), 0(down) (Enter for default): "

        status = ""
        redraw = False
        while True:
            if redraw and self.keyboard is not None:
                # repaint the option block and the previous prompt line in place
                screen.erase_lines(self.base, _PAGE_LINES + 1)
            self._render_page(title, options, offset, default_index, has_default, status)
            redraw = True
            status = ""

            result = self.prompt_menu_choice(label)
            if not isinstance(result, Ok):
                return result
            choice = result.value
            if not choice:
                if has_default:
                    return Ok(default_index)
                status = "Selection required."
                continue

            if choice == PAGE_UP_KEY:
                nxt = scroll_up(offset, PAGE_SIZE)
                if nxt is None:
                    status = "Already at first page."
                else:
                    offset = nxt
                continue
            if choice == PAGE_DOWN_KEY:
                nxt = scroll_down(offset, total, PAGE_SIZE)
                if nxt is None:
                    status = "Already at last page."
                else:
                    offset = nxt
                continue

            if len(choice) == 1 and "1" <= choice <= str(PAGE_SIZE):
                idx = offset + int(choice) - 1
                if idx < total:
                    return Ok(idx)
            status = "Invalid selection."

    def _render_page(
        self,
        title: str,
        options: Sequence[str],
        offset: int,
        default_index: int,
        has_default: bool,
        status: str,
    ) -> None:
        console = self.console
        console.print()
        screen.heading(console, title)
        screen.rule(console)
        for slot, option in enumerate(page_window(options, offset, PAGE_SIZE)):
            if option is None:
                console.print()
                continue
            line = self._option_line(option, has_default and offset + slot == default_index)
            console.print(f"  {screen.number_chip(slot + 1)}  {line}")
        console.print(f"  {screen.number_chip(int(PAGE_UP_KEY))}  Scroll up")
        console.print(f"  {screen.number_chip(int(PAGE_DOWN_KEY))}  Scroll down")
        screen.rule(console)
        console.print(page_footer(offset, len(options), PAGE_SIZE), style="dim")
        if status:
            self.info(status)
        else:
            console.print()

    # ── Composite prompts ────────────────────────────────────

    def prompt_binary_choice(
        self, question: str, default: bool, require_explicit: bool = False
    ) -> PromptResult[bool]:
        default_index = -1 if require_explicit else (0 if default else 1)
        result = self.select_numbered_option(
            question, ["Yes", "No"], default_index, allow_default=not require_explicit
        )
        if not isinstance(result, Ok):
            return result
        return Ok(result.value == 0)

    def prompt_timeout_minutes(self, default: int) -> PromptResult[int]:
        """Positive whole minutes; blank keeps ``default``. Re-asks on bad input."""
        default = normalize_timeout_minutes(default)
        while True:
            result = self.prompt_line(f"Timeout in minutes (default: {default}): ")
            if not isinstance(result, Ok):
                return result
            raw = result.value
            if not raw:
                return Ok(default)
            if raw.isascii() and raw.isdigit() and int(raw) > 0:
                return Ok(int(raw))
            self.error("Timeout must be a positive whole number of minutes.")

    def acknowledge(self) -> PromptResult[int]:
        """Block until the user dismisses the current message."""
        return self.select_numbered_option("Continue", ["Back to dashboard"], 0, allow_default=False)
