"""Dashboard look — full-screen panels, chips, rules and status lines (Rich)."""

from __future__ import annotations

from typing import TextIO

from rich.console import Console
from rich.control import Control
from rich.markup import escape

PANEL_WIDTH = 86
DEFAULT_CONTENT_HEIGHT = 27

# 256-colour palette
BLUE = "color(45)"
CYAN = "color(51)"
YELLOW = "color(226)"
MAGENTA = "color(213)"
PINK = "color(205)"
BG_BLUE = "color(17)"
BG_MAG = "color(54)"
BG_BLACK = "color(16)"
BG_PINK = "color(89)"

_CHIP_BACKGROUNDS = (BG_BLUE, BG_MAG, BG_PINK, BG_BLUE, BG_MAG)
_BAND_WIDTH = 80


class PaddedWriter:
    """File-like wrapper that indents every line written through it."""

    def __init__(self, stream: TextIO, prefix: str):
        self.stream = stream
        self.prefix = prefix
        self._at_line_start = True

    def write(self, text: str) -> int:
        if not self.prefix:
            return self.stream.write(text)
        for chunk in text.splitlines(keepends=True):
            if self._at_line_start:
                self.stream.write(self.prefix)
            self.stream.write(chunk)
            self._at_line_start = chunk.endswith("\n")
        return len(text)

    def __getattr__(self, name: str):
        return getattr(self.stream, name)


def begin_screen(
    base: Console,
    content_height: int = DEFAULT_CONTENT_HEIGHT,
    size: tuple[int, int] | None = None,
    panel_width: int = PANEL_WIDTH,
) -> Console:
    """Start a fresh screen and return a console that draws the centred panel.

    On a real terminal the screen is cleared, painted black and padded so
    the ``panel_width`` column block sits in the middle. Elsewhere (pipes,
    captured output) nothing is cleared and no padding is added.
    """
    prefix = ""
    if base.is_terminal:
        rows, cols = size or (base.size.height, base.size.width)
        base.clear()
        for _ in range(rows):
            base.print(" " * cols, style=f"on {BG_BLACK}", no_wrap=True, crop=True)
        base.control(Control.home())
        top = (rows - content_height) // 2 if rows > content_height else 0
        base.file.write("\n" * top)
        if cols > panel_width:
            prefix = " " * ((cols - panel_width) // 2)

    return Console(
        file=PaddedWriter(base.file, prefix),
        width=panel_width,
        force_terminal=base.is_terminal,
        color_system=base.color_system,
        highlight=False,
    )


def erase_lines(base: Console, count: int) -> None:
    """Move the cursor up ``count`` lines and clear everything below it."""
    if not base.is_terminal:
        return
    base.file.write(f"\x1b[{count}A\x1b[J")
    base.file.flush()


# ════════════════════════════════════════════════════════════
# PIECES
# ════════════════════════════════════════════════════════════


def rule(console: Console, char: str = ".") -> None:
    console.print(char * console.width, style="dim", no_wrap=True, crop=True)


def heading(console: Console, title: str, color: str = CYAN) -> None:
    console.print(f"[bold {color}]{escape(title)}[/]")


def _band(console: Console, background: str, text: str) -> None:
    console.print(text.center(_BAND_WIDTH), style=f"bold white on {background}", no_wrap=True)


def draw_hero(console: Console) -> None:
    rule(console, "=")
    _band(console, BG_BLACK, "")
    _band(console, BG_BLUE, "TENDER")
    _band(console, BG_MAG, "")
    _band(console, BG_PINK, "Autonomous OpenCode runs in GitHub Actions")
    _band(console, BG_BLUE, "")
    _band(console, BG_BLACK, "")
    rule(console, "=")


def draw_meta(console: Console, count: int, workflow_dir: str) -> None:
    console.print(f"[bold white on {BG_MAG}] STATE [/] GitHub Actions workflows ({escape(workflow_dir)})")
    console.print(f"[bold white on {BG_BLUE}] MODE  [/] Autonomous commits to main")
    console.print(f"[bold white on {BG_PINK}] COUNT [/] {count} total tender(s)")


def number_chip(n: int) -> str:
    background = _CHIP_BACKGROUNDS[(n - 1) % len(_CHIP_BACKGROUNDS)] if n > 0 else BG_MAG
    return f"[bold white on {background}] {n} [/]"


def key_chip(key: str) -> str:
    return f"[bold white on {BG_BLACK}] {escape(key)} [/]"


def paint_trigger(summary: str, cron: str, manual: bool, push: bool) -> str:
    """Colour a trigger summary by which triggers are active."""
    if cron and manual:
        color = CYAN
    elif cron and push:
        color = PINK
    elif cron:
        color = MAGENTA
    elif push:
        color = BLUE
    elif manual:
        color = "green"
    else:
        return escape(summary)
    return f"[{color}]{escape(summary)}[/]"


def print_err(console: Console, msg: str) -> None:
    console.print(f"  [red]ERROR:[/] {escape(msg)}")


def print_info(console: Console, msg: str) -> None:
    console.print(f"  [dim]INFO:[/] {escape(msg)}")


def print_ok(console: Console, msg: str) -> None:
    console.print(f"  [green]OK:[/] {escape(msg)}")


def print_note(console: Console, msg: str) -> None:
    console.print(f"[{YELLOW}]Note:[/] {escape(msg)}")
