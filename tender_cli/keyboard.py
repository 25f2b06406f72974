"""Single-key terminal input, behind an injectable capability."""

from __future__ import annotations

import os
from typing import Protocol, TextIO

from loguru import logger
from prompt_toolkit.input import create_input


class Keyboard(Protocol):
    """Raw (non-canonical, no-echo) key reading.

    ``read_byte`` never blocks: it returns None when no key is pending.
    """

    def enter_raw_mode(self) -> None: ...

    def restore(self) -> None: ...

    def read_byte(self) -> str | None: ...

    def size(self) -> tuple[int, int] | None: ...


class TerminalKeyboard:
    """Keyboard backed by prompt_toolkit's terminal input."""

    def __init__(self, stdin: TextIO):
        self._stdin = stdin
        self._input = create_input(stdin)
        self._raw = None
        self._pending: list[str] = []

    def enter_raw_mode(self) -> None:
        if self._raw is not None:
            return
        raw = self._input.raw_mode()
        raw.__enter__()
        self._raw = raw
        self._pending.clear()

    def restore(self) -> None:
        if self._raw is None:
            return
        raw, self._raw = self._raw, None
        raw.__exit__(None, None, None)

    def read_byte(self) -> str | None:
        if not self._pending:
            keys = self._input.read_keys() + self._input.flush_keys()
            for key in keys:
                self._pending.extend(key.data)
        if not self._pending:
            return None
        return self._pending.pop(0)

    def size(self) -> tuple[int, int] | None:
        try:
            cols, rows = os.get_terminal_size(self._stdin.fileno())
        except (OSError, ValueError):
            return None
        return rows, cols


def open_keyboard(stdin: TextIO) -> Keyboard | None:
    """A TerminalKeyboard for an interactive stdin; None means line mode only."""
    try:
        if not stdin.isatty():
            return None
        return TerminalKeyboard(stdin)
    except (OSError, ValueError) as e:
        logger.warning(f"Single-key input unavailable, using line input: {e}")
        return None
