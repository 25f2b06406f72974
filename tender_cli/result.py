"""Prompt outcomes — Ok(value) | Cancelled | Err(reason).

Every prompt returns one of these and every caller passes non-Ok results
up unchanged, so the quit key unwinds to the dashboard loop without being
mistaken for a blank (default) answer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Cancelled:
    """The user pressed the quit key. Not an error; never reported as one."""


CANCELLED = Cancelled()


@dataclass(frozen=True)
class Err:
    reason: str
    error: BaseException | None = None

    @property
    def is_eof(self) -> bool:
        """Input is exhausted (stdin closed or the raw-key wait timed out)."""
        return isinstance(self.error, EOFError)


PromptResult = Union[Ok[T], Cancelled, Err]
