"""Error taxonomy shared by the store, codec, CLI and menu engine."""

from __future__ import annotations


class TenderError(Exception):
    """Base class for every failure tender reports to a caller."""


class TenderValidationError(TenderError, ValueError):
    """A record or user input violates a tender invariant."""


class ScheduleError(TenderValidationError):
    """A schedule preset could not be built from the given input."""


class TenderNotFoundError(TenderError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f'tender "{name}" not found')


class TenderExistsError(TenderError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f'tender "{name}" already exists')


class ExternalToolError(TenderError):
    """An external CLI (agent listing, workflow dispatch) failed."""

    def __init__(self, tool: str, detail: str):
        self.tool = tool
        self.detail = detail
        super().__init__(f"{tool} {detail}")
