"""Tender record model and its invariants."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict

from tender.core.errors import TenderValidationError

WORKFLOW_DIR = ".github/workflows"
WORKFLOW_SUFFIXES = (".yml", ".yaml")
DEFAULT_TIMEOUT_MINUTES = 30

# Built-in OpenCode agents; tenders must run a custom agent.
SYSTEM_AGENTS = frozenset({
    "build",
    "plan",
    "general",
    "explore",
    "title",
    "summary",
    "compaction",
})

_SLUG_SEPARATORS = re.compile(r"[-_ ]+")
_SLUG_DROP = re.compile(r"[^a-z0-9-]")
# everything str.splitlines() breaks on
_LINE_BREAKS = re.compile(r"[\n\r\v\f\x1c\x1d\x1e\x85\u2028\u2029]")


class TenderRecord(BaseModel):
    """A scheduled autonomous task — mirrors one managed workflow document."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = ""
    agent: str = ""
    prompt: str = ""
    cron: str = ""  # 5-field cron, UTC; empty = no schedule
    manual: bool = False  # workflow_dispatch
    push: bool = False  # push to main
    timeout_minutes: int = DEFAULT_TIMEOUT_MINUTES
    workflow_file: str = ""  # storage key, assigned once at creation

    @property
    def has_trigger(self) -> bool:
        return self.manual or self.push or bool(self.cron)


def normalize_timeout_minutes(value: int | None) -> int:
    """Substitute the default for absent or non-positive timeouts."""
    if value is None or value <= 0:
        return DEFAULT_TIMEOUT_MINUTES
    return value


def is_system_agent(name: str) -> bool:
    return name.strip().lower() in SYSTEM_AGENTS


def validate_tender(tender: TenderRecord) -> None:
    """Raise TenderValidationError if the record cannot be persisted."""
    name = tender.name.strip()
    if not name:
        raise TenderValidationError("name is required")
    if not tender.agent.strip():
        raise TenderValidationError("agent is required")
    if _LINE_BREAKS.search(name):
        raise TenderValidationError("name cannot contain newlines")
    if "\t" in name:
        raise TenderValidationError("name cannot contain tabs")
    if "/" in name:
        raise TenderValidationError("name cannot contain '/'")
    if is_system_agent(tender.agent):
        raise TenderValidationError(
            f'agent "{tender.agent.strip()}" is reserved; choose a custom agent'
        )
    if tender.cron.strip() and len(tender.cron.split()) != 5:
        raise TenderValidationError("cron must have 5 fields")
    if not tender.has_trigger:
        raise TenderValidationError("enable on-demand, push, or set a schedule")


def sort_tenders(tenders: list[TenderRecord]) -> list[TenderRecord]:
    """Sort in place by name, then storage key; returns the same list."""
    tenders.sort(key=lambda t: (t.name, t.workflow_file))
    return tenders


def slugify(value: str) -> str:
    """Filename-safe slug of a tender name (``"Nightly Docs"`` → ``nightly-docs``)."""
    slug = _SLUG_SEPARATORS.sub("-", value.strip().lower())
    slug = _SLUG_DROP.sub("", slug)
    slug = re.sub(r"-{2,}", "-", slug).strip("-")
    return slug or "tender"


def has_workflow_suffix(filename: str) -> bool:
    return filename.endswith(WORKFLOW_SUFFIXES)
