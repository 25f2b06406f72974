"""Tender records — model, workflow codec and directory store."""

from tender.core.tenders.store import TenderStore
from tender.core.tenders.types import (
    DEFAULT_TIMEOUT_MINUTES,
    TenderRecord,
    normalize_timeout_minutes,
    validate_tender,
)
from tender.core.tenders.workflow import parse_workflow, render_workflow

__all__ = [
    "DEFAULT_TIMEOUT_MINUTES",
    "TenderRecord",
    "TenderStore",
    "normalize_timeout_minutes",
    "parse_workflow",
    "render_workflow",
    "validate_tender",
]
