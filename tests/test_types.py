"""Tests for tender.core.tenders.types (record model + validation)."""

from __future__ import annotations

import pytest

from tender.core.errors import TenderValidationError
from tender.core.tenders.types import (
    DEFAULT_TIMEOUT_MINUTES,
    TenderRecord,
    has_workflow_suffix,
    is_system_agent,
    normalize_timeout_minutes,
    slugify,
    sort_tenders,
    validate_tender,
)


def _record(**kwargs) -> TenderRecord:
    fields = {"name": "nightly", "agent": "docs-writer", "manual": True}
    fields.update(kwargs)
    return TenderRecord(**fields)


def test_strips_whitespace():
    t = TenderRecord(name="  nightly  ", agent=" docs ")
    assert t.name == "nightly"
    assert t.agent == "docs"


def test_defaults():
    t = TenderRecord()
    assert t.timeout_minutes == DEFAULT_TIMEOUT_MINUTES == 30
    assert not t.manual and not t.push and t.cron == ""
    assert t.has_trigger is False


@pytest.mark.parametrize("value, expected", [(None, 30), (0, 30), (-5, 30), (1, 1), (90, 90)])
def test_normalize_timeout(value, expected):
    assert normalize_timeout_minutes(value) == expected


def test_system_agents_case_insensitive():
    assert is_system_agent("build")
    assert is_system_agent(" Plan ")
    assert not is_system_agent("docs-writer")


# ── Validation ────────────────────────────────────────────


def test_valid_record_passes():
    validate_tender(_record())


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"name": ""}, "name is required"),
        ({"agent": "  "}, "agent is required"),
        ({"name": "a\nb"}, "name cannot contain newlines"),
        ({"name": "team/nightly"}, "name cannot contain '/'"),
        ({"agent": "Build"}, 'agent "Build" is reserved; choose a custom agent'),
        ({"cron": "0 9 * *"}, "cron must have 5 fields"),
    ],
)
def test_validation_failures(kwargs, message):
    with pytest.raises(TenderValidationError) as exc:
        validate_tender(_record(**kwargs))
    assert str(exc.value) == message


@pytest.mark.parametrize("sep", ["\r", "\x0b", "\x0c", "\x1c", "\x1d", "\x1e", "\x85", "\u2028", "\u2029"])
def test_name_rejects_every_line_break(sep):
    """Any separator str.splitlines() honours would split a listing row."""
    with pytest.raises(TenderValidationError, match="name cannot contain newlines"):
        validate_tender(_record(name=f"a{sep}b"))


def test_name_rejects_tabs():
    with pytest.raises(TenderValidationError, match="name cannot contain tabs"):
        validate_tender(_record(name="a\tb"))


def test_unrunnable_record_rejected():
    with pytest.raises(TenderValidationError, match="enable on-demand, push, or set a schedule"):
        validate_tender(_record(manual=False, push=False, cron=""))


@pytest.mark.parametrize(
    "kwargs",
    [{"manual": True}, {"push": True}, {"cron": "0 9 * * *"}],
)
def test_any_single_trigger_is_enough(kwargs):
    validate_tender(_record(**{"manual": False, **kwargs}))


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        validate_tender(_record(name=""))


# ── Helpers ───────────────────────────────────────────────


def test_sort_by_name_then_workflow_file():
    tenders = [
        _record(name="b", workflow_file="b.yml"),
        _record(name="a", workflow_file="z.yml"),
        _record(name="a", workflow_file="a-2.yml"),
    ]
    ordered = sort_tenders(tenders)
    assert ordered is tenders
    assert [(t.name, t.workflow_file) for t in ordered] == [
        ("a", "a-2.yml"),
        ("a", "z.yml"),
        ("b", "b.yml"),
    ]


@pytest.mark.parametrize(
    "name, slug",
    [
        ("Nightly Docs", "nightly-docs"),
        ("  weekly_report  ", "weekly-report"),
        ("a -- b", "a-b"),
        ("Déjà vu!", "dj-vu"),
        ("!!!", "tender"),
        ("", "tender"),
    ],
)
def test_slugify(name, slug):
    assert slugify(name) == slug


def test_workflow_suffix():
    assert has_workflow_suffix("a.yml")
    assert has_workflow_suffix("a.yaml")
    assert not has_workflow_suffix("a.json")
