"""Tests for tender.core.tenders.workflow (render/parse codec)."""

from __future__ import annotations

import pytest
import yaml

from tender.core.tenders.types import TenderRecord
from tender.core.tenders.workflow import parse_scalar, parse_workflow, quote_value, render_workflow


def _record(**kwargs) -> TenderRecord:
    fields = {
        "name": "nightly docs",
        "agent": "docs-writer",
        "prompt": "Refresh the docs",
        "cron": "30 9 * * *",
        "manual": True,
        "push": False,
        "timeout_minutes": 45,
    }
    fields.update(kwargs)
    return TenderRecord(**fields)


def _roundtrip(record: TenderRecord) -> TenderRecord:
    parsed = parse_workflow(render_workflow(record))
    assert parsed is not None
    return parsed


# ── Render ────────────────────────────────────────────────


def test_render_is_valid_yaml():
    doc = yaml.safe_load(render_workflow(_record(push=True)))
    assert doc["name"] == "tender/nightly docs"
    # PyYAML reads the bare `on` key as boolean True
    triggers = doc[True]
    assert triggers["workflow_dispatch"]["inputs"]["prompt"]["required"] is False
    assert triggers["push"]["branches"] == ["main"]
    assert triggers["schedule"] == [{"cron": "30 9 * * *"}]
    job = doc["jobs"]["tender"]
    assert job["timeout-minutes"] == 45
    assert job["env"] == {
        "TENDER_NAME": "nightly docs",
        "TENDER_AGENT": "docs-writer",
        "TENDER_PROMPT": "Refresh the docs",
    }
    assert doc["concurrency"] == {"group": "tender-main", "cancel-in-progress": False}


def test_render_sections_follow_triggers():
    text = render_workflow(_record(manual=False, push=False, cron="0 6 * * 1"))
    assert "workflow_dispatch:" not in text
    assert "push:" not in text
    assert '- cron: "0 6 * * 1"' in text


def test_render_without_triggers_is_still_dispatchable():
    text = render_workflow(_record(manual=False, push=False, cron=""))
    doc = yaml.safe_load(text)
    assert doc[True] == {"workflow_dispatch": None}


def test_render_steps_and_prompt_precedence():
    text = render_workflow(_record())
    assert "actions/checkout@v4" in text
    assert "Install OpenCode" in text
    assert 'opencode run --agent "$TENDER_AGENT" "$DISPATCH_PROMPT"' in text
    assert text.index('"$DISPATCH_PROMPT"') < text.index('"$TENDER_PROMPT"')
    assert "git push origin HEAD:main" in text


def test_render_is_deterministic():
    assert render_workflow(_record()) == render_workflow(_record())


def test_render_normalizes_timeout():
    assert "timeout-minutes: 30" in render_workflow(_record(timeout_minutes=0))


@pytest.mark.parametrize(
    "value",
    ['say "hi"', "back\\slash", "tab\there", "line\nbreak", "bell\x07", "ünïcødé ✓", ""],
)
def test_quote_value_is_single_line_yaml(value):
    quoted = quote_value(value)
    assert "\n" not in quoted
    assert yaml.safe_load(f"k: {quoted}")["k"] == value


# ── Parse ─────────────────────────────────────────────────


def test_roundtrip_all_fields():
    record = _record(push=True)
    parsed = _roundtrip(record)
    assert parsed == record


@pytest.mark.parametrize(
    "kwargs",
    [
        {"manual": False, "push": True, "cron": ""},
        {"manual": True, "push": False, "cron": ""},
        {"manual": False, "push": False, "cron": "0 * * * *"},
        {"prompt": ""},
        {"prompt": 'quote " and \\ backslash\tand tab'},
        {"name": "Weekly: report #1", "prompt": "a: b # not a comment"},
    ],
)
def test_roundtrip_variants(kwargs):
    record = _record(**kwargs)
    parsed = _roundtrip(record)
    for field in ("name", "agent", "prompt", "cron", "manual", "push", "timeout_minutes"):
        assert getattr(parsed, field) == getattr(record, field)


def test_roundtrip_normalizes_timeout():
    assert _roundtrip(_record(timeout_minutes=-3)).timeout_minutes == 30


def test_roundtrip_without_triggers_reads_back_manual():
    """A record with no triggers is rendered dispatchable, so it parses as manual."""
    parsed = _roundtrip(_record(manual=False, push=False, cron=""))
    assert parsed.manual is True


def test_workflow_file_not_embedded():
    text = render_workflow(_record(workflow_file="custom-key.yml"))
    assert "custom-key" not in text
    assert _roundtrip(_record(workflow_file="custom-key.yml")).workflow_file == ""


def _without(text: str, needle: str) -> str:
    return "\n".join(line for line in text.split("\n") if needle not in line)


@pytest.mark.parametrize("needle", ['name: "tender/', "TENDER_AGENT:", "opencode run"])
def test_parse_rejects_missing_markers(needle):
    text = _without(render_workflow(_record()), needle)
    assert parse_workflow(text) is None


def test_parse_rejects_foreign_workflow():
    text = "name: CI\non:\n  push:\njobs:\n  test:\n    runs-on: ubuntu-latest\n"
    assert parse_workflow(text) is None


def test_parse_rejects_empty_agent():
    text = render_workflow(_record()).replace('TENDER_AGENT: "docs-writer"', 'TENDER_AGENT: ""')
    assert parse_workflow(text) is None


def test_parse_hand_edited_document():
    """Marker scanning tolerates reordering, odd quoting and extra content."""
    text = "\n".join(
        [
            "# edited by hand",
            "name: 'tender/hand made'",
            "on:",
            "  schedule:",
            "    - cron: 15 * * * *",
            "  workflow_dispatch:",
            "jobs:",
            "  tender:",
            "    timeout-minutes: abc",
            "    env:",
            "      TENDER_AGENT: reviewer",
            "      TENDER_PROMPT: \"it's fine\"",
            "    steps:",
            "      - name: Run",
            "        run: opencode run --agent reviewer",
        ]
    )
    parsed = parse_workflow(text)
    assert parsed is not None
    assert parsed.name == "hand made"
    assert parsed.agent == "reviewer"
    assert parsed.prompt == "it's fine"
    assert parsed.cron == "15 * * * *"
    assert parsed.manual is True
    assert parsed.push is False
    assert parsed.timeout_minutes == 30


def test_parse_empty_identity_falls_back_to_agent():
    text = render_workflow(_record()).replace('name: "tender/nightly docs"', 'name: "tender/"')
    parsed = parse_workflow(text)
    assert parsed is not None
    assert parsed.name == "docs-writer"


def test_parse_ignores_step_names():
    """`- name:` step lines never count as the identity line."""
    text = _without(render_workflow(_record()), 'name: "tender/')
    text = text.replace("- name: Install OpenCode", '- name: "tender/impostor"')
    assert parse_workflow(text) is None


def test_parse_scalar_fallbacks():
    assert parse_scalar(' "a\\"b" ') == 'a"b'
    assert parse_scalar("plain") == "plain"
    assert parse_scalar("") == ""
    assert parse_scalar("'unbalanced") == "unbalanced"
    assert parse_scalar("123") == "123"
