"""Tests for tender.core.tenders.store (directory-backed persistence)."""

from __future__ import annotations

import pytest

from tender.core.errors import TenderError, TenderExistsError, TenderNotFoundError, TenderValidationError
from tender.core.tenders import TenderRecord, TenderStore
from tender.core.tenders.workflow import render_workflow


@pytest.fixture
def store(tmp_path):
    return TenderStore(tmp_path)


def _record(name: str = "Nightly Docs", **kwargs) -> TenderRecord:
    fields = {"name": name, "agent": "docs-writer", "manual": True}
    fields.update(kwargs)
    return TenderRecord(**fields)


def test_missing_directory_lists_nothing(store):
    assert store.load_tenders() == []
    assert not store.workflow_dir.exists()


def test_ensure_workflow_dir_is_idempotent(store, tmp_path):
    path = store.ensure_workflow_dir()
    assert path == tmp_path / ".github" / "workflows"
    assert store.ensure_workflow_dir() == path


def test_save_new_assigns_slug_file(store):
    saved = store.save_new_tender(_record())
    assert saved.workflow_file == "nightly-docs.yml"
    assert (store.workflow_dir / "nightly-docs.yml").exists()
    assert store.load_tenders() == [saved]


def test_save_new_avoids_file_collisions(store):
    store.ensure_workflow_dir()
    (store.workflow_dir / "nightly-docs.yml").write_text("name: CI\n")
    first = store.save_new_tender(_record("nightly docs"))
    second = store.save_new_tender(_record("nightly_docs"))
    assert first.workflow_file == "nightly-docs-2.yml"
    assert second.workflow_file == "nightly-docs-3.yml"


def test_save_new_rejects_duplicate_name(store):
    store.save_new_tender(_record("Nightly"))
    with pytest.raises(TenderExistsError, match='tender "nightly" already exists'):
        store.save_new_tender(_record("nightly"))


def test_save_new_validates_first(store):
    with pytest.raises(TenderValidationError):
        store.save_new_tender(_record(manual=False))
    assert store.load_tenders() == []


def test_save_tender_normalizes_filename(store):
    saved = store.save_tender(_record(workflow_file="../escape"))
    assert saved.workflow_file == "escape.yml"
    assert (store.workflow_dir / "escape.yml").exists()


def test_next_workflow_file_exhausted(store, monkeypatch):
    monkeypatch.setattr("tender.core.tenders.store._MAX_SUFFIX", 3)
    store.ensure_workflow_dir()
    for name in ("x.yml", "x-2.yml"):
        (store.workflow_dir / name).write_text("")
    with pytest.raises(TenderError, match="unable to find available workflow filename"):
        store.next_workflow_file("x")


def test_load_skips_foreign_and_non_yaml_files(store):
    store.save_new_tender(_record("b"))
    store.save_new_tender(_record("a"))
    (store.workflow_dir / "ci.yml").write_text("name: CI\non: push\n")
    (store.workflow_dir / "notes.txt").write_text(render_workflow(_record("hidden")))
    (store.workflow_dir / "sub.yml").mkdir()
    assert [t.name for t in store.load_tenders()] == ["a", "b"]


def test_load_skips_non_utf8_files(store):
    store.save_new_tender(_record("Docs"))
    (store.workflow_dir / "legacy.yml").write_bytes(b"name: caf\xe9 build\n")
    assert [t.name for t in store.load_tenders()] == ["Docs"]


def test_load_propagates_read_errors(store, monkeypatch):
    store.save_new_tender(_record("Docs"))

    def unreadable(self, *args, **kwargs):
        raise PermissionError("denied")

    monkeypatch.setattr("pathlib.Path.read_text", unreadable)
    with pytest.raises(PermissionError):
        store.load_tenders()


def test_load_accepts_yaml_suffix(store):
    store.ensure_workflow_dir()
    (store.workflow_dir / "hand.yaml").write_text(render_workflow(_record("hand")))
    [tender] = store.load_tenders()
    assert tender.workflow_file == "hand.yaml"


def test_find_is_case_insensitive(store):
    store.save_new_tender(_record("Nightly Docs"))
    assert store.find_tender("  nightly docs ").name == "Nightly Docs"
    assert store.find_tender("other") is None
    with pytest.raises(TenderNotFoundError, match='tender "other" not found'):
        store.get_tender("other")


def test_update_keeps_workflow_file_on_rename(store):
    saved = store.save_new_tender(_record("Nightly Docs"))
    updated = store.update_tender("nightly docs", saved.model_copy(update={"name": "Renamed", "push": True}))
    assert updated.workflow_file == saved.workflow_file
    [tender] = store.load_tenders()
    assert tender.name == "Renamed"
    assert tender.push is True
    assert tender.workflow_file == "nightly-docs.yml"


def test_update_same_name_different_case_is_allowed(store):
    saved = store.save_new_tender(_record("Nightly"))
    updated = store.update_tender("Nightly", saved.model_copy(update={"name": "NIGHTLY"}))
    assert updated.name == "NIGHTLY"


def test_update_rejects_collision(store):
    store.save_new_tender(_record("a"))
    b = store.save_new_tender(_record("b"))
    with pytest.raises(TenderExistsError):
        store.update_tender("b", b.model_copy(update={"name": "A"}))


def test_update_missing(store):
    with pytest.raises(TenderNotFoundError):
        store.update_tender("ghost", _record("ghost"))


def test_remove(store):
    saved = store.save_new_tender(_record())
    path = store.managed_workflow_path(saved.name)
    removed = store.remove_tender("NIGHTLY DOCS")
    assert removed.workflow_file == saved.workflow_file
    assert not path.exists()
    with pytest.raises(TenderNotFoundError):
        store.remove_tender("Nightly Docs")


def test_custom_workflow_dir(tmp_path):
    store = TenderStore(tmp_path, "ci/flows")
    store.save_new_tender(_record())
    assert (tmp_path / "ci" / "flows" / "nightly-docs.yml").exists()
