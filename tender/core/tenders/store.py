"""TenderStore — the workflow directory is the database."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from tender.core.errors import TenderError, TenderExistsError, TenderNotFoundError
from tender.core.tenders.types import (
    WORKFLOW_DIR,
    TenderRecord,
    has_workflow_suffix,
    slugify,
    sort_tenders,
    validate_tender,
)
from tender.core.tenders.workflow import parse_workflow, render_workflow

_MAX_SUFFIX = 1000


class TenderStore:
    """Loads and persists tenders as workflow files under ``root/workflow_dir``.

    There is no index: every read enumerates the directory and parses each
    candidate document. Files that are not managed tenders are skipped.
    Single-process use is assumed; nothing here locks the directory.
    """

    def __init__(self, root: str | Path, workflow_dir: str = WORKFLOW_DIR):
        self.root = Path(root)
        self.workflow_dir_name = workflow_dir
        self.workflow_dir = self.root / workflow_dir

    # ── Directory ────────────────────────────────────────────

    def ensure_workflow_dir(self) -> Path:
        self.workflow_dir.mkdir(parents=True, exist_ok=True)
        return self.workflow_dir

    # ── Read ─────────────────────────────────────────────────

    def load_tenders(self) -> list[TenderRecord]:
        """All managed tenders, sorted by name then workflow file."""
        if not self.workflow_dir.exists():
            return []

        tenders: list[TenderRecord] = []
        for path in self.workflow_dir.iterdir():
            if not path.is_file() or not has_workflow_suffix(path.name):
                continue
            try:
                content = path.read_text(encoding="utf-8")
            except UnicodeDecodeError:
                logger.debug(f"Skipping non-UTF-8 workflow: {path.name}")
                continue
            tender = parse_workflow(content)
            if tender is None:
                logger.debug(f"Skipping unmanaged workflow: {path.name}")
                continue
            tenders.append(tender.model_copy(update={"workflow_file": path.name}))

        return sort_tenders(tenders)

    def find_tender(self, name: str) -> TenderRecord | None:
        """Case-insensitive lookup by display name."""
        return _find(self.load_tenders(), name)

    def get_tender(self, name: str) -> TenderRecord:
        tender = self.find_tender(name)
        if tender is None:
            raise TenderNotFoundError(name)
        return tender

    def managed_workflow_path(self, name: str) -> Path:
        return self.workflow_dir / self.get_tender(name).workflow_file

    # ── Write ────────────────────────────────────────────────

    def save_tender(self, tender: TenderRecord) -> TenderRecord:
        """Validate and write a tender under its workflow file (or a slug of its name)."""
        validate_tender(tender)
        self.ensure_workflow_dir()

        filename = tender.workflow_file or f"{slugify(tender.name)}.yml"
        if not has_workflow_suffix(filename):
            filename += ".yml"
        filename = Path(filename).name

        (self.workflow_dir / filename).write_text(render_workflow(tender), encoding="utf-8")
        return tender.model_copy(update={"workflow_file": filename})

    def next_workflow_file(self, name: str) -> str:
        """First free ``slug.yml``, ``slug-2.yml``, ... for a tender name."""
        self.ensure_workflow_dir()
        base = slugify(name)
        candidate = f"{base}.yml"
        if not (self.workflow_dir / candidate).exists():
            return candidate
        for i in range(2, _MAX_SUFFIX):
            candidate = f"{base}-{i}.yml"
            if not (self.workflow_dir / candidate).exists():
                return candidate
        raise TenderError(f'unable to find available workflow filename for "{base}"')

    def save_new_tender(self, tender: TenderRecord) -> TenderRecord:
        """Create a tender; assigns its workflow file once, for good."""
        if _find(self.load_tenders(), tender.name) is not None:
            raise TenderExistsError(tender.name)
        validate_tender(tender)
        filename = self.next_workflow_file(tender.name)
        saved = self.save_tender(tender.model_copy(update={"workflow_file": filename}))
        logger.info(f"Tender saved: {saved.name} ({saved.workflow_file})")
        return saved

    def update_tender(self, old_name: str, updated: TenderRecord) -> TenderRecord:
        """Overwrite an existing tender; renames keep the original workflow file."""
        tenders = self.load_tenders()
        current = _find(tenders, old_name)
        if current is None:
            raise TenderNotFoundError(old_name)
        for other in tenders:
            if other.workflow_file == current.workflow_file:
                continue
            if other.name.lower() == updated.name.strip().lower():
                raise TenderExistsError(updated.name)

        saved = self.save_tender(updated.model_copy(update={"workflow_file": current.workflow_file}))
        logger.info(f"Tender updated: {saved.name} ({saved.workflow_file})")
        return saved

    def remove_tender(self, name: str) -> TenderRecord:
        tender = self.get_tender(name)
        (self.workflow_dir / tender.workflow_file).unlink()
        logger.info(f"Tender removed: {tender.name} ({tender.workflow_file})")
        return tender


def _find(tenders: list[TenderRecord], name: str) -> TenderRecord | None:
    needle = name.strip().lower()
    for tender in tenders:
        if tender.name.lower() == needle:
            return tender
    return None
