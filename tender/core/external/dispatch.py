"""On-demand runs through ``gh workflow run``."""

from __future__ import annotations

import shutil

from loguru import logger

from tender.core.errors import ExternalToolError, TenderError
from tender.core.external.process import DEFAULT_TIMEOUT_S, run_tool
from tender.core.tenders.store import TenderStore
from tender.core.tenders.types import TenderRecord

LABEL = "gh workflow dispatch"


def build_dispatch_args(tender: TenderRecord, prompt: str = "") -> list[str]:
    args = ["workflow", "run", tender.workflow_file]
    prompt = prompt.strip()
    if prompt:
        args += ["-f", f"prompt={prompt}"]
    return args


def dispatch_now(
    store: TenderStore,
    name: str,
    prompt: str = "",
    binary: str = "gh",
    timeout: float = DEFAULT_TIMEOUT_S,
) -> tuple[TenderRecord, str]:
    """Trigger a manual run of a tender's workflow, addressed by its file.

    Returns the tender and whatever the dispatch CLI printed.
    """
    tender = store.get_tender(name)
    if not tender.manual:
        raise TenderError(
            f'tender "{tender.name}" does not allow on-demand runs; '
            "enable workflow_dispatch to use 'tender run'"
        )
    if shutil.which(binary) is None:
        raise ExternalToolError(LABEL, f"failed: {binary} not found on PATH")

    output = run_tool(
        LABEL, [binary, *build_dispatch_args(tender, prompt)], cwd=store.root, timeout=timeout
    )
    logger.info(f"Tender dispatched: {tender.name} ({tender.workflow_file})")
    return tender, output
