"""Bounded subprocess calls to external CLIs."""

from __future__ import annotations

import subprocess
from pathlib import Path

from loguru import logger

from tender.core.errors import ExternalToolError

DEFAULT_TIMEOUT_S = 10.0


def run_tool(
    label: str,
    args: list[str],
    cwd: str | Path,
    timeout: float = DEFAULT_TIMEOUT_S,
) -> str:
    """Run a CLI and return its stdout. No retries; any failure raises ExternalToolError."""
    logger.debug(f"Running {label}: {args}")
    try:
        result = subprocess.run(
            args,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise ExternalToolError(label, f"failed: {args[0]} not found on PATH") from e
    except subprocess.TimeoutExpired as e:
        raise ExternalToolError(label, f"failed: timed out after {timeout:g}s") from e
    except OSError as e:
        raise ExternalToolError(label, f"failed: {e}") from e

    if result.returncode != 0:
        detail = (result.stderr or "").strip() or f"exit status {result.returncode}"
        raise ExternalToolError(label, f"failed: {detail}")
    return result.stdout or ""
