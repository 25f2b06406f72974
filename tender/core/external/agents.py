"""OpenCode agent discovery via ``opencode agent list``."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from loguru import logger

from tender.core.errors import ExternalToolError, TenderValidationError
from tender.core.external.process import DEFAULT_TIMEOUT_S, run_tool
from tender.core.tenders.types import is_system_agent

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")
_AGENT_NAME_RE = re.compile(r"^[A-Za-z0-9._-]+$")

_BANNER_PREFIXES = (
    "opencode agent list",
    "list all available agents",
    "options:",
    "error ",
    "error:",
)
_HEADER_WORDS = {"name", "agent"}
_NAME_KEYS = ("name", "agent", "id")
_LIST_KEYS = ("agents", "items", "data")

LABEL = "opencode agent list"


def discover_primary_agents(
    root: str | Path,
    binary: str = "opencode",
    timeout: float = DEFAULT_TIMEOUT_S,
) -> list[str]:
    """Custom primary agents known to OpenCode in ``root``, sorted.

    Fails instead of returning an empty list when the CLI is missing,
    errors out, or lists nothing usable.
    """
    output = run_tool(LABEL, [binary, "agent", "list"], cwd=root, timeout=timeout)
    agents = parse_agent_list(output)
    if not agents:
        raise ExternalToolError(LABEL, "returned no usable agents")
    logger.debug(f"Discovered agents: {agents}")
    return agents


def require_custom_agent(
    root: str | Path,
    name: str,
    binary: str = "opencode",
    timeout: float = DEFAULT_TIMEOUT_S,
) -> None:
    """Check that ``name`` is a discovered, non-reserved primary agent."""
    agent = name.strip()
    if not agent:
        return
    if is_system_agent(agent):
        raise TenderValidationError(f'agent "{agent}" is reserved; choose a custom agent')

    try:
        agents = discover_primary_agents(root, binary=binary, timeout=timeout)
    except ExternalToolError as e:
        raise ExternalToolError("unable to discover custom agents:", str(e)) from e
    if not any(a.lower() == agent.lower() for a in agents):
        raise TenderValidationError(f'agent "{agent}" is not a discovered custom primary agent')


def parse_agent_list(output: str) -> list[str]:
    """Extract primary agent names from CLI text or JSON output."""
    text = _ANSI_RE.sub("", output).strip()
    if not text:
        return []

    names = _parse_json(text) if text.startswith(("[", "{")) else None
    if names is None:
        names = _parse_lines(text)

    return sorted(n for n in names if not is_system_agent(n))


def _parse_lines(text: str) -> set[str]:
    names: set[str] = set()
    for raw in text.split("\n"):
        line = raw.strip()
        if not line:
            continue
        if line.lower().startswith(_BANNER_PREFIXES):
            continue

        fields = line.split()
        first = fields[0]
        if first.lower() in _HEADER_WORDS:
            continue
        if not _AGENT_NAME_RE.match(first):
            continue
        if len(fields) > 1 and not _is_primary(fields[1]):
            continue
        names.add(first)
    return names


def _parse_json(text: str) -> set[str] | None:
    """Names from a JSON listing; None only when the text is not JSON."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None

    items: list[Any] = []
    if isinstance(data, list):
        items = data
    elif isinstance(data, dict):
        for key in _LIST_KEYS:
            value = data.get(key)
            if isinstance(value, list):
                items.extend(value)

    names: set[str] = set()
    for item in items:
        name = _json_item_name(item)
        if name:
            names.add(name)
    return names


def _json_item_name(item: Any) -> str | None:
    if isinstance(item, str):
        name = item.strip()
        return name if _AGENT_NAME_RE.match(name) else None
    if not isinstance(item, dict):
        return None

    mode = item.get("mode")
    if isinstance(mode, str) and not _is_primary(mode):
        return None
    for key in _NAME_KEYS:
        value = item.get(key)
        if isinstance(value, str) and _AGENT_NAME_RE.match(value.strip()):
            return value.strip()
    return None


def _is_primary(tag: str) -> bool:
    tag = tag.strip().strip("()").strip().lower()
    return tag in ("", "primary")
