"""Find and read tender.yaml; TenderConfig layers env and .env on top."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from tender.core.config.schema import TenderConfig
from tender.core.errors import TenderError

CONFIG_ENV = "TENDER_CONFIG"
DEFAULT_CONFIG_FILE = "tender.yaml"


def load_config(config_path: str | Path | None = None) -> TenderConfig:
    """Build the effective configuration.

    The file is the first of: ``config_path``, ``$TENDER_CONFIG``,
    ``./tender.yaml``. A named file that does not exist reads as empty, so
    defaults apply. Env vars and ``.env`` still override whatever it sets.
    """
    path = find_config_file(config_path)
    data = read_config_file(path) if path else {}
    if path:
        logger.debug(f"Config file: {path} ({len(data)} top-level keys)")
    return TenderConfig(**data)


def find_config_file(config_path: str | Path | None = None) -> Path | None:
    for candidate in (config_path, os.environ.get(CONFIG_ENV)):
        if candidate:
            return Path(candidate)
    default = Path(DEFAULT_CONFIG_FILE)
    return default if default.is_file() else None


def read_config_file(path: Path) -> dict[str, Any]:
    """Top-level YAML mapping of ``path``; ``{}`` when missing or empty."""
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise TenderError(f"invalid config file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TenderError(f"config file {path} must contain a mapping")
    return data
