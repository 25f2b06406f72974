"""Tests for tender.core.config."""

from pathlib import Path

import pytest
import yaml

from tender.core.config import TenderConfig, load_config
from tender.core.config.loader import find_config_file
from tender.core.errors import TenderError
from tender.core.tenders.types import WORKFLOW_DIR


def test_defaults():
    cfg = TenderConfig()
    assert cfg.storage.workflow_dir == WORKFLOW_DIR
    assert cfg.tools.agent_cli == "opencode"
    assert cfg.tools.dispatch_cli == "gh"
    assert cfg.tools.timeout_s == 10.0
    assert cfg.menu.raw_idle_timeout_s == 6.0
    assert cfg.menu.panel_width == 86
    assert cfg.logging.level == "WARNING"


def test_from_dict():
    cfg = TenderConfig(tools={"dispatch_cli": "/opt/gh"}, menu={"raw_idle_timeout_s": 30})
    assert cfg.tools.dispatch_cli == "/opt/gh"
    assert cfg.menu.raw_idle_timeout_s == 30.0


def test_load_yaml(tmp_path):
    f = tmp_path / "tender.yaml"
    f.write_text(yaml.dump({"storage": {"workflow_dir": "ci/workflows"}}))
    cfg = load_config(f)
    assert cfg.storage.workflow_dir == "ci/workflows"


def test_load_missing(tmp_path):
    cfg = load_config(tmp_path / "nope.yaml")
    assert cfg.tools.agent_cli == "opencode"


def test_config_env_path(tmp_path, monkeypatch):
    """TENDER_CONFIG points at the YAML file when no path is given."""
    f = tmp_path / "custom.yaml"
    f.write_text(yaml.dump({"logging": {"level": "DEBUG"}}))
    monkeypatch.setenv("TENDER_CONFIG", str(f))
    assert load_config().logging.level == "DEBUG"


def test_env_overrides_yaml(tmp_path, monkeypatch):
    """Env vars beat YAML values."""
    f = tmp_path / "tender.yaml"
    f.write_text(yaml.dump({"tools": {"agent_cli": "from-yaml"}}))
    monkeypatch.setenv("TENDER_TOOLS__AGENT_CLI", "from-env")
    assert load_config(f).tools.agent_cli == "from-env"


def test_default_file_in_cwd(tmp_path, monkeypatch):
    """./tender.yaml is picked up when present."""
    (tmp_path / "tender.yaml").write_text(yaml.dump({"menu": {"panel_width": 100}}))
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("TENDER_CONFIG", raising=False)
    assert load_config().menu.panel_width == 100


def test_empty_file_uses_defaults(tmp_path):
    f = tmp_path / "tender.yaml"
    f.write_text("")
    assert load_config(f).storage.workflow_dir == WORKFLOW_DIR


def test_non_mapping_file_is_rejected(tmp_path):
    f = tmp_path / "tender.yaml"
    f.write_text("- just\n- a list\n")
    with pytest.raises(TenderError, match="must contain a mapping"):
        load_config(f)


def test_malformed_yaml_is_rejected(tmp_path):
    f = tmp_path / "tender.yaml"
    f.write_text("storage: [unclosed\n")
    with pytest.raises(TenderError, match="invalid config file"):
        load_config(f)


def test_find_config_file_skips_missing_default(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("TENDER_CONFIG", raising=False)
    assert find_config_file() is None
    assert find_config_file("x.yaml") == Path("x.yaml")
