from pathlib import Path

import pytest

from catalog_lib import config
from catalog_lib.config import ConfigError, load_config, load_settings, require_api_key
from catalog_lib.errors import MissingCredentialError

YAML = """
paths:
  data_dir: data
  backups_dir: backups
  logs_dir: logs
  prompts_dir: prompts
files:
  platforms: Platforms.csv
  companies: Companies.csv
llm:
  model: gpt-4o
pipeline:
  delay_ms: 250
"""


def _write(tmp_path: Path, text: str) -> str:
    p = tmp_path / "config.yaml"
    p.write_text(text, encoding="utf-8")
    return str(p)


def test_settings_resolve_against_root(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("LLM_MODEL", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    s = load_settings(_write(tmp_path, YAML), root=tmp_path)
    assert s.data_dir == tmp_path / "data"
    assert s.data_file("platforms") == tmp_path / "data" / "Platforms.csv"
    assert s.delay_ms == 250
    assert s.checkpoint_every == 0
    assert s.url_timeout_s == 5.0
    assert s.model == "gpt-4o"
    with pytest.raises(ConfigError):
        s.data_file("pricing")


def test_env_overrides(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("LLM_MODEL", "gpt-4o-mini")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    s = load_settings(_write(tmp_path, YAML), root=tmp_path)
    assert s.model == "gpt-4o-mini"
    assert s.log_level == "DEBUG"


def test_missing_section_and_key(tmp_path: Path):
    with pytest.raises(ConfigError, match="pipeline"):
        load_config(_write(tmp_path, YAML.replace("pipeline:\n  delay_ms: 250\n", "")))
    other = tmp_path / "other"
    other.mkdir()
    with pytest.raises(ConfigError, match="model"):
        load_config(_write(other, YAML.replace("  model: gpt-4o", "  temperature: 0.1")))


def test_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "absent.yaml"))


def test_repo_config_is_valid(monkeypatch):
    monkeypatch.delenv("CATALOG_CONFIG", raising=False)
    s = load_settings()
    assert s.files["categories"] == "AI Hierarchical Categorization System.csv"
    assert s.prompts_dir.name == "prompts"


def test_require_api_key(monkeypatch):
    monkeypatch.setattr(config, "load_dotenv", lambda: False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(MissingCredentialError):
        require_api_key()
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    assert require_api_key() == "sk-test"


def test_config_env_var_read_on_each_call(tmp_path: Path, monkeypatch):
    first = tmp_path / "a"
    second = tmp_path / "b"
    first.mkdir()
    second.mkdir()
    monkeypatch.setenv("CATALOG_CONFIG", _write(first, YAML))
    assert load_settings(root=tmp_path).delay_ms == 250

    monkeypatch.setenv("CATALOG_CONFIG", _write(second, YAML.replace("delay_ms: 250", "delay_ms: 40")))
    assert load_settings(root=tmp_path).delay_ms == 40
