# src/catalog_lib/config.py
"""Configuration loader with caching and basic validation."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from dotenv import load_dotenv

from .errors import MissingCredentialError

ROOT = Path(__file__).resolve().parents[2]
CONFIG_PATH = ROOT / "config" / "config.yaml"

# Required config structure for minimal operation
REQUIRED_KEYS: Dict[str, List[str]] = {
    "paths": ["data_dir", "backups_dir", "logs_dir", "prompts_dir"],
    "files": ["platforms", "companies"],
    "llm": ["model"],
    "pipeline": ["delay_ms"],
}


class ConfigError(ValueError):
    """Raised when required configuration values are missing."""


@lru_cache(maxsize=4)
def load_config(path: Optional[str] = None) -> Dict:
    """Load and cache the YAML config with basic validation.

    ``path`` defaults to ``config/config.yaml``; the cache is keyed on it.
    """
    config_path = Path(path or CONFIG_PATH)
    if not config_path.exists():
        raise FileNotFoundError(f"Missing config file: {config_path}")
    cfg = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    for section, keys in REQUIRED_KEYS.items():
        if section not in cfg:
            raise ConfigError(f"Missing required section '{section}' in {config_path}")
        missing = [k for k in keys if k not in (cfg.get(section) or {})]
        if missing:
            raise ConfigError(
                f"Missing required key(s) {missing} in section '{section}' of {config_path}"
            )
    return cfg


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings handed to every component."""

    root: Path
    data_dir: Path
    backups_dir: Path
    logs_dir: Path
    prompts_dir: Path
    files: Dict[str, str] = field(default_factory=dict)
    model: str = "gpt-4o"
    temperature: float = 0.3
    max_output_tokens: int = 800
    timeout_s: float = 60.0
    delay_ms: int = 1000
    checkpoint_every: int = 0
    categories_delay_ms: int = 1000
    categories_checkpoint_every: int = 10
    url_timeout_s: float = 5.0
    log_level: str = "INFO"

    def data_file(self, key: str) -> Path:
        """Return the data file configured under ``files.<key>``."""
        try:
            return self.data_dir / self.files[key]
        except KeyError:
            raise ConfigError(f"No file configured for '{key}' under 'files'") from None


def _resolve(root: Path, value: str) -> Path:
    p = Path(value)
    return p if p.is_absolute() else root / p


def load_settings(path: Optional[str] = None, root: Optional[Path] = None) -> Settings:
    """Build :class:`Settings` from the YAML config plus environment overrides.

    ``LLM_MODEL`` and ``LOG_LEVEL`` take precedence over config values; with no
    ``path``, ``$CATALOG_CONFIG`` is read on every call.
    """
    cfg = load_config(path or os.getenv("CATALOG_CONFIG") or None)
    base = Path(root) if root else ROOT
    paths = cfg["paths"]
    llm_cfg = cfg.get("llm") or {}
    pipe_cfg = cfg.get("pipeline") or {}
    val_cfg = cfg.get("validation") or {}
    return Settings(
        root=base,
        data_dir=_resolve(base, paths["data_dir"]),
        backups_dir=_resolve(base, paths["backups_dir"]),
        logs_dir=_resolve(base, paths["logs_dir"]),
        prompts_dir=_resolve(base, paths["prompts_dir"]),
        files=dict(cfg.get("files") or {}),
        model=os.getenv("LLM_MODEL") or llm_cfg["model"],
        temperature=float(llm_cfg.get("temperature", 0.3)),
        max_output_tokens=int(llm_cfg.get("max_output_tokens", 800)),
        timeout_s=float(llm_cfg.get("timeout_s", 60)),
        delay_ms=int(pipe_cfg["delay_ms"]),
        checkpoint_every=int(pipe_cfg.get("checkpoint_every", 0) or 0),
        categories_delay_ms=int(pipe_cfg.get("categories_delay_ms", pipe_cfg["delay_ms"])),
        categories_checkpoint_every=int(pipe_cfg.get("categories_checkpoint_every", 10) or 0),
        url_timeout_s=float(val_cfg.get("url_timeout_s", 5)),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


def require_api_key(env_var: str = "OPENAI_API_KEY") -> str:
    """Return the API key from the environment (or ``.env``); raise if unset."""
    load_dotenv()
    key = os.getenv(env_var)
    if not key:
        raise MissingCredentialError(f"{env_var} environment variable is not set")
    return key
