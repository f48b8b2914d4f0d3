"""Configuration loading utilities for the site search service."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from language_rules import DEFAULT_RULES_FILE

DEFAULT_SITE_URL = "https://sokaigelek.hu"
BACKENDS = ("files", "supabase")


@dataclass(frozen=True)
class AppConfig:
    """Application configuration loaded from YAML."""

    host: str = "127.0.0.1"
    port: int = 8000
    site_url: str = DEFAULT_SITE_URL
    backend: str = "files"
    data_dir: Path = Path("data")
    supabase_url: str | None = None
    supabase_key: str | None = None
    max_rows: int = 2000
    rules_file: Path = DEFAULT_RULES_FILE
    fuzzy_matching: bool = True


def _resolve(config_path: Path, value: str) -> Path:
    candidate = Path(value)
    if not candidate.is_absolute():
        candidate = (config_path.parent / candidate).resolve()
    return candidate


def _optional_string(raw: dict[str, Any], key: str, *env_names: str) -> str | None:
    value = raw.get(key)
    if value is None:
        for name in env_names:
            value = os.getenv(name)
            if value:
                break
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string")
    return value


def load_config(config_path: Path) -> AppConfig:
    """Load and validate configuration from a YAML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as file:
        raw: dict[str, Any] = yaml.safe_load(file) or {}

    host = raw.get("host", "127.0.0.1")
    port = raw.get("port", 8000)
    backend = raw.get("backend", "files")
    data_dir_raw = raw.get("data_dir", "data")
    max_rows = raw.get("max_rows", 2000)
    fuzzy_matching = raw.get("fuzzy_matching", True)

    if not isinstance(host, str) or not host:
        raise ValueError("'host' must be a non-empty string")
    if not isinstance(port, int) or isinstance(port, bool) or not (1 <= port <= 65535):
        raise ValueError("'port' must be an integer between 1 and 65535")
    if backend not in BACKENDS:
        raise ValueError(f"'backend' must be one of: {', '.join(BACKENDS)}")
    if not isinstance(data_dir_raw, str) or not data_dir_raw:
        raise ValueError("'data_dir' must be a non-empty string")
    if not isinstance(max_rows, int) or isinstance(max_rows, bool) or max_rows < 1:
        raise ValueError("'max_rows' must be a positive integer")
    if not isinstance(fuzzy_matching, bool):
        raise ValueError("'fuzzy_matching' must be true or false")

    site_url = _optional_string(raw, "site_url", "SITE_URL") or DEFAULT_SITE_URL
    rules_file_raw = raw.get("rules_file")
    if rules_file_raw is None:
        rules_file = DEFAULT_RULES_FILE
    elif isinstance(rules_file_raw, str) and rules_file_raw:
        rules_file = _resolve(config_path, rules_file_raw)
    else:
        raise ValueError("'rules_file' must be a non-empty string")

    return AppConfig(
        host=host,
        port=port,
        site_url=site_url.rstrip("/"),
        backend=backend,
        data_dir=_resolve(config_path, data_dir_raw),
        supabase_url=_optional_string(raw, "supabase_url", "SUPABASE_URL"),
        supabase_key=_optional_string(
            raw, "supabase_key", "SUPABASE_SERVICE_ROLE_KEY", "SUPABASE_ANON_KEY"
        ),
        max_rows=max_rows,
        rules_file=rules_file,
        fuzzy_matching=fuzzy_matching,
    )
