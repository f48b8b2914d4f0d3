from pathlib import Path

import pytest

from config_loader import DEFAULT_SITE_URL, load_config
from language_rules import DEFAULT_RULES_FILE


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch) -> None:
    for name in ("SITE_URL", "SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY", "SUPABASE_ANON_KEY"):
        monkeypatch.delenv(name, raising=False)


def test_load_config_success_with_relative_paths(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yml"
    config_file.write_text(
        """
host: 0.0.0.0
port: 9000
site_url: https://example.test/
data_dir: ./data
rules_file: ./rules/hu.yml
max_rows: 500
fuzzy_matching: false
""".strip(),
        encoding="utf-8",
    )

    cfg = load_config(config_file)

    assert cfg.host == "0.0.0.0"
    assert cfg.port == 9000
    assert cfg.site_url == "https://example.test"
    assert cfg.data_dir == (tmp_path / "data").resolve()
    assert cfg.rules_file == (tmp_path / "rules/hu.yml").resolve()
    assert cfg.max_rows == 500
    assert cfg.fuzzy_matching is False


def test_load_config_defaults(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yml"
    config_file.write_text("", encoding="utf-8")

    cfg = load_config(config_file)

    assert cfg.host == "127.0.0.1"
    assert cfg.port == 8000
    assert cfg.backend == "files"
    assert cfg.site_url == DEFAULT_SITE_URL
    assert cfg.rules_file == DEFAULT_RULES_FILE
    assert cfg.max_rows == 2000
    assert cfg.supabase_url is None


def test_load_config_reads_supabase_secrets_from_env(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "https://db.example.test")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
    config_file = tmp_path / "config.yml"
    config_file.write_text("backend: supabase", encoding="utf-8")

    cfg = load_config(config_file)

    assert cfg.backend == "supabase"
    assert cfg.supabase_url == "https://db.example.test"
    assert cfg.supabase_key == "anon"


def test_load_config_prefers_service_role_key(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
    config_file = tmp_path / "config.yml"
    config_file.write_text("backend: supabase", encoding="utf-8")

    assert load_config(config_file).supabase_key == "service"


def test_load_config_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yml")


def test_load_config_invalid_host_raises(tmp_path: Path) -> None:
    file = tmp_path / "config.yml"
    file.write_text("host: ''", encoding="utf-8")

    with pytest.raises(ValueError, match="host"):
        load_config(file)


def test_load_config_invalid_port_raises(tmp_path: Path) -> None:
    file = tmp_path / "config.yml"
    file.write_text("port: 99999", encoding="utf-8")

    with pytest.raises(ValueError, match="port"):
        load_config(file)


def test_load_config_invalid_backend_raises(tmp_path: Path) -> None:
    file = tmp_path / "config.yml"
    file.write_text("backend: mysql", encoding="utf-8")

    with pytest.raises(ValueError, match="backend"):
        load_config(file)


def test_load_config_invalid_max_rows_raises(tmp_path: Path) -> None:
    file = tmp_path / "config.yml"
    file.write_text("max_rows: 0", encoding="utf-8")

    with pytest.raises(ValueError, match="max_rows"):
        load_config(file)


def test_load_config_invalid_data_dir_raises(tmp_path: Path) -> None:
    file = tmp_path / "config.yml"
    file.write_text("data_dir: ''", encoding="utf-8")

    with pytest.raises(ValueError, match="data_dir"):
        load_config(file)
