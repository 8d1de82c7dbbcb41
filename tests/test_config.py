"""Tests for config loader: YAML parsing, env var resolution, error cases."""

from pathlib import Path

import pytest

from config import AppConfig, load_config


def _write_yaml(path: Path, content: str) -> Path:
    path.write_text(content)
    return path


def test_load_config_basic(tmp_path: Path) -> None:
    path = _write_yaml(
        tmp_path / "config.yaml",
        """
symbols:
  - btcusdt
  - ETHUSDT
data:
  fill_store_path: test_fills.db
pairing:
  config_path: my_pairing.json
journal:
  path: test_journal.jsonl
  echo_stdout: true
alerting:
  structured_logs: false
""",
    )
    cfg = load_config(path)
    assert cfg.symbols == ("BTCUSDT", "ETHUSDT")
    assert cfg.data.fill_store_path == "test_fills.db"
    assert cfg.pairing.config_path == "my_pairing.json"
    assert cfg.pairing.schema_path is None
    assert cfg.journal.path == "test_journal.jsonl"
    assert cfg.journal.echo_stdout is True
    assert cfg.alerting.structured_logs is False


def test_load_config_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FILLPAIR_WEBHOOK_URL", raising=False)
    cfg = load_config(_write_yaml(tmp_path / "config.yaml", ""))
    assert cfg == AppConfig()
    assert cfg.data.fill_store_path == "data/fills.db"
    assert cfg.journal.path == "data/journal.jsonl"


def test_single_symbol_string(tmp_path: Path) -> None:
    cfg = load_config(_write_yaml(tmp_path / "config.yaml", "symbols: solusdt\n"))
    assert cfg.symbols == ("SOLUSDT",)


def test_load_config_env_webhook(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write_yaml(tmp_path / "config.yaml", "alerting:\n  webhook_url: http://from-file\n")
    assert load_config(path).alerting.webhook_url == "http://from-file"
    monkeypatch.setenv("FILLPAIR_WEBHOOK_URL", "http://from-env")
    assert load_config(path).alerting.webhook_url == "http://from-env"


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_load_config_not_a_mapping(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="mapping"):
        load_config(_write_yaml(tmp_path / "config.yaml", "- a\n- b\n"))


def test_load_config_bad_symbols(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="symbols"):
        load_config(_write_yaml(tmp_path / "config.yaml", "symbols:\n  a: 1\n"))
