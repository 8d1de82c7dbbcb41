"""
Config loader: YAML file -> frozen dataclass tree.

Secrets resolved from environment variables (FILLPAIR_WEBHOOK_URL).
Config file holds only non-secret values.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass(frozen=True)
class DataConfig:
    fill_store_path: str = "data/fills.db"


@dataclass(frozen=True)
class PairingSection:
    config_path: str | None = None
    schema_path: str | None = None


@dataclass(frozen=True)
class JournalConfig:
    path: str = "data/journal.jsonl"
    echo_stdout: bool = False


@dataclass(frozen=True)
class AlertingConfig:
    structured_logs: bool = True
    webhook_url: str = ""


@dataclass(frozen=True)
class AppConfig:
    symbols: tuple[str, ...] = field(default_factory=tuple)
    data: DataConfig = DataConfig()
    pairing: PairingSection = PairingSection()
    journal: JournalConfig = JournalConfig()
    alerting: AlertingConfig = AlertingConfig()


def load_config(path: str | Path = "config.yaml") -> AppConfig:
    """
    Load configuration from a YAML file.

    The alert webhook is resolved from the FILLPAIR_WEBHOOK_URL environment
    variable when set, overriding ``alerting.webhook_url``.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must be a YAML mapping, got {type(raw).__name__}")

    symbols_raw = raw.get("symbols", [])
    if isinstance(symbols_raw, str):
        symbols_raw = [symbols_raw]
    if not isinstance(symbols_raw, list):
        raise ValueError(f"'symbols' must be a list, got {type(symbols_raw).__name__}")

    data_raw = raw.get("data") or {}
    data_cfg = DataConfig(
        fill_store_path=str(data_raw.get("fill_store_path", "data/fills.db")),
    )

    p_raw = raw.get("pairing") or {}
    p_cfg = PairingSection(
        config_path=p_raw.get("config_path"),
        schema_path=p_raw.get("schema_path"),
    )

    j_raw = raw.get("journal") or {}
    j_cfg = JournalConfig(
        path=str(j_raw.get("path", "data/journal.jsonl")),
        echo_stdout=bool(j_raw.get("echo_stdout", False)),
    )

    a_raw = raw.get("alerting") or {}
    a_cfg = AlertingConfig(
        structured_logs=bool(a_raw.get("structured_logs", True)),
        webhook_url=os.environ.get("FILLPAIR_WEBHOOK_URL", str(a_raw.get("webhook_url", ""))),
    )

    return AppConfig(
        symbols=tuple(str(s).upper() for s in symbols_raw),
        data=data_cfg,
        pairing=p_cfg,
        journal=j_cfg,
        alerting=a_cfg,
    )
