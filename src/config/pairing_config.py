"""
Pairing config loader: JSON file -> frozen dataclass, validated against JSON Schema.

Default values:      docs/config/pairing.default.json
Schema:              docs/config/pairing_config.schema.json

Per-symbol overrides: place a partial JSON file named ``pairing.{SYMBOL}.json``
next to the default config (e.g. ``docs/config/pairing.SHIBUSDT.json``). Only
the keys you want to override need to be present; they are deep-merged on top
of the base config before schema validation. Assets with very small unit
sizes usually need a tighter ``tolerance`` this way.

Usage:
    from config.pairing_config import load_pairing_config
    cfg = load_pairing_config()                        # loads default
    cfg = load_pairing_config(symbol="BTCUSDT")        # merges pairing.BTCUSDT.json if present
    cfg = load_pairing_config("my_overrides.json")     # loads custom file
    cfg.tolerance  # -> 0.001
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import jsonschema

logger = logging.getLogger("fillpair.config")

# ---------------------------------------------------------------------------
# Project root detection (walk up from this file to find pyproject.toml)
# ---------------------------------------------------------------------------


def _find_project_root() -> Path:
    """Walk up from this file looking for pyproject.toml.

    When running from source, finds the repo root. When installed as a
    package, pyproject.toml won't exist; fall back to CWD.
    """
    candidate = Path(__file__).resolve().parent
    for _ in range(10):
        if (candidate / "pyproject.toml").exists():
            return candidate
        parent = candidate.parent
        if parent == candidate:
            break
        candidate = parent
    return Path.cwd()


_PROJECT_ROOT = _find_project_root()

DEFAULT_CONFIG_PATH = _PROJECT_ROOT / "docs" / "config" / "pairing.default.json"
DEFAULT_SCHEMA_PATH = _PROJECT_ROOT / "docs" / "config" / "pairing_config.schema.json"

DEFAULT_TOLERANCE = 0.001


@dataclass(frozen=True)
class PairingConfig:
    """Engine parameters. Defaults match pairing.default.json."""

    version: str = "0.1"
    tolerance: float = DEFAULT_TOLERANCE
    quote_currencies: tuple[str, ...] = ("USDT",)
    display_timezone: str = "UTC"
    strict_symbols: bool = False

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.display_timezone)

    def is_quote_currency(self, currency: str | None) -> bool:
        if not currency:
            return False
        return currency.upper() in {c.upper() for c in self.quote_currencies}


# ---------------------------------------------------------------------------
# Deep merge for per-symbol overrides
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *overrides* into a copy of *base*.

    - Dict values are merged recursively (override keys win).
    - Non-dict values in overrides replace the base value.
    - Keys in base that are absent from overrides are preserved.
    """
    merged = dict(base)
    for key, val in overrides.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(val, dict):
            merged[key] = _deep_merge(merged[key], val)
        else:
            merged[key] = val
    return merged


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


class PairingConfigError(Exception):
    """Raised when pairing config loading or validation fails."""


def _validate_schema(data: dict[str, Any], schema_path: Path) -> None:
    """Validate *data* against the JSON Schema at *schema_path*."""
    if not schema_path.exists():
        raise PairingConfigError(f"Schema file not found: {schema_path}")
    with open(schema_path) as f:
        schema = json.load(f)
    try:
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as exc:
        raise PairingConfigError(f"Pairing config validation failed: {exc.message}") from exc


def _build_config(data: dict[str, Any]) -> PairingConfig:
    """Convert a raw dict (already validated) into the frozen dataclass."""
    tz_name = data.get("display_timezone", "UTC")
    try:
        ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise PairingConfigError(f"Unknown display_timezone: {tz_name}") from exc

    return PairingConfig(
        version=data["version"],
        tolerance=float(data["tolerance"]),
        quote_currencies=tuple(data.get("quote_currencies", ["USDT"])),
        display_timezone=tz_name,
        strict_symbols=bool(data.get("strict_symbols", False)),
    )


def load_pairing_config(
    config_path: str | Path | None = None,
    schema_path: str | Path | None = None,
    symbol: str | None = None,
) -> PairingConfig:
    """Load and validate pairing configuration.

    Parameters
    ----------
    config_path:
        Path to a pairing JSON config file. Defaults to ``docs/config/pairing.default.json``.
    schema_path:
        Path to the JSON Schema file. Defaults to ``docs/config/pairing_config.schema.json``.
    symbol:
        Optional instrument symbol. When provided, the loader looks for a
        per-symbol override file ``pairing.{SYMBOL}.json`` in the same
        directory as the base config and deep-merges it before validation.
        A missing override file is not an error.

    Raises
    ------
    PairingConfigError
        If the file is missing, unparseable, or fails schema validation.
    """
    cfg_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    sch_path = Path(schema_path) if schema_path else DEFAULT_SCHEMA_PATH

    if not cfg_path.exists():
        raise PairingConfigError(f"Pairing config file not found: {cfg_path}")

    try:
        with open(cfg_path) as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise PairingConfigError(f"Pairing config is not valid JSON: {exc}") from exc

    if symbol:
        override_path = cfg_path.parent / f"pairing.{symbol.upper()}.json"
        if override_path.exists():
            try:
                with open(override_path) as f:
                    overrides = json.load(f)
            except json.JSONDecodeError as exc:
                raise PairingConfigError(
                    f"Per-symbol config {override_path.name} is not valid JSON: {exc}"
                ) from exc
            data = _deep_merge(data, overrides)
            logger.info("Loaded per-symbol config: %s", override_path.name)
        else:
            logger.debug("No per-symbol config found at %s, using defaults", override_path)

    _validate_schema(data, sch_path)

    return _build_config(data)
