"""Tests for pairing config loader: JSON loading, schema validation, per-symbol overrides."""

import json
from pathlib import Path

import pytest

from config.pairing_config import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_SCHEMA_PATH,
    PairingConfig,
    PairingConfigError,
    _deep_merge,
    load_pairing_config,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _default_raw() -> dict:
    """Return the canonical default config as a dict for mutation in tests."""
    with open(DEFAULT_CONFIG_PATH) as f:
        return json.load(f)


def _write_json(data: dict, dir_path: Path, name: str = "pairing.test.json") -> Path:
    p = dir_path / name
    p.write_text(json.dumps(data))
    return p


# ---------------------------------------------------------------------------
# Loading the default config
# ---------------------------------------------------------------------------


class TestLoadDefault:
    """Load docs/config/pairing.default.json and verify the dataclass."""

    def test_loads_successfully(self) -> None:
        cfg = load_pairing_config()
        assert isinstance(cfg, PairingConfig)

    def test_matches_dataclass_defaults(self) -> None:
        assert load_pairing_config() == PairingConfig()

    def test_values(self) -> None:
        cfg = load_pairing_config()
        assert cfg.version == "0.1"
        assert cfg.tolerance == 0.001
        assert cfg.quote_currencies == ("USDT",)
        assert cfg.display_timezone == "UTC"
        assert cfg.strict_symbols is False

    def test_frozen(self) -> None:
        cfg = load_pairing_config()
        with pytest.raises(AttributeError):
            cfg.tolerance = 1.0  # type: ignore[misc]


class TestQuoteCurrency:
    def test_case_insensitive(self) -> None:
        cfg = PairingConfig(quote_currencies=("USDT", "usdc"))
        assert cfg.is_quote_currency("usdt")
        assert cfg.is_quote_currency("USDC")
        assert not cfg.is_quote_currency("BTC")

    def test_empty_is_not_quote(self) -> None:
        cfg = PairingConfig()
        assert not cfg.is_quote_currency(None)
        assert not cfg.is_quote_currency("")


# ---------------------------------------------------------------------------
# Custom values
# ---------------------------------------------------------------------------


class TestCustomConfig:
    def test_custom_tolerance_and_quotes(self, tmp_path: Path) -> None:
        data = _default_raw()
        data["tolerance"] = 1e-8
        data["quote_currencies"] = ["USDT", "USDC"]
        cfg = load_pairing_config(_write_json(data, tmp_path), DEFAULT_SCHEMA_PATH)
        assert cfg.tolerance == 1e-8
        assert cfg.quote_currencies == ("USDT", "USDC")

    def test_display_timezone(self, tmp_path: Path) -> None:
        data = _default_raw()
        data["display_timezone"] = "Asia/Tokyo"
        cfg = load_pairing_config(_write_json(data, tmp_path), DEFAULT_SCHEMA_PATH)
        assert cfg.tz.key == "Asia/Tokyo"

    def test_optional_keys_absent(self, tmp_path: Path) -> None:
        cfg = load_pairing_config(
            _write_json({"version": "0.1", "tolerance": 0.5}, tmp_path), DEFAULT_SCHEMA_PATH
        )
        assert cfg.tolerance == 0.5
        assert cfg.quote_currencies == ("USDT",)
        assert cfg.display_timezone == "UTC"


# ---------------------------------------------------------------------------
# Validation failures
# ---------------------------------------------------------------------------


class TestValidation:
    def test_missing_required_key(self, tmp_path: Path) -> None:
        data = _default_raw()
        del data["tolerance"]
        with pytest.raises(PairingConfigError, match="validation failed"):
            load_pairing_config(_write_json(data, tmp_path), DEFAULT_SCHEMA_PATH)

    def test_zero_tolerance(self, tmp_path: Path) -> None:
        data = _default_raw()
        data["tolerance"] = 0
        with pytest.raises(PairingConfigError, match="validation failed"):
            load_pairing_config(_write_json(data, tmp_path), DEFAULT_SCHEMA_PATH)

    def test_unknown_key(self, tmp_path: Path) -> None:
        data = _default_raw()
        data["fifo"] = True
        with pytest.raises(PairingConfigError, match="validation failed"):
            load_pairing_config(_write_json(data, tmp_path), DEFAULT_SCHEMA_PATH)

    def test_unknown_timezone(self, tmp_path: Path) -> None:
        data = _default_raw()
        data["display_timezone"] = "Mars/Olympus_Mons"
        with pytest.raises(PairingConfigError, match="display_timezone"):
            load_pairing_config(_write_json(data, tmp_path), DEFAULT_SCHEMA_PATH)

    def test_invalid_json(self, tmp_path: Path) -> None:
        p = tmp_path / "broken.json"
        p.write_text("{not json")
        with pytest.raises(PairingConfigError, match="not valid JSON"):
            load_pairing_config(p, DEFAULT_SCHEMA_PATH)

    def test_missing_config_file(self, tmp_path: Path) -> None:
        with pytest.raises(PairingConfigError, match="not found"):
            load_pairing_config(tmp_path / "nope.json")

    def test_missing_schema_file(self, tmp_path: Path) -> None:
        p = _write_json(_default_raw(), tmp_path)
        with pytest.raises(PairingConfigError, match="Schema file not found"):
            load_pairing_config(p, tmp_path / "nope.schema.json")


# ---------------------------------------------------------------------------
# Per-symbol overrides
# ---------------------------------------------------------------------------


class TestPerSymbol:
    def test_override_merged(self, tmp_path: Path) -> None:
        base = _write_json(_default_raw(), tmp_path, "pairing.default.json")
        _write_json({"tolerance": 1.0}, tmp_path, "pairing.SHIBUSDT.json")
        cfg = load_pairing_config(base, DEFAULT_SCHEMA_PATH, symbol="shibusdt")
        assert cfg.tolerance == 1.0
        assert cfg.quote_currencies == ("USDT",)

    def test_no_override_file_uses_base(self, tmp_path: Path) -> None:
        base = _write_json(_default_raw(), tmp_path, "pairing.default.json")
        cfg = load_pairing_config(base, DEFAULT_SCHEMA_PATH, symbol="BTCUSDT")
        assert cfg.tolerance == 0.001

    def test_override_validated(self, tmp_path: Path) -> None:
        base = _write_json(_default_raw(), tmp_path, "pairing.default.json")
        _write_json({"tolerance": -1}, tmp_path, "pairing.BTCUSDT.json")
        with pytest.raises(PairingConfigError, match="validation failed"):
            load_pairing_config(base, DEFAULT_SCHEMA_PATH, symbol="BTCUSDT")

    def test_override_invalid_json(self, tmp_path: Path) -> None:
        base = _write_json(_default_raw(), tmp_path, "pairing.default.json")
        (tmp_path / "pairing.BTCUSDT.json").write_text("[")
        with pytest.raises(PairingConfigError, match="pairing.BTCUSDT.json"):
            load_pairing_config(base, DEFAULT_SCHEMA_PATH, symbol="BTCUSDT")


class TestDeepMerge:
    def test_nested(self) -> None:
        base = {"a": {"x": 1, "y": 2}, "b": 1}
        merged = _deep_merge(base, {"a": {"y": 3}, "c": 4})
        assert merged == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}
        assert base == {"a": {"x": 1, "y": 2}, "b": 1}

    def test_scalar_replaces_dict(self) -> None:
        assert _deep_merge({"a": {"x": 1}}, {"a": 5}) == {"a": 5}
