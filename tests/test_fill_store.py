"""Tests for the SQLite fill store."""

from datetime import datetime, timezone
from pathlib import Path

from data.fill_store import FillStore
from pairing_core.contracts import Fill


def _fill(trade_id: str, symbol: str, ts: int, side: str = "buy") -> Fill:
    return Fill(trade_id, f"o{trade_id}", symbol, side, "100", "1", ts, "0.1", "USDT")


def test_write_and_read_back(tmp_path: Path, cross_day_fills) -> None:
    store = FillStore(tmp_path / "fills.db")
    assert store.write_fills(cross_day_fills) == 3
    assert store.get_fills("BTCUSDT") == cross_day_fills


def test_upsert_by_trade_id(tmp_path: Path) -> None:
    store = FillStore(tmp_path / "fills.db")
    store.write_fills([_fill("1", "BTCUSDT", 1000)])
    store.write_fills([_fill("1", "BTCUSDT", 1000), _fill("2", "BTCUSDT", 2000)])
    assert store.count_fills() == 2


def test_ordering_and_tie_break(tmp_path: Path) -> None:
    store = FillStore(tmp_path / "fills.db")
    store.write_fills([_fill("b", "BTCUSDT", 2000), _fill("c", "BTCUSDT", 1000), _fill("a", "BTCUSDT", 2000)])
    assert [f.trade_id for f in store.get_fills()] == ["c", "a", "b"]


def test_symbols_and_counts(tmp_path: Path) -> None:
    store = FillStore(tmp_path / "sub" / "fills.db")
    store.write_fills([_fill("1", "ETHUSDT", 1), _fill("2", "BTCUSDT", 2), _fill("3", "BTCUSDT", 3)])
    assert store.symbols() == ["BTCUSDT", "ETHUSDT"]
    assert store.count_fills("BTCUSDT") == 2
    assert store.count_fills("SOLUSDT") == 0
    assert [f.trade_id for f in store.get_fills("ETHUSDT")] == ["1"]


def test_time_window(tmp_path: Path) -> None:
    store = FillStore(tmp_path / "fills.db")
    t0 = int(datetime(2024, 12, 5, tzinfo=timezone.utc).timestamp() * 1000)
    store.write_fills([_fill(str(i), "BTCUSDT", t0 + i * 3_600_000) for i in range(5)])
    since = datetime(2024, 12, 5, 1, tzinfo=timezone.utc)
    got = store.get_fills("BTCUSDT", since=since, until=t0 + 3 * 3_600_000)
    assert [f.trade_id for f in got] == ["1", "2", "3"]


def test_empty_store(tmp_path: Path) -> None:
    store = FillStore(tmp_path / "fills.db")
    assert store.get_fills() == []
    assert store.symbols() == []
    assert store.count_fills() == 0
