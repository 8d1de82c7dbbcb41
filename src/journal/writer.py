"""
Structured journal: append-only JSON lines, one record per computed position or import.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from pairing_core.contracts import Position


def _serialize(obj: Any) -> Any:
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {k: _serialize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_serialize(x) for x in obj]
    if hasattr(obj, "__dict__") and not isinstance(obj, type):
        return {k: _serialize(v) for k, v in vars(obj).items() if not k.startswith("_")}
    return obj


class JournalWriter:
    """Append-only journal. Each line is a JSON object with event type and payload."""

    def __init__(self, path: str | Path, *, echo_stdout: bool = False) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._echo = echo_stdout

    def _write(self, event_type: str, payload: dict) -> None:
        record = {"ts_utc": datetime.now(timezone.utc).isoformat(), "event": event_type, **payload}
        line = json.dumps(_serialize(record)) + "\n"
        with open(self._path, "a") as f:
            f.write(line)
        if self._echo:
            print(line.rstrip())

    def position(self, symbol: str, position: Position, **extra: Any) -> None:
        self._write(
            "position",
            {
                "symbol": symbol,
                "status": "closed" if position.closed else "pending",
                "date_range": position.date_range,
                "opened_at_ms": position.opened_at,
                "closed_at_ms": position.closed_at,
                "buy_trade_ids": [f.trade_id for f in position.buys],
                "sell_trade_ids": [f.trade_id for f in position.sells],
                "total_buy_size": position.total_buy_size,
                "total_buy_cost": position.total_buy_cost,
                "avg_buy_price": position.avg_buy_price,
                "total_sell_size": position.total_sell_size,
                "total_sell_revenue": position.total_sell_revenue,
                "avg_sell_price": position.avg_sell_price,
                "pnl": position.pnl,
                "pnl_percent": position.pnl_percent,
                **extra,
            },
        )

    def fill_import(self, source: str, count: int, symbols: list[str], **extra: Any) -> None:
        self._write("fill_import", {"source": source, "count": count, "symbols": symbols, **extra})
