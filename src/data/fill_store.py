"""
Persist and load exchange fills (SQLite). Timestamps stored as epoch ms.

Numeric fields are kept as the exchange's decimal strings.
"""

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from pairing_core.contracts import Fill

logger = logging.getLogger("fillpair.store")


def _epoch_ms(ts: datetime | int) -> int:
    if isinstance(ts, int):
        return ts
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return int(ts.timestamp() * 1000)


class FillStore:
    """SQLite-backed fill storage. One file per path."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _conn(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self._path), timeout=10.0)

    def _init_schema(self) -> None:
        with self._conn() as c:
            c.execute(
                """
                CREATE TABLE IF NOT EXISTS fills (
                    trade_id TEXT PRIMARY KEY,
                    order_id TEXT NOT NULL,
                    symbol TEXT NOT NULL,
                    side TEXT NOT NULL,
                    price TEXT NOT NULL,
                    size TEXT NOT NULL,
                    fee_amount TEXT NOT NULL,
                    fee_currency TEXT,
                    ts_ms INTEGER NOT NULL
                )
                """
            )
            c.execute("CREATE INDEX IF NOT EXISTS idx_fills_symbol_ts ON fills (symbol, ts_ms)")

    def write_fills(self, fills: Sequence[Fill]) -> int:
        """Upsert fills by trade_id. Returns the number of rows written."""
        with self._conn() as c:
            for f in fills:
                c.execute(
                    """
                    INSERT OR REPLACE INTO fills
                        (trade_id, order_id, symbol, side, price, size, fee_amount, fee_currency, ts_ms)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        f.trade_id,
                        f.order_id,
                        f.symbol,
                        f.side.value,
                        f.price,
                        f.size,
                        f.fee_amount,
                        f.fee_currency,
                        f.timestamp,
                    ),
                )
        logger.debug("Stored %d fills in %s", len(fills), self._path)
        return len(fills)

    def get_fills(
        self,
        symbol: str | None = None,
        *,
        since: datetime | int | None = None,
        until: datetime | int | None = None,
    ) -> list[Fill]:
        """Return fills in ascending time order, optionally for one symbol."""
        with self._conn() as c:
            q = (
                "SELECT trade_id, order_id, symbol, side, price, size, fee_amount, fee_currency, ts_ms "
                "FROM fills WHERE 1 = 1"
            )
            params: list = []
            if symbol is not None:
                q += " AND symbol = ?"
                params.append(symbol)
            if since is not None:
                q += " AND ts_ms >= ?"
                params.append(_epoch_ms(since))
            if until is not None:
                q += " AND ts_ms <= ?"
                params.append(_epoch_ms(until))
            q += " ORDER BY ts_ms ASC, trade_id ASC"
            rows = c.execute(q, params).fetchall()
        return [
            Fill(
                trade_id=trade_id,
                order_id=order_id,
                symbol=sym,
                side=side,
                price=price,
                size=size,
                timestamp=ts_ms,
                fee_amount=fee_amount,
                fee_currency=fee_currency,
            )
            for trade_id, order_id, sym, side, price, size, fee_amount, fee_currency, ts_ms in rows
        ]

    def symbols(self) -> list[str]:
        with self._conn() as c:
            rows = c.execute("SELECT DISTINCT symbol FROM fills ORDER BY symbol").fetchall()
        return [r[0] for r in rows]

    def count_fills(self, symbol: str | None = None) -> int:
        with self._conn() as c:
            if symbol is None:
                row = c.execute("SELECT COUNT(*) FROM fills").fetchone()
            else:
                row = c.execute("SELECT COUNT(*) FROM fills WHERE symbol = ?", (symbol,)).fetchone()
        return row[0] if row else 0
