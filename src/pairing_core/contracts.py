"""
Data contracts for pairing-core: Fill, Side, Position.

pairing-core consumes Fill records (exchange trade history for one symbol)
and produces Position records (closed or pending round trips).
No I/O; these are plain dataclasses.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum


class Side(str, Enum):
    """Direction of a single executed fill."""

    BUY = "buy"
    SELL = "sell"


def to_float(value: object) -> float:
    """Parse a decimal string from the exchange boundary.

    Missing, empty, or unparsable values become 0.0 so aggregation never
    raises on malformed numeric input. Non-finite values are treated the same.
    """
    if value is None:
        return 0.0
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(parsed):
        return 0.0
    return parsed


@dataclass(frozen=True)
class Fill:
    """One executed trade leg as reported by the exchange.

    Numeric fields stay as decimal strings; the engine parses them.
    ``fee_currency`` may be None or empty even when a fee was charged; any
    fee outside the quote currencies is treated as a base-asset fee.
    """

    trade_id: str
    order_id: str
    symbol: str
    side: Side
    price: str
    size: str
    timestamp: int  # epoch ms
    fee_amount: str = "0"
    fee_currency: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.side, Side):
            try:
                side = Side(str(self.side).strip().lower())
            except ValueError:
                raise ValueError(f"Unknown fill side {self.side!r} for trade {self.trade_id}") from None
            object.__setattr__(self, "side", side)

    @property
    def size_value(self) -> float:
        return to_float(self.size)

    @property
    def price_value(self) -> float:
        return to_float(self.price)

    @property
    def fee_value(self) -> float:
        """Absolute fee amount; exchanges report fees with either sign."""
        return abs(to_float(self.fee_amount))

    @property
    def has_fee(self) -> bool:
        return self.fee_value != 0


@dataclass(frozen=True)
class Position:
    """A group of fills forming one open-to-close cycle (a.k.a. pair).

    Aggregates are None when they cannot be computed from the fills, e.g.
    ``pnl`` on a one-sided pending position. ``closed`` is False only for
    the trailing group left over at the end of the fill stream.
    """

    date_range: str
    buys: tuple[Fill, ...]
    sells: tuple[Fill, ...]
    closed: bool
    pnl: float | None = None
    pnl_percent: float | None = None
    avg_buy_price: float | None = None
    total_buy_size: float | None = None
    total_buy_cost: float | None = None
    avg_sell_price: float | None = None
    total_sell_size: float | None = None
    total_sell_revenue: float | None = None
    symbol: str = field(default="")

    @property
    def fills(self) -> list[Fill]:
        """All fills of the position in chronological order."""
        return sorted((*self.buys, *self.sells), key=lambda f: (f.timestamp, f.trade_id))

    @property
    def opened_at(self) -> int:
        return min(f.timestamp for f in (*self.buys, *self.sells))

    @property
    def closed_at(self) -> int:
        return max(f.timestamp for f in (*self.buys, *self.sells))

    @property
    def is_pending(self) -> bool:
        return not self.closed

    @property
    def fill_count(self) -> int:
        return len(self.buys) + len(self.sells)
