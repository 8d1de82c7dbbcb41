"""
pairing-core: pure trade pairing and realized PnL engine.

No I/O, no network, no side effects. Consumes exchange fills for one
symbol, produces round-trip Positions. Fully deterministic and unit-testable.
"""

from pairing_core.contracts import Fill, Position, Side
from pairing_core.dates import day_of_month, is_moved_order
from pairing_core.errors import FillParseError, MixedSymbolError, PairingError
from pairing_core.pairing import (
    TradePairer,
    compute_position,
    pair_trades,
    pair_trades_by_symbol,
)

__all__ = [
    "day_of_month",
    "compute_position",
    "Fill",
    "FillParseError",
    "is_moved_order",
    "MixedSymbolError",
    "pair_trades",
    "pair_trades_by_symbol",
    "PairingError",
    "Position",
    "Side",
    "TradePairer",
]
