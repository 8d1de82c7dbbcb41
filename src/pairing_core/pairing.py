"""
Trade pairing: raw fills -> round-trip positions with realized PnL.

Algorithm
---------
1. Copy the fills and sort ascending by (timestamp, trade_id). The trade_id
   tie-break keeps same-millisecond fills in a deterministic order, which
   matters because fee and position math is order-dependent.
2. Walk the fills, tracking a signed net position (buys add size, sells
   subtract it) and the buy/sell legs seen since the last close.
3. When |net| drops below the configured tolerance and both a buy and a sell
   are buffered, the cycle is closed: emit a Position and reset.
4. Whatever is left at the end becomes one pending Position.
5. Positions are returned most recent first.

Pure function; no I/O, no module-level state, inputs are never mutated.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable, Iterable, Sequence

from config.pairing_config import PairingConfig
from pairing_core.contracts import Fill, Position, Side
from pairing_core.dates import day_of_month, format_date_range, is_moved_order
from pairing_core.errors import MixedSymbolError

logger = logging.getLogger("fillpair.pairing")

_DEFAULT_CONFIG = PairingConfig()


def sort_fills(fills: Iterable[Fill]) -> list[Fill]:
    """Chronological copy of *fills*; ties ordered by trade_id."""
    return sorted(fills, key=lambda f: (f.timestamp, f.trade_id))


def _check_symbols(fills: Sequence[Fill], config: PairingConfig) -> None:
    symbols = sorted({f.symbol for f in fills})
    if len(symbols) <= 1:
        return
    if config.strict_symbols:
        raise MixedSymbolError(symbols)
    logger.warning("Pairing fills from %d symbols together: %s", len(symbols), ", ".join(symbols))


def pair_trades(fills: Iterable[Fill], config: PairingConfig | None = None) -> list[Position]:
    """Group fills for one symbol into positions, newest first.

    Every input fill ends up in exactly one returned position. Empty input
    returns an empty list.
    """
    cfg = config or _DEFAULT_CONFIG
    ordered = sort_fills(fills)
    _check_symbols(ordered, cfg)

    positions: list[Position] = []
    current_buys: list[Fill] = []
    current_sells: list[Fill] = []
    net_position = 0.0

    for fill in ordered:
        if fill.side is Side.BUY:
            current_buys.append(fill)
            net_position += fill.size_value
        else:
            current_sells.append(fill)
            net_position -= fill.size_value

        if abs(net_position) < cfg.tolerance and current_buys and current_sells:
            positions.append(compute_position(current_buys, current_sells, cfg, closed=True))
            current_buys = []
            current_sells = []
            net_position = 0.0

    if current_buys or current_sells:
        positions.append(compute_position(current_buys, current_sells, cfg, closed=False))

    logger.debug("Paired %d fills into %d positions", len(ordered), len(positions))
    positions.reverse()
    return positions


def compute_position(
    buys: Sequence[Fill],
    sells: Sequence[Fill],
    config: PairingConfig | None = None,
    *,
    closed: bool = True,
) -> Position:
    """Aggregate one group of buy and sell legs into a Position.

    Buy side: a fee in the base asset shrinks the size actually received,
    a fee in the quote currency is added to cost. A fee with any other
    currency, or none reported, is a base-asset fee. Sell side: reported size
    stays gross; fees are taken out of revenue, base-asset fees valued at the
    fill's own price. PnL compares revenue against the average buy cost of
    the matched size.
    """
    cfg = config or _DEFAULT_CONFIG
    legs = [*buys, *sells]
    if not legs:
        raise ValueError("A position needs at least one fill")

    date_range = format_date_range(
        min(f.timestamp for f in legs),
        max(f.timestamp for f in legs),
        cfg.tz,
    )

    # Buys
    total_buy_size = 0.0
    total_buy_cost = 0.0
    for buy in buys:
        size = buy.size_value
        price = buy.price_value
        effective_size = size
        quote_fee = buy.has_fee and cfg.is_quote_currency(buy.fee_currency)
        if buy.has_fee and not quote_fee:
            effective_size = size - buy.fee_value
        total_buy_size += effective_size
        total_buy_cost += size * price
        if quote_fee:
            total_buy_cost += buy.fee_value
    avg_buy_price = total_buy_cost / total_buy_size if total_buy_size > 0 else None

    # Sells
    total_sell_size = 0.0
    total_sell_revenue = 0.0
    for sell in sells:
        size = sell.size_value
        price = sell.price_value
        total_sell_size += size
        total_sell_revenue += size * price
        if sell.has_fee:
            if cfg.is_quote_currency(sell.fee_currency):
                total_sell_revenue -= sell.fee_value
            else:
                total_sell_revenue -= sell.fee_value * price
    avg_sell_price = total_sell_revenue / total_sell_size if total_sell_size > 0 else None

    pnl: float | None = None
    pnl_percent: float | None = None
    if total_buy_size > 0 and total_sell_size > 0 and avg_buy_price is not None:
        matched_size = min(total_buy_size, total_sell_size)
        cost_basis = matched_size * avg_buy_price
        pnl = total_sell_revenue - cost_basis
        # zero-priced buys leave no basis to take a percentage of
        pnl_percent = pnl / cost_basis * 100 if cost_basis != 0 else None

    return Position(
        date_range=date_range,
        buys=tuple(buys),
        sells=tuple(sells),
        closed=closed,
        pnl=pnl,
        pnl_percent=pnl_percent,
        avg_buy_price=avg_buy_price,
        total_buy_size=total_buy_size or None,
        total_buy_cost=total_buy_cost or None,
        avg_sell_price=avg_sell_price,
        total_sell_size=total_sell_size or None,
        total_sell_revenue=total_sell_revenue or None,
        symbol=legs[0].symbol,
    )


def pair_trades_by_symbol(
    fills: Iterable[Fill],
    config_for: Callable[[str], PairingConfig] | None = None,
) -> dict[str, list[Position]]:
    """Split fills by symbol and pair each instrument on its own.

    *config_for* maps a symbol to its config (e.g. per-symbol tolerance);
    the defaults are used when it is omitted. Keys come back sorted.
    """
    grouped: dict[str, list[Fill]] = defaultdict(list)
    for fill in fills:
        grouped[fill.symbol].append(fill)

    result: dict[str, list[Position]] = {}
    for symbol in sorted(grouped):
        cfg = config_for(symbol) if config_for else None
        result[symbol] = pair_trades(grouped[symbol], cfg)
    return result


class TradePairer:
    """Pairing entry points bound to one PairingConfig.

    Holds no state besides the config, so one instance can serve any
    number of independent calls.
    """

    def __init__(self, config: PairingConfig | None = None) -> None:
        self.config = config or _DEFAULT_CONFIG

    def pair(self, fills: Iterable[Fill]) -> list[Position]:
        return pair_trades(fills, self.config)

    def is_moved_order(self, fill: Fill, primary_group: Sequence[Fill]) -> bool:
        return is_moved_order(fill, primary_group, self.config.tz)

    def day_of_month(self, fill: Fill) -> int:
        return day_of_month(fill, self.config.tz)
