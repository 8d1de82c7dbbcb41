"""
Human-readable position and performance output for the terminal.

Every CLI command uses these formatters. Journal receives the same data.
"""

from __future__ import annotations

import math
from datetime import timezone, tzinfo
from typing import Sequence

from pairing_core.contracts import Fill, Position
from pairing_core.dates import day_of_month, fill_datetime, is_moved_order
from pairing_core.performance import EquityPoint, PerformanceSummary, PeriodPnl, SymbolPerformance


def _fmt(value: float | None, digits: int = 2) -> str:
    if value is None:
        return "-"
    return f"{value:,.{digits}f}"


def _fmt_signed(value: float | None, digits: int = 2, suffix: str = "") -> str:
    if value is None:
        return "-"
    return f"{value:+,.{digits}f}{suffix}"


def _fmt_fill(fill: Fill, group: Sequence[Fill], tz: tzinfo, show_moved: bool) -> str:
    ts = fill_datetime(fill.timestamp, tz).strftime("%Y-%m-%d %H:%M:%S")
    fee = f"  fee {fill.fee_amount} {fill.fee_currency or ''}".rstrip() if fill.has_fee else ""
    line = f"    {fill.side.value:4s} {fill.size} @ {fill.price}  {ts}  #{fill.trade_id}{fee}"
    if show_moved and is_moved_order(fill, group, tz):
        line += f"  [moved: day {day_of_month(fill, tz)}]"
    return line


def format_position(
    position: Position,
    index: int,
    *,
    tz: tzinfo = timezone.utc,
    show_moved: bool = False,
) -> str:
    """One position block: date range, legs, aggregates, pnl."""
    status = "CLOSED" if position.closed else "PENDING"
    lines = [
        f"  Position #{index}  {position.date_range}  [{status}]",
        f"    Buys  : {len(position.buys)}  size {_fmt(position.total_buy_size, 6)}  "
        f"cost {_fmt(position.total_buy_cost)}  avg {_fmt(position.avg_buy_price)}",
        f"    Sells : {len(position.sells)}  size {_fmt(position.total_sell_size, 6)}  "
        f"revenue {_fmt(position.total_sell_revenue)}  avg {_fmt(position.avg_sell_price)}",
        f"    PnL   : {_fmt_signed(position.pnl)} ({_fmt_signed(position.pnl_percent, suffix='%')})",
    ]
    # legs from other days than the closing fill are marked as moved
    primary = position.fills[::-1]
    for fill in (*position.buys, *position.sells):
        lines.append(_fmt_fill(fill, primary, tz, show_moved))
    return "\n".join(lines)


def format_positions(
    symbol: str,
    positions: Sequence[Position],
    *,
    tz: tzinfo = timezone.utc,
    show_moved: bool = False,
) -> str:
    """All positions for one symbol, newest first as the engine returns them."""
    closed = sum(1 for p in positions if p.closed)
    lines = [f"=== {symbol}: {len(positions)} positions ({closed} closed, {len(positions) - closed} pending) ==="]
    if not positions:
        lines.append("  No fills.")
    for i, p in enumerate(positions, 1):
        lines.append(format_position(p, i, tz=tz, show_moved=show_moved))
    return "\n".join(lines)


def format_summary(summary: PerformanceSummary) -> str:
    if math.isinf(summary.profit_factor):
        pf = "∞"
    else:
        pf = f"{summary.profit_factor:.2f}"
    lines = [
        "=== Performance ===",
        f"Closed       : {summary.closed_positions} (pending {summary.pending_positions})",
        f"Wins/Losses  : {summary.wins} / {summary.losses} (break-even {summary.breakeven})",
        f"Win rate     : {summary.win_rate:.1f}%",
        f"Total PnL    : {_fmt_signed(summary.total_pnl)}",
        f"Avg win      : {_fmt(summary.avg_win)}",
        f"Avg loss     : {_fmt(summary.avg_loss)}",
        f"Profit factor: {pf}",
        f"Best / worst : {_fmt_signed(summary.best_pnl)} / {_fmt_signed(summary.worst_pnl)}",
    ]
    return "\n".join(lines)


def format_period_table(rows: Sequence[PeriodPnl], period: str) -> str:
    lines = [f"--- {period.capitalize()} PnL ---"]
    if not rows:
        lines.append("  (none)")
    for r in rows:
        lines.append(f"  {r.label:12s} {_fmt_signed(r.pnl):>14s}  {r.trades:>3d} trades")
    return "\n".join(lines)


def format_symbol_performance(rows: Sequence[SymbolPerformance]) -> str:
    lines = ["--- By Symbol ---"]
    if not rows:
        lines.append("  (none)")
    for r in rows:
        lines.append(f"  {r.symbol:12s} {_fmt_signed(r.pnl):>14s}  {r.trades:>3d} trades  win {r.win_rate:5.1f}%")
    return "\n".join(lines)


def format_equity_curve(points: Sequence[EquityPoint]) -> str:
    """Running realized pnl after each closed position."""
    lines = ["--- Equity Curve ---"]
    if not points:
        lines.append("  (none)")
    for pt in points:
        lines.append(f"  {pt.label:12s} {_fmt_signed(pt.pnl):>14s}  {_fmt_signed(pt.cumulative):>14s}")
    return "\n".join(lines)
