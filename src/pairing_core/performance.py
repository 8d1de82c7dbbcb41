"""
Performance analytics over paired positions.

Only closed positions with a non-zero pnl count as trades here; pending
positions and break-even round trips are left out of win rate, averages,
and period totals. Positions are anchored on their opening fill.
"""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass
from datetime import timedelta, timezone, tzinfo
from typing import Iterable, Mapping, Sequence

from pairing_core.contracts import Position
from pairing_core.dates import fill_datetime, month_day_label

PERIODS = ("daily", "weekly", "monthly")


@dataclass(frozen=True)
class PerformanceSummary:
    """Aggregate results across a set of positions."""

    closed_positions: int
    pending_positions: int
    wins: int
    losses: int
    breakeven: int
    total_pnl: float
    gross_profit: float
    gross_loss: float
    win_rate: float
    avg_win: float
    avg_loss: float
    profit_factor: float
    best_pnl: float | None = None
    worst_pnl: float | None = None


@dataclass(frozen=True)
class EquityPoint:
    timestamp: int
    label: str
    pnl: float
    cumulative: float


@dataclass(frozen=True)
class PeriodPnl:
    label: str
    pnl: float
    trades: int


@dataclass(frozen=True)
class SymbolPerformance:
    symbol: str
    pnl: float
    trades: int
    win_rate: float


def _realized(positions: Iterable[Position]) -> list[Position]:
    """Closed positions with a non-zero pnl, oldest first."""
    done = [p for p in positions if p.closed and p.pnl is not None and p.pnl != 0]
    return sorted(done, key=lambda p: p.opened_at)


def summarize(positions: Sequence[Position]) -> PerformanceSummary:
    """Win/loss statistics and profit factor for a set of positions."""
    breakeven = sum(1 for p in positions if p.closed and p.pnl == 0)
    pending = sum(1 for p in positions if p.is_pending)
    pnls = [p.pnl for p in _realized(positions)]

    winners = [x for x in pnls if x > 0]
    losers = [x for x in pnls if x < 0]
    gross_profit = sum(winners)
    gross_loss = abs(sum(losers))

    decided = len(winners) + len(losers)
    win_rate = len(winners) / decided * 100 if decided else 0.0

    if gross_loss > 0:
        profit_factor = gross_profit / gross_loss
    elif gross_profit > 0:
        profit_factor = math.inf
    else:
        profit_factor = 0.0

    return PerformanceSummary(
        closed_positions=sum(1 for p in positions if p.closed),
        pending_positions=pending,
        wins=len(winners),
        losses=len(losers),
        breakeven=breakeven,
        total_pnl=sum(pnls),
        gross_profit=gross_profit,
        gross_loss=gross_loss,
        win_rate=win_rate,
        avg_win=gross_profit / len(winners) if winners else 0.0,
        avg_loss=gross_loss / len(losers) if losers else 0.0,
        profit_factor=profit_factor,
        best_pnl=max(pnls) if pnls else None,
        worst_pnl=min(pnls) if pnls else None,
    )


def equity_curve(positions: Iterable[Position], tz: tzinfo = timezone.utc) -> list[EquityPoint]:
    """Running realized pnl, one point per closed position."""
    points: list[EquityPoint] = []
    cumulative = 0.0
    for p in _realized(positions):
        cumulative += p.pnl
        points.append(
            EquityPoint(
                timestamp=p.opened_at,
                label=month_day_label(p.opened_at, tz),
                pnl=p.pnl,
                cumulative=cumulative,
            )
        )
    return points


def _period_key(timestamp_ms: int, period: str, tz: tzinfo):
    dt = fill_datetime(timestamp_ms, tz)
    if period == "daily":
        day = dt.date()
        return day, f"{day:%b} {day.day}"
    if period == "weekly":
        # weeks start on Sunday
        start = dt.date() - timedelta(days=(dt.weekday() + 1) % 7)
        return start, f"W {start:%b} {start.day}"
    month = dt.date().replace(day=1)
    return month, f"{month:%b %y}"


def pnl_by_period(
    positions: Iterable[Position],
    period: str = "daily",
    tz: tzinfo = timezone.utc,
) -> list[PeriodPnl]:
    """Realized pnl bucketed by day, week, or month, oldest bucket first."""
    if period not in PERIODS:
        raise ValueError(f"Unknown period '{period}'. Supported: {list(PERIODS)}")

    buckets: dict = {}
    for p in _realized(positions):
        key, label = _period_key(p.opened_at, period, tz)
        pnl, trades, _ = buckets.get(key, (0.0, 0, label))
        buckets[key] = (pnl + p.pnl, trades + 1, label)

    return [
        PeriodPnl(label=label, pnl=pnl, trades=trades)
        for _, (pnl, trades, label) in sorted(buckets.items())
    ]


def symbol_performance(
    positions_by_symbol: Mapping[str, Sequence[Position]],
    limit: int | None = 10,
) -> list[SymbolPerformance]:
    """Per-symbol totals, largest absolute pnl first."""
    stats: dict[str, list] = defaultdict(lambda: [0.0, 0, 0])
    for symbol, positions in positions_by_symbol.items():
        for p in _realized(positions):
            entry = stats[symbol]
            entry[0] += p.pnl
            if p.pnl > 0:
                entry[1] += 1
            else:
                entry[2] += 1

    rows = [
        SymbolPerformance(
            symbol=symbol,
            pnl=pnl,
            trades=wins + losses,
            win_rate=wins / (wins + losses) * 100,
        )
        for symbol, (pnl, wins, losses) in stats.items()
    ]
    rows.sort(key=lambda r: abs(r.pnl), reverse=True)
    return rows[:limit] if limit is not None else rows
