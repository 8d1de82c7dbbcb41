"""Pytest fixtures: fill sequences for deterministic pairing tests."""

import pytest

from fill_helpers import make_fill, ms
from pairing_core.contracts import Fill


@pytest.fixture
def symbol() -> str:
    return "BTCUSDT"


@pytest.fixture
def simple_round_trip(symbol: str) -> list[Fill]:
    """Buy 1 @ 40000, sell 1 @ 41000, same day, no fees."""
    return [
        make_fill("1", "buy", "40000", "1", ms(2024, 12, 5, 9), symbol=symbol),
        make_fill("2", "sell", "41000", "1", ms(2024, 12, 5, 15), symbol=symbol),
    ]


@pytest.fixture
def cross_day_fills(symbol: str) -> list[Fill]:
    """Two buys on Dec 5 and Dec 6, one sell closing on Dec 7."""
    return [
        make_fill("1", "buy", "40000", "2", ms(2024, 12, 5, 9), symbol=symbol),
        make_fill("2", "buy", "39500", "1", ms(2024, 12, 6, 10), symbol=symbol),
        make_fill("3", "sell", "41000", "3", ms(2024, 12, 7, 15), symbol=symbol),
    ]


@pytest.fixture
def two_round_trips(symbol: str) -> list[Fill]:
    """Closed round trip on Dec 5 (+1000) and on Dec 6 (+2000)."""
    return [
        make_fill("1", "buy", "40000", "1", ms(2024, 12, 5, 9), symbol=symbol),
        make_fill("2", "sell", "41000", "1", ms(2024, 12, 5, 15), symbol=symbol),
        make_fill("3", "buy", "39000", "2", ms(2024, 12, 6, 10), symbol=symbol),
        make_fill("4", "sell", "40000", "2", ms(2024, 12, 6, 16), symbol=symbol),
    ]
