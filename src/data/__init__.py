"""
Data layer: parse exchange trade-history exports, persist fills.

Depends on pairing_core.contracts for Fill; no dependency from pairing_core back to data.
"""

from data.fill_loader import load_fills, parse_fills
from data.fill_store import FillStore

__all__ = [
    "FillStore",
    "load_fills",
    "parse_fills",
]
