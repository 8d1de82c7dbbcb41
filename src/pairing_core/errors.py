"""Exceptions raised by pairing-core and the fill loaders."""


class PairingError(Exception):
    """Base class for trade pairing failures."""


class MixedSymbolError(PairingError):
    """Raised in strict mode when one pairing call receives several symbols."""

    def __init__(self, symbols: list[str]) -> None:
        self.symbols = symbols
        super().__init__(f"Fills span multiple symbols: {', '.join(symbols)}")


class FillParseError(PairingError):
    """Raised when an exchange record cannot be turned into a Fill."""
