"""
Exceptions raised at the boundaries of the clearing engine.
"""


class MarketDecodeError(ValueError):
    """Raised when a market batch or fee matrix cannot be decoded."""
